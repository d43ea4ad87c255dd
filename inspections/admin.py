from django.contrib import admin

from .models import (
    ChatMessage,
    Evidence,
    InspectionParameter,
    InspectionReport,
    Notification,
    Signature,
    Task,
    UserProfile,
)
from .services.tolerance import refresh_derived


# ----------------------------
# PEOPLE
# ----------------------------

@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "role")
    list_filter = ("role",)
    search_fields = ("user__username", "user__email")
    ordering = ("user__username",)


# ----------------------------
# INSPECTIONS
# ----------------------------

class InspectionParameterInline(admin.TabularInline):
    model = InspectionParameter
    extra = 0
    fields = ("position", "description", "nominal", "tolerance_type", "tolerance_value", "utl", "ltl", "actual", "deviation", "status")
    readonly_fields = ("utl", "ltl", "deviation", "status")


class SignatureInline(admin.TabularInline):
    model = Signature
    extra = 0
    fields = ("role", "signed", "comment", "signed_at")
    readonly_fields = ("signed", "signed_at")


@admin.register(InspectionReport)
class InspectionReportAdmin(admin.ModelAdmin):
    inlines = [InspectionParameterInline, SignatureInline]

    list_display = ("id", "title", "inspector", "product_name", "part_number", "is_complete", "final_status", "created_at")
    list_filter = ("is_complete", "final_status", "inspector")
    search_fields = ("id", "title", "product_name", "part_number", "drawing_number", "inspector__username")
    date_hierarchy = "created_at"
    ordering = ("-created_at",)
    readonly_fields = ("created_at", "completed_at")

    def save_formset(self, request, form, formset, change):
        if formset.model is not InspectionParameter:
            return super().save_formset(request, form, formset, change)
        for param in formset.save(commit=False):
            refresh_derived(param)
            param.save()
        for obj in formset.deleted_objects:
            obj.delete()


@admin.register(InspectionParameter)
class InspectionParameterAdmin(admin.ModelAdmin):
    list_display = ("report", "position", "description", "nominal", "ltl", "utl", "actual", "status")
    list_filter = ("status", "tolerance_type")
    search_fields = ("report__id", "report__title", "description")
    ordering = ("report", "position")
    readonly_fields = ("utl", "ltl", "deviation", "status")

    def save_model(self, request, obj, form, change):
        # admin edits go through the same limit/status rules as the API
        refresh_derived(obj)
        super().save_model(request, obj, form, change)


@admin.register(Evidence)
class EvidenceAdmin(admin.ModelAdmin):
    list_display = ("id", "report", "parameter", "name", "content_type", "uploaded_at")
    search_fields = ("report__id", "name")
    date_hierarchy = "uploaded_at"
    ordering = ("-uploaded_at",)


# ----------------------------
# COLLABORATION
# ----------------------------

@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "type", "message", "read", "created_at")
    list_filter = ("type", "read")
    search_fields = ("message", "user__username")
    date_hierarchy = "created_at"
    ordering = ("-created_at",)


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "text", "completed")
    list_filter = ("completed",)
    search_fields = ("text", "user__username")


@admin.register(ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    list_display = ("id", "report", "sender_role", "message", "timestamp")
    list_filter = ("sender_role",)
    search_fields = ("report__id", "message")
    ordering = ("-timestamp",)
