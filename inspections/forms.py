from django import forms

from .models import (
    Evidence,
    FINAL_STATUS_CHOICES,
    InspectionReport,
    PARTICIPANT_ROLES,
    ROLE_INSPECTOR,
    TOLERANCE_TYPE_CHOICES,
    Task,
)
from .services.accounts import inspectors
from .services.checklist import PRODUCT_FIELDS


class UserCreateForm(forms.Form):
    username = forms.CharField(max_length=150)
    password = forms.CharField(max_length=128)
    role = forms.ChoiceField(choices=[(r, r) for r in PARTICIPANT_ROLES])


class ScheduleInspectionForm(forms.Form):
    title = forms.CharField(max_length=200)
    inspector = forms.ModelChoiceField(queryset=None)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["inspector"].queryset = inspectors()


# the Inspector works from a login, never from the shared link
JOIN_ROLES = [r for r in PARTICIPANT_ROLES if r != ROLE_INSPECTOR]


class JoinForm(forms.Form):
    role = forms.ChoiceField(choices=[(r, r) for r in JOIN_ROLES])


class ProductDetailsForm(forms.ModelForm):
    class Meta:
        model = InspectionReport
        fields = list(PRODUCT_FIELDS)


class ParameterUpdateForm(forms.Form):
    """
    Partial update of one checklist row: only submitted keys are applied.
    Sending an empty `actual` clears the measurement.
    """
    description = forms.CharField(max_length=200, required=False)
    nominal = forms.FloatField(required=False)
    tolerance_type = forms.ChoiceField(choices=TOLERANCE_TYPE_CHOICES, required=False)
    tolerance_value = forms.FloatField(required=False)
    actual = forms.FloatField(required=False)
    gdt_symbol = forms.CharField(max_length=16, required=False)
    comment = forms.CharField(required=False)

    NOT_CLEARABLE = ("description", "nominal", "tolerance_type", "tolerance_value")

    def clean(self):
        cleaned = super().clean()
        for name in self.NOT_CLEARABLE:
            if name in self.data and cleaned.get(name) in (None, ""):
                self.add_error(name, "This field cannot be cleared.")
        return cleaned

    def changes(self):
        return {name: self.cleaned_data[name] for name in self.fields if name in self.data}


class FinalizeForm(forms.Form):
    final_status = forms.ChoiceField(choices=FINAL_STATUS_CHOICES)


class EvidenceForm(forms.ModelForm):
    class Meta:
        model = Evidence
        fields = ["image"]


class TaskForm(forms.ModelForm):
    class Meta:
        model = Task
        fields = ["text", "completed"]
