from django.urls import path
from . import views

urlpatterns = [
    # ----------------------------
    # Session
    # ----------------------------
    path("api/session/login/", views.session_login, name="session-login"),
    path("api/session/logout/", views.session_logout, name="session-logout"),

    # ----------------------------
    # Admin + dashboards
    # ----------------------------
    path("api/users/", views.users, name="users"),
    path("api/dashboard/", views.dashboard, name="dashboard"),
    path("api/gdt-symbols/", views.gdt_symbols, name="gdt-symbols"),
    path("api/inspections/", views.inspections_list, name="inspections-list"),
    path("api/inspections/schedule/", views.schedule, name="inspections-schedule"),

    # ----------------------------
    # Inspection room
    # ----------------------------
    path("api/inspections/<str:inspection_id>/", views.inspection_detail, name="inspection-detail"),
    path("api/inspections/<str:inspection_id>/join/", views.join_inspection, name="inspection-join"),
    path("api/inspections/<str:inspection_id>/product/", views.product_details, name="inspection-product"),
    path("api/inspections/<str:inspection_id>/parameters/", views.add_parameter, name="parameter-add"),
    path("api/inspections/<str:inspection_id>/parameters/import/", views.import_parameters, name="parameter-import"),
    path("api/inspections/<str:inspection_id>/parameters/<int:position>/", views.update_parameter, name="parameter-update"),
    path("api/inspections/<str:inspection_id>/parameters/<int:position>/delete/", views.delete_parameter, name="parameter-delete"),
    path("api/inspections/<str:inspection_id>/parameters/<int:position>/evidence/", views.parameter_evidence, name="parameter-evidence"),
    path(
        "api/inspections/<str:inspection_id>/parameters/<int:position>/evidence/<int:evidence_id>/delete/",
        views.delete_parameter_evidence,
        name="parameter-evidence-delete",
    ),
    path("api/inspections/<str:inspection_id>/evidence/", views.report_evidence, name="inspection-evidence"),
    path("api/inspections/<str:inspection_id>/sign-off/", views.sign_off, name="inspection-sign-off"),
    path("api/inspections/<str:inspection_id>/finalize/", views.finalize, name="inspection-finalize"),
    path("api/inspections/<str:inspection_id>/chat/", views.chat, name="inspection-chat"),

    # ----------------------------
    # Notifications + tasks
    # ----------------------------
    path("api/notifications/", views.notifications_list, name="notifications"),
    path("api/notifications/read-all/", views.notifications_read_all, name="notifications-read-all"),
    path("api/notifications/<int:notification_id>/read/", views.notification_read, name="notification-read"),
    path("api/tasks/", views.tasks, name="tasks"),
    path("api/tasks/<int:task_id>/", views.task_update, name="task-update"),
    path("api/tasks/<int:task_id>/delete/", views.task_delete, name="task-delete"),
]
