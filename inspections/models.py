from django.conf import settings
from django.db import models


# -----------------------------
# Roles
# -----------------------------
ROLE_ADMIN = "Admin"
ROLE_INSPECTOR = "Inspector"
ROLE_SUPERVISOR = "Supervisor"
ROLE_CLIENT = "Client"
ROLE_END_USER = "End User"

ALL_ROLES = [ROLE_ADMIN, ROLE_INSPECTOR, ROLE_SUPERVISOR, ROLE_CLIENT, ROLE_END_USER]

# Roles that take part in an inspection session. Every one of them must sign
# before the inspection can be finalized.
PARTICIPANT_ROLES = [ROLE_INSPECTOR, ROLE_SUPERVISOR, ROLE_CLIENT, ROLE_END_USER]

ROLE_CHOICES = [(r, r) for r in ALL_ROLES]


# -----------------------------
# Parameter / disposition vocab
# -----------------------------
TOL_BILATERAL = "+/-"
TOL_PLUS = "+"
TOL_MINUS = "-"

TOLERANCE_TYPE_CHOICES = [
    (TOL_BILATERAL, "+/-"),
    (TOL_PLUS, "+"),
    (TOL_MINUS, "-"),
]

STATUS_PENDING = "Pending"
STATUS_PASS = "Pass"
STATUS_FAIL = "Fail"

PARAMETER_STATUS_CHOICES = [
    (STATUS_PENDING, "Pending"),
    (STATUS_PASS, "Pass"),
    (STATUS_FAIL, "Fail"),
]

FINAL_ACCEPTED = "Accepted"
FINAL_REJECTED = "Rejected"
FINAL_REWORK = "Rework"
FINAL_DEVIATION = "Approved with Deviation"

FINAL_STATUS_CHOICES = [
    (FINAL_ACCEPTED, "Accepted"),
    (FINAL_REJECTED, "Rejected"),
    (FINAL_REWORK, "Rework"),
    (FINAL_DEVIATION, "Approved with Deviation"),
]


class UserProfile(models.Model):
    """
    Portal role for a Django auth user.
    Admins and Inspectors log in; other roles usually join through a shared link.
    """
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="profile")
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=ROLE_INSPECTOR)

    def __str__(self):
        return f"{self.user.username} ({self.role})"


# -----------------------------
# Inspection reports
# -----------------------------
class InspectionReport(models.Model):
    """
    One scheduled inspection: product details, the parameter checklist,
    the sign-off sheet and the final disposition.
    """
    id = models.CharField(max_length=32, primary_key=True)  # INSP-2024-XXXXXXXXX
    title = models.CharField(max_length=200)

    product_name = models.CharField(max_length=128, blank=True, default="")
    part_number = models.CharField(max_length=64, blank=True, default="")
    drawing_number = models.CharField(max_length=64, blank=True, default="")
    revision = models.CharField(max_length=16, blank=True, default="")
    uom = models.CharField(max_length=16, blank=True, default="mm")

    inspector = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name="inspections")

    is_complete = models.BooleanField(default=False)
    final_status = models.CharField(max_length=32, choices=FINAL_STATUS_CHOICES, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.id} • {self.title}"


class InspectionParameter(models.Model):
    """
    A checklist row measured against nominal + tolerance.
    utl/ltl, deviation and status are derived (see services.tolerance).
    """
    report = models.ForeignKey(InspectionReport, on_delete=models.CASCADE, related_name="parameters")
    position = models.PositiveIntegerField()

    description = models.CharField(max_length=200)
    nominal = models.FloatField(default=0)
    tolerance_type = models.CharField(max_length=3, choices=TOLERANCE_TYPE_CHOICES, default=TOL_BILATERAL)
    tolerance_value = models.FloatField(default=0)

    utl = models.FloatField(default=0)
    ltl = models.FloatField(default=0)

    actual = models.FloatField(blank=True, null=True)
    deviation = models.FloatField(blank=True, null=True)
    status = models.CharField(max_length=8, choices=PARAMETER_STATUS_CHOICES, default=STATUS_PENDING)

    gdt_symbol = models.CharField(max_length=16, blank=True, default="")
    comment = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(fields=["report", "position"], name="unique_parameter_position"),
        ]

    def __str__(self):
        return f"{self.report_id} #{self.position} {self.description}"


class Signature(models.Model):
    report = models.ForeignKey(InspectionReport, on_delete=models.CASCADE, related_name="signatures")
    role = models.CharField(max_length=16, choices=ROLE_CHOICES)

    signed = models.BooleanField(default=False)
    comment = models.TextField(blank=True, default="")
    signed_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["report", "role"], name="unique_signature_role"),
        ]

    def __str__(self):
        return f"{self.report_id} {self.role}: {'signed' if self.signed else 'open'}"


class Evidence(models.Model):
    """
    Photo evidence, either for the whole report or for one parameter.
    """
    report = models.ForeignKey(InspectionReport, on_delete=models.CASCADE, related_name="evidence")
    parameter = models.ForeignKey(
        InspectionParameter, on_delete=models.CASCADE, null=True, blank=True, related_name="evidence"
    )

    image = models.ImageField(upload_to="evidence/")
    name = models.CharField(max_length=200, blank=True, default="")
    content_type = models.CharField(max_length=64, blank=True, default="")

    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["uploaded_at", "id"]


# -----------------------------
# Collaboration
# -----------------------------
class Notification(models.Model):
    TYPE_INFO = "info"
    TYPE_SUCCESS = "success"
    TYPE_WARNING = "warning"

    TYPE_CHOICES = [
        (TYPE_INFO, "info"),
        (TYPE_SUCCESS, "success"),
        (TYPE_WARNING, "warning"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="notifications")
    message = models.CharField(max_length=255)
    type = models.CharField(max_length=8, choices=TYPE_CHOICES, default=TYPE_INFO)
    link = models.CharField(max_length=200, blank=True, default="")
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.user} • {self.message}"


class Task(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="tasks")
    text = models.CharField(max_length=255)
    completed = models.BooleanField(default=False)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.text


class ChatMessage(models.Model):
    report = models.ForeignKey(InspectionReport, on_delete=models.CASCADE, related_name="chat_messages")
    sender_role = models.CharField(max_length=16, choices=ROLE_CHOICES)
    message = models.TextField()
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["timestamp", "id"]
