import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


ROLE_CHOICES = [
    ("Admin", "Admin"),
    ("Inspector", "Inspector"),
    ("Supervisor", "Supervisor"),
    ("Client", "Client"),
    ("End User", "End User"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="UserProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(choices=ROLE_CHOICES, default="Inspector", max_length=16)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="profile",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="InspectionReport",
            fields=[
                ("id", models.CharField(max_length=32, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=200)),
                ("product_name", models.CharField(blank=True, default="", max_length=128)),
                ("part_number", models.CharField(blank=True, default="", max_length=64)),
                ("drawing_number", models.CharField(blank=True, default="", max_length=64)),
                ("revision", models.CharField(blank=True, default="", max_length=16)),
                ("uom", models.CharField(blank=True, default="mm", max_length=16)),
                ("is_complete", models.BooleanField(default=False)),
                (
                    "final_status",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("Accepted", "Accepted"),
                            ("Rejected", "Rejected"),
                            ("Rework", "Rework"),
                            ("Approved with Deviation", "Approved with Deviation"),
                        ],
                        max_length=32,
                        null=True,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "inspector",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="inspections",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["-created_at"]},
        ),
        migrations.CreateModel(
            name="InspectionParameter",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("position", models.PositiveIntegerField()),
                ("description", models.CharField(max_length=200)),
                ("nominal", models.FloatField(default=0)),
                (
                    "tolerance_type",
                    models.CharField(choices=[("+/-", "+/-"), ("+", "+"), ("-", "-")], default="+/-", max_length=3),
                ),
                ("tolerance_value", models.FloatField(default=0)),
                ("utl", models.FloatField(default=0)),
                ("ltl", models.FloatField(default=0)),
                ("actual", models.FloatField(blank=True, null=True)),
                ("deviation", models.FloatField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("Pending", "Pending"), ("Pass", "Pass"), ("Fail", "Fail")],
                        default="Pending",
                        max_length=8,
                    ),
                ),
                ("gdt_symbol", models.CharField(blank=True, default="", max_length=16)),
                ("comment", models.TextField(blank=True, default="")),
                (
                    "report",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="parameters",
                        to="inspections.inspectionreport",
                    ),
                ),
            ],
            options={"ordering": ["position"]},
        ),
        migrations.AddConstraint(
            model_name="inspectionparameter",
            constraint=models.UniqueConstraint(fields=("report", "position"), name="unique_parameter_position"),
        ),
        migrations.CreateModel(
            name="Signature",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("role", models.CharField(choices=ROLE_CHOICES, max_length=16)),
                ("signed", models.BooleanField(default=False)),
                ("comment", models.TextField(blank=True, default="")),
                ("signed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "report",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="signatures",
                        to="inspections.inspectionreport",
                    ),
                ),
            ],
        ),
        migrations.AddConstraint(
            model_name="signature",
            constraint=models.UniqueConstraint(fields=("report", "role"), name="unique_signature_role"),
        ),
        migrations.CreateModel(
            name="Evidence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("image", models.ImageField(upload_to="evidence/")),
                ("name", models.CharField(blank=True, default="", max_length=200)),
                ("content_type", models.CharField(blank=True, default="", max_length=64)),
                ("uploaded_at", models.DateTimeField(auto_now_add=True)),
                (
                    "parameter",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="evidence",
                        to="inspections.inspectionparameter",
                    ),
                ),
                (
                    "report",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="evidence",
                        to="inspections.inspectionreport",
                    ),
                ),
            ],
            options={"ordering": ["uploaded_at", "id"]},
        ),
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("message", models.CharField(max_length=255)),
                (
                    "type",
                    models.CharField(
                        choices=[("info", "info"), ("success", "success"), ("warning", "warning")],
                        default="info",
                        max_length=8,
                    ),
                ),
                ("link", models.CharField(blank=True, default="", max_length=200)),
                ("read", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["-created_at", "-id"]},
        ),
        migrations.CreateModel(
            name="Task",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("text", models.CharField(max_length=255)),
                ("completed", models.BooleanField(default=False)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="tasks",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={"ordering": ["id"]},
        ),
        migrations.CreateModel(
            name="ChatMessage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("sender_role", models.CharField(choices=ROLE_CHOICES, max_length=16)),
                ("message", models.TextField()),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
                (
                    "report",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="chat_messages",
                        to="inspections.inspectionreport",
                    ),
                ),
            ],
            options={"ordering": ["timestamp", "id"]},
        ),
    ]
