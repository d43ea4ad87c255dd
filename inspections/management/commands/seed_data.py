# inspections/management/commands/seed_data.py
from django.contrib.auth.models import User
from django.core.management.base import BaseCommand

from inspections.models import ROLE_ADMIN, ROLE_INSPECTOR, ROLE_SUPERVISOR
from inspections.services.accounts import create_user
from inspections.services.scheduling import schedule_inspection

DEFAULT_PASSWORD = "password"

DEFAULT_USERS = [
    ("admin", ROLE_ADMIN),
    ("inspector1", ROLE_INSPECTOR),
    ("supervisor1", ROLE_SUPERVISOR),
    ("inspector2", ROLE_INSPECTOR),
]

SAMPLE_INSPECTIONS = [
    ("Sample Inspection for Turbine Blade", "inspector1"),
    ("FAI for Landing Gear Strut", "inspector2"),
]


class Command(BaseCommand):
    help = "Seed default users and sample inspections (only when no users exist)"

    def add_arguments(self, parser):
        parser.add_argument("--password", default=DEFAULT_PASSWORD, help="Password for the seeded users")

    def handle(self, *args, **options):
        if User.objects.exists():
            self.stdout.write(self.style.WARNING("Users already exist; nothing seeded."))
            return

        created = {}
        for username, role in DEFAULT_USERS:
            created[username] = create_user(username, options["password"], role)

        for title, inspector in SAMPLE_INSPECTIONS:
            schedule_inspection(title, created[inspector])

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {len(DEFAULT_USERS)} users and {len(SAMPLE_INSPECTIONS)} inspections."
        ))
