import logging
import string

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone
from django.utils.crypto import get_random_string

from inspections.models import (
    ALL_ROLES,
    InspectionParameter,
    InspectionReport,
    ROLE_INSPECTOR,
    Signature,
)
from inspections.services.accounts import role_for
from inspections.services.checklist import DEFAULT_PARAMETERS, DEFAULT_PRODUCT, build_parameter
from inspections.services.notifications import inspection_link, notify

logger = logging.getLogger(__name__)

REPORT_ID_CHARS = string.ascii_uppercase + string.digits


def new_report_id(now=None):
    year = (now or timezone.now()).year
    return f"INSP-{year}-{get_random_string(9, allowed_chars=REPORT_ID_CHARS)}"


@transaction.atomic
def schedule_inspection(title, inspector, scheduled_by=None):
    """
    Create a report for an inspector with the default product details,
    the default checklist and an open signature slot per role.
    """
    title = (title or "").strip()
    if not title:
        raise ValidationError("Title is required.", code="required")
    if role_for(inspector) != ROLE_INSPECTOR:
        raise ValidationError(f"{inspector.username} is not an inspector.", code="invalid_role")

    report_id = new_report_id()
    while InspectionReport.objects.filter(id=report_id).exists():
        report_id = new_report_id()

    report = InspectionReport.objects.create(id=report_id, title=title, inspector=inspector, **DEFAULT_PRODUCT)

    InspectionParameter.objects.bulk_create([
        build_parameter(report, position, **row)
        for position, row in enumerate(DEFAULT_PARAMETERS, start=1)
    ])
    Signature.objects.bulk_create([Signature(report=report, role=role) for role in ALL_ROLES])

    logger.info("Scheduled %s for %s", report.id, inspector.username)

    link = inspection_link(report)
    notify(inspector, f'You have been assigned a new inspection: "{title}".', link=link)
    if scheduled_by is not None:
        notify(scheduled_by, f"New inspection assigned to {inspector.username}.")
    return report
