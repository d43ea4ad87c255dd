# inspections/services/signoff.py
"""
Sign-off sheet and final disposition.

Flow:
  1) every checklist parameter measured (none Pending) -> roles may sign
  2) all participant roles signed -> the report may be finalized
  3) final status depends on the checklist:
       no Fail       -> Accepted
       at least 1 Fail -> Rejected / Rework / Approved with Deviation
Finalization is terminal.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from inspections.models import (
    ALL_ROLES,
    FINAL_ACCEPTED,
    FINAL_DEVIATION,
    FINAL_REJECTED,
    FINAL_REWORK,
    FINAL_STATUS_CHOICES,
    InspectionReport,
    Notification,
    PARTICIPANT_ROLES,
    STATUS_FAIL,
    STATUS_PASS,
    STATUS_PENDING,
    Signature,
)
from inspections.services.notifications import inspection_link, notify

logger = logging.getLogger(__name__)

FAIL_DISPOSITIONS = [FINAL_REJECTED, FINAL_REWORK, FINAL_DEVIATION]


def checklist_summary(parameters):
    statuses = [p.status for p in parameters]
    total = len(statuses)
    pending = statuses.count(STATUS_PENDING)
    return {
        "total": total,
        "checked": total - pending,
        "passed": statuses.count(STATUS_PASS),
        "failed": statuses.count(STATUS_FAIL),
        "pending": pending,
    }


def ensure_open(report):
    if report.is_complete:
        raise ValidationError(f"Inspection {report.id} is already complete.", code="inspection_complete")


def signature_sheet(report):
    """role -> Signature for every role in the fixed role set."""
    existing = {s.role: s for s in report.signatures.all()}
    return {role: existing.get(role) or Signature(report=report, role=role) for role in ALL_ROLES}


def missing_signatures(report):
    signed = set(report.signatures.filter(signed=True).values_list("role", flat=True))
    return [role for role in PARTICIPANT_ROLES if role not in signed]


def can_finalize(report):
    return not missing_signatures(report)


def pending_parameters(report):
    return report.parameters.filter(status=STATUS_PENDING).count()


def allowed_final_statuses(report):
    if report.is_complete or not can_finalize(report) or pending_parameters(report):
        return []
    if report.parameters.filter(status=STATUS_FAIL).exists():
        return list(FAIL_DISPOSITIONS)
    return [FINAL_ACCEPTED]


def sign_off(report, role, comment=""):
    ensure_open(report)

    if role not in ALL_ROLES:
        raise ValidationError(f"Unknown role '{role}'.", code="invalid_role")

    summary = checklist_summary(report.parameters.all())
    if summary["pending"]:
        raise ValidationError(
            f"{summary['pending']} parameter(s) still pending. Complete the checklist before signing.",
            code="checklist_incomplete",
        )

    with transaction.atomic():
        signature, _ = Signature.objects.select_for_update().get_or_create(report=report, role=role)
        if signature.signed:
            raise ValidationError(f"{role} has already signed.", code="already_signed")

        signature.signed = True
        signature.comment = (comment or "").strip()
        signature.signed_at = timezone.now()
        signature.save(update_fields=["signed", "comment", "signed_at"])

    logger.info("Inspection %s signed off by %s", report.id, role)
    notify(
        report.inspector,
        f'{role} has signed off on inspection "{report.title}".',
        Notification.TYPE_INFO,
        inspection_link(report),
    )
    return signature


def finalize(report, final_status):
    if final_status not in {c for c, _ in FINAL_STATUS_CHOICES}:
        raise ValidationError(f"Unknown final status '{final_status}'.", code="invalid_status")

    with transaction.atomic():
        # lock the row so two finalize calls cannot both see an open report
        InspectionReport.objects.select_for_update().only("pk").get(pk=report.pk)
        report.refresh_from_db(fields=["is_complete", "final_status", "completed_at"])
        ensure_open(report)

        pending = pending_parameters(report)
        if pending:
            raise ValidationError(
                f"{pending} parameter(s) still pending. Complete the checklist before finalizing.",
                code="checklist_incomplete",
            )

        missing = missing_signatures(report)
        if missing:
            raise ValidationError(
                f"Waiting for sign-off from: {', '.join(missing)}.",
                code="signatures_missing",
            )

        allowed = allowed_final_statuses(report)
        if final_status not in allowed:
            raise ValidationError(
                f"'{final_status}' is not allowed for this result. Allowed: {', '.join(allowed)}.",
                code="status_not_allowed",
            )

        report.final_status = final_status
        report.is_complete = True
        report.completed_at = timezone.now()
        report.save(update_fields=["final_status", "is_complete", "completed_at"])

    logger.info("Inspection %s completed with status %s", report.id, final_status)
    notify(
        report.inspector,
        f'Inspection "{report.title}" is complete with status: {final_status}.',
        Notification.TYPE_SUCCESS,
        inspection_link(report),
    )
    return report
