from inspections.models import (
    FINAL_ACCEPTED,
    FINAL_REJECTED,
    InspectionReport,
    ROLE_ADMIN,
)
from inspections.services.accounts import role_for


def reports_for(user):
    """Admins see every report; inspectors see the ones scheduled for them."""
    qs = InspectionReport.objects.select_related("inspector")
    if role_for(user) == ROLE_ADMIN:
        return qs
    return qs.filter(inspector=user)


def inspection_overview(reports=None):
    """Dashboard counts: total, completed, approved, rejected, open."""
    qs = reports if reports is not None else InspectionReport.objects.all()
    total = qs.count()
    completed = qs.filter(is_complete=True).count()
    approved = qs.filter(final_status=FINAL_ACCEPTED).count()
    rejected = qs.filter(final_status=FINAL_REJECTED).count()
    return {
        "total": total,
        "completed": completed,
        "approved": approved,
        "rejected": rejected,
        "open": total - completed,
    }
