import pytest

from inspections.models import FINAL_ACCEPTED, FINAL_REJECTED, Notification, ROLE_INSPECTOR
from inspections.services import notifications, signoff
from inspections.services.accounts import create_user
from inspections.services.metrics import inspection_overview, reports_for
from inspections.services.scheduling import schedule_inspection

pytestmark = pytest.mark.django_db


def _complete(report, status, measure, sign_all, failing=()):
    measure(report, failing=failing)
    sign_all(report)
    signoff.finalize(report, status)


def test_overview_counts(report, inspector, measure, sign_all):
    accepted = report
    rejected = schedule_inspection("Strut FAI", inspector)
    schedule_inspection("Bracket FAI", inspector)

    _complete(accepted, FINAL_ACCEPTED, measure, sign_all)
    _complete(rejected, FINAL_REJECTED, measure, sign_all, failing={2})

    assert inspection_overview() == {
        "total": 3, "completed": 2, "approved": 1, "rejected": 1, "open": 1,
    }


def test_inspectors_only_see_their_reports(report, inspector, admin_user):
    other = create_user("inspector2", "password", ROLE_INSPECTOR)
    schedule_inspection("Strut FAI", other)

    assert [r.id for r in reports_for(inspector)] == [report.id]
    assert reports_for(admin_user).count() == 2
    assert inspection_overview(reports_for(other))["total"] == 1


def test_mark_read_and_mark_all(inspector, report):
    notifications.notify(inspector, "second", Notification.TYPE_WARNING)
    notes = list(Notification.objects.filter(user=inspector))
    assert notes[0].message == "second"
    assert notifications.unread_count(inspector) == 2

    assert notifications.mark_read(inspector, notes[0].id)
    assert notifications.unread_count(inspector) == 1

    assert notifications.mark_all_read(inspector) == 1
    assert notifications.unread_count(inspector) == 0


def test_cannot_mark_someone_elses_notification(inspector, admin_user, report):
    note = Notification.objects.filter(user=admin_user).first()
    assert not notifications.mark_read(inspector, note.id)
    note.refresh_from_db()
    assert not note.read
