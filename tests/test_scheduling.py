import re
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.core.management import call_command
from django.contrib.auth.models import User

from inspections.models import (
    ALL_ROLES,
    InspectionReport,
    Notification,
    ROLE_CLIENT,
    ROLE_INSPECTOR,
    STATUS_PENDING,
    TOL_BILATERAL,
    TOL_PLUS,
)
from inspections.services import checklist
from inspections.services.accounts import create_user, role_for
from inspections.services.scheduling import new_report_id, schedule_inspection

pytestmark = pytest.mark.django_db


def test_report_id_format():
    assert re.fullmatch(r"INSP-\d{4}-[A-Z0-9]{9}", new_report_id())


def test_scheduled_report_starts_from_default_checklist(report, inspector):
    assert report.inspector == inspector
    assert report.product_name == "Turbine Blade"
    assert report.part_number == "TB-789-A"
    assert report.uom == "mm"

    params = list(report.parameters.all())
    assert [p.position for p in params] == list(range(1, 11))
    assert all(p.status == STATUS_PENDING for p in params)

    length = params[0]
    assert length.description == "Overall Length"
    assert length.utl == pytest.approx(150.05)
    assert length.ltl == pytest.approx(149.95)

    perpendicularity = params[9]
    assert perpendicularity.tolerance_type == TOL_PLUS
    assert perpendicularity.gdt_symbol == "⟂"
    assert (perpendicularity.utl, perpendicularity.ltl) == (pytest.approx(0.03), 0)


def test_scheduled_report_has_open_signature_per_role(report):
    assert sorted(report.signatures.values_list("role", flat=True)) == sorted(ALL_ROLES)
    assert not report.signatures.filter(signed=True).exists()


def test_scheduling_notifies_inspector_and_admin(report, inspector, admin_user):
    note = Notification.objects.get(user=inspector)
    assert "Sample Inspection for Turbine Blade" in note.message
    assert note.link.endswith(f"/api/inspections/{report.id}/")
    assert Notification.objects.filter(user=admin_user, message__contains="inspector1").exists()


def test_only_inspectors_can_be_scheduled(db):
    client_user = create_user("client1", "password", ROLE_CLIENT)
    with pytest.raises(ValidationError) as exc:
        schedule_inspection("Strut FAI", client_user)
    assert exc.value.code == "invalid_role"
    assert not InspectionReport.objects.exists()


def test_blank_title_is_refused(inspector):
    with pytest.raises(ValidationError):
        schedule_inspection("   ", inspector)


def test_add_parameter_takes_next_position(report):
    report.parameters.filter(position=4).delete()
    param = checklist.add_parameter(report)

    assert param.position == 11
    assert param.description == "New Parameter"
    assert param.tolerance_type == TOL_BILATERAL
    assert (param.utl, param.ltl) == (0, 0)
    assert param.status == STATUS_PENDING


def test_add_parameter_on_empty_checklist(report):
    report.parameters.all().delete()
    assert checklist.add_parameter(report).position == 1


def test_remove_parameter(report):
    assert checklist.remove_parameter(report, 2)
    assert not checklist.remove_parameter(report, 2)
    assert report.parameters.count() == 9


def test_update_parameter_persists_derived_fields(report):
    param = report.parameters.get(position=1)
    checklist.update_parameter(param, {"tolerance_value": 0.1, "actual": 150.08})

    param.refresh_from_db()
    assert param.utl == pytest.approx(150.1)
    assert param.status == "Pass"
    assert param.deviation == pytest.approx(0.08)


def test_update_product_details(report):
    checklist.update_product_details(report, {"revision": "C", "title": "ignored"})
    report.refresh_from_db()
    assert report.revision == "C"
    assert report.title == "Sample Inspection for Turbine Blade"


def test_create_user_assigns_role_and_notifies(admin_user):
    user = create_user("supervisor1", "password", "Supervisor", created_by=admin_user)
    assert role_for(user) == "Supervisor"
    assert user.check_password("password")
    assert not user.is_staff
    assert Notification.objects.filter(user=admin_user, message__contains='"supervisor1"').exists()


def test_duplicate_username_is_refused(inspector):
    with pytest.raises(ValidationError) as exc:
        create_user("inspector1", "other", ROLE_INSPECTOR)
    assert exc.value.code == "duplicate_username"


def test_seed_data_populates_empty_database(db):
    call_command("seed_data")

    assert set(User.objects.values_list("username", flat=True)) == {"admin", "inspector1", "supervisor1", "inspector2"}
    assert User.objects.get(username="admin").is_superuser
    assert InspectionReport.objects.count() == 2
    assert InspectionReport.objects.filter(inspector__username="inspector2", title="FAI for Landing Gear Strut").exists()

    call_command("seed_data")
    assert InspectionReport.objects.count() == 2


@pytest.mark.parametrize("edge", ["utl", "ltl"])
def test_default_rows_pass_exactly_on_their_limits(report, edge):
    for row, param in zip(checklist.DEFAULT_PARAMETERS, report.parameters.all()):
        nominal, value = Decimal(str(row["nominal"])), Decimal(str(row["tolerance_value"]))
        upper = nominal + value
        lower = nominal if row["tolerance_type"] == TOL_PLUS else nominal - value
        actual = float(upper if edge == "utl" else lower)

        checklist.update_parameter(param, {"actual": actual})
        param.refresh_from_db()
        assert param.status == "Pass", f"{param.description} at {edge}={actual}"
