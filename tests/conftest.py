import io

import pytest
from PIL import Image

from inspections.models import PARTICIPANT_ROLES, ROLE_ADMIN, ROLE_INSPECTOR
from inspections.services import checklist, signoff
from inspections.services.accounts import create_user
from inspections.services.scheduling import schedule_inspection


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path):
    """Keep uploaded evidence out of the project tree."""
    settings.MEDIA_ROOT = tmp_path / "media"


@pytest.fixture
def admin_user(db):
    return create_user("admin", "password", ROLE_ADMIN)


@pytest.fixture
def inspector(db):
    return create_user("inspector1", "password", ROLE_INSPECTOR)


@pytest.fixture
def report(inspector, admin_user):
    return schedule_inspection("Sample Inspection for Turbine Blade", inspector, scheduled_by=admin_user)


@pytest.fixture
def measure():
    """
    Record an actual for every parameter of a report: on nominal for most,
    just past the upper limit for the positions listed in `failing`.
    """
    def _measure(report, failing=()):
        for param in report.parameters.all():
            actual = param.utl + 1 if param.position in failing else param.nominal
            checklist.update_parameter(param, {"actual": actual})
    return _measure


@pytest.fixture
def sign_all():
    def _sign_all(report, roles=PARTICIPANT_ROLES):
        for role in roles:
            signoff.sign_off(report, role, f"ok from {role}")
    return _sign_all


@pytest.fixture
def png_upload():
    from django.core.files.uploadedfile import SimpleUploadedFile

    def _png(name="photo.png"):
        buf = io.BytesIO()
        Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buf, format="PNG")
        return SimpleUploadedFile(name, buf.getvalue(), content_type="image/png")
    return _png
