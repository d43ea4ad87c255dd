import logging

from django.contrib.auth.models import User
from django.core.exceptions import ValidationError
from django.db import transaction

from inspections.models import ALL_ROLES, Notification, ROLE_ADMIN, ROLE_INSPECTOR, UserProfile
from inspections.services.notifications import notify

logger = logging.getLogger(__name__)

# Roles allowed to sign in with a username/password.
LOGIN_ROLES = (ROLE_ADMIN, ROLE_INSPECTOR)


def role_for(user):
    if user is None or not user.is_authenticated:
        return None
    profile = UserProfile.objects.filter(user=user).first()
    return profile.role if profile else None


@transaction.atomic
def create_user(username, password, role, created_by=None):
    username = (username or "").strip()
    if not username:
        raise ValidationError("Username is required.", code="required")
    if role not in ALL_ROLES:
        raise ValidationError(f"Unknown role '{role}'.", code="invalid_role")
    if User.objects.filter(username=username).exists():
        raise ValidationError(f'Username "{username}" already exists.', code="duplicate_username")

    is_admin = role == ROLE_ADMIN
    user = User.objects.create_user(
        username=username,
        password=password,
        is_staff=is_admin,
        is_superuser=is_admin,
    )
    UserProfile.objects.create(user=user, role=role)
    logger.info("Created user %s (%s)", username, role)

    if created_by is not None:
        notify(created_by, f'New user "{username}" ({role}) created.', Notification.TYPE_SUCCESS)
    return user


def inspectors():
    return User.objects.filter(profile__role=ROLE_INSPECTOR).order_by("username")
