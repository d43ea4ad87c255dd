import logging

from django.urls import reverse

from inspections.models import Notification

logger = logging.getLogger(__name__)


def inspection_link(report):
    return reverse("inspection-detail", args=[report.id])


def notify(user, message, type=Notification.TYPE_INFO, link=""):
    notification = Notification.objects.create(user=user, message=message, type=type, link=link or "")
    logger.debug("Notified %s: %s", user.username, message)
    return notification


def unread_count(user):
    return Notification.objects.filter(user=user, read=False).count()


def mark_read(user, notification_id):
    """Returns True if a notification of this user was updated."""
    return Notification.objects.filter(user=user, id=notification_id).update(read=True) > 0


def mark_all_read(user):
    return Notification.objects.filter(user=user, read=False).update(read=True)
