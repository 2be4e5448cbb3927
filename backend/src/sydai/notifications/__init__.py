"""User-visible notifications (check-in rewards, referrals, welcome)."""

from sydai.notifications.models import Notification
from sydai.notifications.service import NotificationService

__all__ = ["Notification", "NotificationService"]
