"""Notification service."""

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError

from sydai.exceptions import NotFoundError
from sydai.logging_config import get_logger
from sydai.notifications.models import Notification
from sydai.storage.db import Database
from sydai.storage.models import Clock, to_utc_naive, utcnow

logger = get_logger(__name__)


class NotificationService:
    """Records and manages user notifications."""

    def __init__(self, db: Database, clock: Clock = utcnow):
        self.db = db
        self.clock = clock
        self.logger = get_logger(__name__)

    def record(self, user_id: int, title: str, message: str) -> Notification | None:
        """Record an event for a user, fire-and-forget.

        Called after a check-in or referral has been committed; a storage
        failure here is logged and must not undo that operation.

        Returns:
            The stored notification, or None if it could not be stored
        """
        try:
            notification = self.create(user_id, title, message)
        except SQLAlchemyError as e:
            self.logger.error("notification_failed", user_id=user_id, title=title, error=str(e))
            return None

        self.logger.info("notification_recorded", user_id=user_id, notification_id=notification.id)
        return notification

    def create(self, user_id: int, title: str, message: str) -> Notification:
        """Store a notification for a user."""
        with self.db.session() as session:
            notification = Notification(
                user_id=user_id,
                title=title,
                message=message,
                created_at=to_utc_naive(self.clock()),
            )
            session.add(notification)
            session.flush()
            return notification

    def list_for_user(self, user_id: int) -> list[Notification]:
        """List a user's notifications, newest first."""
        with self.db.session() as session:
            return list(session.scalars(
                select(Notification)
                .where(Notification.user_id == user_id)
                .order_by(Notification.created_at.desc(), Notification.id.desc())
            ))

    def unread_count(self, user_id: int) -> int:
        with self.db.session() as session:
            return session.scalar(
                select(func.count(Notification.id)).where(
                    Notification.user_id == user_id,
                    Notification.is_read.is_(False),
                )
            ) or 0

    def mark_read(self, notification_id: int, user_id: int) -> Notification:
        """Mark one of the user's notifications as read.

        Raises:
            NotFoundError: If the notification does not exist or belongs to someone else
        """
        with self.db.session() as session:
            notification = session.get(Notification, notification_id)
            if not notification or notification.user_id != user_id:
                raise NotFoundError("Notification not found")

            notification.is_read = True
            session.flush()
            return notification

    def mark_all_read(self, user_id: int) -> int:
        """Mark every notification of a user as read.

        Returns:
            Number of notifications changed
        """
        with self.db.session() as session:
            result = session.execute(
                update(Notification)
                .where(Notification.user_id == user_id, Notification.is_read.is_(False))
                .values(is_read=True)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount

    def delete(self, notification_id: int, user_id: int) -> None:
        """Delete one of the user's notifications.

        Raises:
            NotFoundError: If the notification does not exist or belongs to someone else
        """
        with self.db.session() as session:
            result = session.execute(
                delete(Notification)
                .where(Notification.id == notification_id, Notification.user_id == user_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise NotFoundError("Notification not found")
