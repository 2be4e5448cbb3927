"""Preferences service."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sydai.logging_config import get_logger
from sydai.preferences.models import Theme, UserSettings
from sydai.storage.db import Database

logger = get_logger(__name__)


class PreferencesService:
    """Reads and updates user preferences, creating defaults lazily."""

    def __init__(self, db: Database):
        self.db = db
        self.logger = get_logger(__name__)

    def _load_or_create(self, session: Session, user_id: int) -> UserSettings:
        prefs = session.scalars(
            select(UserSettings).where(UserSettings.user_id == user_id)
        ).first()
        if prefs:
            return prefs

        prefs = UserSettings(
            user_id=user_id,
            theme=Theme.LIGHT.value,
            notifications=True,
            email_notifications=False,
        )
        session.add(prefs)
        session.flush()
        self.logger.info("settings_created", user_id=user_id)
        return prefs

    def get_or_create(self, user_id: int) -> UserSettings:
        """Get the user's preferences, creating the defaults on first access."""
        try:
            with self.db.session() as session:
                return self._load_or_create(session, user_id)
        except IntegrityError:
            # Created concurrently by another request
            with self.db.session() as session:
                return session.scalars(
                    select(UserSettings).where(UserSettings.user_id == user_id)
                ).one()

    def update(
        self,
        user_id: int,
        theme: Theme | str | None = None,
        notifications: bool | None = None,
        email_notifications: bool | None = None,
    ) -> UserSettings:
        """Apply a partial update to the user's preferences.

        Raises:
            ValueError: If ``theme`` is not a known theme
        """
        if theme is not None:
            theme = Theme(theme)

        self.get_or_create(user_id)

        with self.db.session() as session:
            prefs = self._load_or_create(session, user_id)
            if theme is not None:
                prefs.theme = theme.value
            if notifications is not None:
                prefs.notifications = notifications
            if email_notifications is not None:
                prefs.email_notifications = email_notifications
            session.flush()

        self.logger.info("settings_updated", user_id=user_id, theme=prefs.theme)
        return prefs
