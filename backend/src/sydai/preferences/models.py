"""User preference models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from sydai.storage.models import Base


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class UserSettings(Base):
    """Preferences of a single user (one row per user)."""
    __tablename__ = "user_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, unique=True)

    theme: Mapped[str] = mapped_column(String(10), default=Theme.LIGHT.value, nullable=False)
    notifications: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    email_notifications: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<UserSettings(user={self.user_id}, theme={self.theme})>"


class SettingsResponse(BaseModel):
    """Preferences for API responses."""
    model_config = ConfigDict(from_attributes=True)

    theme: Theme
    notifications: bool
    email_notifications: bool


class SettingsUpdate(BaseModel):
    """Partial preference update."""
    theme: Theme | None = None
    notifications: bool | None = None
    email_notifications: bool | None = None
