"""Per-user display and notification preferences."""

from sydai.preferences.models import UserSettings
from sydai.preferences.service import PreferencesService

__all__ = ["PreferencesService", "UserSettings"]
