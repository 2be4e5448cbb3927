"""User preferences."""

import pytest

from sydai.preferences.models import Theme


class TestPreferencesService:

    def test_defaults_created_lazily(self, services, make_user):
        user = make_user()

        prefs = services.preferences.get_or_create(user.id)

        assert prefs.theme == Theme.LIGHT.value
        assert prefs.notifications is True
        assert prefs.email_notifications is False
        assert services.preferences.get_or_create(user.id).id == prefs.id

    def test_partial_update(self, services, make_user):
        user = make_user()

        services.preferences.update(user.id, theme="dark")
        prefs = services.preferences.update(user.id, email_notifications=True)

        assert prefs.theme == "dark"
        assert prefs.notifications is True
        assert prefs.email_notifications is True

    def test_unknown_theme(self, services, make_user):
        user = make_user()

        with pytest.raises(ValueError):
            services.preferences.update(user.id, theme="neon")

        assert services.preferences.get_or_create(user.id).theme == Theme.LIGHT.value
