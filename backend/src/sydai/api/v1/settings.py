"""User preference API v1 endpoints."""

from fastapi import APIRouter, Depends

from sydai.auth.middleware import get_services, require_auth
from sydai.auth.models import UserAccount
from sydai.preferences.models import SettingsResponse, SettingsUpdate
from sydai.services import Services

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=SettingsResponse)
async def get_settings(
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    """Get the current user's preferences, creating defaults if missing."""
    return services.preferences.get_or_create(user.id)


@router.patch("", response_model=SettingsResponse)
async def update_settings(
    body: SettingsUpdate,
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    """Partially update the current user's preferences."""
    return services.preferences.update(
        user.id,
        theme=body.theme,
        notifications=body.notifications,
        email_notifications=body.email_notifications,
    )
