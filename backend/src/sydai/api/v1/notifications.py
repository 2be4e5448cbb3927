"""Notifications API v1 endpoints."""

from fastapi import APIRouter, Depends

from sydai.auth.middleware import get_services, require_auth
from sydai.auth.models import UserAccount
from sydai.notifications.models import NotificationCreate, NotificationResponse
from sydai.services import Services

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    """Get the current user's notifications, newest first."""
    return services.notifications.list_for_user(user.id)


@router.get("/unread-count")
async def get_unread_count(
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    return {"count": services.notifications.unread_count(user.id)}


@router.post("", response_model=NotificationResponse)
async def create_notification(
    body: NotificationCreate,
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    return services.notifications.create(user.id, body.title, body.message)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: int,
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    return services.notifications.mark_read(notification_id, user.id)


@router.post("/mark-all-read")
async def mark_all_notifications_read(
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    updated = services.notifications.mark_all_read(user.id)
    return {"success": True, "updated": updated}


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: int,
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    services.notifications.delete(notification_id, user.id)
    return {"success": True}
