"""Daily check-in API v1 endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sydai.auth.middleware import get_services, require_auth
from sydai.auth.models import User, UserAccount
from sydai.auth.points import CHECKIN_POINTS
from sydai.checkin.state import CheckinState
from sydai.services import Services

router = APIRouter(prefix="/checkin", tags=["checkin"])


class CheckinStatusResponse(BaseModel):
    state: CheckinState
    checked_in_today: bool
    last_checkin: datetime | None = None
    next_checkin_at: datetime | None = None
    points_per_checkin: int = CHECKIN_POINTS


class CheckinResponse(BaseModel):
    success: bool
    points_awarded: int
    user: User


@router.get("", response_model=CheckinStatusResponse)
async def get_checkin_status(
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    """Whether the current user already checked in today."""
    status = services.checkin.status(user.id)

    return CheckinStatusResponse(
        state=status.state,
        checked_in_today=status.checked_in_today,
        last_checkin=status.last_checkin,
        next_checkin_at=status.next_checkin_at,
    )


@router.post("", response_model=CheckinResponse)
async def check_in(
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    """Perform today's check-in.

    Fails with 400 ``already_checked_in`` on the second call of a UTC day.
    """
    updated = services.checkin.check_in(user.id)

    return CheckinResponse(
        success=True,
        points_awarded=CHECKIN_POINTS,
        user=User.model_validate(updated),
    )
