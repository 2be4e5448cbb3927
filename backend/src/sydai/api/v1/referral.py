"""Referral API v1 endpoints."""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from sydai.api.rate_limit import REFERRAL_COMPLETE_LIMIT, REFERRAL_VALIDATE_LIMIT, limiter
from sydai.auth.middleware import get_services, require_auth
from sydai.auth.models import UserAccount
from sydai.auth.points import REFERRAL_POINTS
from sydai.logging_config import get_logger
from sydai.referral.models import CompleteReferralRequest, ReferralStatsResponse
from sydai.services import Services

logger = get_logger(__name__)

router = APIRouter(prefix="/referral", tags=["referral"])


class ValidateCodeResponse(BaseModel):
    """Response from code validation."""
    valid: bool
    bonus_points: int = REFERRAL_POINTS


@router.get("", response_model=ReferralStatsResponse)
async def get_referral_stats(
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    """Get referral statistics for current user.

    Creates the user's referral code on first call.
    """
    stats = services.referral.get_stats(user.id)

    return ReferralStatsResponse(
        referral_code=stats.code,
        referral_link=stats.link,
        total_referrals=stats.total_referrals,
        total_points=stats.total_points,
    )


@router.get("/validate/{code}", response_model=ValidateCodeResponse)
@limiter.limit(REFERRAL_VALIDATE_LIMIT)
async def validate_referral_code(
    request: Request,
    code: str,
    services: Services = Depends(get_services),
):
    """Check whether a code can still be used at registration."""
    return ValidateCodeResponse(valid=services.referral.validate_code(code) is not None)


@router.post("/complete")
@limiter.limit(REFERRAL_COMPLETE_LIMIT)
async def complete_referral(
    request: Request,
    body: CompleteReferralRequest,
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    """Complete a referral code on behalf of the current user.

    Fails with 404 ``invalid_or_used_code`` for unknown, used or own codes.
    """
    referral = services.referral.complete_referral(body.referral_code, user.id)
    return {"success": True, "referrer_id": referral.referrer_id}
