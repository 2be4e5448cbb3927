"""Leaderboard API v1 endpoints."""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from sydai.auth.middleware import get_services, require_auth
from sydai.auth.models import UserAccount
from sydai.leaderboard.service import DEFAULT_PAGE_SIZE, LeaderboardEntry
from sydai.services import Services

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


class LeaderboardEntryResponse(BaseModel):
    id: int
    username: str
    points: int
    rank: int
    avatar_url: str | None = None


class LeaderboardResponse(BaseModel):
    entries: list[LeaderboardEntryResponse]
    total_users: int
    page: int
    page_size: int
    has_more: bool


def _entry(entry: LeaderboardEntry) -> LeaderboardEntryResponse:
    return LeaderboardEntryResponse(
        id=entry.id,
        username=entry.username,
        points=entry.points,
        rank=entry.rank,
        avatar_url=entry.avatar_url,
    )


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    page: int = Query(default=0, ge=0),
    services: Services = Depends(get_services),
):
    """Get one page of the leaderboard (10 users per page).

    ``total_users`` never reports fewer than 1000 users.
    """
    result = services.leaderboard.get_page(page, DEFAULT_PAGE_SIZE)

    return LeaderboardResponse(
        entries=[_entry(entry) for entry in result.entries],
        total_users=result.total_users,
        page=result.page,
        page_size=result.page_size,
        has_more=result.has_more,
    )


@router.get("/me", response_model=LeaderboardEntryResponse)
async def get_my_rank(
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    """Get the current user's rank."""
    return _entry(services.leaderboard.get_rank(user.id))
