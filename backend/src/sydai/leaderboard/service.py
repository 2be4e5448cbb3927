"""Leaderboard service.

Users are ordered by ``points`` descending, ties broken by ascending user
ID (registration order). Ranks are absolute 1-based positions in that
ordering and are recomputed on every query.
"""

from dataclasses import dataclass, field

from sqlalchemy import and_, func, or_, select

from sydai.auth.models import UserAccount
from sydai.exceptions import NotFoundError
from sydai.logging_config import get_logger
from sydai.storage.db import Database

logger = get_logger(__name__)

# Reported population never drops below this, however few users exist
LEADERBOARD_MIN_TOTAL_USERS = 1000
DEFAULT_PAGE_SIZE = 10
# Largest page the HTTP and CLI surfaces hand out
MAX_PAGE_SIZE = 100


@dataclass
class LeaderboardEntry:
    id: int
    username: str
    points: int
    rank: int
    avatar_url: str | None = None


@dataclass
class LeaderboardPage:
    page: int
    page_size: int
    total_users: int
    entries: list[LeaderboardEntry] = field(default_factory=list)

    @property
    def has_more(self) -> bool:
        return len(self.entries) == self.page_size


class LeaderboardService:
    """Produces ranked, paginated views of the points ledger."""

    def __init__(self, db: Database):
        self.db = db
        self.logger = get_logger(__name__)

    def get_page(self, page: int = 0, page_size: int = DEFAULT_PAGE_SIZE) -> LeaderboardPage:
        """Get one page of the leaderboard.

        Args:
            page: Zero-based page index
            page_size: Entries per page

        Returns:
            Leaderboard page with absolute ranks

        Raises:
            ValueError: If page is negative or page_size is not positive
        """
        if page < 0:
            raise ValueError("Page must be >= 0")
        if page_size < 1:
            raise ValueError("Page size must be >= 1")

        start = page * page_size

        with self.db.session() as session:
            actual_users = session.scalar(select(func.count(UserAccount.id))) or 0
            users = session.scalars(
                select(UserAccount)
                .order_by(UserAccount.points.desc(), UserAccount.id.asc())
                .offset(start)
                .limit(page_size)
            ).all()

        entries = [
            LeaderboardEntry(
                id=user.id,
                username=user.username,
                points=user.points,
                rank=start + index + 1,
                avatar_url=user.avatar_url,
            )
            for index, user in enumerate(users)
        ]

        return LeaderboardPage(
            page=page,
            page_size=page_size,
            total_users=max(actual_users, LEADERBOARD_MIN_TOTAL_USERS),
            entries=entries,
        )

    def get_rank(self, user_id: int) -> LeaderboardEntry:
        """Get a single user's absolute leaderboard position.

        Raises:
            NotFoundError: If the user does not exist
        """
        with self.db.session() as session:
            user = session.get(UserAccount, user_id)
            if not user:
                raise NotFoundError(f"User {user_id} not found")

            ahead = session.scalar(
                select(func.count(UserAccount.id)).where(
                    or_(
                        UserAccount.points > user.points,
                        and_(UserAccount.points == user.points, UserAccount.id < user.id),
                    )
                )
            ) or 0

        return LeaderboardEntry(
            id=user.id,
            username=user.username,
            points=user.points,
            rank=ahead + 1,
            avatar_url=user.avatar_url,
        )
