"""Leaderboard ranking over user point totals."""

from sydai.leaderboard.service import (
    LEADERBOARD_MIN_TOTAL_USERS,
    LeaderboardEntry,
    LeaderboardPage,
    LeaderboardService,
)

__all__ = ["LEADERBOARD_MIN_TOTAL_USERS", "LeaderboardEntry", "LeaderboardPage", "LeaderboardService"]
