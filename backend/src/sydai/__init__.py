"""SydAI - gamified chat backend (points, check-ins, leaderboard, referrals)."""

__version__ = "1.0.0"
