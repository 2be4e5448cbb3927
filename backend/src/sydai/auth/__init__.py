"""User accounts, local authentication and the points ledger."""

from sydai.auth.local import LocalAuthService
from sydai.auth.models import PointTransaction, User, UserAccount
from sydai.auth.points import CHECKIN_POINTS, MESSAGE_POINTS, REFERRAL_POINTS, PointsLedger

__all__ = [
    "CHECKIN_POINTS",
    "MESSAGE_POINTS",
    "REFERRAL_POINTS",
    "LocalAuthService",
    "PointTransaction",
    "PointsLedger",
    "User",
    "UserAccount",
]
