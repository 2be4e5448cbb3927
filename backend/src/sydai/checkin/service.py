"""Check-in service."""

from dataclasses import dataclass
from datetime import datetime

from sydai.auth.models import UserAccount
from sydai.auth.points import CHECKIN_POINTS, PointsLedger
from sydai.checkin.state import CheckinState, checkin_state, next_checkin_at
from sydai.exceptions import AlreadyCheckedInError, PointsError
from sydai.logging_config import get_logger
from sydai.notifications.service import NotificationService
from sydai.storage.models import Clock, to_utc_naive, utcnow

logger = get_logger(__name__)

CHECKIN_NOTIFICATION_TITLE = "Daily Check-in Complete!"
CHECKIN_NOTIFICATION_MESSAGE = f"You've earned {CHECKIN_POINTS} points! Come back tomorrow for more."


@dataclass
class CheckinStatus:
    state: CheckinState
    last_checkin: datetime | None
    next_checkin_at: datetime | None

    @property
    def checked_in_today(self) -> bool:
        return self.state == CheckinState.CHECKED_IN_TODAY


@dataclass
class CheckinResult:
    """Outcome of a check-in attempt."""
    success: bool
    points_awarded: int
    error: str | None = None
    message: str | None = None
    user: UserAccount | None = None


class CheckinService:
    """Decides whether a check-in is allowed and records it."""

    def __init__(
        self,
        ledger: PointsLedger,
        notifications: NotificationService,
        clock: Clock = utcnow,
    ):
        self.ledger = ledger
        self.notifications = notifications
        self.clock = clock
        self.logger = get_logger(__name__)

    def status(self, user_id: int) -> CheckinStatus:
        """Get the user's check-in state for the current day."""
        now = to_utc_naive(self.clock())
        user = self.ledger.get_user(user_id)
        state = checkin_state(user.last_checkin, now)

        return CheckinStatus(
            state=state,
            last_checkin=user.last_checkin,
            next_checkin_at=next_checkin_at(now) if state == CheckinState.CHECKED_IN_TODAY else None,
        )

    def has_checked_in_today(self, user_id: int) -> bool:
        return self.status(user_id).checked_in_today

    def check_in(self, user_id: int) -> UserAccount:
        """Check the user in for today.

        Args:
            user_id: User ID

        Returns:
            Updated user

        Raises:
            AlreadyCheckedInError: If the user already checked in today
            NotFoundError: If the user does not exist
            ConflictError: If the ledger lost a storage race
        """
        now = to_utc_naive(self.clock())

        # Cheap rejection; the ledger re-checks atomically
        if self.status(user_id).checked_in_today:
            self.logger.info("checkin_rejected", user_id=user_id, reason="already_checked_in")
            raise AlreadyCheckedInError()

        try:
            user = self.ledger.record_checkin(user_id, now)
        except AlreadyCheckedInError:
            self.logger.info("checkin_rejected", user_id=user_id, reason="lost_race")
            raise

        self.notifications.record(user_id, CHECKIN_NOTIFICATION_TITLE, CHECKIN_NOTIFICATION_MESSAGE)
        return user

    def attempt(self, user_id: int) -> CheckinResult:
        """Check in and report the outcome as a result instead of raising."""
        try:
            user = self.check_in(user_id)
        except PointsError as e:
            return CheckinResult(success=False, points_awarded=0, error=e.code, message=e.message)

        return CheckinResult(success=True, points_awarded=CHECKIN_POINTS, user=user)
