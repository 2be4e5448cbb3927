"""Referral service for managing referral codes and completion bonuses."""

import secrets
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import aliased

from sydai.auth.models import UserAccount
from sydai.auth.points import REFERRAL_POINTS, PointsLedger
from sydai.exceptions import ConflictError, InvalidOrUsedCodeError, NotFoundError
from sydai.logging_config import get_logger
from sydai.notifications.service import NotificationService
from sydai.referral.models import Referral
from sydai.storage.db import Database
from sydai.storage.models import Clock, to_utc_naive, utcnow

logger = get_logger(__name__)

REFERRAL_CODE_LENGTH = 8
# Uppercase letters and digits without the look-alikes 0, O, 1, I, L
REFERRAL_CODE_ALPHABET = "ABCDEFGHJKMNPQRSTUVWXYZ23456789"
MAX_CODE_ATTEMPTS = 10

REFERRAL_NOTIFICATION_TITLE = "New Referral!"
REFERRAL_NOTIFICATION_MESSAGE = f"Someone joined with your referral code. You've earned {REFERRAL_POINTS} points!"


def generate_referral_code(length: int = REFERRAL_CODE_LENGTH) -> str:
    """Generate a readable referral code.

    Format: ABC23XYZ (8 chars by default)
    """
    return "".join(secrets.choice(REFERRAL_CODE_ALPHABET) for _ in range(length))


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


@dataclass
class ReferralStats:
    code: str
    link: str
    total_referrals: int

    @property
    def total_points(self) -> int:
        # Derived from the completed count so it cannot drift
        return REFERRAL_POINTS * self.total_referrals


class ReferralService:
    """Service for managing referral codes and completions."""

    def __init__(
        self,
        db: Database,
        ledger: PointsLedger,
        notifications: NotificationService,
        base_url: str,
        clock: Clock = utcnow,
        code_generator: Callable[[], str] = generate_referral_code,
    ):
        """Initialize referral service.

        Args:
            db: Database holding the referral table
            ledger: Ledger used to award the referral bonus
            notifications: Emitter for the referrer's notification
            base_url: Public URL the shareable link is built on
            clock: Source of the current UTC instant
            code_generator: Produces candidate codes
        """
        self.db = db
        self.ledger = ledger
        self.notifications = notifications
        self.base_url = base_url.rstrip("/")
        self.clock = clock
        self.code_generator = code_generator
        self.logger = get_logger(__name__)

    def build_link(self, code: str) -> str:
        return f"{self.base_url}/signup?ref={code}"

    def get_referral(self, user_id: int) -> Referral | None:
        """Get the referral owned by a user, if any."""
        with self.db.session() as session:
            return session.scalars(
                select(Referral).where(Referral.referrer_id == user_id)
            ).first()

    def get_or_create_referral(self, user_id: int) -> Referral:
        """Get existing referral or create one with a fresh unique code.

        Args:
            user_id: User ID

        Returns:
            Referral object

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If no unique code could be generated
        """
        existing = self.get_referral(user_id)
        if existing:
            return existing

        # Fails with NotFoundError for unknown users
        self.ledger.get_user(user_id)

        for attempt in range(MAX_CODE_ATTEMPTS):
            code = self.code_generator()
            try:
                with self.db.session() as session:
                    taken = session.scalar(select(Referral.id).where(Referral.code == code))
                    if taken is not None:
                        self.logger.debug("referral_code_collision", code=code, attempt=attempt)
                        continue

                    referral = Referral(
                        referrer_id=user_id,
                        code=code,
                        created_at=to_utc_naive(self.clock()),
                    )
                    session.add(referral)
                    session.flush()
            except IntegrityError:
                # A concurrent request inserted this code or this user's referral
                existing = self.get_referral(user_id)
                if existing:
                    return existing
                self.logger.debug("referral_code_collision", code=code, attempt=attempt)
                continue

            self.logger.info("referral_code_created", user_id=user_id, code=code)
            return referral

        self.logger.error("referral_code_exhausted", user_id=user_id, attempts=MAX_CODE_ATTEMPTS)
        raise ConflictError("Could not generate a unique referral code")

    def validate_code(self, code: str | None) -> Referral | None:
        """Validate a referral code.

        Args:
            code: Referral code to validate

        Returns:
            Referral if the code exists and is unused, None otherwise
        """
        code = normalize_code(code)
        if not code:
            return None

        with self.db.session() as session:
            return session.scalars(
                select(Referral).where(
                    Referral.code == code,
                    Referral.is_completed.is_(False),
                )
            ).first()

    def get_stats(self, user_id: int) -> ReferralStats:
        """Get referral statistics for a user.

        Creates the user's referral code on first call.

        Args:
            user_id: User ID

        Returns:
            Referral stats
        """
        referral = self.get_or_create_referral(user_id)

        with self.db.session() as session:
            completed = session.scalar(
                select(func.count(Referral.id)).where(
                    Referral.referrer_id == user_id,
                    Referral.is_completed.is_(True),
                )
            ) or 0

        return ReferralStats(
            code=referral.code,
            link=self.build_link(referral.code),
            total_referrals=completed,
        )

    def complete_referral(self, code: str | None, new_user_id: int) -> Referral:
        """Consume a referral code on behalf of a newly registered user.

        The completion flag and the referrer's bonus are written in one
        transaction: if the award fails the code stays unused.

        Args:
            code: Referral code
            new_user_id: ID of the user who signed up with the code

        Returns:
            Completed referral

        Raises:
            InvalidOrUsedCodeError: Unknown code, already used, the user's own code,
                or the user was already referred by someone else
            NotFoundError: If the new user does not exist
            ConflictError: If the store could not acquire the row in time
        """
        code = normalize_code(code)
        if not code:
            raise InvalidOrUsedCodeError()

        now = to_utc_naive(self.clock())
        # A user can be referred only once
        earlier = aliased(Referral)

        try:
            with self.db.session() as session:
                # Write first: the conditional UPDATE is what serializes racing completions
                result = session.execute(
                    update(Referral)
                    .where(
                        Referral.code == code,
                        Referral.is_completed.is_(False),
                        Referral.referrer_id != new_user_id,
                        ~select(earlier.id).where(earlier.referred_user_id == new_user_id).exists(),
                    )
                    .values(
                        referred_user_id=new_user_id,
                        is_completed=True,
                        completed_at=now,
                    )
                    .execution_options(synchronize_session=False)
                )
                if result.rowcount == 0:
                    self.logger.info("referral_rejected", code=code, user_id=new_user_id)
                    raise InvalidOrUsedCodeError()

                if session.get(UserAccount, new_user_id) is None:
                    raise NotFoundError(f"User {new_user_id} not found")

                referral = session.scalars(select(Referral).where(Referral.code == code)).one()
                self.ledger.award_points(
                    referral.referrer_id,
                    REFERRAL_POINTS,
                    operation="referral_bonus",
                    description=f"Referral bonus for inviting user #{new_user_id}",
                    session=session,
                )
        except OperationalError as e:
            self.logger.warning("referral_conflict", code=code, user_id=new_user_id, error=str(e))
            raise ConflictError() from e

        self.logger.info(
            "referral_completed",
            code=code,
            referrer_id=referral.referrer_id,
            referred_user_id=new_user_id,
            bonus=REFERRAL_POINTS,
        )

        self.notifications.record(
            referral.referrer_id,
            REFERRAL_NOTIFICATION_TITLE,
            REFERRAL_NOTIFICATION_MESSAGE,
        )
        return referral
