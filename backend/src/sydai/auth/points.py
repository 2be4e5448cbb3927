"""Points ledger: the only writer of ``UserAccount.points`` and ``last_checkin``."""

from datetime import datetime

from sqlalchemy import or_, select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from sydai.auth.models import PointTransaction, UserAccount
from sydai.checkin.state import calendar_day_bounds
from sydai.exceptions import AlreadyCheckedInError, ConflictError, InsufficientPointsError, NotFoundError
from sydai.logging_config import get_logger
from sydai.storage.db import Database
from sydai.storage.models import to_utc_naive

logger = get_logger(__name__)

# Fixed point amounts
MESSAGE_POINTS = 1
CHECKIN_POINTS = 10
REFERRAL_POINTS = 20


class PointsLedger:
    """Service for reading and mutating user point balances.

    Every mutation is a single conditional UPDATE, so concurrent awards to
    the same user never lose increments and a guarded transition (check-in)
    succeeds for exactly one of several racing callers.
    """

    def __init__(self, db: Database):
        """Initialize points ledger.

        Args:
            db: Database the ledger operates on
        """
        self.db = db
        self.logger = get_logger(__name__)

    def get_user(self, user_id: int) -> UserAccount:
        """Get a user by ID.

        Raises:
            NotFoundError: If the user does not exist
        """
        with self.db.session() as session:
            user = session.get(UserAccount, user_id)
            if not user:
                raise NotFoundError(f"User {user_id} not found")
            return user

    def get_balance(self, user_id: int) -> int:
        """Get user's point total."""
        return self.get_user(user_id).points

    def award_points(
        self,
        user_id: int,
        delta: int,
        operation: str = "adjustment",
        description: str | None = None,
        session: Session | None = None,
    ) -> int:
        """Add ``delta`` points to a user.

        Args:
            user_id: User ID
            delta: Points to add (negative values subtract, zero records nothing)
            operation: Operation type (message, checkin, referral_bonus, adjustment)
            description: Optional description for the transaction record
            session: Join an existing transaction instead of opening one

        Returns:
            New point total

        Raises:
            NotFoundError: If the user does not exist
            InsufficientPointsError: If the balance would drop below zero
            ConflictError: If the store could not acquire the row in time
        """
        if delta == 0:
            # Nothing to record; still fails for unknown users
            if session is not None:
                current = session.scalar(select(UserAccount.points).where(UserAccount.id == user_id))
                if current is None:
                    raise NotFoundError(f"User {user_id} not found")
                return current
            return self.get_balance(user_id)

        if session is not None:
            return self._apply(session, user_id, delta, operation, description)

        try:
            with self.db.session() as own_session:
                return self._apply(own_session, user_id, delta, operation, description)
        except OperationalError as e:
            self.logger.warning("points_award_conflict", user_id=user_id, error=str(e))
            raise ConflictError() from e

    def _apply(
        self,
        session: Session,
        user_id: int,
        delta: int,
        operation: str,
        description: str | None,
    ) -> int:
        result = session.execute(
            update(UserAccount)
            .where(UserAccount.id == user_id, UserAccount.points + delta >= 0)
            .values(points=UserAccount.points + delta)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 0:
            current = session.scalar(select(UserAccount.points).where(UserAccount.id == user_id))
            if current is None:
                raise NotFoundError(f"User {user_id} not found")
            raise InsufficientPointsError(-delta, current)

        new_balance = session.scalar(select(UserAccount.points).where(UserAccount.id == user_id))
        session.add(PointTransaction(
            user_id=user_id,
            amount=delta,
            balance_after=new_balance,
            operation=operation,
            description=description,
        ))
        session.flush()

        self.logger.info(
            "points_awarded",
            user_id=user_id,
            amount=delta,
            operation=operation,
            new_balance=new_balance,
        )
        return new_balance

    def record_checkin(self, user_id: int, at: datetime) -> UserAccount:
        """Set ``last_checkin`` and add the check-in points in one statement.

        The UPDATE only matches when the stored check-in is missing or on a
        different calendar day than ``at``.

        Args:
            user_id: User ID
            at: Check-in instant

        Returns:
            Updated user

        Raises:
            AlreadyCheckedInError: If the user already checked in that day
            NotFoundError: If the user does not exist
            ConflictError: If the store could not acquire the row in time
        """
        at = to_utc_naive(at)
        day_start, day_end = calendar_day_bounds(at)

        try:
            with self.db.session() as session:
                result = session.execute(
                    update(UserAccount)
                    .where(
                        UserAccount.id == user_id,
                        or_(
                            UserAccount.last_checkin.is_(None),
                            UserAccount.last_checkin < day_start,
                            UserAccount.last_checkin >= day_end,
                        ),
                    )
                    .values(
                        points=UserAccount.points + CHECKIN_POINTS,
                        last_checkin=at,
                    )
                    .execution_options(synchronize_session=False)
                )

                if result.rowcount == 0:
                    exists = session.scalar(select(UserAccount.id).where(UserAccount.id == user_id))
                    if exists is None:
                        raise NotFoundError(f"User {user_id} not found")
                    raise AlreadyCheckedInError()

                user = session.get(UserAccount, user_id, populate_existing=True)
                session.add(PointTransaction(
                    user_id=user_id,
                    amount=CHECKIN_POINTS,
                    balance_after=user.points,
                    operation="checkin",
                    description="Daily check-in",
                    created_at=at,
                ))
        except OperationalError as e:
            self.logger.warning("checkin_conflict", user_id=user_id, error=str(e))
            raise ConflictError() from e

        self.logger.info(
            "checkin_recorded",
            user_id=user_id,
            checked_in_at=at.isoformat(),
            new_balance=user.points,
        )
        return user

    def get_transaction_history(
        self,
        user_id: int,
        limit: int = 50,
        offset: int = 0,
    ) -> list[PointTransaction]:
        """Get user's point transactions, newest first.

        Args:
            user_id: User ID
            limit: Max records
            offset: Offset for pagination

        Returns:
            List of transactions
        """
        with self.db.session() as session:
            return list(session.scalars(
                select(PointTransaction)
                .where(PointTransaction.user_id == user_id)
                .order_by(PointTransaction.created_at.desc(), PointTransaction.id.desc())
                .offset(offset)
                .limit(limit)
            ))
