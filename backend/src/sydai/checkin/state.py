"""Calendar-day check-in state.

A user may check in once per UTC calendar date. The state is derived from
``last_checkin`` alone: comparison is by (year, month, day), not a rolling
24 hour window, so 23:59 and 00:01 the next day are two separate days.
"""

from datetime import datetime, timedelta
from enum import Enum

from sydai.storage.models import to_utc_naive


class CheckinState(str, Enum):
    """Check-in state of a user relative to a given instant."""
    NEVER_CHECKED_IN = "never_checked_in"
    CHECKED_IN_TODAY = "checked_in_today"
    CHECKED_IN_PREVIOUSLY = "checked_in_previously"


def same_calendar_day(a: datetime, b: datetime) -> bool:
    """True if both instants fall on the same UTC calendar date."""
    return to_utc_naive(a).date() == to_utc_naive(b).date()


def calendar_day_bounds(at: datetime) -> tuple[datetime, datetime]:
    """Return the naive-UTC ``[start, end)`` of the calendar day containing ``at``."""
    start = datetime.combine(to_utc_naive(at).date(), datetime.min.time())
    return start, start + timedelta(days=1)


def next_checkin_at(at: datetime) -> datetime:
    """Earliest instant after ``at`` at which a new check-in is allowed."""
    return calendar_day_bounds(at)[1]


def checkin_state(last_checkin: datetime | None, now: datetime) -> CheckinState:
    """Derive the check-in state from the stored timestamp."""
    if last_checkin is None:
        return CheckinState.NEVER_CHECKED_IN
    if same_calendar_day(last_checkin, now):
        return CheckinState.CHECKED_IN_TODAY
    return CheckinState.CHECKED_IN_PREVIOUSLY
