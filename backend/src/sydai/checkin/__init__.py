"""Daily check-in: one +10 point award per user per UTC calendar day."""

from sydai.checkin.state import CheckinState, calendar_day_bounds, checkin_state, same_calendar_day

__all__ = [
    "CheckinState",
    "calendar_day_bounds",
    "checkin_state",
    "same_calendar_day",
]
