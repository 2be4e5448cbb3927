"""Error taxonomy for the points, check-in and referral operations.

Every class carries the HTTP status the API answers with and a stable
machine-readable ``code`` so clients can branch without parsing messages.
"""


class PointsError(Exception):
    """Base class for expected, typed failures of a points operation."""

    status_code = 400
    code = "points_error"

    def __init__(self, message: str | None = None):
        self.message = message or self.__class__.__doc__.strip().splitlines()[0]
        super().__init__(self.message)


class NotFoundError(PointsError):
    """Requested entity does not exist."""

    status_code = 404
    code = "not_found"


class AlreadyCheckedInError(PointsError):
    """Already checked in today."""

    status_code = 400
    code = "already_checked_in"


class InvalidOrUsedCodeError(PointsError):
    """Invalid referral code."""

    status_code = 404
    code = "invalid_or_used_code"


class ConflictError(PointsError):
    """Concurrent update conflict, please retry."""

    status_code = 409
    code = "conflict"


class InsufficientPointsError(PointsError):
    """Raised when an adjustment would take a balance below zero."""

    status_code = 400
    code = "insufficient_points"

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        super().__init__(f"Insufficient points: required {required}, available {available}")
