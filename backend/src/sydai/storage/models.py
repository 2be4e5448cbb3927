"""Declarative base and time helpers shared by all models."""

from collections.abc import Callable
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase

Clock = Callable[[], datetime]


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


def to_utc_naive(value: datetime) -> datetime:
    """Normalize a datetime to naive UTC, the form stored in the database."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utcnow() -> datetime:
    """Current instant as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
