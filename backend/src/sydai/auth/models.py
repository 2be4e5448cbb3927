"""User account and points ledger models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sydai.storage.models import Base, utcnow


class UserAccount(Base):
    """Registered user.

    ``points`` and ``last_checkin`` belong to the ledger and are only written
    through ``PointsLedger``.
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("points >= 0", name="ck_users_points_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Identity
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Ledger
    points: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)
    last_checkin: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    # Relationships
    point_transactions = relationship("PointTransaction", back_populates="user")

    def __repr__(self):
        return f"<UserAccount(id={self.id}, username={self.username}, points={self.points})>"


class PointTransaction(Base):
    """Audit record of a single point award."""
    __tablename__ = "point_transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    amount: Mapped[int] = mapped_column(Integer, nullable=False)
    balance_after: Mapped[int] = mapped_column(Integer, nullable=False)
    operation: Mapped[str] = mapped_column(String(50), nullable=False)  # message, checkin, referral_bonus, adjustment
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    user = relationship("UserAccount", back_populates="point_transactions")

    def __repr__(self):
        return f"<PointTransaction(id={self.id}, user={self.user_id}, amount={self.amount})>"


# Pydantic models for API


class User(BaseModel):
    """User data for API responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    points: int
    last_checkin: datetime | None = None
    avatar_url: str | None = None
    created_at: datetime


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: User
