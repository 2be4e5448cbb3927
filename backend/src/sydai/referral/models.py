"""Referral system database models."""

from datetime import datetime

from pydantic import BaseModel, Field
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sydai.storage.models import Base, utcnow


class Referral(Base):
    """Referral code owned by a user.

    ``referred_user_id`` is set exactly when ``is_completed`` is true; a
    completed code is never reopened.
    """
    __tablename__ = "referrals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    referrer_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    referred_user_id: Mapped[int | None] = mapped_column(Integer, ForeignKey("users.id"), nullable=True)
    code: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)

    # Status
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    referrer = relationship("UserAccount", foreign_keys=[referrer_id])
    referred_user = relationship("UserAccount", foreign_keys=[referred_user_id])

    def __repr__(self):
        return f"<Referral(code={self.code}, referrer={self.referrer_id}, completed={self.is_completed})>"


class ReferralStatsResponse(BaseModel):
    """Response with referral statistics."""
    referral_code: str
    referral_link: str
    total_referrals: int
    total_points: int


class CompleteReferralRequest(BaseModel):
    """Request to complete a referral for the current user."""
    referral_code: str = Field(..., min_length=1, max_length=20)
