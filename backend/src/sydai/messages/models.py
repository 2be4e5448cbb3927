"""Chat message models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from sydai.storage.models import Base, utcnow


class Message(Base):
    """A chat message sent by the user or by the assistant."""
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    content: Mapped[str] = mapped_column(Text, nullable=False)
    is_from_user: Mapped[bool] = mapped_column(Boolean, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Message(id={self.id}, user={self.user_id}, from_user={self.is_from_user})>"


class MessageCreate(BaseModel):
    """Message sent by the current user."""
    content: str = Field(..., min_length=1, max_length=4000)


class MessageResponse(BaseModel):
    """Message data for API responses."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    content: str
    is_from_user: bool
    created_at: datetime
