"""Message service."""

import random
from collections.abc import Callable
from dataclasses import dataclass

from sqlalchemy import select

from sydai.auth.points import MESSAGE_POINTS, PointsLedger
from sydai.logging_config import get_logger
from sydai.messages.models import Message
from sydai.storage.db import Database
from sydai.storage.models import Clock, to_utc_naive, utcnow

logger = get_logger(__name__)

CANNED_RESPONSES = [
    "That's an interesting question! I'm here to help you with that.",
    "Great point! Let me share my thoughts on that.",
    "I understand what you're asking. Here's what I think...",
    "Thanks for sharing that with me! I'd be happy to assist.",
    "That's a wonderful topic to discuss. Let me help you with that.",
    "I appreciate your question! Keep chatting to earn more points!",
]

WELCOME_MESSAGE = (
    "Welcome to SydAI! I'm here to help you with anything you need. "
    "Complete your daily check-in to earn points!"
)


def random_response(content: str) -> str:
    """Pick one of the canned replies."""
    return random.choice(CANNED_RESPONSES)


@dataclass
class Exchange:
    message: Message
    reply: Message
    new_balance: int


class MessageService:
    """Stores chat messages and answers them with a scripted reply."""

    def __init__(
        self,
        db: Database,
        ledger: PointsLedger,
        responder: Callable[[str], str] = random_response,
        clock: Clock = utcnow,
    ):
        self.db = db
        self.ledger = ledger
        self.responder = responder
        self.clock = clock
        self.logger = get_logger(__name__)

    def list_for_user(self, user_id: int) -> list[Message]:
        """List a user's conversation, oldest first."""
        with self.db.session() as session:
            return list(session.scalars(
                select(Message)
                .where(Message.user_id == user_id)
                .order_by(Message.created_at.asc(), Message.id.asc())
            ))

    def post_welcome(self, user_id: int) -> Message:
        """Store the assistant's greeting for a new user."""
        with self.db.session() as session:
            message = Message(
                user_id=user_id,
                content=WELCOME_MESSAGE,
                is_from_user=False,
                created_at=to_utc_naive(self.clock()),
            )
            session.add(message)
            session.flush()
            return message

    def send(self, user_id: int, content: str) -> Exchange:
        """Store a user message, reply to it and award the message point.

        Args:
            user_id: Sender
            content: Message text

        Returns:
            The stored message, the reply and the sender's new point total

        Raises:
            NotFoundError: If the user does not exist
        """
        content = content.strip()
        if not content:
            raise ValueError("Message content must not be empty")

        now = to_utc_naive(self.clock())

        with self.db.session() as session:
            new_balance = self.ledger.award_points(
                user_id,
                MESSAGE_POINTS,
                operation="message",
                description="Chat message",
                session=session,
            )

            message = Message(user_id=user_id, content=content, is_from_user=True, created_at=now)
            reply = Message(user_id=user_id, content=self.responder(content), is_from_user=False, created_at=now)
            session.add(message)
            session.add(reply)
            session.flush()

        self.logger.info("message_sent", user_id=user_id, message_id=message.id, new_balance=new_balance)
        return Exchange(message=message, reply=reply, new_balance=new_balance)
