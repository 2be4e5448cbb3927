"""Chat messages with a scripted auto-responder (+1 point per user message)."""

from sydai.messages.models import Message
from sydai.messages.service import MessageService

__all__ = ["Message", "MessageService"]
