"""Chat messages API v1 endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from sydai.auth.middleware import get_services, require_auth
from sydai.auth.models import UserAccount
from sydai.messages.models import MessageCreate, MessageResponse
from sydai.services import Services

router = APIRouter(prefix="/messages", tags=["messages"])


class SendMessageResponse(BaseModel):
    message: MessageResponse
    reply: MessageResponse
    points: int


@router.get("", response_model=list[MessageResponse])
async def list_messages(
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    """Get the current user's conversation, oldest first."""
    return services.messages.list_for_user(user.id)


@router.post("", response_model=SendMessageResponse)
async def send_message(
    body: MessageCreate,
    user: UserAccount = Depends(require_auth),
    services: Services = Depends(get_services),
):
    """Send a message; the assistant replies and the user earns 1 point."""
    try:
        exchange = services.messages.send(user.id, body.content)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    return SendMessageResponse(
        message=MessageResponse.model_validate(exchange.message),
        reply=MessageResponse.model_validate(exchange.reply),
        points=exchange.new_balance,
    )
