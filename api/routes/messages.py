"""Direct message endpoints."""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from api.dependencies import ActorDep, ServiceDep
from api.models import AccountSummary, CountResponse
from models.message import DirectMessage

router = APIRouter(
    prefix="/messages",
    tags=["messages"],
)


class SendMessageRequest(BaseModel):
    """Request model for sending a direct message.

    Attributes:
        recipient_id: Account to send to.
        content: Message text.
    """

    recipient_id: str = Field(description="Recipient account id")
    content: str = Field(description="Message text")


class ConversationResponse(BaseModel):
    """One entry of the conversation list.

    Attributes:
        account: The other participant's summary (None if the account is gone).
        last_message: Most recent message in either direction.
        unread_count: Messages from the other participant not yet read.
    """

    account: AccountSummary | None
    last_message: DirectMessage
    unread_count: int


class MarkReadResponse(BaseModel):
    """Response model for marking a conversation read.

    Attributes:
        marked: Number of messages marked as read.
    """

    marked: int


@router.post("", response_model=DirectMessage, status_code=201)
async def send_message(
    request: SendMessageRequest, service: ServiceDep, actor_id: ActorDep
) -> DirectMessage:
    """Send a direct message.

    Args:
        request: Recipient and text.
        service: The social graph service dependency.
        actor_id: The acting account.

    Returns:
        The stored message.
    """
    return service.send_message(actor_id, request.recipient_id, request.content)


@router.get("/conversations", response_model=list[ConversationResponse])
async def list_conversations(
    service: ServiceDep, actor_id: ActorDep
) -> list[ConversationResponse]:
    """List the requester's conversations, most recently active first."""
    return service.list_conversations(actor_id)


@router.get("/conversations/{account_id}", response_model=list[DirectMessage])
async def get_conversation(
    account_id: str, service: ServiceDep, actor_id: ActorDep
) -> list[DirectMessage]:
    """Get the conversation with another account, oldest first.

    Messages addressed to the requester are marked as read.
    """
    return service.get_conversation(actor_id, account_id)


@router.post("/conversations/{account_id}/read", response_model=MarkReadResponse)
async def mark_conversation_read(
    account_id: str, service: ServiceDep, actor_id: ActorDep
) -> MarkReadResponse:
    """Mark every message from another account as read."""
    return MarkReadResponse(marked=service.mark_conversation_read(actor_id, account_id))


@router.get("/unread-count", response_model=CountResponse)
async def unread_count(service: ServiceDep, actor_id: ActorDep) -> CountResponse:
    """Count unread messages addressed to the requester."""
    return CountResponse(count=service.unread_message_count(actor_id))
