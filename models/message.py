"""Direct message model."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class DirectMessage(BaseModel):
    """A private message between two accounts.

    Args:
        message_id: Unique message identifier.
        sender_id: Account that sent the message.
        recipient_id: Account the message was sent to.
        content: Trimmed message text.
        is_read: Whether the recipient has read it.
        created_at: When the message was sent.
    """

    message_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    sender_id: str
    recipient_id: str
    content: str
    is_read: bool = False
    created_at: datetime

    def counterpart(self, account_id: str) -> str:
        """Return the other participant from account_id's point of view."""
        return self.recipient_id if self.sender_id == account_id else self.sender_id
