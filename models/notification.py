"""Notification model."""

import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class NotificationType(str, Enum):
    """Kinds of notification the service emits."""

    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    FOLLOW_REQUEST = "follow_request"
    FOLLOW_REQUEST_ACCEPTED = "follow_request_accepted"


class Notification(BaseModel):
    """A notification addressed to one account.

    At most one notification exists per dedup key; repeating the action that
    produced it only moves ``created_at`` forward.

    Args:
        notification_id: Unique notification identifier.
        recipient_id: Account the notification is for.
        sender_id: Account whose action produced it.
        type: What happened.
        related_post_id: Post involved (like/comment), if any.
        related_comment_text: Comment text for comment notifications.
        is_read: Whether the recipient has read it.
        created_at: When the action last happened.
    """

    notification_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    recipient_id: str
    sender_id: str
    type: NotificationType
    related_post_id: Optional[str] = None
    related_comment_text: Optional[str] = None
    is_read: bool = False
    created_at: datetime

    @property
    def dedup_key(self) -> tuple[str, str, NotificationType, Optional[str]]:
        """(recipient, sender, type, related post) identifying this notification."""
        return (self.recipient_id, self.sender_id, self.type, self.related_post_id)
