"""Notification dedup store.

Keeps at most one live notification per (recipient, sender, type, related
post) key. Emitting a notification whose key already exists only moves the
existing record's ``created_at`` forward, so repeated actions bump it to the
top of the recipient's list without adding another unread entry.
"""

import logging
from typing import Optional

from models.clock import ServiceClock
from models.errors import UnauthorizedError
from models.notification import Notification, NotificationType
from models.store import DocumentStore

logger = logging.getLogger(__name__)

NOTIFICATIONS = "notifications"


class NotificationStore:
    """Lookup and upsert of notifications by dedup key.

    Attributes:
        store: Document store holding the "notifications" collection.
        clock: Clock used for created_at.
    """

    def __init__(self, store: DocumentStore, clock: ServiceClock) -> None:
        self.store = store
        self.clock = clock

    @staticmethod
    def _key_criteria(
        recipient_id: str,
        sender_id: str,
        type: NotificationType,
        related_post_id: Optional[str],
    ) -> dict:
        return {
            "recipient_id": recipient_id,
            "sender_id": sender_id,
            "type": type,
            "related_post_id": related_post_id,
        }

    def upsert(
        self,
        recipient_id: str,
        sender_id: str,
        type: NotificationType,
        related_post_id: Optional[str] = None,
        related_comment_text: Optional[str] = None,
    ) -> Optional[Notification]:
        """Create a notification, or refresh the one with the same key.

        A refresh only updates ``created_at``; the read flag and the stored
        comment text are left alone.

        Args:
            recipient_id: Account to notify.
            sender_id: Account whose action triggered the notification.
            type: Notification type.
            related_post_id: Post involved, if any (part of the key).
            related_comment_text: Comment text stored on creation.

        Returns:
            The created or refreshed notification, or None when the sender
            is the recipient (no self-notifications).
        """
        if recipient_id == sender_id:
            return None

        now = self.clock.now()
        notification, created = self.store.find_one_and_upsert(
            NOTIFICATIONS,
            criteria=self._key_criteria(recipient_id, sender_id, type, related_post_id),
            update={"created_at": now},
            factory=lambda: Notification(
                recipient_id=recipient_id,
                sender_id=sender_id,
                type=type,
                related_post_id=related_post_id,
                related_comment_text=related_comment_text,
                created_at=now,
            ),
        )

        if created:
            logger.info(
                f"Created {type.value} notification {notification.notification_id} "
                f"for {recipient_id} from {sender_id}"
            )
        else:
            logger.debug(f"Refreshed notification {notification.notification_id}")
        return notification

    def find(
        self,
        recipient_id: str,
        sender_id: str,
        type: NotificationType,
        related_post_id: Optional[str] = None,
    ) -> Optional[Notification]:
        """Return the live notification for a key, if any."""
        return self.store.find_one(
            NOTIFICATIONS,
            **self._key_criteria(recipient_id, sender_id, type, related_post_id),
        )

    def discard(
        self,
        recipient_id: str,
        sender_id: str,
        type: NotificationType,
        related_post_id: Optional[str] = None,
    ) -> bool:
        """Delete the notification for a key.

        Idempotent: discarding an absent notification is not an error.

        Returns:
            True if a notification was deleted.
        """
        return self.store.delete_one(
            NOTIFICATIONS,
            **self._key_criteria(recipient_id, sender_id, type, related_post_id),
        )

    def get(self, notification_id: str) -> Notification:
        """Return a notification by id.

        Raises:
            NotFoundError: If it does not exist.
        """
        return self.store.require(NOTIFICATIONS, notification_id)

    def list_for(self, recipient_id: str, limit: int | None = None) -> list[Notification]:
        """Return a recipient's notifications, most recent first."""
        return self.store.find(
            NOTIFICATIONS,
            predicate=lambda n: n.recipient_id == recipient_id,
            sort_key=lambda n: n.created_at,
            descending=True,
            limit=limit,
        )

    def unread_count(self, recipient_id: str) -> int:
        """Count a recipient's unread notifications."""
        return self.store.count(
            NOTIFICATIONS,
            predicate=lambda n: n.recipient_id == recipient_id and not n.is_read,
        )

    def mark_read(self, notification_id: str, actor_id: str) -> Notification:
        """Mark a notification as read on behalf of its recipient.

        Raises:
            NotFoundError: If the notification does not exist.
            UnauthorizedError: If actor_id is not the recipient.
        """
        notification = self.get(notification_id)
        if notification.recipient_id != actor_id:
            raise UnauthorizedError("Not authorized to modify this notification")
        return self.store.set_fields(NOTIFICATIONS, notification_id, is_read=True)

    def count(self) -> int:
        return self.store.count(NOTIFICATIONS)

