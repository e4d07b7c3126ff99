"""Notification endpoints.

Notifications are listed newest first, with the sending account's public
summary attached as ``user``. Follow-request notifications can be accepted
or declined directly.
"""

from datetime import datetime

from fastapi import APIRouter
from pydantic import BaseModel

from api.dependencies import ActorDep, ServiceDep
from api.models import AccountSummary, ActionResponse, CountResponse
from models.follow import FollowStatus
from models.notification import Notification, NotificationType
from models.service import SocialGraphService

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
)


class NotificationResponse(BaseModel):
    """A notification as presented to its recipient.

    Attributes:
        notification_id: Notification identifier.
        type: What happened.
        user: Public summary of the sender (None if the account is gone).
        related_post_id: Post involved, if any.
        related_comment_text: Comment text for comment notifications.
        is_read: Whether it has been read.
        created_at: When the action last happened.
    """

    notification_id: str
    type: NotificationType
    user: AccountSummary | None
    related_post_id: str | None = None
    related_comment_text: str | None = None
    is_read: bool
    created_at: datetime


def present_notification(
    service: SocialGraphService, notification: Notification
) -> NotificationResponse:
    """Attach the sender's summary to a notification."""
    return NotificationResponse(
        notification_id=notification.notification_id,
        type=notification.type,
        user=service.get_summary(notification.sender_id),
        related_post_id=notification.related_post_id,
        related_comment_text=notification.related_comment_text,
        is_read=notification.is_read,
        created_at=notification.created_at,
    )


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    service: ServiceDep, actor_id: ActorDep
) -> list[NotificationResponse]:
    """List the requester's notifications, newest first.

    Args:
        service: The social graph service dependency.
        actor_id: The acting account.

    Returns:
        At most one page of notifications.
    """
    return [present_notification(service, n) for n in service.list_notifications(actor_id)]


@router.get("/unread-count", response_model=CountResponse)
async def unread_count(service: ServiceDep, actor_id: ActorDep) -> CountResponse:
    """Count the requester's unread notifications."""
    return CountResponse(count=service.unread_notification_count(actor_id))


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: str, service: ServiceDep, actor_id: ActorDep
) -> NotificationResponse:
    """Mark one of the requester's notifications as read."""
    notification = service.mark_notification_read(actor_id, notification_id)
    return present_notification(service, notification)


@router.post("/{notification_id}/accept", response_model=FollowStatus)
async def accept_request(
    notification_id: str, service: ServiceDep, actor_id: ActorDep
) -> FollowStatus:
    """Accept the follow request a notification refers to.

    Returns:
        The sender's follow status towards the requester after acceptance.
    """
    return service.accept_request_notification(actor_id, notification_id)


@router.post("/{notification_id}/decline", response_model=ActionResponse)
async def decline_request(
    notification_id: str, service: ServiceDep, actor_id: ActorDep
) -> ActionResponse:
    """Decline the follow request a notification refers to."""
    service.decline_request_notification(actor_id, notification_id)
    return ActionResponse(message="Follow request declined")
