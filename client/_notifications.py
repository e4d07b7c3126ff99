"""Notifications sub-client for the social graph API.

This is an internal module. Import from `client` instead.
"""

from client._base import AsyncBaseClient, BaseClient
from client.models import ActionResponse, CountResponse, FollowStatus, NotificationResponse


class NotificationsClient(BaseClient):
    """Synchronous client for notification endpoints (/notifications/*).

    Example:
        for notification in client.notifications.list():
            if notification.type == "follow_request":
                client.notifications.accept(notification.notification_id)
    """

    _BASE_PATH = "/notifications"

    def list(self) -> list[NotificationResponse]:
        """The acting account's notifications, newest first."""
        return [NotificationResponse(**item) for item in self._get(self._BASE_PATH)]

    def unread_count(self) -> int:
        return CountResponse(**self._get(f"{self._BASE_PATH}/unread-count")).count

    def mark_read(self, notification_id: str) -> NotificationResponse:
        data = self._post(f"{self._BASE_PATH}/{notification_id}/read")
        return NotificationResponse(**data)

    def accept(self, notification_id: str) -> FollowStatus:
        """Accept the follow request a notification refers to.

        Raises:
            NotFoundError: If the notification is absent or not a follow request.
            UnauthorizedError: If it is addressed to another account.
        """
        return FollowStatus(**self._post(f"{self._BASE_PATH}/{notification_id}/accept"))

    def decline(self, notification_id: str) -> ActionResponse:
        """Decline the follow request a notification refers to."""
        return ActionResponse(**self._post(f"{self._BASE_PATH}/{notification_id}/decline"))


class AsyncNotificationsClient(AsyncBaseClient):
    """Asynchronous client for notification endpoints (/notifications/*)."""

    _BASE_PATH = "/notifications"

    async def list(self) -> list[NotificationResponse]:
        return [NotificationResponse(**item) for item in await self._get(self._BASE_PATH)]

    async def unread_count(self) -> int:
        return CountResponse(**await self._get(f"{self._BASE_PATH}/unread-count")).count

    async def mark_read(self, notification_id: str) -> NotificationResponse:
        data = await self._post(f"{self._BASE_PATH}/{notification_id}/read")
        return NotificationResponse(**data)

    async def accept(self, notification_id: str) -> FollowStatus:
        data = await self._post(f"{self._BASE_PATH}/{notification_id}/accept")
        return FollowStatus(**data)

    async def decline(self, notification_id: str) -> ActionResponse:
        data = await self._post(f"{self._BASE_PATH}/{notification_id}/decline")
        return ActionResponse(**data)
