"""Direct messages sub-client for the social graph API.

This is an internal module. Import from `client` instead.
"""

from client._base import AsyncBaseClient, BaseClient
from client.models import ConversationResponse, CountResponse, DirectMessage, MarkReadResponse


class MessagesClient(BaseClient):
    """Synchronous client for direct message endpoints (/messages/*)."""

    _BASE_PATH = "/messages"

    def send(self, recipient_id: str, content: str) -> DirectMessage:
        """Send a direct message.

        Raises:
            ValidationError: If the content is empty or the recipient is the sender.
            NotFoundError: If the recipient does not exist.
        """
        data = self._post(
            self._BASE_PATH, json={"recipient_id": recipient_id, "content": content}
        )
        return DirectMessage(**data)

    def conversations(self) -> list[ConversationResponse]:
        data = self._get(f"{self._BASE_PATH}/conversations")
        return [ConversationResponse(**item) for item in data]

    def conversation(self, account_id: str) -> list[DirectMessage]:
        """Both directions of a conversation, oldest first (marks it read)."""
        data = self._get(f"{self._BASE_PATH}/conversations/{account_id}")
        return [DirectMessage(**item) for item in data]

    def mark_read(self, account_id: str) -> int:
        data = self._post(f"{self._BASE_PATH}/conversations/{account_id}/read")
        return MarkReadResponse(**data).marked

    def unread_count(self) -> int:
        return CountResponse(**self._get(f"{self._BASE_PATH}/unread-count")).count


class AsyncMessagesClient(AsyncBaseClient):
    """Asynchronous client for direct message endpoints (/messages/*)."""

    _BASE_PATH = "/messages"

    async def send(self, recipient_id: str, content: str) -> DirectMessage:
        data = await self._post(
            self._BASE_PATH, json={"recipient_id": recipient_id, "content": content}
        )
        return DirectMessage(**data)

    async def conversations(self) -> list[ConversationResponse]:
        data = await self._get(f"{self._BASE_PATH}/conversations")
        return [ConversationResponse(**item) for item in data]

    async def conversation(self, account_id: str) -> list[DirectMessage]:
        data = await self._get(f"{self._BASE_PATH}/conversations/{account_id}")
        return [DirectMessage(**item) for item in data]

    async def mark_read(self, account_id: str) -> int:
        data = await self._post(f"{self._BASE_PATH}/conversations/{account_id}/read")
        return MarkReadResponse(**data).marked

    async def unread_count(self) -> int:
        return CountResponse(**await self._get(f"{self._BASE_PATH}/unread-count")).count
