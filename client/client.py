"""Main social graph client classes.

This module provides the entry points for talking to the social graph API:
- SocialClient: Synchronous client
- AsyncSocialClient: Asynchronous client

Both expose the API through namespaced sub-clients (``accounts``, ``posts``,
``stories``, ``notifications``, ``messages``) and send every request on
behalf of one acting account.

Example:
    Synchronous usage::

        from client import SocialClient

        with SocialClient(base_url="http://localhost:8000") as anon:
            alice = anon.accounts.create("alice")

        with SocialClient(account_id=alice.account_id) as client:
            post = client.posts.create("media/123.jpg", caption="hello")
            print(client.notifications.unread_count())

    Asynchronous usage::

        from client import AsyncSocialClient

        async with AsyncSocialClient(account_id=alice_id) as client:
            await client.accounts.follow(bob_id)
"""

from typing import Any

from client._accounts import AccountsClient, AsyncAccountsClient
from client._http import AsyncHTTPClient, HTTPClient
from client._messages import AsyncMessagesClient, MessagesClient
from client._notifications import AsyncNotificationsClient, NotificationsClient
from client._posts import AsyncPostsClient, PostsClient
from client._stories import AsyncStoriesClient, StoriesClient
from client.models import RepairResponse, ValidateResponse


class SocialClient:
    """Synchronous client for the social graph REST API.

    Attributes:
        base_url: The base URL of the server.
        account_id: Acting account sent as X-Account-Id (None for anonymous calls).
        accounts: Account and follow-graph endpoints.
        posts: Post and engagement endpoints.
        stories: Story endpoints.
        notifications: Notification endpoints.
        messages: Direct message endpoints.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        account_id: str | None = None,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: Any = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: The base URL of the server.
            account_id: Acting account for every request.
            timeout: Request timeout in seconds.
            retry_enabled: Whether to retry with exponential backoff. Connection
                errors are retried for every request; timeouts and HTTP
                502/503/504 only for GET and PUT.
            max_retries: Maximum number of retry attempts when retry is enabled.
            transport: Custom HTTP transport (e.g. for testing).
        """
        self._http = HTTPClient(
            base_url=base_url,
            account_id=account_id,
            timeout=timeout,
            retry_enabled=retry_enabled,
            max_retries=max_retries,
            transport=transport,
        )
        self.accounts = AccountsClient(self._http)
        self.posts = PostsClient(self._http)
        self.stories = StoriesClient(self._http)
        self.notifications = NotificationsClient(self._http)
        self.messages = MessagesClient(self._http)

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @property
    def account_id(self) -> str | None:
        return self._http.account_id

    def act_as(self, account_id: str | None) -> None:
        """Switch the acting account for subsequent requests."""
        self._http.account_id = account_id

    def __enter__(self) -> "SocialClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the client and release resources."""
        self._http.close()

    def health(self) -> dict[str, Any]:
        return self._http.get("/health")

    def repair_follow_edges(self) -> RepairResponse:
        """Run the follow-edge repair pass on the server."""
        return RepairResponse(**self._http.post("/maintenance/repair"))

    def validate(self) -> ValidateResponse:
        """Check follow-graph invariants on the server."""
        return ValidateResponse(**self._http.get("/maintenance/validate"))


class AsyncSocialClient:
    """Asynchronous client for the social graph REST API.

    Same surface as SocialClient; every method is a coroutine.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        account_id: str | None = None,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: Any = None,
    ) -> None:
        self._http = AsyncHTTPClient(
            base_url=base_url,
            account_id=account_id,
            timeout=timeout,
            retry_enabled=retry_enabled,
            max_retries=max_retries,
            transport=transport,
        )
        self.accounts = AsyncAccountsClient(self._http)
        self.posts = AsyncPostsClient(self._http)
        self.stories = AsyncStoriesClient(self._http)
        self.notifications = AsyncNotificationsClient(self._http)
        self.messages = AsyncMessagesClient(self._http)

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @property
    def account_id(self) -> str | None:
        return self._http.account_id

    def act_as(self, account_id: str | None) -> None:
        """Switch the acting account for subsequent requests."""
        self._http.account_id = account_id

    async def __aenter__(self) -> "AsyncSocialClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self._http.close()

    async def health(self) -> dict[str, Any]:
        return await self._http.get("/health")

    async def repair_follow_edges(self) -> RepairResponse:
        return RepairResponse(**await self._http.post("/maintenance/repair"))

    async def validate(self) -> ValidateResponse:
        return ValidateResponse(**await self._http.get("/maintenance/validate"))
