"""Social graph API client library.

Typed Python client for the social graph REST API, with synchronous and
asynchronous variants.

Example:
    Synchronous usage::

        from client import SocialClient

        with SocialClient(base_url="http://localhost:8000", account_id=alice_id) as client:
            status = client.accounts.follow(bob_id)
            feed = client.posts.feed()

    Asynchronous usage::

        from client import AsyncSocialClient

        async with AsyncSocialClient(account_id=alice_id) as client:
            await client.posts.like(post_id)

Exports:
    SocialClient: Synchronous client.
    AsyncSocialClient: Asynchronous client.

    Exceptions:
        SocialClientError: Base exception for all client errors.
        ConnectionError: Failed to connect to the server.
        TimeoutError: Request timed out.
        APIError: Server returned an error response.
        ValidationError: Rejected content (HTTP 400/422).
        InvalidOperationError: Nonsensical action (HTTP 400).
        UnauthorizedError: Missing actor or rights (HTTP 401).
        PrivateProfileError: Private account (HTTP 403).
        NotFoundError: Resource not found (HTTP 404).
        ConflictError: State conflict (HTTP 409).
        ServerError: Server-side error (HTTP 5xx).
"""

from client._accounts import AccountsClient, AsyncAccountsClient
from client._messages import AsyncMessagesClient, MessagesClient
from client._notifications import AsyncNotificationsClient, NotificationsClient
from client._posts import AsyncPostsClient, PostsClient
from client._stories import AsyncStoriesClient, StoriesClient
from client.client import AsyncSocialClient, SocialClient
from client.exceptions import (
    APIError,
    ConflictError,
    ConnectionError,
    InvalidOperationError,
    NotFoundError,
    PrivateProfileError,
    ServerError,
    SocialClientError,
    TimeoutError,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    # Main clients
    "SocialClient",
    "AsyncSocialClient",
    # Sub-clients
    "AccountsClient",
    "AsyncAccountsClient",
    "PostsClient",
    "AsyncPostsClient",
    "StoriesClient",
    "AsyncStoriesClient",
    "NotificationsClient",
    "AsyncNotificationsClient",
    "MessagesClient",
    "AsyncMessagesClient",
    # Exceptions
    "SocialClientError",
    "ConnectionError",
    "TimeoutError",
    "APIError",
    "ValidationError",
    "InvalidOperationError",
    "UnauthorizedError",
    "PrivateProfileError",
    "NotFoundError",
    "ConflictError",
    "ServerError",
]
