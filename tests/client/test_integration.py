"""Integration tests for the social graph client library.

These tests run the client against the real FastAPI app, using a transport
that wraps Starlette's TestClient for the synchronous client and httpx's
ASGITransport for the asynchronous one. Each test gets a fresh service.
"""

import httpx
import pytest
from httpx import ASGITransport
from starlette.testclient import TestClient

from api.dependencies import initialize_service, shutdown_service
from client import (
    AsyncSocialClient,
    InvalidOperationError,
    NotFoundError,
    PrivateProfileError,
    SocialClient,
    UnauthorizedError,
    ValidationError,
)
from main import app
from models.config import ServiceSettings


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def fresh_service():
    """Initialize a fresh shared service for each test."""
    service = initialize_service(ServiceSettings())
    yield service
    shutdown_service()


@pytest.fixture
def sync_client():
    """A SocialClient connected to the app through TestClient."""
    test_client = TestClient(app, raise_server_exceptions=False)

    class SyncTestTransport(httpx.BaseTransport):
        def handle_request(self, request: httpx.Request) -> httpx.Response:
            response = test_client.request(
                method=request.method,
                url=str(request.url.path),
                params=dict(request.url.params) if request.url.params else None,
                content=request.content,
                headers=dict(request.headers),
            )
            return httpx.Response(
                status_code=response.status_code,
                headers=response.headers,
                content=response.content,
            )

    with SocialClient(base_url="http://test", transport=SyncTestTransport()) as client:
        yield client


@pytest.fixture
async def async_client():
    """An AsyncSocialClient connected to the app through ASGITransport."""
    transport = ASGITransport(app=app)
    async with AsyncSocialClient(base_url="http://test", transport=transport) as client:
        yield client


# =============================================================================
# Accounts and follows
# =============================================================================


class TestAccountsIntegration:
    def test_create_and_follow(self, sync_client):
        alice = sync_client.accounts.create("alice")
        bob = sync_client.accounts.create("bob")

        sync_client.act_as(alice.account_id)
        status = sync_client.accounts.follow(bob.account_id)

        assert status.following is True
        assert [a.username for a in sync_client.accounts.followers(bob.account_id)] == ["alice"]

    def test_private_account_flow(self, sync_client):
        alice = sync_client.accounts.create("alice")
        carol = sync_client.accounts.create("carol", is_private=True)

        sync_client.act_as(alice.account_id)
        with pytest.raises(PrivateProfileError) as exc_info:
            sync_client.accounts.get_profile("carol")
        assert exc_info.value.account["username"] == "carol"

        assert sync_client.accounts.follow(carol.account_id).has_requested is True

        sync_client.act_as(carol.account_id)
        sync_client.accounts.accept_request(carol.account_id, alice.account_id)

        sync_client.act_as(alice.account_id)
        assert sync_client.accounts.get_profile("carol").is_following is True

    def test_error_mapping(self, sync_client):
        alice = sync_client.accounts.create("alice")

        with pytest.raises(ValidationError):
            sync_client.accounts.create("alice")
        with pytest.raises(UnauthorizedError):
            sync_client.posts.feed()

        sync_client.act_as(alice.account_id)
        with pytest.raises(InvalidOperationError):
            sync_client.accounts.follow(alice.account_id)
        with pytest.raises(NotFoundError):
            sync_client.posts.get("missing")


# =============================================================================
# Posts, stories, notifications, messages
# =============================================================================


class TestContentIntegration:
    def test_post_like_and_notification(self, sync_client):
        alice = sync_client.accounts.create("alice")
        bob = sync_client.accounts.create("bob")

        sync_client.act_as(bob.account_id)
        post = sync_client.posts.create("media/b.jpg", caption="hi")

        sync_client.act_as(alice.account_id)
        assert sync_client.posts.like(post.post_id).liked is True
        assert sync_client.posts.bookmark(post.post_id) is True

        sync_client.act_as(bob.account_id)
        notifications = sync_client.notifications.list()
        assert [n.type for n in notifications] == ["like"]
        assert sync_client.notifications.unread_count() == 1

    def test_stories(self, sync_client):
        alice = sync_client.accounts.create("alice")
        sync_client.act_as(alice.account_id)

        story = sync_client.stories.create("media/s.jpg")

        assert [s.story_id for s in sync_client.stories.feed().own_stories] == [story.story_id]

    def test_messages(self, sync_client):
        alice = sync_client.accounts.create("alice")
        bob = sync_client.accounts.create("bob")

        sync_client.act_as(alice.account_id)
        sync_client.messages.send(bob.account_id, "hello")

        sync_client.act_as(bob.account_id)
        assert sync_client.messages.unread_count() == 1
        assert [m.content for m in sync_client.messages.conversation(alice.account_id)] == ["hello"]
        assert sync_client.messages.unread_count() == 0


class TestMaintenanceIntegration:
    def test_health_and_validate(self, sync_client):
        assert sync_client.health() == {"status": "healthy"}
        assert sync_client.validate().valid is True
        assert sync_client.repair_follow_edges().total_changes == 0


class TestAsyncIntegration:
    async def test_follow_and_feed(self, async_client):
        alice = await async_client.accounts.create("alice")
        bob = await async_client.accounts.create("bob")

        async_client.act_as(bob.account_id)
        post = await async_client.posts.create("media/b.jpg")

        async_client.act_as(alice.account_id)
        await async_client.accounts.follow(bob.account_id)
        feed = await async_client.posts.feed()

        assert [p.post_id for p in feed] == [post.post_id]
