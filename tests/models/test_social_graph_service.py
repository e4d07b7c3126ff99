"""Tests for SocialGraphService.

Exercises the account, post, story, notification and message operations
through the service, including the privacy gate on every read path.
"""

import threading
from datetime import timedelta

import pytest

from models.errors import (
    NotFoundError,
    PrivateProfileError,
    UnauthorizedError,
    ValidationError,
)
from models.notification import Notification, NotificationType
from tests.fixtures.core.clocks import create_clock
from tests.fixtures.core.services import create_service


# =============================================================================
# Accounts
# =============================================================================


class TestAccounts:
    def test_create_account(self, service, clock):
        account = service.create_account("  dave  ", name="Dave")
        assert account.username == "dave"
        assert account.created_at == clock.now()
        assert service.get_account(account.account_id).name == "Dave"

    def test_username_required_and_unique(self, service, alice):
        with pytest.raises(ValidationError, match="required"):
            service.create_account("   ")
        with pytest.raises(ValidationError, match="already taken"):
            service.create_account("alice")

    def test_get_profile_public(self, service, alice, bob):
        service.create_post(bob.account_id, "media/1.jpg")
        service.toggle_follow(alice.account_id, bob.account_id)

        profile = service.get_profile(alice.account_id, "bob")

        assert profile["posts_count"] == 1
        assert profile["followers_count"] == 1
        assert profile["is_following"] is True
        assert profile["is_own_profile"] is False
        assert "follow_requests" not in profile

    def test_get_profile_private_denied(self, service, alice, carol):
        service.toggle_follow(alice.account_id, carol.account_id)

        with pytest.raises(PrivateProfileError) as exc_info:
            service.get_profile(alice.account_id, "carol")

        assert exc_info.value.account["username"] == "carol"
        assert exc_info.value.account["has_requested"] is True

    def test_own_profile_lists_requests(self, service, alice, carol):
        service.toggle_follow(alice.account_id, carol.account_id)

        profile = service.get_profile(carol.account_id, "carol")

        assert profile["is_own_profile"] is True
        assert [r["username"] for r in profile["follow_requests"]] == ["alice"]

    def test_get_profile_unknown_username(self, service, alice):
        with pytest.raises(NotFoundError):
            service.get_profile(alice.account_id, "nobody")

    def test_search(self, service, alice, bob, carol):
        service.create_account("bobby", name="Robert")

        results = service.search_accounts(alice.account_id, " BOB ")
        assert [r["username"] for r in results] == ["bob", "bobby"]

        assert service.search_accounts(alice.account_id, "rob")[0]["username"] == "bobby"
        assert service.search_accounts(alice.account_id, "ali") == []

    def test_search_query_too_short(self, service, alice):
        with pytest.raises(ValidationError, match="at least 2"):
            service.search_accounts(alice.account_id, " a ")

    def test_search_limit(self, clock):
        service = create_service(clock, search_limit=2)
        viewer = service.create_account("viewer")
        for i in range(5):
            service.create_account(f"user{i}")
        assert len(service.search_accounts(viewer.account_id, "user")) == 2

    def test_suggestions_exclude_self_and_followed(self, service, alice, bob, carol):
        dave = service.create_account("dave")
        service.toggle_follow(alice.account_id, bob.account_id)
        service.toggle_follow(dave.account_id, carol.account_id)
        service.accept_follow_request(carol.account_id, carol.account_id, dave.account_id)

        suggestions = service.suggest_accounts(alice.account_id)

        usernames = [s["username"] for s in suggestions]
        assert usernames[0] == "carol"
        assert "alice" not in usernames
        assert "bob" not in usernames

    def test_update_profile(self, service, alice, bob):
        updated = service.update_profile(alice.account_id, bio="hi", is_private=True)
        assert updated.bio == "hi"
        assert updated.is_private is True

        with pytest.raises(ValidationError, match="already taken"):
            service.update_profile(alice.account_id, username="bob")
        assert service.update_profile(alice.account_id, username="alice").username == "alice"

    def test_concurrent_signups_claim_username_once(self, service):
        outcomes = []

        def sign_up():
            try:
                outcomes.append(service.create_account("dave"))
            except ValidationError:
                outcomes.append(None)

        threads = [threading.Thread(target=sign_up) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sum(1 for o in outcomes if o is not None) == 1
        assert service.store.count("accounts", lambda a: a.username == "dave") == 1

    def test_toggle_private_only_by_owner(self, service, alice, bob):
        assert service.toggle_private(alice.account_id, alice.account_id) is True
        assert service.toggle_private(alice.account_id, alice.account_id) is False
        with pytest.raises(UnauthorizedError):
            service.toggle_private(bob.account_id, alice.account_id)

    def test_followers_and_following_lists(self, service, alice, bob):
        service.toggle_follow(alice.account_id, bob.account_id)

        assert [a["username"] for a in service.list_followers(alice.account_id, bob.account_id)] == ["alice"]
        assert [a["username"] for a in service.list_following(bob.account_id, alice.account_id)] == ["bob"]

    def test_follower_lists_gated(self, service, alice, carol):
        with pytest.raises(PrivateProfileError):
            service.list_followers(alice.account_id, carol.account_id)

    def test_accept_requires_account_owner(self, service, alice, bob, carol):
        service.toggle_follow(alice.account_id, carol.account_id)
        with pytest.raises(UnauthorizedError):
            service.accept_follow_request(bob.account_id, carol.account_id, alice.account_id)
        with pytest.raises(UnauthorizedError):
            service.decline_follow_request(bob.account_id, carol.account_id, alice.account_id)


# =============================================================================
# Posts
# =============================================================================


class TestPosts:
    def test_create_post_requires_media(self, service, alice):
        with pytest.raises(ValidationError, match="Media"):
            service.create_post(alice.account_id, "  ")

    def test_feed_contains_own_and_followed_newest_first(self, service, clock, alice, bob, carol):
        service.create_post(bob.account_id, "media/bob.jpg")
        clock.advance(timedelta(minutes=1))
        service.create_post(alice.account_id, "media/alice.jpg")
        clock.advance(timedelta(minutes=1))
        service.create_post(carol.account_id, "media/carol.jpg")
        service.toggle_follow(alice.account_id, bob.account_id)

        feed = service.feed(alice.account_id)

        assert [p["media_url"] for p in feed] == ["media/alice.jpg", "media/bob.jpg"]

    def test_feed_hides_archived(self, service, alice):
        post = service.create_post(alice.account_id, "media/1.jpg")
        service.set_archived(alice.account_id, post.post_id, True)

        assert service.feed(alice.account_id) == []
        assert [p["post_id"] for p in service.list_archived(alice.account_id)] == [post.post_id]

        service.set_archived(alice.account_id, post.post_id, False)
        assert len(service.feed(alice.account_id)) == 1

    def test_get_post_private_owner(self, service, alice, carol):
        post = service.create_post(carol.account_id, "media/c.jpg")
        with pytest.raises(PrivateProfileError):
            service.get_post(alice.account_id, post.post_id)

        service.toggle_follow(alice.account_id, carol.account_id)
        service.accept_follow_request(carol.account_id, carol.account_id, alice.account_id)
        assert service.get_post(alice.account_id, post.post_id)["post_id"] == post.post_id

    def test_archived_post_hidden_from_others(self, service, alice, bob):
        post = service.create_post(bob.account_id, "media/b.jpg")
        service.set_archived(bob.account_id, post.post_id, True)

        with pytest.raises(NotFoundError):
            service.get_post(alice.account_id, post.post_id)
        assert service.get_post(bob.account_id, post.post_id)["is_archived"] is True

    def test_post_view_flags(self, service, alice, bob):
        post = service.create_post(bob.account_id, "media/b.jpg")
        service.toggle_like(alice.account_id, post.post_id)
        service.toggle_bookmark(alice.account_id, post.post_id)
        service.add_comment(alice.account_id, post.post_id, "wow")

        view = service.get_post(alice.account_id, post.post_id)
        assert view["liked"] is True
        assert view["bookmarked"] is True
        assert view["likes_count"] == 1
        assert view["comments_count"] == 1
        assert "bookmarks" not in view

        assert service.get_post(bob.account_id, post.post_id)["bookmarked"] is False
        assert [p["post_id"] for p in service.list_bookmarked(alice.account_id)] == [post.post_id]

    def test_list_account_posts_gated(self, service, alice, carol):
        service.create_post(carol.account_id, "media/c.jpg")
        with pytest.raises(PrivateProfileError):
            service.list_account_posts(alice.account_id, carol.account_id)
        assert len(service.list_account_posts(carol.account_id, carol.account_id)) == 1

    def test_delete_post_owner_only(self, service, alice, bob):
        post = service.create_post(bob.account_id, "media/b.jpg")
        with pytest.raises(UnauthorizedError):
            service.delete_post(alice.account_id, post.post_id)
        service.delete_post(bob.account_id, post.post_id)
        with pytest.raises(NotFoundError):
            service.get_post(bob.account_id, post.post_id)


# =============================================================================
# Stories
# =============================================================================


class TestStories:
    def test_story_feed(self, service, alice, bob, carol):
        service.toggle_follow(alice.account_id, bob.account_id)
        bob_story = service.create_story(bob.account_id, "media/s1.jpg")
        own = service.create_story(alice.account_id, "media/s2.jpg")
        service.create_story(carol.account_id, "media/s3.jpg")

        feed = service.story_feed(alice.account_id)

        assert [s.story_id for s in feed["stories"]] == [bob_story.story_id]
        assert [s.story_id for s in feed["own_stories"]] == [own.story_id]

    def test_stories_expire_after_ttl(self, clock):
        service = create_service(clock, story_ttl_hours=1)
        alice = service.create_account("alice")
        story = service.create_story(alice.account_id, "media/s.jpg")

        clock.advance(timedelta(minutes=59))
        assert len(service.list_account_stories(alice.account_id, alice.account_id)) == 1

        clock.advance(timedelta(minutes=1))
        assert service.list_account_stories(alice.account_id, alice.account_id) == []
        with pytest.raises(NotFoundError):
            service.view_story(alice.account_id, story.story_id)

    def test_view_records_viewer_once(self, service, alice, bob):
        story = service.create_story(bob.account_id, "media/s.jpg")

        service.view_story(alice.account_id, story.story_id)
        viewed = service.view_story(alice.account_id, story.story_id)
        assert [v.viewer_id for v in viewed.views] == [alice.account_id]

        assert service.view_story(bob.account_id, story.story_id).views == viewed.views

    def test_repeat_view_does_not_write(self, service, alice, bob, monkeypatch):
        story = service.create_story(bob.account_id, "media/s.jpg")
        service.view_story(alice.account_id, story.story_id)

        writes = []
        monkeypatch.setattr(service.store, "add_to_set", lambda *a, **kw: writes.append(a))
        service.view_story(alice.account_id, story.story_id)

        assert writes == []

    def test_private_stories_gated(self, service, alice, carol):
        story = service.create_story(carol.account_id, "media/s.jpg")
        with pytest.raises(PrivateProfileError):
            service.view_story(alice.account_id, story.story_id)
        with pytest.raises(PrivateProfileError):
            service.list_account_stories(alice.account_id, carol.account_id)

    def test_delete_story_owner_only(self, service, alice, bob):
        story = service.create_story(bob.account_id, "media/s.jpg")
        with pytest.raises(UnauthorizedError):
            service.delete_story(alice.account_id, story.story_id)
        service.delete_story(bob.account_id, story.story_id)
        assert service.story_feed(bob.account_id)["own_stories"] == []


# =============================================================================
# Notifications
# =============================================================================


class TestNotifications:
    def test_list_and_unread_count(self, service, clock, alice, bob):
        post = service.create_post(bob.account_id, "media/b.jpg")
        service.toggle_like(alice.account_id, post.post_id)
        clock.advance(timedelta(minutes=1))
        service.toggle_follow(alice.account_id, bob.account_id)

        listed = service.list_notifications(bob.account_id)
        assert [n.type for n in listed] == [NotificationType.FOLLOW, NotificationType.LIKE]
        assert service.unread_notification_count(bob.account_id) == 2

        service.mark_notification_read(bob.account_id, listed[0].notification_id)
        assert service.unread_notification_count(bob.account_id) == 1

    def test_page_size(self, clock):
        service = create_service(clock, notification_page_size=2)
        owner = service.create_account("owner")
        for i in range(3):
            fan = service.create_account(f"fan{i}")
            service.toggle_follow(fan.account_id, owner.account_id)
        assert len(service.list_notifications(owner.account_id)) == 2

    def test_accept_via_notification(self, service, alice, carol):
        service.toggle_follow(alice.account_id, carol.account_id)
        request = service.list_notifications(carol.account_id)[0]

        status = service.accept_request_notification(carol.account_id, request.notification_id)

        assert status.following is True
        assert service.can_view(alice.account_id, carol.account_id) is True
        assert service.list_notifications(carol.account_id) == []
        accepted = service.list_notifications(alice.account_id)[0]
        assert accepted.type == NotificationType.FOLLOW_REQUEST_ACCEPTED

    def test_decline_via_notification(self, service, alice, carol):
        service.toggle_follow(alice.account_id, carol.account_id)
        request = service.list_notifications(carol.account_id)[0]

        service.decline_request_notification(carol.account_id, request.notification_id)

        assert service.get_account(carol.account_id).follow_requests == []
        assert service.can_view(alice.account_id, carol.account_id) is False

    def test_accept_rejects_other_types_and_recipients(self, service, alice, bob, carol):
        service.toggle_follow(alice.account_id, bob.account_id)
        follow = service.list_notifications(bob.account_id)[0]
        with pytest.raises(NotFoundError):
            service.accept_request_notification(bob.account_id, follow.notification_id)

        service.toggle_follow(alice.account_id, carol.account_id)
        request = service.list_notifications(carol.account_id)[0]
        with pytest.raises(UnauthorizedError):
            service.accept_request_notification(bob.account_id, request.notification_id)


# =============================================================================
# Direct messages
# =============================================================================


class TestMessages:
    def test_send_and_read_conversation(self, service, clock, alice, bob):
        service.send_message(alice.account_id, bob.account_id, " hi bob ")
        clock.advance(timedelta(minutes=1))
        service.send_message(bob.account_id, alice.account_id, "hi alice")

        assert service.unread_message_count(bob.account_id) == 1

        conversation = service.get_conversation(bob.account_id, alice.account_id)
        assert [m.content for m in conversation] == ["hi bob", "hi alice"]
        assert service.unread_message_count(bob.account_id) == 0
        assert service.unread_message_count(alice.account_id) == 1

    def test_send_validation(self, service, alice):
        with pytest.raises(ValidationError, match="required"):
            service.send_message(alice.account_id, alice.account_id, "   ")
        with pytest.raises(ValidationError, match="yourself"):
            service.send_message(alice.account_id, alice.account_id, "hi")
        with pytest.raises(NotFoundError):
            service.send_message(alice.account_id, "missing", "hi")

    def test_list_conversations(self, service, clock, alice, bob, carol):
        service.send_message(bob.account_id, alice.account_id, "one")
        clock.advance(timedelta(minutes=1))
        service.send_message(carol.account_id, alice.account_id, "two")
        clock.advance(timedelta(minutes=1))
        service.send_message(bob.account_id, alice.account_id, "three")

        conversations = service.list_conversations(alice.account_id)

        assert [c["account"]["username"] for c in conversations] == ["bob", "carol"]
        assert conversations[0]["last_message"].content == "three"
        assert conversations[0]["unread_count"] == 2

        assert service.mark_conversation_read(alice.account_id, bob.account_id) == 2
        assert service.list_conversations(alice.account_id)[0]["unread_count"] == 0


# =============================================================================
# Maintenance
# =============================================================================


class TestMaintenance:
    def test_validate_reports_asymmetric_edge(self, service, alice, bob):
        service.toggle_follow(alice.account_id, bob.account_id)
        assert service.validate() == []

        service.store.remove_from_set("accounts", bob.account_id, "followers", alice.account_id)
        assert len(service.validate()) == 1

        service.repair_follow_edges()
        assert service.validate() == []

    def test_validate_reports_duplicate_notification(self, service, clock, alice, bob):
        service.toggle_follow(alice.account_id, bob.account_id)
        assert service.validate() == []

        service.store.insert(
            "notifications",
            Notification(
                recipient_id=bob.account_id,
                sender_id=alice.account_id,
                type=NotificationType.FOLLOW,
                created_at=clock.now(),
            ),
        )

        errors = service.validate()
        assert len(errors) == 1
        assert "Duplicate notification" in errors[0]

    def test_clear(self, service, alice):
        service.clear()
        with pytest.raises(NotFoundError):
            service.get_account(alice.account_id)

    def test_wall_clock_service(self):
        service = create_service(create_clock(at=None))
        account = service.create_account("someone")
        assert account.created_at.tzinfo is not None
