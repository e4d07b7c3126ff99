"""Unit tests for NotificationStore (notification dedup)."""

from datetime import timedelta

import pytest

from models.errors import NotFoundError, UnauthorizedError
from models.notification import NotificationType


class TestUpsert:
    def test_creates_notification(self, notification_store, clock):
        n = notification_store.upsert("r", "s", NotificationType.FOLLOW)

        assert n.recipient_id == "r"
        assert n.sender_id == "s"
        assert n.type == NotificationType.FOLLOW
        assert n.is_read is False
        assert n.created_at == clock.now()

    def test_self_notification_is_suppressed(self, notification_store):
        assert notification_store.upsert("a", "a", NotificationType.LIKE, related_post_id="p") is None
        assert notification_store.count() == 0

    def test_repeated_key_refreshes_single_record(self, notification_store, clock):
        """Three comments by the same sender on the same post leave one record
        whose created_at is the time of the third call."""
        first = notification_store.upsert(
            "owner", "fan", NotificationType.COMMENT, related_post_id="p1", related_comment_text="one"
        )
        clock.advance(timedelta(minutes=1))
        notification_store.upsert(
            "owner", "fan", NotificationType.COMMENT, related_post_id="p1", related_comment_text="two"
        )
        clock.advance(timedelta(minutes=1))
        third_time = clock.now()
        third = notification_store.upsert(
            "owner", "fan", NotificationType.COMMENT, related_post_id="p1", related_comment_text="three"
        )

        assert notification_store.count() == 1
        assert third.notification_id == first.notification_id
        assert third.created_at == third_time
        assert third.related_comment_text == "one"

    def test_refresh_keeps_read_flag(self, notification_store, clock):
        n = notification_store.upsert("r", "s", NotificationType.LIKE, related_post_id="p")
        notification_store.mark_read(n.notification_id, "r")

        clock.advance(timedelta(seconds=30))
        refreshed = notification_store.upsert("r", "s", NotificationType.LIKE, related_post_id="p")

        assert refreshed.is_read is True
        assert refreshed.created_at == clock.now()

    @pytest.mark.parametrize(
        "other",
        [
            ("r2", "s", NotificationType.LIKE, "p"),
            ("r", "s2", NotificationType.LIKE, "p"),
            ("r", "s", NotificationType.COMMENT, "p"),
            ("r", "s", NotificationType.LIKE, "p2"),
        ],
    )
    def test_any_key_component_distinguishes(self, notification_store, other):
        notification_store.upsert("r", "s", NotificationType.LIKE, related_post_id="p")
        recipient, sender, type_, post = other
        notification_store.upsert(recipient, sender, type_, related_post_id=post)
        assert notification_store.count() == 2


class TestLookup:
    def test_find_and_discard(self, notification_store):
        notification_store.upsert("r", "s", NotificationType.FOLLOW_REQUEST)

        assert notification_store.find("r", "s", NotificationType.FOLLOW_REQUEST) is not None
        assert notification_store.discard("r", "s", NotificationType.FOLLOW_REQUEST) is True
        assert notification_store.find("r", "s", NotificationType.FOLLOW_REQUEST) is None

    def test_discard_absent_is_noop(self, notification_store):
        assert notification_store.discard("r", "s", NotificationType.FOLLOW) is False

    def test_list_for_newest_first_with_limit(self, notification_store, clock):
        for sender in ("a", "b", "c"):
            notification_store.upsert("r", sender, NotificationType.FOLLOW)
            clock.advance(timedelta(minutes=1))
        notification_store.upsert("other", "a", NotificationType.FOLLOW)

        listed = notification_store.list_for("r")
        assert [n.sender_id for n in listed] == ["c", "b", "a"]
        assert len(notification_store.list_for("r", limit=2)) == 2

    def test_refresh_moves_to_top(self, notification_store, clock):
        notification_store.upsert("r", "a", NotificationType.FOLLOW)
        clock.advance(timedelta(minutes=1))
        notification_store.upsert("r", "b", NotificationType.FOLLOW)
        clock.advance(timedelta(minutes=1))
        notification_store.upsert("r", "a", NotificationType.FOLLOW)

        assert [n.sender_id for n in notification_store.list_for("r")] == ["a", "b"]

    def test_get_missing_raises(self, notification_store):
        with pytest.raises(NotFoundError):
            notification_store.get("missing")


class TestMarkRead:
    def test_marks_and_updates_unread_count(self, notification_store):
        n = notification_store.upsert("r", "s", NotificationType.FOLLOW)
        notification_store.upsert("r", "t", NotificationType.FOLLOW)
        assert notification_store.unread_count("r") == 2

        assert notification_store.mark_read(n.notification_id, "r").is_read is True
        assert notification_store.unread_count("r") == 1

    def test_only_recipient_may_mark(self, notification_store):
        n = notification_store.upsert("r", "s", NotificationType.FOLLOW)
        with pytest.raises(UnauthorizedError):
            notification_store.mark_read(n.notification_id, "s")
