"""Social graph service.

SocialGraphService wires the document store to the four core components
(notification dedup store, engagement coordinator, follow state machine,
visibility gate) and exposes every operation the API offers. The acting
account is always passed in explicitly; nothing here holds per-request state.
"""

import logging
from datetime import timedelta
from typing import Any, Optional

from models.account import Account
from models.clock import ServiceClock
from models.config import ServiceSettings
from models.engagement import POSTS, EngagementCoordinator, LikeResult
from models.errors import NotFoundError, UnauthorizedError, ValidationError
from models.follow import ACCOUNTS, FollowStateMachine, FollowStatus, RepairReport
from models.message import DirectMessage
from models.notification import Notification, NotificationType
from models.notification_store import NOTIFICATIONS, NotificationStore
from models.post import Comment, Post
from models.store import DocumentStore
from models.story import Story, StoryView
from models.visibility import VisibilityGate

logger = logging.getLogger(__name__)

STORIES = "stories"
MESSAGES = "messages"


class SocialGraphService:
    """Entry point for every social graph operation.

    Attributes:
        settings: Tunable behaviour.
        clock: Source of timestamps.
        store: Document store with all collections registered.
        notifications: Notification dedup store.
        engagement: Engagement and notification coordinator.
        follows: Follow state machine.
        visibility: Visibility gate.
    """

    def __init__(
        self,
        settings: ServiceSettings | None = None,
        clock: ServiceClock | None = None,
        store: DocumentStore | None = None,
    ) -> None:
        self.settings = settings or ServiceSettings()
        self.clock = clock or ServiceClock()
        self.store = store or DocumentStore(clock=self.clock)

        self.store.create_collection(ACCOUNTS, "account_id", entity="account")
        self.store.create_collection(POSTS, "post_id", entity="post")
        self.store.create_collection(STORIES, "story_id", entity="story")
        self.store.create_collection(NOTIFICATIONS, "notification_id", entity="notification")
        self.store.create_collection(MESSAGES, "message_id", entity="message")
        self.store.ensure_ttl(
            STORIES, "created_at", timedelta(hours=self.settings.story_ttl_hours)
        )

        self.notifications = NotificationStore(self.store, self.clock)
        self.engagement = EngagementCoordinator(self.store, self.notifications, self.clock)
        self.follows = FollowStateMachine(
            self.store,
            self.notifications,
            write_attempts=self.settings.follow_write_attempts,
        )
        self.visibility = VisibilityGate()

    # ===== Accounts =====

    def get_account(self, account_id: str) -> Account:
        """Return an account by id.

        Raises:
            NotFoundError: If it does not exist.
        """
        return self.store.require(ACCOUNTS, account_id)

    def create_account(
        self,
        username: str,
        name: str = "",
        bio: str = "",
        is_private: bool = False,
        profile_pic: str = "",
    ) -> Account:
        """Register a new account.

        Raises:
            ValidationError: If the username is blank or already taken.
        """
        username = (username or "").strip()
        if not username:
            raise ValidationError("Username is required")
        account = self.store.insert_unique(
            ACCOUNTS,
            Account(
                username=username,
                name=name,
                bio=bio,
                is_private=is_private,
                profile_pic=profile_pic,
                created_at=self.clock.now(),
            ),
            username=username,
        )
        if account is None:
            raise ValidationError("Username is already taken")
        logger.info(f"Created account {account.account_id} (@{username})")
        return account

    def get_profile(self, viewer_id: str, username: str) -> dict[str, Any]:
        """Return a profile as seen by viewer_id.

        Raises:
            NotFoundError: If no account has that username.
            PrivateProfileError: If the profile is private to the viewer.
        """
        account = self.store.find_one(ACCOUNTS, username=username)
        if account is None:
            raise NotFoundError("account", username)
        self.visibility.ensure_can_view(viewer_id, account)

        is_own = viewer_id == account.account_id
        profile = account.summary()
        profile.update(
            {
                "bio": account.bio,
                "created_at": account.created_at,
                "posts_count": self.store.count(
                    POSTS,
                    lambda p: p.owner_id == account.account_id and not p.is_archived,
                ),
                "is_own_profile": is_own,
                "is_following": viewer_id in account.followers,
                "has_requested": viewer_id in account.follow_requests,
            }
        )
        if is_own:
            profile["follow_requests"] = self._summaries(account.follow_requests)
        return profile

    def search_accounts(self, viewer_id: str, query: str) -> list[dict[str, Any]]:
        """Find accounts whose username or name contains the query.

        Raises:
            ValidationError: If the trimmed query is too short.
        """
        q = (query or "").strip().lower()
        if len(q) < self.settings.search_min_length:
            raise ValidationError(
                f"Search query must be at least {self.settings.search_min_length} characters"
            )

        matches = self.store.find(
            ACCOUNTS,
            predicate=lambda a: a.account_id != viewer_id
            and (q in a.username.lower() or q in a.name.lower()),
            sort_key=lambda a: a.username.lower(),
            limit=self.settings.search_limit,
        )
        return [a.summary() for a in matches]

    def suggest_accounts(self, viewer_id: str) -> list[dict[str, Any]]:
        """Suggest accounts the viewer does not follow yet, most followed first."""
        viewer = self.get_account(viewer_id)
        excluded = set(viewer.following) | {viewer_id}
        suggestions = self.store.find(
            ACCOUNTS,
            predicate=lambda a: a.account_id not in excluded,
            sort_key=lambda a: a.followers_count,
            descending=True,
            limit=self.settings.suggestion_limit,
        )
        return [a.summary() for a in suggestions]

    def update_profile(
        self,
        actor_id: str,
        username: Optional[str] = None,
        name: Optional[str] = None,
        bio: Optional[str] = None,
        profile_pic: Optional[str] = None,
        is_private: Optional[bool] = None,
    ) -> Account:
        """Update the actor's own profile fields (None leaves a field unchanged).

        Raises:
            ValidationError: If the new username is blank or already taken.
        """
        self.get_account(actor_id)
        updates: dict[str, Any] = {}

        if username is not None:
            username = username.strip()
            if not username:
                raise ValidationError("Username is required")
            updates["username"] = username
        if name is not None:
            updates["name"] = name
        if bio is not None:
            updates["bio"] = bio
        if profile_pic is not None:
            updates["profile_pic"] = profile_pic
        if is_private is not None:
            updates["is_private"] = is_private

        if not updates:
            return self.get_account(actor_id)
        if "username" in updates:
            account = self.store.set_fields_unique(
                ACCOUNTS, actor_id, {"username": updates["username"]}, **updates
            )
            if account is None:
                raise ValidationError("Username is already taken")
        else:
            account = self.store.set_fields(ACCOUNTS, actor_id, **updates)
        logger.info(f"Account {actor_id} updated {sorted(updates)}")
        return account

    def toggle_private(self, actor_id: str, account_id: str) -> bool:
        """Flip an account between public and private.

        Pending requests are kept when an account goes public; following it
        directly clears the stale request.

        Returns:
            The new is_private value.

        Raises:
            UnauthorizedError: If the actor is not the account.
        """
        account = self.get_account(account_id)
        if actor_id != account_id:
            raise UnauthorizedError("Not authorized to modify this profile")
        updated = self.store.set_fields(ACCOUNTS, account_id, is_private=not account.is_private)
        logger.info(f"Account {account_id} is now {'private' if updated.is_private else 'public'}")
        return updated.is_private

    def list_followers(self, viewer_id: str, account_id: str) -> list[dict[str, Any]]:
        """Return summaries of an account's followers.

        Raises:
            PrivateProfileError: If the account is private to the viewer.
        """
        account = self.get_account(account_id)
        self.visibility.ensure_can_view(viewer_id, account)
        return self._summaries(account.followers)

    def list_following(self, viewer_id: str, account_id: str) -> list[dict[str, Any]]:
        """Return summaries of the accounts an account follows.

        Raises:
            PrivateProfileError: If the account is private to the viewer.
        """
        account = self.get_account(account_id)
        self.visibility.ensure_can_view(viewer_id, account)
        return self._summaries(account.following)

    def get_summary(self, account_id: str) -> Optional[dict[str, Any]]:
        """Return an account's public summary, or None if it does not exist."""
        account = self.store.get(ACCOUNTS, account_id)
        return account.summary() if account is not None else None

    def _summaries(self, account_ids: list[str]) -> list[dict[str, Any]]:
        summaries = (self.get_summary(account_id) for account_id in account_ids)
        return [s for s in summaries if s is not None]

    # ===== Follow Graph =====

    def toggle_follow(self, actor_id: str, target_id: str) -> FollowStatus:
        return self.follows.toggle_follow(actor_id, target_id)

    def cancel_follow_request(self, actor_id: str, target_id: str) -> FollowStatus:
        return self.follows.cancel_follow_request(actor_id, target_id)

    def accept_follow_request(
        self, actor_id: str, account_id: str, requester_id: str
    ) -> FollowStatus:
        """Accept a request addressed to account_id.

        Raises:
            UnauthorizedError: If the actor is not the account.
            NotFoundError: If the request does not exist.
        """
        if actor_id != account_id:
            raise UnauthorizedError("Not authorized to modify this profile")
        return self.follows.accept_follow_request(account_id, requester_id)

    def decline_follow_request(self, actor_id: str, account_id: str, requester_id: str) -> None:
        """Decline a request addressed to account_id.

        Raises:
            UnauthorizedError: If the actor is not the account.
            NotFoundError: If the request does not exist.
        """
        if actor_id != account_id:
            raise UnauthorizedError("Not authorized to modify this profile")
        self.follows.decline_follow_request(account_id, requester_id)

    def can_view(self, viewer_id: str, account_id: str) -> bool:
        return self.visibility.can_view(viewer_id, self.get_account(account_id))

    def repair_follow_edges(self) -> RepairReport:
        return self.follows.repair_follow_edges()

    # ===== Posts =====

    def create_post(
        self, actor_id: str, media_url: str, media_type: str = "image", caption: str = ""
    ) -> Post:
        """Create a post from an uploaded media reference.

        Raises:
            ValidationError: If the media reference is blank.
        """
        self.get_account(actor_id)
        if not (media_url or "").strip():
            raise ValidationError("Media is required")

        post = self.store.insert(
            POSTS,
            Post(
                owner_id=actor_id,
                media_url=media_url.strip(),
                media_type=media_type,
                caption=caption or "",
                created_at=self.clock.now(),
            ),
        )
        logger.info(f"Account {actor_id} created post {post.post_id}")
        return post

    def get_post(self, viewer_id: str, post_id: str) -> dict[str, Any]:
        """Return a single post as seen by viewer_id.

        Archived posts are only returned to their owner.

        Raises:
            NotFoundError: If the post does not exist (or is archived and the
                viewer is not the owner).
            PrivateProfileError: If the owner's account is private to the viewer.
        """
        post = self.store.require(POSTS, post_id)
        if post.is_archived and post.owner_id != viewer_id:
            raise NotFoundError("post", post_id)
        self.visibility.ensure_can_view(viewer_id, self.get_account(post.owner_id))
        return post.to_view(viewer_id)

    def delete_post(self, actor_id: str, post_id: str) -> None:
        """Delete a post.

        Raises:
            NotFoundError: If the post does not exist.
            UnauthorizedError: If the actor does not own the post.
        """
        post = self.store.require(POSTS, post_id)
        if post.owner_id != actor_id:
            raise UnauthorizedError("Not authorized to delete this post")
        self.store.delete(POSTS, post_id)
        logger.info(f"Account {actor_id} deleted post {post_id}")

    def feed(self, viewer_id: str) -> list[dict[str, Any]]:
        """Return non-archived posts of followed accounts and the viewer, newest first."""
        viewer = self.get_account(viewer_id)
        authors = set(viewer.following) | {viewer_id}
        posts = self.store.find(
            POSTS,
            predicate=lambda p: p.owner_id in authors and not p.is_archived,
            sort_key=lambda p: p.created_at,
            descending=True,
        )
        return [p.to_view(viewer_id) for p in posts]

    def list_account_posts(self, viewer_id: str, account_id: str) -> list[dict[str, Any]]:
        """Return an account's non-archived posts, newest first.

        Raises:
            PrivateProfileError: If the account is private to the viewer.
        """
        account = self.get_account(account_id)
        self.visibility.ensure_can_view(viewer_id, account)
        posts = self.store.find(
            POSTS,
            predicate=lambda p: p.owner_id == account_id and not p.is_archived,
            sort_key=lambda p: p.created_at,
            descending=True,
        )
        return [p.to_view(viewer_id) for p in posts]

    def list_archived(self, actor_id: str) -> list[dict[str, Any]]:
        """Return the actor's archived posts, newest first."""
        posts = self.store.find(
            POSTS,
            predicate=lambda p: p.owner_id == actor_id and p.is_archived,
            sort_key=lambda p: p.created_at,
            descending=True,
        )
        return [p.to_view(actor_id) for p in posts]

    def list_bookmarked(self, actor_id: str) -> list[dict[str, Any]]:
        """Return non-archived posts the actor bookmarked, newest first."""
        posts = self.store.find(
            POSTS,
            predicate=lambda p: actor_id in p.bookmarks and not p.is_archived,
            sort_key=lambda p: p.created_at,
            descending=True,
        )
        return [p.to_view(actor_id) for p in posts]

    def toggle_like(self, actor_id: str, post_id: str) -> LikeResult:
        return self.engagement.toggle_like(post_id, actor_id)

    def add_comment(self, actor_id: str, post_id: str, text: str) -> Comment:
        return self.engagement.add_comment(post_id, actor_id, text)

    def delete_comment(self, actor_id: str, post_id: str, comment_id: str) -> None:
        self.engagement.delete_comment(post_id, actor_id, comment_id)

    def toggle_bookmark(self, actor_id: str, post_id: str) -> bool:
        return self.engagement.toggle_bookmark(post_id, actor_id)

    def set_archived(self, actor_id: str, post_id: str, archived: bool) -> Post:
        return self.engagement.set_archived(post_id, actor_id, archived)

    # ===== Stories =====

    def create_story(
        self, actor_id: str, media_url: str, media_type: str = "image", caption: str = ""
    ) -> Story:
        """Post a story; the store expires it after story_ttl_hours.

        Raises:
            ValidationError: If the media reference is blank.
        """
        self.get_account(actor_id)
        if not (media_url or "").strip():
            raise ValidationError("Media file is required")

        story = self.store.insert(
            STORIES,
            Story(
                owner_id=actor_id,
                media_url=media_url.strip(),
                media_type=media_type,
                caption=caption or "",
                created_at=self.clock.now(),
            ),
        )
        logger.info(f"Account {actor_id} posted story {story.story_id}")
        return story

    def story_feed(self, viewer_id: str) -> dict[str, list[Story]]:
        """Return live stories of followed accounts and the viewer's own.

        Returns:
            {"stories": followed accounts' stories, "own_stories": viewer's},
            both newest first.
        """
        viewer = self.get_account(viewer_id)
        following = set(viewer.following)
        stories = self.store.find(
            STORIES,
            predicate=lambda s: s.owner_id in following,
            sort_key=lambda s: s.created_at,
            descending=True,
        )
        own = self.store.find(
            STORIES,
            predicate=lambda s: s.owner_id == viewer_id,
            sort_key=lambda s: s.created_at,
            descending=True,
        )
        return {"stories": stories, "own_stories": own}

    def list_account_stories(self, viewer_id: str, account_id: str) -> list[Story]:
        """Return an account's live stories, newest first.

        Raises:
            PrivateProfileError: If the account is private to the viewer.
        """
        account = self.get_account(account_id)
        self.visibility.ensure_can_view(viewer_id, account)
        return self.store.find(
            STORIES,
            predicate=lambda s: s.owner_id == account_id,
            sort_key=lambda s: s.created_at,
            descending=True,
        )

    def view_story(self, viewer_id: str, story_id: str) -> Story:
        """Return a story and record the viewer (once, owner excluded).

        Raises:
            NotFoundError: If the story does not exist or has expired.
            PrivateProfileError: If the owner is private to the viewer.
        """
        story = self.store.require(STORIES, story_id)
        self.visibility.ensure_can_view(viewer_id, self.get_account(story.owner_id))

        if viewer_id != story.owner_id and not story.has_viewed(viewer_id):
            self.store.add_to_set(
                STORIES,
                story_id,
                "views",
                StoryView(viewer_id=viewer_id, viewed_at=self.clock.now()),
                key=lambda v: v.viewer_id,
            )
        return self.store.require(STORIES, story_id)

    def delete_story(self, actor_id: str, story_id: str) -> None:
        """Delete a story.

        Raises:
            NotFoundError: If the story does not exist.
            UnauthorizedError: If the actor does not own it.
        """
        story = self.store.require(STORIES, story_id)
        if story.owner_id != actor_id:
            raise UnauthorizedError("Not authorized to delete this story")
        self.store.delete(STORIES, story_id)
        logger.info(f"Account {actor_id} deleted story {story_id}")

    # ===== Notifications =====

    def list_notifications(self, actor_id: str) -> list[Notification]:
        return self.notifications.list_for(actor_id, limit=self.settings.notification_page_size)

    def unread_notification_count(self, actor_id: str) -> int:
        return self.notifications.unread_count(actor_id)

    def mark_notification_read(self, actor_id: str, notification_id: str) -> Notification:
        return self.notifications.mark_read(notification_id, actor_id)

    def _follow_request_notification(self, actor_id: str, notification_id: str) -> Notification:
        notification = self.notifications.get(notification_id)
        if notification.type != NotificationType.FOLLOW_REQUEST:
            raise NotFoundError("follow request", notification_id)
        if notification.recipient_id != actor_id:
            raise UnauthorizedError("Not authorized to modify this notification")
        return notification

    def accept_request_notification(self, actor_id: str, notification_id: str) -> FollowStatus:
        """Accept the follow request a notification refers to.

        Raises:
            NotFoundError: If the notification is absent or not a follow request.
            UnauthorizedError: If the actor is not its recipient.
        """
        notification = self._follow_request_notification(actor_id, notification_id)
        return self.follows.accept_follow_request(actor_id, notification.sender_id)

    def decline_request_notification(self, actor_id: str, notification_id: str) -> None:
        """Decline the follow request a notification refers to.

        Raises:
            NotFoundError: If the notification is absent or not a follow request.
            UnauthorizedError: If the actor is not its recipient.
        """
        notification = self._follow_request_notification(actor_id, notification_id)
        self.follows.decline_follow_request(actor_id, notification.sender_id)

    # ===== Direct Messages =====

    def send_message(self, actor_id: str, recipient_id: str, content: str) -> DirectMessage:
        """Send a direct message.

        Raises:
            ValidationError: If the content is empty or the actor messages itself.
            NotFoundError: If the recipient does not exist.
        """
        content = (content or "").strip()
        if not content:
            raise ValidationError("Message content is required")
        if actor_id == recipient_id:
            raise ValidationError("You cannot message yourself")
        self.get_account(recipient_id)

        message = self.store.insert(
            MESSAGES,
            DirectMessage(
                sender_id=actor_id,
                recipient_id=recipient_id,
                content=content,
                created_at=self.clock.now(),
            ),
        )
        logger.debug(f"Message {message.message_id} from {actor_id} to {recipient_id}")
        return message

    def get_conversation(self, actor_id: str, other_id: str) -> list[DirectMessage]:
        """Return both directions of a conversation, oldest first.

        Messages from the other account to the actor are marked read.

        Raises:
            NotFoundError: If the other account does not exist.
        """
        self.get_account(other_id)
        participants = {actor_id, other_id}
        messages = self.store.find(
            MESSAGES,
            predicate=lambda m: {m.sender_id, m.recipient_id} == participants,
            sort_key=lambda m: m.created_at,
        )
        self.mark_conversation_read(actor_id, other_id)
        return messages

    def list_conversations(self, actor_id: str) -> list[dict[str, Any]]:
        """Return one entry per counterpart with the latest message, newest first."""
        messages = self.store.find(
            MESSAGES,
            predicate=lambda m: actor_id in (m.sender_id, m.recipient_id),
            sort_key=lambda m: m.created_at,
            descending=True,
        )

        conversations: dict[str, dict[str, Any]] = {}
        for message in messages:
            other_id = message.counterpart(actor_id)
            entry = conversations.get(other_id)
            if entry is None:
                entry = conversations[other_id] = {
                    "account": self.get_summary(other_id),
                    "last_message": message,
                    "unread_count": 0,
                }
            if message.recipient_id == actor_id and not message.is_read:
                entry["unread_count"] += 1
        return list(conversations.values())

    def mark_conversation_read(self, actor_id: str, other_id: str) -> int:
        """Mark every unread message from other_id to the actor as read.

        Returns:
            Number of messages marked.
        """
        return self.store.update_many(
            MESSAGES,
            lambda m: m.sender_id == other_id and m.recipient_id == actor_id and not m.is_read,
            is_read=True,
        )

    def unread_message_count(self, actor_id: str) -> int:
        return self.store.count(
            MESSAGES, lambda m: m.recipient_id == actor_id and not m.is_read
        )

    # ===== Maintenance =====

    def validate(self) -> list[str]:
        """Check follow-edge invariants and that notifications are unique per key.

        Returns:
            List of problems found (empty if consistent).
        """
        errors = []
        accounts = {a.account_id: a for a in self.store.find(ACCOUNTS)}
        for account_id, account in accounts.items():
            errors.extend(f"{account_id}: {e}" for e in account.validate_state())
            for followee_id in account.following:
                followee = accounts.get(followee_id)
                if followee is None or account_id not in followee.followers:
                    errors.append(f"{account_id} follows {followee_id} without a matching follower entry")
            for follower_id in account.followers:
                follower = accounts.get(follower_id)
                if follower is None or account_id not in follower.following:
                    errors.append(f"{follower_id} listed as follower of {account_id} without following it")

        seen: set[tuple] = set()
        for notification in self.store.find(NOTIFICATIONS):
            if notification.dedup_key in seen:
                errors.append(f"Duplicate notification {notification.notification_id}")
            seen.add(notification.dedup_key)
        return errors

    def clear(self) -> None:
        """Remove all data (collections and settings are kept)."""
        self.store.clear()
        logger.info("Cleared all social graph data")
