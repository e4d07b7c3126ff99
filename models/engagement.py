"""Engagement and notification coordinator.

Applies likes, comments, bookmarks and archiving to posts and emits at most
one notification per action through the notification dedup store.
"""

import logging
from typing import Optional

from pydantic import BaseModel

from models.clock import ServiceClock
from models.errors import NotFoundError, UnauthorizedError, ValidationError
from models.notification import Notification, NotificationType
from models.notification_store import NotificationStore
from models.post import Comment, Post
from models.store import DocumentStore

logger = logging.getLogger(__name__)

POSTS = "posts"


class LikeResult(BaseModel):
    """Outcome of a like toggle."""

    liked: bool
    likes_count: int


class EngagementCoordinator:
    """Applies engagement actions to posts.

    Every membership change goes through the store's atomic set primitives,
    so a post's likes and bookmarks never hold duplicates even when requests
    race.

    Attributes:
        store: Document store holding the "posts" collection.
        notifications: Dedup store used for emitted notifications.
        clock: Clock used for comment timestamps.
    """

    def __init__(
        self,
        store: DocumentStore,
        notifications: NotificationStore,
        clock: ServiceClock,
    ) -> None:
        self.store = store
        self.notifications = notifications
        self.clock = clock

    def notify(
        self,
        recipient_id: str,
        sender_id: str,
        type: NotificationType,
        related_post_id: Optional[str] = None,
        related_comment_text: Optional[str] = None,
    ) -> Optional[Notification]:
        """Emit a notification, refreshing an existing one with the same key.

        No-op when the sender is the recipient.
        """
        return self.notifications.upsert(
            recipient_id,
            sender_id,
            type,
            related_post_id=related_post_id,
            related_comment_text=related_comment_text,
        )

    def _get_post(self, post_id: str) -> Post:
        return self.store.require(POSTS, post_id)

    def toggle_like(self, post_id: str, actor_id: str) -> LikeResult:
        """Like the post, or remove the actor's like if already present.

        Only the transition to "liked" notifies the post owner.

        Args:
            post_id: Post to like or unlike.
            actor_id: Account performing the action.

        Returns:
            Whether the post is now liked by the actor and the new like count.

        Raises:
            NotFoundError: If the post does not exist.
        """
        post = self._get_post(post_id)

        if actor_id in post.likes:
            self.store.remove_from_set(POSTS, post_id, "likes", actor_id)
            liked = False
            logger.info(f"Account {actor_id} unliked post {post_id}")
        else:
            liked = self.store.add_to_set(POSTS, post_id, "likes", actor_id)
            if liked:
                logger.info(f"Account {actor_id} liked post {post_id}")
                self.notify(post.owner_id, actor_id, NotificationType.LIKE, related_post_id=post_id)
            else:
                # A concurrent request added the same like first.
                liked = True

        return LikeResult(liked=liked, likes_count=self._get_post(post_id).likes_count)

    def add_comment(self, post_id: str, actor_id: str, text: str) -> Comment:
        """Append a comment to a post and notify its owner.

        Args:
            post_id: Post to comment on.
            actor_id: Comment author.
            text: Comment text (surrounding whitespace is stripped).

        Returns:
            The stored comment.

        Raises:
            ValidationError: If the text is empty after trimming.
            NotFoundError: If the post does not exist.
        """
        text = (text or "").strip()
        if not text:
            raise ValidationError("Comment content is required")

        post = self._get_post(post_id)
        comment = Comment(author_id=actor_id, text=text, created_at=self.clock.now())
        self.store.push(POSTS, post_id, "comments", comment)
        logger.info(f"Account {actor_id} commented on post {post_id}")

        self.notify(
            post.owner_id,
            actor_id,
            NotificationType.COMMENT,
            related_post_id=post_id,
            related_comment_text=text,
        )
        return comment

    def delete_comment(self, post_id: str, actor_id: str, comment_id: str) -> None:
        """Remove a comment.

        Allowed for the post's owner and for the comment's author.

        Raises:
            NotFoundError: If the post or the comment does not exist.
            UnauthorizedError: If the actor is neither post owner nor author.
        """
        post = self._get_post(post_id)
        comment = post.get_comment(comment_id)
        if comment is None:
            raise NotFoundError("comment", comment_id)

        if actor_id not in (post.owner_id, comment.author_id):
            raise UnauthorizedError("Not authorized to delete this comment")

        self.store.pull_item(POSTS, post_id, "comments", "comment_id", comment_id)
        logger.info(f"Account {actor_id} deleted comment {comment_id} from post {post_id}")

    def toggle_bookmark(self, post_id: str, actor_id: str) -> bool:
        """Bookmark the post, or remove the actor's bookmark.

        Bookmarks are private and never notify anyone.

        Returns:
            True if the post is now bookmarked by the actor.

        Raises:
            NotFoundError: If the post does not exist.
        """
        post = self._get_post(post_id)
        if actor_id in post.bookmarks:
            self.store.remove_from_set(POSTS, post_id, "bookmarks", actor_id)
            return False
        self.store.add_to_set(POSTS, post_id, "bookmarks", actor_id)
        return True

    def set_archived(self, post_id: str, actor_id: str, archived: bool) -> Post:
        """Archive or restore a post.

        Raises:
            NotFoundError: If the post does not exist.
            UnauthorizedError: If the actor does not own the post.
        """
        post = self._get_post(post_id)
        if post.owner_id != actor_id:
            action = "archive" if archived else "restore"
            raise UnauthorizedError(f"Not authorized to {action} this post")

        updated = self.store.set_fields(POSTS, post_id, is_archived=archived)
        logger.info(f"Post {post_id} {'archived' if archived else 'restored'}")
        return updated
