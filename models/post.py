"""Post and comment models."""

import uuid
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


class Comment(BaseModel):
    """A comment on a post.

    Owned by exactly one post. Deletable by the post's owner or the
    comment's author.

    Args:
        comment_id: Unique comment identifier.
        author_id: Account that wrote the comment.
        text: Trimmed comment text.
        created_at: When the comment was added.
    """

    comment_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    author_id: str
    text: str
    created_at: datetime


class Post(BaseModel):
    """A media post.

    ``likes`` and ``bookmarks`` behave as sets: they are only changed through
    the store's add-to-set / remove-from-set primitives. ``comments`` keeps
    insertion order.

    Args:
        post_id: Unique post identifier.
        owner_id: Account that created the post.
        media_url: Opaque reference supplied by the upload collaborator.
        media_type: "image" or "video".
        caption: Optional caption.
        likes: Ids of accounts that liked the post.
        bookmarks: Ids of accounts that bookmarked the post.
        comments: Comments in insertion order.
        is_archived: Archived posts are hidden from feeds and profile grids.
        created_at: When the post was created.
    """

    post_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    owner_id: str
    media_url: str
    media_type: Literal["image", "video"] = "image"
    caption: str = ""
    likes: list[str] = Field(default_factory=list)
    bookmarks: list[str] = Field(default_factory=list)
    comments: list[Comment] = Field(default_factory=list)
    is_archived: bool = False
    created_at: datetime

    @property
    def likes_count(self) -> int:
        return len(self.likes)

    def get_comment(self, comment_id: str) -> Optional[Comment]:
        """Find a comment by id.

        Args:
            comment_id: Comment identifier.

        Returns:
            The comment, or None if this post has no such comment.
        """
        for comment in self.comments:
            if comment.comment_id == comment_id:
                return comment
        return None

    def to_view(self, viewer_id: str) -> dict[str, Any]:
        """Serialize this post for a particular viewer.

        Args:
            viewer_id: Account the post is being shown to.

        Returns:
            Post data plus counts and the viewer's like/bookmark flags.
            The bookmark list itself is private and never included.
        """
        data = self.model_dump(exclude={"bookmarks"})
        data["likes_count"] = self.likes_count
        data["comments_count"] = len(self.comments)
        data["liked"] = viewer_id in self.likes
        data["bookmarked"] = viewer_id in self.bookmarks
        return data
