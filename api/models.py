"""Shared response models for API endpoints.

Models used by more than one route module live here; request models and
responses specific to one resource stay with their router.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from models.post import Comment


class AccountSummary(BaseModel):
    """Public summary of an account, visible even when it is private.

    Attributes:
        account_id: Account identifier.
        username: Unique handle.
        name: Display name.
        profile_pic: Profile picture reference.
        is_private: Whether followers must be approved.
        followers_count: Number of followers.
        following_count: Number of followed accounts.
    """

    account_id: str
    username: str
    name: str = ""
    profile_pic: str = ""
    is_private: bool = False
    followers_count: int = 0
    following_count: int = 0


class PostResponse(BaseModel):
    """A post as seen by the requesting account.

    Attributes:
        post_id: Post identifier.
        owner_id: Account that created the post.
        media_url: Media reference.
        media_type: "image" or "video".
        caption: Caption text.
        likes: Ids of accounts that liked the post.
        comments: Comments in insertion order.
        is_archived: Whether the post is archived.
        created_at: When the post was created.
        likes_count: Number of likes.
        comments_count: Number of comments.
        liked: Whether the requesting account liked the post.
        bookmarked: Whether the requesting account bookmarked the post.
    """

    post_id: str
    owner_id: str
    media_url: str
    media_type: Literal["image", "video"]
    caption: str
    likes: list[str]
    comments: list[Comment]
    is_archived: bool
    created_at: datetime
    likes_count: int
    comments_count: int
    liked: bool
    bookmarked: bool


class CountResponse(BaseModel):
    """Response model for unread counters.

    Attributes:
        count: The counted value.
    """

    count: int = Field(ge=0)


class ActionResponse(BaseModel):
    """Response model for actions that return no entity.

    Attributes:
        message: Human-readable description of what happened.
    """

    message: str
