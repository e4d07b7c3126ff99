"""Story model."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class StoryView(BaseModel):
    """A single viewer of a story."""

    viewer_id: str
    viewed_at: datetime


class Story(BaseModel):
    """A time-boxed media post.

    Stories are removed by the document store's TTL index on ``created_at``;
    nothing in the service filters them by age.

    Args:
        story_id: Unique story identifier.
        owner_id: Account that posted the story.
        media_url: Opaque reference supplied by the upload collaborator.
        media_type: "image" or "video".
        caption: Optional caption.
        views: One entry per account that viewed the story.
        created_at: When the story was posted (TTL anchor).
    """

    story_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    owner_id: str
    media_url: str
    media_type: Literal["image", "video"]
    caption: str = ""
    views: list[StoryView] = Field(default_factory=list)
    created_at: datetime

    def has_viewed(self, viewer_id: str) -> bool:
        return any(v.viewer_id == viewer_id for v in self.views)
