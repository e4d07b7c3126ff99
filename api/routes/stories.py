"""Story endpoints.

Stories expire on their own once they are older than the configured TTL;
expired stories simply stop appearing in every endpoint.
"""

from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from api.dependencies import ActorDep, ServiceDep
from api.models import ActionResponse
from models.story import Story

router = APIRouter(
    prefix="/stories",
    tags=["stories"],
)


class CreateStoryRequest(BaseModel):
    """Request model for posting a story.

    Attributes:
        media_url: Reference returned by the media upload service.
        media_type: "image" or "video".
        caption: Optional caption.
    """

    media_url: str = Field(description="Uploaded media reference")
    media_type: Literal["image", "video"] = Field(default="image", description="Media type")
    caption: str = Field(default="", description="Caption")


class StoryFeedResponse(BaseModel):
    """Response model for the story tray.

    Attributes:
        stories: Live stories of followed accounts, newest first.
        own_stories: The requester's own live stories, newest first.
    """

    stories: list[Story]
    own_stories: list[Story]


@router.post("", response_model=Story, status_code=201)
async def create_story(
    request: CreateStoryRequest, service: ServiceDep, actor_id: ActorDep
) -> Story:
    """Post a story."""
    return service.create_story(
        actor_id,
        media_url=request.media_url,
        media_type=request.media_type,
        caption=request.caption,
    )


@router.get("", response_model=StoryFeedResponse)
async def story_feed(service: ServiceDep, actor_id: ActorDep) -> StoryFeedResponse:
    """Get live stories of followed accounts and the requester's own."""
    return StoryFeedResponse(**service.story_feed(actor_id))


@router.get("/account/{account_id}", response_model=list[Story])
async def list_account_stories(
    account_id: str, service: ServiceDep, actor_id: ActorDep
) -> list[Story]:
    """List an account's live stories, subject to its privacy setting."""
    return service.list_account_stories(actor_id, account_id)


@router.get("/{story_id}", response_model=Story)
async def view_story(story_id: str, service: ServiceDep, actor_id: ActorDep) -> Story:
    """View a story, recording the requester as a viewer.

    Args:
        story_id: Story to view.
        service: The social graph service dependency.
        actor_id: The acting account.

    Returns:
        The story including its viewer list.
    """
    return service.view_story(actor_id, story_id)


@router.delete("/{story_id}", response_model=ActionResponse)
async def delete_story(story_id: str, service: ServiceDep, actor_id: ActorDep) -> ActionResponse:
    """Delete one of the requester's stories."""
    service.delete_story(actor_id, story_id)
    return ActionResponse(message="Story deleted")
