"""Post and engagement endpoints.

Provides REST API endpoints for creating and reading posts, the home feed,
likes, comments, bookmarks and archiving.
"""

from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from api.dependencies import ActorDep, ServiceDep
from api.models import ActionResponse, PostResponse
from models.engagement import LikeResult
from models.post import Comment

router = APIRouter(
    prefix="/posts",
    tags=["posts"],
)


# ============================================================================
# Request Models
# ============================================================================


class CreatePostRequest(BaseModel):
    """Request model for creating a post.

    Attributes:
        media_url: Reference returned by the media upload service.
        media_type: "image" or "video".
        caption: Optional caption.
    """

    media_url: str = Field(description="Uploaded media reference")
    media_type: Literal["image", "video"] = Field(default="image", description="Media type")
    caption: str = Field(default="", description="Caption")


class CommentRequest(BaseModel):
    """Request model for commenting on a post.

    Attributes:
        text: Comment text.
    """

    text: str = Field(description="Comment text")


# ============================================================================
# Response Models
# ============================================================================


class BookmarkResponse(BaseModel):
    """Response model for the bookmark toggle.

    Attributes:
        bookmarked: Whether the post is bookmarked after the toggle.
    """

    bookmarked: bool


# ============================================================================
# Route Handlers
# ============================================================================


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    request: CreatePostRequest, service: ServiceDep, actor_id: ActorDep
) -> PostResponse:
    """Create a post.

    Args:
        request: Media reference and caption.
        service: The social graph service dependency.
        actor_id: The acting account.

    Returns:
        The created post.
    """
    post = service.create_post(
        actor_id,
        media_url=request.media_url,
        media_type=request.media_type,
        caption=request.caption,
    )
    return post.to_view(actor_id)


@router.get("/feed", response_model=list[PostResponse])
async def get_feed(service: ServiceDep, actor_id: ActorDep) -> list[PostResponse]:
    """Get the home feed: own and followed accounts' posts, newest first."""
    return service.feed(actor_id)


@router.get("/archived", response_model=list[PostResponse])
async def list_archived(service: ServiceDep, actor_id: ActorDep) -> list[PostResponse]:
    """List the requester's archived posts."""
    return service.list_archived(actor_id)


@router.get("/bookmarked", response_model=list[PostResponse])
async def list_bookmarked(service: ServiceDep, actor_id: ActorDep) -> list[PostResponse]:
    """List posts the requester bookmarked."""
    return service.list_bookmarked(actor_id)


@router.get("/account/{account_id}", response_model=list[PostResponse])
async def list_account_posts(
    account_id: str, service: ServiceDep, actor_id: ActorDep
) -> list[PostResponse]:
    """List an account's posts, subject to its privacy setting."""
    return service.list_account_posts(actor_id, account_id)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: str, service: ServiceDep, actor_id: ActorDep) -> PostResponse:
    """Get a single post."""
    return service.get_post(actor_id, post_id)


@router.delete("/{post_id}", response_model=ActionResponse)
async def delete_post(post_id: str, service: ServiceDep, actor_id: ActorDep) -> ActionResponse:
    """Delete one of the requester's posts."""
    service.delete_post(actor_id, post_id)
    return ActionResponse(message="Post deleted")


@router.post("/{post_id}/like", response_model=LikeResult)
async def toggle_like(post_id: str, service: ServiceDep, actor_id: ActorDep) -> LikeResult:
    """Like or unlike a post.

    Args:
        post_id: Post to act on.
        service: The social graph service dependency.
        actor_id: The acting account.

    Returns:
        Whether the post is now liked and its like count.
    """
    return service.toggle_like(actor_id, post_id)


@router.post("/{post_id}/comments", response_model=Comment, status_code=201)
async def add_comment(
    post_id: str, request: CommentRequest, service: ServiceDep, actor_id: ActorDep
) -> Comment:
    """Comment on a post."""
    return service.add_comment(actor_id, post_id, request.text)


@router.delete("/{post_id}/comments/{comment_id}", response_model=ActionResponse)
async def delete_comment(
    post_id: str, comment_id: str, service: ServiceDep, actor_id: ActorDep
) -> ActionResponse:
    """Delete a comment (post owner or comment author only)."""
    service.delete_comment(actor_id, post_id, comment_id)
    return ActionResponse(message="Comment deleted")


@router.post("/{post_id}/bookmark", response_model=BookmarkResponse)
async def toggle_bookmark(
    post_id: str, service: ServiceDep, actor_id: ActorDep
) -> BookmarkResponse:
    """Bookmark or un-bookmark a post."""
    return BookmarkResponse(bookmarked=service.toggle_bookmark(actor_id, post_id))


@router.post("/{post_id}/archive", response_model=PostResponse)
async def archive_post(post_id: str, service: ServiceDep, actor_id: ActorDep) -> PostResponse:
    """Archive one of the requester's posts."""
    return service.set_archived(actor_id, post_id, True).to_view(actor_id)


@router.post("/{post_id}/restore", response_model=PostResponse)
async def restore_post(post_id: str, service: ServiceDep, actor_id: ActorDep) -> PostResponse:
    """Restore one of the requester's archived posts."""
    return service.set_archived(actor_id, post_id, False).to_view(actor_id)
