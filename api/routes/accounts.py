"""Account and follow-graph endpoints.

Provides REST API endpoints for registering accounts, reading profiles,
searching, and every follow-graph transition (follow, unfollow, request,
accept, decline, cancel).
"""

from datetime import datetime

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from api.dependencies import ActorDep, ServiceDep
from api.models import AccountSummary, ActionResponse
from models.account import Account
from models.follow import FollowStatus

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
)


# ============================================================================
# Request Models
# ============================================================================


class CreateAccountRequest(BaseModel):
    """Request model for registering an account.

    Attributes:
        username: Unique handle.
        name: Display name.
        bio: Biography.
        is_private: Whether followers must be approved.
        profile_pic: Profile picture reference.
    """

    username: str = Field(min_length=1, description="Unique handle")
    name: str = Field(default="", description="Display name")
    bio: str = Field(default="", description="Biography")
    is_private: bool = Field(default=False, description="Whether followers must be approved")
    profile_pic: str = Field(default="", description="Profile picture reference")


class UpdateProfileRequest(BaseModel):
    """Request model for updating the acting account's profile.

    Omitted fields are left unchanged.
    """

    username: str | None = Field(default=None, description="New handle")
    name: str | None = Field(default=None, description="New display name")
    bio: str | None = Field(default=None, description="New biography")
    profile_pic: str | None = Field(default=None, description="New profile picture reference")
    is_private: bool | None = Field(default=None, description="New privacy setting")


class FollowRequestDecision(BaseModel):
    """Request model for accepting or declining a follow request.

    Attributes:
        requester_id: Account whose request is being decided.
    """

    requester_id: str = Field(description="Account that asked to follow")


# ============================================================================
# Response Models
# ============================================================================


class ProfileResponse(AccountSummary):
    """Response model for a full profile.

    Attributes:
        bio: Biography.
        created_at: When the account was created.
        posts_count: Number of non-archived posts.
        is_own_profile: Whether the requester is looking at itself.
        is_following: Whether the requester follows the account.
        has_requested: Whether the requester has a pending request.
        follow_requests: Pending requesters (own profile only).
    """

    bio: str
    created_at: datetime
    posts_count: int
    is_own_profile: bool
    is_following: bool
    has_requested: bool
    follow_requests: list[AccountSummary] | None = None


class PrivacyResponse(BaseModel):
    """Response model for the privacy toggle.

    Attributes:
        is_private: The account's privacy setting after the toggle.
    """

    is_private: bool


# ============================================================================
# Route Handlers
# ============================================================================


@router.post("", response_model=Account, status_code=201)
async def create_account(request: CreateAccountRequest, service: ServiceDep) -> Account:
    """Register a new account.

    Args:
        request: Account details.
        service: The social graph service dependency.

    Returns:
        The created account.
    """
    return service.create_account(
        username=request.username,
        name=request.name,
        bio=request.bio,
        is_private=request.is_private,
        profile_pic=request.profile_pic,
    )


@router.get("/search", response_model=list[AccountSummary])
async def search_accounts(
    service: ServiceDep,
    actor_id: ActorDep,
    q: str = Query(default="", description="Text to search usernames and names for"),
) -> list[AccountSummary]:
    """Search accounts by username or display name (case-insensitive)."""
    return service.search_accounts(actor_id, q)


@router.get("/suggestions", response_model=list[AccountSummary])
async def suggest_accounts(service: ServiceDep, actor_id: ActorDep) -> list[AccountSummary]:
    """Suggest accounts the requester does not follow yet."""
    return service.suggest_accounts(actor_id)


@router.put("/me", response_model=Account)
async def update_profile(
    request: UpdateProfileRequest, service: ServiceDep, actor_id: ActorDep
) -> Account:
    """Update the requester's own profile.

    Args:
        request: Fields to change.
        service: The social graph service dependency.
        actor_id: The acting account.

    Returns:
        The updated account.
    """
    return service.update_profile(actor_id, **request.model_dump())


@router.get("/profile/{username}", response_model=ProfileResponse)
async def get_profile(username: str, service: ServiceDep, actor_id: ActorDep) -> ProfileResponse:
    """Get a profile by username.

    Private profiles the requester may not see answer 403 with the account's
    public summary instead.
    """
    return service.get_profile(actor_id, username)


@router.post("/{account_id}/follow", response_model=FollowStatus)
async def toggle_follow(account_id: str, service: ServiceDep, actor_id: ActorDep) -> FollowStatus:
    """Follow, unfollow, or request to follow an account.

    Args:
        account_id: Account to act on.
        service: The social graph service dependency.
        actor_id: The acting account.

    Returns:
        The relation's state after the action.
    """
    return service.toggle_follow(actor_id, account_id)


@router.delete("/{account_id}/follow-request", response_model=FollowStatus)
async def cancel_follow_request(
    account_id: str, service: ServiceDep, actor_id: ActorDep
) -> FollowStatus:
    """Withdraw the requester's pending follow request."""
    return service.cancel_follow_request(actor_id, account_id)


@router.post("/{account_id}/toggle-private", response_model=PrivacyResponse)
async def toggle_private(
    account_id: str, service: ServiceDep, actor_id: ActorDep
) -> PrivacyResponse:
    """Switch an account between public and private."""
    return PrivacyResponse(is_private=service.toggle_private(actor_id, account_id))


@router.post("/{account_id}/accept-request", response_model=FollowStatus)
async def accept_follow_request(
    account_id: str,
    request: FollowRequestDecision,
    service: ServiceDep,
    actor_id: ActorDep,
) -> FollowStatus:
    """Accept a pending follow request.

    Args:
        account_id: Account that received the request (must be the requester).
        request: The requester being accepted.
        service: The social graph service dependency.
        actor_id: The acting account.

    Returns:
        The requester's relation to the account after acceptance.
    """
    return service.accept_follow_request(actor_id, account_id, request.requester_id)


@router.post("/{account_id}/decline-request", response_model=ActionResponse)
async def decline_follow_request(
    account_id: str,
    request: FollowRequestDecision,
    service: ServiceDep,
    actor_id: ActorDep,
) -> ActionResponse:
    """Decline a pending follow request."""
    service.decline_follow_request(actor_id, account_id, request.requester_id)
    return ActionResponse(message="Follow request declined")


@router.get("/{account_id}/followers", response_model=list[AccountSummary])
async def list_followers(
    account_id: str, service: ServiceDep, actor_id: ActorDep
) -> list[AccountSummary]:
    """List an account's followers."""
    return service.list_followers(actor_id, account_id)


@router.get("/{account_id}/following", response_model=list[AccountSummary])
async def list_following(
    account_id: str, service: ServiceDep, actor_id: ActorDep
) -> list[AccountSummary]:
    """List the accounts an account follows."""
    return service.list_following(actor_id, account_id)
