"""Maintenance endpoints.

Operator-facing endpoints for checking and repairing the follow graph after
a two-document write was left half-applied.
"""

from fastapi import APIRouter
from pydantic import BaseModel

from api.dependencies import ServiceDep

router = APIRouter(
    prefix="/maintenance",
    tags=["maintenance"],
)


class RepairResponse(BaseModel):
    """Response model for the follow-edge repair pass.

    Attributes:
        followers_added: (followee, follower) entries restored.
        followers_removed: (followee, follower) entries without a matching follow.
        requests_dropped: (account, requester) requests from existing followers.
        self_references_removed: (account, field) self references removed.
        total_changes: Number of changes applied.
    """

    followers_added: list[tuple[str, str]]
    followers_removed: list[tuple[str, str]]
    requests_dropped: list[tuple[str, str]]
    self_references_removed: list[tuple[str, str]]
    total_changes: int


class ValidateResponse(BaseModel):
    """Response model for the consistency check.

    Attributes:
        valid: Whether no problems were found.
        errors: Problems found.
    """

    valid: bool
    errors: list[str]


@router.post("/repair", response_model=RepairResponse)
async def repair_follow_edges(service: ServiceDep) -> RepairResponse:
    """Make both sides of every follow edge agree.

    Each account's ``following`` set is treated as authoritative.

    Args:
        service: The social graph service dependency.

    Returns:
        What the pass changed.
    """
    report = service.repair_follow_edges()
    return RepairResponse(**report.model_dump(), total_changes=report.total_changes)


@router.get("/validate", response_model=ValidateResponse)
async def validate(service: ServiceDep) -> ValidateResponse:
    """Check follow-graph invariants without changing anything."""
    errors = service.validate()
    return ValidateResponse(valid=not errors, errors=errors)
