"""Account model."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Account(BaseModel):
    """A member of the social network.

    The follow graph is stored as id sets on both endpoints of every edge:
    ``followers`` of the followee and ``following`` of the follower. Pending
    requests against a private account live in its ``follow_requests``.
    The three collections are only changed by the follow state machine.

    Args:
        account_id: Unique account identifier.
        username: Unique handle.
        name: Display name.
        bio: Free-text biography.
        profile_pic: Opaque media reference for the profile picture.
        is_private: Whether followers must be approved.
        followers: Ids of accounts following this account.
        following: Ids of accounts this account follows.
        follow_requests: Ids of accounts waiting for approval.
        created_at: When the account was created.
    """

    account_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    username: str = Field(description="Unique handle")
    name: str = Field(default="", description="Display name")
    bio: str = Field(default="", description="Free-text biography")
    profile_pic: str = Field(default="", description="Profile picture reference")
    is_private: bool = Field(default=False, description="Whether followers must be approved")
    followers: list[str] = Field(default_factory=list)
    following: list[str] = Field(default_factory=list)
    follow_requests: list[str] = Field(default_factory=list)
    created_at: datetime = Field(description="When the account was created")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        """Ensure the username is non-empty and has no surrounding whitespace."""
        v = v.strip()
        if not v:
            raise ValueError("username cannot be empty")
        return v

    @property
    def followers_count(self) -> int:
        return len(self.followers)

    @property
    def following_count(self) -> int:
        return len(self.following)

    def summary(self) -> dict[str, Any]:
        """Return the fields anyone may see, even for a private account.

        Returns:
            Dictionary with identity, privacy flag and follow counts.
        """
        return {
            "account_id": self.account_id,
            "username": self.username,
            "name": self.name,
            "profile_pic": self.profile_pic,
            "is_private": self.is_private,
            "followers_count": self.followers_count,
            "following_count": self.following_count,
        }

    def validate_state(self) -> list[str]:
        """Check the invariants of this account's follow collections.

        Returns:
            List of problems found (empty if consistent).
        """
        errors = []
        for field_name in ("followers", "following", "follow_requests"):
            ids = getattr(self, field_name)
            if self.account_id in ids:
                errors.append(f"{field_name} contains the account itself")
            if len(ids) != len(set(ids)):
                errors.append(f"{field_name} contains duplicates")

        both = set(self.follow_requests) & set(self.followers)
        if both:
            errors.append(f"pending requests from existing followers: {sorted(both)}")
        return errors
