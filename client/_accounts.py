"""Accounts sub-client for the social graph API.

This module provides AccountsClient and AsyncAccountsClient for the account
and follow-graph endpoints (/accounts/*).

This is an internal module. Import from `client` instead.
"""

from typing import Any

from client._base import AsyncBaseClient, BaseClient
from client.models import (
    Account,
    AccountSummary,
    ActionResponse,
    FollowStatus,
    PrivacyResponse,
    ProfileResponse,
)


def _profile_update(**fields: Any) -> dict[str, Any]:
    return {k: v for k, v in fields.items() if v is not None}


class AccountsClient(BaseClient):
    """Synchronous client for account and follow-graph endpoints.

    Example:
        with SocialClient(account_id=alice_id) as client:
            status = client.accounts.follow(bob_id)
            if status.has_requested:
                print("Waiting for approval")
    """

    _BASE_PATH = "/accounts"

    def create(
        self,
        username: str,
        name: str = "",
        bio: str = "",
        is_private: bool = False,
        profile_pic: str = "",
    ) -> Account:
        """Register a new account.

        Args:
            username: Unique handle.
            name: Display name.
            bio: Biography.
            is_private: Whether followers must be approved.
            profile_pic: Profile picture reference.

        Returns:
            The created account.

        Raises:
            ValidationError: If the username is blank or taken.
        """
        data = self._post(
            self._BASE_PATH,
            json={
                "username": username,
                "name": name,
                "bio": bio,
                "is_private": is_private,
                "profile_pic": profile_pic,
            },
        )
        return Account(**data)

    def search(self, query: str) -> list[AccountSummary]:
        """Search accounts by username or display name."""
        data = self._get(f"{self._BASE_PATH}/search", params={"q": query})
        return [AccountSummary(**item) for item in data]

    def suggestions(self) -> list[AccountSummary]:
        """Accounts the acting account does not follow yet."""
        data = self._get(f"{self._BASE_PATH}/suggestions")
        return [AccountSummary(**item) for item in data]

    def update_profile(
        self,
        username: str | None = None,
        name: str | None = None,
        bio: str | None = None,
        profile_pic: str | None = None,
        is_private: bool | None = None,
    ) -> Account:
        """Update the acting account's profile (None leaves a field unchanged)."""
        data = self._put(
            f"{self._BASE_PATH}/me",
            json=_profile_update(
                username=username,
                name=name,
                bio=bio,
                profile_pic=profile_pic,
                is_private=is_private,
            ),
        )
        return Account(**data)

    def get_profile(self, username: str) -> ProfileResponse:
        """Get a profile by username.

        Raises:
            PrivateProfileError: If the profile is private to the acting account.
            NotFoundError: If no account has that username.
        """
        data = self._get(f"{self._BASE_PATH}/profile/{username}")
        return ProfileResponse(**data)

    def follow(self, account_id: str) -> FollowStatus:
        """Follow, unfollow, or request to follow an account."""
        data = self._post(f"{self._BASE_PATH}/{account_id}/follow")
        return FollowStatus(**data)

    def cancel_request(self, account_id: str) -> FollowStatus:
        """Withdraw a pending follow request."""
        data = self._delete(f"{self._BASE_PATH}/{account_id}/follow-request")
        return FollowStatus(**data)

    def toggle_private(self, account_id: str) -> bool:
        """Switch an account between public and private.

        Returns:
            The new privacy setting.
        """
        data = self._post(f"{self._BASE_PATH}/{account_id}/toggle-private")
        return PrivacyResponse(**data).is_private

    def accept_request(self, account_id: str, requester_id: str) -> FollowStatus:
        """Accept a follow request addressed to account_id."""
        data = self._post(
            f"{self._BASE_PATH}/{account_id}/accept-request",
            json={"requester_id": requester_id},
        )
        return FollowStatus(**data)

    def decline_request(self, account_id: str, requester_id: str) -> ActionResponse:
        """Decline a follow request addressed to account_id."""
        data = self._post(
            f"{self._BASE_PATH}/{account_id}/decline-request",
            json={"requester_id": requester_id},
        )
        return ActionResponse(**data)

    def followers(self, account_id: str) -> list[AccountSummary]:
        data = self._get(f"{self._BASE_PATH}/{account_id}/followers")
        return [AccountSummary(**item) for item in data]

    def following(self, account_id: str) -> list[AccountSummary]:
        data = self._get(f"{self._BASE_PATH}/{account_id}/following")
        return [AccountSummary(**item) for item in data]


class AsyncAccountsClient(AsyncBaseClient):
    """Asynchronous client for account and follow-graph endpoints."""

    _BASE_PATH = "/accounts"

    async def create(
        self,
        username: str,
        name: str = "",
        bio: str = "",
        is_private: bool = False,
        profile_pic: str = "",
    ) -> Account:
        """Register a new account."""
        data = await self._post(
            self._BASE_PATH,
            json={
                "username": username,
                "name": name,
                "bio": bio,
                "is_private": is_private,
                "profile_pic": profile_pic,
            },
        )
        return Account(**data)

    async def search(self, query: str) -> list[AccountSummary]:
        data = await self._get(f"{self._BASE_PATH}/search", params={"q": query})
        return [AccountSummary(**item) for item in data]

    async def suggestions(self) -> list[AccountSummary]:
        data = await self._get(f"{self._BASE_PATH}/suggestions")
        return [AccountSummary(**item) for item in data]

    async def update_profile(
        self,
        username: str | None = None,
        name: str | None = None,
        bio: str | None = None,
        profile_pic: str | None = None,
        is_private: bool | None = None,
    ) -> Account:
        data = await self._put(
            f"{self._BASE_PATH}/me",
            json=_profile_update(
                username=username,
                name=name,
                bio=bio,
                profile_pic=profile_pic,
                is_private=is_private,
            ),
        )
        return Account(**data)

    async def get_profile(self, username: str) -> ProfileResponse:
        data = await self._get(f"{self._BASE_PATH}/profile/{username}")
        return ProfileResponse(**data)

    async def follow(self, account_id: str) -> FollowStatus:
        data = await self._post(f"{self._BASE_PATH}/{account_id}/follow")
        return FollowStatus(**data)

    async def cancel_request(self, account_id: str) -> FollowStatus:
        data = await self._delete(f"{self._BASE_PATH}/{account_id}/follow-request")
        return FollowStatus(**data)

    async def toggle_private(self, account_id: str) -> bool:
        data = await self._post(f"{self._BASE_PATH}/{account_id}/toggle-private")
        return PrivacyResponse(**data).is_private

    async def accept_request(self, account_id: str, requester_id: str) -> FollowStatus:
        data = await self._post(
            f"{self._BASE_PATH}/{account_id}/accept-request",
            json={"requester_id": requester_id},
        )
        return FollowStatus(**data)

    async def decline_request(self, account_id: str, requester_id: str) -> ActionResponse:
        data = await self._post(
            f"{self._BASE_PATH}/{account_id}/decline-request",
            json={"requester_id": requester_id},
        )
        return ActionResponse(**data)

    async def followers(self, account_id: str) -> list[AccountSummary]:
        data = await self._get(f"{self._BASE_PATH}/{account_id}/followers")
        return [AccountSummary(**item) for item in data]

    async def following(self, account_id: str) -> list[AccountSummary]:
        data = await self._get(f"{self._BASE_PATH}/{account_id}/following")
        return [AccountSummary(**item) for item in data]
