"""Stories sub-client for the social graph API.

This is an internal module. Import from `client` instead.
"""

from typing import Literal

from client._base import AsyncBaseClient, BaseClient
from client.models import ActionResponse, Story, StoryFeedResponse


class StoriesClient(BaseClient):
    """Synchronous client for story endpoints (/stories/*)."""

    _BASE_PATH = "/stories"

    def create(
        self,
        media_url: str,
        media_type: Literal["image", "video"] = "image",
        caption: str = "",
    ) -> Story:
        """Post a story.

        Args:
            media_url: Reference returned by the upload service.
            media_type: "image" or "video".
            caption: Optional caption.

        Returns:
            The stored story.
        """
        data = self._post(
            self._BASE_PATH,
            json={"media_url": media_url, "media_type": media_type, "caption": caption},
        )
        return Story(**data)

    def feed(self) -> StoryFeedResponse:
        """Live stories of followed accounts plus the acting account's own."""
        return StoryFeedResponse(**self._get(self._BASE_PATH))

    def by_account(self, account_id: str) -> list[Story]:
        data = self._get(f"{self._BASE_PATH}/account/{account_id}")
        return [Story(**item) for item in data]

    def view(self, story_id: str) -> Story:
        """View a story, recording the acting account as a viewer."""
        return Story(**self._get(f"{self._BASE_PATH}/{story_id}"))

    def delete(self, story_id: str) -> ActionResponse:
        return ActionResponse(**self._delete(f"{self._BASE_PATH}/{story_id}"))


class AsyncStoriesClient(AsyncBaseClient):
    """Asynchronous client for story endpoints (/stories/*)."""

    _BASE_PATH = "/stories"

    async def create(
        self,
        media_url: str,
        media_type: Literal["image", "video"] = "image",
        caption: str = "",
    ) -> Story:
        data = await self._post(
            self._BASE_PATH,
            json={"media_url": media_url, "media_type": media_type, "caption": caption},
        )
        return Story(**data)

    async def feed(self) -> StoryFeedResponse:
        return StoryFeedResponse(**await self._get(self._BASE_PATH))

    async def by_account(self, account_id: str) -> list[Story]:
        data = await self._get(f"{self._BASE_PATH}/account/{account_id}")
        return [Story(**item) for item in data]

    async def view(self, story_id: str) -> Story:
        return Story(**await self._get(f"{self._BASE_PATH}/{story_id}"))

    async def delete(self, story_id: str) -> ActionResponse:
        return ActionResponse(**await self._delete(f"{self._BASE_PATH}/{story_id}"))
