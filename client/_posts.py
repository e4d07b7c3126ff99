"""Posts sub-client for the social graph API.

This module provides PostsClient and AsyncPostsClient for the post and
engagement endpoints (/posts/*).

This is an internal module. Import from `client` instead.
"""

from typing import Literal

from client._base import AsyncBaseClient, BaseClient
from client.models import (
    ActionResponse,
    BookmarkResponse,
    Comment,
    LikeResult,
    PostResponse,
)

MediaType = Literal["image", "video"]


class PostsClient(BaseClient):
    """Synchronous client for post and engagement endpoints.

    Example:
        with SocialClient(account_id=bob_id) as client:
            result = client.posts.like(post_id)
            print(result.likes_count)
    """

    _BASE_PATH = "/posts"

    def create(
        self, media_url: str, media_type: MediaType = "image", caption: str = ""
    ) -> PostResponse:
        """Create a post from an uploaded media reference.

        Args:
            media_url: Reference returned by the upload service.
            media_type: "image" or "video".
            caption: Optional caption.

        Returns:
            The created post.
        """
        data = self._post(
            self._BASE_PATH,
            json={"media_url": media_url, "media_type": media_type, "caption": caption},
        )
        return PostResponse(**data)

    def feed(self) -> list[PostResponse]:
        """Own and followed accounts' posts, newest first."""
        return [PostResponse(**item) for item in self._get(f"{self._BASE_PATH}/feed")]

    def archived(self) -> list[PostResponse]:
        return [PostResponse(**item) for item in self._get(f"{self._BASE_PATH}/archived")]

    def bookmarked(self) -> list[PostResponse]:
        return [PostResponse(**item) for item in self._get(f"{self._BASE_PATH}/bookmarked")]

    def by_account(self, account_id: str) -> list[PostResponse]:
        """An account's posts.

        Raises:
            PrivateProfileError: If the account is private to the acting account.
        """
        data = self._get(f"{self._BASE_PATH}/account/{account_id}")
        return [PostResponse(**item) for item in data]

    def get(self, post_id: str) -> PostResponse:
        return PostResponse(**self._get(f"{self._BASE_PATH}/{post_id}"))

    def delete(self, post_id: str) -> ActionResponse:
        return ActionResponse(**self._delete(f"{self._BASE_PATH}/{post_id}"))

    def like(self, post_id: str) -> LikeResult:
        """Like the post, or remove the like if already present."""
        return LikeResult(**self._post(f"{self._BASE_PATH}/{post_id}/like"))

    def comment(self, post_id: str, text: str) -> Comment:
        """Comment on a post.

        Raises:
            ValidationError: If the text is empty.
        """
        data = self._post(f"{self._BASE_PATH}/{post_id}/comments", json={"text": text})
        return Comment(**data)

    def delete_comment(self, post_id: str, comment_id: str) -> ActionResponse:
        data = self._delete(f"{self._BASE_PATH}/{post_id}/comments/{comment_id}")
        return ActionResponse(**data)

    def bookmark(self, post_id: str) -> bool:
        """Bookmark or un-bookmark a post.

        Returns:
            Whether the post is now bookmarked.
        """
        data = self._post(f"{self._BASE_PATH}/{post_id}/bookmark")
        return BookmarkResponse(**data).bookmarked

    def archive(self, post_id: str) -> PostResponse:
        return PostResponse(**self._post(f"{self._BASE_PATH}/{post_id}/archive"))

    def restore(self, post_id: str) -> PostResponse:
        return PostResponse(**self._post(f"{self._BASE_PATH}/{post_id}/restore"))


class AsyncPostsClient(AsyncBaseClient):
    """Asynchronous client for post and engagement endpoints."""

    _BASE_PATH = "/posts"

    async def create(
        self, media_url: str, media_type: MediaType = "image", caption: str = ""
    ) -> PostResponse:
        data = await self._post(
            self._BASE_PATH,
            json={"media_url": media_url, "media_type": media_type, "caption": caption},
        )
        return PostResponse(**data)

    async def feed(self) -> list[PostResponse]:
        return [PostResponse(**item) for item in await self._get(f"{self._BASE_PATH}/feed")]

    async def archived(self) -> list[PostResponse]:
        return [PostResponse(**item) for item in await self._get(f"{self._BASE_PATH}/archived")]

    async def bookmarked(self) -> list[PostResponse]:
        data = await self._get(f"{self._BASE_PATH}/bookmarked")
        return [PostResponse(**item) for item in data]

    async def by_account(self, account_id: str) -> list[PostResponse]:
        data = await self._get(f"{self._BASE_PATH}/account/{account_id}")
        return [PostResponse(**item) for item in data]

    async def get(self, post_id: str) -> PostResponse:
        return PostResponse(**await self._get(f"{self._BASE_PATH}/{post_id}"))

    async def delete(self, post_id: str) -> ActionResponse:
        return ActionResponse(**await self._delete(f"{self._BASE_PATH}/{post_id}"))

    async def like(self, post_id: str) -> LikeResult:
        return LikeResult(**await self._post(f"{self._BASE_PATH}/{post_id}/like"))

    async def comment(self, post_id: str, text: str) -> Comment:
        data = await self._post(f"{self._BASE_PATH}/{post_id}/comments", json={"text": text})
        return Comment(**data)

    async def delete_comment(self, post_id: str, comment_id: str) -> ActionResponse:
        data = await self._delete(f"{self._BASE_PATH}/{post_id}/comments/{comment_id}")
        return ActionResponse(**data)

    async def bookmark(self, post_id: str) -> bool:
        data = await self._post(f"{self._BASE_PATH}/{post_id}/bookmark")
        return BookmarkResponse(**data).bookmarked

    async def archive(self, post_id: str) -> PostResponse:
        return PostResponse(**await self._post(f"{self._BASE_PATH}/{post_id}/archive"))

    async def restore(self, post_id: str) -> PostResponse:
        return PostResponse(**await self._post(f"{self._BASE_PATH}/{post_id}/restore"))
