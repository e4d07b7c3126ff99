"""Base classes for all sub-clients.

Each resource sub-client (accounts, posts, stories, ...) inherits from one of
these and shares the parent client's HTTP connection.

This is an internal module and should not be imported directly by users.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from client._http import AsyncHTTPClient, HTTPClient


class BaseClient:
    """Base class for synchronous sub-clients.

    Attributes:
        _http: The shared HTTP client for making requests.
    """

    def __init__(self, http_client: "HTTPClient") -> None:
        self._http = http_client

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self._http.get(path, params=params)

    def _post(self, path: str, json: dict[str, Any] | None = None) -> Any:
        return self._http.post(path, json=json)

    def _put(self, path: str, json: dict[str, Any] | None = None) -> Any:
        return self._http.put(path, json=json)

    def _delete(self, path: str) -> Any:
        return self._http.delete(path)


class AsyncBaseClient:
    """Base class for asynchronous sub-clients.

    Attributes:
        _http: The shared async HTTP client for making requests.
    """

    def __init__(self, http_client: "AsyncHTTPClient") -> None:
        self._http = http_client

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self._http.get(path, params=params)

    async def _post(self, path: str, json: dict[str, Any] | None = None) -> Any:
        return await self._http.post(path, json=json)

    async def _put(self, path: str, json: dict[str, Any] | None = None) -> Any:
        return await self._http.put(path, json=json)

    async def _delete(self, path: str) -> Any:
        return await self._http.delete(path)
