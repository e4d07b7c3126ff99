"""Internal HTTP handling utilities for the social graph client.

This module provides the low-level HTTP layer used by all sub-clients:
- Making HTTP requests (sync and async) on behalf of an acting account
- Mapping error responses onto the client exception hierarchy
- Retry with exponential backoff on transient failures

This is an internal module and should not be imported directly by users.
"""

import asyncio
import logging
import time
from typing import Any, Literal

import httpx

from client.exceptions import (
    APIError,
    ConflictError,
    ConnectionError,
    InvalidOperationError,
    NotFoundError,
    PrivateProfileError,
    ServerError,
    TimeoutError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

HttpMethod = Literal["GET", "POST", "PUT", "DELETE"]

ACCOUNT_HEADER = "X-Account-Id"

# Status codes that trigger automatic retry (when retry is enabled)
RETRYABLE_STATUS_CODES = {502, 503, 504}

# Methods retried after a timeout or a retryable status (connection failures
# are retried for every method)
IDEMPOTENT_METHODS = {"GET", "PUT"}

DEFAULT_RETRY_BACKOFF_BASE = 0.5  # seconds
DEFAULT_RETRY_BACKOFF_MAX = 30.0  # seconds


def _parse_error_response(response: httpx.Response) -> tuple[str, dict[str, Any]]:
    """Extract a message and the JSON body from an error response.

    Returns:
        Tuple of (message, body). body is empty when the response is not a
        JSON object.
    """
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text or f"HTTP {response.status_code} error", {}

    if not isinstance(body, dict):
        return str(body), {}

    detail = body.get("detail")
    if isinstance(detail, str):
        return detail, body
    if isinstance(detail, list):
        # FastAPI request validation errors
        messages = [
            f"{err.get('loc', ['unknown'])[-1]}: {err.get('msg', 'invalid')}"
            for err in detail
        ]
        return "; ".join(messages), body
    if "error" in body:
        return str(body["error"]), body
    return str(body), body


def _raise_for_status(response: httpx.Response) -> None:
    """Raise the client exception matching an error response.

    Raises:
        ValidationError: HTTP 422, or HTTP 400 with type "ValidationError".
        InvalidOperationError: HTTP 400 with type "InvalidOperation".
        UnauthorizedError: HTTP 401.
        PrivateProfileError: HTTP 403.
        NotFoundError: HTTP 404.
        ConflictError: HTTP 409.
        ServerError: HTTP 5xx.
        APIError: Any other error status.
    """
    if response.is_success:
        return

    message, body = _parse_error_response(response)
    status_code = response.status_code
    error_type = body.get("type")

    if status_code == 422:
        raise ValidationError(
            message,
            status_code=422,
            details={"errors": body.get("detail") or body.get("validation_errors")},
            response_body=body,
        )
    if status_code == 400 and error_type == "InvalidOperation":
        raise InvalidOperationError(message, response_body=body)
    if status_code == 400 and error_type == "ValidationError":
        raise ValidationError(message, response_body=body)
    if status_code == 401:
        raise UnauthorizedError(message, response_body=body)
    if status_code == 403 and body.get("is_private"):
        raise PrivateProfileError(message, account=body.get("account"), response_body=body)
    if status_code == 404:
        raise NotFoundError(message, resource_type=body.get("entity"), response_body=body)
    if status_code == 409:
        raise ConflictError(message, response_body=body)
    if status_code >= 500:
        details = None
        if "second_write" in body:
            details = {
                "first_write": body.get("first_write"),
                "second_write": body.get("second_write"),
            }
        raise ServerError(
            message,
            status_code=status_code,
            error_type=error_type,
            details=details,
            response_body=body,
        )
    raise APIError(
        message,
        status_code=status_code,
        error_type=error_type,
        response_body=body,
    )


def _calculate_backoff(attempt: int, base: float = DEFAULT_RETRY_BACKOFF_BASE) -> float:
    """Exponential backoff delay (base * 2^attempt), capped at DEFAULT_RETRY_BACKOFF_MAX."""
    return min(base * (2**attempt), DEFAULT_RETRY_BACKOFF_MAX)


def _headers(account_id: str | None) -> dict[str, str]:
    return {ACCOUNT_HEADER: account_id} if account_id else {}


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    if not params:
        return params
    return {k: v for k, v in params.items() if v is not None}


class HTTPClient:
    """Synchronous HTTP client for the social graph API.

    Wraps httpx.Client with error mapping and retry logic. Every request
    carries the acting account in the X-Account-Id header.

    Attributes:
        base_url: The base URL for all API requests.
        account_id: Acting account sent with each request (may be None).
        timeout: Request timeout in seconds.
        retry_enabled: Whether to retry on transient failures (timeouts and
            5xx only for idempotent methods).
        max_retries: Maximum number of retry attempts.
    """

    def __init__(
        self,
        base_url: str,
        account_id: str | None = None,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.account_id = account_id
        self.timeout = timeout
        self.retry_enabled = retry_enabled
        self.max_retries = max_retries

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make an HTTP request and return the parsed JSON response.

        Args:
            method: The HTTP method.
            path: The URL path (appended to base_url).
            params: Query parameters (None values are dropped).
            json: JSON body to send.

        Returns:
            The parsed JSON response body, or None for empty responses.

        Raises:
            ConnectionError: If the connection fails.
            TimeoutError: If the request times out.
            APIError: If the server returns an error response.
        """
        url = f"{self.base_url}{path}"
        params = _clean_params(params)
        attempts = self.max_retries + 1 if self.retry_enabled else 1
        idempotent = method in IDEMPOTENT_METHODS

        for attempt in range(attempts):
            last_attempt = attempt >= attempts - 1
            try:
                response = self._client.request(
                    method=method,
                    url=path,
                    params=params,
                    json=json,
                    headers=_headers(self.account_id),
                )
            except httpx.ConnectError as e:
                if last_attempt:
                    raise ConnectionError(f"Failed to connect to {url}", url=url, cause=e) from e
            except httpx.TimeoutException as e:
                if last_attempt or not idempotent:
                    raise TimeoutError(
                        f"Request to {url} timed out", timeout=self.timeout, url=url
                    ) from e
            else:
                retryable = idempotent and response.status_code in RETRYABLE_STATUS_CODES
                if not retryable or last_attempt:
                    _raise_for_status(response)
                    return response.json() if response.content else None

            delay = _calculate_backoff(attempt)
            logger.debug(f"Retrying {method} {path} in {delay:.1f}s (attempt {attempt + 1})")
            time.sleep(delay)

        raise RuntimeError("Unexpected error in request retry loop")

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return self.request("POST", path, params=params, json=json)

    def put(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return self.request("PUT", path, params=params, json=json)

    def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("DELETE", path, params=params)


class AsyncHTTPClient:
    """Asynchronous HTTP client for the social graph API.

    Same behaviour as HTTPClient, on top of httpx.AsyncClient.
    """

    def __init__(
        self,
        base_url: str,
        account_id: str | None = None,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.account_id = account_id
        self.timeout = timeout
        self.retry_enabled = retry_enabled
        self.max_retries = max_retries

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """Make an async HTTP request and return the parsed JSON response.

        Raises:
            ConnectionError: If the connection fails.
            TimeoutError: If the request times out.
            APIError: If the server returns an error response.
        """
        url = f"{self.base_url}{path}"
        params = _clean_params(params)
        attempts = self.max_retries + 1 if self.retry_enabled else 1
        idempotent = method in IDEMPOTENT_METHODS

        for attempt in range(attempts):
            last_attempt = attempt >= attempts - 1
            try:
                response = await self._client.request(
                    method=method,
                    url=path,
                    params=params,
                    json=json,
                    headers=_headers(self.account_id),
                )
            except httpx.ConnectError as e:
                if last_attempt:
                    raise ConnectionError(f"Failed to connect to {url}", url=url, cause=e) from e
            except httpx.TimeoutException as e:
                if last_attempt or not idempotent:
                    raise TimeoutError(
                        f"Request to {url} timed out", timeout=self.timeout, url=url
                    ) from e
            else:
                retryable = idempotent and response.status_code in RETRYABLE_STATUS_CODES
                if not retryable or last_attempt:
                    _raise_for_status(response)
                    return response.json() if response.content else None

            delay = _calculate_backoff(attempt)
            logger.debug(f"Retrying {method} {path} in {delay:.1f}s (attempt {attempt + 1})")
            await asyncio.sleep(delay)

        raise RuntimeError("Unexpected error in request retry loop")

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self.request("POST", path, params=params, json=json)

    async def put(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        return await self.request("PUT", path, params=params, json=json)

    async def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.request("DELETE", path, params=params)
