"""Exception hierarchy for the social graph API client.

Exception Hierarchy:
    SocialClientError (base)
    ├── ConnectionError - Network/connection failures
    ├── TimeoutError - Request timeout
    └── APIError - Server returned an error response
        ├── ValidationError (HTTP 400 "ValidationError", HTTP 422)
        ├── InvalidOperationError (HTTP 400 "InvalidOperation")
        ├── UnauthorizedError (HTTP 401)
        ├── PrivateProfileError (HTTP 403)
        ├── NotFoundError (HTTP 404)
        ├── ConflictError (HTTP 409)
        └── ServerError (HTTP 5xx)

Example:
    Rendering a private profile placeholder::

        try:
            profile = client.accounts.get_profile("alice")
        except PrivateProfileError as e:
            show_placeholder(e.account)
"""

from typing import Any


class SocialClientError(Exception):
    """Base exception for all client errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class ConnectionError(SocialClientError):
    """Failed to connect to the server.

    Attributes:
        url: The URL that failed to connect.
        cause: The underlying transport exception.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.url = url
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.url:
            return f"{self.message} (url: {self.url})"
        return self.message


class TimeoutError(SocialClientError):
    """Request timed out.

    Attributes:
        timeout: The timeout value in seconds.
        url: The URL that timed out.
    """

    def __init__(
        self,
        message: str,
        timeout: float | None = None,
        url: str | None = None,
    ) -> None:
        self.timeout = timeout
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        if self.timeout is not None:
            return f"{self.message} (timeout: {self.timeout}s)"
        return self.message


class APIError(SocialClientError):
    """Server returned an error response.

    Attributes:
        message: Human-readable error message.
        status_code: HTTP status code from the server.
        error_type: The ``type`` field of the response body (if available).
        details: Additional error details from the response (if available).
        response_body: Raw response body for debugging.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        error_type: str | None = None,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        self.details = details
        self.response_body = response_body
        super().__init__(message)

    def __str__(self) -> str:
        if self.error_type:
            return f"[HTTP {self.status_code}] [{self.error_type}] {self.message}"
        return f"[HTTP {self.status_code}] {self.message}"


class ValidationError(APIError):
    """Request content was rejected (empty comment, malformed body, ...)."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type="ValidationError",
            details=details,
            response_body=response_body,
        )


class InvalidOperationError(APIError):
    """The action makes no sense for its target (e.g. following yourself)."""

    def __init__(self, message: str, response_body: Any = None) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_type="InvalidOperation",
            response_body=response_body,
        )


class UnauthorizedError(APIError):
    """The acting account is missing or may not perform the action (HTTP 401)."""

    def __init__(self, message: str, response_body: Any = None) -> None:
        super().__init__(
            message=message,
            status_code=401,
            error_type="Unauthorized",
            response_body=response_body,
        )


class PrivateProfileError(APIError):
    """The requested account is private to the acting account (HTTP 403).

    Distinct from NotFoundError: the account exists and its public summary
    is available for rendering a placeholder.

    Attributes:
        account: Public summary of the private account.
    """

    def __init__(
        self,
        message: str,
        account: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        self.account = account or {}
        super().__init__(
            message=message,
            status_code=403,
            error_type="PrivateProfile",
            response_body=response_body,
        )


class NotFoundError(APIError):
    """Resource not found (HTTP 404).

    Attributes:
        resource_type: The kind of entity that wasn't found (if known).
    """

    def __init__(
        self,
        message: str,
        resource_type: str | None = None,
        response_body: Any = None,
    ) -> None:
        self.resource_type = resource_type
        super().__init__(
            message=message,
            status_code=404,
            error_type="NotFound",
            response_body=response_body,
        )


class ConflictError(APIError):
    """State conflict (HTTP 409)."""

    def __init__(self, message: str, response_body: Any = None) -> None:
        super().__init__(
            message=message,
            status_code=409,
            error_type="Conflict",
            response_body=response_body,
        )


class ServerError(APIError):
    """Server-side error (HTTP 5xx).

    Partial follow writes surface here with ``error_type`` set to
    "PartialWriteError"; they are fixed by the maintenance repair endpoint.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_type: str | None = None,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            error_type=error_type or "ServerError",
            details=details,
            response_body=response_body,
        )
