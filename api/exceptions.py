"""Exception handlers for the social graph FastAPI application.

This module converts domain exceptions from ``models.errors`` into consistent
JSON responses of the form ``{"error", "detail", "type", ...}``.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from models.errors import (
    InvalidOperationError,
    NotFoundError,
    PartialWriteError,
    PrivateProfileError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)


async def not_found_handler(request: Request, exc: NotFoundError):
    """Handle NotFoundError exceptions.

    Returns a 404 naming the kind of entity that was missing.

    Args:
        request: The incoming request that triggered the error.
        exc: The NotFoundError exception.

    Returns:
        JSONResponse with 404 status.
    """
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "Not Found",
            "detail": exc.message,
            "type": "NotFound",
            "entity": exc.entity,
        },
    )


async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    """Handle UnauthorizedError exceptions (missing actor or missing rights)."""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={
            "error": "Unauthorized",
            "detail": exc.message,
            "type": "Unauthorized",
        },
    )


async def private_profile_handler(request: Request, exc: PrivateProfileError):
    """Handle PrivateProfileError exceptions.

    Returns a 403 that still carries the account's public summary, so the
    caller can render a private-account placeholder.

    Args:
        request: The incoming request that triggered the error.
        exc: The PrivateProfileError exception.

    Returns:
        JSONResponse with 403 status and the account summary.
    """
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={
            "error": "Private Profile",
            "detail": exc.message,
            "type": "PrivateProfile",
            "is_private": True,
            "account": exc.account,
        },
    )


async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle domain ValidationError exceptions (empty content and the like)."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid Value",
            "detail": exc.message,
            "type": "ValidationError",
        },
    )


async def invalid_operation_handler(request: Request, exc: InvalidOperationError):
    """Handle InvalidOperationError exceptions (e.g. following yourself)."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid Operation",
            "detail": exc.message,
            "type": "InvalidOperation",
        },
    )


async def storage_error_handler(request: Request, exc: StorageError):
    """Handle StorageError and PartialWriteError exceptions.

    A partial write is reported with both write descriptions so operators can
    see which side of the edge is missing.

    Args:
        request: The incoming request that triggered the error.
        exc: The StorageError exception.

    Returns:
        JSONResponse with 500 status.
    """
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc.message}")
    content = {
        "error": "Storage Error",
        "detail": exc.message,
        "type": type(exc).__name__,
    }
    if isinstance(exc, PartialWriteError):
        content["first_write"] = exc.first_write
        content["second_write"] = exc.second_write
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


async def pydantic_validation_handler(request: Request, exc: PydanticValidationError):
    """Handle Pydantic validation errors raised while building models in handlers.

    Args:
        request: The incoming request that triggered the error.
        exc: The ValidationError exception.

    Returns:
        JSONResponse with validation error details.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "detail": "The request data failed validation",
            "validation_errors": exc.errors(include_url=False, include_context=False),
        },
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle any unhandled exceptions.

    This is a catch-all handler for unexpected errors. It prevents stack
    traces from being exposed to clients.
    """
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
            "type": type(exc).__name__,
        },
    )
