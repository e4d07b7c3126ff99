"""Dependency injection providers for the FastAPI application.

This module defines dependencies that can be injected into route handlers,
providing access to the shared SocialGraphService and the acting account.
"""

import logging
from typing import Annotated

from fastapi import Depends, Header

from models.config import ServiceSettings
from models.errors import UnauthorizedError
from models.service import SocialGraphService

logger = logging.getLogger(__name__)


# Global state
# A single service instance is created when the app starts
_service: SocialGraphService | None = None


def get_service() -> SocialGraphService:
    """Get the shared SocialGraphService instance.

    Returns:
        The shared SocialGraphService instance.

    Raises:
        RuntimeError: If the service hasn't been initialized yet.

    Example:
        @router.get("/some-endpoint")
        async def my_handler(service: ServiceDep):
            return service.suggest_accounts(actor_id)
    """
    if _service is None:
        raise RuntimeError(
            "SocialGraphService not initialized. Call initialize_service() first."
        )
    return _service


def initialize_service(settings: ServiceSettings | None = None) -> SocialGraphService:
    """Initialize the shared SocialGraphService instance.

    Called once when the FastAPI app starts up. When ``repair_on_startup`` is
    set, follow edges left asymmetric by an earlier failed write are repaired
    before the first request is served.

    Args:
        settings: Service settings (defaults are used when omitted).

    Returns:
        The newly created SocialGraphService instance.
    """
    global _service

    _service = SocialGraphService(settings=settings)
    if _service.settings.repair_on_startup:
        _service.repair_follow_edges()
    logger.info("SocialGraphService initialized")
    return _service


def shutdown_service() -> None:
    """Drop the shared service instance."""
    global _service
    _service = None


def get_actor_id(
    x_account_id: Annotated[str | None, Header(description="Acting account id")] = None,
) -> str:
    """Return the acting account named by the X-Account-Id header.

    Raises:
        UnauthorizedError: If the header is missing or blank.
    """
    if x_account_id is None or not x_account_id.strip():
        raise UnauthorizedError("Missing X-Account-Id header")
    return x_account_id.strip()


# Type aliases for dependency injection
ServiceDep = Annotated[SocialGraphService, Depends(get_service)]
ActorDep = Annotated[str, Depends(get_actor_id)]
