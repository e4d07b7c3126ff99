"""Main entry point for the Social Graph FastAPI application.

This module creates and configures the FastAPI app instance that serves the
REST API for accounts, the follow graph, posts, stories, notifications and
direct messages.

To run the development server:
    uvicorn main:app --reload

To run in production:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from pydantic import ValidationError as PydanticValidationError

from api.dependencies import initialize_service, shutdown_service
from api.exceptions import (
    generic_exception_handler,
    invalid_operation_handler,
    not_found_handler,
    private_profile_handler,
    pydantic_validation_handler,
    storage_error_handler,
    unauthorized_handler,
    validation_error_handler,
)
from api.routes import accounts as accounts_routes
from api.routes import maintenance as maintenance_routes
from api.routes import messages as messages_routes
from api.routes import notifications as notifications_routes
from api.routes import posts as posts_routes
from api.routes import stories as stories_routes
from models.config import load_settings
from models.errors import (
    InvalidOperationError,
    NotFoundError,
    PrivateProfileError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events.

    Loads ``.env`` and ``SOCIAL_*`` settings, configures logging and creates
    the shared service at startup; drops it at shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to FastAPI to handle requests.
    """
    load_dotenv()
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    logger.info("Starting social graph service")
    initialize_service(settings)

    yield

    logger.info("Shutting down social graph service")
    shutdown_service()


app = FastAPI(
    title="Social Graph Service",
    description="API for accounts, follows, posts, stories, notifications and messages",
    version="0.1.0",
    lifespan=lifespan,
)

# Register exception handlers
# Specific exceptions before general ones
app.add_exception_handler(NotFoundError, not_found_handler)
app.add_exception_handler(UnauthorizedError, unauthorized_handler)
app.add_exception_handler(PrivateProfileError, private_profile_handler)
app.add_exception_handler(ValidationError, validation_error_handler)
app.add_exception_handler(InvalidOperationError, invalid_operation_handler)
app.add_exception_handler(StorageError, storage_error_handler)
app.add_exception_handler(PydanticValidationError, pydantic_validation_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Register route modules
app.include_router(accounts_routes.router)
app.include_router(posts_routes.router)
app.include_router(stories_routes.router)
app.include_router(notifications_routes.router)
app.include_router(messages_routes.router)
app.include_router(maintenance_routes.router)


@app.get("/")
async def root():
    """Root endpoint - returns a welcome message.

    Returns:
        A dictionary with a welcome message.
    """
    return {
        "message": "Welcome to the Social Graph Service API",
        "version": "0.1.0",
        "docs_url": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring.

    Returns:
        A dictionary indicating the service is healthy.
    """
    return {"status": "healthy"}
