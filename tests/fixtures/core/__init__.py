"""Core infrastructure fixtures."""

from tests.fixtures.core.clocks import FIXED_TIME, create_clock
from tests.fixtures.core.services import (
    add_account,
    add_post,
    create_service,
    create_store,
)

__all__ = [
    "FIXED_TIME",
    "create_clock",
    "add_account",
    "add_post",
    "create_service",
    "create_store",
]
