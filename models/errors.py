"""Domain exceptions for the social graph service.

Every failure a caller can act on has its own class so route handlers and
library callers can tell them apart without parsing messages.

Exception Hierarchy:
    SocialGraphError (base)
    ├── NotFoundError - referenced account/post/comment/story/notification absent
    ├── UnauthorizedError - actor lacks rights for a mutation
    ├── ValidationError - empty content, self-targeting action
    ├── InvalidOperationError - e.g. following yourself
    ├── PrivateProfileError - viewer may not see a private account's content
    ├── StorageError - the document store rejected an operation
    │   └── PartialWriteError - second write of a two-document mutation failed
    └── ConfigError - settings missing or invalid
"""

from typing import Any


class SocialGraphError(Exception):
    """Base exception for all social graph errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(SocialGraphError):
    """Raised when a referenced entity does not exist.

    Args:
        entity: Kind of entity that was looked up (e.g. "account", "post").
        entity_id: Identifier that was not found.
    """

    def __init__(self, entity: str, entity_id: str | None = None) -> None:
        self.entity = entity
        self.entity_id = entity_id
        if entity_id is None:
            message = f"{entity.capitalize()} not found"
        else:
            message = f"{entity.capitalize()} '{entity_id}' not found"
        super().__init__(message)


class UnauthorizedError(SocialGraphError):
    """Raised when the actor is not allowed to perform a mutation."""


class ValidationError(SocialGraphError):
    """Raised when the content of an action is invalid (e.g. an empty comment)."""


class InvalidOperationError(SocialGraphError):
    """Raised when an action makes no sense for its target (e.g. following yourself)."""


class PrivateProfileError(SocialGraphError):
    """Raised when a viewer may not see a private account's content.

    Distinct from NotFoundError so callers can render a private-account
    placeholder instead of a missing page.

    Args:
        account: Public summary of the private account.
    """

    def __init__(self, account: dict[str, Any]) -> None:
        self.account = account
        super().__init__("This profile is private")


class StorageError(SocialGraphError):
    """Raised when the document store fails to apply an operation."""


class PartialWriteError(StorageError):
    """Raised when the second write of a two-document mutation keeps failing.

    The first write has already been applied, so the two documents disagree
    until the follow-edge repair pass runs.

    Args:
        first_write: Description of the write that was applied.
        second_write: Description of the write that failed.
    """

    def __init__(self, first_write: str, second_write: str) -> None:
        self.first_write = first_write
        self.second_write = second_write
        super().__init__(
            f"Applied '{first_write}' but failed to apply '{second_write}'"
        )


class ConfigError(SocialGraphError):
    """Raised when configuration is missing or invalid."""
