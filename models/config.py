"""Service configuration.

Settings are read from ``SOCIAL_*`` environment variables (a ``.env`` file is
loaded first by the application) and validated into a typed model.
"""

import os
from typing import Literal, Mapping

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from models.errors import ConfigError

ENV_PREFIX = "SOCIAL_"


class ServiceSettings(BaseModel):
    """Tunable behaviour of the social graph service.

    Args:
        story_ttl_hours: Hours a story lives before the store expires it.
        notification_page_size: Maximum notifications returned per listing.
        search_min_length: Minimum trimmed length of an account search query.
        search_limit: Maximum accounts returned by a search.
        suggestion_limit: Maximum suggested accounts.
        follow_write_attempts: Attempts for the second write of a follow mutation.
        repair_on_startup: Whether to run the follow-edge repair pass at startup.
        log_level: Root logging level.
    """

    story_ttl_hours: int = Field(default=24, gt=0)
    notification_page_size: int = Field(default=50, ge=1, le=500)
    search_min_length: int = Field(default=2, ge=1)
    search_limit: int = Field(default=10, ge=1, le=100)
    suggestion_limit: int = Field(default=5, ge=1, le=100)
    follow_write_attempts: int = Field(default=3, ge=1, le=10)
    repair_on_startup: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


def load_settings(environ: Mapping[str, str] | None = None) -> ServiceSettings:
    """Build ServiceSettings from environment variables.

    Only variables named ``SOCIAL_<FIELD>`` are considered; anything unset
    keeps its default.

    Args:
        environ: Mapping to read from (defaults to os.environ).

    Returns:
        Validated settings.

    Raises:
        ConfigError: If a variable holds an invalid value.
    """
    env = os.environ if environ is None else environ

    data: dict[str, str] = {}
    for name in ServiceSettings.model_fields:
        raw = env.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None and raw.strip():
            data[name] = raw.strip()

    if "log_level" in data:
        data["log_level"] = data["log_level"].upper()

    try:
        return ServiceSettings.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(_format_settings_errors(e)) from e


def _format_settings_errors(err: PydanticValidationError) -> str:
    lines = ["Invalid service settings:"]
    for item in err.errors():
        loc = ".".join(str(x) for x in item.get("loc", ()))
        lines.append(f"- {ENV_PREFIX}{loc.upper()}: {item.get('msg', 'invalid value')}")
    return "\n".join(lines)
