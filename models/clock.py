"""Service clock model."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ServiceClock(BaseModel):
    """Source of "now" for every timestamp the service writes.

    Follows the wall clock (UTC) unless frozen. A frozen clock only moves
    when set() or advance() is called, which keeps timestamps predictable
    in tests and replays.

    Args:
        frozen_time: Fixed current time, or None to follow the wall clock.
    """

    frozen_time: Optional[datetime] = Field(
        default=None, description="Fixed current time (None follows the wall clock)"
    )

    @field_validator("frozen_time")
    @classmethod
    def validate_timezone_aware(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure datetime is timezone-aware."""
        if v is not None and v.tzinfo is None:
            raise ValueError("Datetime must be timezone-aware (recommend UTC)")
        return v

    @property
    def is_frozen(self) -> bool:
        """Whether the clock ignores the wall clock."""
        return self.frozen_time is not None

    def now(self) -> datetime:
        """Return the current time.

        Returns:
            The frozen time if set, otherwise the current UTC wall-clock time.
        """
        if self.frozen_time is not None:
            return self.frozen_time
        return datetime.now(timezone.utc)

    def set(self, new_time: datetime) -> None:
        """Freeze the clock at a specific time.

        Args:
            new_time: Timezone-aware time to freeze at.

        Raises:
            ValueError: If new_time is naive.
        """
        if new_time.tzinfo is None:
            raise ValueError("Datetime must be timezone-aware (recommend UTC)")
        self.frozen_time = new_time

    def advance(self, delta: timedelta) -> datetime:
        """Move a frozen clock forward.

        Args:
            delta: Amount of time to advance.

        Returns:
            The new current time.

        Raises:
            ValueError: If delta is negative or the clock is not frozen.
        """
        if delta < timedelta(0):
            raise ValueError("Cannot advance time backwards")
        if self.frozen_time is None:
            raise ValueError("Only a frozen clock can be advanced")
        self.frozen_time = self.frozen_time + delta
        return self.frozen_time

    def unfreeze(self) -> None:
        """Return to following the wall clock."""
        self.frozen_time = None
