"""Exception types and non-error outcomes for interval generation."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional


class IntervalGeneratorError(Exception):
    """Base class for all interval generator errors."""


class InvalidArgumentError(IntervalGeneratorError, ValueError):
    """Raised when a caller supplies an invalid argument or configuration value.

    Attributes:
        param_name: Name of the offending parameter
        value: The offending value
    """

    def __init__(self, message: str, param_name: Optional[str] = None, value: Any = None):
        super().__init__(message)
        self.param_name = param_name
        self.value = value


class ProfileNotFoundError(InvalidArgumentError, LookupError):
    """Raised when a profile name is not present in the registry."""

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.available = sorted(available)
        super().__init__(
            f"Unknown profile {name!r}. Available profiles: {', '.join(self.available)}",
            param_name="profile_name",
            value=name,
        )


class WriteOutcome(str, Enum):
    """Result of consuming a reading stream into a sink."""

    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a write plus how many readings reached the sink."""

    outcome: WriteOutcome
    readings_written: int

    @property
    def cancelled(self) -> bool:
        return self.outcome is WriteOutcome.CANCELLED


class MeterNotFoundError(IntervalGeneratorError, LookupError):
    """Raised when an external id is not held by the meter store."""

    def __init__(self, external_id: str):
        super().__init__(f"Meter {external_id} not found")
        self.external_id = external_id
