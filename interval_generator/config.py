"""Configuration management for the interval generator."""

import json
import os
from dataclasses import asdict, dataclass, field, replace
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Sequence
from uuid import UUID

from interval_generator.errors import InvalidArgumentError
from interval_generator.intervals import to_granularity
from interval_generator.models import Granularity, MeasurementClass
from interval_generator.randomization import configuration_hash

MIN_ENTITY_COUNT = 1
MAX_ENTITY_COUNT = 1000


def _to_date(value: Any, name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as exc:
        raise InvalidArgumentError(
            f"{name} must be an ISO date (YYYY-MM-DD), got {value!r}",
            param_name=name,
            value=value,
        ) from exc


def _to_measurement_class(value: Any) -> MeasurementClass:
    if isinstance(value, MeasurementClass):
        return value
    try:
        return MeasurementClass(str(value).strip().upper())
    except ValueError as exc:
        raise InvalidArgumentError(
            f"Unknown measurement class {value!r}. "
            f"Supported values: {', '.join(m.value for m in MeasurementClass)}",
            param_name="measurement_class",
            value=value,
        ) from exc


def _to_uuid(value: Any) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError as exc:
        raise InvalidArgumentError(
            f"Entity id must be a UUID, got {value!r}",
            param_name="entity_ids",
            value=value,
        ) from exc


@dataclass(frozen=True)
class GenerationConfiguration:
    """
    Immutable description of one generation request.

    Field types are normalised on construction (ISO strings to dates,
    minute counts to Granularity, ...). Range checks live in validate()
    so the orchestrator can reject a request before generating anything.
    """

    start_date: date
    end_date: date  # inclusive
    granularity: Granularity
    profile_name: str
    measurement_class: MeasurementClass = MeasurementClass.AI
    entity_count: int = 1
    deterministic: bool = False
    seed: Optional[int] = None  # ignored unless deterministic
    entity_ids: Optional[Sequence[UUID]] = None
    site_name: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_date", _to_date(self.start_date, "start_date"))
        object.__setattr__(self, "end_date", _to_date(self.end_date, "end_date"))
        object.__setattr__(self, "granularity", to_granularity(self.granularity))
        object.__setattr__(
            self, "measurement_class", _to_measurement_class(self.measurement_class)
        )
        if self.entity_ids is not None:
            object.__setattr__(
                self, "entity_ids", tuple(_to_uuid(i) for i in self.entity_ids)
            )

    @property
    def effective_seed(self) -> Optional[int]:
        """Seed actually used: explicit seed, configuration hash, or None."""
        if not self.deterministic:
            return None
        if self.seed is not None:
            return self.seed
        return configuration_hash(self)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            InvalidArgumentError: If the date range is inverted, the entity
                count is out of bounds or the profile name is blank
        """
        if self.end_date < self.start_date:
            raise InvalidArgumentError(
                f"end_date ({self.end_date}) must be on or after start_date ({self.start_date})",
                param_name="end_date",
                value=self.end_date,
            )
        if not MIN_ENTITY_COUNT <= self.entity_count <= MAX_ENTITY_COUNT:
            raise InvalidArgumentError(
                f"entity_count must be between {MIN_ENTITY_COUNT} and "
                f"{MAX_ENTITY_COUNT}, got {self.entity_count}",
                param_name="entity_count",
                value=self.entity_count,
            )
        if not self.profile_name or not self.profile_name.strip():
            raise InvalidArgumentError(
                "profile_name is required",
                param_name="profile_name",
                value=self.profile_name,
            )

    def with_changes(self, **changes: Any) -> "GenerationConfiguration":
        """Copy of this configuration with some fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, data: dict) -> "GenerationConfiguration":
        """Create configuration from dictionary."""
        try:
            return cls(**data)
        except TypeError as e:
            raise ValueError(f"Invalid generation configuration: {e}") from e

    def to_dict(self) -> dict:
        """Convert configuration to a JSON-compatible dictionary."""
        return {
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "granularity": int(self.granularity),
            "profile_name": self.profile_name,
            "measurement_class": self.measurement_class.value,
            "entity_count": self.entity_count,
            "deterministic": self.deterministic,
            "seed": self.seed,
            "entity_ids": (
                [str(i) for i in self.entity_ids] if self.entity_ids is not None else None
            ),
            "site_name": self.site_name,
        }

    @classmethod
    def from_file(cls, path: Path) -> "GenerationConfiguration":
        """Load a single generation request from a JSON file."""
        try:
            with open(path) as f:
                data = json.load(f)
            return cls.from_dict(data)
        except FileNotFoundError as exc:
            raise FileNotFoundError(f"Configuration file not found: {path}") from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in configuration file {path}: {exc}") from exc
        except (OSError, ValueError) as exc:
            raise RuntimeError(f"Failed to load configuration from {path}: {exc}") from exc

    def to_file(self, path: Path) -> None:
        """Save this request to a JSON file."""
        try:
            with open(path, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
        except OSError as exc:
            raise RuntimeError(f"Failed to save configuration to {path}: {exc}") from exc


def default_generation_configuration() -> GenerationConfiguration:
    """One office meter, half-hourly, over 2024, not reproducible."""
    return GenerationConfiguration(
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        granularity=Granularity.THIRTY_MINUTE,
        profile_name="Office",
    )


def _env_int(name: str, current: int) -> int:
    raw = os.environ.get(name)
    if not raw:
        return current
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got: {raw!r}") from e


def _env_bool(name: str, current: bool) -> bool:
    raw = os.environ.get(name)
    if not raw:
        return current
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class OutputSettings:
    """Output configuration.

    Supports environment variable overrides:
    - IG_OUTPUT_FORMAT: Wire format ("csv" or "json")
    - IG_OUTPUT_FILE: Output file path (default: stdout)
    - IG_SITE_NAME: Site label written into the output

    Attributes:
        format: Wire format name
        output_file: Destination path, None for stdout
        site_name: Site label passed to the encoders
        include_header: Whether CSV output starts with a header row
        indent: JSON indentation, None for compact output
    """

    format: str = "csv"
    output_file: Optional[str] = None
    site_name: str = ""
    include_header: bool = True
    indent: Optional[int] = None

    def __post_init__(self) -> None:
        """Apply environment variable overrides only when values are at defaults.

        Precedence: explicit args > env vars > defaults
        """
        if self.format == "csv":
            self.format = os.environ.get("IG_OUTPUT_FORMAT", self.format)
        if self.output_file is None:
            self.output_file = os.environ.get("IG_OUTPUT_FILE") or None
        if self.site_name == "":
            self.site_name = os.environ.get("IG_SITE_NAME", self.site_name)


@dataclass
class StoreSettings:
    """In-memory store configuration.

    Supports environment variable overrides:
    - IG_STORE_METER_COUNT: Meters pre-generated at startup
    - IG_DYNAMIC_GENERATION: Generate unknown external ids on request
    - IG_HISTORY_DAYS: Days of history generated for dynamic meters
    """

    meter_count: int = 100
    enable_dynamic_generation: bool = True
    history_days: int = 3 * 365
    max_workers: int = 4

    def __post_init__(self) -> None:
        """Apply environment variable overrides only when values are at defaults."""
        if self.meter_count == 100:
            self.meter_count = _env_int("IG_STORE_METER_COUNT", self.meter_count)
        if self.enable_dynamic_generation is True:
            self.enable_dynamic_generation = _env_bool(
                "IG_DYNAMIC_GENERATION", self.enable_dynamic_generation
            )
        if self.history_days == 3 * 365:
            self.history_days = _env_int("IG_HISTORY_DAYS", self.history_days)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a value is out of range
        """
        if not MIN_ENTITY_COUNT <= self.meter_count <= MAX_ENTITY_COUNT:
            raise ValueError(
                f"meter_count must be between {MIN_ENTITY_COUNT} and {MAX_ENTITY_COUNT}"
            )
        if self.history_days <= 0:
            raise ValueError("history_days must be positive")
        if self.max_workers <= 0:
            raise ValueError("max_workers must be positive")


@dataclass
class AppConfig:
    """Top-level configuration used by the command line tool."""

    generation: GenerationConfiguration = field(
        default_factory=default_generation_configuration
    )
    output: OutputSettings = field(default_factory=OutputSettings)
    store: StoreSettings = field(default_factory=StoreSettings)

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        """Create config from dictionary."""
        try:
            generation = default_generation_configuration().to_dict()
            generation.update(data.get("generation", {}))
            return cls(
                generation=GenerationConfiguration.from_dict(generation),
                output=OutputSettings(**data.get("output", {})),
                store=StoreSettings(**data.get("store", {})),
            )
        except TypeError as e:
            raise ValueError(f"Invalid configuration format: {e}") from e

    @classmethod
    def from_file(cls, path: Path) -> "AppConfig":
        """Load config from JSON file."""
        try:
            with open(path) as f:
                data = json.load(f)
            return cls.from_dict(data)
        except FileNotFoundError as exc:
            raise FileNotFoundError(
                f"Configuration file not found: {path}",
            ) from exc
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in configuration file {path}: {exc}") from exc
        except (OSError, ValueError) as exc:
            # OSError: read problems; ValueError: invalid configuration structure
            raise RuntimeError(
                f"Failed to load configuration from {path}: {exc}",
            ) from exc

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "generation": self.generation.to_dict(),
            "output": asdict(self.output),
            "store": asdict(self.store),
        }

    def to_file(self, path: Path) -> None:
        """Save config to JSON file."""
        try:
            with open(path, "w") as f:
                json.dump(self.to_dict(), f, indent=2)
        except OSError as exc:
            raise RuntimeError(
                f"Failed to save configuration to {path}: {exc}",
            ) from exc


# Default configuration template
DEFAULT_CONFIG = AppConfig()
