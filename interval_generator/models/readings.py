"""Data models for interval meter readings."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Optional
from uuid import UUID
import json


class Granularity(IntEnum):
    """Interval length in minutes."""

    FIVE_MINUTE = 5
    FIFTEEN_MINUTE = 15
    THIRTY_MINUTE = 30


class MeasurementClass(str, Enum):
    """Energy-flow category of a reading."""

    AI = "AI"  # Active import
    AE = "AE"  # Active export
    RI = "RI"  # Reactive import
    RE = "RE"  # Reactive export


class QualityFlag(str, Enum):
    """Whether a reading was measured, estimated, missing or corrected."""

    ACTUAL = "Actual"
    ESTIMATED = "Estimated"
    MISSING = "Missing"
    CORRECTED = "Corrected"


DEFAULT_UNIT = "kWh"


@dataclass(frozen=True)
class Reading:
    """Consumption for one meter over one interval period."""

    entity_id: UUID  # Internal meter identifier
    external_id: str  # 13-digit identifier used on the wire
    timestamp: datetime  # Period start, UTC
    period: int  # 1-based period index within the day
    value: Decimal  # Consumption in kWh, 2 decimal places
    measurement_class: MeasurementClass
    granularity: Granularity
    profile_name: str
    quality_flag: QualityFlag = QualityFlag.ACTUAL
    unit: str = DEFAULT_UNIT

    @property
    def date_key(self) -> str:
        return self.timestamp.strftime("%Y-%m-%d")

    def to_dict(self) -> dict:
        return {
            "entity_id": str(self.entity_id),
            "external_id": self.external_id,
            "timestamp": self.timestamp.isoformat(),
            "period": self.period,
            "value": float(self.value),
            "measurement_class": self.measurement_class.value,
            "granularity": int(self.granularity),
            "profile_name": self.profile_name,
            "quality_flag": self.quality_flag.value,
            "unit": self.unit,
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: dict) -> "Reading":
        """Create a Reading from its dictionary form."""
        return cls(
            entity_id=UUID(data["entity_id"]),
            external_id=data["external_id"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            period=int(data["period"]),
            value=Decimal(str(data["value"])).quantize(Decimal("0.01")),
            measurement_class=MeasurementClass(data["measurement_class"]),
            granularity=Granularity(int(data["granularity"])),
            profile_name=data["profile_name"],
            quality_flag=QualityFlag(data.get("quality_flag", QualityFlag.ACTUAL.value)),
            unit=data.get("unit", DEFAULT_UNIT),
        )


@dataclass(frozen=True)
class GenerationResult:
    """
    Fully materialized output of an eager generation run.

    Statistics are derived from the readings each time they are read;
    nothing beyond the readings and the configuration is stored.
    """

    readings: tuple[Reading, ...]
    configuration: "GenerationConfiguration"  # noqa: F821
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def total_readings(self) -> int:
        return len(self.readings)

    @property
    def entity_ids(self) -> list[UUID]:
        """Distinct entity ids in first-seen order."""
        return list(dict.fromkeys(r.entity_id for r in self.readings))

    @property
    def external_ids(self) -> list[str]:
        """Distinct external ids in first-seen order."""
        return list(dict.fromkeys(r.external_id for r in self.readings))

    @property
    def entity_count(self) -> int:
        return len(self.entity_ids)

    @property
    def total_consumption(self) -> Decimal:
        return sum((r.value for r in self.readings), Decimal("0"))

    @property
    def min_consumption(self) -> Decimal:
        if not self.readings:
            return Decimal("0")
        return min(r.value for r in self.readings)

    @property
    def max_consumption(self) -> Decimal:
        if not self.readings:
            return Decimal("0")
        return max(r.value for r in self.readings)

    @property
    def mean_consumption(self) -> Decimal:
        if not self.readings:
            return Decimal("0")
        return self.total_consumption / len(self.readings)

    def summary(self) -> dict:
        """Aggregate statistics as a plain dictionary."""
        return {
            "total_readings": self.total_readings,
            "entity_count": self.entity_count,
            "total_consumption": float(self.total_consumption),
            "min_consumption": float(self.min_consumption),
            "max_consumption": float(self.max_consumption),
            "mean_consumption": round(float(self.mean_consumption), 4),
            "generated_at": self.generated_at.isoformat(),
        }
