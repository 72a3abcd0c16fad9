"""Data models for interval readings and stored meters."""

from .readings import (
    DEFAULT_UNIT,
    GenerationResult,
    Granularity,
    MeasurementClass,
    QualityFlag,
    Reading,
)
from .meter_details import MeterAddress, MeterDetails

__all__ = [
    "DEFAULT_UNIT",
    "GenerationResult",
    "Granularity",
    "MeasurementClass",
    "MeterAddress",
    "MeterDetails",
    "QualityFlag",
    "Reading",
]
