"""
Nested (per-period) wire format.

Readings are grouped by external id, then measurement class, then
calendar date, then period:

    {"<external id>": {"site": ..., "MC": {"AI": {"2024-01-01": {
        "1": {"period": 1, "value": 2.5, "qualityFlag": "A", "unit": "kWh"},
        ...}}}}}

For half-hourly data the upstream schema always carries two extra periods,
49 and 50, with null value and quality flag. They are reproduced here.
15- and 5-minute data is never padded.
"""

import threading
from typing import Any, Iterable, Optional, TextIO

import simplejson

from interval_generator.errors import WriteOutcome, WriteResult
from interval_generator.intervals import periods_per_day
from interval_generator.models import Reading
from .flat import quality_flag_code

HALF_HOURLY_PERIODS = 48
PADDING_PERIODS = (49, 50)


def period_entry(reading: Reading) -> dict:
    return {
        "period": reading.period,
        "value": reading.value,
        "qualityFlag": quality_flag_code(reading.quality_flag),
        "unit": reading.unit,
    }


def placeholder_entry(period: int, unit: str) -> dict:
    return {"period": period, "value": None, "qualityFlag": None, "unit": unit}


class NestedEncoder:
    """Incrementally builds the nested structure one reading at a time."""

    def __init__(self, site_name: Optional[str] = None):
        self.site_name = site_name
        # external id -> class -> date -> {period: reading}
        self._entities: dict[str, dict[str, dict[str, dict[int, Reading]]]] = {}

    def add(self, reading: Reading) -> None:
        classes = self._entities.setdefault(reading.external_id, {})
        dates = classes.setdefault(reading.measurement_class.value, {})
        dates.setdefault(reading.date_key, {})[reading.period] = reading

    def build(self) -> dict:
        output: dict[str, Any] = {}
        for external_id, classes in self._entities.items():
            block: dict[str, Any] = {}
            if self.site_name is not None:
                block["site"] = self.site_name
            block["MC"] = {
                mc: {day: self._encode_day(periods) for day, periods in dates.items()}
                for mc, dates in classes.items()
            }
            output[external_id] = block
        return output

    @staticmethod
    def _encode_day(periods: dict[int, Reading]) -> dict:
        ordered = [periods[p] for p in sorted(periods)]
        encoded = {str(r.period): period_entry(r) for r in ordered}
        first = ordered[0]
        if periods_per_day(first.granularity) == HALF_HOURLY_PERIODS:
            for padding in PADDING_PERIODS:
                encoded[str(padding)] = placeholder_entry(padding, first.unit)
        return encoded


def encode_nested(readings: Iterable[Reading], site_name: Optional[str] = None) -> dict:
    """Group readings into the nested wire structure."""
    encoder = NestedEncoder(site_name)
    for reading in readings:
        encoder.add(reading)
    return encoder.build()


def to_json(structure: dict, indent: Optional[int] = None) -> str:
    """Serialise an encoded structure; decimals keep their scale (1.20, not 1.2)."""
    return simplejson.dumps(structure, indent=indent, use_decimal=True)


def write_nested_json(
    readings: Iterable[Reading],
    stream: TextIO,
    site_name: Optional[str] = None,
    *,
    indent: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
) -> WriteResult:
    """
    Encode readings and write the JSON document to ``stream``.

    Grouping needs every reading, so nothing is written until the input
    is exhausted. A cancellation before then leaves the stream untouched.
    """
    encoder = NestedEncoder(site_name)
    count = 0
    for reading in readings:
        if cancel_event is not None and cancel_event.is_set():
            return WriteResult(WriteOutcome.CANCELLED, 0)
        encoder.add(reading)
        count += 1

    stream.write(to_json(encoder.build(), indent=indent))
    return WriteResult(WriteOutcome.COMPLETED, count)
