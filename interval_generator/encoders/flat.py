"""
Flat (CSV) wire format.

One row per reading:

    ExternalId,Site,MeasurementClass,Date,Period,Value,QualityFlag,Unit
    1266448934017,Site A,AI,2024-01-01,1,2.50,A,kWh
"""

import csv
import threading
from typing import Iterable, Optional, TextIO

import pandas as pd

from interval_generator.errors import WriteOutcome, WriteResult
from interval_generator.models import QualityFlag, Reading

FLAT_HEADER = [
    "ExternalId",
    "Site",
    "MeasurementClass",
    "Date",
    "Period",
    "Value",
    "QualityFlag",
    "Unit",
]

QUALITY_FLAG_CODES = {
    QualityFlag.ACTUAL: "A",
    QualityFlag.ESTIMATED: "E",
    QualityFlag.MISSING: "M",
    QualityFlag.CORRECTED: "X",
}


def quality_flag_code(flag: QualityFlag) -> str:
    """Single-letter code; unmapped values fall back to "A"."""
    return QUALITY_FLAG_CODES.get(flag, "A")


def flat_row(reading: Reading, site_name: Optional[str] = None) -> list[str]:
    return [
        reading.external_id,
        site_name or "",
        reading.measurement_class.value,
        reading.date_key,
        str(reading.period),
        f"{reading.value:.2f}",
        quality_flag_code(reading.quality_flag),
        reading.unit,
    ]


def encode_flat(readings: Iterable[Reading], site_name: Optional[str] = None) -> list[list[str]]:
    """
    Rows for all readings, without header.

    Meters keep the order in which they first appear; within a meter rows
    are chronological and then by ascending period.
    """
    readings = list(readings)
    entity_order: dict = {}
    for reading in readings:
        entity_order.setdefault(reading.entity_id, len(entity_order))

    ordered = sorted(
        readings,
        key=lambda r: (entity_order[r.entity_id], r.timestamp, r.period),
    )
    return [flat_row(r, site_name) for r in ordered]


def write_flat_csv(
    readings: Iterable[Reading],
    stream: TextIO,
    site_name: Optional[str] = None,
    *,
    include_header: bool = True,
    cancel_event: Optional[threading.Event] = None,
) -> WriteResult:
    """
    Stream rows to ``stream`` in input order.

    The cancel event is checked before every reading; rows already written
    stay in the stream when cancelled.
    """
    writer = csv.writer(stream, lineterminator="\n")
    if include_header:
        writer.writerow(FLAT_HEADER)

    count = 0
    for reading in readings:
        if cancel_event is not None and cancel_event.is_set():
            return WriteResult(WriteOutcome.CANCELLED, count)
        writer.writerow(flat_row(reading, site_name))
        count += 1
    return WriteResult(WriteOutcome.COMPLETED, count)


def to_dataframe(readings: Iterable[Reading], site_name: Optional[str] = None) -> pd.DataFrame:
    """Flat rows as a DataFrame with typed Date, Period and Value columns."""
    df = pd.DataFrame(encode_flat(readings, site_name), columns=FLAT_HEADER)
    if not df.empty:
        df["Date"] = pd.to_datetime(df["Date"], format="%Y-%m-%d")
        df["Period"] = df["Period"].astype(int)
        df["Value"] = df["Value"].astype(float)
    return df
