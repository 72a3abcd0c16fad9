"""Wire encoders for generated readings."""

from typing import Callable

from interval_generator.errors import InvalidArgumentError, WriteResult
from .flat import (
    FLAT_HEADER,
    QUALITY_FLAG_CODES,
    encode_flat,
    quality_flag_code,
    to_dataframe,
    write_flat_csv,
)
from .nested import NestedEncoder, encode_nested, to_json, write_nested_json

_FORMATS: dict[str, tuple[Callable[..., WriteResult], str]] = {
    "csv": (write_flat_csv, ".csv"),
    "json": (write_nested_json, ".json"),
}


def _lookup(format_name: str) -> tuple[Callable[..., WriteResult], str]:
    if not format_name or not format_name.strip():
        raise InvalidArgumentError("Format cannot be empty", param_name="format", value=format_name)
    try:
        return _FORMATS[format_name.strip().lower()]
    except KeyError:
        raise InvalidArgumentError(
            f"Unknown format {format_name!r}. Supported formats: {', '.join(_FORMATS)}",
            param_name="format",
            value=format_name,
        ) from None


def get_writer(format_name: str) -> Callable[..., WriteResult]:
    """Writer function for "csv" or "json" (case-insensitive)."""
    return _lookup(format_name)[0]


def file_extension(format_name: str) -> str:
    return _lookup(format_name)[1]


def supported_formats() -> list[str]:
    return list(_FORMATS)


__all__ = [
    "FLAT_HEADER",
    "NestedEncoder",
    "QUALITY_FLAG_CODES",
    "encode_flat",
    "encode_nested",
    "file_extension",
    "get_writer",
    "quality_flag_code",
    "supported_formats",
    "to_dataframe",
    "to_json",
    "write_flat_csv",
    "write_nested_json",
]
