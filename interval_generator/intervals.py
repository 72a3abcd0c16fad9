"""Period arithmetic for fixed-length intervals within a UTC day."""

from datetime import date, datetime, time, timedelta, timezone
from typing import Iterator, Union

from interval_generator.errors import InvalidArgumentError
from interval_generator.models import Granularity

MINUTES_PER_DAY = 1440

GranularityLike = Union[Granularity, int]


def to_granularity(granularity: GranularityLike) -> Granularity:
    """
    Coerce an integer minute count to a Granularity.

    Raises:
        InvalidArgumentError: If the value is not 5, 15 or 30
    """
    try:
        return Granularity(int(granularity))
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(
            f"Unsupported granularity: {granularity!r}. "
            f"Supported values: {', '.join(str(g.value) for g in Granularity)}",
            param_name="granularity",
            value=granularity,
        ) from exc


def periods_per_day(granularity: GranularityLike) -> int:
    """Number of periods in a day: 288, 96 or 48."""
    return MINUTES_PER_DAY // to_granularity(granularity).value


def period_index(timestamp: datetime, granularity: GranularityLike) -> int:
    """1-based index of the period containing ``timestamp``."""
    minutes = timestamp.hour * 60 + timestamp.minute
    return minutes // to_granularity(granularity).value + 1


def is_valid_period(index: int, granularity: GranularityLike) -> bool:
    """Check that a period index falls within the day."""
    return 1 <= index <= periods_per_day(granularity)


def _check_period(index: int, granularity: GranularityLike) -> Granularity:
    g = to_granularity(granularity)
    if not is_valid_period(index, g):
        raise InvalidArgumentError(
            f"Period {index} is out of range 1..{periods_per_day(g)} "
            f"for {g.value}-minute intervals",
            param_name="index",
            value=index,
        )
    return g


def _midnight(day: date) -> datetime:
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def period_start(day: date, index: int, granularity: GranularityLike) -> datetime:
    """
    Start timestamp (UTC) of a period.

    Inverse of period_index: period 1 always starts at midnight.

    Raises:
        InvalidArgumentError: If the index is outside the day
    """
    g = _check_period(index, granularity)
    return _midnight(day) + timedelta(minutes=(index - 1) * g.value)


def period_end(day: date, index: int, granularity: GranularityLike) -> datetime:
    """End timestamp (exclusive) of a period; the last period ends at next midnight."""
    g = _check_period(index, granularity)
    return _midnight(day) + timedelta(minutes=index * g.value)


def days_in_range(start: date, end: date) -> int:
    """Inclusive number of calendar days between two dates."""
    return (end - start).days + 1


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from start to end inclusive."""
    current = start
    one_day = timedelta(days=1)
    while current <= end:
        yield current
        current += one_day
