"""Consumption profile interface and shared factor helpers."""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal

from interval_generator.randomization import RandomSource

ONE = Decimal("1.0")
ZERO = Decimal("0.0")


class ConsumptionProfile(ABC):
    """
    Named strategy producing consumption multipliers for a timestamp.

    A reading is the product of all five factors. Implementations must
    return non-negative values so the product is never negative.
    Defaults for the seasonal and noise factors are provided as free
    functions below; each profile calls them explicitly or supplies its own.
    """

    name: str

    @abstractmethod
    def base_load(self, timestamp: datetime, hour: int) -> Decimal:
        """Base consumption in kWh for the interval."""

    @abstractmethod
    def time_of_day_factor(self, timestamp: datetime, hour: int) -> Decimal:
        """Peak/off-peak multiplier, typically 0.0 to 2.0."""

    @abstractmethod
    def day_of_week_factor(self, timestamp: datetime) -> Decimal:
        """Weekday/weekend multiplier, typically 0.1 to 1.5."""

    @abstractmethod
    def seasonal_factor(self, timestamp: datetime) -> Decimal:
        """Summer/winter multiplier, typically 0.8 to 1.4."""

    @abstractmethod
    def noise_factor(self, random_source: RandomSource) -> Decimal:
        """Random multiplier close to 1.0."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def northern_seasonal_factor(timestamp: datetime) -> Decimal:
    """
    Default Northern-hemisphere seasonality.

    Summer (Jun-Aug) +20% for cooling, winter (Dec-Feb) +10% for heating.
    """
    month = timestamp.month
    if 6 <= month <= 8:
        return Decimal("1.20")
    if month == 12 or month <= 2:
        return Decimal("1.10")
    return ONE


def uniform_noise_factor(random_source: RandomSource, spread: float = 0.10) -> Decimal:
    """
    Uniform multiplier in [1 - spread, 1 + spread).

    Draws exactly one value from the random source.
    """
    variation = random_source.next_uniform() * (2 * spread) - spread
    return Decimal(1.0 + variation)


def is_weekday(timestamp: datetime) -> bool:
    """Monday to Friday."""
    return timestamp.weekday() < 5


def is_within_hours(hour: int, start_hour: int, end_hour: int) -> bool:
    """Check start_hour <= hour < end_hour."""
    return start_hour <= hour < end_hour


def ramp_up_factor(hour: int, start_hour: int, ramp_hours: int = 1) -> Decimal:
    """
    Linear ramp from 0 at start_hour to 1 after ramp_hours.

    The opening hour itself is 0.
    """
    if hour < start_hour:
        return ZERO
    since_open = hour - start_hour
    if since_open >= ramp_hours:
        return ONE
    return Decimal(since_open) / Decimal(ramp_hours)


def ramp_down_factor(hour: int, end_hour: int, ramp_hours: int = 1) -> Decimal:
    """Linear ramp from 1 down to 0 at end_hour."""
    if hour >= end_hour:
        return ZERO
    until_close = end_hour - hour
    if until_close > ramp_hours:
        return ONE
    return Decimal(until_close) / Decimal(ramp_hours)
