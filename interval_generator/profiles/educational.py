"""Educational institution consumption profile."""

from datetime import datetime
from decimal import Decimal

from interval_generator.randomization import RandomSource
from .base import (
    ConsumptionProfile,
    is_within_hours,
    ramp_down_factor,
    ramp_up_factor,
    uniform_noise_factor,
)


def is_term_time(timestamp: datetime) -> bool:
    """Academic year runs September to June; July and August are the break."""
    return timestamp.month not in (7, 8)


class EducationalProfile(ConsumptionProfile):
    """
    Schools and universities.

    Models:
    - Term time (Sep-Jun) versus the summer break
    - 8am-6pm teaching day, classes peaking 10am-3pm
    - Light Fridays and near-idle weekends
    """

    name = "Educational"

    BASE_LOAD_KWH = Decimal("120")
    OPENING_HOUR = 8
    CLOSING_HOUR = 18

    DAY_FACTORS = (
        Decimal("1.0"),
        Decimal("1.05"),
        Decimal("1.05"),
        Decimal("1.0"),
        Decimal("0.95"),
        Decimal("0.4"),
        Decimal("0.3"),
    )

    def base_load(self, timestamp: datetime, hour: int) -> Decimal:
        if not is_term_time(timestamp):
            return self.BASE_LOAD_KWH * Decimal("0.3")
        if is_within_hours(hour, self.OPENING_HOUR, self.CLOSING_HOUR):
            return self.BASE_LOAD_KWH
        return self.BASE_LOAD_KWH * Decimal("0.25")

    def time_of_day_factor(self, timestamp: datetime, hour: int) -> Decimal:
        if not is_term_time(timestamp):
            return Decimal("0.3")
        if not is_within_hours(hour, self.OPENING_HOUR, self.CLOSING_HOUR):
            return Decimal("0.3")
        if hour == self.OPENING_HOUR:
            return ramp_up_factor(hour, self.OPENING_HOUR, ramp_hours=1)
        if 10 <= hour < 15:
            return Decimal("1.3")
        if 15 <= hour < 17:
            return Decimal("1.15")
        if hour >= 17:
            return ramp_down_factor(hour, self.CLOSING_HOUR, ramp_hours=1)
        return Decimal("0.9")

    def day_of_week_factor(self, timestamp: datetime) -> Decimal:
        if not is_term_time(timestamp):
            return Decimal("1.0")
        return self.DAY_FACTORS[timestamp.weekday()]

    def seasonal_factor(self, timestamp: datetime) -> Decimal:
        month = timestamp.month
        if not is_term_time(timestamp):
            return Decimal("0.5")
        if 5 <= month <= 6:
            return Decimal("1.15")
        if month <= 2:
            return Decimal("1.20")
        if 9 <= month <= 10:
            return Decimal("1.05")
        return Decimal("1.0")

    def noise_factor(self, random_source: RandomSource) -> Decimal:
        return uniform_noise_factor(random_source)
