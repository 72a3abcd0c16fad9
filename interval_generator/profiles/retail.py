"""Retail consumption profile."""

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


class RetailProfile(ConsumptionProfile):
    """
    Stores and shopping centres.

    Models:
    - 9am-9pm trading with peak footfall 10am-5pm
    - Friday and weekend shopping surges
    - Holiday-season peak in November and December
    - Higher noise from customer-traffic variability
    """

    name = "Retail"

    BASE_LOAD_KWH = Decimal("90")
    OPENING_HOUR = 9
    CLOSING_HOUR = 21

    DAY_FACTORS = (
        Decimal("0.9"),
        Decimal("0.92"),
        Decimal("0.95"),
        Decimal("1.0"),
        Decimal("1.15"),
        Decimal("1.25"),
        Decimal("1.10"),
    )

    def base_load(self, timestamp: datetime, hour: int) -> Decimal:
        if is_within_hours(hour, self.OPENING_HOUR, self.CLOSING_HOUR):
            return self.BASE_LOAD_KWH
        # Security and refrigeration only
        return self.BASE_LOAD_KWH * Decimal("0.15")

    def time_of_day_factor(self, timestamp: datetime, hour: int) -> Decimal:
        if hour < self.OPENING_HOUR:
            return Decimal("0.2")
        if hour == self.OPENING_HOUR:
            return ramp_up_factor(hour, self.OPENING_HOUR, ramp_hours=1)
        if 10 <= hour < 17:
            return Decimal("1.3")
        if 17 <= hour < 20:
            return Decimal("1.25")
        return ramp_down_factor(hour, self.CLOSING_HOUR, ramp_hours=1)

    def day_of_week_factor(self, timestamp: datetime) -> Decimal:
        return self.DAY_FACTORS[timestamp.weekday()]

    def seasonal_factor(self, timestamp: datetime) -> Decimal:
        month = timestamp.month
        if month in (11, 12):
            return Decimal("1.35")
        if 6 <= month <= 8:
            return Decimal("1.15")
        if month <= 2:
            return Decimal("1.10")
        return Decimal("1.0")

    def noise_factor(self, random_source: RandomSource) -> Decimal:
        return uniform_noise_factor(random_source, 0.12)
