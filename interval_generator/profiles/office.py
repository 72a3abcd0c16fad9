"""Office building consumption profile."""

from datetime import datetime
from decimal import Decimal

from interval_generator.randomization import RandomSource
from .base import (
    ConsumptionProfile,
    is_weekday,
    is_within_hours,
    ramp_down_factor,
    ramp_up_factor,
    uniform_noise_factor,
)


class OfficeProfile(ConsumptionProfile):
    """
    Office buildings.

    Models:
    - 8am-6pm weekday occupancy with a two-hour ramp at each end
    - Very low weekend consumption
    - Strong summer AC and winter heating loads
    """

    name = "Office"

    BASE_LOAD_KWH = Decimal("80")
    OPENING_HOUR = 8
    CLOSING_HOUR = 18

    # Monday .. Sunday
    DAY_FACTORS = (
        Decimal("1.0"),
        Decimal("1.0"),
        Decimal("1.0"),
        Decimal("1.0"),
        Decimal("0.95"),
        Decimal("0.2"),
        Decimal("0.15"),
    )

    def base_load(self, timestamp: datetime, hour: int) -> Decimal:
        if is_weekday(timestamp) and is_within_hours(hour, self.OPENING_HOUR, self.CLOSING_HOUR):
            return self.BASE_LOAD_KWH
        # Standby load outside business hours
        return self.BASE_LOAD_KWH * Decimal("0.2")

    def time_of_day_factor(self, timestamp: datetime, hour: int) -> Decimal:
        if not is_within_hours(hour, self.OPENING_HOUR, self.CLOSING_HOUR):
            return Decimal("0.3")
        if hour == self.OPENING_HOUR:
            return ramp_up_factor(hour, self.OPENING_HOUR, ramp_hours=2)
        if 10 <= hour < 16:
            return Decimal("1.2")
        if hour >= 16:
            return ramp_down_factor(hour, self.CLOSING_HOUR, ramp_hours=2)
        return Decimal("0.8")

    def day_of_week_factor(self, timestamp: datetime) -> Decimal:
        return self.DAY_FACTORS[timestamp.weekday()]

    def seasonal_factor(self, timestamp: datetime) -> Decimal:
        month = timestamp.month
        if 6 <= month <= 8:
            return Decimal("1.25")
        if month == 12 or month <= 2:
            return Decimal("1.15")
        return Decimal("1.0")

    def noise_factor(self, random_source: RandomSource) -> Decimal:
        return uniform_noise_factor(random_source, 0.08)
