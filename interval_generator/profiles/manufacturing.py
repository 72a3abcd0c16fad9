"""Manufacturing plant consumption profile."""

from datetime import datetime
from decimal import Decimal

from interval_generator.randomization import RandomSource
from .base import ConsumptionProfile, uniform_noise_factor


class ManufacturingProfile(ConsumptionProfile):
    """
    Continuous-process manufacturing.

    Runs 24/7 with a high baseline, a short maintenance dip at 2am and
    slightly reduced weekend staffing.
    """

    name = "Manufacturing"

    BASE_LOAD_KWH = Decimal("400")

    def base_load(self, timestamp: datetime, hour: int) -> Decimal:
        return self.BASE_LOAD_KWH

    def time_of_day_factor(self, timestamp: datetime, hour: int) -> Decimal:
        if hour == 2:  # Maintenance window
            return Decimal("0.7")
        if 6 <= hour < 18:  # Day shift
            return Decimal("1.05")
        if hour >= 18 or hour < 2:  # Evening shift
            return Decimal("1.0")
        return Decimal("0.85")  # Night shift

    def day_of_week_factor(self, timestamp: datetime) -> Decimal:
        if timestamp.weekday() >= 5:
            return Decimal("0.95")
        return Decimal("1.0")

    def seasonal_factor(self, timestamp: datetime) -> Decimal:
        month = timestamp.month
        if 6 <= month <= 8:
            return Decimal("1.12")
        if month == 12 or month <= 2:
            return Decimal("1.08")
        return Decimal("1.0")

    def noise_factor(self, random_source: RandomSource) -> Decimal:
        return uniform_noise_factor(random_source, 0.05)
