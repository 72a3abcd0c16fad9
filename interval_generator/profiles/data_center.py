"""Data center consumption profile."""

from datetime import datetime
from decimal import Decimal

from interval_generator.randomization import RandomSource
from .base import ConsumptionProfile, uniform_noise_factor


class DataCenterProfile(ConsumptionProfile):
    """Steady 24/7 IT load dominated by cooling; almost no variation."""

    name = "DataCenter"

    BASE_LOAD_KWH = Decimal("500")

    def base_load(self, timestamp: datetime, hour: int) -> Decimal:
        return self.BASE_LOAD_KWH

    def time_of_day_factor(self, timestamp: datetime, hour: int) -> Decimal:
        # Scheduled maintenance window
        if hour == 3:
            return Decimal("0.95")
        return Decimal("1.0")

    def day_of_week_factor(self, timestamp: datetime) -> Decimal:
        return Decimal("1.0")

    def seasonal_factor(self, timestamp: datetime) -> Decimal:
        month = timestamp.month
        if 6 <= month <= 8:
            return Decimal("1.20")
        if month == 12 or month <= 2:
            return Decimal("0.95")  # Free cooling
        return Decimal("1.0")

    def noise_factor(self, random_source: RandomSource) -> Decimal:
        return uniform_noise_factor(random_source, 0.02)
