"""
Reading generator - produces the interval readings for a single meter.

Readings are yielded lazily, one period at a time, so a caller can stream
years of data without holding it in memory.
"""

import logging
from datetime import date, datetime
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Iterator
from uuid import UUID

from interval_generator.errors import InvalidArgumentError
from interval_generator.intervals import (
    GranularityLike,
    iter_dates,
    period_start,
    periods_per_day,
    to_granularity,
)
from interval_generator.models import Granularity, MeasurementClass, QualityFlag, Reading
from interval_generator.profiles import ConsumptionProfile
from interval_generator.randomization import RandomSource

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


class ReadingGenerator:
    """
    Combines one consumption profile with one random source.

    The random source is consumed in period order, so for a seeded source
    the output depends only on the seed, the profile and the date range.
    """

    def __init__(self, profile: ConsumptionProfile, random_source: RandomSource):
        """
        Initialize the generator.

        Args:
            profile: Profile supplying the consumption factors
            random_source: Source for the per-reading noise factor
        """
        if profile is None:
            raise InvalidArgumentError("profile is required", param_name="profile")
        if random_source is None:
            raise InvalidArgumentError("random_source is required", param_name="random_source")
        self.profile = profile
        self.random_source = random_source

    def calculate_consumption(self, timestamp: datetime) -> Decimal:
        """
        Consumption for the period starting at ``timestamp``.

        base * time-of-day * day-of-week * seasonal * noise, clamped at zero
        and then rounded once to two decimal places.
        """
        hour = timestamp.hour
        profile = self.profile

        consumption = (
            profile.base_load(timestamp, hour)
            * profile.time_of_day_factor(timestamp, hour)
            * profile.day_of_week_factor(timestamp)
            * profile.seasonal_factor(timestamp)
            * profile.noise_factor(self.random_source)
        )

        return max(ZERO, consumption).quantize(TWO_PLACES, rounding=ROUND_HALF_EVEN)

    def generate_readings(
        self,
        entity_id: UUID,
        external_id: str,
        start_date: date,
        end_date: date,
        granularity: GranularityLike,
        measurement_class: MeasurementClass = MeasurementClass.AI,
    ) -> Iterator[Reading]:
        """
        Readings for every period of every day in [start_date, end_date].

        Arguments are checked immediately; the returned iterator is lazy.
        Iterating it again requires calling this method again.

        Raises:
            InvalidArgumentError: If end_date < start_date or external_id is blank
        """
        if not external_id or not external_id.strip():
            raise InvalidArgumentError(
                "external_id cannot be empty", param_name="external_id", value=external_id
            )
        if end_date < start_date:
            raise InvalidArgumentError(
                f"end_date ({end_date}) must be on or after start_date ({start_date})",
                param_name="end_date",
                value=end_date,
            )
        g = to_granularity(granularity)

        return self._iter_readings(
            entity_id, external_id, start_date, end_date, g, measurement_class
        )

    def _iter_readings(
        self,
        entity_id: UUID,
        external_id: str,
        start_date: date,
        end_date: date,
        granularity: Granularity,
        measurement_class: MeasurementClass,
    ) -> Iterator[Reading]:
        count = periods_per_day(granularity)
        logger.debug(
            "Generating %s readings for %s (%s to %s, %d periods/day)",
            self.profile.name,
            external_id,
            start_date,
            end_date,
            count,
        )

        for day in iter_dates(start_date, end_date):
            for index in range(1, count + 1):
                timestamp = period_start(day, index, granularity)
                yield Reading(
                    entity_id=entity_id,
                    external_id=external_id,
                    timestamp=timestamp,
                    period=index,
                    value=self.calculate_consumption(timestamp),
                    measurement_class=measurement_class,
                    granularity=granularity,
                    profile_name=self.profile.name,
                    quality_flag=QualityFlag.ACTUAL,
                )
