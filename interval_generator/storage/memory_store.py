"""In-memory store of pre-generated meter readings.

Meters are generated once at start-up and looked up by their 13-digit
external id. Unknown external ids can be generated on demand when dynamic
generation is enabled.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from interval_generator.config import (
    GenerationConfiguration,
    StoreSettings,
    default_generation_configuration,
)
from interval_generator.engine import ReadingGenerator
from interval_generator.errors import InvalidArgumentError, MeterNotFoundError
from interval_generator.identifiers import (
    derive_external_id,
    entity_id_for_external_id,
    entity_id_from_bytes,
    is_valid_external_id,
)
from interval_generator.models import MeasurementClass, MeterAddress, MeterDetails, Reading
from interval_generator.orchestrator import MultiMeterOrchestrator
from interval_generator.randomization import SeededRandomSource

logger = logging.getLogger(__name__)

DEFAULT_STORE_SEED = 42


def _default_base() -> GenerationConfiguration:
    """Stored meters are reproducible even without an explicit request."""
    return default_generation_configuration().with_changes(
        deterministic=True, seed=DEFAULT_STORE_SEED
    )


class InMemoryMeterDataStore:
    """Thread-safe in-memory meter store.

    Example:
        >>> store = InMemoryMeterDataStore()
        >>> store.initialize(meter_count=10)
        >>> external_id = store.get_all_external_ids()[0]
        >>> readings = store.get_readings(external_id, start_date=date(2024, 3, 1))
    """

    # Profiles assigned to meters in rotation
    PROFILE_ROTATION = ("Office", "Manufacturing", "Retail", "DataCenter", "Educational")

    # Sample addresses for realistic metadata
    STREETS = (
        "High Street", "Main Street", "Station Road", "Church Lane", "Park Avenue",
        "Victoria Road", "Mill Lane", "School Road", "Market Square", "Bridge Street",
    )
    CITIES = (
        "London", "Manchester", "Birmingham", "Leeds", "Bristol",
        "Liverpool", "Sheffield", "Newcastle", "Edinburgh", "Cardiff",
    )
    POST_CODES = (
        "SW1A 1AA", "M1 1AE", "B1 1AA", "LS1 1BA", "BS1 1AA",
        "L1 1JD", "S1 1AA", "NE1 1AA", "EH1 1AA", "CF10 1AA",
    )

    def __init__(
        self,
        orchestrator: Optional[MultiMeterOrchestrator] = None,
        settings: Optional[StoreSettings] = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            orchestrator: Orchestrator supplying profiles and random sources
            settings: Store settings (meter count, dynamic generation, ...)

        Raises:
            ValueError: If the settings are out of range
        """
        self.orchestrator = orchestrator or MultiMeterOrchestrator()
        self.settings = settings or StoreSettings()
        self.settings.validate()
        self._readings: dict[str, list[Reading]] = {}
        self._details: dict[str, MeterDetails] = {}
        self._lock = threading.Lock()
        self._base_configuration: Optional[GenerationConfiguration] = None
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def meter_count(self) -> int:
        return len(self._details)

    def initialize(
        self,
        base_configuration: Optional[GenerationConfiguration] = None,
        meter_count: Optional[int] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        """Pre-generate ``meter_count`` meters.

        Calling this again on an initialized store does nothing.

        Args:
            base_configuration: Date range, granularity, class and seed to use
            meter_count: Number of meters (default: settings.meter_count)
            max_workers: Generation threads (default: settings.max_workers)
        """
        if self._initialized:
            logger.warning("Store already initialized with %d meters", self.meter_count)
            return

        base = base_configuration or _default_base()
        count = meter_count if meter_count is not None else self.settings.meter_count
        base.with_changes(entity_count=count).validate()
        self._base_configuration = base

        logger.info("Initializing meter data store with %d meters...", count)
        start_time = time.time()

        workers = max_workers or self.settings.max_workers
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # list() re-raises the first worker exception
            list(executor.map(lambda i: self._generate_meter(i, base), range(count)))

        self._initialized = True
        logger.info(
            "Initialized %d meters with %d total readings in %.0fms",
            self.meter_count,
            sum(len(r) for r in self._readings.values()),
            (time.time() - start_time) * 1000,
        )

    def _generate_meter(self, index: int, base: GenerationConfiguration) -> None:
        seed = base.seed if base.seed is not None else DEFAULT_STORE_SEED
        entity_id = entity_id_from_bytes(SeededRandomSource(seed + index).next_bytes(16))
        external_id = derive_external_id(entity_id)
        profile_name = self.PROFILE_ROTATION[index % len(self.PROFILE_ROTATION)]

        configuration = base.with_changes(
            profile_name=profile_name,
            entity_count=1,
            entity_ids=(entity_id,),
        )
        readings = list(self.orchestrator.generate_for_entity(configuration, entity_id))
        details = self._build_details(index, external_id, entity_id, profile_name, base)

        with self._lock:
            if external_id in self._details:
                logger.warning(
                    "External id %s already stored; skipping meter %d", external_id, index
                )
                return
            self._readings[external_id] = readings
            self._details[external_id] = details

    def _build_details(
        self,
        index: int,
        external_id: str,
        entity_id,
        profile_name: str,
        base: GenerationConfiguration,
    ) -> MeterDetails:
        address_index = index % len(self.STREETS)
        return MeterDetails(
            external_id=external_id,
            entity_id=entity_id,
            site_name=f"{profile_name} Site {index + 1}",
            profile_name=profile_name,
            address=MeterAddress(
                line1=f"{(index + 1) * 10} {self.STREETS[address_index]}",
                line2=f"Unit {index + 1}",
                line3=self.CITIES[address_index],
                post_code=self.POST_CODES[address_index],
            ),
            capacity=str((index % 5 + 1) * 100),
            supplier_id=f"SUPPLIER{index % 10 + 1:03d}",
            asset_provider_id=f"PROVIDER{index % 5 + 1:03d}",
            measurement_class=base.measurement_class.value,
        )

    def generate_and_store(
        self, external_id: str, start_date: date, end_date: date
    ) -> list[Reading]:
        """Generate and store readings for an external id not yet in the store.

        The internal id is derived from the external id, so repeated calls
        produce the same readings.

        Raises:
            InvalidArgumentError: If the external id is not 13 digits or the
                date range is inverted
        """
        if not is_valid_external_id(external_id):
            raise InvalidArgumentError(
                f"External id must be exactly 13 digits, got {external_id!r}",
                param_name="external_id",
                value=external_id,
            )

        base = self._base_configuration or _default_base()
        entity_id = entity_id_for_external_id(external_id)
        index = int(external_id) % len(self.PROFILE_ROTATION)
        profile_name = self.PROFILE_ROTATION[index]
        configuration = base.with_changes(
            start_date=start_date,
            end_date=end_date,
            profile_name=profile_name,
            entity_count=1,
            entity_ids=(entity_id,),
        )
        configuration.validate()

        generator = ReadingGenerator(
            self.orchestrator.registry.get_profile(profile_name),
            self.orchestrator.entity_random_source(configuration, entity_id),
        )
        readings = list(
            generator.generate_readings(
                entity_id,
                external_id,
                configuration.start_date,
                configuration.end_date,
                configuration.granularity,
                configuration.measurement_class,
            )
        )
        details = MeterDetails(
            external_id=external_id,
            entity_id=entity_id,
            site_name=f"{profile_name} Site {external_id}",
            profile_name=profile_name,
            measurement_class=configuration.measurement_class.value,
        )

        with self._lock:
            self._readings[external_id] = readings
            self._details[external_id] = details

        logger.info(
            "Generated %d readings for new meter %s (%s)", len(readings), external_id, profile_name
        )
        return readings

    def get_or_generate(self, external_id: str) -> list[Reading]:
        """Readings for an external id, generating history when allowed.

        Raises:
            MeterNotFoundError: If the meter is unknown and dynamic
                generation is disabled
        """
        if self.exists(external_id):
            return self.get_readings(external_id)
        if not self.settings.enable_dynamic_generation:
            raise MeterNotFoundError(external_id)

        end = datetime.now(timezone.utc).date()
        start = end - timedelta(days=self.settings.history_days)
        return self.generate_and_store(external_id, start, end)

    def get_readings(
        self,
        external_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        measurement_class: Optional[MeasurementClass] = None,
    ) -> list[Reading]:
        """Stored readings for a meter, optionally filtered (dates inclusive)."""
        readings = self._readings.get(external_id, [])
        return [
            r
            for r in readings
            if (start_date is None or r.timestamp.date() >= start_date)
            and (end_date is None or r.timestamp.date() <= end_date)
            and (measurement_class is None or r.measurement_class == measurement_class)
        ]

    def get_meter_details(self, external_id: str) -> Optional[MeterDetails]:
        return self._details.get(external_id)

    def get_all_external_ids(self) -> list[str]:
        return list(self._details)

    def exists(self, external_id: str) -> bool:
        return external_id in self._details
