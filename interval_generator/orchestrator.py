"""
Multi-meter orchestration.

Validates a GenerationConfiguration, resolves its profile, assigns
internal and external ids to every meter, and drives one ReadingGenerator
per meter. In deterministic mode each meter gets its own seeded random
source derived from the run seed and the meter id, so a meter's readings
never depend on which other meters are generated or in what order.
"""

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, Optional
from uuid import UUID

from interval_generator.config import GenerationConfiguration
from interval_generator.engine import ReadingGenerator
from interval_generator.errors import InvalidArgumentError
from interval_generator.identifiers import (
    derive_external_id,
    derive_many,
    generate_entity_ids,
    log_collisions,
)
from interval_generator.intervals import days_in_range, periods_per_day
from interval_generator.models import GenerationResult, Reading
from interval_generator.profiles import ConsumptionProfile, ProfileRegistry, create_default_registry
from interval_generator.randomization import (
    RandomSource,
    SeededRandomSource,
    combine_seed,
    create_random_source,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationPlan:
    """Everything resolved before the first reading is produced."""

    configuration: GenerationConfiguration
    profile: ConsumptionProfile
    random_source: RandomSource  # Top-level source
    entity_ids: tuple[UUID, ...]
    external_ids: dict[UUID, str]


class MultiMeterOrchestrator:
    """
    Generates readings for every meter described by a configuration.

    Two evaluation strategies produce identical reading sequences:
    generate() materialises everything into a GenerationResult, while
    generate_streaming() yields meter by meter, period by period.
    """

    def __init__(
        self,
        registry: Optional[ProfileRegistry] = None,
        max_workers: int = 1,
    ):
        """
        Initialize the orchestrator.

        Args:
            registry: Profile registry; the built-in profiles if omitted
            max_workers: Threads used by generate(); 1 generates sequentially
        """
        if max_workers < 1:
            raise InvalidArgumentError(
                f"max_workers must be at least 1, got {max_workers}",
                param_name="max_workers",
                value=max_workers,
            )
        self.registry = registry if registry is not None else create_default_registry()
        self.max_workers = max_workers

    def plan(self, configuration: GenerationConfiguration) -> GenerationPlan:
        """
        Validate the configuration and resolve profile, random source and ids.

        Raises:
            InvalidArgumentError: For an invalid configuration
            ProfileNotFoundError: If the profile name is not registered
        """
        if configuration is None:
            raise InvalidArgumentError("configuration is required", param_name="configuration")
        configuration.validate()

        profile = self.registry.get_profile(configuration.profile_name)
        random_source = create_random_source(configuration)
        entity_ids = tuple(self._resolve_entity_ids(configuration, random_source))
        external_ids = derive_many(entity_ids)
        log_collisions(external_ids)

        logger.debug(
            "Planned %d %s meters (%s to %s, %d-minute, deterministic=%s)",
            len(entity_ids),
            profile.name,
            configuration.start_date,
            configuration.end_date,
            int(configuration.granularity),
            configuration.deterministic,
        )
        return GenerationPlan(
            configuration=configuration,
            profile=profile,
            random_source=random_source,
            entity_ids=entity_ids,
            external_ids=external_ids,
        )

    def generate(self, configuration: GenerationConfiguration) -> GenerationResult:
        """
        Generate and materialise all readings.

        Returns:
            GenerationResult with readings ordered meter by meter
        """
        plan = self.plan(configuration)

        if self.max_workers > 1 and len(plan.entity_ids) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                blocks = list(
                    executor.map(
                        lambda entity_id: list(self._entity_readings(plan, entity_id)),
                        plan.entity_ids,
                    )
                )
            readings = tuple(r for block in blocks for r in block)
        else:
            readings = tuple(self._stream(plan))

        return GenerationResult(readings=readings, configuration=configuration)

    def generate_streaming(self, configuration: GenerationConfiguration) -> Iterator[Reading]:
        """
        Lazily yield readings meter by meter.

        The configuration is validated before this method returns; only one
        meter's generator is active at a time.
        """
        return self._stream(self.plan(configuration))

    def generate_for_entity(
        self, configuration: GenerationConfiguration, entity_id: UUID
    ) -> Iterator[Reading]:
        """
        Regenerate the readings of a single meter.

        In deterministic mode the output equals that meter's block in a
        full run of the same configuration.
        """
        if configuration is None:
            raise InvalidArgumentError("configuration is required", param_name="configuration")
        configuration.validate()
        profile = self.registry.get_profile(configuration.profile_name)
        plan = GenerationPlan(
            configuration=configuration,
            profile=profile,
            random_source=create_random_source(configuration),
            entity_ids=(entity_id,),
            external_ids={entity_id: derive_external_id(entity_id)},
        )
        return self._entity_readings(plan, entity_id)

    @staticmethod
    def calculate_expected_reading_count(configuration: GenerationConfiguration) -> int:
        """days x periods per day x meters, without generating anything."""
        days = days_in_range(configuration.start_date, configuration.end_date)
        return days * periods_per_day(configuration.granularity) * configuration.entity_count

    @staticmethod
    def entity_random_source(
        configuration: GenerationConfiguration,
        entity_id: UUID,
        shared: Optional[RandomSource] = None,
    ) -> RandomSource:
        """Per-meter seeded source when deterministic, the shared source otherwise."""
        if not configuration.deterministic:
            return shared if shared is not None else create_random_source(configuration)
        return SeededRandomSource(combine_seed(configuration.effective_seed, entity_id))

    def _stream(self, plan: GenerationPlan) -> Iterator[Reading]:
        for entity_id in plan.entity_ids:
            yield from self._entity_readings(plan, entity_id)

    def _entity_readings(self, plan: GenerationPlan, entity_id: UUID) -> Iterator[Reading]:
        configuration = plan.configuration
        generator = ReadingGenerator(
            plan.profile,
            self.entity_random_source(configuration, entity_id, plan.random_source),
        )
        return generator.generate_readings(
            entity_id,
            plan.external_ids[entity_id],
            configuration.start_date,
            configuration.end_date,
            configuration.granularity,
            configuration.measurement_class,
        )

    @staticmethod
    def _resolve_entity_ids(
        configuration: GenerationConfiguration, random_source: RandomSource
    ) -> list[UUID]:
        count = configuration.entity_count
        explicit = list(configuration.entity_ids or ())[:count]
        missing = count - len(explicit)
        if missing == 0:
            return explicit

        if random_source.is_deterministic:
            generated = generate_entity_ids(random_source, missing)
        else:
            generated = [uuid.uuid4() for _ in range(missing)]
        return explicit + generated
