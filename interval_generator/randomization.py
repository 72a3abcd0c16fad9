"""Random sources for reproducible and non-reproducible generation."""

from __future__ import annotations

import hashlib
import random
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from interval_generator.errors import InvalidArgumentError

if TYPE_CHECKING:
    from interval_generator.config import GenerationConfiguration

# Process-wide generator for non-reproducible runs, seeded from OS entropy
_SHARED_RANDOM = random.Random()


class RandomSource(ABC):
    """Capability shared by seeded and non-reproducible generators."""

    def __init__(self, generator: random.Random):
        self._random = generator

    @property
    @abstractmethod
    def is_deterministic(self) -> bool:
        """Whether the output sequence is reproducible."""

    @property
    @abstractmethod
    def seed(self) -> Optional[int]:
        """Seed used to build the generator, or None."""

    def next_uniform(self) -> float:
        """Next float in [0, 1)."""
        return self._random.random()

    def next_int(self, max_value: int) -> int:
        """
        Next integer in [0, max_value).

        Raises:
            InvalidArgumentError: If max_value <= 0
        """
        if max_value <= 0:
            raise InvalidArgumentError(
                f"max_value must be positive, got {max_value}",
                param_name="max_value",
                value=max_value,
            )
        return self._random.randrange(max_value)

    def next_int_between(self, min_value: int, max_value: int) -> int:
        """
        Next integer in [min_value, max_value).

        Raises:
            InvalidArgumentError: If min_value >= max_value
        """
        if min_value >= max_value:
            raise InvalidArgumentError(
                f"min_value ({min_value}) must be less than max_value ({max_value})",
                param_name="min_value",
                value=min_value,
            )
        return self._random.randrange(min_value, max_value)

    def next_bytes(self, count: int) -> bytes:
        """Next ``count`` random bytes."""
        return self._random.randbytes(count)


class SeededRandomSource(RandomSource):
    """
    Reproducible generator.

    The same seed always yields the same sequence, across processes and
    platforms running this implementation.
    """

    def __init__(self, seed: int):
        # random.seed() drops the sign of an int seed; digest keeps 5 and -5 apart
        super().__init__(random.Random(_digest_to_int("seed", seed)))
        self._seed = seed

    @property
    def is_deterministic(self) -> bool:
        return True

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def __repr__(self) -> str:
        return f"SeededRandomSource(seed={self._seed})"


class SharedRandomSource(RandomSource):
    """Non-reproducible generator backed by the process-wide instance."""

    def __init__(self) -> None:
        super().__init__(_SHARED_RANDOM)

    @property
    def is_deterministic(self) -> bool:
        return False

    @property
    def seed(self) -> Optional[int]:
        return None

    def __repr__(self) -> str:
        return "SharedRandomSource()"


def _digest_to_int(*parts: object) -> int:
    """Stable 63-bit integer digest of the given parts."""
    payload = "\x1f".join("" if p is None else str(p) for p in parts)
    digest = hashlib.sha256(payload.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") >> 1


def configuration_hash(configuration: GenerationConfiguration) -> int:
    """
    Derive a seed from a configuration when no explicit seed is given.

    Unlike the built-in hash(), the result does not change between
    interpreter runs.
    """
    explicit_ids = ",".join(str(i) for i in configuration.entity_ids or ())
    return _digest_to_int(
        configuration.start_date.isoformat(),
        configuration.end_date.isoformat(),
        int(configuration.granularity),
        configuration.profile_name.strip().lower(),
        configuration.measurement_class.value,
        configuration.entity_count,
        configuration.site_name,
        explicit_ids,
    )


def combine_seed(seed: int, entity_id: UUID) -> int:
    """Per-entity seed, independent of how many other entities exist."""
    return _digest_to_int(seed, entity_id.hex)


def create_random_source(configuration: GenerationConfiguration) -> RandomSource:
    """Seeded source for deterministic configurations, shared source otherwise."""
    if not configuration.deterministic:
        return SharedRandomSource()
    return SeededRandomSource(configuration.effective_seed)
