"""
Internal meter ids and the 13-digit external identifiers derived from them.

External ids are a pure function of the internal id. No collision
resolution is attempted: two internal ids may map to the same external id
with very small probability. find_collisions() reports such cases.
"""

import hashlib
import logging
import uuid
from collections import defaultdict
from typing import Iterable, Union
from uuid import UUID

from interval_generator.randomization import RandomSource

logger = logging.getLogger(__name__)

EXTERNAL_ID_LENGTH = 13
_MODULUS = 10**EXTERNAL_ID_LENGTH

# Namespace for internal ids derived from externally supplied identifiers
EXTERNAL_ID_NAMESPACE = uuid.UUID("6f1c3a52-8d0e-4b7a-9c1e-2f5d7a9b3e41")

InternalId = Union[UUID, str]


def _hex_digits(internal_id: InternalId) -> str:
    if isinstance(internal_id, UUID):
        return internal_id.hex
    try:
        return UUID(str(internal_id)).hex
    except ValueError:
        return hashlib.sha256(str(internal_id).encode("utf-8")).hexdigest()


def derive_external_id(internal_id: InternalId) -> str:
    """
    Derive the 13-digit external id for an internal id.

    The first 13 hex digits of the id are read as an integer, reduced
    modulo 10**13 and zero-padded to 13 digits.
    """
    value = int(_hex_digits(internal_id)[:EXTERNAL_ID_LENGTH], 16)
    return str(value % _MODULUS).zfill(EXTERNAL_ID_LENGTH)


def derive_many(internal_ids: Iterable[InternalId]) -> dict[InternalId, str]:
    """Map each internal id to its external id; input order has no effect."""
    return {internal_id: derive_external_id(internal_id) for internal_id in internal_ids}


def find_collisions(mapping: dict[InternalId, str]) -> dict[str, list[InternalId]]:
    """External ids shared by more than one internal id."""
    by_external: dict[str, list[InternalId]] = defaultdict(list)
    for internal_id, external_id in mapping.items():
        by_external[external_id].append(internal_id)
    return {ext: ids for ext, ids in by_external.items() if len(ids) > 1}


def is_valid_external_id(value: str) -> bool:
    """Exactly 13 ASCII digits."""
    return (
        isinstance(value, str)
        and len(value) == EXTERNAL_ID_LENGTH
        and value.isascii()
        and value.isdigit()
    )


def entity_id_from_bytes(data: bytes) -> UUID:
    """Build a version-4 UUID from 16 random bytes."""
    return UUID(bytes=data[:16], version=4)


def generate_entity_ids(random_source: RandomSource, count: int) -> list[UUID]:
    """
    Draw ``count`` entity ids from a random source.

    With a seeded source the list is reproducible, and a longer list
    starts with the ids of a shorter one.
    """
    return [entity_id_from_bytes(random_source.next_bytes(16)) for _ in range(count)]


def entity_id_for_external_id(external_id: str) -> UUID:
    """Stable internal id for an externally supplied identifier."""
    return uuid.uuid5(EXTERNAL_ID_NAMESPACE, external_id)


def log_collisions(mapping: dict[InternalId, str]) -> dict[str, list[InternalId]]:
    """Find collisions and log a warning for each; returns them."""
    collisions = find_collisions(mapping)
    for external_id, internal_ids in collisions.items():
        logger.warning(
            "External id %s is shared by %d internal ids: %s",
            external_id,
            len(internal_ids),
            ", ".join(str(i) for i in internal_ids),
        )
    return collisions
