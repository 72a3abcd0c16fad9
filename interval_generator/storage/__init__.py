"""Storage modules for generated meter data."""

from interval_generator.storage.memory_store import InMemoryMeterDataStore

__all__ = [
    "InMemoryMeterDataStore",
]
