"""
Interval Generator - Synthetic smart-meter interval consumption data

This package provides:
- Business consumption profiles (office, manufacturing, retail, ...)
- Seeded or non-reproducible generation of interval readings
- Multi-meter orchestration with stable 13-digit external identifiers
- Encoders for the nested (per-period JSON) and flat (CSV) wire formats

Generated readings can be held in an in-memory store for lookup by
external identifier.
"""

__all__ = ["__version__"]
__version__ = "0.3.0"
