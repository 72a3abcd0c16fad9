"""Consumption profiles for various business types."""

from .base import (
    ConsumptionProfile,
    northern_seasonal_factor,
    uniform_noise_factor,
)
from .office import OfficeProfile
from .manufacturing import ManufacturingProfile
from .retail import RetailProfile
from .data_center import DataCenterProfile
from .educational import EducationalProfile
from .registry import ProfileRegistry, create_default_registry

__all__ = [
    "ConsumptionProfile",
    "DataCenterProfile",
    "EducationalProfile",
    "ManufacturingProfile",
    "OfficeProfile",
    "ProfileRegistry",
    "RetailProfile",
    "create_default_registry",
    "northern_seasonal_factor",
    "uniform_noise_factor",
]
