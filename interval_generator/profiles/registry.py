"""Registry resolving profile names to profile instances."""

import logging
import threading
from typing import Iterable, Optional

from interval_generator.errors import InvalidArgumentError, ProfileNotFoundError
from .base import ConsumptionProfile
from .data_center import DataCenterProfile
from .educational import EducationalProfile
from .manufacturing import ManufacturingProfile
from .office import OfficeProfile
from .retail import RetailProfile

logger = logging.getLogger(__name__)


def _key(name: str) -> str:
    return name.strip().casefold()


class ProfileRegistry:
    """
    Case-insensitive map of profile name to a shared profile instance.

    Lookups are lock-free. Registration replaces any profile with the same
    name and takes a lock; it is meant for start-up or rare administrative use.
    """

    def __init__(self, profiles: Optional[Iterable[ConsumptionProfile]] = None) -> None:
        self._profiles: dict[str, ConsumptionProfile] = {}
        self._lock = threading.Lock()
        for profile in profiles or ():
            self.register_profile(profile)

    def get_profile(self, name: str) -> ConsumptionProfile:
        """
        Look up a profile by name (case-insensitive).

        Raises:
            InvalidArgumentError: If the name is blank
            ProfileNotFoundError: If no profile has that name
        """
        if not name or not name.strip():
            raise InvalidArgumentError(
                "Profile name cannot be empty", param_name="profile_name", value=name
            )
        try:
            return self._profiles[_key(name)]
        except KeyError:
            raise ProfileNotFoundError(name, self.available_profiles()) from None

    def register_profile(self, profile: ConsumptionProfile) -> None:
        """Add a profile, replacing an existing one with the same name."""
        if profile is None:
            raise InvalidArgumentError("profile is required", param_name="profile")
        key = _key(profile.name)
        with self._lock:
            replaced = self._profiles.get(key)
            updated = dict(self._profiles)
            updated[key] = profile
            self._profiles = updated
        if replaced is not None:
            logger.debug("Replaced profile %s with %r", profile.name, profile)

    def is_registered(self, name: str) -> bool:
        return bool(name and name.strip()) and _key(name) in self._profiles

    def available_profiles(self) -> list[str]:
        """Display names of all registered profiles."""
        return [p.name for p in self._profiles.values()]

    def __len__(self) -> int:
        return len(self._profiles)


def create_default_registry() -> ProfileRegistry:
    """Registry holding the five built-in business profiles."""
    return ProfileRegistry(
        [
            OfficeProfile(),
            ManufacturingProfile(),
            RetailProfile(),
            DataCenterProfile(),
            EducationalProfile(),
        ]
    )
