"""Tests for consumption profiles and the profile registry."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import Mock

import pytest

from interval_generator.errors import InvalidArgumentError, ProfileNotFoundError
from interval_generator.profiles import (
    ConsumptionProfile,
    DataCenterProfile,
    EducationalProfile,
    ManufacturingProfile,
    OfficeProfile,
    ProfileRegistry,
    RetailProfile,
    create_default_registry,
    northern_seasonal_factor,
    uniform_noise_factor,
)
from interval_generator.profiles.base import ramp_down_factor, ramp_up_factor
from interval_generator.profiles.educational import is_term_time
from interval_generator.randomization import SeededRandomSource

# 2024-06-17 is a Monday
MONDAY_NOON = datetime(2024, 6, 17, 12, 0, tzinfo=timezone.utc)
SATURDAY_NOON = datetime(2024, 6, 22, 12, 0, tzinfo=timezone.utc)

ALL_PROFILES = [
    OfficeProfile(),
    ManufacturingProfile(),
    RetailProfile(),
    DataCenterProfile(),
    EducationalProfile(),
]


def _fixed_source(value):
    source = Mock()
    source.next_uniform.return_value = value
    return source


class TestDefaultFactors:
    """Tests for the shared factor helpers."""

    def test_northern_seasonal_factor(self):
        """Test summer, winter and shoulder months."""
        assert northern_seasonal_factor(datetime(2024, 7, 1)) == Decimal("1.20")
        assert northern_seasonal_factor(datetime(2024, 1, 1)) == Decimal("1.10")
        assert northern_seasonal_factor(datetime(2024, 12, 1)) == Decimal("1.10")
        assert northern_seasonal_factor(datetime(2024, 4, 1)) == Decimal("1.0")

    def test_uniform_noise_bounds(self):
        """Test the extremes of the noise factor."""
        assert float(uniform_noise_factor(_fixed_source(0.0), 0.10)) == pytest.approx(0.90)
        assert float(uniform_noise_factor(_fixed_source(0.5), 0.10)) == pytest.approx(1.0)
        assert float(uniform_noise_factor(_fixed_source(0.999999), 0.02)) < 1.02

    def test_uniform_noise_draws_once(self):
        """Test that one noise factor consumes exactly one draw."""
        source = _fixed_source(0.25)
        uniform_noise_factor(source)
        assert source.next_uniform.call_count == 1

    def test_ramp_up(self):
        """Test ramp-up from opening hour."""
        assert ramp_up_factor(7, 8, 2) == Decimal("0")
        assert ramp_up_factor(8, 8, 2) == Decimal("0")
        assert ramp_up_factor(9, 8, 2) == Decimal("0.5")
        assert ramp_up_factor(10, 8, 2) == Decimal("1.0")

    def test_ramp_down(self):
        """Test ramp-down towards closing hour."""
        assert ramp_down_factor(15, 18, 2) == Decimal("1.0")
        assert ramp_down_factor(16, 18, 2) == Decimal("1")
        assert ramp_down_factor(17, 18, 2) == Decimal("0.5")
        assert ramp_down_factor(18, 18, 2) == Decimal("0")


class TestOfficeProfile:
    """Tests for OfficeProfile."""

    def test_business_hours_weekday(self):
        """Test full load during weekday business hours."""
        profile = OfficeProfile()
        assert profile.base_load(MONDAY_NOON, 12) == Decimal("80")
        assert profile.time_of_day_factor(MONDAY_NOON, 12) == Decimal("1.2")
        assert profile.day_of_week_factor(MONDAY_NOON) == Decimal("1.0")
        assert profile.seasonal_factor(MONDAY_NOON) == Decimal("1.25")

    def test_weekend_standby(self):
        """Test reduced weekend load."""
        profile = OfficeProfile()
        assert profile.base_load(SATURDAY_NOON, 12) == Decimal("16.0")
        assert profile.day_of_week_factor(SATURDAY_NOON) == Decimal("0.2")

    def test_opening_hour_ramps_from_zero(self):
        """Test that the opening hour starts the ramp at zero."""
        ts = MONDAY_NOON.replace(hour=8)
        assert OfficeProfile().time_of_day_factor(ts, 8) == Decimal("0")

    def test_night(self):
        """Test the overnight multiplier."""
        ts = MONDAY_NOON.replace(hour=2)
        assert OfficeProfile().time_of_day_factor(ts, 2) == Decimal("0.3")


class TestOtherProfiles:
    """Tests for the remaining built-in profiles."""

    def test_manufacturing_maintenance_window(self):
        """Test the 2am maintenance dip."""
        ts = MONDAY_NOON.replace(hour=2)
        assert ManufacturingProfile().time_of_day_factor(ts, 2) == Decimal("0.7")
        assert ManufacturingProfile().base_load(ts, 2) == Decimal("400")

    def test_retail_holiday_season(self):
        """Test the November/December peak."""
        ts = datetime(2024, 12, 10, 12, tzinfo=timezone.utc)
        assert RetailProfile().seasonal_factor(ts) == Decimal("1.35")
        assert RetailProfile().day_of_week_factor(SATURDAY_NOON) == Decimal("1.25")

    def test_data_center_steady(self):
        """Test flat data center load with free cooling in winter."""
        profile = DataCenterProfile()
        assert profile.base_load(MONDAY_NOON, 12) == Decimal("500")
        assert profile.day_of_week_factor(SATURDAY_NOON) == Decimal("1.0")
        assert profile.seasonal_factor(datetime(2024, 1, 15)) == Decimal("0.95")

    def test_educational_term_time(self):
        """Test the summer break."""
        assert is_term_time(datetime(2024, 10, 1))
        assert not is_term_time(datetime(2024, 8, 1))
        summer = datetime(2024, 8, 5, 12, tzinfo=timezone.utc)
        assert EducationalProfile().seasonal_factor(summer) == Decimal("0.5")

    @pytest.mark.parametrize("profile", ALL_PROFILES, ids=lambda p: p.name)
    def test_factors_non_negative(self, profile):
        """Test that every factor is non-negative around the clock."""
        source = SeededRandomSource(1)
        for month in (1, 4, 7, 10):
            for day in range(1, 8):
                for hour in range(24):
                    ts = datetime(2024, month, day, hour, tzinfo=timezone.utc)
                    assert profile.base_load(ts, hour) >= 0
                    assert profile.time_of_day_factor(ts, hour) >= 0
                    assert profile.day_of_week_factor(ts) >= 0
                    assert profile.seasonal_factor(ts) >= 0
                    assert profile.noise_factor(source) >= 0


class TestProfileRegistry:
    """Tests for ProfileRegistry."""

    def test_default_registry(self):
        """Test that the five built-in profiles are registered."""
        registry = create_default_registry()
        assert len(registry) == 5
        assert registry.available_profiles() == [
            "Office",
            "Manufacturing",
            "Retail",
            "DataCenter",
            "Educational",
        ]

    @pytest.mark.parametrize("name", ["Office", "office", "OFFICE", "  oFfIcE "])
    def test_case_insensitive_lookup(self, name):
        """Test case-insensitive profile lookup."""
        assert isinstance(create_default_registry().get_profile(name), OfficeProfile)

    def test_returns_shared_instance(self):
        """Test that lookups return the same instance."""
        registry = create_default_registry()
        assert registry.get_profile("Retail") is registry.get_profile("retail")

    def test_unknown_profile(self):
        """Test that unknown names raise ProfileNotFoundError."""
        registry = create_default_registry()
        with pytest.raises(ProfileNotFoundError, match="Unknown profile 'Hospital'") as exc_info:
            registry.get_profile("Hospital")
        assert "Office" in exc_info.value.available
        assert isinstance(exc_info.value, InvalidArgumentError)
        assert isinstance(exc_info.value, LookupError)

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_blank_name(self, name):
        """Test that blank names are invalid arguments."""
        with pytest.raises(InvalidArgumentError, match="cannot be empty"):
            create_default_registry().get_profile(name)

    def test_register_replaces(self):
        """Test that registering an existing name replaces the profile."""

        class QuietOffice(OfficeProfile):
            name = "office"

        registry = create_default_registry()
        replacement = QuietOffice()
        registry.register_profile(replacement)

        assert len(registry) == 5
        assert registry.get_profile("Office") is replacement

    def test_register_custom_profile(self):
        """Test registering a new profile."""

        class FlatProfile(ConsumptionProfile):
            name = "Flat"

            def base_load(self, timestamp, hour):
                return Decimal("1")

            def time_of_day_factor(self, timestamp, hour):
                return Decimal("1")

            def day_of_week_factor(self, timestamp):
                return Decimal("1")

            def seasonal_factor(self, timestamp):
                return northern_seasonal_factor(timestamp)

            def noise_factor(self, random_source):
                return uniform_noise_factor(random_source)

        registry = ProfileRegistry()
        assert not registry.is_registered("flat")
        registry.register_profile(FlatProfile())
        assert registry.is_registered("FLAT")
        assert registry.available_profiles() == ["Flat"]
