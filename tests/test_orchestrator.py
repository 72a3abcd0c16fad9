"""Tests for multi-meter orchestration."""

import uuid
from datetime import date

import pytest

from interval_generator.config import GenerationConfiguration
from interval_generator.errors import InvalidArgumentError, ProfileNotFoundError
from interval_generator.identifiers import derive_external_id
from interval_generator.models import GenerationResult
from interval_generator.orchestrator import MultiMeterOrchestrator


def _config(**overrides):
    values = dict(
        start_date=date(2024, 6, 1),
        end_date=date(2024, 6, 2),
        granularity=30,
        profile_name="Office",
        entity_count=3,
        deterministic=True,
        seed=42,
    )
    values.update(overrides)
    return GenerationConfiguration(**values)


def _entity_block(result, entity_id):
    return [r for r in result.readings if r.entity_id == entity_id]


class TestExpectedReadingCount:
    """Tests for calculate_expected_reading_count."""

    def test_year_of_quarter_hours(self):
        """Test 365 days of 15-minute data for one meter."""
        config = _config(
            start_date=date(2023, 1, 1), end_date=date(2023, 12, 31), granularity=15, entity_count=1
        )
        assert MultiMeterOrchestrator.calculate_expected_reading_count(config) == 35_040

    def test_multiple_meters(self):
        """Test days x periods x meters."""
        config = _config(granularity=5, entity_count=4)
        assert MultiMeterOrchestrator.calculate_expected_reading_count(config) == 2 * 288 * 4


class TestGenerate:
    """Tests for eager generation."""

    def test_count_law(self):
        """Test that the eager result has the expected number of readings."""
        config = _config()
        result = MultiMeterOrchestrator().generate(config)

        assert isinstance(result, GenerationResult)
        assert result.total_readings == MultiMeterOrchestrator.calculate_expected_reading_count(
            config
        )
        assert result.total_readings == 2 * 48 * 3
        assert result.entity_count == 3
        assert result.configuration is config

    def test_single_office_day(self):
        """Test the single-meter, single-day scenario."""
        config = _config(start_date=date(2024, 6, 15), end_date=date(2024, 6, 15), entity_count=1)
        readings = MultiMeterOrchestrator().generate(config).readings

        assert len(readings) == 48
        assert [r.period for r in readings] == list(range(1, 49))
        assert readings[0].timestamp.isoformat() == "2024-06-15T00:00:00+00:00"
        assert readings[-1].timestamp.isoformat() == "2024-06-15T23:30:00+00:00"

    def test_non_negative(self):
        """Test that every generated value is non-negative."""
        for profile in ("Office", "Manufacturing", "Retail", "DataCenter", "Educational"):
            result = MultiMeterOrchestrator().generate(_config(profile_name=profile))
            assert all(r.value >= 0 for r in result.readings)

    def test_meters_in_blocks(self):
        """Test that readings are grouped meter by meter."""
        result = MultiMeterOrchestrator().generate(_config())
        per_meter = 2 * 48
        for index, entity_id in enumerate(result.entity_ids):
            block = result.readings[index * per_meter:(index + 1) * per_meter]
            assert all(r.entity_id == entity_id for r in block)

    def test_external_ids_derived(self):
        """Test that external ids derive from internal ids."""
        result = MultiMeterOrchestrator().generate(_config())
        for reading in result.readings:
            assert reading.external_id == derive_external_id(reading.entity_id)

    def test_statistics(self):
        """Test derived statistics."""
        result = MultiMeterOrchestrator().generate(_config())
        assert result.min_consumption <= result.mean_consumption <= result.max_consumption
        assert result.total_consumption == sum(r.value for r in result.readings)
        summary = result.summary()
        assert summary["total_readings"] == result.total_readings
        assert summary["entity_count"] == 3


class TestDeterminism:
    """Tests for reproducibility guarantees."""

    def test_repeat_runs_identical(self):
        """Test that identical configurations give identical readings."""
        first = MultiMeterOrchestrator().generate(_config()).readings
        second = MultiMeterOrchestrator().generate(_config()).readings
        assert first == second

    def test_eager_matches_streaming(self):
        """Test that both evaluation strategies produce the same sequence."""
        orchestrator = MultiMeterOrchestrator()
        eager = orchestrator.generate(_config()).readings
        streamed = tuple(orchestrator.generate_streaming(_config()))
        assert eager == streamed

    def test_parallel_matches_sequential(self):
        """Test that thread-pool generation keeps the sequential order."""
        sequential = MultiMeterOrchestrator(max_workers=1).generate(_config(entity_count=6))
        parallel = MultiMeterOrchestrator(max_workers=4).generate(_config(entity_count=6))
        assert sequential.readings == parallel.readings

    def test_deterministic_without_seed(self):
        """Test that a deterministic run without seed is still reproducible."""
        config = _config(seed=None)
        first = MultiMeterOrchestrator().generate(config).readings
        second = MultiMeterOrchestrator().generate(_config(seed=None)).readings
        assert first == second

    def test_seed_sensitivity(self):
        """Test that a different seed changes ids and values."""
        first = MultiMeterOrchestrator().generate(_config(seed=1))
        second = MultiMeterOrchestrator().generate(_config(seed=2))
        assert set(first.entity_ids).isdisjoint(second.entity_ids)
        assert [r.value for r in first.readings] != [r.value for r in second.readings]

    def test_negative_seed_distinct_ids(self):
        """Test that seeds 5 and -5 plan different meters."""
        orchestrator = MultiMeterOrchestrator()
        positive = orchestrator.plan(_config(seed=5))
        negative = orchestrator.plan(_config(seed=-5))
        assert positive.entity_ids != negative.entity_ids

    def test_non_deterministic_ids_differ(self):
        """Test that non-deterministic runs draw fresh ids."""
        first = MultiMeterOrchestrator().generate(_config(deterministic=False))
        second = MultiMeterOrchestrator().generate(_config(deterministic=False))
        assert set(first.entity_ids).isdisjoint(second.entity_ids)

    def test_generate_for_entity_matches_block(self):
        """Test that regenerating one meter reproduces its block."""
        orchestrator = MultiMeterOrchestrator()
        config = _config()
        result = orchestrator.generate(config)
        for entity_id in result.entity_ids:
            assert list(orchestrator.generate_for_entity(config, entity_id)) == _entity_block(
                result, entity_id
            )

    def test_meter_independent_of_other_meters(self):
        """Test that a meter's readings do not depend on the other meters."""
        orchestrator = MultiMeterOrchestrator()
        result = orchestrator.generate(_config())
        entity_id = result.entity_ids[1]

        alone = orchestrator.generate(_config(entity_count=1, entity_ids=[entity_id]))
        assert alone.readings == tuple(_entity_block(result, entity_id))


class TestEntityIds:
    """Tests for explicit and generated meter ids."""

    IDS = [uuid.UUID(int=i + 1) for i in range(4)]

    def test_explicit_ids_used_in_order(self):
        """Test that explicit ids are used as given."""
        result = MultiMeterOrchestrator().generate(_config(entity_count=4, entity_ids=self.IDS))
        assert result.entity_ids == self.IDS

    def test_explicit_ids_truncated(self):
        """Test that surplus explicit ids are dropped."""
        result = MultiMeterOrchestrator().generate(_config(entity_count=2, entity_ids=self.IDS))
        assert result.entity_ids == self.IDS[:2]

    def test_explicit_ids_padded(self):
        """Test that missing ids are generated reproducibly."""
        config = _config(entity_count=4, entity_ids=self.IDS[:1])
        first = MultiMeterOrchestrator().generate(config)
        second = MultiMeterOrchestrator().generate(config)

        assert first.entity_count == 4
        assert first.entity_ids[0] == self.IDS[0]
        assert first.entity_ids == second.entity_ids

    def test_string_ids_accepted(self):
        """Test that ids may be given as strings."""
        config = _config(entity_count=1, entity_ids=[str(self.IDS[0])])
        assert MultiMeterOrchestrator().generate(config).entity_ids == [self.IDS[0]]


class TestValidation:
    """Tests for configuration errors."""

    @pytest.mark.parametrize("count", [0, 1001, -1])
    def test_entity_count_bounds(self, count):
        """Test entity count outside 1..1000."""
        with pytest.raises(InvalidArgumentError, match="entity_count") as exc_info:
            MultiMeterOrchestrator().generate(_config(entity_count=count))
        assert exc_info.value.param_name == "entity_count"

    def test_entity_count_upper_bound_accepted(self):
        """Test that 1000 meters pass validation."""
        config = _config(entity_count=1000)
        plan = MultiMeterOrchestrator().plan(config)
        assert len(plan.entity_ids) == 1000

    def test_inverted_date_range(self):
        """Test end date before start date."""
        with pytest.raises(InvalidArgumentError, match="must be on or after"):
            MultiMeterOrchestrator().generate(
                _config(start_date=date(2024, 6, 2), end_date=date(2024, 6, 1))
            )

    @pytest.mark.parametrize("name", ["", "  "])
    def test_blank_profile(self, name):
        """Test blank profile name."""
        with pytest.raises(InvalidArgumentError, match="profile_name is required"):
            MultiMeterOrchestrator().generate(_config(profile_name=name))

    def test_unknown_profile(self):
        """Test profile missing from the registry."""
        with pytest.raises(ProfileNotFoundError):
            MultiMeterOrchestrator().generate(_config(profile_name="Hospital"))

    def test_streaming_validates_eagerly(self):
        """Test that streaming errors surface before iteration."""
        with pytest.raises(ProfileNotFoundError):
            MultiMeterOrchestrator().generate_streaming(_config(profile_name="Hospital"))

    def test_profile_case_insensitive(self):
        """Test profile lookup ignores case."""
        result = MultiMeterOrchestrator().generate(_config(profile_name="DATACENTER"))
        assert result.readings[0].profile_name == "DataCenter"

    def test_invalid_max_workers(self):
        """Test that at least one worker is required."""
        with pytest.raises(InvalidArgumentError, match="max_workers"):
            MultiMeterOrchestrator(max_workers=0)
