"""
Tests for the synthetic event log generator.
"""

import pytest

from process_lens.discovery import discover_process
from process_lens.log import build_traces
from process_lens.synthetic import EventLogGenerator, GeneratorConfig, generate_event_log


@pytest.fixture
def small_config():
    """A small generator configuration."""
    return GeneratorConfig(seed=7, num_cases=120, num_actors=8)


class TestGenerator:
    """Tests for generated logs."""

    def test_case_count(self, small_config):
        """Test that the requested number of cases is generated."""
        log = EventLogGenerator(small_config).generate()
        assert log.metadata.case_count == 120
        assert log.name == small_config.log_name

    def test_same_seed_same_log(self, small_config):
        """Test that generation is reproducible."""
        first = EventLogGenerator(small_config).generate()
        second = EventLogGenerator(small_config).generate()
        assert first.to_dict() == second.to_dict()

    def test_different_seed_different_log(self):
        """Test that the seed drives the output."""
        first = generate_event_log(num_cases=30, seed=1)
        second = generate_event_log(num_cases=30, seed=2)
        assert first.to_dict() != second.to_dict()

    def test_ideal_path_dominates(self, small_config):
        """Test that discovery recovers the configured ideal path."""
        log = EventLogGenerator(small_config).generate()
        model = discover_process(log)
        assert list(model.ideal_path) == small_config.ideal_path

    def test_single_approver(self, small_config):
        """Test that one actor executes every approval."""
        generator = EventLogGenerator(small_config)
        log = generator.generate()
        approvers = {
            e.actor_id for e in log.events
            if e.activity == small_config.approval_activity
        }
        assert approvers == {generator.approver}

    def test_events_ordered_within_case(self, small_config):
        """Test that each case's events advance in time."""
        log = EventLogGenerator(small_config).generate()
        for trace in build_traces(log).values():
            timestamps = [e.timestamp for e in trace.events]
            assert timestamps == sorted(timestamps)
            assert trace.events[0].activity == small_config.ideal_path[0]

    def test_stats(self, small_config):
        """Test generator statistics."""
        generator = EventLogGenerator(small_config)
        log = generator.generate()
        assert generator.stats["cases"] == 120
        assert generator.stats["events"] == len(log)
        injected = generator.stats["skip"] + generator.stats["reorder"] + generator.stats["loop"]
        assert 0 < injected < 120

    def test_no_deviations(self):
        """Test that a zero deviation rate yields a single variant."""
        config = GeneratorConfig(seed=3, num_cases=40, deviation_rate=0.0)
        model = discover_process(EventLogGenerator(config).generate())
        assert model.total_variants == 1

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            EventLogGenerator(GeneratorConfig(num_actors=0))
