"""
Tests for conformance checking module.

Tests cover:
- Skip, insert and reorder detection
- Deviation attribution to actors and positions
- Fitness penalties and clamping
- Aggregate summaries and model annotation
- Empty logs and executor-backed checking
"""

import pytest
from concurrent.futures import ThreadPoolExecutor

from process_lens.conformance import (
    CaseConformance,
    ConformanceChecker,
    ConformanceSummary,
    DeviationDetector,
    DeviationSummary,
    DeviationType,
    annotate_model,
    check_conformance,
    deviation_counts_by_activity,
    deviations_for_actor,
)
from process_lens.discovery import discover_process
from process_lens.exceptions import InvalidTraceError
from process_lens.log import EventLog, Trace, build_traces


def _check(event_log):
    model = discover_process(event_log)
    return model, check_conformance(event_log, model)


def _by_case(results):
    return {r.case_id: r for r in results}


class TestSkipDetection:
    """Tests for skipped ideal activities."""

    def test_skipped_activity(self, skip_log):
        """Test that a missing ideal activity is a skip at its ideal index."""
        _, results = _check(skip_log)
        result = _by_case(results)["c3"]

        assert result.fitness == 0.9
        assert len(result.deviations) == 1
        deviation = result.deviations[0]
        assert deviation.deviation_type == DeviationType.SKIP
        assert deviation.activity == "B"
        assert deviation.expected_position == 1
        assert deviation.actual_position is None

    def test_skip_attributed_to_first_event(self, make_log):
        """Test that skips are attributed to the case's first event."""
        log = make_log({
            "c1": ["A", "B", "C"],
            "c2": ["A", "B", "C"],
            "c3": [("A", "starter"), ("C", "closer")],
        })
        _, results = _check(log)
        deviation = _by_case(results)["c3"].deviations[0]
        first_event = build_traces(log)["c3"].events[0]
        assert deviation.actor_id == "starter"
        assert deviation.timestamp == first_event.timestamp
        assert deviation.case_id == "c3"

    def test_conformant_cases(self, skip_log):
        """Test that ideal cases have no deviations and full fitness."""
        _, results = _check(skip_log)
        for case_id in ("c1", "c2"):
            result = _by_case(results)[case_id]
            assert result.is_fully_conformant
            assert result.fitness == 1.0


class TestInsertDetection:
    """Tests for activities outside the ideal path."""

    def test_inserted_activity(self, insert_log):
        """Test that an extra activity is an insert at its actual index."""
        _, results = _check(insert_log)
        result = _by_case(results)["c3"]

        assert result.fitness == 0.95
        assert len(result.deviations) == 1
        deviation = result.deviations[0]
        assert deviation.deviation_type == DeviationType.INSERT
        assert deviation.activity == "X"
        assert deviation.actual_position == 2
        assert deviation.expected_position is None

    def test_insert_attributed_to_its_event(self, make_log):
        """Test that inserts are attributed to the inserting actor."""
        log = make_log({
            "c1": ["A", "B", "C"],
            "c2": ["A", "B", "C"],
            "c3": [("A", "ann"), ("B", "ann"), ("X", "rogue"), ("C", "ann")],
        })
        _, results = _check(log)
        assert _by_case(results)["c3"].deviations[0].actor_id == "rogue"


class TestReorderDetection:
    """Tests for out-of-order activities."""

    def test_swapped_pair(self, make_log):
        """Test that a swapped pair is one reorder on the earlier activity."""
        log = make_log({
            "c1": ["A", "B", "C"],
            "c2": ["A", "B", "C"],
            "c3": [("A", "ann"), ("C", "zed"), ("B", "ann")],
        })
        _, results = _check(log)
        result = _by_case(results)["c3"]

        assert result.fitness == 0.92
        assert len(result.deviations) == 1
        deviation = result.deviations[0]
        assert deviation.deviation_type == DeviationType.REORDER
        assert deviation.activity == "C"
        assert deviation.actor_id == "zed"
        assert deviation.expected_position is None
        assert deviation.actual_position is None

    def test_reorder_actor_ignores_inserted_events(self, make_log):
        """Test that attribution uses the actual index, not the filtered one."""
        log = make_log({
            "c1": ["A", "B", "C"],
            "c2": ["A", "B", "C"],
            "c3": [("A", "ann"), ("X", "xavier"), ("C", "zed"), ("B", "ann")],
        })
        _, results = _check(log)
        reorders = _by_case(results)["c3"].deviations_of_type(DeviationType.REORDER)
        assert len(reorders) == 1
        assert reorders[0].actor_id == "zed"

    def test_repeated_activity(self, make_log):
        """Test that returning to an earlier activity is flagged as reorder."""
        log = make_log({
            "c1": ["A", "B", "C"],
            "c2": ["A", "B", "C"],
            "c3": ["A", "B", "A", "C"],
        })
        _, results = _check(log)
        result = _by_case(results)["c3"]
        assert [d.deviation_type for d in result.deviations] == [DeviationType.REORDER]
        assert result.deviations[0].activity == "B"

    def test_scan_order(self, make_log):
        """Test that deviations are listed skip, then insert, then reorder."""
        log = make_log({
            "c1": ["A", "B", "C", "D"],
            "c2": ["A", "B", "C", "D"],
            "c3": ["A", "X", "D", "C"],
        })
        _, results = _check(log)
        types = [d.deviation_type for d in _by_case(results)["c3"].deviations]
        assert types == [DeviationType.SKIP, DeviationType.INSERT, DeviationType.REORDER]


class TestDeviationDetector:
    """Tests for the detector used directly."""

    def test_repeated_ideal_activity_uses_first_index(self, make_log):
        """Test that a repeated ideal activity ranks at its first position."""
        detector = DeviationDetector(("A", "B", "A", "C"))
        trace = build_traces(make_log({"c1": ["A", "B", "C"]}))["c1"]
        assert detector.detect(trace) == []

    def test_deviation_key(self, skip_log):
        """Test the grouping key format."""
        _, results = _check(skip_log)
        assert _by_case(results)["c3"].deviations[0].key == "skip:B"


class TestFitness:
    """Tests for fitness calculation."""

    def test_fitness_clamped_at_zero(self, make_log):
        """Test that many deviations cannot push fitness below zero."""
        ideal = [f"S{i}" for i in range(12)]
        log = make_log({"c1": ideal, "c2": ideal, "c3": ["S0"]})
        _, results = _check(log)
        result = _by_case(results)["c3"]
        assert len(result.deviations) == 11
        assert result.fitness == 0.0

    def test_fitness_bounds(self, team_log):
        """Test that every fitness lies in [0, 1]."""
        _, results = _check(team_log)
        assert all(0.0 <= r.fitness <= 1.0 for r in results)

    def test_fitness_rounded(self, team_log):
        """Test that fitness values carry at most four decimals."""
        _, results = _check(team_log)
        for result in results:
            assert result.fitness == round(result.fitness, 4)

    def test_penalties_are_monotonic(self, make_log):
        """Test that each extra deviation lowers fitness by its penalty."""
        log = make_log({
            "c1": ["A", "B", "C", "D"],
            "c2": ["A", "B", "C", "D"],
            "one": ["A", "B", "X", "C", "D"],
            "two": ["A", "B", "X", "Y", "C", "D"],
        })
        _, results = _check(log)
        one = _by_case(results)["one"].fitness
        two = _by_case(results)["two"].fitness
        assert two < one
        assert one - two == pytest.approx(ConformanceChecker.DEVIATION_PENALTIES[DeviationType.INSERT])


class TestChecker:
    """Tests for the checker and its helpers."""

    def test_one_result_per_case_in_trace_order(self, team_log):
        """Test that results follow the traces' first appearance."""
        _, results = _check(team_log)
        assert [r.case_id for r in results] == list(build_traces(team_log))

    def test_empty_log(self, skip_log):
        """Test that an empty log yields no results."""
        checker = ConformanceChecker(discover_process(skip_log))
        assert checker.check(EventLog([])) == []

    def test_check_trace(self, skip_log):
        """Test checking a single trace."""
        checker = ConformanceChecker(discover_process(skip_log))
        result = checker.check_trace(build_traces(skip_log)["c3"])
        assert isinstance(result, CaseConformance)
        assert result.deviation_count == 1

    def test_empty_trace_rejected_before_checking(self):
        """Test that an empty trace cannot be built, so check_trace never sees one."""
        with pytest.raises(InvalidTraceError):
            Trace(case_id="c1", events=())

    def test_executor_gives_identical_results(self, team_log):
        """Test that executor-backed checking matches the sequential pass."""
        model = discover_process(team_log)
        sequential = ConformanceChecker(model).check(team_log)
        with ThreadPoolExecutor(max_workers=4) as executor:
            parallel = ConformanceChecker(model, executor=executor).check(team_log)
        assert parallel == sequential

    def test_deviations_for_actor(self, team_log):
        """Test filtering deviations by attributed actor."""
        _, results = _check(team_log)
        dans = deviations_for_actor(results, "dan")
        assert dans
        assert all(d.actor_id == "dan" for d in dans)
        assert deviations_for_actor(results, "ann") == []

    def test_result_to_dict(self, skip_log):
        """Test serialization of a case result."""
        _, results = _check(skip_log)
        data = _by_case(results)["c3"].to_dict()
        assert data["fitness"] == 0.9
        assert data["deviations"][0]["type"] == "skip"
        assert data["deviations"][0]["expected_position"] == 1


class TestSummary:
    """Tests for aggregate statistics."""

    def test_summary(self, skip_log):
        """Test summary over the skip scenario."""
        model = discover_process(skip_log)
        checker = ConformanceChecker(model)
        summary = checker.summarize(checker.check(skip_log))

        assert summary.total_cases == 3
        assert summary.fully_conformant_cases == 2
        assert summary.full_conformance_rate == 66.67
        assert summary.average_fitness == 0.9667
        assert summary.min_fitness == 0.9
        assert summary.max_fitness == 1.0
        assert summary.total_deviations == 1
        assert summary.deviation_summary.by_type == {"skip": 1}
        assert summary.deviation_summary.most_common == [("skip:B", 1)]

    def test_empty_summary(self, skip_log):
        """Test that summarizing nothing gives zeros."""
        checker = ConformanceChecker(discover_process(skip_log))
        assert checker.summarize([]) == ConformanceSummary()

    def test_deviation_summary_by_activity(self, team_log):
        """Test per-activity counts in the deviation summary."""
        _, results = _check(team_log)
        all_deviations = [d for r in results for d in r.deviations]
        summary = DeviationSummary.from_deviations(all_deviations)
        assert sum(summary.by_activity.values()) == summary.total_deviations
        assert len(summary.most_common) <= 5


class TestModelAnnotation:
    """Tests for copying deviation counts onto the model."""

    def test_annotate_model(self, skip_log):
        """Test that annotation fills counts without touching the original."""
        model, results = _check(skip_log)
        annotated = annotate_model(model, results)

        assert annotated.get_activity("B").deviation_count == 1
        assert annotated.get_activity("A").deviation_count == 0
        assert model.get_activity("B").deviation_count == 0
        assert annotated.ideal_path == model.ideal_path

    def test_checker_annotate_model(self, insert_log):
        """Test annotation through the checker."""
        model = discover_process(insert_log)
        checker = ConformanceChecker(model)
        annotated = checker.annotate_model(checker.check(insert_log))
        assert annotated.get_activity("X").deviation_count == 1

    def test_counts_by_activity(self, insert_log):
        """Test raw deviation counts per activity."""
        _, results = _check(insert_log)
        assert deviation_counts_by_activity(results) == {"X": 1}
