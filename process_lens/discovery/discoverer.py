"""
Directly-Follows Process Discovery.

Learns a process model from an event log in a single pass over its traces:

1. Group events into traces, ordered by timestamp
2. Collect per-trace statistics (activity counts, directly-follows pairs,
   inter-event gaps, start/end activities, the full activity sequence)
3. Merge the per-trace statistics in trace order
4. Derive activities, transitions, the ideal path and ranked variants

Per-trace statistics are independent of each other, so step 2 can be
mapped over an executor. Merging always happens in trace order, which
keeps floating-point reductions and tie-breaks identical run to run.
"""

import logging
import warnings
from collections import Counter, defaultdict
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from ..exceptions import DegenerateModelWarning, EmptyLogError
from ..log.models import EventLog
from ..log.traces import Trace, build_traces
from .models import Activity, ProcessModel, ProcessVariant, Transition

logger = logging.getLogger(__name__)

Path = Tuple[str, ...]
Pair = Tuple[str, str]


def _mean(values: List[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


@dataclass
class TraceStatistics:
    """
    Mergeable discovery counters for one or more traces.

    Every container preserves insertion order, so after merging in trace
    order the first key of each mapping is the first one observed.
    """
    case_count: int = 0
    activity_counts: Counter = field(default_factory=Counter)
    activity_gaps: Dict[str, List[float]] = field(default_factory=lambda: defaultdict(list))
    transition_counts: Counter = field(default_factory=Counter)
    transition_gaps: Dict[Pair, List[float]] = field(default_factory=lambda: defaultdict(list))
    start_activities: Counter = field(default_factory=Counter)
    end_activities: Counter = field(default_factory=Counter)
    variant_counts: Counter = field(default_factory=Counter)
    variant_durations: Dict[Path, List[float]] = field(default_factory=lambda: defaultdict(list))

    @classmethod
    def from_trace(cls, trace: Trace) -> "TraceStatistics":
        """
        Collect statistics for a single trace.

        The gap before each event (time since the previous event in the
        same trace) is attributed to the activity being entered.
        """
        stats = cls(case_count=1)
        activities = trace.activities
        gaps = trace.gaps()

        stats.start_activities[activities[0]] += 1
        stats.end_activities[activities[-1]] += 1

        for i, activity in enumerate(activities):
            stats.activity_counts[activity] += 1
            if i > 0:
                stats.activity_gaps[activity].append(gaps[i - 1])

        for i in range(len(activities) - 1):
            pair = (activities[i], activities[i + 1])
            stats.transition_counts[pair] += 1
            stats.transition_gaps[pair].append(gaps[i])

        stats.variant_counts[activities] += 1
        stats.variant_durations[activities].append(trace.duration)
        return stats

    def absorb(self, other: "TraceStatistics") -> None:
        """Merge another set of statistics into this one, in place."""
        self.case_count += other.case_count
        self.activity_counts.update(other.activity_counts)
        self.transition_counts.update(other.transition_counts)
        self.start_activities.update(other.start_activities)
        self.end_activities.update(other.end_activities)
        self.variant_counts.update(other.variant_counts)
        for activity, gaps in other.activity_gaps.items():
            self.activity_gaps[activity].extend(gaps)
        for pair, gaps in other.transition_gaps.items():
            self.transition_gaps[pair].extend(gaps)
        for path, durations in other.variant_durations.items():
            self.variant_durations[path].extend(durations)

    @classmethod
    def combine(cls, parts: Iterable["TraceStatistics"]) -> "TraceStatistics":
        """Merge statistics in the given order."""
        total = cls()
        for part in parts:
            total.absorb(part)
        return total


class ProcessDiscoverer:
    """
    Discovers a directly-follows process model from an event log.

    Variant conformance scoring:
    - The ideal path itself scores 1.0
    - Any other variant scores
      ``1 - VARIANT_LENGTH_PENALTY * |len(variant) - len(ideal)| / len(ideal)``
      clamped to ``[VARIANT_SCORE_FLOOR, 1.0]``

    The variant score only looks at path length. Two variants of the same
    length as the ideal path score 1.0 regardless of their content.

    Tie-break policy: when several variants share the highest frequency,
    the one whose first trace appears earliest in the log is the ideal
    path. Variants of equal frequency are ranked the same way.

    Example:
        discoverer = ProcessDiscoverer()
        model = discoverer.discover(event_log)

        print(model.ideal_path)
        for variant in model.variants[:5]:
            print(variant.frequency, " -> ".join(variant.path))
    """

    VARIANT_LENGTH_PENALTY = 0.3
    VARIANT_SCORE_FLOOR = 0.5

    def __init__(
        self,
        max_variants: int = 20,
        executor: Optional[Executor] = None
    ):
        """
        Initialize the discoverer.

        Args:
            max_variants: Number of top variants to keep
            executor: Optional executor for the per-trace statistics pass
        """
        if max_variants < 1:
            raise ValueError("max_variants must be at least 1")
        self.max_variants = max_variants
        self.executor = executor

    def discover(self, event_log: EventLog) -> ProcessModel:
        """
        Discover a process model from an event log.

        Args:
            event_log: The event log to learn from

        Returns:
            The discovered ProcessModel

        Raises:
            EmptyLogError: If the log has no events
        """
        if not event_log.events:
            raise EmptyLogError("Cannot discover a process model from an empty event log")

        traces = build_traces(event_log)
        stats = self._collect(traces.values())

        ideal_path = self._ideal_path(stats)
        ideal_pairs = set(zip(ideal_path, ideal_path[1:]))

        activities = self._build_activities(stats)
        transitions = self._build_transitions(stats, ideal_pairs)
        variants = self._build_variants(stats, ideal_path)

        model = ProcessModel(
            activities=activities,
            transitions=transitions,
            ideal_path=ideal_path,
            variants=variants,
            case_count=stats.case_count,
            total_variants=len(stats.variant_counts),
            diagnostics=self._diagnose(activities, ideal_path),
        )

        logger.debug(
            f"Process discovery: {model.case_count} cases, "
            f"{len(activities)} activities, {len(transitions)} transitions, "
            f"{model.total_variants} variants"
        )

        for message in model.diagnostics:
            logger.warning(message)
            warnings.warn(message, DegenerateModelWarning, stacklevel=2)

        return model

    def _collect(self, traces: Iterable[Trace]) -> TraceStatistics:
        """Collect and merge per-trace statistics in trace order."""
        if self.executor is not None:
            # Executor.map yields results in submission order
            parts = self.executor.map(TraceStatistics.from_trace, traces)
        else:
            parts = map(TraceStatistics.from_trace, traces)
        return TraceStatistics.combine(parts)

    def _ideal_path(self, stats: TraceStatistics) -> Path:
        """Most frequent variant; max() keeps the first of equal counts."""
        path, _ = max(stats.variant_counts.items(), key=lambda item: item[1])
        return path

    def _build_activities(self, stats: TraceStatistics) -> Tuple[Activity, ...]:
        return tuple(
            Activity(
                name=name,
                frequency=frequency,
                avg_duration=_mean(stats.activity_gaps.get(name, [])),
                is_start=name in stats.start_activities,
                is_end=name in stats.end_activities,
            )
            for name, frequency in stats.activity_counts.items()
        )

    def _build_transitions(
        self,
        stats: TraceStatistics,
        ideal_pairs: set
    ) -> Tuple[Transition, ...]:
        return tuple(
            Transition(
                source=source,
                target=target,
                frequency=frequency,
                avg_duration=_mean(stats.transition_gaps[(source, target)]),
                is_in_ideal_path=(source, target) in ideal_pairs,
            )
            for (source, target), frequency in stats.transition_counts.items()
        )

    def _build_variants(
        self,
        stats: TraceStatistics,
        ideal_path: Path
    ) -> Tuple[ProcessVariant, ...]:
        # sorted() is stable, so equal frequencies keep first-seen order
        ranked = sorted(
            stats.variant_counts.items(),
            key=lambda item: item[1],
            reverse=True
        )

        return tuple(
            ProcessVariant(
                path=path,
                frequency=frequency,
                avg_duration=_mean(stats.variant_durations[path]),
                conformance_score=self.variant_score(path, ideal_path),
            )
            for path, frequency in ranked[:self.max_variants]
        )

    def variant_score(self, path: Path, ideal_path: Path) -> float:
        """
        Length-based conformance proxy for a variant.

        Args:
            path: The variant's activity sequence
            ideal_path: The model's ideal path

        Returns:
            Score in [VARIANT_SCORE_FLOOR, 1.0]
        """
        if tuple(path) == tuple(ideal_path):
            return 1.0
        length_gap = abs(len(path) - len(ideal_path)) / len(ideal_path)
        score = 1.0 - self.VARIANT_LENGTH_PENALTY * length_gap
        return max(self.VARIANT_SCORE_FLOOR, min(1.0, score))

    def _diagnose(
        self,
        activities: Tuple[Activity, ...],
        ideal_path: Path
    ) -> Tuple[str, ...]:
        diagnostics = []
        if len(activities) < 2:
            diagnostics.append(
                f"Degenerate model: only {len(activities)} distinct activity observed"
            )
        if len(ideal_path) < 2:
            diagnostics.append(
                f"Degenerate model: ideal path has {len(ideal_path)} step(s)"
            )
        return tuple(diagnostics)


def discover_process(
    event_log: EventLog,
    max_variants: int = 20
) -> ProcessModel:
    """
    Convenience function to discover a process model.

    Args:
        event_log: The event log to learn from
        max_variants: Number of top variants to keep

    Returns:
        The discovered ProcessModel
    """
    return ProcessDiscoverer(max_variants=max_variants).discover(event_log)
