"""
User Behavior Analysis.

Aggregates events and conformance results per actor, computes population
statistics, and assigns every actor a behavioral segment.

Metrics per actor:
- cases_handled: Distinct cases the actor touched
- conformance_score: Mean fitness of those cases (1.0 if none was scored)
- avg_completion_time: Mean span, in seconds, between the actor's own
  first and last event within a case, over cases where the actor has at
  least two events spanning a non-zero interval
- deviation_count: Deviations in those cases attributed to the actor
- most_common_deviation: The actor's most frequent ``"{type}:{activity}"``
"""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..conformance.checker import CaseConformance
from ..log.models import Event, EventLog
from .segments import GlobalStats, UserSegment, assign_segment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActorMetrics:
    """
    Behavioral metrics and segment of one actor.

    Attributes:
        actor_id: Actor identifier
        segment: Assigned behavioral segment
        cases_handled: Number of distinct cases touched
        conformance_score: Mean fitness of the actor's cases
        avg_completion_time: Mean seconds from the actor's first to last
            event within a case
        deviation_count: Deviations attributed to the actor
        most_common_deviation: Most frequent deviation key, if any
        recent_cases: Most recently touched case ids, newest first
    """
    actor_id: str
    segment: UserSegment = UserSegment.CONFORMIST
    cases_handled: int = 0
    conformance_score: float = 1.0
    avg_completion_time: float = 0.0
    deviation_count: int = 0
    most_common_deviation: Optional[str] = None
    recent_cases: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "actor_id": self.actor_id,
            "segment": self.segment.value,
            "cases_handled": self.cases_handled,
            "conformance_score": self.conformance_score,
            "avg_completion_time": self.avg_completion_time,
            "deviation_count": self.deviation_count,
            "most_common_deviation": self.most_common_deviation,
            "recent_cases": list(self.recent_cases),
        }


class UserBehaviorAnalyzer:
    """
    Computes per-actor metrics and behavioral segments.

    Actors are reported in order of their first event in the log.

    Example:
        analyzer = UserBehaviorAnalyzer()
        actors, stats = analyzer.analyze(event_log, conformance_results)

        for actor in actors:
            print(actor.actor_id, actor.segment.value)
    """

    def __init__(self, recent_cases_limit: int = 5):
        """
        Initialize the analyzer.

        Args:
            recent_cases_limit: Number of recent case ids kept per actor
        """
        self.recent_cases_limit = recent_cases_limit

    def analyze(
        self,
        event_log: EventLog,
        conformance: Sequence[CaseConformance]
    ) -> Tuple[List[ActorMetrics], GlobalStats]:
        """
        Analyze actor behavior.

        Args:
            event_log: The event log
            conformance: Conformance results for the log's cases

        Returns:
            Tuple of (actor metrics, population statistics); an empty log
            gives an empty list and all-zero statistics
        """
        events_by_actor: Dict[str, List[Event]] = defaultdict(list)
        for event in event_log.events:
            events_by_actor[event.actor_id].append(event)

        unsegmented = [
            self._actor_metrics(actor_id, events, conformance)
            for actor_id, events in events_by_actor.items()
        ]

        stats = GlobalStats.from_metrics(
            conformance_scores=[a.conformance_score for a in unsegmented],
            completion_times=[a.avg_completion_time for a in unsegmented],
            deviation_counts=[a.deviation_count for a in unsegmented],
        )

        actors = [
            replace(
                actor,
                segment=assign_segment(
                    actor.conformance_score,
                    actor.avg_completion_time,
                    actor.deviation_count,
                    stats,
                ),
            )
            for actor in unsegmented
        ]

        logger.debug(f"Analyzed {len(actors)} actors")
        return actors, stats

    def _actor_metrics(
        self,
        actor_id: str,
        events: List[Event],
        conformance: Sequence[CaseConformance]
    ) -> ActorMetrics:
        """Compute metrics for one actor; the segment is assigned later."""
        # Actor's own events per case, in log (timestamp) order
        events_by_case: Dict[str, List[Event]] = defaultdict(list)
        for event in events:
            events_by_case[event.case_id].append(event)

        scored = [r for r in conformance if r.case_id in events_by_case]
        conformance_score = (
            float(np.mean([r.fitness for r in scored])) if scored else 1.0
        )

        spans = [
            (case_events[-1].timestamp - case_events[0].timestamp).total_seconds()
            for case_events in events_by_case.values()
            if len(case_events) >= 2
        ]
        # Cases whose events share one timestamp have no measurable span
        spans = [span for span in spans if span > 0]
        avg_completion_time = float(np.mean(spans)) if spans else 0.0

        deviations = [
            d for r in scored for d in r.deviations
            if d.actor_id == actor_id
        ]
        most_common = Counter(d.key for d in deviations).most_common(1)

        return ActorMetrics(
            actor_id=actor_id,
            cases_handled=len(events_by_case),
            conformance_score=conformance_score,
            avg_completion_time=avg_completion_time,
            deviation_count=len(deviations),
            most_common_deviation=most_common[0][0] if most_common else None,
            recent_cases=self._recent_cases(events),
        )

    def _recent_cases(self, events: List[Event]) -> Tuple[str, ...]:
        """Case ids ordered by the actor's latest event in them, newest first."""
        last_seen: Dict[str, int] = {}
        for index, event in enumerate(events):
            last_seen[event.case_id] = index
        ordered = sorted(last_seen, key=last_seen.get, reverse=True)
        return tuple(ordered[:self.recent_cases_limit])


def segment_counts(actors: Sequence[ActorMetrics]) -> Dict[UserSegment, int]:
    """Count actors per segment; every segment is present, possibly with 0."""
    counts = {segment: 0 for segment in UserSegment}
    for actor in actors:
        counts[actor.segment] += 1
    return counts


def actors_in_segment(
    actors: Sequence[ActorMetrics],
    segment: UserSegment
) -> List[ActorMetrics]:
    """Get the actors assigned to one segment."""
    return [a for a in actors if a.segment == segment]


def analyze_actors(
    event_log: EventLog,
    conformance: Sequence[CaseConformance],
    recent_cases_limit: int = 5
) -> Tuple[List[ActorMetrics], GlobalStats]:
    """
    Convenience function to analyze actor behavior.

    Args:
        event_log: The event log
        conformance: Conformance results for the log's cases
        recent_cases_limit: Number of recent case ids kept per actor

    Returns:
        Tuple of (actor metrics, population statistics)
    """
    return UserBehaviorAnalyzer(recent_cases_limit).analyze(event_log, conformance)
