"""
Deviation Detection for Conformance Checking.

Compares a case's actual activity sequence against the ideal path with
three independent linear scans:

- SKIP: an ideal-path activity that never occurs in the case
- INSERT: a case activity that does not occur in the ideal path
- REORDER: two consecutive shared activities whose order contradicts
  the ideal path

This is a fast heuristic, not an optimal alignment. The scans do not
coordinate, so a trace with duplicated activities can be flagged by more
than one scan for related reasons. No precedence between the three
deviation types is applied.

Attribution of a deviation to an actor:
- skip deviations use the case's first event, since nobody executed the
  missing step
- insert and reorder deviations use the event at the relevant actual
  position
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..log.traces import Trace

logger = logging.getLogger(__name__)


class DeviationType(Enum):
    """Types of process deviations."""

    SKIP = "skip"          # Ideal activity never executed
    INSERT = "insert"      # Activity outside the ideal path
    REORDER = "reorder"    # Activities executed out of ideal order


@dataclass(frozen=True)
class Deviation:
    """
    A detected deviation from the ideal path.

    Attributes:
        deviation_type: Type of deviation detected
        activity: Name of the activity involved
        actor_id: Actor the deviation is attributed to
        timestamp: Timestamp of the attributed event
        case_id: Identifier for the process instance
        expected_position: Index in the ideal path (skip only)
        actual_position: Index in the case's sequence (insert only)
    """
    deviation_type: DeviationType
    activity: str
    actor_id: str
    timestamp: datetime
    case_id: str = ""
    expected_position: Optional[int] = None
    actual_position: Optional[int] = None

    @property
    def key(self) -> str:
        """Grouping key of the form ``"{type}:{activity}"``."""
        return f"{self.deviation_type.value}:{self.activity}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "type": self.deviation_type.value,
            "activity": self.activity,
            "expected_position": self.expected_position,
            "actual_position": self.actual_position,
            "actor_id": self.actor_id,
            "timestamp": self.timestamp.isoformat(),
            "case_id": self.case_id,
        }


class DeviationDetector:
    """
    Detects deviations in traces against an ideal path.

    Example:
        detector = DeviationDetector(model.ideal_path)
        deviations = detector.detect(trace)
    """

    def __init__(self, ideal_path: Sequence[str]):
        """
        Initialize the deviation detector.

        Args:
            ideal_path: The reference activity sequence
        """
        self._ideal_path: Tuple[str, ...] = tuple(ideal_path)
        # First occurrence wins for activities repeated in the ideal path
        self._ideal_index: Dict[str, int] = {}
        for index, activity in enumerate(self._ideal_path):
            self._ideal_index.setdefault(activity, index)

    @property
    def ideal_path(self) -> Tuple[str, ...]:
        return self._ideal_path

    def detect(self, trace: Trace) -> List[Deviation]:
        """
        Detect all deviations in a trace.

        Args:
            trace: The case's chronologically ordered events

        Returns:
            Skip deviations, then insert, then reorder, each in scan order
        """
        activities = trace.activities

        deviations = []
        deviations.extend(self._check_skipped(activities, trace))
        deviations.extend(self._check_inserted(activities, trace))
        deviations.extend(self._check_reordered(activities, trace))

        if deviations:
            logger.debug(f"Case {trace.case_id}: {len(deviations)} deviations")
        return deviations

    def _check_skipped(
        self,
        activities: Tuple[str, ...],
        trace: Trace
    ) -> List[Deviation]:
        """Ideal-path activities that never occur in the trace."""
        executed = set(activities)
        first = trace.events[0]

        return [
            Deviation(
                deviation_type=DeviationType.SKIP,
                activity=activity,
                actor_id=first.actor_id,
                timestamp=first.timestamp,
                case_id=trace.case_id,
                expected_position=index,
            )
            for index, activity in enumerate(self._ideal_path)
            if activity not in executed
        ]

    def _check_inserted(
        self,
        activities: Tuple[str, ...],
        trace: Trace
    ) -> List[Deviation]:
        """Trace activities that do not occur in the ideal path."""
        return [
            Deviation(
                deviation_type=DeviationType.INSERT,
                activity=activity,
                actor_id=trace.events[index].actor_id,
                timestamp=trace.events[index].timestamp,
                case_id=trace.case_id,
                actual_position=index,
            )
            for index, activity in enumerate(activities)
            if activity not in self._ideal_index
        ]

    def _check_reordered(
        self,
        activities: Tuple[str, ...],
        trace: Trace
    ) -> List[Deviation]:
        """Consecutive shared activities whose order contradicts the ideal path."""
        # (actual position, activity) for activities also in the ideal path
        shared = [
            (index, activity)
            for index, activity in enumerate(activities)
            if activity in self._ideal_index
        ]

        deviations = []
        for (position, current), (_, following) in zip(shared, shared[1:]):
            if self._ideal_index[current] > self._ideal_index[following]:
                event = trace.events[position]
                deviations.append(Deviation(
                    deviation_type=DeviationType.REORDER,
                    activity=current,
                    actor_id=event.actor_id,
                    timestamp=event.timestamp,
                    case_id=trace.case_id,
                ))

        return deviations


@dataclass
class DeviationSummary:
    """
    Summary statistics for deviations across multiple cases.

    Attributes:
        total_deviations: Total number of deviations detected
        by_type: Count of deviations by type
        by_activity: Count of deviations by activity
        most_common: List of (deviation key, count) tuples
    """
    total_deviations: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)
    by_activity: Dict[str, int] = field(default_factory=dict)
    most_common: List[tuple] = field(default_factory=list)

    @classmethod
    def from_deviations(cls, deviations: List[Deviation]) -> "DeviationSummary":
        """
        Create a summary from a list of deviations.

        Args:
            deviations: List of deviations to summarize

        Returns:
            DeviationSummary instance
        """
        summary = cls(total_deviations=len(deviations))

        for dev in deviations:
            type_key = dev.deviation_type.value
            summary.by_type[type_key] = summary.by_type.get(type_key, 0) + 1
            summary.by_activity[dev.activity] = summary.by_activity.get(dev.activity, 0) + 1

        summary.most_common = Counter(d.key for d in deviations).most_common(5)

        return summary

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "total_deviations": self.total_deviations,
            "by_type": self.by_type,
            "by_activity": self.by_activity,
            "most_common": [list(item) for item in self.most_common],
        }
