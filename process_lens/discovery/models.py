"""
Discovered Process Model Definitions.

A discovered model is a directly-follows graph learned from an event log:

- Nodes represent activities, weighted by how often they occurred
- Edges represent one activity immediately following another
- The ideal path is the most frequently observed complete sequence
- Variants are the distinct complete sequences, ranked by frequency

Key concepts:
- Activity: A discrete unit of work observed in the log (e.g., "Document Check")
- Transition: An observed succession from one activity to the next
- Variant: One distinct end-to-end activity sequence
- Ideal path: The variant with the highest frequency

All model objects are plain immutable data, safe to serialize.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Set, Tuple


@dataclass(frozen=True)
class Activity:
    """
    An activity node in the discovered model.

    Attributes:
        name: Unique activity name
        frequency: Total number of occurrences across all traces
        avg_duration: Mean seconds from the preceding event in the same
            trace to an occurrence of this activity
        is_start: Whether the activity starts at least one trace
        is_end: Whether the activity ends at least one trace
        deviation_count: Deviations naming this activity; filled in after
            conformance checking, 0 straight out of discovery
    """
    name: str
    frequency: int
    avg_duration: float = 0.0
    is_start: bool = False
    is_end: bool = False
    deviation_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "frequency": self.frequency,
            "avg_duration": self.avg_duration,
            "is_start": self.is_start,
            "is_end": self.is_end,
            "deviation_count": self.deviation_count,
        }


@dataclass(frozen=True)
class Transition:
    """
    A directly-follows edge between two activities.

    Attributes:
        source: Name of the preceding activity
        target: Name of the following activity
        frequency: Number of times target immediately followed source
        avg_duration: Mean seconds between the two events
        is_in_ideal_path: Whether the pair is adjacent in the ideal path
    """
    source: str
    target: str
    frequency: int
    avg_duration: float = 0.0
    is_in_ideal_path: bool = False

    @property
    def key(self) -> Tuple[str, str]:
        """The (source, target) pair identifying this transition."""
        return (self.source, self.target)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "source": self.source,
            "target": self.target,
            "frequency": self.frequency,
            "avg_duration": self.avg_duration,
            "is_in_ideal_path": self.is_in_ideal_path,
        }


@dataclass(frozen=True)
class ProcessVariant:
    """
    One distinct complete activity sequence.

    Attributes:
        path: Ordered activity names
        frequency: Number of traces following exactly this path
        avg_duration: Mean case duration in seconds (last minus first event)
        conformance_score: Length-based similarity to the ideal path.
            This is a proxy that ignores content, not a fitness value.
    """
    path: Tuple[str, ...]
    frequency: int
    avg_duration: float = 0.0
    conformance_score: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "path": list(self.path),
            "frequency": self.frequency,
            "avg_duration": self.avg_duration,
            "conformance_score": self.conformance_score,
        }


@dataclass(frozen=True)
class ProcessModel:
    """
    A directly-follows process model discovered from an event log.

    Invariants:
    - ``ideal_path`` equals the path of the first (most frequent) variant
    - a transition is flagged ``is_in_ideal_path`` exactly when its pair is
      adjacent somewhere in ``ideal_path``

    Attributes:
        activities: Activity nodes, in order of first occurrence
        transitions: Directly-follows edges, in order of first occurrence
        ideal_path: The most frequent complete activity sequence
        variants: Top variants ranked by frequency
        case_count: Number of traces the model was discovered from
        total_variants: Number of distinct variants before truncation
        diagnostics: Non-fatal messages raised during discovery
    """
    activities: Tuple[Activity, ...]
    transitions: Tuple[Transition, ...]
    ideal_path: Tuple[str, ...]
    variants: Tuple[ProcessVariant, ...]
    case_count: int = 0
    total_variants: int = 0
    diagnostics: Tuple[str, ...] = field(default_factory=tuple)

    def get_activity(self, name: str) -> Optional[Activity]:
        """
        Get an activity by name.

        Args:
            name: Activity name

        Returns:
            The activity, or None if not found
        """
        for activity in self.activities:
            if activity.name == name:
                return activity
        return None

    def get_transition(self, source: str, target: str) -> Optional[Transition]:
        """
        Get the transition between two activities.

        Args:
            source: Source activity name
            target: Target activity name

        Returns:
            The transition, or None if target never directly followed source
        """
        for transition in self.transitions:
            if transition.key == (source, target):
                return transition
        return None

    def successors(self, name: str) -> List[str]:
        """Get activities observed directly after the given one."""
        return [t.target for t in self.transitions if t.source == name]

    def predecessors(self, name: str) -> List[str]:
        """Get activities observed directly before the given one."""
        return [t.source for t in self.transitions if t.target == name]

    @property
    def activity_names(self) -> List[str]:
        return [a.name for a in self.activities]

    @property
    def start_activities(self) -> Set[str]:
        """Get start activity names."""
        return {a.name for a in self.activities if a.is_start}

    @property
    def end_activities(self) -> Set[str]:
        """Get end activity names."""
        return {a.name for a in self.activities if a.is_end}

    @property
    def is_degenerate(self) -> bool:
        """Whether the model has fewer than two activities or ideal steps."""
        return len(self.activities) < 2 or len(self.ideal_path) < 2

    def with_deviation_counts(self, counts: Dict[str, int]) -> "ProcessModel":
        """
        Return a copy of the model with activity deviation counts set.

        Args:
            counts: Mapping from activity name to number of deviations

        Returns:
            New ProcessModel; activities missing from ``counts`` get 0
        """
        activities = tuple(
            replace(a, deviation_count=counts.get(a.name, 0))
            for a in self.activities
        )
        return replace(self, activities=activities)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the process model to a dictionary representation.

        Returns:
            Dictionary representation of the model
        """
        return {
            "activities": [a.to_dict() for a in self.activities],
            "transitions": [t.to_dict() for t in self.transitions],
            "ideal_path": list(self.ideal_path),
            "variants": [v.to_dict() for v in self.variants],
            "case_count": self.case_count,
            "total_variants": self.total_variants,
            "start_activities": sorted(self.start_activities),
            "end_activities": sorted(self.end_activities),
            "diagnostics": list(self.diagnostics),
        }
