"""
Behavioral segments and the population statistics that drive them.

Segments are relative: an actor is a deviator or a fast-tracker only in
comparison with everybody else in the same log. The thresholds are built
from the population mean and population standard deviation (ddof=0) of
each metric.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Sequence

import numpy as np


class UserSegment(Enum):
    """Behavioral classification of an actor."""

    CONFORMIST = "conformist"                # Default, nothing stands out
    FAST_TRACKER = "fast-tracker"            # Fast and still conformant
    DEVIATOR = "deviator"                    # Deviates far more than peers
    THOROUGH_REVIEWER = "thorough-reviewer"  # Slow but conformant


def _mean_std(values: Sequence[float]):
    if len(values) == 0:
        return 0.0, 0.0
    array = np.asarray(values, dtype=float)
    return float(np.mean(array)), float(np.std(array))


@dataclass(frozen=True)
class GlobalStats:
    """
    Population statistics across all actors.

    Completion-time statistics only include actors with a non-zero
    average completion time. Empty populations yield zeros.
    """
    mean_conformance: float = 0.0
    std_conformance: float = 0.0
    mean_completion_time: float = 0.0
    std_completion_time: float = 0.0
    mean_deviations: float = 0.0
    std_deviations: float = 0.0

    @classmethod
    def from_metrics(
        cls,
        conformance_scores: Sequence[float],
        completion_times: Sequence[float],
        deviation_counts: Sequence[int]
    ) -> "GlobalStats":
        """
        Compute population statistics.

        Args:
            conformance_scores: One conformance score per actor
            completion_times: One average completion time per actor; zeros
                are excluded before computing the statistics
            deviation_counts: One deviation count per actor

        Returns:
            GlobalStats instance
        """
        mean_conf, std_conf = _mean_std(conformance_scores)
        mean_time, std_time = _mean_std([t for t in completion_times if t > 0])
        mean_dev, std_dev = _mean_std(deviation_counts)

        return cls(
            mean_conformance=mean_conf,
            std_conformance=std_conf,
            mean_completion_time=mean_time,
            std_completion_time=std_time,
            mean_deviations=mean_dev,
            std_deviations=std_dev,
        )

    @property
    def deviator_threshold(self) -> float:
        """Deviation count above which an actor is a deviator."""
        return self.mean_deviations + self.std_deviations

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "mean_conformance": self.mean_conformance,
            "std_conformance": self.std_conformance,
            "mean_completion_time": self.mean_completion_time,
            "std_completion_time": self.std_completion_time,
            "mean_deviations": self.mean_deviations,
            "std_deviations": self.std_deviations,
        }


def assign_segment(
    conformance_score: float,
    avg_completion_time: float,
    deviation_count: int,
    stats: GlobalStats
) -> UserSegment:
    """
    Classify an actor against population statistics.

    Rules are evaluated in priority order and the first match wins; the
    categories overlap, so the order matters:

    1. DEVIATOR: deviation count above mean + std
    2. FAST_TRACKER: non-zero completion time below mean - std, with
       conformance at least mean - 0.5 * std
    3. THOROUGH_REVIEWER: completion time above mean + 0.5 * std, with
       conformance at least the mean
    4. CONFORMIST otherwise

    Args:
        conformance_score: The actor's mean case fitness
        avg_completion_time: The actor's mean completion time in seconds
        deviation_count: Deviations attributed to the actor
        stats: Population statistics

    Returns:
        The actor's segment
    """
    if deviation_count > stats.deviator_threshold:
        return UserSegment.DEVIATOR

    if (
        avg_completion_time > 0
        and avg_completion_time < stats.mean_completion_time - stats.std_completion_time
        and conformance_score >= stats.mean_conformance - 0.5 * stats.std_conformance
    ):
        return UserSegment.FAST_TRACKER

    if (
        avg_completion_time > stats.mean_completion_time + 0.5 * stats.std_completion_time
        and conformance_score >= stats.mean_conformance
    ):
        return UserSegment.THOROUGH_REVIEWER

    return UserSegment.CONFORMIST
