"""
Conformance Checking Engine.

Scores every case of an event log against the ideal path of a discovered
process model.

Key metrics computed:
- Fitness: How closely a case follows the ideal path (0.0 - 1.0)
- Full conformance rate: Percentage of cases without any deviation
- Deviation counts by type, by activity and per actor
"""

import logging
from collections import Counter
from concurrent.futures import Executor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..discovery.models import ProcessModel
from ..log.models import EventLog
from ..log.traces import Trace, build_traces
from .deviations import Deviation, DeviationDetector, DeviationSummary, DeviationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaseConformance:
    """
    Conformance checking result for a single case.

    Attributes:
        case_id: Identifier for the process instance
        fitness: How well the case follows the ideal path (0.0 - 1.0)
        deviations: Detected deviations, skip then insert then reorder
    """
    case_id: str
    fitness: float
    deviations: Tuple[Deviation, ...] = ()

    @property
    def is_fully_conformant(self) -> bool:
        """True if no deviations were detected."""
        return not self.deviations

    @property
    def deviation_count(self) -> int:
        return len(self.deviations)

    def deviations_of_type(self, deviation_type: DeviationType) -> List[Deviation]:
        """Get deviations of one type."""
        return [d for d in self.deviations if d.deviation_type == deviation_type]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "case_id": self.case_id,
            "fitness": self.fitness,
            "is_fully_conformant": self.is_fully_conformant,
            "deviation_count": self.deviation_count,
            "deviations": [d.to_dict() for d in self.deviations],
        }


@dataclass
class ConformanceSummary:
    """
    Aggregated conformance checking results across all cases.

    Attributes:
        total_cases: Total number of cases analyzed
        fully_conformant_cases: Number of cases without deviations
        full_conformance_rate: Percentage of fully conformant cases
        average_fitness: Mean fitness score across all cases
        min_fitness: Minimum fitness score observed
        max_fitness: Maximum fitness score observed
        deviation_summary: Summary statistics for deviations
    """
    total_cases: int = 0
    fully_conformant_cases: int = 0
    full_conformance_rate: float = 0.0
    average_fitness: float = 0.0
    min_fitness: float = 0.0
    max_fitness: float = 0.0
    deviation_summary: DeviationSummary = field(default_factory=DeviationSummary)

    @property
    def total_deviations(self) -> int:
        return self.deviation_summary.total_deviations

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "total_cases": self.total_cases,
            "fully_conformant_cases": self.fully_conformant_cases,
            "full_conformance_rate": self.full_conformance_rate,
            "average_fitness": self.average_fitness,
            "min_fitness": self.min_fitness,
            "max_fitness": self.max_fitness,
            "total_deviations": self.total_deviations,
            "deviation_summary": self.deviation_summary.to_dict(),
        }


class ConformanceChecker:
    """
    Main conformance checking engine.

    Compares each case against the model's ideal path and computes a
    fitness score from the detected deviations.

    Fitness calculation:
    - Perfect trace: 1.0
    - Each skipped ideal activity: -0.10
    - Each inserted activity: -0.05
    - Each out-of-order pair: -0.08
    - Result clamped to [0.0, 1.0]

    Results are returned in trace order: the order in which each case
    first appears in the timestamp-sorted log.

    Example:
        checker = ConformanceChecker(model)
        results = checker.check(event_log)
        summary = checker.summarize(results)

        print(f"Average fitness: {summary.average_fitness}")
    """

    # Fitness penalty weights by deviation type
    DEVIATION_PENALTIES = {
        DeviationType.SKIP: 0.10,
        DeviationType.INSERT: 0.05,
        DeviationType.REORDER: 0.08,
    }

    def __init__(
        self,
        model: ProcessModel,
        executor: Optional[Executor] = None
    ):
        """
        Initialize the conformance checker.

        Args:
            model: The discovered process model to check against
            executor: Optional executor for per-case scoring
        """
        self._model = model
        self._detector = DeviationDetector(model.ideal_path)
        self._executor = executor

    @property
    def model(self) -> ProcessModel:
        """Get the process model."""
        return self._model

    def check(self, event_log: EventLog) -> List[CaseConformance]:
        """
        Check conformance of every case in an event log.

        Args:
            event_log: The event log to check

        Returns:
            One CaseConformance per case; empty for an empty log
        """
        traces = build_traces(event_log).values()

        if self._executor is not None:
            results = list(self._executor.map(self.check_trace, traces))
        else:
            results = [self.check_trace(trace) for trace in traces]

        logger.debug(f"Checked conformance of {len(results)} cases")
        return results

    def check_trace(self, trace: Trace) -> CaseConformance:
        """
        Check conformance of a single trace.

        Args:
            trace: The case's chronologically ordered events

        Returns:
            CaseConformance with fitness and deviations

        A Trace always holds at least one event; the empty case is rejected
        when the Trace is built.
        """
        deviations = self._detector.detect(trace)

        return CaseConformance(
            case_id=trace.case_id,
            fitness=self._calculate_fitness(deviations),
            deviations=tuple(deviations),
        )

    def _calculate_fitness(self, deviations: List[Deviation]) -> float:
        """
        Calculate fitness score based on deviations.

        Fitness starts at 1.0 (perfect) and is reduced by each deviation
        based on its type. The result is clamped to [0.0, 1.0].

        Args:
            deviations: List of detected deviations

        Returns:
            Fitness score between 0.0 and 1.0
        """
        fitness = 1.0
        for deviation in deviations:
            fitness -= self.DEVIATION_PENALTIES[deviation.deviation_type]

        fitness = max(0.0, min(1.0, fitness))
        return round(fitness, 4)

    def summarize(self, results: Sequence[CaseConformance]) -> ConformanceSummary:
        """
        Aggregate individual case results into overall statistics.

        Args:
            results: Individual case results

        Returns:
            ConformanceSummary; all zero for an empty result list
        """
        if not results:
            return ConformanceSummary()

        total_cases = len(results)
        fully_conformant = sum(1 for r in results if r.is_fully_conformant)
        fitness_scores = [r.fitness for r in results]
        all_deviations = [d for r in results for d in r.deviations]

        return ConformanceSummary(
            total_cases=total_cases,
            fully_conformant_cases=fully_conformant,
            full_conformance_rate=round(fully_conformant / total_cases * 100.0, 2),
            average_fitness=round(sum(fitness_scores) / total_cases, 4),
            min_fitness=min(fitness_scores),
            max_fitness=max(fitness_scores),
            deviation_summary=DeviationSummary.from_deviations(all_deviations),
        )

    def annotate_model(self, results: Sequence[CaseConformance]) -> ProcessModel:
        """
        Copy the model with per-activity deviation counts filled in.

        Args:
            results: Case results produced against this checker's model

        Returns:
            New ProcessModel; the checker's model is left untouched
        """
        return annotate_model(self._model, results)


def deviation_counts_by_activity(results: Sequence[CaseConformance]) -> Dict[str, int]:
    """Count deviations per activity name across all cases."""
    return dict(Counter(d.activity for r in results for d in r.deviations))


def annotate_model(
    model: ProcessModel,
    results: Sequence[CaseConformance]
) -> ProcessModel:
    """
    Copy a model with activity deviation counts taken from conformance results.

    Deviations naming activities that are not in the model (which cannot
    happen for results produced against the same model) are ignored.
    """
    return model.with_deviation_counts(deviation_counts_by_activity(results))


def deviations_for_actor(
    results: Sequence[CaseConformance],
    actor_id: str
) -> List[Deviation]:
    """
    Get every deviation attributed to one actor, in result order.

    Args:
        results: Conformance results
        actor_id: The actor to filter on

    Returns:
        The actor's deviations
    """
    return [
        d for r in results for d in r.deviations
        if d.actor_id == actor_id
    ]


def check_conformance(
    event_log: EventLog,
    model: ProcessModel
) -> List[CaseConformance]:
    """
    Convenience function to check conformance of an event log.

    Args:
        event_log: The event log to check
        model: Process model to check against

    Returns:
        One CaseConformance per case
    """
    return ConformanceChecker(model).check(event_log)
