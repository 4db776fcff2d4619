"""
End-to-end analysis pipeline.

Runs discovery, conformance checking, model annotation and behavior
analysis over one event log:

    event log -> process model -> case conformance -> actor segments

Each stage returns a new value consumed by the next; nothing is shared
or mutated between stages.
"""

import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from . import DEFAULT_CONFIG
from .behavior import ActorMetrics, GlobalStats, UserBehaviorAnalyzer, segment_counts
from .conformance import CaseConformance, ConformanceChecker, ConformanceSummary
from .discovery import ProcessDiscoverer, ProcessModel
from .log.models import EventLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """
    Outputs of a full analysis run.

    Attributes:
        model: Discovered model with activity deviation counts filled in
        conformance: One result per case, in trace order
        summary: Aggregate conformance statistics
        actors: Per-actor metrics and segments
        stats: Population statistics behind the segments
    """
    model: ProcessModel
    conformance: List[CaseConformance]
    summary: ConformanceSummary
    actors: List[ActorMetrics]
    stats: GlobalStats

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "model": self.model.to_dict(),
            "conformance": [r.to_dict() for r in self.conformance],
            "summary": self.summary.to_dict(),
            "actors": [a.to_dict() for a in self.actors],
            "stats": self.stats.to_dict(),
            "segments": {
                segment.value: count
                for segment, count in segment_counts(self.actors).items()
            },
        }


def run_pipeline(
    event_log: EventLog,
    max_variants: int = DEFAULT_CONFIG["max_variants"],
    recent_cases_limit: int = DEFAULT_CONFIG["recent_cases_limit"],
    executor: Optional[Executor] = None
) -> PipelineResult:
    """
    Run discovery, conformance and behavior analysis on an event log.

    Args:
        event_log: The event log to analyze
        max_variants: Number of top variants to keep
        recent_cases_limit: Number of recent case ids kept per actor
        executor: Optional executor for per-trace work

    Returns:
        PipelineResult with every stage's output

    Raises:
        EmptyLogError: If the log has no events
    """
    model = ProcessDiscoverer(max_variants=max_variants, executor=executor).discover(event_log)

    checker = ConformanceChecker(model, executor=executor)
    conformance = checker.check(event_log)
    summary = checker.summarize(conformance)
    annotated = checker.annotate_model(conformance)

    actors, stats = UserBehaviorAnalyzer(recent_cases_limit).analyze(event_log, conformance)

    logger.info(
        f"Analyzed {summary.total_cases} cases: average fitness "
        f"{summary.average_fitness}, {summary.total_deviations} deviations, "
        f"{len(actors)} actors"
    )

    return PipelineResult(
        model=annotated,
        conformance=conformance,
        summary=summary,
        actors=actors,
        stats=stats,
    )
