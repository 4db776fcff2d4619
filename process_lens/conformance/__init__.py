"""
Conformance Checking Module.

Compares every case of an event log against the ideal path of a
discovered process model, producing a fitness score and a typed list of
deviations per case.

Key Components:
- ConformanceChecker: Engine for scoring cases against a model
- DeviationDetector: Three independent scans (skip, insert, reorder)
- ConformanceSummary: Aggregate statistics over a conformance run

Main Features:
- Detect and classify deviations:
  - Skipped activities (ideal activity never executed)
  - Inserted activities (activity outside the ideal path)
  - Reordered activities (shared activities out of ideal order)
- Fitness penalties per deviation type
- Post-hoc deviation counts per model activity
- Per-actor deviation lists

Example Usage:
    from process_lens.conformance import ConformanceChecker

    checker = ConformanceChecker(model)
    results = checker.check(event_log)

    for result in results:
        print(result.case_id, result.fitness, len(result.deviations))

    annotated = checker.annotate_model(results)
"""

from .deviations import (
    Deviation,
    DeviationDetector,
    DeviationSummary,
    DeviationType,
)

from .checker import (
    CaseConformance,
    ConformanceChecker,
    ConformanceSummary,
    annotate_model,
    check_conformance,
    deviation_counts_by_activity,
    deviations_for_actor,
)

__all__ = [
    # Deviations
    "Deviation",
    "DeviationDetector",
    "DeviationSummary",
    "DeviationType",
    # Checker
    "CaseConformance",
    "ConformanceChecker",
    "ConformanceSummary",
    "annotate_model",
    "check_conformance",
    "deviation_counts_by_activity",
    "deviations_for_actor",
]
