"""
User Behavior Analysis Module.

Segments the people executing a process by how they execute it,
relative to everybody else in the same log.

Key Components:
- UserBehaviorAnalyzer: Per-actor metrics and segment assignment
- GlobalStats: Population mean and standard deviation of each metric
- UserSegment: conformist, fast-tracker, deviator, thorough-reviewer

Example Usage:
    from process_lens.behavior import UserBehaviorAnalyzer, UserSegment

    actors, stats = UserBehaviorAnalyzer().analyze(event_log, results)
    deviators = [a for a in actors if a.segment == UserSegment.DEVIATOR]
"""

from .segments import (
    GlobalStats,
    UserSegment,
    assign_segment,
)

from .analyzer import (
    ActorMetrics,
    UserBehaviorAnalyzer,
    actors_in_segment,
    analyze_actors,
    segment_counts,
)

__all__ = [
    # Segments
    "GlobalStats",
    "UserSegment",
    "assign_segment",
    # Analyzer
    "ActorMetrics",
    "UserBehaviorAnalyzer",
    "actors_in_segment",
    "analyze_actors",
    "segment_counts",
]
