"""
Process Discovery Module.

Learns a directly-follows process model from an event log.

Key Components:
- ProcessModel: Activities, transitions, ideal path and ranked variants
- ProcessDiscoverer: Single-pass discovery over per-case traces
- TraceStatistics: Mergeable per-trace counters behind discovery

Example Usage:
    from process_lens.discovery import ProcessDiscoverer

    model = ProcessDiscoverer(max_variants=20).discover(event_log)

    print(f"Ideal path: {' -> '.join(model.ideal_path)}")
    for transition in model.transitions:
        print(transition.source, transition.target, transition.frequency)
"""

from .models import (
    Activity,
    ProcessModel,
    ProcessVariant,
    Transition,
)

from .discoverer import (
    ProcessDiscoverer,
    TraceStatistics,
    discover_process,
)

__all__ = [
    # Models
    "Activity",
    "ProcessModel",
    "ProcessVariant",
    "Transition",
    # Discovery
    "ProcessDiscoverer",
    "TraceStatistics",
    "discover_process",
]
