"""
Event log model and trace construction.

Example Usage:
    from process_lens.log import Event, EventLog, build_traces

    log = EventLog(events, name="Loan Applications")
    traces = build_traces(log)

    for case_id, trace in traces.items():
        print(case_id, trace.activities)
"""

from .models import (
    AttributeKind,
    AttributeValue,
    Event,
    EventLog,
    EventLogMetadata,
    UNKNOWN_ACTOR,
    parse_timestamp,
)

from .traces import (
    Trace,
    build_traces,
    group_events,
)

__all__ = [
    # Models
    "AttributeKind",
    "AttributeValue",
    "Event",
    "EventLog",
    "EventLogMetadata",
    "UNKNOWN_ACTOR",
    "parse_timestamp",
    # Traces
    "Trace",
    "build_traces",
    "group_events",
]
