"""
Trace construction: grouping an event log into per-case sequences.

A trace is rebuilt from the event log on every pass; nothing is cached.
Grouping is deterministic: traces appear in the order their case first
occurs in the log, and events sharing a timestamp keep their log order.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Tuple

from ..exceptions import InvalidEventError, InvalidTraceError
from .models import Event, EventLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Trace:
    """
    The chronologically ordered events of one case.

    Attributes:
        case_id: Identifier of the process instance
        events: Events of the case, sorted by timestamp
    """
    case_id: str
    events: Tuple[Event, ...]

    def __post_init__(self):
        if not self.events:
            raise InvalidTraceError(f"Trace for case {self.case_id!r} has no events")
        for event in self.events:
            if event.case_id != self.case_id:
                raise InvalidTraceError(
                    f"Event {event.id!r} belongs to case {event.case_id!r}, "
                    f"not {self.case_id!r}"
                )

    def __len__(self) -> int:
        return len(self.events)

    @property
    def activities(self) -> Tuple[str, ...]:
        """Get the activity sequence of the trace."""
        return tuple(e.activity for e in self.events)

    @property
    def start_time(self) -> datetime:
        return self.events[0].timestamp

    @property
    def end_time(self) -> datetime:
        return self.events[-1].timestamp

    @property
    def duration(self) -> float:
        """Elapsed seconds between the first and last event."""
        return (self.end_time - self.start_time).total_seconds()

    def gaps(self) -> List[float]:
        """Seconds elapsed between each pair of consecutive events."""
        return [
            (self.events[i + 1].timestamp - self.events[i].timestamp).total_seconds()
            for i in range(len(self.events) - 1)
        ]


def build_traces(event_log: EventLog) -> Dict[str, Trace]:
    """
    Group an event log into traces keyed by case id.

    Args:
        event_log: The event log to group

    Returns:
        Mapping from case id to its trace, in order of first appearance

    Raises:
        InvalidEventError: If an event has no case id
    """
    return group_events(event_log.events)


def group_events(events: Iterable[Event]) -> Dict[str, Trace]:
    """
    Group events into traces keyed by case id.

    Events within a case are stably sorted by timestamp, so the result does
    not depend on anything but the input order.
    """
    cases: Dict[str, List[Event]] = defaultdict(list)

    for event in events:
        if not event.case_id:
            raise InvalidEventError(f"Event {event.id!r} has no case_id")
        cases[event.case_id].append(event)

    traces = {
        case_id: Trace(
            case_id=case_id,
            events=tuple(sorted(case_events, key=lambda e: e.timestamp)),
        )
        for case_id, case_events in cases.items()
    }

    logger.debug(f"Built {len(traces)} traces")
    return traces
