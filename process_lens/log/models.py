"""
Event Log Data Model.

Defines the normalized event schema that every analysis component reads:

- Event: a single immutable, timestamped activity execution within a case
- AttributeKind: the closed set of scalar kinds an event attribute may hold
- EventLog: a timestamp-ordered collection of events with derived metadata

Events are created once (by a loader, a generator or a test) and are only
ever referenced afterwards. Construction validates the schema so that
malformed data fails at the boundary instead of corrupting statistics.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ..exceptions import InvalidEventError

# Actor recorded for events that carry no actor information
UNKNOWN_ACTOR = "unknown"

AttributeValue = Union[str, int, float, bool, datetime]


class AttributeKind(Enum):
    """Scalar kinds allowed as event attribute values."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"

    @classmethod
    def of(cls, value: Any) -> "AttributeKind":
        """
        Classify an attribute value.

        Args:
            value: The attribute value

        Returns:
            The matching AttributeKind

        Raises:
            InvalidEventError: If the value is not a supported scalar
        """
        # bool is a subclass of int, so it has to be checked first
        if isinstance(value, bool):
            return cls.BOOLEAN
        if isinstance(value, int):
            return cls.INTEGER
        if isinstance(value, float):
            return cls.FLOAT
        if isinstance(value, str):
            return cls.STRING
        if isinstance(value, datetime):
            return cls.TIMESTAMP
        raise InvalidEventError(
            f"Unsupported attribute value of type {type(value).__name__}"
        )

    def encode(self, value: AttributeValue) -> Any:
        """Convert a value of this kind to a JSON-safe representation."""
        if self is AttributeKind.TIMESTAMP:
            return value.isoformat()
        return value

    def decode(self, raw: Any) -> AttributeValue:
        """Convert a JSON representation back to a value of this kind."""
        try:
            if self is AttributeKind.TIMESTAMP:
                return parse_timestamp(raw)
            if self is AttributeKind.BOOLEAN:
                if not isinstance(raw, bool):
                    raise TypeError(raw)
                return raw
            if self is AttributeKind.INTEGER:
                return int(raw)
            if self is AttributeKind.FLOAT:
                return float(raw)
            return str(raw)
        except (TypeError, ValueError) as exc:
            raise InvalidEventError(
                f"Cannot decode {raw!r} as {self.value} attribute"
            ) from exc


def parse_timestamp(value: Any) -> datetime:
    """
    Parse a timestamp value into a datetime.

    Accepts datetime objects and ISO 8601 strings (a trailing ``Z`` is
    read as UTC).

    Raises:
        InvalidEventError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidEventError(f"Unparseable timestamp: {value!r}") from exc
    raise InvalidEventError(f"Unparseable timestamp: {value!r}")


def _tag_attribute(value: AttributeValue) -> Dict[str, Any]:
    kind = AttributeKind.of(value)
    return {"kind": kind.value, "value": kind.encode(value)}


@dataclass(frozen=True)
class Event:
    """
    A single executed activity within a case.

    Attributes:
        id: Unique event identifier
        case_id: Identifier of the process instance the event belongs to
        activity: Name of the executed activity
        timestamp: When the activity was executed
        actor_id: Who executed the activity
        attributes: Additional scalar attributes
    """
    id: str
    case_id: str
    activity: str
    timestamp: datetime
    actor_id: str = UNKNOWN_ACTOR
    attributes: Mapping[str, AttributeValue] = field(
        default_factory=dict, hash=False, compare=False
    )

    def __post_init__(self):
        if not isinstance(self.case_id, str) or not self.case_id:
            raise InvalidEventError(f"Event {self.id!r} has no case_id")
        if not isinstance(self.activity, str) or not self.activity:
            raise InvalidEventError(f"Event {self.id!r} has no activity")
        if not isinstance(self.timestamp, datetime):
            raise InvalidEventError(
                f"Event {self.id!r} timestamp must be a datetime, "
                f"got {type(self.timestamp).__name__}"
            )
        if not self.actor_id:
            object.__setattr__(self, "actor_id", UNKNOWN_ACTOR)

        # Read-only copy, detached from the caller's mapping
        attributes = MappingProxyType(dict(self.attributes))
        object.__setattr__(self, "attributes", attributes)
        for key, value in attributes.items():
            if not isinstance(key, str):
                raise InvalidEventError(
                    f"Event {self.id!r} attribute keys must be strings"
                )
            AttributeKind.of(value)

    def __reduce__(self):
        # mappingproxy cannot be pickled; rebuild from a plain dict
        return (
            self.__class__,
            (self.id, self.case_id, self.activity, self.timestamp,
             self.actor_id, dict(self.attributes)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "case_id": self.case_id,
            "activity": self.activity,
            "timestamp": self.timestamp.isoformat(),
            "actor_id": self.actor_id,
            "attributes": {
                key: _tag_attribute(value)
                for key, value in self.attributes.items()
            },
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Event":
        """
        Create an event from its dictionary representation.

        Attribute values may be plain JSON scalars or tagged
        ``{"kind": ..., "value": ...}`` objects as written by ``to_dict``.
        """
        attributes = {}
        for key, raw in (d.get("attributes") or {}).items():
            if isinstance(raw, dict) and "kind" in raw:
                try:
                    kind = AttributeKind(raw["kind"])
                except ValueError as exc:
                    raise InvalidEventError(
                        f"Unknown attribute kind {raw['kind']!r} for {key!r}"
                    ) from exc
                attributes[key] = kind.decode(raw.get("value"))
            else:
                attributes[key] = raw

        return cls(
            id=str(d.get("id", "")),
            case_id=d.get("case_id"),
            activity=d.get("activity"),
            timestamp=parse_timestamp(d.get("timestamp")),
            actor_id=d.get("actor_id") or UNKNOWN_ACTOR,
            attributes=attributes,
        )


@dataclass(frozen=True)
class EventLogMetadata:
    """Cardinalities and time range derived from an event log."""
    name: str
    case_count: int
    activity_count: int
    actor_count: int
    start: Optional[datetime]
    end: Optional[datetime]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "case_count": self.case_count,
            "activity_count": self.activity_count,
            "actor_count": self.actor_count,
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
        }


class EventLog:
    """
    A timestamp-ordered, immutable collection of events.

    Events are sorted by timestamp on construction. The sort is stable,
    so events sharing a timestamp keep the order they were given in.
    Metadata is always derived from the events and cannot be set.
    """

    def __init__(self, events: Iterable[Event], name: str = ""):
        """
        Initialize an event log.

        Args:
            events: The events, in any order
            name: Human-readable name of the log

        Raises:
            InvalidEventError: If an item is not an Event, or the log mixes
                timezone-aware and naive timestamps
        """
        events = list(events)
        for index, event in enumerate(events):
            if not isinstance(event, Event):
                raise InvalidEventError(
                    f"Item {index} is a {type(event).__name__}, not an Event"
                )

        if len({event.timestamp.tzinfo is None for event in events}) > 1:
            raise InvalidEventError(
                "Event log mixes timezone-aware and naive timestamps"
            )

        self.name = name
        self._events: Tuple[Event, ...] = tuple(
            sorted(events, key=lambda e: e.timestamp)
        )
        self._metadata: Optional[EventLogMetadata] = None

    @property
    def events(self) -> Tuple[Event, ...]:
        """Get all events, sorted by timestamp."""
        return self._events

    @property
    def metadata(self) -> EventLogMetadata:
        """Get metadata derived from the events."""
        if self._metadata is None:
            self._metadata = EventLogMetadata(
                name=self.name,
                case_count=len({e.case_id for e in self._events}),
                activity_count=len({e.activity for e in self._events}),
                actor_count=len({e.actor_id for e in self._events}),
                start=self._events[0].timestamp if self._events else None,
                end=self._events[-1].timestamp if self._events else None,
            )
        return self._metadata

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self):
        return iter(self._events)

    def __bool__(self) -> bool:
        return bool(self._events)

    def events_for_actor(self, actor_id: str) -> List[Event]:
        """Get the events executed by one actor, in log order."""
        return [e for e in self._events if e.actor_id == actor_id]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "name": self.name,
            "metadata": self.metadata.to_dict(),
            "events": [e.to_dict() for e in self._events],
        }
