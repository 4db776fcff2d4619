"""
Loader for normalized event records.

Builds an EventLog from records that already follow the normalized event
schema (one JSON object per event). Format-specific parsing (XES, CSV) is
the job of upstream tools; this loader only maps a few common field name
aliases and validates every record.

Unlike format parsers, the loader does not skip bad records: the first
malformed record raises InvalidEventError naming its index and field.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from ..exceptions import InvalidEventError
from ..log.models import Event, EventLog

logger = logging.getLogger(__name__)


class EventLogLoader:
    """Loads normalized event records into an EventLog."""

    # Field name mappings: normalized name -> accepted record keys
    FIELD_MAPPINGS = {
        'id': ['id', 'event_id'],
        'case_id': ['case_id', 'case', 'case:concept:name'],
        'activity': ['activity', 'concept:name', 'activity_name'],
        'timestamp': ['timestamp', 'time:timestamp', 'time'],
        'actor_id': ['actor_id', 'user_id', 'org:resource', 'resource', 'user'],
        'attributes': ['attributes'],
    }

    REQUIRED_FIELDS = ['case_id', 'activity', 'timestamp']

    def __init__(self):
        """Initialize the loader."""
        self.stats: Dict[str, int] = {}

    def _normalize_field(self, record: Dict[str, Any], normalized_name: str) -> Any:
        """Get a field value by trying each accepted key."""
        for name in self.FIELD_MAPPINGS.get(normalized_name, [normalized_name]):
            if name in record:
                return record[name]
        return None

    def _normalize_record(self, record: Dict[str, Any], index: int) -> Dict[str, Any]:
        """Map a raw record onto the normalized event field names."""
        if not isinstance(record, dict):
            raise InvalidEventError(
                f"Record {index}: expected an object, got {type(record).__name__}"
            )

        normalized = {
            name: self._normalize_field(record, name)
            for name in self.FIELD_MAPPINGS
        }

        missing = [name for name in self.REQUIRED_FIELDS if normalized[name] in (None, "")]
        if missing:
            raise InvalidEventError(
                f"Record {index}: missing required field(s) {', '.join(missing)}"
            )

        # Numeric identifiers are common in exported logs
        for key in ('id', 'case_id', 'actor_id'):
            value = normalized[key]
            if isinstance(value, int) and not isinstance(value, bool):
                normalized[key] = str(value)

        if normalized['id'] in (None, ""):
            normalized['id'] = f"evt-{index}"

        return normalized

    def from_records(
        self,
        records: Iterable[Dict[str, Any]],
        name: str = ""
    ) -> EventLog:
        """
        Build an event log from normalized records.

        Args:
            records: Event records
            name: Name of the resulting log

        Returns:
            EventLog sorted by timestamp

        Raises:
            InvalidEventError: On the first malformed record
        """
        events: List[Event] = []
        for index, record in enumerate(records):
            normalized = self._normalize_record(record, index)
            try:
                events.append(Event.from_dict(normalized))
            except InvalidEventError as exc:
                raise InvalidEventError(f"Record {index}: {exc}") from exc

        event_log = EventLog(events, name=name)

        self.stats = {
            'events': len(event_log),
            'cases': event_log.metadata.case_count,
            'activities': event_log.metadata.activity_count,
            'actors': event_log.metadata.actor_count,
        }
        logger.info(
            f"Loaded {self.stats['events']} events across {self.stats['cases']} cases"
        )
        return event_log

    def load_json(self, path: Union[str, Path], name: Optional[str] = None) -> EventLog:
        """
        Load an event log from a JSON file.

        The file holds either a list of event records or an object with
        an ``events`` list and an optional ``name``.

        Args:
            path: Path to the JSON file
            name: Log name; defaults to the file's name entry or stem

        Returns:
            EventLog sorted by timestamp

        Raises:
            InvalidEventError: If the file is not valid JSON or a record is
                malformed
        """
        path = Path(path)
        with open(path, 'r', encoding='utf-8') as f:
            try:
                data = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise InvalidEventError(f"{path}: not a readable JSON file ({exc})") from exc

        if isinstance(data, dict):
            records = data.get('events')
            log_name = name or data.get('name') or path.stem
        else:
            records = data
            log_name = name or path.stem

        if not isinstance(records, list):
            raise InvalidEventError(f"{path}: expected a list of event records")

        return self.from_records(records, name=log_name)


def load_event_log(path: Union[str, Path]) -> EventLog:
    """
    Convenience function to load an event log from a JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        EventLog sorted by timestamp
    """
    return EventLogLoader().load_json(path)
