"""Loading of normalized event records into an EventLog."""

from .loader import EventLogLoader, load_event_log

__all__ = ["EventLogLoader", "load_event_log"]
