"""Seeded synthetic event logs for demos and tests."""

from .config import ActivitySpec, GeneratorConfig
from .generator import EventLogGenerator, generate_event_log

__all__ = [
    "ActivitySpec",
    "EventLogGenerator",
    "GeneratorConfig",
    "generate_event_log",
]
