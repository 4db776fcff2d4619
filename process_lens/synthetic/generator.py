"""
Synthetic Event Log Generator

Generates a realistic event log for a loan application process:
- Most cases follow the ideal path exactly
- A configurable share of cases skips a step, swaps two adjacent steps,
  or repeats a step
- One fixed approver executes every approval; other activities keep one
  actor per activity within a case
- Activity durations vary around per-activity means

The same seed always produces the same log.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

import numpy as np
from faker import Faker

from ..log.models import Event, EventLog
from .config import GeneratorConfig

logger = logging.getLogger(__name__)


class EventLogGenerator:
    """Generates seeded synthetic event logs."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        if self.config.num_actors < 1:
            raise ValueError("num_actors must be at least 1")
        if len(self.config.activities) < 4:
            raise ValueError("The synthetic process needs at least 4 activities")

        self.start_date = datetime.strptime(self.config.start_date, "%Y-%m-%d")
        self.end_date = datetime.strptime(self.config.end_date, "%Y-%m-%d")

        # Initialize random generators with seed for reproducibility
        self.rng = np.random.default_rng(self.config.seed)
        self.faker = Faker()
        self.faker.seed_instance(self.config.seed)

        self.durations = {a.name: a.avg_duration for a in self.config.activities}
        self.actors = self._generate_actors()
        self.approver = self.actors[0]

        # Statistics tracking
        self.stats = {
            "cases": 0,
            "events": 0,
            "skip": 0,
            "reorder": 0,
            "loop": 0,
        }

    def _generate_actors(self) -> List[str]:
        """Generate distinct actor names."""
        names: List[str] = []
        while len(names) < self.config.num_actors:
            name = self.faker.name()
            if name not in names:
                names.append(name)
        return names

    def _randint(self, low: int, high: int) -> int:
        """Random integer in [low, high]."""
        return int(self.rng.integers(low, high + 1))

    def _weighted_choice(self, options: Dict[str, float]) -> str:
        """Select from weighted options."""
        choices = list(options.keys())
        weights = np.array(list(options.values()), dtype=float)
        return str(self.rng.choice(choices, p=weights / weights.sum()))

    def _case_start(self) -> datetime:
        """Random case start within the configured range."""
        latest = self.end_date - timedelta(days=self.config.case_window_days)
        span = max((latest - self.start_date).total_seconds(), 0.0)
        return self.start_date + timedelta(seconds=float(self.rng.random()) * span)

    def _case_path(self) -> List[str]:
        """Draw the activity sequence of one case."""
        path = list(self.config.ideal_path)

        if self.rng.random() >= self.config.deviation_rate:
            return path
        if self.rng.random() < self.config.deviation_revert_rate:
            return path

        kind = self._weighted_choice(self.config.deviation_types)
        self.stats[kind] += 1

        if kind == "skip":
            del path[self._randint(1, len(path) - 2)]
        elif kind == "reorder":
            i = self._randint(1, len(path) - 3)
            path[i], path[i + 1] = path[i + 1], path[i]
        else:
            i = self._randint(1, len(path) - 2)
            path.insert(i + 1, path[i])

        return path

    def generate_case(self, case_id: str, start: datetime) -> List[Event]:
        """
        Generate the events of one case.

        Args:
            case_id: Case identifier
            start: Timestamp of the first event

        Returns:
            The case's events in execution order
        """
        path = self._case_path()
        assigned: Dict[str, str] = {}
        current = start
        events = []

        for index, activity in enumerate(path):
            if activity == self.config.approval_activity:
                actor = self.approver
            elif activity in assigned:
                actor = assigned[activity]
            else:
                actor = str(self.rng.choice(self.actors))
                assigned[activity] = actor

            spread = self.config.duration_variance
            factor = 1.0 - spread + float(self.rng.random()) * 2 * spread
            current = current + timedelta(seconds=self.durations[activity] * factor)

            events.append(Event(
                id=f"{case_id}-{index + 1:02d}",
                case_id=case_id,
                activity=activity,
                timestamp=current,
                actor_id=actor,
                attributes={
                    "activity_index": index,
                    "path_length": len(path),
                },
            ))

        return events

    def generate(self) -> EventLog:
        """
        Generate the full event log.

        Returns:
            EventLog with ``num_cases`` cases
        """
        events: List[Event] = []
        for i in range(self.config.num_cases):
            case_id = f"CASE-{i + 1:04d}"
            events.extend(self.generate_case(case_id, self._case_start()))

        self.stats["cases"] = self.config.num_cases
        self.stats["events"] = len(events)
        logger.info(
            f"Generated {self.stats['events']} events for {self.stats['cases']} cases"
        )
        return EventLog(events, name=self.config.log_name)


def generate_event_log(num_cases: int = 500, seed: int = 42) -> EventLog:
    """
    Convenience function to generate a synthetic event log.

    Args:
        num_cases: Number of cases to generate
        seed: Random seed

    Returns:
        The generated EventLog
    """
    return EventLogGenerator(GeneratorConfig(seed=seed, num_cases=num_cases)).generate()
