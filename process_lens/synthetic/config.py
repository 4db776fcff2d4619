"""
Configuration settings for the synthetic event log generator.

The defaults describe a loan application process with a single dominant
path and a configurable share of deviating cases.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

HOUR = 3600.0


@dataclass
class ActivitySpec:
    """An activity of the synthetic process and its mean duration in seconds."""
    name: str
    avg_duration: float


@dataclass
class GeneratorConfig:
    """Main configuration for the synthetic event log generator."""

    # Random seed for reproducibility
    seed: int = 42

    # Output counts
    num_cases: int = 500
    num_actors: int = 20

    # Case start dates are drawn from [start_date, end_date - case_window_days]
    start_date: str = "2024-01-01"
    end_date: str = "2024-02-15"
    case_window_days: int = 7

    log_name: str = "Loan Application Process"

    # Activities in ideal order
    activities: List[ActivitySpec] = field(default_factory=lambda: [
        ActivitySpec("Application Received", 0.0),
        ActivitySpec("Document Check", 2 * HOUR),
        ActivitySpec("Credit Score Lookup", 0.5 * HOUR),
        ActivitySpec("Risk Assessment", 4 * HOUR),
        ActivitySpec("Manager Approval", 24 * HOUR),
        ActivitySpec("Final Decision", 1 * HOUR),
        ActivitySpec("Contract Generation", 2 * HOUR),
        ActivitySpec("Disbursement", 48 * HOUR),
    ])

    # Activity always executed by the same actor (the approver)
    approval_activity: str = "Manager Approval"

    # Share of cases that draw a deviation
    deviation_rate: float = 0.15

    # Share of drawn deviations that still follow the ideal path
    deviation_revert_rate: float = 0.25

    # Relative weights of deviation kinds
    deviation_types: Dict[str, float] = field(default_factory=lambda: {
        "skip": 0.5,     # Drop one intermediate step
        "reorder": 0.3,  # Swap two adjacent intermediate steps
        "loop": 0.2,     # Repeat one intermediate step
    })

    # Duration variance around each activity mean (+-30%)
    duration_variance: float = 0.3

    @property
    def ideal_path(self) -> List[str]:
        return [a.name for a in self.activities]
