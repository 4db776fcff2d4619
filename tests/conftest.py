"""
Pytest configuration and fixtures for process lens tests.
"""

import pytest
from datetime import datetime, timedelta

from process_lens.log import Event, EventLog


BASE_TIME = datetime(2024, 1, 1, 9, 0, 0)


def build_log(cases, name="test log", step=timedelta(hours=1), case_offset=timedelta(days=1)):
    """
    Build an event log from a {case_id: [activity or (activity, actor), ...]} mapping.

    Events within a case are ``step`` apart; each case starts
    ``case_offset`` after the previous one.
    """
    events = []
    for case_index, (case_id, steps) in enumerate(cases.items()):
        start = BASE_TIME + case_index * case_offset
        for index, step_spec in enumerate(steps):
            if isinstance(step_spec, tuple):
                activity, actor = step_spec
            else:
                activity, actor = step_spec, "alice"
            events.append(Event(
                id=f"{case_id}-{index}",
                case_id=case_id,
                activity=activity,
                timestamp=start + index * step,
                actor_id=actor,
            ))
    return EventLog(events, name=name)


@pytest.fixture
def make_log():
    """Factory fixture building event logs from activity sequences."""
    return build_log


@pytest.fixture
def skip_log():
    """Two ideal cases and one that skips B."""
    return build_log({
        "c1": ["A", "B", "C"],
        "c2": ["A", "B", "C"],
        "c3": ["A", "C"],
    })


@pytest.fixture
def insert_log():
    """Two ideal cases and one with an extra X before C."""
    return build_log({
        "c1": ["A", "B", "C"],
        "c2": ["A", "B", "C"],
        "c3": ["A", "B", "X", "C"],
    })


@pytest.fixture
def team_log():
    """Six ideal Receive-Check-Assess-Approve-Close cases plus three of dan's deviating ones."""
    cases = {}
    for i in range(6):
        cases[f"ok-{i}"] = [
            ("Receive", "ann"),
            ("Check", "ben"),
            ("Assess", "ben"),
            ("Approve", "cara"),
            ("Close", "ann"),
        ]
    # dan skips and reorders
    cases["bad-1"] = [("Receive", "dan"), ("Assess", "dan"), ("Check", "dan"), ("Close", "dan")]
    cases["bad-2"] = [("Receive", "dan"), ("Approve", "dan"), ("Close", "dan")]
    cases["bad-3"] = [("Receive", "dan"), ("Extra", "dan"), ("Check", "dan"), ("Close", "dan")]
    return build_log(cases)


@pytest.fixture
def sample_records():
    """Normalized event records as they appear in a JSON export."""
    return [
        {
            "id": "e1",
            "case_id": "L-1",
            "activity": "Application Received",
            "timestamp": "2024-01-02T09:00:00",
            "actor_id": "ann",
            "attributes": {"amount": 1200.5, "channel": "web"},
        },
        {
            "id": "e2",
            "case_id": "L-1",
            "activity": "Document Check",
            "timestamp": "2024-01-02T11:00:00",
            "actor_id": "ben",
        },
        {
            "case:concept:name": "L-2",
            "concept:name": "Application Received",
            "time:timestamp": "2024-01-01T08:30:00",
            "org:resource": "ann",
        },
    ]
