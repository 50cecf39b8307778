"""Shared fixtures for planner recurrence tests."""
from datetime import date, datetime

import pytest

from planner.models import EndCondition, Event, RecurrencePattern, Task, TaskPriority


def build_pattern(frequency="daily", **fields):
    return RecurrencePattern(frequency=frequency, **fields)


@pytest.fixture
def pattern():
    """Factory for recurrence patterns: pattern("weekly", days_of_week=[2])."""
    return build_pattern


@pytest.fixture
def make_task():
    """Factory for tasks; pass recurrence= to build a recurring parent."""

    def _make(task_id="task-1", letter="B", number=1, scheduled=date(2026, 2, 1), **fields):
        return Task(
            id=task_id,
            title=fields.pop("title", f"Task {task_id}"),
            priority=TaskPriority(letter=letter, number=number),
            scheduled_date=scheduled,
            **fields,
        )

    return _make


@pytest.fixture
def make_event():
    """Factory for events starting at the given datetime."""

    def _make(event_id="event-1", start=datetime(2026, 2, 1, 9, 0), end=datetime(2026, 2, 1, 10, 30), **fields):
        return Event(
            id=event_id,
            title=fields.pop("title", f"Event {event_id}"),
            start_time=start,
            end_time=end,
            **fields,
        )

    return _make


@pytest.fixture
def daily_parent(make_task, pattern):
    """Daily recurring task starting 2026-02-01 (a Sunday)."""
    return make_task("recurring-1", letter="A", number=1, recurrence=pattern("daily"))


@pytest.fixture
def end_after():
    def _end(count):
        return EndCondition(type="occurrences", max_occurrences=count)

    return _end
