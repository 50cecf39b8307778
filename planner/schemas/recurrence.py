"""Request schemas for the recurrence HTTP surface."""
from typing import Any, Dict, List

from pydantic import Field

from planner.models.base import CamelModel
from planner.models.event import Event
from planner.models.recurrence_rule import InstanceModification, RecurrencePattern
from planner.models.task import Task


class OccursRequest(CamelModel):
    """Schema for asking whether a pattern occurs on a day."""
    pattern: RecurrencePattern
    start_date: str  # YYYY-MM-DD anchor day
    date: str  # YYYY-MM-DD candidate day


class NextOccurrenceRequest(CamelModel):
    """Schema for finding the next occurrence after a day."""
    pattern: RecurrencePattern
    start_date: str
    after: str
    horizon_days: int | None = Field(default=None, ge=1)


class TaskReconcileRequest(CamelModel):
    """Schema for reconciling one day of tasks."""
    date: str  # Kept as text: an unreadable day yields an empty result, not a 422
    persisted: List[Task] = Field(default_factory=list)
    parents: List[Task] = Field(default_factory=list)


class EventReconcileRequest(CamelModel):
    """Schema for reconciling one day of events."""
    date: str
    persisted: List[Event] = Field(default_factory=list)
    parents: List[Event] = Field(default_factory=list)


class MaterializeTaskRequest(CamelModel):
    """Schema for materializing one occurrence of a recurring task."""
    date: str
    parent: Task
    persisted: List[Task] = Field(default_factory=list)
    updates: Dict[str, Any] = Field(default_factory=dict)


class SeriesEditRequest(CamelModel):
    """Schema for skipping an occurrence or ending a task series at a day."""
    date: str
    parent: Task


class InstanceModificationRequest(CamelModel):
    """Schema for overriding fields of one occurrence without materializing it."""
    date: str
    parent: Task
    modification: InstanceModification
