"""Task model for the daily planner."""
from datetime import date
from typing import Any, Dict, Optional

from pydantic import Field, field_validator

from planner.models.base import CamelModel
from planner.models.record import PlannerRecord
from planner.utils.dates import to_calendar_day

PRIORITY_LETTERS = ("A", "B", "C", "D")
STATUS_DELETE = "delete"  # Soft-deleted; never shown on a day


class TaskPriority(CamelModel):
    """Manual ordering key: letter class plus sequence number within the class (A1, A2, B1...)."""

    letter: str = Field(pattern=r"^[A-D]$")  # A vital, B important, C optional, D delegate
    number: int = Field(default=0, ge=0)  # 0 means not yet numbered


class Task(PlannerRecord):
    """Task entity scheduled on a calendar day and ordered by priority."""

    priority: TaskPriority
    status: str = Field(default="in_progress")  # in_progress, forward, complete, cancelled, delegate, delete
    scheduled_date: Optional[date] = None  # Anchor day for recurring parents
    start_time: Optional[str] = None  # 24h "HH:MM", optional calendar slot
    end_time: Optional[str] = None
    duration: Optional[int] = None  # Minutes

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def _normalize_scheduled_date(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return to_calendar_day(value) or value

    def anchor_date(self) -> Optional[date]:
        return self.scheduled_date

    def rebased_fields(self, day: date) -> Dict[str, Any]:
        return {"scheduled_date": day}
