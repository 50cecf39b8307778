"""Base document shape shared by tasks and events."""
from datetime import date
from typing import Any, Dict, Optional, Tuple

from pydantic import Field, field_validator

from planner.models.base import CamelModel
from planner.models.recurrence_rule import RecurrencePattern
from planner.utils.dates import to_calendar_day


class PlannerRecord(CamelModel):
    """
    A persisted planner document.

    A record is one of three things:
    - a regular record (no recurrence, not an instance)
    - a recurring parent (recurrence set, anchored at its start date)
    - a recurring instance (materialized or virtual) pointing at its parent

    Domain fields this model does not declare are kept as extras so they pass
    through reconciliation untouched.
    """

    id: str = Field(min_length=1)
    title: str = Field(default="")
    description: str = Field(default="")
    category_id: Optional[str] = None
    recurrence: Optional[RecurrencePattern] = None

    is_recurring_instance: bool = Field(default=False)
    recurring_parent_id: Optional[str] = None
    instance_date: Optional[date] = None  # Day of the parent's series this instance stands for

    class Config:
        extra = "allow"

    @field_validator("instance_date", mode="before")
    @classmethod
    def _normalize_instance_date(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return to_calendar_day(value) or value

    @property
    def is_recurring_parent(self) -> bool:
        return self.recurrence is not None and not self.is_recurring_instance

    def anchor_date(self) -> Optional[date]:
        """Calendar day the recurrence pattern is computed from."""
        raise NotImplementedError

    def rebased_fields(self, day: date) -> Dict[str, Any]:
        """Field updates that move this record's date-bearing fields onto day."""
        raise NotImplementedError

    def modification_fields(self, day: date) -> Dict[str, Any]:
        """This series' stored overrides for day, limited to fields the record declares."""
        if self.recurrence is None:
            return {}
        fields = type(self).model_fields
        return {name: value for name, value in self.recurrence.modification_for(day).items() if name in fields}

    def instance_key(self) -> Optional[Tuple[str, date]]:
        """(parent id, instance date) for recurring instances, else None."""
        if not self.is_recurring_instance or not self.recurring_parent_id or self.instance_date is None:
            return None
        return self.recurring_parent_id, self.instance_date
