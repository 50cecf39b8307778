"""Event model for time-blocked calendar entries."""
from datetime import date, datetime
from typing import Any, Dict, Optional

from pydantic import Field

from planner.models.record import PlannerRecord


class Event(PlannerRecord):
    """Calendar event with start/end times; ordered by start time, never by a manual key."""

    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: str = Field(default="")
    is_confidential: bool = Field(default=False)

    def anchor_date(self) -> Optional[date]:
        return self.start_time.date() if self.start_time else None

    def rebased_fields(self, day: date) -> Dict[str, Any]:
        """Move start/end onto day, keeping time of day and duration."""
        if self.start_time is None:
            return {}
        start = datetime.combine(day, self.start_time.timetz())
        fields = {"start_time": start}
        if self.end_time is not None:
            fields["end_time"] = start + (self.end_time - self.start_time)
        return fields
