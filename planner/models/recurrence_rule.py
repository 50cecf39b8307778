"""Recurrence pattern model embedded in recurring tasks and events."""
from datetime import date
from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import AliasChoices, Field, field_validator

from planner.models.base import CamelModel
from planner.utils.dates import to_calendar_day

FREQUENCY_DAILY = "daily"
FREQUENCY_WEEKLY = "weekly"
FREQUENCY_MONTHLY = "monthly"
FREQUENCY_YEARLY = "yearly"
FREQUENCIES = (FREQUENCY_DAILY, FREQUENCY_WEEKLY, FREQUENCY_MONTHLY, FREQUENCY_YEARLY)

END_NEVER = "never"
END_DATE = "date"
END_OCCURRENCES = "occurrences"
END_TYPES = (END_NEVER, END_DATE, END_OCCURRENCES)


class EndCondition(CamelModel):
    """How a recurring series terminates."""

    type: str = Field(default=END_NEVER)  # never, date, occurrences
    end_date: Optional[date] = None  # Last day allowed for type=date
    max_occurrences: Optional[int] = None  # Occurrence budget for type=occurrences

    @field_validator("end_date", mode="before")
    @classmethod
    def _normalize_end_date(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return to_calendar_day(value) or value


class InstanceModification(CamelModel):
    """Overrides for a single occurrence, stored on the pattern under that occurrence's day."""

    status: Optional[str] = None  # "delete" hides the occurrence
    title: Optional[str] = None
    description: Optional[str] = None

    def overrides(self) -> Dict[str, Any]:
        """Fields to apply; empty values leave the inherited field alone."""
        return {name: value for name, value in self.model_dump().items() if value}


class RecurrencePattern(CamelModel):
    """
    Rule describing a repeating series.

    Qualifier fields are meaningful only for the matching frequency:
    days_of_week for weekly, day_of_month for monthly, month_of_year for yearly.
    Frequency is kept as a plain string so a corrupt value still parses and simply
    never matches.
    """

    frequency: str = Field(validation_alias=AliasChoices("frequency", "type"))  # daily, weekly, monthly, yearly
    interval: int = Field(default=1)  # Repeat every N units of the frequency
    days_of_week: List[int] = Field(default_factory=list)  # 0-6 for Sunday-Saturday
    day_of_month: Optional[int] = None  # 1-31
    month_of_year: Optional[int] = None  # 1-12
    end_condition: EndCondition = Field(default_factory=EndCondition)
    exceptions: List[date] = Field(default_factory=list)  # Days skipped even if the rule matches
    instance_modifications: Dict[date, InstanceModification] = Field(default_factory=dict)

    @field_validator("frequency", mode="before")
    @classmethod
    def _normalize_frequency(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("days_of_week", mode="before")
    @classmethod
    def _default_days_of_week(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("end_condition", mode="before")
    @classmethod
    def _default_end_condition(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("exceptions", mode="before")
    @classmethod
    def _normalize_exceptions(cls, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, (list, tuple, set, frozenset)):
            return value
        days = [to_calendar_day(item) for item in value]
        return [day for day in days if day is not None]

    @field_validator("instance_modifications", mode="before")
    @classmethod
    def _normalize_modification_days(cls, value: Any) -> Any:
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value
        normalized = {}
        for key, modification in value.items():
            day = to_calendar_day(key)
            if day is not None:
                normalized[day] = modification
        return normalized

    def exception_days(self) -> FrozenSet[date]:
        """Exception dates as a set for membership checks."""
        return frozenset(self.exceptions)

    def modification_for(self, day: date) -> Dict[str, Any]:
        """Stored overrides for the occurrence on day, or an empty dict."""
        modification = self.instance_modifications.get(day)
        return modification.overrides() if modification is not None else {}
