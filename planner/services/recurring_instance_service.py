"""
Recurring Instance Service.

Edits that touch a single occurrence or the tail of a series. Every operation
returns new records and patterns; writing them back is left to the caller.
"""

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from planner import config
from planner.models.record import PlannerRecord
from planner.models.recurrence_rule import END_DATE, EndCondition, InstanceModification, RecurrencePattern
from planner.models.task import Task, TaskPriority
from planner.services.instance_reconciler import build_virtual_instance
from planner.services.occurrence_evaluator import next_occurrence, occurs
from planner.services.ordering import next_priority_number
from planner.utils.dates import format_day, to_calendar_day
from planner.utils.logger import get_logger

logger = get_logger(__name__)

# Fields an edit may never override on a materialized instance
INSTANCE_MARKER_FIELDS = ("id", "recurrence", "is_recurring_instance", "recurring_parent_id", "instance_date")


class RecurrenceError(ValueError):
    """Raised when an explicit recurring-series edit cannot be applied."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


def add_exception(pattern: RecurrencePattern, day: date) -> RecurrencePattern:
    """Return a copy of pattern with day added to its exceptions (at most once)."""
    if day in pattern.exception_days():
        return pattern.model_copy(deep=True)
    return pattern.model_copy(update={"exceptions": list(pattern.exceptions) + [day]}, deep=True)


def dedupe_exceptions(pattern: RecurrencePattern) -> RecurrencePattern:
    """Return a copy of pattern with duplicate exception days removed, first occurrence kept."""
    seen = set()
    unique: List[date] = []
    for day in pattern.exceptions:
        if day not in seen:
            seen.add(day)
            unique.append(day)
    return pattern.model_copy(update={"exceptions": unique}, deep=True)


def set_instance_modification(pattern: RecurrencePattern, day: date, changes: Dict[str, Any]) -> RecurrencePattern:
    """Return a copy of pattern with changes merged into the overrides stored for day."""
    modifications = dict(pattern.instance_modifications)
    current = modifications.get(day) or InstanceModification()
    modifications[day] = current.model_copy(update=changes)
    return pattern.model_copy(update={"instance_modifications": modifications}, deep=True)


def _field_name(model: PlannerRecord, key: str) -> str:
    """Map a camelCase document key onto the model's field name; extras pass through."""
    for name, field in type(model).model_fields.items():
        if key == name or key == field.alias:
            return name
    return key


class RecurringInstanceService:
    """Service for single-occurrence and future-occurrence edits of a recurring series."""

    def __init__(self, search_horizon_days: Optional[int] = None):
        """Initialize the service."""
        self.search_horizon_days = search_horizon_days or config.RECURRENCE_SEARCH_HORIZON_DAYS

    def _require_occurrence(self, parent: PlannerRecord, day: Any) -> Tuple[date, date]:
        """Validate that parent is a recurring series with an occurrence on day; return (day, anchor)."""
        target = to_calendar_day(day)
        if target is None:
            raise RecurrenceError("INVALID_DATE", f"Invalid instance date: {day}")
        if parent.recurrence is None:
            raise RecurrenceError("NOT_RECURRING", f"Record {parent.id} is not a recurring parent")
        anchor = parent.anchor_date()
        if anchor is None:
            raise RecurrenceError("MISSING_START_DATE", f"Recurring parent {parent.id} has no start date")
        if not occurs(parent.recurrence, anchor, target):
            raise RecurrenceError(
                "NO_OCCURRENCE",
                f"Recurring parent {parent.id} has no occurrence on {format_day(target)}",
                {"parent_id": parent.id, "date": format_day(target)},
            )
        return target, anchor

    def materialize_instance(
        self,
        parent: PlannerRecord,
        day: Any,
        persisted_for_date: Optional[Iterable[PlannerRecord]] = None,
        updates: Optional[Dict[str, Any]] = None,
    ) -> Tuple[PlannerRecord, PlannerRecord]:
        """
        Turn one occurrence into a record that can be persisted.

        Args:
            parent: Recurring parent record
            day: Day of the occurrence
            persisted_for_date: Records already stored for that day (for task numbering)
            updates: Field overrides for this occurrence only (snake_case or camelCase keys)

        Returns:
            (materialized instance, parent with day added to its exceptions)

        Raises:
            RecurrenceError: If parent is not recurring or has no occurrence on day
        """
        target, _ = self._require_occurrence(parent, day)
        persisted = list(persisted_for_date or [])

        data = build_virtual_instance(parent, target).model_dump()
        overrides = {_field_name(parent, key): value for key, value in (updates or {}).items()}
        for name in INSTANCE_MARKER_FIELDS:
            overrides.pop(name, None)
        data.update(overrides)

        if isinstance(parent, Task):
            data["priority"] = self._instance_priority(parent, overrides.get("priority"), persisted)

        instance = type(parent).model_validate(data)
        updated_parent = parent.model_copy(
            update={"recurrence": add_exception(parent.recurrence, target)}, deep=True
        )

        logger.info(
            "Materialized recurring instance",
            parent_id=parent.id,
            instance_id=instance.id,
            date=format_day(target),
        )
        return instance, updated_parent

    @staticmethod
    def _instance_priority(parent: Task, override: Any, persisted: List[PlannerRecord]) -> TaskPriority:
        """Keep an explicit number; otherwise take the next free number for the letter on that day."""
        if isinstance(override, TaskPriority):
            override = override.model_dump()
        override = override or {}
        letter = override.get("letter") or parent.priority.letter
        number = override.get("number")
        if not number:
            number = next_priority_number(persisted, letter)
        return TaskPriority(letter=letter, number=number)

    def skip_instance(self, parent: PlannerRecord, day: Any) -> PlannerRecord:
        """
        Delete a single occurrence by adding it to the parent's exceptions.

        Skipping the anchor occurrence also moves the anchor to the next
        occurrence, when there is one.

        Raises:
            RecurrenceError: If parent is not recurring or has no occurrence on day
        """
        target, anchor = self._require_occurrence(parent, day)
        update: Dict[str, Any] = {"recurrence": add_exception(parent.recurrence, target)}

        if target == anchor:
            following = next_occurrence(parent.recurrence, anchor, target, self.search_horizon_days)
            if following is not None:
                update.update(parent.rebased_fields(following))

        logger.info("Skipped recurring instance", parent_id=parent.id, date=format_day(target))
        return parent.model_copy(update=update, deep=True)

    def end_series_before(self, parent: PlannerRecord, day: Any) -> PlannerRecord:
        """
        Delete an occurrence and everything after it by ending the series the day before.

        Raises:
            RecurrenceError: If parent is not recurring or day is unreadable
        """
        target = to_calendar_day(day)
        if target is None or target == date.min:
            raise RecurrenceError("INVALID_DATE", f"Invalid instance date: {day}")
        if parent.recurrence is None:
            raise RecurrenceError("NOT_RECURRING", f"Record {parent.id} is not a recurring parent")

        end_condition = EndCondition(type=END_DATE, end_date=target - timedelta(days=1))
        pattern = parent.recurrence.model_copy(update={"end_condition": end_condition}, deep=True)

        logger.info("Ended recurring series", parent_id=parent.id, last_date=format_day(end_condition.end_date))
        return parent.model_copy(update={"recurrence": pattern}, deep=True)

    def modify_instance(
        self,
        parent: PlannerRecord,
        day: Any,
        status: Optional[str] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PlannerRecord:
        """
        Store overrides for one occurrence on the parent's pattern without materializing it.

        Empty values keep whatever was stored for the day before. A status of
        "delete" hides the occurrence from the day's task list.

        Raises:
            RecurrenceError: If parent is not recurring or has no occurrence on day
        """
        target, _ = self._require_occurrence(parent, day)
        changes = InstanceModification(status=status, title=title, description=description).overrides()
        pattern = set_instance_modification(parent.recurrence, target, changes)

        logger.info(
            "Modified recurring instance",
            parent_id=parent.id,
            date=format_day(target),
            fields=sorted(changes),
        )
        return parent.model_copy(update={"recurrence": pattern}, deep=True)
