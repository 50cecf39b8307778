"""Recurrence Validator."""
from typing import Any, Dict

from pydantic import ValidationError

from planner.models.record import PlannerRecord
from planner.models.recurrence_rule import (
    END_DATE,
    END_OCCURRENCES,
    END_TYPES,
    FREQUENCIES,
    FREQUENCY_MONTHLY,
    FREQUENCY_WEEKLY,
    FREQUENCY_YEARLY,
    RecurrencePattern,
)


def _new_result() -> Dict[str, Any]:
    return {
        "valid": True,
        "errors": [],
        "warnings": []
    }


def _fail(result: Dict[str, Any], message: str) -> None:
    result["valid"] = False
    result["errors"].append(message)


class RecurrenceValidator:
    """Validate recurrence patterns before they are written to a parent record."""

    @staticmethod
    def validate_recurrence_pattern(pattern: Any) -> Dict[str, Any]:
        """
        Validate a recurrence pattern.

        Args:
            pattern: RecurrencePattern or its raw document form

        Returns:
            Dict with validation result
        """
        result = _new_result()

        if not isinstance(pattern, RecurrencePattern):
            try:
                pattern = RecurrencePattern.model_validate(pattern)
            except ValidationError as e:
                for error in e.errors():
                    location = ".".join(str(part) for part in error["loc"])
                    _fail(result, f"{location}: {error['msg']}" if location else error["msg"])
                return result

        if pattern.frequency not in FREQUENCIES:
            _fail(result, f"Frequency must be one of: {', '.join(FREQUENCIES)}, got: {pattern.frequency}")
            return result

        if pattern.interval < 1:
            _fail(result, f"Interval must be at least 1, got {pattern.interval}")

        for day in pattern.days_of_week:
            if not 0 <= day <= 6:
                _fail(result, f"Day of week must be 0 (Sunday) to 6 (Saturday), got {day}")

        if pattern.day_of_month is not None and not 1 <= pattern.day_of_month <= 31:
            _fail(result, f"Day of month must be 1-31, got {pattern.day_of_month}")

        if pattern.month_of_year is not None and not 1 <= pattern.month_of_year <= 12:
            _fail(result, f"Month of year must be 1-12, got {pattern.month_of_year}")

        RecurrenceValidator._check_end_condition(pattern, result)
        RecurrenceValidator._check_qualifiers(pattern, result)

        if len(set(pattern.exceptions)) != len(pattern.exceptions):
            result["warnings"].append("Exception list contains duplicate dates")

        return result

    @staticmethod
    def _check_end_condition(pattern: RecurrencePattern, result: Dict[str, Any]) -> None:
        end_condition = pattern.end_condition
        if end_condition.type not in END_TYPES:
            _fail(result, f"End condition must be one of: {', '.join(END_TYPES)}, got: {end_condition.type}")
        elif end_condition.type == END_DATE and end_condition.end_date is None:
            _fail(result, "End condition 'date' requires an end date")
        elif end_condition.type == END_OCCURRENCES and (
            end_condition.max_occurrences is None or end_condition.max_occurrences < 1
        ):
            _fail(result, "End condition 'occurrences' requires a positive occurrence count")

    @staticmethod
    def _check_qualifiers(pattern: RecurrencePattern, result: Dict[str, Any]) -> None:
        """Warn about qualifier fields the pattern's frequency ignores."""
        if pattern.days_of_week and pattern.frequency != FREQUENCY_WEEKLY:
            result["warnings"].append(f"Days of week are ignored for {pattern.frequency} recurrence")
        if pattern.day_of_month is not None and pattern.frequency != FREQUENCY_MONTHLY:
            result["warnings"].append(f"Day of month is ignored for {pattern.frequency} recurrence")
        if pattern.month_of_year is not None and pattern.frequency != FREQUENCY_YEARLY:
            result["warnings"].append(f"Month of year is ignored for {pattern.frequency} recurrence")

        if pattern.frequency == FREQUENCY_WEEKLY and not pattern.days_of_week:
            result["warnings"].append("Weekly recurrence without days of week repeats on the start date's weekday")
        if pattern.frequency == FREQUENCY_MONTHLY and pattern.day_of_month is not None and pattern.day_of_month > 28:
            result["warnings"].append(
                f"Day of month {pattern.day_of_month} does not exist in every month; those months are skipped"
            )

    @staticmethod
    def validate_parent(record: PlannerRecord) -> Dict[str, Any]:
        """
        Validate a recurring parent record.

        Args:
            record: Task or event carrying a recurrence pattern

        Returns:
            Dict with validation result
        """
        result = _new_result()

        if record.recurrence is None:
            _fail(result, "Record has no recurrence pattern")
            return result

        anchor = record.anchor_date()
        if anchor is None:
            _fail(result, "Recurring parent has no start date")

        pattern_result = RecurrenceValidator.validate_recurrence_pattern(record.recurrence)
        if not pattern_result["valid"]:
            result["valid"] = False
        result["errors"].extend(pattern_result["errors"])
        result["warnings"].extend(pattern_result["warnings"])

        end_date = record.recurrence.end_condition.end_date
        if anchor is not None and end_date is not None and end_date < anchor:
            result["warnings"].append("End date is before the start date; the series has no occurrences")

        return result
