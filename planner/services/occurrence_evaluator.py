"""
Occurrence Evaluator.

Decides whether a recurrence pattern anchored at a start date produces an
occurrence on a given calendar day. Evaluation never raises for bad data: an
unknown frequency, a non-positive interval or an unreadable date simply means
"no occurrence".
"""

from datetime import date, timedelta
from typing import Any, Iterator, Optional

from pydantic import ValidationError

from planner import config
from planner.models.recurrence_rule import (
    END_DATE,
    END_OCCURRENCES,
    FREQUENCIES,
    FREQUENCY_DAILY,
    FREQUENCY_MONTHLY,
    FREQUENCY_WEEKLY,
    FREQUENCY_YEARLY,
    RecurrencePattern,
)
from planner.utils.dates import (
    add_months,
    months_between,
    safe_date,
    sunday_weekday,
    to_calendar_day,
    week_start_ordinal,
    weeks_between,
)
from planner.utils.logger import get_logger

logger = get_logger(__name__)


def _coerce_pattern(pattern: Any) -> Optional[RecurrencePattern]:
    """Accept a RecurrencePattern or a raw document; None if it cannot be read."""
    if isinstance(pattern, RecurrencePattern):
        return pattern
    if isinstance(pattern, dict):
        try:
            return RecurrencePattern.model_validate(pattern)
        except ValidationError:
            logger.warning("Unreadable recurrence pattern", pattern=pattern)
            return None
    return None


def matches_frequency(pattern: RecurrencePattern, start: date, candidate: date) -> bool:
    """
    Frequency test alone, without exceptions or end condition.

    The start date itself always matches for every known frequency; it is the
    first occurrence of the series.
    """
    if candidate < start:
        return False

    frequency = pattern.frequency
    if frequency not in FREQUENCIES:
        return False

    interval = pattern.interval
    if interval < 1:
        return False

    if candidate == start:
        return True

    if frequency == FREQUENCY_DAILY:
        return (candidate - start).days % interval == 0

    if frequency == FREQUENCY_WEEKLY:
        if weeks_between(start, candidate) % interval != 0:
            return False
        days = set(pattern.days_of_week) or {sunday_weekday(start)}
        return sunday_weekday(candidate) in days

    if frequency == FREQUENCY_MONTHLY:
        day_of_month = pattern.day_of_month or start.day
        return candidate.day == day_of_month and months_between(start, candidate) % interval == 0

    # yearly
    month_of_year = pattern.month_of_year or start.month
    return (
        candidate.month == month_of_year
        and candidate.day == start.day
        and (candidate.year - start.year) % interval == 0
    )


def _period_candidates(pattern: RecurrencePattern, start: date, until: date) -> Iterator[date]:
    """
    Ascending superset of rule dates in (start, until], one frequency period at a time.

    Daily and weekly steps are taken on day ordinals and only ordinals inside
    (start, until] are turned back into dates, so neither a huge interval nor a
    series ending near date.max can step out of range.
    """
    interval = pattern.interval
    frequency = pattern.frequency
    first, last = start.toordinal(), until.toordinal()

    if frequency == FREQUENCY_DAILY:
        for ordinal in range(first + interval, last + 1, interval):
            yield date.fromordinal(ordinal)

    elif frequency == FREQUENCY_WEEKLY:
        for week in range(week_start_ordinal(start), last + 1, 7 * interval):
            for ordinal in range(max(week, first + 1), min(week + 7, last + 1)):
                yield date.fromordinal(ordinal)

    elif frequency == FREQUENCY_MONTHLY:
        day_of_month = pattern.day_of_month or start.day
        offset = 0
        while True:
            year, month = add_months(start.year, start.month, offset)
            if (year, month) > (until.year, until.month):
                return
            candidate = safe_date(year, month, day_of_month)
            if candidate is not None:
                yield candidate
            offset += interval

    elif frequency == FREQUENCY_YEARLY:
        month_of_year = pattern.month_of_year or start.month
        year = start.year
        while year <= until.year:
            candidate = safe_date(year, month_of_year, start.day)
            if candidate is not None:
                yield candidate
            year += interval


def iter_rule_dates(pattern: RecurrencePattern, start: date, until: date) -> Iterator[date]:
    """
    Yield, in ascending order, every day in [start, until] that satisfies the
    frequency rule. Exceptions and the end condition are not applied here.

    The walk advances one frequency period at a time, so its cost grows with the
    number of periods between start and until, not with the number of days.
    """
    if until < start or not matches_frequency(pattern, start, start):
        return
    yield start
    for candidate in _period_candidates(pattern, start, until):
        if start < candidate <= until and matches_frequency(pattern, start, candidate):
            yield candidate


def _within_end_condition(pattern: RecurrencePattern, start: date, candidate: date) -> bool:
    end_condition = pattern.end_condition

    if end_condition.type == END_DATE:
        return end_condition.end_date is None or candidate <= end_condition.end_date

    if end_condition.type == END_OCCURRENCES:
        limit = end_condition.max_occurrences
        if not limit:
            return True
        # Excepted days do not count toward max_occurrences
        exceptions = pattern.exception_days()
        ordinal = 0
        for day in iter_rule_dates(pattern, start, candidate):
            if day in exceptions:
                continue
            ordinal += 1
            if ordinal > limit:
                return False
        return True

    return True


def occurs(pattern: Any, start_date: Any, candidate_date: Any) -> bool:
    """
    Check whether the pattern produces an occurrence on candidate_date.

    Args:
        pattern: RecurrencePattern (or its raw document form)
        start_date: Anchor day of the series
        candidate_date: Day being asked about

    Returns:
        True if an occurrence exists on candidate_date
    """
    rule = _coerce_pattern(pattern)
    start = to_calendar_day(start_date)
    candidate = to_calendar_day(candidate_date)
    if rule is None or start is None or candidate is None:
        return False

    if rule.frequency not in FREQUENCIES:
        logger.warning("Unknown recurrence frequency", frequency=rule.frequency)
        return False
    if rule.interval < 1:
        logger.warning("Non-positive recurrence interval", interval=rule.interval)
        return False

    if not matches_frequency(rule, start, candidate):
        return False
    if candidate in rule.exception_days():
        return False
    return _within_end_condition(rule, start, candidate)


def next_occurrence(
    pattern: Any,
    start_date: Any,
    after: Any,
    horizon_days: Optional[int] = None,
) -> Optional[date]:
    """
    Find the first occurrence strictly after a given day.

    Args:
        pattern: RecurrencePattern (or its raw document form)
        start_date: Anchor day of the series
        after: Day to search after
        horizon_days: How far past `after` to look; defaults to RECURRENCE_SEARCH_HORIZON_DAYS

    Returns:
        The next occurrence, or None if the series has ended or nothing falls
        inside the horizon
    """
    rule = _coerce_pattern(pattern)
    start = to_calendar_day(start_date)
    reference = to_calendar_day(after)
    if rule is None or start is None or reference is None:
        return None
    if rule.frequency not in FREQUENCIES or rule.interval < 1:
        return None

    horizon = horizon_days if horizon_days is not None else config.RECURRENCE_SEARCH_HORIZON_DAYS
    try:
        until = reference + timedelta(days=horizon)
    except OverflowError:
        until = date.max
    end_condition = rule.end_condition
    exceptions = rule.exception_days()

    ordinal = 0
    for day in iter_rule_dates(rule, start, until):
        if day in exceptions:
            continue
        ordinal += 1
        if end_condition.type == END_DATE and end_condition.end_date and day > end_condition.end_date:
            return None
        if end_condition.type == END_OCCURRENCES and end_condition.max_occurrences and ordinal > end_condition.max_occurrences:
            return None
        if day > reference:
            return day
    return None
