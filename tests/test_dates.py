from datetime import date, datetime

from planner.utils.dates import (
    add_months,
    months_between,
    safe_date,
    sunday_weekday,
    to_calendar_day,
    week_start_ordinal,
    weeks_between,
)


def test_to_calendar_day_accepts_store_formats():
    assert to_calendar_day("2026-02-03") == date(2026, 2, 3)
    assert to_calendar_day("2026-02-03T00:00:00.000Z") == date(2026, 2, 3)
    assert to_calendar_day(datetime(2026, 2, 3, 23, 59)) == date(2026, 2, 3)
    assert to_calendar_day(date(2026, 2, 3)) == date(2026, 2, 3)


def test_to_calendar_day_rejects_garbage():
    assert to_calendar_day("not-a-date") is None
    assert to_calendar_day("2026-13-01") is None
    assert to_calendar_day("2026-02-30") is None
    assert to_calendar_day("") is None
    assert to_calendar_day(None) is None
    assert to_calendar_day(20260203) is None


def test_weeks_start_on_sunday():
    # 2026-02-01 is a Sunday, 2026-02-07 a Saturday
    assert sunday_weekday(date(2026, 2, 1)) == 0
    assert sunday_weekday(date(2026, 2, 7)) == 6
    assert week_start_ordinal(date(2026, 2, 4)) == date(2026, 2, 1).toordinal()
    assert weeks_between(date(2026, 2, 7), date(2026, 2, 8)) == 1
    assert weeks_between(date(2026, 2, 1), date(2026, 2, 7)) == 0


def test_month_arithmetic():
    assert months_between(date(2025, 11, 30), date(2026, 2, 1)) == 3
    assert add_months(2025, 11, 3) == (2026, 2)
    assert add_months(2026, 1, 0) == (2026, 1)
    assert safe_date(2026, 2, 29) is None
    assert safe_date(2028, 2, 29) == date(2028, 2, 29)


def test_week_arithmetic_at_start_of_calendar():
    # 0001-01-01 is a Monday; its week starts on a Sunday before the calendar
    assert week_start_ordinal(date.min) == 0
    assert weeks_between(date.min, date(1, 1, 7)) == 1
