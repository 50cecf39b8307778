from planner.models import EndCondition
from planner.services.recurrence_validator import RecurrenceValidator


def test_valid_pattern(pattern):
    result = RecurrenceValidator.validate_recurrence_pattern(pattern("weekly", days_of_week=[1, 3]))
    assert result == {"valid": True, "errors": [], "warnings": []}


def test_valid_raw_document():
    result = RecurrenceValidator.validate_recurrence_pattern(
        {"type": "monthly", "interval": 1, "dayOfMonth": 15, "endCondition": {"type": "never"}}
    )
    assert result["valid"]


def test_unknown_frequency(pattern):
    result = RecurrenceValidator.validate_recurrence_pattern(pattern("hourly"))
    assert not result["valid"]
    assert "hourly" in result["errors"][0]


def test_missing_frequency():
    result = RecurrenceValidator.validate_recurrence_pattern({"interval": 2})
    assert not result["valid"]
    assert result["errors"]


def test_out_of_range_fields(pattern):
    result = RecurrenceValidator.validate_recurrence_pattern(
        pattern("weekly", interval=0, days_of_week=[7], day_of_month=32, month_of_year=13)
    )
    assert not result["valid"]
    assert len(result["errors"]) == 4


def test_incomplete_end_conditions(pattern):
    no_date = pattern("daily", end_condition=EndCondition(type="date"))
    no_count = pattern("daily", end_condition=EndCondition(type="occurrences", max_occurrences=0))
    unknown = pattern("daily", end_condition=EndCondition(type="forever"))

    assert not RecurrenceValidator.validate_recurrence_pattern(no_date)["valid"]
    assert not RecurrenceValidator.validate_recurrence_pattern(no_count)["valid"]
    assert not RecurrenceValidator.validate_recurrence_pattern(unknown)["valid"]


def test_warnings_do_not_invalidate(pattern):
    result = RecurrenceValidator.validate_recurrence_pattern(
        pattern("daily", days_of_week=[1], exceptions=["2026-02-03", "2026-02-03"])
    )
    assert result["valid"]
    assert len(result["warnings"]) == 2


def test_month_end_day_warning(pattern):
    result = RecurrenceValidator.validate_recurrence_pattern(pattern("monthly", day_of_month=31))
    assert result["valid"]
    assert any("31" in warning for warning in result["warnings"])


def test_validate_parent(make_task, pattern):
    assert RecurrenceValidator.validate_parent(make_task("p1", recurrence=pattern("daily")))["valid"]

    no_rule = RecurrenceValidator.validate_parent(make_task("p2"))
    assert not no_rule["valid"]

    no_start = RecurrenceValidator.validate_parent(make_task("p3", scheduled=None, recurrence=pattern("daily")))
    assert not no_start["valid"]


def test_validate_parent_end_before_start(make_task, pattern):
    parent = make_task(
        "p1",
        recurrence=pattern("daily", end_condition=EndCondition(type="date", end_date="2026-01-01")),
    )
    result = RecurrenceValidator.validate_parent(parent)
    assert result["valid"]
    assert result["warnings"]
