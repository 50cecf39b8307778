from datetime import date, datetime

import pytest

from planner.models import EndCondition
from planner.services.instance_reconciler import reconcile_tasks
from planner.services.occurrence_evaluator import occurs
from planner.services.recurring_instance_service import (
    RecurrenceError,
    RecurringInstanceService,
    add_exception,
    dedupe_exceptions,
    set_instance_modification,
)

FEB_1 = date(2026, 2, 1)
FEB_3 = date(2026, 2, 3)


@pytest.fixture
def service():
    return RecurringInstanceService()


@pytest.fixture
def parent(make_task, pattern):
    return make_task("recurring-1", letter="B", number=5, title="Water plants", recurrence=pattern("daily"))


def test_add_exception_returns_copy(pattern):
    rule = pattern("daily")
    updated = add_exception(rule, FEB_3)

    assert updated.exceptions == [FEB_3]
    assert rule.exceptions == []
    assert add_exception(updated, FEB_3).exceptions == [FEB_3]


def test_dedupe_exceptions(pattern):
    rule = pattern("daily", exceptions=["2026-02-05", "2026-02-03", "2026-02-05"])
    assert dedupe_exceptions(rule).exceptions == [date(2026, 2, 5), FEB_3]


# --- materialize ---


def test_materialize_instance(service, parent, make_task):
    persisted = [make_task("t1", letter="B", number=1, scheduled=FEB_3), make_task("t2", letter="B", number=2, scheduled=FEB_3)]

    instance, updated_parent = service.materialize_instance(
        parent, "2026-02-03", persisted, {"title": "Water plants (balcony)", "status": "complete"}
    )

    assert instance.id == "recurring-1_2026-02-03"
    assert instance.title == "Water plants (balcony)"
    assert instance.status == "complete"
    assert instance.is_recurring_instance
    assert instance.recurring_parent_id == "recurring-1"
    assert instance.instance_date == FEB_3
    assert instance.scheduled_date == FEB_3
    assert instance.recurrence is None
    assert (instance.priority.letter, instance.priority.number) == ("B", 3)

    assert updated_parent.recurrence.exceptions == [FEB_3]
    assert parent.recurrence.exceptions == []


def test_materialized_instance_is_not_duplicated(service, parent):
    instance, updated_parent = service.materialize_instance(parent, FEB_3)

    for parents in ([parent], [updated_parent]):
        records = reconcile_tasks(FEB_3, [instance], parents)
        assert [record.id for record in records] == ["recurring-1_2026-02-03"]


def test_materialize_ignores_marker_overrides(service, parent):
    instance, _ = service.materialize_instance(
        parent,
        FEB_3,
        updates={"scheduledDate": "2026-02-04", "isRecurringInstance": False, "id": "other", "recurrence": None},
    )
    assert instance.scheduled_date == date(2026, 2, 4)
    assert instance.is_recurring_instance
    assert instance.id == "recurring-1_2026-02-03"
    assert instance.instance_date == FEB_3


def test_materialize_priority_override(service, parent):
    explicit, _ = service.materialize_instance(parent, FEB_3, updates={"priority": {"letter": "A", "number": 4}})
    assert (explicit.priority.letter, explicit.priority.number) == ("A", 4)

    letter_only, _ = service.materialize_instance(parent, FEB_3, updates={"priority": {"letter": "C"}})
    assert (letter_only.priority.letter, letter_only.priority.number) == ("C", 1)


def test_materialize_event_moves_times(service, make_event, pattern):
    event = make_event("standup", recurrence=pattern("daily"))
    instance, _ = service.materialize_instance(event, FEB_3, updates={"location": "Room 2"})

    assert instance.start_time == datetime(2026, 2, 3, 9, 0)
    assert instance.end_time == datetime(2026, 2, 3, 10, 30)
    assert instance.location == "Room 2"


def test_materialize_errors(service, make_task, pattern):
    every_other_day = make_task("p1", recurrence=pattern("daily", interval=2))

    with pytest.raises(RecurrenceError) as exc_info:
        service.materialize_instance(every_other_day, "2026-02-02")
    assert exc_info.value.code == "NO_OCCURRENCE"
    assert exc_info.value.details == {"parent_id": "p1", "date": "2026-02-02"}

    with pytest.raises(RecurrenceError) as exc_info:
        service.materialize_instance(make_task("plain"), FEB_3)
    assert exc_info.value.code == "NOT_RECURRING"

    with pytest.raises(RecurrenceError) as exc_info:
        service.materialize_instance(every_other_day, "someday")
    assert exc_info.value.code == "INVALID_DATE"

    with pytest.raises(RecurrenceError) as exc_info:
        service.materialize_instance(make_task("p2", scheduled=None, recurrence=pattern("daily")), FEB_3)
    assert exc_info.value.code == "MISSING_START_DATE"


# --- skip ---


def test_skip_instance(service, parent):
    updated = service.skip_instance(parent, FEB_3)

    assert updated.recurrence.exceptions == [FEB_3]
    assert updated.scheduled_date == FEB_1
    assert not occurs(updated.recurrence, FEB_1, FEB_3)
    assert parent.recurrence.exceptions == []


def test_skip_first_instance_moves_anchor(service, make_task, pattern):
    parent = make_task("p1", recurrence=pattern("daily", interval=2))
    updated = service.skip_instance(parent, FEB_1)

    assert updated.scheduled_date == FEB_3
    assert updated.recurrence.exceptions == [FEB_1]
    assert occurs(updated.recurrence, updated.scheduled_date, FEB_3)


def test_skip_first_event_keeps_time_of_day(service, make_event, pattern):
    event = make_event("standup", recurrence=pattern("daily"))
    updated = service.skip_instance(event, FEB_1)

    assert updated.start_time == datetime(2026, 2, 2, 9, 0)
    assert updated.end_time == datetime(2026, 2, 2, 10, 30)


def test_skip_only_occurrence_keeps_anchor(service, make_task, pattern):
    parent = make_task("p1", recurrence=pattern("daily", end_condition=EndCondition(type="occurrences", max_occurrences=1)))
    updated = service.skip_instance(parent, FEB_1)

    assert updated.scheduled_date == FEB_1
    assert updated.recurrence.exceptions == [FEB_1]


def test_skip_day_without_occurrence(service, parent):
    with pytest.raises(RecurrenceError) as exc_info:
        service.skip_instance(parent, "2026-01-31")
    assert exc_info.value.code == "NO_OCCURRENCE"


# --- end series ---


def test_end_series_before(service, parent):
    updated = service.end_series_before(parent, "2026-02-05")

    end_condition = updated.recurrence.end_condition
    assert end_condition.type == "date"
    assert end_condition.end_date == date(2026, 2, 4)
    assert occurs(updated.recurrence, FEB_1, "2026-02-04")
    assert not occurs(updated.recurrence, FEB_1, "2026-02-05")
    assert parent.recurrence.end_condition.type == "never"


def test_end_series_errors(service, parent, make_task):
    with pytest.raises(RecurrenceError) as exc_info:
        service.end_series_before(parent, "02/05/2026")
    assert exc_info.value.code == "INVALID_DATE"

    with pytest.raises(RecurrenceError) as exc_info:
        service.end_series_before(make_task("plain"), FEB_3)
    assert exc_info.value.code == "NOT_RECURRING"


def test_end_series_before_first_calendar_day(service, parent):
    with pytest.raises(RecurrenceError) as exc_info:
        service.end_series_before(parent, date.min)
    assert exc_info.value.code == "INVALID_DATE"


# --- per-day modifications ---


def test_set_instance_modification_merges(pattern):
    rule = set_instance_modification(pattern("daily"), FEB_3, {"status": "complete"})
    rule = set_instance_modification(rule, FEB_3, {"title": "Renamed"})

    assert rule.modification_for(FEB_3) == {"status": "complete", "title": "Renamed"}


def test_modify_instance(service, parent):
    updated = service.modify_instance(parent, "2026-02-03", status="complete")
    updated = service.modify_instance(updated, FEB_3, title="Water plants (balcony)")

    assert updated.recurrence.modification_for(FEB_3) == {"status": "complete", "title": "Water plants (balcony)"}
    assert parent.recurrence.instance_modifications == {}

    virtual = reconcile_tasks(FEB_3, [], [updated])[0]
    assert (virtual.status, virtual.title) == ("complete", "Water plants (balcony)")


def test_modify_instance_delete_hides_occurrence(service, parent):
    updated = service.modify_instance(parent, FEB_3, status="delete")
    assert reconcile_tasks(FEB_3, [], [updated]) == []
    assert len(reconcile_tasks("2026-02-04", [], [updated])) == 1


def test_modify_instance_requires_occurrence(service, parent):
    with pytest.raises(RecurrenceError) as exc_info:
        service.modify_instance(parent, "2026-01-31", status="complete")
    assert exc_info.value.code == "NO_OCCURRENCE"
