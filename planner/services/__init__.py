"""Recurrence expansion and reconciliation services."""

from .occurrence_evaluator import iter_rule_dates, matches_frequency, next_occurrence, occurs
from .instance_reconciler import build_virtual_instance, instance_id, reconcile, reconcile_events, reconcile_tasks
from .ordering import EVENT_DOMAIN, TASK_DOMAIN, RecordDomain
from .recurrence_validator import RecurrenceValidator
from .recurring_instance_service import RecurrenceError, RecurringInstanceService

__all__ = [
    "iter_rule_dates",
    "matches_frequency",
    "next_occurrence",
    "occurs",
    "build_virtual_instance",
    "instance_id",
    "reconcile",
    "reconcile_events",
    "reconcile_tasks",
    "EVENT_DOMAIN",
    "TASK_DOMAIN",
    "RecordDomain",
    "RecurrenceValidator",
    "RecurrenceError",
    "RecurringInstanceService",
]
