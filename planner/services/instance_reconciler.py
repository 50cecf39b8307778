"""
Instance Reconciler.

Merges the records persisted for a day with virtual occurrences synthesized from
recurring parents. A parent already represented on the day (by a materialized
instance, or by the parent record itself on its anchor day) gets no virtual copy.

Reconciliation is pure: inputs are read-only snapshots and are never mutated, and
identical inputs always give identical output.
"""

from datetime import date
from typing import Any, Iterable, List, Mapping, Optional, Set, Tuple, Union

from planner.models.record import PlannerRecord
from planner.services.occurrence_evaluator import occurs
from planner.services.ordering import EVENT_DOMAIN, TASK_DOMAIN, RecordDomain
from planner.utils.dates import format_day, to_calendar_day
from planner.utils.logger import get_logger

logger = get_logger(__name__)

InstanceKey = Tuple[str, date]
ParentSource = Union[Mapping[str, PlannerRecord], Iterable[PlannerRecord], None]


def instance_id(key: InstanceKey) -> str:
    """External identity of an instance: {parentId}_{YYYY-MM-DD}."""
    parent_id, day = key
    return f"{parent_id}_{format_day(day)}"


def build_virtual_instance(parent: PlannerRecord, day: date) -> PlannerRecord:
    """
    Synthesize the occurrence of parent on day.

    The copy inherits every parent field except the recurrence (cleared), the
    instance markers, and the date-bearing fields, which move onto day. Overrides
    stored on the pattern for day are applied last.
    """
    update = {
        "id": instance_id((parent.id, day)),
        "recurrence": None,
        "is_recurring_instance": True,
        "recurring_parent_id": parent.id,
        "instance_date": day,
    }
    update.update(parent.rebased_fields(day))
    update.update(parent.modification_fields(day))
    return parent.model_copy(update=update, deep=True)


def _iter_parents(recurring_parents: ParentSource) -> Iterable[PlannerRecord]:
    if recurring_parents is None:
        return []
    if isinstance(recurring_parents, Mapping):
        return recurring_parents.values()
    return recurring_parents


def _represented_parents(persisted: List[PlannerRecord], day: date) -> Set[str]:
    """Parent ids that already have a record standing for their occurrence on day."""
    represented = set()
    for record in persisted:
        key = record.instance_key()
        if key is not None and key[1] == day:
            represented.add(key[0])
        elif record.is_recurring_parent and record.anchor_date() == day:
            represented.add(record.id)
    return represented


def _with_own_modification(record: PlannerRecord, day: date) -> PlannerRecord:
    """A parent shown on its anchor day carries the overrides its pattern stores for that day."""
    if not record.is_recurring_parent or record.anchor_date() != day:
        return record
    fields = record.modification_fields(day)
    return record.model_copy(update=fields, deep=True) if fields else record


def _virtual_for(parent: PlannerRecord, day: date) -> Optional[PlannerRecord]:
    if not parent.id or parent.recurrence is None:
        logger.debug("Skipping parent without recurrence", parent_id=parent.id)
        return None
    anchor = parent.anchor_date()
    if anchor is None:
        logger.debug("Skipping parent without start date", parent_id=parent.id)
        return None
    if not occurs(parent.recurrence, anchor, day):
        return None
    return build_virtual_instance(parent, day)


def reconcile(
    day: Any,
    persisted_for_date: Optional[Iterable[PlannerRecord]],
    recurring_parents: ParentSource,
    domain: RecordDomain = TASK_DOMAIN,
) -> List[PlannerRecord]:
    """
    Build the full list of records for a calendar day.

    Args:
        day: Target day (date, datetime or YYYY-MM-DD string)
        persisted_for_date: Records stored for the day, materialized instances included
        recurring_parents: Recurring parents, as an id -> record mapping or an iterable
        domain: Ordering rules for the record kind (tasks or events)

    Returns:
        Persisted records plus virtual instances, keyed and sorted for the domain.
        Records the domain hides (tasks with status "delete") are left out.
        An unreadable day gives an empty list.
    """
    target = to_calendar_day(day)
    if target is None:
        logger.warning("Cannot reconcile unreadable date", date=day)
        return []

    persisted = [_with_own_modification(record, target) for record in persisted_for_date or []]
    represented = _represented_parents(persisted, target)
    taken_ids = {record.id for record in persisted}

    virtuals = []
    for parent in _iter_parents(recurring_parents):
        if parent is None or parent.id in represented:
            continue
        try:
            virtual = _virtual_for(parent, target)
        except (ValueError, TypeError, OverflowError) as e:
            logger.warning("Skipping parent with corrupt recurrence data", parent_id=parent.id, error=str(e))
            continue
        if virtual is None or virtual.id in taken_ids:
            continue
        represented.add(parent.id)
        taken_ids.add(virtual.id)
        virtuals.append(virtual)

    logger.debug(
        "Reconciled day",
        domain=domain.name,
        date=format_day(target),
        persisted=len(persisted),
        virtual=len(virtuals),
    )
    return domain.finalize(persisted, virtuals)


def reconcile_tasks(day: Any, persisted_for_date, recurring_parents) -> List[PlannerRecord]:
    return reconcile(day, persisted_for_date, recurring_parents, TASK_DOMAIN)


def reconcile_events(day: Any, persisted_for_date, recurring_parents) -> List[PlannerRecord]:
    return reconcile(day, persisted_for_date, recurring_parents, EVENT_DOMAIN)
