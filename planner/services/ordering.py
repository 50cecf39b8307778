"""
Ordering-Key Assigner.

Tasks are ordered by a manual key (priority letter + number). Persisted tasks
keep their stored key; generated instances keep only the letter of their parent
and get numbers after the highest number already used for that letter on the day.
Events have no manual key and are ordered by start time.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Sequence

from planner.models.record import PlannerRecord
from planner.models.task import PRIORITY_LETTERS, STATUS_DELETE, TaskPriority


def next_priority_number(records: Iterable[PlannerRecord], letter: str) -> int:
    """
    Next free priority number for a letter.

    Args:
        records: Records already on the day
        letter: Priority letter

    Returns:
        Highest number used with that letter plus one, or 1 if the letter is unused
    """
    numbers = [
        record.priority.number
        for record in records
        if getattr(record, "priority", None) is not None and record.priority.letter == letter
    ]
    return max(numbers, default=0) + 1


def assign_priority_numbers(
    persisted: Sequence[PlannerRecord], virtuals: Sequence[PlannerRecord]
) -> List[PlannerRecord]:
    """Number virtual tasks per letter in the order they were produced; persisted tasks are untouched."""
    next_numbers: Dict[str, int] = {}
    numbered = []
    for instance in virtuals:
        letter = instance.priority.letter
        if letter not in next_numbers:
            next_numbers[letter] = next_priority_number(persisted, letter)
        numbered.append(
            instance.model_copy(update={"priority": TaskPriority(letter=letter, number=next_numbers[letter])})
        )
        next_numbers[letter] += 1
    return list(persisted) + numbered


def keep_keys(persisted: Sequence[PlannerRecord], virtuals: Sequence[PlannerRecord]) -> List[PlannerRecord]:
    return list(persisted) + list(virtuals)


def _letter_rank(letter: str) -> int:
    return PRIORITY_LETTERS.index(letter) if letter in PRIORITY_LETTERS else len(PRIORITY_LETTERS)


def task_sort_key(task: PlannerRecord):
    priority = task.priority
    return _letter_rank(priority.letter), priority.number


def event_sort_key(event: PlannerRecord):
    start = event.start_time
    # Naive and aware datetimes do not compare; only the wall-clock value matters here
    return start is None, start.replace(tzinfo=None) if start is not None else datetime.min


def task_visible(task: PlannerRecord) -> bool:
    return task.status != STATUS_DELETE


def always_visible(record: PlannerRecord) -> bool:
    return True


@dataclass(frozen=True)
class RecordDomain:
    """How one kind of record is keyed, filtered and ordered after reconciliation."""

    name: str
    assign_keys: Callable[[Sequence[PlannerRecord], Sequence[PlannerRecord]], List[PlannerRecord]]
    sort_key: Callable[[PlannerRecord], tuple]
    visible: Callable[[PlannerRecord], bool] = always_visible

    def finalize(self, persisted: Sequence[PlannerRecord], virtuals: Sequence[PlannerRecord]) -> List[PlannerRecord]:
        """Complete ordering keys, drop hidden records and return the day's records sorted."""
        # Keys are assigned before hiding so numbering matches what is stored for the day
        records = [record for record in self.assign_keys(persisted, virtuals) if self.visible(record)]
        return sorted(records, key=self.sort_key)


TASK_DOMAIN = RecordDomain(
    name="tasks", assign_keys=assign_priority_numbers, sort_key=task_sort_key, visible=task_visible
)
EVENT_DOMAIN = RecordDomain(name="events", assign_keys=keep_keys, sort_key=event_sort_key)
