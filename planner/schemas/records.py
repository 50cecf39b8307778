"""Response serialization for planner records."""
from typing import Any, Dict, Iterable

from planner.models.record import PlannerRecord


def dump_record(record: PlannerRecord) -> Dict[str, Any]:
    """Serialize a record with the document store's camelCase keys."""
    return record.model_dump(by_alias=True, mode="json")


def dump_records(records: Iterable[PlannerRecord]) -> list:
    return [dump_record(record) for record in records]
