"""Event router: daily reconciliation."""
from fastapi import APIRouter
from typing import Any, Dict

from planner.schemas.records import dump_records
from planner.schemas.recurrence import EventReconcileRequest
from planner.services.instance_reconciler import reconcile_events
from planner.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Events"])  # No prefix since main.py adds /api prefix


@router.post("/events/reconcile", response_model=Dict[str, Any])
async def reconcile_day_events(request: EventReconcileRequest):
    """Return the day's events with recurring instances merged in, sorted by start time."""
    records = reconcile_events(request.date, request.persisted, request.parents)
    logger.info("Reconciled events", date=request.date, count=len(records))
    return {
        "date": request.date,
        "records": dump_records(records),
        "count": len(records),
    }
