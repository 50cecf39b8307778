"""Task router: daily reconciliation and single-occurrence edits."""
from fastapi import APIRouter, Depends, HTTPException, status
from typing import Any, Dict

from planner.schemas.records import dump_record, dump_records
from planner.schemas.recurrence import (
    InstanceModificationRequest,
    MaterializeTaskRequest,
    SeriesEditRequest,
    TaskReconcileRequest,
)
from planner.services.instance_reconciler import reconcile_tasks
from planner.services.recurring_instance_service import RecurrenceError, RecurringInstanceService
from planner.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["Tasks"])  # No prefix since main.py adds /api prefix


def get_instance_service() -> RecurringInstanceService:
    """Dependency for getting RecurringInstanceService instance."""
    return RecurringInstanceService()


def recurrence_http_error(error: RecurrenceError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"code": error.code, "message": error.message, "details": error.details},
    )


@router.post("/tasks/reconcile", response_model=Dict[str, Any])
async def reconcile_day_tasks(request: TaskReconcileRequest):
    """Return the day's tasks with recurring instances merged in, sorted by priority."""
    records = reconcile_tasks(request.date, request.persisted, request.parents)
    logger.info("Reconciled tasks", date=request.date, count=len(records))
    return {
        "date": request.date,
        "records": dump_records(records),
        "count": len(records),
    }


@router.post("/tasks/materialize", response_model=Dict[str, Any])
async def materialize_task_instance(
    request: MaterializeTaskRequest,
    service: RecurringInstanceService = Depends(get_instance_service),
):
    """Materialize one occurrence of a recurring task so it can be edited and stored."""
    try:
        instance, parent = service.materialize_instance(
            request.parent, request.date, request.persisted, request.updates
        )
    except RecurrenceError as e:
        raise recurrence_http_error(e)

    return {
        "instance": dump_record(instance),
        "parent": dump_record(parent),
    }


@router.post("/tasks/skip", response_model=Dict[str, Any])
async def skip_task_instance(
    request: SeriesEditRequest,
    service: RecurringInstanceService = Depends(get_instance_service),
):
    """Delete one occurrence of a recurring task."""
    try:
        parent = service.skip_instance(request.parent, request.date)
    except RecurrenceError as e:
        raise recurrence_http_error(e)
    return {"parent": dump_record(parent)}


@router.post("/tasks/end-series", response_model=Dict[str, Any])
async def end_task_series(
    request: SeriesEditRequest,
    service: RecurringInstanceService = Depends(get_instance_service),
):
    """Delete an occurrence and all later ones."""
    try:
        parent = service.end_series_before(request.parent, request.date)
    except RecurrenceError as e:
        raise recurrence_http_error(e)
    return {"parent": dump_record(parent)}


@router.post("/tasks/modify-instance", response_model=Dict[str, Any])
async def modify_task_instance(
    request: InstanceModificationRequest,
    service: RecurringInstanceService = Depends(get_instance_service),
):
    """Store a status/title/description override for one occurrence on its parent."""
    modification = request.modification
    try:
        parent = service.modify_instance(
            request.parent,
            request.date,
            status=modification.status,
            title=modification.title,
            description=modification.description,
        )
    except RecurrenceError as e:
        raise recurrence_http_error(e)
    return {"parent": dump_record(parent)}
