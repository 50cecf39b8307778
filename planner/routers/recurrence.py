"""Recurrence pattern router: occurrence checks and validation."""
from fastapi import APIRouter
from typing import Any, Dict

from planner.schemas.recurrence import NextOccurrenceRequest, OccursRequest
from planner.services.occurrence_evaluator import next_occurrence, occurs
from planner.services.recurrence_validator import RecurrenceValidator

router = APIRouter(tags=["Recurrence"])  # No prefix since main.py adds /api prefix


@router.post("/recurrence/occurs", response_model=Dict[str, Any])
async def check_occurrence(request: OccursRequest):
    """Check whether a pattern anchored at startDate has an occurrence on date."""
    return {
        "date": request.date,
        "occurs": occurs(request.pattern, request.start_date, request.date),
    }


@router.post("/recurrence/next", response_model=Dict[str, Any])
async def find_next_occurrence(request: NextOccurrenceRequest):
    """Find the first occurrence strictly after a day."""
    found = next_occurrence(request.pattern, request.start_date, request.after, request.horizon_days)
    return {"after": request.after, "next": found.isoformat() if found else None}


@router.post("/recurrence/validate", response_model=Dict[str, Any])
async def validate_pattern(pattern: Dict[str, Any]):
    """Validate a raw recurrence pattern document."""
    return RecurrenceValidator.validate_recurrence_pattern(pattern)
