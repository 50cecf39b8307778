"""Routers package for the planner recurrence API."""

from .events import router as events_router
from .recurrence import router as recurrence_router
from .tasks import router as tasks_router

__all__ = ["events_router", "recurrence_router", "tasks_router"]
