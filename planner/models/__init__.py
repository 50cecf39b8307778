"""Planner document models."""

from .recurrence_rule import EndCondition, InstanceModification, RecurrencePattern
from .record import PlannerRecord
from .task import Task, TaskPriority
from .event import Event

__all__ = ["EndCondition", "InstanceModification", "RecurrencePattern", "PlannerRecord", "Task", "TaskPriority", "Event"]
