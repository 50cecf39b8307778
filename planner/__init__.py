"""
Planner recurrence engine.

Expands recurring tasks and events into per-day occurrences and reconciles them
with the records already persisted for that day.
"""

__version__ = "1.0.0"
