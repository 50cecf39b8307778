"""
Logging utility for the planner engine.

Wraps the standard logger and emits one JSON document per record so engine
decisions (skipped parents, generated instances) can be filtered by field.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Dict, Optional

from planner import config


class StructuredLogger:
    """Structured logger emitting JSON payloads."""

    def __init__(self, name: str, level: Optional[int] = None):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            level: Logging level, defaults to LOG_LEVEL from the environment
        """
        self.logger = logging.getLogger(name)
        if level is None:
            level = getattr(logging, config.LOG_LEVEL, logging.INFO)
        self.logger.setLevel(level)

        # Prevent adding handlers multiple times
        if not self.logger.handlers:
            self._setup_handlers()

    def _setup_handlers(self):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        self.logger.addHandler(console_handler)
        self.logger.propagate = False

    def _log_structured(self, level: int, message: str, **fields):
        """
        Log a message with structured fields.

        Args:
            level: Logging level
            message: Log message
            **fields: Additional structured data (dates are rendered with str())
        """
        if not self.logger.isEnabledFor(level):
            return
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": logging.getLevelName(level),
            "message": message,
            "logger": self.logger.name,
        }
        payload.update(fields)
        self.logger.log(level, json.dumps(payload, default=str))

    def debug(self, message: str, **fields):
        self._log_structured(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields):
        self._log_structured(logging.INFO, message, **fields)

    def warning(self, message: str, **fields):
        self._log_structured(logging.WARNING, message, **fields)

    def error(self, message: str, **fields):
        self._log_structured(logging.ERROR, message, **fields)


_loggers: Dict[str, StructuredLogger] = {}


def get_logger(name: str) -> StructuredLogger:
    """
    Get the structured logger for a module.

    Args:
        name: Logger name, usually __name__

    Returns:
        StructuredLogger instance
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name)
    return _loggers[name]
