"""
Structured JSON Logger
=====================

Bounded Context: Observability Infrastructure

This module provides a structured logger that outputs JSON logs.

Design:
- JSON output (compatible with log aggregators)
- Thread-safe (uses standard logging module)
- Contextual metadata (request_id, state, hit, etc.)
- Type-safe events (LogEvent enum)

Example:
    >>> logger = StructuredLogger(component="service")
    >>> logger.info(
    ...     event=LogEvent.POINT_EVALUATED,
    ...     message="Point evaluated",
    ...     metadata={'x': 2.0, 'y': 1.0, 'r': 2.0, 'hit': False}
    ... )

Output:
    {
        "timestamp": "2026-10-19T14:03:07.512+03:00",
        "level": "INFO",
        "component": "service",
        "event": "point.evaluated",
        "message": "Point evaluated",
        "metadata": {"x": 2.0, "y": 1.0, "r": 2.0, "hit": false}
    }
"""

import json
import logging
from typing import Dict, Any, Optional

from ..schemas.common import Timestamp
from .events import LogEvent


class StructuredLogger:
    """
    JSON structured logger for production observability.

    Wraps Python's logging module with structured metadata support.

    Attributes:
        component: Component name (e.g., "service", "gateway")
        logger: Underlying Python logger instance

    Thread Safety:
        Thread-safe via Python's logging module.
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None
    ):
        """
        Initialize structured logger.

        Args:
            component: Component identifier (e.g., "service")
            level: Logging level (default: INFO)
            logger_name: Custom logger name (default: areacheck.<component>)
        """
        self.component = component
        self.logger_name = logger_name or f"areacheck.{component}"
        self.logger = logging.getLogger(self.logger_name)
        self.logger.setLevel(level)

        # Configure JSON formatter if not already configured
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def _log(
        self,
        level: str,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Internal log method with structured format.

        Args:
            level: Log level (DEBUG, INFO, WARNING, ERROR)
            event: Typed log event
            message: Human-readable message
            metadata: Additional context
            exc_info: Exception summary (traceback attached for ERROR only)
        """
        log_level = getattr(logging, level)
        if not self.logger.isEnabledFor(log_level):
            return

        log_entry = {
            'timestamp': Timestamp.now().value,
            'level': level,
            'component': self.component,
            'event': event.value,
            'message': message,
        }

        if metadata:
            log_entry['metadata'] = metadata

        if exc_info:
            log_entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info)
            }

        self.logger.log(
            log_level,
            json.dumps(log_entry, default=str),
            exc_info=exc_info if level == 'ERROR' else None
        )

    def debug(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """Log DEBUG level message."""
        self._log('DEBUG', event, message, metadata)

    def info(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Log INFO level message.

        Example:
            >>> logger.info(
            ...     event=LogEvent.LEDGER_APPENDED,
            ...     message="Record appended",
            ...     metadata={'position': 41}
            ... )
        """
        self._log('INFO', event, message, metadata)

    def warning(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Log WARNING level message.

        Example:
            >>> logger.warning(
            ...     event=LogEvent.REQUEST_REJECTED,
            ...     message="Validation failed",
            ...     metadata={'errors': ['Parameter x must be a number.']}
            ... )
        """
        self._log('WARNING', event, message, metadata, exc_info)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None
    ) -> None:
        """
        Log ERROR level message.

        Example:
            >>> try:
            ...     ledger.append(record)
            ... except LedgerUnavailableError as e:
            ...     logger.error(
            ...         event=LogEvent.LEDGER_UNAVAILABLE,
            ...         message="Ledger lock timeout",
            ...         exc_info=e,
            ...     )
        """
        self._log('ERROR', event, message, metadata, exc_info)


class JSONFormatter(logging.Formatter):
    """
    Formatter used internally by StructuredLogger.

    The message from StructuredLogger is already JSON, so it is passed through.
    """

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(
    component: str,
    level: int = logging.INFO
) -> StructuredLogger:
    """
    Factory function to create configured StructuredLogger.

    Example:
        >>> logger = create_logger("gateway", level=logging.DEBUG)
    """
    return StructuredLogger(component=component, level=level)
