"""
Areacheck MQTT Communication Package
====================================

Bounded Context: Communication Protocol for Point Hit Checks

This package provides the wire schemas, structured logging and the MQTT
request gateway that puts the hit check service on a broker.

Architecture:
- schemas/: Immutable data structures with type safety
- logging/: Structured JSON logging for observability
- gateway.py: Request/reply adapter (RequestGateway)

Public API
----------
Schemas:
    Timestamp, RequestMessage
    EvaluationRecord, ResponseStatus, ResponseEnvelope

Gateway:
    RequestGateway

Logging:
    LogEvent, StructuredLogger, create_logger

Example (service side):
    >>> from areacheck_mqtt import RequestGateway, create_logger
    >>> gateway = RequestGateway(
    ...     broker_host="localhost",
    ...     request_topic="areacheck/lab_01/requests",
    ...     response_topic="areacheck/lab_01/responses",
    ...     handler=service.handle_request,
    ...     logger=create_logger("gateway"),
    ... )
    >>> gateway.connect()
"""

from .schemas import (
    Timestamp,
    RequestMessage,
    EvaluationRecord,
    ResponseStatus,
    ResponseEnvelope,
)
from .logging import LogEvent, StructuredLogger, create_logger
from .gateway import RequestGateway

__all__ = [
    # Schemas
    'Timestamp',
    'RequestMessage',
    'EvaluationRecord',
    'ResponseStatus',
    'ResponseEnvelope',
    # Gateway
    'RequestGateway',
    # Logging
    'LogEvent',
    'StructuredLogger',
    'create_logger',
]
