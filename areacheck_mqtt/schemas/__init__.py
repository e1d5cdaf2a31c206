"""
Areacheck MQTT Schemas
=====================

Bounded Context: Data Structures

This module defines immutable, typed data structures for request and
response messages.

Design:
- Frozen dataclasses (immutability)
- Type hints for all fields
- to_dict() for JSON serialization
- from_dict() for deserialization

Public API
----------
Common Types:
    Timestamp: ISO 8601 timestamp wrapper
    format_timestamp, parse_timestamp, local_now

Request Types:
    RequestMessage: Raw x, y, r fields plus correlation data

Response Types:
    EvaluationRecord: One history entry
    ResponseStatus: Enum (OK, ERROR)
    ResponseEnvelope: Verdict or errors, plus history snapshot
"""

from .common import Timestamp, format_timestamp, parse_timestamp, local_now
from .record import EvaluationRecord
from .envelope import ResponseStatus, ResponseEnvelope
from .request import RequestMessage

__all__ = [
    # Common types
    'Timestamp',
    'format_timestamp',
    'parse_timestamp',
    'local_now',
    # Request types
    'RequestMessage',
    # Response types
    'EvaluationRecord',
    'ResponseStatus',
    'ResponseEnvelope',
]
