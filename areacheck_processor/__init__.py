"""
areacheck_processor - Request-processing engine for point hit checks.

This package validates raw (x, y, R) fields, evaluates the membership area,
records outcomes in a shared history ledger and assembles the response
envelope.

Architecture:
- HitCheckService: Per-request orchestrator
- validate(): Pure input validator
- HistoryLedger: Thread-safe append-only history
- build_response(): Envelope assembly
- ServiceConfig / EngineConfig: Configuration management

Threading Model:
- Gateway worker threads call HitCheckService.handle() concurrently
- HistoryLedger is the only shared mutable state (internal lock)
"""

from areacheck_processor.config import EngineConfig, MQTTConfig, ServiceConfig, DEFAULT_ENGINE_CONFIG
from areacheck_processor.validator import (
    NormalizedInput,
    ValidationError,
    ValidationErrorCode,
    ValidationResult,
    validate,
)
from areacheck_processor.ledger import HistoryLedger, LedgerUnavailableError
from areacheck_processor.responder import build_response
from areacheck_processor.service import HitCheckService, RequestState

__all__ = [
    "EngineConfig",
    "MQTTConfig",
    "ServiceConfig",
    "DEFAULT_ENGINE_CONFIG",
    "NormalizedInput",
    "ValidationError",
    "ValidationErrorCode",
    "ValidationResult",
    "validate",
    "HistoryLedger",
    "LedgerUnavailableError",
    "build_response",
    "HitCheckService",
    "RequestState",
]
