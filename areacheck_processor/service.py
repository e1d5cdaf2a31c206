"""
Hit Check Service - per-request orchestrator.

This module provides the HitCheckService class which sequences one request
through validation, area evaluation, history recording and response
assembly.

Request lifecycle:
    RECEIVED → VALIDATED → EVALUATED → RECORDED → RESPONDED
    RECEIVED → VALIDATED (failed) → RESPONDED (error)

Threading Model:
- handle() is called concurrently from the gateway worker pool
- Validator and area are stateless; nothing to synchronize
- HistoryLedger is the only shared state (internal lock)

Timing:
- processingTimeMs: monotonic clock, from RECEIVED to end of evaluation
  (ledger append and serialization are excluded)
- currentTime: wall clock, captured when the record is built
"""

import time
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple

from areacheck_zone import DEFAULT_AREA, MembershipArea, evaluate
from areacheck_mqtt.logging import LogEvent, StructuredLogger, create_logger
from areacheck_mqtt.schemas import EvaluationRecord, ResponseEnvelope, local_now
from areacheck_mqtt.schemas.common import optional_str
from areacheck_processor.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from areacheck_processor.ledger import HistoryLedger, LedgerUnavailableError
from areacheck_processor.responder import build_response
from areacheck_processor.validator import validate


class RequestState(str, Enum):
    """Request lifecycle states (emitted in log metadata)."""
    RECEIVED = "received"
    VALIDATED = "validated"
    EVALUATED = "evaluated"
    RECORDED = "recorded"
    RESPONDED = "responded"


class HitCheckService:
    """
    Orchestrates one point check per call.

    The ledger is injected, never global: whoever builds the service owns
    the history.

    Usage:
        ledger = HistoryLedger()
        service = HitCheckService(ledger=ledger)

        envelope = service.handle("2", "1", "2")
        envelope.to_dict()
        # {'status': 'ok', 'data': {...}, 'history': [...]}
    """

    def __init__(
        self,
        ledger: HistoryLedger,
        config: EngineConfig = DEFAULT_ENGINE_CONFIG,
        area: MembershipArea = DEFAULT_AREA,
        logger: Optional[StructuredLogger] = None,
        monotonic_ns: Callable[[], int] = time.monotonic_ns,
        wall_clock: Callable[[], datetime] = local_now,
    ):
        """
        Initialize the service.

        Args:
            ledger: History ledger shared by all requests
            config: Domain bounds and history settings
            area: Membership area (swappable)
            logger: Structured logger (default: component "service")
            monotonic_ns: Monotonic clock for durations
            wall_clock: Wall clock for record timestamps
        """
        self.ledger = ledger
        self.config = config
        self.area = area
        self.logger = logger or create_logger("service")
        self._monotonic_ns = monotonic_ns
        self._wall_clock = wall_clock

    def handle_request(self, fields: Any) -> ResponseEnvelope:
        """
        Handle a request given as a mapping with ``x``, ``y`` and ``r``.

        Non-string values are stringified; absent keys are reported by the
        validator. A non-mapping payload yields a single malformed-request
        error.
        """
        if not isinstance(fields, Mapping):
            return self._fail(
                ["Malformed request: expected fields x, y, r."],
                {'payload_type': type(fields).__name__},
            )

        return self.handle(
            optional_str(fields.get('x')),
            optional_str(fields.get('y')),
            optional_str(fields.get('r')),
        )

    def handle(
        self,
        raw_x: Optional[str],
        raw_y: Optional[str],
        raw_r: Optional[str],
    ) -> ResponseEnvelope:
        """
        Run one request through the lifecycle.

        Never raises: every failure becomes an error envelope.
        """
        started_ns = self._monotonic_ns()
        state = RequestState.RECEIVED
        limit = self.config.response_history_limit

        self.logger.debug(
            event=LogEvent.REQUEST_RECEIVED,
            message="Request received",
            metadata={'x': raw_x, 'y': raw_y, 'r': raw_r},
        )

        try:
            result = validate(raw_x, raw_y, raw_r, self.config)
            state = RequestState.VALIDATED
            if not result.is_valid:
                self.logger.info(
                    event=LogEvent.REQUEST_REJECTED,
                    message="Validation failed",
                    metadata={
                        'state': state.value,
                        'codes': [error.code.value for error in result.errors],
                        'errors': list(result.messages),
                    },
                )
                return self._respond(result.messages, self._readable_history())

            point = result.value
            hit = evaluate(point.x, point.y, point.r, self.area)
            state = RequestState.EVALUATED
            elapsed_ms = max(0, (self._monotonic_ns() - started_ns) // 1_000_000)

            self.logger.info(
                event=LogEvent.POINT_EVALUATED,
                message="Point evaluated",
                metadata={
                    'x': point.x,
                    'y': point.y,
                    'r': point.r,
                    'hit': hit,
                    'processing_time_ms': elapsed_ms,
                },
            )

            record = EvaluationRecord(
                x=point.x,
                y=point.y,
                r=point.r,
                hit=hit,
                evaluated_at=self._wall_clock(),
                processing_time_ms=elapsed_ms,
            )
            position, history = self.ledger.append_and_snapshot(record, limit)
            state = RequestState.RECORDED

            self.logger.debug(
                event=LogEvent.LEDGER_APPENDED,
                message="Record appended",
                metadata={'position': position, 'state': state.value},
            )
            return self._respond(record, history)

        except LedgerUnavailableError as e:
            self.logger.error(
                event=LogEvent.LEDGER_UNAVAILABLE,
                message="History ledger unavailable",
                metadata={'state': state.value},
                exc_info=e,
            )
            return self._fail([f"History ledger unavailable: {e}"], {'state': state.value})

        except Exception as e:
            self.logger.error(
                event=LogEvent.INTERNAL_ERROR,
                message="Unexpected error while handling request",
                metadata={'state': state.value},
                exc_info=e,
            )
            return self._fail([f"Internal error: {e}"], {'state': state.value})

    def _respond(
        self,
        outcome: Any,
        history: Tuple[EvaluationRecord, ...],
    ) -> ResponseEnvelope:
        envelope = build_response(outcome, history)
        self.logger.debug(
            event=LogEvent.RESPONSE_BUILT,
            message="Response built",
            metadata={
                'state': RequestState.RESPONDED.value,
                'status': envelope.status.value,
                'history_size': len(envelope.history),
            },
        )
        return envelope

    def _readable_history(self) -> Tuple[EvaluationRecord, ...]:
        """Current history, or empty when the ledger cannot be locked in time."""
        try:
            return self.ledger.snapshot(self.config.response_history_limit)
        except LedgerUnavailableError as e:
            self.logger.warning(
                event=LogEvent.LEDGER_UNAVAILABLE,
                message="History omitted from response",
                exc_info=e,
            )
            return ()

    def _fail(self, messages: Sequence[str], metadata: Dict[str, Any]) -> ResponseEnvelope:
        """Error envelope with whatever history can still be read."""
        history = self._readable_history()
        self.logger.debug(
            event=LogEvent.RESPONSE_BUILT,
            message="Error response built",
            metadata={**metadata, 'errors': list(messages)},
        )
        return ResponseEnvelope.error(messages, history)

    def get_stats(self) -> Dict[str, Any]:
        """Ledger statistics plus the active domain configuration."""
        return {
            **self.ledger.get_stats(),
            'x_range': [self.config.x_min, self.config.x_max],
            'allowed_y': list(self.config.allowed_y),
            'allowed_r': list(self.config.allowed_r),
        }
