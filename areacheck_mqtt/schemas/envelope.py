"""
Response Envelope Schema
========================

Bounded Context: Response Data Structures

Message Flow:
    HitCheckService → ResponseEnvelope → RequestGateway → MQTT → Client

Wire shapes:
    ok:    {"status": "ok",    "data": {...record...}, "history": [...]}
    error: {"status": "error", "errors": ["..."],      "history": [...]}

History is ordered oldest → newest; display order is the client's concern.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from .record import EvaluationRecord


class ResponseStatus(str, Enum):
    """Envelope status."""
    OK = "ok"
    ERROR = "error"


@dataclass(frozen=True)
class ResponseEnvelope:
    """
    Outcome of one request plus the history snapshot taken for it.

    Attributes:
        status: OK or ERROR
        data: The request's own record (OK only)
        errors: Human-readable messages (ERROR only), in X, Y, R order
        history: Ledger snapshot, oldest first

    Invariants:
        - OK has data and no errors
        - ERROR has no data and at least one error

    Example:
        >>> envelope = ResponseEnvelope.error(["Parameter x must be a number."], history=())
        >>> envelope.to_dict()
        {'status': 'error', 'errors': ['Parameter x must be a number.'], 'history': []}
    """
    status: ResponseStatus
    data: Optional[EvaluationRecord] = None
    errors: Tuple[str, ...] = field(default_factory=tuple)
    history: Tuple[EvaluationRecord, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate invariants."""
        object.__setattr__(self, 'errors', tuple(self.errors))
        object.__setattr__(self, 'history', tuple(self.history))

        if self.status == ResponseStatus.OK:
            if self.data is None:
                raise ValueError("OK envelope requires data")
            if self.errors:
                raise ValueError("OK envelope must not carry errors")
        else:
            if self.data is not None:
                raise ValueError("ERROR envelope must not carry data")
            if not self.errors:
                raise ValueError("ERROR envelope requires at least one error")

    @classmethod
    def ok(
        cls,
        record: EvaluationRecord,
        history: Iterable[EvaluationRecord],
    ) -> 'ResponseEnvelope':
        return cls(status=ResponseStatus.OK, data=record, history=tuple(history))

    @classmethod
    def error(
        cls,
        messages: Iterable[str],
        history: Iterable[EvaluationRecord],
    ) -> 'ResponseEnvelope':
        return cls(status=ResponseStatus.ERROR, errors=tuple(messages), history=tuple(history))

    @property
    def is_ok(self) -> bool:
        return self.status == ResponseStatus.OK

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        result: Dict[str, Any] = {'status': self.status.value}
        if self.is_ok:
            result['data'] = self.data.to_dict()
        else:
            result['errors'] = list(self.errors)
        result['history'] = [record.to_dict() for record in self.history]
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ResponseEnvelope':
        """Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            status = ResponseStatus(data['status'])
            history = [EvaluationRecord.from_dict(item) for item in data.get('history', [])]
            if status == ResponseStatus.OK:
                return cls.ok(EvaluationRecord.from_dict(data['data']), history)
            return cls.error([str(message) for message in data['errors']], history)
        except KeyError as e:
            raise ValueError(f"Missing required ResponseEnvelope field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid ResponseEnvelope data: {e}")
