"""
Evaluation Record Schema
========================

Bounded Context: History Data Structures

One EvaluationRecord is created per successful evaluation and then owned by
the history ledger. It is never mutated.

Wire shape:
    {"x": 2.0, "y": 1.0, "r": 2.0, "hit": false,
     "currentTime": "2026-10-19T14:03:07.512+03:00", "processingTimeMs": 0}
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from .common import format_timestamp, parse_timestamp


@dataclass(frozen=True)
class EvaluationRecord:
    """
    Immutable outcome of one point check.

    Attributes:
        x: Normalized X coordinate
        y: Normalized Y coordinate
        r: Normalized radius
        hit: True if the point lies inside the area
        evaluated_at: Wall-clock time the record was built (timezone-aware)
        processing_time_ms: Monotonic duration of validation + evaluation

    Invariants:
        - processing_time_ms >= 0
        - evaluated_at carries a UTC offset
    """
    x: float
    y: float
    r: float
    hit: bool
    evaluated_at: datetime
    processing_time_ms: int

    def __post_init__(self):
        """Validate invariants."""
        if self.processing_time_ms < 0:
            raise ValueError(
                f"processing_time_ms must be >= 0, got {self.processing_time_ms}"
            )
        if self.evaluated_at.tzinfo is None or self.evaluated_at.utcoffset() is None:
            raise ValueError("evaluated_at must be timezone-aware")

    @property
    def current_time(self) -> str:
        """ISO 8601 string with milliseconds and offset."""
        return format_timestamp(self.evaluated_at)

    @property
    def key(self) -> tuple:
        """Identity used for idempotent history merges."""
        return (self.x, self.y, self.r, self.current_time, self.processing_time_ms)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict."""
        return {
            'x': self.x,
            'y': self.y,
            'r': self.r,
            'hit': self.hit,
            'currentTime': self.current_time,
            'processingTimeMs': self.processing_time_ms,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EvaluationRecord':
        """Deserialize from dict.

        Raises:
            ValueError: If required fields missing or invalid
        """
        try:
            hit = data['hit']
            if not isinstance(hit, bool):
                raise TypeError(f"hit must be a boolean, got {hit!r}")
            return cls(
                x=float(data['x']),
                y=float(data['y']),
                r=float(data['r']),
                hit=hit,
                evaluated_at=parse_timestamp(str(data['currentTime'])),
                processing_time_ms=int(data['processingTimeMs']),
            )
        except KeyError as e:
            raise ValueError(f"Missing required EvaluationRecord field: {e}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid EvaluationRecord data: {e}")
