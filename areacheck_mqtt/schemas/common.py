"""
Common Schema Types
==================

Bounded Context: Shared Data Structures

This module defines common types used across request and response messages.

Design Principles:
- Immutability: frozen=True prevents accidental mutation
- Type Safety: All fields explicitly typed
- Serialization: ISO 8601 strings on the wire
- Validation: Constructor validates invariants

Types:
- Timestamp: ISO 8601 timestamp wrapper (millisecond precision, explicit offset)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


def local_now() -> datetime:
    """Current wall-clock time as a timezone-aware datetime in the local zone."""
    return datetime.now().astimezone()


def format_timestamp(dt: datetime) -> str:
    """
    Format an aware datetime as ISO 8601 with milliseconds and offset.

    Raises:
        ValueError: If dt is naive (no offset to render)

    Example:
        >>> format_timestamp(datetime(2026, 10, 19, 14, 3, 7, 512000, tzinfo=timezone.utc))
        '2026-10-19T14:03:07.512+00:00'
    """
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise ValueError(f"Timestamp must be timezone-aware, got naive {dt!r}")
    return dt.isoformat(timespec="milliseconds")


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp with offset (``Z`` accepted as UTC).

    Raises:
        ValueError: If value is not ISO 8601 or carries no offset
    """
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError(f"Invalid ISO timestamp: {value}") from e
    if dt.tzinfo is None:
        raise ValueError(f"Timestamp has no offset: {value}")
    return dt


@dataclass(frozen=True)
class Timestamp:
    """
    Immutable ISO 8601 timestamp wrapper.

    Attributes:
        value: ISO 8601 formatted timestamp string

    Example:
        >>> ts = Timestamp.now()
        >>> ts.value
        '2026-10-19T14:03:07.512+03:00'
    """
    value: str

    @classmethod
    def now(cls) -> 'Timestamp':
        """Create timestamp from current local time."""
        return cls(value=format_timestamp(local_now()))

    def to_datetime(self) -> datetime:
        """Parse to datetime object.

        Raises:
            ValueError: If timestamp format invalid
        """
        return parse_timestamp(self.value)


def optional_str(value: Optional[object]) -> Optional[str]:
    """Stringify a raw field, keeping None as None."""
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)
