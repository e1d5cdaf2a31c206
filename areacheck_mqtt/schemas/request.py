"""
Evaluation Request Message Schema
=================================

Bounded Context: Inbound Request Data Structures

The gateway decodes an MQTT payload into a RequestMessage. The coordinate
fields stay raw strings: parsing and bounds checks belong to the validator.

Wire shape:
    {"request_id": "a1b2", "reply_to": "clients/7/replies",
     "x": "2", "y": "1", "r": "2"}
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .common import optional_str


@dataclass(frozen=True)
class RequestMessage:
    """
    One inbound point check request.

    Attributes:
        x, y, r: Raw field values (None when absent)
        request_id: Optional correlation id echoed in the reply
        reply_to: Optional topic for the reply (default topic otherwise)
    """
    x: Optional[str] = None
    y: Optional[str] = None
    r: Optional[str] = None
    request_id: Optional[str] = None
    reply_to: Optional[str] = None

    def fields(self) -> Dict[str, Optional[str]]:
        """Raw x, y, r fields as consumed by the service."""
        return {'x': self.x, 'y': self.y, 'r': self.r}

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to JSON-compatible dict (absent fields omitted)."""
        result = {
            'request_id': self.request_id,
            'reply_to': self.reply_to,
            'x': self.x,
            'y': self.y,
            'r': self.r,
        }
        return {key: value for key, value in result.items() if value is not None}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RequestMessage':
        """Deserialize from dict.

        Missing coordinate fields are kept as None so the validator can
        report every one of them.

        Raises:
            ValueError: If data is not a mapping
        """
        if not isinstance(data, dict):
            raise ValueError(
                f"Request payload must be a JSON object, got {type(data).__name__}"
            )
        return cls(
            x=optional_str(data.get('x')),
            y=optional_str(data.get('y')),
            r=optional_str(data.get('r')),
            request_id=optional_str(data.get('request_id')),
            reply_to=optional_str(data.get('reply_to')),
        )
