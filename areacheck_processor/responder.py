"""
Responder - assembles one request's outcome into a ResponseEnvelope.

No side effects beyond structuring the envelope. The caller decides when
the history snapshot is taken: after the append on success (so the
request's own record is the newest entry), without appending on failure.
"""

from typing import Iterable, Sequence, Union

from areacheck_mqtt.schemas import EvaluationRecord, ResponseEnvelope

Outcome = Union[EvaluationRecord, Sequence[str]]


def build_response(outcome: Outcome, history: Iterable[EvaluationRecord]) -> ResponseEnvelope:
    """
    Build the response envelope.

    Args:
        outcome: The request's record on success, or its error messages
        history: Ledger snapshot to attach

    Returns:
        ResponseEnvelope with status ok or error

    Raises:
        ValueError: If outcome is an empty error list
    """
    if isinstance(outcome, EvaluationRecord):
        return ResponseEnvelope.ok(outcome, history)

    if isinstance(outcome, str):
        return ResponseEnvelope.error([outcome], history)

    return ResponseEnvelope.error(list(outcome), history)
