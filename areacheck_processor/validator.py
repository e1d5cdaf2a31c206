"""
Input Validator - parses and bounds-checks raw request fields.

Pure function of its inputs: no state, no side effects, safe to call from
any worker thread. Every violation is reported, in X, Y, R order, so the
caller sees all problems in one round trip.

Rules:
- x: real number (``.`` or ``,`` decimal separator) in [x_min, x_max]
- y: real number from the configured allowed set
- r: real number from the configured allowed set
- absent field: malformed request ("Missing parameter: <name>")
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterable, Optional, Tuple

from areacheck_processor.config import DEFAULT_ENGINE_CONFIG, EngineConfig

# Tolerance for matching parsed values against the allowed sets
MATCH_EPS = 1e-9

# Plain ASCII decimal literal; no digit separators, no non-ASCII digits
NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


class ValidationErrorCode(str, Enum):
    """Validation error taxonomy."""
    INVALID_X = "invalid_x"
    INVALID_Y = "invalid_y"
    INVALID_R = "invalid_r"
    MALFORMED_REQUEST = "malformed_request"


@dataclass(frozen=True)
class ValidationError:
    """One human-readable validation failure."""
    code: ValidationErrorCode
    message: str


@dataclass(frozen=True)
class NormalizedInput:
    """Validated (x, y, r) triple, guaranteed inside the configured domain."""
    x: float
    y: float
    r: float


@dataclass(frozen=True)
class ValidationResult:
    """
    Either a NormalizedInput or the full list of errors.

    Attributes:
        value: Normalized input (None when invalid)
        errors: Errors in X, Y, R order (empty when valid)
    """
    value: Optional[NormalizedInput] = None
    errors: Tuple[ValidationError, ...] = field(default_factory=tuple)

    @property
    def is_valid(self) -> bool:
        return not self.errors and self.value is not None

    @property
    def messages(self) -> Tuple[str, ...]:
        return tuple(error.message for error in self.errors)


def _format_number(value: float) -> str:
    return f"{value:g}"


def _format_set(values: Iterable[float]) -> str:
    return ", ".join(_format_number(v) for v in sorted(values))


def parse_decimal(raw: str) -> Optional[Decimal]:
    """
    Parse a real number, accepting ``,`` as decimal separator.

    Returns:
        Finite Decimal, or None if the text is not a finite number
    """
    text = raw.strip().replace(",", ".")
    if not NUMBER_PATTERN.fullmatch(text):
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def _matches(value: float, allowed: Iterable[float]) -> bool:
    return any(abs(value - candidate) < MATCH_EPS for candidate in allowed)


def _validate_x(raw_x: Optional[str], config: EngineConfig, errors: list) -> Optional[float]:
    if raw_x is None:
        errors.append(ValidationError(ValidationErrorCode.MALFORMED_REQUEST, "Missing parameter: x"))
        return None

    x = parse_decimal(raw_x)
    if x is None:
        errors.append(ValidationError(ValidationErrorCode.INVALID_X, "Parameter x must be a number."))
        return None

    # Exact decimal comparison: "5.0000000001" is out of range
    if x < Decimal(repr(config.x_min)) or x > Decimal(repr(config.x_max)):
        errors.append(ValidationError(
            ValidationErrorCode.INVALID_X,
            f"Parameter x must be between {_format_number(config.x_min)} "
            f"and {_format_number(config.x_max)}.",
        ))
        return None

    return float(x)


def _validate_member(
    name: str,
    raw: Optional[str],
    allowed: Tuple[float, ...],
    code: ValidationErrorCode,
    out_of_set_message: str,
    errors: list,
) -> Optional[float]:
    if raw is None:
        errors.append(ValidationError(ValidationErrorCode.MALFORMED_REQUEST, f"Missing parameter: {name}"))
        return None

    parsed = parse_decimal(raw)
    if parsed is None:
        errors.append(ValidationError(code, f"Parameter {name} must be a number."))
        return None

    value = float(parsed)
    if not _matches(value, allowed):
        errors.append(ValidationError(code, out_of_set_message))
        return None

    # Snap to the canonical member so "2,0" and "2" produce identical records
    return min(allowed, key=lambda candidate: abs(candidate - value))


def validate(
    raw_x: Optional[str],
    raw_y: Optional[str],
    raw_r: Optional[str],
    config: EngineConfig = DEFAULT_ENGINE_CONFIG,
) -> ValidationResult:
    """
    Validate raw request fields.

    Args:
        raw_x, raw_y, raw_r: Raw text values (None when absent)
        config: Domain bounds and allowed sets

    Returns:
        ValidationResult with a NormalizedInput, or every error found

    Example:
        >>> validate("2", "1", "2").value
        NormalizedInput(x=2.0, y=1.0, r=2.0)
        >>> validate("abc", "1", "1.2").messages
        ('Parameter x must be a number.', 'Parameter r is not within the allowed set (1, 1.5, 2, 2.5, 3).')
    """
    errors: list = []

    x = _validate_x(raw_x, config, errors)
    y = _validate_member(
        "y", raw_y, config.allowed_y, ValidationErrorCode.INVALID_Y,
        f"Parameter y must be one of ({_format_set(config.allowed_y)}).",
        errors,
    )
    r = _validate_member(
        "r", raw_r, config.allowed_r, ValidationErrorCode.INVALID_R,
        f"Parameter r is not within the allowed set ({_format_set(config.allowed_r)}).",
        errors,
    )

    if errors:
        return ValidationResult(errors=tuple(errors))
    return ValidationResult(value=NormalizedInput(x=x, y=y, r=r))
