"""
Robust numeric primitives.

Normalizes messy user input (locale-formatted numbers, currency symbols,
empty strings) into finite floats and guards every arithmetic step against
division by zero, overflow and NaN propagation.

Two flavours are provided for each guarded operation:

- ``checked_*`` returns a ``NumericResult`` (``Ok`` or ``Degenerate``), so a
  caller can tell a legitimate zero from a degenerate computation.
- ``safe_*`` returns a plain float, substituting ``fallback`` (0.0 unless the
  caller passes another value) for any degenerate case. It never raises.
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping, Optional, Union

from fincalc.core.errors import CalculationError, ErrorKind
from fincalc.logging_config import get_logger

logger = get_logger(__name__)

MAX_SAFE_CALCULATION_VALUE = 1e15
MIN_SAFE_CALCULATION_VALUE = -1e15
DEFAULT_EPSILON = 1e-10
PRECISION_DECIMAL_PLACES = 10

_NULL_WORDS = {"nan", "null", "undefined", "none", "nil", "empty"}
_NUMERIC_KEYS = ("value", "amount", "number", "val", "price", "cost", "total", "sum")
_CURRENCY_RE = re.compile(r"[₠-⃏$¢£¤¥฿]")
# leading "Rs."/"Rs"/"INR"; the dot after "Rs" is not a decimal point
_CURRENCY_PREFIX_RE = re.compile(r"^(?:rs\.?|inr)\s*", re.IGNORECASE)
_SEPARATOR_RE = re.compile(r"[,\s'_]")
_NON_NUMERIC_RE = re.compile(r"[^\d.\-]")


class DegenerateReason(str, Enum):
    INVALID_OPERAND = "invalid_operand"
    DIVISION_BY_ZERO = "division_by_zero"
    OVERFLOW = "overflow"
    COMPLEX_RESULT = "complex_result"


@dataclass(frozen=True)
class Ok:
    value: float

    @property
    def ok(self) -> bool:
        return True

    def value_or(self, fallback: float) -> float:
        return self.value


@dataclass(frozen=True)
class Degenerate:
    reason: DegenerateReason
    detail: str = ""

    @property
    def ok(self) -> bool:
        return False

    def value_or(self, fallback: float) -> float:
        return fallback


NumericResult = Union[Ok, Degenerate]


@dataclass(frozen=True)
class ParsedNumber:
    is_valid: bool
    value: float
    error: Optional[str] = None


# ============================================================================
# PARSING
# ============================================================================

def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _parse_string(text: str) -> Optional[float]:
    trimmed = text.strip()
    if trimmed in ("", "-", ".") or trimmed.lower() in _NULL_WORDS:
        return None

    unprefixed = _CURRENCY_PREFIX_RE.sub("", _CURRENCY_RE.sub("", trimmed).strip())
    cleaned = _SEPARATOR_RE.sub("", unprefixed)
    try:
        # float() understands scientific notation ("1e+20"); it also accepts
        # "inf"/"nan", which the finiteness check below rejects.
        return _finite_or_none(float(cleaned))
    except ValueError:
        pass

    digits = _NON_NUMERIC_RE.sub("", cleaned)
    if digits in ("", "-", "."):
        return None
    if digits.count(".") > 1:
        head, _, tail = digits.partition(".")
        digits = head + "." + tail.replace(".", "")
    # a minus sign only counts in leading position
    digits = digits[0] + digits[1:].replace("-", "") if digits else digits
    try:
        return _finite_or_none(float(digits))
    except ValueError:
        return None


def _parse(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        try:
            return _finite_or_none(float(value))
        except OverflowError:
            return None
    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        return _finite_or_none(float(value))
    if isinstance(value, str):
        return _parse_string(value)
    if isinstance(value, (list, tuple)):
        return _parse(value[0]) if value else None
    if isinstance(value, Mapping):
        for key in _NUMERIC_KEYS:
            if key in value and value[key] is not None:
                return _parse(value[key])
        return None
    return None


def parse_number(value: Any) -> NumericResult:
    """Checked parse: ``Ok(float)`` or ``Degenerate(INVALID_OPERAND)``."""
    parsed = _parse(value)
    if parsed is None:
        return Degenerate(DegenerateReason.INVALID_OPERAND, f"cannot parse {value!r}")
    return Ok(parsed)


def parse_robust_number(value: Any, fallback: float = 0.0) -> float:
    """
    Convert any input to a finite float.

    Accepts numbers, Decimals, booleans, strings with currency symbols or
    thousands separators ("₹5,00,000", "$1,234.50", "1 000"), scientific
    notation, single-element sequences and mappings carrying a numeric
    ``value``/``amount``/... key. Anything unparseable or non-finite yields
    ``fallback``.

    Examples:
        >>> parse_robust_number("₹1,50,000")
        150000.0
        >>> parse_robust_number("abc")
        0.0
        >>> parse_robust_number("", fallback=1.0)
        1.0
    """
    return parse_number(value).value_or(fallback)


# ============================================================================
# CHECKED ARITHMETIC
# ============================================================================

def _bounded(result: float, limit: float, operation: str) -> NumericResult:
    if not math.isfinite(result) or abs(result) > limit:
        return Degenerate(DegenerateReason.OVERFLOW, f"{operation} result {result!r} outside ±{limit:g}")
    return Ok(result)


def _log_degenerate(operation: str, outcome: NumericResult) -> NumericResult:
    if not outcome.ok:
        logger.debug("numeric_degenerate", operation=operation, reason=outcome.reason.value, detail=outcome.detail)
    return outcome


def checked_divide(numerator: Any, denominator: Any, epsilon: float = DEFAULT_EPSILON,
                   limit: float = MAX_SAFE_CALCULATION_VALUE) -> NumericResult:
    num = parse_robust_number(numerator)
    den = parse_robust_number(denominator)
    if abs(den) < epsilon:
        return _log_degenerate("divide", Degenerate(DegenerateReason.DIVISION_BY_ZERO, f"{num!r} / {den!r}"))
    return _log_degenerate("divide", _bounded(num / den, limit, "divide"))


def checked_multiply(a: Any, b: Any, limit: float = MAX_SAFE_CALCULATION_VALUE) -> NumericResult:
    return _log_degenerate("multiply", _bounded(parse_robust_number(a) * parse_robust_number(b), limit, "multiply"))


def checked_add(*values: Any, limit: float = MAX_SAFE_CALCULATION_VALUE) -> NumericResult:
    total = 0.0
    for value in values:
        total += parse_robust_number(value)
        if not math.isfinite(total) or abs(total) > limit:
            return _log_degenerate("add", _bounded(total, limit, "add"))
    return Ok(total)


def checked_subtract(a: Any, b: Any, limit: float = MAX_SAFE_CALCULATION_VALUE) -> NumericResult:
    return _log_degenerate("subtract", _bounded(parse_robust_number(a) - parse_robust_number(b), limit, "subtract"))


def checked_power(base: Any, exponent: Any, epsilon: float = DEFAULT_EPSILON,
                  limit: float = MAX_SAFE_CALCULATION_VALUE) -> NumericResult:
    b = parse_robust_number(base)
    e = parse_robust_number(exponent)

    if abs(e) < epsilon:
        return Ok(1.0)
    if abs(b) < epsilon:
        if e > 0:
            return Ok(0.0)
        return _log_degenerate("power", Degenerate(DegenerateReason.DIVISION_BY_ZERO, f"0 ** {e!r}"))
    if b < 0 and not float(e).is_integer():
        return _log_degenerate("power", Degenerate(DegenerateReason.COMPLEX_RESULT, f"{b!r} ** {e!r}"))
    try:
        result = math.pow(b, e)
    except OverflowError:
        return _log_degenerate("power", Degenerate(DegenerateReason.OVERFLOW, f"{b!r} ** {e!r}"))
    return _log_degenerate("power", _bounded(result, limit, "power"))


# ============================================================================
# SAFE (FALLBACK) ARITHMETIC
# ============================================================================

def safe_divide(numerator: Any, denominator: Any, fallback: float = 0.0) -> float:
    """
    ``numerator / denominator``, or ``fallback`` (0.0) when the denominator is
    effectively zero or the quotient is not finite.

    A 0.0 result is ambiguous: use ``checked_divide`` when the caller must
    distinguish a zero quotient from a division by zero.
    """
    return checked_divide(numerator, denominator).value_or(fallback)


def safe_multiply(a: Any, b: Any, fallback: float = 0.0) -> float:
    return checked_multiply(a, b).value_or(fallback)


def safe_add(*values: Any, fallback: float = 0.0) -> float:
    return checked_add(*values).value_or(fallback)


def safe_subtract(a: Any, b: Any, fallback: float = 0.0) -> float:
    return checked_subtract(a, b).value_or(fallback)


def safe_power(base: Any, exponent: Any, fallback: float = 0.0) -> float:
    """
    ``base ** exponent`` guarded against a zero base with a negative exponent,
    a negative base with a fractional exponent and overflow.
    """
    return checked_power(base, exponent).value_or(fallback)


def require_value(outcome: NumericResult, quantity: str) -> float:
    """Unwrap ``outcome`` or raise a ``DEGENERATE`` calculation error naming ``quantity``."""
    if outcome.ok:
        return outcome.value
    raise CalculationError([f"{quantity} is out of range ({outcome.detail})"], kind=ErrorKind.DEGENERATE)


# ============================================================================
# HELPERS
# ============================================================================

def is_effectively_zero(value: Any, epsilon: float = DEFAULT_EPSILON) -> bool:
    return abs(parse_robust_number(value)) < epsilon


def round_to_precision(value: Any, digits: int = 2) -> float:
    """
    Round half-up on the decimal representation of ``value``.

    Unlike ``round()`` this does not suffer from binary artifacts:
    ``round_to_precision(2.675, 2) == 2.68``.
    """
    parsed = parse_robust_number(value)
    quantizer = Decimal(1).scaleb(-digits)
    try:
        return float(Decimal(repr(parsed)).quantize(quantizer, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return parsed


def percentage_to_decimal(percentage: Any) -> float:
    return parse_robust_number(percentage) / 100


def decimal_to_percentage(decimal: Any) -> float:
    return parse_robust_number(decimal) * 100


def clamp_number(value: Any, minimum: float, maximum: float) -> float:
    return min(max(parse_robust_number(value), minimum), maximum)


def is_positive_number(value: Any) -> bool:
    return parse_robust_number(value) > 0


def is_non_negative_number(value: Any) -> bool:
    return parse_robust_number(value) >= 0


def validate_safe_number(value: Any) -> ParsedNumber:
    """Parse ``value`` and check it lies in the supported calculation range."""
    parsed = parse_robust_number(value)
    if parsed > MAX_SAFE_CALCULATION_VALUE:
        return ParsedNumber(False, parsed, f"Number is too large. Maximum supported value is {MAX_SAFE_CALCULATION_VALUE:g}")
    if parsed < MIN_SAFE_CALCULATION_VALUE:
        return ParsedNumber(False, parsed, f"Number is too small. Minimum supported value is {MIN_SAFE_CALCULATION_VALUE:g}")
    return ParsedNumber(True, parsed)


def parse_and_validate(
    value: Any,
    minimum: float = MIN_SAFE_CALCULATION_VALUE,
    maximum: float = MAX_SAFE_CALCULATION_VALUE,
    allow_zero: bool = True,
    allow_negative: bool = True,
    decimals: int = PRECISION_DECIMAL_PLACES,
    ) -> ParsedNumber:
    """
    Parse a raw field value and check it against simple range rules.

    Returns:
        ParsedNumber with ``is_valid`` False and a user-facing ``error`` when a
        rule is broken; ``value`` always holds the parsed, rounded number.
    """
    rounded = round_to_precision(parse_robust_number(value), decimals)

    if not allow_zero and is_effectively_zero(rounded):
        return ParsedNumber(False, rounded, "Zero is not allowed")
    if not allow_negative and rounded < 0:
        return ParsedNumber(False, rounded, "Negative numbers are not allowed")
    if rounded < minimum:
        return ParsedNumber(False, rounded, f"Value must be at least {minimum:g}")
    if rounded > maximum:
        return ParsedNumber(False, rounded, f"Value cannot exceed {maximum:g}")
    return ParsedNumber(True, rounded)
