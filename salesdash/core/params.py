import math
from typing import Any, Optional

from salesdash.core.errors import ValidationError

INVALID_MONTH_MESSAGE = "Invalid month. Please provide a month between 1 and 12"


def _coerce_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    # "5.0" reads as 5; "5.5" stays unusable.
    try:
        number = float(text)
    except ValueError:
        return None
    if math.isfinite(number) and number.is_integer():
        return int(number)
    return None


def parse_month_loose(value: Any) -> Optional[int]:
    """Return the month as an int, or None when it can never match a record."""
    month = _coerce_int(value)
    if month is None or month < 1 or month > 12:
        return None
    return month


def parse_month_strict(value: Any) -> int:
    month = parse_month_loose(value)
    if month is None:
        raise ValidationError(INVALID_MONTH_MESSAGE)
    return month


def parse_positive_int(value: Any, field: str, *, default: int, maximum: Optional[int] = None) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    parsed = _coerce_int(value)
    if parsed is None:
        raise ValidationError(f"{field} must be an integer")
    if parsed < 1:
        raise ValidationError(f"{field} must be >= 1")
    if maximum is not None and parsed > maximum:
        raise ValidationError(f"{field} must be <= {maximum}")
    return parsed


def parse_price_search(text: str) -> Optional[float]:
    """Numeric reading of a search string, used for exact price matches."""
    if not text or not text.strip():
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


__all__ = [
    "INVALID_MONTH_MESSAGE",
    "parse_month_loose",
    "parse_month_strict",
    "parse_positive_int",
    "parse_price_search",
]
