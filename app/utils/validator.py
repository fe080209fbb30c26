"""
utils/validator.py -- Input guards run before any formula computes.

require_positive(field, value)           -> value > 0 and finite
require_non_negative(field, value)       -> value >= 0 and finite
require_range(field, value, low, high)   -> low <= value <= high
require_choice(field, value, choices)    -> value in choices
require_duration(field, value)           -> 0 < value <= MAX_YEARS

Every guard raises InvalidInput naming the field and the violated rule.
Nothing is clamped: a failing value stops the calculation.
"""
from __future__ import annotations

import math
from typing import Any, Iterable

from app.errors import InvalidInput

MSG_POSITIVE = "{label} must be positive"
MSG_NON_NEGATIVE = "{label} cannot be negative"
MSG_RANGE = "{label} must be between {low} and {high}"
MSG_CHOICE = "{label} must be one of: {choices}"
MSG_FINITE = "{label} must be a finite number"

# Longest horizon any calculator projects over, in years.
MAX_YEARS = 100


def _label(field: str) -> str:
    """'monthly_investment' -> 'Monthly investment'."""
    return field.replace("_", " ").capitalize()


def _number(value: float) -> str:
    """1000000 -> "1,000,000"; 0.5 -> "0.5"."""
    if float(value).is_integer():
        return f"{value:,.0f}"
    return f"{value:g}"


def _require_finite(field: str, value: float) -> None:
    if not math.isfinite(value):
        raise InvalidInput(field, MSG_FINITE.format(label=_label(field)))


def require_positive(field: str, value: float) -> float:
    _require_finite(field, value)
    if value <= 0:
        raise InvalidInput(field, MSG_POSITIVE.format(label=_label(field)))
    return value


def require_non_negative(field: str, value: float) -> float:
    _require_finite(field, value)
    if value < 0:
        raise InvalidInput(field, MSG_NON_NEGATIVE.format(label=_label(field)))
    return value


def require_range(field: str, value: float, low: float, high: float) -> float:
    _require_finite(field, value)
    if value < low or value > high:
        raise InvalidInput(
            field, MSG_RANGE.format(label=_label(field), low=_number(low), high=_number(high))
        )
    return value


def require_choice(field: str, value: Any, choices: Iterable[Any]) -> Any:
    allowed = list(choices)
    if value not in allowed:
        raise InvalidInput(
            field,
            MSG_CHOICE.format(
                label=_label(field), choices=", ".join(str(c) for c in allowed)
            ),
        )
    return value


def require_duration(field: str, value: float) -> float:
    """Positive and no longer than MAX_YEARS, so loops and series stay bounded."""
    require_positive(field, value)
    return require_range(field, value, 0, MAX_YEARS)
