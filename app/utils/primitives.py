"""
utils/primitives.py -- Shared numeric building blocks for every calculator.

periodic_rate(annual_percent, periods_per_year)  -> decimal rate per period
growth_factor(rate, n)                            -> (1 + r)^n, overflow -> InvalidInput
compound_future_value(principal, rate, n)         -> principal * (1 + r)^n
annuity_future_value(payment, rate, n)            -> annuity-due future value
amortized_payment(principal, rate, n)             -> level EMI
amortization_schedule(principal, rate, payment, n) -> balances for periods 0..n
walk_tax_slabs(slabs, income)                     -> (total_tax, per-slab rows)

Rounding helpers follow the display convention: half-up to the nearest unit
(currency) or to 2 dp (percentages, trading costs). Nothing inside the loops
here is rounded; rounding is applied only when a result or series is shaped.
"""
from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

import numpy as np

from app.errors import InvalidInput
from app.models import TaxSlab

MSG_TOO_LARGE = "Inputs produce a value too large to represent; reduce the rate or duration"


# ---------------------------------------------------------------------------
# Rounding
# ---------------------------------------------------------------------------

def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from -inf, i.e. 2.5 -> 3 and -2.5 -> -2."""
    if not math.isfinite(value):
        raise InvalidInput("result", MSG_TOO_LARGE)
    factor = 10.0 ** digits
    return math.floor(float(value) * factor + 0.5) / factor


def round_currency(value: float) -> float:
    return round_half_up(value, 0)


def round2(value: float) -> float:
    return round_half_up(value, 2)


def build_series(prefix: str, values: Iterable[float], start: int = 0) -> List[dict]:
    """Label consecutive values "<prefix> <start>", "<prefix> <start+1>", ..."""
    return [
        {"label": f"{prefix} {start + i}", "value": round_currency(v)}
        for i, v in enumerate(values)
    ]


# ---------------------------------------------------------------------------
# Rates and growth
# ---------------------------------------------------------------------------

def growth_factor(rate: float, num_periods: float) -> float:
    """(1 + r)^n, rejecting combinations that overflow a float."""
    try:
        growth = (1.0 + rate) ** num_periods
    except OverflowError:
        raise InvalidInput("rate", MSG_TOO_LARGE) from None
    if not math.isfinite(growth):
        raise InvalidInput("rate", MSG_TOO_LARGE)
    return growth


def periodic_rate(annual_percent: float, periods_per_year: int) -> float:
    return annual_percent / periods_per_year / 100.0


def compound_future_value(principal: float, rate: float, num_periods: float) -> float:
    return principal * growth_factor(rate, num_periods)


def compound_growth_curve(principal: float, rate: float, periods: np.ndarray) -> np.ndarray:
    """Vectorised compound_future_value over an array of period counts."""
    return principal * np.power(1.0 + rate, periods.astype(np.float64))


def annuity_future_value(payment: float, rate: float, num_periods: float) -> float:
    """
    Future value of a payment made at the start of each period (annuity due):

        payment * ((1 + r)^n - 1) / r * (1 + r)

    A zero rate has no closed form here and is rejected.
    """
    if rate == 0:
        raise InvalidInput("rate", "Rate of return must be greater than zero")
    growth = growth_factor(rate, num_periods)
    return payment * ((growth - 1.0) / rate) * (1.0 + rate)


def annuity_growth_curve(payment: float, rate: float, periods: np.ndarray) -> np.ndarray:
    """Vectorised annuity_future_value; period 0 evaluates to 0."""
    if rate == 0:
        raise InvalidInput("rate", "Rate of return must be greater than zero")
    growth = np.power(1.0 + rate, periods.astype(np.float64))
    return payment * ((growth - 1.0) / rate) * (1.0 + rate)


# ---------------------------------------------------------------------------
# Loans
# ---------------------------------------------------------------------------

def amortized_payment(principal: float, rate: float, num_periods: int) -> float:
    """Standard EMI: P * r * (1 + r)^n / ((1 + r)^n - 1)."""
    if rate == 0:
        raise InvalidInput("rate", "Interest rate must be greater than zero")
    growth = growth_factor(rate, num_periods)
    return principal * rate * growth / (growth - 1.0)


def amortization_schedule(
    principal: float,
    rate: float,
    payment: float,
    num_periods: int,
) -> List[float]:
    """
    Outstanding balance at the start of each period 0..num_periods.

    Each entry is the balance *before* that period's payment; entry 0 is the
    original principal and the last entry is what remains after every
    instalment (zero within float tolerance for a correctly sized payment).
    """
    balances: List[float] = []
    balance = principal
    for _ in range(num_periods + 1):
        balances.append(balance)
        interest_portion = balance * rate
        principal_portion = payment - interest_portion
        balance -= principal_portion
    return balances


# ---------------------------------------------------------------------------
# Progressive tax
# ---------------------------------------------------------------------------

def validate_slabs(slabs: Sequence[TaxSlab]) -> None:
    """Slabs must ascend strictly and end at +infinity."""
    previous = 0.0
    for slab in slabs:
        if slab.upper_bound <= previous:
            raise InvalidInput("slabs", "Tax slabs must be in strictly ascending order")
        if slab.rate < 0:
            raise InvalidInput("slabs", "Tax slab rates cannot be negative")
        previous = slab.upper_bound
    if not slabs or not math.isinf(slabs[-1].upper_bound):
        raise InvalidInput("slabs", "The last tax slab must be unbounded")


def walk_tax_slabs(
    slabs: Sequence[TaxSlab],
    income: float,
) -> Tuple[float, List[Tuple[float, float, float, float]]]:
    """
    Apply a progressive slab table to ``income``.

    Returns (total_tax, rows) where each row is
    (lower_bound, upper_bound, amount_taxed_in_slab, tax_for_slab). Only slabs
    that actually hold income are reported.
    """
    remaining = income
    previous_bound = 0.0
    total_tax = 0.0
    rows: List[Tuple[float, float, float, float]] = []

    for slab in slabs:
        slab_amount = min(max(0.0, remaining), slab.upper_bound - previous_bound)
        if slab_amount > 0:
            slab_tax = slab_amount * slab.rate / 100.0
            total_tax += slab_tax
            rows.append((previous_bound, slab.upper_bound, slab_amount, slab_tax))

        remaining -= slab_amount
        previous_bound = slab.upper_bound
        if remaining <= 0:
            break

    return total_tax, rows
