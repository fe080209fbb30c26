"""
utils/investments.py -- Market-linked investment calculators.

calculate_sip(monthly_investment, years, expected_return)
calculate_step_up_sip(initial_monthly_investment, years, expected_return, annual_increment)
calculate_lumpsum(principal, years, expected_return)
calculate_cagr(initial_value, final_value, years)
calculate_nps(monthly_contribution, current_age, retirement_age, ...)
calculate_inflation(current_cost, inflation_rate, years)

Contributions are invested at the start of each month (annuity due), so the
SIP maturity value is payment * ((1 + r)^n - 1) / r * (1 + r).
"""
from __future__ import annotations

from typing import List

import numpy as np

from app.errors import InvalidInput
from app.models import Calculation
from app.utils.primitives import (
    annuity_future_value,
    annuity_growth_curve,
    build_series,
    compound_future_value,
    compound_growth_curve,
    growth_factor,
    periodic_rate,
    round2,
    round_currency,
)
from app.utils.validator import (
    require_duration,
    require_non_negative,
    require_positive,
    require_range,
)


# ---------------------------------------------------------------------------
# SIP
# ---------------------------------------------------------------------------

def calculate_sip(monthly_investment: float, years: int, expected_return: float) -> Calculation:
    require_positive("monthly_investment", monthly_investment)
    require_duration("years", years)
    require_positive("expected_return", expected_return)

    monthly_rate = periodic_rate(expected_return, 12)
    months = years * 12

    maturity_value = annuity_future_value(monthly_investment, monthly_rate, months)
    total_investment = monthly_investment * months
    total_returns = maturity_value - total_investment

    def series() -> List[dict]:
        curve = annuity_growth_curve(monthly_investment, monthly_rate, np.arange(months + 1))
        return build_series("Month", curve)

    return Calculation(
        {
            "totalInvestment": round_currency(total_investment),
            "totalReturns": round_currency(total_returns),
            "maturityValue": round_currency(maturity_value),
        },
        series,
    )


def calculate_step_up_sip(
    initial_monthly_investment: float,
    years: int,
    expected_return: float,
    annual_increment: float = 0.0,
) -> Calculation:
    """
    SIP whose contribution grows by ``annual_increment`` % on every
    anniversary (months 13, 25, ...). Balance steps as (balance + c) * (1 + r).
    """
    require_positive("initial_monthly_investment", initial_monthly_investment)
    require_duration("years", years)
    require_positive("expected_return", expected_return)
    require_non_negative("annual_increment", annual_increment)

    monthly_rate = periodic_rate(expected_return, 12)
    months = years * 12
    contribution = initial_monthly_investment
    total_investment = 0.0
    balance = 0.0
    balances = [0.0]

    for month in range(1, months + 1):
        if month > 12 and month % 12 == 1:
            contribution *= 1 + annual_increment / 100
        total_investment += contribution
        balance = (balance + contribution) * (1 + monthly_rate)
        balances.append(balance)

    return Calculation(
        {
            "totalInvestment": round_currency(total_investment),
            "totalReturns": round_currency(balance - total_investment),
            "maturityValue": round_currency(balance),
        },
        lambda: build_series("Month", balances),
    )


# ---------------------------------------------------------------------------
# Lump sum and CAGR
# ---------------------------------------------------------------------------

def calculate_lumpsum(principal: float, years: int, expected_return: float) -> Calculation:
    require_positive("principal", principal)
    require_duration("years", years)
    require_positive("expected_return", expected_return)

    annual_rate = expected_return / 100
    maturity_value = compound_future_value(principal, annual_rate, years)

    return Calculation(
        {
            "totalInvestment": round_currency(principal),
            "totalReturns": round_currency(maturity_value - principal),
            "maturityValue": round_currency(maturity_value),
        },
        lambda: build_series(
            "Year", compound_growth_curve(principal, annual_rate, np.arange(years + 1))
        ),
    )


def calculate_cagr(initial_value: float, final_value: float, years: int) -> Calculation:
    """
    CAGR = (final / initial)^(1 / years) - 1.

    The series re-grows ``initial_value`` at the unrounded rate, so the last
    point reproduces ``final_value``.
    """
    require_positive("initial_value", initial_value)
    require_positive("final_value", final_value)
    require_duration("years", years)

    cagr = (final_value / initial_value) ** (1 / years) - 1
    absolute_return = (final_value - initial_value) / initial_value * 100

    return Calculation(
        {
            "cagrPercentage": round2(cagr * 100),
            "absoluteReturn": round2(absolute_return),
        },
        lambda: build_series(
            "Year", compound_growth_curve(initial_value, cagr, np.arange(years + 1))
        ),
    )


# ---------------------------------------------------------------------------
# NPS
# ---------------------------------------------------------------------------

NPS_MIN_ENTRY_AGE = 18
NPS_MAX_ENTRY_AGE = 65
NPS_MIN_EXIT_AGE = 60
NPS_MAX_EXIT_AGE = 75
NPS_MAX_EQUITY = 75.0
NPS_MIN_ANNUITY = 40.0


def calculate_nps(
    monthly_contribution: float,
    current_age: int,
    retirement_age: int = 60,
    equity_allocation: float = 50.0,
    expected_return: float = 10.0,
    annuity_percentage: float = NPS_MIN_ANNUITY,
    annuity_rate: float = 6.0,
) -> Calculation:
    """
    Monthly contributions compound until ``retirement_age``. At exit at
    least 40% of the corpus buys an annuity; the rest is a lump sum.
    """
    require_positive("monthly_contribution", monthly_contribution)
    require_range("current_age", current_age, NPS_MIN_ENTRY_AGE, NPS_MAX_ENTRY_AGE)
    require_range("retirement_age", retirement_age, NPS_MIN_EXIT_AGE, NPS_MAX_EXIT_AGE)
    if retirement_age <= current_age:
        raise InvalidInput("retirement_age", "Retirement age must be greater than current age")
    require_range("equity_allocation", equity_allocation, 0, NPS_MAX_EQUITY)
    require_positive("expected_return", expected_return)
    require_range("annuity_percentage", annuity_percentage, NPS_MIN_ANNUITY, 100)
    require_positive("annuity_rate", annuity_rate)

    years_to_retirement = retirement_age - current_age
    monthly_rate = periodic_rate(expected_return, 12)

    total_investment = 0.0
    value = 0.0
    year_end_values = [0.0]
    for _ in range(years_to_retirement):
        for _ in range(12):
            total_investment += monthly_contribution
            value = (value + monthly_contribution) * (1 + monthly_rate)
        year_end_values.append(value)

    annuity_corpus = value * annuity_percentage / 100
    monthly_pension = annuity_corpus * annuity_rate / 100 / 12

    return Calculation(
        {
            "totalInvestment": round_currency(total_investment),
            "totalReturns": round_currency(value - total_investment),
            "maturityValue": round_currency(value),
            "lumpSumWithdrawal": round_currency(value - annuity_corpus),
            "annuityCorpus": round_currency(annuity_corpus),
            "monthlyPension": round_currency(monthly_pension),
        },
        lambda: build_series("Age", year_end_values, start=current_age),
    )


# ---------------------------------------------------------------------------
# Inflation
# ---------------------------------------------------------------------------

def calculate_inflation(current_cost: float, inflation_rate: float, years: int) -> Calculation:
    require_positive("current_cost", current_cost)
    require_positive("inflation_rate", inflation_rate)
    require_duration("years", years)

    rate = inflation_rate / 100
    future_cost = compound_future_value(current_cost, rate, years)
    purchasing_power = current_cost / growth_factor(rate, years)

    return Calculation(
        {
            "futureCost": round_currency(future_cost),
            "purchasingPower": round_currency(purchasing_power),
            "costIncrease": round_currency(future_cost - current_cost),
        },
        lambda: build_series(
            "Year", compound_growth_curve(current_cost, rate, np.arange(years + 1))
        ),
    )
