"""
utils/retirement.py -- FIRE-style retirement corpus planner.

calculate_retirement(current_age, retirement_age, monthly_expenses, ...)

Rules:
  future monthly expenses = expenses * (1 + (inflation + expense increase)/100)^t
  required corpus         = future monthly expenses * 12 * multiplier
  multiplier              = lean 30x | mid 25x | fat 20x  (withdrawal 100/x %)
  expected corpus         = savings grown at return  +  yearly contributions
                            (stepped up every year) grown at return
  shortfall               = max(0, required - expected)

t = retirement_age - current_age, in whole years.
"""
from __future__ import annotations

from app.errors import InvalidInput
from app.models import Calculation
from app.utils.primitives import (
    build_series,
    compound_future_value,
    growth_factor,
    periodic_rate,
    round2,
    round_currency,
)
from app.utils.validator import (
    require_choice,
    require_non_negative,
    require_positive,
    require_range,
)

FIRE_MULTIPLIERS = {"lean": 30, "mid": 25, "fat": 20}

MIN_AGE = 18
MAX_AGE = 100


def withdrawal_rate(fire_type: str) -> float:
    """Safe withdrawal rate (%) implied by a FIRE strategy."""
    return 100 / FIRE_MULTIPLIERS[fire_type]


def calculate_retirement(
    current_age: int,
    retirement_age: int,
    monthly_expenses: float,
    current_savings: float = 0.0,
    monthly_investment: float = 0.0,
    expected_return: float = 12.0,
    inflation_rate: float = 6.0,
    annual_expense_increase: float = 0.0,
    annual_investment_increase: float = 0.0,
    fire_type: str = "mid",
) -> Calculation:
    require_range("current_age", current_age, MIN_AGE, MAX_AGE)
    require_range("retirement_age", retirement_age, MIN_AGE, MAX_AGE)
    if retirement_age <= current_age:
        raise InvalidInput("retirement_age", "Retirement age must be greater than current age")
    require_positive("monthly_expenses", monthly_expenses)
    require_non_negative("current_savings", current_savings)
    require_non_negative("monthly_investment", monthly_investment)
    require_positive("expected_return", expected_return)
    require_non_negative("inflation_rate", inflation_rate)
    require_non_negative("annual_expense_increase", annual_expense_increase)
    require_non_negative("annual_investment_increase", annual_investment_increase)
    require_choice("fire_type", fire_type, FIRE_MULTIPLIERS)

    years = retirement_age - current_age
    annual_return = expected_return / 100
    step_up = 1 + annual_investment_increase / 100

    future_monthly_expenses = compound_future_value(
        monthly_expenses, (inflation_rate + annual_expense_increase) / 100, years
    )
    multiplier = FIRE_MULTIPLIERS[fire_type]
    required_corpus = future_monthly_expenses * 12 * multiplier

    grown_savings = compound_future_value(current_savings, annual_return, years)

    # Year-by-year balance: contributions for the year go in at its start.
    contributions_value = 0.0
    balance = current_savings
    balances = [balance]
    yearly_investment = monthly_investment * 12
    for _ in range(years):
        contributions_value = (contributions_value + yearly_investment) * (1 + annual_return)
        balance = (balance + yearly_investment) * (1 + annual_return)
        balances.append(balance)
        yearly_investment *= step_up

    expected_corpus = grown_savings + contributions_value
    shortfall = max(0.0, required_corpus - expected_corpus)

    # Extra level monthly SIP (annuity due) that would close the gap.
    monthly_rate = periodic_rate(expected_return, 12)
    months = years * 12
    if shortfall > 0:
        growth = growth_factor(monthly_rate, months)
        monthly_investment_needed = shortfall * monthly_rate / (growth - 1) / (1 + monthly_rate)
    else:
        monthly_investment_needed = 0.0

    return Calculation(
        {
            "requiredCorpus": round_currency(required_corpus),
            "currentCorpus": round_currency(expected_corpus),
            "savingsAtRetirement": round_currency(grown_savings),
            "investmentsAtRetirement": round_currency(contributions_value),
            "shortfall": round_currency(shortfall),
            "monthlyInvestmentNeeded": round_currency(monthly_investment_needed),
            "futureMonthlyExpenses": round_currency(future_monthly_expenses),
            "multiplier": multiplier,
            "withdrawalRate": round2(withdrawal_rate(fire_type)),
        },
        lambda: build_series("Age", balances, start=current_age),
    )
