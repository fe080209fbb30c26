"""
utils/schemes.py -- Interest calculators and fixed-term savings schemes.

Bank products:        compound interest, simple interest, FD, RD
Small-savings schemes: PPF, NSC, SCSS, Post Office MIS
Pension:              Atal Pension Yojana (APY)

Scheme rates default to the current notified rate; the service passes the
configured rate explicitly (see app/registry.py) so these stay pure.
"""
from __future__ import annotations

import numpy as np

from app.errors import InvalidInput
from app.models import Calculation
from app.utils.primitives import (
    annuity_future_value,
    annuity_growth_curve,
    build_series,
    compound_future_value,
    compound_growth_curve,
    periodic_rate,
    round_currency,
)
from app.utils.validator import (
    require_choice,
    require_duration,
    require_positive,
    require_range,
)

COMPOUNDING_FREQUENCIES = (1, 2, 4, 12)

PPF_RATE = 7.1
PPF_MIN_DEPOSIT = 500.0
PPF_MAX_DEPOSIT = 150_000.0
PPF_MIN_YEARS = 15
PPF_MAX_YEARS = 50

NSC_RATE = 6.8

SCSS_RATE = 8.2
SCSS_MIN_DEPOSIT = 1_000.0
SCSS_MAX_DEPOSIT = 3_000_000.0
SCSS_TERMS = (5, 8)  # 5 years, optionally extended once by 3

POMIS_RATE = 7.4
POMIS_MIN_DEPOSIT = 1_000.0
POMIS_MAX_DEPOSIT = {"single": 900_000.0, "joint": 1_500_000.0}
POMIS_TERM = 5

APY_ASSUMED_RETURN = 8.0
APY_PENSION_SLABS = (1000, 2000, 3000, 4000, 5000)
APY_MIN_AGE = 18
APY_MAX_AGE = 40
APY_EXIT_AGE = 60
# Corpus returned to the nominee per rupee of monthly pension, annualised.
APY_CORPUS_MULTIPLE = 170
# Monthly contribution for a 1000/month pension, by entry age.
APY_CONTRIBUTION_CHART = {
    18: 42, 19: 46, 20: 50, 21: 54, 22: 59, 23: 64, 24: 70, 25: 76,
    26: 82, 27: 89, 28: 97, 29: 106, 30: 115, 31: 125, 32: 137, 33: 149,
    34: 162, 35: 177, 36: 192, 37: 210, 38: 230, 39: 251, 40: 274,
}


# ---------------------------------------------------------------------------
# Simple and compound interest
# ---------------------------------------------------------------------------

def calculate_compound_interest(
    principal: float,
    rate: float,
    time: int,
    frequency: int = 1,
) -> Calculation:
    require_positive("principal", principal)
    require_positive("rate", rate)
    require_duration("time", time)
    require_choice("frequency", frequency, COMPOUNDING_FREQUENCIES)

    rate_per_period = periodic_rate(rate, frequency)
    amount = compound_future_value(principal, rate_per_period, frequency * time)

    return Calculation(
        {
            "principal": round_currency(principal),
            "interest": round_currency(amount - principal),
            "amount": round_currency(amount),
        },
        lambda: build_series(
            "Year",
            compound_growth_curve(principal, rate_per_period, np.arange(time + 1) * frequency),
        ),
    )


def calculate_simple_interest(principal: float, rate: float, time: int) -> Calculation:
    require_positive("principal", principal)
    require_positive("rate", rate)
    require_duration("time", time)

    interest = principal * rate * time / 100

    return Calculation(
        {
            "interest": round_currency(interest),
            "amount": round_currency(principal + interest),
        },
        lambda: build_series("Year", principal + principal * rate * np.arange(time + 1) / 100),
    )


# ---------------------------------------------------------------------------
# Bank deposits
# ---------------------------------------------------------------------------

def calculate_fd(
    principal: float,
    rate: float,
    years: int,
    compounding_frequency: int = 4,
) -> Calculation:
    """Fixed deposit compounded ``compounding_frequency`` times a year (quarterly by default)."""
    require_positive("principal", principal)
    require_positive("rate", rate)
    require_duration("years", years)
    require_choice("compounding_frequency", compounding_frequency, COMPOUNDING_FREQUENCIES)

    rate_per_period = periodic_rate(rate, compounding_frequency)
    maturity_value = compound_future_value(
        principal, rate_per_period, years * compounding_frequency
    )

    return Calculation(
        {
            "totalInvestment": round_currency(principal),
            "totalInterest": round_currency(maturity_value - principal),
            "maturityValue": round_currency(maturity_value),
        },
        lambda: build_series(
            "Year",
            compound_growth_curve(
                principal, rate_per_period, np.arange(years + 1) * compounding_frequency
            ),
        ),
    )


def calculate_rd(monthly_investment: float, rate: float, years: int) -> Calculation:
    """
    Recurring deposit: each monthly instalment earns monthly-compounded
    interest from its deposit date, i.e. sum of P * (1 + r)^(n - i).
    """
    require_positive("monthly_investment", monthly_investment)
    require_positive("rate", rate)
    require_duration("years", years)

    monthly_rate = periodic_rate(rate, 12)
    months = years * 12
    maturity_value = annuity_future_value(monthly_investment, monthly_rate, months)
    total_investment = monthly_investment * months

    return Calculation(
        {
            "totalInvestment": round_currency(total_investment),
            "totalInterest": round_currency(maturity_value - total_investment),
            "maturityValue": round_currency(maturity_value),
        },
        lambda: build_series(
            "Year",
            annuity_growth_curve(monthly_investment, monthly_rate, np.arange(years + 1) * 12),
        ),
    )


# ---------------------------------------------------------------------------
# Small-savings schemes
# ---------------------------------------------------------------------------

def calculate_ppf(
    yearly_investment: float,
    years: int = PPF_MIN_YEARS,
    rate: float = PPF_RATE,
) -> Calculation:
    """
    Public Provident Fund: interest is credited yearly on the opening
    balance, and the year's deposit is added at year end.
    """
    require_range("yearly_investment", yearly_investment, PPF_MIN_DEPOSIT, PPF_MAX_DEPOSIT)
    require_range("years", years, PPF_MIN_YEARS, PPF_MAX_YEARS)
    require_positive("rate", rate)

    annual_rate = rate / 100
    balance = 0.0
    total_interest = 0.0
    balances = [balance]
    for _ in range(years):
        interest = balance * annual_rate
        total_interest += interest
        balance += interest + yearly_investment
        balances.append(balance)

    return Calculation(
        {
            "totalInvestment": round_currency(yearly_investment * years),
            "totalInterest": round_currency(total_interest),
            "maturityValue": round_currency(balance),
        },
        lambda: build_series("Year", balances),
    )


def calculate_nsc(principal: float, years: int = 5, rate: float = NSC_RATE) -> Calculation:
    """National Savings Certificate, compounded annually and paid at maturity."""
    require_positive("principal", principal)
    require_duration("years", years)
    require_positive("rate", rate)

    annual_rate = rate / 100
    maturity_value = compound_future_value(principal, annual_rate, years)

    return Calculation(
        {
            "totalInvestment": round_currency(principal),
            "totalInterest": round_currency(maturity_value - principal),
            "maturityValue": round_currency(maturity_value),
        },
        lambda: build_series(
            "Year", compound_growth_curve(principal, annual_rate, np.arange(years + 1))
        ),
    )


def calculate_scss(principal: float, years: int = 5, rate: float = SCSS_RATE) -> Calculation:
    """
    Senior Citizens Savings Scheme: simple interest paid out every quarter,
    principal returned at maturity. The series is principal plus payouts
    received to date.
    """
    require_range("principal", principal, SCSS_MIN_DEPOSIT, SCSS_MAX_DEPOSIT)
    require_choice("years", years, SCSS_TERMS)
    require_positive("rate", rate)

    quarterly_interest = principal * periodic_rate(rate, 4)
    annual_interest = quarterly_interest * 4
    total_interest = annual_interest * years

    return Calculation(
        {
            "quarterlyInterest": round_currency(quarterly_interest),
            "annualInterest": round_currency(annual_interest),
            "totalInterest": round_currency(total_interest),
            "maturityValue": round_currency(principal + total_interest),
        },
        lambda: build_series("Year", principal + annual_interest * np.arange(years + 1)),
    )


def calculate_pomis(
    principal: float,
    account_type: str = "single",
    years: int = POMIS_TERM,
    rate: float = POMIS_RATE,
) -> Calculation:
    """Post Office Monthly Income Scheme: simple interest paid monthly."""
    require_choice("account_type", account_type, POMIS_MAX_DEPOSIT)
    require_range(
        "principal", principal, POMIS_MIN_DEPOSIT, POMIS_MAX_DEPOSIT[account_type]
    )
    require_choice("years", years, (POMIS_TERM,))
    require_positive("rate", rate)

    monthly_income = principal * periodic_rate(rate, 12)
    annual_income = monthly_income * 12
    total_interest = annual_income * years

    return Calculation(
        {
            "monthlyIncome": round_currency(monthly_income),
            "annualIncome": round_currency(annual_income),
            "totalInterest": round_currency(total_interest),
            "maturityValue": round_currency(principal + total_interest),
        },
        lambda: build_series("Year", principal + annual_income * np.arange(years + 1)),
    )


# ---------------------------------------------------------------------------
# Atal Pension Yojana
# ---------------------------------------------------------------------------

def nearest_pension_slab(desired_pension: float) -> int:
    """Closest guaranteed slab; ties go to the lower slab."""
    return min(APY_PENSION_SLABS, key=lambda slab: (abs(slab - desired_pension), slab))


def calculate_apy(
    current_age: int,
    desired_pension: float,
    assumed_return: float = APY_ASSUMED_RETURN,
) -> Calculation:
    """
    Contribution needed for a guaranteed monthly pension from age 60.

    The series is an illustrative corpus build-up at ``assumed_return`` %;
    the guaranteed corpus returned to the nominee is slab * 12 * 170.
    """
    require_range("current_age", current_age, APY_MIN_AGE, APY_MAX_AGE)
    if current_age not in APY_CONTRIBUTION_CHART:
        raise InvalidInput("current_age", "Current age must be a whole number of years")
    require_range(
        "desired_pension", desired_pension, APY_PENSION_SLABS[0], APY_PENSION_SLABS[-1]
    )
    require_positive("assumed_return", assumed_return)

    slab = nearest_pension_slab(desired_pension)
    monthly_contribution = round_currency(APY_CONTRIBUTION_CHART[current_age] * slab / 1000)
    years_till_maturity = APY_EXIT_AGE - current_age
    total_investment = monthly_contribution * 12 * years_till_maturity

    def series() -> list:
        rate = assumed_return / 100
        corpus = 0.0
        values = [corpus]
        for _ in range(years_till_maturity):
            corpus = (corpus + monthly_contribution * 12) * (1 + rate)
            values.append(corpus)
        return build_series("Age", values, start=current_age)

    return Calculation(
        {
            "monthlyContribution": monthly_contribution,
            "totalInvestment": round_currency(total_investment),
            "corpusAtMaturity": round_currency(slab * 12 * APY_CORPUS_MULTIPLE),
            "monthlyPension": slab,
        },
        series,
    )
