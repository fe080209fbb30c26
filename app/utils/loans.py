"""
utils/loans.py -- Amortizing loan and revolving credit calculators.

calculate_emi(principal, rate, tenure)                  -> EMI + balance schedule
calculate_flat_vs_reducing(principal, tenure, flat, reducing)
calculate_credit_card_payoff(balance, apr, monthly_payment)

Rates are annual percentages converted to a monthly rate (rate / 12 / 100);
tenures are whole years.
"""
from __future__ import annotations

from app.errors import InvalidInput
from app.models import Calculation
from app.utils.primitives import (
    amortization_schedule,
    amortized_payment,
    build_series,
    periodic_rate,
    round2,
    round_currency,
)
from app.utils.validator import require_duration, require_positive

# Payoff simulations stop after 100 years even if the balance never clears.
MAX_PAYOFF_MONTHS = 1200

# Card issuers flag payments below 3% of the outstanding balance.
MIN_PAYMENT_RATIO = 0.03


def calculate_emi(principal: float, rate: float, tenure: int) -> Calculation:
    """
    Equated monthly instalment for ``principal`` at ``rate`` % over
    ``tenure`` years. Serves the home-loan and car-loan calculators too.
    """
    require_positive("principal", principal)
    require_positive("rate", rate)
    require_duration("tenure", tenure)

    monthly_rate = periodic_rate(rate, 12)
    months = tenure * 12

    emi = amortized_payment(principal, monthly_rate, months)
    total_payment = emi * months
    total_interest = total_payment - principal

    return Calculation(
        {
            "emi": round_currency(emi),
            "totalInterest": round_currency(total_interest),
            "totalPayment": round_currency(total_payment),
        },
        lambda: build_series(
            "Month", amortization_schedule(principal, monthly_rate, emi, months)
        ),
    )


def calculate_flat_vs_reducing(
    principal: float,
    tenure: int,
    flat_rate: float,
    reducing_rate: float,
) -> Calculation:
    """
    Compare a flat-rate loan (interest on the original principal for the
    whole tenure) with a reducing-balance loan. The series is the reducing
    loan's outstanding balance; the flat loan's balance falls linearly.
    """
    require_positive("principal", principal)
    require_duration("tenure", tenure)
    require_positive("flat_rate", flat_rate)
    require_positive("reducing_rate", reducing_rate)

    months = tenure * 12

    flat_emi = (principal + principal * flat_rate * tenure / 100) / months
    flat_total_payment = flat_emi * months
    flat_total_interest = flat_total_payment - principal

    reducing_monthly_rate = periodic_rate(reducing_rate, 12)
    reducing_emi = amortized_payment(principal, reducing_monthly_rate, months)
    reducing_total_payment = reducing_emi * months
    reducing_total_interest = reducing_total_payment - principal

    interest_saved = flat_total_interest - reducing_total_interest
    effective_rate_diff = interest_saved / (principal * tenure) * 100

    return Calculation(
        {
            "flatInterest": {
                "emi": round_currency(flat_emi),
                "totalInterest": round_currency(flat_total_interest),
                "totalPayment": round_currency(flat_total_payment),
            },
            "reducingInterest": {
                "emi": round_currency(reducing_emi),
                "totalInterest": round_currency(reducing_total_interest),
                "totalPayment": round_currency(reducing_total_payment),
            },
            "comparison": {
                "interestSaved": round_currency(interest_saved),
                "effectiveRateDiff": round2(effective_rate_diff),
            },
        },
        lambda: build_series(
            "Month",
            amortization_schedule(principal, reducing_monthly_rate, reducing_emi, months),
        ),
    )


def calculate_credit_card_payoff(balance: float, apr: float, monthly_payment: float) -> Calculation:
    """
    Months needed to clear a card balance paying a fixed amount monthly.

    Interest accrues on the outstanding balance before each payment. A
    payment that does not cover the first month's interest never clears the
    balance and is rejected.
    """
    require_positive("balance", balance)
    require_positive("apr", apr)
    require_positive("monthly_payment", monthly_payment)

    monthly_rate = periodic_rate(apr, 12)
    first_interest = balance * monthly_rate
    if monthly_payment <= first_interest:
        raise InvalidInput(
            "monthly_payment",
            f"Monthly payment must exceed the first month's interest of "
            f"{round2(first_interest):.2f}",
        )

    remaining = balance
    months = 0
    total_interest = 0.0
    balances = [balance]
    while remaining > 0 and months < MAX_PAYOFF_MONTHS:
        interest = remaining * monthly_rate
        total_interest += interest
        remaining = remaining + interest - monthly_payment
        months += 1
        balances.append(max(0.0, remaining))

    return Calculation(
        {
            "monthsToPayOff": months,
            "totalInterest": round_currency(total_interest),
            "totalPayment": round_currency(balance + total_interest),
            "minimumPaymentWarning": monthly_payment < balance * MIN_PAYMENT_RATIO,
        },
        lambda: build_series("Month", balances),
    )
