"""
utils/tax.py -- Tax and salary calculators.

calculate_income_tax(income, deductions, regime)   -> slab walk, old/new regime
calculate_tds(amount, payment_type, is_non_resident) -> flat rate above threshold
calculate_gst(amount, gst_rate, is_inclusive)       -> CGST/SGST split
calculate_hra(basic_salary, rent_paid, city_type)   -> HRA exemption
calculate_salary(basic_salary, ...)                 -> monthly take-home
calculate_gratuity(basic_salary, years_of_service)  -> 15 days' wage per year

Slab tables (annual income, upper bound -> rate %):

  New regime: 3L 0 | 6L 5 | 9L 10 | 12L 15 | 15L 20 | above 30
  Old regime: 2.5L 0 | 5L 5 | 10L 20 | above 30

Deductions reduce taxable income under the old regime only.
"""
from __future__ import annotations

import math
from typing import Dict, Optional

from app.models import Calculation, TaxSlab
from app.utils.primitives import (
    build_series,
    round2,
    round_currency,
    validate_slabs,
    walk_tax_slabs,
)
from app.utils.validator import (
    require_choice,
    require_duration,
    require_non_negative,
    require_positive,
)

INF = math.inf

NEW_REGIME_SLABS = (
    TaxSlab(300_000, 0),
    TaxSlab(600_000, 5),
    TaxSlab(900_000, 10),
    TaxSlab(1_200_000, 15),
    TaxSlab(1_500_000, 20),
    TaxSlab(INF, 30),
)

OLD_REGIME_SLABS = (
    TaxSlab(250_000, 0),
    TaxSlab(500_000, 5),
    TaxSlab(1_000_000, 20),
    TaxSlab(INF, 30),
)

REGIME_SLABS = {"new": NEW_REGIME_SLABS, "old": OLD_REGIME_SLABS}
validate_slabs(NEW_REGIME_SLABS)
validate_slabs(OLD_REGIME_SLABS)


# ---------------------------------------------------------------------------
# Income tax
# ---------------------------------------------------------------------------

def _slab_label(lower: float, upper: float) -> str:
    if math.isinf(upper):
        return f"₹{lower:,.0f} and above"
    return f"₹{lower:,.0f}-₹{upper:,.0f}"


def calculate_income_tax(income: float, deductions: float = 0.0, regime: str = "new") -> Calculation:
    require_non_negative("income", income)
    require_non_negative("deductions", deductions)
    require_choice("regime", regime, REGIME_SLABS)

    taxable_income = max(0.0, income - (deductions if regime == "old" else 0.0))
    total_tax, rows = walk_tax_slabs(REGIME_SLABS[regime], taxable_income)
    tax_amount = round_currency(total_tax)

    return Calculation(
        {
            "grossIncome": round_currency(income),
            "taxableIncome": round_currency(taxable_income),
            "taxAmount": tax_amount,
            "effectiveTaxRate": round2(total_tax / (taxable_income or 1) * 100),
            "takeHome": round_currency(income - tax_amount),
            "slabwiseBreakup": [
                {
                    "slab": _slab_label(lower, upper),
                    "taxableAmount": round_currency(amount),
                    "tax": round_currency(tax),
                }
                for lower, upper, amount, tax in rows
            ],
        }
    )


# ---------------------------------------------------------------------------
# TDS
# ---------------------------------------------------------------------------

# payment type -> (resident rate %, non-resident rate %, threshold)
TDS_RATES: Dict[str, tuple] = {
    "salary": (10.0, 20.0, 50_000),
    "professional_fees": (10.0, 20.0, 30_000),
    "rent": (10.0, 30.0, 20_000),
    "commission": (5.0, 20.0, 15_000),
    "interest": (10.0, 20.0, 40_000),
    "contractor": (2.0, 20.0, 30_000),
}


def calculate_tds(amount: float, payment_type: str, is_non_resident: bool = False) -> Calculation:
    """TDS applies at the full rate once ``amount`` reaches the threshold."""
    require_positive("amount", amount)
    require_choice("payment_type", payment_type, TDS_RATES)

    resident_rate, non_resident_rate, threshold = TDS_RATES[payment_type]
    rate = non_resident_rate if is_non_resident else resident_rate
    applicable = amount >= threshold
    tds_amount = amount * rate / 100 if applicable else 0.0

    return Calculation(
        {
            "grossAmount": round2(amount),
            "tdsAmount": round2(tds_amount),
            "netAmount": round2(amount - tds_amount),
            "tdsRate": rate,
            "tdsThreshold": threshold,
            "isTDSApplicable": applicable,
        }
    )


# ---------------------------------------------------------------------------
# GST
# ---------------------------------------------------------------------------

def calculate_gst(amount: float, gst_rate: float, is_inclusive: bool = False) -> Calculation:
    """
    Split GST equally into CGST and SGST. With ``is_inclusive`` the amount
    already contains the tax and the base is amount * 100 / (100 + rate).
    """
    require_positive("amount", amount)
    require_positive("gst_rate", gst_rate)

    half_rate = gst_rate / 2
    if is_inclusive:
        base_amount = amount * 100 / (100 + gst_rate)
        total_amount = amount
    else:
        base_amount = amount
        total_amount = amount * (1 + gst_rate / 100)

    cgst = base_amount * half_rate / 100
    sgst = base_amount * half_rate / 100

    return Calculation(
        {
            "baseAmount": round_currency(base_amount),
            "cgst": round_currency(cgst),
            "sgst": round_currency(sgst),
            "totalGST": round_currency(cgst + sgst),
            "totalAmount": round_currency(total_amount),
            "breakdown": {"cgstRate": half_rate, "sgstRate": half_rate},
        }
    )


# ---------------------------------------------------------------------------
# HRA
# ---------------------------------------------------------------------------

CITY_EXEMPTION_RATIO = {"metro": 0.5, "non-metro": 0.4}
DEFAULT_HRA_RATIO = 0.4
RENT_BASIC_RATIO = 0.1


def calculate_hra(
    basic_salary: float,
    rent_paid: float,
    city_type: str,
    hra_received: Optional[float] = None,
) -> Calculation:
    """
    Monthly HRA exemption: the least of HRA received, 50% (metro) or 40%
    (non-metro) of basic, and rent paid in excess of 10% of basic.
    HRA received defaults to 40% of basic when not given.
    """
    require_positive("basic_salary", basic_salary)
    require_non_negative("rent_paid", rent_paid)
    require_choice("city_type", city_type, CITY_EXEMPTION_RATIO)
    if hra_received is None:
        hra_received = basic_salary * DEFAULT_HRA_RATIO
    require_non_negative("hra_received", hra_received)

    city_based = basic_salary * CITY_EXEMPTION_RATIO[city_type]
    rent_based = max(0.0, rent_paid - basic_salary * RENT_BASIC_RATIO)
    exemption = min(hra_received, city_based, rent_based)

    return Calculation(
        {
            "hraReceived": round_currency(hra_received),
            "hraExemption": round_currency(exemption),
            "taxableHRA": round_currency(hra_received - exemption),
            "annualExemption": round_currency(exemption * 12),
        },
        lambda: build_series("Month", [hra_received] * 12, start=1),
    )


# ---------------------------------------------------------------------------
# Salary
# ---------------------------------------------------------------------------

PF_RATE = 0.12
PF_MONTHLY_CAP = 1_800.0
PROFESSIONAL_TAX = 200.0
PROFESSIONAL_TAX_THRESHOLD = 15_000.0
SALARY_TAX_THRESHOLD = 500_000.0
SALARY_TAX_RATE = 0.10


def calculate_salary(
    basic_salary: float,
    hra: float = 0.0,
    basic_allowance: float = 0.0,
    special_allowance: float = 0.0,
    conveyance_allowance: float = 0.0,
    medical_allowance: float = 0.0,
    other_allowances: float = 0.0,
    extra_deductions: float = 0.0,
) -> Calculation:
    """
    Monthly take-home from basic pay and allowances.

    PF is 12% of basic capped at 1800, professional tax is a flat 200 above
    15000 gross, and income tax is estimated at 10% of monthly gross when the
    annual gross exceeds 5 lakh.
    """
    require_positive("basic_salary", basic_salary)
    require_non_negative("hra", hra)
    require_non_negative("basic_allowance", basic_allowance)
    require_non_negative("special_allowance", special_allowance)
    require_non_negative("conveyance_allowance", conveyance_allowance)
    require_non_negative("medical_allowance", medical_allowance)
    require_non_negative("other_allowances", other_allowances)
    require_non_negative("extra_deductions", extra_deductions)

    allowances = {
        "hra": hra,
        "basicAllowance": basic_allowance,
        "specialAllowance": special_allowance,
        "conveyanceAllowance": conveyance_allowance,
        "medicalAllowance": medical_allowance,
        "otherAllowances": other_allowances,
    }

    gross_salary = basic_salary + sum(allowances.values())
    provident_fund = min(basic_salary * PF_RATE, PF_MONTHLY_CAP)
    professional_tax = PROFESSIONAL_TAX if gross_salary > PROFESSIONAL_TAX_THRESHOLD else 0.0
    income_tax = gross_salary * SALARY_TAX_RATE if gross_salary * 12 > SALARY_TAX_THRESHOLD else 0.0

    total_deductions = provident_fund + professional_tax + income_tax + extra_deductions

    return Calculation(
        {
            "basicSalary": round_currency(basic_salary),
            "grossSalary": round_currency(gross_salary),
            "deductions": {
                "providentFund": round_currency(provident_fund),
                "professionalTax": round_currency(professional_tax),
                "incomeTax": round_currency(income_tax),
                "extraDeductions": round_currency(extra_deductions),
            },
            "totalDeductions": round_currency(total_deductions),
            "netSalary": round_currency(gross_salary - total_deductions),
            "monthlyBreakdown": {k: round_currency(v) for k, v in allowances.items()},
        }
    )


# ---------------------------------------------------------------------------
# Gratuity
# ---------------------------------------------------------------------------

GRATUITY_CAP = 2_000_000.0
GRATUITY_MIN_YEARS = 5
WORKING_DAYS_PER_MONTH = 26


def calculate_gratuity(
    basic_salary: float,
    years_of_service: float,
    cap: float = GRATUITY_CAP,
) -> Calculation:
    """
    Gratuity = (basic / 26) * 15 * years, payable only after five years of
    service and capped at the statutory limit.
    """
    require_positive("basic_salary", basic_salary)
    require_duration("years_of_service", years_of_service)
    require_positive("cap", cap)

    eligible = years_of_service >= GRATUITY_MIN_YEARS
    daily_wage = basic_salary / WORKING_DAYS_PER_MONTH
    fifteen_days_salary = daily_wage * 15
    gratuity = min(fifteen_days_salary * years_of_service, cap) if eligible else 0.0

    return Calculation(
        {
            "gratuityAmount": round_currency(gratuity),
            "isEligible": eligible,
            "calculationBreakdown": {
                "dailyWage": round_currency(daily_wage),
                "fifteenDaysSalary": round_currency(fifteen_days_salary),
                "yearsConsidered": years_of_service,
            },
        }
    )
