"""
app/registry.py -- Lookup table from product tag to calculator.

Each entry pairs a request model with its formula function. Entries that
depend on a notified statutory rate name the Settings attribute to pass in,
so the formula itself never reads configuration.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Type

from app.config import Settings
from app.errors import UnknownCalculator
from app.models import (
    APYRequest,
    BrokerageRequest,
    Calculation,
    CalculatorInfo,
    CalculatorRequest,
    CAGRRequest,
    CompoundInterestRequest,
    CreditCardRequest,
    EMIRequest,
    FDRequest,
    FlatVsReducingRequest,
    GratuityRequest,
    GSTRequest,
    HRARequest,
    IncomeTaxRequest,
    InflationRequest,
    LumpsumRequest,
    MarginRequest,
    NPSRequest,
    NSCRequest,
    POMISRequest,
    PPFRequest,
    RDRequest,
    RetirementRequest,
    SalaryRequest,
    SCSSRequest,
    SimpleInterestRequest,
    SIPRequest,
    StepUpSIPRequest,
    StockAverageRequest,
    TDSRequest,
)
from app.utils import investments, loans, retirement, schemes, tax, trading


class CalculatorEntry(NamedTuple):
    title: str
    request_model: Type[CalculatorRequest]
    func: Callable[..., Calculation]
    has_series: bool = True
    # formula keyword -> Settings attribute
    settings_kwargs: Optional[Mapping[str, str]] = None


CALCULATORS: Dict[str, CalculatorEntry] = {
    # Investments
    "sip": CalculatorEntry("SIP Calculator", SIPRequest, investments.calculate_sip),
    "step-up-sip": CalculatorEntry(
        "Step-Up SIP Calculator", StepUpSIPRequest, investments.calculate_step_up_sip
    ),
    "lumpsum": CalculatorEntry("Lumpsum Calculator", LumpsumRequest, investments.calculate_lumpsum),
    "cagr": CalculatorEntry("CAGR Calculator", CAGRRequest, investments.calculate_cagr),
    "nps": CalculatorEntry("NPS Calculator", NPSRequest, investments.calculate_nps),
    "inflation": CalculatorEntry(
        "Inflation Calculator", InflationRequest, investments.calculate_inflation
    ),
    # Loans
    "emi": CalculatorEntry("EMI Calculator", EMIRequest, loans.calculate_emi),
    "home-loan": CalculatorEntry("Home Loan EMI", EMIRequest, loans.calculate_emi),
    "car-loan": CalculatorEntry("Car Loan EMI", EMIRequest, loans.calculate_emi),
    "flat-vs-reducing": CalculatorEntry(
        "Flat vs Reducing Rate", FlatVsReducingRequest, loans.calculate_flat_vs_reducing
    ),
    "credit-card": CalculatorEntry(
        "Credit Card Payoff", CreditCardRequest, loans.calculate_credit_card_payoff
    ),
    # Interest and schemes
    "compound-interest": CalculatorEntry(
        "Compound Interest", CompoundInterestRequest, schemes.calculate_compound_interest
    ),
    "simple-interest": CalculatorEntry(
        "Simple Interest Calculator", SimpleInterestRequest, schemes.calculate_simple_interest
    ),
    "fd": CalculatorEntry("FD Calculator", FDRequest, schemes.calculate_fd),
    "rd": CalculatorEntry("RD Calculator", RDRequest, schemes.calculate_rd),
    "ppf": CalculatorEntry(
        "PPF Calculator", PPFRequest, schemes.calculate_ppf, settings_kwargs={"rate": "PPF_RATE"}
    ),
    "nsc": CalculatorEntry(
        "NSC Calculator", NSCRequest, schemes.calculate_nsc, settings_kwargs={"rate": "NSC_RATE"}
    ),
    "scss": CalculatorEntry(
        "SCSS Calculator", SCSSRequest, schemes.calculate_scss, settings_kwargs={"rate": "SCSS_RATE"}
    ),
    "post-office-mis": CalculatorEntry(
        "Post Office MIS", POMISRequest, schemes.calculate_pomis,
        settings_kwargs={"rate": "POMIS_RATE"},
    ),
    "apy": CalculatorEntry(
        "APY Calculator", APYRequest, schemes.calculate_apy,
        settings_kwargs={"assumed_return": "APY_ASSUMED_RETURN"},
    ),
    # Tax and salary
    "income-tax": CalculatorEntry(
        "Income Tax Calculator", IncomeTaxRequest, tax.calculate_income_tax, has_series=False
    ),
    "tds": CalculatorEntry("TDS Calculator", TDSRequest, tax.calculate_tds, has_series=False),
    "gst": CalculatorEntry("GST Calculator", GSTRequest, tax.calculate_gst, has_series=False),
    "hra": CalculatorEntry("HRA Calculator", HRARequest, tax.calculate_hra),
    "salary": CalculatorEntry(
        "Salary Calculator", SalaryRequest, tax.calculate_salary, has_series=False
    ),
    "gratuity": CalculatorEntry(
        "Gratuity Calculator", GratuityRequest, tax.calculate_gratuity, has_series=False,
        settings_kwargs={"cap": "GRATUITY_CAP"},
    ),
    # Trading
    "brokerage": CalculatorEntry(
        "Brokerage Calculator", BrokerageRequest, trading.calculate_brokerage, has_series=False
    ),
    "margin": CalculatorEntry(
        "Margin Calculator", MarginRequest, trading.calculate_margin, has_series=False
    ),
    "stock-average": CalculatorEntry(
        "Stock Average Price", StockAverageRequest, trading.calculate_stock_average
    ),
    # Planning
    "retirement": CalculatorEntry(
        "Retirement Calculator", RetirementRequest, retirement.calculate_retirement
    ),
}


def get_calculator(calc_type: str) -> CalculatorEntry:
    try:
        return CALCULATORS[calc_type]
    except KeyError:
        raise UnknownCalculator(calc_type) from None


def settings_overrides(entry: CalculatorEntry, settings: Settings) -> Dict[str, Any]:
    """Keyword arguments drawn from configuration for this calculator."""
    if not entry.settings_kwargs:
        return {}
    return {kw: getattr(settings, attr) for kw, attr in entry.settings_kwargs.items()}


def describe_calculators() -> List[CalculatorInfo]:
    return [
        CalculatorInfo(
            type=calc_type,
            title=entry.title,
            fields=list(entry.request_model.model_json_schema(by_alias=True)["properties"]),
            hasSeries=entry.has_series,
        )
        for calc_type, entry in CALCULATORS.items()
    ]
