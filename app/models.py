"""
Pydantic models for the Personal Finance Calculators API.

Request bodies use camelCase JSON keys and snake_case attributes, so a
validated body can be splatted straight into its formula function with
``model_dump()``. Range and sign rules live in the formula functions
(app/utils/validator.py); the models only enforce types and categories.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Dict, List, Literal, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Input models
# ---------------------------------------------------------------------------

class CalculatorRequest(BaseModel):
    """Base for every calculator body: camelCase aliases, no unknown keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )


# Recurring and lump-sum investments

class SIPRequest(CalculatorRequest):
    monthly_investment: float
    years: int
    expected_return: float


class StepUpSIPRequest(CalculatorRequest):
    initial_monthly_investment: float
    years: int
    expected_return: float
    annual_increment: float = 0.0


class LumpsumRequest(CalculatorRequest):
    principal: float
    years: int
    expected_return: float


class CAGRRequest(CalculatorRequest):
    initial_value: float
    final_value: float
    years: int


class NPSRequest(CalculatorRequest):
    monthly_contribution: float
    current_age: int
    retirement_age: int = 60
    equity_allocation: float = 50.0
    expected_return: float
    annuity_percentage: float = 40.0
    annuity_rate: float = 6.0


class InflationRequest(CalculatorRequest):
    current_cost: float
    inflation_rate: float
    years: int


# Loans

class EMIRequest(CalculatorRequest):
    principal: float
    rate: float
    tenure: int


class FlatVsReducingRequest(CalculatorRequest):
    principal: float
    tenure: int
    flat_rate: float
    reducing_rate: float


class CreditCardRequest(CalculatorRequest):
    balance: float
    apr: float
    monthly_payment: float


# Interest and fixed-term schemes

class CompoundInterestRequest(CalculatorRequest):
    principal: float
    rate: float
    time: int
    frequency: int = 1


class SimpleInterestRequest(CalculatorRequest):
    principal: float
    rate: float
    time: int


class PPFRequest(CalculatorRequest):
    yearly_investment: float
    years: int = 15


class FDRequest(CalculatorRequest):
    principal: float
    rate: float
    years: int
    compounding_frequency: int = 4


class RDRequest(CalculatorRequest):
    monthly_investment: float
    rate: float
    years: int


class NSCRequest(CalculatorRequest):
    principal: float
    years: int = 5


class SCSSRequest(CalculatorRequest):
    principal: float
    years: int = 5


class POMISRequest(CalculatorRequest):
    principal: float
    account_type: Literal["single", "joint"] = "single"
    years: int = 5


class APYRequest(CalculatorRequest):
    current_age: int
    desired_pension: float


# Tax and salary

class IncomeTaxRequest(CalculatorRequest):
    income: float
    deductions: float = 0.0
    regime: Literal["old", "new"] = "new"


class TDSRequest(CalculatorRequest):
    amount: float
    payment_type: Literal[
        "salary", "professional_fees", "rent", "commission", "interest", "contractor"
    ]
    is_non_resident: bool = False


class GSTRequest(CalculatorRequest):
    amount: float
    gst_rate: float
    is_inclusive: bool = False


class HRARequest(CalculatorRequest):
    basic_salary: float
    rent_paid: float
    city_type: Literal["metro", "non-metro"]
    hra_received: Optional[float] = None


class SalaryRequest(CalculatorRequest):
    basic_salary: float
    hra: float = 0.0
    basic_allowance: float = 0.0
    special_allowance: float = 0.0
    conveyance_allowance: float = 0.0
    medical_allowance: float = 0.0
    other_allowances: float = 0.0
    extra_deductions: float = 0.0


class GratuityRequest(CalculatorRequest):
    basic_salary: float
    years_of_service: float


# Trading costs

class BrokerageRequest(CalculatorRequest):
    trade_type: Literal["delivery", "intraday", "futures", "options"] = Field(alias="type")
    buy_price: float
    sell_price: float
    quantity: int


class MarginRequest(CalculatorRequest):
    trade_type: Literal["equity", "futures", "options"] = Field(alias="type")
    price: float
    quantity: int
    lot_size: int = 1
    volatility: float = 15.0


class Purchase(CalculatorRequest):
    price: float
    quantity: float


class StockAverageRequest(CalculatorRequest):
    purchases: List[Purchase]
    current_price: Optional[float] = None


# Retirement

class RetirementRequest(CalculatorRequest):
    current_age: int
    retirement_age: int
    monthly_expenses: float
    current_savings: float = 0.0
    monthly_investment: float = 0.0
    expected_return: float
    inflation_rate: float = 6.0
    annual_expense_increase: float = 0.0
    annual_investment_increase: float = 0.0
    fire_type: Literal["lean", "mid", "fat"] = "mid"


# ---------------------------------------------------------------------------
# Request bodies (persistence)
# ---------------------------------------------------------------------------

class HistoryCreate(BaseModel):
    input: Dict[str, Any]
    result: Dict[str, Any]


class PreferencesUpdate(BaseModel):
    defaultValues: Dict[str, Any]


# ---------------------------------------------------------------------------
# Response / output models
# ---------------------------------------------------------------------------

class SeriesPoint(BaseModel):
    label: str
    value: float


class CalculationResponse(BaseModel):
    type: str
    result: Dict[str, Any]
    series: Optional[List[SeriesPoint]] = None
    historyId: Optional[int] = None


class CalculatorInfo(BaseModel):
    type: str
    title: str
    fields: List[str]
    hasSeries: bool


class HistoryRecord(BaseModel):
    id: int
    type: str
    input: Dict[str, Any]
    result: Dict[str, Any]
    createdAt: datetime


class PreferencesRecord(BaseModel):
    id: int
    calculatorType: str
    defaultValues: Dict[str, Any]
    updatedAt: datetime


class PerformanceResponse(BaseModel):
    time: str
    memory: str
    threads: int
    calculators: int


# ---------------------------------------------------------------------------
# Internal data containers (not Pydantic, used inside the formula layer)
# ---------------------------------------------------------------------------

class TaxSlab(NamedTuple):
    """One bracket of a progressive table; ``rate`` is a percentage."""

    upper_bound: float
    rate: float


class Calculation:
    """
    Outcome of one formula call: the result mapping plus a series that is
    only built when first read. ``series`` is None for point calculations.
    """

    __slots__ = ("result", "_series_factory", "_series")

    def __init__(
        self,
        result: Dict[str, Any],
        series_factory: Optional[Callable[[], List[dict]]] = None,
    ) -> None:
        self.result = result
        self._series_factory = series_factory
        self._series: Optional[List[dict]] = None

    @property
    def has_series(self) -> bool:
        return self._series_factory is not None

    @property
    def series(self) -> Optional[List[dict]]:
        if self._series_factory is None:
            return None
        if self._series is None:
            self._series = self._series_factory()
        return self._series
