"""
utils/trading.py -- Equity and derivatives trading cost calculators.

calculate_brokerage(trade_type, buy_price, sell_price, quantity)
calculate_margin(trade_type, price, quantity, lot_size, volatility)
calculate_stock_average(purchases, current_price)

Charges are quoted in rupees and rounded to paise (2 dp), since they are
usually small relative to the traded value.
"""
from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

from app.errors import InvalidInput
from app.models import Calculation
from app.utils.primitives import round2
from app.utils.validator import require_choice, require_positive, require_range


# ---------------------------------------------------------------------------
# Brokerage and statutory charges
# ---------------------------------------------------------------------------

BROKERAGE_TYPES = ("delivery", "intraday", "futures", "options")

# trade type -> (brokerage rate on turnover, brokerage cap per order)
BROKERAGE_RATES = {
    "delivery": (0.0003, 20.0),
    "intraday": (0.0002, 20.0),
    "futures": (0.0002, 20.0),
    "options": (0.0002, 40.0),
}

# trade type -> (STT rate, charged on "turnover" or "sell" value)
STT_RATES = {
    "delivery": (0.001, "turnover"),
    "intraday": (0.00025, "sell"),
    "futures": (0.0001, "sell"),
    "options": (0.0005, "sell"),
}

STAMP_DUTY_RATES = {
    "delivery": 0.00015,
    "intraday": 0.00003,
    "futures": 0.00003,
    "options": 0.00003,
}

EXCHANGE_CHARGE_RATE = 0.0000345
SEBI_FEE_RATE = 0.000001
GST_RATE = 0.18


def calculate_brokerage(
    trade_type: str,
    buy_price: float,
    sell_price: float,
    quantity: int,
) -> Calculation:
    """
    Round-trip cost of a trade: brokerage, STT, exchange transaction charges,
    GST on brokerage and exchange charges, SEBI fee and stamp duty, plus the
    break-even prices those charges imply.
    """
    require_choice("type", trade_type, BROKERAGE_TYPES)
    require_positive("buy_price", buy_price)
    require_positive("sell_price", sell_price)
    require_positive("quantity", quantity)

    buy_value = buy_price * quantity
    sell_value = sell_price * quantity
    turnover = buy_value + sell_value

    rate, cap = BROKERAGE_RATES[trade_type]
    brokerage = min(turnover * rate, cap)

    stt_rate, stt_base = STT_RATES[trade_type]
    stt = (turnover if stt_base == "turnover" else sell_value) * stt_rate

    exchange_charges = turnover * EXCHANGE_CHARGE_RATE
    gst = (brokerage + exchange_charges) * GST_RATE
    sebi = turnover * SEBI_FEE_RATE
    stamp_duty = buy_value * STAMP_DUTY_RATES[trade_type]

    total_charges = brokerage + stt + exchange_charges + gst + sebi + stamp_duty
    charges_per_unit = total_charges / quantity

    return Calculation(
        {
            "buyValue": round2(buy_value),
            "sellValue": round2(sell_value),
            "totalTurnover": round2(turnover),
            "brokerage": round2(brokerage),
            "stt": round2(stt),
            "exchangeCharges": round2(exchange_charges),
            "gst": round2(gst),
            "sebi": round2(sebi),
            "stampDuty": round2(stamp_duty),
            "totalCharges": round2(total_charges),
            "netProfitLoss": round2(sell_value - buy_value - total_charges),
            "breakEvenPriceUp": round2(buy_price + charges_per_unit),
            "breakEvenPriceDown": round2(sell_price - charges_per_unit),
        }
    )


# ---------------------------------------------------------------------------
# Margin
# ---------------------------------------------------------------------------

EXPOSURE_MARGIN_RATES = {"equity": 0.20, "futures": 0.25, "options": 0.15}
SPAN_MULTIPLIER = 1.5


def calculate_margin(
    trade_type: str,
    price: float,
    quantity: int,
    lot_size: int = 1,
    volatility: float = 15.0,
) -> Calculation:
    """
    Simplified margin: VaR margin at ``volatility`` %, an exposure margin by
    segment, and for derivatives a SPAN margin of 1.5x VaR.
    """
    require_choice("type", trade_type, EXPOSURE_MARGIN_RATES)
    require_positive("price", price)
    require_positive("quantity", quantity)
    require_positive("lot_size", lot_size)
    require_range("volatility", volatility, 0, 100)
    require_positive("volatility", volatility)

    total_value = price * quantity * lot_size
    var_margin = total_value * volatility / 100
    exposure_margin = total_value * EXPOSURE_MARGIN_RATES[trade_type]
    span_margin = var_margin * SPAN_MULTIPLIER if trade_type != "equity" else 0.0
    total_margin = var_margin + exposure_margin + span_margin

    return Calculation(
        {
            "totalValue": round2(total_value),
            "varMargin": round2(var_margin),
            "exposureMargin": round2(exposure_margin),
            "spanMargin": round2(span_margin),
            "totalMargin": round2(total_margin),
            "marginPercentage": round2(total_margin / total_value * 100),
        }
    )


# ---------------------------------------------------------------------------
# Stock average price
# ---------------------------------------------------------------------------

def calculate_stock_average(
    purchases: Sequence[Mapping[str, float]],
    current_price: Optional[float] = None,
) -> Calculation:
    """
    Weighted average cost of several buys of the same stock. The series is
    the running average after each purchase.
    """
    if not purchases:
        raise InvalidInput("purchases", "At least one purchase is required")

    total_quantity = 0.0
    total_investment = 0.0
    running_average: List[dict] = []
    for i, purchase in enumerate(purchases, start=1):
        price = require_positive("price", purchase["price"])
        quantity = require_positive("quantity", purchase["quantity"])
        total_quantity += quantity
        total_investment += price * quantity
        running_average.append(
            {"label": f"Purchase {i}", "value": round2(total_investment / total_quantity)}
        )

    average_price = total_investment / total_quantity
    result = {
        "totalQuantity": total_quantity,
        "totalInvestment": round2(total_investment),
        "averagePrice": round2(average_price),
    }

    if current_price is not None:
        require_positive("current_price", current_price)
        current_value = current_price * total_quantity
        profit_loss = current_value - total_investment
        result.update(
            {
                "currentValue": round2(current_value),
                "profitLoss": round2(profit_loss),
                "profitLossPercentage": round2(profit_loss / total_investment * 100),
            }
        )

    return Calculation(result, lambda: running_average)
