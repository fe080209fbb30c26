"""
routes/calculators.py -- Calculator endpoints
  GET  /calculators          -- catalogue of product tags and their fields
  POST /calculators/{type}   -- compute one calculator

Query flags on POST:
  series=false -- skip building the chart series
  save=true    -- also store the input/result pair as history
"""
from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from app.models import CalculationResponse, CalculatorInfo
from app.pipeline import record, run
from app.registry import describe_calculators
from app.storage import CalculationStore, get_store

router = APIRouter()


@router.get("/calculators", response_model=List[CalculatorInfo])
def list_calculators() -> List[CalculatorInfo]:
    return describe_calculators()


@router.post(
    "/calculators/{calc_type}",
    response_model=CalculationResponse,
    response_model_exclude_none=True,
)
def calculate(
    calc_type: str,
    payload: Dict[str, Any] = Body(...),
    series: bool = True,
    save: bool = False,
    store: CalculationStore = Depends(get_store),
) -> CalculationResponse:
    """
    Validate the body against the calculator's input model, compute, and
    return the result with its series (when the calculator has one).
    """
    body, calculation = run(calc_type, payload)

    history_id = None
    if save:
        history_id = record(store, calc_type, body, calculation).id

    return CalculationResponse(
        type=calc_type,
        result=calculation.result,
        series=calculation.series if series else None,
        historyId=history_id,
    )
