"""
routes/history.py -- Saved calculations and calculator defaults
  POST /history/{type}      -- store an input/result pair
  GET  /history/{type}      -- all stored pairs for the calculator, oldest first
  PUT  /preferences/{type}  -- replace the calculator's default inputs
  GET  /preferences/{type}  -- fetch them (404 when never saved)

The product tag must be a registered calculator; stored payloads are kept
as given.
"""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.models import HistoryCreate, HistoryRecord, PreferencesRecord, PreferencesUpdate
from app.registry import get_calculator
from app.storage import CalculationStore, get_store

router = APIRouter()


@router.post("/history/{calc_type}", response_model=HistoryRecord, status_code=201)
def save_history(
    calc_type: str,
    body: HistoryCreate,
    store: CalculationStore = Depends(get_store),
) -> HistoryRecord:
    get_calculator(calc_type)
    return store.save_calculation(calc_type, input=body.input, result=body.result)


@router.get("/history/{calc_type}", response_model=List[HistoryRecord])
def fetch_history(
    calc_type: str,
    store: CalculationStore = Depends(get_store),
) -> List[HistoryRecord]:
    get_calculator(calc_type)
    return store.get_calculation_history(calc_type)


@router.put("/preferences/{calc_type}", response_model=PreferencesRecord)
def save_preferences(
    calc_type: str,
    body: PreferencesUpdate,
    store: CalculationStore = Depends(get_store),
) -> PreferencesRecord:
    get_calculator(calc_type)
    return store.save_preferences(calc_type, body.defaultValues)


@router.get("/preferences/{calc_type}", response_model=PreferencesRecord)
def fetch_preferences(
    calc_type: str,
    store: CalculationStore = Depends(get_store),
) -> PreferencesRecord:
    get_calculator(calc_type)
    preferences = store.get_preferences(calc_type)
    if preferences is None:
        raise HTTPException(status_code=404, detail=f"No preferences saved for {calc_type}")
    return preferences
