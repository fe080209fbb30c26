"""
pipeline.py -- Master orchestration for one calculator request.

run(calc_type, payload, settings=None)
  Runs: lookup -> validate body -> inject configured rates -> compute

record(store, calc_type, body, calculation)
  Stores the validated input (camelCase) and the result as history.

Critical rules implemented here:
  - The formula functions stay pure; configuration reaches them only as
    explicit keyword arguments resolved here.
  - The series is NOT built here; callers read Calculation.series only when
    they need it.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

from app.config import Settings, get_settings
from app.logging_config import get_logger
from app.models import Calculation, CalculatorRequest, HistoryRecord
from app.registry import get_calculator, settings_overrides
from app.storage import CalculationStore

logger = get_logger(__name__)


def run(
    calc_type: str,
    payload: Mapping[str, Any],
    settings: Optional[Settings] = None,
) -> Tuple[CalculatorRequest, Calculation]:
    """
    Validate ``payload`` for ``calc_type`` and compute the result.

    Raises:
        UnknownCalculator   -- calc_type is not registered
        pydantic.ValidationError -- payload has wrong types or unknown keys
        InvalidInput        -- a value violates a calculator constraint
    """
    settings = settings or get_settings()
    entry = get_calculator(calc_type)

    body = entry.request_model.model_validate(payload)
    kwargs = body.model_dump()
    kwargs.update(settings_overrides(entry, settings))

    calculation = entry.func(**kwargs)
    logger.debug("calculation computed", calc_type=calc_type, result=calculation.result)
    return body, calculation


def record(
    store: CalculationStore,
    calc_type: str,
    body: CalculatorRequest,
    calculation: Calculation,
) -> HistoryRecord:
    return store.save_calculation(
        calc_type,
        input=body.model_dump(by_alias=True),
        result=calculation.result,
    )
