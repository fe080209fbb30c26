"""
app/main.py -- FastAPI application entry point.

Logging is configured once at import from Settings.LOG_LEVEL.
All routes registered under Settings.API_V1_PREFIX (default /api/v1).
Server runs on Settings.PORT (default 5477).
"""
from __future__ import annotations

from typing import Any, List

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.config import get_settings
from app.errors import InvalidInput, PersistenceFailure, UnknownCalculator
from app.logging_config import configure_logging, get_logger
from routes import calculators as _calculators_route
from routes import history as _history_route
from routes import performance as _perf_route

settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)

# FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Personal finance calculators: investments, loans, savings schemes, tax and retirement.",
)


# ---------------------------------------------------------------------------
# Error handlers -- 400 with a single clean message for bad input
# ---------------------------------------------------------------------------

def _first_error_message(errors: List[Any]) -> str:
    if not errors:
        return "Validation error"
    # Pydantic v2 stores the message in "msg"
    msg = errors[0].get("msg", "Validation error")
    # Strip "Value error, " prefix added by Pydantic v2 for ValueError
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    loc = [str(part) for part in errors[0].get("loc", ()) if part != "body"]
    return f"{'.'.join(loc)}: {msg}" if loc else msg


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": _first_error_message(exc.errors())})


@app.exception_handler(ValidationError)
async def model_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": _first_error_message(exc.errors())})


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput) -> JSONResponse:
    logger.info("invalid input", path=request.url.path, field=exc.field, detail=exc.message)
    return JSONResponse(status_code=400, content={"detail": exc.message, "field": exc.field})


@app.exception_handler(UnknownCalculator)
async def unknown_calculator_handler(request: Request, exc: UnknownCalculator) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(PersistenceFailure)
async def persistence_failure_handler(request: Request, exc: PersistenceFailure) -> JSONResponse:
    logger.error("persistence failure", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=503, content={"detail": str(exc)})


# ---------------------------------------------------------------------------
# Register routes
# ---------------------------------------------------------------------------

BASE = settings.API_V1_PREFIX

app.include_router(_calculators_route.router, prefix=BASE)
app.include_router(_history_route.router, prefix=BASE)
app.include_router(_perf_route.router, prefix=BASE)


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=False)
