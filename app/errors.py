"""
app/errors.py -- Exception taxonomy shared by formulas, stores and routes.

InvalidInput       -> sign / range / threshold violation (HTTP 400)
UnknownCalculator  -> product tag not in the registry   (HTTP 404)
PersistenceFailure -> history/preferences store failed  (HTTP 503)
"""
from __future__ import annotations


class CalculatorError(Exception):
    """Base class for every error raised by this service."""


class InvalidInput(CalculatorError, ValueError):
    """An input violated a constraint before any computation ran."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


class UnknownCalculator(CalculatorError, KeyError):
    def __init__(self, calc_type: str) -> None:
        super().__init__(calc_type)
        self.calc_type = calc_type

    def __str__(self) -> str:
        return f"Unknown calculator type: {self.calc_type}"


class PersistenceFailure(CalculatorError):
    """The history/preferences store was unreachable or rejected a record."""
