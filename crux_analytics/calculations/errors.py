"""
Calculation Errors

Raised only for inputs the engine cannot reason about. Expected numeric edge
cases (no payback, no break-even, IRR not converging) return sentinel values.
"""


class CalculationError(Exception):
    """Base class for calculation engine errors."""


class CalculationInputError(CalculationError, ValueError):
    """Input is non-finite or outside the numeric domain."""


class ZeroInvestmentError(CalculationError, ZeroDivisionError):
    """ROI requested with a zero initial investment."""

    def __init__(self, message: str = "ROI is undefined for a zero initial investment"):
        super().__init__(message)
