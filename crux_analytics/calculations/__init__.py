"""
Financial Calculation Engine

Pure functions over immutable inputs: cash-flow projection, NPV, IRR,
payback, ROI, scenarios, break-even and sensitivity analysis. Nothing here
touches storage, HTTP or presentation.
"""

from crux_analytics.calculations import (
    breakeven,
    cashflow,
    irr,
    metrics,
    scenarios,
    sensitivity,
)
from crux_analytics.calculations.errors import (
    CalculationError,
    CalculationInputError,
    ZeroInvestmentError,
)
from crux_analytics.calculations.models import CalculationInput, CalculationResult

__all__ = [
    "breakeven",
    "cashflow",
    "irr",
    "metrics",
    "scenarios",
    "sensitivity",
    "CalculationError",
    "CalculationInputError",
    "ZeroInvestmentError",
    "CalculationInput",
    "CalculationResult",
]
