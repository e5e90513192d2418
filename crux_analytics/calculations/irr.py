"""
IRR and NPV Calculations

NPV discounts monthly cash flows at the annual rate divided by 12. IRR is
solved for a monthly rate with Newton-Raphson and annualized by compounding.
"""

import logging
import math
from typing import Sequence

import numpy as np

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 100
TOLERANCE = 1e-4
DERIVATIVE_FLOOR = 1e-10
DEFAULT_GUESS = 0.10 / 12
MIN_MONTHLY_RATE = -0.99
MAX_MONTHLY_RATE = 10.0


def calculate_npv(
    initial_investment: float,
    cash_flows: Sequence[float],
    discount_rate: float,
) -> float:
    """
    Calculate NPV (Net Present Value) of monthly cash flows.

    Args:
        initial_investment: Upfront outflow at period 0
        cash_flows: Monthly net cash flows, first entry discounted one period
        discount_rate: Annual discount rate as a percentage (e.g., 10 for 10%)

    Returns:
        NPV value
    """
    period_rate = discount_rate / 100 / 12

    npv = -initial_investment
    for month, cf in enumerate(cash_flows, start=1):
        npv += cf / ((1 + period_rate) ** month)
    return npv


def npv_at_monthly_rate(flows: Sequence[float], rate: float) -> float:
    """NPV of a series whose first entry falls at period 0."""
    periods = np.arange(len(flows))
    return float(np.sum(np.asarray(flows, dtype=float) / (1 + rate) ** periods))


def _npv_derivative(flows: Sequence[float], rate: float) -> float:
    """Calculate derivative of NPV with respect to rate (for Newton-Raphson)."""
    periods = np.arange(len(flows))
    values = np.asarray(flows, dtype=float)
    return float(np.sum(-periods * values / (1 + rate) ** (periods + 1)))


def calculate_irr(
    initial_investment: float,
    cash_flows: Sequence[float],
    guess: float = DEFAULT_GUESS,
) -> float:
    """
    Calculate IRR (Internal Rate of Return) using Newton-Raphson method.

    Solves for the monthly rate that zeroes the NPV of
    [-initial_investment, *cash_flows] and annualizes it.

    Never raises on numeric trouble. When the iteration stalls on a flat
    derivative or runs out of iterations the latest estimate is returned; when
    it leaves [-0.99, 10] the seed rate is returned. Series without a sign
    change have no real IRR, so callers must treat the value as approximate.

    Convergence is judged on the rate step, not on the NPV, so the residual
    NPV at the returned rate scales with the size of the flows. It stays
    small relative to the investment, but large projects can leave an
    absolute residual well above a cent.

    Args:
        initial_investment: Upfront outflow at period 0
        cash_flows: Monthly net cash flows
        guess: Initial monthly rate (default 10% / 12)

    Returns:
        Annual IRR as a percentage (e.g., 15.0 for 15%)
    """
    flows = [-initial_investment, *cash_flows]
    rate = guess
    converged = False

    for _ in range(MAX_ITERATIONS):
        npv = npv_at_monthly_rate(flows, rate)
        dnpv = _npv_derivative(flows, rate)

        if abs(dnpv) < DERIVATIVE_FLOOR:
            break

        new_rate = rate - npv / dnpv

        if not math.isfinite(new_rate) or not MIN_MONTHLY_RATE <= new_rate <= MAX_MONTHLY_RATE:
            rate = guess
            break

        if abs(new_rate - rate) < TOLERANCE:
            rate = new_rate
            converged = True
            break

        rate = new_rate

    if not converged:
        logger.debug(
            "IRR did not converge for %d periods, returning monthly rate %.6f",
            len(flows),
            rate,
        )

    return monthly_to_annual_irr(rate) * 100


def monthly_to_annual_irr(monthly_irr: float) -> float:
    """Convert monthly IRR to annual IRR."""
    return ((1 + monthly_irr) ** 12) - 1


def annual_to_monthly_irr(annual_irr: float) -> float:
    """Convert annual IRR to monthly IRR."""
    return ((1 + annual_irr) ** (1 / 12)) - 1
