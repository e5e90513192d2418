"""
Return Metrics

ROI and payback period over a monthly cash-flow series.
"""

from typing import Sequence

from crux_analytics.calculations.errors import ZeroInvestmentError


def calculate_roi(initial_investment: float, cash_flows: Sequence[float]) -> float:
    """
    Calculate ROI as a simple total-return ratio.

    Not time-discounted: (sum of cash flows - investment) / investment.

    Returns:
        ROI as a percentage

    Raises:
        ZeroInvestmentError: If initial_investment is zero
    """
    if initial_investment == 0:
        raise ZeroInvestmentError()

    total = sum(cash_flows)
    return (total - initial_investment) / initial_investment * 100


def calculate_payback_period(
    initial_investment: float, cash_flows: Sequence[float]
) -> float:
    """
    Calculate the payback period in months.

    Interpolates linearly inside the month where the cumulative total turns
    non-negative. If the investment is never recovered, returns the horizon
    length.
    """
    cumulative = -initial_investment

    for month, cf in enumerate(cash_flows):
        previous = cumulative
        cumulative += cf

        if cumulative >= 0:
            fraction = -previous / cf if cf else 0.0
            return month + fraction

    return float(len(cash_flows))
