"""
Cash Flow Projection

Turns project economics into a monthly net cash-flow series and its running
cumulative total. Revenue growth steps up once per completed project year.
"""

from typing import Dict, List, Sequence, Tuple

import numpy as np

from crux_analytics.calculations.models import CalculationInput


def calculate_growth_factor(growth_percent: float, month: int) -> float:
    """
    Calculate the revenue growth factor for a given month.

    All months within the same project year share a factor; growth compounds
    once per completed year, not continuously.

    Args:
        growth_percent: Annual growth as a percentage (e.g., 5 for 5%)
        month: Month index (0-based)
    """
    years = month // 12
    return (1 + growth_percent / 100) ** years


def monthly_revenue(inputs: CalculationInput, month: int, scaled: bool = True) -> float:
    """Revenue earned in one month, optionally scaled by the scenario multiplier."""
    growth = calculate_growth_factor(inputs.revenue_growth_percent, month)
    multiplier = inputs.multiplier if scaled else 1.0
    return inputs.yearly_revenue * growth * multiplier / 12


def monthly_costs(inputs: CalculationInput) -> float:
    """Operating plus maintenance costs for one month."""
    return (inputs.operating_costs_yearly + inputs.maintenance_costs_yearly) / 12


def project_cash_flows(
    inputs: CalculationInput,
) -> Tuple[Tuple[float, ...], Tuple[float, ...]]:
    """
    Project monthly net cash flows over the project duration.

    Args:
        inputs: Project economics

    Returns:
        (monthly_cash_flow, cumulative_cash_flow). The cumulative series starts
        from -initial_investment, so cumulative[0] already includes month 0.
    """
    months = np.arange(inputs.project_duration_months)
    growth = (1 + inputs.revenue_growth_percent / 100) ** (months // 12)

    revenue = inputs.yearly_revenue * growth * inputs.multiplier / 12
    net = revenue - monthly_costs(inputs)

    # Seed the running sum with the outflow so each step adds exactly one month
    running = np.cumsum(np.concatenate(([-float(inputs.initial_investment)], net)))

    monthly = tuple(float(cf) for cf in net)
    cumulative = tuple(float(total) for total in running[1:])
    return monthly, cumulative


def annualize_cash_flows(monthly_cash_flow: Sequence[float]) -> List[Dict]:
    """
    Roll monthly net cash flows up into project-year totals.

    A trailing partial year is reported with the months it has.
    """
    annual_data = []

    for start in range(0, len(monthly_cash_flow), 12):
        year_months = monthly_cash_flow[start:start + 12]
        annual_data.append(
            {
                "year": start // 12 + 1,
                "months": len(year_months),
                "net_cash_flow": round(sum(year_months), 2),
            }
        )

    return annual_data
