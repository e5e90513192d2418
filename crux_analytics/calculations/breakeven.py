"""
Break-Even Analysis

Tracks cumulative revenue against cumulative cost, where cost starts at the
initial investment. Unlike payback this compares gross totals, and revenue
follows the unscaled revenue line regardless of the scenario multiplier.
"""

from crux_analytics.calculations.cashflow import monthly_costs, monthly_revenue
from crux_analytics.calculations.models import BreakEvenResult, CalculationInput

NOT_ACHIEVED = -1


def calculate_break_even(inputs: CalculationInput) -> BreakEvenResult:
    """
    Find the first month where cumulative revenue covers cumulative cost.

    Returns:
        BreakEvenResult with a 1-indexed month, or month=-1 and
        achieved=False when revenue never catches up within the horizon.
    """
    cumulative_revenue = []
    cumulative_costs = []
    months = []

    total_revenue = 0.0
    total_costs = float(inputs.initial_investment)
    cost_per_month = monthly_costs(inputs)

    break_even_month = NOT_ACHIEVED
    break_even_amount = 0.0

    for month in range(inputs.project_duration_months):
        total_revenue += monthly_revenue(inputs, month, scaled=False)
        total_costs += cost_per_month

        cumulative_revenue.append(total_revenue)
        cumulative_costs.append(total_costs)
        months.append(month + 1)

        if break_even_month == NOT_ACHIEVED and total_revenue >= total_costs:
            break_even_month = month + 1
            break_even_amount = total_revenue

    return BreakEvenResult(
        month=break_even_month,
        amount=break_even_amount,
        achieved=break_even_month != NOT_ACHIEVED,
        cumulative_revenue=tuple(cumulative_revenue),
        cumulative_costs=tuple(cumulative_costs),
        months=tuple(months),
    )


def break_even_percentage(break_even_month: int, project_duration_months: int) -> float:
    """Share of the project horizon elapsed at break-even (100 if never)."""
    if break_even_month == NOT_ACHIEVED:
        return 100.0
    return break_even_month / project_duration_months * 100
