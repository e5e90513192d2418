"""
Scenario Calculations

Bundles the projector, ROI, NPV, payback and IRR into one result, and runs
that bundle for expected/best/worst multipliers or what-if adjustments.
"""

from dataclasses import replace

from crux_analytics.calculations.cashflow import project_cash_flows
from crux_analytics.calculations.irr import calculate_irr, calculate_npv
from crux_analytics.calculations.metrics import calculate_payback_period, calculate_roi
from crux_analytics.calculations.models import (
    CalculationInput,
    CalculationResult,
    ScenarioAdjustments,
    ScenarioComparison,
    ScenarioSet,
)

DEFAULT_BEST_CASE_MULTIPLIER = 1.3
DEFAULT_WORST_CASE_MULTIPLIER = 0.7


def calculate_financial_metrics(inputs: CalculationInput) -> CalculationResult:
    """
    Calculate all financial metrics for one scenario.

    Raises:
        ZeroInvestmentError: If initial_investment is zero (ROI divisor)
    """
    monthly, cumulative = project_cash_flows(inputs)

    return CalculationResult(
        roi=calculate_roi(inputs.initial_investment, monthly),
        npv=calculate_npv(inputs.initial_investment, monthly, inputs.discount_rate),
        payback_period_months=calculate_payback_period(inputs.initial_investment, monthly),
        irr=calculate_irr(inputs.initial_investment, monthly),
        monthly_cash_flow=monthly,
        cumulative_cash_flow=cumulative,
    )


def with_multiplier(inputs: CalculationInput, multiplier: float) -> CalculationInput:
    """Return a copy of the inputs with a different revenue multiplier."""
    return replace(inputs, multiplier=multiplier)


def calculate_all_scenarios(
    inputs: CalculationInput,
    best_multiplier: float = DEFAULT_BEST_CASE_MULTIPLIER,
    worst_multiplier: float = DEFAULT_WORST_CASE_MULTIPLIER,
) -> ScenarioSet:
    """Calculate expected (multiplier 1.0), best and worst cases."""
    return ScenarioSet(
        expected=calculate_financial_metrics(with_multiplier(inputs, 1.0)),
        best=calculate_financial_metrics(with_multiplier(inputs, best_multiplier)),
        worst=calculate_financial_metrics(with_multiplier(inputs, worst_multiplier)),
    )


def apply_adjustments(
    inputs: CalculationInput, adjustments: ScenarioAdjustments
) -> CalculationInput:
    """
    Apply what-if adjustments to a base input.

    Sales and costs adjustments are percentages that scale revenue and both
    cost lines. The discount adjustment is added to the rate in percentage
    points.
    """
    sales_factor = 1 + adjustments.sales_adjustment_percent / 100
    costs_factor = 1 + adjustments.costs_adjustment_percent / 100

    return replace(
        inputs,
        yearly_revenue=inputs.yearly_revenue * sales_factor,
        operating_costs_yearly=inputs.operating_costs_yearly * costs_factor,
        maintenance_costs_yearly=inputs.maintenance_costs_yearly * costs_factor,
        discount_rate=inputs.discount_rate + adjustments.discount_adjustment,
    )


def calculate_scenario_with_adjustments(
    inputs: CalculationInput, adjustments: ScenarioAdjustments
) -> CalculationResult:
    """Calculate metrics for a base input with what-if adjustments applied."""
    return calculate_financial_metrics(apply_adjustments(inputs, adjustments))


def compare_results(base: CalculationResult, other: CalculationResult) -> ScenarioComparison:
    """Metric differences between two results (other minus base)."""
    return ScenarioComparison(
        roi_diff=other.roi - base.roi,
        npv_diff=other.npv - base.npv,
        irr_diff=other.irr - base.irr,
        payback_diff=other.payback_period_months - base.payback_period_months,
    )
