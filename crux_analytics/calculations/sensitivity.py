"""
Sensitivity Analysis

Perturbs one input variable at a time, re-runs the scenario calculation and
reports NPV/ROI against the unperturbed base case. The tornado dataset ranks
variables by the NPV range they span over -30%..+30%.
"""

from dataclasses import replace
from typing import Dict, List, Sequence

from crux_analytics.calculations.errors import CalculationInputError
from crux_analytics.calculations.models import (
    CalculationInput,
    SensitivityResult,
    SensitivityVariable,
    TornadoEntry,
)
from crux_analytics.calculations.scenarios import calculate_financial_metrics

DEFAULT_VARIATIONS = (-30, -20, -10, 0, 10, 20, 30)
TORNADO_VARIATIONS = (-30, 0, 30)

INPUT_FIELDS = {
    SensitivityVariable.investment: "initial_investment",
    SensitivityVariable.revenue: "yearly_revenue",
    SensitivityVariable.operating_costs: "operating_costs_yearly",
    SensitivityVariable.maintenance_costs: "maintenance_costs_yearly",
}


def apply_variation(
    inputs: CalculationInput,
    variable: SensitivityVariable,
    variation_percent: float,
) -> CalculationInput:
    """Scale a single input variable by (1 + variation / 100)."""
    try:
        field = INPUT_FIELDS[SensitivityVariable(variable)]
    except ValueError:
        raise CalculationInputError(f"Unknown sensitivity variable: {variable!r}") from None

    factor = 1 + variation_percent / 100
    return replace(inputs, **{field: getattr(inputs, field) * factor})


def calculate_sensitivity(
    inputs: CalculationInput,
    variable: SensitivityVariable,
    variations: Sequence[int] = DEFAULT_VARIATIONS,
) -> List[SensitivityResult]:
    """
    Calculate NPV and ROI for each variation of one variable.

    Changes are measured against the unperturbed inputs, so the 0% entry
    (when present in the grid) always reports zero change.
    """
    base = calculate_financial_metrics(inputs)
    results = []

    for variation in variations:
        result = calculate_financial_metrics(apply_variation(inputs, variable, variation))
        results.append(
            SensitivityResult(
                variable=SensitivityVariable(variable),
                variation_percent=variation,
                npv=result.npv,
                roi=result.roi,
                npv_change=result.npv - base.npv,
                roi_change=result.roi - base.roi,
            )
        )

    return results


def calculate_multi_variable_sensitivity(
    inputs: CalculationInput,
    variations: Sequence[int] = DEFAULT_VARIATIONS,
) -> Dict[SensitivityVariable, List[SensitivityResult]]:
    """Run sensitivity analysis for every variable."""
    return {
        variable: calculate_sensitivity(inputs, variable, variations)
        for variable in SensitivityVariable
    }


def generate_tornado_data(inputs: CalculationInput) -> List[TornadoEntry]:
    """
    Build the tornado chart dataset.

    Entries are sorted by range, highest impact first. The sort is stable, so
    variables with equal range keep their enum order.
    """
    entries = []

    for variable in SensitivityVariable:
        by_variation = {
            r.variation_percent: r
            for r in calculate_sensitivity(inputs, variable, TORNADO_VARIATIONS)
        }
        base_npv = by_variation[0].npv
        negative_impact = by_variation[-30].npv - base_npv
        positive_impact = by_variation[30].npv - base_npv

        entries.append(
            TornadoEntry(
                variable=variable,
                negative_impact=negative_impact,
                positive_impact=positive_impact,
                range=abs(negative_impact) + abs(positive_impact),
            )
        )

    return sorted(entries, key=lambda e: e.range, reverse=True)
