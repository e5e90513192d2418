"""
Financial calculation API endpoints.

These endpoints accept project economics and return calculated results.
Nothing is stored; see the projects API for persisted cases.
"""

from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from crux_analytics.calculations import breakeven, cashflow, scenarios, sensitivity
from crux_analytics.calculations.errors import CalculationError
from crux_analytics.calculations.models import (
    CalculationInput,
    CalculationResult,
    ScenarioAdjustments,
    SensitivityVariable,
)
from crux_analytics.services.insights import generate_insights

router = APIRouter()


class CalculationInputSchema(BaseModel):
    """Project economics for a calculation."""

    initial_investment: float
    discount_rate: float  # Annual percent
    project_duration_months: int
    yearly_revenue: float
    revenue_growth_percent: float = 0.0
    operating_costs_yearly: float = 0.0
    maintenance_costs_yearly: float = 0.0
    multiplier: float = 1.0

    def to_input(self) -> CalculationInput:
        return CalculationInput(**self.model_dump())


class AdjustmentsSchema(BaseModel):
    """What-if adjustments (sales/costs in percent, discount in points)."""

    sales_adjustment_percent: float = 0.0
    costs_adjustment_percent: float = 0.0
    discount_adjustment: float = 0.0

    def to_adjustments(self) -> ScenarioAdjustments:
        return ScenarioAdjustments(
            sales_adjustment_percent=self.sales_adjustment_percent,
            costs_adjustment_percent=self.costs_adjustment_percent,
            discount_adjustment=self.discount_adjustment,
        )


class CalculationResultResponse(BaseModel):
    """Calculated metrics and cash-flow series."""

    roi: float
    npv: float
    payback_period_months: float
    irr: float
    monthly_cash_flow: List[float]
    cumulative_cash_flow: List[float]
    annual_cash_flow: List[dict] = []


def result_to_response(result: CalculationResult) -> CalculationResultResponse:
    """Convert an engine result to the response schema."""
    return CalculationResultResponse(
        **asdict(result),
        annual_cash_flow=cashflow.annualize_cash_flows(result.monthly_cash_flow),
    )


@router.post("/metrics", response_model=CalculationResultResponse)
async def calculate_metrics(inputs: CalculationInputSchema):
    """Calculate ROI, NPV, payback, IRR and cash flows for one scenario."""
    try:
        result = scenarios.calculate_financial_metrics(inputs.to_input())
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result_to_response(result)


class ScenarioSetInput(BaseModel):
    """Inputs plus the best/worst case revenue multipliers."""

    inputs: CalculationInputSchema
    best_multiplier: float = scenarios.DEFAULT_BEST_CASE_MULTIPLIER
    worst_multiplier: float = scenarios.DEFAULT_WORST_CASE_MULTIPLIER


class ScenarioSetResponse(BaseModel):
    """Expected, best and worst case results."""

    expected: CalculationResultResponse
    best: CalculationResultResponse
    worst: CalculationResultResponse


@router.post("/scenarios", response_model=ScenarioSetResponse)
async def calculate_scenarios(payload: ScenarioSetInput):
    """Calculate expected, best and worst cases."""
    try:
        scenario_set = scenarios.calculate_all_scenarios(
            payload.inputs.to_input(),
            best_multiplier=payload.best_multiplier,
            worst_multiplier=payload.worst_multiplier,
        )
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ScenarioSetResponse(
        expected=result_to_response(scenario_set.expected),
        best=result_to_response(scenario_set.best),
        worst=result_to_response(scenario_set.worst),
    )


class AdjustedInput(BaseModel):
    """Base inputs with what-if adjustments."""

    inputs: CalculationInputSchema
    adjustments: AdjustmentsSchema = AdjustmentsSchema()


@router.post("/adjusted", response_model=CalculationResultResponse)
async def calculate_adjusted(payload: AdjustedInput):
    """Calculate metrics after applying sales/costs/discount adjustments."""
    try:
        result = scenarios.calculate_scenario_with_adjustments(
            payload.inputs.to_input(), payload.adjustments.to_adjustments()
        )
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return result_to_response(result)


class ComparisonInput(BaseModel):
    """Two adjustment sets over the same base inputs."""

    inputs: CalculationInputSchema
    base: AdjustmentsSchema = AdjustmentsSchema()
    comparison: AdjustmentsSchema


class ComparisonDifferences(BaseModel):
    roi_diff: float
    npv_diff: float
    irr_diff: float
    payback_diff: float


class ComparisonResponse(BaseModel):
    """Both results and their differences (comparison minus base)."""

    base: CalculationResultResponse
    comparison: CalculationResultResponse
    differences: ComparisonDifferences


@router.post("/compare", response_model=ComparisonResponse)
async def compare_scenarios(payload: ComparisonInput):
    """Compare two what-if adjustment sets."""
    try:
        inputs = payload.inputs.to_input()
        base = scenarios.calculate_scenario_with_adjustments(
            inputs, payload.base.to_adjustments()
        )
        other = scenarios.calculate_scenario_with_adjustments(
            inputs, payload.comparison.to_adjustments()
        )
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ComparisonResponse(
        base=result_to_response(base),
        comparison=result_to_response(other),
        differences=ComparisonDifferences(**asdict(scenarios.compare_results(base, other))),
    )


class BreakEvenResponse(BaseModel):
    """Break-even month and the cumulative series behind it."""

    month: int
    amount: float
    achieved: bool
    percentage_of_duration: float
    cumulative_revenue: List[float]
    cumulative_costs: List[float]
    months: List[int]


@router.post("/break-even", response_model=BreakEvenResponse)
async def calculate_break_even(inputs: CalculationInputSchema):
    """Find the month cumulative revenue covers cumulative cost."""
    try:
        calc_input = inputs.to_input()
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = breakeven.calculate_break_even(calc_input)

    return BreakEvenResponse(
        **asdict(result),
        percentage_of_duration=breakeven.break_even_percentage(
            result.month, calc_input.project_duration_months
        ),
    )


class SensitivityInput(BaseModel):
    """Inputs and the variation grid in percent."""

    inputs: CalculationInputSchema
    variations: List[int] = list(sensitivity.DEFAULT_VARIATIONS)
    variables: Optional[List[SensitivityVariable]] = None


class SensitivityResultResponse(BaseModel):
    variable: SensitivityVariable
    label: str
    variation_percent: int
    npv: float
    roi: float
    npv_change: float
    roi_change: float


class SensitivityResponse(BaseModel):
    results: Dict[str, List[SensitivityResultResponse]]


@router.post("/sensitivity", response_model=SensitivityResponse)
async def calculate_sensitivity(payload: SensitivityInput):
    """Perturb each variable across the variation grid."""
    variables = payload.variables or list(SensitivityVariable)

    try:
        calc_input = payload.inputs.to_input()
        results = {
            variable.value: [
                SensitivityResultResponse(**asdict(r), label=variable.label)
                for r in sensitivity.calculate_sensitivity(
                    calc_input, variable, payload.variations
                )
            ]
            for variable in variables
        }
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return SensitivityResponse(results=results)


class TornadoEntryResponse(BaseModel):
    variable: SensitivityVariable
    label: str
    negative_impact: float
    positive_impact: float
    range: float


class TornadoResponse(BaseModel):
    """Variables ordered by NPV impact range, largest first."""

    entries: List[TornadoEntryResponse]


@router.post("/tornado", response_model=TornadoResponse)
async def calculate_tornado(inputs: CalculationInputSchema):
    """Rank variables by their NPV impact over -30%..+30%."""
    try:
        entries = sensitivity.generate_tornado_data(inputs.to_input())
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return TornadoResponse(
        entries=[
            TornadoEntryResponse(**asdict(entry), label=entry.variable.label)
            for entry in entries
        ]
    )


class MetricInsightResponse(BaseModel):
    metric: str
    value: float
    level: str
    interpretation: str
    recommendations: List[str]
    warnings: List[str]


class InsightsResponse(BaseModel):
    insights: Dict[str, MetricInsightResponse]


@router.post("/insights", response_model=InsightsResponse)
async def calculate_insights(inputs: CalculationInputSchema):
    """Plain-language interpretation of each headline metric."""
    try:
        result = scenarios.calculate_financial_metrics(inputs.to_input())
    except CalculationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return InsightsResponse(
        insights={
            name: MetricInsightResponse(**asdict(insight))
            for name, insight in generate_insights(result).items()
        }
    )
