"""
Calculation Models

Immutable value objects passed into and returned from the calculation engine.
"""

import enum
import math
from dataclasses import dataclass
from typing import Tuple

from crux_analytics.calculations.errors import CalculationInputError


class SensitivityVariable(str, enum.Enum):
    """Input variables perturbed by sensitivity analysis."""

    investment = "investment"
    revenue = "revenue"
    operating_costs = "operating_costs"
    maintenance_costs = "maintenance_costs"

    @property
    def label(self) -> str:
        return VARIABLE_LABELS[self]


VARIABLE_LABELS = {
    SensitivityVariable.investment: "Initial Investment",
    SensitivityVariable.revenue: "Yearly Revenue",
    SensitivityVariable.operating_costs: "Operating Costs",
    SensitivityVariable.maintenance_costs: "Maintenance Costs",
}


@dataclass(frozen=True)
class CalculationInput:
    """Project economics for a single calculation."""

    initial_investment: float
    discount_rate: float  # Annual percent, 10 = 10%
    project_duration_months: int
    yearly_revenue: float
    revenue_growth_percent: float  # Annual, steps once per full year
    operating_costs_yearly: float
    maintenance_costs_yearly: float
    multiplier: float = 1.0  # Scales revenue only

    def __post_init__(self):
        for name in (
            "initial_investment",
            "discount_rate",
            "yearly_revenue",
            "revenue_growth_percent",
            "operating_costs_yearly",
            "maintenance_costs_yearly",
            "multiplier",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise CalculationInputError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise CalculationInputError(f"{name} must be finite, got {value}")

        # A monthly rate of -100% or below has no discount factor
        if self.discount_rate <= -1200:
            raise CalculationInputError(
                f"discount_rate must be above -1200, got {self.discount_rate}"
            )

        duration = self.project_duration_months
        if isinstance(duration, bool) or not isinstance(duration, int):
            raise CalculationInputError(
                f"project_duration_months must be an integer, got {duration!r}"
            )
        if duration < 1:
            raise CalculationInputError(
                f"project_duration_months must be at least 1, got {duration}"
            )


@dataclass(frozen=True)
class CalculationResult:
    """Metrics and cash-flow series for one scenario."""

    roi: float  # Percent, not time-discounted
    npv: float
    payback_period_months: float
    irr: float  # Annualized percent
    monthly_cash_flow: Tuple[float, ...]
    cumulative_cash_flow: Tuple[float, ...]


@dataclass(frozen=True)
class ScenarioAdjustments:
    """What-if adjustments applied on top of a base input."""

    sales_adjustment_percent: float = 0.0
    costs_adjustment_percent: float = 0.0
    discount_adjustment: float = 0.0  # Percentage points, added to the rate


@dataclass(frozen=True)
class ScenarioSet:
    """Expected, best and worst case results for one project."""

    expected: CalculationResult
    best: CalculationResult
    worst: CalculationResult


@dataclass(frozen=True)
class ScenarioComparison:
    """Metric differences, other minus base."""

    roi_diff: float
    npv_diff: float
    irr_diff: float
    payback_diff: float


@dataclass(frozen=True)
class BreakEvenResult:
    """Cumulative revenue vs. cumulative cost walk."""

    month: int  # 1-indexed, -1 when not achieved
    amount: float
    achieved: bool
    cumulative_revenue: Tuple[float, ...]
    cumulative_costs: Tuple[float, ...]
    months: Tuple[int, ...]


@dataclass(frozen=True)
class SensitivityResult:
    """NPV and ROI for one variable at one variation."""

    variable: SensitivityVariable
    variation_percent: int
    npv: float
    roi: float
    npv_change: float
    roi_change: float


@dataclass(frozen=True)
class TornadoEntry:
    """NPV impact range of one variable across the tornado grid."""

    variable: SensitivityVariable
    negative_impact: float
    positive_impact: float
    range: float
