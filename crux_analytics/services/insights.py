"""
Metric insights.

Turns calculated metrics into plain-language interpretation, recommendations
and warnings for display. Reads CalculationResult values only; the
calculation engine never depends on this module.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from crux_analytics.calculations.models import CalculationResult

LEVELS = ("excellent", "good", "fair", "poor")


@dataclass(frozen=True)
class Thresholds:
    excellent: float
    good: float
    fair: float
    poor: float
    inverted: bool = False  # Lower is better (payback)


THRESHOLDS = {
    "roi": Thresholds(excellent=50, good=25, fair=10, poor=0),
    "npv": Thresholds(excellent=100000, good=50000, fair=10000, poor=0),
    "irr": Thresholds(excellent=30, good=20, fair=10, poor=5),
    "payback": Thresholds(excellent=6, good=12, fair=24, poor=36, inverted=True),
}


@dataclass
class MetricInsight:
    metric: str
    value: float
    level: str
    interpretation: str
    recommendations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def performance_level(value: float, thresholds: Thresholds) -> str:
    """Grade a value as excellent, good, fair, poor or critical."""
    for level in LEVELS:
        limit = getattr(thresholds, level)
        if (value <= limit) if thresholds.inverted else (value >= limit):
            return level
    return "critical"


def roi_insight(value: float) -> MetricInsight:
    level = performance_level(value, THRESHOLDS["roi"])
    if level in ("excellent", "good"):
        recommendations = ["Strong investment case", "Proceed with implementation"]
    else:
        recommendations = ["Review cost structure", "Seek higher-value opportunities"]
    return MetricInsight(
        metric="roi",
        value=value,
        level=level,
        interpretation=f"ROI of {value:.2f}% indicates {level} return on investment.",
        recommendations=recommendations,
        warnings=["Negative ROI: investment will lose money"] if value < 0 else [],
    )


def npv_insight(value: float) -> MetricInsight:
    level = performance_level(value, THRESHOLDS["npv"])
    if value > 0:
        recommendations = [
            "Positive NPV supports investment",
            "Monitor discount rate assumptions",
        ]
    else:
        recommendations = ["Reconsider the investment", "Evaluate alternative options"]
    return MetricInsight(
        metric="npv",
        value=value,
        level=level,
        interpretation=f"NPV of {value:.2f} indicates {level} net present value.",
        recommendations=recommendations,
        warnings=["Negative NPV: investment destroys value"] if value < 0 else [],
    )


def irr_insight(value: float) -> MetricInsight:
    level = performance_level(value, THRESHOLDS["irr"])
    if value > 15:
        recommendations = ["IRR exceeds typical hurdle rates", "Strong candidate for funding"]
    else:
        recommendations = ["IRR below typical hurdle rates", "Evaluate strategic justification"]
    return MetricInsight(
        metric="irr",
        value=value,
        level=level,
        interpretation=f"IRR of {value:.2f}% indicates {level} internal rate of return.",
        recommendations=recommendations,
        warnings=["Very low IRR: poor investment prospect"] if value < 5 else [],
    )


def payback_insight(value: float, horizon_months: Optional[int] = None) -> MetricInsight:
    level = performance_level(value, THRESHOLDS["payback"])
    if value <= 12:
        recommendations = ["Fast payback supports investment", "Quick return of capital"]
    else:
        recommendations = [
            "Extended payback period",
            "Ensure long-term benefits justify the wait",
        ]

    warnings = []
    if horizon_months is not None and value >= horizon_months:
        warnings.append("Investment is not recovered within the project horizon")
    elif value > 36:
        warnings.append("Very long payback period: high risk")

    return MetricInsight(
        metric="payback",
        value=value,
        level=level,
        interpretation=(
            f"Payback period of {value:.1f} months indicates {level} capital recovery speed."
        ),
        recommendations=recommendations,
        warnings=warnings,
    )


def generate_insights(result: CalculationResult) -> Dict[str, MetricInsight]:
    """Insights for every headline metric of a calculation result."""
    horizon = len(result.monthly_cash_flow)
    return {
        "roi": roi_insight(result.roi),
        "npv": npv_insight(result.npv),
        "irr": irr_insight(result.irr),
        "payback": payback_insight(result.payback_period_months, horizon),
    }
