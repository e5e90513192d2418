"""
Tests for break-even analysis.
"""

import math

import pytest
from dataclasses import replace

from crux_analytics.calculations.breakeven import (
    break_even_percentage,
    calculate_break_even,
)
from crux_analytics.calculations.scenarios import calculate_financial_metrics


@pytest.fixture
def maintained_inputs(base_inputs):
    """10,000 revenue against 5,000 total cost per month, 36 months."""
    return replace(
        base_inputs,
        project_duration_months=36,
        operating_costs_yearly=50000,
        maintenance_costs_yearly=10000,
    )


class TestBreakEven:
    """Test cumulative revenue vs. cumulative cost."""

    def test_break_even_month(self, maintained_inputs):
        """Revenue catches investment plus costs in month 20."""
        result = calculate_break_even(maintained_inputs)
        assert result.achieved
        assert result.month == 20
        assert result.amount == pytest.approx(200000)

    def test_series_are_aligned(self, maintained_inputs):
        """One entry per month, months counted from 1."""
        result = calculate_break_even(maintained_inputs)
        assert len(result.cumulative_revenue) == 36
        assert len(result.cumulative_costs) == 36
        assert result.months == tuple(range(1, 37))
        # Costs include the upfront investment from the first month
        assert result.cumulative_costs[0] == pytest.approx(105000)
        assert result.cumulative_revenue[0] == pytest.approx(10000)

    def test_not_achieved(self, base_inputs):
        """Revenue below costs never breaks even."""
        result = calculate_break_even(replace(base_inputs, yearly_revenue=50000))
        assert not result.achieved
        assert result.month == -1
        assert result.amount == 0

    def test_growth_accelerates_break_even(self, maintained_inputs):
        """Revenue growth can only bring break-even forward."""
        flat = calculate_break_even(maintained_inputs)
        growing = calculate_break_even(replace(maintained_inputs, revenue_growth_percent=40))
        assert growing.month < flat.month

    def test_percentage(self):
        assert break_even_percentage(18, 36) == pytest.approx(50)
        assert break_even_percentage(-1, 36) == 100


class TestBreakEvenVersusPayback:
    """Break-even and payback are computed independently."""

    def test_expected_case_agrees(self, maintained_inputs):
        """Without a multiplier the two land in the same month."""
        payback = calculate_financial_metrics(maintained_inputs).payback_period_months
        break_even = calculate_break_even(maintained_inputs)
        assert break_even.month == math.ceil(payback)

    def test_not_required_to_be_equal(self, maintained_inputs):
        """Under a pessimistic multiplier they diverge by more than a month."""
        worst = replace(maintained_inputs, multiplier=0.8)
        payback = calculate_financial_metrics(worst).payback_period_months
        break_even = calculate_break_even(worst)

        # Payback tracks scaled net cash flow: 100000 / 3000 per month
        assert payback == pytest.approx(100000 / 3000)
        assert break_even.month == 20
        assert abs(payback - break_even.month) > 1

    def test_break_even_without_payback(self, maintained_inputs):
        """Break-even can be achieved while payback saturates at the horizon."""
        worst = replace(maintained_inputs, multiplier=0.7)
        payback = calculate_financial_metrics(worst).payback_period_months
        break_even = calculate_break_even(worst)

        assert payback == 36
        assert break_even.achieved
