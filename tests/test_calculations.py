"""
Tests for the cash-flow projector, NPV, IRR, payback and ROI.
"""

import math

import pytest
from dataclasses import replace

from crux_analytics.calculations.cashflow import (
    annualize_cash_flows,
    calculate_growth_factor,
    project_cash_flows,
)
from crux_analytics.calculations.errors import CalculationInputError, ZeroInvestmentError
from crux_analytics.calculations.irr import (
    annual_to_monthly_irr,
    calculate_irr,
    calculate_npv,
    monthly_to_annual_irr,
    npv_at_monthly_rate,
)
from crux_analytics.calculations.metrics import calculate_payback_period, calculate_roi
from crux_analytics.calculations.models import CalculationInput
from crux_analytics.calculations.scenarios import calculate_financial_metrics


class TestInputValidation:
    """Test numeric domain checks on CalculationInput."""

    def test_rejects_nan(self, base_inputs):
        """NaN inputs are rejected instead of propagating."""
        with pytest.raises(CalculationInputError):
            replace(base_inputs, yearly_revenue=float("nan"))

    def test_rejects_infinity(self, base_inputs):
        """Infinite inputs are rejected."""
        with pytest.raises(CalculationInputError):
            replace(base_inputs, discount_rate=float("inf"))

    def test_rejects_zero_duration(self, base_inputs):
        """Duration must be at least one month."""
        with pytest.raises(CalculationInputError):
            replace(base_inputs, project_duration_months=0)

    def test_rejects_fractional_duration(self, base_inputs):
        """Duration must be a whole number of months."""
        with pytest.raises(CalculationInputError):
            replace(base_inputs, project_duration_months=12.5)

    @pytest.mark.parametrize("rate", [-1200, -1500])
    def test_rejects_rate_without_discount_factor(self, base_inputs, rate):
        """A monthly rate of -100% or below cannot discount anything."""
        with pytest.raises(CalculationInputError):
            replace(base_inputs, discount_rate=rate)

    def test_accepts_negative_rate_above_floor(self, base_inputs):
        inputs = replace(base_inputs, discount_rate=-5)
        assert inputs.discount_rate == -5

    def test_input_error_is_value_error(self, base_inputs):
        """Input errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            replace(base_inputs, project_duration_months=-3)

    def test_inputs_are_immutable(self, base_inputs):
        """Inputs cannot be mutated in place."""
        with pytest.raises(AttributeError):
            base_inputs.yearly_revenue = 1


class TestCashFlows:
    """Test monthly cash-flow projection."""

    def test_expected_case_monthly_flow(self, base_inputs):
        """Net flow is (120000 - 60000) / 12 for every month."""
        monthly, cumulative = project_cash_flows(base_inputs)
        assert len(monthly) == 24
        assert len(cumulative) == 24
        assert all(cf == pytest.approx(5000) for cf in monthly)
        assert cumulative[23] == pytest.approx(20000)

    def test_cumulative_invariant(self):
        """Cumulative series is a running sum starting at -investment."""
        inputs = CalculationInput(
            initial_investment=73500,
            discount_rate=8,
            project_duration_months=30,
            yearly_revenue=91000,
            revenue_growth_percent=7.5,
            operating_costs_yearly=41000,
            maintenance_costs_yearly=3500,
            multiplier=1.2,
        )
        monthly, cumulative = project_cash_flows(inputs)

        assert cumulative[0] == pytest.approx(-73500 + monthly[0], rel=1e-12)
        for i in range(1, len(monthly)):
            assert cumulative[i] == pytest.approx(cumulative[i - 1] + monthly[i], rel=1e-12)

    def test_growth_steps_once_per_year(self):
        """All months in a year share one growth factor."""
        inputs = CalculationInput(
            initial_investment=0,
            discount_rate=10,
            project_duration_months=30,
            yearly_revenue=120000,
            revenue_growth_percent=10,
            operating_costs_yearly=0,
            maintenance_costs_yearly=0,
        )
        monthly, _ = project_cash_flows(inputs)

        assert monthly[0] == pytest.approx(10000)
        assert monthly[11] == pytest.approx(10000)
        assert monthly[12] == pytest.approx(11000)
        assert monthly[23] == pytest.approx(11000)
        # Partial final year still uses month // 12
        assert monthly[24] == pytest.approx(12100)
        assert monthly[29] == pytest.approx(12100)

    def test_growth_factor(self):
        """Growth factor is 1.0 in year one and compounds yearly."""
        assert calculate_growth_factor(5, 0) == 1.0
        assert calculate_growth_factor(5, 11) == 1.0
        assert calculate_growth_factor(5, 12) == pytest.approx(1.05)
        assert calculate_growth_factor(5, 36) == pytest.approx(1.05 ** 3)

    def test_multiplier_scales_revenue_only(self, base_inputs):
        """A 1.3 multiplier lifts revenue, not costs."""
        monthly, _ = project_cash_flows(replace(base_inputs, multiplier=1.3))
        assert monthly[0] == pytest.approx(13000 - 5000)

    def test_annualize_partial_year(self):
        """A trailing partial year is reported with its month count."""
        annual = annualize_cash_flows([100.0] * 30)
        assert [a["year"] for a in annual] == [1, 2, 3]
        assert [a["months"] for a in annual] == [12, 12, 6]
        assert annual[2]["net_cash_flow"] == 600.0


class TestNPV:
    """Test NPV calculation."""

    def test_npv_matches_monthly_discounting(self, base_inputs):
        """NPV discounts at the annual rate divided by 12."""
        monthly, _ = project_cash_flows(base_inputs)
        expected = -100000 + sum(5000 / (1 + 0.10 / 12) ** m for m in range(1, 25))
        assert calculate_npv(100000, monthly, 10) == pytest.approx(expected)

    def test_npv_zero_cash_flows(self):
        """With no cash flows NPV is exactly the negative investment."""
        assert calculate_npv(50000, [0.0] * 12, 10) == -50000

    def test_npv_zero_rate(self):
        """At a 0% rate NPV is the undiscounted net."""
        assert calculate_npv(1000, [100.0] * 12, 0) == pytest.approx(200)

    def test_higher_rate_lowers_npv(self):
        """Positive flows are worth less at a higher rate."""
        flows = [500.0] * 24
        assert calculate_npv(5000, flows, 15) < calculate_npv(5000, flows, 5)


class TestIRR:
    """Test IRR calculation."""

    def test_irr_zeroes_npv(self):
        """Re-discounting at the monthly IRR gives NPV of about zero."""
        flows = [100.0] * 12
        irr = calculate_irr(1000, flows)
        monthly_rate = annual_to_monthly_irr(irr / 100)
        assert abs(npv_at_monthly_rate([-1000, *flows], monthly_rate)) < 1e-2

    def test_irr_expected_case(self, base_inputs):
        """5,000 a month for 24 months on 100,000 is roughly 20% a year."""
        monthly, _ = project_cash_flows(base_inputs)
        irr = calculate_irr(100000, monthly)
        assert 15 < irr < 25

        monthly_rate = annual_to_monthly_irr(irr / 100)
        assert abs(npv_at_monthly_rate([-100000, *monthly], monthly_rate)) < 1e-2

    def test_irr_residual_is_relative_for_large_projects(self):
        """Step-size convergence leaves a residual that is tiny next to the outlay."""
        inputs = CalculationInput(
            initial_investment=1_000_000_000,
            discount_rate=10,
            project_duration_months=60,
            yearly_revenue=400_000_000,
            revenue_growth_percent=8,
            operating_costs_yearly=150_000_000,
            maintenance_costs_yearly=20_000_000,
        )
        monthly, _ = project_cash_flows(inputs)
        irr = calculate_irr(inputs.initial_investment, monthly)

        monthly_rate = annual_to_monthly_irr(irr / 100)
        residual = npv_at_monthly_rate([-inputs.initial_investment, *monthly], monthly_rate)
        assert abs(residual) / inputs.initial_investment < 1e-6

    def test_irr_negative_returns(self):
        """Returning less than invested gives a negative IRR."""
        irr = calculate_irr(1000, [70.0] * 12)
        assert irr < 0

    def test_irr_all_negative_returns_estimate(self):
        """No sign change has no real IRR; a finite estimate comes back."""
        irr = calculate_irr(100000, [-833.33] * 24)
        assert math.isfinite(irr)

    def test_irr_flat_series_does_not_raise(self):
        """A zero investment with zero flows stops on the flat derivative."""
        irr = calculate_irr(0, [0.0] * 12)
        assert math.isfinite(irr)

    def test_rate_conversion_round_trip(self):
        """Monthly and annual conversions are inverses."""
        assert monthly_to_annual_irr(annual_to_monthly_irr(0.12)) == pytest.approx(0.12)
        assert monthly_to_annual_irr(0.01) == pytest.approx(1.01 ** 12 - 1)


class TestPayback:
    """Test payback period calculation."""

    def test_payback_exact_month(self, base_inputs):
        """100,000 recovered at 5,000 a month takes exactly 20 months."""
        result = calculate_financial_metrics(base_inputs)
        assert result.payback_period_months == pytest.approx(20)

    def test_payback_interpolates(self):
        """Recovery partway through a month returns a fractional value."""
        # After 2 months cumulative is -200, month 3 brings +400
        assert calculate_payback_period(1000, [400, 400, 400]) == pytest.approx(2.5)

    def test_payback_not_recovered(self, base_inputs):
        """Never recovering returns the horizon length."""
        result = calculate_financial_metrics(replace(base_inputs, yearly_revenue=50000))
        assert result.monthly_cash_flow[0] == pytest.approx(-833.333, rel=1e-5)
        assert result.payback_period_months == 24

    def test_payback_zero_investment(self):
        """Nothing to recover means payback at month 0."""
        assert calculate_payback_period(0, [0.0, 10.0]) == 0

    def test_payback_monotonic_in_revenue(self, base_inputs):
        """More revenue never lengthens payback."""
        paybacks = [
            calculate_financial_metrics(
                replace(base_inputs, yearly_revenue=revenue, project_duration_months=36)
            ).payback_period_months
            for revenue in (60000, 80000, 100000, 120000, 150000, 250000)
        ]
        assert paybacks == sorted(paybacks, reverse=True)


class TestROI:
    """Test ROI calculation."""

    def test_roi_expected_case(self, base_inputs):
        """(120,000 - 100,000) / 100,000 = 20%."""
        result = calculate_financial_metrics(base_inputs)
        assert result.roi == pytest.approx(20)

    def test_roi_ignores_discount_rate(self, base_inputs):
        """ROI is not time-discounted."""
        low = calculate_financial_metrics(replace(base_inputs, discount_rate=2))
        high = calculate_financial_metrics(replace(base_inputs, discount_rate=25))
        assert low.roi == high.roi
        assert low.npv > high.npv

    def test_roi_zero_investment_raises(self):
        """A zero divisor raises instead of returning inf or NaN."""
        with pytest.raises(ZeroInvestmentError):
            calculate_roi(0, [100.0, 100.0])

    def test_metrics_zero_investment_raises(self, base_inputs):
        """The scenario bundle surfaces the ROI divisor error."""
        with pytest.raises(ZeroDivisionError):
            calculate_financial_metrics(replace(base_inputs, initial_investment=0))
