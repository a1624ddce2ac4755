"""
Tests for payback period, NPV and IRR calculations.
"""

import pytest

from fincalc.calculations.irr import calculate_irr, discount
from fincalc.calculations.payback import (
    CashFlow,
    PaybackInputs,
    PeriodType,
    calculate_npv,
    calculate_payback_results,
    calculate_roi,
    cumulative_cash_flows,
    dense_cash_flows,
    discounted_payback,
    simple_payback,
    to_years_and_months,
    validate_payback_inputs,
)


def flows(*amounts):
    return [CashFlow(period=i, amount=a) for i, a in enumerate(amounts, start=1)]


REFERENCE = flows(30000, 40000, 50000, 20000)


class TestIRRCalculations:
    """Test IRR calculation functions."""

    def test_calculate_irr_simple(self):
        """Investment of 100 returning 110 after one period is 10%."""
        irr = calculate_irr([-100, 110])
        assert abs(irr - 0.10) < 0.001

    def test_calculate_irr_multi_period(self):
        """Level coupons with principal back at the end."""
        irr = calculate_irr([-100, 20, 20, 20, 20, 120])
        assert abs(irr - 0.20) < 0.001

    def test_irr_discounts_to_zero(self):
        cash_flows = [-100000, 30000, 40000, 50000, 20000]
        irr = calculate_irr(cash_flows)
        assert abs(discount(cash_flows, irr)) < 1e-4

    def test_irr_negative_returns(self):
        """Total return below the investment gives a negative IRR."""
        assert calculate_irr([-100, 40, 40, 10]) < 0

    def test_irr_overflow_is_reported_as_failure(self):
        """A long series with a huge early return overflows (1 + rate)^period."""
        cash_flows = [-1000, 1_000_000] + [0] * 398 + [1]
        with pytest.raises(ValueError):
            calculate_irr(cash_flows)

    def test_irr_requires_sign_change(self):
        with pytest.raises(ValueError):
            calculate_irr([100, 50])
        with pytest.raises(ValueError):
            calculate_irr([-100])


class TestPayback:
    """Test simple and discounted payback."""

    def test_reference_payback(self):
        """Cumulative inflows cross 100000 during period 3."""
        period = simple_payback(REFERENCE, 100000)
        assert 2 < period < 3
        assert abs(period - 2.6) < 1e-9

    def test_never_pays_back(self):
        assert simple_payback(flows(10000, 20000), 100000) is None

    def test_exact_payback_at_period_end(self):
        assert simple_payback(flows(50000, 50000), 100000) == 2

    def test_unordered_cash_flows(self):
        shuffled = [REFERENCE[2], REFERENCE[0], REFERENCE[3], REFERENCE[1]]
        assert simple_payback(shuffled, 100000) == simple_payback(REFERENCE, 100000)

    def test_discounted_payback_is_slower(self):
        simple = simple_payback(REFERENCE, 100000)
        discounted = discounted_payback(REFERENCE, 100000, 10)
        assert discounted > simple

    def test_discounted_payback_zero_rate_matches_simple(self):
        assert discounted_payback(REFERENCE, 100000, 0) == simple_payback(REFERENCE, 100000)

    def test_discounted_payback_monotonic_in_rate(self):
        """A higher rate never pays back sooner."""
        periods = [discounted_payback(REFERENCE, 100000, rate) for rate in (0, 2, 5, 8, 10)]
        assert all(later >= earlier for earlier, later in zip(periods, periods[1:]))
        assert discounted_payback(REFERENCE, 100000, 50) is None


class TestMetrics:
    """Test ROI, NPV, schedules and period conversion."""

    def test_roi(self):
        assert calculate_roi(100000, 140000) == pytest.approx(40)

    def test_npv(self):
        npv = calculate_npv(flows(110), 100, 10)
        assert abs(npv) < 1e-9

    def test_cumulative_cash_flows(self):
        rows = cumulative_cash_flows(REFERENCE, 100000, 0)
        assert [r.cumulative_cash_flow for r in rows] == [-70000, -30000, 20000, 40000]
        assert rows[-1].discounted_cumulative_cash_flow == 40000

    def test_years_and_months(self):
        annual = to_years_and_months(2.6, PeriodType.annual)
        assert (annual.years, annual.months) == (2, 7)
        monthly = to_years_and_months(30, PeriodType.monthly)
        assert (monthly.years, monthly.months) == (2, 6)

    def test_dense_cash_flows_fill_gaps(self):
        series = dense_cash_flows([CashFlow(3, 500), CashFlow(1, 100)], 400)
        assert series == [-400, 100, 0.0, 500]


class TestPaybackResults:
    """Test the combined results."""

    def test_reference_results(self):
        results = calculate_payback_results(
            PaybackInputs(initial_investment=100000, cash_flows=REFERENCE, discount_rate=10)
        )

        assert results.pays_back
        assert (results.simple_payback.years, results.simple_payback.months) == (2, 7)
        assert results.discounted_pays_back
        assert results.total_cash_inflows == 140000
        assert results.profit_after_payback == 40000
        assert results.roi == pytest.approx(40)
        assert results.npv > 0
        assert results.irr is not None and results.irr > 10
        assert results.annual_irr == pytest.approx(results.irr)
        assert len(results.cash_flow_schedule) == 4

    def test_monthly_irr_is_annualized(self):
        results = calculate_payback_results(
            PaybackInputs(
                initial_investment=1000,
                cash_flows=flows(*([100] * 12)),
                discount_rate=1,
                period_type=PeriodType.monthly,
            )
        )
        monthly = results.irr / 100
        assert abs(results.annual_irr / 100 - ((1 + monthly) ** 12 - 1)) < 1e-12

    def test_no_payback(self):
        results = calculate_payback_results(
            PaybackInputs(initial_investment=100000, cash_flows=flows(10000), discount_rate=5)
        )
        assert not results.pays_back
        assert results.simple_payback is None
        assert results.discounted_payback is None
        assert results.npv < 0

    def test_irr_failure_keeps_other_results(self):
        results = calculate_payback_results(
            PaybackInputs(
                initial_investment=1000,
                cash_flows=(CashFlow(1, 1_000_000), CashFlow(400, 1)),
                discount_rate=10,
            )
        )
        assert results.irr is None
        assert results.annual_irr is None
        assert abs(results.simple_payback_period - 0.001) < 1e-12
        assert results.npv > 0

    def test_irr_undefined_without_inflows(self):
        results = calculate_payback_results(
            PaybackInputs(initial_investment=1000, cash_flows=flows(0, 0), discount_rate=5)
        )
        assert results.irr is None
        assert results.annual_irr is None


class TestPaybackValidation:
    """Test payback input validation."""

    def test_valid(self):
        inputs = PaybackInputs(initial_investment=100000, cash_flows=REFERENCE, discount_rate=10)
        assert validate_payback_inputs(inputs) == []

    def test_invalid(self):
        errors = validate_payback_inputs(
            PaybackInputs(
                initial_investment=0,
                cash_flows=[CashFlow(1, -5), CashFlow(1, 10), CashFlow(0, 10)],
                discount_rate=120,
            )
        )
        assert "Initial investment must be greater than zero" in errors
        assert "All cash flows must be greater than or equal to zero" in errors
        assert "Each period must be unique" in errors
        assert "All periods must be positive integers starting from 1" in errors
        assert "Discount rate must be between 0 and 100" in errors

    def test_unknown_period_type(self):
        errors = validate_payback_inputs(
            PaybackInputs(
                initial_investment=1000,
                cash_flows=REFERENCE,
                discount_rate=5,
                period_type="weekly",
            )
        )
        assert errors == ["Period type 'weekly' is not supported"]

    def test_requires_cash_flows(self):
        errors = validate_payback_inputs(
            PaybackInputs(initial_investment=1000, cash_flows=[], discount_rate=5)
        )
        assert errors == ["At least one cash flow period is required"]
