"""
Tests for compound interest projections.
"""

import math

import pytest

from fincalc.calculations.compound_interest import (
    CompoundInterestInputs,
    calculate_compound_interest,
    months_in_period,
    validate_compound_interest_inputs,
)
from fincalc.calculations.rates import PERIODS_PER_YEAR, Frequency, Timing

DISCRETE = [f for f in Frequency if f is not Frequency.continuously]


def investment(**overrides):
    values = dict(initial_investment=10000, interest_rate=6, years=10)
    values.update(overrides)
    return CompoundInterestInputs(**values)


class TestLumpSum:
    """Zero contributions reproduce the closed-form lump sum."""

    @pytest.mark.parametrize("frequency", DISCRETE)
    def test_discrete_closed_form(self, frequency):
        c = PERIODS_PER_YEAR[frequency]
        results = calculate_compound_interest(investment(compounding_frequency=frequency))
        expected = 10000 * (1 + 0.06 / c) ** (c * 10)

        assert abs(results.ending_balance - expected) < 0.005
        assert abs(results.interest_from_initial - (expected - 10000)) < 0.01
        assert abs(results.interest_from_contributions) < 0.01

    def test_continuous_closed_form(self):
        results = calculate_compound_interest(
            investment(compounding_frequency=Frequency.continuously)
        )
        expected = 10000 * math.exp(0.06 * 10)

        assert abs(results.ending_balance - expected) < 0.005
        assert abs(results.effective_annual_rate - (math.exp(0.06) - 1) * 100) < 1e-9

    def test_effective_annual_rate(self):
        results = calculate_compound_interest(investment())
        assert abs(results.effective_annual_rate - 6.1678) < 0.001

    def test_partial_year(self):
        results = calculate_compound_interest(investment(years=1, months=6))
        assert abs(results.ending_balance - 10000 * 1.005 ** 18) < 0.01
        assert len(results.annual_schedule) == 2


class TestContributions:
    """Test regular contributions."""

    def test_monthly_contributions_end_timing(self):
        results = calculate_compound_interest(
            investment(initial_investment=0, monthly_contribution=100)
        )
        expected = 100 * ((1.005 ** 120 - 1) / 0.005)

        assert abs(results.ending_balance - expected) < 0.01
        assert results.total_contributions == pytest.approx(12000)

    def test_beginning_timing_earns_more(self):
        end = calculate_compound_interest(investment(monthly_contribution=100))
        beginning = calculate_compound_interest(
            investment(monthly_contribution=100, contribution_timing=Timing.beginning)
        )
        assert beginning.ending_balance > end.ending_balance

    def test_annual_compounding_batches_contributions(self):
        """With annual compounding a year's contributions land together."""
        results = calculate_compound_interest(
            investment(
                initial_investment=0,
                monthly_contribution=100,
                compounding_frequency=Frequency.annually,
            )
        )
        expected = 1200 * ((1.06 ** 10 - 1) / 0.06)
        assert abs(results.ending_balance - expected) < 0.01

    @pytest.mark.parametrize(
        "frequency", [Frequency.bi_weekly, Frequency.weekly, Frequency.daily]
    )
    def test_sub_monthly_compounding_still_contributes(self, frequency):
        results = calculate_compound_interest(
            investment(years=1, monthly_contribution=100, compounding_frequency=frequency)
        )
        assert results.total_contributions == pytest.approx(1200)

    def test_continuous_contributions(self):
        results = calculate_compound_interest(
            investment(
                monthly_contribution=100,
                annual_contribution=1200,
                compounding_frequency=Frequency.continuously,
            )
        )
        assert results.total_contributions == pytest.approx(24000)
        assert results.ending_balance > 10000 * math.exp(0.6) + 24000

    def test_months_in_period(self):
        """Each compounding period deposits once per month boundary crossed."""
        assert sum(months_in_period(p, 52) for p in range(1, 53)) == 12
        assert months_in_period(1, 1) == 12
        assert months_in_period(1, 12) == 1


class TestAdjustments:
    """Test tax and inflation adjustments."""

    def test_tax_reduces_growth(self):
        untaxed = calculate_compound_interest(investment())
        taxed = calculate_compound_interest(investment(tax_rate=25))

        assert taxed.ending_balance < untaxed.ending_balance
        assert taxed.after_tax_amount == taxed.ending_balance
        expected = 10000 * (1 + 0.005 * 0.75) ** 120
        assert abs(taxed.ending_balance - expected) < 0.01

    def test_inflation_adjustment(self):
        results = calculate_compound_interest(investment(inflation_rate=3))
        assert abs(results.inflation_adjusted_amount - results.ending_balance / 1.03 ** 10) < 1e-6

    def test_total_return(self):
        results = calculate_compound_interest(investment())
        assert abs(results.total_return - results.total_interest / 10000 * 100) < 1e-9

    def test_annual_schedule_matches_ending_balance(self):
        results = calculate_compound_interest(investment(monthly_contribution=50))
        assert len(results.annual_schedule) == 10
        assert results.annual_schedule[-1].balance == results.ending_balance


class TestValidation:
    """Test compound interest validation."""

    def test_valid(self):
        assert validate_compound_interest_inputs(investment()) == []

    def test_invalid(self):
        errors = validate_compound_interest_inputs(
            investment(initial_investment=-1, years=0, tax_rate=150)
        )
        assert "Initial investment cannot be negative" in errors
        assert "Investment term must be greater than 0" in errors
        assert "Tax rate must be between 0 and 100" in errors

    def test_unknown_choices(self):
        errors = validate_compound_interest_inputs(
            investment(compounding_frequency="hourly", contribution_timing="middle")
        )
        assert errors == [
            "Compounding frequency 'hourly' is not supported",
            "Contribution timing 'middle' is not supported",
        ]
