"""
Tests for IRA projections.
"""

from fincalc.calculations.ira import (
    IRAInputs,
    IRAType,
    calculate_ira_results,
    calculate_required_monthly_savings,
    compare_ira_types,
    project_beyond_retirement,
    validate_ira_inputs,
)


def plan(**overrides):
    values = dict(
        current_balance=10000,
        annual_contribution=6000,
        expected_return=7,
        current_age=30,
        retirement_age=65,
        current_tax_rate=22,
        retirement_tax_rate=15,
    )
    values.update(overrides)
    return IRAInputs(**values)


class TestIRAResults:
    """Test the retirement projection."""

    def test_closed_form_balance(self):
        """Balance follows FV = PV(1+r)^n + PMT[((1+r)^n - 1)/r]."""
        results = calculate_ira_results(plan())
        growth = 1.07 ** 35
        expected = 10000 * growth + 6000 * (growth - 1) / 0.07

        assert abs(results.traditional_balance - expected) < 1e-6
        assert results.roth_balance == results.traditional_balance
        assert results.years_to_retirement == 35

    def test_schedule_matches_closed_form(self):
        """The year-by-year schedule ends at the closed-form balance."""
        results = calculate_ira_results(plan())
        schedule = results.annual_schedule

        assert len(schedule) == 36
        assert schedule[0].age == 30
        assert schedule[-1].age == 65
        assert abs(schedule[-1].balance - results.traditional_balance) < 0.01
        assert sum(row.contribution for row in schedule) == results.total_contributions

    def test_zero_return(self):
        results = calculate_ira_results(plan(current_balance=0, expected_return=0, retirement_age=40))
        assert results.traditional_balance == 60000
        assert results.traditional_total_earnings == 0

    def test_tax_effects(self):
        results = calculate_ira_results(plan())
        assert abs(results.traditional_tax_savings_now - 6000 * 35 * 0.22) < 1e-6
        assert abs(
            results.traditional_balance_after_tax - results.traditional_balance * 0.85
        ) < 1e-6
        assert abs(
            results.roth_effective_contributions - results.roth_total_contributions / 0.78
        ) < 1e-6

    def test_inflation_adjusted_balance(self):
        results = calculate_ira_results(plan(inflation_rate=2))
        assert abs(
            results.inflation_adjusted_balance - results.traditional_balance / 1.02 ** 35
        ) < 1e-6

    def test_full_current_tax_rate(self):
        results = calculate_ira_results(plan(current_tax_rate=100))
        assert results.roth_effective_contributions is None


class TestIRAHelpers:
    """Test comparison and planning helpers."""

    def test_lower_retirement_tax_favors_traditional(self):
        comparison = compare_ira_types(calculate_ira_results(plan()))
        assert comparison.better is IRAType.traditional

    def test_no_retirement_tax_favors_roth(self):
        comparison = compare_ira_types(calculate_ira_results(plan(retirement_tax_rate=0)))
        assert comparison.better is IRAType.roth
        assert comparison.difference == 0

    def test_single_account_type_is_not_compared(self):
        results = calculate_ira_results(plan(ira_type=IRAType.roth))
        assert results.ira_type is IRAType.roth
        assert compare_ira_types(results) is None

    def test_project_beyond_retirement(self):
        assert abs(project_beyond_retirement(100000, 10, 5) - 100000 * 1.05 ** 10) < 1e-6

    def test_required_monthly_savings(self):
        """Saving the computed amount reaches the target."""
        monthly = calculate_required_monthly_savings(1_000_000, 50000, 30, 6)
        r = 0.005
        reached = 50000 * (1 + r) ** 360 + monthly * ((1 + r) ** 360 - 1) / r
        assert abs(reached - 1_000_000) < 0.01

    def test_required_monthly_savings_edge_cases(self):
        assert calculate_required_monthly_savings(100000, 0, 0, 6) == 0
        assert calculate_required_monthly_savings(12000, 0, 1, 0) == 1000
        assert calculate_required_monthly_savings(1000, 5000, 10, 5) == 0


class TestIRAValidation:
    """Test IRA input validation."""

    def test_valid(self):
        assert validate_ira_inputs(plan()) == []

    def test_contribution_limit_depends_on_age(self):
        errors = validate_ira_inputs(plan(annual_contribution=11000))
        assert "Annual contribution seems too high (current limit: $7,000)" in errors
        assert validate_ira_inputs(plan(annual_contribution=11000, current_age=55)) == []

    def test_ages(self):
        assert "Current age must be between 18 and 100" in validate_ira_inputs(
            plan(current_age=16)
        )
        assert "Retirement age must be greater than current age" in validate_ira_inputs(
            plan(retirement_age=25)
        )

    def test_unknown_account_type(self):
        assert "IRA type 'sep' is not supported" in validate_ira_inputs(plan(ira_type="sep"))

    def test_negative_return_allowed(self):
        assert validate_ira_inputs(plan(expected_return=-10)) == []
        assert "Expected return must be between -50 and 50" in validate_ira_inputs(
            plan(expected_return=60)
        )
