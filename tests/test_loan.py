"""
Tests for the loan calculator.
"""

from datetime import date

from fincalc.calculations.loan import (
    ExtraPaymentFrequency,
    LoanInputs,
    calculate_comparison,
    calculate_loan_payment,
    calculate_loan_schedule,
    format_loan_term,
    has_extra_payments,
    validate_loan_inputs,
)
from fincalc.calculations.rates import Frequency

START = date(2025, 1, 1)


def loan(**overrides):
    values = dict(
        loan_amount=100000,
        interest_rate=5,
        term_years=10,
        term_months=0,
        start_date=START,
    )
    values.update(overrides)
    return LoanInputs(**values)


class TestLoanPayment:
    """Test the level loan payment."""

    def test_reference_loan(self):
        """100000 at 5% for 10 years, paid monthly."""
        results = calculate_loan_payment(loan())

        assert abs(results.payment - 1060.66) < 0.01
        assert abs(results.total_interest - 27278.62) < 0.02
        assert results.number_of_payments == 120
        assert results.payoff_date == date(2035, 1, 1)

    def test_zero_rate(self):
        results = calculate_loan_payment(loan(interest_rate=0))
        assert abs(results.payment - 100000 / 120) < 1e-9
        assert results.total_interest == 0.0

    def test_bi_weekly_payment_count(self):
        results = calculate_loan_payment(loan(payment_frequency=Frequency.bi_weekly))
        assert results.number_of_payments == 260
        assert results.payment < 1060.66 / 2

    def test_schedule_clears_balance(self):
        schedule = calculate_loan_schedule(loan())
        assert len(schedule) == 120
        assert schedule[-1].balance == 0.0
        assert abs(sum(row.interest for row in schedule) - 27278.62) < 0.02

    def test_weekly_schedule_clears_balance(self):
        schedule = calculate_loan_schedule(loan(payment_frequency=Frequency.weekly))
        assert len(schedule) == 520
        assert schedule[-1].balance == 0.0


class TestLoanExtraPayments:
    """Test extra payments and the with/without comparison."""

    def test_no_extras_means_no_comparison(self):
        assert not has_extra_payments(loan())
        assert calculate_comparison(loan()) is None

    def test_monthly_extra_saves_interest(self):
        inputs = loan(
            extra_payment_amount=200,
            extra_payment_frequency=ExtraPaymentFrequency.monthly,
        )
        comparison = calculate_comparison(inputs)

        assert comparison is not None
        assert comparison.without_extra.number_of_payments == 120
        assert comparison.payments_saved > 0
        assert comparison.interest_saved > 0

    def test_yearly_extra_lands_every_twelfth_month(self):
        schedule = calculate_loan_schedule(
            loan(
                extra_payment_amount=1000,
                extra_payment_frequency=ExtraPaymentFrequency.yearly,
            )
        )
        periods = [row.period for row in schedule if row.extra_payment > 0]
        assert periods[:2] == [12, 24]

    def test_one_time_payment_on_date(self):
        """A dated lump sum lands on the first payment on or after the date."""
        schedule = calculate_loan_schedule(
            loan(one_time_payment=5000, one_time_payment_date=date(2025, 3, 15))
        )
        extras = [(row.date, row.extra_payment) for row in schedule if row.extra_payment > 0]
        assert extras == [(date(2025, 4, 1), 5000)]

    def test_one_time_payment_without_date(self):
        schedule = calculate_loan_schedule(loan(one_time_payment=5000))
        assert schedule[0].extra_payment == 5000
        assert all(row.extra_payment == 0 for row in schedule[1:])


class TestLoanHelpers:
    """Test loan formatting and validation."""

    def test_format_loan_term(self):
        assert format_loan_term(120) == "10 years"
        assert format_loan_term(13) == "1 year 1 month"
        assert format_loan_term(5) == "5 months"
        assert format_loan_term(1) == "1 month"

    def test_valid_inputs(self):
        assert validate_loan_inputs(loan()) == []

    def test_unsupported_frequency(self):
        errors = validate_loan_inputs(loan(payment_frequency=Frequency.quarterly))
        assert "Payment frequency 'quarterly' is not supported" in errors

    def test_unknown_frequency_is_reported(self):
        """Unrecognized choices come back as messages, not exceptions."""
        errors = validate_loan_inputs(
            loan(payment_frequency="fortnightly", extra_payment_frequency="hourly")
        )
        assert "Payment frequency 'fortnightly' is not supported" in errors
        assert "Extra payment frequency 'hourly' is not supported" in errors

    def test_negative_extra(self):
        errors = validate_loan_inputs(loan(extra_payment_amount=-5))
        assert "Extra payment amount cannot be negative" in errors
