"""
Loan Calculations

Fixed-rate loan payment, payoff schedule with extra payments, and the
savings extra payments produce versus the plain schedule.
"""

import enum
from typing import List, Optional
from datetime import date
from dataclasses import dataclass, replace
from dateutil.relativedelta import relativedelta

from fincalc.calculations import validation
from fincalc.calculations.amortization import calculate_payment_date, equivalent_month
from fincalc.calculations.projection import AmortizationRow, amortize
from fincalc.calculations.rates import (
    Frequency,
    level_payment,
    periodic_rate,
    periods_per_year,
    total_periods,
)

LOAN_PAYMENT_FREQUENCIES = (Frequency.monthly, Frequency.bi_weekly, Frequency.weekly)


class ExtraPaymentFrequency(str, enum.Enum):
    """How often the recurring extra payment is made."""

    none = "none"
    monthly = "monthly"
    yearly = "yearly"
    one_time = "one-time"


@dataclass(frozen=True)
class LoanInputs:
    """Loan terms and optional extra payments."""

    loan_amount: float
    interest_rate: float  # Annual percentage
    term_years: int
    term_months: int
    start_date: date
    payment_frequency: Frequency = Frequency.monthly
    extra_payment_amount: float = 0.0
    extra_payment_frequency: ExtraPaymentFrequency = ExtraPaymentFrequency.none
    one_time_payment: float = 0.0
    one_time_payment_date: Optional[date] = None


@dataclass
class LoanResults:
    """Level payment and lifetime totals without extra payments."""

    payment: float
    total_payment: float
    total_interest: float
    number_of_payments: int
    payoff_date: date
    loan_amount: float
    interest_rate: float


@dataclass
class LoanTotals:
    """Lifetime totals of one payoff schedule."""

    total_interest: float
    total_payment: float
    number_of_payments: int
    payoff_date: date


@dataclass
class LoanComparison:
    """Schedule with extra payments versus without."""

    without_extra: LoanTotals
    with_extra: LoanTotals
    interest_saved: float
    payments_saved: int


def _loan_rate(inputs: LoanInputs) -> float:
    # Interest compounds once per payment period
    return periodic_rate(inputs.interest_rate, inputs.payment_frequency)


def _loan_periods(inputs: LoanInputs) -> int:
    return total_periods(inputs.term_years, inputs.term_months, inputs.payment_frequency)


def calculate_loan_payment(inputs: LoanInputs) -> LoanResults:
    """
    Calculate the level payment of a fixed-rate loan.

    M = P[r(1+r)^n]/[(1+r)^n-1], r = annual rate / payments per year

    Args:
        inputs: Loan terms

    Returns:
        Payment and lifetime totals
    """
    n = _loan_periods(inputs)
    payment = level_payment(inputs.loan_amount, _loan_rate(inputs), n)
    total_payment = payment * n

    total_months = inputs.term_years * 12 + inputs.term_months

    return LoanResults(
        payment=payment,
        total_payment=total_payment,
        total_interest=total_payment - inputs.loan_amount,
        number_of_payments=n,
        payoff_date=inputs.start_date + relativedelta(months=total_months),
        loan_amount=inputs.loan_amount,
        interest_rate=inputs.interest_rate,
    )


def calculate_loan_schedule(inputs: LoanInputs) -> List[AmortizationRow]:
    """
    Generate the payoff schedule including extra payments.

    Recurring extras: monthly extras are spread across the payments in a
    month, yearly extras land on every twelfth month. The one-time payment
    (plus the recurring amount when its frequency is one-time) lands on the
    first payment dated on or after one_time_payment_date, or on the first
    payment when no date is given.
    """
    rate = _loan_rate(inputs)
    n = _loan_periods(inputs)
    payment = level_payment(inputs.loan_amount, rate, n)
    per_year = periods_per_year(inputs.payment_frequency)
    frequency = ExtraPaymentFrequency(inputs.extra_payment_frequency)

    def date_for(period: int) -> date:
        return calculate_payment_date(
            inputs.start_date, period - 1, inputs.payment_frequency
        )

    one_time_amount = inputs.one_time_payment
    if frequency is ExtraPaymentFrequency.one_time:
        one_time_amount += inputs.extra_payment_amount

    def extra_for(period: int) -> float:
        extra = 0.0
        month = equivalent_month(period, per_year)
        previous_month = equivalent_month(period - 1, per_year)

        if frequency is ExtraPaymentFrequency.monthly:
            extra += inputs.extra_payment_amount * 12 / per_year
        elif (
            frequency is ExtraPaymentFrequency.yearly
            and month % 12 == 0
            and month != previous_month
        ):
            extra += inputs.extra_payment_amount

        if one_time_amount > 0:
            target = inputs.one_time_payment_date
            if target is None:
                if period == 1:
                    extra += one_time_amount
            elif date_for(period) >= target and (
                period == 1 or date_for(period - 1) < target
            ):
                extra += one_time_amount

        return extra

    return amortize(
        inputs.loan_amount, rate, payment, n, extra_for=extra_for, date_for=date_for
    )


def _totals(schedule: List[AmortizationRow], start_date: date) -> LoanTotals:
    return LoanTotals(
        total_interest=sum(row.interest for row in schedule),
        total_payment=sum(row.payment + row.extra_payment for row in schedule),
        number_of_payments=len(schedule),
        payoff_date=schedule[-1].date if schedule else start_date,
    )


def has_extra_payments(inputs: LoanInputs) -> bool:
    """True when the inputs schedule any extra payment."""
    recurring = (
        ExtraPaymentFrequency(inputs.extra_payment_frequency)
        is not ExtraPaymentFrequency.none
        and inputs.extra_payment_amount > 0
    )
    return recurring or inputs.one_time_payment > 0


def calculate_comparison(inputs: LoanInputs) -> Optional[LoanComparison]:
    """
    Compare the payoff with and without extra payments.

    Returns:
        Comparison, or None when no extra payment is scheduled
    """
    if not has_extra_payments(inputs):
        return None

    with_extra = _totals(calculate_loan_schedule(inputs), inputs.start_date)

    plain_inputs = replace(
        inputs,
        extra_payment_amount=0.0,
        extra_payment_frequency=ExtraPaymentFrequency.none,
        one_time_payment=0.0,
        one_time_payment_date=None,
    )
    without_extra = _totals(calculate_loan_schedule(plain_inputs), inputs.start_date)

    return LoanComparison(
        without_extra=without_extra,
        with_extra=with_extra,
        interest_saved=without_extra.total_interest - with_extra.total_interest,
        payments_saved=without_extra.number_of_payments - with_extra.number_of_payments,
    )


def validate_loan_inputs(inputs: LoanInputs) -> List[str]:
    """Validate loan inputs; an empty list means valid."""
    errors: List[str] = []

    validation.check_positive(errors, inputs.loan_amount, "Loan amount")
    validation.check_rate(errors, inputs.interest_rate, "Interest rate")
    validation.check_term(errors, inputs.term_years, inputs.term_months, "Loan term")
    validation.check_payment_frequency(
        errors, inputs.payment_frequency, LOAN_PAYMENT_FREQUENCIES
    )
    validation.check_option(
        errors, inputs.extra_payment_frequency, ExtraPaymentFrequency, "Extra payment frequency"
    )
    validation.check_non_negative(
        errors, inputs.extra_payment_amount, "Extra payment amount"
    )
    validation.check_non_negative(errors, inputs.one_time_payment, "One-time payment")

    return errors


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'' if count == 1 else 's'}"


def format_loan_term(months: int) -> str:
    """Format a number of months as e.g. '2 years 3 months'."""
    years, remaining = divmod(months, 12)
    if years == 0:
        return _plural(remaining, "month")
    if remaining == 0:
        return _plural(years, "year")
    return f"{_plural(years, 'year')} {_plural(remaining, 'month')}"
