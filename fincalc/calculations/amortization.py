"""
Loan Amortization Calculations

Implements level-payment amortization for any combination of compounding
period and payment frequency, with optional recurring and one-time extra
payments. The per-period rate follows calculator.net's methodology.
"""

from typing import List, Optional, Tuple
from datetime import date
from dataclasses import dataclass
from dateutil.relativedelta import relativedelta

from fincalc.calculations import validation
from fincalc.calculations.projection import AmortizationRow, amortize
from fincalc.calculations.rates import (
    Frequency,
    effective_annual_rate,
    level_payment,
    periodic_rate,
    periods_per_year,
    total_periods,
)


@dataclass(frozen=True)
class AmortizationInputs:
    """Loan terms for an amortization schedule."""

    loan_amount: float
    term_years: int
    term_months: int
    interest_rate: float  # Annual percentage (e.g., 6 for 6%)
    compound_period: Frequency = Frequency.monthly
    payment_frequency: Frequency = Frequency.monthly
    start_date: Optional[date] = None


@dataclass(frozen=True)
class ExtraPayments:
    """Extra principal payments, keyed by month of the loan (1-based)."""

    monthly_extra: float = 0.0
    monthly_extra_start_month: int = 1
    yearly_extra: float = 0.0
    yearly_extra_start_month: int = 1
    one_time_payments: Tuple[Tuple[float, int], ...] = ()  # (amount, month)


@dataclass
class AmortizationResults:
    """Summary of an amortization schedule."""

    loan_amount: float
    regular_payment: float
    periodic_rate: float  # Decimal rate per payment period
    scheduled_payments: int  # Payments in the term, ignoring extras
    number_of_payments: int  # Payments actually made
    total_interest: float
    total_principal: float
    total_paid: float
    payoff_date: date
    effective_annual_rate: float  # Percentage
    schedule: List[AmortizationRow]


def calculate_payment_date(
    start_date: date, payment_index: int, payment_frequency: Frequency
) -> date:
    """
    Calculate the date of a payment.

    Args:
        start_date: Date of the first payment
        payment_index: 0-based payment index
        payment_frequency: Payment frequency

    Returns:
        Payment date
    """
    frequency = Frequency(payment_frequency)

    if frequency is Frequency.semi_monthly:
        # 1st and 15th of each month
        payment_date = start_date + relativedelta(months=payment_index // 2)
        return payment_date.replace(day=15 if payment_index % 2 else 1)
    if frequency is Frequency.bi_weekly:
        return start_date + relativedelta(days=14 * payment_index)
    if frequency is Frequency.weekly:
        return start_date + relativedelta(days=7 * payment_index)
    if frequency is Frequency.daily:
        return start_date + relativedelta(days=payment_index)

    months_per_payment = 12 // int(periods_per_year(frequency))
    return start_date + relativedelta(months=months_per_payment * payment_index)


def equivalent_month(payment_number: int, per_year: float) -> int:
    """Month of the loan (1-based) in which a payment falls."""
    # Integer form of ceil(n / p * 12), avoiding float error
    return -((-payment_number * 12) // int(per_year))


def _extra_payment_schedule(extras: ExtraPayments, per_year: float):
    """Build a period -> extra payment function for the amortizing loop."""
    one_time = {}
    for amount, month in extras.one_time_payments:
        one_time[month] = one_time.get(month, 0.0) + amount

    def extra_for(payment_number: int) -> float:
        month = equivalent_month(payment_number, per_year)
        # Lump sums land once, on the first payment of their month
        first_in_month = (
            payment_number == 1
            or equivalent_month(payment_number - 1, per_year) != month
        )
        extra = 0.0

        if extras.monthly_extra > 0 and month >= extras.monthly_extra_start_month:
            # Prorate across the payments in a month
            extra += extras.monthly_extra * 12 / per_year

        if (
            first_in_month
            and extras.yearly_extra > 0
            and month >= extras.yearly_extra_start_month
            and (month - extras.yearly_extra_start_month) % 12 == 0
        ):
            extra += extras.yearly_extra

        if first_in_month:
            extra += one_time.get(month, 0.0)

        return extra

    return extra_for


def generate_amortization_schedule(
    inputs: AmortizationInputs, extra_payments: Optional[ExtraPayments] = None
) -> List[AmortizationRow]:
    """
    Generate a full amortization schedule.

    Args:
        inputs: Loan terms
        extra_payments: Optional extra principal payments

    Returns:
        List of amortization rows, ending when the loan is paid off
    """
    rate = periodic_rate(
        inputs.interest_rate, inputs.compound_period, inputs.payment_frequency
    )
    n = total_periods(inputs.term_years, inputs.term_months, inputs.payment_frequency)
    payment = level_payment(inputs.loan_amount, rate, n)
    per_year = periods_per_year(inputs.payment_frequency)

    start_date = inputs.start_date
    if start_date is None:
        start_date = date.today()

    extra_for = None
    if extra_payments is not None:
        extra_for = _extra_payment_schedule(extra_payments, per_year)

    return amortize(
        inputs.loan_amount,
        rate,
        payment,
        n,
        extra_for=extra_for,
        date_for=lambda period: calculate_payment_date(
            start_date, period - 1, inputs.payment_frequency
        ),
    )


def calculate_remaining_balance(
    principal: float, rate: float, periods: int, payments_completed: int
) -> float:
    """Closed-form balance left after N level payments."""
    payment = level_payment(principal, rate, periods)

    if rate == 0:
        return max(0.0, principal - payment * payments_completed)

    growth = (1 + rate) ** payments_completed
    balance = principal * growth - payment * ((growth - 1) / rate)

    return max(0.0, balance)


def calculate_total_interest(schedule: List[AmortizationRow]) -> float:
    """Calculate total interest paid over the schedule."""
    return sum(row.interest for row in schedule)


def calculate_amortization(
    inputs: AmortizationInputs, extra_payments: Optional[ExtraPayments] = None
) -> AmortizationResults:
    """
    Calculate complete amortization results.

    Args:
        inputs: Loan terms
        extra_payments: Optional extra principal payments

    Returns:
        Amortization summary with the full schedule
    """
    rate = periodic_rate(
        inputs.interest_rate, inputs.compound_period, inputs.payment_frequency
    )
    n = total_periods(inputs.term_years, inputs.term_months, inputs.payment_frequency)
    payment = level_payment(inputs.loan_amount, rate, n)

    schedule = generate_amortization_schedule(inputs, extra_payments)

    total_interest = calculate_total_interest(schedule)
    total_principal = sum(row.principal + row.extra_payment for row in schedule)

    if schedule:
        payoff_date = schedule[-1].date
    else:
        payoff_date = inputs.start_date or date.today()

    return AmortizationResults(
        loan_amount=inputs.loan_amount,
        regular_payment=payment,
        periodic_rate=rate,
        scheduled_payments=n,
        number_of_payments=len(schedule),
        total_interest=total_interest,
        total_principal=total_principal,
        total_paid=total_principal + total_interest,
        payoff_date=payoff_date,
        effective_annual_rate=effective_annual_rate(
            rate, periods_per_year(inputs.payment_frequency)
        )
        * 100,
        schedule=schedule,
    )


def validate_amortization_inputs(
    inputs: AmortizationInputs, extra_payments: Optional[ExtraPayments] = None
) -> List[str]:
    """Validate amortization inputs; an empty list means valid."""
    errors: List[str] = []

    validation.check_positive(errors, inputs.loan_amount, "Loan amount")
    validation.check_rate(errors, inputs.interest_rate, "Interest rate")
    validation.check_term(errors, inputs.term_years, inputs.term_months, "Loan term")
    validation.check_option(
        errors, inputs.compound_period, Frequency, "Compounding frequency"
    )
    validation.check_payment_frequency(errors, inputs.payment_frequency)

    if extra_payments is not None:
        validation.check_non_negative(
            errors, extra_payments.monthly_extra, "Monthly extra payment"
        )
        validation.check_non_negative(
            errors, extra_payments.yearly_extra, "Yearly extra payment"
        )
        for label, month in (
            ("Monthly extra start month", extra_payments.monthly_extra_start_month),
            ("Yearly extra start month", extra_payments.yearly_extra_start_month),
        ):
            if not isinstance(month, int) or month < 1:
                errors.append(f"{label} must be a positive integer")
        for amount, _ in extra_payments.one_time_payments:
            validation.check_non_negative(errors, amount, "One-time payment")
        validation.check_periods(
            errors, [month for _, month in extra_payments.one_time_payments]
        )

    return errors
