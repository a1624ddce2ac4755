"""
Annuity Calculations

Accumulation phase: a starting principal grown monthly with regular monthly
and annual additions. Payout phase: the level payout a lump sum supports over
a fixed number of years, or how long a fixed payout lasts.
"""

import math
from typing import List, Optional
from dataclasses import dataclass

from fincalc.calculations import validation
from fincalc.calculations.projection import (
    AccumulationRow,
    YearSummary,
    accumulate,
    amortize,
    summarize_years,
)
from fincalc.calculations.rates import (
    Frequency,
    Timing,
    level_payment,
    nominal_periodic_rate,
    periods_per_year,
)

PAYOUT_FREQUENCIES = (
    Frequency.annually,
    Frequency.semi_annually,
    Frequency.quarterly,
    Frequency.monthly,
    Frequency.semi_monthly,
    Frequency.bi_weekly,
)

MAX_PAYOUT_PRINCIPAL = 100_000_000
MAX_PAYOUT_RATE = 50
MAX_PAYOUT_YEARS = 100


@dataclass(frozen=True)
class AnnuityInputs:
    """Accumulation-phase inputs."""

    starting_principal: float
    annual_addition: float
    monthly_addition: float
    annual_growth_rate: float  # Percentage
    years: float
    addition_timing: Timing = Timing.end


@dataclass
class AnnuityResults:
    """Ending balance of the accumulation phase with its schedules."""

    end_balance: float
    starting_principal: float
    total_additions: float
    total_interest: float
    monthly_schedule: List[AccumulationRow]
    annual_schedule: List[YearSummary]


@dataclass(frozen=True)
class PayoutInputs:
    """Payout-phase inputs: `years` for a fixed length, `payout_amount` for a fixed payment."""

    principal: float
    annual_rate: float  # Percentage
    frequency: Frequency = Frequency.monthly
    years: Optional[float] = None
    payout_amount: Optional[float] = None


@dataclass
class PayoutYear:
    """One year of payouts drawn from the principal."""

    year: int
    beginning_balance: float
    interest: float
    principal: float
    payment: float
    ending_balance: float


@dataclass
class PayoutResults:
    """Level payout over a fixed number of years."""

    payout_amount: float
    total_payments: int
    total_payout: float
    total_interest: float
    schedule: List[PayoutYear]


@dataclass
class PayoutDuration:
    """How long a fixed payout lasts; counts are None when it never runs out."""

    payout_amount: float
    total_payments: Optional[int]
    total_payout: Optional[float]
    total_interest: Optional[float]
    years: Optional[float]
    will_grow: bool


def calculate_annuity(inputs: AnnuityInputs) -> AnnuityResults:
    """
    Grow the starting principal month by month.

    Monthly additions land at the end of each month. The annual addition
    lands in months 1, 13, 25, ... for beginning timing and in months
    12, 24, 36, ... for end timing.

    Args:
        inputs: Principal, additions, growth rate and term

    Returns:
        End balance with monthly and annual schedules
    """
    monthly_rate = nominal_periodic_rate(inputs.annual_growth_rate, Frequency.monthly)
    total_months = round(inputs.years * 12)
    beginning = Timing(inputs.addition_timing) is Timing.beginning

    def addition_for(month: int) -> float:
        addition = inputs.monthly_addition
        if beginning and (month - 1) % 12 == 0:
            addition += inputs.annual_addition
        elif not beginning and month % 12 == 0:
            addition += inputs.annual_addition
        return addition

    schedule = accumulate(inputs.starting_principal, monthly_rate, total_months, addition_for)

    end_balance = schedule[-1].balance if schedule else inputs.starting_principal
    total_additions = sum(row.deposit for row in schedule)

    return AnnuityResults(
        end_balance=end_balance,
        starting_principal=inputs.starting_principal,
        total_additions=total_additions,
        total_interest=end_balance - inputs.starting_principal - total_additions,
        monthly_schedule=schedule,
        annual_schedule=summarize_years(schedule, lambda m: -(-m // 12)),
    )


def generate_payout_schedule(
    principal: float, annual_rate: float, years: float, frequency: Frequency
) -> List[PayoutYear]:
    """Year-by-year drawdown of the principal under a level payout."""
    per_year = int(periods_per_year(frequency))
    rate = nominal_periodic_rate(annual_rate, frequency)
    total_payments = round(years * per_year)
    payment = level_payment(principal, rate, total_payments)

    schedule: List[PayoutYear] = []
    balance = principal

    for row in amortize(principal, rate, payment, total_payments):
        year = -(-row.period // per_year)
        if not schedule or schedule[-1].year != year:
            schedule.append(PayoutYear(year, balance, 0.0, 0.0, 0.0, balance))
        entry = schedule[-1]
        entry.interest += row.interest
        entry.principal += row.principal
        entry.payment += row.payment
        entry.ending_balance = row.balance
        balance = row.balance

    return schedule


def calculate_annuity_payout(inputs: PayoutInputs) -> PayoutResults:
    """
    Level payout that draws the principal to zero over a fixed term.

    PMT = PV x [r(1 + r)^n] / [(1 + r)^n - 1], or PV / n when r = 0.
    """
    per_year = periods_per_year(inputs.frequency)
    rate = nominal_periodic_rate(inputs.annual_rate, inputs.frequency)
    total_payments = round(inputs.years * per_year)
    payout_amount = level_payment(inputs.principal, rate, total_payments)
    total_payout = payout_amount * total_payments

    return PayoutResults(
        payout_amount=payout_amount,
        total_payments=total_payments,
        total_payout=total_payout,
        total_interest=total_payout - inputs.principal,
        schedule=generate_payout_schedule(
            inputs.principal, inputs.annual_rate, inputs.years, inputs.frequency
        ),
    )


def calculate_payout_duration(inputs: PayoutInputs) -> PayoutDuration:
    """
    Number of payouts a fixed payment lasts.

    n = log(PMT / (PMT - PV x r)) / log(1 + r). A payout at or below the
    first period's interest never depletes the principal; the counts are then
    None and `will_grow` tells whether the balance grows or stays level.
    """
    per_year = periods_per_year(inputs.frequency)
    rate = nominal_periodic_rate(inputs.annual_rate, inputs.frequency)
    payout = inputs.payout_amount
    first_interest = inputs.principal * rate

    if payout <= first_interest:
        return PayoutDuration(
            payout_amount=payout,
            total_payments=None,
            total_payout=None,
            total_interest=None,
            years=None,
            will_grow=payout < first_interest,
        )

    if rate == 0:
        payments = inputs.principal / payout
    else:
        payments = math.log(payout / (payout - first_interest)) / math.log(1 + rate)

    # Tolerate float error around an exact count
    total_payments = math.ceil(round(payments, 9))
    total_payout = payout * total_payments

    return PayoutDuration(
        payout_amount=payout,
        total_payments=total_payments,
        total_payout=total_payout,
        total_interest=total_payout - inputs.principal,
        years=payments / per_year,
        will_grow=False,
    )


def validate_annuity_inputs(inputs: AnnuityInputs) -> List[str]:
    """Validate accumulation inputs; an empty list means valid."""
    errors: List[str] = []

    validation.check_non_negative(errors, inputs.starting_principal, "Starting principal")
    validation.check_non_negative(errors, inputs.annual_addition, "Annual addition")
    validation.check_non_negative(errors, inputs.monthly_addition, "Monthly addition")
    validation.check_rate(errors, inputs.annual_growth_rate, "Growth rate")
    validation.check_positive(errors, inputs.years, "Years")
    validation.check_option(errors, inputs.addition_timing, Timing, "Addition timing")

    return errors


def validate_payout_inputs(inputs: PayoutInputs) -> List[str]:
    """Validate payout inputs; an empty list means valid."""
    errors: List[str] = []

    validation.check_positive(errors, inputs.principal, "Starting principal")
    if validation.is_number(inputs.principal) and inputs.principal > MAX_PAYOUT_PRINCIPAL:
        errors.append("Starting principal must be less than $100,000,000")

    validation.check_rate(
        errors, inputs.annual_rate, "Interest rate", high=MAX_PAYOUT_RATE
    )
    validation.check_payment_frequency(errors, inputs.frequency, PAYOUT_FREQUENCIES)

    if inputs.years is None and inputs.payout_amount is None:
        errors.append("Please enter either a number of years or a payout amount")
    if inputs.years is not None:
        validation.check_positive(errors, inputs.years, "Years")
        if validation.is_number(inputs.years) and inputs.years > MAX_PAYOUT_YEARS:
            errors.append("Years must be less than 100")
    if inputs.payout_amount is not None:
        validation.check_positive(errors, inputs.payout_amount, "Payout amount")

    return errors
