"""
Compound Interest Calculations

Projects an initial investment plus regular contributions under discrete or
continuous compounding, with optional tax on interest and an inflation
adjustment of the ending balance.
"""

import math
from typing import List
from dataclasses import dataclass

from fincalc.calculations import validation
from fincalc.calculations.projection import (
    AccumulationRow,
    YearSummary,
    accumulate,
    summarize_years,
)
from fincalc.calculations.rates import Frequency, Timing, periodic_rate, periods_per_year


@dataclass(frozen=True)
class CompoundInterestInputs:
    """Investment, rate, term and contribution plan."""

    initial_investment: float
    interest_rate: float  # Annual percentage
    years: int
    months: int = 0
    compounding_frequency: Frequency = Frequency.monthly
    monthly_contribution: float = 0.0
    annual_contribution: float = 0.0
    contribution_timing: Timing = Timing.end
    tax_rate: float = 0.0  # Percentage withheld from interest
    inflation_rate: float = 0.0  # Annual percentage


@dataclass
class CompoundInterestResults:
    """Ending balance, its composition, and the projection schedule."""

    ending_balance: float
    total_principal: float
    total_contributions: float
    total_interest: float
    interest_from_initial: float
    interest_from_contributions: float
    after_tax_amount: float
    inflation_adjusted_amount: float
    effective_annual_rate: float  # Percentage
    total_return: float  # Percentage
    schedule: List[AccumulationRow]  # Per compounding period (per year if continuous)
    annual_schedule: List[YearSummary]


def months_in_period(period: int, compounds_per_year: int) -> int:
    """Number of month boundaries crossed during a compounding period."""
    return (period * 12) // compounds_per_year - ((period - 1) * 12) // compounds_per_year


def _total_months(inputs: CompoundInterestInputs) -> int:
    return int(inputs.years * 12 + inputs.months)


def _finalize(
    inputs: CompoundInterestInputs,
    ending_balance: float,
    total_contributions: float,
    interest_from_initial: float,
    effective_rate: float,
    schedule: List[AccumulationRow],
    annual_schedule: List[YearSummary],
) -> CompoundInterestResults:
    total_years = _total_months(inputs) / 12
    invested = inputs.initial_investment + total_contributions
    total_interest = ending_balance - invested
    inflation_factor = (1 + inputs.inflation_rate / 100) ** total_years

    return CompoundInterestResults(
        ending_balance=ending_balance,
        total_principal=inputs.initial_investment,
        total_contributions=total_contributions,
        total_interest=total_interest,
        interest_from_initial=interest_from_initial,
        interest_from_contributions=total_interest - interest_from_initial,
        # Interest is credited net of tax, so the balance is already after tax
        after_tax_amount=ending_balance,
        inflation_adjusted_amount=ending_balance / inflation_factor,
        effective_annual_rate=effective_rate * 100,
        total_return=(total_interest / invested * 100) if invested > 0 else 0.0,
        schedule=schedule,
        annual_schedule=annual_schedule,
    )


def _calculate_discrete(inputs: CompoundInterestInputs) -> CompoundInterestResults:
    compounds_per_year = int(periods_per_year(inputs.compounding_frequency))
    total_periods = (_total_months(inputs) * compounds_per_year) // 12
    rate = periodic_rate(inputs.interest_rate, inputs.compounding_frequency)
    tax = inputs.tax_rate / 100

    # Annual contributions are spread evenly across the months
    monthly = inputs.monthly_contribution + inputs.annual_contribution / 12

    def contribution_for(period: int) -> float:
        if monthly == 0:
            return 0.0
        return monthly * months_in_period(period, compounds_per_year)

    schedule = accumulate(
        inputs.initial_investment,
        rate,
        total_periods,
        contribution_for,
        inputs.contribution_timing,
        tax,
    )

    ending_balance = schedule[-1].balance if schedule else inputs.initial_investment
    total_contributions = sum(row.deposit for row in schedule)
    # The initial investment compounds on its own at the net rate
    interest_from_initial = inputs.initial_investment * (
        (1 + rate * (1 - tax)) ** total_periods - 1
    )

    return _finalize(
        inputs,
        ending_balance,
        total_contributions,
        interest_from_initial,
        (1 + rate) ** compounds_per_year - 1,
        schedule,
        summarize_years(schedule, lambda p: -(-p // compounds_per_year)),
    )


def _calculate_continuous(inputs: CompoundInterestInputs) -> CompoundInterestResults:
    """
    Continuous compounding: A = P * e^(rt), applied to the initial investment
    and to each monthly contribution from the moment it is deposited.
    """
    r = inputs.interest_rate / 100
    tax = inputs.tax_rate / 100
    total_months = _total_months(inputs)
    total_years = total_months / 12
    monthly = inputs.monthly_contribution + inputs.annual_contribution / 12
    offset = 1 if Timing(inputs.contribution_timing) is Timing.beginning else 0

    def growth(years: float) -> float:
        # Value of 1 after `years`, with interest taxed as it is earned
        return 1 + (math.exp(r * years) - 1) * (1 - tax)

    def balance_at(months_elapsed: int) -> float:
        t = months_elapsed / 12
        balance = inputs.initial_investment * growth(t)
        for month in range(1, months_elapsed + 1):
            balance += monthly * growth(t - (month - offset) / 12)
        return balance

    schedule: List[AccumulationRow] = []
    cumulative_deposits = inputs.initial_investment
    previous = inputs.initial_investment

    for year in range(1, math.ceil(total_years) + 1):
        months_elapsed = min(year * 12, total_months)
        deposits = monthly * (months_elapsed - (year - 1) * 12)
        balance = balance_at(months_elapsed)
        cumulative_deposits += deposits

        schedule.append(
            AccumulationRow(
                period=year,
                beginning_balance=previous,
                deposit=deposits,
                interest=balance - previous - deposits,
                balance=balance,
                cumulative_deposits=cumulative_deposits,
                cumulative_interest=balance - cumulative_deposits,
            )
        )
        previous = balance

    ending_balance = schedule[-1].balance if schedule else inputs.initial_investment

    return _finalize(
        inputs,
        ending_balance,
        monthly * total_months,
        inputs.initial_investment * (growth(total_years) - 1),
        math.exp(r) - 1,
        schedule,
        summarize_years(schedule, lambda p: p),
    )


def calculate_compound_interest(
    inputs: CompoundInterestInputs,
) -> CompoundInterestResults:
    """
    Calculate the growth of an investment with regular contributions.

    With discrete compounding each period earns r/c; contributions are made
    monthly (annual contributions spread over twelve months) and a period
    deposits one month's contribution per month boundary it crosses.

    Args:
        inputs: Investment, rate, term and contribution plan

    Returns:
        Ending balance breakdown with per-period and annual schedules
    """
    if Frequency(inputs.compounding_frequency) is Frequency.continuously:
        return _calculate_continuous(inputs)
    return _calculate_discrete(inputs)


def validate_compound_interest_inputs(inputs: CompoundInterestInputs) -> List[str]:
    """Validate compound interest inputs; an empty list means valid."""
    errors: List[str] = []

    validation.check_non_negative(errors, inputs.initial_investment, "Initial investment")
    validation.check_rate(errors, inputs.interest_rate, "Interest rate")
    validation.check_term(errors, inputs.years, inputs.months, "Investment term")
    validation.check_option(
        errors, inputs.compounding_frequency, Frequency, "Compounding frequency"
    )
    validation.check_option(errors, inputs.contribution_timing, Timing, "Contribution timing")
    validation.check_non_negative(
        errors, inputs.monthly_contribution, "Monthly contribution"
    )
    validation.check_non_negative(
        errors, inputs.annual_contribution, "Annual contribution"
    )
    validation.check_rate(errors, inputs.tax_rate, "Tax rate")
    validation.check_rate(errors, inputs.inflation_rate, "Inflation rate")

    return errors
