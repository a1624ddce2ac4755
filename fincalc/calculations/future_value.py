"""
Future Value Calculations

Future value of a lump sum, an ordinary annuity, an annuity due and a
growing annuity, matching Excel's FV() for the level-payment cases.
"""

import math
from typing import List
from dataclasses import dataclass

from fincalc.calculations import validation
from fincalc.calculations.projection import AccumulationRow, accumulate
from fincalc.calculations.rates import (
    Frequency,
    Timing,
    effective_annual_rate,
    nominal_periodic_rate,
    periods_per_year,
)


@dataclass(frozen=True)
class FVInputs:
    """Lump sum and/or periodic payment growing at a fixed rate."""

    periods: int
    interest_rate: float  # Annual percentage
    payment_frequency: Frequency = Frequency.annually
    present_value: float = 0.0
    periodic_payment: float = 0.0
    payment_timing: Timing = Timing.end
    growth_rate: float = 0.0  # Annual percentage growth of the payment


@dataclass
class LumpSumFV:
    """Future value of a single deposit."""

    future_value: float
    compound_factor: float  # (1 + r)^n
    interest_earned: float
    total_growth_percentage: float


@dataclass
class FVResults:
    """Future value breakdown with a per-period schedule."""

    total_future_value: float
    fv_of_lump_sum: float
    fv_of_annuity: float
    present_value: float
    periodic_payment: float
    total_contributions: float  # Present value plus all payments
    total_payments: float  # Sum of periodic payments only
    total_interest: float
    periodic_rate: float  # Decimal
    effective_annual_rate: float  # Percentage
    number_of_periods: int
    payment_timing: Timing
    is_growing_annuity: bool
    compound_factor: float
    period_breakdown: List[AccumulationRow]


def fv_of_lump_sum(present_value: float, rate: float, periods: int) -> LumpSumFV:
    """FV = PV x (1 + r)^n"""
    compound_factor = (1 + rate) ** periods
    future_value = present_value * compound_factor

    growth = (compound_factor - 1) * 100 if present_value else 0.0

    return LumpSumFV(
        future_value=future_value,
        compound_factor=compound_factor,
        interest_earned=future_value - present_value,
        total_growth_percentage=growth,
    )


def fv_of_ordinary_annuity(payment: float, rate: float, periods: int) -> float:
    """FV = PMT x [((1 + r)^n - 1) / r], payments at the end of each period."""
    if rate == 0:
        return payment * periods
    return payment * (((1 + rate) ** periods - 1) / rate)


def fv_of_annuity_due(payment: float, rate: float, periods: int) -> float:
    """FV_due = FV_ordinary x (1 + r), payments at the beginning of each period."""
    return fv_of_ordinary_annuity(payment, rate, periods) * (1 + rate)


def fv_of_growing_annuity(
    payment: float,
    rate: float,
    growth: float,
    periods: int,
    timing: Timing = Timing.end,
) -> float:
    """
    Future value of payments that grow by `growth` each period.

    FV = PMT x [((1 + r)^n - (1 + g)^n) / (r - g)]
    When r = g: FV = PMT x n x (1 + r)^(n - 1)

    Args:
        payment: First payment
        rate: Rate per period as decimal
        growth: Payment growth per period as decimal
        periods: Number of payments
        timing: Beginning (annuity due) or end (ordinary annuity)
    """
    beginning = Timing(timing) is Timing.beginning

    if growth == 0:
        if beginning:
            return fv_of_annuity_due(payment, rate, periods)
        return fv_of_ordinary_annuity(payment, rate, periods)

    if math.isclose(rate, growth, rel_tol=0.0, abs_tol=1e-12):
        fv = payment * periods * (1 + rate) ** (periods - 1)
    else:
        fv = payment * (((1 + rate) ** periods - (1 + growth) ** periods) / (rate - growth))

    return fv * (1 + rate) if beginning else fv


def calculate_fv_results(inputs: FVInputs) -> FVResults:
    """
    Calculate the combined future value of a lump sum and an annuity.

    Args:
        inputs: Present value, payment, rate and term

    Returns:
        Future value breakdown and per-period schedule
    """
    rate = nominal_periodic_rate(inputs.interest_rate, inputs.payment_frequency)
    per_year = periods_per_year(inputs.payment_frequency)
    growth = nominal_periodic_rate(inputs.growth_rate, inputs.payment_frequency)
    is_growing = inputs.growth_rate > 0 and inputs.periodic_payment > 0

    lump_sum = fv_of_lump_sum(inputs.present_value, rate, inputs.periods)

    fv_of_annuity = 0.0
    if inputs.periodic_payment > 0:
        fv_of_annuity = fv_of_growing_annuity(
            inputs.periodic_payment,
            rate,
            growth if is_growing else 0.0,
            inputs.periods,
            inputs.payment_timing,
        )

    if is_growing:
        total_payments = sum(
            inputs.periodic_payment * (1 + growth) ** i for i in range(inputs.periods)
        )
    else:
        total_payments = inputs.periodic_payment * inputs.periods

    total_future_value = lump_sum.future_value + fv_of_annuity
    total_contributions = inputs.present_value + total_payments

    def contribution_for(period: int) -> float:
        if is_growing:
            return inputs.periodic_payment * (1 + growth) ** (period - 1)
        return inputs.periodic_payment

    breakdown = accumulate(
        inputs.present_value,
        rate,
        inputs.periods,
        contribution_for,
        inputs.payment_timing,
    )

    return FVResults(
        total_future_value=total_future_value,
        fv_of_lump_sum=lump_sum.future_value,
        fv_of_annuity=fv_of_annuity,
        present_value=inputs.present_value,
        periodic_payment=inputs.periodic_payment,
        total_contributions=total_contributions,
        total_payments=total_payments,
        total_interest=total_future_value - total_contributions,
        periodic_rate=rate,
        effective_annual_rate=effective_annual_rate(rate, per_year) * 100,
        number_of_periods=inputs.periods,
        payment_timing=inputs.payment_timing,
        is_growing_annuity=is_growing,
        compound_factor=lump_sum.compound_factor,
        period_breakdown=breakdown,
    )


def validate_fv_inputs(inputs: FVInputs) -> List[str]:
    """Validate future value inputs; an empty list means valid."""
    errors: List[str] = []

    if not (inputs.present_value or 0) > 0 and not (inputs.periodic_payment or 0) > 0:
        errors.append("Please enter either a present value or periodic payment amount")

    validation.check_non_negative(errors, inputs.present_value, "Present value")
    validation.check_non_negative(errors, inputs.periodic_payment, "Periodic payment")
    if not isinstance(inputs.periods, int) or inputs.periods <= 0:
        errors.append("Number of periods must be a whole number greater than zero")
    validation.check_rate(errors, inputs.interest_rate, "Interest rate")
    validation.check_rate(errors, inputs.growth_rate, "Growth rate")
    validation.check_payment_frequency(errors, inputs.payment_frequency)
    validation.check_option(errors, inputs.payment_timing, Timing, "Payment timing")

    return errors
