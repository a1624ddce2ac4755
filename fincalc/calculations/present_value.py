"""
Present Value Calculations

Present value of a future lump sum, an ordinary annuity, an annuity due and
a growing annuity, matching Excel's PV() for the level-payment cases.
"""

import math
from typing import List
from dataclasses import dataclass

from fincalc.calculations import validation
from fincalc.calculations.rates import (
    Frequency,
    Timing,
    effective_annual_rate,
    nominal_periodic_rate,
    periods_per_year,
)

# Growth and discount rates closer than this are treated as equal
RATE_EQUALITY_TOLERANCE = 1e-7


@dataclass(frozen=True)
class PVInputs:
    """Future lump sum and/or periodic payment discounted at a fixed rate."""

    periods: int
    interest_rate: float  # Annual discount rate, percentage
    payment_frequency: Frequency = Frequency.annually
    future_value: float = 0.0
    periodic_payment: float = 0.0
    payment_timing: Timing = Timing.end
    growth_rate: float = 0.0  # Annual percentage growth of the payment


@dataclass
class LumpSumPV:
    """Present value of a single future amount."""

    present_value: float
    discount_factor: float  # 1 / (1 + r)^n
    discount_amount: float
    discount_percentage: float


@dataclass
class PeriodDetail:
    """Discounting of one period's payment."""

    period: int
    payment: float
    discount_factor: float
    present_value: float
    cumulative_pv: float


@dataclass
class PVResults:
    """Present value breakdown with a per-period schedule."""

    total_present_value: float
    pv_of_lump_sum: float
    pv_of_annuity: float
    future_value: float
    discount_factor: float
    discount_amount: float
    discount_percentage: float
    periodic_payment: float
    number_of_periods: int
    total_payments: float
    annuity_discount_amount: float
    payment_timing: Timing
    periodic_rate: float  # Decimal
    effective_annual_rate: float  # Percentage
    is_growing_annuity: bool
    future_value_comparison: float  # What the total PV grows to at the same rate
    period_breakdown: List[PeriodDetail]


def pv_of_lump_sum(future_value: float, rate: float, periods: int) -> LumpSumPV:
    """PV = FV / (1 + r)^n"""
    if future_value == 0:
        return LumpSumPV(0.0, 0.0, 0.0, 0.0)

    discount_factor = 1 / (1 + rate) ** periods
    present_value = future_value * discount_factor
    discount_amount = future_value - present_value

    return LumpSumPV(
        present_value=present_value,
        discount_factor=discount_factor,
        discount_amount=discount_amount,
        discount_percentage=discount_amount / future_value * 100,
    )


def pv_of_ordinary_annuity(payment: float, rate: float, periods: int) -> float:
    """PV = PMT x [(1 - (1 + r)^-n) / r]"""
    if payment == 0 or periods == 0:
        return 0.0
    if rate == 0:
        return payment * periods
    return payment * ((1 - (1 + rate) ** -periods) / rate)


def pv_of_annuity_due(payment: float, rate: float, periods: int) -> float:
    """PV_due = PV_ordinary x (1 + r)"""
    return pv_of_ordinary_annuity(payment, rate, periods) * (1 + rate)


def pv_of_growing_annuity(
    payment: float,
    rate: float,
    growth: float,
    periods: int,
    timing: Timing = Timing.end,
) -> float:
    """
    Present value of payments that grow by `growth` each period.

    PV = PMT x [(1 - ((1 + g) / (1 + r))^n) / (r - g)]
    When r = g: PV = PMT x n / (1 + r)
    """
    if payment == 0 or periods == 0:
        return 0.0

    beginning = Timing(timing) is Timing.beginning

    if growth == 0:
        if beginning:
            return pv_of_annuity_due(payment, rate, periods)
        return pv_of_ordinary_annuity(payment, rate, periods)

    if math.isclose(rate, growth, rel_tol=0.0, abs_tol=RATE_EQUALITY_TOLERANCE):
        pv = payment * periods / (1 + rate)
    else:
        pv = payment * ((1 - ((1 + growth) / (1 + rate)) ** periods) / (rate - growth))

    return pv * (1 + rate) if beginning else pv


def generate_period_breakdown(
    payment: float, rate: float, growth: float, periods: int, timing: Timing
) -> List[PeriodDetail]:
    """Discount each period's payment back to today."""
    breakdown = []
    cumulative_pv = 0.0
    # A payment at the start of period k is discounted k - 1 periods
    shift = 1 if Timing(timing) is Timing.beginning else 0

    for period in range(1, periods + 1):
        period_payment = payment * (1 + growth) ** (period - 1)
        discount_factor = 1 / (1 + rate) ** (period - shift)
        present_value = period_payment * discount_factor
        cumulative_pv += present_value

        breakdown.append(
            PeriodDetail(
                period=period,
                payment=period_payment,
                discount_factor=discount_factor,
                present_value=present_value,
                cumulative_pv=cumulative_pv,
            )
        )

    return breakdown


def calculate_pv_results(inputs: PVInputs) -> PVResults:
    """
    Calculate the combined present value of a lump sum and an annuity.

    Args:
        inputs: Future value, payment, discount rate and term

    Returns:
        Present value breakdown and per-period schedule
    """
    rate = nominal_periodic_rate(inputs.interest_rate, inputs.payment_frequency)
    per_year = periods_per_year(inputs.payment_frequency)
    is_growing = inputs.growth_rate > 0 and inputs.periodic_payment > 0
    growth = (
        nominal_periodic_rate(inputs.growth_rate, inputs.payment_frequency)
        if is_growing
        else 0.0
    )

    lump_sum = pv_of_lump_sum(inputs.future_value, rate, inputs.periods)
    pv_of_annuity = pv_of_growing_annuity(
        inputs.periodic_payment, rate, growth, inputs.periods, inputs.payment_timing
    )

    total_payments = sum(
        inputs.periodic_payment * (1 + growth) ** i for i in range(inputs.periods)
    )
    total_present_value = lump_sum.present_value + pv_of_annuity

    return PVResults(
        total_present_value=total_present_value,
        pv_of_lump_sum=lump_sum.present_value,
        pv_of_annuity=pv_of_annuity,
        future_value=inputs.future_value,
        discount_factor=lump_sum.discount_factor,
        discount_amount=lump_sum.discount_amount,
        discount_percentage=lump_sum.discount_percentage,
        periodic_payment=inputs.periodic_payment,
        number_of_periods=inputs.periods,
        total_payments=total_payments,
        annuity_discount_amount=total_payments - pv_of_annuity,
        payment_timing=inputs.payment_timing,
        periodic_rate=rate,
        effective_annual_rate=effective_annual_rate(rate, per_year) * 100,
        is_growing_annuity=is_growing,
        future_value_comparison=total_present_value * (1 + rate) ** inputs.periods,
        period_breakdown=generate_period_breakdown(
            inputs.periodic_payment, rate, growth, inputs.periods, inputs.payment_timing
        ),
    )


def validate_pv_inputs(inputs: PVInputs) -> List[str]:
    """Validate present value inputs; an empty list means valid."""
    errors: List[str] = []

    if not (inputs.future_value or 0) > 0 and not (inputs.periodic_payment or 0) > 0:
        errors.append("Please enter either a future value or periodic payment (or both)")

    validation.check_non_negative(errors, inputs.future_value, "Future value")
    validation.check_non_negative(errors, inputs.periodic_payment, "Periodic payment")
    if not isinstance(inputs.periods, int) or inputs.periods <= 0:
        errors.append("Number of periods must be a whole number greater than zero")
    validation.check_rate(errors, inputs.interest_rate, "Discount rate")
    validation.check_rate(errors, inputs.growth_rate, "Growth rate")
    validation.check_payment_frequency(errors, inputs.payment_frequency)
    validation.check_option(errors, inputs.payment_timing, Timing, "Payment timing")

    if (
        not errors
        and inputs.growth_rate > inputs.interest_rate
        and inputs.periodic_payment > 0
    ):
        errors.append(
            "Growth rate must be less than or equal to the discount rate "
            "for a finite present value"
        )

    return errors
