"""
Payback Period Calculations

Simple and discounted payback of an initial outlay from per-period cash
inflows, with ROI, NPV and IRR for comparison.

Payback is found by linear interpolation within the crossing period:
period = k - 1 + remaining_outlay / inflow_k
"""

import enum
from typing import List, Optional, Sequence
from dataclasses import dataclass

from fincalc.calculations import validation
from fincalc.calculations.irr import calculate_irr
from fincalc.calculations.rates import effective_annual_rate


class PeriodType(str, enum.Enum):
    annual = "annual"
    monthly = "monthly"


@dataclass(frozen=True)
class CashFlow:
    period: int  # 1-based
    amount: float
    label: Optional[str] = None


@dataclass(frozen=True)
class PaybackInputs:
    """Outlay at period 0 recovered by later inflows."""

    initial_investment: float
    cash_flows: Sequence[CashFlow]
    discount_rate: float  # Percentage per period
    period_type: PeriodType = PeriodType.annual


@dataclass
class CashFlowRow:
    """A cash flow with the outlay-relative running totals."""

    period: int
    amount: float
    label: Optional[str]
    cumulative_cash_flow: float  # Net of the outlay
    discounted_value: float
    discounted_cumulative_cash_flow: float  # Net of the outlay


@dataclass
class YearsAndMonths:
    years: int
    months: int


@dataclass
class PaybackResults:
    """Payback periods, comparison metrics and the cash flow schedule."""

    simple_payback_period: Optional[float]
    simple_payback: Optional[YearsAndMonths]
    pays_back: bool

    discounted_payback_period: Optional[float]
    discounted_payback: Optional[YearsAndMonths]
    discounted_pays_back: bool

    total_cash_inflows: float
    profit_after_payback: float
    roi: float  # Percentage
    npv: float
    irr: Optional[float]  # Percentage per period
    annual_irr: Optional[float]  # Percentage

    cash_flow_schedule: List[CashFlowRow]
    period_type: PeriodType
    discount_rate: float
    initial_investment: float


def _ordered(cash_flows: Sequence[CashFlow]) -> List[CashFlow]:
    return sorted(cash_flows, key=lambda cf: cf.period)


def _discounted(cash_flow: CashFlow, rate: float) -> float:
    return cash_flow.amount / (1 + rate) ** cash_flow.period


def _payback(amounts: Sequence[float], cash_flows: List[CashFlow], outlay: float) -> Optional[float]:
    """First interpolated period at which the running total reaches the outlay."""
    cumulative = 0.0

    for cash_flow, amount in zip(cash_flows, amounts):
        previous = cumulative
        cumulative += amount
        if cumulative >= outlay:
            return cash_flow.period - 1 + (outlay - previous) / amount

    return None


def simple_payback(cash_flows: Sequence[CashFlow], initial_investment: float) -> Optional[float]:
    """
    Undiscounted payback period.

    Args:
        cash_flows: Per-period inflows
        initial_investment: Outlay to recover

    Returns:
        Fractional period of payback, or None if inflows never cover the outlay
    """
    ordered = _ordered(cash_flows)
    return _payback([cf.amount for cf in ordered], ordered, initial_investment)


def discounted_payback(
    cash_flows: Sequence[CashFlow], initial_investment: float, discount_rate: float
) -> Optional[float]:
    """Payback period using inflows discounted as CF / (1 + r)^t."""
    rate = discount_rate / 100
    ordered = _ordered(cash_flows)
    return _payback([_discounted(cf, rate) for cf in ordered], ordered, initial_investment)


def cumulative_cash_flows(
    cash_flows: Sequence[CashFlow], initial_investment: float, discount_rate: float
) -> List[CashFlowRow]:
    """Running simple and discounted totals, each net of the outlay."""
    rate = discount_rate / 100
    cumulative = 0.0
    discounted_cumulative = 0.0
    rows = []

    for cf in _ordered(cash_flows):
        discounted_value = _discounted(cf, rate)
        cumulative += cf.amount
        discounted_cumulative += discounted_value
        rows.append(
            CashFlowRow(
                period=cf.period,
                amount=cf.amount,
                label=cf.label,
                cumulative_cash_flow=cumulative - initial_investment,
                discounted_value=discounted_value,
                discounted_cumulative_cash_flow=discounted_cumulative - initial_investment,
            )
        )

    return rows


def to_years_and_months(periods: float, period_type: PeriodType) -> YearsAndMonths:
    """Split a fractional payback period into whole years and months."""
    if PeriodType(period_type) is PeriodType.monthly:
        return YearsAndMonths(int(periods // 12), round(periods % 12))
    years = int(periods // 1)
    return YearsAndMonths(years, round((periods - years) * 12))


def calculate_roi(initial_investment: float, total_returns: float) -> float:
    """ROI = (total returns - outlay) / outlay x 100"""
    return (total_returns - initial_investment) / initial_investment * 100


def calculate_npv(
    cash_flows: Sequence[CashFlow], initial_investment: float, discount_rate: float
) -> float:
    """NPV = sum(CF_t / (1 + r)^t) - outlay"""
    rate = discount_rate / 100
    return sum(_discounted(cf, rate) for cf in cash_flows) - initial_investment


def dense_cash_flows(cash_flows: Sequence[CashFlow], initial_investment: float) -> List[float]:
    """[-outlay, cf_1, ..., cf_n] with zeros for periods that have no flow."""
    last = max((cf.period for cf in cash_flows), default=0)
    series = [0.0] * (last + 1)
    series[0] = -initial_investment
    for cf in cash_flows:
        series[cf.period] += cf.amount
    return series


def calculate_payback_results(inputs: PaybackInputs) -> PaybackResults:
    """
    Evaluate an investment's payback.

    Args:
        inputs: Outlay, per-period inflows, discount rate and period type

    Returns:
        Simple and discounted payback, ROI, NPV, IRR and the schedule
    """
    period_type = PeriodType(inputs.period_type)
    simple = simple_payback(inputs.cash_flows, inputs.initial_investment)
    discounted = discounted_payback(
        inputs.cash_flows, inputs.initial_investment, inputs.discount_rate
    )
    total_inflows = sum(cf.amount for cf in inputs.cash_flows)

    try:
        irr = calculate_irr(dense_cash_flows(inputs.cash_flows, inputs.initial_investment))
    except ValueError:
        irr = None

    per_year = 12 if period_type is PeriodType.monthly else 1

    return PaybackResults(
        simple_payback_period=simple,
        simple_payback=to_years_and_months(simple, period_type) if simple is not None else None,
        pays_back=simple is not None,
        discounted_payback_period=discounted,
        discounted_payback=(
            to_years_and_months(discounted, period_type) if discounted is not None else None
        ),
        discounted_pays_back=discounted is not None,
        total_cash_inflows=total_inflows,
        profit_after_payback=total_inflows - inputs.initial_investment,
        roi=calculate_roi(inputs.initial_investment, total_inflows),
        npv=calculate_npv(inputs.cash_flows, inputs.initial_investment, inputs.discount_rate),
        irr=irr * 100 if irr is not None else None,
        annual_irr=effective_annual_rate(irr, per_year) * 100 if irr is not None else None,
        cash_flow_schedule=cumulative_cash_flows(
            inputs.cash_flows, inputs.initial_investment, inputs.discount_rate
        ),
        period_type=period_type,
        discount_rate=inputs.discount_rate,
        initial_investment=inputs.initial_investment,
    )


def validate_payback_inputs(inputs: PaybackInputs) -> List[str]:
    """Validate payback inputs; an empty list means valid."""
    errors: List[str] = []

    if not validation.is_number(inputs.initial_investment) or inputs.initial_investment <= 0:
        errors.append("Initial investment must be greater than zero")

    if not inputs.cash_flows:
        errors.append("At least one cash flow period is required")
    else:
        if any(
            not validation.is_number(cf.amount) or cf.amount < 0 for cf in inputs.cash_flows
        ):
            errors.append("All cash flows must be greater than or equal to zero")
        validation.check_periods(errors, [cf.period for cf in inputs.cash_flows])

    validation.check_rate(errors, inputs.discount_rate, "Discount rate")
    validation.check_option(errors, inputs.period_type, PeriodType, "Period type")

    return errors
