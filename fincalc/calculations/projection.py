"""
Period Projection Loops

The two period-by-period loops every schedule is built from: an amortizing
loop that pays a balance down, and an accumulating loop that grows one.
"""

from typing import Callable, List, Optional
from datetime import date
from dataclasses import dataclass

from fincalc.calculations.rates import Timing

# A balance at or below this is treated as paid off
PAID_OFF_TOLERANCE = 0.01


@dataclass
class AmortizationRow:
    """One payment period of an amortizing balance."""

    period: int
    date: Optional[date]
    payment: float  # Scheduled payment (interest + principal), excludes extra
    principal: float
    interest: float
    extra_payment: float
    balance: float  # Ending balance
    cumulative_principal: float  # Includes extra payments
    cumulative_interest: float


@dataclass
class AccumulationRow:
    """One period of an accumulating balance."""

    period: int
    beginning_balance: float
    deposit: float
    interest: float
    balance: float  # Ending balance
    cumulative_deposits: float  # Includes the starting balance
    cumulative_interest: float


@dataclass
class YearSummary:
    """Totals for one year of an accumulation schedule."""

    year: int
    deposits: float
    interest: float
    balance: float
    cumulative_deposits: float
    cumulative_interest: float


def amortize(
    principal: float,
    rate: float,
    payment: float,
    max_periods: int,
    extra_for: Optional[Callable[[int], float]] = None,
    date_for: Optional[Callable[[int], date]] = None,
) -> List[AmortizationRow]:
    """
    Pay a balance down with a level payment plus optional extra payments.

    Extra payments never overshoot: they are trimmed to exactly clear the
    balance. A residual within PAID_OFF_TOLERANCE, or whatever remains on the
    final scheduled period, is folded into that period's principal so the
    schedule ends at exactly zero.

    Args:
        principal: Starting balance
        rate: Rate per period as decimal
        payment: Level payment per period
        max_periods: Number of scheduled payments
        extra_for: Maps a 1-based period number to its extra payment
        date_for: Maps a 1-based period number to its payment date

    Returns:
        List of amortization rows, one per period until paid off
    """
    schedule = []
    balance = principal
    cumulative_principal = 0.0
    cumulative_interest = 0.0

    for period in range(1, max_periods + 1):
        if balance <= PAID_OFF_TOLERANCE:
            break

        interest = balance * rate
        principal_pmt = payment - interest
        extra = extra_for(period) if extra_for else 0.0

        if principal_pmt >= balance:
            principal_pmt = balance
            extra = 0.0
        elif principal_pmt + extra > balance:
            extra = balance - principal_pmt

        ending_balance = balance - principal_pmt - extra

        # Zero out exactly on payoff or at the end of the term
        if ending_balance <= PAID_OFF_TOLERANCE or period == max_periods:
            principal_pmt += ending_balance
            ending_balance = 0.0

        cumulative_principal += principal_pmt + extra
        cumulative_interest += interest

        schedule.append(
            AmortizationRow(
                period=period,
                date=date_for(period) if date_for else None,
                payment=principal_pmt + interest,
                principal=principal_pmt,
                interest=interest,
                extra_payment=extra,
                balance=ending_balance,
                cumulative_principal=cumulative_principal,
                cumulative_interest=cumulative_interest,
            )
        )

        balance = ending_balance

    return schedule


def accumulate(
    starting_balance: float,
    rate: float,
    periods: int,
    contribution_for: Optional[Callable[[int], float]] = None,
    timing: Timing = Timing.end,
    tax_rate: float = 0.0,
) -> List[AccumulationRow]:
    """
    Grow a balance period by period with interest and contributions.

    Beginning-of-period deposits earn interest in the period they are made;
    end-of-period deposits start earning the following period.

    Args:
        starting_balance: Balance at period 0
        rate: Rate per period as decimal
        periods: Number of periods to project
        contribution_for: Maps a 1-based period number to its deposit
        timing: Whether deposits land at the beginning or end of a period
        tax_rate: Tax withheld from each period's interest, as decimal

    Returns:
        List of accumulation rows, one per period
    """
    schedule = []
    balance = starting_balance
    cumulative_deposits = starting_balance
    cumulative_interest = 0.0
    beginning = Timing(timing) is Timing.beginning

    for period in range(1, periods + 1):
        beginning_balance = balance
        deposit = contribution_for(period) if contribution_for else 0.0

        if beginning:
            balance += deposit

        interest = balance * rate * (1 - tax_rate)
        balance += interest

        if not beginning:
            balance += deposit

        cumulative_deposits += deposit
        cumulative_interest += interest

        schedule.append(
            AccumulationRow(
                period=period,
                beginning_balance=beginning_balance,
                deposit=deposit,
                interest=interest,
                balance=balance,
                cumulative_deposits=cumulative_deposits,
                cumulative_interest=cumulative_interest,
            )
        )

    return schedule


def summarize_years(
    schedule: List[AccumulationRow], year_of: Callable[[int], int]
) -> List[YearSummary]:
    """Roll a per-period schedule up into per-year totals."""
    summaries: List[YearSummary] = []

    for row in schedule:
        year = year_of(row.period)
        if not summaries or summaries[-1].year != year:
            summaries.append(
                YearSummary(
                    year=year,
                    deposits=0.0,
                    interest=0.0,
                    balance=row.balance,
                    cumulative_deposits=row.cumulative_deposits,
                    cumulative_interest=row.cumulative_interest,
                )
            )
        summary = summaries[-1]
        summary.deposits += row.deposit
        summary.interest += row.interest
        summary.balance = row.balance
        summary.cumulative_deposits = row.cumulative_deposits
        summary.cumulative_interest = row.cumulative_interest

    return summaries
