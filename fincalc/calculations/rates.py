"""
Rate Conversions

Frequency table, per-period rate normalization and the level-payment
solver shared by every calculator.
"""

import enum
import math
from typing import Optional


class Frequency(str, enum.Enum):
    """Compounding or payment frequency."""

    annually = "annually"
    semi_annually = "semi-annually"
    quarterly = "quarterly"
    monthly = "monthly"
    semi_monthly = "semi-monthly"
    bi_weekly = "bi-weekly"
    weekly = "weekly"
    daily = "daily"
    continuously = "continuously"


class Timing(str, enum.Enum):
    """When a contribution or payment lands within its period."""

    beginning = "beginning"
    end = "end"


PERIODS_PER_YEAR = {
    Frequency.annually: 1,
    Frequency.semi_annually: 2,
    Frequency.quarterly: 4,
    Frequency.monthly: 12,
    Frequency.semi_monthly: 24,
    Frequency.bi_weekly: 26,
    Frequency.weekly: 52,
    Frequency.daily: 365,
    Frequency.continuously: math.inf,
}


def periods_per_year(frequency: Frequency) -> float:
    """Number of periods per year (infinite for continuous compounding)."""
    return PERIODS_PER_YEAR[Frequency(frequency)]


def periodic_rate(
    annual_rate: float,
    compound_frequency: Frequency,
    payment_frequency: Optional[Frequency] = None,
) -> float:
    """
    Convert an annual nominal rate into the effective rate per payment period.

    Reconciles a compounding frequency with a (possibly different) payment
    frequency:

        discrete:   i = (1 + r/c)^(c/p) - 1
        continuous: i = e^(r/p) - 1

    Args:
        annual_rate: Annual nominal rate as a percentage (e.g., 5 for 5%)
        compound_frequency: How often interest compounds
        payment_frequency: How often payments are made; defaults to the
            compounding frequency

    Returns:
        Rate per payment period as decimal
    """
    if annual_rate == 0:
        return 0.0

    if payment_frequency is None:
        payment_frequency = compound_frequency

    r = annual_rate / 100
    p = periods_per_year(payment_frequency)

    if Frequency(compound_frequency) is Frequency.continuously:
        return math.exp(r / p) - 1

    c = periods_per_year(compound_frequency)
    return (1 + r / c) ** (c / p) - 1


def nominal_periodic_rate(annual_rate: float, frequency: Frequency) -> float:
    """Simple per-period rate (r / p) as decimal."""
    return annual_rate / 100 / periods_per_year(frequency)


def effective_annual_rate(rate_per_period: float, per_year: float) -> float:
    """Effective annual rate as decimal: (1 + i)^p - 1."""
    return (1 + rate_per_period) ** per_year - 1


def total_periods(term_years: float, term_months: float, frequency: Frequency) -> int:
    """Total number of payment periods in a term of years plus months."""
    total_months = term_years * 12 + term_months
    return round(total_months / 12 * periods_per_year(frequency))


def level_payment(principal: float, rate: float, periods: int) -> float:
    """
    Calculate the level payment that amortizes a principal.

    Matches Excel's PMT() function (sign flipped).

    Args:
        principal: Amount borrowed
        rate: Rate per period as decimal
        periods: Number of payments

    Returns:
        Payment per period (positive number)
    """
    if principal <= 0:
        return 0.0
    if periods <= 0:
        return 0.0

    if rate == 0:
        return principal / periods

    growth = (1 + rate) ** periods
    return principal * rate * growth / (growth - 1)
