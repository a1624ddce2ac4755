"""
Input Validation Helpers

Field-range checks shared by the calculators' validate_*_inputs functions.
Every check appends human-readable messages to an error list and never
raises; an empty list means the inputs are valid.
"""

import enum
import math
from typing import Iterable, List, Optional, Type

from fincalc.calculations.rates import Frequency


def is_number(value) -> bool:
    """True for a finite int/float (bools excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value) and not math.isinf(value)


def check_non_negative(errors: List[str], value: Optional[float], label: str) -> None:
    """Amounts must be >= 0."""
    if value is None:
        return
    if not is_number(value) or value < 0:
        errors.append(f"{label} cannot be negative")


def check_positive(errors: List[str], value: Optional[float], label: str) -> None:
    """Amounts that must be strictly greater than zero."""
    if value is None or not is_number(value) or value <= 0:
        errors.append(f"{label} must be greater than 0")


def check_rate(
    errors: List[str],
    value: Optional[float],
    label: str,
    low: float = 0,
    high: float = 100,
) -> None:
    """Percentage rates must fall within [low, high]."""
    if value is None or not is_number(value) or value < low or value > high:
        errors.append(f"{label} must be between {low:g} and {high:g}")


def check_term(errors: List[str], years: float, months: float, label: str = "Term") -> None:
    """A years + months term must be non-negative and not empty."""
    if not is_number(years) or not is_number(months):
        errors.append(f"{label} must be a number")
        return
    if years < 0 or months < 0:
        errors.append(f"{label} cannot be negative")
    elif years == 0 and months == 0:
        errors.append(f"{label} must be greater than 0")


def check_payment_frequency(
    errors: List[str],
    frequency: Frequency,
    allowed: Optional[Iterable[Frequency]] = None,
) -> None:
    """Payments happen at discrete points; continuous is only for compounding."""
    try:
        frequency = Frequency(frequency)
    except ValueError:
        errors.append(f"Payment frequency '{frequency}' is not supported")
        return
    if frequency is Frequency.continuously:
        errors.append("Payment frequency cannot be continuous")
    elif allowed is not None and frequency not in set(allowed):
        errors.append(f"Payment frequency '{frequency.value}' is not supported")


def check_option(errors: List[str], value, options: Type[enum.Enum], label: str) -> None:
    """Enumerated settings must be one of the option values."""
    try:
        options(value)
    except ValueError:
        errors.append(f"{label} '{value}' is not supported")


def check_periods(errors: List[str], periods: Iterable) -> None:
    """Period indices must be positive integers and unique."""
    periods = list(periods)
    if len(periods) != len(set(periods)):
        errors.append("Each period must be unique")
    if any(
        isinstance(p, bool) or not isinstance(p, int) or p < 1 for p in periods
    ):
        errors.append("All periods must be positive integers starting from 1")
