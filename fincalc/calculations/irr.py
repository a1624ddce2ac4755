"""
Internal Rate of Return

Newton-Raphson IRR over a dense series of periodic cash flows, where index 0
is today's outlay (negative) and index k is the net flow of period k.
"""

from typing import List, Sequence, Tuple

MAX_ITERATIONS = 100
TOLERANCE = 1e-7
DEFAULT_GUESS = 0.1


def discount(cash_flows: Sequence[float], rate: float) -> float:
    """Sum of cash flows discounted to period 0 at `rate` per period."""
    return sum(cf / (1 + rate) ** period for period, cf in enumerate(cash_flows))


def _value_and_slope(cash_flows: Sequence[float], rate: float) -> Tuple[float, float]:
    """Discounted value and its derivative with respect to the rate."""
    value = 0.0
    slope = 0.0
    for period, cf in enumerate(cash_flows):
        value += cf / (1 + rate) ** period
        slope -= period * cf / (1 + rate) ** (period + 1)
    return value, slope


def calculate_irr(cash_flows: List[float], guess: float = DEFAULT_GUESS) -> float:
    """
    Rate per period at which the cash flows discount to zero.

    Args:
        cash_flows: Periodic cash flows, outlay first
        guess: Starting rate for the iteration

    Returns:
        IRR per period as decimal (e.g., 0.15 for 15%)

    Raises:
        ValueError: If the series has no sign change or the iteration fails
    """
    if len(cash_flows) < 2:
        raise ValueError("At least 2 cash flows required")

    if not any(cf > 0 for cf in cash_flows) or not any(cf < 0 for cf in cash_flows):
        raise ValueError("Cash flows must contain both positive and negative values")

    rate = guess

    for _ in range(MAX_ITERATIONS):
        try:
            value, slope = _value_and_slope(cash_flows, rate)
        except ArithmeticError:
            # (1 + rate)^period overflowed or underflowed to zero
            raise ValueError("IRR calculation did not converge")

        if abs(slope) < TOLERANCE:
            raise ValueError("IRR calculation failed: derivative too small")

        new_rate = rate - value / slope

        if new_rate <= -1:
            raise ValueError("IRR calculation failed: rate fell below -100%")

        if abs(new_rate - rate) < TOLERANCE:
            return new_rate

        rate = new_rate

    raise ValueError("IRR calculation did not converge")
