"""
Margin Calculations

Solves cost, revenue, margin and profit from any two of them, plus markup.
Profit = Revenue - Cost, Margin = Profit / Revenue, Markup = Profit / Cost.
"""

from typing import List, Optional
from dataclasses import dataclass

from fincalc.calculations import validation


@dataclass(frozen=True)
class MarginInputs:
    """Any two of the four values; leave the rest as None."""

    cost: Optional[float] = None
    revenue: Optional[float] = None
    margin: Optional[float] = None  # Percentage of revenue
    profit: Optional[float] = None


@dataclass
class MarginResults:
    cost: float
    revenue: float
    margin: float  # Percentage
    profit: float
    markup: float  # Percentage


def _provided(inputs: MarginInputs) -> List[float]:
    return [
        v for v in (inputs.cost, inputs.revenue, inputs.margin, inputs.profit)
        if v is not None
    ]


def calculate_margin(inputs: MarginInputs) -> MarginResults:
    """
    Fill in the missing values from the two that are given.

    Pairs are tried in order: cost + revenue, cost + margin, cost + profit,
    revenue + margin, revenue + profit, margin + profit.

    Raises:
        ValueError: If fewer than two values are given or all are zero
    """
    provided = _provided(inputs)
    if len(provided) < 2 or all(v == 0 for v in provided):
        raise ValueError("Please provide at least 2 values")

    cost, revenue, margin, profit = inputs.cost, inputs.revenue, inputs.margin, inputs.profit

    if cost is not None and revenue is not None:
        profit = revenue - cost
        margin = profit / revenue * 100
    elif cost is not None and margin is not None:
        revenue = cost / (1 - margin / 100)
        profit = revenue - cost
    elif cost is not None and profit is not None:
        revenue = cost + profit
        margin = profit / revenue * 100
    elif revenue is not None and margin is not None:
        profit = margin / 100 * revenue
        cost = revenue - profit
    elif revenue is not None and profit is not None:
        cost = revenue - profit
        margin = profit / revenue * 100
    else:
        revenue = profit / (margin / 100)
        cost = revenue - profit

    return MarginResults(
        cost=cost,
        revenue=revenue,
        margin=margin,
        profit=profit,
        markup=profit / cost * 100 if cost > 0 else 0.0,
    )


def validate_margin_inputs(inputs: MarginInputs) -> List[str]:
    """Validate margin inputs; an empty list means valid."""
    errors: List[str] = []

    if len(_provided(inputs)) < 2:
        errors.append("Please provide at least 2 values to calculate")

    for label, value in (
        ("Cost", inputs.cost),
        ("Revenue", inputs.revenue),
        ("Profit", inputs.profit),
        ("Margin", inputs.margin),
    ):
        validation.check_non_negative(errors, value, label)

    if inputs.margin is not None and inputs.margin >= 100:
        errors.append("Margin must be less than 100%")

    if (
        inputs.revenue is not None
        and inputs.cost is not None
        and inputs.revenue < inputs.cost
    ):
        errors.append("Revenue must be greater than or equal to cost")

    return errors
