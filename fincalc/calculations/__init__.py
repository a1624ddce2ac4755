"""
Financial Calculation Engine

Pure calculation modules for the personal finance calculators.
Each takes a frozen inputs dataclass and returns a results dataclass;
validate_*_inputs functions return a list of error messages.
"""

from fincalc.calculations import (
    amortization,
    annuity,
    budget,
    compound_interest,
    future_value,
    ira,
    irr,
    loan,
    margin,
    payback,
    present_value,
)

__all__ = [
    "amortization",
    "annuity",
    "budget",
    "compound_interest",
    "future_value",
    "ira",
    "irr",
    "loan",
    "margin",
    "payback",
    "present_value",
]
