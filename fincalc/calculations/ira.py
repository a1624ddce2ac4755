"""
IRA Calculations

Traditional vs Roth IRA projection to retirement. Contributions are made at
the end of each year, so balances follow the ordinary-annuity future value:
FV = PV(1 + r)^n + PMT x [((1 + r)^n - 1) / r]
"""

import enum
from typing import List, Optional
from dataclasses import dataclass

from fincalc.calculations import validation
from fincalc.calculations.future_value import fv_of_lump_sum, fv_of_ordinary_annuity
from fincalc.calculations.projection import accumulate

CONTRIBUTION_LIMIT = 7000
CATCH_UP_CONTRIBUTION_LIMIT = 8000
CATCH_UP_AGE = 50
# Contributions above limit x buffer are rejected
CONTRIBUTION_LIMIT_BUFFER = 1.5

MIN_AGE = 18
MAX_AGE = 100


class IRAType(str, enum.Enum):
    traditional = "traditional"
    roth = "roth"
    both = "both"


@dataclass(frozen=True)
class IRAInputs:
    """Savings plan from today until retirement."""

    current_balance: float
    annual_contribution: float
    expected_return: float  # Annual percentage, may be negative
    current_age: int
    retirement_age: int
    current_tax_rate: float  # Percentage
    retirement_tax_rate: float  # Percentage
    ira_type: IRAType = IRAType.both
    inflation_rate: float = 0.0  # Annual percentage


@dataclass
class IRAYear:
    """Balance at the end of one year."""

    age: int
    year: int
    contribution: float
    earnings: float
    balance: float
    traditional_balance_after_tax: float


@dataclass
class IRAResults:
    """Traditional and Roth balances at retirement."""

    # Traditional
    traditional_balance: float
    traditional_balance_after_tax: float
    traditional_total_contributions: float
    traditional_total_earnings: float
    traditional_tax_savings_now: float
    traditional_taxes_at_retirement: float

    # Roth
    roth_balance: float
    roth_total_contributions: float
    roth_total_earnings: float
    roth_effective_contributions: Optional[float]  # None at a 100% tax rate

    years_to_retirement: int
    total_contributions: float
    effective_return_rate: float
    inflation_adjusted_balance: float
    annual_schedule: List[IRAYear]
    ira_type: IRAType = IRAType.both


@dataclass
class IRAComparison:
    better: IRAType
    difference: float
    reason: str


def _future_value(
    present_value: float, contribution: float, rate: float, years: int
) -> float:
    return (
        fv_of_lump_sum(present_value, rate, years).future_value
        + fv_of_ordinary_annuity(contribution, rate, years)
    )


def generate_annual_schedule(inputs: IRAInputs) -> List[IRAYear]:
    """Year 0 is today's balance; years 1..n each add one contribution."""
    years = inputs.retirement_age - inputs.current_age
    retirement_tax = inputs.retirement_tax_rate / 100

    schedule = [
        IRAYear(
            age=inputs.current_age,
            year=0,
            contribution=0.0,
            earnings=0.0,
            balance=inputs.current_balance,
            traditional_balance_after_tax=inputs.current_balance * (1 - retirement_tax),
        )
    ]

    rows = accumulate(
        inputs.current_balance,
        inputs.expected_return / 100,
        years,
        lambda year: inputs.annual_contribution,
    )
    for row in rows:
        schedule.append(
            IRAYear(
                age=inputs.current_age + row.period,
                year=row.period,
                contribution=row.deposit,
                earnings=row.interest,
                balance=row.balance,
                traditional_balance_after_tax=row.balance * (1 - retirement_tax),
            )
        )

    return schedule


def calculate_ira_results(inputs: IRAInputs) -> IRAResults:
    """
    Project Traditional and Roth IRA balances to retirement.

    Both accounts grow identically. A Traditional IRA saves tax on
    contributions now and pays tax on the whole balance at retirement; a Roth
    IRA is funded with after-tax money and withdrawn tax free.

    Args:
        inputs: Balance, contributions, return, ages and tax rates

    Returns:
        Balances, tax effects and the year-by-year schedule
    """
    years = inputs.retirement_age - inputs.current_age
    rate = inputs.expected_return / 100
    current_tax = inputs.current_tax_rate / 100
    retirement_tax = inputs.retirement_tax_rate / 100

    total_contributions = inputs.annual_contribution * years
    invested = inputs.current_balance + total_contributions
    balance = _future_value(
        inputs.current_balance, inputs.annual_contribution, rate, years
    )
    taxes_at_retirement = balance * retirement_tax
    inflation_factor = (1 + inputs.inflation_rate / 100) ** years

    return IRAResults(
        traditional_balance=balance,
        traditional_balance_after_tax=balance - taxes_at_retirement,
        traditional_total_contributions=invested,
        traditional_total_earnings=balance - invested,
        traditional_tax_savings_now=total_contributions * current_tax,
        traditional_taxes_at_retirement=taxes_at_retirement,
        roth_balance=balance,
        roth_total_contributions=invested,
        roth_total_earnings=balance - invested,
        roth_effective_contributions=(
            invested / (1 - current_tax) if current_tax < 1 else None
        ),
        years_to_retirement=years,
        total_contributions=total_contributions,
        effective_return_rate=inputs.expected_return,
        inflation_adjusted_balance=balance / inflation_factor,
        annual_schedule=generate_annual_schedule(inputs),
        ira_type=IRAType(inputs.ira_type),
    )


def compare_ira_types(results: IRAResults) -> Optional[IRAComparison]:
    """
    Pick the account with the larger spendable balance at retirement.

    Only plans weighing both account types are compared; None otherwise.
    """
    if results.ira_type is not IRAType.both:
        return None

    traditional = results.traditional_balance_after_tax
    roth = results.roth_balance
    difference = abs(traditional - roth)

    if traditional > roth:
        return IRAComparison(
            better=IRAType.traditional,
            difference=difference,
            reason="Lower tax rate in retirement makes Traditional IRA more beneficial",
        )
    return IRAComparison(
        better=IRAType.roth,
        difference=difference,
        reason="Tax-free growth and withdrawals make Roth IRA more beneficial",
    )


def project_beyond_retirement(
    retirement_balance: float, additional_years: int, growth_rate: float
) -> float:
    """Grow a retirement balance with no further contributions."""
    return _future_value(retirement_balance, 0.0, growth_rate / 100, additional_years)


def calculate_required_monthly_savings(
    target_amount: float, current_balance: float, years: float, expected_return: float
) -> float:
    """
    Monthly end-of-month saving needed to reach a target.

    PMT = FV x r / ((1 + r)^n - 1) on whatever the current balance will not
    cover by itself.
    """
    if years == 0:
        return 0.0

    months = years * 12
    if expected_return == 0:
        return (target_amount - current_balance) / months

    r = expected_return / 100 / 12
    remaining = target_amount - current_balance * (1 + r) ** months
    if remaining <= 0:
        return 0.0

    return remaining * r / ((1 + r) ** months - 1)


def contribution_limit(age: int) -> int:
    return CATCH_UP_CONTRIBUTION_LIMIT if age >= CATCH_UP_AGE else CONTRIBUTION_LIMIT


def validate_ira_inputs(inputs: IRAInputs) -> List[str]:
    """Validate IRA inputs; an empty list means valid."""
    errors: List[str] = []

    validation.check_non_negative(errors, inputs.current_balance, "Current balance")
    validation.check_non_negative(
        errors, inputs.annual_contribution, "Annual contribution"
    )

    if validation.is_number(inputs.current_age) and validation.is_number(
        inputs.annual_contribution
    ):
        limit = contribution_limit(inputs.current_age)
        if inputs.annual_contribution > limit * CONTRIBUTION_LIMIT_BUFFER:
            errors.append(
                f"Annual contribution seems too high (current limit: ${limit:,})"
            )

    validation.check_rate(errors, inputs.expected_return, "Expected return", low=-50, high=50)

    if not validation.is_number(inputs.current_age) or not (
        MIN_AGE <= inputs.current_age <= MAX_AGE
    ):
        errors.append(f"Current age must be between {MIN_AGE} and {MAX_AGE}")
    elif not validation.is_number(inputs.retirement_age) or (
        inputs.retirement_age < inputs.current_age
    ):
        errors.append("Retirement age must be greater than current age")
    elif inputs.retirement_age > MAX_AGE:
        errors.append(f"Retirement age cannot exceed {MAX_AGE}")

    validation.check_rate(errors, inputs.current_tax_rate, "Current tax rate")
    validation.check_rate(errors, inputs.retirement_tax_rate, "Retirement tax rate")
    validation.check_rate(errors, inputs.inflation_rate, "Inflation rate")
    validation.check_option(errors, inputs.ira_type, IRAType, "IRA type")

    return errors
