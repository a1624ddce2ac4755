"""
Budget Calculations

Household budget: income sources less tax, expenses grouped into eight
categories, each category's share of gross income, and benchmark checks for
housing, transportation and savings.
"""

import enum
from typing import Dict, List
from dataclasses import astuple, dataclass, field, fields

from fincalc.calculations import validation

HOUSING_BENCHMARK = 30  # % of gross income, at most
TRANSPORTATION_BENCHMARK = 15  # % of gross income, at most
SAVINGS_BENCHMARK = 15  # % of gross income, at least
# Width of the warning band around a benchmark, as a fraction of it
WARNING_BAND = 0.2


class BudgetPeriod(str, enum.Enum):
    monthly = "monthly"
    annual = "annual"


class BenchmarkStatus(str, enum.Enum):
    good = "good"
    warning = "warning"
    high = "high"
    low = "low"


@dataclass(frozen=True)
class IncomeInputs:
    salary: float = 0.0
    pension: float = 0.0
    investments: float = 0.0
    other_income: float = 0.0
    income_tax_rate: float = 0.0  # Percentage


@dataclass(frozen=True)
class HousingExpenses:
    mortgage: float = 0.0
    property_tax: float = 0.0
    rental: float = 0.0
    insurance: float = 0.0
    hoa_fee: float = 0.0
    home_maintenance: float = 0.0
    utilities: float = 0.0


@dataclass(frozen=True)
class TransportationExpenses:
    auto_loan: float = 0.0
    auto_insurance: float = 0.0
    gasoline: float = 0.0
    auto_maintenance: float = 0.0
    parking_tolls: float = 0.0
    other_transportation: float = 0.0


@dataclass(frozen=True)
class DebtExpenses:
    credit_card: float = 0.0
    student_loan: float = 0.0
    other_loans: float = 0.0


@dataclass(frozen=True)
class LivingExpenses:
    food: float = 0.0
    clothing: float = 0.0
    household_supplies: float = 0.0
    meals_out: float = 0.0
    other: float = 0.0


@dataclass(frozen=True)
class HealthcareExpenses:
    medical_insurance: float = 0.0
    medical_spending: float = 0.0


@dataclass(frozen=True)
class ChildrenEducationExpenses:
    child_personal_care: float = 0.0
    tuition_supplies: float = 0.0
    child_support: float = 0.0
    other_education: float = 0.0


@dataclass(frozen=True)
class SavingsInvestmentExpenses:
    retirement_401k: float = 0.0
    college_saving: float = 0.0
    investments: float = 0.0
    emergency_fund: float = 0.0


@dataclass(frozen=True)
class MiscellaneousExpenses:
    pet: float = 0.0
    gifts_donations: float = 0.0
    hobbies_sports: float = 0.0
    entertainment: float = 0.0
    travel_vacation: float = 0.0
    other_expenses: float = 0.0


@dataclass(frozen=True)
class BudgetInputs:
    """Income and expenses for one budget period."""

    period: BudgetPeriod = BudgetPeriod.monthly
    income: IncomeInputs = field(default_factory=IncomeInputs)
    housing: HousingExpenses = field(default_factory=HousingExpenses)
    transportation: TransportationExpenses = field(default_factory=TransportationExpenses)
    debt: DebtExpenses = field(default_factory=DebtExpenses)
    living: LivingExpenses = field(default_factory=LivingExpenses)
    healthcare: HealthcareExpenses = field(default_factory=HealthcareExpenses)
    children_education: ChildrenEducationExpenses = field(
        default_factory=ChildrenEducationExpenses
    )
    savings_investment: SavingsInvestmentExpenses = field(
        default_factory=SavingsInvestmentExpenses
    )
    miscellaneous: MiscellaneousExpenses = field(default_factory=MiscellaneousExpenses)


EXPENSE_CATEGORIES = (
    "housing",
    "transportation",
    "debt",
    "living",
    "healthcare",
    "children_education",
    "savings_investment",
    "miscellaneous",
)


@dataclass
class CategoryTotal:
    total: float
    percentage: float  # Of gross income


@dataclass
class Benchmark:
    current: float
    recommended: float
    status: BenchmarkStatus


@dataclass
class BudgetResults:
    """Income, category totals, surplus and benchmark checks."""

    period: BudgetPeriod
    gross_income: float
    income_tax: float
    net_income: float

    categories: Dict[str, CategoryTotal]

    total_expenses: float
    total_expenses_percentage: float
    surplus_deficit: float
    surplus_deficit_percentage: float

    housing_benchmark: Benchmark
    transportation_benchmark: Benchmark
    savings_benchmark: Benchmark


def _share(amount: float, gross_income: float) -> float:
    return amount / gross_income * 100 if gross_income > 0 else 0.0


def category_total(expenses, gross_income: float) -> CategoryTotal:
    """Sum a category's line items and express it as a share of gross income."""
    total = sum(astuple(expenses))
    return CategoryTotal(total=total, percentage=_share(total, gross_income))


def benchmark_status(current: float, recommended: float, is_savings: bool = False) -> BenchmarkStatus:
    """
    Expense shares are good at or below the benchmark and high beyond the
    warning band; savings shares are good at or above it and low below the band.
    """
    if is_savings:
        if current >= recommended:
            return BenchmarkStatus.good
        if current >= recommended * (1 - WARNING_BAND):
            return BenchmarkStatus.warning
        return BenchmarkStatus.low

    if current <= recommended:
        return BenchmarkStatus.good
    if current <= recommended * (1 + WARNING_BAND):
        return BenchmarkStatus.warning
    return BenchmarkStatus.high


def _benchmark(current: float, recommended: float, is_savings: bool = False) -> Benchmark:
    return Benchmark(current, recommended, benchmark_status(current, recommended, is_savings))


def calculate_budget(inputs: BudgetInputs) -> BudgetResults:
    """
    Break a budget down by category and compare it against benchmarks.

    Args:
        inputs: Income sources, tax rate and categorized expenses

    Returns:
        Totals, shares of gross income, surplus or deficit and benchmarks
    """
    income = inputs.income
    gross_income = income.salary + income.pension + income.investments + income.other_income
    income_tax = gross_income * income.income_tax_rate / 100
    net_income = gross_income - income_tax

    categories = {
        name: category_total(getattr(inputs, name), gross_income)
        for name in EXPENSE_CATEGORIES
    }
    total_expenses = sum(c.total for c in categories.values())
    surplus_deficit = net_income - total_expenses

    return BudgetResults(
        period=inputs.period,
        gross_income=gross_income,
        income_tax=income_tax,
        net_income=net_income,
        categories=categories,
        total_expenses=total_expenses,
        total_expenses_percentage=_share(total_expenses, gross_income),
        surplus_deficit=surplus_deficit,
        surplus_deficit_percentage=_share(surplus_deficit, gross_income),
        housing_benchmark=_benchmark(categories["housing"].percentage, HOUSING_BENCHMARK),
        transportation_benchmark=_benchmark(
            categories["transportation"].percentage, TRANSPORTATION_BENCHMARK
        ),
        savings_benchmark=_benchmark(
            categories["savings_investment"].percentage, SAVINGS_BENCHMARK, is_savings=True
        ),
    )


def validate_budget_inputs(inputs: BudgetInputs) -> List[str]:
    """Validate budget inputs; an empty list means valid."""
    errors: List[str] = []

    validation.check_option(errors, inputs.period, BudgetPeriod, "Budget period")

    tax_rate = inputs.income.income_tax_rate
    if not validation.is_number(tax_rate) or tax_rate < 0:
        errors.append("Income tax rate cannot be negative")
    elif tax_rate > 100:
        errors.append("Income tax rate cannot exceed 100%")

    for item in fields(inputs.income):
        if item.name != "income_tax_rate":
            validation.check_non_negative(
                errors, getattr(inputs.income, item.name), f"Income field {item.name}"
            )

    for name in EXPENSE_CATEGORIES:
        expenses = getattr(inputs, name)
        for item in fields(expenses):
            validation.check_non_negative(
                errors, getattr(expenses, item.name), f"Expense field {item.name}"
            )

    return errors
