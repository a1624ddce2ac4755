"""
Financial calculation API endpoints.

Each endpoint converts its request body into the calculator's inputs,
validates them and returns the calculated results. Validation failures and
undefined calculations both return 400 with a list of messages.
"""

import logging
from typing import Callable, List, Optional, TypeVar
from datetime import date

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from fincalc.calculations import (
    amortization,
    annuity,
    budget,
    compound_interest,
    future_value,
    ira,
    loan,
    margin,
    payback,
    present_value,
)
from fincalc.calculations.rates import Frequency, Timing

logger = logging.getLogger(__name__)

router = APIRouter()

InputsT = TypeVar("InputsT")
ResultT = TypeVar("ResultT")


def _run(
    name: str,
    inputs: InputsT,
    validate: Callable[[InputsT], List[str]],
    calculate: Callable[[InputsT], ResultT],
) -> ResultT:
    """Validate, then calculate; both kinds of failure become a 400."""
    errors = validate(inputs)
    if errors:
        logger.info(f"Rejected {name} request: {errors}")
        raise HTTPException(status_code=400, detail=errors)

    logger.debug(f"Calculating {name}: {inputs}")
    try:
        return calculate(inputs)
    except (ValueError, ArithmeticError) as e:
        logger.info(f"{name} calculation failed: {e}")
        raise HTTPException(status_code=400, detail=[str(e)])


class OneTimePaymentInput(BaseModel):
    amount: float
    month: int


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    loan_amount: float
    term_years: int
    term_months: int = 0
    interest_rate: float
    compound_period: Frequency = Frequency.monthly
    payment_frequency: Frequency = Frequency.monthly
    start_date: Optional[date] = None

    # Extra payments
    monthly_extra: float = 0.0
    monthly_extra_start_month: int = 1
    yearly_extra: float = 0.0
    yearly_extra_start_month: int = 1
    one_time_payments: List[OneTimePaymentInput] = []

    def to_inputs(self):
        return amortization.AmortizationInputs(
            loan_amount=self.loan_amount,
            term_years=self.term_years,
            term_months=self.term_months,
            interest_rate=self.interest_rate,
            compound_period=self.compound_period,
            payment_frequency=self.payment_frequency,
            start_date=self.start_date,
        )

    def to_extra_payments(self):
        return amortization.ExtraPayments(
            monthly_extra=self.monthly_extra,
            monthly_extra_start_month=self.monthly_extra_start_month,
            yearly_extra=self.yearly_extra,
            yearly_extra_start_month=self.yearly_extra_start_month,
            one_time_payments=tuple((p.amount, p.month) for p in self.one_time_payments),
        )


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate a loan amortization schedule with optional extra payments."""
    extra = inputs.to_extra_payments()
    return _run(
        "amortization",
        inputs.to_inputs(),
        lambda i: amortization.validate_amortization_inputs(i, extra),
        lambda i: amortization.calculate_amortization(i, extra),
    )


class LoanInput(BaseModel):
    """Input for loan calculation."""

    loan_amount: float
    interest_rate: float
    term_years: int
    term_months: int = 0
    start_date: date
    payment_frequency: Frequency = Frequency.monthly
    extra_payment_amount: float = 0.0
    extra_payment_frequency: loan.ExtraPaymentFrequency = loan.ExtraPaymentFrequency.none
    one_time_payment: float = 0.0
    one_time_payment_date: Optional[date] = None

    def to_inputs(self):
        return loan.LoanInputs(**self.model_dump())


def _loan_summary(inputs: loan.LoanInputs) -> dict:
    results = loan.calculate_loan_payment(inputs)
    return {
        "results": results,
        "term": loan.format_loan_term(inputs.term_years * 12 + inputs.term_months),
        "schedule": loan.calculate_loan_schedule(inputs),
    }


@router.post("/loan")
async def calculate_loan(inputs: LoanInput):
    """Calculate the loan payment and its payoff schedule."""
    return _run("loan", inputs.to_inputs(), loan.validate_loan_inputs, _loan_summary)


@router.post("/loan/comparison")
async def calculate_loan_comparison(inputs: LoanInput):
    """Compare payoff with and without extra payments; null when there are none."""
    return _run(
        "loan comparison",
        inputs.to_inputs(),
        loan.validate_loan_inputs,
        loan.calculate_comparison,
    )


class CompoundInterestInput(BaseModel):
    """Input for compound interest calculation."""

    initial_investment: float
    interest_rate: float
    years: int
    months: int = 0
    compounding_frequency: Frequency = Frequency.monthly
    monthly_contribution: float = 0.0
    annual_contribution: float = 0.0
    contribution_timing: Timing = Timing.end
    tax_rate: float = 0.0
    inflation_rate: float = 0.0

    def to_inputs(self):
        return compound_interest.CompoundInterestInputs(**self.model_dump())


@router.post("/compound-interest")
async def calculate_compound_interest(inputs: CompoundInterestInput):
    """Project an investment with regular contributions."""
    return _run(
        "compound interest",
        inputs.to_inputs(),
        compound_interest.validate_compound_interest_inputs,
        compound_interest.calculate_compound_interest,
    )


class FutureValueInput(BaseModel):
    """Input for future value calculation."""

    periods: int
    interest_rate: float
    payment_frequency: Frequency = Frequency.annually
    present_value: float = 0.0
    periodic_payment: float = 0.0
    payment_timing: Timing = Timing.end
    growth_rate: float = 0.0

    def to_inputs(self):
        return future_value.FVInputs(**self.model_dump())


@router.post("/future-value")
async def calculate_future_value(inputs: FutureValueInput):
    """Future value of a lump sum and/or annuity."""
    return _run(
        "future value",
        inputs.to_inputs(),
        future_value.validate_fv_inputs,
        future_value.calculate_fv_results,
    )


class PresentValueInput(BaseModel):
    """Input for present value calculation."""

    periods: int
    interest_rate: float
    payment_frequency: Frequency = Frequency.annually
    future_value: float = 0.0
    periodic_payment: float = 0.0
    payment_timing: Timing = Timing.end
    growth_rate: float = 0.0

    def to_inputs(self):
        return present_value.PVInputs(**self.model_dump())


@router.post("/present-value")
async def calculate_present_value(inputs: PresentValueInput):
    """Present value of a future lump sum and/or annuity."""
    return _run(
        "present value",
        inputs.to_inputs(),
        present_value.validate_pv_inputs,
        present_value.calculate_pv_results,
    )


class AnnuityInput(BaseModel):
    """Input for annuity accumulation."""

    starting_principal: float
    annual_addition: float = 0.0
    monthly_addition: float = 0.0
    annual_growth_rate: float
    years: float
    addition_timing: Timing = Timing.end

    def to_inputs(self):
        return annuity.AnnuityInputs(**self.model_dump())


@router.post("/annuity")
async def calculate_annuity(inputs: AnnuityInput):
    """Grow a principal with monthly and annual additions."""
    return _run(
        "annuity",
        inputs.to_inputs(),
        annuity.validate_annuity_inputs,
        annuity.calculate_annuity,
    )


class PayoutInput(BaseModel):
    """Input for a fixed-length annuity payout."""

    principal: float
    annual_rate: float
    years: float
    frequency: Frequency = Frequency.monthly

    def to_inputs(self):
        return annuity.PayoutInputs(**self.model_dump())


@router.post("/annuity/payout")
async def calculate_annuity_payout(inputs: PayoutInput):
    """Level payout that exhausts the principal over a fixed term."""
    return _run(
        "annuity payout",
        inputs.to_inputs(),
        annuity.validate_payout_inputs,
        annuity.calculate_annuity_payout,
    )


class PayoutDurationInput(BaseModel):
    """Input for a fixed-payment annuity payout."""

    principal: float
    annual_rate: float
    payout_amount: float
    frequency: Frequency = Frequency.monthly

    def to_inputs(self):
        return annuity.PayoutInputs(**self.model_dump())


@router.post("/annuity/duration")
async def calculate_payout_duration(inputs: PayoutDurationInput):
    """How long a fixed payout lasts."""
    return _run(
        "annuity duration",
        inputs.to_inputs(),
        annuity.validate_payout_inputs,
        annuity.calculate_payout_duration,
    )


class IRAInput(BaseModel):
    """Input for IRA projection."""

    current_balance: float = 0.0
    annual_contribution: float
    expected_return: float
    current_age: int
    retirement_age: int
    current_tax_rate: float
    retirement_tax_rate: float
    ira_type: ira.IRAType = ira.IRAType.both
    inflation_rate: float = 0.0

    def to_inputs(self):
        return ira.IRAInputs(**self.model_dump())


def _ira_summary(inputs: ira.IRAInputs) -> dict:
    results = ira.calculate_ira_results(inputs)
    return {"results": results, "comparison": ira.compare_ira_types(results)}


@router.post("/ira")
async def calculate_ira(inputs: IRAInput):
    """Project Traditional and Roth IRA balances and compare them."""
    return _run("ira", inputs.to_inputs(), ira.validate_ira_inputs, _ira_summary)


class CashFlowInput(BaseModel):
    period: int
    amount: float
    label: Optional[str] = None


class PaybackInput(BaseModel):
    """Input for payback period calculation."""

    initial_investment: float
    cash_flows: List[CashFlowInput]
    discount_rate: float = 0.0
    period_type: payback.PeriodType = payback.PeriodType.annual

    def to_inputs(self):
        return payback.PaybackInputs(
            initial_investment=self.initial_investment,
            cash_flows=tuple(
                payback.CashFlow(cf.period, cf.amount, cf.label) for cf in self.cash_flows
            ),
            discount_rate=self.discount_rate,
            period_type=self.period_type,
        )


@router.post("/payback")
async def calculate_payback(inputs: PaybackInput):
    """Simple and discounted payback with ROI, NPV and IRR."""
    return _run(
        "payback",
        inputs.to_inputs(),
        payback.validate_payback_inputs,
        payback.calculate_payback_results,
    )


class BudgetInput(BaseModel):
    """Input for budget calculation; omitted categories are all zero."""

    period: budget.BudgetPeriod = budget.BudgetPeriod.monthly
    income: budget.IncomeInputs = budget.IncomeInputs()
    housing: budget.HousingExpenses = budget.HousingExpenses()
    transportation: budget.TransportationExpenses = budget.TransportationExpenses()
    debt: budget.DebtExpenses = budget.DebtExpenses()
    living: budget.LivingExpenses = budget.LivingExpenses()
    healthcare: budget.HealthcareExpenses = budget.HealthcareExpenses()
    children_education: budget.ChildrenEducationExpenses = budget.ChildrenEducationExpenses()
    savings_investment: budget.SavingsInvestmentExpenses = budget.SavingsInvestmentExpenses()
    miscellaneous: budget.MiscellaneousExpenses = budget.MiscellaneousExpenses()

    def to_inputs(self):
        return budget.BudgetInputs(
            period=self.period,
            income=self.income,
            housing=self.housing,
            transportation=self.transportation,
            debt=self.debt,
            living=self.living,
            healthcare=self.healthcare,
            children_education=self.children_education,
            savings_investment=self.savings_investment,
            miscellaneous=self.miscellaneous,
        )


@router.post("/budget")
async def calculate_budget(inputs: BudgetInput):
    """Break a budget down by category against benchmarks."""
    return _run(
        "budget",
        inputs.to_inputs(),
        budget.validate_budget_inputs,
        budget.calculate_budget,
    )


class MarginInput(BaseModel):
    """Any two of cost, revenue, margin and profit."""

    cost: Optional[float] = None
    revenue: Optional[float] = None
    margin: Optional[float] = None
    profit: Optional[float] = None

    def to_inputs(self):
        return margin.MarginInputs(**self.model_dump())


@router.post("/margin")
async def calculate_margin(inputs: MarginInput):
    """Solve the missing margin values and the markup."""
    return _run(
        "margin",
        inputs.to_inputs(),
        margin.validate_margin_inputs,
        margin.calculate_margin,
    )
