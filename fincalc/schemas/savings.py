"""Data contracts for savings and investment vehicles."""

from typing import Any, List, Literal, Optional

from pydantic import Field, field_validator, model_validator

from fincalc.schemas.common import (
    CalculationInput,
    CalculationResult,
    RobustFloat,
    RobustInt,
    YearlyBalance,
    blank_to_none,
)


class SIPInputs(CalculationInput):
    """Monthly systematic investment, optionally on top of a starting lump sum."""

    monthly_investment: RobustFloat = Field(..., gt=0, le=1e9)
    annual_return: RobustFloat = Field(..., ge=0, le=50, description="Expected annual return in percent.")
    years: RobustFloat = Field(..., gt=0, le=50)
    initial_investment: RobustFloat = Field(0.0, ge=0, le=1e12)
    timing: Literal["end", "beginning"] = Field(
        "end", description="Whether each installment is invested at the end or the beginning of the month."
    )


class SIPResult(CalculationResult):
    total_investment: float
    maturity_amount: float
    total_gains: float
    yearly_breakdown: List[YearlyBalance]


class LumpsumInputs(CalculationInput):
    principal: RobustFloat = Field(..., gt=0, le=1e12)
    annual_return: RobustFloat = Field(..., ge=0, le=50)
    years: RobustFloat = Field(..., gt=0, le=50)


class LumpsumResult(CalculationResult):
    principal: float
    maturity_amount: float
    total_gains: float
    yearly_breakdown: List[YearlyBalance]


class FDInputs(CalculationInput):
    principal: RobustFloat = Field(..., gt=0, le=1e12)
    annual_rate: RobustFloat = Field(..., ge=0, le=20)
    years: RobustFloat = Field(..., gt=0, le=20)
    compounding_frequency: Literal["monthly", "quarterly", "half-yearly", "yearly"] = "quarterly"


class FDResult(CalculationResult):
    principal: float
    maturity_amount: float
    total_interest: float
    effective_yield: float


class RDInputs(CalculationInput):
    monthly_deposit: RobustFloat = Field(..., gt=0, le=1e9)
    annual_rate: RobustFloat = Field(..., ge=0, le=20)
    years: RobustFloat = Field(..., gt=0, le=20)


class RDResult(CalculationResult):
    total_deposits: float
    maturity_amount: float
    total_interest: float


class PPFInputs(CalculationInput):
    """Yearly PPF deposit; the account locks in for at least 15 years."""

    yearly_investment: RobustFloat = Field(..., ge=500, le=150000)
    years: RobustInt = Field(15, ge=15, le=50)
    rate: Optional[RobustFloat] = Field(None, ge=0, le=20, description="Overrides the current PPF rate.")

    @field_validator("rate", mode="before")
    @classmethod
    def blank_rate_means_default(cls, value: Any) -> Any:
        return blank_to_none(value)


class PPFResult(CalculationResult):
    total_investment: float
    maturity_amount: float
    total_gains: float
    rate: float
    yearly_breakdown: List[YearlyBalance]


class EPFInputs(CalculationInput):
    basic_salary: RobustFloat = Field(..., gt=0, le=1e8, description="Monthly basic salary plus DA.")
    employee_contribution: RobustFloat = Field(12.0, ge=0, le=100, description="Percent of basic.")
    employer_contribution: RobustFloat = Field(12.0, ge=0, le=100, description="Percent of basic.")
    years: RobustInt = Field(..., ge=1, le=60)
    rate: Optional[RobustFloat] = Field(None, ge=0, le=20, description="Overrides the current EPF rate.")

    @field_validator("rate", mode="before")
    @classmethod
    def blank_rate_means_default(cls, value: Any) -> Any:
        return blank_to_none(value)


class EPFResult(CalculationResult):
    total_employee_contribution: float
    total_employer_contribution: float
    total_contribution: float
    maturity_amount: float
    total_interest: float
    rate: float
    yearly_breakdown: List[YearlyBalance]


class GoldInputs(CalculationInput):
    investment_amount: RobustFloat = Field(..., gt=0, le=1e12)
    gold_price_per_gram: RobustFloat = Field(..., gt=0)
    years: RobustFloat = Field(..., gt=0, le=50)
    expected_annual_return: RobustFloat = Field(..., ge=-50, le=50)


class GoldResult(CalculationResult):
    grams_of_gold: float
    future_gold_price: float
    future_value: float
    total_returns: float
    annualized_return: float


class DividendYieldInputs(CalculationInput):
    stock_price: RobustFloat = Field(..., gt=0)
    annual_dividend: RobustFloat = Field(..., ge=0, description="Dividend per share per year.")
    number_of_shares: RobustFloat = Field(1.0, ge=0)


class DividendYieldResult(CalculationResult):
    dividend_yield: float
    annual_dividend_income: float
    quarterly_dividend_income: float
    monthly_dividend_income: float
    total_investment: float


class InvestmentInputs(CalculationInput):
    initial_amount: RobustFloat = Field(0.0, ge=0, le=1e12)
    monthly_contribution: RobustFloat = Field(0.0, ge=0, le=1e9)
    annual_return: RobustFloat = Field(..., ge=0, le=50)
    years: RobustFloat = Field(..., gt=0, le=50)
    compounding_frequency: Literal["annually", "semiannually", "quarterly", "monthly", "daily"] = "monthly"


class InvestmentResult(CalculationResult):
    final_amount: float
    total_contributions: float
    total_growth: float
    annualized_return: float
    yearly_breakdown: List[YearlyBalance]


class SWPInputs(CalculationInput):
    """Monthly withdrawals from an invested corpus."""

    total_corpus: RobustFloat = Field(..., gt=0, le=1e12)
    monthly_withdrawal: RobustFloat = Field(..., gt=0)
    expected_return: RobustFloat = Field(..., ge=0, le=50)
    withdrawal_increase: RobustFloat = Field(0.0, ge=0, le=50, description="Annual growth of the withdrawal, in percent.")


class SWPResult(CalculationResult):
    months: int
    years: int
    remaining_months: int
    total_withdrawn: float
    remaining_corpus: float
    last_withdrawal_amount: float
    yearly_withdrawal_first_year: float
    yearly_withdrawal_last_year: float
    depleted: bool


class EducationGoalInputs(CalculationInput):
    child_age: RobustFloat = Field(..., ge=0, le=25)
    starting_age: RobustFloat = Field(..., gt=0, le=40, description="Age at which the course starts.")
    course_duration: RobustFloat = Field(..., gt=0, le=10, description="Course length in years.")
    current_cost: RobustFloat = Field(..., gt=0, description="Annual cost of the course today.")
    expected_inflation: RobustFloat = Field(..., ge=0, le=30)
    existing_savings: RobustFloat = Field(0.0, ge=0)
    expected_return: RobustFloat = Field(..., ge=0, le=50)

    @model_validator(mode="after")
    def ensure_course_starts_later(self) -> "EducationGoalInputs":
        if self.starting_age <= self.child_age:
            raise ValueError("starting_age must be greater than child_age")
        return self


class EducationGoalResult(CalculationResult):
    years_to_start: float
    future_cost: float
    total_future_cost: float
    future_savings: float
    required_corpus: float
    monthly_investment: float
    yearly_investment: float
    inflation_impact: float
