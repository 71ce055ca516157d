"""Data contracts for the retirement corpus projection."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fincalc.schemas.common import CalculationInput, CalculationResult, RobustFloat, RobustInt


class RetirementInputs(CalculationInput):
    current_age: RobustInt = Field(..., ge=18, le=80)
    retirement_age: RobustInt = Field(..., ge=19, le=90)
    current_savings: RobustFloat = Field(0.0, ge=0, le=1e12)
    monthly_contribution: RobustFloat = Field(0.0, ge=0, le=1e9)
    expected_return: RobustFloat = Field(..., ge=0, le=30, description="Annual return in percent.")
    inflation_rate: RobustFloat = Field(0.0, ge=0, le=20)
    annual_step_up: RobustFloat = Field(
        0.0, ge=0, le=50, description="Yearly increase of the monthly contribution, in percent."
    )
    current_year: Optional[int] = Field(None, description="Calendar year of current_age; defaults to this year.")

    @model_validator(mode="after")
    def ensure_retirement_after_current_age(self) -> "RetirementInputs":
        if self.retirement_age <= self.current_age:
            raise ValueError("retirement_age must be greater than current_age")
        return self


class RetirementYear(BaseModel):
    """One working year; balances are at the end of the year."""

    model_config = ConfigDict(extra="forbid")

    age: int
    year: int
    contribution: float
    growth: float
    balance: float
    real_balance: float


class RetirementResult(CalculationResult):
    years_to_retirement: int
    corpus: float
    corpus_in_todays_money: float
    total_contributions: float
    total_growth: float
    yearly_breakdown: List[RetirementYear]
