"""Data contracts for the insurance needs estimate."""

from typing import Literal

from pydantic import Field

from fincalc.schemas.common import CalculationInput, CalculationResult, RobustFloat, RobustInt


class InsuranceInputs(CalculationInput):
    insurance_type: Literal["life", "health", "vehicle"] = "life"
    age: RobustInt = Field(..., ge=18, le=80)
    annual_income: RobustFloat = Field(..., gt=0, le=1e12)
    dependents: RobustInt = Field(0, ge=0, le=20)
    existing_coverage: RobustFloat = Field(0.0, ge=0)
    outstanding_loans: RobustFloat = Field(0.0, ge=0)
    monthly_expenses: RobustFloat = Field(0.0, ge=0)
    years_of_coverage: RobustFloat = Field(20.0, gt=0, le=60)
    inflation_rate: RobustFloat = Field(6.0, ge=0, le=20)
    gender: Literal["male", "female", "other"] = "male"
    smoker: bool = False
    health_conditions: Literal["none", "minor", "major"] = "none"


class InsuranceResult(CalculationResult):
    recommended_coverage: float
    existing_coverage: float
    coverage_gap: float
    total_protection: float
    estimated_premium: float
    monthly_premium: float
    premium_as_percent_of_income: float
