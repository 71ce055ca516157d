"""Data contracts for simple and compound interest."""

from typing import Literal

from pydantic import Field

from fincalc.schemas.common import CalculationInput, CalculationResult, RobustFloat

CompoundingFrequency = Literal["yearly", "half-yearly", "quarterly", "monthly", "daily"]


class SimpleInterestInputs(CalculationInput):
    principal: RobustFloat = Field(..., ge=0, le=1e12)
    rate: RobustFloat = Field(..., ge=0, le=100, description="Annual interest rate in percent.")
    time: RobustFloat = Field(..., ge=0, le=100, description="Duration in years.")


class SimpleInterestResult(CalculationResult):
    principal: float
    simple_interest: float
    total_amount: float
    effective_rate: float
    monthly_interest: float


class CompoundInterestInputs(CalculationInput):
    """Single deposit compounded ``frequency`` times a year."""

    principal: RobustFloat = Field(..., gt=0, le=1e12)
    rate: RobustFloat = Field(..., ge=0, le=100)
    years: RobustFloat = Field(..., gt=0, le=100)
    frequency: CompoundingFrequency = "yearly"


class CompoundInterestResult(CalculationResult):
    principal: float
    total_amount: float
    compound_interest: float
    simple_interest: float
    additional_earnings: float
    effective_annual_rate: float
    periods: float
