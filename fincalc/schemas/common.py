"""Shared building blocks for calculator inputs and results."""

from typing import Annotated, Any, List

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from fincalc.core.numeric import parse_robust_number

# Raw form values ("₹5,00,000", "", 12) are normalized before range checks run.
RobustFloat = Annotated[float, BeforeValidator(parse_robust_number)]
RobustInt = Annotated[int, BeforeValidator(lambda value: int(round(parse_robust_number(value))))]


class CalculationInput(BaseModel):
    model_config = ConfigDict(extra="forbid")


class CalculationResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    warnings: List[str] = Field(default_factory=list)


class AmortizationEntry(BaseModel):
    """One period of a repayment schedule; ``principal + interest == payment``."""

    model_config = ConfigDict(extra="forbid")

    period: int = Field(..., ge=1)
    payment: float
    principal: float
    interest: float
    extra_payment: float = 0.0
    balance: float = Field(..., ge=0)
    cumulative_interest: float


class YearlyBalance(BaseModel):
    """Single row of a year-by-year growth table."""

    model_config = ConfigDict(extra="forbid")

    year: int = Field(..., ge=1)
    contributions: float
    growth: float
    balance: float
    total_contributed: float


def blank_to_none(value: Any) -> Any:
    """Treat an empty form field as "not given" so the context default applies."""
    if isinstance(value, str) and not value.strip():
        return None
    return value
