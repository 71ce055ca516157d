"""Calculation limits and product constants passed explicitly to every formula."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from fincalc.config import Settings, get_settings


class CalculationContext(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    max_safe_value: float = Field(1e15, gt=0)
    epsilon: float = Field(1e-10, gt=0)
    max_amortization_months: int = Field(600, ge=1)
    max_compounding_periods: int = Field(1000, ge=1)
    irr_max_iterations: int = Field(100, ge=1)
    irr_tolerance: float = Field(1e-10, gt=0)

    # percent per year
    ppf_rate: float = 7.1
    epf_rate: float = 8.5
    cess_rate: float = 4.0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CalculationContext":
        settings = settings or get_settings()
        return cls(
            max_safe_value=settings.MAX_SAFE_VALUE,
            epsilon=settings.EPSILON,
            max_amortization_months=settings.MAX_AMORTIZATION_MONTHS,
            max_compounding_periods=settings.MAX_COMPOUNDING_PERIODS,
            irr_max_iterations=settings.IRR_MAX_ITERATIONS,
            irr_tolerance=settings.IRR_TOLERANCE,
            ppf_rate=settings.PPF_RATE,
            epf_rate=settings.EPF_RATE,
            cess_rate=settings.CESS_RATE,
        )


DEFAULT_CONTEXT = CalculationContext()


def resolve(ctx: Optional[CalculationContext]) -> CalculationContext:
    return ctx if ctx is not None else DEFAULT_CONTEXT
