"""Simple and compound interest."""

from __future__ import annotations

from typing import Optional

from fincalc.core.context import CalculationContext, resolve
from fincalc.core.errors import CalculationError, ErrorKind
from fincalc.core.numeric import checked_multiply, checked_power, require_value, safe_divide
from fincalc.schemas.interest import (
    CompoundInterestInputs,
    CompoundInterestResult,
    SimpleInterestInputs,
    SimpleInterestResult,
)

PERIODS_PER_YEAR = {
    "yearly": 1,
    "half-yearly": 2,
    "quarterly": 4,
    "monthly": 12,
    "daily": 365,
}


def calculate_simple_interest(
    inputs: SimpleInterestInputs, ctx: Optional[CalculationContext] = None
) -> SimpleInterestResult:
    """I = P × R × T / 100."""
    interest = inputs.principal * inputs.rate * inputs.time / 100
    return SimpleInterestResult(
        principal=inputs.principal,
        simple_interest=interest,
        total_amount=inputs.principal + interest,
        effective_rate=safe_divide(interest * 100, inputs.principal),
        monthly_interest=safe_divide(interest, inputs.time * 12),
    )


def compound_growth_factor(annual_rate: float, periods_per_year: int, years: float) -> float:
    """(1 + rate / 100 / n) ** (n × years)."""
    periodic_rate = annual_rate / 100 / periods_per_year
    return require_value(checked_power(1 + periodic_rate, periods_per_year * years), "growth factor")


def calculate_compound_interest(
    inputs: CompoundInterestInputs, ctx: Optional[CalculationContext] = None
) -> CompoundInterestResult:
    ctx = resolve(ctx)
    n = PERIODS_PER_YEAR[inputs.frequency]
    periods = n * inputs.years
    if periods > ctx.max_compounding_periods:
        raise CalculationError(
            [
                f"{inputs.frequency} compounding over {inputs.years:g} years gives {periods:g} periods; "
                f"at most {ctx.max_compounding_periods} are supported"
            ],
            kind=ErrorKind.PERIOD_LIMIT,
        )

    total = require_value(
        checked_multiply(inputs.principal, compound_growth_factor(inputs.rate, n, inputs.years)), "total amount"
    )
    interest = total - inputs.principal
    simple = inputs.principal * inputs.rate * inputs.years / 100

    return CompoundInterestResult(
        principal=inputs.principal,
        total_amount=total,
        compound_interest=interest,
        simple_interest=simple,
        additional_earnings=interest - simple,
        effective_annual_rate=(compound_growth_factor(inputs.rate, n, 1) - 1) * 100,
        periods=periods,
    )
