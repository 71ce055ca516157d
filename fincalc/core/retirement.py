"""Retirement corpus projection."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from fincalc.core.context import CalculationContext
from fincalc.core.numeric import checked_add, require_value, safe_divide, safe_power
from fincalc.core.savings import annuity_future_value
from fincalc.schemas.retirement import RetirementInputs, RetirementResult, RetirementYear


def calculate_retirement(inputs: RetirementInputs, ctx: Optional[CalculationContext] = None) -> RetirementResult:
    """
    Build a year-by-year table from current_age up to retirement_age.

    Order of operations (per year):
      1) Grow the starting balance for twelve months (monthly compounding).
      2) Add this year's monthly contributions, each grown from its deposit
         month to the year end.
      3) Step the monthly contribution up for the next year.

    With no step-up this reproduces the closed form
    FV = S·(1+r)^n + PMT·((1+r)^n - 1)/r over n = 12 × years months.
    """
    r = inputs.expected_return / 1200
    year0 = inputs.current_year or datetime.now().year
    years = inputs.retirement_age - inputs.current_age

    balance = inputs.current_savings
    monthly = inputs.monthly_contribution
    total_contributions = 0.0
    rows: List[RetirementYear] = []

    for step, age in enumerate(range(inputs.current_age, inputs.retirement_age)):
        start = balance
        contribution = monthly * 12

        balance = require_value(
            checked_add(start * safe_power(1 + r, 12), annuity_future_value(monthly, r, 12)), "retirement balance"
        )
        total_contributions += contribution

        # deflate back to the purchasing power of year0
        deflator = safe_power(1 + inputs.inflation_rate / 100, step + 1)
        rows.append(
            RetirementYear(
                age=age + 1,
                year=year0 + step + 1,
                contribution=contribution,
                growth=balance - start - contribution,
                balance=balance,
                real_balance=safe_divide(balance, deflator),
            )
        )

        monthly *= 1 + inputs.annual_step_up / 100

    corpus = balance
    return RetirementResult(
        years_to_retirement=years,
        corpus=corpus,
        corpus_in_todays_money=rows[-1].real_balance,
        total_contributions=total_contributions,
        total_growth=corpus - inputs.current_savings - total_contributions,
        yearly_breakdown=rows,
    )
