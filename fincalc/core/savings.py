"""
Savings and investment vehicles.

Every vehicle here is a variant of two closed forms: compound growth of a
lump sum and the future value of a stream of equal deposits (an annuity).
Year-by-year tables are read off the same closed forms at each year end, so
the last row always agrees with the headline figure.
"""

from __future__ import annotations

import math
from typing import Callable, List, Optional

from fincalc.core.context import CalculationContext, resolve
from fincalc.core.interest import compound_growth_factor
from fincalc.core.loan import SETTLEMENT_TOLERANCE
from fincalc.core.numeric import (
    checked_add,
    checked_multiply,
    checked_power,
    is_effectively_zero,
    require_value,
    safe_divide,
)
from fincalc.logging_config import get_logger
from fincalc.schemas.common import YearlyBalance
from fincalc.schemas.savings import (
    DividendYieldInputs,
    DividendYieldResult,
    EducationGoalInputs,
    EducationGoalResult,
    EPFInputs,
    EPFResult,
    FDInputs,
    FDResult,
    GoldInputs,
    GoldResult,
    InvestmentInputs,
    InvestmentResult,
    LumpsumInputs,
    LumpsumResult,
    PPFInputs,
    PPFResult,
    RDInputs,
    RDResult,
    SIPInputs,
    SIPResult,
    SWPInputs,
    SWPResult,
)

logger = get_logger(__name__)

FD_PERIODS_PER_YEAR = {"monthly": 12, "quarterly": 4, "half-yearly": 2, "yearly": 1}
INVESTMENT_PERIODS_PER_YEAR = {"annually": 1, "semiannually": 2, "quarterly": 4, "monthly": 12, "daily": 365}


def annuity_future_value(payment: float, periodic_rate: float, periods: float, due: bool = False) -> float:
    """
    Future value of ``periods`` equal payments.

    FV = PMT × ((1+r)^n - 1) / r, or PMT × n when r is effectively zero.
    With ``due`` every payment is made at the start of its period and earns
    one extra period of growth.
    """
    if is_effectively_zero(periodic_rate):
        return require_value(checked_multiply(payment, periods), "annuity value")
    growth = require_value(checked_power(1 + periodic_rate, periods), "growth factor")
    value = require_value(checked_multiply(payment, (growth - 1) / periodic_rate), "annuity value")
    return require_value(checked_multiply(value, 1 + periodic_rate), "annuity value") if due else value


def _to_months(years: float) -> int:
    return max(int(round(years * 12)), 1)


def _grown(amount: float, factor: float) -> float:
    return require_value(checked_multiply(amount, factor), "projected value")


def _total(*parts: float) -> float:
    return require_value(checked_add(*parts), "projected value")


def _yearly_table(
    months: int,
    balance_at: Callable[[int], float],
    contributed_at: Callable[[int], float],
) -> List[YearlyBalance]:
    """Sample a month-indexed growth curve at every year end (and the final month)."""
    rows: List[YearlyBalance] = []
    previous_balance = balance_at(0)
    previous_contributed = contributed_at(0)
    for year in range(1, math.ceil(months / 12) + 1):
        month = min(year * 12, months)
        balance = balance_at(month)
        contributed = contributed_at(month)
        contributions = contributed - previous_contributed
        rows.append(
            YearlyBalance(
                year=year,
                contributions=contributions,
                growth=balance - previous_balance - contributions,
                balance=balance,
                total_contributed=contributed,
            )
        )
        previous_balance, previous_contributed = balance, contributed
    return rows


def calculate_sip(inputs: SIPInputs, ctx: Optional[CalculationContext] = None) -> SIPResult:
    months = _to_months(inputs.years)
    r = inputs.annual_return / 1200
    due = inputs.timing == "beginning"

    def balance_at(month: int) -> float:
        lump = _grown(inputs.initial_investment, compound_growth_factor(inputs.annual_return, 12, month / 12))
        return _total(lump, annuity_future_value(inputs.monthly_investment, r, month, due=due))

    def contributed_at(month: int) -> float:
        return inputs.initial_investment + inputs.monthly_investment * month

    maturity = balance_at(months)
    total_investment = contributed_at(months)
    return SIPResult(
        total_investment=total_investment,
        maturity_amount=maturity,
        total_gains=maturity - total_investment,
        yearly_breakdown=_yearly_table(months, balance_at, contributed_at),
    )


def calculate_lumpsum(inputs: LumpsumInputs, ctx: Optional[CalculationContext] = None) -> LumpsumResult:
    """One-off investment compounded yearly."""
    months = _to_months(inputs.years)

    def balance_at(month: int) -> float:
        return _grown(inputs.principal, compound_growth_factor(inputs.annual_return, 1, month / 12))

    maturity = _grown(inputs.principal, compound_growth_factor(inputs.annual_return, 1, inputs.years))
    return LumpsumResult(
        principal=inputs.principal,
        maturity_amount=maturity,
        total_gains=maturity - inputs.principal,
        yearly_breakdown=_yearly_table(months, balance_at, lambda month: inputs.principal),
    )


def calculate_fd(inputs: FDInputs, ctx: Optional[CalculationContext] = None) -> FDResult:
    n = FD_PERIODS_PER_YEAR[inputs.compounding_frequency]
    maturity = _grown(inputs.principal, compound_growth_factor(inputs.annual_rate, n, inputs.years))
    return FDResult(
        principal=inputs.principal,
        maturity_amount=maturity,
        total_interest=maturity - inputs.principal,
        effective_yield=(compound_growth_factor(inputs.annual_rate, n, 1) - 1) * 100,
    )


def calculate_rd(inputs: RDInputs, ctx: Optional[CalculationContext] = None) -> RDResult:
    """Recurring deposit: month-end deposits compounding monthly."""
    months = _to_months(inputs.years)
    maturity = annuity_future_value(inputs.monthly_deposit, inputs.annual_rate / 1200, months)
    total_deposits = inputs.monthly_deposit * months
    return RDResult(
        total_deposits=total_deposits,
        maturity_amount=maturity,
        total_interest=maturity - total_deposits,
    )


def _deposit_at_year_start(yearly_deposit: float, rate: float, years: int) -> List[YearlyBalance]:
    rows: List[YearlyBalance] = []
    balance = 0.0
    for year in range(1, years + 1):
        interest = (balance + yearly_deposit) * rate / 100
        balance += yearly_deposit + interest
        rows.append(
            YearlyBalance(
                year=year,
                contributions=yearly_deposit,
                growth=interest,
                balance=balance,
                total_contributed=yearly_deposit * year,
            )
        )
    return rows


def calculate_ppf(inputs: PPFInputs, ctx: Optional[CalculationContext] = None) -> PPFResult:
    """Public Provident Fund with the deposit made at the start of every year."""
    ctx = resolve(ctx)
    rate = inputs.rate if inputs.rate is not None else ctx.ppf_rate
    rows = _deposit_at_year_start(inputs.yearly_investment, rate, inputs.years)

    total_investment = inputs.yearly_investment * inputs.years
    maturity = rows[-1].balance
    return PPFResult(
        total_investment=total_investment,
        maturity_amount=maturity,
        total_gains=maturity - total_investment,
        rate=rate,
        yearly_breakdown=rows,
    )


def calculate_epf(inputs: EPFInputs, ctx: Optional[CalculationContext] = None) -> EPFResult:
    """Employees' Provident Fund from employee and employer shares of basic pay."""
    ctx = resolve(ctx)
    rate = inputs.rate if inputs.rate is not None else ctx.epf_rate

    yearly_employee = inputs.basic_salary * inputs.employee_contribution / 100 * 12
    yearly_employer = inputs.basic_salary * inputs.employer_contribution / 100 * 12
    rows = _deposit_at_year_start(yearly_employee + yearly_employer, rate, inputs.years)

    total_contribution = (yearly_employee + yearly_employer) * inputs.years
    maturity = rows[-1].balance
    return EPFResult(
        total_employee_contribution=yearly_employee * inputs.years,
        total_employer_contribution=yearly_employer * inputs.years,
        total_contribution=total_contribution,
        maturity_amount=maturity,
        total_interest=maturity - total_contribution,
        rate=rate,
        yearly_breakdown=rows,
    )


def calculate_gold(inputs: GoldInputs, ctx: Optional[CalculationContext] = None) -> GoldResult:
    grams = safe_divide(inputs.investment_amount, inputs.gold_price_per_gram)
    future_price = _grown(
        inputs.gold_price_per_gram, compound_growth_factor(inputs.expected_annual_return, 1, inputs.years)
    )
    future_value = _grown(grams, future_price)
    growth = safe_divide(future_value, inputs.investment_amount)
    return GoldResult(
        grams_of_gold=grams,
        future_gold_price=future_price,
        future_value=future_value,
        total_returns=future_value - inputs.investment_amount,
        annualized_return=(require_value(checked_power(growth, 1 / inputs.years), "annualized return") - 1) * 100,
    )


def calculate_dividend_yield(inputs: DividendYieldInputs, ctx: Optional[CalculationContext] = None) -> DividendYieldResult:
    annual_income = _grown(inputs.annual_dividend, inputs.number_of_shares)
    return DividendYieldResult(
        dividend_yield=safe_divide(inputs.annual_dividend, inputs.stock_price) * 100,
        annual_dividend_income=annual_income,
        quarterly_dividend_income=annual_income / 4,
        monthly_dividend_income=annual_income / 12,
        total_investment=_grown(inputs.stock_price, inputs.number_of_shares),
    )


def calculate_investment(inputs: InvestmentInputs, ctx: Optional[CalculationContext] = None) -> InvestmentResult:
    """
    Starting amount compounded at the chosen frequency plus month-end
    contributions compounding monthly.
    """
    months = _to_months(inputs.years)
    n = INVESTMENT_PERIODS_PER_YEAR[inputs.compounding_frequency]
    r = inputs.annual_return / 1200

    def balance_at(month: int) -> float:
        initial = _grown(inputs.initial_amount, compound_growth_factor(inputs.annual_return, n, month / 12))
        return _total(initial, annuity_future_value(inputs.monthly_contribution, r, month))

    def contributed_at(month: int) -> float:
        return inputs.initial_amount + inputs.monthly_contribution * month

    final_amount = balance_at(months)
    total_contributions = contributed_at(months)
    annualized = 0.0
    if total_contributions > 0:
        growth = checked_power(final_amount / total_contributions, 12 / months)
        annualized = (require_value(growth, "annualized return") - 1) * 100

    return InvestmentResult(
        final_amount=final_amount,
        total_contributions=total_contributions,
        total_growth=final_amount - total_contributions,
        annualized_return=annualized,
        yearly_breakdown=_yearly_table(months, balance_at, contributed_at),
    )


def calculate_swp(inputs: SWPInputs, ctx: Optional[CalculationContext] = None) -> SWPResult:
    """
    Systematic withdrawal plan.

    Each month the corpus grows first and the withdrawal is taken after; the
    withdrawal itself grows by ``withdrawal_increase / 12`` percent a month.
    The simulation runs until the corpus is exhausted or the month cap is hit.
    """
    ctx = resolve(ctx)
    cap = ctx.max_amortization_months
    r = inputs.expected_return / 1200
    step = inputs.withdrawal_increase / 1200

    corpus = inputs.total_corpus
    withdrawal = inputs.monthly_withdrawal
    total_withdrawn = 0.0
    last_withdrawal = 0.0
    months = 0
    while corpus > SETTLEMENT_TOLERANCE and months < cap:
        corpus *= 1 + r
        last_withdrawal = min(withdrawal, corpus)
        corpus -= last_withdrawal
        total_withdrawn += last_withdrawal
        withdrawal *= 1 + step
        months += 1

    depleted = corpus <= SETTLEMENT_TOLERANCE
    warnings: List[str] = []
    if not depleted:
        warnings.append(f"corpus outlasts the {cap} month horizon")
        logger.info("swp_horizon_reached", cap=cap, remaining_corpus=corpus)

    return SWPResult(
        months=months,
        years=months // 12,
        remaining_months=months % 12,
        total_withdrawn=total_withdrawn,
        remaining_corpus=max(corpus, 0.0),
        last_withdrawal_amount=last_withdrawal,
        yearly_withdrawal_first_year=inputs.monthly_withdrawal * 12,
        yearly_withdrawal_last_year=last_withdrawal * 12,
        depleted=depleted,
        warnings=warnings,
    )


def calculate_education_goal(inputs: EducationGoalInputs, ctx: Optional[CalculationContext] = None) -> EducationGoalResult:
    """Inflate today's course cost to the start date and size the monthly SIP that funds it."""
    years_to_start = inputs.starting_age - inputs.child_age
    future_cost = _grown(inputs.current_cost, compound_growth_factor(inputs.expected_inflation, 1, years_to_start))
    total_future_cost = future_cost * inputs.course_duration
    future_savings = _grown(
        inputs.existing_savings, compound_growth_factor(inputs.expected_return, 1, years_to_start)
    )
    required_corpus = max(0.0, total_future_cost - future_savings)

    # installments at the start of each month
    per_unit = annuity_future_value(1.0, inputs.expected_return / 1200, _to_months(years_to_start), due=True)
    monthly = safe_divide(required_corpus, per_unit)

    return EducationGoalResult(
        years_to_start=years_to_start,
        future_cost=future_cost,
        total_future_cost=total_future_cost,
        future_savings=future_savings,
        required_corpus=required_corpus,
        monthly_investment=monthly,
        yearly_investment=monthly * 12,
        inflation_impact=total_future_cost - inputs.current_cost * inputs.course_duration,
    )
