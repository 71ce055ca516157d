"""Loan, EMI, mortgage, balloon loan and debt payoff calculations."""

from __future__ import annotations

from typing import List, Optional, Tuple

from fincalc.core.context import CalculationContext, resolve
from fincalc.core.numeric import (
    is_effectively_zero,
    safe_divide,
    safe_multiply,
    safe_power,
    safe_subtract,
)
from fincalc.logging_config import get_logger
from fincalc.schemas.common import AmortizationEntry
from fincalc.schemas.loan import (
    AdvancedEMIInputs,
    AdvancedEMIResult,
    BalloonLoanInputs,
    BalloonLoanResult,
    DebtPayoffInputs,
    DebtPayoffResult,
    LoanInputs,
    LoanResult,
    MortgageInputs,
    MortgageResult,
)

logger = get_logger(__name__)

# A remaining balance below this is treated as settled (well under a cent).
SETTLEMENT_TOLERANCE = 1e-6

# months between prepayments; 0 means none
PREPAYMENT_INTERVALS = {"none": 0, "monthly": 1, "yearly": 12}

BALLOON_PERIODS_PER_YEAR = {"monthly": 12, "quarterly": 4}


def monthly_rate(annual_rate_percent: float) -> float:
    return annual_rate_percent / 1200


def calculate_emi(principal: float, annual_rate: float, months: int) -> float:
    """
    Fixed monthly installment for a fully amortizing loan.

    EMI = P × r × (1+r)^n / ((1+r)^n - 1), with r = annual_rate / 1200.
    A zero rate degenerates to straight-line repayment P / n.
    """
    r = monthly_rate(annual_rate)
    if is_effectively_zero(r):
        return safe_divide(principal, months)
    # same formula divided through by (1+r)^n, which keeps intermediates small
    discount = safe_power(1 + r, -months)
    return safe_divide(principal * r, 1 - discount)


def build_amortization_schedule(
    principal: float,
    annual_rate: float,
    months: int,
    payment: float,
    extra_payment: float = 0.0,
    prepayment_frequency: str = "monthly",
    max_periods: int = 600,
) -> List[AmortizationEntry]:
    """
    Month-by-month repayment of ``principal`` with a fixed ``payment``.

    ``extra_payment`` goes against principal every month (``"monthly"``), at
    the end of every twelfth month (``"yearly"``) or never (``"none"``).
    The schedule stops as soon as the balance is settled; the last scheduled
    month settles whatever is left. At most ``max_periods`` rows are produced.
    """
    r = monthly_rate(annual_rate)
    extra_every = PREPAYMENT_INTERVALS[prepayment_frequency]
    balance = principal
    cumulative_interest = 0.0
    schedule: List[AmortizationEntry] = []

    for period in range(1, min(months, max_periods) + 1):
        if balance <= SETTLEMENT_TOLERANCE:
            break

        interest = balance * r
        regular = payment - interest
        extra = extra_payment if extra_every and period % extra_every == 0 else 0.0

        settled = False
        if period == months or regular >= balance - SETTLEMENT_TOLERANCE:
            regular, extra, settled = balance, 0.0, True
        elif regular + extra >= balance - SETTLEMENT_TOLERANCE:
            extra, settled = balance - regular, True

        principal_paid = regular + extra
        balance = 0.0 if settled else balance - principal_paid
        cumulative_interest += interest

        schedule.append(
            AmortizationEntry(
                period=period,
                payment=principal_paid + interest,
                principal=principal_paid,
                interest=interest,
                extra_payment=extra,
                balance=max(balance, 0.0),
                cumulative_interest=cumulative_interest,
            )
        )

    return schedule


def _totals(schedule: List[AmortizationEntry]) -> Tuple[float, float]:
    total_payment = sum(entry.payment for entry in schedule)
    total_interest = sum(entry.interest for entry in schedule)
    return total_payment, total_interest


def _unsettled_warnings(schedule: List[AmortizationEntry], cap: int) -> List[str]:
    """Warn when the row cap cut the schedule short of settling the balance."""
    if schedule and schedule[-1].balance > SETTLEMENT_TOLERANCE:
        logger.warning("amortization_cap_reached", cap=cap, remaining_balance=schedule[-1].balance)
        return [f"loan is not paid off within {cap} months; {schedule[-1].balance:.2f} remains outstanding"]
    return []


def calculate_loan(inputs: LoanInputs, ctx: Optional[CalculationContext] = None) -> LoanResult:
    """Standard EMI loan with an optional monthly extra payment."""
    ctx = resolve(ctx)
    months = max(int(round(inputs.years * 12)), 1)
    payment = calculate_emi(inputs.principal, inputs.rate, months)

    schedule = build_amortization_schedule(
        inputs.principal,
        inputs.rate,
        months,
        payment,
        extra_payment=inputs.extra_payment,
        max_periods=ctx.max_amortization_months,
    )
    total_payment, total_interest = _totals(schedule)
    standard_interest = max(0.0, safe_subtract(safe_multiply(payment, months), inputs.principal))
    warnings = _unsettled_warnings(schedule, ctx.max_amortization_months)
    settled = not warnings

    return LoanResult(
        monthly_payment=payment,
        total_payment=total_payment,
        total_interest=total_interest,
        payoff_months=len(schedule),
        interest_saved=max(0.0, standard_interest - total_interest) if settled else 0.0,
        principal=inputs.principal,
        schedule=schedule,
        warnings=warnings,
    )


def calculate_advanced_emi(inputs: AdvancedEMIInputs, ctx: Optional[CalculationContext] = None) -> AdvancedEMIResult:
    """
    EMI with an optional recurring prepayment.

    Monthly prepayments are applied every month; yearly prepayments at the end
    of every twelfth month. A prepayment larger than the remaining balance is
    cut down to the balance and the schedule ends that month.
    """
    ctx = resolve(ctx)
    months = int(round(inputs.loan_tenure * 12 if inputs.tenure_type == "years" else inputs.loan_tenure))
    emi = calculate_emi(inputs.loan_amount, inputs.interest_rate, months)

    schedule = build_amortization_schedule(
        inputs.loan_amount,
        inputs.interest_rate,
        months,
        emi,
        extra_payment=inputs.prepayment_amount,
        prepayment_frequency=inputs.prepayment_frequency,
        max_periods=ctx.max_amortization_months,
    )
    _, total_interest = _totals(schedule)
    standard_interest = max(0.0, emi * months - inputs.loan_amount)
    warnings = _unsettled_warnings(schedule, ctx.max_amortization_months)
    settled = not warnings

    return AdvancedEMIResult(
        monthly_emi=emi,
        total_interest=total_interest,
        total_amount=inputs.loan_amount + total_interest,
        interest_to_loan_ratio=safe_divide(total_interest, inputs.loan_amount) * 100,
        tenure_months=months,
        payoff_months=len(schedule),
        months_saved=max(0, months - len(schedule)) if settled else 0,
        interest_saved=max(0.0, standard_interest - total_interest) if settled else 0.0,
        schedule=schedule,
        warnings=warnings,
    )


def calculate_mortgage(inputs: MortgageInputs, ctx: Optional[CalculationContext] = None) -> MortgageResult:
    ctx = resolve(ctx)
    loan_amount = inputs.home_price - inputs.down_payment
    months = max(int(round(inputs.years * 12)), 1)
    principal_and_interest = calculate_emi(loan_amount, inputs.rate, months)

    monthly_tax = inputs.property_tax / 12
    monthly_insurance = inputs.insurance / 12
    monthly_pmi = inputs.pmi / 12

    schedule = build_amortization_schedule(
        loan_amount,
        inputs.rate,
        months,
        principal_and_interest,
        max_periods=ctx.max_amortization_months,
    )
    total_payment, total_interest = _totals(schedule)
    warnings = _unsettled_warnings(schedule, ctx.max_amortization_months)

    return MortgageResult(
        loan_amount=loan_amount,
        monthly_principal_and_interest=principal_and_interest,
        monthly_property_tax=monthly_tax,
        monthly_insurance=monthly_insurance,
        monthly_pmi=monthly_pmi,
        monthly_payment=principal_and_interest + monthly_tax + monthly_insurance + monthly_pmi,
        total_payment=total_payment,
        total_interest=total_interest,
        loan_to_value=safe_divide(loan_amount, inputs.home_price) * 100,
        schedule=schedule,
        warnings=warnings,
    )


def level_payment(amount: float, periodic_rate: float, periods: int, residual: float = 0.0) -> float:
    """
    Fixed payment that amortizes ``amount`` down to ``residual`` in ``periods``.

    PMT = (A - B × (1+r)^-n) × r / (1 - (1+r)^-n); straight-line (A - B) / n
    when the rate is zero.
    """
    if is_effectively_zero(periodic_rate):
        return safe_divide(amount - residual, periods)
    discount = safe_power(1 + periodic_rate, -periods)
    return safe_divide((amount - residual * discount) * periodic_rate, 1 - discount)


def calculate_balloon_loan(inputs: BalloonLoanInputs, ctx: Optional[CalculationContext] = None) -> BalloonLoanResult:
    """
    Balloon loan against a fully amortizing loan of the same term.

    The schedule lists the regular payments only; the balance after the last
    one is the balloon that falls due with it.
    """
    ctx = resolve(ctx)
    per_year = BALLOON_PERIODS_PER_YEAR[inputs.payment_frequency]
    periods = max(int(round(inputs.loan_term * per_year)), 1)
    r = inputs.interest_rate / 100 / per_year

    payment = level_payment(inputs.loan_amount, r, periods, residual=inputs.balloon_payment)
    traditional = level_payment(inputs.loan_amount, r, periods)

    balance = inputs.loan_amount
    cumulative_interest = 0.0
    schedule: List[AmortizationEntry] = []
    for period in range(1, min(periods, ctx.max_amortization_months) + 1):
        interest = balance * r
        principal_paid = payment - interest
        balance -= principal_paid
        if period == periods:
            balance = inputs.balloon_payment
        cumulative_interest += interest
        schedule.append(
            AmortizationEntry(
                period=period,
                payment=payment,
                principal=principal_paid,
                interest=interest,
                balance=max(balance, 0.0),
                cumulative_interest=cumulative_interest,
            )
        )

    warnings: List[str] = []
    if len(schedule) < periods:
        warnings.append(f"schedule shows the first {len(schedule)} of {periods} payments")
        logger.info("balloon_schedule_truncated", cap=ctx.max_amortization_months, periods=periods)

    total_regular = payment * periods
    total_payments = total_regular + inputs.balloon_payment
    total_interest = total_payments - inputs.loan_amount
    return BalloonLoanResult(
        regular_payment=payment,
        periods=periods,
        total_regular_payments=total_regular,
        balloon_payment=inputs.balloon_payment,
        total_payments=total_payments,
        total_interest=total_interest,
        traditional_payment=traditional,
        payment_savings=traditional - payment,
        interest_percentage=safe_divide(total_interest, inputs.loan_amount) * 100,
        schedule=schedule,
        warnings=warnings,
    )


def _months_to_payoff(balance: float, annual_rate: float, payment: float, cap: int) -> Tuple[int, float, bool]:
    """Return (months, interest paid, paid off) for a fixed monthly payment."""
    r = monthly_rate(annual_rate)
    months = 0
    interest_paid = 0.0
    while balance > SETTLEMENT_TOLERANCE and months < cap:
        interest = balance * r
        principal = min(payment - interest, balance)
        if principal <= 0:
            # payment does not even cover the interest
            return cap, interest_paid, False
        balance -= principal
        interest_paid += interest
        months += 1
    return months, interest_paid, balance <= SETTLEMENT_TOLERANCE


def calculate_debt_payoff(inputs: DebtPayoffInputs, ctx: Optional[CalculationContext] = None) -> DebtPayoffResult:
    """Compare paying the minimum with paying the minimum plus an extra amount."""
    ctx = resolve(ctx)
    cap = ctx.max_amortization_months

    min_months, min_interest, min_paid_off = _months_to_payoff(
        inputs.total_debt, inputs.interest_rate, inputs.minimum_payment, cap
    )
    months, interest, paid_off = _months_to_payoff(
        inputs.total_debt, inputs.interest_rate, inputs.minimum_payment + inputs.extra_payment, cap
    )

    warnings: List[str] = []
    if not paid_off:
        warnings.append(f"debt cannot be paid off within {cap} months at this payment")
        logger.warning("debt_payoff_cap_reached", cap=cap, total_debt=inputs.total_debt)
    elif not min_paid_off:
        warnings.append(f"minimum payment alone cannot pay off the debt within {cap} months")

    return DebtPayoffResult(
        months=months,
        total_interest=interest,
        total_payment=inputs.total_debt + interest,
        paid_off=paid_off,
        minimum_payment_months=min_months,
        minimum_payment_interest=min_interest,
        minimum_payment_paid_off=min_paid_off,
        interest_saved=max(0.0, min_interest - interest),
        months_saved=max(0, min_months - months),
        warnings=warnings,
    )
