"""
Calculator catalog and the single evaluation entry point.

``evaluate`` validates raw field values against the calculator's input
schema and runs its formula. Input that violates a bound is rejected unless
the caller asks for ``clamp=True``, in which case inclusive bounds are
applied to the raw values first.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Type

from annotated_types import Ge, Le
from pydantic import ValidationError

from fincalc.core import business, insurance, interest, loan, retirement, roi, savings, tax
from fincalc.core.context import CalculationContext, resolve
from fincalc.core.errors import CalculationError, ErrorKind
from fincalc.core.numeric import parse_number
from fincalc.logging_config import get_logger
from fincalc.schemas.common import CalculationInput, CalculationResult
from fincalc.schemas.business import BreakEvenInputs, BudgetInputs
from fincalc.schemas.insurance import InsuranceInputs
from fincalc.schemas.interest import CompoundInterestInputs, SimpleInterestInputs
from fincalc.schemas.loan import AdvancedEMIInputs, BalloonLoanInputs, DebtPayoffInputs, LoanInputs, MortgageInputs
from fincalc.schemas.retirement import RetirementInputs
from fincalc.schemas.roi import ROIInputs
from fincalc.schemas.savings import (
    DividendYieldInputs,
    EducationGoalInputs,
    EPFInputs,
    FDInputs,
    GoldInputs,
    InvestmentInputs,
    LumpsumInputs,
    PPFInputs,
    RDInputs,
    SIPInputs,
    SWPInputs,
)
from fincalc.schemas.tax import CapitalGainsInputs, GSTInputs, HRAInputs, IncomeTaxInputs, SalaryInputs

logger = get_logger(__name__)

Formula = Callable[[Any, Optional[CalculationContext]], CalculationResult]


@dataclass(frozen=True)
class Calculator:
    name: str
    input_model: Type[CalculationInput]
    compute: Formula
    description: str


@dataclass(frozen=True)
class Evaluation:
    """Outcome of one evaluation: a result, or an error kind with messages."""

    calculator: str
    ok: bool
    inputs: Optional[CalculationInput] = None
    result: Optional[CalculationResult] = None
    errors: List[str] = field(default_factory=list)
    kind: Optional[ErrorKind] = None


_CATALOG = (
    Calculator("loan", LoanInputs, loan.calculate_loan, "Fixed-rate loan EMI with optional extra payments"),
    Calculator("advanced-emi", AdvancedEMIInputs, loan.calculate_advanced_emi, "EMI with monthly or yearly prepayments"),
    Calculator("mortgage", MortgageInputs, loan.calculate_mortgage, "Home loan payment including taxes and insurance"),
    Calculator("balloon-loan", BalloonLoanInputs, loan.calculate_balloon_loan, "Loan with a lump sum due at the end"),
    Calculator("debt-payoff", DebtPayoffInputs, loan.calculate_debt_payoff, "Time and interest to clear a debt"),
    Calculator("simple-interest", SimpleInterestInputs, interest.calculate_simple_interest, "Simple interest"),
    Calculator("compound-interest", CompoundInterestInputs, interest.calculate_compound_interest, "Compound interest"),
    Calculator("sip", SIPInputs, savings.calculate_sip, "Systematic investment plan maturity"),
    Calculator("lumpsum", LumpsumInputs, savings.calculate_lumpsum, "One-off investment growth"),
    Calculator("fd", FDInputs, savings.calculate_fd, "Fixed deposit maturity"),
    Calculator("rd", RDInputs, savings.calculate_rd, "Recurring deposit maturity"),
    Calculator("ppf", PPFInputs, savings.calculate_ppf, "Public Provident Fund maturity"),
    Calculator("epf", EPFInputs, savings.calculate_epf, "Employees' Provident Fund corpus"),
    Calculator("gold", GoldInputs, savings.calculate_gold, "Gold investment value"),
    Calculator("dividend-yield", DividendYieldInputs, savings.calculate_dividend_yield, "Dividend yield and income"),
    Calculator("investment", InvestmentInputs, savings.calculate_investment, "Investment growth with contributions"),
    Calculator("swp", SWPInputs, savings.calculate_swp, "Systematic withdrawal plan duration"),
    Calculator("education-goal", EducationGoalInputs, savings.calculate_education_goal, "Monthly saving for education"),
    Calculator("retirement", RetirementInputs, retirement.calculate_retirement, "Retirement corpus projection"),
    Calculator("roi", ROIInputs, roi.calculate_roi, "Project ROI, NPV and IRR"),
    Calculator("income-tax", IncomeTaxInputs, tax.calculate_income_tax, "Indian income tax, old and new regime"),
    Calculator("gst", GSTInputs, tax.calculate_gst, "Goods and services tax split"),
    Calculator("hra", HRAInputs, tax.calculate_hra, "House rent allowance exemption"),
    Calculator("salary", SalaryInputs, tax.calculate_salary, "CTC to monthly in-hand salary"),
    Calculator("capital-gains", CapitalGainsInputs, tax.calculate_capital_gains, "Capital gains tax"),
    Calculator("insurance", InsuranceInputs, insurance.calculate_insurance, "Insurance cover and premium estimate"),
    Calculator("break-even", BreakEvenInputs, business.calculate_break_even, "Break-even units and revenue"),
    Calculator("budget", BudgetInputs, business.calculate_budget, "Monthly budget allocation and health"),
)

CALCULATORS: Dict[str, Calculator] = {calculator.name: calculator for calculator in _CATALOG}


def clamp_inputs(model: Type[CalculationInput], raw: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Pull numeric fields with inclusive (``ge``/``le``) bounds into range.

    Exclusive bounds are left alone, as are values that do not parse as a
    number; validation reports those.
    """
    data = dict(raw)
    for name, info in model.model_fields.items():
        if name not in data:
            continue
        lower = next((meta.ge for meta in info.metadata if isinstance(meta, Ge)), None)
        upper = next((meta.le for meta in info.metadata if isinstance(meta, Le)), None)
        if lower is None and upper is None:
            continue
        parsed = parse_number(data[name])
        if not parsed.ok:
            continue
        value = parsed.value
        if lower is not None:
            value = max(value, lower)
        if upper is not None:
            value = min(value, upper)
        data[name] = value
    return data


def _messages(exc: ValidationError) -> List[str]:
    messages = []
    for error in exc.errors(include_url=False):
        location = ".".join(str(part) for part in error["loc"]) or "input"
        messages.append(f"{location}: {error['msg']}")
    return messages


def evaluate(
    name: str,
    raw: Optional[Mapping[str, Any]],
    *,
    clamp: bool = False,
    ctx: Optional[CalculationContext] = None,
) -> Evaluation:
    """
    Validate ``raw`` for calculator ``name`` and run it.

    Raises:
        KeyError: if no calculator is registered under ``name``.
    """
    calculator = CALCULATORS[name]
    ctx = resolve(ctx)
    data = dict(raw or {})
    if clamp:
        data = clamp_inputs(calculator.input_model, data)

    try:
        inputs = calculator.input_model.model_validate(data)
    except ValidationError as exc:
        logger.info("calculation_rejected", calculator=name, errors=exc.error_count())
        return Evaluation(calculator=name, ok=False, errors=_messages(exc), kind=ErrorKind.INVALID_INPUT)

    try:
        result = calculator.compute(inputs, ctx)
    except CalculationError as exc:
        logger.info("calculation_failed", calculator=name, kind=exc.kind.value)
        return Evaluation(calculator=name, ok=False, inputs=inputs, errors=exc.errors, kind=exc.kind)

    logger.debug("calculation_completed", calculator=name, clamped=clamp)
    return Evaluation(calculator=name, ok=True, inputs=inputs, result=result)
