"""
Indian income tax (FY 2024-25 slabs), GST, HRA exemption, salary breakdown
and capital gains.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence, Tuple

from fincalc.core.context import CalculationContext, resolve
from fincalc.core.numeric import safe_divide
from fincalc.schemas.tax import (
    CapitalGainsInputs,
    CapitalGainsResult,
    GSTInputs,
    GSTResult,
    HRAInputs,
    HRAResult,
    IncomeTaxInputs,
    IncomeTaxResult,
    Regime,
    SalaryInputs,
    SalaryResult,
    TaxBracket,
    TaxSlab,
)

STANDARD_DEDUCTION = {"old": 50000.0, "new": 75000.0}

NEW_REGIME_SLABS = (
    TaxSlab(lower=0, upper=300000, rate=0),
    TaxSlab(lower=300000, upper=700000, rate=5),
    TaxSlab(lower=700000, upper=1000000, rate=10),
    TaxSlab(lower=1000000, upper=1200000, rate=15),
    TaxSlab(lower=1200000, upper=1500000, rate=20),
    TaxSlab(lower=1500000, upper=None, rate=30),
)

# (holding period in months that must be exceeded for long-term treatment,
#  long-term rate, exemption on long-term gains)
CAPITAL_GAINS_RULES = {
    "equity": (12, 10.0, 100000.0),
    "debt": (36, 20.0, 0.0),
    "property": (24, 20.0, 0.0),
    "gold": (36, 20.0, 0.0),
}
EQUITY_SHORT_TERM_RATE = 15.0


def income_tax_slabs(regime: Regime, age: int) -> Tuple[TaxSlab, ...]:
    """Slab table for ``regime``; the old regime raises the exemption for seniors."""
    if regime == "new":
        return NEW_REGIME_SLABS

    if age >= 80:
        exemption = 500000
    elif age >= 60:
        exemption = 300000
    else:
        exemption = 250000

    slabs = [TaxSlab(lower=0, upper=exemption, rate=0)]
    if exemption < 500000:
        slabs.append(TaxSlab(lower=exemption, upper=500000, rate=5))
    slabs.append(TaxSlab(lower=500000, upper=1000000, rate=20))
    slabs.append(TaxSlab(lower=1000000, upper=None, rate=30))
    return tuple(slabs)


def apply_slabs(income: float, slabs: Sequence[TaxSlab]) -> Tuple[float, List[TaxBracket]]:
    """
    Cumulative marginal-rate summation.

    Only the part of ``income`` inside each slab is taxed at that slab's rate.
    Returns the tax and one bracket row per slab that ``income`` reaches.
    """
    tax = 0.0
    brackets: List[TaxBracket] = []
    for slab in slabs:
        if income <= slab.lower:
            break
        top = income if slab.upper is None else min(income, slab.upper)
        amount = top - slab.lower
        slab_tax = amount * slab.rate / 100
        tax += slab_tax
        brackets.append(
            TaxBracket(lower=slab.lower, upper=slab.upper, rate=slab.rate, taxable_amount=amount, tax=slab_tax)
        )
    return tax, brackets


def _income_tax(annual_income: float, age: int, deductions: float, regime: Regime, cess_rate: float):
    standard_deduction = STANDARD_DEDUCTION[regime]
    taxable = max(0.0, annual_income - deductions - standard_deduction)
    tax, brackets = apply_slabs(taxable, income_tax_slabs(regime, age))
    cess = tax * cess_rate / 100
    return standard_deduction, taxable, tax, cess, brackets


def calculate_income_tax(inputs: IncomeTaxInputs, ctx: Optional[CalculationContext] = None) -> IncomeTaxResult:
    ctx = resolve(ctx)
    standard_deduction, taxable, tax, cess, brackets = _income_tax(
        inputs.annual_income, inputs.age, inputs.deductions, inputs.regime, ctx.cess_rate
    )
    total = tax + cess
    return IncomeTaxResult(
        gross_income=inputs.annual_income,
        standard_deduction=standard_deduction,
        taxable_income=taxable,
        income_tax=tax,
        cess=cess,
        total_tax=total,
        net_income=inputs.annual_income - total,
        marginal_rate=brackets[-1].rate if brackets else 0.0,
        effective_rate=safe_divide(total, inputs.annual_income) * 100,
        brackets=brackets,
    )


def calculate_gst(inputs: GSTInputs, ctx: Optional[CalculationContext] = None) -> GSTResult:
    """Add GST to a net amount or extract it from a gross one."""
    if inputs.gst_type == "exclusive":
        original = inputs.amount
        gst = inputs.amount * inputs.gst_rate / 100
        total = original + gst
    else:
        total = inputs.amount
        original = inputs.amount / (1 + inputs.gst_rate / 100)
        gst = total - original

    if inputs.supply == "intra_state":
        cgst = sgst = gst / 2
        igst = 0.0
    else:
        cgst = sgst = 0.0
        igst = gst

    return GSTResult(
        original_amount=original,
        gst_amount=gst,
        total_amount=total,
        cgst=cgst,
        sgst=sgst,
        igst=igst,
    )


def calculate_hra(inputs: HRAInputs, ctx: Optional[CalculationContext] = None) -> HRAResult:
    """
    HRA exemption is the least of:
      1) HRA actually received
      2) 50% (metro) or 40% (non-metro) of basic + DA
      3) rent paid minus 10% of basic + DA
    """
    salary = inputs.basic_salary + inputs.dearness_allowance
    salary_limit = salary * (0.5 if inputs.city == "metro" else 0.4)
    rent_excess = max(0.0, inputs.rent_paid - 0.1 * salary)
    exemption = min(inputs.hra_received, salary_limit, rent_excess)
    return HRAResult(
        actual_hra=inputs.hra_received,
        salary_percentage_limit=salary_limit,
        rent_over_ten_percent=rent_excess,
        exemption=exemption,
        taxable_hra=inputs.hra_received - exemption,
    )


def calculate_salary(inputs: SalaryInputs, ctx: Optional[CalculationContext] = None) -> SalaryResult:
    """Break an annual CTC into monthly components and in-hand pay."""
    ctx = resolve(ctx)
    basic = inputs.ctc * inputs.basic_percent / 100
    hra = basic * inputs.hra_percent / 100
    pf = basic * inputs.pf_contribution / 100
    special = max(0.0, inputs.ctc - basic - hra - inputs.other_allowances - pf)
    gross = basic + hra + inputs.other_allowances + special

    # employee PF counts towards 80C only under the old regime
    deductions = pf if inputs.regime == "old" else 0.0
    _, _, tax, cess, _ = _income_tax(gross, 30, deductions, inputs.regime, ctx.cess_rate)
    income_tax = tax + cess

    total_deductions = pf + inputs.professional_tax + income_tax
    net = gross - total_deductions
    return SalaryResult(
        ctc=inputs.ctc,
        basic_salary=basic / 12,
        hra=hra / 12,
        other_allowances=inputs.other_allowances / 12,
        special_allowance=special / 12,
        gross_salary=gross / 12,
        employer_pf=pf / 12,
        employee_pf=pf / 12,
        professional_tax=inputs.professional_tax / 12,
        income_tax=income_tax / 12,
        total_deductions=total_deductions / 12,
        net_salary=net / 12,
        annual_net_salary=net,
        take_home_percent=safe_divide(net, inputs.ctc) * 100,
    )


def months_between(start: date, end: date) -> int:
    """Whole calendar months from ``start`` to ``end``."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    if end.day < start.day:
        months -= 1
    return max(months, 0)


def calculate_capital_gains(
    inputs: CapitalGainsInputs, ctx: Optional[CalculationContext] = None
) -> CapitalGainsResult:
    ctx = resolve(ctx)
    threshold, long_term_rate, long_term_exemption = CAPITAL_GAINS_RULES[inputs.asset_type]
    holding = months_between(inputs.purchase_date, inputs.sale_date)
    long_term = holding > threshold

    gain = inputs.sale_price - inputs.purchase_price - inputs.expenses
    if long_term:
        rate, exemption = long_term_rate, long_term_exemption
    elif inputs.asset_type == "equity":
        rate, exemption = EQUITY_SHORT_TERM_RATE, 0.0
    else:
        rate, exemption = inputs.slab_rate, 0.0

    taxable = max(0.0, gain - exemption)
    tax = taxable * rate / 100
    cess = tax * ctx.cess_rate / 100
    total = tax + cess
    return CapitalGainsResult(
        holding_months=holding,
        term="long" if long_term else "short",
        capital_gain=gain,
        exemption=min(exemption, max(gain, 0.0)),
        taxable_gain=taxable,
        tax_rate=rate,
        tax=tax,
        cess=cess,
        total_tax=total,
        net_proceeds=inputs.sale_price - inputs.expenses - total,
    )
