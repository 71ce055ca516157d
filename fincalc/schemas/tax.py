"""Data contracts for Indian income tax, GST, HRA, salary and capital gains."""

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fincalc.schemas.common import CalculationInput, CalculationResult, RobustFloat, RobustInt

Regime = Literal["old", "new"]


class TaxSlab(BaseModel):
    """Income in ``[lower, upper)`` is taxed at ``rate`` percent; ``upper=None`` is open-ended."""

    model_config = ConfigDict(frozen=True)

    lower: float = Field(..., ge=0)
    upper: Optional[float] = None
    rate: float = Field(..., ge=0, le=100)


class TaxBracket(BaseModel):
    model_config = ConfigDict(extra="forbid")

    lower: float
    upper: Optional[float]
    rate: float
    taxable_amount: float
    tax: float


class IncomeTaxInputs(CalculationInput):
    annual_income: RobustFloat = Field(..., ge=0, le=1e12)
    age: RobustInt = Field(30, ge=18, le=100)
    deductions: RobustFloat = Field(0.0, ge=0, description="Chapter VI-A deductions such as 80C and 80D.")
    regime: Regime = "new"


class IncomeTaxResult(CalculationResult):
    gross_income: float
    standard_deduction: float
    taxable_income: float
    income_tax: float
    cess: float
    total_tax: float
    net_income: float
    marginal_rate: float
    effective_rate: float
    brackets: List[TaxBracket]


class GSTInputs(CalculationInput):
    amount: RobustFloat = Field(..., gt=0, le=1e12)
    gst_rate: RobustFloat = Field(..., ge=0, le=100)
    gst_type: Literal["exclusive", "inclusive"] = Field(
        "exclusive", description="Whether ``amount`` excludes or already includes GST."
    )
    supply: Literal["intra_state", "inter_state"] = "intra_state"


class GSTResult(CalculationResult):
    original_amount: float
    gst_amount: float
    total_amount: float
    cgst: float
    sgst: float
    igst: float


class HRAInputs(CalculationInput):
    """All amounts are annual."""

    basic_salary: RobustFloat = Field(..., gt=0, le=1e10)
    dearness_allowance: RobustFloat = Field(0.0, ge=0)
    hra_received: RobustFloat = Field(..., ge=0)
    rent_paid: RobustFloat = Field(..., ge=0)
    city: Literal["metro", "non_metro"] = "non_metro"


class HRAResult(CalculationResult):
    actual_hra: float
    salary_percentage_limit: float
    rent_over_ten_percent: float
    exemption: float
    taxable_hra: float


class SalaryInputs(CalculationInput):
    """Annual cost-to-company split into components."""

    ctc: RobustFloat = Field(..., gt=0, le=1e10)
    basic_percent: RobustFloat = Field(50.0, ge=40, le=70, description="Basic pay as percent of CTC.")
    hra_percent: RobustFloat = Field(40.0, ge=0, le=50, description="HRA as percent of basic pay.")
    pf_contribution: RobustFloat = Field(12.0, ge=0, le=12, description="PF as percent of basic pay.")
    professional_tax: RobustFloat = Field(2400.0, ge=0, le=2500, description="Annual professional tax.")
    other_allowances: RobustFloat = Field(0.0, ge=0, description="Annual fixed allowances.")
    regime: Regime = "new"


class SalaryResult(CalculationResult):
    """Monthly figures unless prefixed with ``annual_``."""

    ctc: float
    basic_salary: float
    hra: float
    other_allowances: float
    special_allowance: float
    gross_salary: float
    employer_pf: float
    employee_pf: float
    professional_tax: float
    income_tax: float
    total_deductions: float
    net_salary: float
    annual_net_salary: float
    take_home_percent: float


class CapitalGainsInputs(CalculationInput):
    asset_type: Literal["equity", "debt", "property", "gold"]
    purchase_price: RobustFloat = Field(..., gt=0, le=1e12)
    sale_price: RobustFloat = Field(..., ge=0, le=1e12)
    purchase_date: date
    sale_date: date
    expenses: RobustFloat = Field(0.0, ge=0, description="Brokerage, stamp duty and other transfer costs.")
    slab_rate: RobustFloat = Field(30.0, ge=0, le=30, description="Marginal slab rate for short-term gains.")

    @model_validator(mode="after")
    def ensure_sale_after_purchase(self) -> "CapitalGainsInputs":
        if self.sale_date < self.purchase_date:
            raise ValueError("sale_date cannot be before purchase_date")
        return self


class CapitalGainsResult(CalculationResult):
    holding_months: int
    term: Literal["short", "long"]
    capital_gain: float
    exemption: float
    taxable_gain: float
    tax_rate: float
    tax: float
    cess: float
    total_tax: float
    net_proceeds: float
