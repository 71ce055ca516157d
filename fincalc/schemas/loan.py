"""Data contracts for loan, EMI, mortgage, balloon loan and debt payoff calculations."""

from typing import List, Literal

from pydantic import Field, model_validator

from fincalc.schemas.common import AmortizationEntry, CalculationInput, CalculationResult, RobustFloat


class LoanInputs(CalculationInput):
    """Fixed-rate loan with an optional monthly extra payment."""

    principal: RobustFloat = Field(..., gt=0, le=1e12, description="Amount borrowed.")
    rate: RobustFloat = Field(..., ge=0, le=50, description="Annual interest rate in percent.")
    years: RobustFloat = Field(..., gt=0, le=50, description="Loan term in years.")
    extra_payment: RobustFloat = Field(0.0, ge=0, description="Extra principal paid every month.")


class LoanResult(CalculationResult):
    monthly_payment: float
    total_payment: float
    total_interest: float
    payoff_months: int
    interest_saved: float
    principal: float
    schedule: List[AmortizationEntry]


class AdvancedEMIInputs(CalculationInput):
    loan_amount: RobustFloat = Field(..., gt=0, le=1e12)
    interest_rate: RobustFloat = Field(..., ge=0, le=50, description="Annual interest rate in percent.")
    loan_tenure: RobustFloat = Field(..., gt=0)
    tenure_type: Literal["years", "months"] = "years"
    prepayment_amount: RobustFloat = Field(0.0, ge=0)
    prepayment_frequency: Literal["none", "monthly", "yearly"] = "none"

    @model_validator(mode="after")
    def ensure_tenure_in_range(self) -> "AdvancedEMIInputs":
        months = self.loan_tenure * 12 if self.tenure_type == "years" else self.loan_tenure
        if months > 600:
            raise ValueError("loan tenure cannot exceed 50 years (600 months)")
        if round(months) < 1:
            raise ValueError("loan tenure must be at least one month")
        return self


class AdvancedEMIResult(CalculationResult):
    monthly_emi: float
    total_interest: float
    total_amount: float
    interest_to_loan_ratio: float
    tenure_months: int
    payoff_months: int
    months_saved: int
    interest_saved: float
    schedule: List[AmortizationEntry]


class MortgageInputs(CalculationInput):
    home_price: RobustFloat = Field(..., gt=0, le=1e12)
    down_payment: RobustFloat = Field(0.0, ge=0)
    rate: RobustFloat = Field(..., ge=0, le=50)
    years: RobustFloat = Field(..., gt=0, le=50)
    property_tax: RobustFloat = Field(0.0, ge=0, description="Annual property tax.")
    insurance: RobustFloat = Field(0.0, ge=0, description="Annual home insurance.")
    pmi: RobustFloat = Field(0.0, ge=0, description="Annual private mortgage insurance.")

    @model_validator(mode="after")
    def ensure_down_payment_below_price(self) -> "MortgageInputs":
        if self.down_payment >= self.home_price:
            raise ValueError("down_payment must be less than home_price")
        return self


class MortgageResult(CalculationResult):
    loan_amount: float
    monthly_principal_and_interest: float
    monthly_property_tax: float
    monthly_insurance: float
    monthly_pmi: float
    monthly_payment: float
    total_payment: float
    total_interest: float
    loan_to_value: float
    schedule: List[AmortizationEntry]


class DebtPayoffInputs(CalculationInput):
    total_debt: RobustFloat = Field(..., gt=0, le=1e12)
    interest_rate: RobustFloat = Field(..., ge=0, le=100)
    minimum_payment: RobustFloat = Field(..., gt=0)
    extra_payment: RobustFloat = Field(0.0, ge=0)


class DebtPayoffResult(CalculationResult):
    months: int
    total_interest: float
    total_payment: float
    paid_off: bool
    minimum_payment_months: int
    minimum_payment_interest: float
    minimum_payment_paid_off: bool
    interest_saved: float
    months_saved: int


class BalloonLoanInputs(CalculationInput):
    """Level payments that leave ``balloon_payment`` owing at the end of the term."""

    loan_amount: RobustFloat = Field(..., gt=0, le=1e12)
    interest_rate: RobustFloat = Field(..., ge=0, le=50, description="Annual interest rate in percent.")
    loan_term: RobustFloat = Field(..., gt=0, le=30, description="Loan term in years.")
    balloon_payment: RobustFloat = Field(0.0, ge=0, description="Lump sum due with the last payment.")
    payment_frequency: Literal["monthly", "quarterly"] = "monthly"

    @model_validator(mode="after")
    def ensure_balloon_within_loan(self) -> "BalloonLoanInputs":
        if self.balloon_payment > self.loan_amount:
            raise ValueError("balloon_payment cannot exceed loan_amount")
        return self


class BalloonLoanResult(CalculationResult):
    regular_payment: float
    periods: int
    total_regular_payments: float
    balloon_payment: float
    total_payments: float
    total_interest: float
    traditional_payment: float
    payment_savings: float
    interest_percentage: float
    schedule: List[AmortizationEntry]
