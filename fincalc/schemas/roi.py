"""Data contracts for ROI, NPV and IRR."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from fincalc.schemas.common import CalculationInput, CalculationResult, RobustFloat, RobustInt


class ROIInputs(CalculationInput):
    """Project appraisal; every cost and revenue figure is monthly unless named one-time."""

    initial_investment: RobustFloat = Field(..., gt=0, le=1e12)
    project_duration: RobustInt = Field(..., ge=1, le=600, description="Duration in months.")
    revenue_type: Literal["recurring", "one_time"] = "recurring"
    monthly_revenue: RobustFloat = Field(0.0, ge=0)
    one_time_revenue: RobustFloat = Field(0.0, ge=0)
    operating_costs: RobustFloat = Field(0.0, ge=0)
    maintenance_costs: RobustFloat = Field(0.0, ge=0)
    salvage_value: RobustFloat = Field(0.0, ge=0)
    discount_rate: RobustFloat = Field(0.0, ge=0, le=100, description="Annual discount rate in percent.")
    tax_rate: RobustFloat = Field(0.0, ge=0, le=100)


class IRRSolution(BaseModel):
    """Outcome of the IRR root search; ``rate`` is per period."""

    model_config = ConfigDict(frozen=True)

    rate: Optional[float] = None
    converged: bool
    iterations: int = 0
    reason: str


class ROIResult(CalculationResult):
    total_revenue: float
    total_costs: float
    net_profit_before_tax: float
    tax_amount: float
    net_profit: float
    roi: float
    roi_after_tax: float
    annualized_roi: Optional[float]
    monthly_net_cash_flow: float
    payback_months: Optional[float]
    npv: float
    irr: Optional[float] = Field(None, description="Annual IRR in percent, None when no root was found.")
    irr_converged: bool
    irr_iterations: int
    profitability_index: float
