"""Data contracts for break-even analysis and the monthly budget."""

from typing import Dict, List, Literal

from pydantic import Field, model_validator

from fincalc.schemas.common import CalculationInput, CalculationResult, RobustFloat


class BreakEvenInputs(CalculationInput):
    fixed_cost: RobustFloat = Field(..., ge=0, le=1e12)
    variable_cost_per_unit: RobustFloat = Field(..., ge=0)
    selling_price_per_unit: RobustFloat = Field(..., gt=0)
    target_profit: RobustFloat = Field(0.0, ge=0)
    current_sales: RobustFloat = Field(0.0, ge=0, description="Units sold in the period.")

    @model_validator(mode="after")
    def ensure_positive_margin(self) -> "BreakEvenInputs":
        if self.selling_price_per_unit <= self.variable_cost_per_unit:
            raise ValueError("selling_price_per_unit must be greater than variable_cost_per_unit")
        return self


class BreakEvenResult(CalculationResult):
    contribution_margin: float
    contribution_margin_ratio: float
    break_even_units: float
    break_even_revenue: float
    units_for_target_profit: float
    revenue_for_target_profit: float
    current_revenue: float
    current_total_cost: float
    current_profit: float
    safety_margin: float
    additional_units_needed: float
    additional_units_for_profit: float


BudgetHealth = Literal["Poor", "Fair", "Good", "Excellent"]


class BudgetInputs(CalculationInput):
    """One month of income split across spending categories and savings."""

    monthly_income: RobustFloat = Field(..., gt=0, le=1e12)
    housing: RobustFloat = Field(0.0, ge=0)
    transportation: RobustFloat = Field(0.0, ge=0)
    food: RobustFloat = Field(0.0, ge=0)
    utilities: RobustFloat = Field(0.0, ge=0)
    insurance: RobustFloat = Field(0.0, ge=0)
    healthcare: RobustFloat = Field(0.0, ge=0)
    savings: RobustFloat = Field(0.0, ge=0)
    entertainment: RobustFloat = Field(0.0, ge=0)
    other: RobustFloat = Field(0.0, ge=0)


class BudgetResult(CalculationResult):
    total_expenses: float
    total_allocated: float
    remaining_income: float
    savings_rate: float
    expense_ratio: float
    category_percentages: Dict[str, float]
    budget_health: BudgetHealth
    recommendations: List[str]
