"""Break-even analysis and monthly budget allocation."""

from __future__ import annotations

from typing import List, Optional

from fincalc.core.context import CalculationContext
from fincalc.logging_config import get_logger
from fincalc.schemas.business import BreakEvenInputs, BreakEvenResult, BudgetHealth, BudgetInputs, BudgetResult

logger = get_logger(__name__)

EXPENSE_CATEGORIES = (
    "housing", "transportation", "food", "utilities", "insurance", "healthcare", "entertainment", "other",
)

HOUSING_LIMIT = 30.0
TRANSPORTATION_LIMIT = 15.0
TARGET_SAVINGS_RATE = 20.0


def calculate_break_even(inputs: BreakEvenInputs, ctx: Optional[CalculationContext] = None) -> BreakEvenResult:
    """
    Units and revenue needed to cover fixed costs, and to reach a target profit.

    The safety margin is how far current sales may fall, in percent, before
    the business stops covering its costs.
    """
    price = inputs.selling_price_per_unit
    margin = price - inputs.variable_cost_per_unit
    units = inputs.fixed_cost / margin
    target_units = (inputs.fixed_cost + inputs.target_profit) / margin

    sales = inputs.current_sales
    revenue = sales * price
    total_cost = inputs.fixed_cost + sales * inputs.variable_cost_per_unit
    safety = (sales - units) / sales * 100 if sales > 0 and units > 0 else 0.0

    return BreakEvenResult(
        contribution_margin=margin,
        contribution_margin_ratio=margin / price * 100,
        break_even_units=units,
        break_even_revenue=units * price,
        units_for_target_profit=target_units,
        revenue_for_target_profit=target_units * price,
        current_revenue=revenue,
        current_total_cost=total_cost,
        current_profit=revenue - total_cost,
        safety_margin=safety,
        additional_units_needed=max(0.0, units - sales),
        additional_units_for_profit=max(0.0, target_units - sales),
    )


def _health(savings_rate: float) -> BudgetHealth:
    if savings_rate < 10:
        return "Poor"
    if savings_rate < 20:
        return "Fair"
    if savings_rate >= 30:
        return "Excellent"
    return "Good"


def calculate_budget(inputs: BudgetInputs, ctx: Optional[CalculationContext] = None) -> BudgetResult:
    income = inputs.monthly_income
    total_expenses = sum(getattr(inputs, category) for category in EXPENSE_CATEGORIES)
    total_allocated = total_expenses + inputs.savings
    remaining = income - total_allocated
    savings_rate = inputs.savings / income * 100

    shares = {category: getattr(inputs, category) / income * 100 for category in EXPENSE_CATEGORIES}
    shares["savings"] = savings_rate

    recommendations: List[str] = []
    if shares["housing"] > HOUSING_LIMIT:
        recommendations.append("Housing costs exceed 30% of income. Consider reducing housing expenses.")
    if savings_rate < TARGET_SAVINGS_RATE:
        recommendations.append("Aim to save at least 20% of your income for financial security.")
    if shares["transportation"] > TRANSPORTATION_LIMIT:
        recommendations.append("Transportation costs are high. Consider carpooling or public transport.")
    if remaining < 0:
        recommendations.append("You're overspending! Reduce expenses or increase income.")
        logger.info("budget_overspent", shortfall=-remaining)

    return BudgetResult(
        total_expenses=total_expenses,
        total_allocated=total_allocated,
        remaining_income=remaining,
        savings_rate=savings_rate,
        expense_ratio=total_expenses / income * 100,
        category_percentages=shares,
        budget_health=_health(savings_rate),
        recommendations=recommendations,
    )
