"""
Rough insurance needs and premium estimate.

Life cover follows the human-life-value method: the income (and household
expenses) the dependents would lose over the coverage period, inflated to the
middle of that period, plus outstanding loans. Premiums are indicative only,
a base rate per 1000 of cover scaled by risk multipliers.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from fincalc.core.context import CalculationContext
from fincalc.core.numeric import safe_divide, safe_power
from fincalc.schemas.insurance import InsuranceInputs, InsuranceResult

# (age strictly above, multiplier); every matching band applies
LIFE_AGE_BANDS = ((40, 1.5), (50, 2.0), (60, 3.0))
HEALTH_AGE_BANDS = ((35, 1.3), (45, 1.8), (55, 2.5))

LIFE_BASE_RATE = 0.5  # per 1000 of cover per month
HEALTH_BASE_RATE = 8.0  # per 1000 of cover per year
VEHICLE_PREMIUM_RATE = 0.03  # of vehicle value per year

MIN_LIFE_INCOME_MULTIPLE = 10
MIN_HEALTH_COVER = 500000.0


def _age_factor(age: int, bands: Sequence[Tuple[int, float]]) -> float:
    factor = 1.0
    for threshold, multiplier in bands:
        if age > threshold:
            factor *= multiplier
    return factor


def _life(inputs: InsuranceInputs) -> Tuple[float, float]:
    inflation = safe_power(1 + inputs.inflation_rate / 100, inputs.years_of_coverage / 2)
    lost_income = inputs.annual_income * inputs.years_of_coverage * inflation
    expenses = inputs.monthly_expenses * 12 * inputs.years_of_coverage * inflation
    need = lost_income * max(1.0, inputs.dependents * 0.5) + inputs.outstanding_loans + expenses
    cover = max(need, inputs.annual_income * MIN_LIFE_INCOME_MULTIPLE)

    rate = LIFE_BASE_RATE * _age_factor(inputs.age, LIFE_AGE_BANDS)
    if inputs.gender == "male":
        rate *= 1.1
    if inputs.smoker:
        rate *= 2
    rate *= {"none": 1.0, "minor": 1.2, "major": 1.8}[inputs.health_conditions]
    return cover, cover / 1000 * rate * 12


def _health(inputs: InsuranceInputs) -> Tuple[float, float]:
    cover = max(inputs.annual_income * 0.5, MIN_HEALTH_COVER, inputs.monthly_expenses * 24)

    rate = HEALTH_BASE_RATE * _age_factor(inputs.age, HEALTH_AGE_BANDS)
    if inputs.smoker:
        rate *= 1.5
    rate *= {"none": 1.0, "minor": 1.3, "major": 2.0}[inputs.health_conditions]
    return cover, cover / 1000 * rate


def _vehicle(inputs: InsuranceInputs) -> Tuple[float, float]:
    # vehicle assumed to be worth a tenth of annual income
    value = inputs.annual_income * 0.1
    rate = VEHICLE_PREMIUM_RATE
    if inputs.age < 25:
        rate *= 1.5
    if inputs.age > 60:
        rate *= 1.2
    return value, value * rate


ESTIMATORS = {"life": _life, "health": _health, "vehicle": _vehicle}


def calculate_insurance(inputs: InsuranceInputs, ctx: Optional[CalculationContext] = None) -> InsuranceResult:
    cover, premium = ESTIMATORS[inputs.insurance_type](inputs)
    gap = max(0.0, cover - inputs.existing_coverage)
    return InsuranceResult(
        recommended_coverage=cover,
        existing_coverage=inputs.existing_coverage,
        coverage_gap=gap,
        total_protection=inputs.existing_coverage + gap,
        estimated_premium=premium,
        monthly_premium=premium / 12,
        premium_as_percent_of_income=safe_divide(premium, inputs.annual_income) * 100,
    )
