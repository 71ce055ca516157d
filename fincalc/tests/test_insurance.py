from math import isclose

from fincalc.core.insurance import LIFE_AGE_BANDS, _age_factor, calculate_insurance
from fincalc.schemas.insurance import InsuranceInputs


def test_vehicle_premium():
    result = calculate_insurance(InsuranceInputs(insurance_type="vehicle", age=30, annual_income=1000000))

    assert isclose(result.recommended_coverage, 100000)
    assert isclose(result.estimated_premium, 3000)
    assert isclose(result.monthly_premium, 250)


def test_health_cover_and_premium():
    result = calculate_insurance(InsuranceInputs(insurance_type="health", age=30, annual_income=1440000))

    assert isclose(result.recommended_coverage, 720000)
    assert isclose(result.estimated_premium, 5760)


def test_health_cover_has_floor():
    result = calculate_insurance(InsuranceInputs(insurance_type="health", age=30, annual_income=100000))
    assert result.recommended_coverage == 500000


def test_life_cover_at_least_ten_times_income():
    result = calculate_insurance(InsuranceInputs(age=30, annual_income=500000, years_of_coverage=1, inflation_rate=0))
    assert result.recommended_coverage >= 5000000


def test_smoking_doubles_life_premium():
    base = calculate_insurance(InsuranceInputs(age=35, annual_income=800000, dependents=2))
    smoker = calculate_insurance(InsuranceInputs(age=35, annual_income=800000, dependents=2, smoker=True))

    assert isclose(smoker.estimated_premium, base.estimated_premium * 2)
    assert smoker.recommended_coverage == base.recommended_coverage


def test_existing_coverage_reduces_gap_only():
    without = calculate_insurance(InsuranceInputs(age=35, annual_income=800000))
    covered = calculate_insurance(InsuranceInputs(age=35, annual_income=800000, existing_coverage=2000000))

    assert covered.recommended_coverage == without.recommended_coverage
    assert isclose(covered.coverage_gap, without.coverage_gap - 2000000)
    assert isclose(covered.total_protection, covered.recommended_coverage)


def test_gap_never_negative():
    result = calculate_insurance(
        InsuranceInputs(insurance_type="vehicle", age=30, annual_income=100000, existing_coverage=1e9)
    )
    assert result.coverage_gap == 0.0


def test_age_bands_stack():
    assert _age_factor(30, LIFE_AGE_BANDS) == 1.0
    assert _age_factor(45, LIFE_AGE_BANDS) == 1.5
    assert _age_factor(55, LIFE_AGE_BANDS) == 3.0
