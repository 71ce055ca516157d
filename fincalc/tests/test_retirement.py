from math import isclose

import pytest
from pydantic import ValidationError

from fincalc.core.retirement import calculate_retirement
from fincalc.schemas.retirement import RetirementInputs


def test_zero_return_adds_contributions():
    result = calculate_retirement(
        RetirementInputs(
            current_age=30,
            retirement_age=32,
            current_savings=1000,
            monthly_contribution=100,
            expected_return=0,
            current_year=2024,
        )
    )

    assert [row.balance for row in result.yearly_breakdown] == [2200, 3400]
    assert [row.age for row in result.yearly_breakdown] == [31, 32]
    assert [row.year for row in result.yearly_breakdown] == [2025, 2026]
    assert result.total_contributions == 2400
    assert result.total_growth == 0.0


def test_matches_closed_form_without_step_up():
    result = calculate_retirement(
        RetirementInputs(
            current_age=30,
            retirement_age=60,
            current_savings=100000,
            monthly_contribution=5000,
            expected_return=12,
        )
    )
    growth = 1.01 ** 360
    expected = 100000 * growth + 5000 * (growth - 1) / 0.01

    assert result.years_to_retirement == 30
    assert isclose(result.corpus, expected, rel_tol=1e-9)
    assert len(result.yearly_breakdown) == 30


def test_step_up_raises_contributions():
    result = calculate_retirement(
        RetirementInputs(
            current_age=40,
            retirement_age=42,
            monthly_contribution=100,
            expected_return=0,
            annual_step_up=10,
        )
    )

    assert [row.contribution for row in result.yearly_breakdown] == pytest.approx([1200, 1320])
    assert isclose(result.total_contributions, 2520)


def test_inflation_deflates_corpus():
    result = calculate_retirement(
        RetirementInputs(current_age=30, retirement_age=31, current_savings=1100, expected_return=0, inflation_rate=10)
    )
    assert isclose(result.corpus_in_todays_money, 1000)


def test_retirement_age_must_exceed_current_age():
    with pytest.raises(ValidationError):
        RetirementInputs(current_age=50, retirement_age=50, expected_return=8)
