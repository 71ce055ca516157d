from math import isclose

import pytest

from fincalc.core.context import CalculationContext
from fincalc.core.errors import CalculationError, ErrorKind
from fincalc.core.interest import (
    calculate_compound_interest,
    calculate_simple_interest,
    compound_growth_factor,
)
from fincalc.schemas.interest import CompoundInterestInputs, SimpleInterestInputs


def test_simple_interest():
    result = calculate_simple_interest(SimpleInterestInputs(principal=10000, rate=5, time=3))

    assert isclose(result.simple_interest, 1500)
    assert isclose(result.total_amount, 11500)
    assert isclose(result.monthly_interest, 1500 / 36)
    assert isclose(result.effective_rate, 15)


def test_simple_interest_zero_time():
    result = calculate_simple_interest(SimpleInterestInputs(principal=10000, rate=5, time=0))
    assert result.simple_interest == 0.0
    assert result.monthly_interest == 0.0


def test_compound_interest_yearly():
    result = calculate_compound_interest(CompoundInterestInputs(principal=10000, rate=10, years=2))

    assert isclose(result.total_amount, 12100)
    assert isclose(result.compound_interest, 2100)
    assert isclose(result.simple_interest, 2000)
    assert isclose(result.additional_earnings, 100)
    assert result.periods == 2


def test_effective_annual_rate_monthly():
    result = calculate_compound_interest(
        CompoundInterestInputs(principal=1000, rate=10, years=1, frequency="monthly")
    )
    assert isclose(result.effective_annual_rate, 10.4713, abs_tol=1e-4)


def test_more_frequent_compounding_earns_more():
    amounts = [
        calculate_compound_interest(
            CompoundInterestInputs(principal=1000, rate=8, years=2, frequency=frequency)
        ).total_amount
        for frequency in ("yearly", "half-yearly", "quarterly", "monthly", "daily")
    ]
    assert amounts == sorted(amounts)


def test_daily_compounding_over_limit():
    with pytest.raises(CalculationError) as excinfo:
        calculate_compound_interest(CompoundInterestInputs(principal=1000, rate=8, years=3, frequency="daily"))

    assert excinfo.value.kind == ErrorKind.PERIOD_LIMIT
    assert "1095" in excinfo.value.errors[0]


def test_period_limit_follows_context():
    ctx = CalculationContext(max_compounding_periods=2000)
    result = calculate_compound_interest(
        CompoundInterestInputs(principal=1000, rate=8, years=3, frequency="daily"), ctx
    )
    assert result.periods == 1095


def test_compound_growth_factor():
    assert isclose(compound_growth_factor(12, 12, 1), 1.126825, abs_tol=1e-6)
    assert compound_growth_factor(0, 4, 10) == 1.0


def test_compound_interest_overflow_is_degenerate():
    inputs = CompoundInterestInputs(principal=1000, rate=100, years=50)

    with pytest.raises(CalculationError) as excinfo:
        calculate_compound_interest(inputs)

    assert excinfo.value.kind == ErrorKind.DEGENERATE
    assert "out of range" in excinfo.value.errors[0]


def test_simple_interest_at_largest_inputs_is_exact():
    result = calculate_simple_interest(SimpleInterestInputs(principal=1e12, rate=100, time=100))

    assert isclose(result.simple_interest, 1e14)
    assert isclose(result.total_amount, 1.01e14)
