from math import isclose

import pytest
from pydantic import ValidationError

from fincalc.core.context import CalculationContext
from fincalc.core.errors import CalculationError, ErrorKind
from fincalc.core.savings import (
    annuity_future_value,
    calculate_dividend_yield,
    calculate_education_goal,
    calculate_epf,
    calculate_fd,
    calculate_gold,
    calculate_investment,
    calculate_lumpsum,
    calculate_ppf,
    calculate_rd,
    calculate_sip,
    calculate_swp,
)
from fincalc.schemas.savings import (
    DividendYieldInputs,
    EducationGoalInputs,
    EPFInputs,
    FDInputs,
    GoldInputs,
    InvestmentInputs,
    LumpsumInputs,
    PPFInputs,
    RDInputs,
    SIPInputs,
    SWPInputs,
)


def test_sip_end_of_month():
    result = calculate_sip(SIPInputs(monthly_investment=5000, annual_return=12, years=10))
    expected = 5000 * ((1.01 ** 120 - 1) / 0.01)

    assert result.total_investment == 600000
    assert isclose(result.maturity_amount, expected, rel_tol=1e-9)
    assert isclose(result.total_gains, expected - 600000, rel_tol=1e-9)
    assert len(result.yearly_breakdown) == 10
    assert isclose(result.yearly_breakdown[-1].balance, result.maturity_amount)


def test_sip_beginning_of_month_earns_one_more_period():
    end = calculate_sip(SIPInputs(monthly_investment=5000, annual_return=12, years=10))
    beginning = calculate_sip(SIPInputs(monthly_investment=5000, annual_return=12, years=10, timing="beginning"))

    assert isclose(beginning.maturity_amount, end.maturity_amount * 1.01, rel_tol=1e-12)
    assert beginning.total_investment == end.total_investment


def test_sip_partial_year_has_final_row():
    result = calculate_sip(SIPInputs(monthly_investment=1000, annual_return=6, years=1.5))
    assert [row.year for row in result.yearly_breakdown] == [1, 2]
    assert result.yearly_breakdown[-1].total_contributed == 18000


def test_annuity_future_value_zero_rate():
    assert annuity_future_value(100, 0, 12) == 1200
    assert annuity_future_value(100, 0, 12, due=True) == 1200


def test_lumpsum():
    result = calculate_lumpsum(LumpsumInputs(principal=100000, annual_return=10, years=3))

    assert isclose(result.maturity_amount, 133100, rel_tol=1e-9)
    assert [round(row.balance, 2) for row in result.yearly_breakdown] == [110000, 121000, 133100]


def test_fd_quarterly():
    result = calculate_fd(FDInputs(principal=100000, annual_rate=8, years=1))

    assert isclose(result.maturity_amount, 108243.216, rel_tol=1e-9)
    assert isclose(result.effective_yield, 8.243216, rel_tol=1e-9)


def test_rd_zero_rate():
    result = calculate_rd(RDInputs(monthly_deposit=1000, annual_rate=0, years=2))
    assert result.maturity_amount == 24000
    assert result.total_interest == 0.0


def test_rd_grows_with_rate():
    result = calculate_rd(RDInputs(monthly_deposit=1000, annual_rate=7, years=5))
    assert result.maturity_amount > result.total_deposits == 60000


def test_ppf_matches_closed_form():
    result = calculate_ppf(PPFInputs(yearly_investment=100000))
    r = 0.071
    expected = 100000 * (1 + r) * ((1 + r) ** 15 - 1) / r

    assert result.rate == 7.1
    assert result.total_investment == 1500000
    assert isclose(result.maturity_amount, expected, rel_tol=1e-9)
    assert len(result.yearly_breakdown) == 15


@pytest.mark.parametrize(
    "payload",
    [
        {"yearly_investment": 400},
        {"yearly_investment": 200000},
        {"yearly_investment": 10000, "years": 14},
    ],
)
def test_ppf_limits(payload):
    with pytest.raises(ValidationError):
        PPFInputs(**payload)


def test_epf_single_year():
    result = calculate_epf(EPFInputs(basic_salary=10000, years=1))

    assert result.total_employee_contribution == 14400
    assert result.total_employer_contribution == 14400
    assert isclose(result.maturity_amount, 31248)
    assert result.rate == 8.5


def test_gold():
    result = calculate_gold(
        GoldInputs(investment_amount=100000, gold_price_per_gram=5000, years=5, expected_annual_return=10)
    )

    assert isclose(result.grams_of_gold, 20)
    assert isclose(result.future_value, 161051, rel_tol=1e-9)
    assert isclose(result.annualized_return, 10, rel_tol=1e-9)


def test_gold_negative_return():
    result = calculate_gold(
        GoldInputs(investment_amount=100000, gold_price_per_gram=5000, years=1, expected_annual_return=-10)
    )
    assert isclose(result.future_value, 90000)
    assert result.total_returns < 0


def test_dividend_yield():
    result = calculate_dividend_yield(DividendYieldInputs(stock_price=100, annual_dividend=5, number_of_shares=200))

    assert isclose(result.dividend_yield, 5)
    assert result.annual_dividend_income == 1000
    assert result.quarterly_dividend_income == 250
    assert result.total_investment == 20000


def test_investment_zero_return():
    result = calculate_investment(
        InvestmentInputs(initial_amount=1000, monthly_contribution=100, annual_return=0, years=2)
    )

    assert result.final_amount == 3400
    assert result.total_growth == 0.0
    assert isclose(result.annualized_return, 0.0, abs_tol=1e-12)


def test_swp_zero_return_runs_out():
    result = calculate_swp(SWPInputs(total_corpus=100000, monthly_withdrawal=10000, expected_return=0))

    assert result.months == 10
    assert result.depleted
    assert result.total_withdrawn == 100000
    assert result.warnings == []


def test_swp_last_withdrawal_is_what_remains():
    result = calculate_swp(SWPInputs(total_corpus=105000, monthly_withdrawal=25000, expected_return=0))

    assert result.months == 5
    assert result.last_withdrawal_amount == 5000
    assert result.remaining_corpus == 0.0


def test_swp_sustainable_hits_horizon():
    # 1% a month on 1M is 10k, far above the 1k withdrawal
    result = calculate_swp(SWPInputs(total_corpus=1000000, monthly_withdrawal=1000, expected_return=12))

    assert result.months == 600
    assert not result.depleted
    assert result.years == 50
    assert result.warnings


def test_education_goal_zero_rates():
    result = calculate_education_goal(
        EducationGoalInputs(
            child_age=5,
            starting_age=18,
            course_duration=4,
            current_cost=100000,
            expected_inflation=0,
            expected_return=0,
        )
    )

    assert result.total_future_cost == 400000
    assert result.required_corpus == 400000
    assert isclose(result.monthly_investment, 400000 / 156)
    assert result.inflation_impact == 0.0


def test_education_goal_existing_savings_cover_cost():
    result = calculate_education_goal(
        EducationGoalInputs(
            child_age=10,
            starting_age=18,
            course_duration=2,
            current_cost=50000,
            expected_inflation=5,
            existing_savings=10000000,
            expected_return=8,
        )
    )
    assert result.required_corpus == 0.0
    assert result.monthly_investment == 0.0


def test_education_goal_start_must_follow_current_age():
    with pytest.raises(ValidationError):
        EducationGoalInputs(
            child_age=18, starting_age=18, course_duration=4, current_cost=1, expected_inflation=0, expected_return=0
        )


@pytest.mark.parametrize(
    "calculate, inputs",
    [
        (calculate_sip, SIPInputs(monthly_investment=1e7, annual_return=30, years=50)),
        (calculate_lumpsum, LumpsumInputs(principal=1e12, annual_return=50, years=50)),
        (calculate_investment, InvestmentInputs(initial_amount=1e12, annual_return=50, years=50)),
    ],
)
def test_growth_beyond_safe_range_is_degenerate(calculate, inputs):
    with pytest.raises(CalculationError) as excinfo:
        calculate(inputs)

    assert excinfo.value.kind == ErrorKind.DEGENERATE


@pytest.mark.parametrize("blank", ["", "   "])
def test_ppf_blank_rate_uses_current_rate(blank):
    inputs = PPFInputs(yearly_investment=1000, rate=blank)
    result = calculate_ppf(inputs, CalculationContext(ppf_rate=7.1))

    assert inputs.rate is None
    assert result.rate == 7.1
    assert result.maturity_amount > result.total_investment


def test_epf_blank_rate_uses_current_rate():
    inputs = EPFInputs(basic_salary=10000, years=1, rate="")
    result = calculate_epf(inputs, CalculationContext(epf_rate=8.25))

    assert inputs.rate is None
    assert result.rate == 8.25
