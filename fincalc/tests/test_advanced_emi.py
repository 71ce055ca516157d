from math import isclose

import pytest
from pydantic import ValidationError

from fincalc.core.context import CalculationContext
from fincalc.core.loan import calculate_advanced_emi
from fincalc.schemas.loan import AdvancedEMIInputs


def test_no_prepayment_runs_full_tenure():
    result = calculate_advanced_emi(AdvancedEMIInputs(loan_amount=1000000, interest_rate=10, loan_tenure=20))

    assert result.tenure_months == 240
    assert result.payoff_months == 240
    assert result.months_saved == 0
    assert isclose(result.interest_saved, 0.0, abs_tol=1e-3)
    assert isclose(result.total_amount, 1000000 + result.total_interest)


def test_yearly_prepayment_lands_on_twelfth_month():
    result = calculate_advanced_emi(
        AdvancedEMIInputs(
            loan_amount=1000000,
            interest_rate=10,
            loan_tenure=20,
            prepayment_amount=100000,
            prepayment_frequency="yearly",
        )
    )

    assert result.schedule[10].extra_payment == 0.0
    assert result.schedule[11].extra_payment == 100000
    assert result.schedule[12].extra_payment == 0.0
    assert result.months_saved > 0
    assert result.interest_saved > 0
    assert result.schedule[-1].balance == 0.0


def test_monthly_prepayment_beats_yearly():
    common = dict(loan_amount=500000, interest_rate=9, loan_tenure=120, tenure_type="months", prepayment_amount=2000)
    monthly = calculate_advanced_emi(AdvancedEMIInputs(prepayment_frequency="monthly", **common))
    yearly = calculate_advanced_emi(AdvancedEMIInputs(prepayment_frequency="yearly", **common))

    assert monthly.payoff_months < yearly.payoff_months
    assert monthly.total_interest < yearly.total_interest


def test_prepayment_larger_than_balance_settles_loan():
    result = calculate_advanced_emi(
        AdvancedEMIInputs(
            loan_amount=50000,
            interest_rate=12,
            loan_tenure=5,
            prepayment_amount=1000000,
            prepayment_frequency="monthly",
        )
    )

    assert result.payoff_months == 1
    assert result.schedule[0].balance == 0.0
    assert isclose(result.schedule[0].principal, 50000)


@pytest.mark.parametrize(
    "tenure, tenure_type",
    [(51, "years"), (601, "months"), (0.01, "months")],
)
def test_tenure_out_of_range_rejected(tenure, tenure_type):
    with pytest.raises(ValidationError):
        AdvancedEMIInputs(loan_amount=100000, interest_rate=10, loan_tenure=tenure, tenure_type=tenure_type)


def test_advanced_emi_cut_short_by_cap_warns():
    ctx = CalculationContext(max_amortization_months=12)
    result = calculate_advanced_emi(AdvancedEMIInputs(loan_amount=100000, interest_rate=10, loan_tenure=5), ctx)

    assert result.payoff_months == 12
    assert result.months_saved == 0
    assert result.interest_saved == 0.0
    assert result.warnings and "12 months" in result.warnings[0]
