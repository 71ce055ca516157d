from datetime import date
from math import isclose

import pytest
from pydantic import ValidationError

from fincalc.core.tax import (
    apply_slabs,
    calculate_capital_gains,
    calculate_gst,
    calculate_hra,
    calculate_income_tax,
    calculate_salary,
    income_tax_slabs,
    months_between,
)
from fincalc.schemas.tax import CapitalGainsInputs, GSTInputs, HRAInputs, IncomeTaxInputs, SalaryInputs


def test_new_regime_reference_income():
    result = calculate_income_tax(IncomeTaxInputs(annual_income=1275000))

    assert result.taxable_income == 1200000
    assert isclose(result.income_tax, 80000)
    assert isclose(result.cess, 3200)
    assert isclose(result.total_tax, 83200)
    assert result.marginal_rate == 15
    assert [bracket.rate for bracket in result.brackets] == [0, 5, 10, 15]


def test_income_below_standard_deduction_pays_nothing():
    result = calculate_income_tax(IncomeTaxInputs(annual_income=60000))
    assert result.taxable_income == 0.0
    assert result.total_tax == 0.0
    assert result.marginal_rate == 0.0
    assert result.effective_rate == 0.0


@pytest.mark.parametrize("regime", ["old", "new"])
@pytest.mark.parametrize("age", [30, 65, 85])
def test_tax_never_decreases_with_income(regime, age):
    previous = -1.0
    for income in range(0, 3000001, 25000):
        tax = calculate_income_tax(IncomeTaxInputs(annual_income=income, age=age, regime=regime)).total_tax
        assert tax >= previous
        previous = tax


@pytest.mark.parametrize("regime", ["old", "new"])
def test_top_marginal_rate(regime):
    result = calculate_income_tax(IncomeTaxInputs(annual_income=5000000, regime=regime))
    assert result.marginal_rate == 30


@pytest.mark.parametrize("age, expected", [(45, 22500), (65, 20000), (85, 10000)])
def test_old_regime_senior_exemptions(age, expected):
    result = calculate_income_tax(IncomeTaxInputs(annual_income=600000, age=age, regime="old"))

    assert result.taxable_income == 550000
    assert isclose(result.income_tax, expected)


def test_old_regime_deductions_lower_taxable_income():
    result = calculate_income_tax(IncomeTaxInputs(annual_income=1000000, deductions=150000, regime="old"))
    assert result.taxable_income == 800000


def test_super_senior_slabs_skip_five_percent_band():
    rates = [slab.rate for slab in income_tax_slabs("old", 80)]
    assert rates == [0, 20, 30]


def test_apply_slabs_only_taxes_slice_inside_each_slab():
    tax, brackets = apply_slabs(800000, income_tax_slabs("new", 30))

    assert isclose(tax, 20000 + 10000)
    assert brackets[-1].taxable_amount == 100000


def test_gst_exclusive_intra_state():
    result = calculate_gst(GSTInputs(amount=1000, gst_rate=18))

    assert isclose(result.gst_amount, 180)
    assert isclose(result.total_amount, 1180)
    assert isclose(result.cgst, 90) and isclose(result.sgst, 90)
    assert result.igst == 0.0


def test_gst_inter_state_is_igst():
    result = calculate_gst(GSTInputs(amount=1000, gst_rate=18, supply="inter_state"))
    assert isclose(result.igst, 180)
    assert result.cgst == result.sgst == 0.0


def test_gst_inclusive_extracts_tax():
    result = calculate_gst(GSTInputs(amount=1180, gst_rate=18, gst_type="inclusive"))

    assert isclose(result.original_amount, 1000)
    assert isclose(result.gst_amount, 180)
    assert result.total_amount == 1180


def test_hra_least_of_three():
    result = calculate_hra(HRAInputs(basic_salary=600000, hra_received=300000, rent_paid=240000, city="metro"))

    assert result.salary_percentage_limit == 300000
    assert isclose(result.rent_over_ten_percent, 180000)
    assert isclose(result.exemption, 180000)
    assert isclose(result.taxable_hra, 120000)


def test_hra_rent_below_ten_percent_of_salary():
    result = calculate_hra(HRAInputs(basic_salary=600000, hra_received=100000, rent_paid=50000))
    assert result.exemption == 0.0
    assert result.taxable_hra == 100000


def test_salary_breakdown_new_regime():
    result = calculate_salary(SalaryInputs(ctc=1200000))

    assert isclose(result.basic_salary, 50000)
    assert isclose(result.special_allowance, 24000)
    assert isclose(result.annual_net_salary, 993332)
    assert isclose(result.net_salary, 993332 / 12)


def test_salary_old_regime_counts_pf_as_deduction():
    new = calculate_salary(SalaryInputs(ctc=1200000, regime="new"))
    old = calculate_salary(SalaryInputs(ctc=1200000, regime="old"))
    assert old.income_tax != new.income_tax


@pytest.mark.parametrize(
    "start, end, expected",
    [
        (date(2023, 1, 15), date(2024, 1, 15), 12),
        (date(2023, 1, 15), date(2024, 1, 14), 11),
        (date(2023, 1, 31), date(2023, 3, 1), 1),
        (date(2023, 5, 1), date(2023, 5, 1), 0),
    ],
)
def test_months_between(start, end, expected):
    assert months_between(start, end) == expected


def test_equity_long_term_gain():
    result = calculate_capital_gains(
        CapitalGainsInputs(
            asset_type="equity",
            purchase_price=100000,
            sale_price=300000,
            purchase_date=date(2020, 1, 1),
            sale_date=date(2022, 1, 1),
        )
    )

    assert result.term == "long"
    assert result.exemption == 100000
    assert isclose(result.tax, 10000)
    assert isclose(result.total_tax, 10400)


def test_equity_short_term_gain():
    result = calculate_capital_gains(
        CapitalGainsInputs(
            asset_type="equity",
            purchase_price=100000,
            sale_price=150000,
            purchase_date=date(2023, 1, 1),
            sale_date=date(2023, 7, 1),
        )
    )

    assert result.term == "short"
    assert result.tax_rate == 15
    assert isclose(result.tax, 7500)


def test_exactly_twelve_months_is_short_term():
    result = calculate_capital_gains(
        CapitalGainsInputs(
            asset_type="equity",
            purchase_price=100,
            sale_price=200,
            purchase_date=date(2023, 1, 15),
            sale_date=date(2024, 1, 15),
        )
    )
    assert result.holding_months == 12
    assert result.term == "short"


def test_debt_short_term_uses_slab_rate():
    result = calculate_capital_gains(
        CapitalGainsInputs(
            asset_type="debt",
            purchase_price=100000,
            sale_price=110000,
            purchase_date=date(2023, 1, 1),
            sale_date=date(2024, 1, 1),
            slab_rate=20,
        )
    )
    assert result.tax_rate == 20
    assert isclose(result.tax, 2000)


def test_capital_loss_pays_no_tax():
    result = calculate_capital_gains(
        CapitalGainsInputs(
            asset_type="property",
            purchase_price=500000,
            sale_price=400000,
            purchase_date=date(2015, 1, 1),
            sale_date=date(2020, 1, 1),
        )
    )

    assert result.capital_gain == -100000
    assert result.total_tax == 0.0
    assert result.exemption == 0.0


def test_sale_before_purchase_rejected():
    with pytest.raises(ValidationError):
        CapitalGainsInputs(
            asset_type="gold",
            purchase_price=100,
            sale_price=100,
            purchase_date=date(2024, 1, 2),
            sale_date=date(2024, 1, 1),
        )
