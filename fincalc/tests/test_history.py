import pytest

from fincalc.core.history import HistoryStore
from fincalc.core.loan import calculate_loan
from fincalc.schemas.loan import LoanInputs


def _loan(principal):
    inputs = LoanInputs(principal=principal, rate=10, years=1)
    return inputs, calculate_loan(inputs)


def test_newest_first_and_trimmed():
    store = HistoryStore(max_items=3)
    for principal in (1000, 2000, 3000, 4000):
        store.add("loan", *_loan(principal))

    assert len(store) == 3
    assert [entry.inputs["principal"] for entry in store.entries()] == [4000, 3000, 2000]


def test_filter_by_calculator():
    store = HistoryStore()
    store.add("loan", *_loan(1000))
    store.add("mortgage", *_loan(2000))

    assert [entry.calculator for entry in store.entries("loan")] == ["loan"]
    assert store.entries("sip") == []


def test_only_scalar_results_kept():
    store = HistoryStore()
    entry = store.add("loan", *_loan(1000))

    assert "monthly_payment" in entry.results
    assert "schedule" not in entry.results
    assert "warnings" not in entry.results
    assert entry.timestamp.tzinfo is not None


def test_clear():
    store = HistoryStore()
    store.add("loan", *_loan(1000))
    store.clear()
    assert len(store) == 0


def test_max_items_must_be_positive():
    with pytest.raises(ValueError):
        HistoryStore(max_items=0)
