from ledger.domain import Transaction
from ledger.filters import by_month, filter_transactions, iter_transactions


def make_sample():
    return (
        Transaction(3, "Coffee beans", -18, "food", "2026-10-05"),
        Transaction(2, "Flight to Rome", -240, "travel", "2026-10-01"),
        Transaction(1, "COFFEE shop", -4, "food", "2026-09-28"),
    )


def test_empty_filters_match_everything():
    trans = make_sample()
    assert filter_transactions(trans) == trans
    assert filter_transactions(trans, "", "") == trans


def test_search_is_case_insensitive_and_keeps_order():
    result = filter_transactions(make_sample(), "coffee")
    assert [t.id for t in result] == [3, 1]


def test_search_and_category_combine():
    trans = make_sample()
    assert [t.id for t in filter_transactions(trans, "o", "travel")] == [2]
    assert filter_transactions(trans, "coffee", "travel") == ()


def test_no_match_returns_empty():
    trans = make_sample()
    assert filter_transactions(trans, "zzz", "") == ()
    assert len(trans) == 3


def test_predicates_compose():
    result = list(iter_transactions(make_sample(), by_month("2026-10")))
    assert [t.id for t in result] == [3, 2]
