from datetime import date, datetime
from itertools import islice

import pytest

from moneytor.domain import Category, Transaction
from moneytor.filters import (
    all_of,
    all_tags,
    by_amount_range,
    by_category,
    by_date_range,
    by_kind,
    by_search,
    by_tags,
    iter_transactions,
    sort_transactions,
)


CATS = (
    Category("food", "u1", "Groceries", "expense"),
    Category("transport", "u1", "Commute", "expense"),
    Category("salary", "u1", "Payroll", "income"),
)


def make_sample():
    return (
        Transaction("t1", "u1", "food", 300, "expense", date(2026, 10, 1), "Groceries", frozenset({"home"})),
        Transaction("t2", "u1", "transport", 200, "expense", date(2026, 10, 2), "Bus pass"),
        Transaction("t3", "u1", "salary", 5000, "income", date(2026, 10, 3), "Salary", frozenset({"work"})),
        Transaction("t4", "u1", "food", 700, "expense", date(2026, 10, 4), "Restaurant", frozenset({"home", "fun"}),
                    created_at=datetime(2026, 10, 4, 20, 0)),
    )


def test_by_category():
    result = list(filter(by_category("food"), make_sample()))
    assert [t.id for t in result] == ["t1", "t4"]


def test_by_kind():
    assert [t.id for t in filter(by_kind("income"), make_sample())] == ["t3"]


def test_by_date_range_open_ended():
    trans = make_sample()
    assert [t.id for t in filter(by_date_range(date(2026, 10, 2), date(2026, 10, 3)), trans)] == ["t2", "t3"]
    assert [t.id for t in filter(by_date_range(start=date(2026, 10, 4)), trans)] == ["t4"]
    assert len(list(filter(by_date_range(), trans))) == 4


def test_by_amount_range():
    assert [t.id for t in filter(by_amount_range(250, 1000), make_sample())] == ["t1", "t4"]


def test_by_tags_matches_any_tag():
    trans = make_sample()
    assert [t.id for t in filter(by_tags("home"), trans)] == ["t1", "t4"]
    assert [t.id for t in filter(by_tags("work", "fun"), trans)] == ["t3", "t4"]
    assert [t.id for t in filter(by_tags("home", "travel"), trans)] == ["t1", "t4"]
    assert len(list(filter(by_tags(), trans))) == 4


def test_by_search_is_case_insensitive():
    assert [t.id for t in filter(by_search("  bus "), make_sample())] == ["t2"]


def test_by_search_matches_category_name_and_tags():
    trans = make_sample()
    # "Commute" only appears as the name of t2's category
    assert [t.id for t in filter(by_search("commute", CATS), trans)] == ["t2"]
    assert [t.id for t in filter(by_search("WORK"), trans)] == ["t3"]
    assert [t.id for t in filter(by_search("fun", CATS), trans)] == ["t4"]


def test_all_of_combines_filters():
    pred = all_of(by_kind("expense"), by_amount_range(min=250))
    assert [t.id for t in filter(pred, make_sample())] == ["t1", "t4"]


def test_iter_transactions_is_lazy():
    calls = {"n": 0}

    def pred(t):
        calls["n"] += 1
        return t.kind == "expense"

    first = list(islice(iter_transactions(make_sample(), pred), 1))
    assert first[0].id == "t1"
    assert calls["n"] == 1


def test_sort_transactions():
    trans = make_sample()
    assert [t.id for t in sort_transactions(trans)] == ["t4", "t3", "t2", "t1"]
    assert [t.id for t in sort_transactions(trans, "amount", descending=False)] == ["t2", "t1", "t4", "t3"]
    assert sort_transactions(trans, "created")[0].id == "t4"
    # id order is food, salary, transport; name order is Commute, Groceries, Payroll
    by_name = sort_transactions(trans, "category", descending=False, cats=CATS)
    assert [t.id for t in by_name] == ["t2", "t1", "t4", "t3"]
    with pytest.raises(ValueError):
        sort_transactions(trans, "colour")


def test_all_tags():
    assert all_tags(make_sample()) == ("fun", "home", "work")


def test_by_amount_range_with_cent_bounds():
    t = Transaction("t9", "u1", "food", 0.1, "expense", date(2026, 10, 5))
    assert by_amount_range(min=0.1, max=0.1)(t)
