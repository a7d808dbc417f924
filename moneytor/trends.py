from datetime import date
from typing import Iterable, Optional

import pandas as pd

from moneytor.domain import EXPENSE, INCOME, Category, Transaction

COLUMNS = ["date", "amount", "kind", "category_id"]


def transactions_frame(trans: Iterable[Transaction]) -> pd.DataFrame:
    df = pd.DataFrame(
        [{"date": t.date, "amount": float(t.amount), "kind": t.kind, "category_id": t.category_id} for t in trans],
        columns=COLUMNS,
    )
    df["date"] = pd.to_datetime(df["date"])
    df["amount"] = df["amount"].astype(float)
    return df


def _change(s: pd.Series) -> pd.Series:
    """Percentage change against the previous month, None when there is nothing to compare to."""
    prev = s.shift(1)
    change = (s - prev) * 100 / prev.where(prev != 0)
    return change.astype(object).where(change.notna(), None)


def monthly_trends(trans: Iterable[Transaction], as_of: date, months: int = 6) -> pd.DataFrame:
    """Income, expense and net per calendar month for the `months` months ending at `as_of`.

    Columns: month ('YYYY-MM'), income, expense, net, income_change,
    expense_change. Months without transactions are present with zeros.
    """
    if months <= 0:
        raise ValueError("months must be positive")

    index = pd.period_range(end=pd.Period(year=as_of.year, month=as_of.month, freq="M"), periods=months, freq="M")
    df = transactions_frame(trans)
    if df.empty:
        totals = pd.DataFrame(0.0, index=index, columns=[INCOME, EXPENSE])
    else:
        df["month"] = df["date"].dt.to_period("M")
        totals = df.pivot_table(index="month", columns="kind", values="amount", aggfunc="sum")
        totals = totals.reindex(index=index, columns=[INCOME, EXPENSE]).fillna(0.0)

    totals = totals.astype(float)
    totals.columns.name = None
    totals["net"] = totals[INCOME] - totals[EXPENSE]
    totals["income_change"] = _change(totals[INCOME])
    totals["expense_change"] = _change(totals[EXPENSE])
    totals.index = totals.index.astype(str)
    totals.index.name = "month"
    return totals.reset_index()


def spending_by_category(
    trans: Iterable[Transaction],
    cats: Iterable[Category],
    start: Optional[date] = None,
    end: Optional[date] = None,
    top: Optional[int] = None,
) -> pd.DataFrame:
    """Expense totals per category with their share of all spending, largest first."""
    names = {c.id: c.name for c in cats}
    df = transactions_frame(trans)
    df = df[df["kind"] == EXPENSE]
    if start is not None:
        df = df[df["date"] >= pd.Timestamp(start)]
    if end is not None:
        df = df[df["date"] <= pd.Timestamp(end)]

    if df.empty:
        return pd.DataFrame(columns=["category_id", "category", "total", "count", "share"])

    grouped = (
        df.groupby("category_id")["amount"]
        .agg(total="sum", count="count")
        .reset_index()
    )
    grouped["category"] = grouped["category_id"].map(lambda cid: names.get(cid, cid))
    grouped["share"] = grouped["total"] * 100 / grouped["total"].sum()
    grouped = grouped.sort_values(["total", "category"], ascending=[False, True], kind="mergesort")
    if top is not None:
        grouped = grouped.head(max(0, top))
    return grouped[["category_id", "category", "total", "count", "share"]].reset_index(drop=True)
