import json
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from moneytor.domain import PERIOD_TYPES, Category, Goal, Target, Transaction, to_amount
from moneytor.errors import InvalidCategoryError, InvalidGoalError, InvalidTargetError, InvalidTransactionError
from moneytor.functional import validate_category, validate_goal, validate_target, validate_transaction
from moneytor.periods import generate_period_dates

IMMUTABLE_TRANSACTION_FIELDS = ("id", "user_id")


def _date(value) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _datetime(value) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _transaction(raw: dict) -> Transaction:
    return Transaction(
        **{
            **raw,
            "amount": to_amount(raw["amount"]),
            "date": _date(raw["date"]),
            "tags": frozenset(raw.get("tags", ())),
            "created_at": _datetime(raw.get("created_at")),
            "updated_at": _datetime(raw.get("updated_at")),
        }
    )


def _target(raw: dict) -> Target:
    return Target(
        **{
            **raw,
            "target_amount": to_amount(raw["target_amount"]),
            "period_start": _date(raw["period_start"]),
            "period_end": _date(raw["period_end"]),
        }
    )


def _goal(raw: dict) -> Goal:
    return Goal(
        **{
            **raw,
            "target_amount": to_amount(raw["target_amount"]),
            "current_amount": to_amount(raw.get("current_amount", 0)),
            "target_date": _date(raw.get("target_date")),
            "created_at": _date(raw.get("created_at")),
        }
    )


def load_seed(
    path: str,
) -> Tuple[
    Tuple[Category, ...],
    Tuple[Transaction, ...],
    Tuple[Target, ...],
    Tuple[Goal, ...],
]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f, parse_float=Decimal)

    categories = tuple(Category(**c) for c in data.get("categories", ()))
    transactions = tuple(_transaction(t) for t in data.get("transactions", ()))
    targets = tuple(_target(t) for t in data.get("targets", ()))
    goals = tuple(_goal(g) for g in data.get("goals", ()))

    return categories, transactions, targets, goals


def add_category(cats: Tuple[Category, ...], c: Category) -> Tuple[Category, ...]:
    checked = validate_category(c)
    if checked.is_left():
        raise InvalidCategoryError(checked.get_error()["message"])
    duplicate = any(
        x.user_id == c.user_id and x.kind == c.kind and x.name.strip().lower() == c.name.strip().lower()
        for x in cats
    )
    if duplicate:
        raise InvalidCategoryError(
            f'A {c.kind} category named "{c.name}" already exists'
        )
    return cats + (c,)


def toggle_category(cats: Tuple[Category, ...], cat_id: str) -> Tuple[Category, ...]:
    return tuple(
        replace(c, is_active=not c.is_active) if c.id == cat_id else c
        for c in cats
    )


def add_transaction(
    trans: Tuple[Transaction, ...], t: Transaction, cats: Iterable[Category]
) -> Tuple[Transaction, ...]:
    checked = validate_transaction(t, cats)
    if checked.is_left():
        raise InvalidTransactionError(checked.get_error())
    return trans + (t,)


def update_transaction(
    trans: Tuple[Transaction, ...],
    tx_id: str,
    cats: Iterable[Category],
    updated_at: Optional[datetime] = None,
    **changes,
) -> Tuple[Transaction, ...]:
    """Edit one transaction; every field but id and owner may change."""
    frozen = [name for name in IMMUTABLE_TRANSACTION_FIELDS if name in changes]
    if frozen:
        raise InvalidTransactionError({
            "error": "immutable_field",
            "message": f"Cannot change {', '.join(frozen)} of a transaction",
            "fields": frozen,
        })

    cats = tuple(cats)
    result = []
    for t in trans:
        if t.id == tx_id:
            if "tags" in changes:
                changes["tags"] = frozenset(changes["tags"])
            t = replace(t, updated_at=updated_at or t.updated_at, **changes)
            checked = validate_transaction(t, cats, require_active=False)
            if checked.is_left():
                raise InvalidTransactionError(checked.get_error())
        result.append(t)
    return tuple(result)


def delete_transactions(
    trans: Tuple[Transaction, ...], tx_ids: Iterable[str]
) -> Tuple[Transaction, ...]:
    doomed = frozenset(tx_ids)
    return tuple(t for t in trans if t.id not in doomed)


def recategorize_transactions(
    trans: Tuple[Transaction, ...],
    tx_ids: Iterable[str],
    cat_id: str,
    cats: Iterable[Category],
) -> Tuple[Transaction, ...]:
    """Move a batch of transactions to another category.

    The new category must be active, and the whole batch is rejected if
    any transaction's kind differs from its kind.
    """
    selected = frozenset(tx_ids)
    cats = tuple(cats)
    result = []
    for t in trans:
        if t.id in selected:
            t = replace(t, category_id=cat_id)
            checked = validate_transaction(t, cats)
            if checked.is_left():
                raise InvalidTransactionError(checked.get_error())
        result.append(t)
    return tuple(result)


def create_target(
    id: str,
    user_id: str,
    name: str,
    target_amount: Decimal,
    period_type: str,
    as_of: date,
    category_id: Optional[str] = None,
) -> Target:
    """Build a target whose period is derived from its type and `as_of`."""
    if period_type not in PERIOD_TYPES:
        raise InvalidTargetError(f"Unknown period type: {period_type}")
    start, end = generate_period_dates(period_type, as_of)
    t = Target(
        id=id,
        user_id=user_id,
        name=name,
        target_amount=target_amount,
        period_type=period_type,
        period_start=start,
        period_end=end,
        category_id=category_id,
    )
    checked = validate_target(t)
    if checked.is_left():
        raise InvalidTargetError(checked.get_error()["message"])
    return t


def toggle_target(targets: Tuple[Target, ...], target_id: str) -> Tuple[Target, ...]:
    return tuple(
        replace(t, is_active=not t.is_active) if t.id == target_id else t
        for t in targets
    )


def add_goal(goals: Tuple[Goal, ...], g: Goal, as_of: date) -> Tuple[Goal, ...]:
    checked = validate_goal(g, as_of)
    if checked.is_left():
        raise InvalidGoalError(checked.get_error()["message"])
    return goals + (g,)


def toggle_goal_achieved(goals: Tuple[Goal, ...], goal_id: str) -> Tuple[Goal, ...]:
    return tuple(
        replace(g, achieved=not g.achieved) if g.id == goal_id else g
        for g in goals
    )


def replace_goal(goals: Tuple[Goal, ...], g: Goal) -> Tuple[Goal, ...]:
    """Swap in the record returned by a fund operation."""
    return tuple(g if x.id == g.id else x for x in goals)
