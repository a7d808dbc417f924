from datetime import date
from decimal import Decimal
from typing import Iterable

from moneytor.config import DEFAULT_SETTINGS, Settings
from moneytor.constants import COMPLETED, EXCEEDED, EXCEEDED_THRESHOLD, ON_TRACK, WARNING
from moneytor.domain import EXPENSE, ZERO, Target, TargetProgress, Transaction, is_positive, to_cents
from moneytor.errors import InvalidTargetError
from moneytor.periods import as_date, days_between


def check_target(t: Target) -> None:
    if not is_positive(t.target_amount):
        raise InvalidTargetError(
            f"Target {t.name!r} must have a positive, finite amount, got {t.target_amount}"
        )
    if t.period_start >= t.period_end:
        raise InvalidTargetError(
            f"Target {t.name!r} period must start before it ends "
            f"({t.period_start} >= {t.period_end})"
        )


def matches_target(t: Target, tx: Transaction) -> bool:
    return (
        tx.kind == EXPENSE
        and t.period_start <= tx.date <= t.period_end
        and (t.category_id is None or tx.category_id == t.category_id)
    )


def current_spending(t: Target, trans: Iterable[Transaction]) -> Decimal:
    return sum((tx.amount for tx in trans if matches_target(t, tx)), ZERO)


def target_status(t: Target, percentage: float, settings: Settings = DEFAULT_SETTINGS) -> str:
    if not t.is_active:
        return COMPLETED
    if percentage >= EXCEEDED_THRESHOLD:
        return EXCEEDED
    if percentage >= settings.warning_threshold:
        return WARNING
    return ON_TRACK


def evaluate_target(
    t: Target,
    trans: Iterable[Transaction],
    as_of: date,
    settings: Settings = DEFAULT_SETTINGS,
) -> TargetProgress:
    """Compute spend-to-date and status for a budget target.

    `days_remaining` counts calendar days from `as_of` to the end of the
    period: 0 on the last day, negative once the period has ended.
    """
    check_target(t)
    spent = current_spending(t, trans)
    percentage = float(spent * 100 / t.target_amount)

    return TargetProgress(
        target_id=t.id,
        current_spending=spent,
        percentage=percentage,
        remaining_amount=t.target_amount - spent,
        days_remaining=days_between(as_date(as_of), t.period_end),
        status=target_status(t, percentage, settings),
    )


def daily_allowance(progress: TargetProgress) -> Decimal:
    """Amount that can still be spent per remaining day, 0 when nothing is left."""
    if progress.days_remaining <= 0 or progress.remaining_amount <= 0:
        return ZERO
    return to_cents(progress.remaining_amount / progress.days_remaining)
