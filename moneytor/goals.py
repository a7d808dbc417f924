from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Tuple

from moneytor.config import DEFAULT_SETTINGS, Settings
from moneytor.constants import ACHIEVED, BEHIND, MILESTONES, ON_TRACK, OVERDUE
from moneytor.domain import ZERO, FundResult, Goal, GoalProgress, is_positive, to_amount
from moneytor.errors import InsufficientFundsError, InvalidAmountError, InvalidGoalError
from moneytor.periods import as_date, days_between

DEPOSIT = "deposit"
WITHDRAW = "withdraw"


def check_goal(g: Goal) -> None:
    if not is_positive(g.target_amount):
        raise InvalidGoalError(
            f"Goal {g.name!r} must have a positive, finite target amount, got {g.target_amount}"
        )
    if not g.current_amount.is_finite():
        raise InvalidGoalError(f"Goal {g.name!r} has a non-finite balance: {g.current_amount}")


def goal_percentage(g: Goal) -> float:
    """Progress towards the target, clamped to [0, 100]."""
    check_goal(g)
    raw = float(g.current_amount * 100 / g.target_amount)
    return max(0.0, min(100.0, raw))


def is_achieved(g: Goal) -> bool:
    return g.achieved or g.current_amount >= g.target_amount


def elapsed_percentage(g: Goal, as_of: date) -> Optional[float]:
    """Share of the time between creation and deadline that has passed."""
    if g.target_date is None or g.created_at is None:
        return None
    total = days_between(g.created_at, g.target_date)
    if total <= 0:
        return 100.0
    elapsed = days_between(g.created_at, as_of)
    return max(0.0, min(100.0, elapsed * 100 / total))


def goal_status(
    g: Goal,
    percentage: float,
    days_remaining: Optional[int],
    as_of: date,
    settings: Settings = DEFAULT_SETTINGS,
) -> str:
    if is_achieved(g):
        return ACHIEVED
    if days_remaining is None:
        return ON_TRACK
    if days_remaining < 0:
        return OVERDUE

    elapsed = elapsed_percentage(g, as_of)
    if elapsed is not None:
        behind = percentage < elapsed
    else:
        behind = days_remaining < settings.behind_fallback_days and percentage < 100
    return BEHIND if behind else ON_TRACK


def evaluate_goal(g: Goal, as_of: date, settings: Settings = DEFAULT_SETTINGS) -> GoalProgress:
    as_of = as_date(as_of)
    percentage = goal_percentage(g)
    days_remaining = None
    if g.target_date is not None:
        days_remaining = days_between(as_of, g.target_date)

    return GoalProgress(
        goal_id=g.id,
        percentage=percentage,
        remaining_amount=max(ZERO, g.target_amount - g.current_amount),
        days_remaining=days_remaining,
        status=goal_status(g, percentage, days_remaining, as_of, settings),
    )


def crossed_milestones(
    before: float, after: float, milestones: Iterable[int] = MILESTONES
) -> Tuple[int, ...]:
    """Milestones passed when moving from `before` to `after`, in either direction.

    A milestone counts as passed when it lies in (low, high], so landing
    exactly on a milestone reports it and starting on one does not.
    """
    low, high = min(before, after), max(before, after)
    return tuple(m for m in sorted(milestones) if low < m <= high)


def _check_amount(amount: Decimal) -> Decimal:
    amount = to_amount(amount)
    if not is_positive(amount):
        raise InvalidAmountError(f"Amount must be a positive number, got {amount}")
    return amount


def deposit(g: Goal, amount: Decimal, settings: Settings = DEFAULT_SETTINGS) -> FundResult:
    amount = _check_amount(amount)
    before = goal_percentage(g)
    updated = replace(g, current_amount=g.current_amount + amount)
    after = goal_percentage(updated)

    completed = (
        not g.achieved
        and g.current_amount < g.target_amount <= updated.current_amount
    )
    return FundResult(
        operation=DEPOSIT,
        goal=updated,
        amount=amount,
        previous_percentage=before,
        percentage=after,
        milestones=crossed_milestones(before, after, settings.milestones),
        completed=completed,
    )


def withdraw(g: Goal, amount: Decimal, settings: Settings = DEFAULT_SETTINGS) -> FundResult:
    amount = _check_amount(amount)
    before = goal_percentage(g)
    if amount > g.current_amount:
        raise InsufficientFundsError(amount, g.current_amount)
    updated = replace(g, current_amount=g.current_amount - amount)
    after = goal_percentage(updated)

    return FundResult(
        operation=WITHDRAW,
        goal=updated,
        amount=amount,
        previous_percentage=before,
        percentage=after,
        milestones=crossed_milestones(before, after, settings.milestones),
    )
