import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from moneytor.config import DEFAULT_SETTINGS, Settings
from moneytor.constants import (
    ACHIEVED,
    COMPLETED,
    DAYS_PER_MONTH,
    EXCEEDED,
    GOAL_STATUSES,
    OVERDUE,
    SEVERITY_HIGH,
    SEVERITY_MEDIUM,
    TARGET_STATUSES,
    WARNING,
)
from moneytor.domain import (
    EXPENSE,
    INCOME,
    ZERO,
    Alert,
    Category,
    Goal,
    GoalProgress,
    Target,
    TargetProgress,
    Transaction,
    to_cents,
)
from moneytor.errors import ProgressError
from moneytor.goals import evaluate_goal
from moneytor.periods import days_between
from moneytor.targets import evaluate_target

logger = logging.getLogger(__name__)

BUDGET_EXCEEDED = "budget_exceeded"
BUDGET_WARNING = "budget_warning"
GOAL_OVERDUE = "goal_overdue"
GOAL_DEADLINE = "goal_deadline"

TargetPair = Tuple[Target, TargetProgress]
GoalPair = Tuple[Goal, GoalProgress]


@dataclass(frozen=True)
class CategoryUsage:
    category: Category
    transaction_count: int
    total_amount: Decimal
    avg_amount: Decimal
    last_used: Optional[date]


@dataclass(frozen=True)
class TargetSummary:
    total_targets: int
    by_status: Dict[str, int]
    total_budget: Decimal
    total_spent: Decimal
    remaining_budget: Decimal
    average_percentage: float
    closest_to_limit: Optional[TargetPair]


@dataclass(frozen=True)
class GoalSummary:
    total_goals: int
    by_status: Dict[str, int]
    total_target: Decimal
    total_saved: Decimal
    total_remaining: Decimal
    average_percentage: float
    achievement_rate: float
    monthly_savings_rate: Decimal
    closest_to_completion: Optional[GoalPair]


@dataclass(frozen=True)
class TransactionStats:
    total_transactions: int
    total_income: Decimal
    total_expenses: Decimal
    balance: Decimal
    avg_transaction: Decimal


def category_usage(
    cats: Iterable[Category], trans: Iterable[Transaction]
) -> Tuple[CategoryUsage, ...]:
    counts: Dict[str, int] = defaultdict(int)
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    last_used: Dict[str, date] = {}

    for t in trans:
        counts[t.category_id] += 1
        totals[t.category_id] += t.amount
        if t.category_id not in last_used or t.date > last_used[t.category_id]:
            last_used[t.category_id] = t.date

    result = []
    for c in cats:
        n = counts.get(c.id, 0)
        total = totals.get(c.id, ZERO)
        result.append(CategoryUsage(
            category=c,
            transaction_count=n,
            total_amount=total,
            avg_amount=to_cents(total / n) if n else ZERO,
            last_used=last_used.get(c.id),
        ))
    return tuple(result)


def most_used_category(usage: Iterable[CategoryUsage]) -> Optional[CategoryUsage]:
    """Category with most transactions; ties go to the larger total, then the name."""
    used = [u for u in usage if u.transaction_count > 0]
    if not used:
        return None
    return min(
        used,
        key=lambda u: (-u.transaction_count, -u.total_amount, u.category.name, u.category.id),
    )


def evaluate_targets(
    targets: Iterable[Target],
    trans: Iterable[Transaction],
    as_of: date,
    settings: Settings = DEFAULT_SETTINGS,
) -> Tuple[Tuple[TargetPair, ...], Tuple[str, ...]]:
    """Evaluate every target, leaving out the malformed ones.

    Returns the (target, progress) pairs and the ids that were skipped.
    """
    trans = tuple(trans)
    pairs, skipped = [], []
    for t in targets:
        try:
            pairs.append((t, evaluate_target(t, trans, as_of, settings)))
        except ProgressError as e:
            logger.warning("Skipping target %s: %s", t.id, e)
            skipped.append(t.id)
    return tuple(pairs), tuple(skipped)


def evaluate_goals(
    goals: Iterable[Goal],
    as_of: date,
    settings: Settings = DEFAULT_SETTINGS,
) -> Tuple[Tuple[GoalPair, ...], Tuple[str, ...]]:
    pairs, skipped = [], []
    for g in goals:
        try:
            pairs.append((g, evaluate_goal(g, as_of, settings)))
        except ProgressError as e:
            logger.warning("Skipping goal %s: %s", g.id, e)
            skipped.append(g.id)
    return tuple(pairs), tuple(skipped)


def summarize_targets(pairs: Iterable[TargetPair]) -> TargetSummary:
    """Totals and averages cover active targets; counts cover all of them."""
    pairs = tuple(pairs)
    by_status = {s: 0 for s in TARGET_STATUSES}
    for _, p in pairs:
        by_status[p.status] += 1

    active = [(t, p) for t, p in pairs if p.status != COMPLETED]
    total_budget = sum((t.target_amount for t, _ in active), ZERO)
    total_spent = sum((p.current_spending for _, p in active), ZERO)
    average = sum(p.percentage for _, p in active) / len(active) if active else 0.0

    closest = None
    if active:
        closest = min(active, key=lambda tp: (-tp[1].percentage, tp[0].period_end, tp[0].name, tp[0].id))

    return TargetSummary(
        total_targets=len(pairs),
        by_status=by_status,
        total_budget=total_budget,
        total_spent=total_spent,
        remaining_budget=total_budget - total_spent,
        average_percentage=average,
        closest_to_limit=closest,
    )


def monthly_savings_rate(goals: Iterable[Goal], as_of: date) -> Decimal:
    """Linear estimate: each dated goal's savings spread over the months since it was created."""
    rate = ZERO
    for g in goals:
        if g.target_date is None or g.created_at is None:
            continue
        months = max(Decimal(1), days_between(g.created_at, as_of) / DAYS_PER_MONTH)
        rate += g.current_amount / months
    return to_cents(rate)


def summarize_goals(pairs: Iterable[GoalPair], as_of: date) -> GoalSummary:
    pairs = tuple(pairs)
    by_status = {s: 0 for s in GOAL_STATUSES}
    for _, p in pairs:
        by_status[p.status] += 1

    total = len(pairs)
    pending = [(g, p) for g, p in pairs if p.status != ACHIEVED]
    closest = None
    if pending:
        closest = min(
            pending,
            key=lambda gp: (
                -gp[1].percentage,
                gp[0].target_date is None,
                gp[0].target_date or date.max,
                gp[0].name,
                gp[0].id,
            ),
        )

    return GoalSummary(
        total_goals=total,
        by_status=by_status,
        total_target=sum((g.target_amount for g, _ in pairs), ZERO),
        total_saved=sum((g.current_amount for g, _ in pairs), ZERO),
        total_remaining=sum((p.remaining_amount for _, p in pairs), ZERO),
        average_percentage=sum(p.percentage for _, p in pairs) / total if total else 0.0,
        achievement_rate=by_status[ACHIEVED] * 100 / total if total else 0.0,
        monthly_savings_rate=monthly_savings_rate((g for g, _ in pairs), as_of),
        closest_to_completion=closest,
    )


def _days_phrase(days: int) -> str:
    if days == 0:
        return "today"
    if days == 1:
        return "in 1 day"
    return f"in {days} days"


def target_alerts(pairs: Iterable[TargetPair]) -> List[Alert]:
    alerts = []
    for t, p in pairs:
        if p.status == EXCEEDED:
            alerts.append(Alert(
                kind=BUDGET_EXCEEDED,
                severity=SEVERITY_HIGH,
                subject_id=t.id,
                subject_name=t.name,
                message=f'Budget "{t.name}" is over its limit ({p.percentage:.0f}% used)',
            ))
        elif p.status == WARNING:
            alerts.append(Alert(
                kind=BUDGET_WARNING,
                severity=SEVERITY_MEDIUM,
                subject_id=t.id,
                subject_name=t.name,
                message=f'Budget "{t.name}" is close to its limit ({p.percentage:.0f}% used)',
            ))
    return alerts


def goal_alerts(pairs: Iterable[GoalPair], settings: Settings = DEFAULT_SETTINGS) -> List[Alert]:
    alerts = []
    for g, p in pairs:
        if p.status == OVERDUE:
            days = -p.days_remaining
            alerts.append(Alert(
                kind=GOAL_OVERDUE,
                severity=SEVERITY_HIGH,
                subject_id=g.id,
                subject_name=g.name,
                message=f'Goal "{g.name}" is {days} day{"s" if days != 1 else ""} past its target date',
            ))
        elif (
            p.status != ACHIEVED
            and p.days_remaining is not None
            and 0 <= p.days_remaining <= settings.goal_deadline_window_days
        ):
            alerts.append(Alert(
                kind=GOAL_DEADLINE,
                severity=SEVERITY_MEDIUM,
                subject_id=g.id,
                subject_name=g.name,
                message=f'Goal "{g.name}" is due {_days_phrase(p.days_remaining)} ({p.percentage:.0f}% saved)',
            ))
    return alerts


def build_alerts(
    target_pairs: Iterable[TargetPair],
    goal_pairs: Iterable[GoalPair],
    settings: Settings = DEFAULT_SETTINGS,
) -> Tuple[Alert, ...]:
    """Target alerts first, then goal alerts, each in input order."""
    return tuple(target_alerts(target_pairs) + goal_alerts(goal_pairs, settings))


def transaction_stats(trans: Iterable[Transaction]) -> TransactionStats:
    count = 0
    income = expenses = ZERO
    for t in trans:
        count += 1
        if t.kind == INCOME:
            income += t.amount
        elif t.kind == EXPENSE:
            expenses += t.amount
    return TransactionStats(
        total_transactions=count,
        total_income=income,
        total_expenses=expenses,
        balance=income - expenses,
        avg_transaction=to_cents((income + expenses) / count) if count else ZERO,
    )
