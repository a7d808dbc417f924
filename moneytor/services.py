import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Tuple

from moneytor.config import DEFAULT_SETTINGS, Settings
from moneytor.domain import Alert, Category, Goal, Target, Transaction
from moneytor.periods import as_date
from moneytor.reports import (
    CategoryUsage,
    GoalPair,
    GoalSummary,
    TargetPair,
    TargetSummary,
    TransactionStats,
    build_alerts,
    category_usage,
    evaluate_goals,
    evaluate_targets,
    most_used_category,
    summarize_goals,
    summarize_targets,
    transaction_stats,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardReport:
    as_of: date
    targets: Tuple[TargetPair, ...]
    goals: Tuple[GoalPair, ...]
    target_summary: TargetSummary
    goal_summary: GoalSummary
    categories: Tuple[CategoryUsage, ...]
    most_used_category: Optional[CategoryUsage]
    transactions: TransactionStats
    alerts: Tuple[Alert, ...]
    skipped: Tuple[str, ...] = ()


class ProgressService:
    """Facade that turns a user's raw records into the dashboard view.

    A target or goal that fails evaluation is left out of every aggregate
    and its id reported in `DashboardReport.skipped`.
    """

    def __init__(self, settings: Settings = DEFAULT_SETTINGS):
        self.settings = settings

    def target_report(
        self, targets: Iterable[Target], transactions: Iterable[Transaction], as_of: date
    ) -> Tuple[TargetSummary, Tuple[str, ...]]:
        pairs, skipped = evaluate_targets(targets, transactions, as_date(as_of), self.settings)
        return summarize_targets(pairs), skipped

    def goal_report(self, goals: Iterable[Goal], as_of: date) -> Tuple[GoalSummary, Tuple[str, ...]]:
        as_of = as_date(as_of)
        pairs, skipped = evaluate_goals(goals, as_of, self.settings)
        return summarize_goals(pairs, as_of), skipped

    def dashboard(
        self,
        targets: Iterable[Target],
        goals: Iterable[Goal],
        categories: Iterable[Category],
        transactions: Iterable[Transaction],
        as_of: date,
    ) -> DashboardReport:
        as_of = as_date(as_of)
        transactions = tuple(transactions)

        target_pairs, skipped_targets = evaluate_targets(targets, transactions, as_of, self.settings)
        goal_pairs, skipped_goals = evaluate_goals(goals, as_of, self.settings)
        usage = category_usage(categories, transactions)

        report = DashboardReport(
            as_of=as_of,
            targets=target_pairs,
            goals=goal_pairs,
            target_summary=summarize_targets(target_pairs),
            goal_summary=summarize_goals(goal_pairs, as_of),
            categories=usage,
            most_used_category=most_used_category(usage),
            transactions=transaction_stats(transactions),
            alerts=build_alerts(target_pairs, goal_pairs, self.settings),
            skipped=skipped_targets + skipped_goals,
        )
        logger.debug(
            "Dashboard for %s: %d targets, %d goals, %d alerts, %d skipped",
            as_of, len(target_pairs), len(goal_pairs), len(report.alerts), len(report.skipped),
        )
        return report
