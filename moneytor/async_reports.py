import asyncio
from datetime import date
from typing import Iterable, List, Tuple

from moneytor.config import DEFAULT_SETTINGS, Settings
from moneytor.domain import Goal, GoalProgress, Target, TargetProgress, Transaction
from moneytor.reports import evaluate_goals, evaluate_targets


async def target_progress(
    targets: List[Target], trans: List[Transaction], as_of: date, settings: Settings = DEFAULT_SETTINGS
) -> dict[str, TargetProgress]:
    """Progress per target id; malformed targets are left out."""
    pairs, _ = evaluate_targets(targets, trans, as_of, settings)
    await asyncio.sleep(0)  # cooperate
    return {t.id: p for t, p in pairs}


async def goal_progress(
    goals: List[Goal], as_of: date, settings: Settings = DEFAULT_SETTINGS
) -> dict[str, GoalProgress]:
    pairs, _ = evaluate_goals(goals, as_of, settings)
    await asyncio.sleep(0)
    return {g.id: p for g, p in pairs}


async def progress_snapshot(
    targets: Iterable[Target],
    goals: Iterable[Goal],
    trans: Iterable[Transaction],
    as_of: date,
    settings: Settings = DEFAULT_SETTINGS,
) -> Tuple[dict[str, TargetProgress], dict[str, GoalProgress]]:
    """Evaluate targets and goals side by side.

    Neither evaluation shares state with the other, so both run under one
    gather for callers already inside an event loop.
    """
    return tuple(await asyncio.gather(
        target_progress(list(targets), list(trans), as_of, settings),
        goal_progress(list(goals), as_of, settings),
    ))
