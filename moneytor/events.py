from datetime import datetime
from typing import List, NamedTuple

from moneytor.constants import EXCEEDED, WARNING
from moneytor.domain import FundResult, Target, TargetProgress

__all__ = [
    'MILESTONE_REACHED', 'GOAL_COMPLETED', 'BUDGET_WARNING', 'BUDGET_EXCEEDED', 'Event',
    'fund_events', 'target_events',
]

MILESTONE_REACHED = "MILESTONE_REACHED"
GOAL_COMPLETED = "GOAL_COMPLETED"
BUDGET_WARNING = "BUDGET_WARNING"
BUDGET_EXCEEDED = "BUDGET_EXCEEDED"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


def fund_events(result: FundResult, now: datetime) -> List[Event]:
    """Events a notification layer may show after a deposit or withdrawal.

    Milestones only count on the way up; a withdrawal that drops below a
    milestone is not something to celebrate.
    """
    ts = now.isoformat()
    goal = result.goal
    events = []
    if result.percentage > result.previous_percentage:
        for m in result.milestones:
            events.append(Event(
                name=MILESTONE_REACHED,
                ts=ts,
                payload={
                    "goal_id": goal.id,
                    "goal_name": goal.name,
                    "milestone": m,
                    "current_amount": goal.current_amount,
                    "target_amount": goal.target_amount,
                },
            ))
    if result.completed:
        events.append(Event(
            name=GOAL_COMPLETED,
            ts=ts,
            payload={
                "goal_id": goal.id,
                "goal_name": goal.name,
                "target_amount": goal.target_amount,
            },
        ))
    return events


def target_events(t: Target, progress: TargetProgress, now: datetime) -> List[Event]:
    """A warning event near the limit, an exceeded event past it, nothing otherwise."""
    payload = {
        "target_id": t.id,
        "target_name": t.name,
        "spent": progress.current_spending,
        "limit": t.target_amount,
        "percentage": progress.percentage,
    }
    if progress.status == WARNING:
        return [Event(name=BUDGET_WARNING, ts=now.isoformat(), payload=payload)]
    if progress.status == EXCEEDED:
        payload["over_budget"] = -progress.remaining_amount
        return [Event(name=BUDGET_EXCEEDED, ts=now.isoformat(), payload=payload)]
    return []
