from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import FrozenSet, Optional, Tuple

INCOME = "income"
EXPENSE = "expense"
KINDS = (INCOME, EXPENSE)

PERIOD_TYPES = ("weekly", "monthly", "yearly")

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_amount(value) -> Decimal:
    """Money as Decimal; floats go through str so 0.1 stays 0.1."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def is_positive(value: Decimal) -> bool:
    """False for zero, negatives, NaN and infinities."""
    return value.is_finite() and value > ZERO


def _coerce_amounts(obj, *names: str) -> None:
    for name in names:
        object.__setattr__(obj, name, to_amount(getattr(obj, name)))


@dataclass(frozen=True)
class Category:
    id: str
    user_id: str
    name: str
    kind: str                 # income | expense
    color: str = "#6366f1"
    icon: str = "circle"
    is_active: bool = True


@dataclass(frozen=True)
class Transaction:
    id: str
    user_id: str
    category_id: str
    amount: Decimal           # always positive, kind carries the direction
    kind: str
    date: date
    note: str = ""
    tags: FrozenSet[str] = field(default_factory=frozenset)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        _coerce_amounts(self, "amount")


# A budget ceiling over a period, optionally for one category
@dataclass(frozen=True)
class Target:
    id: str
    user_id: str
    name: str
    target_amount: Decimal
    period_type: str          # weekly | monthly | yearly
    period_start: date
    period_end: date
    category_id: Optional[str] = None
    is_active: bool = True

    def __post_init__(self):
        _coerce_amounts(self, "target_amount")


@dataclass(frozen=True)
class Goal:
    id: str
    user_id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal = ZERO
    target_date: Optional[date] = None
    description: str = ""
    color: str = "#10b981"
    achieved: bool = False
    created_at: Optional[date] = None

    def __post_init__(self):
        _coerce_amounts(self, "target_amount", "current_amount")


@dataclass(frozen=True)
class TargetProgress:
    target_id: str
    current_spending: Decimal
    percentage: float
    remaining_amount: Decimal
    days_remaining: int       # negative once the period is over
    status: str


@dataclass(frozen=True)
class GoalProgress:
    goal_id: str
    percentage: float
    remaining_amount: Decimal
    days_remaining: Optional[int]
    status: str


@dataclass(frozen=True)
class FundResult:
    """Outcome of a deposit or withdrawal.

    `goal` is the updated record; the original is never touched. `milestones`
    holds every milestone percentage passed between the two snapshots and
    `completed` is set when a deposit brings the goal to its target.
    """
    operation: str
    goal: Goal
    amount: Decimal
    previous_percentage: float
    percentage: float
    milestones: Tuple[int, ...] = ()
    completed: bool = False


@dataclass(frozen=True)
class Alert:
    kind: str
    severity: str             # high | medium
    subject_id: str
    subject_name: str
    message: str
