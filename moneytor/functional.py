from abc import ABC, abstractmethod
from datetime import date
from typing import Callable, Generic, Iterable, TypeVar

from moneytor.domain import KINDS, PERIOD_TYPES, Category, Goal, Target, Transaction, is_positive
from moneytor.periods import as_date

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def safe_category(cats: Iterable[Category], cat_id: str) -> Maybe[Category]:
    for cat in cats:
        if cat.id == cat_id:
            return Some(cat)
    return Nothing()


def validate_category(c: Category) -> Either[dict, Category]:
    if not c.name or not c.name.strip():
        return Left({
            "error": "empty_name",
            "message": "Category name must not be empty",
            "category_id": c.id,
        })
    if c.kind not in KINDS:
        return Left({
            "error": "invalid_kind",
            "message": f"Category kind must be one of {', '.join(KINDS)}",
            "kind": c.kind,
        })
    return Right(c)


def _check_amount(t: Transaction) -> Either[dict, Transaction]:
    if not is_positive(t.amount):
        return Left({
            "error": "invalid_amount",
            "message": f"Transaction amount must be a positive number, got {t.amount}",
            "amount": t.amount,
        })
    return Right(t)


def _check_kind(t: Transaction) -> Either[dict, Transaction]:
    if t.kind not in KINDS:
        return Left({
            "error": "invalid_kind",
            "message": f"Transaction kind must be one of {', '.join(KINDS)}",
            "kind": t.kind,
        })
    return Right(t)


def _check_category(
    t: Transaction, cats: Iterable[Category], require_active: bool
) -> Either[dict, Transaction]:
    found = safe_category(cats, t.category_id)
    if not found.map(lambda c: c.user_id == t.user_id).get_or_else(False):
        return Left({
            "error": "category_not_found",
            "message": f"Category with ID {t.category_id} does not exist",
            "category_id": t.category_id,
        })

    category = found.get_or_else(None)
    if category.kind != t.kind:
        return Left({
            "error": "category_type_mismatch",
            "message": f"{category.kind.capitalize()} category {category.name} cannot hold {t.kind} transactions",
            "category_type": category.kind,
            "kind": t.kind,
        })
    if require_active and not category.is_active:
        return Left({
            "error": "category_inactive",
            "message": f"Category {category.name} is inactive",
            "category_id": category.id,
        })
    return Right(t)


def validate_transaction(
    t: Transaction,
    cats: Iterable[Category],
    require_active: bool = True,
) -> Either[dict, Transaction]:
    """Check a transaction against the user's categories.

    The referenced category must exist, belong to the same user and have the
    same kind. New transactions may only use active categories; edits of
    existing history pass `require_active=False`.
    """
    cats = tuple(cats)
    return (
        Right(t)
        .bind(_check_amount)
        .bind(_check_kind)
        .bind(lambda tx: _check_category(tx, cats, require_active))
    )


def validate_target(t: Target) -> Either[dict, Target]:
    if not is_positive(t.target_amount):
        return Left({
            "error": "invalid_amount",
            "message": "Target amount must be a positive number",
            "target_amount": t.target_amount,
        })
    if t.period_type not in PERIOD_TYPES:
        return Left({
            "error": "invalid_period",
            "message": f"Period type must be one of {', '.join(PERIOD_TYPES)}",
            "period_type": t.period_type,
        })
    if t.period_start >= t.period_end:
        return Left({
            "error": "invalid_period",
            "message": "Period start date must be before end date",
            "period_start": t.period_start,
            "period_end": t.period_end,
        })
    return Right(t)


def _check_goal_name(g: Goal) -> Either[dict, Goal]:
    if not g.name or not g.name.strip():
        return Left({
            "error": "empty_name",
            "message": "Goal name must not be empty",
        })
    return Right(g)


def _check_goal_amounts(g: Goal) -> Either[dict, Goal]:
    if not is_positive(g.target_amount):
        return Left({
            "error": "invalid_amount",
            "message": "Target amount must be a positive number",
            "target_amount": g.target_amount,
        })
    if not g.current_amount.is_finite() or g.current_amount < 0:
        return Left({
            "error": "invalid_amount",
            "message": "Current amount cannot be negative",
            "current_amount": g.current_amount,
        })
    return Right(g)


def validate_goal(g: Goal, as_of: date) -> Either[dict, Goal]:
    """Creation-time checks; the deadline must lie strictly after `as_of`."""
    today = as_date(as_of)

    def _check_date(goal: Goal) -> Either[dict, Goal]:
        if goal.target_date is not None and goal.target_date <= today:
            return Left({
                "error": "invalid_date",
                "message": "Target date must be in the future",
                "target_date": goal.target_date,
            })
        return Right(goal)

    return Right(g).bind(_check_goal_name).bind(_check_goal_amounts).bind(_check_date)
