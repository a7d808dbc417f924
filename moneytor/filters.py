from datetime import date, datetime
from decimal import Decimal
from typing import Callable, Iterable, Iterator, Optional, Tuple

from moneytor.domain import Category, Transaction, to_amount

Predicate = Callable[[Transaction], bool]

SORT_KEYS = {
    "date": lambda t: (t.date, t.id),
    "amount": lambda t: (t.amount, t.id),
    "created": lambda t: (t.created_at or datetime.min, t.id),
}


def by_category(cat_id: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.category_id == cat_id

    return _filter


def by_kind(kind: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return t.kind == kind

    return _filter


def by_date_range(start: Optional[date] = None, end: Optional[date] = None) -> Predicate:
    def _filter(t: Transaction) -> bool:
        if start is not None and t.date < start:
            return False
        return end is None or t.date <= end

    return _filter


def by_amount_range(min: Optional[Decimal] = None, max: Optional[Decimal] = None) -> Predicate:
    min = None if min is None else to_amount(min)
    max = None if max is None else to_amount(max)

    def _filter(t: Transaction) -> bool:
        if min is not None and t.amount < min:
            return False
        return max is None or t.amount <= max

    return _filter


def by_tags(*tags: str) -> Predicate:
    """Keep transactions carrying at least one of `tags`; no tags keeps everything."""
    wanted = frozenset(tags)

    def _filter(t: Transaction) -> bool:
        return not wanted or bool(wanted & t.tags)

    return _filter


def by_search(text: str, cats: Iterable[Category] = ()) -> Predicate:
    """Case-insensitive match on the note, the category name or any tag."""
    needle = text.strip().lower()
    names = {c.id: c.name.lower() for c in cats}

    def _filter(t: Transaction) -> bool:
        return (
            needle in t.note.lower()
            or needle in names.get(t.category_id, "")
            or any(needle in tag.lower() for tag in t.tags)
        )

    return _filter


def all_of(*preds: Predicate) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return all(p(t) for p in preds)

    return _filter


def iter_transactions(trans: Iterable[Transaction], pred: Predicate) -> Iterator[Transaction]:
    for t in trans:
        if pred(t):
            yield t


def _category_key(cats: Iterable[Category]) -> Callable[[Transaction], tuple]:
    names = {c.id: c.name.lower() for c in cats}
    return lambda t: (names.get(t.category_id, ""), t.id)


def sort_transactions(
    trans: Iterable[Transaction],
    key: str = "date",
    descending: bool = True,
    cats: Iterable[Category] = (),
) -> Tuple[Transaction, ...]:
    """Sort by date, amount, created or category; `category` orders by name."""
    if key == "category":
        sort_key = _category_key(cats)
    elif key in SORT_KEYS:
        sort_key = SORT_KEYS[key]
    else:
        raise ValueError(f"Unknown sort key: {key}")
    return tuple(sorted(trans, key=sort_key, reverse=descending))


def all_tags(trans: Iterable[Transaction]) -> Tuple[str, ...]:
    """Every tag in use, alphabetically."""
    return tuple(sorted({tag for t in trans for tag in t.tags}))
