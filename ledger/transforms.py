import time
from datetime import date
from typing import Callable, Iterable

from ledger.domain import RecurringTemplate, Transaction


def add_transaction(
    trans: tuple[Transaction, ...], t: Transaction
) -> tuple[Transaction, ...]:
    # newest first
    return (t,) + trans


def remove_transaction(
    trans: tuple[Transaction, ...], tid: int
) -> tuple[Transaction, ...]:
    return tuple(t for t in trans if t.id != tid)


def add_template(
    templates: tuple[RecurringTemplate, ...], r: RecurringTemplate
) -> tuple[RecurringTemplate, ...]:
    return templates + (r,)


def expense_transactions(trans: Iterable[Transaction]) -> tuple[Transaction, ...]:
    return tuple(filter(lambda t: t.amount < 0, trans))


def month_key(d: date | str) -> str:
    """'2026-10-19' or date(2026, 10, 19) -> '2026-10'."""
    if isinstance(d, date):
        return f"{d.year:04d}-{d.month:02d}"
    return d[:7]


def previous_month_key(today: date) -> str:
    if today.month == 1:
        return f"{today.year - 1:04d}-12"
    return f"{today.year:04d}-{today.month - 1:02d}"


def in_month(trans: Iterable[Transaction], key: str) -> tuple[Transaction, ...]:
    return tuple(t for t in trans if t.date and t.date.startswith(key))


def new_id(
    taken: set[int], clock: Callable[[], float] = time.time
) -> int:
    """Millisecond timestamp id, bumped until it is not already taken."""
    candidate = int(clock() * 1000)
    while candidate in taken:
        candidate += 1
    return candidate
