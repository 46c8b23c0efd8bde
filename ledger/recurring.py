import logging
from datetime import date
from typing import Callable

from ledger.config import RECURRING_DEFAULT_DESCRIPTION, RECURRING_SUFFIX
from ledger.domain import RecurringTemplate, Transaction
from ledger.transforms import add_transaction, month_key, new_id

logger = logging.getLogger(__name__)


def has_instance(
    trans: tuple[Transaction, ...], template_id: int, key: str
) -> bool:
    return any(
        t.recurring_id == template_id and t.date and t.date.startswith(key)
        for t in trans
    )


def due_templates(
    templates: tuple[RecurringTemplate, ...],
    trans: tuple[Transaction, ...],
    today: date,
) -> tuple[RecurringTemplate, ...]:
    """Templates with no instance dated in today's month yet."""
    key = month_key(today)
    return tuple(
        r for r in templates
        if r is not None and r.id and not has_instance(trans, r.id, key)
    )


def instance_of(r: RecurringTemplate, tid: int, today: date) -> Transaction:
    return Transaction(
        id=tid,
        description=(r.description or RECURRING_DEFAULT_DESCRIPTION) + RECURRING_SUFFIX,
        amount=r.amount,
        category=r.category or "other",
        date=today.isoformat(),
        is_recurring=True,
        recurring_id=r.id,
    )


def materialize_due(
    templates: tuple[RecurringTemplate, ...],
    trans: tuple[Transaction, ...],
    today: date,
    make_id: Callable[[set[int]], int] = new_id,
) -> tuple[Transaction, ...]:
    """Insert this month's instance of every due template, newest first.

    Only the current month is checked, so months in which this never ran
    are not backfilled. Returns ``trans`` itself when nothing was due.
    """
    due = due_templates(templates, trans, today)
    if not due:
        return trans

    taken = {t.id for t in trans} | {r.id for r in templates}
    result = trans
    for r in due:
        tid = make_id(taken)
        taken.add(tid)
        result = add_transaction(result, instance_of(r, tid, today))
        logger.info("Materialized recurring %s for %s as %s", r.id, month_key(today), tid)
    return result
