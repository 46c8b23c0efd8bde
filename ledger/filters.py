from typing import Callable, Iterable

from ledger.domain import Transaction

Predicate = Callable[[Transaction], bool]


def by_search(text: str) -> Predicate:
    needle = (text or "").lower()

    def _filter(t: Transaction) -> bool:
        return needle in (t.description or "").lower()

    return _filter


def by_category(category: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return not category or t.category == category

    return _filter


def by_month(key: str) -> Predicate:
    def _filter(t: Transaction) -> bool:
        return bool(t.date) and t.date.startswith(key)

    return _filter


def iter_transactions(
    trans: Iterable[Transaction], *preds: Predicate
) -> Iterable[Transaction]:
    for t in trans:
        if all(p(t) for p in preds):
            yield t


def filter_transactions(
    trans: Iterable[Transaction], search_text: str = "", category: str = ""
) -> tuple[Transaction, ...]:
    """Transactions whose description contains ``search_text`` (any case)
    and whose category equals ``category``; empty values match everything.
    """
    return tuple(iter_transactions(trans, by_search(search_text), by_category(category)))
