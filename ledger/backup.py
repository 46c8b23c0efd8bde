"""Snapshot encoding shared by storage and backup export/import.

The JSON layout is versionless::

    {"transactions": [...], "recurringTransactions": [...],
     "monthlyBudget": 0, "selectedCurrency": "USD"}

Decoding checks every record, not only the first, and either yields a
whole ``Ledger`` or a structured error; it never returns partial state.
"""

import json
import logging
from datetime import date
from typing import Any, Optional

from ledger.config import DEFAULT_CURRENCY
from ledger.domain import CATEGORIES, Ledger, RecurringTemplate, Transaction, kind_of
from ledger.functional import Either, Left, Right, is_number

logger = logging.getLogger(__name__)


def transaction_to_dict(t: Transaction) -> dict:
    record = {
        "id": t.id,
        "description": t.description,
        "amount": t.amount,
        "category": t.category,
        "date": t.date,
        "isRecurring": t.is_recurring,
    }
    if t.recurring_id is not None:
        record["recurringId"] = t.recurring_id
    record["type"] = t.type
    return record


def template_to_dict(r: RecurringTemplate) -> dict:
    return {
        "id": r.id,
        "description": r.description,
        "amount": r.amount,
        "category": r.category,
        "date": r.date,
        "isRecurring": r.is_recurring,
        "type": r.type,
    }


def to_snapshot(ledger: Ledger) -> dict:
    return {
        "transactions": [transaction_to_dict(t) for t in ledger.transactions],
        "recurringTransactions": [template_to_dict(r) for r in ledger.recurring],
        "monthlyBudget": ledger.monthly_budget,
        "selectedCurrency": ledger.currency,
    }


def encode(ledger: Ledger) -> str:
    return json.dumps(to_snapshot(ledger), indent=2, ensure_ascii=False)


def backup_filename(today: date) -> str:
    return f"expense-tracker-backup-{today.isoformat()}.json"


def _bad_record(field: str, index: int, message: str, **extra: Any) -> Left:
    return Left({
        "error": "invalid_record",
        "message": message,
        "field": field,
        "index": index,
        **extra,
    })


def _category(value: Any) -> str:
    return value if value in CATEGORIES else "other"


def _check_type(record: dict, index: int) -> None:
    stored = record.get("type")
    if stored is not None and stored != kind_of(record["amount"]):
        logger.warning(
            "Record %s at %d has type %r but amount %r; using the amount sign",
            record.get("id"), index, stored, record["amount"],
        )


def _is_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def decode_transaction(record: Any, index: int) -> Either[dict, Transaction]:
    if not isinstance(record, dict):
        return _bad_record("record", index, f"Transaction {index} is not an object")
    if not record.get("id") or not _is_id(record.get("id")):
        return _bad_record("id", index, f"Transaction {index} has no integer id",
                           id=record.get("id"))
    if record.get("recurringId") is not None and not _is_id(record["recurringId"]):
        return _bad_record("recurringId", index, f"Transaction {index} has a non-integer recurringId",
                           recurringId=record["recurringId"])
    if not is_number(record.get("amount")):
        return _bad_record("amount", index, f"Transaction {index} has a non-numeric amount",
                           amount=record.get("amount"))
    if not record.get("date") or not isinstance(record.get("date"), str):
        return _bad_record("date", index, f"Transaction {index} has no date")
    _check_type(record, index)
    return Right(Transaction(
        id=record["id"],
        description=str(record.get("description") or ""),
        amount=record["amount"],
        category=_category(record.get("category")),
        date=record["date"],
        is_recurring=bool(record.get("isRecurring", False)),
        recurring_id=record.get("recurringId"),
    ))


def decode_template(record: Any, index: int) -> Either[dict, RecurringTemplate]:
    # templates without an id are kept; materialization skips them
    if not isinstance(record, dict):
        return _bad_record("record", index, f"Recurring template {index} is not an object")
    if record.get("id") is not None and not _is_id(record["id"]):
        return _bad_record("id", index, f"Recurring template {index} has a non-integer id",
                           id=record["id"])
    if not is_number(record.get("amount")):
        return _bad_record("amount", index, f"Recurring template {index} has a non-numeric amount",
                           amount=record.get("amount"))
    _check_type(record, index)
    return Right(RecurringTemplate(
        id=record.get("id"),
        description=str(record.get("description") or ""),
        amount=record["amount"],
        category=_category(record.get("category")),
        date=str(record.get("date") or ""),
    ))


def _decode_all(records: list, decode_one) -> Either[dict, tuple]:
    out = []
    for i, record in enumerate(records):
        result = decode_one(record, i)
        if result.is_left():
            return result
        out.append(result.get_or_else(None))
    return Right(tuple(out))


def decode_snapshot(
    data: Any, fallback_currency: str = DEFAULT_CURRENCY
) -> Either[dict, Ledger]:
    if not isinstance(data, dict):
        return Left({
            "error": "not_an_object",
            "message": "Backup must be a JSON object",
        })
    if not isinstance(data.get("transactions"), list):
        return Left({
            "error": "transactions_not_a_list",
            "message": "Backup 'transactions' must be a list",
        })
    recurring = data.get("recurringTransactions") or []
    if not isinstance(recurring, list):
        return Left({
            "error": "recurring_not_a_list",
            "message": "Backup 'recurringTransactions' must be a list",
        })

    budget = data.get("monthlyBudget")
    if not is_number(budget) or budget < 0:
        budget = 0
    currency = data.get("selectedCurrency")
    if not isinstance(currency, str) or not currency:
        currency = fallback_currency or DEFAULT_CURRENCY

    return _decode_all(data["transactions"], decode_transaction).bind(
        lambda trans: _decode_all(recurring, decode_template).map(
            lambda templates: Ledger(
                transactions=trans,
                recurring=templates,
                monthly_budget=budget,
                currency=currency,
            )
        )
    )


def decode(
    text: str | bytes, fallback_currency: str = DEFAULT_CURRENCY
) -> Either[dict, Ledger]:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as e:
        return Left({
            "error": "invalid_json",
            "message": f"Invalid backup file. {e}",
        })
    return decode_snapshot(data, fallback_currency)


def load_snapshot(
    data: Optional[dict], default_currency: str = DEFAULT_CURRENCY
) -> Ledger:
    """Ledger from a stored snapshot; absent or malformed data is an empty ledger."""
    empty = Ledger(currency=default_currency)
    if data is None:
        return empty
    result = decode_snapshot(data, default_currency)
    if result.is_left():
        logger.warning("Ignoring stored ledger: %s", result.get_error()["message"])
        return empty
    return result.get_or_else(empty)
