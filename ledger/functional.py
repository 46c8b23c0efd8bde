import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Generic, TypeVar

from ledger.domain import CATEGORIES, EXPENSE, INCOME, Transaction

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T]):
    """Optional value: ``Some(value)`` or ``Nothing()``."""

    def is_some(self) -> bool:
        return isinstance(self, Some)

    def is_none(self) -> bool:
        return not self.is_some()

    def get_or_else(self, default: T) -> T:
        return self.value if isinstance(self, Some) else default


@dataclass(frozen=True)
class Some(Maybe[T]):
    value: T


@dataclass(frozen=True)
class Nothing(Maybe[T]):
    pass


class Either(Generic[E, T]):
    """Success ``Right(value)`` or failure ``Left(error)``; failures short-circuit."""

    def is_right(self) -> bool:
        return isinstance(self, Right)

    def is_left(self) -> bool:
        return not self.is_right()

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self.value)) if isinstance(self, Right) else self

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self.value) if isinstance(self, Right) else self

    def get_or_else(self, default: T) -> T:
        return self.value if isinstance(self, Right) else default

    def get_error(self) -> E:
        if isinstance(self, Left):
            return self.error
        raise ValueError("Cannot get error from Right")


@dataclass(frozen=True)
class Right(Either[E, T]):
    value: T


@dataclass(frozen=True)
class Left(Either[E, T]):
    error: E


def is_number(value: Any) -> bool:
    # bool is an int subclass but never a valid amount; nan and inf are rejected
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def is_iso_date(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def parse_amount(raw: Any, kind: str) -> Either[dict, float]:
    """Turn form input into a signed amount; expenses become negative."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        value = float("nan")
    if not math.isfinite(value):
        return Left({
            "error": "invalid_amount",
            "message": "Amount must be a number",
            "amount": raw,
        })
    if kind not in (INCOME, EXPENSE):
        return Left({
            "error": "invalid_amount",
            "message": f"Unknown transaction type {kind!r}",
            "type": kind,
        })
    return Right(-abs(value) if kind == EXPENSE else abs(value))


def validate_transaction(t: Transaction) -> Either[dict, Transaction]:

    if not t.description or not t.description.strip():
        return Left({
            "error": "empty_description",
            "message": "Description must not be empty",
        })

    if not is_number(t.amount):
        return Left({
            "error": "invalid_amount",
            "message": "Amount must be a number",
            "amount": t.amount,
        })

    if t.category not in CATEGORIES:
        return Left({
            "error": "invalid_category",
            "message": f"Category {t.category!r} is not one of {', '.join(CATEGORIES)}",
            "category": t.category,
        })

    if not is_iso_date(t.date):
        return Left({
            "error": "invalid_date",
            "message": f"Date {t.date!r} is not a YYYY-MM-DD date",
            "date": t.date,
        })

    return Right(t)


def validate_budget(value: Any) -> Either[dict, float]:
    try:
        budget = float(value)
    except (TypeError, ValueError):
        budget = 0.0
    if not math.isfinite(budget) or budget <= 0:
        return Left({
            "error": "invalid_budget",
            "message": "Please enter a valid budget amount.",
            "budget": value,
        })
    return Right(budget)


def validate_currency(code: Any) -> Either[dict, str]:
    if not isinstance(code, str) or not code.strip():
        return Left({
            "error": "invalid_currency",
            "message": "Currency code must not be empty",
            "currency": code,
        })
    return Right(code.strip().upper())
