from dataclasses import dataclass
from typing import Optional

CATEGORIES = ("food", "rent", "travel", "shopping", "other")

CATEGORY_ICONS = {
    "food": "🍔",
    "rent": "🏠",
    "travel": "✈️",
    "shopping": "🛒",
    "other": "💼",
}

INCOME = "income"
EXPENSE = "expense"


def kind_of(amount: float) -> str:
    # sign is the only discriminant: zero counts as income
    return INCOME if amount >= 0 else EXPENSE


@dataclass(frozen=True)
class Transaction:
    id: int
    description: str
    amount: float        # + for income, - for expense
    category: str        # one of CATEGORIES
    date: str            # "YYYY-MM-DD"
    is_recurring: bool = False
    recurring_id: Optional[int] = None  # set only on generated instances

    @property
    def type(self) -> str:
        return kind_of(self.amount)

    @property
    def month(self) -> str:
        return self.date[:7]


# A pattern that produces one Transaction per calendar month
@dataclass(frozen=True)
class RecurringTemplate:
    id: int
    description: str
    amount: float
    category: str
    date: str            # creation date, not reused for generation
    is_recurring: bool = True

    @property
    def type(self) -> str:
        return kind_of(self.amount)

    @classmethod
    def from_transaction(cls, t: Transaction) -> "RecurringTemplate":
        return cls(
            id=t.id,
            description=t.description,
            amount=t.amount,
            category=t.category,
            date=t.date,
        )


@dataclass(frozen=True)
class Ledger:
    transactions: tuple[Transaction, ...] = ()    # newest first
    recurring: tuple[RecurringTemplate, ...] = ()
    monthly_budget: float = 0.0                   # 0 means unset
    currency: str = "USD"

    def ids(self) -> set[int]:
        return {t.id for t in self.transactions} | {r.id for r in self.recurring}
