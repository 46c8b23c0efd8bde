"""Configuration for the expense ledger.

Values come from environment variables with sensible defaults so the
Streamlit app and the tests can point the ledger at different storage.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("LEDGER_DATA_DIR", _PROJECT_ROOT / "data"))

STORAGE_KEY = "expense-tracker-data"
STORAGE_FILE = Path(
    os.getenv("LEDGER_STORAGE_FILE", DATA_DIR / f"{STORAGE_KEY}.json")
).resolve()

DEFAULT_CURRENCY = os.getenv("LEDGER_DEFAULT_CURRENCY", "USD")
CURRENCIES = ("USD", "EUR", "INR")

LOG_LEVEL = os.getenv("LEDGER_LOG_LEVEL", "INFO")

# Budget progress thresholds, in percent of the monthly budget
BUDGET_WARNING_PERCENT = 70
BUDGET_DANGER_PERCENT = 100

MONTHLY_SUMMARY_LIMIT = 6

RECURRING_SUFFIX = " (Recurring)"
RECURRING_DEFAULT_DESCRIPTION = "Recurring"

# Month-over-month insight compares this category only
COMPARISON_CATEGORY = "food"


def ensure_data_directories() -> None:
    """Create the data directory if it doesn't exist."""
    STORAGE_FILE.parent.mkdir(parents=True, exist_ok=True)


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
