"""Data models for recurring transactions and the ledger records they touch."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Literal, cast

TransactionType = Literal["income", "expense"]
Frequency = Literal["daily", "weekly", "monthly", "yearly"]

TRANSACTION_TYPES: tuple[TransactionType, ...] = ("income", "expense")
FREQUENCIES: tuple[Frequency, ...] = ("daily", "weekly", "monthly", "yearly")

# Labels written by the Indonesian UI.
_TRANSACTION_TYPE_ALIASES = {
    "pemasukan": "income",
    "pengeluaran": "expense",
}
_FREQUENCY_ALIASES = {
    "harian": "daily",
    "mingguan": "weekly",
    "bulanan": "monthly",
    "tahunan": "yearly",
}


def parse_transaction_type(value: str) -> TransactionType:
    """Normalize a stored transaction type label."""
    key = value.strip().lower()
    key = _TRANSACTION_TYPE_ALIASES.get(key, key)
    if key not in TRANSACTION_TYPES:
        raise ValueError(f"Unknown transaction type: {value!r}")
    return cast(TransactionType, key)


def parse_frequency(value: str) -> Frequency:
    """Normalize a stored recurring frequency label."""
    key = value.strip().lower()
    key = _FREQUENCY_ALIASES.get(key, key)
    if key not in FREQUENCIES:
        raise ValueError(f"Unknown frequency: {value!r}")
    return cast(Frequency, key)


@dataclass(frozen=True)
class RecurringRule:
    """Template for a transaction that is re-created on a fixed schedule."""

    id: str
    account_id: str
    type: TransactionType
    amount: Decimal
    frequency: Frequency
    # Always the next occurrence that has not been realized yet.
    next_due_date: datetime
    active: bool = True
    category_id: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class RealizedOccurrence:
    """Effects of realizing one due rule, applied by the caller in one transaction."""

    balance_delta: Decimal
    next_due_date: datetime


@dataclass(frozen=True)
class Account:
    """A wallet or bank account with a stored balance."""

    id: str
    name: str
    balance: Decimal = Decimal("0")


@dataclass(frozen=True)
class Transaction:
    """A posted transaction against one account."""

    id: str
    account_id: str
    type: TransactionType
    amount: Decimal
    description: str
    date: datetime
    category_id: str | None = None
    is_recurring: bool = False
    recurring_id: str | None = None
