"""Pure schedule arithmetic for recurring rules.

Nothing here reads the clock or touches storage: callers pass ``as_of`` and
persist the returned effects themselves.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import TypeVar

from tabungin.domain.recurring import Frequency, RealizedOccurrence, RecurringRule, TransactionType

_D = TypeVar("_D", bound=date)


def _add_months(value: _D, months: int) -> _D:
    """Shift by calendar months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def advance(current: _D, frequency: Frequency) -> _D:
    """
    Return the occurrence one period after ``current``.

    Monthly and yearly steps clamp to the last day of the target month, so
    2024-01-31 -> 2024-02-29 (monthly) and 2024-02-29 -> 2025-02-28 (yearly).
    Time of day is preserved for datetime inputs.
    """
    if frequency == "daily":
        return current + timedelta(days=1)
    if frequency == "weekly":
        return current + timedelta(days=7)
    if frequency == "monthly":
        return _add_months(current, 1)
    if frequency == "yearly":
        return _add_months(current, 12)
    raise ValueError(f"Unknown frequency: {frequency!r}")


def balance_delta(transaction_type: TransactionType, amount: Decimal) -> Decimal:
    """Signed balance change for a transaction of the given type."""
    if transaction_type == "income":
        return amount
    return -amount


def is_due(rule: RecurringRule, as_of: datetime) -> bool:
    """True if the rule is active and its next occurrence is not after ``as_of``."""
    return rule.active and rule.next_due_date <= as_of


def realize(rule: RecurringRule) -> RealizedOccurrence:
    """Compute the balance effect and next due date of a due rule."""
    return RealizedOccurrence(
        balance_delta=balance_delta(rule.type, rule.amount),
        next_due_date=advance(rule.next_due_date, rule.frequency),
    )
