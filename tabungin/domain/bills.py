"""Bill due-date advancement and derived status."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Literal, cast

from tabungin.domain.schedule import advance

BillFrequency = Literal["once", "weekly", "monthly", "yearly"]
BillStatus = Literal["active", "paid", "overdue", "inactive"]

BILL_FREQUENCIES: tuple[BillFrequency, ...] = ("once", "weekly", "monthly", "yearly")
BILL_STATUSES: tuple[BillStatus, ...] = ("active", "paid", "overdue", "inactive")

_BILL_FREQUENCY_ALIASES = {
    "sekali": "once",
    "mingguan": "weekly",
    "bulanan": "monthly",
    "tahunan": "yearly",
}
_BILL_STATUS_ALIASES = {
    "aktif": "active",
    "lunas": "paid",
    "terlambat": "overdue",
    "nonaktif": "inactive",
}


def parse_bill_frequency(value: str) -> BillFrequency:
    key = value.strip().lower()
    key = _BILL_FREQUENCY_ALIASES.get(key, key)
    if key not in BILL_FREQUENCIES:
        raise ValueError(f"Unknown bill frequency: {value!r}")
    return cast(BillFrequency, key)


def parse_bill_status(value: str) -> BillStatus:
    key = value.strip().lower()
    key = _BILL_STATUS_ALIASES.get(key, key)
    if key not in BILL_STATUSES:
        raise ValueError(f"Unknown bill status: {value!r}")
    return cast(BillStatus, key)


@dataclass(frozen=True)
class Bill:
    """A payable obligation such as electricity, rent or a subscription."""

    id: str
    name: str
    amount: Decimal
    due_date: datetime
    frequency: BillFrequency
    status: BillStatus = "active"
    next_due_date: datetime | None = None
    last_paid_date: datetime | None = None
    category_id: str | None = None
    reminder_days: int = 3
    autopay: bool = False
    notes: str | None = None


def initial_next_due_date(due_date: datetime, frequency: BillFrequency) -> datetime:
    """Next due date recorded when a bill is created."""
    if frequency == "once":
        return due_date
    return advance(due_date, frequency)


def mark_paid(bill: Bill, now: datetime) -> Bill:
    """
    Return a copy of ``bill`` reflecting a payment made at ``now``.

    One-time bills become ``paid`` for good. Recurring bills stay ``active``:
    the pending next due date becomes the current due date and the next due
    date moves one period further.
    """
    if bill.frequency == "once":
        return replace(bill, status="paid", last_paid_date=now)

    upcoming = bill.next_due_date or advance(bill.due_date, bill.frequency)
    return replace(
        bill,
        status="active",
        due_date=upcoming,
        next_due_date=advance(upcoming, bill.frequency),
        last_paid_date=now,
    )


def effective_status(bill: Bill, now: datetime) -> BillStatus:
    """Status with the lazy ``active -> overdue`` promotion applied."""
    if bill.status == "active" and bill.due_date <= now:
        return "overdue"
    return bill.status


def refresh_overdue(bills: Iterable[Bill], now: datetime) -> list[Bill]:
    """Return copies of ``bills`` with overdue promotion applied."""
    refreshed: list[Bill] = []
    for bill in bills:
        status = effective_status(bill, now)
        refreshed.append(bill if status == bill.status else replace(bill, status=status))
    return refreshed


def upcoming_bills(bills: Iterable[Bill], now: datetime, days: int = 7) -> list[Bill]:
    """Active bills falling due within the next ``days`` days, soonest first."""
    horizon = now + timedelta(days=days)
    upcoming = [bill for bill in bills if bill.status == "active" and now <= bill.due_date <= horizon]
    return sorted(upcoming, key=lambda bill: bill.due_date)
