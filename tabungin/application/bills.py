"""Bill creation, payment and overdue workflows."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Literal, Protocol

from tabungin.domain.bills import Bill, BillFrequency, initial_next_due_date, mark_paid, refresh_overdue
from tabungin.domain.errors import LedgerError
from tabungin.runtime.logging import get_logger

logger = get_logger(__name__)

BillCreateStatus = Literal["created", "rejected"]
BillPaymentStatus = Literal["paid", "not_found"]


class BillStore(Protocol):
    """Persistence needed by the bill workflows."""

    def get_bill(self, bill_id: str) -> Bill | None: ...

    def list_bills(self) -> list[Bill]: ...

    def add_bill(self, bill: Bill) -> None: ...

    def save_bill(self, bill: Bill) -> None: ...


@dataclass(frozen=True)
class BillCreateRequest:
    """Input for registering a new bill."""

    name: str
    amount: Decimal
    due_date: datetime
    frequency: BillFrequency = "monthly"
    bill_id: str | None = None
    category_id: str | None = None
    reminder_days: int = 3
    autopay: bool = False
    notes: str | None = None


@dataclass(frozen=True)
class BillCreateResult:
    """Outcome from registering a bill."""

    status: BillCreateStatus
    bill: Bill | None = None
    error: str | None = None


@dataclass(frozen=True)
class BillPaymentResult:
    """Outcome from marking a bill paid."""

    status: BillPaymentStatus
    bill: Bill | None = None
    error: str | None = None


def run_create_bill(store: BillStore, request: BillCreateRequest) -> BillCreateResult:
    """Store a new active bill with its next due date already scheduled."""
    if not request.amount.is_finite() or request.amount <= 0:
        return BillCreateResult(status="rejected", error=f"Bill amount must be positive: {request.amount}")

    bill = Bill(
        id=request.bill_id or uuid.uuid4().hex,
        name=request.name,
        amount=request.amount,
        due_date=request.due_date,
        frequency=request.frequency,
        status="active",
        next_due_date=initial_next_due_date(request.due_date, request.frequency),
        category_id=request.category_id,
        reminder_days=request.reminder_days,
        autopay=request.autopay,
        notes=request.notes,
    )
    try:
        store.add_bill(bill)
    except LedgerError as e:
        return BillCreateResult(status="rejected", error=str(e))

    logger.info("Bill %s created; due=%s frequency=%s", bill.id, bill.due_date.date(), bill.frequency)
    return BillCreateResult(status="created", bill=bill)


def run_mark_bill_paid(store: BillStore, bill_id: str, now: datetime | None = None) -> BillPaymentResult:
    """Mark a bill paid; recurring bills roll forward to their next due date."""
    bill = store.get_bill(bill_id)
    if bill is None:
        return BillPaymentResult(status="not_found", error=f"Bill not found: {bill_id}")

    updated = mark_paid(bill, now or datetime.now())
    store.save_bill(updated)
    logger.info("Bill %s marked paid; status=%s due=%s", bill.id, updated.status, updated.due_date.date())
    return BillPaymentResult(status="paid", bill=updated)


def run_refresh_overdue(store: BillStore, now: datetime | None = None) -> list[Bill]:
    """Persist active-to-overdue promotions and return all overdue bills by due date."""
    now = now or datetime.now()
    bills = store.list_bills()
    refreshed = refresh_overdue(bills, now)

    for before, after in zip(bills, refreshed):
        if after.status != before.status:
            logger.info("Bill %s is overdue (due %s)", after.id, after.due_date.date())
            store.save_bill(after)

    overdue = [bill for bill in refreshed if bill.status == "overdue"]
    return sorted(overdue, key=lambda bill: bill.due_date)
