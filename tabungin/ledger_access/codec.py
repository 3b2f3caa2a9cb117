"""Conversion between ledger records and their JSON document form."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from tabungin.domain.bills import Bill, parse_bill_frequency, parse_bill_status
from tabungin.domain.recurring import (
    Account,
    RecurringRule,
    Transaction,
    parse_frequency,
    parse_transaction_type,
)


def parse_datetime(value: str) -> datetime:
    """Parse an ISO timestamp; aware values are converted to naive local time."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _optional_datetime(value: Any) -> datetime | None:
    return parse_datetime(value) if value else None


def parse_amount(value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {value!r}") from e


def account_from_dict(data: dict[str, Any]) -> Account:
    return Account(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        balance=parse_amount(data.get("balance", "0")),
    )


def account_to_dict(account: Account) -> dict[str, Any]:
    return {"id": account.id, "name": account.name, "balance": str(account.balance)}


def transaction_from_dict(data: dict[str, Any]) -> Transaction:
    return Transaction(
        id=str(data["id"]),
        account_id=str(data["accountId"]),
        type=parse_transaction_type(data["type"]),
        amount=parse_amount(data["amount"]),
        description=str(data.get("description", "")),
        date=parse_datetime(data["date"]),
        category_id=data.get("categoryId"),
        is_recurring=bool(data.get("isRecurring", False)),
        recurring_id=data.get("recurringId"),
    )


def transaction_to_dict(transaction: Transaction) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "accountId": transaction.account_id,
        "type": transaction.type,
        "amount": str(transaction.amount),
        "description": transaction.description,
        "date": transaction.date.isoformat(),
        "categoryId": transaction.category_id,
        "isRecurring": transaction.is_recurring,
        "recurringId": transaction.recurring_id,
    }


def rule_from_dict(data: dict[str, Any]) -> RecurringRule:
    # Older exports use "nextDate" and "isActive".
    next_due = data.get("nextDueDate", data.get("nextDate"))
    if next_due is None:
        raise ValueError(f"Recurring rule {data.get('id')!r} has no next due date")
    return RecurringRule(
        id=str(data["id"]),
        account_id=str(data["accountId"]),
        type=parse_transaction_type(data["type"]),
        amount=parse_amount(data["amount"]),
        frequency=parse_frequency(data["frequency"]),
        next_due_date=parse_datetime(next_due),
        active=bool(data.get("active", data.get("isActive", True))),
        category_id=data.get("categoryId"),
        description=data.get("description"),
    )


def rule_to_dict(rule: RecurringRule) -> dict[str, Any]:
    return {
        "id": rule.id,
        "accountId": rule.account_id,
        "type": rule.type,
        "amount": str(rule.amount),
        "frequency": rule.frequency,
        "nextDueDate": rule.next_due_date.isoformat(),
        "active": rule.active,
        "categoryId": rule.category_id,
        "description": rule.description,
    }


def bill_from_dict(data: dict[str, Any]) -> Bill:
    return Bill(
        id=str(data["id"]),
        name=str(data.get("name", "")),
        amount=parse_amount(data["amount"]),
        due_date=parse_datetime(data["dueDate"]),
        frequency=parse_bill_frequency(data["frequency"]),
        status=parse_bill_status(data.get("status", "active")),
        next_due_date=_optional_datetime(data.get("nextDueDate")),
        last_paid_date=_optional_datetime(data.get("lastPaidDate")),
        category_id=data.get("categoryId"),
        reminder_days=int(data.get("reminderDays", 3)),
        autopay=bool(data.get("autopay", data.get("isAutoPay", False))),
        notes=data.get("notes"),
    )


def bill_to_dict(bill: Bill) -> dict[str, Any]:
    return {
        "id": bill.id,
        "name": bill.name,
        "amount": str(bill.amount),
        "dueDate": bill.due_date.isoformat(),
        "frequency": bill.frequency,
        "status": bill.status,
        "nextDueDate": bill.next_due_date.isoformat() if bill.next_due_date else None,
        "lastPaidDate": bill.last_paid_date.isoformat() if bill.last_paid_date else None,
        "categoryId": bill.category_id,
        "reminderDays": bill.reminder_days,
        "autopay": bill.autopay,
        "notes": bill.notes,
    }
