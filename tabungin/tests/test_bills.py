"""Tests for bill status and payment rules."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from tabungin.domain.bills import (
    Bill,
    effective_status,
    initial_next_due_date,
    mark_paid,
    parse_bill_frequency,
    parse_bill_status,
    refresh_overdue,
    upcoming_bills,
)

NOW = datetime(2024, 5, 10, 12, 0)


def _bill(**overrides: object) -> Bill:
    fields: dict[str, object] = {
        "id": "bill-1",
        "name": "Listrik PLN",
        "amount": Decimal("350000"),
        "due_date": datetime(2024, 5, 20),
        "frequency": "monthly",
    }
    fields.update(overrides)
    return Bill(**fields)  # type: ignore[arg-type]


def test_initial_next_due_date() -> None:
    assert initial_next_due_date(datetime(2024, 1, 31), "monthly") == datetime(2024, 2, 29)
    assert initial_next_due_date(datetime(2024, 1, 31), "once") == datetime(2024, 1, 31)


def test_mark_paid_one_time_bill() -> None:
    paid = mark_paid(_bill(frequency="once"), NOW)

    assert paid.status == "paid"
    assert paid.last_paid_date == NOW
    assert paid.due_date == datetime(2024, 5, 20)


def test_mark_paid_recurring_bill_rolls_forward() -> None:
    bill = _bill(due_date=datetime(2024, 5, 20), next_due_date=datetime(2024, 6, 20))

    paid = mark_paid(bill, NOW)

    assert paid.status == "active"
    assert paid.due_date == datetime(2024, 6, 20)
    assert paid.next_due_date == datetime(2024, 7, 20)
    assert paid.last_paid_date == NOW


def test_mark_paid_recurring_without_next_due_date() -> None:
    paid = mark_paid(_bill(frequency="weekly", status="overdue", due_date=datetime(2024, 5, 1)), NOW)

    assert paid.status == "active"
    assert paid.due_date == datetime(2024, 5, 8)
    assert paid.next_due_date == datetime(2024, 5, 15)


def test_effective_status_promotes_active_past_due() -> None:
    assert effective_status(_bill(due_date=datetime(2024, 5, 1)), NOW) == "overdue"
    assert effective_status(_bill(due_date=NOW), NOW) == "overdue"
    assert effective_status(_bill(due_date=datetime(2024, 5, 20)), NOW) == "active"


def test_effective_status_leaves_other_statuses() -> None:
    past = datetime(2024, 1, 1)

    assert effective_status(_bill(status="paid", due_date=past), NOW) == "paid"
    assert effective_status(_bill(status="inactive", due_date=past), NOW) == "inactive"


def test_refresh_overdue_returns_updated_copies() -> None:
    late = _bill(id="late", due_date=datetime(2024, 5, 1))
    upcoming = _bill(id="upcoming")

    refreshed = refresh_overdue([late, upcoming], NOW)

    assert [bill.status for bill in refreshed] == ["overdue", "active"]
    assert refreshed[1] is upcoming
    assert late.status == "active"


def test_upcoming_bills_window_and_order() -> None:
    bills = [
        _bill(id="later", due_date=datetime(2024, 5, 16)),
        _bill(id="soon", due_date=datetime(2024, 5, 11)),
        _bill(id="outside", due_date=datetime(2024, 5, 30)),
        _bill(id="past", due_date=datetime(2024, 5, 1)),
        _bill(id="paid", status="paid", due_date=datetime(2024, 5, 12)),
    ]

    assert [bill.id for bill in upcoming_bills(bills, NOW)] == ["soon", "later"]
    assert [bill.id for bill in upcoming_bills(bills, NOW, days=30)] == ["soon", "later", "outside"]


def test_bill_label_parsers() -> None:
    assert parse_bill_frequency("Sekali") == "once"
    assert parse_bill_status("lunas") == "paid"
    assert parse_bill_status("terlambat") == "overdue"

    with pytest.raises(ValueError):
        parse_bill_frequency("daily")
