"""Recurring transaction and bill command handlers used by the unified CLI."""

import argparse
import sys
from datetime import datetime

from tabungin.runtime import get_logger

logger = get_logger(__name__)


def cmd_recurring_sweep(args: argparse.Namespace) -> None:
    """Realize every due recurring rule once."""
    from tabungin.application.recurring import run_recurring_sweep
    from tabungin.ledger_access import get_ledger_store

    result = run_recurring_sweep(get_ledger_store(args.ledger))

    print(f"Processed {len(result.processed)} recurring rule(s) at {result.ran_at.isoformat(timespec='seconds')}")
    for rule_id in result.processed:
        print(f"  ok      {rule_id}")
    for error in result.errors:
        print(f"  failed  {error.rule_id or '-'}: {error.message}")

    if result.errors:
        sys.exit(1)


def cmd_recurring_list(args: argparse.Namespace) -> None:
    """List recurring rules with their next due date."""
    from tabungin.domain.schedule import is_due
    from tabungin.ledger_access import get_ledger_store
    from tabungin.receipt.formatter import format_rupiah

    rules = get_ledger_store(args.ledger).list_rules()
    if not rules:
        print("No recurring rules found.")
        return

    now = datetime.now()
    print(f"\nRecurring rules ({len(rules)}):")
    print("-" * 72)
    for rule in sorted(rules, key=lambda r: r.next_due_date):
        if not rule.active:
            flag = "inactive"
        elif is_due(rule, now):
            flag = "DUE"
        else:
            flag = ""
        sign = "+" if rule.type == "income" else "-"
        print(
            f"  {rule.next_due_date.date().isoformat()}  {rule.frequency:<8}  "
            f"{sign}{format_rupiah(rule.amount):>14}  {rule.description or '-':<24}  {flag}"
        )
    print("-" * 72)


def cmd_bills_add(args: argparse.Namespace) -> None:
    """Register a new bill."""
    from tabungin.application.bills import BillCreateRequest, run_create_bill
    from tabungin.domain.bills import parse_bill_frequency
    from tabungin.ledger_access import get_ledger_store
    from tabungin.ledger_access.codec import parse_amount, parse_datetime
    from tabungin.receipt.formatter import format_rupiah

    try:
        request = BillCreateRequest(
            name=args.name,
            amount=parse_amount(args.amount),
            due_date=parse_datetime(args.due_date),
            frequency=parse_bill_frequency(args.frequency),
            bill_id=args.id,
            reminder_days=args.reminder_days,
            autopay=args.autopay,
            notes=args.notes,
        )
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    result = run_create_bill(get_ledger_store(args.ledger), request)
    if result.status != "created" or result.bill is None:
        print(f"Error: {result.error}")
        sys.exit(1)

    bill = result.bill
    print(f"Bill {bill.name} ({format_rupiah(bill.amount)}) added as {bill.id}.")
    print(f"  Due {bill.due_date.date().isoformat()}, {bill.frequency}", end="")
    if bill.frequency != "once" and bill.next_due_date is not None:
        print(f"; next due {bill.next_due_date.date().isoformat()}", end="")
    print(".")

def cmd_bills_pay(args: argparse.Namespace) -> None:
    """Mark a bill paid."""
    from tabungin.application.bills import run_mark_bill_paid
    from tabungin.ledger_access import get_ledger_store

    result = run_mark_bill_paid(get_ledger_store(args.ledger), args.bill_id)
    if result.status == "not_found" or result.bill is None:
        print(f"Error: {result.error}")
        sys.exit(1)

    bill = result.bill
    if bill.status == "paid":
        print(f"Bill {bill.name} paid.")
    else:
        print(f"Bill {bill.name} paid; next due {bill.due_date.date().isoformat()}.")


def cmd_bills_overdue(args: argparse.Namespace) -> None:
    """Promote overdue bills and list them."""
    from tabungin.application.bills import run_refresh_overdue
    from tabungin.ledger_access import get_ledger_store
    from tabungin.receipt.formatter import format_rupiah

    overdue = run_refresh_overdue(get_ledger_store(args.ledger))
    if not overdue:
        print("No overdue bills.")
        return

    print(f"\nOverdue bills ({len(overdue)}):")
    print("-" * 60)
    for bill in overdue:
        print(f"  {bill.due_date.date().isoformat()}  {format_rupiah(bill.amount):>14}  {bill.name:<24}  {bill.id}")
    print("-" * 60)


def cmd_bills_upcoming(args: argparse.Namespace) -> None:
    """List active bills due within the next few days."""
    from tabungin.domain.bills import upcoming_bills
    from tabungin.ledger_access import get_ledger_store
    from tabungin.receipt.formatter import format_rupiah

    bills = upcoming_bills(get_ledger_store(args.ledger).list_bills(), datetime.now(), days=args.days)
    if not bills:
        print(f"No bills due in the next {args.days} day(s).")
        return

    print(f"\nBills due in the next {args.days} day(s) ({len(bills)}):")
    print("-" * 60)
    for bill in bills:
        autopay = "  autopay" if bill.autopay else ""
        print(f"  {bill.due_date.date().isoformat()}  {format_rupiah(bill.amount):>14}  {bill.name:<24}{autopay}")
    print("-" * 60)
