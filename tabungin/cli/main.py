#!/usr/bin/env python3

import argparse
from collections.abc import Callable, Sequence

from tabungin.runtime import ConfigError


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """
    Run a command handler and turn its outcome into an exit code.

    Handlers signal failure with sys.exit(); configuration and ledger
    document problems are reported here instead of as tracebacks.
    """
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    except ConfigError as exc:
        print(f"Configuration error: {exc}")
        return 1
    return 0


def _add_ledger_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--ledger",
        default=None,
        help="Path to ledger JSON file (default: [ledger] path from settings, else ~/.tabungin/ledger.json)",
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Tabungin personal finance utilities",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  parse <text_file>          Parse OCR text from a file
  scan <image>               Scan a receipt image via the OCR service
  list-scanned               List scanned receipt drafts
  recurring sweep            Realize due recurring transactions
  recurring list             List recurring rules
  bills add <name> <amount> <due_date>  Register a bill
  bills pay <bill_id>        Mark a bill paid
  bills overdue              List overdue bills
  bills upcoming [--days N]  List bills due soon
  serve [--port]             Start upload and cron server

Notes:
  receipts/scanned/ = OCR+parser drafts, not yet recorded as transactions
""",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse command
    parse_parser = subparsers.add_parser("parse", help="Parse OCR text from a file")
    parse_parser.add_argument("text_file", help="Path to a text file with OCR output")
    parse_parser.add_argument("--json", action="store_true", help="Print the parsed receipt as JSON")

    # scan command
    scan_parser = subparsers.add_parser("scan", help="Scan a receipt image")
    scan_parser.add_argument("image", help="Path to receipt image")
    scan_parser.add_argument("--ocr-url", default=None, help="OCR service URL (default: from settings)")

    # list commands
    subparsers.add_parser("list-scanned", help="List scanned receipt drafts")

    # recurring commands
    recurring_parser = subparsers.add_parser("recurring", help="Recurring transactions")
    recurring_subparsers = recurring_parser.add_subparsers(dest="recurring_command", help="Recurring command")
    sweep_parser = recurring_subparsers.add_parser("sweep", help="Realize due recurring transactions")
    _add_ledger_argument(sweep_parser)
    list_parser = recurring_subparsers.add_parser("list", help="List recurring rules")
    _add_ledger_argument(list_parser)

    # bills commands
    bills_parser = subparsers.add_parser("bills", help="Bills")
    bills_subparsers = bills_parser.add_subparsers(dest="bills_command", help="Bills command")
    add_parser = bills_subparsers.add_parser("add", help="Register a new bill")
    add_parser.add_argument("name", help="Bill name, e.g. \"Listrik PLN\"")
    add_parser.add_argument("amount", help="Amount in Rupiah, e.g. 350000")
    add_parser.add_argument("due_date", help="First due date (ISO format, e.g. 2024-06-05)")
    add_parser.add_argument(
        "--frequency",
        default="monthly",
        help="once, weekly, monthly or yearly; Indonesian labels accepted (default: monthly)",
    )
    add_parser.add_argument("--id", default=None, help="Bill id (default: generated)")
    add_parser.add_argument("--reminder-days", type=int, default=3, help="Days of advance reminder (default: 3)")
    add_parser.add_argument("--autopay", action="store_true", help="Bill is paid automatically")
    add_parser.add_argument("--notes", default=None, help="Free-form notes")
    _add_ledger_argument(add_parser)
    pay_parser = bills_subparsers.add_parser("pay", help="Mark a bill paid")
    pay_parser.add_argument("bill_id", help="Bill id")
    _add_ledger_argument(pay_parser)
    overdue_parser = bills_subparsers.add_parser("overdue", help="List overdue bills")
    _add_ledger_argument(overdue_parser)
    upcoming_parser = bills_subparsers.add_parser("upcoming", help="List bills due soon")
    upcoming_parser.add_argument("--days", type=int, default=7, help="Look-ahead window in days (default: 7)")
    _add_ledger_argument(upcoming_parser)

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Start upload and cron server")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "parse":
        from tabungin.cli.receipt import cmd_parse

        return _run_command(cmd_parse, args)
    elif args.command == "scan":
        from tabungin.cli.receipt import cmd_scan

        return _run_command(cmd_scan, args)
    elif args.command == "list-scanned":
        from tabungin.cli.receipt import cmd_list_scanned

        return _run_command(cmd_list_scanned, args)
    elif args.command == "serve":
        from tabungin.cli.receipt import cmd_serve

        return _run_command(cmd_serve, args)

    if args.command == "recurring":
        from tabungin.cli.ledger import cmd_recurring_list, cmd_recurring_sweep

        if args.recurring_command == "sweep":
            return _run_command(cmd_recurring_sweep, args)
        if args.recurring_command == "list":
            return _run_command(cmd_recurring_list, args)
        recurring_parser.print_help()
        return 1

    if args.command == "bills":
        from tabungin.cli.ledger import cmd_bills_add, cmd_bills_overdue, cmd_bills_pay, cmd_bills_upcoming

        if args.bills_command == "add":
            return _run_command(cmd_bills_add, args)
        if args.bills_command == "pay":
            return _run_command(cmd_bills_pay, args)
        if args.bills_command == "overdue":
            return _run_command(cmd_bills_overdue, args)
        if args.bills_command == "upcoming":
            return _run_command(cmd_bills_upcoming, args)
        bills_parser.print_help()
        return 1

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
