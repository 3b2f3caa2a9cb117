"""Unified command-line interface for tabungin.

Usage:
    tabungin parse <text_file> [--json]
    tabungin scan <image> [--ocr-url URL]
    tabungin list-scanned
    tabungin recurring sweep [--ledger PATH]
    tabungin recurring list [--ledger PATH]
    tabungin bills add <name> <amount> <due_date> [--frequency F] [--ledger PATH]
    tabungin bills pay <bill_id> [--ledger PATH]
    tabungin bills overdue [--ledger PATH]
    tabungin bills upcoming [--days N] [--ledger PATH]
    tabungin serve [--host] [--port]
"""
