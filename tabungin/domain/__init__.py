"""Core domain models and pure rules for the tabungin project.

This package provides:
- ParsedReceipt, ReceiptLineItem: receipt scanning models
- RecurringRule, RealizedOccurrence, Account, Transaction: ledger models
- Bill: bill tracking model
- schedule: due-ness, advancement and realization of recurring rules

Usage:
    from tabungin.domain import ParsedReceipt, RecurringRule, realize
"""

from tabungin.domain.bills import Bill, effective_status, mark_paid
from tabungin.domain.errors import (
    AccountNotFoundError,
    BillNotFoundError,
    LedgerError,
    RuleNotFoundError,
    StaleRuleError,
)
from tabungin.domain.receipt import ParsedReceipt, ReceiptLineItem
from tabungin.domain.recurring import Account, RealizedOccurrence, RecurringRule, Transaction
from tabungin.domain.schedule import advance, balance_delta, is_due, realize

__all__ = [
    "Account",
    "AccountNotFoundError",
    "Bill",
    "BillNotFoundError",
    "LedgerError",
    "ParsedReceipt",
    "RealizedOccurrence",
    "ReceiptLineItem",
    "RecurringRule",
    "RuleNotFoundError",
    "StaleRuleError",
    "Transaction",
    "advance",
    "balance_delta",
    "effective_status",
    "is_due",
    "mark_paid",
    "realize",
]
