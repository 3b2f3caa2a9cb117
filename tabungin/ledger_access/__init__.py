"""Centralized access to the JSON ledger file."""

from tabungin.ledger_access.api import get_ledger_store, resolve_ledger_path
from tabungin.ledger_access.store import JsonLedgerStore

__all__ = [
    "JsonLedgerStore",
    "get_ledger_store",
    "resolve_ledger_path",
]
