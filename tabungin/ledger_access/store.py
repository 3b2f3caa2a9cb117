"""JSON-file ledger store.

This module is the single place that reads and writes the ledger document.
The document is one JSON object:

    {
      "accounts": [...],
      "transactions": [...],
      "recurring": [...],
      "bills": [...]
    }

Writes go to a temporary file that replaces the ledger in one step, so a
reader never sees a half-written document and a failed write leaves the
previous ledger in place.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from tabungin.domain.bills import Bill
from tabungin.domain.errors import (
    AccountNotFoundError,
    BillNotFoundError,
    LedgerError,
    RuleNotFoundError,
    StaleRuleError,
)
from tabungin.domain.recurring import Account, RealizedOccurrence, RecurringRule, Transaction
from tabungin.domain.schedule import is_due
from tabungin.ledger_access.codec import (
    account_from_dict,
    account_to_dict,
    bill_from_dict,
    bill_to_dict,
    rule_from_dict,
    rule_to_dict,
    transaction_from_dict,
    transaction_to_dict,
)
from tabungin.runtime.logging import get_logger
from tabungin.runtime.settings import ConfigError

logger = get_logger(__name__)

_COLLECTIONS = ("accounts", "transactions", "recurring", "bills")

# Errors the record converters raise on wrongly shaped or typed fields.
_MALFORMED_RECORD_ERRORS = (AttributeError, KeyError, TypeError, ValueError)

# One lock per ledger file, shared by every store bound to it.
_path_locks: dict[Path, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = path.resolve()
    with _path_locks_guard:
        return _path_locks.setdefault(key, threading.Lock())


def _empty_document() -> dict[str, list[dict[str, Any]]]:
    return {name: [] for name in _COLLECTIONS}


def _index_of(records: list[dict[str, Any]], record_id: str) -> int | None:
    for idx, record in enumerate(records):
        if isinstance(record, dict) and str(record.get("id")) == record_id:
            return idx
    return None


class JsonLedgerStore:
    """Accounts, transactions, recurring rules and bills kept in one JSON file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = _lock_for(self.path)

    # -- document I/O -----------------------------------------------------

    def _load(self) -> dict[str, list[dict[str, Any]]]:
        if not self.path.exists():
            return _empty_document()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ConfigError(f"Ledger file {self.path} is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Ledger file {self.path} must contain a JSON object")

        document = _empty_document()
        for name in _COLLECTIONS:
            records = data.get(name, [])
            if not isinstance(records, list):
                raise ConfigError(f"Ledger field {name!r} must be a list")
            document[name] = records
        return document

    def _save(self, document: dict[str, list[dict[str, Any]]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
                f.write("\n")
            os.replace(tmp_name, self.path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _read(self, name: str, convert: Callable[[dict[str, Any]], Any]) -> list[Any]:
        with self._lock:
            records = self._load()[name]
        return [self._convert(name, convert, record) for record in records]

    def _convert(self, name: str, convert: Callable[[dict[str, Any]], Any], record: Any) -> Any:
        if not isinstance(record, dict):
            raise ConfigError(f"Malformed {name} record in {self.path}: expected an object, got {record!r}")
        try:
            return convert(record)
        except _MALFORMED_RECORD_ERRORS as e:
            raise ConfigError(f"Malformed {name} record in {self.path}: {e}") from e

    def _append(self, name: str, record: dict[str, Any]) -> None:
        with self._lock:
            document = self._load()
            if _index_of(document[name], str(record["id"])) is not None:
                raise LedgerError(f"Duplicate {name} id: {record['id']}")
            document[name].append(record)
            self._save(document)

    # -- accounts and transactions ----------------------------------------

    def list_accounts(self) -> list[Account]:
        return self._read("accounts", account_from_dict)

    def get_account(self, account_id: str) -> Account:
        for account in self.list_accounts():
            if account.id == account_id:
                return account
        raise AccountNotFoundError(account_id)

    def add_account(self, account: Account) -> None:
        self._append("accounts", account_to_dict(account))

    def list_transactions(self) -> list[Transaction]:
        return self._read("transactions", transaction_from_dict)

    # -- recurring rules --------------------------------------------------

    def list_rules(self) -> list[RecurringRule]:
        return self._read("recurring", rule_from_dict)

    def add_rule(self, rule: RecurringRule) -> None:
        self._append("recurring", rule_to_dict(rule))

    def list_due_rules(self, as_of: datetime) -> list[RecurringRule]:
        """Return active rules due on or before ``as_of``, earliest first."""
        due = [rule for rule in self.list_rules() if is_due(rule, as_of)]
        return sorted(due, key=lambda rule: rule.next_due_date)

    def apply_realization(
        self,
        rule: RecurringRule,
        transaction: Transaction,
        occurrence: RealizedOccurrence,
    ) -> None:
        """
        Record one realized occurrence of a rule.

        Inserts the transaction, adjusts the account balance and moves the
        rule's next due date in a single write. Nothing is written when the
        account or the rule no longer exists, or when the stored rule is no
        longer active or no longer due on ``rule.next_due_date`` because
        another sweep already realized it.
        """
        with self._lock:
            document = self._load()

            account_idx = _index_of(document["accounts"], rule.account_id)
            if account_idx is None:
                raise AccountNotFoundError(rule.account_id)
            rule_idx = _index_of(document["recurring"], rule.id)
            if rule_idx is None:
                raise RuleNotFoundError(rule.id)

            stored = self._convert("recurring", rule_from_dict, document["recurring"][rule_idx])
            if not stored.active or stored.next_due_date != rule.next_due_date:
                raise StaleRuleError(rule.id)
            account = self._convert("accounts", account_from_dict, document["accounts"][account_idx])
            new_balance = account.balance + occurrence.balance_delta

            document["transactions"].append(transaction_to_dict(transaction))
            document["accounts"][account_idx] = {
                **document["accounts"][account_idx],
                "balance": str(new_balance),
            }
            stored_rule = dict(document["recurring"][rule_idx])
            stored_rule.pop("nextDate", None)
            stored_rule["nextDueDate"] = occurrence.next_due_date.isoformat()
            document["recurring"][rule_idx] = stored_rule

            self._save(document)

        logger.debug(
            "Realized rule %s into transaction %s; next due %s",
            rule.id,
            transaction.id,
            occurrence.next_due_date.isoformat(),
        )

    # -- bills ------------------------------------------------------------

    def list_bills(self) -> list[Bill]:
        return self._read("bills", bill_from_dict)

    def get_bill(self, bill_id: str) -> Bill | None:
        for bill in self.list_bills():
            if bill.id == bill_id:
                return bill
        return None

    def add_bill(self, bill: Bill) -> None:
        self._append("bills", bill_to_dict(bill))

    def save_bill(self, bill: Bill) -> None:
        """Replace a stored bill with the given version."""
        with self._lock:
            document = self._load()
            idx = _index_of(document["bills"], bill.id)
            if idx is None:
                raise BillNotFoundError(bill.id)
            document["bills"][idx] = bill_to_dict(bill)
            self._save(document)
