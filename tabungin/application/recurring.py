"""Recurring transaction sweep.

Called on a schedule (CLI or the cron HTTP endpoint). Every due rule is
realized at most once per sweep; a rule that is several periods behind
catches up over subsequent sweeps.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

from tabungin.domain.recurring import RealizedOccurrence, RecurringRule, Transaction
from tabungin.domain.schedule import realize
from tabungin.runtime.logging import get_logger

logger = get_logger(__name__)

AUTO_DESCRIPTION_PREFIX = "[Otomatis]"
DEFAULT_RECURRING_DESCRIPTION = "Transaksi berulang"


class LedgerStore(Protocol):
    """Persistence needed by the sweep."""

    def list_due_rules(self, as_of: datetime) -> list[RecurringRule]: ...

    def apply_realization(
        self,
        rule: RecurringRule,
        transaction: Transaction,
        occurrence: RealizedOccurrence,
    ) -> None: ...


@dataclass(frozen=True)
class SweepError:
    """A rule that could not be realized, or a failed read when ``rule_id`` is None."""

    rule_id: str | None
    message: str


@dataclass(frozen=True)
class SweepResult:
    """Outcome of one sweep."""

    ran_at: datetime
    processed: list[str] = field(default_factory=list)
    errors: list[SweepError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def build_recurring_transaction(rule: RecurringRule, transaction_id: str | None = None) -> Transaction:
    """Create the ledger transaction for the rule's current due date."""
    return Transaction(
        id=transaction_id or uuid.uuid4().hex,
        account_id=rule.account_id,
        type=rule.type,
        amount=rule.amount,
        description=f"{AUTO_DESCRIPTION_PREFIX} {rule.description or DEFAULT_RECURRING_DESCRIPTION}",
        date=rule.next_due_date,
        category_id=rule.category_id,
        is_recurring=True,
        recurring_id=rule.id,
    )


def run_recurring_sweep(store: LedgerStore, now: datetime | None = None) -> SweepResult:
    """Realize every rule due at ``now`` and report per-rule outcomes."""
    ran_at = now or datetime.now()

    try:
        due_rules = store.list_due_rules(ran_at)
    except Exception as e:
        logger.error("Failed to load due recurring rules: %s", e)
        return SweepResult(ran_at=ran_at, errors=[SweepError(rule_id=None, message=str(e))])

    logger.info("Found %d due recurring rule(s)", len(due_rules))

    processed: list[str] = []
    errors: list[SweepError] = []
    for rule in due_rules:
        try:
            occurrence = realize(rule)
            transaction = build_recurring_transaction(rule)
            store.apply_realization(rule, transaction, occurrence)
        except Exception as e:
            logger.warning("Failed to process recurring rule %s: %s", rule.id, e)
            errors.append(SweepError(rule_id=rule.id, message=str(e)))
            continue
        processed.append(rule.id)

    logger.info("Processed %d recurring rule(s), %d error(s)", len(processed), len(errors))
    return SweepResult(ran_at=ran_at, processed=processed, errors=errors)
