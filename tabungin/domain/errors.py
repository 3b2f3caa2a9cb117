"""Exceptions raised by ledger operations."""


class LedgerError(Exception):
    """Base class for ledger lookup and mutation failures."""


class AccountNotFoundError(LedgerError):
    """Raised when a referenced account does not exist."""

    def __init__(self, account_id: str) -> None:
        super().__init__(f"Account not found: {account_id}")
        self.account_id = account_id


class RuleNotFoundError(LedgerError):
    """Raised when a recurring rule does not exist."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f"Recurring rule not found: {rule_id}")
        self.rule_id = rule_id


class BillNotFoundError(LedgerError):
    """Raised when a bill does not exist."""

    def __init__(self, bill_id: str) -> None:
        super().__init__(f"Bill not found: {bill_id}")
        self.bill_id = bill_id


class StaleRuleError(LedgerError):
    """Raised when a recurring rule changed after it was read for realization."""

    def __init__(self, rule_id: str) -> None:
        super().__init__(f"Recurring rule changed since it was read: {rule_id}")
        self.rule_id = rule_id
