"""Data models for receipt scanning."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ReceiptLineItem:
    """A single line item on a receipt."""

    name: str
    quantity: int
    # Line price as printed on the receipt, not necessarily a unit price.
    price: int


@dataclass(frozen=True)
class ParsedReceipt:
    """Best-effort structured view of one OCR'd receipt.

    Every field is a suggestion for a human to review before anything is
    recorded as a transaction.
    """

    merchant_name: str | None
    date: str | None  # Matched text, not normalized to a calendar date
    total: int | None
    items: list[ReceiptLineItem] = field(default_factory=list)
    raw_text: str = ""
