"""Receipt listing workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from tabungin.domain.receipt import ParsedReceipt
from tabungin.runtime.receipt_storage import list_scanned_receipts, load_scanned_receipt
from tabungin.runtime.settings import ConfigError


@dataclass(frozen=True)
class ScannedReceiptListing:
    """Scanned receipt drafts for CLI display; unreadable drafts map to None."""

    receipts: list[tuple[Path, ParsedReceipt | None]]


def run_list_scanned_receipts() -> ScannedReceiptListing:
    """Load scanned receipt drafts sorted by filename."""
    receipts: list[tuple[Path, ParsedReceipt | None]] = []
    for path in list_scanned_receipts():
        try:
            receipts.append((path, load_scanned_receipt(path)))
        except ConfigError:
            receipts.append((path, None))
    return ScannedReceiptListing(receipts=receipts)
