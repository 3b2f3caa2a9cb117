"""Receipt workflows."""

from tabungin.application.receipts.listing import ScannedReceiptListing, run_list_scanned_receipts
from tabungin.application.receipts.scan import (
    ReceiptScanRequest,
    ReceiptScanResult,
    run_receipt_scan,
    run_receipt_text_parse,
)

__all__ = [
    "ReceiptScanRequest",
    "ReceiptScanResult",
    "run_receipt_scan",
    "run_receipt_text_parse",
    "ScannedReceiptListing",
    "run_list_scanned_receipts",
]
