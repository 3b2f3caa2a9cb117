"""Receipt scan workflow orchestration."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from tabungin.domain.receipt import ParsedReceipt
from tabungin.receipt.ocr_result_parser import parse_receipt
from tabungin.runtime.receipt_pipeline import OCRServiceUnavailable, call_ocr_service, save_ocr_json
from tabungin.runtime.receipt_storage import save_scanned_receipt

ScanStatus = Literal[
    "file_not_found",
    "ocr_unavailable",
    "scanned_saved",
]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    image_path: Path
    ocr_url: str
    timeout: float = 60.0


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan workflow."""

    status: ScanStatus
    receipt: ParsedReceipt | None = None
    scanned_path: Path | None = None
    error: str | None = None


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: OCR -> parse -> save draft to scanned/."""
    if not request.image_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    image_bytes = request.image_path.read_bytes()
    try:
        raw_ocr_result, ocr_text = call_ocr_service(
            image_bytes,
            request.ocr_url,
            filename=request.image_path.name,
            timeout=request.timeout,
        )
    except OCRServiceUnavailable as exc:
        return ReceiptScanResult(
            status="ocr_unavailable",
            error=str(exc),
        )

    save_ocr_json(raw_ocr_result, request.image_path.name)

    receipt = parse_receipt(ocr_text)
    scanned_path = save_scanned_receipt(
        receipt,
        extra={
            "image_filename": request.image_path.name,
            "image_sha256": hashlib.sha256(image_bytes).hexdigest(),
        },
    )
    return ReceiptScanResult(
        status="scanned_saved",
        receipt=receipt,
        scanned_path=scanned_path,
    )


def run_receipt_text_parse(text_path: Path) -> ReceiptScanResult:
    """Parse an OCR text file that was extracted elsewhere. Nothing is saved."""
    if not text_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"OCR text file not found: {text_path}",
        )
    return ReceiptScanResult(
        status="scanned_saved",
        receipt=parse_receipt(text_path.read_text(encoding="utf-8")),
    )
