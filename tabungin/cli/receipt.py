"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from tabungin.runtime import get_logger

logger = get_logger(__name__)


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server for receipt uploads and the cron hook."""
    from tabungin.runtime.receipt_server import serve

    print(f"Starting tabungin server on {args.host}:{args.port}")
    print(f"Upload endpoint: http://{args.host}:{args.port}/upload")
    print("Press Ctrl+C to stop")

    serve(host=args.host, port=args.port)


def cmd_parse(args: argparse.Namespace) -> None:
    """Parse an OCR text file and print the result."""
    from tabungin.application.receipts.scan import run_receipt_text_parse
    from tabungin.receipt.formatter import format_receipt_review, receipt_to_dict

    result = run_receipt_text_parse(Path(args.text_file))
    if result.status == "file_not_found" or result.receipt is None:
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        sys.exit(1)

    if args.json:
        print(json.dumps(receipt_to_dict(result.receipt), indent=2, ensure_ascii=False))
    else:
        print(format_receipt_review(result.receipt))


def cmd_scan(args: argparse.Namespace) -> None:
    """Scan a receipt image and leave the parsed draft in scanned/."""
    from tabungin.application.receipts.scan import ReceiptScanRequest, run_receipt_scan
    from tabungin.receipt.formatter import format_receipt_review
    from tabungin.runtime import load_settings

    settings = load_settings()
    result = run_receipt_scan(
        ReceiptScanRequest(
            image_path=Path(args.image),
            ocr_url=args.ocr_url or settings.ocr_url,
            timeout=settings.ocr_timeout,
        )
    )

    if result.status == "file_not_found":
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        sys.exit(1)

    if result.status == "ocr_unavailable":
        logger.error("%s", result.error)
        print(f"OCR service unavailable: {result.error}")
        print("Make sure the OCR service is running before scanning receipts.")
        sys.exit(1)

    if result.receipt is None or result.scanned_path is None:
        print("Scan failed: missing receipt output.")
        sys.exit(1)

    print(format_receipt_review(result.receipt))
    print(f"Saved draft to: {result.scanned_path}")
    print("Review the draft before recording a transaction.")


def cmd_list_scanned(args: argparse.Namespace) -> None:
    """List scanned receipt drafts in scanned/ directory."""
    from tabungin.application.receipts.listing import run_list_scanned_receipts
    from tabungin.receipt.formatter import format_rupiah

    receipts = run_list_scanned_receipts().receipts

    if not receipts:
        print("No scanned receipts found in receipts/scanned/")
        return

    print(f"\nScanned receipts ({len(receipts)}):")
    print("-" * 60)
    for path, receipt in receipts:
        if receipt is None:
            print(f"  {'UNREADABLE':<12}  {'':>14}  {'':<30}  {path.name}")
            continue
        total_str = format_rupiah(receipt.total) if receipt.total is not None else "UNKNOWN"
        merchant = receipt.merchant_name or "UNKNOWN"
        print(f"  {receipt.date or 'UNKNOWN':<12}  {total_str:>14}  {merchant:<30}  {path.name}")
    print("-" * 60)
    print(f"Total: {len(receipts)} receipt(s) awaiting manual review")
