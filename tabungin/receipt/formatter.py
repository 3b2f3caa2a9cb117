"""Format ParsedReceipt data for review and for JSON storage."""

from decimal import Decimal
from typing import Any

from tabungin.domain.receipt import ParsedReceipt, ReceiptLineItem


def format_rupiah(amount: int | Decimal) -> str:
    """Format an amount Indonesian-style, e.g. ``Rp 1.250.000`` or ``-Rp 50.000``."""
    value = int(amount)
    grouped = f"{abs(value):,}".replace(",", ".")
    sign = "-" if value < 0 else ""
    return f"{sign}Rp {grouped}"


def format_receipt_review(receipt: ParsedReceipt) -> str:
    """
    Render a parsed receipt as plain text for a human to check.

    Unknown fields are shown as ``UNKNOWN`` so nothing looks confirmed that
    the parser only guessed at.
    """
    lines = []
    lines.append("; === PARSED RECEIPT - AWAITING REVIEW ===")
    lines.append(f"Merchant: {receipt.merchant_name or 'UNKNOWN'}")
    lines.append(f"Date: {receipt.date or 'UNKNOWN'}")
    lines.append(f"Total: {format_rupiah(receipt.total) if receipt.total is not None else 'UNKNOWN'}")
    lines.append("")

    lines.append(f"Items ({len(receipt.items)}):")
    for i, item in enumerate(receipt.items, 1):
        qty_str = f" x{item.quantity}" if item.quantity > 1 else ""
        lines.append(f"  {i}. {item.name}{qty_str} - {format_rupiah(item.price)}")

    items_total = sum(item.price for item in receipt.items)
    if receipt.items and receipt.total is not None and items_total != receipt.total:
        lines.append(f"  ; WARN: items sum to {format_rupiah(items_total)}")

    # Raw OCR text as comments for reference
    if receipt.raw_text:
        lines.append("")
        lines.append("; --- Raw OCR Text (for reference) ---")
        for ocr_line in receipt.raw_text.split("\n"):
            if ocr_line.strip():
                lines.append(f"; {ocr_line}")

    lines.append("")
    return "\n".join(lines)


def receipt_to_dict(receipt: ParsedReceipt) -> dict[str, Any]:
    """JSON-compatible representation used by the HTTP API and saved drafts."""
    return {
        "merchantName": receipt.merchant_name,
        "date": receipt.date,
        "total": receipt.total,
        "items": [{"name": item.name, "quantity": item.quantity, "price": item.price} for item in receipt.items],
        "rawText": receipt.raw_text,
    }


def receipt_from_dict(data: dict[str, Any]) -> ParsedReceipt:
    """Rebuild a ParsedReceipt from :func:`receipt_to_dict` output."""
    total = data.get("total")
    return ParsedReceipt(
        merchant_name=data.get("merchantName"),
        date=data.get("date"),
        total=int(total) if total is not None else None,
        items=[
            ReceiptLineItem(
                name=str(item["name"]),
                quantity=int(item.get("quantity", 1)),
                price=int(item["price"]),
            )
            for item in data.get("items", [])
        ],
        raw_text=data.get("rawText", ""),
    )
