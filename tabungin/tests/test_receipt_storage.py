"""Tests for receipt draft formatting and storage."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tabungin.application.receipts import run_list_scanned_receipts, run_receipt_text_parse
from tabungin.domain.receipt import ParsedReceipt, ReceiptLineItem
from tabungin.receipt.formatter import (
    format_receipt_review,
    format_rupiah,
    receipt_from_dict,
    receipt_to_dict,
)
from tabungin.runtime import ConfigError, get_paths
from tabungin.runtime.receipt_storage import (
    delete_receipt,
    generate_receipt_filename,
    list_scanned_receipts,
    load_scanned_receipt,
    save_scanned_receipt,
)

RECEIPT = ParsedReceipt(
    merchant_name="BreadTalk Grand Indonesia",
    date="10 Mei 2024",
    total=21500,
    items=[
        ReceiptLineItem(name="Bread Butter Pudding", quantity=1, price=11500),
        ReceiptLineItem(name="Americano", quantity=1, price=10000),
    ],
    raw_text="BreadTalk\nTotal: 21.500",
)


def test_format_rupiah() -> None:
    assert format_rupiah(1250000) == "Rp 1.250.000"
    assert format_rupiah(500) == "Rp 500"
    assert format_rupiah(-50000) == "-Rp 50.000"


def test_review_shows_unknown_fields_and_mismatch_warning() -> None:
    receipt = ParsedReceipt(
        merchant_name=None,
        date=None,
        total=30000,
        items=[ReceiptLineItem(name="Kopi Susu", quantity=2, price=18000)],
        raw_text="???\nTotal 30.000",
    )

    review = format_receipt_review(receipt)

    assert "Merchant: UNKNOWN" in review
    assert "Date: UNKNOWN" in review
    assert "Total: Rp 30.000" in review
    assert "1. Kopi Susu x2 - Rp 18.000" in review
    assert "WARN: items sum to Rp 18.000" in review
    assert "; Total 30.000" in review


def test_review_without_mismatch() -> None:
    review = format_receipt_review(RECEIPT)

    assert "Merchant: BreadTalk Grand Indonesia" in review
    assert "WARN" not in review


def test_dict_round_trip_uses_camel_case_keys() -> None:
    data = receipt_to_dict(RECEIPT)

    assert set(data) == {"merchantName", "date", "total", "items", "rawText"}
    assert data["items"][0] == {"name": "Bread Butter Pudding", "quantity": 1, "price": 11500}
    assert receipt_from_dict(data) == RECEIPT


def test_generate_receipt_filename() -> None:
    assert generate_receipt_filename(RECEIPT) == "10-mei-2024_breadtalk_grand_indonesia_21500.json"
    assert generate_receipt_filename(ParsedReceipt(None, None, None)) == "unknown-date_unknown_0.json"


def test_save_list_load_and_delete(data_root: Path) -> None:
    first = save_scanned_receipt(RECEIPT, extra={"image_filename": "receipt_1.jpg"})
    second = save_scanned_receipt(RECEIPT)

    assert first.parent == get_paths().receipts_scanned
    assert second.name == "10-mei-2024_breadtalk_grand_indonesia_21500_1.json"
    assert json.loads(first.read_text())["meta"] == {"image_filename": "receipt_1.jpg"}
    assert list_scanned_receipts() == [first, second]
    assert load_scanned_receipt(first) == RECEIPT

    assert delete_receipt(first)
    assert not delete_receipt(first)
    assert list_scanned_receipts() == [second]


def test_load_malformed_draft_raises_config_error(data_root: Path) -> None:
    scanned = get_paths().receipts_scanned
    scanned.mkdir(parents=True)
    broken = scanned / "broken.json"
    broken.write_text('{"items": [{"quantity": 1}]}')

    with pytest.raises(ConfigError):
        load_scanned_receipt(broken)

    listing = run_list_scanned_receipts()
    assert listing.receipts == [(broken, None)]


def test_run_receipt_text_parse(tmp_path: Path) -> None:
    text_file = tmp_path / "ocr.txt"
    text_file.write_text("Warung Bu Sri\n12/05/2024\nNasi Goreng  25.000\nTotal Rp 25.000\n")

    result = run_receipt_text_parse(text_file)

    assert result.status == "scanned_saved"
    assert result.receipt is not None
    assert result.receipt.merchant_name == "Warung Bu Sri"
    assert result.receipt.total == 25000
    assert result.scanned_path is None

    missing = run_receipt_text_parse(tmp_path / "missing.txt")
    assert missing.status == "file_not_found"


def test_listing_follows_filename_order_not_save_order(data_root: Path) -> None:
    later = save_scanned_receipt(ParsedReceipt(merchant_name="Zebra Mart", date="2024-05-10", total=1000))
    earlier = save_scanned_receipt(ParsedReceipt(merchant_name="Alfamart", date="2024-05-10", total=2000))

    listing = run_list_scanned_receipts()

    assert [path for path, _ in listing.receipts] == [earlier, later]
    merchants = [receipt.merchant_name if receipt else None for _, receipt in listing.receipts]
    assert merchants == ["Alfamart", "Zebra Mart"]
