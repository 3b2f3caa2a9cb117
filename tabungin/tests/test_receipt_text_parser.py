from tabungin.domain.receipt import ReceiptLineItem
from tabungin.receipt.ocr_parser import (
    _extract_date,
    _extract_items,
    _extract_merchant,
    _extract_total,
    parse_indonesian_number,
)
from tabungin.receipt.ocr_result_parser import parse_receipt

BREADTALK_RECEIPT = """BreadTalk
Jl. Sudirman No. 5
10 Mei 2024 14:05
1 Bread Butter Pudding 11.500
Americano    10.000
Subtotal: 21.500
Total: 21.500
Tunai 50.000
Kembalian 28.500
"""


def test_parse_indonesian_number_strips_grouping_separators() -> None:
    assert parse_indonesian_number("1.250.000") == 1250000
    assert parse_indonesian_number("11,500") == 11500
    assert parse_indonesian_number("43.500") == 43500


def test_parse_indonesian_number_returns_zero_for_non_numeric() -> None:
    assert parse_indonesian_number("") == 0
    assert parse_indonesian_number("..") == 0
    assert parse_indonesian_number("abc") == 0


def test_parse_indonesian_number_rejects_non_ascii_digits_and_underscores() -> None:
    assert parse_indonesian_number("1_000") == 0
    assert parse_indonesian_number(" 500") == 0
    assert parse_indonesian_number("١٢٣") == 0
    assert parse_indonesian_number("-5.000") == 0


def test_extract_merchant_uses_first_line() -> None:
    assert _extract_merchant(["BreadTalk", "Jl. Sudirman No. 5"]) == "BreadTalk"


def test_extract_merchant_skips_numeric_and_address_lines() -> None:
    lines = ["0812-3456", "Jl. Merdeka 10", "Warung Sederhana", "1 Nasi 10.000"]

    assert _extract_merchant(lines) == "Warung Sederhana"


def test_extract_merchant_only_searches_top_three_lines() -> None:
    lines = ["123 Main Street", "Jln. Kebon Jeruk", "021-555-0101", "Toko Makmur"]

    assert _extract_merchant(lines) is None


def test_extract_merchant_rejects_short_lines() -> None:
    assert _extract_merchant(["AB", "--", "Kopi Kenangan"]) == "Kopi Kenangan"
    assert _extract_merchant([]) is None


def test_extract_date_month_name_wins_over_numeric() -> None:
    text = "Kasir: Budi\n10/05/2024\nTerima kasih 10 Mei 2024"

    assert _extract_date(text) == "10 Mei 2024"


def test_extract_date_numeric_forms() -> None:
    assert _extract_date("Tgl 10-05-2024 13:00") == "10-05-2024"
    assert _extract_date("Tanggal 2024-05-10") == "2024-05-10"
    assert _extract_date("10/05/24") == "10/05/24"


def test_extract_date_returns_text_verbatim_without_validation() -> None:
    assert _extract_date("Tgl 32/13/2024") == "32/13/2024"


def test_extract_date_none_when_absent() -> None:
    assert _extract_date("Tidak ada tanggal di sini") is None


def test_extract_total_takes_maximum_candidate() -> None:
    assert _extract_total("Subtotal: 40.000\nTotal: 43.500") == 43500
    assert _extract_total("Total: 43.500\nSubtotal: 40.000") == 43500


def test_extract_total_supports_indonesian_labels_and_currency() -> None:
    assert _extract_total("TOTAL BAYAR Rp. 150.000") == 150000
    assert _extract_total("Jumlah 75.000") == 75000
    assert _extract_total("Kopi Susu\nRp 25.000") == 25000
    assert _extract_total("Grand Total IDR 1.250.000") == 1250000


def test_extract_total_none_without_positive_amount() -> None:
    assert _extract_total("Terima kasih") is None
    assert _extract_total("Total: 0") is None


def test_extract_items_layouts() -> None:
    lines = [
        "1 Bread Butter Pudding 11,500",
        "Kopi Susu 2 x 18.000",
        "Americano    10.000",
        "Roti Bakar @ Rp 15.000",
        "Teh Manis 5000",
    ]

    items = _extract_items(lines)

    assert items == [
        ReceiptLineItem(name="Bread Butter Pudding", quantity=1, price=11500),
        ReceiptLineItem(name="Kopi Susu", quantity=2, price=18000),
        ReceiptLineItem(name="Americano", quantity=1, price=10000),
        ReceiptLineItem(name="Roti Bakar", quantity=1, price=15000),
        ReceiptLineItem(name="Teh Manis", quantity=1, price=5000),
    ]


def test_extract_items_rejects_absurd_price() -> None:
    assert _extract_items(["1 Barang 99999999"]) == []


def test_extract_items_rejects_absurd_quantity() -> None:
    assert _extract_items(["150 Nasi Goreng 25.000"]) == []


def test_extract_items_skips_summary_and_address_lines() -> None:
    lines = [
        "Subtotal 40.000",
        "PPN 4.000",
        "Diskon 2.000",
        "Kembalian 8.000",
        "Jl. Sudirman 12.000",
        "Telp 021 5550101",
        "Nasi Goreng  25.000",
    ]

    items = _extract_items(lines)

    assert [item.name for item in items] == ["Nasi Goreng"]


def test_extract_items_skips_short_lines() -> None:
    assert _extract_items(["A 1", "x"]) == []


def test_parse_receipt_full_text() -> None:
    receipt = parse_receipt(BREADTALK_RECEIPT)

    assert receipt.merchant_name == "BreadTalk"
    assert receipt.date == "10 Mei 2024"
    assert receipt.total == 21500
    assert receipt.items == [
        ReceiptLineItem(name="Bread Butter Pudding", quantity=1, price=11500),
        ReceiptLineItem(name="Americano", quantity=1, price=10000),
    ]
    assert receipt.raw_text == BREADTALK_RECEIPT


def test_parse_receipt_is_deterministic() -> None:
    assert parse_receipt(BREADTALK_RECEIPT) == parse_receipt(BREADTALK_RECEIPT)


def test_parse_receipt_empty_text() -> None:
    receipt = parse_receipt("")

    assert receipt.merchant_name is None
    assert receipt.date is None
    assert receipt.total is None
    assert receipt.items == []
    assert receipt.raw_text == ""
