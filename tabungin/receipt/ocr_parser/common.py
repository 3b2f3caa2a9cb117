"""Shared constants and helpers for OCR receipt parsing."""

import re

# Street/address markers that disqualify a header line as the merchant name
ADDRESS_PATTERN = re.compile(r"jl\.|jln\.|street|alamat", re.IGNORECASE)

# Lines that are never purchased items
NON_ITEM_PATTERNS = (
    # Summary, tax, discount and payment lines
    re.compile(
        r"^(total|subtotal|sub\s*total|tax|pajak|ppn|diskon|discount|tunai|cash|kembalian|change|"
        r"payment|debit|credit|kartu|card|thank|please|closed|check\s*no|pos\d*|-{3,}|={3,})",
        re.IGNORECASE,
    ),
    # Address and contact lines
    re.compile(r"^(ruko|jl\.|jln\.|alamat|telp|phone|fax|www\.|http|\.com|@)", re.IGNORECASE),
)

# Shortest line that can still hold a name and a price
MIN_ITEM_LINE_LENGTH = 4

# Sanity bounds against OCR misreads (line numbers read as quantities, merged digits)
MAX_ITEM_QUANTITY = 99
MAX_ITEM_PRICE = 10_000_000

# Rupiah amount with thousands grouping, e.g. "11.500", "11,500", "1.250.000"
GROUPED_AMOUNT = r"\d[.\d]*[,.]?\d{3}"
# Optional currency prefix, e.g. "Rp", "Rp.", "IDR"
CURRENCY_PREFIX = r"(?:rp\.?|idr)"


def parse_indonesian_number(text: str) -> int:
    """
    Parse a Rupiah amount where "." and "," are both grouping separators.

    Returns 0 when nothing numeric is left, never raises.
    """
    cleaned = re.sub(r"[.,]", "", text)
    if not (cleaned.isascii() and cleaned.isdigit()):
        return 0
    return int(cleaned)


def _split_lines(raw_text: str) -> list[str]:
    """Split OCR text into stripped, non-blank lines."""
    return [line.strip() for line in raw_text.split("\n") if line.strip()]


def _is_non_item_line(line: str) -> bool:
    """Return True for summary, payment, address or contact lines."""
    return any(pattern.search(line) for pattern in NON_ITEM_PATTERNS)
