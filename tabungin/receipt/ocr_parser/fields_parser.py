"""Merchant/date/total extraction helpers."""

import re
from dataclasses import dataclass

from .common import ADDRESS_PATTERN, CURRENCY_PREFIX, parse_indonesian_number

# Receipts print the store name at the top; later lines are body text.
MERCHANT_SEARCH_LINES = 3

# Tried in order; the first family matching anywhere in the text wins.
DATE_PATTERNS = (
    # 10 May 19, 10 Mei 2019, 3 Agustus 2024
    re.compile(
        r"(?<!\d)(\d{1,2})\s+(jan|feb|mar|apr|may|mei|jun|jul|aug|agu|sep|oct|okt|nov|dec|des)[a-z]*\s+(\d{2,4})",
        re.IGNORECASE,
    ),
    # 10/05/2019, 10-05-2019
    re.compile(r"(?<!\d)(\d{1,2})[/\-](\d{1,2})[/\-](\d{2,4})"),
    # 2019/05/10, 2019-05-10
    re.compile(r"(\d{4})[/\-](\d{1,2})[/\-](\d{1,2})"),
    # 10/05/19
    re.compile(r"(?<!\d)(\d{1,2})[/\-](\d{1,2})[/\-](\d{2})\b"),
)


@dataclass(frozen=True)
class KeywordMoneyPattern:
    """An amount anchored on a label such as "total" or a currency prefix."""

    keyword: str
    regex: re.Pattern[str]


def _money_after(label: str) -> re.Pattern[str]:
    return re.compile(label + r"\s*[:.]?\s*" + CURRENCY_PREFIX + r"?\s*([\d.,]+)", re.IGNORECASE)


TOTAL_PATTERNS = (
    KeywordMoneyPattern("total", _money_after(r"total")),
    KeywordMoneyPattern("grand total", _money_after(r"grand\s*total")),
    KeywordMoneyPattern("jumlah", _money_after(r"jumlah")),
    KeywordMoneyPattern("bayar", _money_after(r"bayar")),
    KeywordMoneyPattern(
        "currency",
        re.compile(CURRENCY_PREFIX + r"\s*([\d.,]+)\s*$", re.IGNORECASE | re.MULTILINE),
    ),
)


def _extract_merchant(lines: list[str]) -> str | None:
    """Return the first plausible store name among the top lines."""
    for line in lines[:MERCHANT_SEARCH_LINES]:
        cleaned = line.strip()
        if len(cleaned) <= 2:
            continue
        if re.match(r"\d", cleaned):
            continue
        if ADDRESS_PATTERN.search(cleaned):
            continue
        return cleaned
    return None


def _extract_date(full_text: str) -> str | None:
    """Return the matched date text verbatim (no calendar validation)."""
    for pattern in DATE_PATTERNS:
        match = pattern.search(full_text)
        if match:
            return match.group(0)
    return None


def _extract_total(full_text: str) -> int | None:
    """
    Return the largest labelled amount in the text.

    Subtotals and repeated totals are all candidates; the grand total is
    normally the largest of them.
    """
    best = 0
    for pattern in TOTAL_PATTERNS:
        for match in pattern.regex.finditer(full_text):
            amount = parse_indonesian_number(match.group(1))
            if amount > best:
                best = amount
    return best if best > 0 else None
