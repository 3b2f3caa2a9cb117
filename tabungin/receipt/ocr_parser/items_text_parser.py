"""Text-line based receipt item extraction."""

import re
from dataclasses import dataclass

from tabungin.domain.receipt import ReceiptLineItem

from .common import (
    CURRENCY_PREFIX,
    GROUPED_AMOUNT,
    MAX_ITEM_PRICE,
    MAX_ITEM_QUANTITY,
    MIN_ITEM_LINE_LENGTH,
    _is_non_item_line,
    parse_indonesian_number,
)


@dataclass(frozen=True)
class ItemLinePattern:
    """One item-line layout and which regex groups hold each field."""

    layout: str
    regex: re.Pattern[str]
    name_group: int
    price_group: int
    # None means the layout carries no quantity and implies 1.
    quantity_group: int | None = None


# Tried in order per line; the first pattern that matches and validates wins.
ITEM_LINE_PATTERNS = (
    # 1 Bread Butter Pudding 11,500
    ItemLinePattern(
        "qty_name_price",
        re.compile(r"^(\d+)\s+(.+?)\s+(" + GROUPED_AMOUNT + r")$"),
        name_group=2,
        price_group=3,
        quantity_group=1,
    ),
    # Bread Butter Pudding 1 x 11,500
    ItemLinePattern(
        "name_qty_x_price",
        re.compile(r"^(.+?)\s+(\d+)\s*[xX]\s*" + CURRENCY_PREFIX + r"?\s*([\d.,]+)", re.IGNORECASE),
        name_group=1,
        price_group=3,
        quantity_group=2,
    ),
    # Bread Butter Pudding    11,500
    ItemLinePattern(
        "name_spaced_price",
        re.compile(r"^([A-Za-z][A-Za-z\s]+[A-Za-z])\s{2,}(" + GROUPED_AMOUNT + r")$"),
        name_group=1,
        price_group=2,
    ),
    # Bread Butter Pudding @ 11,500
    ItemLinePattern(
        "name_at_price",
        re.compile(r"^(.+?)\s*@\s*" + CURRENCY_PREFIX + r"?\s*([\d.,]+)", re.IGNORECASE),
        name_group=1,
        price_group=2,
    ),
    # Bread Butter Pudding 11500
    ItemLinePattern(
        "name_price",
        re.compile(r"^([A-Za-z][A-Za-z\s]{2,})\s+(" + GROUPED_AMOUNT + r")$"),
        name_group=1,
        price_group=2,
    ),
)


def _match_item_line(line: str, pattern: ItemLinePattern) -> ReceiptLineItem | None:
    """Apply one layout to a line and return the item if it passes the sanity bounds."""
    match = pattern.regex.match(line)
    if not match:
        return None

    name = match.group(pattern.name_group).strip()
    price = parse_indonesian_number(match.group(pattern.price_group))
    if pattern.quantity_group is None:
        quantity = 1
    else:
        quantity = int(match.group(pattern.quantity_group))
        if not 1 <= quantity <= MAX_ITEM_QUANTITY:
            return None

    if len(name) <= 1 or not 0 < price < MAX_ITEM_PRICE:
        return None
    return ReceiptLineItem(name=name, quantity=quantity, price=price)


def _extract_items(lines: list[str]) -> list[ReceiptLineItem]:
    """
    Extract line items from receipt lines.

    This is heuristic-based and will likely need manual correction. Lines
    that match no layout are skipped silently.

    Args:
        lines: Non-blank text lines from the receipt, in order
    """
    items: list[ReceiptLineItem] = []
    for line in lines:
        cleaned = line.strip()
        if len(cleaned) < MIN_ITEM_LINE_LENGTH:
            continue
        if _is_non_item_line(cleaned):
            continue

        for pattern in ITEM_LINE_PATTERNS:
            item = _match_item_line(cleaned, pattern)
            if item is not None:
                items.append(item)
                break
    return items
