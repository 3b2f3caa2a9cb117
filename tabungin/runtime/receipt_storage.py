"""Storage and retrieval of parsed receipt drafts.

Drafts are JSON files under ``receipts/scanned/`` named

    <date-or-unknown-date>_<merchant>_<total>.json

so they can be listed and pre-filtered without opening them. A draft is a
suggestion only; turning it into a transaction is a separate, manual step.
"""

import json
import re
from pathlib import Path
from typing import Any

from tabungin.domain.receipt import ParsedReceipt
from tabungin.receipt.formatter import receipt_from_dict, receipt_to_dict
from tabungin.runtime.logging import get_logger
from tabungin.runtime.paths import get_paths
from tabungin.runtime.settings import ConfigError

logger = get_logger(__name__)


def generate_receipt_filename(receipt: ParsedReceipt) -> str:
    """
    Generate the draft filename for a receipt.

    Format: <date>_<merchant>_<total>.json
    """
    if receipt.date:
        date_str = re.sub(r"[^0-9A-Za-z]+", "-", receipt.date).strip("-").lower()
    else:
        date_str = "unknown-date"

    # Clean merchant name for filename
    merchant_clean = (receipt.merchant_name or "").lower()
    merchant_clean = "".join(c if c.isalnum() else "_" for c in merchant_clean)
    merchant_clean = "_".join(filter(None, merchant_clean.split("_")))
    if not merchant_clean:
        merchant_clean = "unknown"
    if len(merchant_clean) > 30:
        merchant_clean = merchant_clean[:30]

    total_str = str(receipt.total) if receipt.total is not None else "0"

    return f"{date_str}_{merchant_clean}_{total_str}.json"


def save_scanned_receipt(receipt: ParsedReceipt, extra: dict[str, Any] | None = None) -> Path:
    """
    Save a parsed receipt draft to the scanned/ directory.

    Args:
        receipt: The parsed receipt
        extra: Additional metadata stored under ``"meta"`` (image name, hash)

    Returns:
        Path to the saved file
    """
    paths = get_paths()
    paths.ensure_receipt_directories()
    scanned_dir = paths.receipts_scanned

    filename = generate_receipt_filename(receipt)
    filepath = scanned_dir / filename

    # Handle filename collisions by appending a counter
    counter = 1
    base_name = filename.rsplit(".", 1)[0]
    while filepath.exists():
        filepath = scanned_dir / f"{base_name}_{counter}.json"
        counter += 1

    document = receipt_to_dict(receipt)
    if extra:
        document["meta"] = extra
    filepath.write_text(json.dumps(document, indent=2, ensure_ascii=False))
    logger.info("Saved scanned receipt to %s", filepath)

    return filepath


def load_scanned_receipt(receipt_path: Path) -> ParsedReceipt:
    """Load a draft saved by :func:`save_scanned_receipt`."""
    if not receipt_path.exists():
        raise FileNotFoundError(f"Receipt not found: {receipt_path}")
    try:
        return receipt_from_dict(json.loads(receipt_path.read_text()))
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Malformed receipt draft {receipt_path}: {e}") from e


def list_scanned_receipts() -> list[Path]:
    """List all drafts in scanned/, sorted by filename."""
    paths = get_paths()
    paths.ensure_receipt_directories()
    return sorted(paths.receipts_scanned.glob("*.json"))


def delete_receipt(receipt_path: Path) -> bool:
    """
    Delete a receipt draft.

    Returns:
        True if deleted, False if not found
    """
    if receipt_path.exists():
        receipt_path.unlink()
        logger.info("Deleted %s", receipt_path)
        return True
    return False
