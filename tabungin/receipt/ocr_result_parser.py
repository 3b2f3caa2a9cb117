"""Parse raw OCR text into structured ParsedReceipt data."""

from tabungin.domain.receipt import ParsedReceipt

from .ocr_parser import _extract_date, _extract_items, _extract_merchant, _extract_total, _split_lines


def parse_receipt(raw_text: str) -> ParsedReceipt:
    """
    Parse OCR text into a ParsedReceipt.

    This is a best-effort parser - results should be manually reviewed.
    Each field is extracted independently; a field that cannot be found is
    None (or an empty item list) and never raises.

    Args:
        raw_text: Text recognized by the OCR engine, newline separated

    Returns:
        ParsedReceipt with the original text retained in ``raw_text``
    """
    lines = _split_lines(raw_text)

    return ParsedReceipt(
        merchant_name=_extract_merchant(lines),
        date=_extract_date(raw_text),
        total=_extract_total(raw_text),
        items=_extract_items(lines),
        raw_text=raw_text,
    )
