"""Runtime helpers for the receipt OCR pipeline (non-HTTP-server)."""

import json
import time
from pathlib import Path
from typing import Any

import httpx

from tabungin.receipt.ocr_helpers import resize_image_bytes, transform_ocr_result
from tabungin.runtime.logging import get_logger
from tabungin.runtime.paths import get_paths

logger = get_logger(__name__)


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def call_ocr_service(
    image_bytes: bytes,
    ocr_url: str,
    filename: str = "receipt.jpg",
    timeout: float = 60.0,
) -> tuple[dict[str, Any], str]:
    """
    Send an image to the OCR service.

    Returns:
        Tuple of (raw_result, recognized_text).
    """
    ocr_url = ocr_url.rstrip("/")
    logger.info("Sending receipt to OCR service at %s...", ocr_url)

    try:
        resized_bytes = resize_image_bytes(image_bytes)

        start_time = time.time()
        response = httpx.post(
            f"{ocr_url}/ocr",
            files={"file": (filename, resized_bytes, "image/jpeg")},
            timeout=timeout,
        )
        logger.info("OCR service returned in %.2f seconds", time.time() - start_time)

        if response.status_code != 200:
            # Body is not logged: it can carry receipt text.
            logger.error("OCR service error: %s", response.status_code)
            raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")

        raw_result = response.json()
        return raw_result, transform_ocr_result(raw_result)

    except httpx.RequestError as e:
        logger.error("Failed to connect to OCR service: %s", e)
        raise OCRServiceUnavailable(f"Failed to connect to OCR service: {e}") from e


def save_ocr_json(ocr_result: dict[str, Any], image_name: str) -> Path:
    """Save the raw OCR response next to the other receipt artifacts."""
    ocr_json_dir = get_paths().receipts_ocr_json
    ocr_json_dir.mkdir(parents=True, exist_ok=True)
    ocr_json_path = ocr_json_dir / f"{Path(image_name).stem}.json"
    ocr_json_path.write_text(json.dumps(ocr_result, indent=2))
    logger.debug("OCR JSON saved to: %s", ocr_json_path)
    return ocr_json_path
