"""Tests for the OCR service client and the scan workflow."""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Any

import httpx
import pytest
from PIL import Image

from tabungin.application.receipts import scan as receipt_scan
from tabungin.application.receipts.scan import ReceiptScanRequest, run_receipt_scan
from tabungin.runtime import get_paths
from tabungin.runtime import receipt_pipeline
from tabungin.runtime.receipt_pipeline import OCRServiceUnavailable, call_ocr_service, save_ocr_json

OCR_TEXT = "Alfamart\n2024-05-10\nAqua 600ml @ 3.500\nTotal 3.500\n"


def _png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (120, 80), color="white").save(buffer, format="PNG")
    return buffer.getvalue()


def test_call_ocr_service_posts_resized_jpeg(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, Any] = {}

    def fake_post(url: str, files: dict[str, Any], timeout: float) -> httpx.Response:
        captured["url"] = url
        captured["files"] = files
        captured["timeout"] = timeout
        return httpx.Response(200, json={"text": OCR_TEXT}, request=httpx.Request("POST", url))

    monkeypatch.setattr(receipt_pipeline.httpx, "post", fake_post)

    raw, text = call_ocr_service(_png_bytes(), "http://ocr.test/", filename="a.png", timeout=5.0)

    assert raw == {"text": OCR_TEXT}
    assert text == OCR_TEXT
    assert captured["url"] == "http://ocr.test/ocr"
    assert captured["timeout"] == 5.0
    name, payload, content_type = captured["files"]["file"]
    assert name == "a.png"
    assert content_type == "image/jpeg"
    assert payload[:2] == b"\xff\xd8"


def test_call_ocr_service_non_200(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_post(url: str, files: dict[str, Any], timeout: float) -> httpx.Response:
        return httpx.Response(500, text="boom", request=httpx.Request("POST", url))

    monkeypatch.setattr(receipt_pipeline.httpx, "post", fake_post)

    with pytest.raises(OCRServiceUnavailable, match="500"):
        call_ocr_service(_png_bytes(), "http://ocr.test")


def test_call_ocr_service_connection_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_post(url: str, files: dict[str, Any], timeout: float) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=httpx.Request("POST", url))

    monkeypatch.setattr(receipt_pipeline.httpx, "post", fake_post)

    with pytest.raises(OCRServiceUnavailable) as excinfo:
        call_ocr_service(_png_bytes(), "http://ocr.test")
    assert isinstance(excinfo.value.__cause__, httpx.ConnectError)


def test_save_ocr_json(data_root: Path) -> None:
    path = save_ocr_json({"text": "x"}, "receipt_20240510.jpg")

    assert path == get_paths().receipts_ocr_json / "receipt_20240510.json"
    assert json.loads(path.read_text()) == {"text": "x"}


def test_run_receipt_scan_saves_draft(data_root: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    image = tmp_path / "struk.jpg"
    image.write_bytes(b"image-bytes")

    def fake_ocr(image_bytes: bytes, ocr_url: str, filename: str, timeout: float) -> tuple[dict[str, Any], str]:
        assert image_bytes == b"image-bytes"
        assert ocr_url == "http://ocr.test"
        return {"text": OCR_TEXT}, OCR_TEXT

    monkeypatch.setattr(receipt_scan, "call_ocr_service", fake_ocr)

    result = run_receipt_scan(ReceiptScanRequest(image_path=image, ocr_url="http://ocr.test"))

    assert result.status == "scanned_saved"
    assert result.receipt is not None
    assert result.receipt.merchant_name == "Alfamart"
    assert result.receipt.date == "2024-05-10"
    assert result.receipt.total == 3500
    assert result.scanned_path is not None
    assert result.scanned_path.name == "2024-05-10_alfamart_3500.json"
    assert json.loads(result.scanned_path.read_text())["meta"]["image_filename"] == "struk.jpg"
    assert (get_paths().receipts_ocr_json / "struk.json").exists()


def test_run_receipt_scan_ocr_unavailable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    image = tmp_path / "struk.jpg"
    image.write_bytes(b"image-bytes")

    def fake_ocr(image_bytes: bytes, ocr_url: str, filename: str, timeout: float) -> tuple[dict[str, Any], str]:
        raise OCRServiceUnavailable("Failed to connect to OCR service: refused")

    monkeypatch.setattr(receipt_scan, "call_ocr_service", fake_ocr)

    result = run_receipt_scan(ReceiptScanRequest(image_path=image, ocr_url="http://ocr.test"))

    assert result.status == "ocr_unavailable"
    assert result.scanned_path is None
    assert "refused" in (result.error or "")


def test_run_receipt_scan_missing_file(tmp_path: Path) -> None:
    result = run_receipt_scan(ReceiptScanRequest(image_path=tmp_path / "nope.jpg", ocr_url="http://ocr.test"))

    assert result.status == "file_not_found"
