"""Tests for OCR transformation helpers."""

import io

from PIL import Image

from tabungin.receipt.ocr_helpers import resize_image_bytes, transform_ocr_result


def _bbox(x0: int, y0: int, x1: int, y1: int) -> list[list[int]]:
    return [[x0, y0], [x1, y0], [x1, y1], [x0, y1]]


def test_transform_passes_plain_text_through() -> None:
    assert transform_ocr_result({"text": "BreadTalk\nTotal 21.500"}) == "BreadTalk\nTotal 21.500"


def test_transform_groups_detections_into_lines() -> None:
    raw_result = {
        "image_width": 1000,
        "detections": [
            [_bbox(700, 210, 900, 240), ["11.500", 0.98]],
            [_bbox(20, 100, 300, 140), ["BreadTalk", 0.99]],
            [_bbox(20, 200, 60, 240), ["1", 0.97]],
            [_bbox(70, 202, 400, 238), ["Bread Butter Pudding", 0.96]],
        ],
    }

    assert transform_ocr_result(raw_result) == "BreadTalk\n1 Bread Butter Pudding  11.500"


def test_transform_drops_low_confidence_and_empty_detections() -> None:
    raw_result = {
        "image_width": 1000,
        "detections": [
            [_bbox(20, 100, 300, 140), ["BreadTalk", 0.99]],
            [_bbox(20, 200, 300, 240), ["#@!%", 0.2]],
            [_bbox(20, 300, 300, 340), ["   ", 0.99]],
        ],
    }

    assert transform_ocr_result(raw_result) == "BreadTalk"


def test_transform_empty_result() -> None:
    assert transform_ocr_result({}) == ""
    assert transform_ocr_result({"detections": []}) == ""


def test_resize_image_bytes_limits_dimensions_and_pads() -> None:
    source = Image.new("RGB", (4000, 1000), color="white")
    buffer = io.BytesIO()
    source.save(buffer, format="PNG")

    resized = Image.open(io.BytesIO(resize_image_bytes(buffer.getvalue(), max_dimension=2000, padding=40)))

    assert resized.format == "JPEG"
    assert resized.mode == "L"
    assert resized.size == (2080, 580)


def test_resize_image_bytes_keeps_small_images() -> None:
    source = Image.new("RGB", (300, 200), color="white")
    buffer = io.BytesIO()
    source.save(buffer, format="PNG")

    resized = Image.open(io.BytesIO(resize_image_bytes(buffer.getvalue(), padding=0, grayscale=False)))

    assert resized.mode == "RGB"
    assert resized.size == (300, 200)
