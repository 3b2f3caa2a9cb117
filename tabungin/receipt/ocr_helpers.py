"""Pure OCR transformation helpers for receipt parsing."""

import io
from typing import Any

MAX_IMAGE_DIMENSION = 2000  # Resize if either dimension exceeds this
OCR_IMAGE_PADDING = 40  # White padding around image to prevent edge truncation

MIN_DETECTION_CONFIDENCE = 0.5
# Horizontal gap (fraction of image width) rendered as a column break
COLUMN_GAP_RATIO = 0.05


def resize_image_bytes(
    image_bytes: bytes,
    max_dimension: int = MAX_IMAGE_DIMENSION,
    padding: int = OCR_IMAGE_PADDING,
    grayscale: bool = True,
) -> bytes:
    """
    Prepare a receipt photo for OCR.

    Applies EXIF orientation, downsizes so neither side exceeds
    ``max_dimension``, optionally converts to grayscale and adds a white border.

    Returns:
        JPEG bytes
    """
    from PIL import Image, ImageOps

    img = Image.open(io.BytesIO(image_bytes))
    img = ImageOps.exif_transpose(img)

    width, height = img.size
    if width > max_dimension or height > max_dimension:
        scale = max_dimension / max(width, height)
        img = img.resize((int(width * scale), int(height * scale)), Image.Resampling.LANCZOS)

    img = img.convert("L") if grayscale else img.convert("RGB")
    if padding > 0:
        img = ImageOps.expand(img, border=padding, fill="white")

    buffer = io.BytesIO()
    img.save(buffer, format="JPEG", quality=95)
    return buffer.getvalue()


def _detection_row(detection: list[Any]) -> dict[str, Any] | None:
    """Flatten one ``[bbox, [text, confidence]]`` detection, or None if it is noise."""
    bbox, (text, confidence) = detection
    text = str(text).strip()
    if not text or float(confidence) < MIN_DETECTION_CONFIDENCE:
        return None

    xs = [point[0] for point in bbox]
    ys = [point[1] for point in bbox]
    return {
        "text": text,
        "min_x": min(xs),
        "max_x": max(xs),
        "y_min": min(ys),
        "y_max": max(ys),
        "center_y": sum(ys) / len(ys),
    }


def _row_threshold(rows: list[dict[str, Any]]) -> float:
    """Max center-Y distance for two detections to share a line."""
    heights = sorted(row["y_max"] - row["y_min"] for row in rows if row["y_max"] > row["y_min"])
    if not heights:
        return 6.0
    return max(6.0, heights[len(heights) // 2] * 0.5)


def _group_rows_into_lines(rows: list[dict[str, Any]]) -> list[list[dict[str, Any]]]:
    """Group detections top-to-bottom into text lines."""
    threshold = _row_threshold(rows)
    lines: list[list[dict[str, Any]]] = []
    for row in sorted(rows, key=lambda r: (r["center_y"], r["min_x"])):
        if lines:
            current = lines[-1]
            line_center = sum(r["center_y"] for r in current) / len(current)
            if abs(row["center_y"] - line_center) <= threshold:
                current.append(row)
                continue
        lines.append([row])

    for line in lines:
        line.sort(key=lambda r: r["min_x"])
    return lines


def _join_line(line: list[dict[str, Any]], image_width: float) -> str:
    """Join words, keeping wide gaps as a double space so ``name  price`` layouts survive."""
    parts = [line[0]["text"]]
    for previous, current in zip(line, line[1:]):
        gap = current["min_x"] - previous["max_x"]
        separator = "  " if image_width > 0 and gap / image_width >= COLUMN_GAP_RATIO else " "
        parts.append(separator + current["text"])
    return "".join(parts)


def transform_ocr_result(raw_result: dict[str, Any]) -> str:
    """
    Turn an OCR service response into newline-separated reading-order text.

    Services that already return plain text (``{"text": ...}``) are passed
    through unchanged. PaddleOCR-style ``detections`` are grouped into lines.
    """
    text = raw_result.get("text")
    if isinstance(text, str):
        return text

    rows = [row for row in (_detection_row(d) for d in raw_result.get("detections", [])) if row is not None]
    if not rows:
        return ""

    image_width = float(raw_result.get("image_width") or max(row["max_x"] for row in rows))
    return "\n".join(_join_line(line, image_width) for line in _group_rows_into_lines(rows))
