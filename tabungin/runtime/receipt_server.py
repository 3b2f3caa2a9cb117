"""FastAPI server for receipt uploads from a phone and the recurring cron hook."""

import hashlib
import hmac
import re
from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from tabungin.application.recurring import SweepResult, run_recurring_sweep
from tabungin.ledger_access import get_ledger_store
from tabungin.receipt.formatter import receipt_to_dict
from tabungin.receipt.ocr_result_parser import parse_receipt
from tabungin.runtime.logging import get_logger
from tabungin.runtime.paths import get_paths
from tabungin.runtime.receipt_pipeline import OCRServiceUnavailable, call_ocr_service, save_ocr_json
from tabungin.runtime.receipt_storage import save_scanned_receipt
from tabungin.runtime.settings import load_settings

logger = get_logger(__name__)


def normalize_multipart_body(body: bytes, boundary: str) -> bytes:
    """
    Rewrite part headers to CRLF line endings.

    iOS Shortcuts sends multipart bodies whose part headers end in bare LF,
    which the multipart parser rejects. Part payloads are left untouched.
    """
    boundary_bytes = b"--" + boundary.encode()
    parts = body.split(boundary_bytes)
    fixed_parts: list[bytes] = [parts[0]]

    for part in parts[1:]:
        if part.startswith(b"--") or not part:
            fixed_parts.append(part)
            continue

        leading = b""
        content = part
        for newline in (b"\r\n", b"\n"):
            if part.startswith(newline):
                leading = newline
                content = part[len(newline) :]
                break

        if b"\r\n\r\n" in content:
            header, payload = content.split(b"\r\n\r\n", 1)
        elif b"\n\n" in content:
            header, payload = content.split(b"\n\n", 1)
        else:
            fixed_parts.append(part)
            continue

        header = header.replace(b"\r\n", b"\n").replace(b"\n", b"\r\n")
        fixed_parts.append(leading + header + b"\r\n\r\n" + payload)

    return boundary_bytes.join(fixed_parts)


class FixiOSMultipartMiddleware(BaseHTTPMiddleware):
    """Fix iOS Shortcuts multipart boundary issue (LF vs CRLF)."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("multipart/form-data"):
            boundary_match = re.search(r"boundary=([^;]+)", content_type)
            if boundary_match:
                body = await request.body()
                fixed_body = normalize_multipart_body(body, boundary_match.group(1).strip().strip('"'))
                logger.debug("Normalized multipart body: %d -> %d bytes", len(body), len(fixed_body))

                async def receive() -> dict[str, Any]:
                    return {"type": "http.request", "body": fixed_body, "more_body": False}

                # Newer Starlette replays the cached body instead of calling receive.
                request._body = fixed_body
                request._receive = receive
            else:
                logger.info("Multipart request missing boundary; skipping normalization.")

        return await call_next(request)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create receipts directories on startup."""
    get_paths().ensure_receipt_directories()
    yield


app = FastAPI(title="Tabungin", lifespan=lifespan)
app.add_middleware(FixiOSMultipartMiddleware)


class ParseTextRequest(BaseModel):
    text: str


@app.post("/upload")
async def upload_receipt(request: Request) -> JSONResponse:
    """Receive a receipt image, OCR and parse it, and save the draft to scanned/."""
    form = await request.form()

    file = None
    for value in form.values():
        if hasattr(value, "read"):
            file = value
            break

    if not file:
        return JSONResponse({"status": "error", "message": "No file found in request"}, status_code=400)

    paths = get_paths()
    paths.ensure_receipt_directories()
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    file_filename = getattr(file, "filename", None)
    ext = Path(file_filename).suffix if file_filename else ".jpg"
    filename = f"receipt_{timestamp}{ext or '.jpg'}"
    filepath = paths.receipts_images / filename

    contents = await file.read()
    filepath.write_bytes(contents)
    image_sha256 = hashlib.sha256(contents).hexdigest()

    settings = load_settings()
    try:
        raw_ocr_result, ocr_text = await run_in_threadpool(
            call_ocr_service,
            contents,
            settings.ocr_url,
            filename,
            settings.ocr_timeout,
        )
    except OCRServiceUnavailable as e:
        return JSONResponse({"status": "error", "message": str(e)}, status_code=503)

    save_ocr_json(raw_ocr_result, filename)
    receipt = parse_receipt(ocr_text)
    output_path = save_scanned_receipt(
        receipt,
        extra={"image_filename": filename, "image_sha256": image_sha256},
    )
    logger.info("Received %s; saved draft %s with %d item(s)", filename, output_path.name, len(receipt.items))

    return JSONResponse(
        {
            "status": "success",
            "action": "saved_for_review",
            "message": f"Saved for review: {output_path.name}",
            "image_filename": filename,
            "image_sha256": image_sha256,
            "draft_filename": output_path.name,
            "size_bytes": len(contents),
            "receipt": receipt_to_dict(receipt),
        }
    )


@app.post("/api/receipts/parse")
def parse_receipt_text(payload: ParseTextRequest) -> dict[str, Any]:
    """Parse OCR text that was recognized on the client."""
    return receipt_to_dict(parse_receipt(payload.text))


def _sweep_response(result: SweepResult) -> dict[str, Any]:
    return {
        "success": True,
        "processed": len(result.processed),
        "errors": [{"ruleId": error.rule_id, "message": error.message} for error in result.errors],
        "timestamp": result.ran_at.isoformat(),
    }


@app.api_route("/api/cron/recurring", methods=["GET", "POST"])
def cron_recurring(authorization: str | None = Header(default=None)) -> JSONResponse:
    """Run the recurring sweep; requires the bearer cron secret when one is configured."""
    cron_secret = load_settings().cron_secret
    expected = f"Bearer {cron_secret}".encode()
    if cron_secret and not hmac.compare_digest((authorization or "").encode(), expected):
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    try:
        result = run_recurring_sweep(get_ledger_store())
    except Exception:
        logger.exception("Failed to process recurring transactions")
        return JSONResponse({"error": "Failed to process recurring transactions"}, status_code=500)

    return JSONResponse(_sweep_response(result))


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def serve(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run the server with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    serve()
