"""Routes for document scans."""

import asyncio
import logging

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import JSONResponse
from werkzeug.utils import secure_filename

from doc_a11y.config import get_settings
from doc_a11y.document_dispatch import (
    SUPPORTED_MIME_TYPES,
    analyze_document,
    guess_mime_type,
    normalize_mime_type,
)
from doc_a11y.errors import CorruptDocumentError, UnsupportedFileTypeError

logger = logging.getLogger("doc-a11y-scans")

router = APIRouter(prefix="/api", tags=["scans"])

# Content types browsers send when they do not recognize the file.
_GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream"}


def _resolve_mime_type(content_type: str, file_name: str) -> str:
    mime_type = normalize_mime_type(content_type)
    if mime_type in _GENERIC_CONTENT_TYPES:
        return guess_mime_type(file_name) or mime_type
    return mime_type


@router.post("/scan")
async def scan_document(file: UploadFile = File(...)):
    if not file or not file.filename:
        return JSONResponse({"error": "No file provided"}, status_code=400)

    settings = get_settings()
    log_name = secure_filename(file.filename) or "upload"
    content = await file.read()
    logger.info("[API] Received scan upload: %s (%d bytes)", log_name, len(content))

    if settings.max_upload_bytes and len(content) > settings.max_upload_bytes:
        return JSONResponse(
            {"error": f"File is too large. Maximum size is {settings.max_upload_bytes} bytes."},
            status_code=413,
        )

    mime_type = _resolve_mime_type(file.content_type or "", file.filename)
    if mime_type not in SUPPORTED_MIME_TYPES:
        return JSONResponse({"error": UnsupportedFileTypeError.user_message}, status_code=415)

    try:
        report = await asyncio.to_thread(analyze_document, content, mime_type, file.filename, settings)
    except UnsupportedFileTypeError as exc:
        return JSONResponse({"error": exc.user_message}, status_code=415)
    except CorruptDocumentError as exc:
        logger.warning("[API] Could not open %s: %s", log_name, exc.reason)
        return JSONResponse({"error": exc.user_message}, status_code=422)

    return JSONResponse(report.to_dict())
