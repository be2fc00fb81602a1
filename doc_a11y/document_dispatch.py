"""Entry point that routes a document blob to the analyzer for its declared type."""

import logging
from typing import Optional

from doc_a11y.config import AnalyzerSettings
from doc_a11y.docx_analyzer import DocxAccessibilityAnalyzer
from doc_a11y.errors import UnsupportedFileTypeError
from doc_a11y.models import Report
from doc_a11y.pdf_analyzer import PDFAccessibilityAnalyzer

logger = logging.getLogger("doc-a11y-dispatch")

PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

SUPPORTED_MIME_TYPES = {
    PDF_MIME_TYPE: "pdf",
    DOCX_MIME_TYPE: "docx",
}

_EXTENSION_MIME_TYPES = {
    ".pdf": PDF_MIME_TYPE,
    ".docx": DOCX_MIME_TYPE,
}


def normalize_mime_type(mime_type: Optional[str]) -> str:
    """Lower-case a MIME type and drop parameters such as ``; charset=...``."""
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


def guess_mime_type(file_name: Optional[str]) -> Optional[str]:
    """Best-effort MIME type from a file name extension (only the supported ones)."""
    if not file_name:
        return None
    lowered = file_name.lower()
    for extension, mime_type in _EXTENSION_MIME_TYPES.items():
        if lowered.endswith(extension):
            return mime_type
    return None


def analyze_document(
    data: bytes,
    mime_type: str,
    file_name: str,
    settings: Optional[AnalyzerSettings] = None,
) -> Report:
    """
    Analyze ``data`` with the analyzer matching ``mime_type``.

    Raises:
        UnsupportedFileTypeError: the MIME type is not PDF or DOCX.
        CorruptDocumentError: the container could not be opened at all.
    """
    file_type = SUPPORTED_MIME_TYPES.get(normalize_mime_type(mime_type))
    if file_type is None:
        logger.info("[Dispatch] Rejecting %s with unsupported type %r", file_name, mime_type)
        raise UnsupportedFileTypeError(mime_type)

    if file_type == "pdf":
        return PDFAccessibilityAnalyzer(settings).analyze(data, file_name)
    return DocxAccessibilityAnalyzer(settings).analyze(data, file_name)


__all__ = [
    "DOCX_MIME_TYPE",
    "PDF_MIME_TYPE",
    "SUPPORTED_MIME_TYPES",
    "analyze_document",
    "guess_mime_type",
    "normalize_mime_type",
]
