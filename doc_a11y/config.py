"""
Process-wide configuration for the analyzers and the HTTP layer.

Settings are resolved once from the environment (optionally seeded from a
``.env`` file) and handed to analyzers explicitly. Explicit keyword overrides
take precedence over environment variables, which take precedence over the
defaults below.
"""

import logging
import os
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any, Optional, Tuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_OCR_SAMPLE_PAGES = 5
DEFAULT_OCR_MIN_TEXT_LENGTH = 50
DEFAULT_HEADING_ORDER_DETAIL_LIMIT = 5
DEFAULT_STRUCTURE_MAX_DEPTH = 50
DEFAULT_PLACEHOLDER_TITLES = ("Untitled",)
DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)

# Loggers of the PDF stack that are far too chatty at INFO/DEBUG.
_NOISY_PDF_LOGGERS = ("pdfminer", "pdfplumber")

_logging_configured = False


def _parse_positive_int(value: Any) -> Optional[int]:
    """Return value as positive int if possible; otherwise None."""
    if value is None:
        return None

    try:
        number = int(value)
    except (TypeError, ValueError):
        return None

    return number if number > 0 else None


def _parse_csv(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _env_positive_int(name: str, default: int) -> int:
    env_value = _parse_positive_int(os.getenv(name))
    if env_value is None:
        if os.getenv(name):
            logger.warning("[Config] Ignoring invalid value for %s: %r", name, os.getenv(name))
        return default
    return env_value


@dataclass(frozen=True)
class AnalyzerSettings:
    """Tunables for the heuristic checks. Immutable once created."""

    ocr_sample_pages: int = DEFAULT_OCR_SAMPLE_PAGES
    ocr_min_text_length: int = DEFAULT_OCR_MIN_TEXT_LENGTH
    heading_order_detail_limit: int = DEFAULT_HEADING_ORDER_DETAIL_LIMIT
    structure_max_depth: int = DEFAULT_STRUCTURE_MAX_DEPTH
    placeholder_titles: Tuple[str, ...] = DEFAULT_PLACEHOLDER_TITLES
    max_upload_bytes: Optional[int] = None
    cors_origins: Tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, **overrides: Any) -> "AnalyzerSettings":
        """Build settings from environment variables, then apply overrides."""
        load_dotenv()
        settings = cls(
            ocr_sample_pages=_env_positive_int("OCR_SAMPLE_PAGES", DEFAULT_OCR_SAMPLE_PAGES),
            ocr_min_text_length=_env_positive_int("OCR_MIN_TEXT_LENGTH", DEFAULT_OCR_MIN_TEXT_LENGTH),
            heading_order_detail_limit=_env_positive_int(
                "HEADING_ORDER_DETAIL_LIMIT", DEFAULT_HEADING_ORDER_DETAIL_LIMIT
            ),
            structure_max_depth=_env_positive_int("STRUCTURE_MAX_DEPTH", DEFAULT_STRUCTURE_MAX_DEPTH),
            placeholder_titles=_parse_csv(os.getenv("PDF_PLACEHOLDER_TITLES")) or DEFAULT_PLACEHOLDER_TITLES,
            max_upload_bytes=_parse_positive_int(os.getenv("MAX_UPLOAD_BYTES")),
            cors_origins=_parse_csv(os.getenv("CORS_ORIGINS")) or DEFAULT_CORS_ORIGINS,
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        )
        if overrides:
            settings = replace(settings, **overrides)
        return settings


@lru_cache(maxsize=1)
def get_settings() -> AnalyzerSettings:
    """Return the process-wide settings, resolving them on first use."""
    return AnalyzerSettings.from_env()


def configure_logging(settings: Optional[AnalyzerSettings] = None) -> None:
    """Initialize logging once for the process and quiet the PDF parsing stack."""
    global _logging_configured
    if _logging_configured:
        return

    settings = settings or get_settings()
    level = getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(level=level)
    for name in _NOISY_PDF_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _logging_configured = True
