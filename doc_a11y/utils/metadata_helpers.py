"""Utilities for reading document metadata values into plain strings."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional

import pikepdf

_PDF_DATE = re.compile(
    r"^D?:?(?P<year>\d{4})(?P<month>\d{2})?(?P<day>\d{2})?"
    r"(?P<hour>\d{2})?(?P<minute>\d{2})?(?P<second>\d{2})?"
    r"(?P<tz>[Zz]|[+\-]\d{2}'?(?:\d{2}'?)?)?"
)


def metadata_text(value: Any) -> Optional[str]:
    """Return a clean metadata string or None if value is missing or not text."""
    if isinstance(value, pikepdf.String):
        value = str(value)
    if isinstance(value, str):
        normalized = value.strip()
        return normalized or None
    return None


def join_metadata_values(value: Any) -> Optional[str]:
    """Flatten an XMP value (text, bag/seq or language alternative) to a string."""
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        value = value.values()
    if isinstance(value, (set, frozenset)):
        value = sorted(str(item) for item in value)
    if isinstance(value, Iterable):
        parts = [str(item).strip() for item in value if str(item).strip()]
        return ", ".join(parts) or None
    return str(value).strip() or None


def _parse_tz(raw: Optional[str]) -> Optional[timezone]:
    if not raw:
        return None
    if raw in ("Z", "z"):
        return timezone.utc
    digits = raw.replace("'", "")
    sign = -1 if digits[0] == "-" else 1
    hours = int(digits[1:3])
    minutes = int(digits[3:5]) if len(digits) >= 5 else 0
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def normalize_pdf_date(value: Any) -> Optional[str]:
    """
    Convert a PDF date string (``D:YYYYMMDDHHmmSSOHH'mm'``) to ISO-8601.

    Values that do not look like PDF dates are returned unchanged (stripped);
    empty values become None.
    """
    text = metadata_text(value)
    if text is None:
        return None

    match = _PDF_DATE.match(text)
    if not match or match.end() != len(text):
        return text

    parts = match.groupdict()
    try:
        parsed = datetime(
            int(parts["year"]),
            int(parts["month"] or 1),
            int(parts["day"] or 1),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
            tzinfo=_parse_tz(parts["tz"]),
        )
    except ValueError:
        return text
    return parsed.isoformat()


__all__ = ["join_metadata_values", "metadata_text", "normalize_pdf_date"]
