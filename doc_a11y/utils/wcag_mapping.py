"""
Catalogue of the checks emitted by the analyzers and their WCAG 2.1 mapping.

Every finding is built through ``make_violation`` so a check's criterion and
impact stay fixed no matter which outcome it reports.
"""

from typing import Any, Dict, List, Optional

from doc_a11y.models import Status, Violation

WCAG_CRITERIA_DETAILS: Dict[str, Dict[str, str]] = {
    "1.1.1": {
        "name": "Non-text Content",
        "level": "A",
        "summary": "Provide text alternatives for non-text content.",
    },
    "1.3.1": {
        "name": "Info and Relationships",
        "level": "A",
        "summary": "Preserve semantics so assistive technology can convey relationships.",
    },
    "1.4.5": {
        "name": "Images of Text",
        "level": "AA",
        "summary": "Use real text rather than images of text.",
    },
    "2.4.2": {
        "name": "Page Titled",
        "level": "A",
        "summary": "Provide descriptive titles so users can identify content.",
    },
    "2.4.5": {
        "name": "Multiple Ways",
        "level": "AA",
        "summary": "Offer more than one way to locate content, such as bookmarks.",
    },
    "3.1.1": {
        "name": "Language of Page",
        "level": "A",
        "summary": "Declare the primary language for pronunciation support.",
    },
}

CHECKS: Dict[str, Dict[str, str]] = {
    "meta-title": {"criterion": "2.4.2", "impact": "serious"},
    "meta-lang": {"criterion": "3.1.1", "impact": "moderate"},
    "structure-headings": {"criterion": "1.3.1", "impact": "serious"},
    "heading-order": {"criterion": "1.3.1", "impact": "moderate"},
    "images-alt": {"criterion": "1.1.1", "impact": "critical"},
    "nav-bookmarks": {"criterion": "2.4.5", "impact": "minor"},
    "ocr-text": {"criterion": "1.4.5", "impact": "critical"},
    "structure-tags": {"criterion": "1.3.1", "impact": "critical"},
    "pdf-images-alt": {"criterion": "1.1.1", "impact": "critical"},
}

DOCX_CHECKS = ("meta-title", "meta-lang", "structure-headings", "heading-order", "images-alt")
PDF_CHECKS = ("meta-title", "meta-lang", "nav-bookmarks", "ocr-text", "structure-tags", "pdf-images-alt")


def make_violation(
    check_id: str,
    status: Status,
    description: str,
    help: str,
    details: Optional[str] = None,
) -> Violation:
    """Build a finding for a catalogued check."""
    entry = CHECKS[check_id]
    return Violation(
        id=check_id,
        wcag_criterion=entry["criterion"],
        impact=entry["impact"],
        status=status,
        description=description,
        help=help,
        details=details,
    )


def format_criterion(code: str) -> Optional[str]:
    """Return a human-friendly label for a WCAG success criterion code."""
    if not code:
        return None

    normalized = code.strip()
    details = WCAG_CRITERIA_DETAILS.get(normalized)
    if not details:
        return normalized
    return f"{normalized} {details['name']} (Level {details['level']})"


def describe_checks() -> List[Dict[str, Any]]:
    """Return the catalogue as JSON-ready entries, one per check id."""
    entries: List[Dict[str, Any]] = []
    for check_id, entry in CHECKS.items():
        criterion = entry["criterion"]
        details = WCAG_CRITERIA_DETAILS.get(criterion, {})
        file_types = [
            name
            for name, ids in (("docx", DOCX_CHECKS), ("pdf", PDF_CHECKS))
            if check_id in ids
        ]
        entries.append(
            {
                "id": check_id,
                "wcagCriterion": criterion,
                "criterionName": details.get("name"),
                "level": details.get("level"),
                "label": format_criterion(criterion),
                "impact": entry["impact"],
                "fileTypes": file_types,
            }
        )
    return entries


__all__ = ["CHECKS", "WCAG_CRITERIA_DETAILS", "describe_checks", "format_criterion", "make_violation"]
