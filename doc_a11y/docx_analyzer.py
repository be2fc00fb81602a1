"""
DOCX Accessibility Analyzer Module

Shallow inspection of the Office Open XML parts of a Word document:
- docProps/core.xml for the document title (WCAG 2.4.2)
- word/styles.xml for language markers (WCAG 3.1.1) and heading styles
- word/document.xml for heading usage/order (WCAG 1.3.1) and image alt text (WCAG 1.1.1)
"""

import io
import logging
import re
import xml.etree.ElementTree as ET
import zipfile
import zlib
from typing import Dict, List, Optional, Tuple

from doc_a11y.config import AnalyzerSettings, get_settings
from doc_a11y.errors import CorruptDocumentError
from doc_a11y.models import Report, ReportMetadata, Violation
from doc_a11y.utils.check_runner import Extraction, run_check
from doc_a11y.utils.compliance_scoring import build_report
from doc_a11y.utils.wcag_mapping import make_violation
from doc_a11y.utils.xml_tree import XmlNode, parse_xml

logger = logging.getLogger("doc-a11y-docx")

CORE_PROPERTIES_PART = "docProps/core.xml"
STYLES_PART = "word/styles.xml"
DOCUMENT_PART = "word/document.xml"

HEADING_NAME_PATTERN = re.compile(r"(?:heading|nag[lł]?[oó]?wek)\s*([1-6])", re.IGNORECASE)
HEADING_ID_PATTERN = re.compile(r"heading([1-6])", re.IGNORECASE)
TITLE_STYLE_NAMES = {"title", "tytuł"}

# Used only when document.xml cannot be mapped through styles.xml.
_RAW_HEADING_REFERENCE = re.compile(
    r"<w:pStyle\s+w:val=\"(?:heading|nag[lł]?[oó]?wek)\s*([1-6])\"",
    re.IGNORECASE,
)
_RAW_LANG_MARKER = re.compile(r"<(?:\w+:)?lang\b")
_RAW_DOC_PR = re.compile(r"<wp:docPr\b[^>]*>")
_RAW_ATTR = r"\b{name}=\"([^\"]*)\""

HeadingStyleMap = Dict[str, int]


def _heading_level_from_name(name: str) -> int:
    match = HEADING_NAME_PATTERN.search(name)
    if match:
        return int(match.group(1))
    if name.strip().lower() in TITLE_STYLE_NAMES:
        return 1
    return 0


def build_heading_style_map(styles: XmlNode) -> HeadingStyleMap:
    """
    Map paragraph style ids to heading levels 1-6.

    Per style the first match wins: style name, then a ``basedOn`` reference
    to a heading style (followed through chains), then a ``headingN`` style id.
    """
    definitions: Dict[str, Tuple[str, str]] = {}
    for style in styles.iter("style"):
        style_id = style.attributes.get("styleId")
        if not style_id:
            continue
        name = (style.child_attr("name") or "").lower()
        based_on = style.child_attr("basedOn") or ""
        definitions[style_id] = (name, based_on)

    resolved: Dict[str, int] = {}

    def _level_from_id(style_id: str) -> int:
        match = HEADING_ID_PATTERN.search(style_id)
        return int(match.group(1)) if match else 0

    def _resolve(style_id: str, seen: frozenset) -> int:
        if style_id in resolved:
            return resolved[style_id]
        if style_id not in definitions:
            # A base style that is referenced but not defined, e.g. basedOn="Heading2".
            return _level_from_id(style_id)
        if style_id in seen:
            return 0

        name, based_on = definitions[style_id]
        level = _heading_level_from_name(name)
        if not level and based_on:
            level = _resolve(based_on, seen | {style_id})
        if not level:
            level = _level_from_id(style_id)

        resolved[style_id] = level
        return level

    return {
        style_id: level
        for style_id in definitions
        if (level := _resolve(style_id, frozenset())) > 0
    }


def find_hierarchy_violations(levels: List[int]) -> List[str]:
    """
    Return one message per skipped heading level.

    A heading may go up any number of levels, repeat, or go down exactly one
    level; the first heading is never flagged.
    """
    violations: List[str] = []
    last_level = 0
    for level in levels:
        if last_level > 0 and level > last_level + 1:
            violations.append(f"Skipped heading level: H{last_level} to H{level}")
        last_level = level
    return violations


def _attr_value(tag: str, name: str) -> str:
    match = re.search(_RAW_ATTR.format(name=name), tag)
    return match.group(1) if match else ""


class DocxAccessibilityAnalyzer:
    """
    Analyzes DOCX documents for a small set of WCAG 2.1 signals.

    Each instance can be reused; no state is kept between ``analyze`` calls.
    """

    def __init__(self, settings: Optional[AnalyzerSettings] = None):
        self.settings = settings or get_settings()

    def analyze(self, data: bytes, file_name: str = "document.docx") -> Report:
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, ValueError, OSError) as exc:
            raise CorruptDocumentError("docx", str(exc)) from exc

        with archive:
            logger.info("[DocxAnalyzer] Analyzing %s (%d bytes)", file_name, len(data))
            core = self._read_part(archive, CORE_PROPERTIES_PART)
            styles = self._read_part(archive, STYLES_PART)
            document = self._read_part(archive, DOCUMENT_PART)

        metadata = ReportMetadata()
        violations: List[Violation] = []

        violations += run_check(
            "title",
            lambda: self._check_title(core, metadata),
            lambda: [self._title_unreadable()],
        )
        violations += run_check(
            "language",
            lambda: self._check_language(styles, metadata),
            lambda: [self._language_missing()],
        )
        violations += run_check(
            "headings",
            lambda: self._check_headings(styles, document),
            lambda: [self._headings_missing()],
        )
        violations += run_check(
            "images",
            lambda: self._check_images(document),
            lambda: [self._images_unverifiable()],
        )

        report = build_report(file_name, "docx", violations, metadata)
        logger.info(
            "[DocxAnalyzer] %s: %d/%d checks passed (score %d)",
            file_name,
            report.passed_checks,
            report.total_checks,
            report.compliance_score,
        )
        return report

    # ------------------------------------------------------------------
    # Part loading
    # ------------------------------------------------------------------

    def _read_part(self, archive: zipfile.ZipFile, name: str) -> Extraction[bytes]:
        try:
            return Extraction.found(archive.read(name))
        except KeyError:
            logger.warning("[DocxAnalyzer] Part %s is missing", name)
            return Extraction.skipped(f"{name} is missing")
        except (zipfile.BadZipFile, zlib.error, EOFError, OSError, RuntimeError) as exc:
            # RuntimeError covers encrypted entries; zlib.error and EOFError come from damaged deflate data.
            logger.warning("[DocxAnalyzer] Could not read part %s: %s", name, exc)
            return Extraction.skipped(f"{name} could not be read")

    def _parse_part(self, part: Extraction[bytes], name: str) -> Extraction[XmlNode]:
        if not part.ok:
            return Extraction.skipped(part.skip_reason)
        try:
            return Extraction.found(parse_xml(part.value))
        except (ET.ParseError, ValueError, LookupError) as exc:
            # ValueError and LookupError come from unusable encoding declarations.
            logger.warning("[DocxAnalyzer] Failed to parse %s: %s", name, exc)
            return Extraction.skipped(f"{name} is not well-formed XML")

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _check_title(self, core_part: Extraction[bytes], metadata: ReportMetadata) -> List[Violation]:
        core = self._parse_part(core_part, CORE_PROPERTIES_PART)
        if not core.ok:
            return [self._title_unreadable(core.skip_reason)]

        properties = core.value
        title = properties.child_text("title")
        metadata.title = title or None
        metadata.author = properties.child_text("creator") or None
        metadata.created_at = properties.child_text("created") or None

        if not title.strip():
            return [
                make_violation(
                    "meta-title",
                    "fail",
                    "Document title was not found",
                    "Add a title in the document properties in Word (File > Info).",
                )
            ]
        return [
            make_violation(
                "meta-title",
                "pass",
                "Document title is present",
                "Good job!",
                details=f'Title found: "{title}"',
            )
        ]

    def _title_unreadable(self, reason: Optional[str] = None) -> Violation:
        return make_violation(
            "meta-title",
            "fail",
            "Could not read the document properties",
            "Make sure the file is a valid DOCX document.",
            details=reason,
        )

    def _check_language(self, styles_part: Extraction[bytes], metadata: ReportMetadata) -> List[Violation]:
        if not styles_part.ok:
            return [self._language_missing(styles_part.skip_reason)]

        language: Optional[str] = None
        styles = self._parse_part(styles_part, STYLES_PART)
        if styles.ok:
            lang_nodes = list(styles.value.iter("lang"))
            found = bool(lang_nodes)
            for node in lang_nodes:
                language = next(
                    (node.attributes[key] for key in ("val", "eastAsia", "bidi") if node.attributes.get(key)),
                    None,
                )
                if language:
                    break
        else:
            raw = styles_part.value.decode("utf-8", errors="replace")
            found = bool(_RAW_LANG_MARKER.search(raw))

        if not found:
            return [self._language_missing()]

        metadata.language = language
        return [
            make_violation(
                "meta-lang",
                "pass",
                "Language attribute detected in styles",
                "Make sure the correct content language is set.",
                details=f"Language: {language}" if language else None,
            )
        ]

    def _language_missing(self, reason: Optional[str] = None) -> Violation:
        return make_violation(
            "meta-lang",
            "warning",
            "No language definition found",
            "Check the language settings in Word (Review > Language).",
            details=reason,
        )

    def _check_headings(self, styles_part: Extraction[bytes], document_part: Extraction[bytes]) -> List[Violation]:
        styles = self._parse_part(styles_part, STYLES_PART)
        style_map: HeadingStyleMap = build_heading_style_map(styles.value) if styles.ok else {}
        logger.debug("[DocxAnalyzer] Heading styles: %s", style_map)

        levels: List[int] = []
        document = self._parse_part(document_part, DOCUMENT_PART)
        if document.ok and style_map:
            levels = self._heading_levels_from_styles(document.value, style_map)

        if not levels and document_part.ok:
            raw = document_part.value.decode("utf-8", errors="replace")
            levels = [int(level) for level in _RAW_HEADING_REFERENCE.findall(raw)]
            if levels:
                logger.info("[DocxAnalyzer] Headings resolved by raw style references (%d)", len(levels))

        if not levels:
            return [self._headings_missing()]

        findings = [
            make_violation(
                "structure-headings",
                "pass",
                "Headings detected",
                "A heading structure was found.",
            )
        ]

        errors = find_hierarchy_violations(levels)
        if not errors:
            findings.append(
                make_violation(
                    "heading-order",
                    "pass",
                    "Heading hierarchy is correct",
                    "Headings follow each other in a valid order (e.g. H1 -> H2).",
                )
            )
        else:
            limit = self.settings.heading_order_detail_limit
            details = ", ".join(errors[:limit]) + ("..." if len(errors) > limit else "")
            findings.append(
                make_violation(
                    "heading-order",
                    "warning",
                    f"Heading hierarchy errors ({len(errors)})",
                    "Do not skip heading levels (e.g. do not jump from H1 straight to H3).",
                    details=details,
                )
            )
        return findings

    def _heading_levels_from_styles(self, document: XmlNode, style_map: HeadingStyleMap) -> List[int]:
        body = document.find("body")
        if body is None:
            return []

        levels: List[int] = []
        for paragraph in body.iter("p"):
            properties = paragraph.find("pPr")
            style_id = properties.child_attr("pStyle") if properties is not None else None
            if style_id and style_id in style_map:
                levels.append(style_map[style_id])
        return levels

    def _headings_missing(self) -> Violation:
        return make_violation(
            "structure-headings",
            "fail",
            "No heading styles detected",
            "Use the built-in heading styles (Heading 1, Heading 2, ...) in Word.",
        )

    def _check_images(self, document_part: Extraction[bytes]) -> List[Violation]:
        if not document_part.ok:
            return [self._images_unverifiable(document_part.skip_reason)]

        document = self._parse_part(document_part, DOCUMENT_PART)
        if document.ok:
            descriptors = [(node.attributes.get("descr", ""), node.attributes.get("title", ""))
                           for node in document.value.iter("docPr")]
        else:
            raw = document_part.value.decode("utf-8", errors="replace")
            descriptors = [(_attr_value(tag, "descr"), _attr_value(tag, "title"))
                           for tag in _RAW_DOC_PR.findall(raw)]

        if not descriptors:
            return [
                make_violation(
                    "images-alt",
                    "pass",
                    "No images found",
                    "There are no images to check.",
                )
            ]

        missing = sum(1 for descr, title in descriptors if not descr.strip() and not title.strip())
        if missing == 0:
            return [
                make_violation(
                    "images-alt",
                    "pass",
                    "All images have alternative text",
                    "Great.",
                    details=f"{len(descriptors)} image(s) checked",
                )
            ]
        return [
            make_violation(
                "images-alt",
                "fail",
                f"Found {missing} image(s) without alternative text",
                "Edit the alt text of each picture in Word (right click > Edit Alt Text).",
                details=f"{missing} of {len(descriptors)} image(s) missing alternative text",
            )
        ]

    def _images_unverifiable(self, reason: Optional[str] = None) -> Violation:
        return make_violation(
            "images-alt",
            "warning",
            "Could not check images for alternative text",
            "Make sure the file is a valid DOCX document and check image alt text manually.",
            details=reason,
        )


def analyze_docx(data: bytes, file_name: str = "document.docx", settings: Optional[AnalyzerSettings] = None) -> Report:
    """Convenience wrapper mirroring ``analyze_pdf``."""
    return DocxAccessibilityAnalyzer(settings).analyze(data, file_name)
