"""
PDF Accessibility Analyzer Module

Heuristic WCAG 2.1 checks using pikepdf for document structure/metadata and
pdfplumber for page text:
- info dictionary title (2.4.2) and XMP dc:language (3.1.1)
- outline/bookmarks as a navigation aid (2.4.5)
- presence of a text layer on the first pages (1.4.5)
- tagged structure tree and Figure alternative text (1.3.1, 1.1.1)
"""

import io
import logging
from typing import Any, List, Optional, Set, Tuple

import pdfplumber
import pikepdf

from doc_a11y.config import AnalyzerSettings, get_settings
from doc_a11y.errors import CorruptDocumentError
from doc_a11y.models import Report, ReportMetadata, Violation
from doc_a11y.utils.check_runner import Extraction, run_check
from doc_a11y.utils.compliance_scoring import build_report
from doc_a11y.utils.metadata_helpers import join_metadata_values, metadata_text, normalize_pdf_date
from doc_a11y.utils.struct_tree import StructNode, build_struct_tree, count_figures
from doc_a11y.utils.wcag_mapping import make_violation

logger = logging.getLogger("doc-a11y-pdf")

# Bookmark trees deeper or wider than this are almost certainly malformed.
_MAX_OUTLINE_ENTRIES = 10000


class PDFAccessibilityAnalyzer:
    """
    Analyzes PDF documents for a small set of WCAG 2.1 signals.

    Each instance can be reused; no state is kept between ``analyze`` calls.
    """

    def __init__(self, settings: Optional[AnalyzerSettings] = None):
        self.settings = settings or get_settings()

    def analyze(self, data: bytes, file_name: str = "document.pdf") -> Report:
        try:
            pdf = pikepdf.open(io.BytesIO(data))
        except pikepdf.PasswordError as exc:
            raise CorruptDocumentError("pdf", "document is password protected") from exc
        except (pikepdf.PdfError, ValueError, OSError) as exc:
            raise CorruptDocumentError("pdf", str(exc)) from exc

        with pdf:
            try:
                page_count = len(pdf.pages)
            except pikepdf.PdfError as exc:
                raise CorruptDocumentError("pdf", f"page tree could not be read: {exc}") from exc

            logger.info("[PDFAnalyzer] Analyzing %s (%d pages, %d bytes)", file_name, page_count, len(data))
            metadata = ReportMetadata(page_count=page_count)
            violations: List[Violation] = []

            violations += run_check(
                "title",
                lambda: self._check_title(pdf, metadata),
                lambda: [self._title_missing()],
            )
            violations += run_check(
                "language",
                lambda: self._check_language(pdf, metadata),
                lambda: [self._language_missing()],
            )
            violations += run_check("bookmarks", lambda: self._check_bookmarks(pdf), list)
            violations += run_check(
                "text-layer",
                lambda: self._check_text_layer(data),
                lambda: [self._text_unreadable()],
            )
            structure = self._load_struct_tree(pdf)
            violations += run_check(
                "structure",
                lambda: self._check_structure(structure),
                self._untagged_findings,
            )

        report = build_report(file_name, "pdf", violations, metadata)
        logger.info(
            "[PDFAnalyzer] %s: %d/%d checks passed (score %d)",
            file_name,
            report.passed_checks,
            report.total_checks,
            report.compliance_score,
        )
        return report

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def _is_placeholder_title(self, title: str) -> bool:
        placeholders = {value.strip().lower() for value in self.settings.placeholder_titles}
        return title.strip().lower() in placeholders

    def _check_title(self, pdf: pikepdf.Pdf, metadata: ReportMetadata) -> List[Violation]:
        docinfo = pdf.trailer.get("/Info")
        if isinstance(docinfo, pikepdf.Dictionary):
            metadata.title = metadata_text(docinfo.get("/Title"))
            metadata.author = metadata_text(docinfo.get("/Author"))
            metadata.created_at = normalize_pdf_date(docinfo.get("/CreationDate"))
        else:
            logger.info("[PDFAnalyzer] Document information dictionary not found")

        title = metadata.title
        if not title or self._is_placeholder_title(title):
            return [self._title_missing()]
        return [
            make_violation(
                "meta-title",
                "pass",
                "PDF title is present",
                "Good job!",
                details=f'Title: "{title}"',
            )
        ]

    def _title_missing(self) -> Violation:
        return make_violation(
            "meta-title",
            "fail",
            "No meaningful PDF title",
            "Set the document title in the authoring tool (e.g. InDesign, Word, Acrobat).",
        )

    def _check_language(self, pdf: pikepdf.Pdf, metadata: ReportMetadata) -> List[Violation]:
        if "/Metadata" not in pdf.Root:
            logger.info("[PDFAnalyzer] No XMP metadata stream; language unknown")
            return [self._language_missing()]

        with pdf.open_metadata(set_pikepdf_as_editor=False, update_docinfo=False) as meta:
            language = join_metadata_values(meta.get("dc:language"))

        if not language:
            return [self._language_missing()]

        metadata.language = language
        return [
            make_violation(
                "meta-lang",
                "pass",
                "Document language is specified",
                "Great.",
                details=f"Language: {language}",
            )
        ]

    def _language_missing(self) -> Violation:
        return make_violation(
            "meta-lang",
            "warning",
            "No language found in the document metadata",
            "Make sure the document language is set in Document Properties > Advanced.",
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _count_outline_entries(self, pdf: pikepdf.Pdf) -> int:
        outlines_root = pdf.Root.get("/Outlines")
        if not isinstance(outlines_root, pikepdf.Dictionary):
            return 0

        count = 0
        seen: Set[Tuple[int, int]] = set()
        pending: List[Any] = [outlines_root.get("/First")]
        while pending and count < _MAX_OUTLINE_ENTRIES:
            entry = pending.pop()
            if not isinstance(entry, pikepdf.Dictionary):
                continue
            key = tuple(entry.objgen)
            if key != (0, 0):
                if key in seen:
                    continue
                seen.add(key)
            count += 1
            pending.append(entry.get("/Next"))
            pending.append(entry.get("/First"))
        return count

    def _check_bookmarks(self, pdf: pikepdf.Pdf) -> List[Violation]:
        entries = self._count_outline_entries(pdf)
        if entries == 0:
            # Missing bookmarks are not penalized.
            return []
        return [
            make_violation(
                "nav-bookmarks",
                "pass",
                "Bookmarks / table of contents detected",
                "Good for navigation.",
                details=f"{entries} bookmark(s)",
            )
        ]

    # ------------------------------------------------------------------
    # Text layer
    # ------------------------------------------------------------------

    def _sample_text_length(self, data: bytes) -> int:
        total = 0
        # Only the sampled pages are turned into pdfplumber Page objects.
        sample = range(1, self.settings.ocr_sample_pages + 1)
        with pdfplumber.open(io.BytesIO(data), pages=sample) as document:
            for page in document.pages:
                text = page.extract_text() or ""
                total += len(text.replace("\n", ""))
        return total

    def _check_text_layer(self, data: bytes) -> List[Violation]:
        text_length = self._sample_text_length(data)
        logger.debug("[PDFAnalyzer] Sampled %d text characters", text_length)
        if text_length < self.settings.ocr_min_text_length:
            return [
                make_violation(
                    "ocr-text",
                    "warning",
                    "Very little text detected. Scanned PDF?",
                    "If this is a scanned document, make sure OCR (optical character recognition) was performed.",
                    details=f"{text_length} character(s) on the first {self.settings.ocr_sample_pages} page(s)",
                )
            ]
        return [
            make_violation(
                "ocr-text",
                "pass",
                "Text content detected",
                "The document appears to contain real text.",
            )
        ]

    def _text_unreadable(self) -> Violation:
        return make_violation(
            "ocr-text",
            "warning",
            "Text content could not be extracted",
            "Check manually that the document has a selectable text layer.",
        )

    # ------------------------------------------------------------------
    # Structure tree
    # ------------------------------------------------------------------

    def _load_struct_tree(self, pdf: pikepdf.Pdf) -> Extraction[StructNode]:
        try:
            struct_tree_root = pdf.Root.get("/StructTreeRoot")
            if struct_tree_root is None:
                return Extraction.skipped("document has no StructTreeRoot")
            return Extraction.found(build_struct_tree(struct_tree_root, self.settings.structure_max_depth))
        except Exception as exc:
            logger.warning("[PDFAnalyzer] Structure tree could not be read: %s", exc)
            return Extraction.skipped("structure tree could not be read")

    def _check_structure(self, structure: Extraction[StructNode]) -> List[Violation]:
        if not structure.ok:
            logger.info("[PDFAnalyzer] Treating document as untagged: %s", structure.skip_reason)
            return self._untagged_findings()

        findings = [
            make_violation(
                "structure-tags",
                "pass",
                "Structure tags detected (tagged PDF)",
                "The document has a tag structure.",
            )
        ]

        figures, missing = count_figures(structure.value)
        logger.debug("[PDFAnalyzer] Figures: %d, missing alt: %d", figures, missing)
        if figures == 0:
            # Tag-level image detection is less certain than DOCX drawings, hence warning.
            findings.append(
                make_violation(
                    "pdf-images-alt",
                    "warning",
                    "No tagged figures (images) found in the structure",
                    'If the document contains images, make sure they are tagged as "Figure".',
                )
            )
        elif missing == 0:
            findings.append(
                make_violation(
                    "pdf-images-alt",
                    "pass",
                    "All figures (images) in the structure have alternative text",
                    "Great.",
                    details=f"{figures} figure(s) checked",
                )
            )
        else:
            findings.append(
                make_violation(
                    "pdf-images-alt",
                    "fail",
                    f"Found {missing} figure(s) without alternative text (Alt)",
                    "Use the Accessibility panel in Acrobat to add descriptions.",
                    details=f"{missing} of {figures} figure(s) missing alternative text",
                )
            )
        return findings

    def _untagged_findings(self) -> List[Violation]:
        return [
            make_violation(
                "structure-tags",
                "fail",
                "No tag structure (untagged PDF)",
                "The document must be tagged (Tagged PDF) to be accessible.",
            ),
            make_violation(
                "pdf-images-alt",
                "fail",
                "Cannot check alternative text (no tags)",
                "Enable tagging in the source document.",
            ),
        ]


def analyze_pdf(data: bytes, file_name: str = "document.pdf", settings: Optional[AnalyzerSettings] = None) -> Report:
    """Analyze PDF bytes and return the report."""
    return PDFAccessibilityAnalyzer(settings).analyze(data, file_name)
