"""
Tests for POST /api/scan.
"""

import logging

import pytest

from doc_a11y.document_dispatch import DOCX_MIME_TYPE, PDF_MIME_TYPE
from doc_a11y.tests.utils.docx_fixtures import build_docx, core_xml, document_xml, styles_xml

GENERIC_ERROR = "Failed to analyze document. Please ensure it is a valid file."


def _upload(client, name, content, content_type):
    return client.post("/api/scan", files={"file": (name, content, content_type)})


def test_scan_docx_returns_report(client):
    data = build_docx(
        core=core_xml(title="Quarterly Report"),
        styles=styles_xml([("Heading1", "heading 1", None)], lang="en-US"),
        document=document_xml(["Heading1"], images=[(None, None)]),
    )
    response = _upload(client, "quarterly.docx", data, DOCX_MIME_TYPE)

    assert response.status_code == 200
    payload = response.json()
    assert payload["fileName"] == "quarterly.docx"
    assert payload["fileType"] == "docx"
    assert payload["totalChecks"] == len(payload["violations"]) == 5
    assert payload["passedChecks"] == 4
    assert payload["complianceScore"] == 80
    assert payload["metadata"]["title"] == "Quarterly Report"

    images = next(v for v in payload["violations"] if v["id"] == "images-alt")
    assert images["status"] == "fail"
    assert images["wcagCriterion"] == "1.1.1"
    assert images["impact"] == "critical"


def test_scan_pdf_returns_report(client):
    pytest.importorskip("pikepdf")
    from doc_a11y.tests.utils.pdf_fixtures import build_pdf

    response = _upload(client, "blank.pdf", build_pdf(page_count=2, title="Blank"), PDF_MIME_TYPE)

    assert response.status_code == 200
    payload = response.json()
    assert payload["fileType"] == "pdf"
    assert payload["metadata"]["pageCount"] == 2
    assert [v["id"] for v in payload["violations"]] == [
        "meta-title",
        "meta-lang",
        "ocr-text",
        "structure-tags",
        "pdf-images-alt",
    ]


def test_generic_content_type_falls_back_to_extension(client):
    response = _upload(client, "report.docx", build_docx(), "application/octet-stream")

    assert response.status_code == 200
    assert response.json()["fileType"] == "docx"


def test_unsupported_type_is_rejected(client):
    response = _upload(client, "notes.txt", b"plain text", "text/plain")

    assert response.status_code == 415
    assert response.json() == {"error": "Unsupported file type. Upload a PDF or DOCX document."}


def test_corrupt_docx_returns_generic_error(client):
    response = _upload(client, "broken.docx", b"PK but not really a zip", DOCX_MIME_TYPE)

    assert response.status_code == 422
    assert response.json() == {"error": GENERIC_ERROR}


def test_corrupt_pdf_returns_generic_error(client):
    pytest.importorskip("pikepdf")
    response = _upload(client, "broken.pdf", b"not a pdf at all", PDF_MIME_TYPE)

    assert response.status_code == 422
    assert "Traceback" not in response.text
    assert response.json() == {"error": GENERIC_ERROR}


def test_missing_file_is_a_validation_error(client):
    response = client.post("/api/scan")
    assert response.status_code == 422


def test_upload_limit_is_enforced(client, monkeypatch):
    from doc_a11y.config import AnalyzerSettings

    monkeypatch.setattr("doc_a11y.routes.scans.get_settings", lambda: AnalyzerSettings(max_upload_bytes=16))
    response = _upload(client, "large.docx", build_docx(), DOCX_MIME_TYPE)

    assert response.status_code == 413
    assert "16 bytes" in response.json()["error"]


def test_upload_is_logged_with_sanitized_name(client, caplog):
    with caplog.at_level(logging.INFO, logger="doc-a11y-scans"):
        _upload(client, "../quarterly report.docx", build_docx(), DOCX_MIME_TYPE)

    records = [r for r in caplog.records if r.msg.startswith("[API] Received scan upload")]
    assert len(records) == 1
    assert records[0].args[0] == "quarterly_report.docx"
    assert records[0].getMessage().endswith("bytes)")
