import pytest

from doc_a11y.document_dispatch import DOCX_MIME_TYPE, PDF_MIME_TYPE


def test_health_ok(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert set(data["supportedTypes"]) == {PDF_MIME_TYPE, DOCX_MIME_TYPE}


def test_checks_catalogue_lists_every_check(client):
    response = client.get("/api/checks")
    assert response.status_code == 200
    checks = {entry["id"]: entry for entry in response.json()["checks"]}

    assert set(checks) == {
        "meta-title",
        "meta-lang",
        "structure-headings",
        "heading-order",
        "images-alt",
        "nav-bookmarks",
        "ocr-text",
        "structure-tags",
        "pdf-images-alt",
    }
    assert checks["images-alt"]["fileTypes"] == ["docx"]
    assert checks["pdf-images-alt"]["fileTypes"] == ["pdf"]
    assert checks["meta-title"]["fileTypes"] == ["docx", "pdf"]
    assert checks["ocr-text"]["label"] == "1.4.5 Images of Text (Level AA)"


def test_serverless_handler_wraps_app():
    pytest.importorskip("mangum")
    from api.index import handler
    from doc_a11y.app import app

    assert handler.app is app
