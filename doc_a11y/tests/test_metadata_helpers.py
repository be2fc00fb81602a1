import pytest

from doc_a11y.utils.metadata_helpers import join_metadata_values, metadata_text, normalize_pdf_date


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("D:20240102030405Z", "2024-01-02T03:04:05+00:00"),
        ("D:20240102030405+02'00'", "2024-01-02T03:04:05+02:00"),
        ("D:20240102030405-05'30", "2024-01-02T03:04:05-05:30"),
        ("D:2023", "2023-01-01T00:00:00"),
        ("20231231", "2023-12-31T00:00:00"),
        ("2024-01-02T03:04:05Z", "2024-01-02T03:04:05Z"),
        ("D:20241340", "D:20241340"),
        ("yesterday", "yesterday"),
    ],
)
def test_normalize_pdf_date(raw, expected):
    assert normalize_pdf_date(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", 42])
def test_normalize_pdf_date_empty_values(raw):
    assert normalize_pdf_date(raw) is None


def test_metadata_text_strips_and_drops_empty_values():
    assert metadata_text("  Title ") == "Title"
    assert metadata_text("") is None
    assert metadata_text(None) is None
    assert metadata_text(3) is None


def test_join_metadata_values_handles_xmp_containers():
    assert join_metadata_values("en-US") == "en-US"
    assert join_metadata_values({"fr-FR", "en-US"}) == "en-US, fr-FR"
    assert join_metadata_values(["en", " ", "de"]) == "en, de"
    assert join_metadata_values({"x-default": "en"}) == "en"
    assert join_metadata_values(set()) is None
    assert join_metadata_values(None) is None
