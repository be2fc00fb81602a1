import pytest

from doc_a11y.models import ReportMetadata
from doc_a11y.utils.compliance_scoring import build_report, count_passed, derive_compliance_score
from doc_a11y.utils.wcag_mapping import make_violation


def _findings(*statuses):
    return [
        make_violation("meta-title", status, "description", "help")
        for status in statuses
    ]


@pytest.mark.parametrize(
    "passed,total,expected",
    [
        (0, 0, 100),
        (0, 5, 0),
        (5, 5, 100),
        (1, 8, 13),
        (1, 3, 33),
        (2, 3, 67),
        (3, 5, 60),
        (5, 6, 83),
    ],
)
def test_derive_compliance_score_rounds_half_up(passed, total, expected):
    assert derive_compliance_score(passed, total) == expected


def test_only_pass_counts_toward_passed_checks():
    findings = _findings("pass", "fail", "warning", "manual", "pass")
    assert count_passed(findings) == 2


def test_build_report_totals_match_findings():
    findings = _findings("pass", "warning", "fail", "pass")
    report = build_report("sample.docx", "docx", findings)

    assert report.total_checks == len(report.violations) == 4
    assert report.passed_checks == 2
    assert report.compliance_score == 50
    assert report.violations == findings


def test_build_report_without_findings_scores_full_marks():
    report = build_report("empty.pdf", "pdf", [])

    assert report.total_checks == 0
    assert report.passed_checks == 0
    assert report.compliance_score == 100
    assert report.metadata == ReportMetadata()


def test_report_serializes_with_camel_case_names():
    metadata = ReportMetadata(title="Doc", created_at="2024-01-01T00:00:00Z", page_count=3)
    payload = build_report("doc.pdf", "pdf", _findings("pass"), metadata).to_dict()

    assert payload["fileName"] == "doc.pdf"
    assert payload["fileType"] == "pdf"
    assert payload["complianceScore"] == 100
    assert payload["passedChecks"] == 1
    assert payload["totalChecks"] == 1
    assert payload["metadata"] == {
        "title": "Doc",
        "author": None,
        "createdAt": "2024-01-01T00:00:00Z",
        "language": None,
        "pageCount": 3,
    }
    violation = payload["violations"][0]
    assert violation["wcagCriterion"] == "2.4.2"
    assert violation["impact"] == "serious"
    assert violation["details"] is None


def test_make_violation_keeps_catalogued_criterion_and_impact():
    for status in ("pass", "fail", "warning"):
        violation = make_violation("images-alt", status, "d", "h")
        assert violation.wcag_criterion == "1.1.1"
        assert violation.impact == "critical"
        assert violation.status == status
