"""Shared helpers for turning analyzer findings into a scored report.

Every emitted finding counts toward ``totalChecks``; only findings with
status ``pass`` count toward ``passedChecks``. Warnings and manual checks are
therefore scored like failures, which keeps the score conservative for a
heuristic tool.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from doc_a11y.models import FileType, Report, ReportMetadata, Violation


def derive_compliance_score(passed: int, total: int) -> int:
    """
    Return the 0-100 compliance score for ``passed`` out of ``total`` checks.

    Halves round up, so 1 of 8 checks scores 13 rather than 12.
    """
    if total <= 0:
        return 100
    ratio = max(0, min(passed, total)) / total
    return int(math.floor(ratio * 100 + 0.5))


def count_passed(violations: Iterable[Violation]) -> int:
    return sum(1 for violation in violations if violation.status == "pass")


def build_report(
    file_name: str,
    file_type: FileType,
    violations: Sequence[Violation],
    metadata: Optional[ReportMetadata] = None,
) -> Report:
    """Reduce an ordered list of findings into a Report."""
    ordered = list(violations)
    passed = count_passed(ordered)
    total = len(ordered)
    return Report(
        file_name=file_name,
        file_type=file_type,
        compliance_score=derive_compliance_score(passed, total),
        passed_checks=passed,
        total_checks=total,
        violations=ordered,
        metadata=metadata or ReportMetadata(),
    )


__all__ = ["build_report", "count_passed", "derive_compliance_score"]
