"""Report and finding models shared by the DOCX and PDF analyzers."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Status = Literal["pass", "fail", "warning", "manual"]
Impact = Literal["critical", "serious", "moderate", "minor"]
FileType = Literal["pdf", "docx"]


class Violation(BaseModel):
    """A single check outcome. Passing checks are reported as violations too."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    wcag_criterion: str = Field(..., alias="wcagCriterion")
    description: str
    help: str
    impact: Impact
    status: Status
    details: Optional[str] = None


class ReportMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    author: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    language: Optional[str] = None
    page_count: Optional[int] = Field(None, alias="pageCount")


class Report(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(..., alias="fileName")
    file_type: FileType = Field(..., alias="fileType")
    compliance_score: int = Field(..., alias="complianceScore", ge=0, le=100)
    passed_checks: int = Field(..., alias="passedChecks", ge=0)
    total_checks: int = Field(..., alias="totalChecks", ge=0)
    violations: List[Violation] = Field(default_factory=list)
    metadata: ReportMetadata = Field(default_factory=ReportMetadata)

    def to_dict(self) -> dict:
        """Return the JSON-ready payload using the camelCase field names."""
        return self.model_dump(by_alias=True, mode="json")
