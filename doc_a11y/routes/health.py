"""Health and diagnostics routes."""

from fastapi import APIRouter

from doc_a11y.document_dispatch import SUPPORTED_MIME_TYPES
from doc_a11y.utils.wcag_mapping import describe_checks

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Return basic service health information."""
    return {"status": "ok", "supportedTypes": sorted(SUPPORTED_MIME_TYPES)}


@router.get("/checks")
async def list_checks() -> dict:
    """Return the catalogue of checks with their WCAG criterion and impact."""
    return {"checks": describe_checks()}
