"""Helpers that keep a single failing check from aborting an analyzer run."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, Sequence, TypeVar

from doc_a11y.models import Violation

logger = logging.getLogger("doc-a11y-checks")

T = TypeVar("T")


@dataclass(frozen=True)
class Extraction(Generic[T]):
    """A document part (or value derived from one) that may be unavailable.

    Exactly one of ``value`` and ``skip_reason`` is meaningful: loaders set
    ``skip_reason`` instead of raising when the part is missing or unreadable.
    """

    value: Optional[T] = None
    skip_reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.skip_reason is None

    @classmethod
    def found(cls, value: T) -> "Extraction[T]":
        return cls(value=value)

    @classmethod
    def skipped(cls, reason: str) -> "Extraction[T]":
        return cls(skip_reason=reason)


def run_check(
    name: str,
    check: Callable[[], Sequence[Violation]],
    fallback: Callable[[], Sequence[Violation]],
) -> List[Violation]:
    """Run ``check`` and return its findings, or ``fallback()`` if it raises."""
    try:
        return list(check())
    except Exception:
        logger.exception("[Checks] %s check failed; reporting fallback finding", name)
        return list(fallback())


__all__ = ["Extraction", "run_check"]
