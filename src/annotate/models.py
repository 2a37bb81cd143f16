# src/annotate/models.py - v1
"""Generation outcome types."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from presetindex.core.models import Annotation


class GenerationError(Exception):
    """A single generation attempt failed (transport, empty reply or bad payload)."""


class GenerationResult(BaseModel):
    """Outcome of AnnotationGenerator.generate().

    ``skipped`` means generation is not configured for this run; it is not a
    failure and is never retried.
    """

    status: Literal["generated", "skipped"]
    annotation: Annotation | None = None

    @classmethod
    def skipped(cls) -> GenerationResult:
        return cls(status="skipped")

    @classmethod
    def generated(cls, annotation: Annotation) -> GenerationResult:
        return cls(status="generated", annotation=annotation)

    @property
    def is_skipped(self) -> bool:
        return self.status == "skipped"
