# src/cache/models.py - v2
"""Cache domain model: one generated annotation pinned to a preset and its fingerprint.

Entries are stored flat, in the same shape as the published
``cache-presets.json`` artifact::

    {"rating": 4.2, "description": "...", "tags": ["..."],
     "sha1": "<fingerprint>", "rawPath": "https://.../foo.yml"}
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from presetindex.core.models import Annotation


class CacheEntry(BaseModel):
    """Single cache entry linking a preset identifier to its last annotation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    rating: float
    description: str
    tags: list[str]
    sha1: str
    raw_path: str = Field(alias="rawPath")

    @classmethod
    def from_annotation(
        cls, raw_path: str, fingerprint: str, annotation: Annotation
    ) -> CacheEntry:
        return cls(
            rating=annotation.rating,
            description=annotation.description,
            tags=list(annotation.tags),
            sha1=fingerprint,
            raw_path=raw_path,
        )

    @property
    def annotation(self) -> Annotation:
        """The cached annotation, reused verbatim on a cache hit."""
        return Annotation.model_construct(
            rating=self.rating, description=self.description, tags=list(self.tags)
        )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)
