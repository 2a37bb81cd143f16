# src/pipeline/reconciler.py - v1
"""Reconciliation driver: reuse or regenerate the annotation of every preset.

Freshness policy, per preset:

  Fresh-Cached      a cache entry exists AND (automated run OR its stored
                    fingerprint matches the current text) -> reuse verbatim
  Stale-Or-Missing  otherwise -> one generation under the retry supervisor;
                    on success the entry is upserted and the cache persisted
                    before the record is built; on exhaustion the record is
                    emitted without annotation

Category groups are reconciled concurrently; generator calls still go through
the single rate limiter. The cache is persisted once more at the end of the
run whether or not anything was regenerated.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from presetindex.annotate.generator import AnnotationGenerator
from presetindex.cache.base_cache_store import BaseCacheStore
from presetindex.cache.fingerprint import compute_fingerprint, is_fresh
from presetindex.cache.models import CacheEntry
from presetindex.core.models import Annotation, PresetDocument, PresetRecord
from presetindex.llm.rate_limiter import RateLimiter
from presetindex.llm.retry import DEFAULT_MAX_ATTEMPTS, with_retry
from presetindex.logging.context import set_preset_context

logger = logging.getLogger(__name__)


@dataclass
class ReconcileStats:
    """Per-run counters."""

    reused: int = 0
    generated: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return self.reused + self.generated + self.failed + self.skipped


class Reconciler:
    """Turn preset documents into catalog records, keeping the cache in sync.

    Usage:
        reconciler = Reconciler(store, generator, RateLimiter(15))
        records = await reconciler.run([main_docs, character_docs])
    """

    def __init__(
        self,
        store: BaseCacheStore,
        generator: AnnotationGenerator,
        rate_limiter: RateLimiter,
        *,
        automated: bool = False,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        prune_stale: bool = False,
    ) -> None:
        self._store = store
        self._generator = generator
        self._rate_limiter = rate_limiter
        self._automated = automated
        self._max_attempts = max_attempts
        self._prune_stale = prune_stale
        self.stats = ReconcileStats()

    async def run(
        self, groups: Sequence[Sequence[PresetDocument]]
    ) -> list[PresetRecord]:
        """Reconcile every group and return records in group, then document, order."""
        results = await asyncio.gather(*(self._reconcile_group(g) for g in groups))
        records = [record for group in results for record in group]

        if self._prune_stale:
            self._store.prune(doc.raw_path for group in groups for doc in group)
        await self._store.persist()

        logger.info(
            "Reconciled %d presets: %d reused, %d generated, %d failed, %d skipped",
            self.stats.total, self.stats.reused, self.stats.generated,
            self.stats.failed, self.stats.skipped,
        )
        return records

    async def _reconcile_group(
        self, documents: Sequence[PresetDocument]
    ) -> list[PresetRecord]:
        return [await self.reconcile(doc) for doc in documents]

    async def reconcile(self, document: PresetDocument) -> PresetRecord:
        """Apply the freshness policy to a single preset."""
        set_preset_context(document.raw_path, stage="lookup")
        record = PresetRecord.from_document(document)

        entry = self._store.find(document.raw_path)
        if entry is not None and (
            self._automated or is_fresh(entry.sha1, document.raw_text)
        ):
            self.stats.reused += 1
            return record.with_annotation(entry.annotation)

        if not self._generator.enabled:
            await self._generator.generate(document.raw_text)
            self.stats.skipped += 1
            return record

        set_preset_context(document.raw_path, stage="generate")
        logger.info(
            "%s annotation for %s",
            "Regenerating" if entry is not None else "Generating", document.name,
        )
        annotation = await self._regenerate(document)
        if annotation is None:
            self.stats.failed += 1
            logger.warning("No annotation for %s, emitting it bare", document.name)
            return record

        self.stats.generated += 1
        return record.with_annotation(annotation)

    async def _regenerate(self, document: PresetDocument) -> Annotation | None:
        produced: list[Annotation] = []

        async def attempt() -> None:
            result = await self._generator.generate(document.raw_text)
            if result.annotation is None:
                return
            self._store.upsert(
                CacheEntry.from_annotation(
                    document.raw_path,
                    compute_fingerprint(document.raw_text),
                    result.annotation,
                )
            )
            await self._store.persist()
            produced.append(result.annotation)

        await with_retry(
            attempt,
            rate_limiter=self._rate_limiter,
            max_attempts=self._max_attempts,
            label=f"Annotation of {document.name}",
        )
        return produced[-1] if produced else None
