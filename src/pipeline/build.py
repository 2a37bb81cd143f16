# src/pipeline/build.py - v2
"""Catalog build: load cache, scan presets, reconcile, write presets.json.

Usage:
    result = await build_catalog(load_settings())
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass
from pathlib import Path

from presetindex.annotate.generator import AnnotationGenerator
from presetindex.cache.base_cache_store import BaseCacheStore
from presetindex.cache.cache_factory import create_cache_store
from presetindex.config.settings import Settings
from presetindex.core.models import PresetRecord
from presetindex.llm.rate_limiter import RateLimiter
from presetindex.logging.context import clear_context, set_run_context
from presetindex.pipeline.reconciler import Reconciler, ReconcileStats
from presetindex.presets.loader import PresetSource, default_sources, scan_presets
from presetindex.storage.catalog_writer import write_catalog

logger = logging.getLogger(__name__)


@dataclass
class CatalogResult:
    """What a build produced."""

    records: list[PresetRecord]
    stats: ReconcileStats
    output_path: Path
    cache_source: str | None


async def build_catalog(
    settings: Settings,
    *,
    store: BaseCacheStore | None = None,
    generator: AnnotationGenerator | None = None,
    rate_limiter: RateLimiter | None = None,
    sources: list[PresetSource] | None = None,
) -> CatalogResult:
    """Run one full catalog build. Collaborators default to ones built from settings.

    The run id is attached to every log record of the build and cleared afterwards.
    """
    set_run_context(uuid.uuid4().hex[:8])
    try:
        return await _build(settings, store, generator, rate_limiter, sources)
    finally:
        clear_context()


async def _build(
    settings: Settings,
    store: BaseCacheStore | None,
    generator: AnnotationGenerator | None,
    rate_limiter: RateLimiter | None,
    sources: list[PresetSource] | None,
) -> CatalogResult:
    if store is None:
        store = create_cache_store(settings)
    if generator is None:
        generator = AnnotationGenerator.from_settings(settings)
    if rate_limiter is None:
        rate_limiter = RateLimiter(settings.rate_limit_per_minute)
    if sources is None:
        sources = default_sources(settings)

    await store.load()

    groups = await asyncio.gather(
        *(
            asyncio.to_thread(
                scan_presets, settings.preset_root, source, settings.remote_base_url
            )
            for source in sources
        )
    )

    reconciler = Reconciler(
        store,
        generator,
        rate_limiter,
        automated=settings.automated,
        max_attempts=settings.max_attempts,
        prune_stale=settings.cache_prune_stale,
    )
    records = await reconciler.run(groups)

    output_path = settings.output_path
    if not output_path.is_absolute():
        output_path = settings.preset_root / output_path
    await write_catalog(records, output_path)

    return CatalogResult(
        records=records,
        stats=reconciler.stats,
        output_path=output_path,
        cache_source=getattr(store, "loaded_from", None),
    )
