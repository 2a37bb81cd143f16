# src/cache/cache_factory.py - v3
"""Factory for the annotation cache store."""

from __future__ import annotations

from presetindex.cache.json_store import JsonCacheStore
from presetindex.cache.sources import default_sources
from presetindex.config.settings import Settings


def create_cache_store(settings: Settings | None = None) -> JsonCacheStore:
    """Build the JSON cache store with its bootstrap chain.

    Args:
        settings: Application settings. Defaults to the built-in paths and mirrors.

    Returns:
        Store whose load() tries the local file, then each remote mirror.
    """
    settings = settings or Settings()
    cache_path = settings.cache_path
    if not cache_path.is_absolute():
        cache_path = settings.preset_root / cache_path
    sources = default_sources(
        cache_path,
        settings.cache_fallback_urls_list,
        timeout=settings.cache_fetch_timeout,
    )
    return JsonCacheStore(path=cache_path, sources=sources)
