# src/cache/json_store.py - v2
"""JSON file-backed annotation cache (``cache-presets.json``).

The store holds the working set of entries for one run, keyed by preset
identifier. It is bootstrapped from an ordered chain of sources and
persisted in full after every successful generation and once more at the
end of the run, so an interrupted build loses at most the in-flight preset.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from presetindex.cache.base_cache_store import BaseCacheStore
from presetindex.cache.models import CacheEntry
from presetindex.cache.sources import BaseCacheSource

logger = logging.getLogger(__name__)


class JsonCacheStore(BaseCacheStore):
    """Annotation cache persisted as a single JSON array."""

    def __init__(
        self,
        path: Path,
        sources: Sequence[BaseCacheSource] = (),
    ) -> None:
        self._path = Path(path)
        self._sources = list(sources)
        self._entries: dict[str, CacheEntry] = {}
        self.loaded_from: str | None = None

    @property
    def path(self) -> Path:
        return self._path

    async def load(self) -> list[CacheEntry]:
        """Bootstrap the working set from the first source that yields entries.

        Every source failure is logged and skipped. If none succeeds the
        store starts empty and every preset will be regenerated.
        """
        for source in self._sources:
            try:
                entries = await source.fetch()
            except Exception as e:
                logger.warning("Cache source %s failed: %s", source.name, e)
                continue
            if entries is None:
                logger.debug("Cache source %s has no cache", source.name)
                continue

            self._replace_all(entries)
            self.loaded_from = source.name
            logger.info(
                "Loaded %d cache entries from %s", len(self._entries), source.name
            )
            return self.list_entries()

        logger.warning("No cache source available, starting with an empty cache")
        self._entries = {}
        self.loaded_from = None
        return []

    def find(self, identifier: str) -> CacheEntry | None:
        return self._entries.get(identifier)

    def upsert(self, entry: CacheEntry) -> None:
        """Insert or replace the entry for ``entry.raw_path``."""
        self._entries[entry.raw_path] = entry

    def prune(self, keep: Iterable[str]) -> list[str]:
        """Drop entries whose identifier is not in ``keep``; return the dropped ids."""
        keep_set = set(keep)
        dropped = [k for k in self._entries if k not in keep_set]
        for k in dropped:
            del self._entries[k]
        if dropped:
            logger.info("Pruned %d stale cache entries", len(dropped))
        return dropped

    async def persist(self) -> None:
        """Overwrite the cache file with the full working set."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = [entry.to_json_dict() for entry in self._entries.values()]
        tmp = self._path.with_name(self._path.name + ".tmp")
        tmp.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        tmp.replace(self._path)
        logger.debug("Persisted %d cache entries to %s", len(payload), self._path)

    def list_entries(self) -> list[CacheEntry]:
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def _replace_all(self, entries: Iterable[CacheEntry]) -> None:
        # Older artifacts appended regenerated entries; the last one is newest.
        self._entries = {}
        for entry in entries:
            self._entries[entry.raw_path] = entry
