# src/cache/base_cache_store.py - v2
"""Abstract annotation cache interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from presetindex.cache.models import CacheEntry


class BaseCacheStore(ABC):
    """Working set of cache entries for one run, keyed by preset identifier."""

    @abstractmethod
    async def load(self) -> list[CacheEntry]:
        """Bootstrap the working set and return it."""

    @abstractmethod
    def find(self, identifier: str) -> CacheEntry | None:
        """Return the entry for an identifier, if any."""

    @abstractmethod
    def upsert(self, entry: CacheEntry) -> None:
        """Insert or replace the entry with the same identifier."""

    @abstractmethod
    def prune(self, keep: Iterable[str]) -> list[str]:
        """Drop entries for identifiers outside ``keep``."""

    @abstractmethod
    async def persist(self) -> None:
        """Write the full working set to durable storage."""

    @abstractmethod
    def list_entries(self) -> list[CacheEntry]:
        """List all entries of the working set."""
