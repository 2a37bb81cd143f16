# src/cache/sources.py - v1
"""Cache bootstrap sources, tried in order until one yields entries.

Default chain:
  1. LocalFileSource  - cache-presets.json next to the catalog
  2. RemoteUrlSource  - published cache on the ``preset`` branch
  3. RemoteUrlSource  - published cache on the ``main`` branch

A source returns ``None`` when it has nothing to offer and raises when it
fails; either way the store moves on to the next one.
"""

from __future__ import annotations

import asyncio
import json
import logging
import urllib.request
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from presetindex.cache.models import CacheEntry

logger = logging.getLogger(__name__)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/114.0.0.0 Safari/537.36"
)


class BaseCacheSource(ABC):
    """One place a cache artifact may be loaded from."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable source label for logs."""

    @abstractmethod
    async def fetch(self) -> list[CacheEntry] | None:
        """Return the entries of this source, or None if it has none."""


class LocalFileSource(BaseCacheSource):
    """The cache file persisted by a previous local run."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def name(self) -> str:
        return f"file:{self._path}"

    async def fetch(self) -> list[CacheEntry] | None:
        if not self._path.is_file():
            return None
        data = json.loads(self._path.read_text(encoding="utf-8"))
        return parse_entries(data, self.name)


class RemoteUrlSource(BaseCacheSource):
    """A published copy of the cache artifact on a branch mirror."""

    def __init__(self, url: str, timeout: float = 30.0) -> None:
        self._url = url
        self._timeout = timeout

    @property
    def name(self) -> str:
        return self._url

    async def fetch(self) -> list[CacheEntry] | None:
        body = await asyncio.to_thread(self._download)
        return parse_entries(json.loads(body), self.name)

    def _download(self) -> str:
        req = urllib.request.Request(
            self._url, headers={"User-Agent": BROWSER_USER_AGENT}
        )
        with urllib.request.urlopen(req, timeout=self._timeout) as resp:
            return resp.read().decode("utf-8")


def parse_entries(data: Any, source: str = "cache") -> list[CacheEntry]:
    """Validate a decoded cache artifact into CacheEntry objects.

    Malformed individual entries are skipped; a non-array artifact is an error.

    Raises:
        ValueError: If the artifact is not a JSON array.
    """
    if not isinstance(data, list):
        raise ValueError(f"{source}: expected a JSON array, got {type(data).__name__}")

    entries: list[CacheEntry] = []
    for i, item in enumerate(data):
        try:
            entries.append(CacheEntry.model_validate(item))
        except ValidationError as e:
            logger.warning(
                "Skipping malformed cache entry #%d from %s: %s",
                i, source, e.errors()[0].get("msg", e),
            )
    return entries


def default_sources(
    cache_path: Path, fallback_urls: list[str], timeout: float = 30.0
) -> list[BaseCacheSource]:
    """Local file first, then each remote mirror in priority order."""
    sources: list[BaseCacheSource] = [LocalFileSource(cache_path)]
    sources.extend(RemoteUrlSource(url, timeout=timeout) for url in fallback_urls)
    return sources
