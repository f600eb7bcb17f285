"""In-memory cache of built content indexes.

Indexes are memoized per (kind, locale) and only rebuilt when the caller
asks: a cold start, an explicit invalidate(), or rebuild(). Each build
produces a fresh tuple that replaces the old one wholesale, so a reader
holding an earlier result never sees it change underneath.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..config import SUPPORTED_LOCALES
from ..models import CONTENT_KINDS, ContentRecord
from .builder import build_index, check_kind_and_locale

log = logging.getLogger(__name__)

CacheKey = tuple[str, str]


@dataclass(frozen=True)
class CacheStats:
    entries: int
    hits: int
    misses: int
    builds: int


class IndexCache:
    """Memoized build_index() results keyed by (kind, locale)."""

    def __init__(self, content_root: Path | None = None, max_workers: int | None = None) -> None:
        self._content_root = content_root
        self._max_workers = max_workers
        self._entries: dict[CacheKey, tuple[ContentRecord, ...]] = {}
        self._hits = 0
        self._misses = 0
        self._builds = 0

    @property
    def content_root(self) -> Path | None:
        return self._content_root

    def _build(self, kind: str, locale: str) -> tuple[ContentRecord, ...]:
        records = tuple(
            build_index(kind, locale, self._content_root, max_workers=self._max_workers)
        )
        self._entries[(kind, locale)] = records
        self._builds += 1
        return records

    def get(self, kind: str, locale: str) -> list[ContentRecord]:
        """Return the index for a kind and locale, building it on first use."""
        check_kind_and_locale(kind, locale)
        cached = self._entries.get((kind, locale))
        if cached is not None:
            self._hits += 1
            return list(cached)

        self._misses += 1
        return list(self._build(kind, locale))

    def get_all(self, locale: str) -> dict[str, list[ContentRecord]]:
        """Return every kind's index for one locale, keyed by kind."""
        return {kind: self.get(kind, locale) for kind in CONTENT_KINDS}

    def invalidate(self, kind: str | None = None, locale: str | None = None) -> int:
        """Drop cached indexes matching the filters (None matches everything).

        Returns:
            Number of entries removed.
        """
        stale = [
            key
            for key in self._entries
            if (kind is None or key[0] == kind) and (locale is None or key[1] == locale)
        ]
        for key in stale:
            del self._entries[key]
        if stale:
            log.debug("Invalidated %d cached index(es)", len(stale))
        return len(stale)

    def rebuild(self, kind: str | None = None, locale: str | None = None) -> int:
        """Rebuild indexes matching the filters right away.

        With no filters every kind is rebuilt for every supported locale.

        Returns:
            Number of indexes built.
        """
        kinds = [kind] if kind else list(CONTENT_KINDS)
        locales = [locale] if locale else list(SUPPORTED_LOCALES)
        for k in kinds:
            for loc in locales:
                check_kind_and_locale(k, loc)

        built = 0
        for k in kinds:
            for loc in locales:
                self._build(k, loc)
                built += 1
        log.info("Rebuilt %d content index(es)", built)
        return built

    def stats(self) -> CacheStats:
        return CacheStats(
            entries=len(self._entries),
            hits=self._hits,
            misses=self._misses,
            builds=self._builds,
        )


_default_cache: IndexCache | None = None


def get_index_cache() -> IndexCache:
    """Process-wide cache over the configured content root."""
    global _default_cache
    if _default_cache is None:
        _default_cache = IndexCache()
    return _default_cache


def reset_index_cache() -> None:
    """Forget the process-wide cache (e.g. after the content root changes)."""
    global _default_cache
    _default_cache = None
