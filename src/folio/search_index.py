"""The flattened search index artifact and the search endpoint contract.

build_search_index() flattens every published entry into SearchIndexEntry
rows keyed by locale. The JSON written by write_search_index() is what the
site's search box queries through search_endpoint().
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .config import (
    SEARCH_DESCRIPTION_LENGTH,
    SEARCH_RESULT_LIMIT,
    SUPPORTED_LOCALES,
    get_content_root,
)
from .indexer import build_index
from .models import ContentRecord, ReleaseRecord, SearchHit, SearchIndexEntry, SearchResponse
from .search import rank_by_title_first, validate_query
from .text import strip_markdown

log = logging.getLogger(__name__)

SearchIndex = dict[str, list[SearchIndexEntry]]

_INDEX_ADAPTER = TypeAdapter(SearchIndex)


def _blog_entry(record: ContentRecord, locale: str) -> SearchIndexEntry:
    return SearchIndexEntry(
        id=f"blog-{locale}-{record.slug}",
        title=record.title,
        description=record.description,
        url=f"/blog/{record.slug}",
        type="blog",
        tags=list(record.tags),
        category=record.category,
        date=record.date,
    )


def _doc_entry(record: ContentRecord, locale: str) -> SearchIndexEntry:
    description = record.description or strip_markdown(record.body)[:SEARCH_DESCRIPTION_LENGTH]
    return SearchIndexEntry(
        id=f"docs-{locale}-{record.slug}",
        title=record.title,
        description=description,
        url=f"/docs/{record.slug}",
        type="docs",
        tags=list(record.tags),
        category=record.category,
        date=record.date,
    )


def _release_entry(record: ReleaseRecord, locale: str) -> SearchIndexEntry:
    version = record.version or record.slug
    return SearchIndexEntry(
        id=f"release-{locale}-{record.slug}",
        title=record.title or f"Release {version}",
        description=record.description,
        url=f"/releases/{version}",
        type="release",
        tags=list(record.tags),
        category=record.category,
        date=record.date,
    )


def flatten_records(records: Iterable[ContentRecord], locale: str) -> list[SearchIndexEntry]:
    """Convert published records of any kind into search index rows."""
    entries = []
    for record in records:
        if isinstance(record, ReleaseRecord):
            entries.append(_release_entry(record, locale))
        elif record.kind == "doc":
            entries.append(_doc_entry(record, locale))
        else:
            entries.append(_blog_entry(record, locale))
    return entries


def build_search_index(
    content_root: Path | None = None,
    locales: Sequence[str] = SUPPORTED_LOCALES,
) -> SearchIndex:
    """Build the locale-keyed search index from the content tree.

    Drafts are excluded. Within a locale, rows are ordered blog posts, then
    docs, then releases, each in its default listing order.
    """
    root = content_root or get_content_root()
    index: SearchIndex = {}
    for locale in locales:
        records = [
            *build_index("blog", locale, root),
            *build_index("doc", locale, root),
            *build_index("release", locale, root),
        ]
        index[locale] = flatten_records(records, locale)
        log.info("Search index %s: %d entries", locale, len(index[locale]))
    return index


def write_search_index(path: Path, index: Mapping[str, Sequence[SearchIndexEntry]]) -> int:
    """Write the index as compact JSON, creating parent directories.

    Returns:
        Total number of entries written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        locale: [entry.model_dump(mode="json") for entry in entries]
        for locale, entries in index.items()
    }
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    total = sum(len(entries) for entries in index.values())
    log.info("Wrote %d search index entries to %s", total, path)
    return total


def load_search_index(path: Path) -> SearchIndex:
    """Load a previously written index.

    A missing or unreadable file is logged and yields an empty index, so
    search degrades to "no results" instead of failing.
    """
    if not path.exists():
        log.warning("Search index not found: %s (run 'folio search-index build')", path)
        return {}

    try:
        return _INDEX_ADAPTER.validate_json(path.read_bytes())
    except (OSError, ValidationError) as e:
        log.warning("Failed to load search index %s: %s", path, e)
        return {}


def _breadcrumbs(entry: SearchIndexEntry) -> list[str]:
    if entry.type == "blog":
        return ["Blog", entry.category or "Uncategorized"]
    if entry.type == "release":
        return ["Releases", entry.id]
    return ["Documentation", entry.category or "Uncategorized"]


def _endpoint_match(entry: SearchIndexEntry, needle: str) -> bool:
    return (
        needle in entry.title.lower()
        or needle in entry.description.lower()
        or any(needle in tag.lower() for tag in entry.tags)
    )


def search_endpoint(
    query: str | None,
    locale: str,
    index: Mapping[str, Sequence[SearchIndexEntry]],
    limit: int = SEARCH_RESULT_LIMIT,
) -> SearchResponse:
    """Answer a site search request against a loaded index.

    A blank query returns no results. Matches are on title, description and
    tags. Title matches rank first, then the newest entries.

    Raises:
        MalformedQueryError: If the query is longer than the allowed length.
    """
    if not query or not query.strip():
        return SearchResponse()
    validate_query(query)

    needle = query.lower()
    hits = [
        SearchHit(
            id=entry.id,
            title=entry.title,
            description=entry.description,
            url=entry.url,
            type=entry.type,
            breadcrumbs=_breadcrumbs(entry),
            last_modified=entry.date,
            tags=list(entry.tags),
        )
        for entry in index.get(locale, [])
        if _endpoint_match(entry, needle)
    ]
    return SearchResponse(results=rank_by_title_first(hits, query)[:limit])
