"""Core operations behind the folio CLI.

Each function reads published content through an IndexCache (the
process-wide one unless a cache is passed in) and hands the records to
the ranking, search and tag modules.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Literal

from .config import RECENT_POSTS_LIMIT, RELATED_CONTENT_LIMIT
from .errors import FolioError
from .indexer import IndexCache, check_kind_and_locale, collect_records, get_index_cache, sort_for_kind
from .models import CONTENT_KINDS, ContentRecord, ReleaseRecord, ScoredRecord, TagCount, TagLookup
from .relevance import BLOG_PROFILE, DOCS_PROFILE, ScoringProfile, related_with_scores
from .search import (
    SortKey,
    SortOrder,
    filter_by_category,
    filter_by_tags,
    rank_by_title_first,
    search_records,
    sort_records,
    validate_query,
)
from .tags import build_tag_counts, lookup_by_tag, popular_tags, related_tags
from .versions import sort_releases

log = logging.getLogger(__name__)


def _cache(cache: IndexCache | None) -> IndexCache:
    return cache if cache is not None else get_index_cache()


# ─────────────────────────────────────────────────────────────────────────────
# Listings
# ─────────────────────────────────────────────────────────────────────────────


def list_entries(
    kind: str,
    locale: str,
    *,
    tags: Iterable[str] = (),
    category: str | None = None,
    sort: SortKey | None = None,
    order: SortOrder = "desc",
    include_drafts: bool = False,
    cache: IndexCache | None = None,
) -> list[ContentRecord]:
    """List entries of one kind, optionally filtered and re-sorted.

    Args:
        kind: "blog", "doc" or "release".
        locale: One of SUPPORTED_LOCALES.
        tags: Keep entries with any of these tags.
        category: Keep entries in this category (case-insensitive).
        sort: Re-sort by "date" or "category"; None keeps the default order.
        order: "asc" or "desc" when ``sort`` is given.
        include_drafts: Read straight from disk, drafts included, bypassing the cache.
        cache: Index cache to read from.
    """
    if include_drafts:
        content_root = _cache(cache).content_root
        results = collect_records(kind, locale, content_root)
        records = sort_for_kind(kind, [r.record for r in results])
    else:
        records = _cache(cache).get(kind, locale)

    records = filter_by_tags(records, tags)
    records = filter_by_category(records, category)
    if sort:
        records = sort_records(records, key=sort, order=order)
    return records


def _check_slug(kind: str, slug: str) -> None:
    if not slug or ".." in slug:
        raise FolioError.invalid_slug(slug)
    # Only docs are nested
    if kind != "doc" and "/" in slug:
        raise FolioError.invalid_slug(slug)


def get_entry(kind: str, locale: str, slug: str, cache: IndexCache | None = None) -> ContentRecord:
    """Get one published entry by slug.

    Releases may also be looked up by version.

    Raises:
        FolioError: If the slug is malformed or no published entry matches.
    """
    check_kind_and_locale(kind, locale)
    _check_slug(kind, slug)

    for record in _cache(cache).get(kind, locale):
        if record.slug == slug:
            return record
        if isinstance(record, ReleaseRecord) and record.version == slug:
            return record
    raise FolioError.entry_not_found(kind, slug, locale)


def featured(records: Sequence[ContentRecord]) -> list[ContentRecord]:
    """Entries flagged ``featured``, in listing order."""
    return [r for r in records if r.featured]


def recent(records: Sequence[ContentRecord], limit: int = RECENT_POSTS_LIMIT) -> list[ContentRecord]:
    """The newest ``limit`` entries."""
    return sort_records(records, key="date", order="desc")[:limit]


def releases(
    locale: str,
    order: Literal["asc", "desc"] = "desc",
    cache: IndexCache | None = None,
) -> list[ReleaseRecord]:
    """Release notes ordered by semantic version."""
    records = [r for r in _cache(cache).get("release", locale) if isinstance(r, ReleaseRecord)]
    return sort_releases(records, order=order)


# ─────────────────────────────────────────────────────────────────────────────
# Search and related content
# ─────────────────────────────────────────────────────────────────────────────


def search(
    query: str,
    locale: str,
    *,
    kinds: Sequence[str] | None = None,
    tags: Iterable[str] = (),
    limit: int | None = None,
    cache: IndexCache | None = None,
) -> list[ContentRecord]:
    """Free-text search over published entries.

    Title matches rank first, then newer entries.

    Raises:
        MalformedQueryError: If the query is too long.
    """
    validate_query(query)

    pool: list[ContentRecord] = []
    for kind in kinds or CONTENT_KINDS:
        pool.extend(_cache(cache).get(kind, locale))

    matches = filter_by_tags(search_records(pool, query), tags)
    ranked = rank_by_title_first(matches, query)
    return ranked[:limit] if limit else ranked


def profile_for_kind(kind: str) -> ScoringProfile:
    """Blog posts use the blog weights; docs and releases use the docs weights."""
    return BLOG_PROFILE if kind == "blog" else DOCS_PROFILE


def related(
    kind: str,
    locale: str,
    slug: str,
    *,
    limit: int = RELATED_CONTENT_LIMIT,
    profile: ScoringProfile | None = None,
    cache: IndexCache | None = None,
) -> list[ScoredRecord]:
    """Entries of the same kind most related to ``slug``.

    Raises:
        FolioError: If the entry does not exist.
    """
    current = get_entry(kind, locale, slug, cache=cache)
    records = _cache(cache).get(kind, locale)
    return related_with_scores(records, current.slug, limit, profile or profile_for_kind(kind))


# ─────────────────────────────────────────────────────────────────────────────
# Tags
# ─────────────────────────────────────────────────────────────────────────────


def _all_published(locale: str, cache: IndexCache | None) -> dict[str, list[ContentRecord]]:
    return _cache(cache).get_all(locale)


def tags(
    locale: str,
    *,
    min_count: int = 1,
    limit: int | None = None,
    cache: IndexCache | None = None,
) -> list[TagCount]:
    """Tag usage across blog posts, releases and docs, most used first."""
    by_kind = _all_published(locale, cache)
    records = [*by_kind["blog"], *by_kind["release"], *by_kind["doc"]]
    counts = build_tag_counts(records, min_count=min_count)
    return popular_tags(counts, limit) if limit else counts


def tag(locale: str, name: str, cache: IndexCache | None = None) -> tuple[TagLookup, list[str]]:
    """Everything carrying a tag, plus the tags most used alongside it."""
    by_kind = _all_published(locale, cache)
    return lookup_by_tag(by_kind, name), related_tags(by_kind, name)
