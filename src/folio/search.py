"""Substring search, tag/category filters and listing sorts.

Everything here works on any object with the common record attributes
(title, description, tags, category, date), so the same functions serve
full ContentRecords and the flattened SearchIndexEntry shape. Optional
attributes (excerpt, body, last_modified) are used when present.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Literal, TypeVar

from .config import SEARCH_QUERY_MAX_LENGTH
from .errors import MalformedQueryError
from .indexer.builder import collation_key, parse_timestamp

T = TypeVar("T")

SortKey = Literal["date", "category", "relevance"]
SortOrder = Literal["asc", "desc"]


def validate_query(query: str) -> str:
    """Reject queries longer than SEARCH_QUERY_MAX_LENGTH characters.

    Raises:
        MalformedQueryError: If the query is too long.
    """
    if len(query) > SEARCH_QUERY_MAX_LENGTH:
        raise MalformedQueryError(len(query), SEARCH_QUERY_MAX_LENGTH)
    return query


def _searchable_fields(record: Any) -> Iterable[str]:
    yield record.title
    yield record.description
    yield from record.tags
    yield record.category or ""
    yield getattr(record, "excerpt", "") or ""
    yield getattr(record, "body", "") or ""


def matches_query(record: Any, query: str) -> bool:
    """Case-insensitive substring match on any searchable field.

    An empty query matches everything.
    """
    needle = query.lower()
    if not needle:
        return True
    return any(needle in field.lower() for field in _searchable_fields(record))


def search_records(records: Sequence[T], query: str) -> list[T]:
    """Records matching ``query``, in their original order."""
    return [r for r in records if matches_query(r, query)]


def filter_by_tags(records: Sequence[T], selected_tags: Iterable[str]) -> list[T]:
    """Keep records carrying at least one of ``selected_tags``.

    No selected tags means no filtering.
    """
    wanted = set(selected_tags)
    if not wanted:
        return list(records)
    return [r for r in records if wanted.intersection(r.tags)]


def filter_by_category(records: Sequence[T], category: str | None) -> list[T]:
    """Keep records whose category equals ``category`` ignoring case."""
    if not category:
        return list(records)
    target = category.casefold()
    return [r for r in records if (r.category or "").casefold() == target]


def _identity(record: Any) -> str:
    # Search index entries carry an id instead of a slug
    return getattr(record, "slug", None) or getattr(record, "id", "")


def _last_modified(record: Any) -> str:
    return getattr(record, "last_modified", "") or getattr(record, "date", "") or ""


def sort_records(
    records: Sequence[T],
    key: SortKey = "date",
    order: SortOrder = "desc",
    scores: Mapping[str, float] | None = None,
) -> list[T]:
    """Stable sort by date, category or relevance.

    Args:
        records: Records to sort. Not modified.
        key: "date" (unparseable dates count as the epoch), "category"
            (via collation_key) or "relevance" (looked up in ``scores`` by slug, or
            id for search index entries; missing keys score 0).
        order: "asc" or "desc".
        scores: Slug to score mapping, required for key="relevance".

    Raises:
        ValueError: For an unknown key, or relevance without scores.
    """
    reverse = order == "desc"
    if key == "date":
        return sorted(records, key=lambda r: parse_timestamp(r.date), reverse=reverse)
    if key == "category":
        return sorted(records, key=lambda r: collation_key(r.category or ""), reverse=reverse)
    if key == "relevance":
        if scores is None:
            raise ValueError("Sorting by relevance requires a scores mapping")
        return sorted(records, key=lambda r: scores.get(_identity(r), 0), reverse=reverse)
    raise ValueError(f"Unknown sort key: {key}")


def rank_by_title_first(records: Sequence[T], query: str) -> list[T]:
    """Order free-text search results: title matches first, then newest first."""
    needle = query.lower()
    return sorted(
        records,
        key=lambda r: (needle not in r.title.lower(), -parse_timestamp(_last_modified(r))),
    )
