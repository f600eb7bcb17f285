"""Tag counts and tag lookups across blog posts, release notes and docs."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from .config import POPULAR_TAGS_LIMIT, RELATED_TAGS_LIMIT
from .models import ContentRecord, ReleaseRecord, TagCount, TaggedContent, TagLookup

# Scan order used for combined counts and canonical tag spelling
KIND_ORDER = ("blog", "release", "doc")

_COUNT_FIELDS = {"blog": "blog_count", "release": "release_count", "doc": "doc_count"}


def build_tag_counts(records: Iterable[ContentRecord], min_count: int = 1) -> list[TagCount]:
    """Count tag usage across all records, with a per-kind breakdown.

    Tags are counted per occurrence and compared exactly (case-sensitive).

    Args:
        records: Published records of any kind.
        min_count: Only include tags used at least this many times.

    Returns:
        TagCounts sorted by combined count descending; equal counts keep
        the order in which the tags were first seen.
    """
    per_kind: dict[str, dict[str, int]] = {}
    for record in records:
        for tag in record.tags:
            if not tag:
                continue
            counts = per_kind.setdefault(tag, {"blog_count": 0, "release_count": 0, "doc_count": 0})
            counts[_COUNT_FIELDS[record.kind]] += 1

    results = [TagCount(tag=tag, count=sum(counts.values()), **counts) for tag, counts in per_kind.items()]
    results.sort(key=lambda t: t.count, reverse=True)
    return [t for t in results if t.count >= min_count]


def tag_count_map(records: Iterable[ContentRecord]) -> dict[str, int]:
    """Plain tag -> combined count mapping."""
    return {t.tag: t.count for t in build_tag_counts(records)}


def popular_tags(counts: Sequence[TagCount], limit: int = POPULAR_TAGS_LIMIT) -> list[TagCount]:
    """Most used tags. ``counts`` must already be sorted (see build_tag_counts)."""
    return list(counts[:limit])


def _to_tagged(record: ContentRecord) -> TaggedContent:
    if isinstance(record, ReleaseRecord):
        return TaggedContent(
            type="release",
            slug=record.version,
            title=record.display_title,
            description=record.description,
            date=record.date,
            tags=list(record.tags),
            featured=record.featured,
            version=record.version,
            breaking=record.breaking,
        )
    return TaggedContent(
        type=record.kind,
        slug=record.slug,
        title=record.title,
        description=record.description,
        date=record.date,
        tags=list(record.tags),
        category=record.category,
        featured=record.featured,
    )


def _has_tag(record: ContentRecord, normalized: str) -> bool:
    return any(t.lower() == normalized for t in record.tags)


def lookup_by_tag(records_by_kind: Mapping[str, Sequence[ContentRecord]], tag: str) -> TagLookup:
    """Collect every entry carrying ``tag`` (case-insensitive).

    The returned tag is the first matching original spelling found scanning
    blog posts, then releases, then docs. The query itself is returned when
    nothing matches.

    Args:
        records_by_kind: Published records keyed by "blog", "release", "doc".
        tag: Tag to look up, in any casing.
    """
    normalized = tag.lower()
    matches = {
        kind: [r for r in records_by_kind.get(kind, ()) if _has_tag(r, normalized)]
        for kind in KIND_ORDER
    }

    canonical = next(
        (
            t
            for kind in KIND_ORDER
            for record in matches[kind]
            for t in record.tags
            if t.lower() == normalized
        ),
        tag,
    )

    return TagLookup(
        tag=canonical,
        total_count=sum(len(found) for found in matches.values()),
        blog=[_to_tagged(r) for r in matches["blog"]],
        releases=[_to_tagged(r) for r in matches["release"]],
        docs=[_to_tagged(r) for r in matches["doc"]],
    )


def related_tags(
    records_by_kind: Mapping[str, Sequence[ContentRecord]],
    tag: str,
    limit: int = RELATED_TAGS_LIMIT,
) -> list[str]:
    """Tags most often used together with ``tag``."""
    lookup = lookup_by_tag(records_by_kind, tag)
    normalized = tag.lower()

    co_counts: dict[str, int] = {}
    for item in [*lookup.blog, *lookup.releases, *lookup.docs]:
        for other in item.tags:
            if other.lower() != normalized:
                co_counts[other] = co_counts.get(other, 0) + 1

    ranked = sorted(co_counts.items(), key=lambda x: -x[1])
    return [name for name, _count in ranked[:limit]]


def category_counts(records: Iterable[ContentRecord]) -> dict[str, int]:
    """Number of records per category, most used first."""
    counts: dict[str, int] = {}
    for record in records:
        counts[record.category] = counts.get(record.category, 0) + 1
    return dict(sorted(counts.items(), key=lambda x: -x[1]))
