"""Related-content scoring.

Two weight profiles are kept side by side. Docs reward explicit
cross references and weigh tags above category; the blog sidebar weighs
category far above tags. They intentionally produce different rankings
and are never merged.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .config import RELATED_CONTENT_LIMIT
from .models import ContentRecord, ScoredRecord


@dataclass(frozen=True)
class ScoringProfile:
    """Weights applied by score()."""

    name: str
    tag_weight: int
    category_weight: int
    reference_weight: int = 0


# Docs pages ("profile A")
DOCS_PROFILE = ScoringProfile(name="docs", tag_weight=2, category_weight=1, reference_weight=5)

# Blog related posts ("profile B")
BLOG_PROFILE = ScoringProfile(name="blog", tag_weight=5, category_weight=10)

PROFILES = {p.name: p for p in (DOCS_PROFILE, BLOG_PROFILE)}


def score(current: ContentRecord, candidate: ContentRecord, profile: ScoringProfile = DOCS_PROFILE) -> int:
    """Score how related ``candidate`` is to ``current``.

    Shared tags count once each however often they repeat in either list.
    Category equality is exact and case-sensitive. The cross-reference bonus
    applies when the candidate's slug is a substring of any entry in
    ``current``'s ai.relatedDocs.
    """
    shared = set(current.tags) & set(candidate.tags)
    total = len(shared) * profile.tag_weight

    if current.category == candidate.category:
        total += profile.category_weight

    if profile.reference_weight and any(candidate.slug in ref for ref in current.related_refs):
        total += profile.reference_weight

    return total


def related_with_scores(
    records: Sequence[ContentRecord],
    current_slug: str,
    limit: int = RELATED_CONTENT_LIMIT,
    profile: ScoringProfile = DOCS_PROFILE,
) -> list[ScoredRecord]:
    """Rank the records most related to the one with ``current_slug``.

    The current record is never scored against itself and zero scores are
    dropped. Ties keep collection order.

    Returns:
        Up to ``limit`` ScoredRecords, best first. Empty when the slug is unknown.
    """
    current = next((r for r in records if r.slug == current_slug), None)
    if current is None:
        return []

    scored = []
    for candidate in records:
        if candidate.slug == current.slug:
            continue
        value = score(current, candidate, profile)
        if value > 0:
            scored.append(ScoredRecord(record=candidate, score=value))

    scored.sort(key=lambda s: s.score, reverse=True)
    return scored[:limit]


def related_content(
    records: Sequence[ContentRecord],
    current_slug: str,
    limit: int = RELATED_CONTENT_LIMIT,
    profile: ScoringProfile = DOCS_PROFILE,
) -> list[ContentRecord]:
    """Same as related_with_scores() without the scores."""
    return [s.record for s in related_with_scores(records, current_slug, limit, profile)]
