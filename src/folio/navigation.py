"""Docs navigation helpers: breadcrumb trails and category grouping."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Breadcrumb, ContentRecord

DOCS_BASE = "/docs"

# Top-level doc pages shown under "Getting Started" rather than a category
GETTING_STARTED_PAGES = ("introduction", "installation", "quickstart", "configuration", "first-steps")


def _title_from_segment(segment: str) -> str:
    """'first-steps' -> 'First Steps'. Only first letters are changed."""
    return " ".join(word[:1].upper() + word[1:] for word in segment.split("-"))


def generate_breadcrumbs(slug: str) -> list[Breadcrumb]:
    """Build the breadcrumb trail for a doc page.

    For nested pages the first segment is the category and the last is
    the current page; neither is clickable. Getting Started pages get a
    fixed, non-clickable "Getting Started" root.
    """
    if slug in GETTING_STARTED_PAGES:
        return [
            Breadcrumb(title="Getting Started", href=DOCS_BASE, clickable=False),
            Breadcrumb(title=_title_from_segment(slug), href=f"{DOCS_BASE}/{slug}"),
        ]

    parts = slug.split("/")
    crumbs = []
    path = DOCS_BASE
    for i, part in enumerate(parts):
        if not part:
            continue
        path += f"/{part}"
        crumbs.append(
            Breadcrumb(
                title=_title_from_segment(part),
                href=path,
                clickable=i != 0 and i != len(parts) - 1,
            )
        )
    return crumbs


def group_by_category(records: Iterable[ContentRecord]) -> dict[str, list[ContentRecord]]:
    """Group records by category, keeping the input order within each group."""
    groups: dict[str, list[ContentRecord]] = {}
    for record in records:
        groups.setdefault(record.category, []).append(record)
    return groups
