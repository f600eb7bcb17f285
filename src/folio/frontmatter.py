"""Front matter validation for content files.

validate() turns a raw front matter mapping into a typed record. It never
raises for bad content: a schema violation is logged as a warning, the
failing fields are replaced with their defaults (or a hardcoded fallback
when the schema has none), and the record is returned together with the
list of warnings. One bad file degrades to a visible-but-flagged entry
instead of breaking a full site build.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .config import DEFAULT_CATEGORY, RELEASE_CATEGORY, UNTITLED
from .errors import FolioError
from .models import (
    FRONT_MATTER_SCHEMAS,
    BlogFrontMatter,
    BlogRecord,
    ContentRecord,
    DocFrontMatter,
    DocRecord,
    FieldWarning,
    ReleaseFrontMatter,
    ReleaseRecord,
    ValidationResult,
)
from .text import estimate_reading_time_minutes, strip_markdown_to_excerpt

log = logging.getLogger(__name__)

# Value used for a failing field whose schema defines no default
REQUIRED_FALLBACK = ""


def _collect_warnings(error: ValidationError) -> list[FieldWarning]:
    warnings = []
    for issue in error.errors():
        loc = ".".join(str(x) for x in issue["loc"]) or "<root>"
        warnings.append(FieldWarning(field=loc, message=issue["msg"]))
    return warnings


def _fallback_fields(schema: type, raw: Mapping[str, Any], error: ValidationError) -> dict[str, Any]:
    """Build a patched copy of ``raw`` that the schema will accept."""
    patched = dict(raw)
    failing = {str(issue["loc"][0]) for issue in error.errors() if issue["loc"]}

    for key in failing:
        found = schema.field_for_key(key)
        if found is None:
            continue
        name, info = found
        alias = info.alias or name
        patched.pop(name, None)
        if info.is_required():
            patched[alias] = REQUIRED_FALLBACK
        else:
            patched.pop(alias, None)

    if "title" in failing or not patched.get("title"):
        patched["title"] = UNTITLED
    if "description" in failing or not patched.get("description"):
        patched["description"] = ""
    return patched


def parse_front_matter(schema: type, raw: Mapping[str, Any], source: str) -> tuple[Any, list[FieldWarning]]:
    """Validate ``raw`` against ``schema``, falling back to defaults on error.

    Args:
        schema: One of the front matter schema classes.
        raw: Front matter mapping as read from the file. Not modified.
        source: File identity used in the warning log line.

    Returns:
        Tuple of (schema instance, warnings). Warnings is empty on success.
    """
    try:
        return schema.model_validate(dict(raw)), []
    except ValidationError as e:
        warnings = _collect_warnings(e)
        issues = "\n".join(f"  - {w.field}: {w.message}" for w in warnings)
        log.warning("Front matter validation warning (%s):\n%s", source, issues)
        patched = _fallback_fields(schema, raw, e)

    return schema.model_validate(patched, context={"lenient": True}), warnings


def _excerpt(description: str, body: str) -> str:
    return description or strip_markdown_to_excerpt(body)


def _build_blog(fm: BlogFrontMatter, common: dict[str, Any]) -> BlogRecord:
    return BlogRecord(
        **common,
        title=fm.title,
        description=fm.description,
        excerpt=_excerpt(fm.description, common["body"]),
        tags=list(fm.tags),
        category=fm.category,
        date=fm.published_at,
        updated_at=fm.updated_at,
        draft=fm.draft,
        featured=fm.featured,
        ai=fm.ai,
        author=fm.author,
        author_avatar=fm.author_avatar,
        cover_image=fm.cover_image,
    )


def _build_doc(fm: DocFrontMatter, common: dict[str, Any], category: str | None) -> DocRecord:
    return DocRecord(
        **common,
        title=fm.title,
        description=fm.description,
        excerpt=_excerpt(fm.description, common["body"]),
        tags=list(fm.tags),
        category=category or fm.category or DEFAULT_CATEGORY,
        date=fm.published_at or fm.updated_at or "",
        updated_at=fm.updated_at,
        draft=fm.draft,
        featured=fm.featured,
        ai=fm.ai,
        order=fm.order,
        author=fm.author,
    )


def _build_release(fm: ReleaseFrontMatter, common: dict[str, Any]) -> ReleaseRecord:
    return ReleaseRecord(
        **common,
        title=fm.title,
        description=fm.description,
        excerpt=_excerpt(fm.description, common["body"]),
        tags=list(fm.tags),
        category=RELEASE_CATEGORY,
        date=fm.date,
        featured=fm.featured,
        ai=fm.ai,
        version=fm.version,
        breaking=fm.breaking,
        prerelease=fm.prerelease,
        author=fm.author,
        cover_image=fm.cover_image,
    )


def validate(
    kind: str,
    raw: Mapping[str, Any],
    *,
    slug: str,
    locale: str,
    body: str = "",
    source: str | None = None,
    category: str | None = None,
) -> ValidationResult:
    """Validate front matter for one file and build its record.

    Args:
        kind: "blog", "doc" or "release".
        raw: Raw front matter mapping. Never mutated.
        slug: Slug derived from the file path.
        locale: Locale the file belongs to.
        body: Markdown body (used for excerpt and reading time).
        source: File identity for warnings (defaults to "<kind>:<locale>/<slug>").
        category: Path-derived category; for docs it wins over front matter.

    Returns:
        ValidationResult with the record and any field warnings.

    Raises:
        FolioError: If ``kind`` is not a known content kind.
    """
    schema = FRONT_MATTER_SCHEMAS.get(kind)
    if schema is None:
        raise FolioError.unknown_kind(kind)

    source = source or f"{kind}:{locale}/{slug}"
    fm, warnings = parse_front_matter(schema, raw, source)

    common: dict[str, Any] = {
        "slug": slug,
        "locale": locale,
        "body": body,
        "reading_time": estimate_reading_time_minutes(body),
        "source_path": source,
    }

    record: ContentRecord
    if kind == "blog":
        record = _build_blog(fm, common)
    elif kind == "doc":
        record = _build_doc(fm, common, category)
    else:
        record = _build_release(fm, common)

    return ValidationResult(record=record, warnings=warnings, source=source)
