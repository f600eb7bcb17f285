"""Build per-locale indexes of blog posts, docs and release notes.

Each file is parsed and validated independently. A file that cannot be read
is logged and left out; a missing locale directory yields an empty index.
The result is sorted after collection, so it does not depend on the order
in which files were processed.
"""

from __future__ import annotations

import locale as _locale
import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from pathlib import Path

from ..config import KIND_DIRECTORIES, SUPPORTED_LOCALES, get_content_root
from ..errors import FolioError
from ..frontmatter import validate
from ..models import CONTENT_KINDS, ContentRecord, DocRecord, ValidationResult
from ..parser import ParseError, iter_content_files, parse_content_file, slug_from_path

log = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def check_kind_and_locale(kind: str, locale: str) -> None:
    """Raise FolioError for a kind or locale the site does not publish."""
    if kind not in CONTENT_KINDS:
        raise FolioError.unknown_kind(kind)
    if locale not in SUPPORTED_LOCALES:
        raise FolioError.unsupported_locale(locale, SUPPORTED_LOCALES)


def locale_directory(content_root: Path, kind: str, locale: str) -> Path:
    """Directory holding one kind's files for one locale."""
    return content_root / KIND_DIRECTORIES[kind] / locale


def parse_timestamp(value: str | None) -> float:
    """Parse an ISO-ish date into a POSIX timestamp; invalid or empty → 0.0 (epoch)."""
    if not value:
        return 0.0
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return (parsed - _EPOCH).total_seconds()


def collation_key(value: str) -> str:
    """Sort key for category names.

    Uses the process LC_COLLATE setting, which folio never changes; under
    the default C locale this is casefolded code point order.
    """
    try:
        return _locale.strxfrm(value.casefold())
    except (ValueError, OSError):
        return value.casefold()


def _process_file(
    path: Path,
    kind: str,
    locale: str,
    directory: Path,
) -> ValidationResult:
    raw, body = parse_content_file(path)
    slug = slug_from_path(path, directory)
    category = slug.split("/", 1)[0] if kind == "doc" and "/" in slug else None
    return validate(
        kind,
        raw,
        slug=slug,
        locale=locale,
        body=body,
        source=str(path),
        category=category,
    )


def collect_records(
    kind: str,
    locale: str,
    content_root: Path | None = None,
    *,
    max_workers: int | None = None,
) -> list[ValidationResult]:
    """Parse and validate every file for a kind and locale, drafts included.

    This is the audit view behind draft listings. Public listings should
    use build_index(), which drops drafts.

    Args:
        kind: "blog", "doc" or "release".
        locale: One of SUPPORTED_LOCALES.
        content_root: Content directory (defaults to the configured root).
        max_workers: Parse files on a thread pool when greater than 1.

    Returns:
        Validation results in path order. Unreadable files are omitted.

    Raises:
        FolioError: For an unknown kind or unsupported locale.
    """
    check_kind_and_locale(kind, locale)
    root = content_root or get_content_root()
    directory = locale_directory(root, kind, locale)

    if not directory.is_dir():
        log.warning("Content directory not found: %s", directory)
        return []

    files = list(iter_content_files(directory))
    failures: list[tuple[Path, ParseError]] = []

    def _safe(path: Path) -> ValidationResult | None:
        try:
            return _process_file(path, kind, locale, directory)
        except ParseError as e:
            failures.append((path, e))
            return None

    if max_workers and max_workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            outcomes = list(pool.map(_safe, files))
    else:
        outcomes = [_safe(path) for path in files]

    if failures:
        log.warning("Failed to process %d %s file(s) for locale %s", len(failures), kind, locale)
        for path, error in failures:
            log.error("Failed to process %s: %s", path, error.message)

    return [result for result in outcomes if result is not None]


def sort_for_kind(kind: str, records: Sequence[ContentRecord]) -> list[ContentRecord]:
    """Apply the default listing order for a kind.

    Blog posts and releases: newest date first (undated entries last).
    Docs: by category, then by front matter ``order``.
    """
    if kind == "doc":
        return sorted(
            records,
            key=lambda r: (collation_key(r.category), r.order if isinstance(r, DocRecord) else 0),
        )
    return sorted(records, key=lambda r: parse_timestamp(r.date), reverse=True)


def build_index(
    kind: str,
    locale: str,
    content_root: Path | None = None,
    *,
    max_workers: int | None = None,
) -> list[ContentRecord]:
    """Build the public index for a kind and locale.

    Drafts are excluded. See collect_records() for arguments.

    Returns:
        Records in the kind's default order.
    """
    results = collect_records(kind, locale, content_root, max_workers=max_workers)
    published = [result.record for result in results if not result.record.draft]
    log.debug("Indexed %d %s entries for locale %s", len(published), kind, locale)
    return sort_for_kind(kind, published)
