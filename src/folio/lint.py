"""Content linter.

The linter is the one consumer that sees drafts. It checks the raw front
matter of every file (required fields, date format, tag count, the ``ai``
block) plus the schema warnings produced by the validator, and warns when
an English file has no translation. Problems in published files are
errors; the same problems in drafts are only warnings.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

from .config import (
    DEFAULT_LOCALE,
    KIND_DIRECTORIES,
    LINT_DATE_FIELDS,
    LINT_MAX_TAGS,
    LINT_MIN_TAGS,
    LINT_REQUIRED_FIELDS,
    SUPPORTED_LOCALES,
    get_content_root,
)
from .frontmatter import validate
from .indexer.builder import locale_directory
from .models import CONTENT_KINDS, FileLintResult, LintReport
from .parser import ParseError, iter_content_files, parse_content_file, slug_from_path

log = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _date_problem(field: str, value: Any) -> str | None:
    # YAML already turned a bare YYYY-MM-DD into a date; a timestamp is too precise
    if isinstance(value, datetime):
        value = value.isoformat()
    elif isinstance(value, date) or not value or not isinstance(value, str):
        return None
    if DATE_PATTERN.match(value):
        return None
    return f"Invalid date format for '{field}': expected YYYY-MM-DD, got '{value}'"


def check_front_matter(kind: str, raw: dict[str, Any]) -> tuple[list[str], list[str]]:
    """Check one file's raw front matter.

    Returns:
        Tuple of (problems, advisories). Problems become errors or warnings
        depending on the draft flag; advisories are always warnings.
    """
    problems: list[str] = []
    advisories: list[str] = []

    for field in LINT_REQUIRED_FIELDS[kind]:
        if _is_missing(raw.get(field)):
            problems.append(f"Missing required field: '{field}'")

    for field in LINT_DATE_FIELDS[kind]:
        problem = _date_problem(field, raw.get(field))
        if problem:
            problems.append(problem)

    tags = raw.get("tags")
    if kind != "doc" and isinstance(tags, list):
        if 0 < len(tags) < LINT_MIN_TAGS:
            problems.append(f"Too few tags (min: {LINT_MIN_TAGS}, found: {len(tags)})")
        if len(tags) > LINT_MAX_TAGS:
            problems.append(f"Too many tags (max: {LINT_MAX_TAGS}, found: {len(tags)})")

    if not raw.get("ai"):
        advisories.append("'ai' metadata not set (recommended for RAG)")

    return problems, advisories


def _display_path(path: Path, content_root: Path) -> str:
    try:
        return path.relative_to(content_root.parent).as_posix()
    except ValueError:
        return path.as_posix()


def _lint_file(path: Path, kind: str, locale: str, directory: Path, content_root: Path) -> FileLintResult:
    shown = _display_path(path, content_root)
    try:
        raw, body = parse_content_file(path)
    except ParseError as e:
        return FileLintResult(path=shown, kind=kind, errors=[e.message])

    problems, advisories = check_front_matter(kind, raw)

    result = validate(kind, raw, slug=slug_from_path(path, directory), locale=locale, body=body, source=shown)
    missing = {f for f in LINT_REQUIRED_FIELDS[kind] if _is_missing(raw.get(f))}
    for warning in result.warnings:
        if warning.field.split(".", 1)[0] not in missing:
            problems.append(f"Invalid field '{warning.field}': {warning.message}")

    draft = raw.get("draft") is True
    if draft:
        return FileLintResult(path=shown, kind=kind, draft=True, warnings=problems + advisories)
    return FileLintResult(path=shown, kind=kind, errors=problems, warnings=advisories)


def _relative_files(directory: Path) -> set[str]:
    if not directory.is_dir():
        return set()
    return {path.relative_to(directory).as_posix() for path in iter_content_files(directory)}


def check_language_symmetry(kind: str, content_root: Path) -> list[str]:
    """Warn about default-locale files that have no counterpart in another locale."""
    warnings = []
    source_dir = locale_directory(content_root, kind, DEFAULT_LOCALE)
    source_files = sorted(_relative_files(source_dir))
    if not source_files:
        return warnings

    for locale in SUPPORTED_LOCALES:
        if locale == DEFAULT_LOCALE:
            continue
        target_dir = locale_directory(content_root, kind, locale)
        if not target_dir.is_dir():
            continue
        existing = _relative_files(target_dir)
        for name in source_files:
            if name not in existing:
                shown = _display_path(source_dir / name, content_root)
                warnings.append(f"Missing {locale} counterpart: {shown}")
    return warnings


def lint_content(content_root: Path | None = None) -> LintReport:
    """Lint every content file, drafts included.

    Args:
        content_root: Content directory (defaults to the configured root).

    Returns:
        LintReport listing only the files with problems.
    """
    root = content_root or get_content_root()
    report = LintReport()

    for kind in CONTENT_KINDS:
        report.global_warnings.extend(check_language_symmetry(kind, root))

        for locale in SUPPORTED_LOCALES:
            directory = locale_directory(root, kind, locale)
            if not directory.is_dir():
                log.debug("Skipping missing directory %s/%s", KIND_DIRECTORIES[kind], locale)
                continue
            for path in iter_content_files(directory):
                report.files_checked += 1
                result = _lint_file(path, kind, locale, directory, root)
                if result.errors or result.warnings:
                    report.files.append(result)

    log.info(
        "Checked %d files: %d error(s), %d warning(s)",
        report.files_checked,
        report.error_count,
        report.warning_count,
    )
    return report
