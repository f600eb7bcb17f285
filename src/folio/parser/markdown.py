"""Markdown/MDX parsing with YAML front matter support."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import frontmatter

from ..config import CONTENT_EXTENSIONS, MAX_SCAN_DEPTH

log = logging.getLogger(__name__)


class ParseError(Exception):
    """Raised when a content file cannot be read or its front matter parsed."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


def parse_content_file(path: Path) -> tuple[dict[str, Any], str]:
    """Read a content file and split it into front matter and body.

    A file without a front matter block yields an empty mapping; the
    validator fills in defaults and reports what is missing.

    Args:
        path: Path to the .md/.mdx file.

    Returns:
        Tuple of (raw front matter mapping, body text).

    Raises:
        ParseError: If the file cannot be read or the YAML block is malformed.
    """
    if not path.is_file():
        raise ParseError(path, "Path is not a file")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(path, f"Failed to read file: {e}") from e

    try:
        post = frontmatter.loads(text)
    except Exception as e:
        raise ParseError(path, f"Failed to parse front matter: {e}") from e

    if not isinstance(post.metadata, dict):
        raise ParseError(path, "Front matter must be a mapping")

    return dict(post.metadata), post.content


def slug_from_path(path: Path, root: Path) -> str:
    """Derive a slug from a file path relative to its locale root.

    "docs/en/features/tags.mdx" relative to "docs/en" becomes "features/tags".
    """
    relative = path.relative_to(root).with_suffix("")
    return relative.as_posix()


def iter_content_files(directory: Path, max_depth: int = MAX_SCAN_DEPTH) -> Iterator[Path]:
    """Yield content files below ``directory`` in a deterministic order.

    Files and directories starting with "_" or "." are skipped. Directories
    deeper than ``max_depth`` are not descended into.
    """

    def _walk(current: Path, depth: int) -> Iterator[Path]:
        try:
            children = sorted(current.iterdir())
        except OSError as e:
            log.error("Failed to read directory %s: %s", current, e)
            return

        for child in children:
            if child.name.startswith(("_", ".")):
                continue
            if child.is_dir():
                if depth < max_depth:
                    yield from _walk(child, depth + 1)
                else:
                    log.debug("Skipping %s: deeper than %d levels", child, max_depth)
            elif child.suffix in CONTENT_EXTENSIONS:
                yield child

    yield from _walk(directory, 0)
