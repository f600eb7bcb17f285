"""Configuration management for folio.

This module contains all configurable constants for content indexing.
Magic numbers are documented here rather than scattered throughout the codebase.
"""

import os
from pathlib import Path


class ConfigurationError(Exception):
    """Raised when required configuration is missing."""

    pass


# =============================================================================
# Content Layout
# =============================================================================

# Locales the site is published in. Each content kind has one directory per
# locale: content/<kind dir>/<locale>/...
SUPPORTED_LOCALES = ("en", "ja")

DEFAULT_LOCALE = "en"

# Directory name under the content root for each content kind
KIND_DIRECTORIES = {
    "blog": "blog",
    "doc": "docs",
    "release": "releases",
}

# File extensions recognised as content files
CONTENT_EXTENSIONS = (".mdx", ".md")

# Maximum directory depth scanned below a locale directory.
# Docs are nested by category (docs/en/features/tags.mdx); 10 levels is far
# beyond anything the site uses and bounds the walk on symlink loops.
MAX_SCAN_DEPTH = 10


# =============================================================================
# Front Matter Defaults
# =============================================================================

# Placeholder title for entries whose front matter omits one
UNTITLED = "Untitled"

DEFAULT_CATEGORY = "general"

DEFAULT_AUTHOR = "Dayopt Team"

# Category assigned to every release note in flattened search entries
RELEASE_CATEGORY = "releases"


# =============================================================================
# Text Utilities
# =============================================================================

# Excerpt length for cards and meta descriptions (characters, before "...")
EXCERPT_MAX_LENGTH = 160

# Length of the description derived from a doc body in the search index
SEARCH_DESCRIPTION_LENGTH = 200

# Reading speed for space-delimited scripts (English)
WORDS_PER_MINUTE = 200

# Reading speed for Japanese text, counted in characters
CHARS_PER_MINUTE = 500


# =============================================================================
# Search
# =============================================================================

# Queries longer than this are rejected before reaching the matcher
SEARCH_QUERY_MAX_LENGTH = 200

# Maximum hits returned by the search endpoint
SEARCH_RESULT_LIMIT = 50

# Default number of related entries shown under a post or doc page
RELATED_CONTENT_LIMIT = 3

# Default number of entries for "popular tags" and "recent posts" widgets
POPULAR_TAGS_LIMIT = 10
RELATED_TAGS_LIMIT = 5
RECENT_POSTS_LIMIT = 5


# =============================================================================
# Content Linter
# =============================================================================

LINT_REQUIRED_FIELDS = {
    "blog": ("title", "description", "publishedAt", "tags", "category", "author"),
    "doc": ("title", "description", "category", "slug"),
    "release": ("version", "date", "title", "description", "tags", "breaking", "featured"),
}

LINT_DATE_FIELDS = {
    "blog": ("publishedAt", "updatedAt"),
    "doc": ("publishedAt", "updatedAt"),
    "release": ("date",),
}

# Tag count bounds for blog posts and release notes (docs are exempt)
LINT_MIN_TAGS = 3
LINT_MAX_TAGS = 6


# =============================================================================
# Root Discovery
# =============================================================================

CONFIG_FILENAME = ".folioconfig"


def get_content_root() -> Path:
    """Get the content root directory.

    Discovery order:
    1. FOLIO_CONTENT_ROOT environment variable (explicit override)
    2. Walk up from cwd looking for .folioconfig with content_path field
    3. ./content if it exists
    4. Error with helpful message

    Raises:
        ConfigurationError: If no content root can be found.
    """
    root = os.environ.get("FOLIO_CONTENT_ROOT")
    if root:
        return Path(root)

    discovered = _discover_project_config()
    if discovered:
        _config_path, content_path = discovered
        return content_path

    fallback = Path.cwd() / "content"
    if fallback.is_dir():
        return fallback

    raise ConfigurationError(
        "No content directory found. Options:\n"
        "  1. Run folio from the site root (the directory holding content/)\n"
        f"  2. Add a {CONFIG_FILENAME} file with 'content_path: <dir>'\n"
        "  3. Set FOLIO_CONTENT_ROOT to the content directory"
    )


def get_search_index_path(content_root: Path | None = None) -> Path:
    """Get the path of the generated search-index JSON file.

    Uses FOLIO_SEARCH_INDEX when set, otherwise public/search-index.json
    next to the content directory.
    """
    override = os.environ.get("FOLIO_SEARCH_INDEX")
    if override:
        return Path(override)

    root = content_root or get_content_root()
    return root.parent / "public" / "search-index.json"


def _discover_project_config(start_dir: Path | None = None, max_depth: int = 10) -> tuple[Path, Path] | None:
    """Walk up from start_dir looking for .folioconfig with content_path.

    Args:
        start_dir: Directory to start from (defaults to cwd)
        max_depth: Maximum directories to traverse up

    Returns:
        Tuple of (config_path, content_path) if found, None otherwise.
    """
    import yaml

    current = Path(start_dir or os.getcwd()).resolve()

    for _ in range(max_depth):
        config_file = current / CONFIG_FILENAME
        if config_file.exists():
            try:
                data = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict) and "content_path" in data:
                    content_path = (current / data["content_path"]).resolve()
                    if content_path.is_dir():
                        return (config_file, content_path)
            except (OSError, yaml.YAMLError):
                pass

        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    return None
