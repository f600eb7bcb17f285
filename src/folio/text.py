"""Text utilities: Markdown excerpts, reading time and heading anchors."""

import math
import re

from .config import CHARS_PER_MINUTE, EXCERPT_MAX_LENGTH, WORDS_PER_MINUTE

# Applied in order. Code fences go before inline code so backticks inside a
# fence never pair with prose; images go before links because ![alt](src)
# also matches the link pattern.
_MARKDOWN_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"```[\s\S]*?```"), ""),  # fenced code blocks
    (re.compile(r"#{1,6}\s+"), ""),  # headers
    (re.compile(r"\*\*(.+?)\*\*"), r"\1"),  # bold
    (re.compile(r"\*(.+?)\*"), r"\1"),  # italic
    (re.compile(r"`(.+?)`"), r"\1"),  # inline code
    (re.compile(r"!\[.*?\]\(.+?\)"), ""),  # images
    (re.compile(r"\[(.+?)\]\(.+?\)"), r"\1"),  # links
)

_WHITESPACE = re.compile(r"\s+")

# Hiragana, Katakana, CJK ideographs (incl. extension A), half/full-width forms
_CJK_CHARS = re.compile(r"[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uf900-\ufaff\uff00-\uffef]")


def strip_markdown(markdown: str) -> str:
    """Remove Markdown syntax and collapse whitespace to single spaces."""
    text = markdown
    for pattern, replacement in _MARKDOWN_PATTERNS:
        text = pattern.sub(replacement, text)
    return _WHITESPACE.sub(" ", text).strip()


def strip_markdown_to_excerpt(markdown: str, max_length: int = EXCERPT_MAX_LENGTH) -> str:
    """Generate a plain-text excerpt from Markdown.

    Text longer than ``max_length`` is cut to exactly ``max_length``
    characters, trimmed, and suffixed with "..." (so the result can be
    ``max_length + 3`` long).

    Args:
        markdown: Markdown or MDX body text.
        max_length: Maximum number of characters kept before the ellipsis.

    Returns:
        Plain text excerpt. Plain text shorter than max_length is returned unchanged.
    """
    clean = strip_markdown(markdown)
    if len(clean) <= max_length:
        return clean
    return clean[:max_length].strip() + "..."


def is_cjk_text(text: str) -> bool:
    """True when the text contains Japanese/Chinese characters."""
    return _CJK_CHARS.search(text) is not None


def estimate_reading_time_minutes(
    text: str,
    words_per_minute: int = WORDS_PER_MINUTE,
    chars_per_minute: int = CHARS_PER_MINUTE,
) -> int:
    """Estimate reading time in whole minutes (never less than 1).

    Japanese text is not space delimited, so when any CJK character is
    present the estimate counts characters instead of words.
    """
    if is_cjk_text(text):
        units = len(_WHITESPACE.sub("", text))
        per_minute = chars_per_minute
    else:
        units = len(text.split())
        per_minute = words_per_minute

    return max(1, math.ceil(units / per_minute))


def slugify_heading(text: str) -> str:
    """Convert heading text to an in-page anchor id.

    Lowercases, drops punctuation and joins words with hyphens. Unicode
    letters and digits are kept so Japanese headings still get usable ids.
    """
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_]+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")
