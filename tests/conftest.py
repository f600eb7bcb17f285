"""Shared test fixtures for the folio test suite.

Design:
- tmp_content: isolated content root in a temp directory (FOLIO_CONTENT_ROOT)
- runner / cli_invoke: CliRunner pointed at tmp_content
- create_entry: helper that writes one Markdown file with YAML front matter
"""

from pathlib import Path
from typing import Any, Generator

import pytest
import yaml
from click.testing import CliRunner

from folio.cli import cli
from folio.config import KIND_DIRECTORIES
from folio.indexer import reset_index_cache


# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment."""
    return CliRunner()


@pytest.fixture
def tmp_content(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Create an empty content root and point folio at it.

    The process-wide index cache is reset before and after the test so
    results never leak between tests.

    Usage:
        def test_something(tmp_content):
            create_entry(tmp_content, "blog", "en", "hello.mdx", {...})
    """
    content_root = tmp_path / "content"
    content_root.mkdir()

    monkeypatch.setenv("FOLIO_CONTENT_ROOT", str(content_root))
    monkeypatch.delenv("FOLIO_SEARCH_INDEX", raising=False)
    reset_index_cache()

    yield content_root

    reset_index_cache()


@pytest.fixture
def sample_site(tmp_content: Path) -> Path:
    """Content root with a small bilingual site.

    Creates:
    - blog/en: launch (featured), calendar-tips, old-news, wip (draft)
    - blog/ja: launch
    - docs/en: introduction, features/calendar, features/tags, guides/weekly-review
    - releases/en: v1.0.0, v1.1.0, v2.0.0-beta.1
    """
    blog = [
        ("launch.mdx", {
            "title": "Launching Dayopt",
            "description": "Dayopt is now available",
            "publishedAt": "2024-03-01",
            "tags": ["announcement", "Productivity", "launch"],
            "category": "news",
            "featured": True,
        }, "We are live.\n\n## What's new\n\nEverything."),
        ("calendar-tips.mdx", {
            "title": "Five calendar tips",
            "description": "Plan your week with timeboxing",
            "publishedAt": "2024-02-10",
            "tags": ["calendar", "productivity", "tips"],
            "category": "guides",
        }, "Use the **calendar** view."),
        ("old-news.mdx", {
            "title": "Beta program opens",
            "description": "Join the beta",
            "publishedAt": "2023-11-20",
            "tags": ["announcement", "beta", "launch"],
            "category": "news",
        }, "Early access."),
        ("wip.mdx", {
            "title": "Work in progress",
            "publishedAt": "2024-04-01",
            "tags": ["draft"],
            "draft": True,
        }, "Not ready."),
    ]
    for name, fm, body in blog:
        create_entry(tmp_content, "blog", "en", name, fm, body)

    create_entry(tmp_content, "blog", "ja", "launch.mdx", {
        "title": "Dayoptをリリースしました",
        "description": "Dayoptが利用可能になりました",
        "publishedAt": "2024-03-01",
        "tags": ["お知らせ", "productivity"],
        "category": "news",
    }, "本日リリースしました。")

    docs = [
        ("introduction.mdx", {
            "title": "Introduction",
            "description": "What Dayopt does",
            "order": 1,
        }, "# Introduction\n\nWelcome."),
        ("features/calendar.mdx", {
            "title": "Calendar",
            "description": "Calendar view",
            "tags": ["calendar", "planning"],
            "order": 1,
        }, "The calendar."),
        ("features/tags.mdx", {
            "title": "Tags",
            "tags": ["tags", "planning"],
            "order": 2,
            "ai": {"relatedDocs": ["/docs/guides/weekly-review"]},
        }, "Organize records with **tags** and filters."),
        ("guides/weekly-review.mdx", {
            "title": "Weekly review",
            "description": "Review your week",
            "tags": ["review"],
            "order": 1,
        }, "Every Friday."),
    ]
    for name, fm, body in docs:
        create_entry(tmp_content, "doc", "en", name, fm, body)

    releases = [
        ("v1.0.0.mdx", {
            "version": "v1.0.0",
            "date": "2024-01-15",
            "title": "First stable release",
            "tags": ["release", "stable", "launch"],
        }, "Initial release."),
        ("v1.1.0.mdx", {
            "version": "v1.1.0",
            "date": "2024-02-20",
            "tags": ["release", "calendar", "improvement"],
        }, "Calendar improvements."),
        ("v2.0.0-beta.1.mdx", {
            "version": "v2.0.0-beta.1",
            "date": "2024-03-10",
            "title": "2.0 beta",
            "tags": ["release", "beta", "preview"],
            "breaking": True,
        }, "Try the new engine."),
    ]
    for name, fm, body in releases:
        create_entry(tmp_content, "release", "en", name, fm, body)

    return tmp_content


@pytest.fixture
def cli_invoke(runner: CliRunner, tmp_content: Path):
    """Helper for invoking the CLI against tmp_content.

    Usage:
        def test_list(cli_invoke):
            result = cli_invoke(["list", "blog"])
            assert result.exit_code == 0
    """
    def _invoke(args: list[str], catch_exceptions: bool = False):
        return runner.invoke(
            cli,
            args,
            catch_exceptions=catch_exceptions,
            env={"FOLIO_CONTENT_ROOT": str(tmp_content)},
        )
    return _invoke


# ─────────────────────────────────────────────────────────────────────────────
# Helper Functions (for test code, not fixtures)
# ─────────────────────────────────────────────────────────────────────────────


def create_entry(
    content_root: Path,
    kind: str,
    locale: str,
    rel_path: str,
    front_matter: dict[str, Any] | None = None,
    body: str = "",
) -> Path:
    """Write a content file with YAML front matter.

    Usage in tests:
        from conftest import create_entry
        path = create_entry(tmp_content, "blog", "en", "hello.mdx", {"title": "Hello"}, "Body")
    """
    path = content_root / KIND_DIRECTORIES[kind] / locale / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)

    header = ""
    if front_matter is not None:
        dumped = yaml.safe_dump(front_matter, sort_keys=False, allow_unicode=True)
        header = f"---\n{dumped}---\n\n"
    path.write_text(header + body + "\n", encoding="utf-8")
    return path
