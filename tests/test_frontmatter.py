"""Tests for folio.frontmatter module (front matter validation)."""

import copy
import logging
from datetime import date

import pytest

from folio.errors import ErrorCode, FolioError
from folio.frontmatter import validate
from folio.models import BlogRecord, DocRecord, ReleaseRecord


class TestValidateDoc:
    """Docs have a default for every field."""

    def test_empty_front_matter(self):
        """An empty mapping is valid and yields the placeholder title."""
        result = validate("doc", {}, slug="intro", locale="en")

        assert isinstance(result.record, DocRecord)
        assert result.record.title == "Untitled"
        assert result.record.description == ""
        assert result.record.tags == []
        assert result.record.category == "general"
        assert result.record.order == 0
        assert result.record.draft is False
        assert result.ok

    def test_path_category_wins(self):
        result = validate(
            "doc",
            {"title": "Tags", "category": "misc"},
            slug="features/tags",
            locale="en",
            category="features",
        )
        assert result.record.category == "features"

    def test_date_falls_back_to_updated_at(self):
        result = validate("doc", {"updatedAt": "2024-05-01"}, slug="x", locale="en")
        assert result.record.date == "2024-05-01"

    def test_invalid_order_falls_back_to_default(self):
        result = validate("doc", {"title": "Guide", "order": "first"}, slug="guide", locale="en")

        assert result.record.order == 0
        assert result.record.title == "Guide"
        assert [w.field for w in result.warnings] == ["order"]


class TestValidateBlog:
    """Tests for blog front matter."""

    def test_valid_post(self):
        raw = {
            "title": "Hello",
            "description": "First post",
            "publishedAt": date(2024, 1, 15),
            "tags": ["intro", "news"],
            "category": "news",
            "featured": True,
        }
        result = validate("blog", raw, slug="hello", locale="en", body="Body text here.")

        record = result.record
        assert isinstance(record, BlogRecord)
        assert result.ok
        assert record.date == "2024-01-15"
        assert record.author == "Dayopt Team"
        assert record.featured is True
        assert record.excerpt == "First post"
        assert record.reading_time == 1

    def test_empty_front_matter_never_raises(self):
        """Missing required fields produce warnings and a placeholder record."""
        result = validate("blog", {}, slug="empty", locale="en")

        assert not result.ok
        fields = {w.field for w in result.warnings}
        assert "title" in fields
        assert "publishedAt" in fields
        assert result.record.title == "Untitled"
        assert result.record.date == ""
        assert result.record.slug == "empty"

    def test_blank_title_replaced(self):
        result = validate("blog", {"title": "  ", "publishedAt": "2024-01-01"}, slug="x", locale="en")

        assert result.record.title == "Untitled"
        assert result.record.date == "2024-01-01"
        assert [w.field for w in result.warnings] == ["title"]

    def test_bad_field_keeps_other_values(self):
        """Only the failing field is replaced by its default."""
        raw = {"title": "Tips", "publishedAt": "2024-02-01", "tags": "not-a-list", "category": "guides"}
        result = validate("blog", raw, slug="tips", locale="en")

        assert result.record.tags == []
        assert result.record.title == "Tips"
        assert result.record.category == "guides"
        assert [w.field for w in result.warnings] == ["tags"]

    def test_raw_mapping_not_mutated(self):
        raw = {"title": "", "tags": ["a"], "publishedAt": None}
        snapshot = copy.deepcopy(raw)

        validate("blog", raw, slug="x", locale="en")

        assert raw == snapshot

    def test_excerpt_derived_from_body(self):
        body = "## Intro\n\nThis post explains **timeboxing**."
        result = validate("blog", {"title": "T", "publishedAt": "2024-01-01"}, slug="t", locale="en", body=body)
        assert result.record.excerpt == "Intro This post explains timeboxing."

    def test_warning_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="folio"):
            validate("blog", {"title": "No date"}, slug="nodate", locale="en", source="blog/en/nodate.mdx")

        assert "Front matter validation warning (blog/en/nodate.mdx)" in caplog.text
        assert "publishedAt" in caplog.text

    def test_ai_block(self):
        raw = {
            "title": "T",
            "publishedAt": "2024-01-01",
            "ai": {"relatedDocs": ["features/tags"], "difficulty": "beginner"},
        }
        result = validate("blog", raw, slug="t", locale="en")

        assert result.record.ai is not None
        assert result.record.ai.difficulty == "beginner"
        assert result.record.related_refs == ["features/tags"]


class TestValidateRelease:
    """Tests for release note front matter."""

    def test_valid_release(self):
        result = validate("release", {"version": "v1.2.0", "date": "2024-03-01"}, slug="v1.2.0", locale="en")

        record = result.record
        assert isinstance(record, ReleaseRecord)
        assert result.ok
        assert record.title == ""
        assert record.display_title == "Release v1.2.0"
        assert record.category == "releases"
        assert record.breaking is False
        assert record.draft is False

    def test_numeric_version_coerced(self):
        result = validate("release", {"version": 1.5, "date": "2024-03-01"}, slug="1.5", locale="en")
        assert result.record.version == "1.5"
        assert result.ok

    def test_missing_required_fields(self):
        result = validate("release", {"title": "Mystery"}, slug="mystery", locale="en")

        fields = {w.field for w in result.warnings}
        assert fields == {"version", "date"}
        assert result.record.version == ""
        assert result.record.title == "Mystery"


class TestValidateDispatch:
    def test_unknown_kind_raises(self):
        with pytest.raises(FolioError) as exc_info:
            validate("podcast", {}, slug="x", locale="en")
        assert exc_info.value.code == ErrorCode.UNKNOWN_KIND

    def test_record_is_frozen(self):
        result = validate("doc", {"title": "Frozen"}, slug="frozen", locale="en")
        with pytest.raises(Exception):
            result.record.slug = "changed"
