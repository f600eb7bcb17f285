"""Tests for the content linter."""

from datetime import date, datetime

from conftest import create_entry

from folio.lint import check_front_matter, check_language_symmetry, lint_content

AI = {"relatedQuestions": ["How do I start?"]}


def _blog_fm(**overrides):
    fm = {
        "title": "Hello",
        "description": "A post",
        "publishedAt": "2024-01-01",
        "tags": ["one", "two", "three"],
        "category": "news",
        "author": "Dayopt Team",
        "ai": AI,
    }
    fm.update(overrides)
    return {k: v for k, v in fm.items() if v is not None}


def _release_fm(**overrides):
    fm = {
        "version": "v1.0.0",
        "date": "2024-01-01",
        "title": "First",
        "description": "First release",
        "tags": ["release", "stable", "launch"],
        "breaking": False,
        "featured": False,
        "ai": AI,
    }
    fm.update(overrides)
    return {k: v for k, v in fm.items() if v is not None}


class TestCheckFrontMatter:
    """Tests for check_front_matter."""

    def test_valid_blog(self):
        assert check_front_matter("blog", _blog_fm()) == ([], [])

    def test_valid_release_with_false_flags(self):
        assert check_front_matter("release", _release_fm()) == ([], [])

    def test_missing_fields(self):
        problems, _ = check_front_matter("blog", _blog_fm(description="", author=None))
        assert problems == [
            "Missing required field: 'description'",
            "Missing required field: 'author'",
        ]

    def test_doc_required_fields(self):
        problems, _ = check_front_matter("doc", {"title": "Intro", "ai": AI})
        assert problems == [
            "Missing required field: 'description'",
            "Missing required field: 'category'",
            "Missing required field: 'slug'",
        ]

    def test_invalid_date(self):
        problems, _ = check_front_matter("blog", _blog_fm(publishedAt="March 1, 2024"))
        assert problems == [
            "Invalid date format for 'publishedAt': expected YYYY-MM-DD, got 'March 1, 2024'"
        ]

    def test_yaml_date_object_is_valid(self):
        assert check_front_matter("blog", _blog_fm(publishedAt=date(2024, 1, 1))) == ([], [])

    def test_timestamp_is_invalid(self):
        problems, _ = check_front_matter("release", _release_fm(date=datetime(2024, 1, 1, 9, 30)))
        assert problems == [
            "Invalid date format for 'date': expected YYYY-MM-DD, got '2024-01-01T09:30:00'"
        ]

    def test_optional_date_checked_when_present(self):
        problems, _ = check_front_matter("blog", _blog_fm(updatedAt="2024/02/01"))
        assert len(problems) == 1
        assert "'updatedAt'" in problems[0]

    def test_tag_bounds(self):
        few, _ = check_front_matter("blog", _blog_fm(tags=["a", "b"]))
        many, _ = check_front_matter("release", _release_fm(tags=list("abcdefg")))

        assert few == ["Too few tags (min: 3, found: 2)"]
        assert many == ["Too many tags (max: 6, found: 7)"]

    def test_docs_exempt_from_tag_bounds(self):
        fm = {"title": "T", "description": "D", "category": "c", "slug": "s", "tags": ["x"], "ai": AI}
        assert check_front_matter("doc", fm) == ([], [])

    def test_missing_ai_is_advisory(self):
        problems, advisories = check_front_matter("blog", _blog_fm(ai=None))
        assert problems == []
        assert advisories == ["'ai' metadata not set (recommended for RAG)"]


class TestLintContent:
    """Tests for lint_content over a content tree."""

    def test_clean_tree(self, tmp_content):
        create_entry(tmp_content, "blog", "en", "hello.mdx", _blog_fm(), "Body")

        report = lint_content(tmp_content)

        assert report.files_checked == 1
        assert report.files == []
        assert report.ok

    def test_errors_in_published_file(self, tmp_content):
        create_entry(tmp_content, "blog", "en", "hello.mdx", _blog_fm(description=None), "Body")

        report = lint_content(tmp_content)

        assert not report.ok
        [result] = report.files
        assert result.path == "content/blog/en/hello.mdx"
        assert result.kind == "blog"
        assert result.errors == ["Missing required field: 'description'"]

    def test_drafts_only_warn(self, tmp_content):
        create_entry(tmp_content, "blog", "en", "wip.mdx", _blog_fm(description=None, draft=True), "Body")

        report = lint_content(tmp_content)

        assert report.ok
        [result] = report.files
        assert result.draft is True
        assert result.errors == []
        assert result.warnings == ["Missing required field: 'description'"]

    def test_schema_warnings_reported(self, tmp_content):
        create_entry(tmp_content, "blog", "en", "hello.mdx", _blog_fm(featured="sometimes"), "Body")

        [result] = lint_content(tmp_content).files

        assert len(result.errors) == 1
        assert result.errors[0].startswith("Invalid field 'featured':")

    def test_missing_field_not_reported_twice(self, tmp_content):
        create_entry(tmp_content, "blog", "en", "hello.mdx", _blog_fm(title=None), "Body")

        [result] = lint_content(tmp_content).files

        assert result.errors == ["Missing required field: 'title'"]

    def test_unparseable_file(self, tmp_content):
        path = tmp_content / "blog" / "en" / "broken.mdx"
        path.parent.mkdir(parents=True)
        path.write_text("---\ntitle: [unclosed\n---\n\nBody\n", encoding="utf-8")

        report = lint_content(tmp_content)

        [result] = report.files
        assert result.errors[0].startswith("Failed to parse front matter")

    def test_malformed_json_front_matter(self, tmp_content):
        create_entry(tmp_content, "blog", "en", "good.mdx", _blog_fm(), "Body")
        path = tmp_content / "blog" / "en" / "json.mdx"
        path.write_text('{\n"title": oops\n}\nBody\n', encoding="utf-8")

        report = lint_content(tmp_content)

        assert report.files_checked == 2
        [result] = report.files
        assert result.path == "content/blog/en/json.mdx"
        assert result.errors[0].startswith("Failed to parse front matter")

    def test_counts(self, tmp_content):
        create_entry(tmp_content, "blog", "en", "a.mdx", _blog_fm(ai=None), "Body")
        create_entry(tmp_content, "release", "en", "v1.mdx", _release_fm(date="soon"), "Body")

        report = lint_content(tmp_content)

        assert report.files_checked == 2
        assert report.error_count == 1
        assert report.warning_count == 1

    def test_sample_site_drafts_included(self, sample_site):
        report = lint_content(sample_site)

        assert report.files_checked == 12
        drafts = [f for f in report.files if f.draft]
        assert [f.path for f in drafts] == ["content/blog/en/wip.mdx"]


class TestLanguageSymmetry:
    """Tests for check_language_symmetry."""

    def test_missing_counterpart(self, tmp_content):
        create_entry(tmp_content, "blog", "en", "a.mdx", _blog_fm())
        create_entry(tmp_content, "blog", "en", "b.mdx", _blog_fm())
        create_entry(tmp_content, "blog", "ja", "a.mdx", _blog_fm())

        assert check_language_symmetry("blog", tmp_content) == [
            "Missing ja counterpart: content/blog/en/b.mdx"
        ]

    def test_nested_docs(self, tmp_content):
        create_entry(tmp_content, "doc", "en", "features/tags.mdx", {"title": "Tags"})
        create_entry(tmp_content, "doc", "ja", "features/other.mdx", {"title": "Other"})

        assert check_language_symmetry("doc", tmp_content) == [
            "Missing ja counterpart: content/docs/en/features/tags.mdx"
        ]

    def test_missing_locale_directory_skipped(self, tmp_content):
        create_entry(tmp_content, "blog", "en", "a.mdx", _blog_fm())
        assert check_language_symmetry("blog", tmp_content) == []

    def test_reported_as_global_warnings(self, tmp_content):
        create_entry(tmp_content, "release", "en", "v1.mdx", _release_fm())
        create_entry(tmp_content, "release", "ja", "v2.mdx", _release_fm(version="v2.0.0"))

        report = lint_content(tmp_content)

        assert report.global_warnings == ["Missing ja counterpart: content/releases/en/v1.mdx"]
        assert report.ok
