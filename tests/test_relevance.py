"""Tests for folio.relevance (related-content scoring)."""

from folio.models import AIMetadata, BlogRecord, DocRecord
from folio.relevance import BLOG_PROFILE, DOCS_PROFILE, related_content, related_with_scores, score


def _post(slug, tags, category="product"):
    return BlogRecord(slug=slug, locale="en", title=slug.title(), tags=tags, category=category)


def _doc(slug, tags, category, related_docs=None):
    ai = AIMetadata(related_docs=related_docs) if related_docs else None
    return DocRecord(slug=slug, locale="en", title=slug, tags=tags, category=category, ai=ai)


class TestScore:
    """Tests for the two scoring profiles."""

    def test_docs_profile(self):
        a, b = _post("a", ["x", "y"]), _post("b", ["y", "z"])
        assert score(a, b, DOCS_PROFILE) == 3

    def test_blog_profile(self):
        a, b = _post("a", ["x", "y"]), _post("b", ["y", "z"])
        assert score(a, b, BLOG_PROFILE) == 15

    def test_profiles_are_independent(self):
        a, c = _post("a", ["x", "y"]), _post("c", ["w"])
        assert score(a, c, DOCS_PROFILE) == 1
        assert score(a, c, BLOG_PROFILE) == 10

    def test_duplicate_tags_count_once(self):
        a, b = _post("a", ["x", "x", "y"]), _post("b", ["x", "x"], category="other")
        assert score(a, b, DOCS_PROFILE) == 2
        assert score(a, b, BLOG_PROFILE) == 5

    def test_category_is_case_sensitive(self):
        a, b = _post("a", [], category="News"), _post("b", [], category="news")
        assert score(a, b) == 0

    def test_cross_reference_bonus(self):
        current = _doc("features/tags", [], "features", related_docs=["/docs/guides/weekly-review"])
        candidate = _doc("guides/weekly-review", [], "guides")
        assert score(current, candidate, DOCS_PROFILE) == 5

    def test_blog_profile_ignores_cross_references(self):
        current = _doc("features/tags", [], "features", related_docs=["guides/weekly-review"])
        candidate = _doc("guides/weekly-review", [], "guides")
        assert score(current, candidate, BLOG_PROFILE) == 0

    def test_scores_are_non_negative_integers(self):
        records = [_post("a", ["x"]), _post("b", []), _post("c", ["y"], category="other")]
        for current in records:
            for candidate in records:
                value = score(current, candidate)
                assert isinstance(value, int)
                assert value >= 0


class TestRelatedContent:
    """Tests for related_content / related_with_scores."""

    def test_ranked_by_score(self):
        records = [_post("a", ["x", "y"]), _post("b", ["y", "z"]), _post("c", ["w"])]

        scored = related_with_scores(records, "a", profile=DOCS_PROFILE)

        assert [(s.record.slug, s.score) for s in scored] == [("b", 3), ("c", 1)]

    def test_self_excluded(self):
        records = [_post("a", ["x"]), _post("b", ["x"])]
        assert [r.slug for r in related_content(records, "a")] == ["b"]

    def test_zero_scores_dropped(self):
        records = [_post("a", ["x"]), _post("b", ["y"], category="other")]
        assert related_content(records, "a") == []

    def test_ties_keep_collection_order(self):
        records = [_post("a", ["x"]), _post("c", ["x"]), _post("b", ["x"]), _post("d", ["x"])]
        assert [r.slug for r in related_content(records, "a", limit=3)] == ["c", "b", "d"]

    def test_limit(self):
        records = [_post(f"p{i}", ["x"]) for i in range(6)]
        assert len(related_content(records, "p0", limit=2)) == 2

    def test_unknown_slug(self):
        assert related_content([_post("a", ["x"])], "missing") == []

    def test_profiles_rank_differently(self):
        """Docs weights favour shared tags; blog weights favour category."""
        records = [
            _post("current", ["x", "y"], category="news"),
            _post("same-category", [], category="news"),
            _post("shared-tag", ["x"], category="guides"),
        ]

        docs = [r.slug for r in related_content(records, "current", profile=DOCS_PROFILE)]
        blog = [r.slug for r in related_content(records, "current", profile=BLOG_PROFILE)]

        assert docs == ["shared-tag", "same-category"]
        assert blog == ["same-category", "shared-tag"]
