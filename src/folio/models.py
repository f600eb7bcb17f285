"""Pydantic models for site content.

Two layers live here:

- Front matter schemas (BlogFrontMatter, ReleaseFrontMatter, DocFrontMatter)
  describe what an author may write in a file's YAML block, using the
  camelCase keys the content tree uses (publishedAt, coverImage, ...).
- Records (BlogRecord, DocRecord, ReleaseRecord) are the validated, immutable
  entries every index, search and ranking function works on. They share the
  ContentRecord base and are discriminated by ``kind``.
"""

from datetime import date, datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationInfo, field_validator

from .config import DEFAULT_AUTHOR, DEFAULT_CATEGORY, UNTITLED

ContentKind = Literal["blog", "doc", "release"]
CONTENT_KINDS: tuple[ContentKind, ...] = ("blog", "doc", "release")


def _scalar_to_str(value: Any) -> Any:
    """Coerce YAML scalars to strings.

    YAML turns ``publishedAt: 2026-01-01`` into a date and ``version: 1.0``
    into a float; authors mean strings in both cases.
    """
    if isinstance(value, datetime):
        return value.date().isoformat() if value.time() == datetime.min.time() else value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


Text = Annotated[str, BeforeValidator(_scalar_to_str)]


# ─────────────────────────────────────────────────────────────────────────────
# Front matter schemas
# ─────────────────────────────────────────────────────────────────────────────


class AIMetadata(BaseModel):
    """Optional AI/RAG hints carried in the ``ai`` front matter block."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    related_questions: list[str] | None = Field(default=None, alias="relatedQuestions")
    prerequisites: list[str] | None = None
    related_docs: list[str] | None = Field(default=None, alias="relatedDocs")
    chunk_strategy: Literal["h2", "h3", "paragraph", "full"] | None = Field(
        default=None, alias="chunkStrategy"
    )
    searchable: bool | None = None
    difficulty: Literal["beginner", "intermediate", "advanced"] | None = None
    content_type: Literal["tutorial", "reference", "guide", "troubleshooting", "concept"] | None = (
        Field(default=None, alias="contentType")
    )


class _FrontMatter(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def field_for_key(cls, key: str) -> tuple[str, Any] | None:
        """Return (field_name, FieldInfo) for a front matter key or alias."""
        for name, info in cls.model_fields.items():
            if key in (name, info.alias):
                return name, info
        return None


def _non_empty(value: str, info: ValidationInfo) -> str:
    # Lenient context is used by the fallback pass so it can never fail twice.
    if not value.strip() and not (info.context or {}).get("lenient"):
        raise ValueError(f"{info.field_name} must not be empty")
    return value


class BlogFrontMatter(_FrontMatter):
    """Front matter of a blog post."""

    title: Text
    description: Text = ""
    published_at: Text = Field(alias="publishedAt")
    updated_at: Text | None = Field(default=None, alias="updatedAt")
    tags: list[Text] = Field(default_factory=list)
    category: Text = DEFAULT_CATEGORY
    author: Text = DEFAULT_AUTHOR
    author_avatar: str | None = Field(default=None, alias="authorAvatar")
    cover_image: str | None = Field(default=None, alias="coverImage")
    draft: bool = False
    featured: bool = False
    reading_time: float | None = Field(default=None, alias="readingTime")
    ai: AIMetadata | None = None

    @field_validator("title", "published_at")
    @classmethod
    def _required_non_empty(cls, value: str, info: ValidationInfo) -> str:
        return _non_empty(value, info)


class ReleaseFrontMatter(_FrontMatter):
    """Front matter of a release note."""

    version: Text
    date: Text
    title: Text = ""
    description: Text = ""
    tags: list[Text] = Field(default_factory=list)
    breaking: bool = False
    featured: bool = False
    prerelease: bool | None = None
    author: Text | None = None
    author_avatar: str | None = Field(default=None, alias="authorAvatar")
    cover_image: str | None = Field(default=None, alias="coverImage")
    ai: AIMetadata | None = None

    @field_validator("version", "date")
    @classmethod
    def _required_non_empty(cls, value: str, info: ValidationInfo) -> str:
        return _non_empty(value, info)


class DocFrontMatter(_FrontMatter):
    """Front matter of a documentation page. Every field has a default."""

    title: Text = UNTITLED
    description: Text = ""
    tags: list[Text] = Field(default_factory=list)
    author: Text | None = None
    published_at: Text | None = Field(default=None, alias="publishedAt")
    updated_at: Text | None = Field(default=None, alias="updatedAt")
    slug: Text = ""
    category: Text = DEFAULT_CATEGORY
    order: float = 0
    draft: bool = False
    featured: bool = False
    ai: AIMetadata | None = None


FRONT_MATTER_SCHEMAS: dict[str, type[_FrontMatter]] = {
    "blog": BlogFrontMatter,
    "doc": DocFrontMatter,
    "release": ReleaseFrontMatter,
}


# ─────────────────────────────────────────────────────────────────────────────
# Records
# ─────────────────────────────────────────────────────────────────────────────


class ContentRecord(BaseModel):
    """Fields common to every content kind."""

    model_config = ConfigDict(frozen=True)

    kind: ContentKind
    slug: str
    locale: str
    title: str
    description: str = ""
    excerpt: str = ""
    tags: list[str] = Field(default_factory=list)
    category: str = DEFAULT_CATEGORY
    date: str = ""  # publishedAt for blog/doc, date for releases
    updated_at: str | None = None
    draft: bool = False
    featured: bool = False
    body: str = ""
    reading_time: int = 1
    ai: AIMetadata | None = None
    source_path: str | None = None

    @property
    def last_modified(self) -> str:
        return self.updated_at or self.date

    @property
    def related_refs(self) -> list[str]:
        """Explicit cross references from the ai.relatedDocs block."""
        if self.ai is None or not self.ai.related_docs:
            return []
        return list(self.ai.related_docs)


class BlogRecord(ContentRecord):
    kind: Literal["blog"] = "blog"
    author: str = DEFAULT_AUTHOR
    author_avatar: str | None = None
    cover_image: str | None = None


class DocRecord(ContentRecord):
    kind: Literal["doc"] = "doc"
    order: float = 0
    author: str | None = None


class ReleaseRecord(ContentRecord):
    kind: Literal["release"] = "release"
    version: str
    breaking: bool = False
    prerelease: bool | None = None  # explicit flag; None means "infer from version"
    author: str | None = None
    cover_image: str | None = None

    @property
    def display_title(self) -> str:
        return self.title or f"Release {self.version}"


AnyRecord = Annotated[Union[BlogRecord, DocRecord, ReleaseRecord], Field(discriminator="kind")]


class FieldWarning(BaseModel):
    """A single front matter field that failed validation."""

    field: str
    message: str


class ValidationResult(BaseModel):
    """Outcome of validating one file: the coerced record plus any warnings."""

    record: AnyRecord
    warnings: list[FieldWarning] = Field(default_factory=list)
    source: str | None = None

    @property
    def ok(self) -> bool:
        return not self.warnings


# ─────────────────────────────────────────────────────────────────────────────
# Ranking, tags and search
# ─────────────────────────────────────────────────────────────────────────────


class ScoredRecord(BaseModel):
    """A related-content candidate with its relevance score."""

    record: AnyRecord
    score: int


class TagCount(BaseModel):
    """Usage count of a tag across all content kinds."""

    tag: str
    count: int
    blog_count: int = 0
    release_count: int = 0
    doc_count: int = 0


class TaggedContent(BaseModel):
    """Flattened view of an entry carrying a given tag."""

    type: ContentKind
    slug: str
    title: str
    description: str
    date: str
    tags: list[str] = Field(default_factory=list)
    category: str | None = None
    featured: bool = False
    version: str | None = None  # releases only
    breaking: bool | None = None  # releases only


class TagLookup(BaseModel):
    """All entries carrying a tag, grouped by kind."""

    tag: str  # first original spelling found, not the query's casing
    total_count: int
    blog: list[TaggedContent] = Field(default_factory=list)
    releases: list[TaggedContent] = Field(default_factory=list)
    docs: list[TaggedContent] = Field(default_factory=list)


class SearchIndexEntry(BaseModel):
    """Minimal record stored in the generated search-index JSON."""

    id: str
    title: str
    description: str
    url: str
    type: Literal["blog", "docs", "release"]
    tags: list[str] = Field(default_factory=list)
    category: str = ""
    date: str = ""


class SearchHit(BaseModel):
    """A search endpoint result."""

    id: str
    title: str
    description: str
    url: str
    type: Literal["blog", "docs", "release"]
    breadcrumbs: list[str] = Field(default_factory=list)
    last_modified: str = ""
    tags: list[str] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Response wrapper for search hits."""

    results: list[SearchHit] = Field(default_factory=list)


class Breadcrumb(BaseModel):
    """One step of a docs breadcrumb trail."""

    title: str
    href: str
    clickable: bool = True


# ─────────────────────────────────────────────────────────────────────────────
# Content linter
# ─────────────────────────────────────────────────────────────────────────────


class FileLintResult(BaseModel):
    """Problems found in a single content file."""

    path: str
    kind: ContentKind
    draft: bool = False
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class LintReport(BaseModel):
    """Aggregate result of a content lint run."""

    files_checked: int = 0
    files: list[FileLintResult] = Field(default_factory=list)  # only files with problems
    global_warnings: list[str] = Field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(len(f.errors) for f in self.files)

    @property
    def warning_count(self) -> int:
        return sum(len(f.warnings) for f in self.files) + len(self.global_warnings)

    @property
    def ok(self) -> bool:
        return self.error_count == 0
