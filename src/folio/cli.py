#!/usr/bin/env python3
"""
folio: CLI for the site's blog, docs and release notes

Usage:
    folio list blog                   # Published posts, newest first
    folio get doc features/tags       # Show one entry
    folio search "calendar"           # Free-text search
    folio related blog my-post        # Related entries
    folio tags                        # Tag usage
    folio lint                        # Check front matter
"""

from __future__ import annotations

import difflib
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any, NoReturn

import click
from click.exceptions import ClickException, UsageError

from . import __version__ as FOLIO_VERSION
from .config import DEFAULT_LOCALE, SUPPORTED_LOCALES
from .models import CONTENT_KINDS

# ─────────────────────────────────────────────────────────────────────────────
# Output Formatting
# ─────────────────────────────────────────────────────────────────────────────


def format_table(rows: list[dict], columns: list[str], max_widths: dict | None = None) -> str:
    """Format rows as a simple table."""
    if not rows:
        return ""

    max_widths = max_widths or {}

    def _cell(row: dict, col: str) -> str:
        val = str(row.get(col, ""))
        limit = max_widths.get(col, 50)
        if len(val) > limit:
            val = val[: limit - 3] + "..."
        return val

    widths = {col: max([len(col)] + [len(_cell(row, col)) for row in rows]) for col in columns}

    lines = [
        "  ".join(col.upper().ljust(widths[col]) for col in columns),
        "  ".join("-" * widths[col] for col in columns),
    ]
    for row in rows:
        lines.append("  ".join(_cell(row, col).ljust(widths[col]) for col in columns).rstrip())
    return "\n".join(lines)


def output(data, as_json: bool = False):
    """Output data as JSON or formatted text."""
    if as_json:
        click.echo(json.dumps(data, indent=2, default=str, ensure_ascii=False))
    else:
        click.echo(data)


def _dump(items) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json") for item in items]


def _record_summary(record) -> dict[str, Any]:
    return record.model_dump(mode="json", exclude={"body", "ai", "source_path"})


# ─────────────────────────────────────────────────────────────────────────────
# Error Handling
# ─────────────────────────────────────────────────────────────────────────────


def _handle_error(ctx: click.Context, error: Exception, exit_code: int = 1) -> NoReturn:
    """Report an error as text, or as JSON when --json-errors is set."""
    from .config import ConfigurationError
    from .errors import ErrorCode, FolioError, format_error_json

    json_errors = ctx.obj.get("json_errors", False) if ctx.obj else False

    if isinstance(error, FolioError):
        if json_errors:
            click.echo(error.to_json(), err=True)
        else:
            click.echo(f"Error: {error.message}", err=True)
            suggestion = error.details.get("suggestion")
            if suggestion:
                click.echo(f"Hint: {suggestion}", err=True)
    else:
        code = ErrorCode.CONTENT_ROOT_NOT_FOUND if isinstance(error, ConfigurationError) else "UNKNOWN_ERROR"
        if json_errors:
            click.echo(format_error_json(code, str(error)), err=True)
        else:
            click.echo(f"Error: {error}", err=True)

    sys.exit(exit_code)


def get_error_code_for_exception(exc: Exception) -> str:
    """Map Click exceptions to error codes."""
    if isinstance(exc, click.BadParameter):
        return "INVALID_ARGUMENT"
    if isinstance(exc, click.MissingParameter):
        return "MISSING_ARGUMENT"
    if isinstance(exc, click.NoSuchOption):
        return "UNKNOWN_OPTION"
    if isinstance(exc, UsageError):
        return "USAGE_ERROR"
    return "CLI_ERROR"


class JsonErrorGroup(click.Group):
    """Click group that formats usage errors as JSON when --json-errors is set.

    Also suggests the closest command name for typos.
    """

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except UsageError as e:
            cmd_name = args[0] if args else ""
            if cmd_name and "No such command" in str(e):
                matches = difflib.get_close_matches(cmd_name, self.list_commands(ctx), n=1, cutoff=0.6)
                if matches:
                    raise UsageError(f"No such command '{cmd_name}'. Did you mean '{matches[0]}'?")
            raise

    def main(
        self,
        args: Sequence[str] | None = None,
        prog_name: str | None = None,
        complete_var: str | None = None,
        standalone_mode: bool = True,
        **extra: Any,
    ) -> Any:
        argv = list(args) if args is not None else list(sys.argv[1:])
        if "--json-errors" not in argv:
            return super().main(argv, prog_name, complete_var, standalone_mode, **extra)

        # Accept --json-errors anywhere on the command line
        argv = ["--json-errors"] + [a for a in argv if a != "--json-errors"]
        try:
            return super().main(argv, prog_name, complete_var, standalone_mode=False, **extra)
        except ClickException as e:
            click.echo(
                json.dumps({"error": {"code": get_error_code_for_exception(e), "message": e.format_message()}}),
                err=True,
            )
            raise SystemExit(1)


def _run(ctx: click.Context, fn, *args, **kwargs):
    """Call a core function, routing folio and configuration errors to _handle_error."""
    from .config import ConfigurationError
    from .errors import FolioError

    try:
        return fn(*args, **kwargs)
    except (FolioError, ConfigurationError) as e:
        _handle_error(ctx, e)


locale_option = click.option(
    "--locale",
    "-l",
    type=click.Choice(SUPPORTED_LOCALES),
    default=DEFAULT_LOCALE,
    envvar="FOLIO_LOCALE",
    show_default=True,
    help="Content locale",
)
json_option = click.option("--json", "as_json", is_flag=True, help="Output as JSON")
kind_argument = click.argument("kind", type=click.Choice(CONTENT_KINDS))


# ─────────────────────────────────────────────────────────────────────────────
# Main CLI Group
# ─────────────────────────────────────────────────────────────────────────────


@click.group(cls=JsonErrorGroup)
@click.version_option(version=FOLIO_VERSION, prog_name="folio")
@click.option("--json-errors", "json_errors", is_flag=True, help="Output errors as JSON (for programmatic use)")
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    envvar="FOLIO_QUIET",
    help="Suppress warnings, show only errors and essential output",
)
@click.pass_context
def cli(ctx: click.Context, json_errors: bool, quiet: bool):
    """folio: index, search and rank the site's content.

    \b
    Browse:
      folio list blog --tag=release
      folio get doc features/tags
      folio versions

    \b
    Discover:
      folio search "calendar"
      folio related doc features/tags
      folio tags --limit=10
      folio tag productivity

    \b
    Build steps:
      folio lint                    # Fails on errors in published files
      folio search-index build      # Writes public/search-index.json
    """
    from ._logging import set_quiet_mode

    ctx.ensure_object(dict)
    ctx.obj["json_errors"] = json_errors
    ctx.obj["quiet"] = quiet

    if quiet:
        set_quiet_mode(True)


# ─────────────────────────────────────────────────────────────────────────────
# Browse Commands
# ─────────────────────────────────────────────────────────────────────────────


@cli.command("list")
@kind_argument
@locale_option
@click.option("--tag", "--tags", "tags", help="Filter by tags (comma-separated, any match)")
@click.option("--category", help="Filter by category")
@click.option("--sort", type=click.Choice(["date", "category"]), help="Re-sort the listing")
@click.option("--order", type=click.Choice(["asc", "desc"]), default="desc", show_default=True)
@click.option("--limit", "-n", type=click.IntRange(min=1), help="Max results")
@click.option("--drafts", is_flag=True, help="Include drafts")
@json_option
@click.pass_context
def list_command(
    ctx: click.Context,
    kind: str,
    locale: str,
    tags: str | None,
    category: str | None,
    sort: str | None,
    order: str,
    limit: int | None,
    drafts: bool,
    as_json: bool,
):
    """List entries of one kind.

    \b
    Examples:
      folio list blog
      folio list doc --category=features
      folio list release --locale=ja --json
    """
    from .core import list_entries

    tag_list = [t.strip() for t in tags.split(",") if t.strip()] if tags else []
    records = _run(
        ctx,
        list_entries,
        kind,
        locale,
        tags=tag_list,
        category=category,
        sort=sort,
        order=order,
        include_drafts=drafts,
    )
    if limit:
        records = records[:limit]

    if as_json:
        output([_record_summary(r) for r in records], as_json=True)
        return
    if not records:
        click.echo("No entries found.")
        return

    rows = [
        {"slug": r.slug, "title": r.title, "category": r.category, "date": r.date, "draft": "yes" if r.draft else ""}
        for r in records
    ]
    columns = ["slug", "title", "category", "date"] + (["draft"] if drafts else [])
    click.echo(format_table(rows, columns, {"slug": 40, "title": 40}))


@cli.command()
@kind_argument
@click.argument("slug")
@locale_option
@click.option("--metadata", "-m", is_flag=True, help="Show metadata only")
@json_option
@click.pass_context
def get(ctx: click.Context, kind: str, slug: str, locale: str, metadata: bool, as_json: bool):
    """Show one published entry.

    Releases can be looked up by version.

    \b
    Examples:
      folio get blog launch-announcement
      folio get doc features/tags --metadata
      folio get release v1.2.0
    """
    from .core import get_entry
    from .navigation import generate_breadcrumbs

    record = _run(ctx, get_entry, kind, locale, slug)
    breadcrumbs = generate_breadcrumbs(record.slug) if kind == "doc" else []

    if as_json:
        data = record.model_dump(mode="json", exclude={"body"} if metadata else None)
        if breadcrumbs:
            data["breadcrumbs"] = _dump(breadcrumbs)
        output(data, as_json=True)
        return

    click.echo(f"# {getattr(record, 'display_title', record.title)}")
    if breadcrumbs:
        click.echo(" > ".join(b.title for b in breadcrumbs))
    click.echo(f"Date: {record.date or '-'}")
    click.echo(f"Category: {record.category}")
    click.echo(f"Tags: {', '.join(record.tags) if record.tags else '-'}")
    click.echo(f"Reading time: {record.reading_time} min")
    if record.description:
        click.echo(f"\n{record.description}")
    if not metadata:
        click.echo("")
        click.echo(record.body.strip())


@cli.command()
@locale_option
@click.option("--order", type=click.Choice(["asc", "desc"]), default="desc", show_default=True)
@json_option
@click.pass_context
def versions(ctx: click.Context, locale: str, order: str, as_json: bool):
    """List release notes by semantic version.

    \b
    Examples:
      folio versions
      folio versions --order=asc --json
    """
    from .core import releases
    from .versions import classify_version_change, release_is_prerelease

    records = _run(ctx, releases, locale, order=order)
    rows = [
        {
            "version": r.version,
            "date": r.date,
            "title": r.display_title,
            "change": classify_version_change(r.version),
            "prerelease": release_is_prerelease(r),
            "breaking": r.breaking,
        }
        for r in records
    ]

    if as_json:
        output(rows, as_json=True)
        return
    if not rows:
        click.echo("No releases found.")
        return

    for row in rows:
        row["breaking"] = "yes" if row["breaking"] else ""
        row["prerelease"] = "yes" if row["prerelease"] else ""
    click.echo(format_table(rows, ["version", "date", "change", "breaking", "title"], {"title": 50}))


# ─────────────────────────────────────────────────────────────────────────────
# Search and Related Commands
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.argument("query")
@locale_option
@click.option("--kind", "kinds", type=click.Choice(CONTENT_KINDS), multiple=True, help="Limit to kinds (repeatable)")
@click.option("--tag", "--tags", "tags", help="Filter by tags (comma-separated, any match)")
@click.option("--limit", "-n", default=20, type=click.IntRange(min=1), help="Max results")
@json_option
@click.pass_context
def search(
    ctx: click.Context,
    query: str,
    locale: str,
    kinds: tuple[str, ...],
    tags: str | None,
    limit: int,
    as_json: bool,
):
    """Search titles, descriptions, tags, categories and bodies.

    Title matches are listed first, then newer entries.

    \b
    Examples:
      folio search "calendar"
      folio search beta --kind=release
      folio search 集中 --locale=ja
    """
    from .core import search as core_search

    tag_list = [t.strip() for t in tags.split(",") if t.strip()] if tags else []
    records = _run(ctx, core_search, query, locale, kinds=kinds or None, tags=tag_list, limit=limit)

    if as_json:
        output([_record_summary(r) for r in records], as_json=True)
        return
    if not records:
        click.echo("No results found.")
        return

    rows = [{"kind": r.kind, "slug": r.slug, "title": r.title, "date": r.date} for r in records]
    click.echo(format_table(rows, ["kind", "slug", "title", "date"], {"slug": 40, "title": 50}))


@cli.command()
@kind_argument
@click.argument("slug")
@locale_option
@click.option("--limit", "-n", default=3, type=click.IntRange(min=1), show_default=True, help="Max results")
@click.option(
    "--profile",
    type=click.Choice(["docs", "blog"]),
    help="Scoring weights (default: blog for blog posts, docs otherwise)",
)
@json_option
@click.pass_context
def related(ctx: click.Context, kind: str, slug: str, locale: str, limit: int, profile: str | None, as_json: bool):
    """Show entries related to one entry.

    \b
    Examples:
      folio related blog launch-announcement
      folio related doc features/tags --limit=5
    """
    from .core import related as core_related
    from .relevance import PROFILES

    scored = _run(
        ctx,
        core_related,
        kind,
        locale,
        slug,
        limit=limit,
        profile=PROFILES[profile] if profile else None,
    )

    if as_json:
        output([{"score": s.score, **_record_summary(s.record)} for s in scored], as_json=True)
        return
    if not scored:
        click.echo("No related entries found.")
        return

    rows = [{"score": s.score, "slug": s.record.slug, "title": s.record.title} for s in scored]
    click.echo(format_table(rows, ["score", "slug", "title"], {"slug": 40, "title": 50}))


# ─────────────────────────────────────────────────────────────────────────────
# Tag Commands
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@locale_option
@click.option("--min-count", default=1, type=click.IntRange(min=1), help="Minimum usage count")
@click.option("--limit", "-n", type=click.IntRange(min=1), help="Only the most used tags")
@json_option
@click.pass_context
def tags(ctx: click.Context, locale: str, min_count: int, limit: int | None, as_json: bool):
    """List tags with usage counts across all content.

    \b
    Examples:
      folio tags
      folio tags --min-count=3
      folio tags --limit=10 --json
    """
    from .core import tags as core_tags

    counts = _run(ctx, core_tags, locale, min_count=min_count, limit=limit)

    if as_json:
        output(_dump(counts), as_json=True)
        return
    if not counts:
        click.echo("No tags found.")
        return

    for t in counts:
        click.echo(f"  {t.tag}: {t.count} (blog {t.blog_count}, releases {t.release_count}, docs {t.doc_count})")


@cli.command()
@click.argument("name")
@locale_option
@json_option
@click.pass_context
def tag(ctx: click.Context, name: str, locale: str, as_json: bool):
    """Show everything carrying a tag (case-insensitive).

    \b
    Examples:
      folio tag productivity
      folio tag Calendar --json
    """
    from .core import tag as core_tag

    lookup, related_names = _run(ctx, core_tag, locale, name)

    if as_json:
        output({**lookup.model_dump(mode="json"), "related_tags": related_names}, as_json=True)
        return
    if lookup.total_count == 0:
        click.echo(f"No content tagged '{name}'.")
        return

    click.echo(f"{lookup.tag}: {lookup.total_count} entries")
    for label, items in (("Blog", lookup.blog), ("Releases", lookup.releases), ("Docs", lookup.docs)):
        if not items:
            continue
        click.echo(f"\n{label}:")
        for item in items:
            click.echo(f"  {item.slug}  {item.title}")
    if related_names:
        click.echo(f"\nRelated tags: {', '.join(related_names)}")


# ─────────────────────────────────────────────────────────────────────────────
# Build Step Commands
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@json_option
@click.pass_context
def lint(ctx: click.Context, as_json: bool):
    """Check front matter of every content file, drafts included.

    Exits with status 1 when a published file has errors. Problems in
    drafts are reported as warnings only.

    \b
    Examples:
      folio lint
      folio lint --json
    """
    from .lint import lint_content

    report = _run(ctx, lint_content)

    if as_json:
        data = report.model_dump(mode="json")
        data.update(error_count=report.error_count, warning_count=report.warning_count, ok=report.ok)
        output(data, as_json=True)
    else:
        for message in report.global_warnings:
            click.echo(f"  ! {message}")
        for result in report.files:
            marker = "x" if result.errors else "!"
            label = " [draft]" if result.draft else ""
            click.echo(f"  {marker} {result.path}{label}")
            for message in result.errors:
                click.echo(f"      error: {message}")
            for message in result.warnings:
                click.echo(f"      warning: {message}")

        if report.error_count == 0 and report.warning_count == 0:
            click.echo(f"All {report.files_checked} files passed validation")
        else:
            click.echo(f"Checked {report.files_checked} files")
            if report.error_count:
                click.echo(f"  {report.error_count} error(s)")
            if report.warning_count:
                click.echo(f"  {report.warning_count} warning(s)")

    if not report.ok:
        sys.exit(1)


@cli.group("search-index")
def search_index_group():
    """Build and query the static search index."""


@search_index_group.command("build")
@click.option("--output", "-o", "output_path", type=click.Path(path_type=Path), help="Output file")
@json_option
@click.pass_context
def search_index_build(ctx: click.Context, output_path: Path | None, as_json: bool):
    """Write the locale-keyed search index JSON.

    \b
    Examples:
      folio search-index build
      folio search-index build -o public/search-index.json
    """
    from .config import get_search_index_path
    from .search_index import build_search_index, write_search_index

    index = _run(ctx, build_search_index)
    path = output_path or _run(ctx, get_search_index_path)
    total = write_search_index(path, index)

    counts = {locale: len(entries) for locale, entries in index.items()}
    if as_json:
        output({"path": str(path), "total": total, "locales": counts}, as_json=True)
        return
    for locale, count in counts.items():
        click.echo(f"  {locale}: {count} entries")
    click.echo(f"Wrote {total} entries to {path}")


@search_index_group.command("query")
@click.argument("query")
@locale_option
@click.option("--index", "index_path", type=click.Path(path_type=Path), help="Search index file")
@click.option("--limit", "-n", default=50, type=click.IntRange(min=1), show_default=True)
@json_option
@click.pass_context
def search_index_query(
    ctx: click.Context,
    query: str,
    locale: str,
    index_path: Path | None,
    limit: int,
    as_json: bool,
):
    """Query a built search index the way the site's search box does.

    \b
    Examples:
      folio search-index query calendar
      folio search-index query 集中 --locale=ja --json
    """
    from .config import get_search_index_path
    from .errors import FolioError
    from .search_index import load_search_index, search_endpoint

    path = index_path or _run(ctx, get_search_index_path)
    if not path.exists():
        _handle_error(ctx, FolioError.index_unavailable(str(path)))

    index = load_search_index(path)
    response = _run(ctx, search_endpoint, query, locale, index, limit=limit)

    if as_json:
        output(response.model_dump(mode="json"), as_json=True)
        return
    if not response.results:
        click.echo("No results found.")
        return

    rows = [{"type": h.type, "title": h.title, "url": h.url, "path": " > ".join(h.breadcrumbs)} for h in response.results]
    click.echo(format_table(rows, ["type", "title", "url", "path"], {"title": 40, "url": 40}))


# ─────────────────────────────────────────────────────────────────────────────
# Entry Point
# ─────────────────────────────────────────────────────────────────────────────


def main():
    """Entry point for the folio CLI."""
    from ._logging import configure_logging

    configure_logging()
    cli()


if __name__ == "__main__":
    main()
