"""folio: content indexing, search and ranking for a localized Markdown/MDX site."""

__version__ = "0.4.0"
