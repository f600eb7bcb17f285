"""Content file parsing."""

from .markdown import ParseError, iter_content_files, parse_content_file, slug_from_path

__all__ = ["ParseError", "iter_content_files", "parse_content_file", "slug_from_path"]
