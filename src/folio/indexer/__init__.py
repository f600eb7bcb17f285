"""Content index building and caching."""

from .builder import (
    build_index,
    check_kind_and_locale,
    collation_key,
    collect_records,
    parse_timestamp,
    sort_for_kind,
)
from .cache import CacheStats, IndexCache, get_index_cache, reset_index_cache

__all__ = [
    "CacheStats",
    "IndexCache",
    "build_index",
    "check_kind_and_locale",
    "collation_key",
    "collect_records",
    "get_index_cache",
    "parse_timestamp",
    "reset_index_cache",
    "sort_for_kind",
]
