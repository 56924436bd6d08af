"""Entity stores for Documents and Questions."""

from .base import DEFAULT_SORT, BaseEntityStore, SortSpec, parse_sort_spec, utc_now
from .in_memory import InMemoryEntityStore

__all__ = [
    "BaseEntityStore",
    "InMemoryEntityStore",
    "SortSpec",
    "parse_sort_spec",
    "utc_now",
    "DEFAULT_SORT",
]
