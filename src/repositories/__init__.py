"""Database repository helpers."""

from repositories.cache import (
    CacheStats,
    CacheTTL,
    cache_stats,
    delete_all_entries,
    delete_expired_entries,
    ensure_cache_schema,
    get_cached_payload,
    store_payload,
)

__all__ = [
    "CacheStats",
    "CacheTTL",
    "cache_stats",
    "delete_all_entries",
    "delete_expired_entries",
    "ensure_cache_schema",
    "get_cached_payload",
    "store_payload",
]
