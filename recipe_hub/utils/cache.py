"""
In-process TTL cache for remote recipe lookups.

Only the remote (TheMealDB) contribution of a search is cached. Local matches
are always recomputed from the durable slot, which other processes may have
rewritten since the last search.

The cache is process-local and in-memory, with automatic expiration based on TTL.
"""

import time
from typing import Any, Dict, Hashable, Optional, Tuple

# Cache storage: Key -> (timestamp, cached_value)
_SEARCH_CACHE: Dict[Hashable, Tuple[float, Any]] = {}

# TTL in seconds - TheMealDB content changes rarely, a minute keeps repeat searches cheap
SEARCH_CACHE_TTL_SECONDS = 60


def make_search_cache_key(by: str, term: str) -> Hashable:
    """
    Create a deterministic cache key for a remote lookup.

    Args:
        by: Search mode ("text", "category", "area", "letter", "browse")
        term: Query term sent to the remote API

    Returns:
        Hashable cache key (tuple)
    """
    term_norm = term.strip().lower() if term else ""
    return (by or "", term_norm)


def get_cached_search(key: Hashable) -> Optional[Any]:
    """
    Retrieve a cached remote result if it exists and hasn't expired.

    Args:
        key: Cache key from make_search_cache_key()

    Returns:
        Cached value, or None if not found or expired
    """
    now = time.time()
    entry = _SEARCH_CACHE.get(key)

    if not entry:
        return None

    timestamp, value = entry

    if now - timestamp > SEARCH_CACHE_TTL_SECONDS:
        _SEARCH_CACHE.pop(key, None)
        return None

    return value


def set_cached_search(key: Hashable, value: Any) -> None:
    """
    Store a remote result in the cache.

    Failed lookups must not be cached; callers only store successful results.
    """
    _SEARCH_CACHE[key] = (time.time(), value)


def clear_cache() -> None:
    """Clear all cached results (useful for testing)."""
    _SEARCH_CACHE.clear()


def get_cache_size() -> int:
    """Get the current number of cached entries (useful for monitoring)."""
    return len(_SEARCH_CACHE)
