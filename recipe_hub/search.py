"""
Unified search aggregator over TheMealDB and the Local Recipe Store.

This module provides the search functionality that:
- Issues one remote lookup in the selected mode (text, category, area, letter)
- Independently filters the store's full collection with the same query
- Normalizes remote records into SearchResult views as soon as they arrive
- Concatenates remote matches first, then local matches tagged as custom

Failure policy: a remote failure never aborts the local filter. The remote
contribution is treated as empty, sources_status["remote"] is set to "error"
and a human-readable warning is returned alongside the results.

Search flow: Streamlit -> GET /search -> aggregated_search() -> connector + store -> SearchResult -> dict
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from recipe_hub.connectors.base import BaseConnector
from recipe_hub.connectors.mealdb_connector import MealDBConnector
from recipe_hub.errors import NotFoundError, RemoteUnavailable, ValidationError
from recipe_hub.models import Recipe, SearchResult, normalize_remote_recipe
from recipe_hub.store import RecipeStore, get_default_store
from recipe_hub.utils.cache import get_cached_search, make_search_cache_key, set_cached_search

logger = logging.getLogger(__name__)

SEARCH_MODES = ("text", "category", "area", "letter")

# Remote listing used when there is no query (same as the home page)
BROWSE_LETTER = "a"

DEFAULT_RANDOM_COUNT = 6
MAX_RANDOM_COUNT = 12

# Connector method per search mode
_REMOTE_METHODS = {
    "text": "search_by_name",
    "category": "filter_by_category",
    "area": "filter_by_area",
    "letter": "search_by_first_letter",
}


def _get_connector() -> BaseConnector:
    """Instantiate the remote connector, resolved at call time so tests can patch it."""
    return MealDBConnector()


def matches_text(recipe: Recipe, query: str) -> bool:
    """Case-insensitive substring match on name, category, area or any ingredient."""
    needle = query.strip().lower()
    haystack = [recipe.name, recipe.category, recipe.area, *recipe.ingredients]
    return any(needle in (value or "").lower() for value in haystack)


def matches_category(recipe: Recipe, category: str) -> bool:
    """Case-insensitive exact match on category."""
    return recipe.category.strip().lower() == category.strip().lower()


def matches_area(recipe: Recipe, area: str) -> bool:
    """Case-insensitive exact match on area."""
    return recipe.area.strip().lower() == area.strip().lower()


def matches_first_letter(recipe: Recipe, letter: str) -> bool:
    """Compare the lowercase first character of the name with the lowercase letter."""
    name = recipe.name.strip()
    return bool(name) and name[:1].lower() == letter.strip()[:1].lower()


_LOCAL_MATCHERS: Dict[str, Callable[[Recipe, str], bool]] = {
    "text": matches_text,
    "category": matches_category,
    "area": matches_area,
    "letter": matches_first_letter,
}


def _normalize_records(
    records: List[Dict[str, Any]],
    fallback_category: str = "",
    fallback_area: str = "",
) -> List[SearchResult]:
    views: List[SearchResult] = []
    for record in records:
        try:
            views.append(normalize_remote_recipe(record, fallback_category, fallback_area))
        except ValueError as e:
            # pydantic.ValidationError is a ValueError too
            logger.warning("Skipping malformed remote record: %s", e)
    return views


def _fetch_remote(connector: Optional[BaseConnector], by: str, term: str) -> List[SearchResult]:
    """
    Run one remote lookup and normalize its records, using the TTL cache.

    Raises:
        RemoteUnavailable: If the connector cannot be created or the call fails
    """
    key = make_search_cache_key(by, term)
    cached = get_cached_search(key)
    if cached is not None:
        logger.debug("Remote cache hit for by=%s term=%r", by, term)
        return [view.model_copy(deep=True) for view in cached]

    try:
        if connector is None:
            connector = _get_connector()
        records = getattr(connector, _REMOTE_METHODS[by])(term)
    except RemoteUnavailable:
        raise
    except Exception as e:
        # Anything else coming out of a connector is still a remote failure
        raise RemoteUnavailable(f"Remote lookup failed: {e}") from e

    views = _normalize_records(
        records or [],
        fallback_category=term if by == "category" else "",
        fallback_area=term if by == "area" else "",
    )
    set_cached_search(key, views)
    return views


def _remote_with_fallback(
    connector: Optional[BaseConnector],
    by: str,
    term: str,
    warnings: List[str],
) -> Tuple[List[SearchResult], str]:
    """Run a remote lookup, converting failure into ([], "error") plus a warning."""
    try:
        views = _fetch_remote(connector, by, term)
        logger.info("Remote %s lookup for %r returned %d recipes", by, term, len(views))
        return views, "ok"
    except RemoteUnavailable as e:
        logger.warning("Remote %s lookup for %r failed, using local recipes only: %s", by, term, e)
        warnings.append(f"Online recipes are unavailable right now ({e}). Showing your own recipes only.")
        return [], "error"


def _build_response(
    query: str,
    by: str,
    results: List[SearchResult],
    remote_status: str,
    warnings: List[str],
) -> Dict[str, Any]:
    return {
        "query": query,
        "by": by,
        "results": [r.model_dump(mode="json") for r in results],
        "sources_status": {"remote": remote_status, "local": "ok"},
        "warnings": warnings,
    }


def aggregated_search(
    query: str,
    by: str = "text",
    store: Optional[RecipeStore] = None,
    connector: Optional[BaseConnector] = None,
) -> Dict[str, Any]:
    """
    Search TheMealDB and the local store, merging results into one list.

    Args:
        query: Search text, category, area or letter depending on `by`
        by: Search mode - "text", "category", "area" or "letter" (default: "text")
        store: Local Recipe Store (default: the process-wide store)
        connector: Remote connector (default: a new MealDBConnector)

    Returns:
        Dictionary containing:
        - query: The query as received
        - by: The search mode
        - results: List of SearchResult dictionaries, remote matches first,
          then local matches (is_custom=True, source="local")
        - sources_status: {"remote": "ok" | "error" | "skipped", "local": "ok"}
        - warnings: List of non-fatal warning messages for the UI

        An empty or whitespace-only query performs no remote call and returns
        no results (remote status "skipped"); use browse_recipes() instead.

    Raises:
        ValidationError: If `by` is not a known search mode

    Examples:
        >>> response = aggregated_search("tofu", by="text")
        >>> [r["source"] for r in response["results"]]  # remote first, then local
        ['remote', 'remote', 'local']
    """
    by = (by or "text").strip().lower()
    if by not in SEARCH_MODES:
        raise ValidationError(
            f"Unknown search mode '{by}'. Valid modes: {', '.join(SEARCH_MODES)}",
            fields=["by"],
        )

    term = (query or "").strip()
    if by == "letter":
        term = term[:1]

    logger.info("Search request: query=%r by=%s", query, by)

    if not term:
        logger.debug("Empty query, skipping remote lookup")
        return _build_response(query, by, [], "skipped", [])

    warnings: List[str] = []
    remote_results, remote_status = _remote_with_fallback(connector, by, term, warnings)

    store = store or get_default_store()
    matcher = _LOCAL_MATCHERS[by]
    local_results = [SearchResult.from_local(r) for r in store.list() if matcher(r, term)]

    logger.info("Aggregated search response: remote=%d (%s) local=%d",
                len(remote_results), remote_status, len(local_results))

    return _build_response(query, by, remote_results + local_results, remote_status, warnings)


def search_by_text(query: str, store: Optional[RecipeStore] = None,
                   connector: Optional[BaseConnector] = None) -> Dict[str, Any]:
    """Free-text search: name, category, area or any ingredient."""
    return aggregated_search(query, "text", store=store, connector=connector)


def search_by_category(category: str, store: Optional[RecipeStore] = None,
                       connector: Optional[BaseConnector] = None) -> Dict[str, Any]:
    """Category filter (e.g., "Dessert")."""
    return aggregated_search(category, "category", store=store, connector=connector)


def search_by_area(area: str, store: Optional[RecipeStore] = None,
                   connector: Optional[BaseConnector] = None) -> Dict[str, Any]:
    """Area filter (e.g., "Italian")."""
    return aggregated_search(area, "area", store=store, connector=connector)


def search_by_first_letter(letter: str, store: Optional[RecipeStore] = None,
                           connector: Optional[BaseConnector] = None) -> Dict[str, Any]:
    """First-letter listing (e.g., "b")."""
    return aggregated_search(letter, "letter", store=store, connector=connector)


def browse_recipes(
    store: Optional[RecipeStore] = None,
    connector: Optional[BaseConnector] = None,
) -> Dict[str, Any]:
    """
    Unfiltered listing for the home page.

    Returns the remote recipes starting with "a" followed by every custom
    recipe, with the same response shape and failure policy as
    aggregated_search().
    """
    warnings: List[str] = []
    remote_results, remote_status = _remote_with_fallback(connector, "letter", BROWSE_LETTER, warnings)

    store = store or get_default_store()
    local_results = [SearchResult.from_local(r) for r in store.list()]

    return _build_response("", "browse", remote_results + local_results, remote_status, warnings)


def random_recipes(
    count: int = DEFAULT_RANDOM_COUNT,
    connector: Optional[BaseConnector] = None,
) -> Dict[str, Any]:
    """
    Fetch `count` random remote recipes.

    TheMealDB returns one random meal per request, so this makes `count`
    calls. Failed calls are skipped with a single warning and duplicate meals
    are dropped, so fewer than `count` results may come back.
    """
    count = max(1, min(int(count), MAX_RANDOM_COUNT))
    warnings: List[str] = []
    results: List[SearchResult] = []
    seen_ids = set()
    failures = 0

    try:
        if connector is None:
            connector = _get_connector()
    except Exception as e:
        logger.error("Failed to initialize remote connector: %s", e, exc_info=True)
        warnings.append("Online recipes are unavailable right now.")
        return _build_response("", "random", [], "error", warnings)

    for _ in range(count):
        try:
            records = connector.random()
        except Exception as e:
            failures += 1
            logger.warning("Random recipe request failed: %s", e)
            continue
        for view in _normalize_records(records or []):
            if view.id not in seen_ids:
                seen_ids.add(view.id)
                results.append(view)

    if failures:
        warnings.append(f"{failures} of {count} random recipe requests failed.")
    remote_status = "error" if failures == count else "ok"
    return _build_response("", "random", results, remote_status, warnings)


def get_recipe_detail(
    recipe_id: str,
    custom: bool = False,
    store: Optional[RecipeStore] = None,
    connector: Optional[BaseConnector] = None,
) -> SearchResult:
    """
    Load one recipe for the detail view, branching on provenance.

    Args:
        recipe_id: Local id (custom=True) or TheMealDB idMeal (custom=False)
        custom: Whether the id belongs to the local store

    Raises:
        NotFoundError: If the recipe does not exist in its source
        RemoteUnavailable: If TheMealDB cannot be reached (remote detail only)
    """
    if custom:
        store = store or get_default_store()
        return SearchResult.from_local(store.get(recipe_id))

    try:
        if connector is None:
            connector = _get_connector()
        record = connector.lookup(recipe_id)
    except RemoteUnavailable:
        raise
    except Exception as e:
        raise RemoteUnavailable(f"Remote lookup failed: {e}") from e

    if not record:
        raise NotFoundError(recipe_id)
    try:
        return normalize_remote_recipe(record)
    except ValueError as e:
        raise RemoteUnavailable(f"Malformed remote record for '{recipe_id}': {e}") from e
