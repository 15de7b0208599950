"""
FastAPI application for the Recipe Hub API.

This module defines the local JSON API used by the Streamlit front-end:
- GET /search: Unified search over TheMealDB and custom recipes
- GET /recipes/browse: Unfiltered listing for the home page
- GET /recipes/random: A handful of random TheMealDB recipes
- GET /recipes/{recipe_id}: TheMealDB recipe detail
- GET /custom-recipes: List custom recipes
- POST /custom-recipes: Create a custom recipe
- GET/PUT/DELETE /custom-recipes/{recipe_id}: Read, update, delete a custom recipe

Custom recipes live in one local slot file (see recipe_hub.storage); the API is
meant to run next to the front-end on the user's machine. The optional
X-Session-ID header is only used to tag analytics events.

Run the API with:
    uvicorn api.main:app --reload

Access API documentation at:
    http://localhost:8000/docs (Swagger UI)
    http://localhost:8000/redoc (ReDoc)
"""

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import logging
import time
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Query, status

from api.config import get_config_summary
from api.schemas import DeleteResponse, RecipeInput, RecipeListResponse, SearchResponse
from recipe_hub.connectors.base import BaseConnector
from recipe_hub.connectors.mealdb_connector import MealDBConnector
from recipe_hub.errors import NotFoundError, RemoteUnavailable, ValidationError
from recipe_hub.events import (
    log_recipe_created,
    log_recipe_deleted,
    log_recipe_updated,
    log_recipe_viewed,
    log_search_performed,
)
from recipe_hub.models import Recipe, SearchResult
from recipe_hub.search import (
    DEFAULT_RANDOM_COUNT,
    MAX_RANDOM_COUNT,
    SEARCH_MODES,
    aggregated_search,
    browse_recipes,
    get_recipe_detail,
    random_recipes,
)
from recipe_hub.store import RecipeStore, get_default_store

logger = logging.getLogger(__name__)

API_NAME = "Recipe Hub API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "Local API for browsing TheMealDB recipes and managing your own custom recipes"

# Track app start time for uptime calculation
_APP_START_TIME = time.time()

app = FastAPI(
    title=API_NAME,
    description=API_DESCRIPTION,
    version=API_VERSION,
    openapi_tags=[
        {
            "name": "search",
            "description": "Search TheMealDB and your custom recipes in one list.",
        },
        {
            "name": "recipes",
            "description": "Browse, random picks and details of TheMealDB recipes.",
        },
        {
            "name": "custom-recipes",
            "description": "Create, read, update and delete your own recipes.",
        },
        {
            "name": "health",
            "description": "Health check and monitoring endpoints.",
        },
    ],
)


def get_store() -> RecipeStore:
    """Dependency returning the Local Recipe Store (overridable in tests)."""
    return get_default_store()


def get_connector() -> Optional[BaseConnector]:
    """
    Dependency returning the TheMealDB connector (overridable in tests).

    Returns None when the connector is misconfigured (e.g., a bad
    MEALDB_TIMEOUT_SECONDS). Search, browse and random then report the remote
    source as "error" with a warning, and remote detail answers 502.
    """
    try:
        return MealDBConnector()
    except RuntimeError as e:
        logger.error("TheMealDB connector is misconfigured: %s", e)
        return None


def _validation_error(e: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={"message": str(e), "fields": e.fields},
    )


def _not_found(e: NotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@app.get(
    "/search",
    response_model=SearchResponse,
    tags=["search"],
    summary="Search TheMealDB and custom recipes",
    description="Runs one TheMealDB lookup in the selected mode and filters your custom recipes with the "
                "same query. Remote results come first, then custom recipes (is_custom=true). "
                "If TheMealDB is unavailable, custom matches are still returned with a warning.",
)
def search(
    q: str = Query("", description="Search text, category, area or letter depending on 'by'"),
    by: str = Query("text", description="Search mode: 'text', 'category', 'area' or 'letter'"),
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID"),
    store: RecipeStore = Depends(get_store),
    connector: Optional[BaseConnector] = Depends(get_connector),
) -> Dict[str, Any]:
    """
    Unified search.

    Args:
        q: Query string (empty query returns no results without calling TheMealDB)
        by: Search mode

    Returns:
        SearchResponse with results, sources_status and warnings

    Raises:
        HTTPException 422: If `by` is not a valid search mode

    Example:
        ```bash
        GET /search?q=tofu&by=text
        ```
    """
    try:
        response = aggregated_search(q, by, store=store, connector=connector)
    except ValidationError as e:
        raise _validation_error(e) from e

    log_search_performed(
        x_session_id,
        query=q,
        by=response["by"],
        result_count=len(response["results"]),
        remote_status=response["sources_status"]["remote"],
    )
    return response


@app.get(
    "/recipes/browse",
    response_model=SearchResponse,
    tags=["recipes"],
    summary="Unfiltered listing for the home page",
)
def browse(
    store: RecipeStore = Depends(get_store),
    connector: Optional[BaseConnector] = Depends(get_connector),
) -> Dict[str, Any]:
    """TheMealDB recipes starting with 'a' followed by every custom recipe."""
    return browse_recipes(store=store, connector=connector)


@app.get(
    "/recipes/random",
    response_model=SearchResponse,
    tags=["recipes"],
    summary="Random TheMealDB recipes",
)
def random(
    count: int = Query(DEFAULT_RANDOM_COUNT, ge=1, le=MAX_RANDOM_COUNT, description="Number of random recipes"),
    connector: Optional[BaseConnector] = Depends(get_connector),
) -> Dict[str, Any]:
    """Fetch up to `count` random recipes (duplicates and failed calls are dropped)."""
    return random_recipes(count, connector=connector)


@app.get(
    "/recipes/{recipe_id}",
    response_model=SearchResult,
    tags=["recipes"],
    summary="TheMealDB recipe detail",
)
def get_remote_recipe(
    recipe_id: str,
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID"),
    connector: Optional[BaseConnector] = Depends(get_connector),
) -> SearchResult:
    """
    Get the full TheMealDB record for one recipe.

    Raises:
        HTTPException 404: If TheMealDB does not know the id
        HTTPException 502: If TheMealDB cannot be reached
    """
    try:
        result = get_recipe_detail(recipe_id, custom=False, connector=connector)
    except NotFoundError as e:
        raise _not_found(e) from e
    except RemoteUnavailable as e:
        logger.warning("Remote detail for %s unavailable: %s", recipe_id, e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"TheMealDB is unavailable: {e}",
        ) from e

    log_recipe_viewed(x_session_id, recipe_id, is_custom=False)
    return result


@app.get(
    "/custom-recipes",
    response_model=RecipeListResponse,
    tags=["custom-recipes"],
    summary="List custom recipes",
)
def list_custom_recipes(store: RecipeStore = Depends(get_store)) -> RecipeListResponse:
    """All custom recipes in insertion order. A missing or corrupt slot lists as empty."""
    recipes = store.list()
    return RecipeListResponse(items=recipes, count=len(recipes))


@app.post(
    "/custom-recipes",
    response_model=Recipe,
    status_code=status.HTTP_201_CREATED,
    tags=["custom-recipes"],
    summary="Create a custom recipe",
)
def create_custom_recipe(
    body: RecipeInput,
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID"),
    store: RecipeStore = Depends(get_store),
) -> Recipe:
    """
    Create a custom recipe. Blank ingredient rows are dropped.

    Raises:
        HTTPException 422: If name, instructions or every ingredient is missing

    Example:
        ```bash
        POST /custom-recipes
        Body: {"name": "Spicy Tofu", "instructions": "...", "ingredients": ["tofu", "chili"]}
        ```
    """
    try:
        recipe = store.create(body.to_draft())
    except ValidationError as e:
        raise _validation_error(e) from e

    log_recipe_created(x_session_id, recipe.id, len(recipe.ingredients))
    return recipe


@app.get(
    "/custom-recipes/{recipe_id}",
    response_model=SearchResult,
    tags=["custom-recipes"],
    summary="Custom recipe detail",
)
def get_custom_recipe(
    recipe_id: str,
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID"),
    store: RecipeStore = Depends(get_store),
) -> SearchResult:
    """
    Get one custom recipe as a detail view.

    Raises:
        HTTPException 404: If the recipe does not exist
    """
    try:
        result = get_recipe_detail(recipe_id, custom=True, store=store)
    except NotFoundError as e:
        raise _not_found(e) from e

    log_recipe_viewed(x_session_id, recipe_id, is_custom=True)
    return result


@app.put(
    "/custom-recipes/{recipe_id}",
    response_model=Recipe,
    tags=["custom-recipes"],
    summary="Update a custom recipe",
)
def update_custom_recipe(
    recipe_id: str,
    body: RecipeInput,
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID"),
    store: RecipeStore = Depends(get_store),
) -> Recipe:
    """
    Replace the fields of a custom recipe; its id never changes.

    Raises:
        HTTPException 404: If the recipe does not exist
        HTTPException 422: If required fields are missing
    """
    try:
        recipe = store.update(recipe_id, body.to_draft())
    except ValidationError as e:
        raise _validation_error(e) from e
    except NotFoundError as e:
        raise _not_found(e) from e

    log_recipe_updated(x_session_id, recipe.id)
    return recipe


@app.delete(
    "/custom-recipes/{recipe_id}",
    response_model=DeleteResponse,
    tags=["custom-recipes"],
    summary="Delete a custom recipe",
)
def delete_custom_recipe(
    recipe_id: str,
    x_session_id: Optional[str] = Header(None, alias="X-Session-ID"),
    store: RecipeStore = Depends(get_store),
) -> DeleteResponse:
    """Delete a custom recipe. Deleting an unknown id returns 200 with removed=false."""
    removed = store.delete(recipe_id)
    log_recipe_deleted(x_session_id, recipe_id, removed)
    return DeleteResponse(recipe_id=recipe_id, removed=removed)


@app.get("/health", tags=["health"])
def health(store: RecipeStore = Depends(get_store)) -> Dict[str, Any]:
    """
    Health check endpoint for monitoring and status checks.

    Returns:
        Dictionary with status, API metadata, uptime, configuration summary
        and the number of custom recipes. Always returns 200 OK if the
        endpoint is reachable.
    """
    uptime_seconds = int(time.time() - _APP_START_TIME)

    return {
        "status": "ok",
        "name": API_NAME,
        "version": API_VERSION,
        "description": API_DESCRIPTION,
        "uptime_seconds": uptime_seconds,
        "search_modes": list(SEARCH_MODES),
        "custom_recipe_count": len(store.list()),
        "config": get_config_summary(),
    }


@app.get("/")
def root() -> Dict[str, Any]:
    """
    Root endpoint providing API information.

    Returns:
        Dictionary with API name and version
    """
    return {
        "name": API_NAME,
        "version": API_VERSION,
        "description": API_DESCRIPTION,
        "docs": "/docs",
    }
