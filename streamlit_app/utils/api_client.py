"""
Backend API Client Module.

This module is the **single source of truth** for all backend API communication.
All HTTP calls to the Recipe Hub API should go through functions in this module.

Key principles:
- Centralized error handling for network issues
- Consistent timeouts
- Graceful degradation when the backend is unavailable
- Never let exceptions bubble up to crash the Streamlit app

# NOTE: When adding new endpoints, follow this pattern:
    - Create a function that takes parameters needed for the endpoint
    - Use requests.get/post/put/delete with proper error handling
    - Return parsed JSON (dict) or None on error
    - Report errors via st.error or st.warning for user visibility
"""

import os
from typing import Any, Dict, List, Optional

import requests
import streamlit as st

# Search calls TheMealDB behind the backend, so allow more time than CRUD calls
SEARCH_TIMEOUT_SECONDS = 20
CRUD_TIMEOUT_SECONDS = 5


def get_backend_url() -> str:
    """
    Get the backend API base URL from environment variable or use default.

    Returns:
        Backend URL string with trailing slash removed. Defaults to http://localhost:8000.
    """
    url = os.getenv("BACKEND_URL", "http://localhost:8000")
    return url.rstrip("/")


def _session_headers(session_id: Optional[str]) -> Dict[str, str]:
    return {"X-Session-ID": session_id} if session_id else {}


def _error_detail(response: Optional[requests.Response]) -> str:
    """Extract a readable message from a FastAPI error response."""
    if response is None:
        return "unknown error"
    try:
        detail = response.json().get("detail")
    except ValueError:
        return response.text or str(response.status_code)
    if isinstance(detail, dict):
        return detail.get("message") or str(detail)
    if isinstance(detail, list):
        # FastAPI request validation errors
        return "; ".join(str(d.get("msg", d)) for d in detail)
    return str(detail)


def _report_error(action: str, error: requests.exceptions.RequestException) -> None:
    if isinstance(error, requests.exceptions.Timeout):
        st.error(f"Request timed out while {action}. The backend may be slow or unreachable.")
    elif isinstance(error, requests.exceptions.ConnectionError):
        st.error("Could not connect to backend. Please check that the Recipe Hub API is running.")
    elif isinstance(error, requests.exceptions.HTTPError):
        st.error(f"Error while {action}: {_error_detail(error.response)}")
    else:
        st.error(f"An error occurred while {action}: {error}")


@st.cache_data(ttl=30)  # Cache for 30 seconds to avoid hitting backend too frequently
def get_health_status() -> Optional[Dict[str, Any]]:
    """
    Check backend health status by calling /health endpoint.

    Returns:
        The /health payload if status == "ok", otherwise None.
    """
    try:
        response = requests.get(f"{get_backend_url()}/health", timeout=CRUD_TIMEOUT_SECONDS)
        response.raise_for_status()
        data = response.json()
    except (requests.exceptions.RequestException, ValueError):
        return None
    return data if data.get("status") == "ok" else None


def search_recipes(query: str, by: str = "text", session_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Unified search over TheMealDB and custom recipes.

    Args:
        query: Search text, category, area or letter
        by: "text", "category", "area" or "letter"
        session_id: Optional session id for analytics

    Returns:
        Dictionary with "results", "sources_status" and "warnings", or None on error.
    """
    try:
        response = requests.get(
            f"{get_backend_url()}/search",
            params={"q": query, "by": by},
            headers=_session_headers(session_id),
            timeout=SEARCH_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("searching recipes", e)
        return None


def browse_recipes() -> Optional[Dict[str, Any]]:
    """Unfiltered listing for the home page (same shape as search_recipes)."""
    try:
        response = requests.get(f"{get_backend_url()}/recipes/browse", timeout=SEARCH_TIMEOUT_SECONDS)
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("loading recipes", e)
        return None


def random_recipes(count: int = 6) -> Optional[Dict[str, Any]]:
    """A handful of random TheMealDB recipes (same shape as search_recipes)."""
    try:
        response = requests.get(
            f"{get_backend_url()}/recipes/random",
            params={"count": count},
            timeout=SEARCH_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("fetching random recipes", e)
        return None


def get_recipe(recipe_id: str, is_custom: bool, session_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Load one recipe for the detail page.

    Local and remote recipes live under different routes, so the caller must
    pass the provenance tag of the result it came from.
    """
    path = f"/custom-recipes/{recipe_id}" if is_custom else f"/recipes/{recipe_id}"
    try:
        response = requests.get(
            f"{get_backend_url()}{path}",
            headers=_session_headers(session_id),
            timeout=SEARCH_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("loading the recipe", e)
        return None


def list_custom_recipes() -> Optional[List[Dict[str, Any]]]:
    """
    List all custom recipes.

    Returns:
        List of recipe dictionaries, or None on error.
    """
    try:
        response = requests.get(f"{get_backend_url()}/custom-recipes", timeout=CRUD_TIMEOUT_SECONDS)
        response.raise_for_status()
        return response.json().get("items", [])
    except requests.exceptions.RequestException as e:
        _report_error("loading your recipes", e)
        return None


def create_custom_recipe(recipe: Dict[str, Any], session_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Create a custom recipe.

    Args:
        recipe: Dictionary with name, category, area, instructions, image, ingredients

    Returns:
        The created recipe (with its new id), or None if validation or the request failed.
    """
    try:
        response = requests.post(
            f"{get_backend_url()}/custom-recipes",
            json=recipe,
            headers=_session_headers(session_id),
            timeout=CRUD_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("saving the recipe", e)
        return None


def update_custom_recipe(
    recipe_id: str,
    recipe: Dict[str, Any],
    session_id: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Replace the fields of a custom recipe. Returns the updated recipe or None."""
    try:
        response = requests.put(
            f"{get_backend_url()}/custom-recipes/{recipe_id}",
            json=recipe,
            headers=_session_headers(session_id),
            timeout=CRUD_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("updating the recipe", e)
        return None


def delete_custom_recipe(recipe_id: str, session_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Delete a custom recipe.

    Returns:
        {"status": "ok", "recipe_id": ..., "removed": bool}, or None on error.
    """
    try:
        response = requests.delete(
            f"{get_backend_url()}/custom-recipes/{recipe_id}",
            headers=_session_headers(session_id),
            timeout=CRUD_TIMEOUT_SECONDS,
        )
        response.raise_for_status()
        return response.json()
    except requests.exceptions.RequestException as e:
        _report_error("deleting the recipe", e)
        return None
