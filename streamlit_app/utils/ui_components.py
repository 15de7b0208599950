"""
UI Components Module.

Reusable Streamlit components for rendering recipe results and backend status.
All components take plain dictionaries as returned by the backend API.
"""

from typing import Any, Dict, List, Optional

import streamlit as st

from utils.state import open_detail

# Cards per row in result grids
GRID_COLUMNS = 3


def render_backend_status(status: Optional[dict]) -> None:
    """
    Display backend connection status as a status pill.

    Args:
        status: Dictionary from get_health_status() or None if backend unreachable.
    """
    if status and status.get("status") == "ok":
        st.success("🟢 Backend online")
        st.caption(f"{status.get('custom_recipe_count', 0)} custom recipes saved")
    else:
        st.error("🔴 Backend offline / unreachable")


def render_warnings(warnings: List[str]) -> None:
    """Show non-fatal warnings (e.g., TheMealDB unavailable) without blocking the page."""
    for warning in warnings:
        st.warning(warning)


def render_recipe_card(result: Dict[str, Any], key_prefix: str) -> None:
    """
    Render one recipe result as a card with a "View Recipe" button.

    Args:
        result: SearchResult dictionary (remote or local)
        key_prefix: Unique prefix for widget keys on this page
    """
    with st.container(border=True):
        if result.get("image"):
            st.image(result["image"], use_container_width=True)
        title = result.get("name", "Untitled")
        if result.get("is_custom"):
            title = f"{title} · ⭐ My recipe"
        st.markdown(f"**{title}**")
        st.caption(f"Category: {result.get('category') or 'N/A'}")
        st.caption(f"Origin: {result.get('area') or 'N/A'}")

        source = "local" if result.get("is_custom") else "remote"
        if st.button("View Recipe", key=f"{key_prefix}_{source}_{result['id']}", use_container_width=True):
            open_detail(result)


def render_recipe_grid(results: List[Dict[str, Any]], key_prefix: str) -> None:
    """Render results as a grid of cards, keeping the given order."""
    for start in range(0, len(results), GRID_COLUMNS):
        columns = st.columns(GRID_COLUMNS)
        for column, result in zip(columns, results[start:start + GRID_COLUMNS]):
            with column:
                render_recipe_card(result, key_prefix)
