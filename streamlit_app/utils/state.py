"""
Page State Management Module.

This module wraps Streamlit's session_state to hold the immutable snapshots
defined in recipe_hub.state:

- SearchState: the search page (query, mode, sequence number, results)
- RecipeDraft: the add/edit recipe form
- The recipe currently opened in the detail page (id + provenance tag)

Pages never mutate a snapshot in place; they compute a new one and store it
with the matching set_* function.

# NOTE: session_state lives for the current browser session only. Custom
    recipes themselves are persisted by the backend, not here.
"""

from typing import Any, Dict, Optional

import streamlit as st

from recipe_hub.models import Recipe, RecipeDraft
from recipe_hub.state import SearchState, draft_from_recipe, new_draft

SEARCH_STATE_KEY = "search_state"
DRAFT_KEY = "recipe_draft"
EDITING_ID_KEY = "editing_recipe_id"
DETAIL_KEY = "detail_recipe"
FORM_VERSION_KEY = "recipe_form_version"

DETAIL_PAGE = "pages/04_📖_Recipe_Detail.py"
FORM_PAGE = "pages/03_➕_Add_Recipe.py"


def get_search_state() -> SearchState:
    """Get the current search snapshot, creating an empty one on first use."""
    if SEARCH_STATE_KEY not in st.session_state:
        st.session_state[SEARCH_STATE_KEY] = SearchState()
    return st.session_state[SEARCH_STATE_KEY]


def set_search_state(state: SearchState) -> None:
    """Replace the search snapshot."""
    st.session_state[SEARCH_STATE_KEY] = state


def get_draft() -> RecipeDraft:
    """Get the current form snapshot, creating an empty one on first use."""
    if DRAFT_KEY not in st.session_state:
        st.session_state[DRAFT_KEY] = new_draft()
    return st.session_state[DRAFT_KEY]


def set_draft(draft: RecipeDraft) -> None:
    """Replace the form snapshot."""
    st.session_state[DRAFT_KEY] = draft


def get_form_version() -> int:
    """Counter bumped whenever the form is reloaded, used to reset widget keys."""
    return st.session_state.get(FORM_VERSION_KEY, 0)


def _bump_form_version() -> None:
    st.session_state[FORM_VERSION_KEY] = get_form_version() + 1


def get_editing_id() -> Optional[str]:
    """Id of the custom recipe being edited, or None when creating."""
    return st.session_state.get(EDITING_ID_KEY)


def start_editing(recipe: Dict[str, Any]) -> None:
    """Load a custom recipe into the form and open the form page."""
    st.session_state[EDITING_ID_KEY] = recipe["id"]
    set_draft(draft_from_recipe(Recipe.model_validate(recipe)))
    _bump_form_version()
    st.switch_page(FORM_PAGE)


def reset_form() -> None:
    """Back to an empty create form."""
    st.session_state.pop(EDITING_ID_KEY, None)
    set_draft(new_draft())
    _bump_form_version()


def open_detail(result: Dict[str, Any]) -> None:
    """
    Open the detail page for a search result.

    The provenance tag decides which backend route the detail page calls.
    """
    st.session_state[DETAIL_KEY] = {
        "id": result["id"],
        "is_custom": bool(result.get("is_custom")),
    }
    st.switch_page(DETAIL_PAGE)


def get_detail_target() -> Optional[Dict[str, Any]]:
    """The recipe selected for the detail page, also accepting ?id=&custom= query params."""
    params = st.query_params
    if "id" in params:
        return {"id": params["id"], "is_custom": params.get("custom", "0") in ("1", "true")}
    return st.session_state.get(DETAIL_KEY)
