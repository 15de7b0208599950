"""
Immutable UI state snapshots for search and the recipe form.

Instead of shared mutable "current results" / "current form" globals, the
front-end keeps one snapshot per concern and replaces it with the snapshot
returned by each operation.

Search requests are tagged with a sequence number. A response is applied only
if its sequence number is the latest one issued, so a slow, superseded search
can never overwrite the results of a newer one.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from .models import Recipe, RecipeDraft


@dataclass(frozen=True)
class SearchState:
    """
    Snapshot of the search page.

    Attributes:
        query: Last submitted query
        by: Search mode of the last submitted query
        seq: Sequence number of the latest issued request (0 = none yet)
        loading: True while the latest request is outstanding
        results: Result dictionaries of the latest applied response
        warnings: Warnings of the latest applied response
    """
    query: str = ""
    by: str = "text"
    seq: int = 0
    loading: bool = False
    results: Tuple[Dict[str, Any], ...] = field(default_factory=tuple)
    warnings: Tuple[str, ...] = field(default_factory=tuple)


def start_search(state: SearchState, query: str, by: str = "text") -> SearchState:
    """
    Issue a new search request.

    Returns a new snapshot with the next sequence number and loading=True.
    The caller sends the request tagged with `new_state.seq`.
    """
    return replace(state, query=query, by=by, seq=state.seq + 1, loading=True)


def is_current(state: SearchState, seq: int) -> bool:
    """Whether a response tagged `seq` belongs to the latest issued request."""
    return seq == state.seq


def apply_search_response(
    state: SearchState,
    seq: int,
    response: Optional[Dict[str, Any]],
) -> SearchState:
    """
    Apply a search response if it is not stale.

    Args:
        state: Current snapshot
        seq: Sequence number the request was issued with
        response: aggregated_search() response, or None if the request failed

    Returns:
        The updated snapshot, or `state` unchanged when `seq` is stale
    """
    if not is_current(state, seq):
        return state
    if response is None:
        return replace(
            state,
            loading=False,
            results=(),
            warnings=("Search failed. Please try again.",),
        )
    return replace(
        state,
        loading=False,
        results=tuple(response.get("results", [])),
        warnings=tuple(response.get("warnings", [])),
    )


# ---------------------------------------------------------------------------
# Recipe form helpers (RecipeDraft is frozen, every helper returns a new draft)
# ---------------------------------------------------------------------------

_DRAFT_TEXT_FIELDS = ("name", "category", "area", "instructions", "image")


def new_draft() -> RecipeDraft:
    """An empty form with a single blank ingredient row."""
    return RecipeDraft()


def with_field(draft: RecipeDraft, name: str, value: str) -> RecipeDraft:
    """
    Set one text field of the draft.

    Raises:
        ValueError: If `name` is not a text field of the draft
    """
    if name not in _DRAFT_TEXT_FIELDS:
        raise ValueError(f"Unknown draft field: {name!r}")
    return draft.model_copy(update={name: value or ""})


def add_ingredient(draft: RecipeDraft) -> RecipeDraft:
    """Append an empty ingredient row."""
    return draft.model_copy(update={"ingredients": [*draft.ingredients, ""]})


def set_ingredient(draft: RecipeDraft, index: int, value: str) -> RecipeDraft:
    """
    Replace the ingredient row at `index`.

    Raises:
        IndexError: If there is no row at `index`
    """
    if not 0 <= index < len(draft.ingredients):
        raise IndexError(f"No ingredient row at index {index}")
    rows = list(draft.ingredients)
    rows[index] = value or ""
    return draft.model_copy(update={"ingredients": rows})


def remove_ingredient(draft: RecipeDraft, index: int) -> RecipeDraft:
    """
    Remove the ingredient row at `index`.

    The last remaining row is never removed; out-of-range indexes are ignored.
    """
    if len(draft.ingredients) <= 1 or not 0 <= index < len(draft.ingredients):
        return draft
    rows = [row for i, row in enumerate(draft.ingredients) if i != index]
    return draft.model_copy(update={"ingredients": rows})


def draft_from_recipe(recipe: Recipe) -> RecipeDraft:
    """Pre-fill the form with an existing recipe for editing."""
    return RecipeDraft(
        name=recipe.name,
        category=recipe.category,
        area=recipe.area,
        instructions=recipe.instructions,
        image=recipe.image,
        ingredients=list(recipe.ingredients) or [""],
    )
