"""
Recipe models for the Recipe Hub.

This module defines the canonical recipe schemas used throughout the core:

- RecipeDraft: immutable form snapshot submitted by the user (no id yet)
- Recipe: a custom recipe as persisted in the durable slot
- SearchResult: display-ready view of either a local Recipe or a remote
  TheMealDB record, tagged with its provenance

# NOTE: `area` is the canonical field name for a recipe's origin. Older stored
    records used `origin` (and `images` for the image URL); both legacy keys are
    accepted on input and never written back.

TheMealDB encodes ingredients positionally (strIngredient1..20 / strMeasure1..20).
SearchResult.from_remote() flattens that encoding into the ordered ingredient
list as soon as a record is received, so nothing downstream ever sees it.
"""

from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# TheMealDB exposes at most 20 ingredient/measure pairs per meal
MAX_REMOTE_INGREDIENTS = 20

SOURCE_REMOTE = "remote"
SOURCE_LOCAL = "local"

REMOTE_DETAIL_PREFIX = "/recipe"
LOCAL_DETAIL_PREFIX = "/custom-recipe"


def _none_to_empty(value: Any) -> Any:
    return "" if value is None else value


def clean_ingredients(ingredients: Optional[List[Any]]) -> List[str]:
    """
    Drop blank ingredient entries and trim the rest, preserving order.

    Examples:
        >>> clean_ingredients(["  ", "flour", ""])
        ['flour']
    """
    if isinstance(ingredients, str):
        ingredients = [ingredients]
    cleaned: List[str] = []
    for ingredient in ingredients or []:
        if ingredient is None:
            continue
        text = str(ingredient).strip()
        if text:
            cleaned.append(text)
    return cleaned


class RecipeDraft(BaseModel):
    """
    Form-state snapshot for creating or editing a custom recipe.

    Drafts are frozen: form helpers in recipe_hub.state return new drafts
    instead of mutating this one. A fresh draft starts with one empty
    ingredient row, like the add-recipe form.
    """
    name: str = Field("", description="Recipe name (required, non-empty after trimming)")
    category: str = Field("", description="Category, e.g. 'Dinner' or 'Dessert'")
    area: str = Field(
        "",
        validation_alias=AliasChoices("area", "origin"),
        description="Cuisine/origin, e.g. 'Italian' (legacy key: origin)",
    )
    instructions: str = Field("", description="Cooking instructions (required)")
    image: str = Field(
        "",
        validation_alias=AliasChoices("image", "images"),
        description="Image URL (legacy key: images)",
    )
    ingredients: List[str] = Field(
        default_factory=lambda: [""],
        description="Ingredient rows as typed, blank rows included",
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @field_validator("name", "category", "area", "instructions", "image", mode="before")
    @classmethod
    def _text_fields(cls, value: Any) -> Any:
        return _none_to_empty(value)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _ingredient_rows(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return ["" if item is None else str(item) for item in value]


class Recipe(BaseModel):
    """
    A custom recipe owned by the local store.

    Every persisted Recipe has a non-empty id, a non-empty name and an
    ingredient list without blank entries. Legacy keys are normalized on load.
    """
    id: str = Field(..., min_length=1, description="Store-assigned identifier (immutable)")
    name: str = Field(..., min_length=1, description="Recipe name")
    category: str = Field("", description="Category")
    area: str = Field("", validation_alias=AliasChoices("area", "origin"), description="Cuisine/origin")
    instructions: str = Field("", description="Cooking instructions")
    image: str = Field("", validation_alias=AliasChoices("image", "images"), description="Image URL")
    ingredients: List[str] = Field(default_factory=list, description="Ordered, non-blank ingredients")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": "1718035200000",
                "name": "Spicy Tofu",
                "category": "Dinner",
                "area": "Chinese",
                "instructions": "Fry the tofu, add the chili.",
                "image": "",
                "ingredients": ["tofu", "chili"],
            }
        },
    )

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value: Any) -> Any:
        # Ids written by older front-ends may be numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(int(value))
        return value

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("category", "area", "instructions", "image", mode="before")
    @classmethod
    def _text_fields(cls, value: Any) -> Any:
        return _none_to_empty(value)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _drop_blank_ingredients(cls, value: Any) -> Any:
        return clean_ingredients(value)


class SearchResult(BaseModel):
    """
    Unified, display-ready view of a recipe from either source.

    Callers must branch on is_custom (or use detail_path) before building a
    detail link: local and remote ids live in different route namespaces.
    """
    id: str = Field(..., description="Recipe identifier within its source")
    name: str = Field(..., description="Recipe name")
    category: str = Field("", description="Category")
    area: str = Field("", description="Cuisine/origin")
    instructions: str = Field("", description="Cooking instructions (empty for partial remote records)")
    image: str = Field("", description="Image URL")
    ingredients: List[str] = Field(default_factory=list, description="Ordered ingredients, measure first")
    source: str = Field(..., description="'remote' (TheMealDB) or 'local' (custom recipe)")
    is_custom: bool = Field(False, description="True for recipes owned by the local store")
    detail_path: str = Field(..., description="Route of the detail view for this recipe")
    raw: Optional[Dict[str, Any]] = Field(None, description="Untouched remote record (None for local recipes)")

    @classmethod
    def from_local(cls, recipe: Recipe) -> "SearchResult":
        """Build a local-tagged view of a custom recipe."""
        return cls(
            id=recipe.id,
            name=recipe.name,
            category=recipe.category,
            area=recipe.area,
            instructions=recipe.instructions,
            image=recipe.image,
            ingredients=list(recipe.ingredients),
            source=SOURCE_LOCAL,
            is_custom=True,
            detail_path=f"{LOCAL_DETAIL_PREFIX}/{recipe.id}",
        )

    @classmethod
    def from_remote(
        cls,
        record: Dict[str, Any],
        fallback_category: str = "",
        fallback_area: str = "",
    ) -> "SearchResult":
        """
        Build a remote-tagged view of a TheMealDB record.

        The filter endpoints only return idMeal/strMeal/strMealThumb, so the
        category or area used for filtering can be supplied as a fallback.
        The record itself is never modified; a copy is kept in `raw`.

        Raises:
            ValueError: If the record has no idMeal or strMeal
        """
        meal_id = str(record.get("idMeal") or "").strip()
        name = str(record.get("strMeal") or "").strip()
        if not meal_id or not name:
            raise ValueError(f"Remote record is missing idMeal/strMeal: {str(record)[:200]}")

        return cls(
            id=meal_id,
            name=name,
            category=(record.get("strCategory") or fallback_category or "").strip(),
            area=(record.get("strArea") or fallback_area or "").strip(),
            instructions=record.get("strInstructions") or "",
            image=record.get("strMealThumb") or "",
            ingredients=extract_remote_ingredients(record),
            source=SOURCE_REMOTE,
            is_custom=False,
            detail_path=f"{REMOTE_DETAIL_PREFIX}/{meal_id}",
            raw=dict(record),
        )


def extract_remote_ingredients(record: Dict[str, Any]) -> List[str]:
    """
    Flatten TheMealDB's positional ingredient fields into an ordered list.

    Each entry is "<measure> <ingredient>" when a measure is present, otherwise
    just the ingredient. Blank slots are skipped.

    Examples:
        >>> extract_remote_ingredients({"strIngredient1": "Flour", "strMeasure1": "2 cups",
        ...                             "strIngredient2": " ", "strIngredient3": "Salt"})
        ['2 cups Flour', 'Salt']
    """
    ingredients: List[str] = []
    for i in range(1, MAX_REMOTE_INGREDIENTS + 1):
        ingredient = (record.get(f"strIngredient{i}") or "").strip()
        if not ingredient:
            continue
        measure = (record.get(f"strMeasure{i}") or "").strip()
        ingredients.append(f"{measure} {ingredient}" if measure else ingredient)
    return ingredients


def normalize_remote_recipe(
    record: Dict[str, Any],
    fallback_category: str = "",
    fallback_area: str = "",
) -> SearchResult:
    """
    Convert a TheMealDB record into a remote-tagged SearchResult.

    Raises:
        ValueError: If the record has no idMeal or strMeal
    """
    return SearchResult.from_remote(record, fallback_category, fallback_area)
