"""
Pydantic schemas for FastAPI request and response models.

This module defines the Pydantic models used for API request validation and
response serialization. These schemas ensure type safety and automatic API
documentation generation.

The schemas include:
- RecipeInput: Body for creating/updating a custom recipe
- RecipeListResponse: All custom recipes
- SearchResponse: Unified search/browse/random results with source status and warnings
- DeleteResponse: Outcome of an (idempotent) delete

# NOTE: SearchResponse mirrors the dictionary returned by recipe_hub.search.aggregated_search().
    The underlying recipe models are defined in recipe_hub.models (Recipe, SearchResult).
"""

from typing import Dict, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from recipe_hub.models import Recipe, RecipeDraft, SearchResult


class RecipeInput(BaseModel):
    """
    Input model for creating or updating a custom recipe.

    Validation of required fields (name, instructions, at least one non-blank
    ingredient) is done by the store so that the API and the core share one
    set of rules and one error type.
    """
    name: str = Field("", description="Recipe name (required)")
    category: str = Field("", description="Category, e.g. 'Dinner'")
    area: str = Field("", validation_alias=AliasChoices("area", "origin"), description="Cuisine/origin")
    instructions: str = Field("", description="Cooking instructions (required)")
    image: str = Field("", validation_alias=AliasChoices("image", "images"), description="Image URL")
    ingredients: List[str] = Field(default_factory=list, description="Ingredient rows; blank rows are dropped")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "name": "Spicy Tofu",
                "category": "Dinner",
                "area": "Chinese",
                "instructions": "Fry the tofu, add the chili.",
                "image": "",
                "ingredients": ["tofu", "chili", ""],
            }
        },
    )

    def to_draft(self) -> RecipeDraft:
        """Convert to the core draft snapshot."""
        return RecipeDraft(
            name=self.name,
            category=self.category,
            area=self.area,
            instructions=self.instructions,
            image=self.image,
            ingredients=list(self.ingredients),
        )


class RecipeListResponse(BaseModel):
    """All custom recipes in insertion order."""
    items: List[Recipe] = Field(default_factory=list, description="Custom recipes")
    count: int = Field(0, ge=0, description="Number of custom recipes")


class SearchResponse(BaseModel):
    """
    Response model for search, browse and random endpoints.

    Remote failures never produce an error status: they show up as
    sources_status["remote"] == "error" plus a warning.
    """
    query: str = Field("", description="Query as received")
    by: str = Field(..., description="Search mode: text, category, area, letter, browse or random")
    results: List[SearchResult] = Field(default_factory=list, description="Remote matches first, then local")
    sources_status: Dict[str, str] = Field(
        default_factory=dict,
        description="Per-source status: 'ok', 'error' or 'skipped'",
    )
    warnings: List[str] = Field(default_factory=list, description="Non-fatal warnings for the UI")


class DeleteResponse(BaseModel):
    """Outcome of deleting a custom recipe."""
    status: str = Field("ok", description="Always 'ok'; deleting an unknown id is not an error")
    recipe_id: str = Field(..., description="Requested recipe id")
    removed: bool = Field(..., description="False if the recipe was already gone")
