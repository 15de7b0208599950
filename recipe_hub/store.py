"""
Local Recipe Store for user-created recipes.

The store owns the durable list of custom recipes and provides create, read,
update and delete operations on top of a single durable slot.

Storage contract:
- The whole collection is read from the slot at the start of every operation.
  The slot may be shared with other processes, so no in-memory copy is ever
  treated as authoritative.
- Every mutation rewrites the whole collection (read-modify-write). The slot
  therefore always holds a complete, valid JSON array of recipes. This costs
  O(n) per mutation, which is fine for a personal recipe set.
- A missing or unparsable slot reads as an empty collection, never an error.

Within one process, mutations are serialized with a lock. Across processes
the last writer wins.
"""

import json
import logging
import os
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from .errors import NotFoundError, StorageCorrupt, ValidationError
from .models import Recipe, RecipeDraft, clean_ingredients
from .storage import FileSlotStorage, SlotStorage

logger = logging.getLogger(__name__)

# Slot name kept from the original browser front-end (localStorage key)
DEFAULT_SLOT = "customRecipes"
DEFAULT_DATA_DIR = "data"

DraftInput = Union[RecipeDraft, Dict[str, Any]]


def decode_collection(text: Optional[str]) -> List[Recipe]:
    """
    Parse the serialized collection held in a slot.

    Entries that are not valid recipes are skipped with a warning, and only the
    first entry for a given id is kept, so the result always satisfies the
    store invariants.

    Args:
        text: Raw slot value (None for an absent slot)

    Returns:
        List of Recipe objects in stored order

    Raises:
        StorageCorrupt: If the value is not JSON or not a JSON array
    """
    if text is None or not text.strip():
        return []

    try:
        data = json.loads(text)
    except ValueError as e:
        raise StorageCorrupt(f"Recipe slot does not contain valid JSON: {e}") from e

    if not isinstance(data, list):
        raise StorageCorrupt(f"Recipe slot must hold a JSON array, got {type(data).__name__}")

    recipes: List[Recipe] = []
    seen_ids = set()
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            logger.warning("Skipping non-object entry %d in recipe slot", index)
            continue
        try:
            recipe = Recipe.model_validate(entry)
        except PydanticValidationError as e:
            logger.warning("Skipping invalid recipe entry %d: %s", index, e.errors()[:1])
            continue
        if recipe.id in seen_ids:
            logger.warning("Skipping duplicate recipe id %r at entry %d", recipe.id, index)
            continue
        seen_ids.add(recipe.id)
        recipes.append(recipe)
    return recipes


def encode_collection(recipes: List[Recipe]) -> str:
    """Serialize the full collection using canonical field names only."""
    return json.dumps([r.model_dump() for r in recipes], indent=2, ensure_ascii=False)


def validate_draft(draft: DraftInput) -> Dict[str, Any]:
    """
    Validate a draft and return the cleaned recipe fields (without id).

    Required: a non-empty name, non-empty instructions and at least one
    non-blank ingredient. Text fields are trimmed and blank ingredient rows
    are dropped.

    Raises:
        ValidationError: If any required field is missing; `fields` lists
                         every offending field
    """
    if not isinstance(draft, RecipeDraft):
        try:
            draft = RecipeDraft.model_validate(draft)
        except PydanticValidationError as e:
            fields = [".".join(str(p) for p in err["loc"]) for err in e.errors()]
            raise ValidationError(f"Invalid recipe draft: {e}", fields=fields) from e

    fields: Dict[str, Any] = {
        "name": draft.name.strip(),
        "category": draft.category.strip(),
        "area": draft.area.strip(),
        "instructions": draft.instructions.strip(),
        "image": draft.image.strip(),
        "ingredients": clean_ingredients(draft.ingredients),
    }

    missing: List[str] = []
    if not fields["name"]:
        missing.append("name")
    if not fields["ingredients"]:
        missing.append("ingredients")
    if not fields["instructions"]:
        missing.append("instructions")

    if missing:
        raise ValidationError(
            "Missing required field(s): " + ", ".join(missing),
            fields=missing,
        )

    # The slot is written as UTF-8, so lone surrogates cannot be stored
    unencodable = [name for name, value in fields.items() if not _is_utf8_encodable(value)]
    if unencodable:
        raise ValidationError(
            "Field(s) contain characters that cannot be stored: " + ", ".join(unencodable),
            fields=unencodable,
        )
    return fields


def _is_utf8_encodable(value: Any) -> bool:
    texts = value if isinstance(value, list) else [value]
    try:
        for text in texts:
            text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _build_recipe(recipe_id: str, fields: Dict[str, Any]) -> Recipe:
    """Build a Recipe from validated draft fields, reporting model errors as ValidationError."""
    try:
        return Recipe(id=recipe_id, **fields)
    except PydanticValidationError as e:
        bad_fields = [str(err["loc"][0]) for err in e.errors() if err["loc"]]
        raise ValidationError(f"Invalid recipe: {e}", fields=bad_fields) from e


class RecipeStore:
    """
    CRUD store for custom recipes backed by one durable slot.

    Attributes:
        storage: Slot backend holding the serialized collection
        slot: Name of the slot (default: "customRecipes")
    """

    def __init__(
        self,
        storage: SlotStorage,
        slot: str = DEFAULT_SLOT,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.storage = storage
        self.slot = slot
        self._clock = clock
        self._lock = threading.RLock()

    def list(self) -> List[Recipe]:
        """
        Return every persisted recipe in insertion order.

        Never raises: an absent slot or a corrupt one reads as empty.
        """
        with self._lock:
            return self._load()

    def get(self, recipe_id: str) -> Recipe:
        """
        Return the recipe with the given id.

        Raises:
            NotFoundError: If no recipe has this id
        """
        for recipe in self.list():
            if recipe.id == recipe_id:
                return recipe
        raise NotFoundError(recipe_id)

    def create(self, draft: DraftInput) -> Recipe:
        """
        Validate a draft, assign a fresh id and append it to the collection.

        Args:
            draft: RecipeDraft (or dict with the same keys)

        Returns:
            The persisted Recipe

        Raises:
            ValidationError: If name, instructions or every ingredient is missing
        """
        fields = validate_draft(draft)
        with self._lock:
            recipes = self._load()
            recipe = _build_recipe(self._new_id({r.id for r in recipes}), fields)
            recipes.append(recipe)
            self._save(recipes)

        logger.info("Created custom recipe id=%s name=%r ingredients=%d",
                    recipe.id, recipe.name, len(recipe.ingredients))
        return recipe

    def update(self, recipe_id: str, draft: DraftInput) -> Recipe:
        """
        Replace the fields of an existing recipe, keeping its id and position.

        Raises:
            ValidationError: If the draft is missing required fields
            NotFoundError: If no recipe has this id
        """
        fields = validate_draft(draft)
        with self._lock:
            recipes = self._load()
            for index, existing in enumerate(recipes):
                if existing.id == recipe_id:
                    updated = _build_recipe(existing.id, fields)
                    recipes[index] = updated
                    self._save(recipes)
                    break
            else:
                raise NotFoundError(recipe_id)

        logger.info("Updated custom recipe id=%s name=%r", updated.id, updated.name)
        return updated

    def delete(self, recipe_id: str) -> bool:
        """
        Remove the recipe with the given id if present.

        Deleting an unknown id is a no-op, so calling this twice has the same
        effect as calling it once.

        Returns:
            True if a recipe was removed, False if the id was absent
        """
        with self._lock:
            recipes = self._load()
            remaining = [r for r in recipes if r.id != recipe_id]
            if len(remaining) == len(recipes):
                logger.debug("Delete of unknown recipe id=%s ignored", recipe_id)
                return False
            self._save(remaining)

        logger.info("Deleted custom recipe id=%s", recipe_id)
        return True

    def _load(self) -> List[Recipe]:
        try:
            return decode_collection(self.storage.read(self.slot))
        except StorageCorrupt as e:
            logger.warning("Recipe slot '%s' is unreadable, treating as empty: %s", self.slot, e)
            return []

    def _save(self, recipes: List[Recipe]) -> None:
        self.storage.write(self.slot, encode_collection(recipes))

    def _new_id(self, existing_ids: set) -> str:
        # Millisecond timestamp, bumped past any id already in use
        candidate = int(self._clock() * 1000)
        while str(candidate) in existing_ids:
            candidate += 1
        return str(candidate)


_DEFAULT_STORE: Optional[RecipeStore] = None


def get_default_store() -> RecipeStore:
    """
    Get the process-wide store backed by the configured data directory.

    Reads RECIPE_HUB_DATA_DIR (default: "data") and RECIPE_HUB_SLOT
    (default: "customRecipes") the first time it is called.
    """
    global _DEFAULT_STORE
    if _DEFAULT_STORE is None:
        data_dir = os.getenv("RECIPE_HUB_DATA_DIR", DEFAULT_DATA_DIR)
        slot = os.getenv("RECIPE_HUB_SLOT", DEFAULT_SLOT)
        _DEFAULT_STORE = RecipeStore(FileSlotStorage(data_dir), slot=slot)
        logger.info("Recipe store initialized (data_dir=%s slot=%s)", data_dir, slot)
    return _DEFAULT_STORE
