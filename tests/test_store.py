"""
Tests for the Local Recipe Store.

These tests verify that:
- create/get/list/update/delete behave as a CRUD store over one slot
- Blank ingredient rows are dropped and required fields are enforced
- Every mutation leaves a complete, parseable collection in the slot
- A missing or corrupt slot reads as an empty collection
"""

import json
from itertools import count

import pytest

from recipe_hub.errors import NotFoundError, ValidationError
from recipe_hub.models import Recipe, RecipeDraft
from recipe_hub.storage import FileSlotStorage, MemorySlotStorage
from recipe_hub.store import (
    DEFAULT_SLOT,
    RecipeStore,
    decode_collection,
    encode_collection,
    validate_draft,
)


def make_store(initial=None):
    """Store over in-memory storage with a deterministic, increasing clock."""
    ticks = count(1_700_000_000)
    storage = MemorySlotStorage(initial)
    return RecipeStore(storage, clock=lambda: next(ticks)), storage


def draft(**overrides):
    fields = {
        "name": "Pancakes",
        "category": "Breakfast",
        "area": "American",
        "instructions": "Mix and fry.",
        "image": "",
        "ingredients": ["flour", "milk", "eggs"],
    }
    fields.update(overrides)
    return fields


class TestCreate:
    """Test creating custom recipes."""

    def test_create_assigns_id_and_persists(self):
        """Test that a created recipe gets a non-empty id and is listed exactly once."""
        store, _ = make_store()

        recipe = store.create(draft())

        assert recipe.id
        assert recipe.name == "Pancakes"
        assert [r.id for r in store.list()] == [recipe.id]

    def test_listed_recipe_equals_draft_fields(self):
        """Test that the listed recipe carries exactly the submitted fields."""
        store, _ = make_store()

        recipe = store.create(draft())

        assert store.list()[0].model_dump(exclude={"id"}) == draft()
        assert store.list()[0] == recipe

    def test_blank_ingredients_are_dropped(self):
        """Test that blank ingredient rows are not persisted."""
        store, _ = make_store()

        recipe = store.create(draft(ingredients=["  ", "flour", ""]))

        assert recipe.ingredients == ["flour"]
        assert store.get(recipe.id).ingredients == ["flour"]

    def test_ingredients_are_trimmed_and_keep_order(self):
        """Test that ingredient order is preserved after trimming."""
        store, _ = make_store()

        recipe = store.create(draft(ingredients=[" 2 eggs ", "", "1 cup milk"]))

        assert recipe.ingredients == ["2 eggs", "1 cup milk"]

    def test_accepts_recipe_draft_snapshot(self):
        """Test that a RecipeDraft can be passed instead of a dict."""
        store, _ = make_store()

        recipe = store.create(RecipeDraft(**draft()))

        assert recipe.name == "Pancakes"

    def test_ids_are_unique(self):
        """Test that several creates produce distinct ids."""
        storage = MemorySlotStorage()
        store = RecipeStore(storage, clock=lambda: 1_700_000_000.0)

        ids = [store.create(draft(name=f"Recipe {i}")).id for i in range(3)]

        assert len(set(ids)) == 3

    def test_insertion_order_is_kept(self):
        """Test that list() returns recipes in creation order."""
        store, _ = make_store()

        first = store.create(draft(name="First"))
        second = store.create(draft(name="Second"))

        assert [r.id for r in store.list()] == [first.id, second.id]

    @pytest.mark.parametrize(
        "overrides, missing",
        [
            ({"name": "   "}, ["name"]),
            ({"ingredients": ["", "  "]}, ["ingredients"]),
            ({"instructions": ""}, ["instructions"]),
            ({"name": "", "ingredients": []}, ["name", "ingredients"]),
        ],
    )
    def test_missing_required_fields_raise(self, overrides, missing):
        """Test that missing required fields raise ValidationError and persist nothing."""
        store, storage = make_store()

        with pytest.raises(ValidationError) as exc_info:
            store.create(draft(**overrides))

        assert exc_info.value.fields == missing
        assert storage.read(DEFAULT_SLOT) is None
        assert store.list() == []

    def test_legacy_keys_are_accepted(self):
        """Test that 'origin' and 'images' are read as area and image."""
        store, _ = make_store()

        recipe = store.create({
            "name": "Borscht",
            "origin": "Ukrainian",
            "images": "http://img/borscht.jpg",
            "instructions": "Boil.",
            "ingredients": ["beet"],
        })

        assert recipe.area == "Ukrainian"
        assert recipe.image == "http://img/borscht.jpg"


class TestGetAndList:
    """Test reading custom recipes."""

    def test_get_unknown_id_raises(self):
        """Test that get() raises NotFoundError for an unknown id."""
        store, _ = make_store()

        with pytest.raises(NotFoundError) as exc_info:
            store.get("missing")

        assert exc_info.value.recipe_id == "missing"

    def test_absent_slot_lists_empty(self):
        """Test that a never-written slot reads as an empty collection."""
        store, _ = make_store()
        assert store.list() == []

    def test_corrupt_slot_lists_empty(self):
        """Test that unparsable slot contents read as an empty collection."""
        store, _ = make_store({DEFAULT_SLOT: "{not json"})
        assert store.list() == []

    def test_non_array_slot_lists_empty(self):
        """Test that a JSON object instead of an array reads as empty."""
        store, _ = make_store({DEFAULT_SLOT: json.dumps({"id": "1"})})
        assert store.list() == []

    def test_create_after_corrupt_slot_rewrites_valid_collection(self):
        """Test that writing over a corrupt slot leaves a valid collection."""
        store, storage = make_store({DEFAULT_SLOT: "garbage"})

        recipe = store.create(draft())

        data = json.loads(storage.read(DEFAULT_SLOT))
        assert [entry["id"] for entry in data] == [recipe.id]


class TestUpdate:
    """Test updating custom recipes."""

    def test_update_replaces_fields_and_keeps_id(self):
        """Test that update keeps the id and position but replaces fields."""
        store, _ = make_store()
        first = store.create(draft(name="First"))
        second = store.create(draft(name="Second"))

        updated = store.update(first.id, draft(name="First v2", ingredients=["rice", ""]))

        assert updated.id == first.id
        assert updated.name == "First v2"
        assert updated.ingredients == ["rice"]
        assert [r.id for r in store.list()] == [first.id, second.id]
        assert store.get(first.id).name == "First v2"

    def test_update_unknown_id_raises_and_writes_nothing(self):
        """Test that updating an unknown id raises NotFoundError."""
        store, storage = make_store()
        store.create(draft())
        before = storage.read(DEFAULT_SLOT)

        with pytest.raises(NotFoundError):
            store.update("missing", draft())

        assert storage.read(DEFAULT_SLOT) == before

    def test_update_validates_draft(self):
        """Test that update enforces required fields."""
        store, _ = make_store()
        recipe = store.create(draft())

        with pytest.raises(ValidationError):
            store.update(recipe.id, draft(instructions="  "))

        assert store.get(recipe.id).instructions == "Mix and fry."


class TestDelete:
    """Test deleting custom recipes."""

    def test_delete_removes_recipe(self):
        """Test that a deleted recipe is gone from list() and get()."""
        store, _ = make_store()
        keep = store.create(draft(name="Keep"))
        gone = store.create(draft(name="Gone"))

        assert store.delete(gone.id) is True

        assert [r.id for r in store.list()] == [keep.id]
        with pytest.raises(NotFoundError):
            store.get(gone.id)

    def test_delete_is_idempotent(self):
        """Test that deleting twice has the same effect as deleting once."""
        store, storage = make_store()
        recipe = store.create(draft())

        assert store.delete(recipe.id) is True
        after_first = storage.read(DEFAULT_SLOT)
        assert store.delete(recipe.id) is False

        assert storage.read(DEFAULT_SLOT) == after_first
        assert store.list() == []

    def test_delete_unknown_id_does_not_write(self):
        """Test that deleting an unknown id leaves an absent slot absent."""
        store, storage = make_store()

        assert store.delete("missing") is False
        assert storage.read(DEFAULT_SLOT) is None


class TestSerialization:
    """Test decoding and encoding the slot contents."""

    def test_round_trip_preserves_recipes(self):
        """Test that encode/decode returns equal recipes."""
        recipes = [
            Recipe(id="1", name="Soup", ingredients=["water", "salt"]),
            Recipe(id="2", name="Crème brûlée", area="French", ingredients=["cream"]),
        ]

        assert decode_collection(encode_collection(recipes)) == recipes

    def test_encode_uses_canonical_keys(self):
        """Test that legacy keys are never written back."""
        recipe = Recipe.model_validate({"id": "1", "name": "Soup", "origin": "Thai", "images": "x.jpg"})

        entry = json.loads(encode_collection([recipe]))[0]

        assert entry["area"] == "Thai"
        assert entry["image"] == "x.jpg"
        assert "origin" not in entry
        assert "images" not in entry

    def test_decode_skips_invalid_and_duplicate_entries(self):
        """Test that invalid entries and repeated ids are dropped on load."""
        text = json.dumps([
            {"id": "1", "name": "Soup"},
            {"id": "", "name": "No id"},
            "not an object",
            {"id": "1", "name": "Duplicate"},
            {"id": 2, "name": "Numeric id", "ingredients": ["", "rice"]},
        ])

        recipes = decode_collection(text)

        assert [(r.id, r.name) for r in recipes] == [("1", "Soup"), ("2", "Numeric id")]
        assert recipes[1].ingredients == ["rice"]

    def test_validate_draft_trims_fields(self):
        """Test that validate_draft trims text fields."""
        fields = validate_draft(draft(name="  Pancakes  ", category=" Breakfast "))

        assert fields["name"] == "Pancakes"
        assert fields["category"] == "Breakfast"


class TestDurableSlot:
    """Test the store against a file-backed slot shared with other writers."""

    def test_reload_from_slot_file(self, tmp_path):
        """Test that a fresh store over the same directory reads back an equal collection."""
        first_store = RecipeStore(FileSlotStorage(tmp_path))
        soup = first_store.create(draft(name="Soup", ingredients=["water", "salt"]))
        brulee = first_store.create(draft(name="Crème brûlée", area="French", ingredients=["cream"]))

        reloaded = RecipeStore(FileSlotStorage(tmp_path)).list()

        assert reloaded == [soup, brulee]
        assert reloaded == first_store.list()

    def test_sees_recipes_written_by_another_store(self, tmp_path):
        """Test that list() re-reads the slot instead of trusting an earlier read."""
        storage = FileSlotStorage(tmp_path)
        mine = RecipeStore(storage)
        other = RecipeStore(FileSlotStorage(tmp_path))
        assert mine.list() == []

        created = other.create(draft(name="From elsewhere"))

        assert [r.id for r in mine.list()] == [created.id]
        assert mine.get(created.id).name == "From elsewhere"

    def test_update_and_delete_act_on_current_slot_contents(self, tmp_path):
        """Test that mutations start from the slot, not from a stale copy."""
        mine = RecipeStore(FileSlotStorage(tmp_path))
        other = RecipeStore(FileSlotStorage(tmp_path))
        kept = mine.create(draft(name="Kept"))
        external = other.create(draft(name="External"))

        updated = mine.update(external.id, draft(name="External v2"))
        assert updated.id == external.id
        assert other.get(external.id).name == "External v2"

        assert mine.delete(kept.id) is True
        assert [r.name for r in other.list()] == ["External v2"]

    def test_sees_slot_rewritten_outside_the_store(self, tmp_path):
        """Test that a slot file replaced by hand is picked up on the next call."""
        store = RecipeStore(FileSlotStorage(tmp_path))
        store.create(draft(name="Old"))

        (tmp_path / f"{DEFAULT_SLOT}.json").write_text(
            json.dumps([{"id": "42", "name": "Hand written", "origin": "Thai", "ingredients": ["rice"]}]),
            encoding="utf-8",
        )

        assert [(r.id, r.name, r.area) for r in store.list()] == [("42", "Hand written", "Thai")]
        assert store.delete("42") is True
        assert store.list() == []


class TestUnstorableText:
    """Test that text the slot cannot encode is a validation failure."""

    def test_create_with_lone_surrogate_raises_validation_error(self):
        """Test that a lone surrogate in the name is reported as ValidationError."""
        store, storage = make_store()

        with pytest.raises(ValidationError) as exc_info:
            store.create(draft(name="Tofu \ud800"))

        assert exc_info.value.fields == ["name"]
        assert storage.read(DEFAULT_SLOT) is None

    def test_update_with_lone_surrogate_in_ingredient(self):
        """Test that update rejects unencodable ingredients and keeps the old recipe."""
        store, _ = make_store()
        recipe = store.create(draft())

        with pytest.raises(ValidationError) as exc_info:
            store.update(recipe.id, draft(ingredients=["flour", "\udc80 sugar"]))

        assert exc_info.value.fields == ["ingredients"]
        assert store.get(recipe.id) == recipe
