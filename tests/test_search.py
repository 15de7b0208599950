"""
Tests for the unified search aggregator.

These tests verify that:
- Remote matches come first, then local matches tagged as custom
- Each search mode applies the matching local filter
- An empty query makes no remote call
- Browse, random and detail lookups use the same result views
"""

from unittest.mock import Mock, patch

import pytest

from recipe_hub.errors import NotFoundError, RemoteUnavailable, ValidationError
from recipe_hub.search import (
    aggregated_search,
    browse_recipes,
    get_recipe_detail,
    random_recipes,
    search_by_area,
    search_by_category,
    search_by_first_letter,
)
from recipe_hub.storage import MemorySlotStorage
from recipe_hub.store import RecipeStore
from recipe_hub.utils.cache import clear_cache, get_cache_size


def make_store(*recipes):
    store = RecipeStore(MemorySlotStorage())
    for recipe in recipes:
        store.create({"instructions": "Cook it.", **recipe})
    return store


def make_connector(records=None):
    """Mock connector returning `records` from every list endpoint."""
    connector = Mock()
    for method in ("search_by_name", "filter_by_category", "filter_by_area", "search_by_first_letter"):
        getattr(connector, method).return_value = list(records or [])
    return connector


def meal(meal_id, name, **extra):
    return {"idMeal": meal_id, "strMeal": name, **extra}


class TestAggregatedSearch:
    """Test merging of remote and local results."""

    def setup_method(self):
        clear_cache()

    def test_remote_then_local(self):
        """Test that remote results precede local matches."""
        store = make_store({"name": "Spicy Tofu", "ingredients": ["tofu", "chili"]})
        connector = make_connector([meal("1", "Tofu Curry"), meal("2", "Mapo Tofu")])

        response = aggregated_search("tofu", "text", store=store, connector=connector)

        names = [r["name"] for r in response["results"]]
        assert names == ["Tofu Curry", "Mapo Tofu", "Spicy Tofu"]
        assert [r["is_custom"] for r in response["results"]] == [False, False, True]
        assert response["sources_status"] == {"remote": "ok", "local": "ok"}
        assert response["warnings"] == []
        connector.search_by_name.assert_called_once_with("tofu")

    def test_local_only_match_when_remote_has_none(self):
        """Test that the only result is the custom recipe when TheMealDB finds nothing."""
        store = make_store({"name": "Spicy Tofu", "category": "Dinner", "ingredients": ["tofu", "chili"]})

        response = aggregated_search("tofu", "text", store=store, connector=make_connector([]))

        assert len(response["results"]) == 1
        assert response["results"][0]["name"] == "Spicy Tofu"
        assert response["results"][0]["source"] == "local"
        assert response["results"][0]["is_custom"] is True

    def test_local_match_on_ingredient(self):
        """Test that text search matches any ingredient case-insensitively."""
        store = make_store(
            {"name": "Weeknight Stir Fry", "ingredients": ["Firm TOFU", "soy sauce"]},
            {"name": "Pancakes", "ingredients": ["flour"]},
        )

        response = aggregated_search("tofu", "text", store=store, connector=make_connector())

        assert [r["name"] for r in response["results"]] == ["Weeknight Stir Fry"]

    def test_local_match_on_category_and_area_text(self):
        """Test that text search also matches category and area."""
        store = make_store(
            {"name": "Pho", "area": "Vietnamese", "ingredients": ["noodles"]},
            {"name": "Brownies", "category": "Dessert", "ingredients": ["cocoa"]},
        )

        assert [r["name"] for r in aggregated_search("viet", store=store, connector=make_connector())["results"]] == ["Pho"]
        assert [r["name"] for r in aggregated_search("dess", store=store, connector=make_connector())["results"]] == ["Brownies"]

    def test_empty_query_makes_no_remote_call(self):
        """Test that a blank query returns nothing and skips TheMealDB."""
        store = make_store({"name": "Spicy Tofu", "ingredients": ["tofu"]})
        connector = make_connector([meal("1", "Anything")])

        response = aggregated_search("   ", "text", store=store, connector=connector)

        assert response["results"] == []
        assert response["sources_status"]["remote"] == "skipped"
        connector.search_by_name.assert_not_called()

    def test_unknown_mode_raises(self):
        """Test that an unknown search mode raises ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            aggregated_search("tofu", "ingredient", store=make_store(), connector=make_connector())
        assert exc_info.value.fields == ["by"]

    def test_category_is_exact_case_insensitive(self):
        """Test that category mode uses exact (case-insensitive) equality."""
        store = make_store(
            {"name": "Cake", "category": "dessert", "ingredients": ["flour"]},
            {"name": "Dessert Wine Pairing", "category": "Drinks", "ingredients": ["wine"]},
        )
        connector = make_connector([meal("10", "Apple Frangipan Tart")])

        response = search_by_category("Dessert", store=store, connector=connector)

        assert [r["name"] for r in response["results"]] == ["Apple Frangipan Tart", "Cake"]
        assert response["results"][0]["category"] == "Dessert"
        connector.filter_by_category.assert_called_once_with("Dessert")

    def test_area_filter(self):
        """Test that area mode matches the local area field."""
        store = make_store(
            {"name": "Tacos", "area": "Mexican", "ingredients": ["tortilla"]},
            {"name": "Lasagne", "area": "Italian", "ingredients": ["pasta"]},
        )
        connector = make_connector([meal("20", "Chilaquiles")])

        response = search_by_area("mexican", store=store, connector=connector)

        assert [r["name"] for r in response["results"]] == ["Chilaquiles", "Tacos"]
        assert response["results"][0]["area"] == "mexican"

    def test_letter_mode_uses_first_character(self):
        """Test that letter mode compares the first letter of the name."""
        store = make_store(
            {"name": "banana bread", "ingredients": ["banana"]},
            {"name": "Apple pie", "ingredients": ["apple"]},
        )
        connector = make_connector()

        response = search_by_first_letter("Banana", store=store, connector=connector)

        assert [r["name"] for r in response["results"]] == ["banana bread"]
        connector.search_by_first_letter.assert_called_once_with("B")

    def test_malformed_remote_records_are_skipped(self):
        """Test that remote records without id or name are dropped."""
        connector = make_connector([meal("1", "Good"), {"strMeal": "No id"}, {"idMeal": "3"}])

        response = aggregated_search("good", store=make_store(), connector=connector)

        assert [r["id"] for r in response["results"]] == ["1"]

    def test_remote_results_are_cached(self):
        """Test that a repeated search reuses the cached remote contribution."""
        connector = make_connector([meal("1", "Tofu Curry")])
        store = make_store()

        aggregated_search("tofu", store=store, connector=connector)
        aggregated_search("TOFU ", store=store, connector=connector)

        assert connector.search_by_name.call_count == 1
        assert get_cache_size() == 1

    def test_local_results_are_not_cached(self):
        """Test that recipes created after a search show up in the next one."""
        connector = make_connector()
        store = make_store()

        assert aggregated_search("tofu", store=store, connector=connector)["results"] == []
        store.create({"name": "Spicy Tofu", "instructions": "Fry.", "ingredients": ["tofu"]})

        assert [r["name"] for r in aggregated_search("tofu", store=store, connector=connector)["results"]] == ["Spicy Tofu"]

    def test_default_connector_is_resolved_at_call_time(self):
        """Test that the MealDB connector is created when none is passed."""
        connector = make_connector([meal("1", "Tofu Curry")])

        with patch("recipe_hub.search._get_connector", return_value=connector):
            response = aggregated_search("tofu", store=make_store())

        assert [r["id"] for r in response["results"]] == ["1"]


class TestBrowse:
    """Test the unfiltered home listing."""

    def setup_method(self):
        clear_cache()

    def test_browse_lists_letter_a_then_every_custom_recipe(self):
        """Test that browse shows remote 'a' recipes then all custom recipes."""
        store = make_store(
            {"name": "Zucchini Fritters", "ingredients": ["zucchini"]},
            {"name": "Borscht", "ingredients": ["beet"]},
        )
        connector = make_connector([meal("1", "Apple Frangipan Tart")])

        response = browse_recipes(store=store, connector=connector)

        assert [r["name"] for r in response["results"]] == ["Apple Frangipan Tart", "Zucchini Fritters", "Borscht"]
        assert response["by"] == "browse"
        connector.search_by_first_letter.assert_called_once_with("a")


class TestRandom:
    """Test random recipe picks."""

    def test_random_deduplicates(self):
        """Test that the same meal returned twice is listed once."""
        connector = Mock()
        connector.random.side_effect = [[meal("1", "A")], [meal("1", "A")], [meal("2", "B")]]

        response = random_recipes(3, connector=connector)

        assert [r["id"] for r in response["results"]] == ["1", "2"]
        assert response["sources_status"]["remote"] == "ok"

    def test_random_partial_failure_warns(self):
        """Test that failed calls are skipped with one warning."""
        connector = Mock()
        connector.random.side_effect = [[meal("1", "A")], RemoteUnavailable("down")]

        response = random_recipes(2, connector=connector)

        assert [r["id"] for r in response["results"]] == ["1"]
        assert response["warnings"] == ["1 of 2 random recipe requests failed."]
        assert response["sources_status"]["remote"] == "ok"

    def test_random_total_failure(self):
        """Test that remote status is 'error' when every call fails."""
        connector = Mock()
        connector.random.side_effect = RemoteUnavailable("down")

        response = random_recipes(2, connector=connector)

        assert response["results"] == []
        assert response["sources_status"]["remote"] == "error"

    def test_random_count_is_clamped(self):
        """Test that the number of calls is capped."""
        connector = Mock()
        connector.random.return_value = []

        random_recipes(100, connector=connector)

        assert connector.random.call_count == 12


class TestRecipeDetail:
    """Test detail lookups branching on provenance."""

    def test_custom_detail(self):
        """Test that custom ids are resolved in the local store."""
        store = make_store({"name": "Spicy Tofu", "ingredients": ["tofu"]})
        recipe_id = store.list()[0].id

        view = get_recipe_detail(recipe_id, custom=True, store=store)

        assert view.is_custom is True
        assert view.name == "Spicy Tofu"

    def test_custom_detail_missing(self):
        """Test that an unknown custom id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            get_recipe_detail("missing", custom=True, store=make_store())

    def test_remote_detail(self):
        """Test that remote ids are looked up on TheMealDB."""
        connector = Mock()
        connector.lookup.return_value = meal("52772", "Teriyaki Chicken Casserole", strIngredient1="soy sauce")

        view = get_recipe_detail("52772", connector=connector)

        assert view.is_custom is False
        assert view.ingredients == ["soy sauce"]
        connector.lookup.assert_called_once_with("52772")

    def test_remote_detail_missing(self):
        """Test that an unknown remote id raises NotFoundError."""
        connector = Mock()
        connector.lookup.return_value = None

        with pytest.raises(NotFoundError):
            get_recipe_detail("0", connector=connector)

    def test_remote_detail_unavailable(self):
        """Test that remote failures propagate as RemoteUnavailable."""
        connector = Mock()
        connector.lookup.side_effect = RemoteUnavailable("down")

        with pytest.raises(RemoteUnavailable):
            get_recipe_detail("52772", connector=connector)
