"""
Sandbox script for testing unified search across TheMealDB and custom recipes.

This script seeds a throwaway in-memory store with one custom recipe, then runs
aggregated_search in every mode against the live TheMealDB API and prints the
merged results.

Prerequisites:
- Network access to https://www.themealdb.com (or MEALDB_BASE_URL in .env)

Run:
    python -m sandbox.sandbox_search
"""

from pprint import pprint

import api.config  # noqa: F401

from recipe_hub.search import aggregated_search
from recipe_hub.storage import MemorySlotStorage
from recipe_hub.store import RecipeStore


def run():
    """Test aggregated search in every mode."""
    try:
        store = RecipeStore(MemorySlotStorage())
        store.create({
            "name": "Spicy Tofu",
            "category": "Vegetarian",
            "area": "Chinese",
            "instructions": "Fry the tofu, add the chili.",
            "ingredients": ["tofu", "chili"],
        })

        searches = [("tofu", "text"), ("Vegetarian", "category"), ("Chinese", "area"), ("s", "letter")]

        print("=" * 80)
        print("Testing Aggregated Search")
        print("=" * 80)

        for query, by in searches:
            print(f"\nQuery: '{query}' (by={by})")
            response = aggregated_search(query, by, store=store)
            results = response["results"]
            print(f"Total results: {len(results)}  sources_status={response['sources_status']}")

            for i, result in enumerate(results[:10], 1):
                tag = "custom" if result["is_custom"] else "remote"
                print(f"{i:2d}. [{tag:6s}] {result['id']:>14s} | {result['category'] or '-':12s} | {result['name']}")

            for warning in response["warnings"]:
                print(f"⚠️  {warning}")

        print("\n=== Full Details (first text result) ===")
        response = aggregated_search("tofu", "text", store=store)
        if response["results"]:
            pprint(response["results"][0])

        print("\n" + "=" * 80)

    except Exception as exc:
        print(f"\n❌ Error during aggregated search: {exc}")
        import traceback
        traceback.print_exc()


if __name__ == "__main__":
    run()
