"""
Sandbox: exercise the TheMealDB connector directly.

Prints a few raw records for each endpoint the app uses, plus the normalized
SearchResult view of the first one. It's okay if this fails when offline –
it's for exploration only.

Run:
    python -m sandbox.sandbox_mealdb
"""

from pprint import pprint

import api.config  # noqa: F401

from recipe_hub.connectors.mealdb_connector import MealDBConnector
from recipe_hub.errors import RemoteUnavailable
from recipe_hub.models import SearchResult


def test_mealdb() -> None:
    connector = MealDBConnector()
    print(f"Using {connector.base_url} (timeout={connector.timeout}s)")

    calls = [
        ("search_by_name('Arrabiata')", lambda: connector.search_by_name("Arrabiata")),
        ("filter_by_category('Seafood')", lambda: connector.filter_by_category("Seafood")),
        ("filter_by_area('Canadian')", lambda: connector.filter_by_area("Canadian")),
        ("search_by_first_letter('a')", lambda: connector.search_by_first_letter("a")),
        ("random()", connector.random),
    ]

    for label, call in calls:
        print("\n" + "=" * 60)
        print(label)
        try:
            records = call()
        except RemoteUnavailable as exc:
            print(f"TheMealDB unavailable: {exc}")
            continue

        print(f"{len(records)} records")
        for record in records[:3]:
            print(f"  {record.get('idMeal')}: {record.get('strMeal')}")

        if records:
            print("\nNormalized first record:")
            pprint(SearchResult.from_remote(records[0]).model_dump(exclude={"raw"}))


if __name__ == "__main__":
    test_mealdb()
