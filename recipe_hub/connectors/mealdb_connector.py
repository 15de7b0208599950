"""
TheMealDB connector using the public JSON API.

This connector wraps the read-only TheMealDB endpoints used by the Recipe Hub:
- search.php?s=<text>     free-text search on name
- search.php?f=<letter>   list by first letter
- filter.php?c=<category> filter by category (partial records)
- filter.php?a=<area>     filter by area (partial records)
- random.php              one random meal
- lookup.php?i=<id>       full record by id

TheMealDB answers {"meals": null} when nothing matches; that is returned as an
empty list. Any network error, non-2xx status or unexpected body is raised as
RemoteUnavailable so the aggregator can degrade to local-only results.

Base URL, API key and timeout default to the free public tier but can be
overridden via MEALDB_BASE_URL, MEALDB_API_KEY and MEALDB_TIMEOUT_SECONDS.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import requests

from recipe_hub.errors import RemoteUnavailable

from .base import BaseConnector

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://www.themealdb.com/api/json/v1"
DEFAULT_API_KEY = "1"
DEFAULT_TIMEOUT_SECONDS = 10.0


class MealDBConnector(BaseConnector):
    """
    Connector for TheMealDB.

    A requests.Session is reused across calls; pass one in to share connection
    pools or to substitute a test double.
    """
    source = "themealdb"

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize the TheMealDB connector.

        Args:
            base_url: API root (optional, reads MEALDB_BASE_URL or uses the public URL)
            api_key: API key path segment (optional, reads MEALDB_API_KEY, "1" is the test key)
            timeout: Request timeout in seconds (optional, reads MEALDB_TIMEOUT_SECONDS)
            session: requests.Session to use (optional)

        Raises:
            RuntimeError: If MEALDB_TIMEOUT_SECONDS is not a positive number.
        """
        self.base_url = (base_url or os.getenv("MEALDB_BASE_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.api_key = api_key or os.getenv("MEALDB_API_KEY", DEFAULT_API_KEY)

        if timeout is None:
            raw_timeout = os.getenv("MEALDB_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
            try:
                timeout = float(raw_timeout)
            except ValueError as e:
                raise RuntimeError(f"MEALDB_TIMEOUT_SECONDS must be a number, got {raw_timeout!r}") from e
        if timeout <= 0:
            raise RuntimeError(f"TheMealDB timeout must be positive, got {timeout}")
        self.timeout = timeout

        self.session = session or requests.Session()

    def search_by_name(self, query: str) -> List[Dict[str, Any]]:
        return self._get("search.php", {"s": query})

    def filter_by_category(self, category: str) -> List[Dict[str, Any]]:
        return self._get("filter.php", {"c": category})

    def filter_by_area(self, area: str) -> List[Dict[str, Any]]:
        return self._get("filter.php", {"a": area})

    def search_by_first_letter(self, letter: str) -> List[Dict[str, Any]]:
        return self._get("search.php", {"f": letter[:1]})

    def random(self) -> List[Dict[str, Any]]:
        return self._get("random.php", {})

    def lookup(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        meals = self._get("lookup.php", {"i": recipe_id})
        return meals[0] if meals else None

    def _get(self, endpoint: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        """
        Call one endpoint and return its `meals` list.

        Raises:
            RemoteUnavailable: On timeout, connection error, HTTP error or a
                               body that is not a JSON object
        """
        url = f"{self.base_url}/{self.api_key}/{endpoint}"
        logger.debug("GET %s params=%r", url, params)

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout as e:
            raise RemoteUnavailable(f"TheMealDB request timed out ({endpoint})") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise RemoteUnavailable(f"TheMealDB returned HTTP {status} ({endpoint})") from e
        except requests.exceptions.RequestException as e:
            raise RemoteUnavailable(f"Could not reach TheMealDB ({endpoint}): {e}") from e
        except ValueError as e:
            raise RemoteUnavailable(f"TheMealDB returned invalid JSON ({endpoint})") from e

        if not isinstance(data, dict):
            raise RemoteUnavailable(
                f"Unexpected response format from TheMealDB ({endpoint}): {type(data).__name__}"
            )

        meals = data.get("meals")
        if meals is None:
            return []
        if not isinstance(meals, list):
            # lookup.php answers with a string for malformed ids
            logger.debug("TheMealDB %s returned non-list meals: %r", endpoint, meals)
            return []

        records = [m for m in meals if isinstance(m, dict)]
        logger.debug("TheMealDB %s returned %d records", endpoint, len(records))
        return records
