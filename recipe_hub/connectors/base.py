"""
Base connector abstract class for remote recipe APIs.

This module defines the interface the search aggregator relies on. A connector
wraps one read-only remote recipe API and returns its records untouched:
normalization into SearchResult happens in the aggregator as soon as records
are received.

All connectors must:
- Implement the source attribute (e.g., "themealdb")
- Return a list of raw records (possibly empty) from every query method
- Raise RemoteUnavailable for any network, status or decode failure
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class BaseConnector(ABC):
    """
    Abstract base class for remote recipe API connectors.

    Attributes:
        source: String identifier for the remote API (e.g., "themealdb")
    """
    source: str

    @abstractmethod
    def search_by_name(self, query: str) -> List[Dict[str, Any]]:
        """
        Free-text search on recipe name.

        Args:
            query: Search text (e.g., "tofu", "arrabiata")

        Returns:
            List of raw remote records (empty when nothing matches)
        """
        pass

    @abstractmethod
    def filter_by_category(self, category: str) -> List[Dict[str, Any]]:
        """Return the (partial) records of every recipe in a category."""
        pass

    @abstractmethod
    def filter_by_area(self, area: str) -> List[Dict[str, Any]]:
        """Return the (partial) records of every recipe from an area."""
        pass

    @abstractmethod
    def search_by_first_letter(self, letter: str) -> List[Dict[str, Any]]:
        """Return every recipe whose name starts with the given letter."""
        pass

    @abstractmethod
    def random(self) -> List[Dict[str, Any]]:
        """Return a single random recipe as a one-element list."""
        pass

    @abstractmethod
    def lookup(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the full record of one recipe.

        Returns:
            The raw record, or None if the id is unknown
        """
        pass
