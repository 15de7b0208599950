"""
Error taxonomy for the Recipe Hub core.

None of these errors should ever terminate a user session. Callers are expected
to degrade to the best partial result available:

- ValidationError: a draft is missing a required field (surfaced inline)
- NotFoundError: an update/detail target does not exist (surfaced inline)
- RemoteUnavailable: network or parse failure talking to TheMealDB
  (search degrades to local-only results plus a warning)
- StorageCorrupt: the durable slot holds something that is not a recipe
  collection (read as an empty collection)
"""

from typing import List, Optional


class RecipeHubError(Exception):
    """Base class for all Recipe Hub errors."""
    pass


class ValidationError(RecipeHubError, ValueError):
    """
    Exception raised when a recipe draft fails validation.

    Attributes:
        fields: Names of the draft fields that failed validation
    """

    def __init__(self, message: str, fields: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.fields = list(fields or [])


class NotFoundError(RecipeHubError, LookupError):
    """Exception raised when a recipe id does not exist."""

    def __init__(self, recipe_id: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"Recipe '{recipe_id}' not found")
        self.recipe_id = recipe_id


class RemoteUnavailable(RecipeHubError, RuntimeError):
    """
    Exception raised when the remote recipe API cannot be used.

    This covers timeouts, connection errors, non-2xx responses and bodies that
    are not the JSON shape TheMealDB documents.
    """
    pass


class StorageCorrupt(RecipeHubError, ValueError):
    """Exception raised when the durable slot cannot be read or parsed."""
    pass
