"""
Configuration management for the Recipe Hub.

This module centralizes environment variable loading from .env file at project root.
It should be imported early in both backend (api/main.py) and frontend (streamlit_app/app.py)
to ensure .env is loaded before any other code accesses environment variables.

If .env does not exist, load_dotenv() is a no-op and the process environment is used.

Environment Variables:
- MEALDB_BASE_URL: Optional, defaults to "https://www.themealdb.com/api/json/v1"
- MEALDB_API_KEY: Optional, defaults to "1" (TheMealDB public test key)
- MEALDB_TIMEOUT_SECONDS: Optional, defaults to 10
- RECIPE_HUB_DATA_DIR: Optional, directory holding the recipe slot file (defaults to "data")
- RECIPE_HUB_SLOT: Optional, slot name (defaults to "customRecipes")
- RECIPE_HUB_EVENT_LOG: Optional, JSONL event log path (defaults to "events.log")
- RECIPE_HUB_LOG_LEVEL: Optional, root logging level (defaults to "INFO")
- BACKEND_URL: Optional, backend URL for the front-end (defaults to http://localhost:8000)
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from recipe_hub.connectors.mealdb_connector import DEFAULT_API_KEY, DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from recipe_hub.store import DEFAULT_DATA_DIR, DEFAULT_SLOT


def load_env_file() -> None:
    """
    Load environment variables from .env file at project root.

    This function locates the project root by going up from this file's location
    (api/config.py -> project root) and loads .env if it exists.

    Safe to call multiple times. Existing environment variables take precedence.
    """
    this_file = Path(__file__).resolve()
    project_root = this_file.parent.parent
    env_path = project_root / ".env"

    load_dotenv(env_path, override=False)


def configure_logging() -> None:
    """Configure root logging from RECIPE_HUB_LOG_LEVEL (no-op if handlers exist)."""
    level_name = os.getenv("RECIPE_HUB_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


# Load .env file on module import
load_env_file()
configure_logging()


class MealDBConfig:
    """Configuration for the TheMealDB connector."""

    @staticmethod
    def get_base_url() -> str:
        """
        Get TheMealDB API root.

        Returns:
            Base URL string without trailing slash
        """
        return os.getenv("MEALDB_BASE_URL", DEFAULT_BASE_URL).rstrip("/")

    @staticmethod
    def get_api_key() -> str:
        """
        Get TheMealDB API key path segment.

        Returns:
            API key string (default: "1", the public test key)
        """
        return os.getenv("MEALDB_API_KEY", DEFAULT_API_KEY)

    @staticmethod
    def get_timeout_seconds() -> float:
        """
        Get the request timeout for TheMealDB calls.

        Returns:
            Timeout in seconds (default: 10)

        Raises:
            RuntimeError: If the configured value is not a positive number
        """
        raw = os.getenv("MEALDB_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            value = float(raw)
        except ValueError as e:
            raise RuntimeError(f"MEALDB_TIMEOUT_SECONDS must be a number, got {raw!r}") from e
        if value <= 0:
            raise RuntimeError(f"MEALDB_TIMEOUT_SECONDS must be positive, got {value}")
        return value


class StorageConfig:
    """Configuration for the durable recipe slot."""

    @staticmethod
    def get_data_dir() -> str:
        """
        Get the directory holding the recipe slot file.

        Returns:
            Directory path string (default: "data")
        """
        return os.getenv("RECIPE_HUB_DATA_DIR", DEFAULT_DATA_DIR)

    @staticmethod
    def get_slot() -> str:
        """
        Get the slot name for the custom recipe collection.

        Returns:
            Slot name (default: "customRecipes")
        """
        return os.getenv("RECIPE_HUB_SLOT", DEFAULT_SLOT)


def get_config_summary() -> Dict[str, Any]:
    """
    Get a dictionary describing the effective configuration (safe to expose).

    Returns:
        Dictionary with keys:
        - mealdb_base_url: str
        - mealdb_timeout_seconds: float
        - data_dir: str
        - slot: str
        - errors: List of configuration problems (empty when valid)

    Never raises: an invalid MEALDB_TIMEOUT_SECONDS is reported under
    "errors" with mealdb_timeout_seconds set to None.
    """
    errors: List[str] = []
    try:
        timeout: Optional[float] = MealDBConfig.get_timeout_seconds()
    except RuntimeError as e:
        timeout = None
        errors.append(str(e))

    return {
        "mealdb_base_url": MealDBConfig.get_base_url(),
        "mealdb_timeout_seconds": timeout,
        "data_dir": StorageConfig.get_data_dir(),
        "slot": StorageConfig.get_slot(),
        "errors": errors,
    }
