# recipe_hub/events.py
"""
Event logging for the Recipe Hub.

Responsibilities:
- Provide a single log_event(...) function that appends one JSONL record per
  event to the event log file.
  - Never raises exceptions (analytics are strictly non-blocking).

- Provide small helper functions for common event types:
  - log_search_performed(...)
  - log_recipe_created(...)
  - log_recipe_updated(...)
  - log_recipe_deleted(...)
  - log_recipe_viewed(...)
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# JSONL file with one event per line. Override with RECIPE_HUB_EVENT_LOG.
EVENT_LOG_FILE = Path(os.getenv("RECIPE_HUB_EVENT_LOG", "events.log"))


def _write_to_file(record: Dict[str, Any]) -> None:
    """
    Append a single JSON record to the event log as JSONL.
    Never raise exceptions.
    """
    try:
        log_file = Path(EVENT_LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with log_file.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, ensure_ascii=False) + "\n")
    except Exception as exc:
        # Last-resort: log at debug level, never raise.
        logger.debug("Failed to write event to %s: %s", EVENT_LOG_FILE, exc)


def log_event(
    event: str,
    session_id: Optional[str],
    payload: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Core event logger.

    Builds a record with keys: ts, event, session_id, payload and appends it
    to EVENT_LOG_FILE. Never raises.
    """
    record = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "session_id": session_id,
        "payload": payload or {},
    }
    _write_to_file(record)


# ---------------------------------------------------------------------------
# Helper functions for common event types
# ---------------------------------------------------------------------------

def log_search_performed(
    session_id: Optional[str],
    query: str,
    by: str,
    result_count: int,
    remote_status: str,
) -> None:
    """
    Log a search_performed event.

    payload:
    {
        "query": "tofu",
        "by": "text",
        "result_count": 3,
        "remote_status": "ok" | "error" | "skipped"
    }
    """
    payload = {
        "query": query,
        "by": by,
        "result_count": result_count,
        "remote_status": remote_status,
    }
    log_event("search_performed", session_id, payload)


def log_recipe_created(session_id: Optional[str], recipe_id: str, ingredient_count: int) -> None:
    """Log a recipe_created event."""
    log_event(
        "recipe_created",
        session_id,
        {"recipe_id": recipe_id, "ingredient_count": ingredient_count},
    )


def log_recipe_updated(session_id: Optional[str], recipe_id: str) -> None:
    """Log a recipe_updated event."""
    log_event("recipe_updated", session_id, {"recipe_id": recipe_id})


def log_recipe_deleted(session_id: Optional[str], recipe_id: str, removed: bool) -> None:
    """
    Log a recipe_deleted event.

    `removed` is False when the id was already gone (idempotent delete).
    """
    log_event("recipe_deleted", session_id, {"recipe_id": recipe_id, "removed": removed})


def log_recipe_viewed(session_id: Optional[str], recipe_id: str, is_custom: bool) -> None:
    """Log a recipe_viewed event."""
    log_event("recipe_viewed", session_id, {"recipe_id": recipe_id, "is_custom": is_custom})
