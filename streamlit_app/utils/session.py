"""
Session management utilities for Streamlit pages.

This module provides the per-browser-session id used to tag analytics events
sent to the backend.
"""

import uuid
import streamlit as st

SESSION_ID_KEY = "session_id"


def get_or_create_session_id() -> str:
    """
    Get or create a persistent session ID stored in st.session_state.

    The same id is reused across all pages within one browser session. A page
    refresh or a new tab starts a new session.

    Returns:
        Session ID string (UUID format)
    """
    if SESSION_ID_KEY not in st.session_state:
        st.session_state[SESSION_ID_KEY] = str(uuid.uuid4())
    return st.session_state[SESSION_ID_KEY]
