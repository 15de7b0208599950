"""
UI Styling and Feedback Module.

This module provides global CSS styling and standardized feedback components
for the Recipe Hub Streamlit app.
"""

from ui.styles import load_global_styles
from ui.feedback import show_empty_state, working_spinner

__all__ = [
    "load_global_styles",
    "show_empty_state",
    "working_spinner",
]
