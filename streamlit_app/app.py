"""
Recipe Hub - Streamlit Frontend Main Entry Point.

This is the main Streamlit application entry point. It sets up the page configuration
and provides the global layout with sidebar navigation and backend status.

Note: Multi-page routing is handled automatically by Streamlit via the `pages/` folder.
Files in `pages/` starting with numbered prefixes (e.g., `01_🏠_Home.py`) will appear
as pages in the sidebar navigation.
"""

import sys
from pathlib import Path

# Ensure the streamlit_app directory is in the Python path
# This allows imports to work regardless of how the app is run
streamlit_app_dir = Path(__file__).parent
if str(streamlit_app_dir) not in sys.path:
    sys.path.insert(0, str(streamlit_app_dir))

# Add project root to path so we can import api.config and recipe_hub
project_root = streamlit_app_dir.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

# Import config early to load .env file before any other code accesses environment variables
import api.config  # noqa: F401

import streamlit as st

from utils.api_client import get_health_status
from utils.ui_components import render_backend_status
from utils.session import get_or_create_session_id
from ui.styles import load_global_styles

# Page configuration - must be called before any other Streamlit commands
st.set_page_config(
    page_title="Recipe Hub",
    page_icon="🍲",
    layout="wide",
    initial_sidebar_state="expanded"
)

get_or_create_session_id()
load_global_styles()

with st.sidebar:
    st.markdown("### 🍲 **Recipe Hub**")
    st.divider()
    with st.expander("System status", expanded=False):
        render_backend_status(get_health_status())

st.title("🍲 Recipe Hub")
st.caption("Browse TheMealDB recipes and keep your own recipes next to them.")

st.markdown("#### Get started")
cta_col1, cta_col2, cta_col3 = st.columns(3, gap="medium")

with cta_col1:
    if st.button("Search Recipes", use_container_width=True, type="primary"):
        st.switch_page("pages/02_🔎_Search.py")

with cta_col2:
    if st.button("Add a Recipe", use_container_width=True):
        st.switch_page("pages/03_➕_Add_Recipe.py")

with cta_col3:
    if st.button("My Recipes", use_container_width=True):
        st.switch_page("pages/05_📚_My_Recipes.py")

st.divider()

with st.expander("How it works", expanded=False):
    st.markdown("""
    1. **Search** – Look up recipes by name, category, cuisine or first letter. Your own recipes show up next to TheMealDB results.
    2. **Add** – Save your own recipes with as many ingredient rows as you need.
    3. **Manage** – Edit or delete your recipes from the My Recipes page.
    """)
