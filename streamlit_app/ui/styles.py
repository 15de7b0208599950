"""
Global CSS Styling for the Recipe Hub.

This module provides load_global_styles() to inject consistent styling
across all pages.
"""

import streamlit as st


def load_global_styles() -> None:
    """
    Inject global CSS styles for the Recipe Hub app.

    This function:
    - Imports Google Fonts (Nunito) for friendly typography
    - Gives recipe images a fixed height so cards line up in the grid
    - Narrows the content width on large screens
    """
    css = """
    <style>
        @import url('https://fonts.googleapis.com/css2?family=Nunito:wght@400;600;700&display=swap');

        html, body, [class*="css"] {
            font-family: 'Nunito', 'sans serif' !important;
        }

        h1, h2, h3, h4, h5, h6 {
            font-weight: 600 !important;
            letter-spacing: 0.02em !important;
        }

        .block-container {
            max-width: 1200px;
            padding-top: 2rem;
        }

        [data-testid="stImage"] img {
            height: 12rem;
            object-fit: cover;
            border-radius: 0.5rem;
        }

        .stButton > button {
            border-radius: 0.5rem;
        }
    </style>
    """
    st.markdown(css, unsafe_allow_html=True)
