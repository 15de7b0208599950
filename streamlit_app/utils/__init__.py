"""
Utility modules for the Streamlit frontend.

This package contains:
- api_client: Backend API communication
- ui_components: Reusable recipe cards and status widgets
- state: Session state wrappers for search/form/detail snapshots
- session: Browser session id
"""
