import streamlit as st
from typing import Dict, Callable

from csv_lookup import __version__
from csv_lookup.ui.state import AppState

def render_sidebar(app_state: AppState, page_map: Dict[str, Callable[[AppState], None]]):
    """
    Renders the sidebar navigation and executes the selected page's render function.

    Args:
        app_state: The application state object.
        page_map: Dictionary mapping display names to page render functions.
    """
    st.sidebar.title("CSV Lookup")
    st.sidebar.caption(f"Env: {app_state.env}")

    if app_state.config_status == "ERROR":
        st.sidebar.error(f"Config Error: {app_state.config.get('error')}")
        st.sidebar.caption("Running with built-in defaults.")

    selection = st.sidebar.radio("Navigation", list(page_map.keys()))

    st.sidebar.divider()
    st.sidebar.info(f"v{__version__}")

    if selection and selection in page_map:
        page_map[selection](app_state)
