import streamlit as st
import sys
import os

# Package root must be importable when run as a script - BEFORE LOCAL IMPORTS
current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
if parent_dir not in sys.path:
   sys.path.insert(0, parent_dir)

from csv_lookup.ui.state import init_app_state
from csv_lookup.ui.components import navigation
from csv_lookup.ui.pages import search, sources

def main():
    st.set_page_config(
        page_title="CSV Lookup",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    app_state = init_app_state()

    page_map = {
        "Search": search.render,
        "Sources": sources.render,
    }

    navigation.render_sidebar(app_state, page_map)

if __name__ == "__main__":
    main()
