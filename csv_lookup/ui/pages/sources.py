import streamlit as st
import os

from csv_lookup.core.errors import AccessError
from csv_lookup.ui.state import AppState

REASON_LABELS = {
    None: "searchable",
    "not_a_file": "not a file",
    "not_readable": "not readable",
    "not_csv_file": "not a CSV file",
}


def render(app_state: AppState):
    st.title("Sources")
    st.caption(f"Searched extensions: {', '.join(app_state.extensions)}")

    directory = st.text_input("Directory", placeholder="Directory to inspect...", key="sources_dir")
    if not directory:
        st.info("Enter a directory to list the files a search would read.")
        return

    if not os.path.isdir(directory):
        st.error(f"Directory not found: `{directory}`")
        return

    service = app_state.lookup_service()
    try:
        candidates = service.candidates(directory)
    except AccessError as e:
        st.error(str(e))
        return

    if not candidates:
        st.info("Directory is empty.")
        return

    searchable = [c for c in candidates if c["reason"] is None]
    c1, c2 = st.columns(2)
    c1.metric("Searchable", len(searchable))
    c2.metric("Skipped", len(candidates) - len(searchable))

    rows = [
        {
            "name": c["name"],
            "status": REASON_LABELS[c["reason"].value if c["reason"] else None],
            "path": c["path"],
        }
        for c in candidates
    ]
    st.dataframe(rows, use_container_width=True, hide_index=True)
