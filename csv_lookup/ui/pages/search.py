import streamlit as st
import os
from typing import List

from csv_lookup.core.errors import CsvLookupError
from csv_lookup.core.options import AUTO, SearchOptions, parse_delimiter
from csv_lookup.core.query.models import QueryCondition
from csv_lookup.core.query.parsing import condition_from_tokens, is_tuple_operator, operator_names
from csv_lookup.core.query.operators import EMPTINESS_OPERATORS
from csv_lookup.reports.text import TextReport
from csv_lookup.ui.state import AppState
from csv_lookup.ui.components import results_panel

DELIMITER_CHOICES = ["auto", ",", ";", "\\t", "|", ":", "."]
HEADER_CHOICES = {"Auto-detect": AUTO, "Yes": True, "No": False}
NO_VALUE_OPERATORS = {o.value for o in EMPTINESS_OPERATORS}


def _query_rows() -> List[int]:
    if "query_rows" not in st.session_state:
        st.session_state.query_rows = [0]
        st.session_state.query_next = 1
    return st.session_state.query_rows


def _render_query_row(row_id: int) -> List[str]:
    """
    One query editor line. Returns its tokens: COLUMN TYPE [VALUE [UPPER]].
    """
    c_col, c_type, c_value, c_upper, c_del = st.columns([2, 2, 2, 2, 1])
    column = c_col.text_input("Column", value="*", key=f"q_col_{row_id}", help="'*' = any column, digits = index")
    operator = c_type.selectbox("Type", operator_names(), key=f"q_type_{row_id}")

    tokens = [column, operator]
    if is_tuple_operator(operator):
        tokens.append(c_value.text_input("Lower value", key=f"q_low_{row_id}"))
        tokens.append(c_upper.text_input("Upper value", key=f"q_up_{row_id}"))
    elif operator not in NO_VALUE_OPERATORS:
        tokens.append(c_value.text_input("Value", key=f"q_val_{row_id}"))

    if c_del.button("Remove", key=f"q_del_{row_id}") and len(st.session_state.query_rows) > 1:
        st.session_state.query_rows.remove(row_id)
        st.rerun()
    return tokens


def render(app_state: AppState):
    st.title("Search")

    defaults = app_state.search_options

    # --- Search path & format options ---
    path = st.text_input("Path", placeholder="CSV file or directory...", key="search_path")

    c_delim, c_enc, c_esc, c_head = st.columns(4)
    configured = "auto" if defaults.delimiter is AUTO else defaults.delimiter.replace("\t", "\\t")
    choices = DELIMITER_CHOICES if configured in DELIMITER_CHOICES else DELIMITER_CHOICES + [configured]
    delimiter = c_delim.selectbox("Delimiter", choices, index=choices.index(configured))
    enclosure = c_enc.text_input("Enclosure", value=defaults.enclosure, max_chars=1)
    escape = c_esc.text_input("Escape", value=defaults.escape, max_chars=1)
    header_labels = list(HEADER_CHOICES)
    header_default = next(k for k, v in HEADER_CHOICES.items() if v is defaults.has_headers)
    has_headers = HEADER_CHOICES[c_head.radio("Headers", header_labels, index=header_labels.index(header_default))]

    # --- Queries ---
    st.subheader("Queries")
    st.caption("A line matches when every query holds.")
    token_rows = [_render_query_row(row_id) for row_id in _query_rows()]

    if st.button("Add query"):
        st.session_state.query_rows.append(st.session_state.query_next)
        st.session_state.query_next += 1
        st.rerun()

    st.divider()
    if not st.button("Search", type="primary"):
        return

    if not path:
        st.warning("Enter a file or directory path.")
        return

    options = SearchOptions(parse_delimiter(delimiter), enclosure, escape, has_headers)
    service = app_state.lookup_service(options)
    try:
        conditions: List[QueryCondition] = [condition_from_tokens(tokens) for tokens in token_rows]
        with st.spinner(f"Searching {os.path.basename(path) or path}..."):
            results = service.search(conditions, path)
    except CsvLookupError as e:
        st.error(f"{type(e).__name__}: {e}")
        return

    if service.skipped_files:
        st.caption(f"Skipped {len(service.skipped_files)} entries (see Sources page).")

    results_panel.render(results)

    st.download_button(
        "Download text report",
        TextReport(path, conditions, results).render(""),
        file_name="csv-lookup-report.txt",
        mime="text/plain",
    )
