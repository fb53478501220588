import streamlit as st
from pathlib import Path
from typing import Any, Dict, List, Sequence

from csv_lookup.models.lines import ResultSet


def result_rows(result: ResultSet) -> List[Dict[str, Any]]:
    """
    Matched lines as table rows keyed by header name (or column index).
    Short lines leave trailing columns blank.
    """
    if result.headers is not None:
        names = list(result.headers.fields)
    else:
        names = [str(i) for i in range(result.column_count())]

    rows = []
    for line in result.matches:
        row: Dict[str, Any] = {"line": line.line_number}
        for i, name in enumerate(names):
            row[name] = line.fields[i] if i < len(line.fields) else ""
        rows.append(row)
    return rows


def render(results: Sequence[ResultSet], title: str = "Results"):
    """
    Renders one table per searched file.
    Pure render component, no file access.
    """
    st.subheader(title)
    if not results:
        st.info("No files were searched.")
        return

    total = sum(r.match_count for r in results)
    st.caption(f"{total} matches in {len(results)} files")

    for result in results:
        label = f"{Path(result.filename).name} ({result.match_count} / {result.total_lines} lines)"
        with st.expander(label, expanded=bool(result.matches)):
            st.caption(
                f"Delimiter: `{result.delimiter}` | Enclosure: `{result.enclosure_character}` "
                f"| Escape: `{result.escape_character}`"
            )
            if result.matches:
                st.dataframe(result_rows(result), use_container_width=True, hide_index=True)
            else:
                st.info("No matching lines.")
