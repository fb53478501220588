import logging
from pathlib import Path
from typing import List, Optional

from .base import BaseReport

logger = logging.getLogger(__name__)

HEADING = """
Search result report
--------------------

Search path: {path}
"""

RESULTS_HEADING = """
Results
--------------------
"""


class TextReport(BaseReport):
    """
    Plain text report. An empty output target returns the text (for stdout).
    """

    def render(self, output: str = "") -> Optional[str]:
        text = "".join(self._sections())
        if not output:
            return text

        target = Path(output)
        self.create_dir(target.parent)
        target.write_text(text, encoding="utf-8")
        logger.info(f"Text report written to {target}")
        return None

    def _sections(self) -> List[str]:
        parts = [HEADING.format(path=self.search_path)]
        if self.conditions:
            parts.append("Queries:\n")
            parts.extend(self._query_lines())
        parts.append(RESULTS_HEADING)

        results = self.non_empty_results()
        for result in results:
            parts.append(
                f"\nFile: {result.filename}\n"
                f"    Delimiter: {result.delimiter}    Enclosure: {result.enclosure_character}"
                f"    Escape: {result.escape_character}\n"
            )
            if result.headers is not None:
                parts.append(f"    Headers: {', '.join(result.headers.fields)}\n")
            parts.append(f"    Total matches: {result.match_count}\n")
            parts.append("    Matches:\n")
            for line in result.matches:
                joined = line.joined(result.delimiter, result.enclosure_character)
                parts.append(f"        Line number: {line.line_number}, {joined}\n")

        if not results:
            parts.append("No results found!\n")
        parts.append("\n")
        return parts

    def _query_lines(self) -> List[str]:
        columns = ["" if c.column is None else str(c.column) for c in self.conditions]
        widest_column = max(len(c) for c in columns)
        widest_type = max(len(c.query_type) for c in self.conditions)

        lines = []
        for column, condition in zip(columns, self.conditions):
            prefix = (
                f'    Column: "{column}",{" " * (widest_column - len(column) + 1)}'
                f'Type: "{condition.query_type}",{" " * (widest_type - len(condition.query_type) + 1)}'
            )
            value = condition.display_value()
            if isinstance(value, tuple):
                lines.append(
                    f'{prefix}Lower value: "{value[0]}"\n'
                    f'{" " * len(prefix)}Upper value: "{value[1]}"\n'
                )
            else:
                lines.append(f'{prefix}Value: "{value}"\n')
        return lines
