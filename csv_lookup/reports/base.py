from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from csv_lookup.core.query.models import QueryCondition
from csv_lookup.models.lines import ResultSet


class BaseReport(ABC):
    """
    A report is a pure function of the search path, the queries and the results.
    """

    def __init__(self, search_path: str, conditions: Sequence[QueryCondition], results: Sequence[ResultSet]):
        self.search_path = str(search_path)
        self.conditions: List[QueryCondition] = list(conditions)
        self.results: List[ResultSet] = list(results)

    @abstractmethod
    def render(self, output: str) -> Optional[str]:
        """
        Write the report to `output`.
        Returns the report text instead when the format supports writing to stdout
        and `output` is empty.
        """
        pass

    def non_empty_results(self) -> List[ResultSet]:
        return [r for r in self.results if r.matches]

    @staticmethod
    def create_dir(path: Path):
        path.mkdir(parents=True, exist_ok=True)
