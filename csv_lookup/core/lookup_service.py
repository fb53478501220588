import os
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from csv_lookup.core.errors import AccessError
from csv_lookup.core.options import SearchOptions
from csv_lookup.core.query.models import QueryCondition
from csv_lookup.core.source import SourceFile
from csv_lookup.models.lines import ResultSet, SkippedFile, SkipReason

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = (".csv",)


class LookupService:
    """
    Runs a query over one CSV file or every CSV file directly inside a directory.

    Files are searched one after the other. An error in any file stops the
    whole batch; nothing is caught here.
    """

    def __init__(self, options: Optional[SearchOptions] = None, extensions: Sequence[str] = DEFAULT_EXTENSIONS):
        self.options = options or SearchOptions()
        self.extensions = tuple(e.lower() if e.startswith(".") else f".{e.lower()}" for e in extensions)
        self.results: List[ResultSet] = []
        self.skipped_files: List[SkippedFile] = []

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "LookupService":
        search = (config or {}).get("search", {}) or {}
        return cls(
            SearchOptions.from_config(search),
            search.get("extensions") or DEFAULT_EXTENSIONS,
        )

    def search(self, conditions: Iterable[QueryCondition], path: Union[str, Path]) -> List[ResultSet]:
        """Results and skips describe the latest search only."""
        self.results = []
        self.skipped_files = []
        conditions = list(conditions)
        p = Path(path)

        if p.is_dir():
            self._dir_search(conditions, p)
        elif p.is_file():
            self._file_search(conditions, p)
        else:
            raise AccessError(f'Search path "{path}" is neither a file nor a directory.')

        logger.info(
            f"Search of {path} done: {len(self.results)} files searched, "
            f"{sum(r.match_count for r in self.results)} matches, {len(self.skipped_files)} skipped"
        )
        return self.results

    def classify(self, entry: os.DirEntry) -> Optional[SkipReason]:
        """Why a directory entry is not searched, or None when it is."""
        if not entry.is_file():
            return SkipReason.NOT_A_FILE
        if not os.access(entry.path, os.R_OK):
            return SkipReason.NOT_READABLE
        if Path(entry.name).suffix.lower() not in self.extensions:
            return SkipReason.NOT_CSV
        return None

    def candidates(self, directory: Union[str, Path]) -> List[Dict[str, Any]]:
        """
        Lists every entry of a directory with its skip reason (None = searchable).
        """
        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            raise AccessError(f"Could not read dir {directory}: {e}") from e

        return [
            {"path": os.path.realpath(entry.path), "name": entry.name, "reason": self.classify(entry)}
            for entry in entries
        ]

    def _dir_search(self, conditions: List[QueryCondition], directory: Path):
        for candidate in self.candidates(directory):
            reason = candidate["reason"]
            if reason is not None:
                logger.debug(f"Skipping {candidate['path']}: {reason.value}")
                self.skipped_files.append(SkippedFile(candidate["path"], reason))
                continue
            self._file_search(conditions, Path(candidate["path"]))

    def _file_search(self, conditions: List[QueryCondition], file_path: Path):
        logger.debug(f"Searching {file_path}")
        opts = self.options
        with SourceFile(file_path, opts.has_headers, opts.delimiter, opts.enclosure, opts.escape) as source:
            self.results.append(source.find_by(conditions))
