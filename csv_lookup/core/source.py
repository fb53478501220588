import codecs
import csv
import logging
import os
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

from csv_lookup.core.detection import (
    DELIMITER_CANDIDATES,
    DETECTION_DEPTH,
    ENCODING_SAMPLE_SIZE,
    detect_delimiter,
    detect_encoding,
    detect_header,
    reader_kwargs,
)
from csv_lookup.core.errors import AccessError, DetectionError, LogicError, NotFoundError, ValidationError
from csv_lookup.core.options import AUTO, DEFAULT_ENCLOSURE, DEFAULT_ESCAPE, Auto
from csv_lookup.core.query.models import Column, QueryCondition
from csv_lookup.models.lines import LineRecord, ResultSet

logger = logging.getLogger(__name__)

# (line number, raw fields) of one parsed record, None at end of file
RawRecord = Optional[Tuple[int, List[str]]]


class SourceFile:
    """
    One open CSV file: resolves its delimiter and header row, then scans its
    lines for query matches.

    Use as a context manager; the file handle is released on every exit path,
    including errors raised while the object is still being built.
    """

    def __init__(
        self,
        path: Union[str, Path],
        has_headers: Union[bool, Auto] = AUTO,
        delimiter: Union[str, Auto] = AUTO,
        enclosure: str = DEFAULT_ENCLOSURE,
        escape: str = DEFAULT_ESCAPE,
        *,
        candidates: Sequence[str] = DELIMITER_CANDIDATES,
        depth: int = DETECTION_DEPTH,
        encoding: Union[str, Auto] = AUTO,
    ):
        file_path = Path(path)
        if not file_path.is_file():
            raise AccessError(f'File "{path}" not found.')
        if not os.access(file_path, os.R_OK):
            raise AccessError(f'File "{path}" can not be read.')

        if delimiter is not AUTO and (not isinstance(delimiter, str) or len(delimiter) != 1):
            raise ValidationError(
                f'The delimiter argument must be exactly one character! "{delimiter}" given.'
            )
        if has_headers is not AUTO and not isinstance(has_headers, bool):
            raise ValidationError(f"has_headers must be True, False or AUTO, got {has_headers!r}")
        enclosure = enclosure or ""
        escape = escape or ""
        if len(enclosure) > 1 or len(escape) > 1:
            raise ValidationError("Enclosure and escape characters can not be more than one character")
        if encoding is not AUTO:
            try:
                codecs.lookup(encoding)
            except (LookupError, TypeError) as e:
                raise ValidationError(f"Unknown encoding {encoding!r}") from e

        self.filename = str(file_path.resolve())
        self.enclosure_character = enclosure
        self.escape_character = escape
        self._candidates = tuple(candidates)
        self._depth = depth
        self._headers: Optional[LineRecord] = None
        self._reader = None

        try:
            if encoding is AUTO:
                with open(file_path, "rb") as raw:
                    encoding = detect_encoding(raw.read(ENCODING_SAMPLE_SIZE), filename=self.filename)
            self.encoding = encoding
            self._handle = open(file_path, "r", encoding=encoding, errors="replace", newline="")
        except OSError as e:
            raise AccessError(f'File "{path}" can not be read: {e}') from e

        try:
            self.delimiter = self._detect_delimiter() if delimiter is AUTO else delimiter
            self._headers = self._resolve_headers(has_headers)
            self.rewind()
        except BaseException:
            self.close()
            raise

    def __enter__(self) -> "SourceFile":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def close(self):
        if self._handle is not None and not self._handle.closed:
            self._handle.close()
            logger.debug(f"Closed {self.filename}")

    @property
    def closed(self) -> bool:
        return self._handle.closed

    @property
    def headers(self) -> Optional[LineRecord]:
        return self._headers

    # --- reading ---

    def _restart(self):
        self._ensure_open()
        self._handle.seek(0)
        self._reader = csv.reader(
            self._handle, **reader_kwargs(self.delimiter, self.enclosure_character, self.escape_character)
        )

    def _read_record(self) -> RawRecord:
        line_number = self._reader.line_num + 1
        try:
            fields = next(self._reader, None)
        except csv.Error as e:
            raise LogicError(
                f'Can not parse line {line_number} of file "{self.filename}". Bad format? ({e})'
            ) from e
        if fields is None:
            return None
        return line_number, fields

    def _next_line(self) -> Optional[LineRecord]:
        """Next non-blank line, or None at the end of the file."""
        while True:
            record = self._read_record()
            if record is None:
                return None
            line_number, fields = record
            if any(fields):
                return LineRecord(line_number, self.filename, fields)

    def rewind(self):
        """Positions the cursor on the first data line (past the header, if any)."""
        self._restart()
        if self._headers is not None:
            self._read_record()

    def rows(self) -> Iterator[LineRecord]:
        while True:
            line = self._next_line()
            if line is None:
                return
            yield line

    # --- detection ---

    def _detect_delimiter(self) -> str:
        self._ensure_open()
        self._handle.seek(0)
        lines = []
        for _ in range(self._depth):
            line = self._handle.readline()
            if not line:
                break
            lines.append(line)

        delimiter = detect_delimiter(
            lines,
            candidates=self._candidates,
            depth=self._depth,
            enclosure=self.enclosure_character,
            escape=self.escape_character,
            filename=self.filename,
        )
        logger.info(f"Detected delimiter {delimiter!r} for {self.filename}")
        return delimiter

    def _first_line(self) -> Optional[LineRecord]:
        self._restart()
        record = self._read_record()
        if record is None or not any(record[1]):
            return None
        return LineRecord(record[0], self.filename, record[1])

    def _resolve_headers(self, has_headers: Union[bool, Auto]) -> Optional[LineRecord]:
        if has_headers is False:
            return None

        first = self._first_line()

        if has_headers is True:
            if first is None:
                raise LogicError(
                    f'Can not get CSV headers of "{self.filename}", first line could not be properly read. Bad format?'
                )
            return first

        if first is None:
            raise DetectionError(
                f'Can not detect CSV headers of "{self.filename}", first line could not be properly read. Bad format?'
            )

        following = []
        while len(following) < self._depth:
            line = self._next_line()
            if line is None:
                break
            following.append(line.fields)

        if detect_header(first.fields, following, depth=self._depth, filename=self.filename):
            logger.info(f"Detected header row in {self.filename}: {list(first.fields)}")
            return first
        logger.info(f"No header row detected in {self.filename}")
        return None

    # --- searching ---

    def _resolve_column(self, column: Column) -> Optional[int]:
        if column is None or isinstance(column, int):
            return column

        if self._headers is None:
            raise NotFoundError(
                f'Can not search in column "{column}". No headers are defined in CSV file "{self.filename}".'
            )
        try:
            return self._headers.fields.index(column)
        except ValueError:
            raise NotFoundError(
                f'Can not search in column "{column}". Column not found in headers of CSV file "{self.filename}".'
            ) from None

    @staticmethod
    def _line_matches(line: LineRecord, index: Optional[int], condition: QueryCondition) -> bool:
        if index is None:
            return any(condition.match_value(value) for value in line.fields)
        return condition.match_value(line.get_column(index))

    def find_by(self, conditions: Iterable[QueryCondition]) -> ResultSet:
        """
        Scans every data line and keeps those matching all conditions.
        A condition without a column matches when any field of the line does.
        """
        conditions = list(conditions)
        if not conditions:
            raise LogicError("Can not search without any query conditions")

        resolved = [(self._resolve_column(c.column), c) for c in conditions]

        result = ResultSet(
            filename=self.filename,
            delimiter=self.delimiter,
            enclosure_character=self.enclosure_character,
            escape_character=self.escape_character,
            headers=self._headers,
        )

        self.rewind()
        total_lines = 0
        for line in self.rows():
            total_lines += 1
            if all(self._line_matches(line, index, condition) for index, condition in resolved):
                result.add_match(line)

        result.finish(total_lines)
        logger.info(f"Searched {self.filename}: {result.match_count} of {total_lines} lines matched")
        return result

    def find(self, search: str, column: Column = None, partial: bool = True) -> Dict[int, List[int]]:
        """
        Plain text lookup. Returns {line number: [matching column indexes]}.
        partial=True looks for the text inside cells, False wants the whole cell.
        """
        index = self._resolve_column(column)

        def hit(value: str) -> bool:
            return search in value if partial else value == search

        found: Dict[int, List[int]] = {}
        self.rewind()
        for line in self.rows():
            indexes = range(line.column_count()) if index is None else [index]
            for i in indexes:
                if hit(line.get_column(i)):
                    found.setdefault(line.line_number, []).append(i)
        return found

    def _ensure_open(self):
        if self._handle.closed:
            raise LogicError(f'File "{self.filename}" is already closed')
