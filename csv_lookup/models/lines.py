import enum
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

from csv_lookup.core.errors import LogicError, NotFoundError, ValidationError
from csv_lookup.core.utils.ordinals import ordinal


@dataclass(frozen=True, eq=False)
class LineRecord:
    """
    One parsed line of a CSV file: its fields plus where it came from.
    Compared by identity, two lines with the same text are still two lines.
    """
    line_number: int
    filename: str
    fields: Tuple[str, ...]

    def __post_init__(self):
        if isinstance(self.line_number, bool) or not isinstance(self.line_number, int) or self.line_number < 1:
            raise ValidationError(f"Line number must be a positive integer, got {self.line_number!r}")
        fields = tuple(self.fields)
        if not all(isinstance(f, str) for f in fields):
            raise ValidationError("Line can only contain strings")
        object.__setattr__(self, "fields", fields)

    def get_column(self, index: int) -> str:
        if not 0 <= index < len(self.fields):
            raise NotFoundError(
                f'Can not query the {ordinal(index + 1)} column, does not exist in line '
                f'{self.line_number} of file "{self.filename}".'
            )
        return self.fields[index]

    def column_count(self) -> int:
        return len(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def joined(self, delimiter: str, enclosure: str = "") -> str:
        """Fields wrapped in the enclosure and joined back with the delimiter."""
        return delimiter.join(f"{enclosure}{value}{enclosure}" for value in self.fields)


@dataclass
class ResultSet:
    """
    Outcome of searching one file. Matches keep scan order.
    """
    filename: str
    delimiter: str
    enclosure_character: str
    escape_character: str
    headers: Optional[LineRecord] = None
    matches: List[LineRecord] = field(default_factory=list)
    total_lines: int = 0
    _finished: bool = field(default=False, init=False, repr=False)

    def add_match(self, line: LineRecord):
        if not isinstance(line, LineRecord):
            raise ValidationError(f"Matches can only contain instances of {LineRecord.__name__}")
        self._ensure_open()
        self.matches.append(line)

    def remove_match(self, line: LineRecord):
        self._ensure_open()
        self.matches = [m for m in self.matches if m is not line]

    def set_matches(self, matches: Sequence[LineRecord]):
        if not all(isinstance(m, LineRecord) for m in matches):
            raise ValidationError(f"Matches can only contain instances of {LineRecord.__name__}")
        self._ensure_open()
        self.matches = list(matches)

    def finish(self, total_lines: int):
        """Records the scanned line count and freezes the result."""
        self._ensure_open()
        self.total_lines = total_lines
        self._finished = True

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def match_count(self) -> int:
        return len(self.matches)

    def column_count(self) -> int:
        """Header width, else the width of the first match, else 0."""
        if self.headers is not None:
            return self.headers.column_count()
        if self.matches:
            return self.matches[0].column_count()
        return 0

    def _ensure_open(self):
        if self._finished:
            raise LogicError(f'Result for "{self.filename}" is complete and can not be changed')


class SkipReason(str, enum.Enum):
    NOT_A_FILE = "not_a_file"
    NOT_READABLE = "not_readable"
    NOT_CSV = "not_csv_file"


@dataclass(frozen=True)
class SkippedFile:
    path: str
    reason: SkipReason
