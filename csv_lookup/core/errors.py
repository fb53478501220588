class CsvLookupError(Exception):
    """Base class for every error raised by csv-lookup."""


class ValidationError(CsvLookupError, ValueError):
    """Malformed arguments: bad delimiter, wrong value shape or type for a query."""


class AccessError(CsvLookupError, OSError):
    """File or directory missing or unreadable."""


class DetectionError(CsvLookupError):
    """Delimiter or header presence could not be determined."""


class LogicError(CsvLookupError):
    """The request can not be satisfied as stated (e.g. no conditions given)."""


class NotFoundError(CsvLookupError, LookupError):
    """A column index or header name does not exist."""
