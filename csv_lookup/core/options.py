import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)

DEFAULT_ENCLOSURE = '"'
DEFAULT_ESCAPE = "\\"


class Auto(enum.Enum):
    """A setting the caller left for detection. Distinct from None and False."""
    AUTO = "auto"

    def __repr__(self) -> str:
        return "AUTO"


AUTO = Auto.AUTO


def parse_tristate(value: Any) -> Union[bool, Auto]:
    """
    Maps config/CLI input onto True / False / AUTO.
    """
    if value is None or value is AUTO:
        return AUTO
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("auto", ""):
        return AUTO
    if text in ("true", "yes", "1"):
        return True
    if text in ("false", "no", "0"):
        return False
    raise ValueError(f"Expected true, false or auto, got {value!r}")


def parse_delimiter(value: Any) -> Union[str, Auto]:
    if value is None or value is AUTO:
        return AUTO
    if isinstance(value, str) and value.lower() == "auto":
        return AUTO
    # YAML users tend to write the tab as the escape sequence.
    if value == "\\t":
        return "\t"
    return str(value)


@dataclass(frozen=True)
class SearchOptions:
    """
    Per-search format parameters handed to every SourceFile of a batch.
    """
    delimiter: Union[str, Auto] = AUTO
    enclosure: str = DEFAULT_ENCLOSURE
    escape: str = DEFAULT_ESCAPE
    has_headers: Union[bool, Auto] = AUTO

    @classmethod
    def from_config(cls, section: Dict[str, Any]) -> "SearchOptions":
        section = section or {}
        options = cls(
            delimiter=parse_delimiter(section.get("delimiter")),
            enclosure=section.get("enclosure", DEFAULT_ENCLOSURE),
            escape=section.get("escape", DEFAULT_ESCAPE),
            has_headers=parse_tristate(section.get("has_headers")),
        )
        logger.debug(f"Search options from config: {options}")
        return options
