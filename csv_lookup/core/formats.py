"""
Generic "does this text look like X" checks.

Used by value-kind inference of queries and by header detection. These are
heuristics: they answer "looks like", never "is a valid".
"""
import ipaddress
import re
from datetime import datetime
from email.utils import parsedate_to_datetime
from urllib.parse import urlparse

NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
DIGITS_RE = re.compile(r"^[0-9]+$")

BOOLEAN_WORDS = frozenset({"true", "false", "yes", "no", "on", "off"})

_LABEL = r"(?!-)[A-Za-z0-9-]{1,63}(?<!-)"
DOMAIN_RE = re.compile(rf"^({_LABEL}\.)+[A-Za-z]{{2,63}}\.?$")
EMAIL_RE = re.compile(rf"^[A-Za-z0-9.!#$%&'*+/=?^_`{{|}}~-]+@({_LABEL}\.)+[A-Za-z]{{2,63}}$")
MAC_RE = re.compile(
    r"^([0-9A-Fa-f]{2}([:-])[0-9A-Fa-f]{2}(\2[0-9A-Fa-f]{2}){4}"
    r"|[0-9A-Fa-f]{4}\.[0-9A-Fa-f]{4}\.[0-9A-Fa-f]{4})$"
)

RELATIVE_DATE_WORDS = frozenset({"now", "today", "tomorrow", "yesterday", "midnight", "noon"})

DATE_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%d.%m.%Y",
    "%d.%m.%Y %H:%M",
    "%d-%m-%Y",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m/%d/%Y %H:%M",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d %Y",
    "%B %d, %Y",
    "%b %d %Y",
    "%b %d, %Y",
    "%B %Y",
    "%H:%M",
    "%H:%M:%S",
    "%I:%M %p",
    "%I%p",
)


def is_numeric(text: str) -> bool:
    """Numeric string: optional sign, digits with optional fraction and exponent."""
    return bool(NUMERIC_RE.match(text))


def looks_like_boolean(text: str) -> bool:
    return text.strip().lower() in BOOLEAN_WORDS


def looks_like_domain(text: str) -> bool:
    return len(text) <= 253 and bool(DOMAIN_RE.match(text))


def looks_like_email(text: str) -> bool:
    return bool(EMAIL_RE.match(text))


def looks_like_ip(text: str) -> bool:
    try:
        ipaddress.ip_address(text)
    except ValueError:
        return False
    return True


def looks_like_mac_address(text: str) -> bool:
    return bool(MAC_RE.match(text))


def looks_like_url(text: str) -> bool:
    if " " in text:
        return False
    try:
        parsed = urlparse(text)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


def looks_like_datetime(text: str) -> bool:
    """
    Best-effort generic date/time check.

    Tries ISO-8601, RFC-2822 and a fixed table of common layouts, plus a few
    relative words. Plain digit runs are never dates.
    """
    candidate = text.strip()
    if not candidate or is_numeric(candidate):
        return False

    if candidate.lower() in RELATIVE_DATE_WORDS:
        return True

    try:
        datetime.fromisoformat(candidate)
        return True
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            datetime.strptime(candidate, fmt)
            return True
        except ValueError:
            continue

    try:
        parsedate_to_datetime(candidate)
        return True
    except (TypeError, ValueError, IndexError):
        return False
