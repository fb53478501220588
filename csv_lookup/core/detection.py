"""
Delimiter and header detection.

Both detectors are heuristics over the first few lines of a file. They work
for most everyday CSV files, but CSV comes in too many shapes to guarantee
anything; when the format is known, pass the delimiter and header flag
explicitly instead of relying on detection.
"""
import codecs
import csv
import logging
from dataclasses import dataclass, fields
from typing import Dict, List, Sequence

import chardet

from csv_lookup.core import formats
from csv_lookup.core.errors import DetectionError
from csv_lookup.core.options import DEFAULT_ENCLOSURE, DEFAULT_ESCAPE

logger = logging.getLogger(__name__)

DELIMITER_CANDIDATES = (",", ";", "\t", ".", ":", "|")
DETECTION_DEPTH = 5
ENCODING_SAMPLE_SIZE = 64 * 1024
FALLBACK_ENCODING = "utf-8"


def reader_kwargs(delimiter: str, enclosure: str, escape: str) -> Dict[str, object]:
    """
    Keyword arguments for csv.reader. An empty enclosure turns quoting off,
    an empty escape disables escaping.
    """
    kwargs: Dict[str, object] = {"delimiter": delimiter, "escapechar": escape or None}
    if enclosure:
        kwargs["quotechar"] = enclosure
    else:
        kwargs["quoting"] = csv.QUOTE_NONE
    return kwargs


def split_line(line: str, delimiter: str, enclosure: str = DEFAULT_ENCLOSURE, escape: str = DEFAULT_ESCAPE) -> List[str]:
    """Parses one raw line on its own."""
    try:
        return next(csv.reader([line], **reader_kwargs(delimiter, enclosure, escape)), [])
    except csv.Error:
        return [line]


def detect_delimiter(
    lines: Sequence[str],
    *,
    candidates: Sequence[str] = DELIMITER_CANDIDATES,
    depth: int = DETECTION_DEPTH,
    enclosure: str = DEFAULT_ENCLOSURE,
    escape: str = DEFAULT_ESCAPE,
    filename: str = "",
) -> str:
    """
    Picks the candidate that splits the most of the first `depth` lines into
    more than one field. Ties go to the candidate listed first.
    """
    tally = {candidate: 0 for candidate in candidates}
    for line in list(lines)[:depth]:
        for candidate in candidates:
            if len(split_line(line, candidate, enclosure, escape)) > 1:
                tally[candidate] += 1

    best = max(candidates, key=lambda c: tally[c]) if candidates else None
    if best is None or tally[best] == 0:
        raise DetectionError(f'The CSV delimiter could not be found for file "{filename}"')

    logger.debug(f"Delimiter tally for {filename}: {tally}, picked {best!r}")
    return best


@dataclass(frozen=True)
class RowFeatures:
    only_non_numeric: bool
    only_numeric: bool
    contains_boolean: bool
    contains_domain: bool
    contains_email: bool
    contains_ip: bool
    contains_mac_address: bool
    contains_url: bool
    contains_date: bool


def row_features(values: Sequence[str]) -> RowFeatures:
    return RowFeatures(
        only_non_numeric=all(not formats.is_numeric(v) for v in values),
        only_numeric=all(formats.is_numeric(v) for v in values),
        contains_boolean=any(formats.looks_like_boolean(v) for v in values),
        contains_domain=any(formats.looks_like_domain(v) for v in values),
        contains_email=any(formats.looks_like_email(v) for v in values),
        contains_ip=any(formats.looks_like_ip(v) for v in values),
        contains_mac_address=any(formats.looks_like_mac_address(v) for v in values),
        contains_url=any(formats.looks_like_url(v) for v in values),
        contains_date=any(formats.looks_like_datetime(v) for v in values),
    )


def common_features(rows: Sequence[Sequence[str]]) -> RowFeatures:
    """Per feature: true only if every row has it (vacuously true for no rows)."""
    per_row = [row_features(r) for r in rows]
    return RowFeatures(**{
        f.name: all(getattr(features, f.name) for features in per_row)
        for f in fields(RowFeatures)
    })


def detect_header(
    first_row: Sequence[str],
    following_rows: Sequence[Sequence[str]],
    *,
    depth: int = DETECTION_DEPTH,
    filename: str = "",
) -> bool:
    """
    The first row is a header when any of its features differs from what all
    of the following rows have in common.
    """
    differing = differing_features(first_row, list(following_rows)[:depth])
    logger.debug(f"Header detection for {filename}: differing features {differing}")
    return bool(differing)


def differing_features(first_row: Sequence[str], following_rows: Sequence[Sequence[str]]) -> List[str]:
    """Names of the features that set the first row apart; handy when a guess goes wrong."""
    first = row_features(first_row)
    common = common_features(following_rows)
    return [f.name for f in fields(RowFeatures) if getattr(first, f.name) != getattr(common, f.name)]



def detect_encoding(sample: bytes, *, filename: str = "") -> str:
    """
    Text encoding of a file from its first bytes.

    A sample that decodes as UTF-8 is UTF-8 (utf-8-sig when it starts with a
    BOM). Anything else is left to chardet, with UTF-8 as the last resort.
    """
    if sample.startswith(codecs.BOM_UTF8):
        return "utf-8-sig"
    try:
        # final=False: the sample may end inside a multi-byte character
        codecs.getincrementaldecoder("utf-8")().decode(sample, final=False)
        return "utf-8"
    except UnicodeDecodeError:
        pass

    guess = chardet.detect(sample)
    encoding = (guess.get("encoding") or "").lower()
    if encoding:
        try:
            codecs.lookup(encoding)
        except LookupError:
            logger.warning(f"chardet suggested unknown encoding {encoding!r} for {filename}")
            encoding = ""

    if not encoding:
        logger.warning(f"Encoding of {filename} could not be detected, using {FALLBACK_ENCODING}")
        return FALLBACK_ENCODING

    logger.debug(f"chardet detected encoding {encoding} for {filename} (confidence {guess.get('confidence', 0.0):.2f})")
    return encoding
