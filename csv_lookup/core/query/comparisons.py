"""
Comparison primitives and the (value kind, operator) dispatch table.

Column values are always raw strings. Literals arrive already coerced to
their string form (or a (lower, upper) pair of strings for range queries).
Ordering uses numeric comparison when both sides are numeric strings and
plain lexicographic comparison otherwise, so "9" < "10" but "b" > "a10".
"""
from decimal import Decimal
from typing import Callable, Dict, Tuple

from csv_lookup.core.formats import is_numeric
from csv_lookup.core.query.operators import Operator, ValueKind

Bounds = Tuple[str, str]


def compare_strings(left: str, right: str) -> int:
    """
    Three-way comparison with numeric-string awareness. Returns -1, 0 or 1.
    Numbers compare as Decimal, exact for integers of any length.
    """
    if is_numeric(left) and is_numeric(right):
        a, b = Decimal(left.strip()), Decimal(right.strip())
    else:
        a, b = left, right
    return (a > b) - (a < b)


def loose_equals(left: str, right: str) -> bool:
    """Equality after trimming; numeric strings compare by magnitude ("1.0" == "1")."""
    return compare_strings(left.strip(), right.strip()) == 0


def _matches(column: str, value: str) -> bool:
    return column == value


def _not_matches(column: str, value: str) -> bool:
    return column != value


def _matches_loose(column: str, value: str) -> bool:
    return loose_equals(column, value)


def _not_matches_loose(column: str, value: str) -> bool:
    return not loose_equals(column, value)


def _contains(column: str, value: str) -> bool:
    return value in column


def _contains_loose(column: str, value: str) -> bool:
    return value.lower() in column.lower()


def _not_contains(column: str, value: str) -> bool:
    return value not in column


def _not_contains_loose(column: str, value: str) -> bool:
    return value.lower() not in column.lower()


def _greater(column: str, value: str) -> bool:
    return compare_strings(column, value) > 0


def _greater_or_equal(column: str, value: str) -> bool:
    return compare_strings(column, value) >= 0


def _lower(column: str, value: str) -> bool:
    return compare_strings(column, value) < 0


def _lower_or_equal(column: str, value: str) -> bool:
    return compare_strings(column, value) <= 0


def _between(column: str, bounds: Bounds) -> bool:
    lower, upper = bounds
    return compare_strings(column, lower) > 0 and compare_strings(column, upper) < 0


def _between_inclusive(column: str, bounds: Bounds) -> bool:
    lower, upper = bounds
    return compare_strings(column, lower) >= 0 and compare_strings(column, upper) <= 0


def _not_between(column: str, bounds: Bounds) -> bool:
    lower, upper = bounds
    return compare_strings(column, lower) <= 0 or compare_strings(column, upper) >= 0


def _not_between_inclusive(column: str, bounds: Bounds) -> bool:
    lower, upper = bounds
    return compare_strings(column, lower) < 0 or compare_strings(column, upper) > 0


def _empty(column: str, _value: None) -> bool:
    return column == ""


def _not_empty(column: str, _value: None) -> bool:
    return column != ""


EQUALITY_FAMILY: Dict[Operator, Callable] = {
    Operator.MATCHES: _matches,
    Operator.MATCHES_LOOSE: _matches_loose,
    Operator.NOT_MATCHES: _not_matches,
    Operator.NOT_MATCHES_LOOSE: _not_matches_loose,
}

SUBSTRING_FAMILY: Dict[Operator, Callable] = {
    Operator.CONTAINS: _contains,
    Operator.CONTAINS_LOOSE: _contains_loose,
    Operator.NOT_CONTAINS: _not_contains,
    Operator.NOT_CONTAINS_LOOSE: _not_contains_loose,
}

ORDERING_FAMILY: Dict[Operator, Callable] = {
    Operator.GREATER: _greater,
    Operator.GREATER_OR_EQUAL: _greater_or_equal,
    Operator.LOWER: _lower,
    Operator.LOWER_OR_EQUAL: _lower_or_equal,
}

TUPLE_FAMILY: Dict[Operator, Callable] = {
    Operator.BETWEEN: _between,
    Operator.BETWEEN_INCLUSIVE: _between_inclusive,
    Operator.NOT_BETWEEN: _not_between,
    Operator.NOT_BETWEEN_INCLUSIVE: _not_between_inclusive,
}

EMPTINESS_FAMILY: Dict[Operator, Callable] = {
    Operator.EMPTY: _empty,
    Operator.NOT_EMPTY: _not_empty,
}

_STRING_COMPARISON_FAMILY = {**EQUALITY_FAMILY, **SUBSTRING_FAMILY, **ORDERING_FAMILY}

FAMILIES_BY_KIND: Dict[ValueKind, Dict[Operator, Callable]] = {
    ValueKind.BOOL: EQUALITY_FAMILY,
    ValueKind.INT: _STRING_COMPARISON_FAMILY,
    ValueKind.FLOAT: _STRING_COMPARISON_FAMILY,
    ValueKind.DATETIME: _STRING_COMPARISON_FAMILY,
    ValueKind.STRING: _STRING_COMPARISON_FAMILY,
    ValueKind.ARRAY: TUPLE_FAMILY,
    ValueKind.NULL: EMPTINESS_FAMILY,
}

# Pairs missing from this table can never match.
MATCHERS: Dict[Tuple[ValueKind, Operator], Callable] = {
    (kind, operator): func
    for kind, family in FAMILIES_BY_KIND.items()
    for operator, func in family.items()
}
