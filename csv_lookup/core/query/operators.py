import enum
from typing import FrozenSet


class Operator(str, enum.Enum):
    MATCHES = "matches"
    MATCHES_LOOSE = "matches_loose"
    NOT_MATCHES = "not_matches"
    NOT_MATCHES_LOOSE = "not_matches_loose"
    CONTAINS = "contains"
    CONTAINS_LOOSE = "contains_loose"
    NOT_CONTAINS = "not_contains"
    NOT_CONTAINS_LOOSE = "not_contains_loose"
    GREATER = "greater"
    GREATER_OR_EQUAL = "greater_or_equal"
    LOWER = "lower"
    LOWER_OR_EQUAL = "lower_or_equal"
    BETWEEN = "between"
    BETWEEN_INCLUSIVE = "between_inclusive"
    NOT_BETWEEN = "not_between"
    NOT_BETWEEN_INCLUSIVE = "not_between_inclusive"
    EMPTY = "empty"
    NOT_EMPTY = "not_empty"

    def __str__(self) -> str:
        return self.value


class ValueKind(str, enum.Enum):
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    DATETIME = "datetime"
    STRING = "string"
    ARRAY = "array"
    NULL = "null"

    def __str__(self) -> str:
        return self.value


TUPLE_OPERATORS: FrozenSet[Operator] = frozenset({
    Operator.BETWEEN,
    Operator.BETWEEN_INCLUSIVE,
    Operator.NOT_BETWEEN,
    Operator.NOT_BETWEEN_INCLUSIVE,
})

EMPTINESS_OPERATORS: FrozenSet[Operator] = frozenset({
    Operator.EMPTY,
    Operator.NOT_EMPTY,
})


def allowed_operators() -> list:
    return [operator.value for operator in Operator]
