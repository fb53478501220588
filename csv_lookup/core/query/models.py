import re
from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union

from csv_lookup.core.errors import LogicError, ValidationError
from csv_lookup.core.formats import DIGITS_RE, looks_like_datetime
from csv_lookup.core.query.comparisons import MATCHERS
from csv_lookup.core.query.operators import (
    EMPTINESS_OPERATORS,
    TUPLE_OPERATORS,
    Operator,
    ValueKind,
    allowed_operators,
)

FLOAT_RE = re.compile(r"^[+-]?[0-9]*\.?[0-9]+$")
BOOLEAN_LITERALS = ("true", "false")

Column = Union[str, int, None]
Scalar = Union[bool, int, float, str]
Value = Union[Scalar, Tuple[str, str], None]


def infer_kind(value: Any) -> ValueKind:
    """
    Infers the semantic kind of a query literal. First match wins:
    bool, int, float, datetime, string, array (2-tuple of strings), null.
    """
    if value is True or value is False or value in BOOLEAN_LITERALS:
        return ValueKind.BOOL
    if isinstance(value, int) or (isinstance(value, str) and DIGITS_RE.match(value)):
        return ValueKind.INT
    if isinstance(value, float) or (isinstance(value, str) and FLOAT_RE.match(value)):
        return ValueKind.FLOAT
    if isinstance(value, str) and looks_like_datetime(value):
        return ValueKind.DATETIME
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, tuple) and len(value) == 2 and all(isinstance(v, str) for v in value):
        return ValueKind.ARRAY
    if value is None:
        return ValueKind.NULL
    raise LogicError(f"Can not do query on unsupported value type: {type(value).__name__}")


def literal_text(value: Scalar) -> str:
    """String form of a literal as it would be written in a CSV cell."""
    if isinstance(value, float) and value.is_integer():
        # 3.0 -> "3", 1e16 -> "10000000000000000"
        return str(int(value))
    return str(value)


def _normalize_operator(operator: Union[Operator, str]) -> Operator:
    try:
        return Operator(operator)
    except ValueError:
        raise ValidationError(
            f"Can not use given query type ({operator}). Use one of: {', '.join(allowed_operators())}"
        ) from None


def _normalize_value(operator: Operator, value: Any) -> Value:
    tuple_message = (
        f"When query type is one of {', '.join(sorted(o.value for o in TUPLE_OPERATORS))}, "
        "value must be a tuple of exactly 2 elements (lower, upper)"
    )

    if isinstance(value, (list, tuple)):
        if operator not in TUPLE_OPERATORS or len(value) != 2:
            raise ValidationError(tuple_message)
        bounds = []
        for bound in value:
            if isinstance(bound, bool) or not isinstance(bound, (str, int, float)):
                raise ValidationError(
                    f"Range bounds must be strings or numbers, got {type(bound).__name__}"
                )
            bounds.append(literal_text(bound))
        return bounds[0], bounds[1]

    if operator in TUPLE_OPERATORS:
        raise ValidationError(tuple_message)

    if value is None:
        if operator not in EMPTINESS_OPERATORS:
            raise ValidationError(f'Query type "{operator}" requires a value')
        return None

    if operator in EMPTINESS_OPERATORS:
        raise ValidationError(f'Query type "{operator}" does not take a value')

    if not isinstance(value, (bool, int, float, str)):
        raise ValidationError(
            "Value must be one of these types: string, int, float, bool, 2-tuple, None"
        )
    return value


@dataclass(frozen=True)
class QueryCondition:
    """
    One typed predicate against a column of a row.

    column: header name, 0-based index, or None for "any column".
    The literal's inferred kind picks the comparison family; an operator the
    family does not support simply never matches.
    """
    column: Column
    operator: Operator
    value: Value = None
    kind: ValueKind = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.column is not None and (
            isinstance(self.column, bool) or not isinstance(self.column, (str, int))
        ):
            raise ValidationError(f"Column must be a header name, an index or None, got {self.column!r}")
        if isinstance(self.column, int) and self.column < 0:
            raise ValidationError(f"Column index can not be negative, got {self.column}")

        operator = _normalize_operator(self.operator)
        value = _normalize_value(operator, self.value)

        object.__setattr__(self, "operator", operator)
        object.__setattr__(self, "value", value)
        object.__setattr__(self, "kind", infer_kind(value))

    @property
    def query_type(self) -> str:
        return self.operator.value

    def value_as_bool(self) -> str:
        return "true" if self.value in (True, "true") else "false"

    def value_as_string(self) -> str:
        if isinstance(self.value, tuple):
            raise LogicError("Can not fetch query value as string, value is a range")
        if self.value is None:
            return ""
        return literal_text(self.value)

    def value_as_tuple(self) -> Tuple[str, str]:
        if not isinstance(self.value, tuple):
            raise LogicError("Can not fetch query value as range, value is a scalar")
        return self.value

    def display_value(self) -> Union[str, Tuple[str, str]]:
        """Literal as shown in reports: the coerced string, or the (lower, upper) pair."""
        if self.kind is ValueKind.BOOL:
            return self.value_as_bool()
        if self.kind is ValueKind.ARRAY:
            return self.value_as_tuple()
        return self.value_as_string()

    def _comparison_value(self) -> Optional[Union[str, Tuple[str, str]]]:
        if self.kind is ValueKind.NULL:
            return None
        return self.display_value()

    def match_value(self, column_value: str) -> bool:
        matcher = MATCHERS.get((self.kind, self.operator))
        if matcher is None:
            return False
        return matcher(column_value, self._comparison_value())

    def describe(self) -> str:
        target = "any column" if self.column is None else f"column {self.column!r}"
        value = self.display_value()
        if isinstance(value, tuple):
            value = f"{value[0]!r}..{value[1]!r}"
        elif self.kind is not ValueKind.NULL:
            value = repr(value)
        else:
            value = ""
        return f"{target} {self.operator.value} {value}".rstrip()
