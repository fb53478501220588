"""
Builds QueryConditions from command line tokens and config entries.
"""
import logging
from typing import Any, Dict, List, Sequence

from csv_lookup.core.errors import ValidationError
from csv_lookup.core.query.models import Column, QueryCondition
from csv_lookup.core.query.operators import EMPTINESS_OPERATORS, TUPLE_OPERATORS, Operator

logger = logging.getLogger(__name__)

ANY_COLUMN = "*"


def parse_column(text: Any) -> Column:
    """
    '*' or empty -> any column; all digits -> 0-based index; else header name.
    """
    if text is None or isinstance(text, int):
        return text
    text = str(text)
    if text in (ANY_COLUMN, ""):
        return None
    if text.isdigit():
        return int(text)
    return text


def condition_from_tokens(tokens: Sequence[str]) -> QueryCondition:
    """
    COLUMN OPERATOR [VALUE [UPPER]]
    """
    if len(tokens) < 2:
        raise ValidationError(f"A query needs at least a column and a type, got: {' '.join(tokens)}")

    column = parse_column(tokens[0])
    operator = tokens[1]
    rest = list(tokens[2:])

    if operator in (o.value for o in TUPLE_OPERATORS):
        if len(rest) != 2:
            raise ValidationError(f'Query type "{operator}" needs a lower and an upper value')
        value: Any = (rest[0], rest[1])
    elif operator in (o.value for o in EMPTINESS_OPERATORS):
        if rest:
            raise ValidationError(f'Query type "{operator}" does not take a value')
        value = None
    else:
        if len(rest) != 1:
            raise ValidationError(f'Query type "{operator}" needs exactly one value')
        value = rest[0]

    return QueryCondition(column, operator, value)


def condition_from_dict(entry: Dict[str, Any]) -> QueryCondition:
    """
    Config form: {column: ..., type: ..., value: ...} or value-lower/value-upper.
    """
    if not isinstance(entry, dict):
        raise ValidationError(f"Query entry must be a mapping, got {type(entry).__name__}")
    if "type" not in entry:
        raise ValidationError(f"Query entry is missing 'type': {entry}")

    if "value-lower" in entry or "value-upper" in entry:
        value: Any = (entry.get("value-lower"), entry.get("value-upper"))
    else:
        value = entry.get("value")

    return QueryCondition(parse_column(entry.get("column")), entry["type"], value)


def conditions_from_config(entries: List[Dict[str, Any]]) -> List[QueryCondition]:
    conditions = [condition_from_dict(e) for e in entries or []]
    logger.debug(f"Loaded {len(conditions)} queries from config")
    return conditions


def is_tuple_operator(operator: str) -> bool:
    return operator in (o.value for o in TUPLE_OPERATORS)


def operator_names() -> List[str]:
    return [o.value for o in Operator]
