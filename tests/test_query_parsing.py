import pytest
from csv_lookup.core.errors import ValidationError
from csv_lookup.core.query.operators import Operator
from csv_lookup.core.query.parsing import (
    condition_from_dict,
    condition_from_tokens,
    conditions_from_config,
    is_tuple_operator,
    operator_names,
    parse_column,
)


@pytest.mark.parametrize("text,column", [
    ("*", None),
    ("", None),
    (None, None),
    ("0", 0),
    ("12", 12),
    ("stock", "stock"),
    ("2nd", "2nd"),
])
def test_parse_column(text, column):
    assert parse_column(text) == column


def test_condition_from_tokens():
    condition = condition_from_tokens(["stock", "greater", "15"])
    assert condition.column == "stock"
    assert condition.operator is Operator.GREATER
    assert condition.value == "15"

    ranged = condition_from_tokens(["1", "between_inclusive", "15", "17"])
    assert ranged.column == 1
    assert ranged.value == ("15", "17")

    empty = condition_from_tokens(["*", "empty"])
    assert empty.column is None
    assert empty.value is None


@pytest.mark.parametrize("tokens", [
    ["stock"],
    ["stock", "greater"],
    ["stock", "greater", "1", "2"],
    ["stock", "between", "1"],
    ["stock", "empty", "x"],
    ["stock", "bigger", "1"],
])
def test_bad_tokens(tokens):
    with pytest.raises(ValidationError):
        condition_from_tokens(tokens)


def test_condition_from_dict():
    assert condition_from_dict({"column": "name", "type": "contains", "value": "o"}).column == "name"
    ranged = condition_from_dict({"column": 1, "type": "between", "value-lower": 1, "value-upper": "9"})
    assert ranged.value == ("1", "9")
    assert condition_from_dict({"type": "not_empty"}).column is None


def test_condition_from_dict_errors():
    with pytest.raises(ValidationError):
        condition_from_dict({"column": "name"})
    with pytest.raises(ValidationError):
        condition_from_dict(["name", "matches", "x"])


def test_conditions_from_config():
    assert conditions_from_config(None) == []
    entries = [{"column": "*", "type": "matches", "value": "true"}]
    assert conditions_from_config(entries)[0].column is None


def test_operator_helpers():
    assert len(operator_names()) == 18
    assert is_tuple_operator("not_between")
    assert not is_tuple_operator("greater")
