import pytest
from csv_lookup.core.config_validator import ConfigValidator

def test_config_strict_valid():
    config = {
        "search": {
            "delimiter": "auto",
            "enclosure": '"',
            "escape": "\\",
            "has_headers": True,
            "extensions": [".csv", ".tsv"],
        },
        "report": {"format": "xml", "output": "out/report.xml"},
        "logging": {"level": "debug"},
        "queries": [{"column": "stock", "type": "greater", "value": 15}],
    }
    assert ConfigValidator.validate(config) == []

def test_empty_config_is_valid():
    assert ConfigValidator.validate({}) == []

def test_tab_delimiter_escape_is_accepted():
    assert ConfigValidator.validate({"search": {"delimiter": "\\t"}}) == []

@pytest.mark.parametrize("config,message", [
    ([], "root must be a dictionary"),
    ({"search": "auto"}, "'search' must be a dictionary"),
    ({"search": {"delimiter": ",,"}}, "'search.delimiter' must be a single character"),
    ({"search": {"enclosure": "''"}}, "Field 'enclosure' must be a single character"),
    ({"search": {"has_headers": "maybe"}}, "'search.has_headers' must be true, false or auto"),
    ({"search": {"extensions": ".csv"}}, "'search.extensions' must be a list"),
    ({"report": {"format": "pdf"}}, "'report.format' must be one of"),
    ({"report": {"output": 5}}, "'report.output' must be a string"),
    ({"logging": {"level": "LOUD"}}, "'logging.level' must be one of"),
    ({"queries": {"type": "empty"}}, "'queries' must be a list"),
    ({"queries": [{"column": "a"}]}, "'queries[0]' is missing 'type'"),
    ({"queries": ["a matches b"]}, "'queries[0]' must be a dictionary"),
])
def test_config_strict_errors(config, message):
    errors = ConfigValidator.validate(config)
    assert any(message in e for e in errors), errors
