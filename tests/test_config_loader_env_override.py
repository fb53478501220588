import os
import pytest
import yaml
from pathlib import Path
from csv_lookup.core.config_loader import load_config

@pytest.fixture
def clean_env(monkeypatch):
    """Ensure no config override leaks in from the environment."""
    monkeypatch.delenv("CSV_LOOKUP_CONFIG_FILE", raising=False)
    monkeypatch.delenv("CSV_LOOKUP_CONFIG_DIR", raising=False)
    monkeypatch.delenv("CSV_LOOKUP_ENV", raising=False)

def test_load_config_defaults(clean_env):
    """Repo config/ is used when nothing is overridden."""
    config = load_config()
    assert config["status"] == "OK"
    assert config["env"] == "DEV"
    assert config["source"].startswith("DEFAULT")
    # dev.yaml refines general.yaml section-wise
    assert config["data"]["logging"]["level"] == "DEBUG"
    assert config["data"]["search"]["delimiter"] == "auto"
    assert config["data"]["report"]["format"] == "text"

def test_config_file_override(clean_env, monkeypatch, tmp_path):
    cfg_file = tmp_path / "custom_config.yaml"
    with open(cfg_file, "w") as f:
        yaml.dump({"search": {"delimiter": ";", "has_headers": True}}, f)

    monkeypatch.setenv("CSV_LOOKUP_CONFIG_FILE", str(cfg_file))
    config = load_config()

    assert config["status"] == "OK"
    assert config["config_path"] == str(cfg_file)
    assert config["source"].startswith("ENV_FILE")
    assert config["data"]["search"]["delimiter"] == ";"

def test_explicit_file_wins_over_env(clean_env, monkeypatch, tmp_path):
    env_file = tmp_path / "env.yaml"
    env_file.write_text("report:\n  format: xml\n", encoding="utf-8")
    arg_file = tmp_path / "arg.yaml"
    arg_file.write_text("report:\n  format: html\n", encoding="utf-8")

    monkeypatch.setenv("CSV_LOOKUP_CONFIG_FILE", str(env_file))
    config = load_config(str(arg_file))

    assert config["source"] == "ARGUMENT"
    assert config["data"]["report"]["format"] == "html"

def test_config_dir_override(clean_env, monkeypatch, tmp_path):
    with open(tmp_path / "general.yaml", "w") as f:
        yaml.dump({"search": {"delimiter": ",", "escape": "\\"}, "logging": {"level": "INFO"}}, f)
    with open(tmp_path / "prod.yaml", "w") as f:
        yaml.dump({"search": {"delimiter": "|"}}, f)

    monkeypatch.setenv("CSV_LOOKUP_CONFIG_DIR", str(tmp_path))
    monkeypatch.setenv("CSV_LOOKUP_ENV", "prod")
    config = load_config()

    assert config["status"] == "OK"
    assert config["env"] == "PROD"
    assert config["data"]["search"] == {"delimiter": "|", "escape": "\\"}
    assert config["data"]["logging"]["level"] == "INFO"
    # config_path points at the last file loaded
    assert config["config_path"] == str(tmp_path / "prod.yaml")

def test_missing_config_dir(clean_env, monkeypatch, tmp_path):
    monkeypatch.setenv("CSV_LOOKUP_CONFIG_DIR", str(tmp_path / "nowhere"))
    config = load_config()
    assert config["status"] == "ERROR"
    assert "No config files found" in config["error"]

def test_broken_yaml_is_reported(clean_env, tmp_path):
    cfg_file = tmp_path / "broken.yaml"
    cfg_file.write_text("search: [unclosed\n", encoding="utf-8")
    config = load_config(str(cfg_file))
    assert config["status"] == "ERROR"
    assert config["error"]
