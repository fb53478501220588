import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from csv_lookup.core.config_validator import ConfigValidator

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV = "CSV_LOOKUP_CONFIG_FILE"
CONFIG_DIR_ENV = "CSV_LOOKUP_CONFIG_DIR"
ENV_NAME_ENV = "CSV_LOOKUP_ENV"

def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Loads configuration from YAML files and environment variables.
    An explicit `config_file` wins over CSV_LOOKUP_CONFIG_FILE.
    Returns a dictionary with configuration and status metadata.
    """
    config_status = {
        "status": "OK",
        "error": None,
        "env": get_env(),
        "config_path": None,
        "data": {}
    }

    # --- 1. Read Overrides from ENV ---
    env_override_file = config_file or os.environ.get(CONFIG_FILE_ENV)
    env_override_dir = os.environ.get(CONFIG_DIR_ENV)
    env = config_status["env"]

    # --- 2. Determine Config Directory and Files ---
    if env_override_file:
        config_path = Path(env_override_file)
        config_dir = config_path.parent
        files_to_load = [config_path]
        config_status["config_path"] = str(config_path)
        config_status["source"] = "ARGUMENT" if config_file else f"ENV_FILE ({CONFIG_FILE_ENV})"
    elif env_override_dir:
        config_dir = Path(env_override_dir)
        files_to_load = [
            config_dir / "general.yaml",
            config_dir / f"{env.lower()}.yaml"
        ]
        config_status["source"] = f"ENV_DIR ({CONFIG_DIR_ENV})"
    else:
        project_root = Path(__file__).parent.parent.parent
        config_dir = project_root / "config"
        files_to_load = [
            config_dir / "general.yaml",
            config_dir / f"{env.lower()}.yaml"
        ]
        config_status["source"] = "DEFAULT (repo/site-packages)"

    # --- 3. Load Configs ---
    loaded_config: Dict[str, Any] = {}
    files_found = 0

    try:
        for file_path in files_to_load:
            if file_path.exists():
                files_found += 1
                if not env_override_file:
                    config_status["config_path"] = str(file_path)

                with open(file_path, "r", encoding="utf-8") as f:
                    _merge(loaded_config, yaml.safe_load(f) or {})

        if files_found == 0:
            config_status["status"] = "ERROR"
            config_status["error"] = f"No config files found in {config_dir} (tried: {[str(f) for f in files_to_load]})"
            return config_status

        # --- 3b. Backward Compatibility ---
        # Top-level 'delimiter' predates the 'search' section.
        if "delimiter" in loaded_config:
            val = loaded_config.pop("delimiter")
            search = loaded_config.setdefault("search", {})
            if "delimiter" not in search:
                search["delimiter"] = val
                logger.warning("DEPRECATED: Top-level 'delimiter' found. Mapped to 'search.delimiter'.")
            else:
                logger.info("Ignoring top-level 'delimiter' because 'search.delimiter' is set.")

        # --- 3c. Validation ---
        validation_errors = ConfigValidator.validate(loaded_config)
        config_status["data"] = loaded_config
        if validation_errors:
            config_status["status"] = "ERROR"
            config_status["error"] = "Invalid Configuration:\n" + "\n".join(validation_errors)
            return config_status

        search = loaded_config.get("search", {})
        logger.info(f"Config Loaded: delimiter={search.get('delimiter', 'auto')}, has_headers={search.get('has_headers', 'auto')}")

    except Exception as e:
        config_status["status"] = "ERROR"
        config_status["error"] = str(e)

    return config_status

def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Section-wise merge: env files refine general.yaml instead of replacing whole sections."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base

def get_env() -> str:
    """
    Detects the current environment.
    Checks CSV_LOOKUP_ENV, defaults to DEV.
    """
    return os.environ.get(ENV_NAME_ENV, "DEV").upper()
