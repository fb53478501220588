from typing import Dict, Any, List
import logging

logger = logging.getLogger(__name__)

REPORT_FORMATS = ("text", "xml", "html")
TRISTATE_WORDS = ("auto", "true", "false")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

class ConfigValidator:
    """
    Validates configuration structure and types.
    Every section is optional; present sections are checked strictly.
    """

    @staticmethod
    def validate(config: Dict[str, Any]) -> List[str]:
        errors: List[str] = []

        if not isinstance(config, dict):
            errors.append("Configuration root must be a dictionary")
            logger.error(f"Config Validation Failed: {errors}")
            return errors

        # 1. Search Section
        search = config.get("search", {})
        if not isinstance(search, dict):
            errors.append("'search' must be a dictionary")
        else:
            delimiter = search.get("delimiter", "auto")
            if delimiter != "auto" and delimiter != "\\t" and (not isinstance(delimiter, str) or len(delimiter) != 1):
                errors.append(f"'search.delimiter' must be a single character or 'auto', got {delimiter!r}")

            for key in ("enclosure", "escape"):
                if key in search:
                    ConfigValidator._check_char(search, key, errors)

            has_headers = search.get("has_headers", "auto")
            if not isinstance(has_headers, bool) and str(has_headers).lower() not in TRISTATE_WORDS:
                errors.append(f"'search.has_headers' must be true, false or auto, got {has_headers!r}")

            extensions = search.get("extensions")
            if extensions is not None:
                if not isinstance(extensions, list) or not all(isinstance(e, str) and e for e in extensions):
                    errors.append("'search.extensions' must be a list of non-empty strings")

        # 2. Report Section
        report = config.get("report", {})
        if not isinstance(report, dict):
            errors.append("'report' must be a dictionary")
        else:
            fmt = report.get("format", "text")
            if fmt not in REPORT_FORMATS:
                errors.append(f"'report.format' must be one of {', '.join(REPORT_FORMATS)}, got {fmt!r}")
            if "output" in report and not isinstance(report["output"], str):
                errors.append("'report.output' must be a string")

        # 3. Logging Section
        logging_cfg = config.get("logging", {})
        if not isinstance(logging_cfg, dict):
            errors.append("'logging' must be a dictionary")
        elif str(logging_cfg.get("level", "INFO")).upper() not in LOG_LEVELS:
            errors.append(f"'logging.level' must be one of {', '.join(LOG_LEVELS)}")

        # 4. Queries
        queries = config.get("queries", [])
        if not isinstance(queries, list):
            errors.append("'queries' must be a list")
        else:
            for i, entry in enumerate(queries):
                if not isinstance(entry, dict):
                    errors.append(f"'queries[{i}]' must be a dictionary")
                elif "type" not in entry:
                    errors.append(f"'queries[{i}]' is missing 'type'")

        # 5. Log the outcome
        if errors:
            logger.error(f"Config Validation Failed: {errors}")
        else:
            logger.info("Config OK: Search=%s", search)

        return errors

    @staticmethod
    def _check_char(section: dict, key: str, errors: list):
        value = section[key]
        if value is None:
            return
        if not isinstance(value, str) or len(value) > 1:
            errors.append(f"Field '{key}' must be a single character, got {value!r}")
