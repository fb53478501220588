from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from csv_lookup import __version__
from csv_lookup.core.config_loader import load_config
from csv_lookup.core.errors import CsvLookupError
from csv_lookup.core.lookup_service import DEFAULT_EXTENSIONS, LookupService
from csv_lookup.core.options import SearchOptions, parse_delimiter
from csv_lookup.core.query.parsing import condition_from_tokens, conditions_from_config, operator_names
from csv_lookup.reports.registry import ReportRegistry

logger = logging.getLogger(__name__)


def build_parser(formats: List[str]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="csv-lookup",
        description="Find lines in CSV files matching typed column queries.",
        epilog=f"Query types: {', '.join(operator_names())}",
    )
    parser.add_argument("path", help="CSV file, or directory whose CSV files are searched.")
    parser.add_argument(
        "-q", "--query", action="append", nargs="+", metavar="ARG", default=[],
        help="COLUMN TYPE [VALUE [UPPER]]. COLUMN '*' = any column, digits = 0-based index. Repeatable.",
    )
    parser.add_argument("-d", "--delimiter", help="Single character, or 'auto' (default).")
    parser.add_argument("-e", "--enclosure", help='Enclosure character (default ").')
    parser.add_argument("-s", "--escape", help="Escape character (default \\).")
    headers = parser.add_mutually_exclusive_group()
    headers.add_argument("--headers", dest="has_headers", action="store_const", const=True, help="First line is a header.")
    headers.add_argument("--no-headers", dest="has_headers", action="store_const", const=False, help="File has no header.")
    parser.add_argument("-f", "--format", choices=formats, help="Report format (default from config: text).")
    parser.add_argument("-o", "--output", help="Report target. Text goes to stdout when omitted.")
    parser.add_argument("-c", "--config", help="Path to a config YAML file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _search_options(args: argparse.Namespace, config: dict) -> SearchOptions:
    section = dict(config.get("search", {}) or {})
    if args.delimiter is not None:
        section["delimiter"] = parse_delimiter(args.delimiter)
    if args.enclosure is not None:
        section["enclosure"] = args.enclosure
    if args.escape is not None:
        section["escape"] = args.escape
    if args.has_headers is not None:
        section["has_headers"] = args.has_headers
    return SearchOptions.from_config(section)


def main(argv: Optional[List[str]] = None) -> int:
    registry = ReportRegistry()
    args = build_parser(registry.formats()).parse_args(argv)

    config_status = load_config(args.config)
    config = config_status.get("data", {}) if config_status["status"] == "OK" else {}

    level = "DEBUG" if args.verbose else str(config.get("logging", {}).get("level", "WARNING")).upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if config_status["status"] != "OK":
        if args.config:
            print(f"Error: {config_status['error']}", file=sys.stderr)
            return 1
        logger.warning(f"Using built-in defaults: {config_status['error']}")

    report_cfg = config.get("report", {}) or {}
    fmt = args.format or report_cfg.get("format", "text")
    output = args.output if args.output is not None else report_cfg.get("output", "")

    try:
        if args.query:
            conditions = [condition_from_tokens(tokens) for tokens in args.query]
        else:
            conditions = conditions_from_config(config.get("queries", []))
        if not conditions:
            print("Error: at least one query (-q COLUMN TYPE [VALUE [UPPER]]) is required", file=sys.stderr)
            return 2

        extensions = (config.get("search", {}) or {}).get("extensions") or DEFAULT_EXTENSIONS
        service = LookupService(_search_options(args, config), extensions)
        results = service.search(conditions, args.path)
        for skipped in service.skipped_files:
            logger.info(f"Skipped {skipped.path}: {skipped.reason.value}")

        report = registry.get(fmt)(args.path, conditions, results)
        text = report.render(output)
    except CsvLookupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if text is not None:
        sys.stdout.write(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
