"""
csv-lookup entry point.

Usage:
    python -m csv_lookup PATH -q COLUMN TYPE [VALUE [UPPER]] ...
"""

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
