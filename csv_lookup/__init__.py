"""
csv-lookup: find rows in delimited text files with typed column queries.
"""

__version__ = "0.3.0"
