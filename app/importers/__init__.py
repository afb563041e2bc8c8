"""
app/importers package marker.
"""

from app.importers.csv_parser import CSVRowSource, ParsedRow, RowParseError, best_effort_key

__all__ = [
    "CSVRowSource",
    "ParsedRow",
    "RowParseError",
    "best_effort_key",
]
