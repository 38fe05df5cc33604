"""
app/parsing package marker.
"""

from app.parsing.csv_parser import CSVHeaderValidationError, RawRow, parse_csv, split_csv_line

__all__ = [
    "CSVHeaderValidationError",
    "RawRow",
    "parse_csv",
    "split_csv_line",
]
