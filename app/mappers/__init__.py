"""
app/mappers package marker.
"""

from app.mappers.snapshot_mapper import SNAPSHOT_COLUMNS, map_snapshot, to_number

__all__ = [
    "SNAPSHOT_COLUMNS",
    "map_snapshot",
    "to_number",
]
