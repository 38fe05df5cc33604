"""
app/connectors package marker.
"""

from app.connectors.dataset_source import (
    DatasetLoadError,
    DatasetSource,
    FileDatasetSource,
    HTTPDatasetSource,
    build_dataset_source,
)

__all__ = [
    "DatasetLoadError",
    "DatasetSource",
    "FileDatasetSource",
    "HTTPDatasetSource",
    "build_dataset_source",
]
