"""In-memory table engine: schema, query pipeline and CSV interchange."""

from .engine.state import TableState
from .errors import (
    CsvImportError,
    CsvParseError,
    EmptyDatasetError,
    MissingColumnsError,
    PersistenceError,
    TableError,
)

__all__ = [
    "CsvImportError",
    "CsvParseError",
    "EmptyDatasetError",
    "MissingColumnsError",
    "PersistenceError",
    "TableError",
    "TableState",
]
