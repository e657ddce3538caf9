"""Error taxonomy for the table engine.

Import errors abort a CSV import before anything is committed and are handed
back to callers inside an ``ImportResult``. Persistence errors are reported by
the background writer and never undo in-memory changes.
"""
from __future__ import annotations

from typing import Iterable


class TableError(Exception):
    """Base class for every error raised by the table engine."""


class CsvImportError(TableError):
    kind = "import"

    def __init__(self, message: str, stage: str = "failed") -> None:
        super().__init__(message)
        self.message = message
        self.stage = stage


class CsvParseError(CsvImportError):
    kind = "parse"

    def __init__(self, detail: str, line: int | None = None) -> None:
        where = f" (line {line})" if line else ""
        super().__init__(f"CSV error: {detail}{where}", stage="parsing")
        self.detail = detail
        self.line = line


class EmptyDatasetError(CsvImportError):
    kind = "empty"

    def __init__(self) -> None:
        super().__init__("No data found in file.", stage="validating")


class MissingColumnsError(CsvImportError):
    kind = "missing_columns"

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(
            "CSV is missing required columns: " + ", ".join(self.missing),
            stage="validating",
        )


class PersistenceError(TableError):
    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Failed to persist table state to {path}: {detail}")
        self.path = path
        self.detail = detail


__all__ = [
    "CsvImportError",
    "CsvParseError",
    "EmptyDatasetError",
    "MissingColumnsError",
    "PersistenceError",
    "TableError",
]
