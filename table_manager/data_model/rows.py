from __future__ import annotations

from typing import Any, Iterable, Iterator, List, Mapping, Sequence, Tuple

import pandas as pd

from .base import Column, Row, cell_text, is_absent, normalize_key


def _clean_row(row: Mapping[str, Any]) -> Row:
    return {str(key): (None if is_absent(value) else value) for key, value in row.items()}


def rows_from_records(records: Iterable[Mapping[str, Any]] | pd.DataFrame | None) -> List[Row]:
    """Copy rows out of a DataFrame or an iterable of mappings.

    NaN cells coming from pandas are stored as ``None``.
    """
    if records is None:
        return []
    if isinstance(records, pd.DataFrame):
        records = records.to_dict(orient="records")
    return [_clean_row(row) for row in records]


def normalize_row_keys(row: Mapping[str, Any]) -> Row:
    normalized: Row = {}
    for key, value in row.items():
        name = normalize_key(key)
        if name:
            normalized[name] = value
    return normalized


class RowStore:
    """Ordered row sequence; contents are only ever replaced wholesale."""

    def __init__(self, rows: Iterable[Mapping[str, Any]] | pd.DataFrame | None = None) -> None:
        self._rows: Tuple[Row, ...] = tuple(rows_from_records(rows))

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> Tuple[Row, ...]:
        return self._rows

    def replace(self, rows: Iterable[Mapping[str, Any]] | pd.DataFrame | None) -> None:
        self._rows = tuple(rows_from_records(rows))

    def to_list(self) -> List[Row]:
        return [dict(row) for row in self._rows]

    def to_frame(self, columns: Sequence[Column]) -> pd.DataFrame:
        return rows_to_frame(self._rows, columns)


def rows_to_frame(rows: Iterable[Mapping[str, Any]], columns: Sequence[Column]) -> pd.DataFrame:
    """Text-rendered frame of ``rows`` restricted to ``columns``, headed by labels."""
    data = [[cell_text(row.get(column.id)) for column in columns] for row in rows]
    return pd.DataFrame(data, columns=[column.label for column in columns])
