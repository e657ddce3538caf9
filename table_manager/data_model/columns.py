from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Iterator, List, Mapping

from .base import Column, normalize_key


class ColumnRegistry:
    """Ordered set of columns keyed by a unique, case-sensitive id.

    Columns are only ever appended or hidden; nothing removes them.
    """

    def __init__(self, columns: Iterable[Column] | None = None) -> None:
        self._columns: List[Column] = []
        for column in columns or []:
            if column.id not in self:
                self._columns.append(column)

    def __iter__(self) -> Iterator[Column]:
        return iter(list(self._columns))

    def __len__(self) -> int:
        return len(self._columns)

    def __contains__(self, column_id: object) -> bool:
        return any(column.id == column_id for column in self._columns)

    def get(self, column_id: str) -> Column | None:
        for column in self._columns:
            if column.id == column_id:
                return column
        return None

    def has_normalized(self, name: str) -> bool:
        target = normalize_key(name)
        return any(normalize_key(column.id) == target for column in self._columns)

    def add_column(self, column_id: str, label: str) -> bool:
        if column_id in self:
            return False
        self._columns.append(Column(id=column_id, label=label, visible=True))
        return True

    def toggle_visibility(self, column_id: str) -> bool:
        for index, column in enumerate(self._columns):
            if column.id == column_id:
                self._columns[index] = replace(column, visible=not column.visible)
                return True
        return False

    def list_visible(self) -> List[Column]:
        return [column for column in self._columns if column.visible]

    def list_all(self) -> List[Column]:
        return list(self._columns)

    def copy(self) -> "ColumnRegistry":
        return ColumnRegistry(self._columns)

    def to_list(self) -> List[dict[str, Any]]:
        return [column.to_dict() for column in self._columns]

    @classmethod
    def from_list(cls, payload: Iterable[Mapping[str, Any]]) -> "ColumnRegistry":
        columns = [Column.from_dict(item) for item in payload if isinstance(item, Mapping)]
        return cls(column for column in columns if column.id)
