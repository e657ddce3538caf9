from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

DEFAULT_PAGE_SIZE = 10
SORT_DIRECTIONS = ("asc", "desc")

Row = Dict[str, Any]


def normalize_key(name: Any) -> str:
    """Canonical form for headers, required names and row keys."""
    return str(name if name is not None else "").strip().lower()


def is_absent(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return False


def cell_text(value: Any) -> str:
    """String form of a cell as used by search and export."""
    if is_absent(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class Column:
    """Schema descriptor for one table field."""

    id: str
    label: str
    visible: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "label": self.label, "visible": self.visible}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Column":
        column_id = str(payload.get("id", ""))
        label = payload.get("label")
        return cls(
            id=column_id,
            label=str(label) if label is not None else column_id,
            visible=bool(payload.get("visible", True)),
        )


@dataclass(frozen=True)
class SortSpec:
    column_id: str = ""
    direction: Optional[str] = None

    @property
    def active(self) -> bool:
        return bool(self.column_id) and self.direction in SORT_DIRECTIONS

    def to_dict(self) -> dict[str, Any]:
        return {"columnId": self.column_id, "direction": self.direction}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "SortSpec":
        payload = payload or {}
        direction = payload.get("direction")
        if direction not in SORT_DIRECTIONS:
            direction = None
        return cls(column_id=str(payload.get("columnId") or ""), direction=direction)


@dataclass(frozen=True)
class Pagination:
    page: int = 0
    page_size: int = DEFAULT_PAGE_SIZE

    def page_count(self, total: int) -> int:
        return math.ceil(total / self.page_size) if total > 0 else 0

    def to_dict(self) -> dict[str, int]:
        return {"page": self.page, "pageSize": self.page_size}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None, page_size: int = DEFAULT_PAGE_SIZE) -> "Pagination":
        payload = payload or {}
        try:
            page = int(payload.get("page", 0) or 0)
        except (TypeError, ValueError):
            page = 0
        try:
            size = int(payload.get("pageSize", page_size) or page_size)
        except (TypeError, ValueError):
            size = page_size
        return cls(page=page, page_size=size if size > 0 else page_size)


@dataclass
class TableModel:
    """Container for a table schema plus default rows."""

    name: str
    columns: List[Column]
    default_rows: List[Row] = field(default_factory=list)
