from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .base import DEFAULT_PAGE_SIZE, Column, Pagination, SortSpec, TableModel
from .columns import ColumnRegistry
from .rows import RowStore

SNAPSHOT_VERSION = 2


@dataclass(frozen=True)
class TableSnapshot:
    """Complete, persistable state of one table.

    Treated as immutable: commands build a new snapshot rather than editing
    the registry or row store held by the current one.
    """

    columns: ColumnRegistry = field(default_factory=ColumnRegistry)
    rows: RowStore = field(default_factory=RowStore)
    sorting: SortSpec = field(default_factory=SortSpec)
    pagination: Pagination = field(default_factory=Pagination)
    search: str = ""
    version: int = SNAPSHOT_VERSION

    @property
    def visible_columns(self) -> List[Column]:
        return self.columns.list_visible()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "rows": self.rows.to_list(),
            "columns": self.columns.to_list(),
            "sorting": self.sorting.to_dict(),
            "pagination": self.pagination.to_dict(),
            "search": self.search,
        }

    @classmethod
    def from_dict(
        cls,
        payload: Mapping[str, Any],
        page_size: int = DEFAULT_PAGE_SIZE,
        defaults: "TableSnapshot | None" = None,
    ) -> "TableSnapshot":
        """Build from a current-version document.

        Fields that are missing or malformed are taken from ``defaults`` (or
        left empty when no defaults are given).
        """
        defaults = defaults or cls(pagination=Pagination(page_size=page_size))
        rows = payload.get("rows")
        columns = payload.get("columns")
        sorting = payload.get("sorting")
        pagination = payload.get("pagination")
        search = payload.get("search")
        return cls(
            columns=ColumnRegistry.from_list(columns) if isinstance(columns, list) else defaults.columns,
            rows=RowStore(row for row in rows if isinstance(row, Mapping)) if isinstance(rows, list) else defaults.rows,
            sorting=SortSpec.from_dict(sorting) if isinstance(sorting, Mapping) else defaults.sorting,
            pagination=(
                Pagination.from_dict(pagination, page_size=page_size)
                if isinstance(pagination, Mapping)
                else defaults.pagination
            ),
            search=str(search) if isinstance(search, str) else defaults.search,
            version=SNAPSHOT_VERSION,
        )

    @classmethod
    def from_model(cls, model: TableModel, page_size: int = DEFAULT_PAGE_SIZE) -> "TableSnapshot":
        return cls(
            columns=ColumnRegistry(model.columns),
            rows=RowStore(model.default_rows),
            pagination=Pagination(page=0, page_size=page_size),
        )
