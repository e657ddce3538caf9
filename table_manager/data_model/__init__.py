from .base import (
    DEFAULT_PAGE_SIZE,
    Column,
    Pagination,
    Row,
    SortSpec,
    TableModel,
    cell_text,
    is_absent,
    normalize_key,
)
from .columns import ColumnRegistry
from .defaults import PeopleTableModel, default_columns, default_people_rows
from .rows import RowStore, normalize_row_keys, rows_from_records, rows_to_frame
from .snapshot import SNAPSHOT_VERSION, TableSnapshot

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "SNAPSHOT_VERSION",
    "Column",
    "ColumnRegistry",
    "Pagination",
    "PeopleTableModel",
    "Row",
    "RowStore",
    "SortSpec",
    "TableModel",
    "TableSnapshot",
    "cell_text",
    "default_columns",
    "default_people_rows",
    "is_absent",
    "normalize_key",
    "normalize_row_keys",
    "rows_from_records",
    "rows_to_frame",
]
