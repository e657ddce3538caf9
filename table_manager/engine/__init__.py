from .query import QueryResult, filter_rows, next_sort, paginate, run_query, sort_rows
from .state import TableState
from .storage import SnapshotWriter, load_snapshot, migrate_snapshot, save_snapshot

__all__ = [
    "QueryResult",
    "SnapshotWriter",
    "TableState",
    "filter_rows",
    "load_snapshot",
    "migrate_snapshot",
    "next_sort",
    "paginate",
    "run_query",
    "save_snapshot",
    "sort_rows",
]
