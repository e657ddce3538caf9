# engine/state.py
from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Any, Callable, Iterable, List, Mapping, Optional

import pandas as pd

from ..csv_io import CsvImporter, ImportResult, ImportStage, PreparedImport, export_csv
from ..csv_io.importer import REQUIRED_COLUMNS
from ..data_model import (
    DEFAULT_PAGE_SIZE,
    Column,
    PeopleTableModel,
    Row,
    RowStore,
    SortSpec,
    TableModel,
    TableSnapshot,
)
from ..errors import CsvImportError
from .query import QueryResult, next_sort, run_query
from .storage import SnapshotWriter, load_snapshot

logger = logging.getLogger(__name__)


class TableState:
    """Owns the current table snapshot and the commands that replace it.

    Every command runs under one lock and swaps ``self._snapshot`` in a single
    assignment, so readers always see a committed snapshot. After a change the
    new snapshot is handed to the background writer when persistence is on.
    """

    def __init__(
        self,
        storage_path: str | None = "user_data/table_state.json",
        page_size: int = DEFAULT_PAGE_SIZE,
        model: TableModel | None = None,
        required_columns: Iterable[str] = REQUIRED_COLUMNS,
        persist: bool = True,
    ) -> None:
        self.storage_path = storage_path
        self.page_size = page_size
        self.required_columns = tuple(required_columns)
        self._lock = threading.RLock()
        self._writer: SnapshotWriter | None = SnapshotWriter(storage_path) if (storage_path and persist) else None

        snapshot = TableSnapshot.from_model(model or PeopleTableModel(), page_size=page_size)
        raw = load_snapshot(storage_path) if storage_path else None
        if raw is not None:
            snapshot = TableSnapshot.from_dict(raw, page_size=page_size, defaults=snapshot)
            # configured page size wins over whatever was stored
            snapshot = replace(snapshot, pagination=replace(snapshot.pagination, page_size=page_size))
            logger.info("Loaded table state from %s (%d rows)", storage_path, len(snapshot.rows))
        self._snapshot = snapshot

    # reads

    def snapshot(self) -> TableSnapshot:
        """Detached copy of the committed snapshot; editing it leaves state untouched."""
        with self._lock:
            snap = self._snapshot
        return replace(snap, columns=snap.columns.copy(), rows=RowStore(snap.rows))

    @property
    def columns(self) -> List[Column]:
        return self._snapshot.columns.list_all()

    @property
    def visible_columns(self) -> List[Column]:
        return self._snapshot.visible_columns

    @property
    def rows(self) -> List[Row]:
        return self._snapshot.rows.to_list()

    def query(self) -> QueryResult:
        snap = self._snapshot
        return run_query(snap.rows, snap.visible_columns, snap.search, snap.sorting, snap.pagination)

    def to_dict(self) -> dict[str, Any]:
        return self._snapshot.to_dict()

    # commands

    def set_rows(self, rows: Iterable[Mapping[str, Any]] | pd.DataFrame) -> None:
        store = RowStore(rows)
        with self._lock:
            self._commit(replace(self._snapshot, rows=store))

    def set_search(self, text: str) -> None:
        with self._lock:
            snap = self._snapshot
            self._commit(replace(snap, search=text or "", pagination=replace(snap.pagination, page=0)))

    def set_sorting(self, column_id: str, direction: Optional[str]) -> None:
        sorting = SortSpec.from_dict({"columnId": column_id, "direction": direction})
        with self._lock:
            self._commit(replace(self._snapshot, sorting=sorting))

    def cycle_sorting(self, column_id: str) -> SortSpec:
        with self._lock:
            sorting = next_sort(self._snapshot.sorting, column_id)
            self._commit(replace(self._snapshot, sorting=sorting))
        return sorting

    def set_page(self, page: int) -> None:
        with self._lock:
            snap = self._snapshot
            self._commit(replace(snap, pagination=replace(snap.pagination, page=int(page))))

    def toggle_column_visibility(self, column_id: str) -> bool:
        with self._lock:
            registry = self._snapshot.columns.copy()
            if not registry.toggle_visibility(column_id):
                return False
            self._commit(replace(self._snapshot, columns=registry))
        return True

    def add_column(self, column_id: str, label: str) -> bool:
        with self._lock:
            registry = self._snapshot.columns.copy()
            if not registry.add_column(column_id, label):
                return False
            self._commit(replace(self._snapshot, columns=registry))
        return True

    def prepare_import(self, text: str | bytes) -> PreparedImport:
        return CsvImporter(self.required_columns).prepare(text)

    def import_csv(self, text: str | bytes) -> ImportResult:
        try:
            prepared = self.prepare_import(text)
        except CsvImportError as exc:
            logger.warning("CSV import failed at %s: %s", exc.stage, exc.message)
            return ImportResult.failure(exc)
        return self.commit_import(prepared)

    def commit_import(self, prepared: PreparedImport, guard: Callable[[], bool] | None = None) -> ImportResult:
        """Reconcile columns and replace all rows as one snapshot swap.

        ``guard`` is checked under the lock; when it returns False the import
        is dropped without touching state.
        """
        importer = CsvImporter(self.required_columns)
        with self._lock:
            if guard is not None and not guard():
                return ImportResult(ok=False, stage=ImportStage.FAILED, stale=True)
            snap = self._snapshot
            registry, added = importer.reconcile(prepared, snap.columns)
            self._commit(
                replace(
                    snap,
                    columns=registry,
                    rows=RowStore(prepared.rows),
                    pagination=replace(snap.pagination, page=0),
                )
            )
            importer.mark_committed()
        logger.info("Imported %d rows from CSV; added columns: %s", len(prepared.rows), ", ".join(added) or "none")
        return ImportResult(
            ok=True,
            stage=ImportStage.COMMITTED,
            rows_imported=len(prepared.rows),
            added_columns=added,
        )

    def export_csv(self) -> str:
        snap = self._snapshot
        return export_csv(snap.rows, snap.visible_columns)

    # persistence

    def _commit(self, snapshot: TableSnapshot) -> None:
        self._snapshot = snapshot
        if self._writer is not None:
            self._writer.submit(snapshot.to_dict())

    @property
    def persistence_error(self):
        return self._writer.last_error if self._writer is not None else None

    def flush(self, timeout: float | None = None) -> None:
        if self._writer is not None:
            self._writer.flush(timeout=timeout)

    def close(self) -> None:
        if self._writer is not None:
            self._writer.close()
