from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Callable

from ..errors import CsvImportError
from .importer import ImportResult, PreparedImport

if TYPE_CHECKING:
    from ..engine.state import TableState

logger = logging.getLogger(__name__)


class ImportWorker:
    """Runs CSV parsing off the caller's thread.

    Only the most recently submitted import may commit: each submission takes
    a generation number, and a completion whose generation has been
    superseded is discarded with ``ImportResult.stale`` set.
    """

    def __init__(
        self,
        state: "TableState",
        max_workers: int = 2,
        prepare: Callable[[str | bytes], PreparedImport] | None = None,
    ) -> None:
        self._state = state
        self._prepare = prepare or state.prepare_import
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="csv-import")
        self._lock = threading.Lock()
        self._generation = 0

    def submit(self, text: str | bytes) -> "Future[ImportResult]":
        with self._lock:
            self._generation += 1
            generation = self._generation
        return self._executor.submit(self._run, generation, text)

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return generation == self._generation

    def _run(self, generation: int, text: str | bytes) -> ImportResult:
        try:
            prepared = self._prepare(text)
        except CsvImportError as exc:
            result = ImportResult.failure(exc)
            if not self.is_current(generation):
                result.stale = True
            logger.warning("CSV import %d failed: %s", generation, exc.message)
            return result
        result = self._state.commit_import(prepared, guard=lambda: self.is_current(generation))
        if result.stale:
            logger.info("Discarded CSV import %d; a newer import was started", generation)
        return result

    def close(self) -> None:
        self._executor.shutdown(wait=True)


__all__ = ["ImportWorker"]
