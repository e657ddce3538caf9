# engine/storage.py
from __future__ import annotations

import json
import logging
import math
import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Dict

from ..data_model import SNAPSHOT_VERSION
from ..errors import PersistenceError

logger = logging.getLogger(__name__)


def ensure_user_data_dir(path: str) -> None:
    folder = os.path.dirname(path)
    if folder and not os.path.exists(folder):
        os.makedirs(folder, exist_ok=True)


def _sanitize_json_compat(value: Any):
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return value
    if isinstance(value, dict):
        return {key: _sanitize_json_compat(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_sanitize_json_compat(item) for item in value]
    return value


def migrate_snapshot(raw: Dict[str, Any]) -> Dict[str, Any]:
    """Bring an older snapshot document up to ``SNAPSHOT_VERSION``.

    Version 1 stored pagination as ``{page, rowsPerPage}``. Fields that are
    missing altogether are left for ``TableSnapshot.from_dict`` to default.
    """
    data = dict(raw)
    try:
        version = int(data.get("version", 1) or 1)
    except (TypeError, ValueError):
        version = 1
    if version < 2:
        pagination = data.get("pagination")
        if isinstance(pagination, dict) and "pageSize" not in pagination:
            pagination = dict(pagination)
            if "rowsPerPage" in pagination:
                pagination["pageSize"] = pagination.pop("rowsPerPage")
            data["pagination"] = pagination
    data["version"] = SNAPSHOT_VERSION
    return data


def load_snapshot(path: str) -> Dict[str, Any] | None:
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw_text = f.read().strip()
            if not raw_text:
                return None
            data = json.loads(raw_text)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable table state at %s: %s", path, exc)
        return None
    if not isinstance(data, dict):
        logger.warning("Ignoring table state at %s: expected a JSON object", path)
        return None
    return migrate_snapshot(data)


def save_snapshot(path: str, payload: Dict[str, Any]) -> None:
    ensure_user_data_dir(path)
    tmp_path = f"{path}.tmp"
    clean = _sanitize_json_compat(payload)
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(clean, f, allow_nan=False)
    os.replace(tmp_path, path)


class SnapshotWriter:
    """Writes snapshot documents in the background, one at a time, in order.

    Failures are logged and kept on ``last_error``; they never propagate to
    whoever submitted the write.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self.last_error: PersistenceError | None = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="table-state-writer")
        self._lock = threading.Lock()
        self._pending: Future | None = None

    def submit(self, payload: Dict[str, Any]) -> Future | None:
        with self._lock:
            try:
                future = self._executor.submit(self._write, payload)
            except RuntimeError as exc:
                # executor already shut down
                self.last_error = PersistenceError(self.path, str(exc))
                logger.error("Dropped table state write to %s: %s", self.path, exc)
                return None
            self._pending = future
        return future

    def _write(self, payload: Dict[str, Any]) -> None:
        try:
            save_snapshot(self.path, payload)
        except (OSError, TypeError, ValueError) as exc:
            self.last_error = PersistenceError(self.path, str(exc))
            logger.exception("Failed to persist table state to %s", self.path)
        else:
            self.last_error = None

    def flush(self, timeout: float | None = None) -> None:
        """Block until every write submitted so far has finished."""
        with self._lock:
            pending = self._pending
        if pending is not None:
            pending.result(timeout=timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
