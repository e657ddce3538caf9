import threading

from table_manager.csv_io import ImportWorker
from table_manager.engine.state import TableState
from table_manager.errors import MissingColumnsError

SLOW_CSV = "name,email,age,role\nSlow,slow@example.com,50,User\n"
FAST_CSV = "name,email,age,role\nFast,fast@example.com,20,Admin\nQuick,quick@example.com,21,User\n"


def test_background_import_commits_result():
    state = TableState(storage_path=None)
    worker = ImportWorker(state)

    result = worker.submit(FAST_CSV).result(timeout=5)
    worker.close()

    assert result.ok is True
    assert [row["name"] for row in state.rows] == ["Fast", "Quick"]


def test_latest_import_wins_when_older_finishes_last():
    state = TableState(storage_path=None)
    started = threading.Event()
    release = threading.Event()

    def gated_prepare(text):
        prepared = state.prepare_import(text)
        if "Slow" in text:
            started.set()
            release.wait(timeout=5)
        return prepared

    worker = ImportWorker(state, prepare=gated_prepare)

    first = worker.submit(SLOW_CSV)
    assert started.wait(timeout=5)
    second = worker.submit(FAST_CSV)
    second_result = second.result(timeout=5)
    release.set()
    first_result = first.result(timeout=5)
    worker.close()

    assert second_result.ok is True
    assert first_result.ok is False
    assert first_result.stale is True
    assert [row["name"] for row in state.rows] == ["Fast", "Quick"]


def test_background_failure_is_reported_without_touching_state():
    state = TableState(storage_path=None)
    worker = ImportWorker(state)

    result = worker.submit("name\nAlice\n").result(timeout=5)
    worker.close()

    assert isinstance(result.error, MissingColumnsError)
    assert result.stale is False
    assert len(state.rows) == 20
