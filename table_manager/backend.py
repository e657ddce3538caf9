"""REST surface over a ``TableState``."""

from __future__ import annotations

import logging
from typing import Any, Dict

from flask import Flask, Response, jsonify, request

from .csv_io import export_filename
from .engine.state import TableState

logger = logging.getLogger(__name__)


def _view_payload(state: TableState) -> Dict[str, Any]:
    snap = state.snapshot()
    result = state.query()
    return {
        "rows": result.rows,
        "total": result.total,
        "page": result.page,
        "pageSize": result.page_size,
        "pageCount": result.page_count,
        "columns": snap.columns.to_list(),
        "visibleColumns": [column.id for column in snap.visible_columns],
        "sorting": snap.sorting.to_dict(),
        "search": snap.search,
    }


def _extract_payload_value(payload: dict, *keys: str, default=None):
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return default


def create_app(state: TableState) -> Flask:
    app = Flask(__name__)

    @app.after_request
    def apply_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.get("/api/health")
    def healthcheck():
        error = state.persistence_error
        return jsonify({"status": "ok", "persistenceError": str(error) if error else None})

    @app.get("/api/table")
    def get_table():
        return jsonify(_view_payload(state))

    @app.get("/api/snapshot")
    def get_snapshot():
        return jsonify(state.to_dict())

    @app.post("/api/table/rows")
    def set_rows():
        payload = request.get_json(silent=True) or {}
        rows = payload.get("rows")
        if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
            return jsonify({"error": "Rows must be a list of objects."}), 400
        state.set_rows(rows)
        return jsonify(_view_payload(state))

    @app.post("/api/table/search")
    def set_search():
        payload = request.get_json(silent=True) or {}
        state.set_search(str(_extract_payload_value(payload, "search", "text", default="")))
        return jsonify(_view_payload(state))

    @app.post("/api/table/sorting")
    def set_sorting():
        payload = request.get_json(silent=True) or {}
        column_id = str(_extract_payload_value(payload, "columnId", "column_id", default=""))
        direction = payload.get("direction")
        if direction not in (None, "asc", "desc"):
            return jsonify({"error": "Direction must be 'asc', 'desc' or null."}), 400
        state.set_sorting(column_id, direction)
        return jsonify(_view_payload(state))

    @app.post("/api/table/sorting/<column_id>/cycle")
    def cycle_sorting(column_id: str):
        state.cycle_sorting(column_id)
        return jsonify(_view_payload(state))

    @app.post("/api/table/page")
    def set_page():
        payload = request.get_json(silent=True) or {}
        try:
            page = int(payload.get("page", 0))
        except (TypeError, ValueError):
            return jsonify({"error": "Page must be an integer."}), 400
        state.set_page(page)
        return jsonify(_view_payload(state))

    @app.post("/api/columns")
    def add_column():
        payload = request.get_json(silent=True) or {}
        column_id = str(payload.get("id") or "").strip()
        label = str(payload.get("label") or "").strip()
        if not column_id or not label:
            return jsonify({"error": "Column id and label are required."}), 400
        added = state.add_column(column_id, label)
        return jsonify({"added": added, "columns": state.snapshot().columns.to_list()})

    @app.post("/api/columns/<column_id>/toggle")
    def toggle_column(column_id: str):
        if not state.toggle_column_visibility(column_id):
            return jsonify({"error": f"Unknown column: {column_id}"}), 404
        return jsonify({"columns": state.snapshot().columns.to_list()})

    @app.post("/api/table/import")
    def import_table():
        """Import CSV from a multipart ``file`` field or the raw request body."""
        if "file" in request.files:
            data = request.files["file"].read()
        else:
            data = request.get_data()
        result = state.import_csv(data)
        if not result.ok:
            body: Dict[str, Any] = {"error": result.message, "kind": result.error.kind if result.error else "stale"}
            missing = getattr(result.error, "missing", None)
            if missing:
                body["missing"] = list(missing)
            return jsonify(body), 400
        return jsonify(
            {
                "status": "imported",
                "rowsImported": result.rows_imported,
                "addedColumns": result.added_columns,
                "table": _view_payload(state),
            }
        )

    @app.get("/api/table/export")
    def export_table():
        filename = export_filename()
        logger.debug("Exporting %d rows as %s", len(state.snapshot().rows), filename)
        return Response(
            state.export_csv(),
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return app
