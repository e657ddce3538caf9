"""Command line access to the persisted table.

Each invocation loads the snapshot from TABLE_STATE_PATH (or --state), runs
one command against it, and waits for the write to land before exiting.
"""
from __future__ import annotations

import argparse
import pathlib
from typing import Sequence

from .app_logging import init_logging
from .config import settings_from_env
from .csv_io import export_filename
from .data_model import rows_to_frame
from .engine.state import TableState


def _print_view(state: TableState) -> None:
    result = state.query()
    frame = rows_to_frame(result.rows, state.visible_columns)
    if frame.empty:
        print("(no rows)")
    else:
        print(frame.to_string(index=False))
    print(f"Page {result.page + 1} of {max(result.page_count, 1)} ({result.total} matching rows)")


def _cmd_view(state: TableState, args: argparse.Namespace) -> int:
    if args.search is not None:
        state.set_search(args.search)
    if args.sort is not None:
        state.set_sorting(args.sort, "desc" if args.desc else "asc")
    elif args.unsorted:
        state.set_sorting("", None)
    if args.page is not None:
        state.set_page(args.page - 1)
    _print_view(state)
    return 0


def _cmd_import(state: TableState, args: argparse.Namespace) -> int:
    data = pathlib.Path(args.path).read_bytes()
    result = state.import_csv(data)
    if not result.ok:
        print(f"Import failed: {result.message}")
        return 1
    added = ", ".join(result.added_columns) or "none"
    print(f"{result.message} New columns: {added}")
    return 0


def _cmd_export(state: TableState, args: argparse.Namespace) -> int:
    out_path = pathlib.Path(args.out or export_filename())
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as handle:
        handle.write(state.export_csv())
    print(f"Wrote {len(state.snapshot().rows)} rows to {out_path}")
    return 0


def _cmd_add_column(state: TableState, args: argparse.Namespace) -> int:
    column_id = args.id.strip()
    label = (args.label or column_id).strip()
    if not column_id or not label:
        print("Column id and label are required.")
        return 2
    if state.add_column(column_id, label):
        print(f"Added column {column_id!r}")
    else:
        print(f"Column {column_id!r} already exists")
    return 0


def _cmd_toggle_column(state: TableState, args: argparse.Namespace) -> int:
    if not state.toggle_column_visibility(args.id):
        print(f"Unknown column: {args.id}")
        return 1
    column = state.snapshot().columns.get(args.id)
    print(f"Column {args.id!r} is now {'visible' if column and column.visible else 'hidden'}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="table-manager", description="Search, sort, import and export a persisted table.")
    parser.add_argument("--state", help="Snapshot JSON path (defaults to TABLE_STATE_PATH).")
    sub = parser.add_subparsers(dest="command", required=True)

    view = sub.add_parser("view", help="Print the current page of the table.")
    view.add_argument("--search", help="Set the search text (empty string clears it).")
    view.add_argument("--sort", help="Column id to sort by.")
    view.add_argument("--desc", action="store_true", help="Sort descending.")
    view.add_argument("--unsorted", action="store_true", help="Clear sorting.")
    view.add_argument("--page", type=int, help="1-based page number.")
    view.set_defaults(func=_cmd_view)

    imp = sub.add_parser("import", help="Replace all rows with the contents of a CSV file.")
    imp.add_argument("path")
    imp.set_defaults(func=_cmd_import)

    exp = sub.add_parser("export", help="Write visible columns of every row to CSV.")
    exp.add_argument("--out", help="Output path (defaults to export_<date>.csv).")
    exp.set_defaults(func=_cmd_export)

    add = sub.add_parser("add-column", help="Append a column to the schema.")
    add.add_argument("id")
    add.add_argument("label", nargs="?")
    add.set_defaults(func=_cmd_add_column)

    toggle = sub.add_parser("toggle-column", help="Show or hide a column.")
    toggle.add_argument("id")
    toggle.set_defaults(func=_cmd_toggle_column)

    sub.add_parser("serve", help="Run the REST API.")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = settings_from_env()
    init_logging(settings.log_level, json_logs=settings.json_logs)

    state = TableState(
        storage_path=args.state or settings.state_path,
        page_size=settings.page_size,
        persist=settings.persist,
    )
    try:
        if args.command == "serve":
            from .backend import create_app

            create_app(state).run(host=settings.host, port=settings.port, debug=False)
            return 0
        return args.func(state, args)
    finally:
        state.flush()
        state.close()


if __name__ == "__main__":
    raise SystemExit(main())
