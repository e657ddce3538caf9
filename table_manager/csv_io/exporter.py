from __future__ import annotations

import csv
import datetime
import io
from typing import Any, Iterable, Mapping, Sequence

from ..data_model import Column, cell_text


def export_csv(rows: Iterable[Mapping[str, Any]], columns: Sequence[Column]) -> str:
    """Serialize ``rows`` restricted to ``columns``, headed by their labels.

    Rows are written as given; callers pass the full row set, not a query view.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\r\n")
    writer.writerow([column.label for column in columns])
    for row in rows:
        writer.writerow([cell_text(row.get(column.id)) for column in columns])
    return buffer.getvalue()


def export_filename(day: datetime.date | None = None) -> str:
    day = day or datetime.date.today()
    return f"export_{day.isoformat()}.csv"
