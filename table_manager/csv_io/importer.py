"""CSV import for the table engine.

An import moves through ``ImportStage``: the text is parsed, checked against
the required headers, reconciled with the column registry and finally
committed as a wholesale row replacement. Parsing and validation are pure and
may run on any thread; reconciliation and commit happen inside
``TableState`` so that they land as one snapshot swap.
"""
from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Sequence, Tuple

from ..data_model import ColumnRegistry, Row, normalize_key, normalize_row_keys
from ..errors import CsvImportError, CsvParseError, EmptyDatasetError, MissingColumnsError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: Tuple[str, ...] = ("name", "email", "age", "role")

# lift the stdlib 128 KiB default so long but well-formed cells still parse
csv.field_size_limit(2**31 - 1)


class ImportStage(str, Enum):
    IDLE = "idle"
    PARSING = "parsing"
    VALIDATING = "validating"
    RECONCILING = "reconciling"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass
class PreparedImport:
    """Parsed and validated CSV, ready to be reconciled and committed."""

    headers: List[str]
    rows: List[Row]


@dataclass
class ImportResult:
    ok: bool
    stage: ImportStage
    error: CsvImportError | None = None
    rows_imported: int = 0
    added_columns: List[str] = field(default_factory=list)
    stale: bool = False

    @property
    def message(self) -> str:
        if self.error is not None:
            return self.error.message
        if self.stale:
            return "Import superseded by a newer import."
        return f"Imported {self.rows_imported} rows."

    @classmethod
    def failure(cls, error: CsvImportError) -> "ImportResult":
        return cls(ok=False, stage=ImportStage.FAILED, error=error)


def _decode(text: str | bytes) -> str:
    if isinstance(text, bytes):
        return text.decode("utf-8-sig", errors="replace")
    return text[1:] if text.startswith("\ufeff") else text


def parse_csv_text(text: str | bytes) -> Tuple[List[str], List[Dict[str, str]]]:
    """Split CSV text into its header row and header-keyed records.

    Blank lines are skipped. Short rows leave trailing keys out; cells beyond
    the header are dropped.
    """
    reader = csv.reader(io.StringIO(_decode(text), newline=""), strict=True)
    header: List[str] | None = None
    records: List[Dict[str, str]] = []
    try:
        for cells in reader:
            if not cells:
                continue
            if header is None:
                header = cells
                continue
            if len(cells) > len(header):
                logger.debug("Dropping %d surplus cells on line %d", len(cells) - len(header), reader.line_num)
            records.append(dict(zip(header, cells)))
    except csv.Error as exc:
        raise CsvParseError(str(exc), line=reader.line_num) from exc
    return header or [], records


def validate_dataset(
    headers: Sequence[str],
    records: Sequence[Dict[str, str]],
    required: Iterable[str] = REQUIRED_COLUMNS,
) -> List[str]:
    """Return the normalized, de-duplicated header list or raise."""
    if not records:
        raise EmptyDatasetError()
    normalized: List[str] = []
    for header in headers:
        key = normalize_key(header)
        if key and key not in normalized:
            normalized.append(key)
    missing = [name for name in (normalize_key(r) for r in required) if name not in normalized]
    if missing:
        raise MissingColumnsError(missing)
    return normalized


def reconcile_columns(registry: ColumnRegistry, headers: Iterable[str]) -> List[str]:
    """Add every header the registry lacks (compared normalized); return the added ids."""
    added: List[str] = []
    for header in headers:
        if registry.has_normalized(header):
            continue
        if registry.add_column(header, header):
            added.append(header)
    return added


class CsvImporter:
    def __init__(self, required_columns: Iterable[str] = REQUIRED_COLUMNS) -> None:
        self.required_columns = tuple(required_columns)
        self.stage = ImportStage.IDLE

    def prepare(self, text: str | bytes) -> PreparedImport:
        """Run the parsing and validating stages; raises ``CsvImportError``."""
        try:
            self.stage = ImportStage.PARSING
            headers, records = parse_csv_text(text)
            self.stage = ImportStage.VALIDATING
            normalized = validate_dataset(headers, records, self.required_columns)
        except CsvImportError:
            self.stage = ImportStage.FAILED
            raise
        rows = [normalize_row_keys(record) for record in records]
        return PreparedImport(headers=normalized, rows=rows)

    def reconcile(self, prepared: PreparedImport, registry: ColumnRegistry) -> Tuple[ColumnRegistry, List[str]]:
        """Return a grown copy of ``registry`` and the ids added to it."""
        self.stage = ImportStage.RECONCILING
        grown = registry.copy()
        added = reconcile_columns(grown, prepared.headers)
        return grown, added

    def mark_committed(self) -> None:
        self.stage = ImportStage.COMMITTED
