from .exporter import export_csv, export_filename
from .importer import (
    REQUIRED_COLUMNS,
    CsvImporter,
    ImportResult,
    ImportStage,
    PreparedImport,
    parse_csv_text,
    reconcile_columns,
    validate_dataset,
)
from .worker import ImportWorker

__all__ = [
    "REQUIRED_COLUMNS",
    "CsvImporter",
    "ImportResult",
    "ImportStage",
    "ImportWorker",
    "PreparedImport",
    "export_csv",
    "export_filename",
    "parse_csv_text",
    "reconcile_columns",
    "validate_dataset",
]
