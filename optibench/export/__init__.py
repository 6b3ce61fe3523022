"""Export — simulation result data export (CSV)."""

from optibench.export.csv_export import CsvExporter

__all__ = [
    "CsvExporter",
]
