from __future__ import annotations

from typing import Protocol, Sequence

from ..adapters.base import ComparisonResult


class Exporter(Protocol):
    def export(self, query: str, results: Sequence[ComparisonResult], path: str) -> None:
        ...


# Dotted paths so the CLI can pick an exporter by format name.
EXPORTERS = {
    "csv": "price_compare.export.csv_exporter:CSVExporter",
    "json": "price_compare.export.json_exporter:JSONExporter",
}
