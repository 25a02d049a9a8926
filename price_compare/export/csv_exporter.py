from __future__ import annotations

import csv
from typing import Sequence
from pathlib import Path

from ..adapters.base import ComparisonResult


class CSVExporter:
    """
    One row per ranked offer, cheapest first.
    """

    _headers = [
        "rank",
        "query",
        "retailer",
        "title",
        "price",
        "shipping",
        "total_cost",
        "delivery_days",
        "link",
    ]

    def export(self, query: str, results: Sequence[ComparisonResult], path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8", newline="") as f:
            w = csv.writer(f)
            w.writerow(self._headers)
            for rank, result in enumerate(results, start=1):
                w.writerow(
                    [
                        rank,
                        query,
                        result.retailer,
                        result.title or "",
                        result.price,
                        result.shipping,
                        result.total_cost,
                        "" if result.delivery_days is None else result.delivery_days,
                        result.link,
                    ]
                )
