from __future__ import annotations

import json
from typing import Sequence
from pathlib import Path

from ..adapters.base import ComparisonResult


class JSONExporter:
    def export(self, query: str, results: Sequence[ComparisonResult], path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            payload = {"query": query, "data": [r.to_dict() for r in results]}
            json.dump(payload, f, indent=2, ensure_ascii=False)
