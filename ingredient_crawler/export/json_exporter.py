from __future__ import annotations

import json
from pathlib import Path

from ..models import BatchReport


class JSONExporter:
    """Writes extracted records and per-item failures. Korean text is kept unescaped."""

    def export(self, report: BatchReport, path: str) -> None:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
