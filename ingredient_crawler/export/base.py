from __future__ import annotations

from typing import Protocol

from ..models import BatchReport


class Exporter(Protocol):
    def export(self, report: BatchReport, path: str) -> None:
        ...
