"""In-process report registry."""

from __future__ import annotations

from typing import Dict

from ..models.reports import ExtractedData, Report
from .base import sort_reports


class InMemoryReportStore:
    """Keep reports in a dict; callers receive the stored objects themselves."""

    def __init__(self) -> None:
        self._reports: Dict[str, Report] = {}

    def list(self) -> list[Report]:
        return sort_reports(self._reports.values())

    def get(self, key: str) -> Report | None:
        return self._reports.get(key)

    def put(self, report: Report) -> None:
        self._reports[report.key] = report

    def put_if_absent(self, report: Report) -> bool:
        if report.key in self._reports:
            return False
        self._reports[report.key] = report
        return True

    def save_extracted(self, key: str, data: ExtractedData) -> Report | None:
        report = self._reports.get(key)
        if report is None:
            return None
        report.extracted_data = data
        return report

    def __len__(self) -> int:
        return len(self._reports)
