"""Report store interface."""

from __future__ import annotations

from typing import Iterable, Protocol

from ..models.reports import ExtractedData, Report


class ReportStore(Protocol):
    """Registry of reports keyed by ``"<year>-<quarter>"``.

    ``save_extracted`` is the only way extraction results enter a store.
    """

    def list(self) -> list[Report]:
        ...

    def get(self, key: str) -> Report | None:
        ...

    def put(self, report: Report) -> None:
        ...

    def put_if_absent(self, report: Report) -> bool:
        ...

    def save_extracted(self, key: str, data: ExtractedData) -> Report | None:
        ...


def seed_store(store: ReportStore, reports: Iterable[Report]) -> int:
    """Insert catalog reports that the store does not know yet."""

    return sum(1 for report in reports if store.put_if_absent(report.model_copy(deep=True)))


def sort_reports(reports: Iterable[Report]) -> list[Report]:
    return sorted(reports, key=lambda report: (report.year, report.quarter.value))
