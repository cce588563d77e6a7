"""Report lookup and cached extraction."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Dict, Sequence

from ..catalog import resolve_catalog, resolve_period_table
from ..core.config import AppSettings
from ..core.logging import get_logger
from ..models.reports import Quarter, Report, ReportRef, report_key
from ..parsers.columns import PeriodPattern
from ..parsers.statement import parse_statement
from ..stores.base import ReportStore, seed_store
from ..stores.memory import InMemoryReportStore
from ..stores.sqlite_store import SQLiteReportStore
from .ocr import OCROrchestrator, OCRSpaceClient

logger = get_logger(__name__)


class ReportService:
    """Expose the report catalog and run OCR extraction on demand.

    Extraction for a key runs under a per-key lock, so concurrent requests for
    the same report share one OCR pass instead of racing to write the store.
    """

    def __init__(
        self,
        store: ReportStore,
        *,
        ocr: OCROrchestrator,
        period_table: Sequence[PeriodPattern],
        magnitude_floor: float = 100.0,
    ) -> None:
        self._store = store
        self._ocr = ocr
        self._period_table = list(period_table)
        self._magnitude_floor = magnitude_floor
        self._locks: Dict[str, asyncio.Lock] = {}

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "ReportService":
        store: ReportStore
        if settings.report_store_path:
            store = SQLiteReportStore(Path(settings.report_store_path))
        else:
            store = InMemoryReportStore()

        seeded = seed_store(store, resolve_catalog(settings.report_catalog_path))
        logger.info("reports.store.seeded", backend=type(store).__name__, inserted=seeded)

        orchestrator = OCROrchestrator(
            recognizer=OCRSpaceClient.from_settings(settings),
            image_timeout=settings.ocr_image_timeout,
        )
        return cls(
            store,
            ocr=orchestrator,
            period_table=resolve_period_table(settings.period_table_path),
            magnitude_floor=settings.fallback_magnitude_floor,
        )

    def list_available_reports(self) -> list[ReportRef]:
        return [ReportRef(quarter=report.quarter, year=report.year) for report in self._store.list()]

    def get_report(self, quarter: Quarter | str, year: int) -> Report | None:
        return self._store.get(report_key(quarter, year))

    async def process_and_cache_report(
        self,
        quarter: Quarter | str,
        year: int,
        force_refresh: bool = False,
    ) -> Report | None:
        """Return the report with extracted data, running OCR only when needed.

        Unknown reports yield ``None`` without any OCR call.
        """

        key = report_key(quarter, year)
        report = self._store.get(key)
        if report is None:
            logger.info("reports.process.unknown", report=key)
            return None

        if report.extracted_data is not None and not force_refresh:
            logger.info("reports.process.cache_hit", report=key)
            return report

        lock = self._locks.setdefault(key, asyncio.Lock())
        async with lock:
            report = self._store.get(key)
            if report is None:
                return None
            if report.extracted_data is not None and not force_refresh:
                logger.info("reports.process.cache_hit", report=key, waited=True)
                return report

            logger.info("reports.process.extracting", report=key, images=len(report.image_refs), forced=force_refresh)
            text = await self._ocr.extract_text(report.image_refs)
            data = parse_statement(
                text,
                report.quarter,
                report.year,
                period_table=self._period_table,
                magnitude_floor=self._magnitude_floor,
            )
            if not data.has_figures():
                logger.warning("reports.process.empty_result", report=key, text_length=len(text))

            return self._store.save_extracted(key, data)
