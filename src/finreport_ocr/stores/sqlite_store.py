"""Durable report store on a local SQLite file."""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from ..models.reports import ExtractedData, Quarter, Report


@dataclass(slots=True)
class SQLiteReportStore:
    """Durable report registry backed by a single SQLite file.

    Rows are keyed by (year, quarter). Extraction results are stored as JSON
    so cached reports survive restarts.
    """

    db_path: Path

    def __post_init__(self) -> None:
        with self._connect() as conn:
            self._ensure_schema(conn)

    def list(self) -> list[Report]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT year, quarter, image_refs, extracted_data FROM reports ORDER BY year, quarter"
            ).fetchall()
        return [self._to_report(row) for row in rows]

    def get(self, key: str) -> Report | None:
        year, quarter = _split_key(key)
        with self._connect() as conn:
            row = conn.execute(
                "SELECT year, quarter, image_refs, extracted_data FROM reports WHERE year = ? AND quarter = ?",
                (year, quarter),
            ).fetchone()
        return self._to_report(row) if row else None

    def put(self, report: Report) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO reports (year, quarter, image_refs, extracted_data, updated_at)
                VALUES (?, ?, ?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(year, quarter) DO UPDATE SET
                    image_refs = excluded.image_refs,
                    extracted_data = excluded.extracted_data,
                    updated_at = CURRENT_TIMESTAMP
                """,
                self._to_row(report),
            )

    def put_if_absent(self, report: Report) -> bool:
        with self._connect() as conn:
            cursor = conn.execute(
                """
                INSERT INTO reports (year, quarter, image_refs, extracted_data, updated_at)
                VALUES (?, ?, ?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(year, quarter) DO NOTHING
                """,
                self._to_row(report),
            )
            return cursor.rowcount == 1

    def save_extracted(self, key: str, data: ExtractedData) -> Report | None:
        year, quarter = _split_key(key)
        with self._connect() as conn:
            cursor = conn.execute(
                """
                UPDATE reports
                SET extracted_data = ?, updated_at = CURRENT_TIMESTAMP
                WHERE year = ? AND quarter = ?
                """,
                (data.model_dump_json(), year, quarter),
            )
            if cursor.rowcount == 0:
                return None
        return self.get(key)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA synchronous=NORMAL;")
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _ensure_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS reports (
                year INTEGER NOT NULL,
                quarter TEXT NOT NULL,
                image_refs TEXT NOT NULL,
                extracted_data TEXT,
                created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                PRIMARY KEY (year, quarter)
            )
            """
        )

    @staticmethod
    def _to_row(report: Report) -> tuple[int, str, str, str | None]:
        extracted = report.extracted_data.model_dump_json() if report.extracted_data is not None else None
        return (report.year, report.quarter.value, json.dumps(report.image_refs), extracted)

    @staticmethod
    def _to_report(row: tuple) -> Report:
        year, quarter, image_refs, extracted = row
        return Report(
            quarter=Quarter(quarter),
            year=year,
            image_refs=json.loads(image_refs),
            extracted_data=ExtractedData.model_validate_json(extracted) if extracted else None,
        )


def _split_key(key: str) -> tuple[int, str]:
    year, _, quarter = key.partition("-")
    try:
        return int(year), Quarter(quarter).value
    except ValueError as exc:
        raise KeyError(f"Malformed report key: {key}") from exc


