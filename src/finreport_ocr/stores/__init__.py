"""Report store backends."""

from .base import ReportStore, seed_store
from .memory import InMemoryReportStore
from .sqlite_store import SQLiteReportStore

__all__ = ["ReportStore", "seed_store", "InMemoryReportStore", "SQLiteReportStore"]
