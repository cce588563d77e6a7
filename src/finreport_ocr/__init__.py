"""Quarterly financial report extraction from OCR'd statement images."""

from .models import ExtractedData, Quarter, Report, ReportRef
from .parsers import parse_statement
from .services import OCROrchestrator, OCRSpaceClient, ReportService

__version__ = "0.1.0"

__all__ = [
    "ExtractedData",
    "OCROrchestrator",
    "OCRSpaceClient",
    "Quarter",
    "Report",
    "ReportRef",
    "ReportService",
    "parse_statement",
]
