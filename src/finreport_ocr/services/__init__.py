"""Service exports."""

from . import ocr, reports
from .ocr import OCRError, OCROrchestrator, OCRSpaceClient, OCRTimeoutError, TextRecognizer
from .reports import ReportService

__all__ = [
    "ocr",
    "reports",
    "OCRError",
    "OCROrchestrator",
    "OCRSpaceClient",
    "OCRTimeoutError",
    "ReportService",
    "TextRecognizer",
]
