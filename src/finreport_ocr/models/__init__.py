"""Report schemas."""

from .reports import METRIC_FIELDS, ExtractedData, Quarter, Report, ReportRef, report_key

__all__ = ["METRIC_FIELDS", "ExtractedData", "Quarter", "Report", "ReportRef", "report_key"]
