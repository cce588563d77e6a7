"""Parsing modules."""

from .amounts import find_amounts, parse_number
from .balance_sheet import parse_balance_sheet, split_summary_section
from .columns import PeriodPattern, QuarterColumn, TargetColumn, date_range_pattern, detect_columns, resolve_target_column
from .fallback import extract_fallback, pick_fallback_token
from .findings import Extraction, Findings
from .positional import extract_line_items, extract_row_value, extract_top_level
from .statement import parse_statement

__all__ = [
    "Extraction",
    "Findings",
    "PeriodPattern",
    "QuarterColumn",
    "TargetColumn",
    "date_range_pattern",
    "detect_columns",
    "extract_fallback",
    "extract_line_items",
    "extract_row_value",
    "extract_top_level",
    "find_amounts",
    "parse_balance_sheet",
    "parse_number",
    "parse_statement",
    "pick_fallback_token",
    "resolve_target_column",
    "split_summary_section",
]
