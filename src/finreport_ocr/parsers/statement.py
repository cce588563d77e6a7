"""Statement parsing facade: OCR text in, ExtractedData out."""

from __future__ import annotations

from typing import Sequence

from ..core.logging import get_logger
from ..models.reports import ExtractedData, Quarter
from .balance_sheet import parse_balance_sheet, split_summary_section
from .columns import PeriodPattern, detect_columns, resolve_target_column
from .fallback import extract_fallback
from .findings import Extraction, Findings
from .positional import extract_line_items, extract_top_level

logger = get_logger(__name__)


def parse_statement(
    text: str,
    quarter: Quarter | str,
    year: int,
    *,
    period_table: Sequence[PeriodPattern],
    magnitude_floor: float = 100.0,
) -> ExtractedData:
    """Parse one report's combined OCR text.

    Never raises on malformed text; fields that cannot be found stay ``None``.
    """

    findings = Findings()
    summary, statement_text = split_summary_section(text)
    lines = [line.strip() for line in statement_text.split("\n")]

    columns = detect_columns(text)
    target = resolve_target_column(columns, quarter, year, period_table)

    if target is not None:
        extract_top_level(lines, target, findings)
        extract_line_items(lines, target, findings)
    else:
        extract_fallback(lines, findings, magnitude_floor=magnitude_floor)

    if summary:
        parse_balance_sheet(summary, findings)

    _derive_net_income(findings)

    logger.debug(
        "parser.statement.parsed",
        quarter=Quarter(quarter).value,
        year=year,
        column=target.label if target else None,
        fields=sorted(findings.fields),
        metrics=len(findings.metrics),
    )
    return findings.to_extracted_data(raw_text=text, column_label=target.label if target else None)


def _derive_net_income(findings: Findings) -> None:
    if "net_income" in findings.fields:
        return
    revenue = findings.value("revenue")
    expenses = findings.value("expenses")
    if revenue is None or expenses is None:
        return
    findings.set_field("net_income", Extraction(revenue - expenses, "derived", "medium"))
