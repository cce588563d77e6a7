"""Quarter column detection and target column resolution.

Statements report several periods side by side. OCR flattens the table into
text, so the left-to-right column order is recovered from the character
offsets of the period headers: a header found earlier in the text is assumed
to sit further left in the table.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence

from pydantic import BaseModel, Field

from ..core.logging import get_logger
from ..models.reports import Quarter, report_key

logger = get_logger(__name__)

_DATE = r"\d{1,2}/\d{1,2}/\d{2,4}"
_DATE_RANGE_RE = re.compile(rf"(?<![\d/])({_DATE})\s*(?:[-–—~]+|to)\s*({_DATE})(?![\d/])", re.IGNORECASE)
_THROUGH_RE = re.compile(r"\bthrough\s+(?:\d{1,2}/\d{1,2}/)?(?:\d{4}|\d{2})\b", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(slots=True)
class QuarterColumn:
    label: str
    offset: int


class PeriodPattern(BaseModel):
    """Header patterns that denote one reporting period."""

    quarter: Quarter
    year: int
    patterns: list[str] = Field(min_length=1)
    short_row_index: int | None = Field(
        default=None,
        description="Token index to read when a row has fewer tokens than columns (-1 = last token).",
    )

    @property
    def key(self) -> str:
        return report_key(self.quarter, self.year)

    def matches(self, label: str) -> bool:
        return any(re.search(pattern, label, re.IGNORECASE) for pattern in self.patterns)


@dataclass(slots=True)
class TargetColumn:
    label: str
    offset: int
    index: int
    period: PeriodPattern | None = None
    matched_by: str = "period_table"

    @property
    def is_last(self) -> bool:
        return self.matched_by == "last_column"


def date_range_pattern(start: str, end: str) -> str:
    """Build an OCR-tolerant regex for a 'M/D/YY - M/D/YY' header."""

    return rf"(?<![\d/]){_date_pattern(start)}\s*(?:[-–—~]+|to)\s*{_date_pattern(end)}(?![\d/])"


def _date_pattern(value: str) -> str:
    month, day, year = value.split("/")
    short_year = year[-2:]
    return rf"0?{int(month)}/0?{int(day)}/(?:20)?{short_year}"


def detect_columns(text: str) -> list[QuarterColumn]:
    """Find period headers and return them ordered by position in the text."""

    columns: list[QuarterColumn] = []

    for pattern in (_DATE_RANGE_RE, _THROUGH_RE):
        for match in pattern.finditer(text):
            label = _WHITESPACE_RE.sub(" ", match.group(0)).strip()
            columns.append(QuarterColumn(label=label, offset=match.start()))

    columns.sort(key=lambda column: column.offset)
    logger.debug("parser.columns.detected", count=len(columns), labels=[column.label for column in columns])
    return columns


def resolve_target_column(
    columns: Sequence[QuarterColumn],
    quarter: Quarter | str,
    year: int,
    period_table: Sequence[PeriodPattern],
) -> TargetColumn | None:
    """Pick the column to read values from.

    Table entries are tried in their given priority order (most recent
    first) and the first entry that matches any detected column wins, even
    when it denotes a period other than the requested one. Without a match
    the last detected column is used; with no columns at all, ``None`` is
    returned.
    """

    if not columns:
        return None

    requested = report_key(quarter, year)

    for period in period_table:
        for index, column in enumerate(columns):
            if period.matches(column.label):
                logger.debug(
                    "parser.columns.resolved",
                    requested=requested,
                    period=period.key,
                    label=column.label,
                    index=index,
                )
                return TargetColumn(
                    label=column.label,
                    offset=column.offset,
                    index=index,
                    period=period,
                    matched_by="period_table",
                )

    last = columns[-1]
    logger.debug("parser.columns.last_column", requested=requested, label=last.label, index=len(columns) - 1)
    return TargetColumn(
        label=last.label,
        offset=last.offset,
        index=len(columns) - 1,
        matched_by="last_column",
    )
