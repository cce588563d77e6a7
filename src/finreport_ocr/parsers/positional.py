"""Positional value extraction for labelled statement rows.

A row label is followed by one value per period column. The value for the
target column is read by its ordinal position among the row's tokens. OCR
frequently merges or drops adjacent cells, so short rows fall through to
period-specific alignment rules before giving up.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Literal, Sequence

from ..core.logging import get_logger
from .amounts import find_amounts, strip_amounts
from .columns import TargetColumn
from .findings import Extraction, Findings

logger = get_logger(__name__)

ROW_WINDOW = 2

_LABEL_TEXT_RE = re.compile(r"[A-Za-z]{2,}")
_TOTAL_RE = re.compile(r"\btotal\b", re.IGNORECASE)
_INCOME_HEADER_RE = re.compile(r"\b(?:income|revenues?)\b", re.IGNORECASE)
_EXPENSE_HEADER_RE = re.compile(r"\bexpen(?:se|ses|ditures?)\b", re.IGNORECASE)
_STATEMENT_RE = re.compile(r"\bstatement\b", re.IGNORECASE)

Section = Literal["income", "expense"]


@dataclass(frozen=True, slots=True)
class RowPattern:
    field: str
    pattern: re.Pattern[str]
    absolute: bool = False


@dataclass(frozen=True, slots=True)
class LineItem:
    key: str
    pattern: re.Pattern[str]
    kind: Section


TOP_LEVEL_ROWS: tuple[RowPattern, ...] = (
    RowPattern("revenue", re.compile(r"\btotal\s+income\b", re.IGNORECASE)),
    RowPattern("expenses", re.compile(r"\btotal\s+expenses?\b", re.IGNORECASE), absolute=True),
    RowPattern(
        "net_income",
        re.compile(r"^\s*net(?:\s+(?:income|profit|loss|earnings))?\b(?!\s*(?:cash|assets|revenue))", re.IGNORECASE),
    ),
    RowPattern("gross_profit", re.compile(r"\bgross\s+profit\b", re.IGNORECASE)),
    RowPattern("operating_income", re.compile(r"\boperating\s+income\b", re.IGNORECASE)),
    RowPattern("cash_flow", re.compile(r"\b(?:net\s+)?cash\s+flows?\b", re.IGNORECASE)),
)

INCOME_ITEMS: tuple[LineItem, ...] = (
    LineItem(
        "service_provider_stream",
        re.compile(r"(?:ens\s*dao\s*)?service\s*provider\s*stream", re.IGNORECASE),
        "income",
    ),
    LineItem("realized_gain_loss", re.compile(r"\brealized\s*gain", re.IGNORECASE), "income"),
    LineItem("unrealized_gain_loss", re.compile(r"\bunrealized\s*gain", re.IGNORECASE), "income"),
    LineItem("interest_income", re.compile(r"\b(?:interest|staking)\s*(?:income|rewards?)\b", re.IGNORECASE), "income"),
    LineItem("donations_income", re.compile(r"\b(?:donations?|grants?\s+received)\b", re.IGNORECASE), "income"),
)

# Order matters: the first matching item claims the line.
EXPENSE_ITEMS: tuple[LineItem, ...] = (
    LineItem("legal_expenses", re.compile(r"\blegal\s*services?\b", re.IGNORECASE), "expense"),
    LineItem("accounting_expenses", re.compile(r"\baccounting\b", re.IGNORECASE), "expense"),
    LineItem("travel_expenses", re.compile(r"\bconferences?\s*(?:&|and)?\s*travel\b", re.IGNORECASE), "expense"),
    LineItem("gas_expenses", re.compile(r"\beth\s*gas\b|\bgas\s*transactions?\b", re.IGNORECASE), "expense"),
    LineItem("software_expenses", re.compile(r"\bsoftware\b|\bsubscriptions?\b", re.IGNORECASE), "expense"),
    LineItem("team_expenses", re.compile(r"\bteam\b", re.IGNORECASE), "expense"),
    LineItem("services_expenses", re.compile(r"\bservices\b", re.IGNORECASE), "expense"),
)

LINE_ITEM_CATALOG: tuple[LineItem, ...] = INCOME_ITEMS + EXPENSE_ITEMS


def _has_label(line: str) -> bool:
    return _LABEL_TEXT_RE.search(strip_amounts(line)) is not None


def section_header(line: str) -> Section | None:
    """Return the section a value-free header line opens, if any."""

    if find_amounts(line, loose=True):
        return None
    if _EXPENSE_HEADER_RE.search(line):
        return "expense"
    if _INCOME_HEADER_RE.search(line) and not _STATEMENT_RE.search(line):
        return "income"
    return None


def collect_row_tokens(
    lines: Sequence[str],
    start: int,
    *,
    needed: int | None = None,
    window: int = ROW_WINDOW,
    loose: bool = False,
) -> list[float]:
    """Gather a row's values from its label line and any value-only lines below it.

    Collection stops at the next labelled line, at the end of the window, or
    once ``needed`` tokens are found.
    """

    tokens = find_amounts(lines[start], loose=loose)

    for line in lines[start + 1 : start + 1 + window]:
        if needed is not None and len(tokens) >= needed:
            break
        if _has_label(line):
            break
        tokens.extend(find_amounts(line, loose=loose))

    return tokens


def _positional(tokens: Sequence[float], target: TargetColumn) -> Extraction | None:
    if len(tokens) > target.index:
        return Extraction(tokens[target.index], "positional", "high")
    return None


def _short_row(tokens: Sequence[float], target: TargetColumn) -> Extraction | None:
    period = target.period
    if period is not None and period.short_row_index is not None:
        index = period.short_row_index
        if -len(tokens) <= index < len(tokens):
            return Extraction(tokens[index], "short_row", "medium")
        return None

    # The most recent column sits rightmost.
    if target.is_last and tokens:
        return Extraction(tokens[-1], "short_row", "medium")
    return None


ROW_STRATEGIES: tuple[Callable[[Sequence[float], TargetColumn], Extraction | None], ...] = (
    _positional,
    _short_row,
)


def extract_row_value(lines: Sequence[str], start: int, target: TargetColumn) -> Extraction | None:
    """Return the target column's value for the row labelled on ``lines[start]``."""

    tokens = collect_row_tokens(lines, start, needed=target.index + 1)
    if not tokens:
        return None

    for strategy in ROW_STRATEGIES:
        result = strategy(tokens, target)
        if result is not None:
            return result

    logger.debug("parser.row.unaligned", line=lines[start], tokens=len(tokens), column_index=target.index)
    return None


def extract_top_level(lines: Sequence[str], target: TargetColumn, findings: Findings) -> None:
    """Populate revenue, expenses and the other headline rows."""

    for row in TOP_LEVEL_ROWS:
        for index, line in enumerate(lines):
            if not row.pattern.search(line):
                continue
            result = extract_row_value(lines, index, target)
            if result is None:
                continue
            if row.absolute:
                result.value = abs(result.value)
            findings.set_field(row.field, result)
            break


def extract_line_items(
    lines: Sequence[str],
    target: TargetColumn,
    findings: Findings,
    *,
    catalog: Sequence[LineItem] = LINE_ITEM_CATALOG,
) -> None:
    """Populate custom metrics for the named income and expense sub-items.

    Items are only matched inside their own section, which starts at an
    "Income" or "Expenses" header line and runs until the next one.
    """

    section: Section | None = None

    for index, line in enumerate(lines):
        header = section_header(line)
        if header is not None:
            section = header
            continue
        if section is None or _TOTAL_RE.search(line):
            continue

        item = next(
            (candidate for candidate in catalog if candidate.kind == section and candidate.pattern.search(line)),
            None,
        )
        if item is None:
            continue

        result = extract_row_value(lines, index, target)
        if result is None:
            continue
        if item.kind == "expense":
            result.value = abs(result.value)
        findings.set_metric(item.key, result)
