"""Best-effort extraction for statements without recognisable column headers.

Both heuristics here are tuned to the cumulative report layout: the
per-period figure usually sits just before a grand-total column, and tiny
values on a labelled line are OCR debris (footnote marks, page numbers)
rather than financial figures.
"""

from __future__ import annotations

import re
from typing import Sequence

from ..core.logging import get_logger
from .amounts import parse_number, scale_amount
from .findings import Extraction, Findings
from .positional import collect_row_tokens

logger = get_logger(__name__)

FALLBACK_WINDOW = 2

_FALLBACK_ROWS: tuple[tuple[str, re.Pattern[str], bool], ...] = (
    ("revenue", re.compile(r"\btotal\s+income\b", re.IGNORECASE), False),
    ("expenses", re.compile(r"\btotal\s+expenses?\b", re.IGNORECASE), True),
    ("net_income", re.compile(r"^\s*net\b(?!\s*(?:cash|assets|revenue))", re.IGNORECASE), False),
)

_UNIT = r"(?P<unit>million|billion|thousand|[MBK])\b"
_LABELLED_PATTERNS: dict[str, tuple[str, bool]] = {
    "revenue": (r"total\s+revenue|net\s+revenue|gross\s+revenue|revenue|sales|total\s+income", False),
    "expenses": (r"total\s+expenses|operating\s+expenses", True),
    "net_income": (r"net\s+income|net\s+profit|net\s+earnings|net\s+loss", False),
    "gross_profit": (r"gross\s+profit|gross\s+margin|gross\s+income", False),
    "operating_income": (r"operating\s+income|operating\s+profit|EBIT|operating\s+earnings", False),
    "cash_flow": (r"operating\s+cash\s+flow|free\s+cash\s+flow|cash\s+flow", False),
}


def _labelled_regex(label: str) -> re.Pattern[str]:
    return re.compile(
        rf"\b(?:{label})\b[: \t]*\$?[ \t]*(?P<amount>\d[\d,]*(?:\.\d+)?)[ \t]*(?:{_UNIT})?",
        re.IGNORECASE,
    )


_LABELLED_RES = {name: (_labelled_regex(label), absolute) for name, (label, absolute) in _LABELLED_PATTERNS.items()}


def pick_fallback_token(tokens: Sequence[float], *, magnitude_floor: float) -> float | None:
    """Choose the per-period value from a row of unaligned tokens."""

    candidates = [token for token in tokens if abs(token) >= magnitude_floor]
    if not candidates:
        return None
    if len(candidates) >= 3:
        return candidates[-2]
    return candidates[-1]


def extract_fallback(
    lines: Sequence[str],
    findings: Findings,
    *,
    magnitude_floor: float,
    window: int = FALLBACK_WINDOW,
) -> None:
    """Recover headline figures without column alignment."""

    logger.info("parser.fallback.triggered", lines=len(lines))

    for field, pattern, absolute in _FALLBACK_ROWS:
        if field in findings.fields:
            continue
        for index, line in enumerate(lines):
            if not pattern.search(line):
                continue
            value = pick_fallback_token(
                collect_row_tokens(lines, index, window=window, loose=True),
                magnitude_floor=magnitude_floor,
            )
            if value is None:
                continue
            findings.set_field(field, Extraction(abs(value) if absolute else value, "fallback", "low"))
            break

    _extract_labelled(lines, findings, magnitude_floor=magnitude_floor)


def _extract_labelled(lines: Sequence[str], findings: Findings, *, magnitude_floor: float) -> None:
    """'Label: $X million' style figures for anything still missing."""

    text = "\n".join(lines)
    for field, (regex, absolute) in _LABELLED_RES.items():
        if field in findings.fields:
            continue
        for match in regex.finditer(text):
            value = scale_amount(parse_number(match.group("amount")), match.group("unit"))
            if value < magnitude_floor:
                continue
            findings.set_field(field, Extraction(abs(value) if absolute else value, "labelled", "low"))
            break
