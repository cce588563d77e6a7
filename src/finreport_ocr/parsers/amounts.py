"""Numeric token recognition for OCR'd statement rows."""

from __future__ import annotations

import re

_NUMBER = r"\d[\d,]*(?:\.\d+)?"

# Currency-prefixed values, and parenthesised values read as negatives.
_AMOUNT_RE = re.compile(
    rf"""
    \$\s*\(\s*(?P<dollar_paren>{_NUMBER})\s*\)
    | \(\s*\$?\s*(?P<paren>{_NUMBER})\s*\)
    | (?P<minus>-)?\$\s*(?P<plain>{_NUMBER})
    """,
    re.VERBOSE,
)

# Looser variant that also accepts bare grouped or decimal numbers.
_LOOSE_AMOUNT_RE = re.compile(
    rf"""
    \$\s*\(\s*(?P<dollar_paren>{_NUMBER})\s*\)
    | \(\s*\$?\s*(?P<paren>{_NUMBER})\s*\)
    | (?P<minus>-)?\$\s*(?P<plain>{_NUMBER})
    | (?<![\d/.,])(?P<bare>\d{{1,3}}(?:,\d{{3}})+(?:\.\d+)?|\d+\.\d+)(?![\d/])
    """,
    re.VERBOSE,
)

_SCALES = {
    "thousand": 1_000,
    "k": 1_000,
    "million": 1_000_000,
    "m": 1_000_000,
    "billion": 1_000_000_000,
    "b": 1_000_000_000,
}


def parse_number(raw: str) -> float:
    """Convert '1,234.56' style text to a float."""

    cleaned = raw.strip().rstrip(",").replace(",", "")
    return float(cleaned)


def find_amounts(line: str, *, loose: bool = False) -> list[float]:
    """Return every monetary value on a line, in left-to-right order."""

    pattern = _LOOSE_AMOUNT_RE if loose else _AMOUNT_RE
    values: list[float] = []

    for match in pattern.finditer(line):
        groups = match.groupdict()
        try:
            if groups.get("dollar_paren"):
                values.append(-parse_number(groups["dollar_paren"]))
            elif groups.get("paren"):
                values.append(-parse_number(groups["paren"]))
            elif groups.get("plain"):
                value = parse_number(groups["plain"])
                values.append(-value if groups.get("minus") else value)
            elif groups.get("bare"):
                values.append(parse_number(groups["bare"]))
        except ValueError:
            continue

    return values


def strip_amounts(line: str) -> str:
    """Remove monetary tokens, leaving the row label text."""

    return _AMOUNT_RE.sub(" ", line).strip()


def scale_amount(value: float, unit: str | None) -> float:
    """Apply a 'million'/'M'/'K'... magnitude suffix."""

    if not unit:
        return value
    return value * _SCALES.get(unit.strip().lower(), 1)
