"""Parser for the 'Summary of Assets & Liabilities' section.

Holdings are listed per asset rather than per period, so this section is
read line by line without any column alignment.
"""

from __future__ import annotations

import re

from ..core.logging import get_logger
from .amounts import find_amounts, parse_number
from .findings import Extraction, Findings

logger = get_logger(__name__)

_SECTION_RE = re.compile(r"summary\s+of\s+assets\s*(?:&|and)\s*liabilities", re.IGNORECASE)
_HOLDING_RE = re.compile(
    r"\b(?P<symbol>[A-Za-z][A-Za-z0-9]{1,11})\s*\(\s*(?P<quantity>\d[\d,]*(?:\.\d+)?)\s*@\s*\$\s*(?P<price>\d[\d,]*(?:\.\d+)?)\s*\)"
)
_STABLECOIN_RE = re.compile(r"\bUSDC[xX]?\s*:?\s*\$\s*(?P<amount>\d[\d,]*(?:\.\d+)?)")
_NET_RE = re.compile(r"^\s*net\b\s*:?\s*(?=[$(\-])", re.IGNORECASE)
_UNREIMBURSED_RE = re.compile(r"^\s*unreimbursed\b", re.IGNORECASE)


def split_summary_section(text: str) -> tuple[str, str]:
    """Split ``text`` into (summary section, everything else).

    The section runs from its header to the first blank line that follows
    at least one non-blank body line.
    """

    match = _SECTION_RE.search(text)
    if match is None:
        return "", text

    line_start = text.rfind("\n", 0, match.start()) + 1
    lines = text[line_start:].split("\n")

    consumed = 1
    seen_body = False
    for line in lines[1:]:
        if not line.strip():
            if seen_body:
                break
        else:
            seen_body = True
        consumed += 1

    section = "\n".join(lines[:consumed])
    section_end = line_start + len(section)
    remainder = text[:line_start] + text[section_end:]
    return section, remainder


def parse_balance_sheet(section: str, findings: Findings) -> None:
    """Record holdings, net assets and unreimbursed liabilities."""

    for raw_line in section.split("\n"):
        line = raw_line.strip()
        if not line:
            continue

        for match in _HOLDING_RE.finditer(line):
            _record_holding(match, findings)

        for match in _STABLECOIN_RE.finditer(line):
            amount = parse_number(match.group("amount"))
            findings.add_to_metric("usdc_holdings", Extraction(amount, "balance_sheet", "high"))

        if _NET_RE.match(line):
            amounts = find_amounts(line)
            if amounts:
                net = Extraction(amounts[0], "balance_sheet", "high")
                findings.set_field("assets", net, overwrite=True)
                findings.set_field("equity", Extraction(net.value, net.strategy, net.confidence), overwrite=True)
            continue

        if _UNREIMBURSED_RE.match(line):
            amounts = find_amounts(line)
            if amounts:
                owed = abs(amounts[-1])
                findings.set_field("liabilities", Extraction(owed, "balance_sheet", "high"), overwrite=True)
                findings.set_metric("unreimbursed_liabilities", Extraction(owed, "balance_sheet", "high"), overwrite=True)

    logger.debug("parser.balance_sheet.parsed", metrics=sorted(findings.metrics))


def _record_holding(match: re.Match[str], findings: Findings) -> None:
    symbol = match.group("symbol").lower()
    quantity = parse_number(match.group("quantity"))
    price = parse_number(match.group("price"))

    findings.set_metric(f"{symbol}_holdings", Extraction(quantity, "balance_sheet", "high"), overwrite=True)
    findings.set_metric(f"{symbol}_price", Extraction(price, "balance_sheet", "high"), overwrite=True)
    findings.set_metric(f"{symbol}_value", Extraction(quantity * price, "balance_sheet", "high"), overwrite=True)
