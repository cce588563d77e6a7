"""Tests for the headerless fallback extractor."""

import pytest

from finreport_ocr.catalog import DEFAULT_PERIOD_TABLE
from finreport_ocr.models import Quarter
from finreport_ocr.parsers.fallback import extract_fallback, pick_fallback_token
from finreport_ocr.parsers.findings import Findings
from finreport_ocr.parsers.statement import parse_statement

from samples import NO_HEADERS


def test_pick_takes_second_to_last_of_three_or_more() -> None:
    assert pick_fallback_token([1_250.0, 150_000.0, 900_000.0], magnitude_floor=100) == 150_000.0


def test_pick_takes_last_of_fewer_than_three() -> None:
    assert pick_fallback_token([1_250.0, 150_000.0], magnitude_floor=100) == 150_000.0


def test_pick_drops_tokens_below_floor_before_choosing() -> None:
    assert pick_fallback_token([3.0, 150_000.0, 7.0, 900_000.0], magnitude_floor=100) == 900_000.0
    assert pick_fallback_token([3.0, 7.0], magnitude_floor=100) is None


def test_floor_applies_to_magnitude_of_negatives() -> None:
    assert pick_fallback_token([-5.0, -400.0], magnitude_floor=100) == -400.0


def test_headerless_statement_uses_fallback_and_derives_net() -> None:
    data = parse_statement(NO_HEADERS, Quarter.Q2, 2025, period_table=DEFAULT_PERIOD_TABLE)

    assert data.revenue == 150_000.0
    assert data.expenses == 400_000.0
    assert data.net_income == -250_000.0
    assert data.column_label is None
    assert data.provenance["revenue"] == "fallback:low"
    assert data.provenance["net_income"] == "derived:medium"


def test_labelled_figures_scale_units() -> None:
    findings = Findings()

    extract_fallback(
        ["Revenue: $2.5 million", "Operating expenses 1,200 K", "Net income $300,000"],
        findings,
        magnitude_floor=100,
    )

    assert findings.value("revenue") == pytest.approx(2_500_000)
    assert findings.value("expenses") == pytest.approx(1_200_000)
    assert findings.value("net_income") == pytest.approx(300_000)
    assert findings.fields["revenue"].tag == "labelled:low"


def test_labelled_values_below_floor_are_skipped() -> None:
    findings = Findings()

    extract_fallback(["Page 3 Revenue 4"], findings, magnitude_floor=100)

    assert findings.value("revenue") is None


def test_fallback_rows_continue_on_unlabelled_value_lines() -> None:
    findings = Findings()

    extract_fallback(
        ["Total Income", "1,250.00 150,000.00", "900,000.00", "Expenses"],
        findings,
        magnitude_floor=100,
    )

    assert findings.value("revenue") == 150_000.0
    assert findings.fields["revenue"].tag == "fallback:low"
