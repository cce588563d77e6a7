"""Tests for whole-statement parsing."""

import pytest

from finreport_ocr.catalog import DEFAULT_PERIOD_TABLE
from finreport_ocr.models import Quarter
from finreport_ocr.parsers.statement import parse_statement

from samples import CUMULATIVE_Q4_2024


def _parse(text: str, quarter: Quarter = Quarter.Q4, year: int = 2024):
    return parse_statement(text, quarter, year, period_table=DEFAULT_PERIOD_TABLE)


def test_parses_headline_figures_from_target_column() -> None:
    data = _parse(CUMULATIVE_Q4_2024)

    assert data.revenue == pytest.approx(136_200.50)
    assert data.expenses == pytest.approx(92_870.00)
    assert data.net_income == pytest.approx(43_330.50)
    assert data.column_label == "10/1/24 - 12/31/24"


def test_parses_line_items_and_holdings() -> None:
    metrics = _parse(CUMULATIVE_Q4_2024).custom_metrics

    assert metrics["service_provider_stream"] == pytest.approx(135_000)
    assert metrics["realized_gain_loss"] == pytest.approx(1_200.50)
    assert metrics["team_expenses"] == pytest.approx(85_000)
    assert metrics["legal_expenses"] == pytest.approx(6_250)
    assert metrics["travel_expenses"] == pytest.approx(1_500)
    assert metrics["gas_expenses"] == pytest.approx(120)
    assert metrics["eth_holdings"] == pytest.approx(61.763)
    assert metrics["eth_value"] == pytest.approx(61.763 * 3_332.53)
    assert metrics["ens_value"] == pytest.approx(350_000)
    assert metrics["usdc_holdings"] == pytest.approx(125_500.50)


def test_summary_net_does_not_leak_into_net_income() -> None:
    data = _parse(CUMULATIVE_Q4_2024)

    assert data.assets == pytest.approx(655_824.89)
    assert data.equity == pytest.approx(655_824.89)
    assert data.liabilities == pytest.approx(12_000)
    assert data.net_income != data.assets


def test_provenance_records_strategy_per_value() -> None:
    provenance = _parse(CUMULATIVE_Q4_2024).provenance

    assert provenance["revenue"] == "positional:high"
    assert provenance["team_expenses"] == "positional:high"
    assert provenance["assets"] == "balance_sheet:high"
    assert provenance["usdc_holdings"] == "balance_sheet:high"


def test_most_recent_table_column_is_read_whatever_period_is_requested() -> None:
    data = _parse(CUMULATIVE_Q4_2024, Quarter.Q3, 2024)

    assert data.revenue == pytest.approx(136_200.50)
    assert data.column_label == "10/1/24 - 12/31/24"


def test_parenthesised_total_is_stored_as_positive_expense() -> None:
    text = "10/1/24 - 12/31/24\nTotal Expenses ($125,189.30)\n"

    data = _parse(text)

    assert data.expenses == pytest.approx(125_189.30)


def test_raw_text_is_retained() -> None:
    assert _parse(CUMULATIVE_Q4_2024).raw_text == CUMULATIVE_Q4_2024


def test_unparseable_text_yields_empty_result() -> None:
    data = _parse("scanner error: page unreadable")

    assert not data.has_figures()
    assert data.custom_metrics == {}
    assert data.raw_text == "scanner error: page unreadable"


def test_empty_text_does_not_raise() -> None:
    data = _parse("")

    assert data.revenue is None
    assert data.raw_text == ""
