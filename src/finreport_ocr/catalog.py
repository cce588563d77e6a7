"""Built-in report catalog and period header table.

Both can be replaced by operator-supplied JSON files (see ``AppSettings``):
new quarters are added as data, not code.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import TypeAdapter

from .models.reports import ExtractedData, Quarter, Report
from .parsers.columns import PeriodPattern, date_range_pattern

_UPLOADS = "https://discuss.ens.domains/uploads/db9688/original/2X"

DEFAULT_REPORTS: tuple[Report, ...] = (
    Report(
        quarter=Quarter.Q2,
        year=2024,
        image_refs=[f"{_UPLOADS}/5/5bdec62cae38cdfe36e9d3f55bee6fb9c8a01514.jpeg"],
    ),
    Report(
        quarter=Quarter.Q3,
        year=2024,
        image_refs=[
            f"{_UPLOADS}/5/5d0ebd43d1552fb872d92ce4d675930c484608f5.jpeg",
            f"{_UPLOADS}/0/0439583f5c1b4ca4c304be8b0e561c20c8d839c5.jpeg",
        ],
    ),
    Report(
        quarter=Quarter.Q4,
        year=2024,
        image_refs=[
            f"{_UPLOADS}/7/7a80fa4dbe56021c02e2b28a57a7a5e1d3f04fc6.png",
            f"{_UPLOADS}/2/2065db635fef13ba9c9314806d14c4248f2cec62.png",
        ],
        extracted_data=ExtractedData(
            revenue=2_350_000,
            expenses=1_850_000,
            net_income=500_000,
            custom_metrics={
                "eth_holdings": 800,
                "eth_value": 2_000_000,
                "ens_holdings": 25_000,
                "ens_value": 350_000,
                "usdc_holdings": 150_000,
            },
            raw_text="Pre-cached financial data for Q4 2024",
        ),
    ),
    Report(
        quarter=Quarter.Q1,
        year=2025,
        image_refs=[
            f"{_UPLOADS}/c/ce762dfc423f269864fd98a3f2c0ae2c5ef42c5e.png",
            f"{_UPLOADS}/0/04aac8f3fa4755ca5dc2a94ae55abe11b0300972.png",
        ],
        extracted_data=ExtractedData(
            revenue=2_450_000,
            expenses=1_950_000,
            net_income=500_000,
            custom_metrics={
                "eth_holdings": 850,
                "eth_value": 2_125_000,
                "ens_holdings": 26_000,
                "ens_value": 390_000,
                "usdc_holdings": 180_000,
            },
            raw_text="Pre-cached financial data for Q1 2025",
        ),
    ),
    Report(
        quarter=Quarter.Q2,
        year=2025,
        image_refs=[
            f"{_UPLOADS}/b/b2b1c0b8f3961a9edd7c7e0b58f37b6e606a1058.jpeg",
            f"{_UPLOADS}/9/955551005f60b3ba73e1c5d87be1ee910684faf5.jpeg",
        ],
    ),
)

# Most recent period first; the first entry matching a detected header wins.
DEFAULT_PERIOD_TABLE: tuple[PeriodPattern, ...] = (
    PeriodPattern(quarter=Quarter.Q2, year=2025, patterns=[date_range_pattern("4/1/25", "6/30/25")]),
    PeriodPattern(
        quarter=Quarter.Q1,
        year=2025,
        patterns=[date_range_pattern("1/1/25", "3/31/25")],
        short_row_index=1,
    ),
    PeriodPattern(
        quarter=Quarter.Q4,
        year=2024,
        patterns=[date_range_pattern("10/1/24", "12/31/24")],
        short_row_index=-1,
    ),
    PeriodPattern(quarter=Quarter.Q3, year=2024, patterns=[date_range_pattern("7/1/24", "9/30/24")]),
    PeriodPattern(quarter=Quarter.Q2, year=2024, patterns=[date_range_pattern("4/1/24", "6/30/24")]),
)

_REPORTS_ADAPTER = TypeAdapter(list[Report])
_PERIODS_ADAPTER = TypeAdapter(list[PeriodPattern])


def load_reports(path: Path) -> list[Report]:
    """Read a JSON list of reports; duplicate (year, quarter) keys are rejected."""

    reports = _REPORTS_ADAPTER.validate_json(path.read_bytes())
    keys = [report.key for report in reports]
    duplicates = sorted({key for key in keys if keys.count(key) > 1})
    if duplicates:
        raise ValueError(f"Duplicate reports in {path}: {', '.join(duplicates)}")
    return reports


def load_period_table(path: Path) -> list[PeriodPattern]:
    """Read a JSON list of period header patterns, highest priority first."""

    table = _PERIODS_ADAPTER.validate_json(path.read_bytes())
    if not table:
        raise ValueError(f"Period table {path} is empty")
    return table


def resolve_catalog(report_catalog_path: str | None) -> list[Report]:
    if report_catalog_path:
        return load_reports(Path(report_catalog_path))
    return [report.model_copy(deep=True) for report in DEFAULT_REPORTS]


def resolve_period_table(period_table_path: str | None) -> list[PeriodPattern]:
    if period_table_path:
        return load_period_table(Path(period_table_path))
    return list(DEFAULT_PERIOD_TABLE)
