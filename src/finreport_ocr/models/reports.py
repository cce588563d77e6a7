"""Pydantic schemas for quarterly reports and their extracted figures."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Quarter(str, Enum):
    Q1 = "Q1"
    Q2 = "Q2"
    Q3 = "Q3"
    Q4 = "Q4"


# Top-level numeric fields, in the order they are reported.
METRIC_FIELDS: tuple[str, ...] = (
    "revenue",
    "expenses",
    "net_income",
    "gross_profit",
    "operating_income",
    "assets",
    "liabilities",
    "equity",
    "cash_flow",
)


class ExtractedData(BaseModel):
    """Figures recovered from one report's OCR text.

    A ``None`` field means the figure was not found, not that it is zero.
    """

    revenue: float | None = None
    expenses: float | None = None
    net_income: float | None = None
    gross_profit: float | None = None
    operating_income: float | None = None
    assets: float | None = None
    liabilities: float | None = None
    equity: float | None = None
    cash_flow: float | None = None
    custom_metrics: dict[str, float] = Field(default_factory=dict)
    raw_text: str = Field(default="", description="Full OCR concatenation kept for auditing.")
    column_label: str | None = Field(default=None, description="Header of the column values were read from.")
    provenance: dict[str, str] = Field(
        default_factory=dict,
        description="Field or metric name mapped to '<strategy>:<confidence>'.",
    )

    def has_figures(self) -> bool:
        return any(getattr(self, name) is not None for name in METRIC_FIELDS) or bool(self.custom_metrics)


class Report(BaseModel):
    quarter: Quarter
    year: int
    image_refs: list[str] = Field(default_factory=list)
    extracted_data: ExtractedData | None = None

    @property
    def key(self) -> str:
        return report_key(self.quarter, self.year)


class ReportRef(BaseModel):
    quarter: Quarter
    year: int


def report_key(quarter: Quarter | str, year: int) -> str:
    return f"{year}-{Quarter(quarter).value}"
