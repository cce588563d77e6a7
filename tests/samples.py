"""OCR text fixtures shaped like the cumulative quarterly statements."""

from __future__ import annotations

from finreport_ocr.models import Quarter, Report

CUMULATIVE_Q4_2024 = """ENS Endowment Fund
Statement of Income
4/1/24 - 6/30/24 7/1/24 - 9/30/24 10/1/24 - 12/31/24
Income
ENS DAO Service Provider Stream $125,000.00 $130,000.00 $135,000.00
Realized Gain/Loss ($2,500.00) $4,000.00 $1,200.50
Total Income $122,500.00 $134,000.00 $136,200.50
Expenses
Team ($80,000.00) ($82,000.00) ($85,000.00)
Legal Services ($5,000.00) ($4,500.00) ($6,250.00)
Conferences & Travel ($3,000.00) ($2,000.00) ($1,500.00)
ETH Gas Transactions ($150.25) ($90.10) ($120.00)
Total Expenses ($88,150.25) ($88,590.10) ($92,870.00)
Net $34,349.75 $45,409.90 $43,330.50

Summary of Assets & Liabilities
ETH (61.763 @ $3,332.53)
ENS (25,000 @ $14.00)
USDC $100,000.00
USDCx $25,500.50
Unreimbursed Team Expenses $(12,000.00)
Net $655,824.89
"""

NO_HEADERS = """Quarterly Statement
Income
Total Income $1,250.00 $150,000.00 $900,000.00
Expenses
Total Expenses ($60,000.00) ($400,000.00) ($1,000,000.00)
"""


def make_report(quarter: Quarter = Quarter.Q4, year: int = 2024, images: int = 1) -> Report:
    return Report(
        quarter=quarter,
        year=year,
        image_refs=[f"https://example.test/{year}-{quarter.value}-{index}.png" for index in range(images)],
    )
