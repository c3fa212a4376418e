"""Price report and outlier ledger writers."""

from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from auctionstats.domain.models import PriceReport

LEDGER_COLUMNS = ["itemKey", "windowDays", "timestamp", "price", "amount", "unitPrice", "reason"]


def write_price_report(report: PriceReport, path: str) -> Path:
    """Write the per-item price document as indented JSON."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(report.to_record(), indent=2), encoding="utf-8")
    return output


def write_outlier_ledger(report: PriceReport, path: str) -> Path:
    """Write one CSV row per outlier flagged in any window; header only when none."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    frame = pd.DataFrame(report.outlier_rows(), columns=LEDGER_COLUMNS)
    frame.to_csv(output, index=False)
    return output
