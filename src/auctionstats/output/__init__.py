"""Result sinks."""

from .writers import LEDGER_COLUMNS, write_outlier_ledger, write_price_report

__all__ = ["LEDGER_COLUMNS", "write_outlier_ledger", "write_price_report"]
