"""JSONL event sink and per-run Plotly price report."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd
import plotly.express as px

from auctionstats.domain.events import PipelineEvent
from auctionstats.domain.models import PriceReport


class JsonlEventSink:
    """Append-only JSONL writer."""

    def __init__(self, path: str) -> None:
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.path = output_path

    def emit(self, event: PipelineEvent) -> None:
        record = event.to_record()
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record, sort_keys=True))
            handle.write("\n")


def price_frame(report: PriceReport) -> pd.DataFrame:
    """Flatten per-window statistics into one row per (item, window)."""
    rows: list[dict[str, Any]] = []
    for key, result in report.items.items():
        if result.stats is None:
            continue
        for window_days, stats in sorted(result.stats.windows.items()):
            if not stats.has_data:
                continue
            rows.append(
                {
                    "item": key,
                    "window": f"{window_days}d",
                    "average": stats.average,
                    "min": stats.min,
                    "max": stats.max,
                    "samples": stats.sample_count,
                    "outliers": len(stats.outliers),
                }
            )
    return pd.DataFrame(rows, columns=["item", "window", "average", "min", "max", "samples", "outliers"])


def generate_price_report_html(report: PriceReport, output_html_path: str) -> None:
    """Render weighted averages with min/max ranges and flagged outliers."""
    output = Path(output_html_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    frame = price_frame(report)
    if frame.empty:
        empty_df = pd.DataFrame({"item": ["no-data"], "average": [0]})
        figure = px.bar(empty_df, x="item", y="average", title="Item Price Summary")
        figure.write_html(str(output), include_plotlyjs="cdn")
        return

    frame["above"] = frame["max"] - frame["average"]
    frame["below"] = frame["average"] - frame["min"]
    bars = px.bar(
        frame,
        x="item",
        y="average",
        color="window",
        barmode="group",
        error_y="above",
        error_y_minus="below",
        hover_data=["samples", "outliers"],
        title=f"Weighted Unit Prices ({report.region}, {report.updated})",
    )
    html_parts = [
        "<html><head><meta charset='utf-8'><title>auctionstats price report</title></head><body>",
        bars.to_html(full_html=False, include_plotlyjs="cdn"),
    ]

    outliers = pd.DataFrame(report.outlier_rows())
    if not outliers.empty:
        outliers["timestamp"] = pd.to_datetime(outliers["timestamp"], utc=True, errors="coerce")
        scatter = px.scatter(
            outliers,
            x="timestamp",
            y="unitPrice",
            color="itemKey",
            symbol="windowDays",
            hover_data=["price", "amount", "reason"],
            title="Rejected Outlier Trades",
        )
        html_parts.append(scatter.to_html(full_html=False, include_plotlyjs=False))

    html_parts.append("</body></html>")
    output.write_text("".join(html_parts), encoding="utf-8")
