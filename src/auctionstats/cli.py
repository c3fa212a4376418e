"""Command-line interface for the auction price pipeline."""

from __future__ import annotations

import argparse
import sys

from auctionstats.config import Settings, parse_items, parse_windows
from auctionstats.runtime import run


def build_parser() -> argparse.ArgumentParser:
    """Build CLI parser."""
    parser = argparse.ArgumentParser(
        description="Robust 24h/7d unit-price estimates from auction history"
    )
    parser.add_argument("--region", type=str, help="Auction region selector")
    parser.add_argument("--items", type=str, help="Comma-separated key=id item pairs")
    parser.add_argument("--output", type=str, help="Price report JSON path")
    parser.add_argument("--outliers", type=str, help="Optional outlier ledger CSV path")
    parser.add_argument("--data-source", choices=["http", "csv"], help="History source")
    parser.add_argument("--historical-dir", type=str, help="CSV history directory")
    parser.add_argument("--events-dir", type=str, help="Run outputs directory")
    parser.add_argument("--max-pages", type=int, help="Hard cap on pages fetched per item")
    parser.add_argument("--windows", type=str, help="Comma-separated window lengths in days")
    parser.add_argument("--threshold", type=float, help="Outlier modified z-score threshold")
    parser.add_argument(
        "--min-samples",
        type=int,
        help="Minimum trades in a window before outlier detection applies",
    )
    parser.add_argument(
        "--no-delay",
        action="store_true",
        help="Disable politeness delays between pages and items",
    )
    parser.add_argument(
        "--report",
        action="store_true",
        help="Write a Plotly HTML report into the run directory",
    )
    parser.add_argument("--log-level", type=str, help="Console log level")
    return parser


def apply_cli_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    """Apply CLI values onto environment-derived settings."""
    overrides: dict[str, object] = {}
    if args.region:
        overrides["region"] = args.region.strip().lower()
    if args.items:
        overrides["items"] = parse_items(args.items, settings.items)
    if args.output:
        overrides["output_path"] = args.output
    if args.outliers:
        overrides["outliers_path"] = args.outliers
    if args.data_source:
        overrides["data_source"] = args.data_source
    if args.historical_dir:
        overrides["historical_data_dir"] = args.historical_dir
    if args.events_dir:
        overrides["events_dir"] = args.events_dir
    if args.max_pages is not None:
        overrides["max_pages"] = args.max_pages
    if args.windows:
        overrides["windows"] = parse_windows(args.windows, settings.windows)
    if args.threshold is not None:
        overrides["outlier_threshold"] = args.threshold
    if args.min_samples is not None:
        overrides["min_outlier_samples"] = args.min_samples
    if args.report:
        overrides["report"] = True
    if args.log_level:
        overrides["log_level"] = args.log_level.strip().upper()

    merged = settings.with_overrides(**overrides)
    if args.no_delay:
        merged = merged.delays_disabled()
    return merged


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = apply_cli_overrides(Settings.from_env(), args)
    except ValueError as exc:
        print(f"Configuration error: {exc}")
        return 2
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
