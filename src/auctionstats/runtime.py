"""Runtime wiring and per-item pipeline orchestration."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

from auctionstats.config import Settings, StatsConfig
from auctionstats.data.acquirer import iter_history_pages
from auctionstats.data.base import HistorySource
from auctionstats.data.csv_history import CsvHistorySource
from auctionstats.data.pacing import Pacer, build_pacer
from auctionstats.data.stalcraft_history import StalcraftHistorySource
from auctionstats.domain.events import PipelineEvent
from auctionstats.domain.models import ItemResult, PriceReport, RawTrade
from auctionstats.errors import HistorySourceError
from auctionstats.logging.event_sink import JsonlEventSink, generate_price_report_html
from auctionstats.logging.logger import HumanLogger
from auctionstats.output.writers import write_outlier_ledger, write_price_report
from auctionstats.pricing.aggregator import window_cutoff_ms
from auctionstats.pricing.pipeline import compute_item_stats


def current_time_ms() -> int:
    """Return the current UTC time in epoch milliseconds."""
    return int(datetime.now(tz=UTC).timestamp() * 1000)


def run(settings: Settings) -> int:
    """Fetch, compute and write statistics for every configured item."""
    source = build_history_source(settings)
    human_logger = HumanLogger(level=settings.log_level)

    run_id = uuid4().hex
    run_directory = Path(settings.events_dir) / run_id
    run_directory.mkdir(parents=True, exist_ok=True)
    event_sink = JsonlEventSink(str(run_directory / "events.jsonl"))

    human_logger.run_started(run_id, settings.region, list(settings.items))
    event_sink.emit(
        PipelineEvent(
            run_id=run_id,
            region=settings.region,
            event_type="run_started",
            payload={"items": dict(settings.items), "windows": list(settings.windows)},
        )
    )

    report: PriceReport | None = None
    try:
        report = collect_report(
            settings=settings,
            source=source,
            now_ms=current_time_ms(),
            run_id=run_id,
            event_sink=event_sink,
            human_logger=human_logger,
        )
        write_price_report(report, settings.output_path)
        if settings.outliers_path:
            write_outlier_ledger(report, settings.outliers_path)
    except KeyboardInterrupt:
        return 130
    except Exception as exc:
        human_logger.error(str(exc))
        event_sink.emit(
            PipelineEvent(
                run_id=run_id,
                region=settings.region,
                event_type="error",
                payload={"message": str(exc)},
            )
        )
        return 1
    finally:
        if report is not None and settings.report:
            generate_price_report_html(report, str(run_directory / "report.html"))

    succeeded = sum(1 for result in report.items.values() if result.is_ok)
    failed = len(report.items) - succeeded
    human_logger.run_finished(succeeded, failed, settings.output_path)
    event_sink.emit(
        PipelineEvent(
            run_id=run_id,
            region=settings.region,
            event_type="run_finished",
            payload={"succeeded": succeeded, "failed": failed},
        )
    )
    return 0 if succeeded else 1


def collect_report(
    settings: Settings,
    source: HistorySource,
    now_ms: int,
    run_id: str,
    event_sink: JsonlEventSink,
    human_logger: HumanLogger,
    item_pacer: Pacer | None = None,
    cooldown_pacer: Pacer | None = None,
    page_pacer: Pacer | None = None,
) -> PriceReport:
    """Process items sequentially; one item's failure never stops the others."""
    if item_pacer is None:
        item_pacer = build_pacer(settings.item_delay_min_ms, settings.item_delay_max_ms)
    if cooldown_pacer is None:
        cooldown_pacer = build_pacer(settings.error_cooldown_ms, settings.error_cooldown_ms)
    if page_pacer is None:
        page_pacer = build_pacer(settings.page_delay_min_ms, settings.page_delay_max_ms)

    config = settings.stats_config()
    results: dict[str, ItemResult] = {}
    entries = list(settings.items.items())
    for position, (item_key, item_id) in enumerate(entries):
        result = process_item(
            item_key=item_key,
            item_id=item_id,
            source=source,
            config=config,
            max_pages=settings.max_pages,
            now_ms=now_ms,
            page_pacer=page_pacer,
            run_id=run_id,
            region=settings.region,
            event_sink=event_sink,
            human_logger=human_logger,
        )
        results[item_key] = result
        if position == len(entries) - 1:
            continue
        if result.is_ok:
            item_pacer.wait()
        else:
            cooldown_pacer.wait()

    updated = datetime.fromtimestamp(now_ms / 1000, tz=UTC).isoformat()
    return PriceReport(updated=updated, region=settings.region, items=results)


def process_item(
    item_key: str,
    item_id: str,
    source: HistorySource,
    config: StatsConfig,
    max_pages: int,
    now_ms: int,
    page_pacer: Pacer,
    run_id: str,
    region: str,
    event_sink: JsonlEventSink,
    human_logger: HumanLogger,
) -> ItemResult:
    """Acquire one item's history and compute its window statistics."""
    cutoff_ms = window_cutoff_ms(now_ms, config.widest_window)
    raw_trades: list[RawTrade] = []
    try:
        for page in iter_history_pages(source, item_id, cutoff_ms, max_pages, page_pacer):
            human_logger.page(item_key, page.index, len(page.trades), page.reached_cutoff)
            event_sink.emit(
                PipelineEvent(
                    run_id=run_id,
                    region=region,
                    event_type="page_fetched",
                    payload={
                        "item": item_key,
                        "page": page.index,
                        "trades": len(page.trades),
                        "reached_cutoff": page.reached_cutoff,
                    },
                )
            )
            raw_trades.extend(page.trades)
    except HistorySourceError as exc:
        reason = str(exc)
        human_logger.item_failed(item_key, item_id, reason)
        event_sink.emit(
            PipelineEvent(
                run_id=run_id,
                region=region,
                event_type="item_failed",
                payload={"item": item_key, "id": item_id, "error": reason},
            )
        )
        return ItemResult.failed(item_key, item_id, reason)

    stats = compute_item_stats(item_key, item_id, raw_trades, now_ms, config)
    human_logger.item_summary(stats, raw_count=len(raw_trades))
    event_sink.emit(
        PipelineEvent(
            run_id=run_id,
            region=region,
            event_type="item_computed",
            payload=stats.to_record() | {"item": item_key, "raw_trades": len(raw_trades)},
        )
    )
    return ItemResult.ok(stats)


def build_history_source(settings: Settings) -> HistorySource:
    """Select history source implementation from settings."""
    if settings.data_source == "csv":
        return CsvHistorySource(
            data_dir=settings.historical_data_dir,
            region=settings.region,
            page_size=settings.csv_page_size,
        )
    return StalcraftHistorySource(
        base_url=settings.base_url,
        region=settings.region,
        timeout=settings.request_timeout,
        max_retries=settings.max_retries,
    )
