# vegprice/cli/runner.py

"""Headless entry points: collect, export, and serve."""

import logging
import time
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from vegprice.config.settings import Settings
from vegprice.models.price_record import PriceRecord
from vegprice.services.pipeline import ExtractionPipeline
from vegprice.storage.price_store import MissingStoreError, PriceStore

logger = logging.getLogger("vegprice.cli")

# Stderr console for status messages so stdout stays clean
_err = Console(stderr=True)


def _print_batch_summary(records: list[PriceRecord]) -> None:
    """Render per-date record counts for the extracted batch."""
    counts: dict[str, int] = {}
    for r in records:
        counts[r.date] = counts.get(r.date, 0) + 1

    table = Table(
        title="Extracted Batch",
        show_lines=False,
        title_style="bold cyan",
    )
    table.add_column("Date", style="magenta")
    table.add_column("Items", justify="right", style="green")
    for day in sorted(counts):
        table.add_row(day, str(counts[day]))
    _err.print(table)


def collect_once(
    pipeline: ExtractionPipeline | None = None,
    db_path: Path | None = None,
) -> int:
    """Run the pipeline and append new dates; returns rows appended.

    Errors propagate so the caller decides whether to stop or keep going.
    """
    batch = (pipeline or ExtractionPipeline()).run()
    if batch:
        _print_batch_summary(batch)
    store = PriceStore(db_path)
    try:
        return store.append_batch(batch) if batch else 0
    finally:
        store.close()


def run_collect(
    pipeline: ExtractionPipeline | None = None,
    db_path: Path | None = None,
) -> int:
    """One scheduled run with top-level catch-and-log; exit code 0/1."""
    _err.print("[bold]Collecting published prices...[/bold]")
    try:
        appended = collect_once(pipeline, db_path)
    except Exception as exc:
        logger.error("Collection run failed: %s", exc, exc_info=True)
        _err.print(f"[red]Collection failed: {escape(str(exc))}[/red]")
        return 1

    if appended:
        _err.print(f"[green]✓ Appended {appended} records[/green]")
    else:
        _err.print("[yellow]No new dates to append.[/yellow]")
    return 0


def run_every(
    minutes: float,
    pipeline: ExtractionPipeline | None = None,
    db_path: Path | None = None,
    max_runs: int | None = None,
) -> int:
    """Repeat :func:`run_collect` forever (or ``max_runs`` times)."""
    if minutes <= 0:
        raise ValueError(f"Interval must be positive, got {minutes}")
    runs = 0
    last_code = 0
    while max_runs is None or runs < max_runs:
        last_code = run_collect(pipeline, db_path)
        runs += 1
        logger.info(
            "Run %d finished with code %d; next in %.1f min",
            runs,
            last_code,
            minutes,
        )
        if max_runs is not None and runs >= max_runs:
            break
        time.sleep(minutes * 60)
    return last_code


def run_export(
    output: Path, db_path: Path | None = None,
) -> int:
    """Export the stored history to CSV."""
    try:
        store = PriceStore.open_existing(db_path)
    except MissingStoreError as exc:
        _err.print(f"[red]{escape(str(exc))}[/red]")
        return 1
    try:
        count = store.export_csv(output)
    finally:
        store.close()
    _err.print(f"[green]✓ Exported {count:,} rows → {output}[/green]")
    return 0


def run_server(
    host: str | None = None,
    port: int | None = None,
    db_path: Path | None = None,
) -> int:
    """Serve the query API with uvicorn until interrupted."""
    import uvicorn

    from vegprice.api.app import create_app

    bind_host = host or Settings.API_HOST
    bind_port = port or Settings.API_PORT
    _err.print(
        f"[bold]Serving price API on http://{bind_host}:{bind_port}[/bold]"
    )
    uvicorn.run(create_app(db_path), host=bind_host, port=bind_port)
    return 0
