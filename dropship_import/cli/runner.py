# dropship_import/cli/runner.py

"""Headless CLI import runner: preview, bulk-import and save drafts."""

import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.progress import Progress
from rich.table import Table

from dropship_import.config.settings import Settings
from dropship_import.models.product import ExtractedProduct
from dropship_import.services.bulk_importer import (
    BulkImporter,
    ImportOutcome,
    parse_url_list,
)
from dropship_import.services.extraction_pipeline import (
    MarketplacePipeline,
    ProductExtractionPipeline,
)
from dropship_import.storage.draft_store import DraftStore

logger = logging.getLogger("dropship_import.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)

PIPELINES: dict[str, type[ProductExtractionPipeline]] = {
    "generic": ProductExtractionPipeline,
    "marketplace": MarketplacePipeline,
}


def collect_urls(urls: list[str], file_path: str | None) -> list[str]:
    """Merge positional URLs with those read from *file_path*.

    Raises ``SystemExit`` when the file is missing or the batch
    exceeds ``Settings.MAX_BULK_URLS``.
    """
    collected = list(urls)
    if file_path is not None:
        path = Path(file_path)
        if not path.is_file():
            _err.print(f"[red]URL file not found: {path}[/red]")
            raise SystemExit(1)
        collected.extend(parse_url_list(path.read_text(encoding="utf-8")))

    if len(collected) > Settings.MAX_BULK_URLS:
        _err.print(
            f"[red]Too many URLs ({len(collected)}); "
            f"the limit is {Settings.MAX_BULK_URLS} per batch.[/red]"
        )
        raise SystemExit(1)
    return collected


def _outcomes_to_dicts(
    outcomes: list[ImportOutcome],
) -> list[dict[str, object]]:
    """Serialise outcomes to plain dicts for JSON output."""
    return [
        {
            "url": o.url,
            "ok": o.ok,
            "product": o.product.to_dict() if o.product else None,
            "error": o.error,
        }
        for o in outcomes
    ]


def _print_table(outcomes: list[ImportOutcome]) -> None:
    """Render a Rich preview table of import outcomes to stdout."""
    table = Table(
        title="Import Preview",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Shipping", justify="right")
    table.add_column("Images", justify="center")
    table.add_column("Source", style="magenta")
    table.add_column("Status / URL", overflow="fold", style="dim")

    for idx, o in enumerate(outcomes, 1):
        if o.product is None:
            table.add_row(
                str(idx), "[red]Failed[/red]", "—", "—", "—", "—",
                f"{o.error}\n{o.url}",
            )
            continue
        p = o.product
        shipping = (
            "Free" if p.free_shipping else f"{p.currency} {p.shipping_cost:,.2f}"
        )
        table.add_row(
            str(idx),
            p.title[:50],
            f"{p.currency} {p.price:,.2f}",
            shipping,
            str(len(p.images)),
            p.source,
            p.source_url,
        )

    Console().print(table)


def _save_drafts(store: DraftStore, products: list[ExtractedProduct]) -> None:
    try:
        drafts = store.add(products)
        _err.print(
            f"[dim]Saved {len(drafts)} draft(s) → {store.path}[/dim]"
        )
    except Exception as exc:
        logger.error("Save failed: %s", exc, exc_info=True)
        _err.print(f"[red]Save failed: {exc}[/red]")


async def cli_import(
    urls: list[str],
    pipeline_name: str,
    output_format: str,
    save: bool,
) -> int:
    """Import *urls* and return an exit code (0 if any succeeded)."""
    if not urls:
        _err.print("[yellow]No URLs to import.[/yellow]")
        return 1

    pipeline = PIPELINES[pipeline_name]()
    importer = BulkImporter(pipeline=pipeline)

    _err.print(
        f"[bold]Importing {len(urls)} URL(s)[/bold]  "
        f"[dim]pipeline={pipeline.name}[/dim]"
    )

    with Progress(console=_err, transient=True) as progress:
        task = progress.add_task("Importing...", total=len(urls))

        def _advance(done: int, total: int, outcome: ImportOutcome) -> None:
            progress.advance(task)

        outcomes = await importer.import_all(urls, on_progress=_advance)

    for o in outcomes:
        if not o.ok:
            _err.print(f"[red]Error: {o.url}: {o.error}[/red]")

    products = [o.product for o in outcomes if o.product is not None]
    _err.print(
        f"[green]✓ {len(products)} of {len(outcomes)} imported[/green]"
    )

    if save and products:
        _save_drafts(DraftStore(), products)

    if output_format == "table":
        _print_table(outcomes)
    else:
        json.dump(
            _outcomes_to_dicts(outcomes),
            sys.stdout,
            ensure_ascii=False,
            indent=2,
        )
        sys.stdout.write("\n")

    return 0 if products else 1


async def run_health_check() -> int:
    """Run a connectivity check on every proxy endpoint."""
    from dropship_import.services.health_checker import HealthChecker

    _err.print("[bold]Running proxy health check...[/bold]")
    checker = HealthChecker()
    results = await checker.check_all()

    table = Table(
        title="Proxy Health Check",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Endpoint", style="bold")
    table.add_column("Status", justify="center")
    table.add_column("Latency", justify="right")
    table.add_column("Notes", style="dim")

    all_down = True
    for r in results:
        if r.status == "ok":
            status = "[green]✅ OK[/green]"
            all_down = False
        elif r.status == "slow":
            status = "[yellow]⚠️  SLOW[/yellow]"
            all_down = False
        else:
            status = "[red]❌ DOWN[/red]"

        latency = (
            f"{r.latency_ms:.0f}ms"
            if r.latency_ms > 0
            else "—"
        )
        table.add_row(
            r.endpoint_id, status, latency, r.message,
        )

    Console().print(table)
    return 1 if all_down else 0
