"""Typer CLI for mealplan (build-library, validate-catalogue, cache maintenance)."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from dotenv import load_dotenv
# load .env immediately so subsequent imports (which read settings at import time)
# pick up values from the .env file
load_dotenv()

# Configure top-level logging early so other modules pick it up.
import logging
from mealplan.settings import settings

log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
handlers = [logging.StreamHandler()]
if settings.LOG_FILE:
    handlers.append(logging.FileHandler(settings.LOG_FILE))
logging.basicConfig(
    level=log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    handlers=handlers,
)

from mealplan.orchestrate.build import build_library as run_build, load_catalogue
from mealplan.pricing.cache import DAY_MS, CacheStats
from mealplan.pricing.maintenance import list_keys, open_cache, sweep_and_report, write_snapshot
from mealplan.validate import validate_catalogue as run_validation

app = typer.Typer()
console = Console()


def _ttl_ms() -> int:
    return int(settings.CACHE_TTL_DAYS * DAY_MS)


def _describe(issue) -> str:
    return f"[{issue.recipe_id or '-'}] {issue.field}: {issue.issue}"


def _print_stats(stats: CacheStats) -> None:
    table = Table(title="Product cache")
    table.add_column("total")
    table.add_column("valid")
    table.add_column("expired")
    table.add_column("oldest")
    table.add_column("newest")
    table.add_row(
        str(stats.total),
        str(stats.valid),
        str(stats.expired),
        str(stats.oldest or "-"),
        str(stats.newest or "-"),
    )
    console.print(table)


@app.command("build-library")
def build_library(
    library: Optional[str] = typer.Option(None, help="Indexed recipe library directory"),
    output: Optional[str] = typer.Option(None, help="Catalogue JSON to write"),
):
    """Normalize the indexed library into the recipe catalogue."""
    output = output or settings.CATALOGUE_PATH
    try:
        result = run_build(library or settings.LIBRARY_DIR, output)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    console.print(f"Built recipe library: {result.succeeded} recipes -> {output}")
    if result.failures:
        console.print(f"[yellow]Skipped {result.failed} records:[/yellow]")
        for failure in result.failures:
            console.print(f"  {escape(failure.key)}: {escape(failure.reason)}")


@app.command("validate-catalogue")
def validate_catalogue(path: Optional[str] = typer.Argument(None, help="Catalogue JSON to check")):
    """Check a generated catalogue for duplicate ids and invalid fields."""
    try:
        recipes = load_catalogue(path or settings.CATALOGUE_PATH)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    report = run_validation(recipes)
    console.print(
        f"Recipes checked: {report.checked}  errors: {len(report.errors)}  warnings: {len(report.warnings)}"
    )
    for issue in report.errors:
        console.print(f"[red]error[/red] {escape(_describe(issue))}")
    for issue in report.warnings:
        console.print(f"[yellow]warning[/yellow] {escape(_describe(issue))}")
    if not report.valid:
        raise typer.Exit(code=1)
    console.print("Catalogue is valid.")


@app.command("cache-stats")
def cache_stats(snapshot: Optional[str] = typer.Option(None, help="Product cache snapshot file")):
    try:
        cache = open_cache(snapshot or settings.CACHE_SNAPSHOT_PATH, ttl_ms=_ttl_ms())
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    _print_stats(cache.stats())


@app.command("cache-keys")
def cache_keys(snapshot: Optional[str] = typer.Option(None, help="Product cache snapshot file")):
    try:
        cache = open_cache(snapshot or settings.CACHE_SNAPSHOT_PATH, ttl_ms=_ttl_ms())
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    for key in list_keys(cache):
        console.print(key)


@app.command("cache-sweep")
def cache_sweep(
    snapshot: Optional[str] = typer.Option(None, help="Product cache snapshot file"),
    write: bool = typer.Option(False, "--write", help="Write the swept cache back to the snapshot"),
):
    """Drop expired entries; the snapshot file only changes with --write."""
    path = snapshot or settings.CACHE_SNAPSHOT_PATH
    try:
        cache = open_cache(path, ttl_ms=_ttl_ms())
        report = sweep_and_report(cache)
        if write:
            write_snapshot(cache, path)
    except Exception as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    console.print(f"Removed {report.removed} expired entries.")
    _print_stats(report.remaining)


if __name__ == "__main__":
    app()
