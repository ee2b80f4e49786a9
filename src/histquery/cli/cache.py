"""Cache management commands."""

from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..config import snapshot_fingerprint
from ..database.cache_names import CACHE_EXTENSION
from ..exceptions import HistQueryError
from ..logging_config import format_bytes
from ..source import InMemorySource
from . import app
from ._common import CONFIG_OPTION, DATASET_OPTION, console, report_error, resolve_config


def _cache_root(dataset: Path, config: Optional[Path], cache_dir: Optional[Path]):
    settings = resolve_config(config=config, cache_dir=cache_dir)
    source = InMemorySource.from_json(dataset)
    return settings, source.descriptor, settings.cache_root(source.descriptor)


@app.command()
def cache_info(
    dataset: Path = DATASET_OPTION,
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir", help="Cache directory", file_okay=False),
    config: Optional[Path] = CONFIG_OPTION,
):
    """Show the cache files kept for a snapshot."""
    try:
        settings, descriptor, root = _cache_root(dataset, config, cache_dir)
    except HistQueryError as e:
        report_error(e, console)
        raise typer.Exit(1)

    console.print("[bold cyan]histquery cache info[/bold cyan]")
    console.print()
    console.print(f"Snapshot: [blue]{dataset}[/blue]")
    console.print(f"Fingerprint: [yellow]{snapshot_fingerprint(descriptor)}[/yellow]")

    if root is None:
        console.print("Status: [red]Disabled[/red]")
        return

    console.print("Status: [green]Enabled[/green]")
    console.print(f"Directory: [blue]{root}[/blue]")

    files = sorted(root.glob("*" + CACHE_EXTENSION)) if root.is_dir() else []
    if not files:
        console.print("Entries: [yellow]0[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Collection", style="green")
    table.add_column("Size", justify="right")
    total = 0
    for path in files:
        size = path.stat().st_size
        total += size
        table.add_row(path.stem, format_bytes(size))
    console.print(table)
    console.print(f"Entries: [yellow]{len(files)}[/yellow]  Total: [yellow]{format_bytes(total)}[/yellow]")


@app.command()
def cache_clear(
    dataset: Path = DATASET_OPTION,
    cache_dir: Optional[Path] = typer.Option(None, "--cache-dir", help="Cache directory", file_okay=False),
    config: Optional[Path] = CONFIG_OPTION,
):
    """Delete the cache files kept for a snapshot."""
    try:
        settings, _, root = _cache_root(dataset, config, cache_dir)
    except HistQueryError as e:
        report_error(e, console)
        raise typer.Exit(1)

    if root is None:
        console.print("[yellow]Cache is disabled[/yellow]")
        raise typer.Exit(0)

    if not root.is_dir():
        console.print("[yellow]No cache to clear[/yellow]")
        raise typer.Exit(0)

    removed = 0
    for path in list(root.glob("*" + CACHE_EXTENSION)) + list(root.glob("*" + CACHE_EXTENSION + ".tmp")):
        path.unlink()
        removed += 1
    if settings.bind_cache_to_snapshot and not any(root.iterdir()):
        root.rmdir()

    console.print(f"[green]Removed {removed} cache files[/green]")
