"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import QueryConfig, load_config
from ..database import Database
from ..exceptions import HistQueryError
from ..source import InMemorySource

console = Console()
err_console = Console(stderr=True)

DATASET_OPTION = typer.Option(
    ...,
    "--dataset",
    "-d",
    help="Snapshot file (JSON)",
    exists=True,
    file_okay=True,
    dir_okay=False,
    readable=True,
)

CONFIG_OPTION = typer.Option(
    None,
    "-c",
    "--config",
    help="Configuration file (TOML)",
    exists=True,
    file_okay=True,
    dir_okay=False,
    readable=True,
)


def resolve_config(
    config: Optional[Path] = None,
    cache_dir: Optional[Path] = None,
    no_cache: bool = False,
    seed: Optional[int] = None,
    verbose: bool = False,
) -> QueryConfig:
    """Build configuration from CLI options."""
    overrides = {}
    if cache_dir is not None:
        overrides["cache_dir"] = str(cache_dir)
    if no_cache:
        overrides["cache_enabled"] = False
    if seed is not None:
        overrides["seed"] = seed
    if verbose:
        overrides["verbose"] = True
    return load_config(config_file=config, **overrides)


def report_error(error: HistQueryError, target: Console = err_console) -> None:
    """Print an error and, when it has one, its remedy."""
    target.print(f"[red]Error:[/red] {error}")
    if error.hint:
        target.print(f"[dim]{error.hint}[/dim]")


def open_database(dataset: Path, settings: QueryConfig) -> Database:
    """Load the snapshot and attach the caches configured for it."""
    source = InMemorySource.from_json(dataset)
    return Database.from_config(source, settings)
