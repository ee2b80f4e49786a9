"""Run canned queries and export them as CSV."""

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.table import Table

from ..exceptions import HistQueryError
from ..export import write_csv
from ..logging_config import setup_logging
from ..queries import QUERIES
from . import app
from ._common import (
    CONFIG_OPTION,
    DATASET_OPTION,
    console,
    err_console,
    open_database,
    report_error,
    resolve_config,
)


@app.command()
def query(
    name: str = typer.Argument(..., help="Canned query to run (see 'histquery queries')"),
    dataset: Path = DATASET_OPTION,
    n: Optional[int] = typer.Option(
        None,
        "-n",
        "--n",
        help="Number of projects to keep (default: max_results from config)",
        min=0,
    ),
    output: Optional[Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="CSV file to write (default: standard output)",
        dir_okay=False,
    ),
    cache_dir: Optional[Path] = typer.Option(
        None,
        "--cache-dir",
        help="Cache directory (default: .histquery-cache)",
        file_okay=False,
    ),
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        help="Compute everything from the snapshot without reading or writing caches",
    ),
    seed: Optional[int] = typer.Option(
        None,
        "--seed",
        help="Seed for queries that sample at random (default: seed from config)",
        min=0,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log cache loads, computations and timings",
    ),
    config: Optional[Path] = CONFIG_OPTION,
):
    """
    Run a canned query over a snapshot and write the results as CSV.

    [bold cyan]Examples:[/bold cyan]

      histquery query stars --dataset snapshot.json -n 10

      histquery query message_sizes -d snapshot.json -o sizes.csv --verbose

      histquery query random -d snapshot.json -n 100 --seed 7
    """
    canned = QUERIES.get(name)
    if canned is None:
        err_console.print(f"[red]Unknown query:[/red] {name}")
        err_console.print(f"Available: {', '.join(sorted(QUERIES))}")
        raise typer.Exit(2)

    try:
        settings = resolve_config(
            config=config, cache_dir=cache_dir, no_cache=no_cache, seed=seed, verbose=verbose
        )
        logger = setup_logging(
            verbose=settings.verbosity == "verbose",
            quiet=settings.verbosity == "quiet",
            log_file=settings.log_file,
        )
        limit = settings.max_results if n is None else n

        with open_database(dataset, settings) as database:
            rows = canned.rows(database, limit, seed=settings.seed)
            count = write_csv(rows, output if output is not None else sys.stdout, header=canned.header)

        logger.info(f"Query {name} returned {count} projects")
        if output is not None:
            err_console.print(f"[green]Wrote {count} rows to[/green] [blue]{output}[/blue]")

    except HistQueryError as e:
        report_error(e)
        raise typer.Exit(1)

    except KeyboardInterrupt:
        err_console.print("\n[yellow]Query interrupted[/yellow]")
        raise typer.Exit(130)


@app.command()
def queries():
    """List the canned queries."""
    table = Table(title="Canned queries", show_header=True, header_style="bold cyan")
    table.add_column("Name", style="green")
    table.add_column("Ranks by")
    table.add_column("Description", style="dim")
    for name in sorted(QUERIES):
        canned = QUERIES[name]
        table.add_row(name, canned.metric_name, canned.description)
    console.print(table)
