"""CLI entry point: registers all subcommands."""

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="histquery",
    help="histquery - queries over software-repository history snapshots",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _show_version(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]histquery[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.callback()
def _root(
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_show_version,
        is_eager=True,
    ),
):
    """Query repository-history snapshots with on-disk caching of derived facts."""


# Import subcommands to register them
from .query import query as _query, queries as _queries  # noqa: F401, E402
from .cache import cache_info as _cache_info, cache_clear as _cache_clear  # noqa: F401, E402


def main() -> None:
    app()
