"""CLI entry point for rimsync."""

from typing import Annotated

import typer

from rimsync import __version__
from rimsync.cli.common import console, setup_logging
from rimsync.cli.init import init
from rimsync.cli.search import search
from rimsync.cli.status import status
from rimsync.cli.sync import sync

app = typer.Typer(
    name="rimsync",
    help="Download the Steam Workshop mods a RimWorld save needs.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"rimsync {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Show debug output, including SteamCMD logs."),
    ] = 0,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
) -> None:
    """Download the Steam Workshop mods a RimWorld save needs."""
    setup_logging(verbose)


app.command()(sync)
app.command()(status)
app.command()(search)
app.command()(init)


if __name__ == "__main__":
    app()
