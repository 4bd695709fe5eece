"""Search command for rimsync - look up a workshop id by mod name."""

from typing import Annotated

import typer

from rimsync.cli.common import console, fetch_spinner
from rimsync.constants import RIMWORLD_APP_ID
from rimsync.exceptions import WorkshopSearchError
from rimsync.workshop import WorkshopSearch


def search(
    name: Annotated[str, typer.Argument(help="Exact mod name as shown on the workshop.")],
    app_id: Annotated[
        str,
        typer.Option("--app-id", help="Steam app id of the game."),
    ] = RIMWORLD_APP_ID,
) -> None:
    """Find the workshop id of a mod by its exact name."""
    try:
        with fetch_spinner():
            mod_id = WorkshopSearch(app_id=app_id).find_mod_id(name)
    except WorkshopSearchError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    if mod_id is None:
        console.print(f"[yellow]No workshop item named '{name}'[/yellow]")
        raise typer.Exit(1)

    console.print(mod_id)
