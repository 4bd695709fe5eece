"""Status command for rimsync - show which of a save's mods are installed."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from rimsync.cli.common import console
from rimsync.config import load_config
from rimsync.exceptions import RimsyncError
from rimsync.install_state import InstallStateChecker
from rimsync.models import InstallState
from rimsync.save_reader import read_save
from rimsync.steamcmd import SteamCmd

_STATE_STYLES = {
    InstallState.INSTALLED: "[green]installed[/green]",
    InstallState.CACHED: "[blue]cached[/blue]",
    InstallState.MISSING: "[red]missing[/red]",
}


def status(
    save: Annotated[
        Optional[Path],
        typer.Argument(help="Save file to read. Defaults to save_file from rimsync.toml."),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to rimsync.toml."),
    ] = None,
) -> None:
    """Show the install state of each mod in a save.

    Nothing is searched or downloaded. Mods saved without a workshop id are
    shown as unknown.
    """
    try:
        config = load_config(config_path)
        save_path = save or config.save_path
        if save_path is None:
            console.print("[red]Error:[/red] No save file given and save_file is not set")
            raise typer.Exit(1)
        mods = read_save(save_path)
    except RimsyncError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    steamcmd = SteamCmd(config.steamcmd, app_id=config.app_id)
    checker = InstallStateChecker(config.mods_dir, steamcmd.cache_dir)

    table = Table(title=f"Mods in {save_path.name}")
    table.add_column("Mod")
    table.add_column("Local ID", style="dim")
    table.add_column("Steam ID", style="dim")
    table.add_column("State")

    counts = {state: 0 for state in InstallState}
    unknown = 0
    for mod in mods:
        if mod.needs_lookup:
            unknown += 1
            state_text = "[yellow]unknown[/yellow]"
        else:
            state = checker.classify(mod.steam_id)
            counts[state] += 1
            state_text = _STATE_STYLES[state]
        table.add_row(mod.name, mod.local_id, mod.steam_id, state_text)

    console.print(table)
    console.print(
        f"[dim]Installed: {counts[InstallState.INSTALLED]}, "
        f"Cached: {counts[InstallState.CACHED]}, "
        f"Missing: {counts[InstallState.MISSING]}, "
        f"Unknown: {unknown}[/dim]"
    )
    if counts[InstallState.MISSING] or counts[InstallState.CACHED] or unknown:
        console.print("[yellow]Run 'rimsync sync' to install missing mods[/yellow]")
