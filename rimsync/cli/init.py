"""Init command for rimsync - create a starter rimsync.toml."""

from pathlib import Path
from typing import Annotated

import typer

from rimsync.cli.common import console
from rimsync.config import CONFIG_FILENAME, RimsyncConfig


def init(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing rimsync.toml."),
    ] = False,
) -> None:
    """Create rimsync.toml in the current directory."""
    config_path = Path.cwd() / CONFIG_FILENAME
    if config_path.exists() and not force:
        console.print(f"[red]Error:[/red] {CONFIG_FILENAME} already exists. Use --force to overwrite.")
        raise typer.Exit(1)

    try:
        RimsyncConfig.default(config_path).save()
    except OSError as e:
        console.print(f"[red]Error:[/red] Failed to write {config_path}: {e}")
        raise typer.Exit(1)

    console.print(f"[green]Created {config_path}[/green]")
    console.print("[dim]Edit steamcmd_path, mods_directory and save_file before running 'rimsync sync'[/dim]")
