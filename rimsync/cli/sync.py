"""Sync command for rimsync - download the mods a save needs."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from rimsync.cli.common import ask_confirmation, build_orchestrator, console, print_report
from rimsync.config import load_config
from rimsync.error_log import ErrorLog
from rimsync.exceptions import RimsyncError
from rimsync.save_reader import read_save


def sync(
    save: Annotated[
        Optional[Path],
        typer.Argument(help="Save file to read. Defaults to save_file from rimsync.toml."),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to rimsync.toml."),
    ] = None,
    mods_dir: Annotated[
        Optional[Path],
        typer.Option("--mods-dir", help="Install into this directory instead of mods_directory."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Download without asking for confirmation."),
    ] = False,
    clear_log: Annotated[
        bool,
        typer.Option("--clear-log", help="Empty the error log before starting."),
    ] = False,
) -> None:
    """Download every workshop mod the save needs.

    Mods already in the mods directory are left alone, mods found in the
    SteamCMD cache are copied, and the rest are downloaded with SteamCMD.

    Examples:
      rimsync sync
      rimsync sync saves/colony.rws --yes
    """
    try:
        config = load_config(config_path)
        if clear_log:
            ErrorLog(config.error_log_path).clear()
        save_path = save or config.save_path
        if save_path is None:
            console.print("[red]Error:[/red] No save file given and save_file is not set")
            raise typer.Exit(1)

        console.print(f"[dim]Reading {save_path}...[/dim]")
        mods = read_save(save_path)
        console.print(f"Found {len(mods)} mod(s)")

        orchestrator = build_orchestrator(
            config,
            confirm=None if yes else ask_confirmation,
            mods_dir=mods_dir,
        )
        report = orchestrator.run(mods)
    except RimsyncError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    print_report(report)

    if not report.success:
        raise typer.Exit(1)
