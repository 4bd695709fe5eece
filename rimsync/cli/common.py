"""Shared CLI utilities for rimsync commands."""

import logging
from contextlib import contextmanager
from pathlib import Path

from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.spinner import Spinner
from rich.table import Table

from rimsync.config import RimsyncConfig
from rimsync.downloader import ModDownloader
from rimsync.error_log import ErrorLog
from rimsync.install_state import InstallStateChecker
from rimsync.models import RequiredMod, SyncReport
from rimsync.orchestrator import ConfirmCallback, Orchestrator
from rimsync.steamcmd import SteamCmd
from rimsync.workshop import WorkshopSearch

console = Console()

LOGGER_NAME = "rimsync"


def setup_logging(verbose: int = 0) -> None:
    """Route rimsync log records to the console."""
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        logger.addHandler(
            RichHandler(
                console=console,
                rich_tracebacks=True,
                show_path=False,
                show_level=False,
                markup=False,
            )
        )
    logger.setLevel(logging.DEBUG if verbose > 0 else logging.INFO)


@contextmanager
def fetch_spinner(text: str = "Searching..."):
    """Show spinner during a network operation."""
    with Live(Spinner("dots", text=text), console=console, transient=True):
        yield


def build_orchestrator(
    config: RimsyncConfig,
    confirm: ConfirmCallback | None,
    mods_dir: Path | None = None,
) -> Orchestrator:
    """Wire up an Orchestrator from configuration."""
    mods_dir = mods_dir or config.mods_dir
    error_log = ErrorLog(config.error_log_path)
    steamcmd = SteamCmd(config.steamcmd, app_id=config.app_id, login=config.steam_login)
    checker = InstallStateChecker(mods_dir, steamcmd.cache_dir)
    downloader = ModDownloader(
        steamcmd,
        checker,
        mods_dir,
        error_log=error_log,
        max_attempts=config.download.max_attempts,
        retry_delay=config.download.retry_delay,
    )
    return Orchestrator(
        steamcmd=steamcmd,
        search=WorkshopSearch(app_id=config.app_id, error_log=error_log),
        checker=checker,
        downloader=downloader,
        missing_file=config.missing_path,
        unresolved_file=config.unresolved_path,
        confirm=confirm,
    )


def ask_confirmation(missing: list[RequiredMod]) -> bool:
    """Ask before downloading; only 'y' counts as yes."""
    console.print(f"\n[yellow]Missing mods ({len(missing)}):[/yellow]")
    for mod in missing:
        console.print(f"  [yellow]![/yellow] {mod.name} [dim]({mod.steam_id})[/dim]")
    answer = console.input(f"\nDownload {len(missing)} mod(s)? [y/N]: ")
    return answer.strip().lower() == "y"


def print_report(report: SyncReport) -> None:
    """Print per-mod results and a summary line."""
    table = Table(title="Results")
    table.add_column("Mod")
    table.add_column("Steam ID", style="dim")
    table.add_column("Status")

    for outcome in report.outcomes:
        if outcome.success:
            status = f"[green]{outcome.reason or 'ok'}[/green]"
        else:
            status = f"[red]{outcome.reason or 'failed'}[/red]"
        table.add_row(outcome.mod.name, outcome.mod.steam_id, status)

    console.print(table)

    failed = report.failed
    if failed:
        console.print("\n[red]Failed mods:[/red]")
        for outcome in failed:
            detail = outcome.error or outcome.reason or "unknown error"
            console.print(f"  - {outcome.mod.name or outcome.mod.local_id}: {detail}")

    total = len(report.outcomes)
    console.print(f"\n[dim]{len(report.succeeded)} of {total} mod(s) in place[/dim]")
    if report.success:
        console.print("[green]All mods are installed.[/green]")
    else:
        console.print("[yellow]Finished with errors.[/yellow]")
