"""Test configuration and fixtures."""

from pathlib import Path

import pytest

from rimsync.downloader import ModDownloader
from rimsync.error_log import ErrorLog
from rimsync.exceptions import SteamCmdError, WorkshopSearchError
from rimsync.install_state import InstallStateChecker
from rimsync.orchestrator import Orchestrator
from rimsync.steamcmd import CommandResult, SteamCmd

APP_ID = "294100"


class ScriptedSteamCmd:
    """Stands in for SteamCmd.run, replaying one scripted outcome per call.

    Outcomes:
        "success"    - prints the success marker and leaves the payload on disk
        "fail"       - non-zero exit with an error on stderr
        "no-marker"  - exit 0 without the success marker
        "no-payload" - success marker but nothing on disk
        "launch"     - the process cannot be started
    """

    def __init__(self, steamcmd: SteamCmd) -> None:
        self.steamcmd = steamcmd
        self.script: list[str] = []
        self.default = "fail"
        self.calls: list[list[str]] = []

    def __call__(self, args: list[str]) -> CommandResult:
        self.calls.append(list(args))
        outcome = self.script.pop(0) if self.script else self.default
        install_dir, steam_id = Path(args[4]), args[7]

        if outcome == "launch":
            raise SteamCmdError("Failed to start SteamCMD: [Errno 8] Exec format error")
        if outcome == "fail":
            return CommandResult(1, "Logging in...", "ERROR! Timeout downloading item")
        if outcome == "no-marker":
            return CommandResult(0, f"ERROR! Download item {steam_id} failed (Failure).", "")
        if outcome == "no-payload":
            return CommandResult(0, f"Success. Downloaded item {steam_id}", "")

        payload = self.steamcmd.download_path(install_dir, steam_id)
        (payload / "About").mkdir(parents=True, exist_ok=True)
        (payload / "About" / "About.xml").write_text(f"<ModMetaData>{steam_id}</ModMetaData>")
        return CommandResult(0, f'Success. Downloaded item {steam_id} to "{payload}"', "")


class FakeSearch:
    """Workshop search answering from a fixed table."""

    def __init__(self, ids: dict[str, str] | None = None, errors: tuple[str, ...] = ()) -> None:
        self.ids = ids or {}
        self.errors = errors
        self.calls: list[str] = []

    def find_mod_id(self, name: str) -> str | None:
        self.calls.append(name)
        if name in self.errors:
            raise WorkshopSearchError(f"Workshop search request failed: connection refused ({name})")
        return self.ids.get(name)


def _make_mod_dir(path: Path) -> Path:
    (path / "About").mkdir(parents=True, exist_ok=True)
    (path / "About" / "About.xml").write_text("<ModMetaData />")
    return path


@pytest.fixture
def make_mod_dir():
    """Create a minimal mod folder at a path."""
    return _make_mod_dir


@pytest.fixture
def steamcmd(tmp_path: Path) -> SteamCmd:
    """A SteamCMD executable that exists on disk."""
    exe = tmp_path / "steamcmd" / "steamcmd.sh"
    exe.parent.mkdir()
    exe.write_text("#!/bin/sh\n")
    return SteamCmd(exe, app_id=APP_ID)


@pytest.fixture
def mods_dir(tmp_path: Path) -> Path:
    return tmp_path / "Mods"


@pytest.fixture
def error_log(tmp_path: Path) -> ErrorLog:
    return ErrorLog(tmp_path / "error_log.txt")


@pytest.fixture
def checker(steamcmd: SteamCmd, mods_dir: Path) -> InstallStateChecker:
    return InstallStateChecker(mods_dir, steamcmd.cache_dir)


@pytest.fixture
def runner(steamcmd: SteamCmd, monkeypatch) -> ScriptedSteamCmd:
    """Replace SteamCMD process runs with scripted outcomes."""
    scripted = ScriptedSteamCmd(steamcmd)
    monkeypatch.setattr(steamcmd, "run", scripted)
    return scripted


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def downloader(steamcmd, checker, mods_dir, error_log, runner, sleeps) -> ModDownloader:
    return ModDownloader(
        steamcmd,
        checker,
        mods_dir,
        error_log=error_log,
        max_attempts=3,
        retry_delay=2.0,
        sleep=sleeps.append,
    )


@pytest.fixture
def search() -> FakeSearch:
    return FakeSearch()


@pytest.fixture
def make_orchestrator(tmp_path, steamcmd, search, checker, downloader):
    """Build an Orchestrator whose confirmation answer is chosen per test."""

    def _make(confirm=None) -> Orchestrator:
        return Orchestrator(
            steamcmd=steamcmd,
            search=search,
            checker=checker,
            downloader=downloader,
            missing_file=tmp_path / "missing_mods.txt",
            unresolved_file=tmp_path / "unresolved_mods.txt",
            confirm=confirm,
        )

    return _make
