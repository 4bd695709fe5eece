"""Orchestrator for bringing a save's mods into the mods directory.

A run goes through these phases, strictly one mod at a time:

1. Resolve workshop ids by name for mods that lack one.
2. Classify every resolved mod as installed, cached or missing.
3. Rewrite the missing and unresolved audit files.
4. Ask for confirmation when something has to be downloaded.
5. Download the missing mods and collect one outcome per input mod.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Sequence

from rimsync.audit import MISSING_TITLE, UNRESOLVED_TITLE, write_mod_list
from rimsync.downloader import AcquireResult, ModDownloader
from rimsync.exceptions import SteamCmdNotInstalledError, WorkshopSearchError
from rimsync.install_state import InstallStateChecker
from rimsync.models import (
    REASON_ALREADY_INSTALLED,
    REASON_CANCELLED,
    REASON_COPIED_FROM_CACHE,
    REASON_COPY_FAILED,
    REASON_DOWNLOADED,
    REASON_DUPLICATE,
    REASON_NOT_FOUND,
    InstallState,
    ModOutcome,
    RequiredMod,
    SyncReport,
)
from rimsync.steamcmd import SteamCmd
from rimsync.workshop import WorkshopSearch

log = logging.getLogger(__name__)

ConfirmCallback = Callable[[list[RequiredMod]], bool]


@dataclass
class _Entry:
    """Working state for one input mod during a run."""

    mod: RequiredMod
    state: InstallState | None = None
    lookup_error: str | None = None


def _dedupe(mods: list[RequiredMod]) -> list[RequiredMod]:
    seen: set[tuple[str, str]] = set()
    unique: list[RequiredMod] = []
    for mod in mods:
        if mod.key not in seen:
            seen.add(mod.key)
            unique.append(mod)
    return unique


class Orchestrator:
    """Coordinates name lookups, install checks and downloads for a save."""

    def __init__(
        self,
        steamcmd: SteamCmd,
        search: WorkshopSearch,
        checker: InstallStateChecker,
        downloader: ModDownloader,
        missing_file: Path,
        unresolved_file: Path,
        confirm: ConfirmCallback | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            steamcmd: SteamCMD wrapper, checked for presence before each run
            search: Workshop name search
            checker: Install state probes
            downloader: Per-mod download driver
            missing_file: Audit file listing mods that need downloading
            unresolved_file: Audit file listing mods not found by name
            confirm: Called with the missing mods before downloading; None
                proceeds without asking
        """
        self.steamcmd = steamcmd
        self.search = search
        self.checker = checker
        self.downloader = downloader
        self.missing_file = missing_file
        self.unresolved_file = unresolved_file
        self.confirm = confirm

    def _resolve(self, mod: RequiredMod) -> _Entry:
        """Bind a workshop id to a mod that was saved without one."""
        try:
            steam_id = self.search.find_mod_id(mod.name)
        except WorkshopSearchError as e:
            return _Entry(mod=mod, lookup_error=str(e))
        if steam_id is None:
            return _Entry(mod=mod, lookup_error=f"Mod '{mod.name}' not found on the Steam Workshop")
        return _Entry(mod=mod.with_steam_id(steam_id))

    def _write_audit_files(self, missing: list[RequiredMod], unresolved: list[RequiredMod]) -> None:
        for path, title, mods in (
            (self.missing_file, MISSING_TITLE, missing),
            (self.unresolved_file, UNRESOLVED_TITLE, unresolved),
        ):
            try:
                write_mod_list(path, title, mods)
            except OSError as e:
                log.error("Failed to write %s: %s", path, e)

    def _settle(self, entry: _Entry) -> ModOutcome:
        """Outcome for a mod that needs no download."""
        if entry.state is InstallState.CACHED:
            result = self.downloader.copy_from_cache(entry.mod.steam_id, entry.mod.name)
            if not result.success:
                return ModOutcome(mod=entry.mod, success=False, reason=REASON_COPY_FAILED, error=result.error)
            reason = (
                REASON_COPIED_FROM_CACHE
                if result.source is InstallState.CACHED
                else REASON_ALREADY_INSTALLED
            )
            return ModOutcome(mod=entry.mod, success=True, skipped=True, reason=reason)
        return ModOutcome(mod=entry.mod, success=True, skipped=True, reason=REASON_ALREADY_INSTALLED)

    def run(self, mods: Sequence[RequiredMod]) -> SyncReport:
        """Make sure every mod in ``mods`` is in the mods directory.

        Args:
            mods: Required mods in save order

        Returns:
            SyncReport with exactly one outcome per input mod, in input order

        Raises:
            SteamCmdNotInstalledError: If SteamCMD is missing; nothing is
                processed in that case
        """
        if not self.steamcmd.is_installed():
            raise SteamCmdNotInstalledError(
                f"SteamCMD not found at {self.steamcmd.path}. Install SteamCMD or fix steamcmd_path."
            )

        entries: list[_Entry] = []
        lookups: dict[tuple[str, str], _Entry] = {}
        for mod in mods:
            if not mod.needs_lookup:
                entries.append(_Entry(mod=mod))
                continue
            # Repeated entries share one workshop request
            lookup_key = (mod.local_id, mod.name)
            if lookup_key not in lookups:
                lookups[lookup_key] = self._resolve(mod)
            resolved = lookups[lookup_key]
            entries.append(_Entry(mod=resolved.mod, lookup_error=resolved.lookup_error))

        for entry in entries:
            if entry.lookup_error is None:
                entry.state = self.checker.classify(entry.mod.steam_id)

        unresolved = _dedupe([e.mod for e in entries if e.lookup_error is not None])
        missing = _dedupe([e.mod for e in entries if e.state is InstallState.MISSING])
        self._write_audit_files(missing, unresolved)
        log.info("%d mod(s) to download, %d not found by name", len(missing), len(unresolved))

        report = SyncReport(missing=missing, unresolved=unresolved)

        if missing and self.confirm is not None and not self.confirm(missing):
            log.info("Download cancelled")
            report.outcomes = [
                ModOutcome(mod=e.mod, success=False, reason=REASON_CANCELLED, error=e.lookup_error)
                for e in entries
            ]
            return report

        results: dict[tuple[str, str], AcquireResult] = {}
        for mod in missing:
            results[mod.key] = self.downloader.acquire(mod.steam_id, mod.name)

        reported: set[tuple[str, str]] = set()
        for entry in entries:
            if entry.lookup_error is not None:
                report.outcomes.append(
                    ModOutcome(mod=entry.mod, success=False, reason=REASON_NOT_FOUND, error=entry.lookup_error)
                )
            elif entry.state is InstallState.MISSING:
                result = results[entry.mod.key]
                reason = REASON_DUPLICATE if entry.mod.key in reported else REASON_DOWNLOADED
                reported.add(entry.mod.key)
                report.outcomes.append(
                    ModOutcome(
                        mod=entry.mod,
                        success=result.success,
                        reason=reason if result.success else None,
                        error=result.error,
                    )
                )
            else:
                report.outcomes.append(self._settle(entry))

        return report
