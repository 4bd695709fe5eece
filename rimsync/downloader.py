"""Download a single workshop item into the mods directory.

Each acquisition walks a small state machine::

    CHECK_INSTALLED -> CHECK_CACHED -> INVOKE -> INTERPRET -> DONE
                                          ^          |
                                          |          v
                         CHECK_INSTALLED <---- RETRY (until attempts run out)

The install and cache checks are repeated on every attempt because a failed
attempt may still have left the item on disk.
"""

import logging
import shutil
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from rimsync.constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_RETRY_DELAY
from rimsync.error_log import ErrorLog
from rimsync.exceptions import SteamCmdError
from rimsync.install_state import InstallStateChecker
from rimsync.models import InstallState
from rimsync.steamcmd import CommandResult, SteamCmd, download_succeeded

log = logging.getLogger(__name__)


class Step(Enum):
    """States of a single acquisition."""

    CHECK_INSTALLED = "check_installed"
    CHECK_CACHED = "check_cached"
    INVOKE = "invoke"
    INTERPRET = "interpret"
    RETRY = "retry"
    DONE = "done"


@dataclass(frozen=True)
class AcquireResult:
    """Result of acquiring one workshop item.

    ``source`` tells where a successful item came from: already installed,
    copied from the SteamCMD cache, or freshly downloaded.
    """

    success: bool
    attempts: int
    invocations: int = 0
    error: str | None = None
    source: InstallState | None = None


class ModDownloader:
    """Makes sure a workshop item ends up in the mods directory."""

    def __init__(
        self,
        steamcmd: SteamCmd,
        checker: InstallStateChecker,
        mods_dir: Path,
        error_log: ErrorLog | None = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.steamcmd = steamcmd
        self.checker = checker
        self.mods_dir = mods_dir
        self.error_log = error_log
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self._sleep = sleep

    def _record(self, steam_id: str, name: str, error: str, details: str = "") -> None:
        if self.error_log is not None:
            self.error_log.log_error(steam_id, name, error, details)

    def _copy_from_cache(self, steam_id: str, name: str) -> str | None:
        """Copy a cached item into the mods directory, returning an error on failure."""
        source = self.checker.cache_dir / steam_id
        target = self.mods_dir / steam_id
        log.info("Copying %s from %s to %s", steam_id, source, target)
        try:
            self.mods_dir.mkdir(parents=True, exist_ok=True)
            shutil.copytree(source, target, dirs_exist_ok=True)
        except OSError as e:
            error = f"Failed to copy mod {steam_id} from SteamCMD cache: {e}"
            log.error(error)
            self._record(steam_id, name, error)
            return error
        return None

    def copy_from_cache(self, steam_id: str, name: str) -> AcquireResult:
        """Copy an item from the SteamCMD cache, never starting a download.

        Returns:
            AcquireResult; fails if the item has left the cache or the copy
            fails
        """
        if self.checker.is_installed(steam_id):
            log.info("%s (%s) is already installed", name, steam_id)
            return AcquireResult(True, 1, source=InstallState.INSTALLED)

        if not self.checker.is_cached(steam_id):
            error = f"Mod {steam_id} is no longer in the SteamCMD cache"
            log.error(error)
            self._record(steam_id, name, error)
            return AcquireResult(False, 1, error=error)

        error = self._copy_from_cache(steam_id, name)
        if error is not None:
            return AcquireResult(False, 1, error=error)
        return AcquireResult(True, 1, source=InstallState.CACHED)

    def _prune_download_tree(self, payload: Path) -> None:
        """Remove the empty steamapps tree a download leaves in the mods directory."""
        parent = payload.parent
        while parent != self.mods_dir and self.mods_dir in parent.parents:
            try:
                parent.rmdir()
            except OSError:
                # Not empty
                return
            parent = parent.parent

    def _interpret(self, steam_id: str, result: CommandResult) -> tuple[str | None, str]:
        """Check a finished download and move the item into place.

        Returns:
            Tuple of (error, details); error is None when the item is in place
        """
        if result.returncode != 0:
            return f"SteamCMD exited with status {result.returncode} while downloading {steam_id}", result.stderr
        if not download_succeeded(result):
            return f"SteamCMD did not report success for {steam_id}", result.stderr

        payload = self.steamcmd.download_path(self.mods_dir, steam_id)
        if not payload.exists():
            return f"Mod {steam_id} not found at {payload} after download", result.stdout

        target = self.mods_dir / steam_id
        try:
            shutil.move(str(payload), str(target))
        except OSError as e:
            return f"Failed to move mod {steam_id} into {target}: {e}", ""

        self._prune_download_tree(payload)
        return None, ""

    def acquire(self, steam_id: str, name: str) -> AcquireResult:
        """Install a workshop item, downloading it if needed.

        Args:
            steam_id: Workshop id of the item
            name: Display name, used for messages and the error log

        Returns:
            AcquireResult; on failure ``error`` holds the last attempt's error
        """
        step = Step.CHECK_INSTALLED
        attempt = 1
        invocations = 0
        result: CommandResult | None = None
        error: str | None = None
        details = ""

        while step is not Step.DONE:
            if step is Step.CHECK_INSTALLED:
                if self.checker.is_installed(steam_id):
                    log.info("%s (%s) is already installed", name, steam_id)
                    return AcquireResult(True, attempt, invocations, source=InstallState.INSTALLED)
                step = Step.CHECK_CACHED

            elif step is Step.CHECK_CACHED:
                if self.checker.is_cached(steam_id):
                    copy_error = self._copy_from_cache(steam_id, name)
                    if copy_error is not None:
                        return AcquireResult(False, attempt, invocations, error=copy_error)
                    return AcquireResult(True, attempt, invocations, source=InstallState.CACHED)
                step = Step.INVOKE

            elif step is Step.INVOKE:
                log.info(
                    "Downloading %s (%s), attempt %d of %d",
                    name, steam_id, attempt, self.max_attempts,
                )
                try:
                    self.mods_dir.mkdir(parents=True, exist_ok=True)
                except OSError as e:
                    error, details = f"Failed to create mods directory {self.mods_dir}: {e}", ""
                    step = Step.RETRY
                    continue

                command = self.steamcmd.download_command(steam_id, self.mods_dir)
                log.debug("Running %s", " ".join(command))
                invocations += 1
                try:
                    result = self.steamcmd.run(command)
                except SteamCmdError as e:
                    error, details = str(e), ""
                    step = Step.RETRY
                    continue
                step = Step.INTERPRET

            elif step is Step.INTERPRET:
                log.debug("SteamCMD output:\n%s", result.output)
                error, details = self._interpret(steam_id, result)
                if error is None:
                    log.info("Downloaded %s (%s)", name, steam_id)
                    return AcquireResult(True, attempt, invocations, source=InstallState.MISSING)
                step = Step.RETRY

            elif step is Step.RETRY:
                log.warning("Attempt %d of %d failed: %s", attempt, self.max_attempts, error)
                self._record(steam_id, name, error or "unknown error", details)
                if attempt >= self.max_attempts:
                    step = Step.DONE
                    continue
                self._sleep(self.retry_delay)
                attempt += 1
                step = Step.CHECK_INSTALLED

        log.error("Giving up on %s (%s) after %d attempts", name, steam_id, attempt)
        return AcquireResult(False, attempt, invocations, error=error)
