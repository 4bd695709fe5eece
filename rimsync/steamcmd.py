"""SteamCMD integration for downloading workshop items."""

import subprocess
from dataclasses import dataclass
from pathlib import Path

from rimsync.constants import RIMWORLD_APP_ID, SUCCESS_MARKER
from rimsync.exceptions import SteamCmdError


@dataclass(frozen=True)
class CommandResult:
    """Captured result of one SteamCMD run."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def output(self) -> str:
        """stdout and stderr joined for diagnostics."""
        return "\n".join(part for part in (self.stdout, self.stderr) if part)


def download_succeeded(result: CommandResult) -> bool:
    """Check if SteamCMD reported a successful workshop download."""
    return result.returncode == 0 and SUCCESS_MARKER in result.stdout


def workshop_content_dir(root: Path, app_id: str) -> Path:
    """Workshop content directory SteamCMD uses under an install root."""
    return root / "steamapps" / "workshop" / "content" / app_id


class SteamCmd:
    """Wrapper around the SteamCMD executable."""

    def __init__(self, path: Path, app_id: str = RIMWORLD_APP_ID, login: str = "anonymous") -> None:
        self.path = path
        self.app_id = app_id
        self.login = login

    def is_installed(self) -> bool:
        """Check if SteamCMD exists at the configured path."""
        try:
            return self.path.is_file()
        except OSError:
            return False

    @property
    def cache_dir(self) -> Path:
        """SteamCMD's own workshop cache for the game."""
        return workshop_content_dir(self.path.parent, self.app_id)

    def download_path(self, install_dir: Path, steam_id: str) -> Path:
        """Where a download into ``install_dir`` leaves the item."""
        return workshop_content_dir(install_dir, self.app_id) / steam_id

    def download_command(self, steam_id: str, install_dir: Path) -> list[str]:
        return [
            str(self.path),
            "+login",
            self.login,
            "+force_install_dir",
            str(install_dir),
            "+workshop_download_item",
            self.app_id,
            steam_id,
            "+quit",
        ]

    def run(self, args: list[str]) -> CommandResult:
        """Run SteamCMD and capture its output.

        Raises:
            SteamCmdError: If the process cannot be started
        """
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise SteamCmdError(f"Failed to start SteamCMD: {e}")

        return CommandResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )
