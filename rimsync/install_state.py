"""Read-only probes for where a workshop item lives on disk."""

from pathlib import Path

from rimsync.models import InstallState


class InstallStateChecker:
    """Classifies workshop items as installed, cached or missing.

    Args:
        mods_dir: Target mods directory, one subdirectory per workshop id
        cache_dir: SteamCMD's workshop content directory for the game
    """

    def __init__(self, mods_dir: Path, cache_dir: Path) -> None:
        self.mods_dir = mods_dir
        self.cache_dir = cache_dir

    def is_installed(self, steam_id: str) -> bool:
        try:
            return (self.mods_dir / steam_id).is_dir()
        except OSError:
            return False

    def is_cached(self, steam_id: str) -> bool:
        try:
            return (self.cache_dir / steam_id).is_dir()
        except OSError:
            return False

    def classify(self, steam_id: str) -> InstallState:
        if self.is_installed(steam_id):
            return InstallState.INSTALLED
        if self.is_cached(steam_id):
            return InstallState.CACHED
        return InstallState.MISSING
