"""Type definitions shared across rimsync."""

from dataclasses import dataclass, field, replace
from enum import Enum

from rimsync.constants import UNKNOWN_STEAM_ID

# Outcome reasons
REASON_ALREADY_INSTALLED = "already installed"
REASON_CANCELLED = "cancelled"
REASON_NOT_FOUND = "not found"
REASON_DOWNLOADED = "downloaded"
REASON_DUPLICATE = "duplicate"
REASON_COPIED_FROM_CACHE = "copied from cache"
REASON_COPY_FAILED = "copy failed"


@dataclass(frozen=True)
class RequiredMod:
    """A mod the save needs.

    Examples:
        RequiredMod("ludeon.rimworld.hugslib", "818773962", "HugsLib")
        RequiredMod("author.localmod", "0", "Local Mod")  # workshop id unknown
    """

    local_id: str
    steam_id: str
    name: str

    @property
    def needs_lookup(self) -> bool:
        """Return True if the workshop id must be found by name."""
        return not self.steam_id or self.steam_id == UNKNOWN_STEAM_ID

    @property
    def key(self) -> tuple[str, str]:
        """Identity used to spot duplicate entries."""
        return (self.local_id, self.steam_id)

    def with_steam_id(self, steam_id: str) -> "RequiredMod":
        """Return a copy of this mod bound to a resolved workshop id."""
        return replace(self, steam_id=steam_id)

    def __str__(self) -> str:
        return f"{self.name} ({self.steam_id})"


class InstallState(Enum):
    """Where a workshop item currently lives on disk."""

    INSTALLED = "installed"
    CACHED = "cached"
    MISSING = "missing"


@dataclass(frozen=True)
class ModOutcome:
    """Final result for one required mod."""

    mod: RequiredMod
    success: bool
    skipped: bool = False
    reason: str | None = None
    error: str | None = None


@dataclass
class SyncReport:
    """Result of a sync run."""

    outcomes: list[ModOutcome] = field(default_factory=list)
    missing: list[RequiredMod] = field(default_factory=list)
    unresolved: list[RequiredMod] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return all(outcome.success for outcome in self.outcomes)

    @property
    def succeeded(self) -> list[ModOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> list[ModOutcome]:
        return [o for o in self.outcomes if not o.success]

    @property
    def skipped(self) -> list[ModOutcome]:
        return [o for o in self.outcomes if o.skipped]
