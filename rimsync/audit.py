"""Human-readable lists of missing and unresolved mods."""

from pathlib import Path
from typing import Iterable

from rimsync.models import RequiredMod

MISSING_TITLE = "Mods missing from the mods directory"
UNRESOLVED_TITLE = "Mods not found on the Steam Workshop"


def render_mod_list(title: str, mods: Iterable[RequiredMod]) -> str:
    """Render a titled list of mods with a trailing count."""
    mods = list(mods)
    lines = [title, "=" * len(title), ""]
    for mod in mods:
        lines.append(f"Name: {mod.name}")
        lines.append(f"Local ID: {mod.local_id}")
        lines.append(f"Steam ID: {mod.steam_id}")
        lines.append("")
    lines.append(f"Total: {len(mods)}")
    return "\n".join(lines) + "\n"


def write_mod_list(path: Path, title: str, mods: Iterable[RequiredMod]) -> Path:
    """Write a mod list, replacing any previous contents.

    Returns:
        The written path
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_mod_list(title, mods), encoding="utf-8")
    return path
