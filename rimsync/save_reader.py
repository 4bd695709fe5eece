"""Extract the mod list from a RimWorld save file."""

import html
import logging
import re
from pathlib import Path

from rimsync.constants import OFFICIAL_MOD_NAMES, OFFICIAL_STEAM_IDS, UNKNOWN_STEAM_ID
from rimsync.exceptions import SaveFileError
from rimsync.models import RequiredMod

log = logging.getLogger(__name__)

_LIST_ITEM = re.compile(r"<li>([^<]*)</li>")


def _read_list(content: str, tag: str) -> list[str] | None:
    """Return the <li> values of the first <tag> section, or None if absent."""
    match = re.search(rf"<{tag}>(.*?)</{tag}>", content, re.DOTALL)
    if match is None:
        return None
    return [html.unescape(value).strip() for value in _LIST_ITEM.findall(match.group(1))]


def is_official_mod(steam_id: str, name: str | None) -> bool:
    """Check if a mod is the core game or an official expansion."""
    if steam_id in OFFICIAL_STEAM_IDS:
        return True
    if not name:
        return False
    lowered = name.lower()
    return any(lowered == official.lower() for official in OFFICIAL_MOD_NAMES)


def parse_save(content: str) -> list[RequiredMod]:
    """Parse save text into the ordered list of required workshop mods.

    The save stores three parallel lists (``modIds``, ``modSteamIds`` and
    ``modNames``). Entries are matched by position; a missing steam id is
    treated as unknown and a missing name falls back to the local id.
    Official content is dropped.

    Args:
        content: Raw text of an ``.rws`` save

    Returns:
        Required mods in save order
    """
    mod_ids = _read_list(content, "modIds")
    if mod_ids is None:
        return []

    steam_ids = _read_list(content, "modSteamIds") or []
    names = _read_list(content, "modNames") or []

    mods: list[RequiredMod] = []
    for index, mod_id in enumerate(mod_ids):
        steam_id = steam_ids[index] if index < len(steam_ids) and steam_ids[index] else UNKNOWN_STEAM_ID
        name = names[index] if index < len(names) and names[index] else mod_id

        if is_official_mod(steam_id, name):
            log.debug("Skipping %s (%s): official content", name, steam_id)
            continue

        mods.append(RequiredMod(local_id=mod_id, steam_id=steam_id, name=name))

    return mods


def read_save(path: Path) -> list[RequiredMod]:
    """Read a save file and return its required mods.

    Raises:
        SaveFileError: If the file cannot be read
    """
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SaveFileError(f"Failed to read save file {path}: {e}")

    return parse_save(content)
