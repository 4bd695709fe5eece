"""Append-only log of mods that could not be downloaded."""

import logging
from datetime import datetime, timezone
from pathlib import Path

log = logging.getLogger(__name__)

RULE_WIDTH = 80


def format_entry(
    mod_id: str,
    name: str,
    error: str,
    details: str = "",
    timestamp: datetime | None = None,
) -> str:
    """Render one error log entry."""
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)

    lines = [
        f"[{timestamp.isoformat()}]",
        "Mod not downloaded:",
        f"ID: {mod_id}",
        f"Name: {name}",
        f"Error: {error}",
    ]
    if details:
        lines.append(f"Details: {details.rstrip()}")
    lines.append("-" * RULE_WIDTH)
    return "\n".join(lines) + "\n"


class ErrorLog:
    """Error log file shared by the search and download steps."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def log_error(self, mod_id: str, name: str, error: str, details: str = "") -> None:
        """Append an entry for a mod that failed.

        A log that cannot be written is reported and otherwise ignored so the
        run carries on.
        """
        entry = format_entry(mod_id, name, error, details)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(entry)
        except OSError as e:
            log.error("Failed to write error log %s: %s", self.path, e)

    def clear(self) -> None:
        """Truncate the log."""
        try:
            self.path.write_text("", encoding="utf-8")
        except OSError as e:
            log.error("Failed to clear error log %s: %s", self.path, e)
