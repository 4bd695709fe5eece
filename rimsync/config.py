"""Configuration management for rimsync.toml."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli
import tomli_w

from rimsync.constants import (
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_RETRY_DELAY,
    ERROR_LOG_FILENAME,
    MISSING_MODS_FILENAME,
    RIMWORLD_APP_ID,
    UNRESOLVED_MODS_FILENAME,
)
from rimsync.exceptions import ConfigNotFoundError, ConfigParseError, ConfigValidationError

CONFIG_FILENAME = "rimsync.toml"


def _require_str(data: dict[str, Any], key: str, section: str = "") -> str:
    where = f"[{section}] {key}" if section else key
    if key not in data:
        raise ConfigValidationError(f"Missing required setting '{where}'")
    value = data[key]
    if not isinstance(value, str) or not value:
        raise ConfigValidationError(f"Setting '{where}' must be a non-empty string")
    return value


def _optional_str(data: dict[str, Any], key: str, default: str, section: str = "") -> str:
    if key not in data:
        return default
    return _require_str(data, key, section)


def _table(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigValidationError(f"'{key}' must be a table, got {type(value).__name__}")
    return value


@dataclass
class OutputSettings:
    """Where rimsync writes its reports.

    Example:
        [output]
        error_log = "error_log.txt"
        missing_file = "missing_mods.txt"
        unresolved_file = "unresolved_mods.txt"
    """

    error_log: str = ERROR_LOG_FILENAME
    missing_file: str = MISSING_MODS_FILENAME
    unresolved_file: str = UNRESOLVED_MODS_FILENAME

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "OutputSettings":
        return cls(
            error_log=_optional_str(data, "error_log", ERROR_LOG_FILENAME, "output"),
            missing_file=_optional_str(data, "missing_file", MISSING_MODS_FILENAME, "output"),
            unresolved_file=_optional_str(data, "unresolved_file", UNRESOLVED_MODS_FILENAME, "output"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_log": self.error_log,
            "missing_file": self.missing_file,
            "unresolved_file": self.unresolved_file,
        }


@dataclass
class DownloadSettings:
    """Retry policy for SteamCMD downloads.

    Example:
        [download]
        max_attempts = 3
        retry_delay = 2.0
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_delay: float = DEFAULT_RETRY_DELAY

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DownloadSettings":
        max_attempts = data.get("max_attempts", DEFAULT_MAX_ATTEMPTS)
        if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
            raise ConfigValidationError("[download] max_attempts must be a positive integer")

        retry_delay = data.get("retry_delay", DEFAULT_RETRY_DELAY)
        if isinstance(retry_delay, bool) or not isinstance(retry_delay, (int, float)) or retry_delay < 0:
            raise ConfigValidationError("[download] retry_delay must be a non-negative number")

        return cls(max_attempts=max_attempts, retry_delay=float(retry_delay))

    def to_dict(self) -> dict[str, Any]:
        return {"max_attempts": self.max_attempts, "retry_delay": self.retry_delay}


@dataclass
class RimsyncConfig:
    """Configuration from rimsync.toml.

    Example:
        save_file = "saves/colony.rws"
        steamcmd_path = "C:/Games/steamCMD/steamcmd.exe"
        mods_directory = "C:/Program Files (x86)/RimWorld/Mods"
        app_id = "294100"
        steam_login = "anonymous"
    """

    path: Path
    save_file: str = ""
    steamcmd_path: str = ""
    mods_directory: str = ""
    app_id: str = RIMWORLD_APP_ID
    steam_login: str = "anonymous"
    output: OutputSettings = field(default_factory=OutputSettings)
    download: DownloadSettings = field(default_factory=DownloadSettings)

    @classmethod
    def load(cls, path: Path) -> "RimsyncConfig":
        """Load configuration from rimsync.toml.

        Args:
            path: Path to the rimsync.toml file

        Returns:
            Parsed RimsyncConfig

        Raises:
            ConfigNotFoundError: If the file doesn't exist
            ConfigParseError: If the file cannot be parsed
            ConfigValidationError: If the configuration is invalid
        """
        if not path.exists():
            raise ConfigNotFoundError(f"Config file not found: {path}")

        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigParseError(f"Failed to parse {path}: {e}")

        return cls._from_dict(path, data)

    @classmethod
    def _from_dict(cls, path: Path, data: dict[str, Any]) -> "RimsyncConfig":
        """Create a RimsyncConfig from a parsed TOML dict."""
        return cls(
            path=path,
            save_file=_optional_str(data, "save_file", ""),
            steamcmd_path=_require_str(data, "steamcmd_path"),
            mods_directory=_require_str(data, "mods_directory"),
            app_id=_optional_str(data, "app_id", RIMWORLD_APP_ID),
            steam_login=_optional_str(data, "steam_login", "anonymous"),
            output=OutputSettings.from_dict(_table(data, "output")),
            download=DownloadSettings.from_dict(_table(data, "download")),
        )

    @classmethod
    def default(cls, path: Path) -> "RimsyncConfig":
        """Starting configuration written by ``rimsync init``."""
        return cls(
            path=path,
            save_file="quicksave.rws",
            steamcmd_path="steamcmd/steamcmd.sh",
            mods_directory="Mods",
        )

    def save(self) -> None:
        """Save configuration to rimsync.toml."""
        with open(self.path, "wb") as f:
            tomli_w.dump(self._to_dict(), f)

    def _to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.save_file:
            data["save_file"] = self.save_file
        data["steamcmd_path"] = self.steamcmd_path
        data["mods_directory"] = self.mods_directory
        data["app_id"] = self.app_id
        data["steam_login"] = self.steam_login
        data["output"] = self.output.to_dict()
        data["download"] = self.download.to_dict()
        return data

    def resolve_path(self, value: str) -> Path:
        """Resolve a configured path relative to the config file's directory."""
        path = Path(value).expanduser()
        if path.is_absolute():
            return path
        return self.path.parent / path

    @property
    def save_path(self) -> Path | None:
        return self.resolve_path(self.save_file) if self.save_file else None

    @property
    def steamcmd(self) -> Path:
        return self.resolve_path(self.steamcmd_path)

    @property
    def mods_dir(self) -> Path:
        return self.resolve_path(self.mods_directory)

    @property
    def error_log_path(self) -> Path:
        return self.resolve_path(self.output.error_log)

    @property
    def missing_path(self) -> Path:
        return self.resolve_path(self.output.missing_file)

    @property
    def unresolved_path(self) -> Path:
        return self.resolve_path(self.output.unresolved_file)


def find_config(start_path: Path | None = None) -> Path | None:
    """Find rimsync.toml by walking up the directory tree.

    Args:
        start_path: Starting directory (defaults to current working directory)

    Returns:
        Path to rimsync.toml if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()

    while True:
        config_path = current / CONFIG_FILENAME
        if config_path.exists():
            return config_path

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def load_config(config_path: Path | None = None) -> RimsyncConfig:
    """Load an explicit config file, or the nearest rimsync.toml.

    Raises:
        ConfigNotFoundError: If no config file can be found
    """
    if config_path is None:
        config_path = find_config()
        if config_path is None:
            raise ConfigNotFoundError(
                f"{CONFIG_FILENAME} not found. Run 'rimsync init' to create one."
            )
    return RimsyncConfig.load(config_path)
