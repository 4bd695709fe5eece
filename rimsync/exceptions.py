"""Shared exception classes for rimsync."""


class RimsyncError(Exception):
    """Base exception for rimsync errors."""


class ConfigNotFoundError(RimsyncError):
    """Raised when rimsync.toml is not found."""


class ConfigParseError(RimsyncError):
    """Raised when rimsync.toml cannot be parsed."""


class ConfigValidationError(RimsyncError):
    """Raised when rimsync.toml contains invalid configuration."""


class SaveFileError(RimsyncError):
    """Raised when the save file cannot be read."""


class SteamCmdError(RimsyncError):
    """Raised when the SteamCMD process cannot be launched."""


class SteamCmdNotInstalledError(RimsyncError):
    """Raised when SteamCMD is not present at the configured path."""


class WorkshopSearchError(RimsyncError):
    """Raised when the Steam Workshop search request fails."""
