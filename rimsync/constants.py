"""Centralized constants for the rimsync package."""

# Steam app id of RimWorld
RIMWORLD_APP_ID = "294100"

# Placeholder steam id written to saves for mods without a workshop id
UNKNOWN_STEAM_ID = "0"

# Official expansions and the core game, never downloaded from the workshop
OFFICIAL_STEAM_IDS = ("1130216446", "2106325227", "2895290905", "294100")
OFFICIAL_MOD_NAMES = (
    "Core",
    "RimWorld",
    "RimWorldCore",
    "GameCore",
    "Royalty",
    "Ideology",
    "Biotech",
    "Anomaly",
)

# Literal SteamCMD prints when a workshop item was downloaded
SUCCESS_MARKER = "Success"

# Download retry policy
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_RETRY_DELAY = 2.0

WORKSHOP_SEARCH_URL = "https://steamcommunity.com/workshop/browse/"

# Output file names
ERROR_LOG_FILENAME = "error_log.txt"
MISSING_MODS_FILENAME = "missing_mods.txt"
UNRESOLVED_MODS_FILENAME = "unresolved_mods.txt"
