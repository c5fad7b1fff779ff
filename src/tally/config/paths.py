"""Centralized path management for Tally.

All state (config, entries, logs) is stored under a single base directory.
The base directory can be overridden with the TALLY_HOME environment variable.

Default locations:
- Linux/macOS: ~/.tally
- Windows: %USERPROFILE%\\.tally
"""

import os
from functools import lru_cache
from pathlib import Path

ENV_VAR = "TALLY_HOME"
DATA_FILE_ENV_VAR = "TALLY_DATA_FILE"


def get_system_timezone() -> str:
    """Detect system timezone, falling back to UTC.

    Resolution order:
    1. TZ environment variable (if set)
    2. /etc/timezone file (Debian/Ubuntu)
    3. /etc/localtime symlink target (most Linux distros)
    4. Fallback to UTC

    Returns:
        IANA timezone name (e.g., "America/Los_Angeles", "Europe/London", "UTC").
    """
    if tz := os.environ.get("TZ"):
        return tz.lstrip(":")

    try:
        tz = Path("/etc/timezone").read_text().strip()
        if tz:
            return tz
    except (FileNotFoundError, PermissionError):
        pass

    try:
        link = Path("/etc/localtime").resolve()
        parts = str(link).split("zoneinfo/")
        if len(parts) > 1:
            return parts[1]
    except (FileNotFoundError, PermissionError):
        pass

    return "UTC"


@lru_cache(maxsize=1)
def get_tally_home() -> Path:
    """Get the base directory for all Tally data.

    Resolution order:
    1. TALLY_HOME environment variable (if set)
    2. Platform default (~/.tally)
    """
    if env_home := os.environ.get(ENV_VAR):
        return Path(env_home).expanduser().resolve()

    return Path.home() / ".tally"


def expand_path(value: str | Path) -> Path:
    """Expand ``~`` and environment variables in a user supplied path."""
    return Path(os.path.expandvars(str(value))).expanduser()


def get_config_path() -> Path:
    """Get the default config file path."""
    return get_tally_home() / "config.toml"


def get_data_path() -> Path:
    """Get the default entry store path.

    TALLY_DATA_FILE is applied by the config loader, on top of this default.
    """
    return get_tally_home() / "entries.jsonl"


def get_logs_path() -> Path:
    """Get the default logs directory path."""
    return get_tally_home() / "logs"


def get_all_paths() -> dict[str, Path]:
    """Get all standard paths for debugging/display."""
    return {
        "home": get_tally_home(),
        "config": get_config_path(),
        "data": get_data_path(),
        "logs": get_logs_path(),
    }
