"""Configuration loading from TOML files and environment variables."""

import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tally.config.models import ConfigError, TallyConfig
from tally.config.paths import DATA_FILE_ENV_VAR, get_config_path


def _get_default_config_paths() -> list[Path]:
    """Get ordered list of default config file locations."""
    return [
        get_config_path(),  # ~/.tally/config.toml (or TALLY_HOME)
        Path("/etc/tally/config.toml"),  # System-wide
    ]


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    """Let TALLY_DATA_FILE win over the data_file setting."""
    if data_file := os.environ.get(DATA_FILE_ENV_VAR):
        config["data_file"] = data_file
    return config


def load_config(path: Path | None = None) -> TallyConfig:
    """Load configuration from TOML file.

    Args:
        path: Explicit path to config file. If None, searches default locations.

    Returns:
        Validated TallyConfig instance.

    Raises:
        FileNotFoundError: If no config file is found.
        ConfigError: If the config file is invalid.
    """
    config_path: Path | None = None

    default_paths = _get_default_config_paths()

    if path is not None:
        config_path = Path(path).expanduser()
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        for default_path in default_paths:
            expanded = default_path.expanduser()
            if expanded.exists():
                config_path = expanded
                break

    if config_path is None:
        raise FileNotFoundError(
            f"No config file found. Searched: {', '.join(str(p) for p in default_paths)}"
        )

    try:
        with config_path.open("rb") as f:
            raw_config = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {config_path}: {e}") from e

    raw_config = _apply_env_overrides(raw_config)

    try:
        return TallyConfig.model_validate(raw_config)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_path}:\n{e}") from e


def get_default_config() -> TallyConfig:
    """Get the configuration used when no config file exists."""
    return TallyConfig.model_validate(_apply_env_overrides({}))
