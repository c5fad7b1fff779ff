"""Configuration module."""

from tally.config.loader import get_default_config, load_config
from tally.config.models import (
    ConfigError,
    DisplayConfig,
    TallyConfig,
    TimeGoal,
    TimeGoalConfig,
)
from tally.config.paths import (
    get_config_path,
    get_data_path,
    get_logs_path,
    get_tally_home,
)

__all__ = [
    "ConfigError",
    "DisplayConfig",
    "TallyConfig",
    "TimeGoal",
    "TimeGoalConfig",
    "get_config_path",
    "get_data_path",
    "get_default_config",
    "get_logs_path",
    "get_tally_home",
    "load_config",
]
