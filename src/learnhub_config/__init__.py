"""Configuration for every LearnHub package, read from the environment."""

from learnhub_config.settings import (
    ENV_FILE_VARIABLE,
    Settings,
    clear_settings_cache,
    get_config_dir,
    get_settings,
)

__all__ = [
    "ENV_FILE_VARIABLE",
    "Settings",
    "clear_settings_cache",
    "get_config_dir",
    "get_settings",
]
