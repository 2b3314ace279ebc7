"""Configuration helpers shared by pmgr packages."""

from pm_common.config.env import parse_bool_env, parse_choice_env, parse_int_env
from pm_common.config.settings import (
    Elevation,
    PreviewLayout,
    Settings,
    SettingsRepository,
    ThemeName,
    apply_env_overrides,
)

__all__ = [
    "Elevation",
    "PreviewLayout",
    "Settings",
    "SettingsRepository",
    "ThemeName",
    "apply_env_overrides",
    "parse_bool_env",
    "parse_choice_env",
    "parse_int_env",
]
