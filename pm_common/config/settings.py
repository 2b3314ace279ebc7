"""User settings persisted as JSON under the per-user config directory."""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pm_common.config.env import parse_choice_env, parse_int_env

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "settings.json"
SETTINGS_DIR_NAME = "pmgr"


class ThemeName(str, Enum):
    DEFAULT = "default"
    NORD = "nord"
    DRACULA = "dracula"
    DARK = "dark"
    WHITE = "white"


class PreviewLayout(str, Enum):
    """Where the preview pane sits relative to the list."""

    VERTICAL = "vertical"  # side by side
    HORIZONTAL = "horizontal"  # preview below the list

    def flipped(self) -> "PreviewLayout":
        if self is PreviewLayout.VERTICAL:
            return PreviewLayout.HORIZONTAL
        return PreviewLayout.VERTICAL


class Elevation(str, Enum):
    AUTO = "auto"
    SUDO = "sudo"
    PKEXEC = "pkexec"
    DOAS = "doas"
    NONE = "none"


class Settings(BaseModel):
    """Display and execution preferences; every field has a working default."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    theme: ThemeName = ThemeName.DEFAULT
    layout: PreviewLayout = PreviewLayout.VERTICAL
    probe_workers: int = Field(default=4, ge=1, le=32)
    elevation: Elevation = Elevation.AUTO
    noconfirm: bool = False


class SettingsRepository:
    """Resolve, read and write the settings document."""

    def __init__(self, config_home: Optional[Path] = None) -> None:
        env_path = os.environ.get("PMGR_SETTINGS_PATH")
        if config_home is None and env_path:
            self.path = Path(env_path).expanduser()
        else:
            xdg = os.environ.get("XDG_CONFIG_HOME")
            base = config_home or (Path(xdg) if xdg else Path.home() / ".config")
            self.path = base / SETTINGS_DIR_NAME / SETTINGS_FILE_NAME

    def load(self) -> Settings:
        """Return stored settings, or defaults when missing or unreadable."""
        if not self.path.exists():
            return apply_env_overrides(Settings())
        try:
            data = json.loads(self.path.read_text())
            settings = Settings.model_validate(data)
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("Ignoring unreadable settings at %s: %s", self.path, exc)
            settings = Settings()
        return apply_env_overrides(settings)

    def save(self, settings: Settings) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(settings.model_dump_json(indent=2))
        return self.path


def apply_env_overrides(settings: Settings) -> Settings:
    """Layer ``PMGR_*`` environment overrides on top of stored settings."""
    updates: dict[str, object] = {}
    workers = parse_int_env(os.environ.get("PMGR_PROBE_WORKERS"))
    if workers is not None and 1 <= workers <= 32:
        updates["probe_workers"] = workers
    elevation = parse_choice_env(
        os.environ.get("PMGR_ELEVATION"), {item.value for item in Elevation}
    )
    if elevation is not None:
        updates["elevation"] = Elevation(elevation)
    if not updates:
        return settings
    return settings.model_copy(update=updates)
