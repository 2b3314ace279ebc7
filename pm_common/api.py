"""Public API surface for pm_common."""

from pm_common.config.settings import (
    Elevation,
    PreviewLayout,
    Settings,
    SettingsRepository,
    ThemeName,
)
from pm_common.errors import (
    BackendInvocationFailed,
    BackendUnavailable,
    ClassificationAmbiguous,
    PMError,
    PackageInfoUnavailable,
    ParseSkipped,
    TerminalUnavailable,
)
from pm_common.logging import configure_logging

__all__ = [
    "BackendInvocationFailed",
    "BackendUnavailable",
    "ClassificationAmbiguous",
    "Elevation",
    "PMError",
    "PackageInfoUnavailable",
    "ParseSkipped",
    "PreviewLayout",
    "Settings",
    "SettingsRepository",
    "TerminalUnavailable",
    "ThemeName",
    "configure_logging",
]
