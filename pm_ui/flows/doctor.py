"""
Environment health checks (doctor).
"""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from pm_common.config.settings import Elevation, Settings, SettingsRepository
from pm_core.backends import HELPER_TOOL, PRIMARY_TOOL
from pm_core.process import ProcessRunner
from pm_ui.tui.core.capabilities import is_tty_available


@dataclass
class DoctorCheckItem:
    label: str
    ok: bool
    required: bool


@dataclass
class DoctorCheckGroup:
    title: str
    items: List[DoctorCheckItem]
    failures: int


@dataclass
class DoctorReport:
    groups: List[DoctorCheckGroup]
    info_messages: List[str]
    total_failures: int


class DoctorService:
    """Check the tools and terminal pmgr relies on."""

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        settings_repo: Optional[SettingsRepository] = None,
        settings: Optional[Settings] = None,
        tty_check: Callable[[], bool] = is_tty_available,
    ) -> None:
        self._runner = runner or ProcessRunner()
        self._settings_repo = settings_repo or SettingsRepository()
        self._settings = settings or Settings()
        self._tty_check = tty_check

    def _has(self, tool: str) -> bool:
        return self._runner.which(tool) is not None

    def _build_check_group(
        self, title: str, items: List[Tuple[str, bool, bool]]
    ) -> DoctorCheckGroup:
        failures = 0
        check_items = []
        for label, ok, required in items:
            check_items.append(DoctorCheckItem(label, ok, required))
            failures += 0 if ok or not required else 1
        return DoctorCheckGroup(title, check_items, failures)

    def check_all(self) -> DoctorReport:
        has_primary = self._has(PRIMARY_TOOL)
        has_helper = self._has(HELPER_TOOL)
        backends = self._build_check_group(
            "Package Tools",
            [
                (f"{PRIMARY_TOOL} or {HELPER_TOOL}", has_primary or has_helper, True),
                (PRIMARY_TOOL, has_primary, False),
                (f"{HELPER_TOOL} (AUR, optional)", has_helper, False),
            ],
        )

        is_root = os.geteuid() == 0
        elevation_items: List[Tuple[str, bool, bool]] = [("running as root", is_root, False)]
        preference = self._settings.elevation
        if preference in (Elevation.AUTO, Elevation.NONE):
            candidates = [Elevation.SUDO, Elevation.PKEXEC, Elevation.DOAS]
            available = [c for c in candidates if self._has(c.value)]
            for candidate in candidates:
                elevation_items.append((candidate.value, candidate in available, False))
            elevation_items.append(
                ("privilege escalation available", is_root or bool(available), preference is Elevation.AUTO)
            )
        else:
            elevation_items.append((f"{preference.value} (configured)", self._has(preference.value), True))
        elevation = self._build_check_group("Privilege Escalation", elevation_items)

        terminal = self._build_check_group(
            "Terminal",
            [("interactive terminal (stdin and stdout)", self._tty_check(), False)],
        )

        groups = [backends, elevation, terminal]
        settings_path = self._settings_repo.path
        info = [
            f"Python: {platform.python_version()} ({platform.python_implementation()})",
            f"Settings: {settings_path} ({'present' if settings_path.exists() else 'defaults'})",
            f"Theme: {self._settings.theme.value}, layout: {self._settings.layout.value}",
        ]
        return DoctorReport(
            groups=groups,
            info_messages=info,
            total_failures=sum(group.failures for group in groups),
        )
