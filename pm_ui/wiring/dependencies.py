from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pm_common.api import Settings, SettingsRepository, configure_logging
from pm_core.api import (
    ExecutionDispatcher,
    PackageDataProvider,
    PackageSourceRouter,
    ProcessRunner,
    SyncDatabaseSource,
)
from pm_ui.flows.doctor import DoctorService
from pm_ui.tui.system.facade import TUI
from pm_ui.tui.system.protocols import UI


@dataclass
class UIContext:
    """Container for UI services and state, initialized lazily."""
    headless: bool = False

    # Lazily initialized services
    _ui: Optional[UI] = None
    _runner: Optional[ProcessRunner] = None
    _settings_repo: Optional[SettingsRepository] = None
    _settings: Optional[Settings] = None
    _provider: Optional[PackageDataProvider] = None
    _router: Optional[PackageSourceRouter] = None
    _dispatcher: Optional[ExecutionDispatcher] = None
    _doctor_service: Optional[DoctorService] = None

    @property
    def ui(self) -> UI:
        if self._ui is None:
            if self.headless:
                from pm_ui.tui.system.headless import HeadlessUI
                self._ui = HeadlessUI()
            else:
                self._ui = TUI(settings=self.settings, info=self._info_text)
        return self._ui

    @ui.setter
    def ui(self, value: UI):
        self._ui = value

    def _info_text(self, name: str, installed: bool) -> str:
        return self.provider.get_info(name, installed=installed)

    @property
    def runner(self) -> ProcessRunner:
        if self._runner is None:
            self._runner = ProcessRunner()
        return self._runner

    @runner.setter
    def runner(self, value: ProcessRunner):
        self._runner = value

    @property
    def settings_repo(self) -> SettingsRepository:
        if self._settings_repo is None:
            self._settings_repo = SettingsRepository()
        return self._settings_repo

    @settings_repo.setter
    def settings_repo(self, value: SettingsRepository):
        self._settings_repo = value

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = self.settings_repo.load()
        return self._settings

    @settings.setter
    def settings(self, value: Settings):
        self._settings = value

    @property
    def provider(self) -> PackageDataProvider:
        if self._provider is None:
            self._provider = PackageDataProvider(self.runner)
        return self._provider

    @provider.setter
    def provider(self, value: PackageDataProvider):
        self._provider = value

    def require_backend(self) -> PackageDataProvider:
        """Raise ``BackendUnavailable`` unless pacman or yay is on PATH."""
        return self.provider

    @property
    def router(self) -> PackageSourceRouter:
        if self._router is None:
            self._router = PackageSourceRouter(
                SyncDatabaseSource(self.runner),
                max_workers=self.settings.probe_workers,
            )
        return self._router

    @router.setter
    def router(self, value: PackageSourceRouter):
        self._router = value

    @property
    def dispatcher(self) -> ExecutionDispatcher:
        if self._dispatcher is None:
            self._dispatcher = ExecutionDispatcher(self.runner, settings=self.settings)
        return self._dispatcher

    @dispatcher.setter
    def dispatcher(self, value: ExecutionDispatcher):
        self._dispatcher = value

    @property
    def doctor_service(self) -> DoctorService:
        if self._doctor_service is None:
            self._doctor_service = DoctorService(
                runner=self.runner,
                settings_repo=self.settings_repo,
                settings=self.settings,
            )
        return self._doctor_service

    @doctor_service.setter
    def doctor_service(self, value: DoctorService):
        self._doctor_service = value


__all__ = [
    "UIContext",
    "configure_logging",
]
