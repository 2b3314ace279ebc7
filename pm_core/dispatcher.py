"""Hand selected packages to the external tools that own them."""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterable, Optional

from pm_common.config.settings import Elevation, Settings
from pm_common.errors import BackendInvocationFailed
from pm_core.backends import HELPER_TOOL, PACMAN, YAY, BackendTool
from pm_core.models import (
    Action,
    ExitOutcome,
    Invocation,
    InvocationResult,
    normalize_names,
)
from pm_core.process import COMMAND_NOT_FOUND, ProcessRunner

logger = logging.getLogger(__name__)

_ELEVATION_PREFERENCE = (Elevation.SUDO, Elevation.PKEXEC, Elevation.DOAS)

Announcer = Callable[[Invocation], None]


class ExecutionDispatcher:
    """Run install/remove/upgrade invocations with inherited terminal streams.

    Primary packages go through the elevated primary tool; secondary packages go
    through the helper, which elevates on its own. Primary always runs first and
    a failure on one side never suppresses the other.
    """

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        *,
        settings: Optional[Settings] = None,
        primary_tool: BackendTool = PACMAN,
        helper_tool: BackendTool = YAY,
        euid: Optional[int] = None,
    ) -> None:
        self._runner = runner or ProcessRunner()
        self._settings = settings or Settings()
        self._primary_tool = primary_tool
        self._helper_tool = helper_tool
        self._euid = os.geteuid() if euid is None else euid
        self.elevation = self._resolve_elevation()

    def _resolve_elevation(self) -> tuple[str, ...]:
        preference = self._settings.elevation
        if preference is Elevation.NONE or self._euid == 0:
            return ()
        if preference is not Elevation.AUTO:
            return (preference.value,)
        for candidate in _ELEVATION_PREFERENCE:
            if self._runner.which(candidate.value):
                return (candidate.value,)
        logger.warning("No privilege escalation tool found; running %s unelevated", self._primary_tool.name)
        return ()

    @property
    def helper_available(self) -> bool:
        return self._runner.which(self._helper_tool.name) is not None

    def _noconfirm(self, override: Optional[bool]) -> bool:
        return self._settings.noconfirm if override is None else override

    def plan_install(
        self,
        primary: Iterable[str],
        secondary: Iterable[str],
        *,
        noconfirm: Optional[bool] = None,
    ) -> list[Invocation]:
        return self._plan(Action.INSTALL, primary, secondary, self._noconfirm(noconfirm))

    def plan_remove(
        self,
        primary: Iterable[str],
        secondary: Iterable[str],
        *,
        noconfirm: Optional[bool] = None,
    ) -> list[Invocation]:
        return self._plan(Action.REMOVE, primary, secondary, self._noconfirm(noconfirm))

    def plan_upgrade(
        self, *, include_secondary: bool = False, noconfirm: Optional[bool] = None
    ) -> list[Invocation]:
        confirm_flag = self._noconfirm(noconfirm)
        plan = [
            Invocation(
                backend=self._primary_tool.name,
                action=Action.UPGRADE,
                argv=(*self.elevation, *self._primary_tool.upgrade(noconfirm=confirm_flag)),
            )
        ]
        if include_secondary:
            plan.append(
                Invocation(
                    backend=self._helper_tool.name,
                    action=Action.UPGRADE,
                    argv=self._helper_tool.upgrade_secondary(noconfirm=confirm_flag),
                )
            )
        return plan

    def _plan(
        self,
        action: Action,
        primary: Iterable[str],
        secondary: Iterable[str],
        noconfirm: bool,
    ) -> list[Invocation]:
        primary_names = tuple(sorted(normalize_names(primary)))
        secondary_names = tuple(sorted(normalize_names(secondary)))
        plan: list[Invocation] = []
        if primary_names:
            plan.append(
                Invocation(
                    backend=self._primary_tool.name,
                    action=action,
                    argv=(*self.elevation, *self._command(self._primary_tool, action, primary_names, noconfirm)),
                    packages=primary_names,
                )
            )
        if secondary_names:
            plan.append(
                Invocation(
                    backend=self._helper_tool.name,
                    action=action,
                    argv=self._command(self._helper_tool, action, secondary_names, noconfirm),
                    packages=secondary_names,
                )
            )
        return plan

    @staticmethod
    def _command(
        tool: BackendTool, action: Action, packages: tuple[str, ...], noconfirm: bool
    ) -> tuple[str, ...]:
        if action is Action.INSTALL:
            return tool.install(packages, noconfirm=noconfirm)
        return tool.remove(packages, noconfirm=noconfirm)

    def execute(
        self, plan: list[Invocation], *, announce: Optional[Announcer] = None
    ) -> ExitOutcome:
        outcome = ExitOutcome()
        for invocation in plan:
            if invocation.backend == self._helper_tool.name and not self.helper_available:
                detail = f"{HELPER_TOOL} is not installed"
                logger.error("Skipping %s: %s", invocation.describe(), detail)
                outcome.results.append(
                    InvocationResult(invocation, COMMAND_NOT_FOUND, detail)
                )
                continue
            if announce is not None:
                announce(invocation)
            returncode = self._runner.handoff(invocation.argv)
            logger.info(
                "%s %s finished with exit code %s",
                invocation.backend,
                invocation.action.value,
                returncode,
            )
            outcome.results.append(InvocationResult(invocation, returncode))
        return outcome

    def install(
        self,
        primary: Iterable[str],
        secondary: Iterable[str],
        *,
        noconfirm: Optional[bool] = None,
        announce: Optional[Announcer] = None,
    ) -> ExitOutcome:
        return self.execute(
            self.plan_install(primary, secondary, noconfirm=noconfirm), announce=announce
        )

    def remove(
        self,
        primary: Iterable[str],
        secondary: Iterable[str],
        *,
        noconfirm: Optional[bool] = None,
        announce: Optional[Announcer] = None,
    ) -> ExitOutcome:
        return self.execute(
            self.plan_remove(primary, secondary, noconfirm=noconfirm), announce=announce
        )


def invocation_errors(outcome: ExitOutcome) -> list[BackendInvocationFailed]:
    """Typed errors for every failed invocation, in execution order."""
    return [
        BackendInvocationFailed(
            result.invocation.backend,
            result.invocation.packages,
            result.returncode,
            action=result.invocation.action.value,
            detail=result.detail,
        )
        for result in outcome.failed
    ]
