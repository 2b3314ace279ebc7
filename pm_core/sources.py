"""Package source capability checks used by the router."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from pm_core.backends import PACMAN, BackendTool
from pm_core.process import ProcessRunner

logger = logging.getLogger(__name__)

_NOT_FOUND_MARKER = "was not found"


class Presence(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SourceProbe:
    package: str
    presence: Presence
    detail: str = ""


class PackageSource(Protocol):
    """A repository that can answer whether it carries a package."""

    @property
    def name(self) -> str: ...

    def exists(self, package: str) -> SourceProbe: ...


class SyncDatabaseSource:
    """The primary repositories, queried through ``pacman -Si``.

    Exit status 0 means the sync database carries the package. Status 1 together
    with pacman's "was not found" diagnostic means it does not. Anything else
    (missing binary, lock errors, a signal) is reported as UNKNOWN so the caller
    never guesses a privilege path.
    """

    def __init__(self, runner: ProcessRunner, tool: BackendTool = PACMAN) -> None:
        self._runner = runner
        self._tool = tool

    @property
    def name(self) -> str:
        return self._tool.name

    def exists(self, package: str) -> SourceProbe:
        result = self._runner.capture(self._tool.probe(package))
        if result.ok:
            return SourceProbe(package, Presence.FOUND)
        stderr = result.stderr.strip()
        if result.returncode == 1 and _NOT_FOUND_MARKER in stderr:
            return SourceProbe(package, Presence.NOT_FOUND, stderr)
        logger.debug(
            "Probe for %s via %s failed: rc=%s stderr=%s",
            package,
            self.name,
            result.returncode,
            stderr,
        )
        detail = stderr or f"exit code {result.returncode}"
        return SourceProbe(package, Presence.UNKNOWN, detail)
