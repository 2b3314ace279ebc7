"""Package listings and detail text from whichever backend tool is installed."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from pm_common.errors import (
    BackendInvocationFailed,
    BackendUnavailable,
    PackageInfoUnavailable,
)
from pm_core.backends import HELPER_TOOL, PACMAN, PRIMARY_TOOL, YAY, BackendTool
from pm_core.models import Package, PackageOrigin, bare_name
from pm_core.parsing import parse_query_list, parse_search, parse_sync_list
from pm_core.process import CommandResult, ProcessRunner

logger = logging.getLogger(__name__)


class PackageDataProvider:
    """Enumerate, search and describe packages.

    The helper (yay) is a superset front-end over both repositories, so it is
    preferred when installed; without it only primary packages are visible.
    """

    def __init__(self, runner: Optional[ProcessRunner] = None) -> None:
        self._runner = runner or ProcessRunner()
        self.has_helper = self._runner.which(HELPER_TOOL) is not None
        self.has_primary = self._runner.which(PRIMARY_TOOL) is not None
        if not self.has_helper and not self.has_primary:
            raise BackendUnavailable(
                f"Neither {HELPER_TOOL} nor {PRIMARY_TOOL} was found in PATH",
                context={"tools": [HELPER_TOOL, PRIMARY_TOOL]},
            )
        self.tool: BackendTool = YAY if self.has_helper else PACMAN
        logger.debug("Using %s as listing backend", self.tool.name)

    @property
    def backend_name(self) -> str:
        return self.tool.name

    def list_available(self) -> list[Package]:
        result = self._run_listing(self.tool.sync_list(), "list available packages")
        return parse_sync_list(result.stdout)

    def list_installed(self) -> list[Package]:
        installed = self._run_listing(self.tool.query_list(), "list installed packages")
        foreign = self._run_listing(self.tool.foreign_list(), "list foreign packages")
        foreign_names = {pkg.name for pkg in parse_query_list(foreign.stdout)}
        packages = []
        for pkg in parse_query_list(installed.stdout):
            if pkg.name in foreign_names:
                pkg = Package(
                    name=pkg.name,
                    origin=PackageOrigin.SECONDARY,
                    version=pkg.version,
                    installed=True,
                )
            packages.append(pkg)
        return packages

    def search(self, query: str) -> list[Package]:
        result = self._run_listing(self.tool.search(query), f"search '{query}'")
        return parse_search(result.stdout)

    def get_info(self, name: str, *, installed: bool = False) -> str:
        package = bare_name(name)
        result = self._runner.capture(self.tool.info(package, installed=installed))
        if not result.ok or not result.stdout.strip():
            raise PackageInfoUnavailable(
                package, self.tool.name, result.stderr.strip() or f"exit code {result.returncode}"
            )
        return result.stdout

    def _run_listing(self, argv: Sequence[str], action: str) -> CommandResult:
        result = self._runner.capture(argv)
        if result.ok:
            return result
        # pacman signals "no matches" with exit 1 and nothing on stderr.
        if result.returncode == 1 and not result.stderr.strip():
            return CommandResult(argv=result.argv, returncode=0, stdout="")
        raise BackendInvocationFailed(
            self.tool.name,
            (),
            result.returncode,
            action=action,
            detail=result.stderr.strip(),
        )
