"""Command-line forms of the supported package tools."""

from __future__ import annotations

from dataclasses import dataclass

PRIMARY_TOOL = "pacman"
HELPER_TOOL = "yay"


@dataclass(frozen=True)
class BackendTool:
    """A pacman-compatible executable and the operations we issue to it."""

    name: str
    covers_secondary: bool = False

    def sync_list(self) -> tuple[str, ...]:
        return (self.name, "-Sl")

    def query_list(self) -> tuple[str, ...]:
        return (self.name, "-Q")

    def foreign_list(self) -> tuple[str, ...]:
        return (self.name, "-Qm")

    def search(self, query: str) -> tuple[str, ...]:
        return (self.name, "-Ss", query)

    def info(self, package: str, *, installed: bool = False) -> tuple[str, ...]:
        return (self.name, "-Qi" if installed else "-Si", package)

    def probe(self, package: str) -> tuple[str, ...]:
        return (self.name, "-Si", "--", package)

    def install(self, packages: tuple[str, ...], *, noconfirm: bool = False) -> tuple[str, ...]:
        return (self.name, "-S", *_noconfirm(noconfirm), *packages)

    def remove(self, packages: tuple[str, ...], *, noconfirm: bool = False) -> tuple[str, ...]:
        return (self.name, "-Rns", *_noconfirm(noconfirm), *packages)

    def upgrade(self, *, noconfirm: bool = False) -> tuple[str, ...]:
        return (self.name, "-Syu", *_noconfirm(noconfirm))

    def upgrade_secondary(self, *, noconfirm: bool = False) -> tuple[str, ...]:
        return (self.name, "-Sua", *_noconfirm(noconfirm))


def _noconfirm(enabled: bool) -> tuple[str, ...]:
    return ("--noconfirm",) if enabled else ()


PACMAN = BackendTool(PRIMARY_TOOL)
YAY = BackendTool(HELPER_TOOL, covers_secondary=True)
