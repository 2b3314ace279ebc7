"""Domain types shared by the provider, router, dispatcher and selector."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Sequence

SECONDARY_REPOSITORY = "aur"


class PackageOrigin(str, Enum):
    """Which repository (and so which tool and privilege path) owns a package."""

    PRIMARY = "primary"
    SECONDARY = "secondary"

    @classmethod
    def from_repository(cls, repository: str) -> "PackageOrigin":
        if repository.strip().lower() == SECONDARY_REPOSITORY:
            return cls.SECONDARY
        return cls.PRIMARY


@dataclass(frozen=True)
class Package:
    name: str
    origin: PackageOrigin = PackageOrigin.PRIMARY
    description: str = ""
    version: str = ""
    repository: str = ""
    installed: bool = False

    @property
    def qualified_name(self) -> str:
        return f"{self.repository}/{self.name}" if self.repository else self.name


CandidateList = Sequence[Package]


def bare_name(name: str) -> str:
    """Strip a ``repo/`` prefix (``extra/firefox`` -> ``firefox``)."""
    return name.rsplit("/", 1)[-1].strip()


def normalize_names(names: Iterable[str]) -> frozenset[str]:
    return frozenset(n for n in (bare_name(name) for name in names) if n)


@dataclass(frozen=True)
class Classification:
    """Disjoint partition of requested names by repository."""

    primary: frozenset[str] = frozenset()
    secondary: frozenset[str] = frozenset()

    @property
    def all(self) -> frozenset[str]:
        return self.primary | self.secondary

    def is_empty(self) -> bool:
        return not self.primary and not self.secondary


class Action(str, Enum):
    INSTALL = "install"
    REMOVE = "remove"
    UPGRADE = "upgrade"


@dataclass(frozen=True)
class Invocation:
    """One external process the dispatcher will hand the terminal to."""

    backend: str
    action: Action
    argv: tuple[str, ...]
    packages: tuple[str, ...] = ()

    def describe(self) -> str:
        return " ".join(self.argv)


@dataclass(frozen=True)
class InvocationResult:
    invocation: Invocation
    returncode: int
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class ExitOutcome:
    """Aggregated result of every backend invocation for one operation."""

    results: list[InvocationResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(result.ok for result in self.results)

    @property
    def exit_code(self) -> int:
        """Worst sub-invocation exit code; 0 only when every process succeeded."""
        codes = [result.returncode for result in self.results if result.returncode != 0]
        return max(codes) if codes else 0

    @property
    def failed(self) -> list[InvocationResult]:
        return [result for result in self.results if not result.ok]
