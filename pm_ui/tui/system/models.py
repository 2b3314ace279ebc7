from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from pm_common.config.settings import PreviewLayout
from pm_core.models import Package


@dataclass
class TableModel:
    title: str
    columns: list[str]
    rows: list[list[str]]


@dataclass(frozen=True)
class SelectorMode:
    """How a selector session is presented."""

    title: str
    multi_select: bool = True
    installed: bool = False  # preview from the local database instead of sync
    query_hint: str = ""
    layout: Optional[PreviewLayout] = None  # None uses the configured layout


@dataclass(frozen=True)
class SelectedSet:
    packages: tuple[Package, ...]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(sorted({package.name for package in self.packages}))


@dataclass(frozen=True)
class Cancelled:
    reason: str = "cancelled"


SelectorOutcome = Union[SelectedSet, Cancelled]
