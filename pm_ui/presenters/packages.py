"""Presenters for package listings."""

from __future__ import annotations

from typing import Sequence

from rich.markup import escape

from pm_core.models import Package, PackageOrigin
from pm_core.parsing import parse_info_fields
from pm_ui.tui.core import theme
from pm_ui.tui.system.models import TableModel


def _origin_label(package: Package) -> str:
    if package.origin is PackageOrigin.SECONDARY:
        return theme.origin_text(package.origin.value, "aur")
    return theme.origin_text(package.origin.value, escape(package.repository or "repo"))


def build_search_table(query: str, packages: Sequence[Package]) -> TableModel:
    rows = [
        [
            _origin_label(package),
            escape(package.name),
            escape(package.version),
            "✓" if package.installed else "",
            escape(package.description),
        ]
        for package in packages
    ]
    return TableModel(
        title=f"Results for '{escape(query)}' ({len(rows)})",
        columns=["Repository", "Name", "Version", "Installed", "Description"],
        rows=rows,
    )


def build_installed_table(packages: Sequence[Package]) -> TableModel:
    rows = [
        [escape(package.name), escape(package.version), _origin_label(package)]
        for package in packages
    ]
    return TableModel(
        title=f"Installed packages ({len(rows)})",
        columns=["Name", "Version", "Source"],
        rows=rows,
    )


def build_info_table(name: str, info_text: str) -> TableModel:
    rows = [[escape(key), escape(value)] for key, value in parse_info_fields(info_text)]
    return TableModel(title=escape(name), columns=["Field", "Value"], rows=rows)
