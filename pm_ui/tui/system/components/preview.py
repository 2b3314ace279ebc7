"""Rich renderables for the selector preview pane."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

from pm_common.errors import PackageInfoUnavailable
from pm_core.models import Package, PackageOrigin
from pm_core.parsing import parse_info_fields
from pm_ui.tui.core import theme

logger = logging.getLogger(__name__)

InfoLoader = Callable[[Package], str]

_HIGHLIGHT_KEYS = ("Name", "Version", "Description", "Repository", "URL")


def render_info(package: Package, info_text: str) -> RenderableType:
    """Key/value grid for ``-Si``/``-Qi`` output, most useful fields first."""
    fields = parse_info_fields(info_text)
    if not fields:
        return Text(info_text.strip() or package.name)

    ordered = sorted(
        fields,
        key=lambda item: (
            _HIGHLIGHT_KEYS.index(item[0]) if item[0] in _HIGHLIGHT_KEYS else len(_HIGHLIGHT_KEYS)
        ),
    )
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style=theme.RICH_ACCENT_BOLD, no_wrap=True)
    grid.add_column(overflow="fold")
    for key, value in ordered:
        grid.add_row(key, value)
    return grid


def render_summary(package: Package) -> RenderableType:
    """Fallback preview built only from listing data."""
    lines = [Text(package.name, style="bold")]
    origin = "AUR" if package.origin is PackageOrigin.SECONDARY else package.repository or "repo"
    status = "installed" if package.installed else "not installed"
    lines.append(Text(f"{origin} · {package.version or '?'} · {status}", style="dim"))
    if package.description:
        lines.append(Text(""))
        lines.append(Text(package.description))
    return Group(*lines)


class PreviewCache:
    """Fetch detail text once per package and keep the rendered result."""

    def __init__(self, loader: Optional[InfoLoader] = None) -> None:
        self._loader = loader
        self._cache: dict[tuple[str, str], RenderableType] = {}

    @property
    def has_loader(self) -> bool:
        return self._loader is not None

    def peek(self, package: Package) -> Optional[RenderableType]:
        """The cached preview, without loading."""
        return self._cache.get((package.repository, package.name))

    def get(self, package: Package) -> RenderableType:
        key = (package.repository, package.name)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        rendered = self._render(package)
        self._cache[key] = rendered
        return rendered

    def _render(self, package: Package) -> RenderableType:
        if self._loader is None:
            return render_summary(package)
        try:
            info_text = self._loader(package)
        except PackageInfoUnavailable as exc:
            logger.debug("Preview unavailable for %s: %s", package.name, exc)
            return Group(render_summary(package), Text(""), Text(str(exc), style="red"))
        return render_info(package, info_text)
