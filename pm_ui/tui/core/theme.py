from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from pm_common.config.settings import ThemeName

RICH_ACCENT = "cyan"
RICH_ACCENT_BOLD = f"bold {RICH_ACCENT}"
RICH_BORDER_STYLE = RICH_ACCENT

ORIGIN_STYLES: dict[str, str] = {
    "primary": "green",
    "secondary": "magenta",
}

PRESENTER_TEMPLATES: dict[str, str] = {
    "info": "[cyan]ℹ[/cyan] {message}",
    "warning": "[yellow]⚠ {message}[/yellow]",
    "error": "[red]✖ {message}[/red]",
    "success": "[green]✔ {message}[/green]",
}


@dataclass(frozen=True)
class Palette:
    """Semantic colours for the selector screen."""

    primary: str
    secondary: str
    success: str
    error: str
    text: str
    text_dim: str
    border: str
    highlight_fg: str
    background: str
    preview_border: str
    help_section: str


PALETTES: dict[ThemeName, Palette] = {
    ThemeName.DEFAULT: Palette(
        primary="ansicyan",
        secondary="ansiyellow",
        success="ansigreen",
        error="ansired",
        text="",
        text_dim="ansibrightblack",
        border="ansiwhite",
        highlight_fg="ansiblack",
        background="",
        preview_border="ansigreen",
        help_section="ansiyellow",
    ),
    ThemeName.NORD: Palette(
        primary="#88c0d0",
        secondary="#ebcb8b",
        success="#a3be8c",
        error="#bf616a",
        text="#eceff4",
        text_dim="#4c566a",
        border="#4c566a",
        highlight_fg="#2e3440",
        background="#2e3440",
        preview_border="#a3be8c",
        help_section="#ebcb8b",
    ),
    ThemeName.DRACULA: Palette(
        primary="#bd93f9",
        secondary="#8be9fd",
        success="#50fa7b",
        error="#ff5555",
        text="#f8f8f2",
        text_dim="#6272a4",
        border="#44475a",
        highlight_fg="#282a36",
        background="#282a36",
        preview_border="#50fa7b",
        help_section="#f1fa8c",
    ),
    ThemeName.DARK: Palette(
        primary="#5fafff",
        secondary="#d7af5f",
        success="#87d787",
        error="#ff5f5f",
        text="#d0d0d0",
        text_dim="#585858",
        border="#444444",
        highlight_fg="#121212",
        background="#121212",
        preview_border="#87d787",
        help_section="#d7af5f",
    ),
    ThemeName.WHITE: Palette(
        primary="#005f87",
        secondary="#875f00",
        success="#005f00",
        error="#af0000",
        text="#1c1c1c",
        text_dim="#8a8a8a",
        border="#bcbcbc",
        highlight_fg="#ffffff",
        background="#ffffff",
        preview_border="#005f00",
        help_section="#875f00",
    ),
}


def palette_for(name: ThemeName) -> Palette:
    return PALETTES.get(name, PALETTES[ThemeName.DEFAULT])


def panel_title(text: str) -> str:
    return f"[{RICH_ACCENT_BOLD}]{text}[/{RICH_ACCENT_BOLD}]"


def origin_text(origin: str, label: str | None = None) -> str:
    text = label or origin
    color = ORIGIN_STYLES.get(origin)
    if not color:
        return text
    return f"[{color}]{text}[/{color}]"


def presenter_message(level: str, message: str) -> str:
    template = PRESENTER_TEMPLATES.get(level, "{message}")
    return template.format(message=message)


def prompt_toolkit_selector_style(name: ThemeName = ThemeName.DEFAULT) -> Mapping[str, str]:
    p = palette_for(name)
    base = f"bg:{p.background} fg:{p.text}" if p.background else ""
    return {
        "": base.strip(),
        "selected": f"bg:{p.primary} fg:{p.highlight_fg} bold",
        "checked": f"fg:{p.success} bold",
        "secondary": f"fg:{p.secondary}",
        "dim": f"fg:{p.text_dim}",
        "separator": f"fg:{p.border}",
        "frame.border": f"fg:{p.border}",
        "frame.label": f"fg:{p.primary} bold",
        "preview frame.border": f"fg:{p.preview_border}",
        "search": f"fg:{p.primary} bold",
        "status": f"fg:{p.text_dim}",
        "empty": f"fg:{p.error} italic",
        "help": f"fg:{p.text}",
        "help-section": f"fg:{p.help_section} bold",
        "title": "bold",
    }
