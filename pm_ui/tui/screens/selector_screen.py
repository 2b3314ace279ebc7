from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional

from prompt_toolkit.application import Application
from prompt_toolkit.filters import Condition
from prompt_toolkit.formatted_text import ANSI
from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.containers import (
    AnyContainer,
    ConditionalContainer,
    DynamicContainer,
    Float,
    FloatContainer,
)
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.output import Output
from prompt_toolkit.styles import Style
from prompt_toolkit.widgets import Frame
from rich.console import Console, RenderableType
from rich.text import Text

from pm_common.config.settings import PreviewLayout, ThemeName
from pm_core.models import Package, PackageOrigin
from pm_ui.tui.core import theme
from pm_ui.tui.system.components.preview import PreviewCache
from pm_ui.tui.system.components.selector_session import SelectorSession
from pm_ui.tui.system.models import SelectorMode, SelectorOutcome

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    ("NAVIGATION", (("Up / Ctrl-P", "Move up"), ("Down / Ctrl-N", "Move down"))),
    (
        "SELECTION",
        (
            ("Tab", "Toggle the package under the cursor"),
            ("Enter", "Confirm (the cursor package if nothing is toggled)"),
            ("Esc / Ctrl-C", "Cancel without changes"),
        ),
    ),
    ("SEARCH", (("Type", "Fuzzy filter by name or description"), ("Backspace", "Delete last character"))),
    (
        "LAYOUT",
        (
            ("Alt-O", "Preview below the list"),
            ("Alt-V", "Preview beside the list"),
            ("Ctrl-L", "Flip the preview position"),
            ("PgUp / PgDn", "Scroll the preview"),
        ),
    ),
    ("HELP", (("?", "Show or hide this help"),)),
)

PREVIEW_SCROLL_STEP = 10
PREVIEW_PLACEHOLDER = "Loading preview..."
# Esc shares a prefix with the Alt bindings; keep the wait for a follow-up key short.
ESCAPE_TIMEOUT = 0.05
PREVIEW_WORKERS = 2
MAX_RENDERED_ROWS = 400


class SelectorScreen:
    """Full-screen search + list + preview over a ``SelectorSession``."""

    def __init__(
        self,
        session: SelectorSession,
        *,
        mode: SelectorMode,
        preview: Optional[PreviewCache] = None,
        theme_name: ThemeName = ThemeName.DEFAULT,
        input: Optional[Input] = None,
        output: Optional[Output] = None,
    ) -> None:
        self.session = session
        self._mode = mode
        self._preview = preview or PreviewCache()
        self._console = Console(force_terminal=True, color_system="truecolor")
        self._show_help = False
        self._preview_offset = 0
        self._preview_target: Any = None
        self._preview_pending: set[tuple[str, str]] = set()
        self._preview_pool = ThreadPoolExecutor(
            max_workers=PREVIEW_WORKERS, thread_name_prefix="pmgr-preview"
        )

        self.search_control = FormattedTextControl(self._render_search, focusable=True, show_cursor=True)
        self.list_control = FormattedTextControl(self._render_list)
        self.preview_control = FormattedTextControl(self._render_preview)
        self.status_control = FormattedTextControl(self._render_status)
        self.help_control = FormattedTextControl(self._render_help)

        def body() -> AnyContainer:
            list_window = Window(self.list_control, width=Dimension(weight=1))
            preview_window = Frame(
                Window(self.preview_control, wrap_lines=True),
                title="Preview",
                style="class:preview",
            )
            if self.session.layout is PreviewLayout.HORIZONTAL:
                return HSplit(
                    [
                        list_window,
                        Window(height=1, char="─", style="class:separator"),
                        preview_window,
                    ]
                )
            return VSplit(
                [
                    list_window,
                    Window(width=1, char="│", style="class:separator"),
                    preview_window,
                ],
                padding=1,
            )

        inner = HSplit(
            [
                Window(self.search_control, height=1, style="class:search"),
                Window(height=1, char="─", style="class:separator"),
                DynamicContainer(body),
                Window(self.status_control, height=1, style="class:status"),
            ]
        )
        help_float = Float(
            ConditionalContainer(
                Frame(Window(self.help_control), title="Keyboard shortcuts", style="class:help"),
                filter=Condition(lambda: self._show_help),
            )
        )
        root = FloatContainer(Frame(inner, title=mode.title), floats=[help_float])

        self._app: Application[SelectorOutcome] = Application(
            layout=Layout(root, focused_element=self.search_control),
            key_bindings=self._bindings(),
            style=Style.from_dict(dict(theme.prompt_toolkit_selector_style(theme_name))),
            full_screen=True,
            input=input,
            output=output,
        )
        self._app.ttimeoutlen = ESCAPE_TIMEOUT
        self._app.timeoutlen = ESCAPE_TIMEOUT

    @property
    def application(self) -> Application[SelectorOutcome]:
        return self._app

    def run(self) -> Optional[SelectorOutcome]:
        try:
            return self._app.run()
        finally:
            self.close()

    def close(self) -> None:
        """Drop queued preview loads; a load already running finishes in its thread."""
        self._preview_pool.shutdown(wait=False, cancel_futures=True)

    def _render_search(self) -> list[tuple[str, str]]:
        return [("class:search", "Search: "), ("", self.session.query)]

    def _render_list(self) -> list[tuple[str, str]]:
        session = self.session
        if not session.candidates:
            return [("class:empty", " No items\n")]
        matches = session.matches
        if not matches:
            return [("class:empty", f" No packages match '{session.query}'\n")]
        # Only a window around the cursor is rendered; the Window scrolls to it.
        start = max(0, session.cursor - MAX_RENDERED_ROWS // 2)
        fragments: list[tuple[str, str]] = []
        for row, match in enumerate(matches[start:start + MAX_RENDERED_ROWS], start=start):
            package = session.candidates[match.index]
            at_cursor = row == session.cursor
            if at_cursor:
                fragments.append(("[SetCursorPosition]", ""))
            checked = session.is_selected(match)
            marker = "[x]" if checked else "[ ]"
            if not session.multi_select:
                marker = " > " if at_cursor else "   "
            style = ""
            if at_cursor:
                style = "class:selected"
            elif checked:
                style = "class:checked"
            elif package.origin is PackageOrigin.SECONDARY:
                style = "class:secondary"
            label = package.name
            if package.repository:
                label = f"{package.repository}/{package.name}"
            suffix = " [installed]" if package.installed and not self._mode.installed else ""
            fragments.append((style, f" {marker} {label} {package.version}{suffix}\n"))
        return fragments

    def _render_preview(self) -> ANSI:
        package = self.session.current
        if package is None:
            return ANSI("")
        if package is not self._preview_target:
            self._preview_target = package
            self._preview_offset = 0
        renderable = self._preview_renderable(package)
        with self._console.capture() as cap:
            self._console.print(renderable)
        lines = cap.get().splitlines()
        self._preview_offset = max(0, min(self._preview_offset, len(lines) - 1))
        return ANSI("\n".join(lines[self._preview_offset:]))

    def _preview_renderable(self, package: Package) -> RenderableType:
        """Cached preview, or a placeholder while the loader runs off the event loop."""
        cached = self._preview.peek(package)
        if cached is not None:
            return cached
        if not self._preview.has_loader:
            return self._preview.get(package)
        key = (package.repository, package.name)
        if key not in self._preview_pending:
            self._preview_pending.add(key)
            self._app.create_background_task(self._load_preview(package, key))
        return Text(PREVIEW_PLACEHOLDER, style="dim")

    async def _load_preview(self, package: Package, key: tuple[str, str]) -> None:
        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(self._preview_pool, self._preview.get, package)
        finally:
            self._preview_pending.discard(key)
        self._app.invalidate()

    def _render_status(self) -> list[tuple[str, str]]:
        session = self.session
        layout = "below" if session.layout is PreviewLayout.HORIZONTAL else "beside"
        text = (
            f" {len(session.matches)}/{len(session.candidates)}"
            f"  selected: {len(session.selected_indices)}"
            f"  preview: {layout}  ? help"
        )
        return [("class:status", text)]

    def _render_help(self) -> list[tuple[str, str]]:
        fragments: list[tuple[str, str]] = []
        for section, entries in HELP_SECTIONS:
            fragments.append(("class:help-section", f"{section}\n"))
            for keys, action in entries:
                fragments.append(("class:help", f"  {keys:<16}{action}\n"))
            fragments.append(("", "\n"))
        return fragments

    def _bindings(self) -> KeyBindings:
        kb = KeyBindings()
        session = self.session

        @kb.add("up")
        @kb.add("c-p")
        def _(event: Any) -> None:
            session.move_up()

        @kb.add("down")
        @kb.add("c-n")
        def _(event: Any) -> None:
            session.move_down()

        @kb.add("tab")
        def _(event: Any) -> None:
            session.toggle()

        @kb.add("enter")
        def _(event: Any) -> None:
            if self._show_help:
                self._show_help = False
                return
            self._exit(session.confirm())

        @kb.add("escape")
        def _(event: Any) -> None:
            if self._show_help:
                self._show_help = False
                return
            self._exit(session.cancel())

        @kb.add("c-c")
        def _(event: Any) -> None:
            self._exit(session.cancel())

        @kb.add("backspace")
        def _(event: Any) -> None:
            session.erase()

        @kb.add("escape", "o")
        def _(event: Any) -> None:
            session.set_layout(PreviewLayout.HORIZONTAL)

        @kb.add("escape", "v")
        def _(event: Any) -> None:
            session.set_layout(PreviewLayout.VERTICAL)

        @kb.add("c-l")
        def _(event: Any) -> None:
            session.toggle_layout()

        @kb.add("pageup")
        def _(event: Any) -> None:
            self._preview_offset = max(0, self._preview_offset - PREVIEW_SCROLL_STEP)

        @kb.add("pagedown")
        def _(event: Any) -> None:
            self._preview_offset += PREVIEW_SCROLL_STEP

        @kb.add("?")
        def _(event: Any) -> None:
            self._show_help = not self._show_help

        @kb.add(Keys.BracketedPaste)
        def _(event: Any) -> None:
            session.type_text(event.data)

        @kb.add(Keys.Any)
        def _(event: Any) -> None:
            data = event.data
            if len(data) == 1 and data.isprintable():
                session.type_char(data)

        return kb

    def _exit(self, result: SelectorOutcome) -> None:
        try:
            self._app.exit(result=result)
        except Exception as exc:  # pragma: no cover
            if "Return value already set" not in str(exc):
                raise
