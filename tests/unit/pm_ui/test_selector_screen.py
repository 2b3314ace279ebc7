import threading

import pytest
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from pm_common.config.settings import PreviewLayout, ThemeName
from pm_common.errors import PackageInfoUnavailable
from pm_core.models import Package, PackageOrigin
from pm_ui.tui.screens.selector_screen import SelectorScreen
from pm_ui.tui.system.components.preview import PreviewCache
from pm_ui.tui.system.components.selector_session import SelectorSession
from pm_ui.tui.system.models import Cancelled, SelectedSet, SelectorMode

pytestmark = pytest.mark.unit_ui

DOWN = "\x1b[B"
TAB = "\t"
ENTER = "\r"
CTRL_C = "\x03"
CTRL_L = "\x0c"
ESC = "\x1b"


def _candidates() -> list[Package]:
    return [
        Package("firefox", repository="extra"),
        Package("firefox-beta", origin=PackageOrigin.SECONDARY, repository="aur"),
        Package("chromium", repository="extra"),
    ]


def _run(keys: str, session: SelectorSession, preview: PreviewCache | None = None):
    with create_pipe_input() as pipe:
        pipe.send_text(keys)
        screen = SelectorScreen(
            session,
            mode=SelectorMode(title="Install packages"),
            preview=preview,
            theme_name=ThemeName.NORD,
            input=pipe,
            output=DummyOutput(),
        )
        return screen.run()


def test_type_toggle_confirm() -> None:
    session = SelectorSession(_candidates())
    outcome = _run("fire" + DOWN + TAB + ENTER, session)
    assert isinstance(outcome, SelectedSet)
    assert outcome.names == ("firefox-beta",)


def test_ctrl_c_cancels() -> None:
    session = SelectorSession(_candidates())
    outcome = _run(TAB + CTRL_C, session)
    assert isinstance(outcome, Cancelled)


def test_layout_flip_keeps_state() -> None:
    session = SelectorSession(_candidates(), layout=PreviewLayout.VERTICAL)
    outcome = _run("chr" + CTRL_L + ENTER, session)
    assert session.layout is PreviewLayout.HORIZONTAL
    assert outcome.names == ("chromium",)


def test_empty_list_enter_is_cancelled() -> None:
    outcome = _run(ENTER, SelectorSession([]))
    assert isinstance(outcome, Cancelled)


def test_preview_failure_does_not_end_session() -> None:
    def loader(package: Package) -> str:
        raise PackageInfoUnavailable(package.name, "yay", "boom")

    outcome = _run(DOWN + ENTER, SelectorSession(_candidates()), preview=PreviewCache(loader))
    assert outcome.names == ("firefox-beta",)


def test_keys_are_handled_while_preview_loads() -> None:
    release = threading.Event()
    loaded = threading.Event()
    def slow_loader(package: Package) -> str:
        release.wait(timeout=5)
        loaded.set()
        return f"Name : {package.name}\n"

    try:
        outcome = _run(
            DOWN + TAB + ENTER, SelectorSession(_candidates()), preview=PreviewCache(slow_loader)
        )
        assert not loaded.is_set()
    finally:
        release.set()
    assert outcome.names == ("firefox-beta",)


def test_escape_cancels_without_waiting_for_alt_keys() -> None:
    session = SelectorSession(_candidates())
    outcome = _run(TAB + ESC, session)
    assert isinstance(outcome, Cancelled)


def test_escape_timeouts_are_short() -> None:
    with create_pipe_input() as pipe:
        screen = SelectorScreen(
            SelectorSession(_candidates()),
            mode=SelectorMode(title="Install packages"),
            input=pipe,
            output=DummyOutput(),
        )
    assert screen.application.timeoutlen <= 0.1
    assert screen.application.ttimeoutlen <= 0.1


def test_pasted_text_extends_query() -> None:
    session = SelectorSession(_candidates())
    outcome = _run("\x1b[200~chro\nmium\x1b[201~" + ENTER, session)
    assert session.query == "chromium"
    assert outcome.names == ("chromium",)
