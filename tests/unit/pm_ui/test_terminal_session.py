import signal

import pytest
from prompt_toolkit.output import DummyOutput

from pm_common.errors import TerminalUnavailable
from pm_ui.tui.core.terminal import RESTORE_SIGNALS, TerminalSession

pytestmark = pytest.mark.unit_ui


def _handlers() -> dict:
    return {sig: signal.getsignal(sig) for sig in RESTORE_SIGNALS}


def test_not_a_tty_raises_and_changes_nothing() -> None:
    before = _handlers()
    with pytest.raises(TerminalUnavailable):
        with TerminalSession(check_tty=lambda: False, output_factory=DummyOutput):
            pass
    assert _handlers() == before


def test_output_creation_failure_is_terminal_unavailable() -> None:
    def broken_output():
        raise OSError("bad file descriptor")

    before = _handlers()
    with pytest.raises(TerminalUnavailable) as excinfo:
        with TerminalSession(check_tty=lambda: True, output_factory=broken_output):
            pass
    assert isinstance(excinfo.value.__cause__, OSError)
    assert _handlers() == before


def test_hooks_installed_inside_and_restored_after() -> None:
    before = _handlers()
    with TerminalSession(check_tty=lambda: True, output_factory=DummyOutput) as session:
        inside = _handlers()
        assert all(handler == session._handle_signal for handler in inside.values())
    assert _handlers() == before


def test_hooks_restored_when_body_raises() -> None:
    before = _handlers()
    with pytest.raises(RuntimeError):
        with TerminalSession(check_tty=lambda: True, output_factory=DummyOutput):
            raise RuntimeError("render failure")
    assert _handlers() == before


def test_signal_is_reraised_as_exit_after_restore() -> None:
    before = _handlers()
    with pytest.raises(SystemExit) as excinfo:
        with TerminalSession(check_tty=lambda: True, output_factory=DummyOutput):
            handler = signal.getsignal(signal.SIGTERM)
            handler(signal.SIGTERM, None)
    assert excinfo.value.code == 128 + signal.SIGTERM
    assert _handlers() == before
