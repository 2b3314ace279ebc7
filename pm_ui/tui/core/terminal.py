"""Scoped ownership of the interactive terminal."""

from __future__ import annotations

import logging
import signal
from contextlib import AbstractContextManager
from types import FrameType
from typing import Any, Callable, Optional

from prompt_toolkit.application import Application
from prompt_toolkit.output import Output, create_output

from pm_common.errors import TerminalUnavailable
from pm_ui.tui.core.capabilities import supports_fullscreen_ui

logger = logging.getLogger(__name__)

RESTORE_SIGNALS: tuple[signal.Signals, ...] = tuple(
    sig
    for sig in (
        getattr(signal, "SIGTERM", None),
        getattr(signal, "SIGHUP", None),
        getattr(signal, "SIGQUIT", None),
    )
    if sig is not None
)


class TerminalSession(AbstractContextManager["TerminalSession"]):
    """Acquire the terminal for one full-screen application.

    Entering checks the device and installs termination-signal hooks; leaving
    restores the screen first and the previous handlers second. A termination
    signal received while inside stops the application and is re-raised as
    ``SystemExit(128 + signum)`` once the terminal is back to normal.
    """

    def __init__(
        self,
        *,
        check_tty: Callable[[], bool] = supports_fullscreen_ui,
        output_factory: Callable[[], Output] = create_output,
    ) -> None:
        self._check_tty = check_tty
        self._output_factory = output_factory
        self._previous: dict[int, Any] = {}
        self._app: Optional[Application[Any]] = None
        self.output: Optional[Output] = None
        self.received_signal: Optional[int] = None

    def __enter__(self) -> "TerminalSession":
        if not self._check_tty():
            raise TerminalUnavailable(
                "Interactive selection needs a terminal on stdin and stdout"
            )
        try:
            self.output = self._output_factory()
        except (OSError, ValueError) as exc:
            raise TerminalUnavailable(
                f"Cannot drive this terminal: {exc}", cause=exc
            ) from exc
        self._install_hooks()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is not None or self.received_signal is not None:
                self._restore_screen()
        finally:
            self._remove_hooks()
            self._app = None
        if self.received_signal is not None:
            raise SystemExit(128 + self.received_signal)

    def run(self, app: Application[Any]) -> Any:
        """Run ``app`` to completion while hooks are armed."""
        self._app = app
        if self.received_signal is not None:
            return None
        return app.run()

    def _install_hooks(self) -> None:
        for sig in RESTORE_SIGNALS:
            try:
                self._previous[sig] = signal.signal(sig, self._handle_signal)
            except ValueError:
                # Off the main thread; prompt_toolkit still restores on return.
                logger.debug("Cannot install %s handler outside the main thread", sig.name)

    def _remove_hooks(self) -> None:
        for sig, previous in self._previous.items():
            signal.signal(sig, previous)
        self._previous.clear()

    def _handle_signal(self, signum: int, frame: FrameType | None) -> None:
        _ = frame
        self.received_signal = signum
        app = self._app
        if app is None or not app.is_running:
            return
        loop = app.loop
        if loop is None:
            return
        loop.call_soon_threadsafe(_exit_app, app)

    def _restore_screen(self) -> None:
        output = self.output
        if output is None:
            return
        output.quit_alternate_screen()
        output.show_cursor()
        output.reset_attributes()
        output.flush()


def _exit_app(app: Application[Any]) -> None:
    try:
        app.exit(result=None)
    except Exception as exc:
        if "Return value already set" not in str(exc):
            raise
