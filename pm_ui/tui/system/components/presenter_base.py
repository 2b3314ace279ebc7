from __future__ import annotations

from pm_ui.tui.system.protocols import Presenter, PresenterSink


class PresenterBase(Presenter):
    """Presenter that forwards every level to a sink."""

    def __init__(self, sink: PresenterSink) -> None:
        super().__init__(sink)


__all__ = ["PresenterBase", "PresenterSink"]
