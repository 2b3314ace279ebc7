from typing import ContextManager, Protocol, Sequence

from pm_core.models import Package
from pm_ui.tui.system.models import SelectorMode, SelectorOutcome, TableModel


class TablePresenter(Protocol):
    def show(self, table: TableModel) -> None: ...


class Selector(Protocol):
    def run(self, candidates: Sequence[Package], mode: SelectorMode) -> SelectorOutcome: ...


class PresenterSink(Protocol):
    def emit(self, level: str, message: str) -> None: ...
    def emit_panel(self, message: str, title: str | None, border_style: str | None) -> None: ...
    def emit_rule(self, title: str) -> None: ...


class Presenter:
    def __init__(self, sink: PresenterSink) -> None:
        self._sink = sink

    def info(self, message: str) -> None:
        self._sink.emit("info", message)

    def warning(self, message: str) -> None:
        self._sink.emit("warning", message)

    def error(self, message: str) -> None:
        self._sink.emit("error", message)

    def success(self, message: str) -> None:
        self._sink.emit("success", message)

    def panel(self, message: str, title: str | None = None, border_style: str | None = None) -> None:
        self._sink.emit_panel(message, title, border_style)

    def rule(self, title: str) -> None:
        self._sink.emit_rule(title)


class Form(Protocol):
    def confirm(self, prompt: str, default: bool = True) -> bool: ...


class Progress(Protocol):
    def status(self, message: str) -> ContextManager[None]: ...


class UI(Protocol):
    selector: Selector
    tables: TablePresenter
    present: Presenter
    progress: Progress
    form: Form
