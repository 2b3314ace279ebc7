from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import ContextManager, Optional, Sequence

from pm_core.models import Package
from pm_ui.tui.system.components.presenter_base import PresenterBase, PresenterSink
from pm_ui.tui.system.models import Cancelled, SelectorMode, SelectorOutcome, TableModel
from pm_ui.tui.system.protocols import UI, Form, Progress, Selector, TablePresenter


@dataclass
class RecordedTable:
    model: TableModel


@dataclass
class RecordedSelection:
    candidates: tuple[Package, ...]
    mode: SelectorMode


@dataclass
class HeadlessUI(UI):
    recorded_tables: list[RecordedTable] = field(default_factory=list)
    recorded_messages: list[str] = field(default_factory=list)
    recorded_selections: list[RecordedSelection] = field(default_factory=list)

    # Canned selector answer; None behaves like the user pressing Esc.
    next_selection: Optional[SelectorOutcome] = None
    next_confirm_response: bool = True

    def __post_init__(self):
        self.selector = _HeadlessSelector(self)
        self.tables = _HeadlessTablePresenter(self)
        self.present = _HeadlessPresenter(self)
        self.progress = _HeadlessProgress(self)
        self.form = _HeadlessForm(self)


class _HeadlessSelector(Selector):
    def __init__(self, ui: HeadlessUI):
        self._ui = ui

    def run(self, candidates: Sequence[Package], mode: SelectorMode) -> SelectorOutcome:
        self._ui.recorded_selections.append(RecordedSelection(tuple(candidates), mode))
        if self._ui.next_selection is None:
            return Cancelled()
        return self._ui.next_selection


class _HeadlessTablePresenter(TablePresenter):
    def __init__(self, ui: HeadlessUI):
        self._ui = ui

    def show(self, table: TableModel) -> None:
        self._ui.recorded_tables.append(RecordedTable(table))


class _HeadlessPresenterSink(PresenterSink):
    def __init__(self, ui: HeadlessUI) -> None:
        self._ui = ui

    def emit(self, level: str, message: str) -> None:
        self._ui.recorded_messages.append(f"{level.upper()}: {message}")

    def emit_panel(
        self,
        message: str,
        title: str | None,
        border_style: str | None,
    ) -> None:
        self._ui.recorded_messages.append(f"PANEL: {title} - {message}")

    def emit_rule(self, title: str) -> None:
        self._ui.recorded_messages.append(f"RULE: {title}")


class _HeadlessPresenter(PresenterBase):
    def __init__(self, ui: HeadlessUI) -> None:
        super().__init__(_HeadlessPresenterSink(ui))


class _HeadlessForm(Form):
    def __init__(self, ui: HeadlessUI):
        self._ui = ui

    def confirm(self, prompt: str, default: bool = True) -> bool:
        self._ui.recorded_messages.append(f"CONFIRM: {prompt}")
        return self._ui.next_confirm_response


class _HeadlessProgress(Progress):
    def __init__(self, ui: HeadlessUI):
        self._ui = ui

    def status(self, message: str) -> ContextManager[None]:
        self._ui.recorded_messages.append(f"STATUS: {message}")
        return nullcontext()
