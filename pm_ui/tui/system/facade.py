from typing import Optional, Sequence

from rich.console import Console

from pm_common.config.settings import Settings
from pm_ui.tui.system.components.form import RichForm
from pm_ui.tui.system.components.presenter import RichPresenter
from pm_ui.tui.system.components.progress import RichProgress
from pm_ui.tui.system.components.selector import FuzzySelector, InfoSource
from pm_ui.tui.system.components.table import RichTablePresenter
from pm_ui.tui.system.models import TableModel
from pm_ui.tui.system.protocols import UI, Form, Presenter, Progress, Selector, TablePresenter


class TUI(UI):
    def __init__(
        self,
        console: Console | None = None,
        *,
        settings: Optional[Settings] = None,
        info: Optional[InfoSource] = None,
    ):
        self._console = console or Console()
        self.selector: Selector = FuzzySelector(settings=settings, info=info)
        self.tables: TablePresenter = RichTablePresenter(self._console)
        self.present: Presenter = RichPresenter(self._console)
        self.progress: Progress = RichProgress(self._console)
        self.form: Form = RichForm(self._console)

    def show_table(self, title: str, columns: Sequence[str], rows: list[Sequence[str]]) -> None:
        model = TableModel(title=title, columns=list(columns), rows=[list(r) for r in rows])
        self.tables.show(model)
