from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from pm_common.config.settings import Settings
from pm_core.models import Package
from pm_ui.tui.core.terminal import TerminalSession
from pm_ui.tui.screens.selector_screen import SelectorScreen
from pm_ui.tui.system.components.preview import InfoLoader, PreviewCache
from pm_ui.tui.system.components.selector_session import SelectorSession
from pm_ui.tui.system.models import Cancelled, SelectorMode, SelectorOutcome
from pm_ui.tui.system.protocols import Selector

logger = logging.getLogger(__name__)

InfoSource = Callable[[str, bool], str]


class FuzzySelector(Selector):
    """Interactive fuzzy selector backed by prompt_toolkit."""

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        info: Optional[InfoSource] = None,
        terminal_factory: Callable[[], TerminalSession] = TerminalSession,
    ) -> None:
        self._settings = settings or Settings()
        self._info = info
        self._terminal_factory = terminal_factory

    def _loader(self, mode: SelectorMode) -> Optional[InfoLoader]:
        info = self._info
        if info is None:
            return None
        return lambda package: info(package.name, mode.installed)

    def run(self, candidates: Sequence[Package], mode: SelectorMode) -> SelectorOutcome:
        session = SelectorSession(
            candidates,
            multi_select=mode.multi_select,
            layout=mode.layout or self._settings.layout,
            query=mode.query_hint,
        )
        with self._terminal_factory() as terminal:
            screen = SelectorScreen(
                session,
                mode=mode,
                preview=PreviewCache(self._loader(mode)),
                theme_name=self._settings.theme,
                output=terminal.output,
            )
            try:
                outcome = terminal.run(screen.application)
            finally:
                screen.close()
        logger.debug("Selector '%s' finished: %s", mode.title, outcome)
        if outcome is None:
            return Cancelled("interrupted")
        return outcome
