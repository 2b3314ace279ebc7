"""Selector session state: query, filtered view, cursor, selection and layout."""

from __future__ import annotations

from typing import Optional, Sequence

from pm_common.config.settings import PreviewLayout
from pm_core.models import Package
from pm_ui.tui.system.components.fuzzy import FuzzyMatch, rank
from pm_ui.tui.system.models import Cancelled, SelectedSet, SelectorOutcome


class SelectorSession:
    """Keyboard-driven state machine over an immutable candidate list.

    Selections are tracked by candidate index, so filtering only changes what
    is visible and never what is selected. The cursor indexes the filtered view
    and is clamped after every recompute.
    """

    def __init__(
        self,
        candidates: Sequence[Package],
        *,
        multi_select: bool = True,
        layout: PreviewLayout = PreviewLayout.VERTICAL,
        query: str = "",
    ) -> None:
        self.candidates: tuple[Package, ...] = tuple(candidates)
        self.multi_select = multi_select
        self.layout = layout
        self.cursor = 0
        self._query = ""
        self._matches: list[FuzzyMatch] = []
        self._selected: set[int] = set()
        self.outcome: Optional[SelectorOutcome] = None
        self.set_query(query)

    @property
    def query(self) -> str:
        return self._query

    @property
    def matches(self) -> list[FuzzyMatch]:
        return list(self._matches)

    @property
    def filtered(self) -> list[Package]:
        return [self.candidates[match.index] for match in self._matches]

    @property
    def current(self) -> Optional[Package]:
        """The preview target: the package at the cursor, if any."""
        if not self._matches:
            return None
        return self.candidates[self._matches[self.cursor].index]

    @property
    def selected(self) -> tuple[Package, ...]:
        return tuple(self.candidates[index] for index in sorted(self._selected))

    @property
    def selected_indices(self) -> frozenset[int]:
        return frozenset(self._selected)

    @property
    def finished(self) -> bool:
        return self.outcome is not None

    def is_selected(self, match: FuzzyMatch) -> bool:
        return match.index in self._selected

    def set_query(self, text: str) -> None:
        self._query = text
        self._matches = rank(text, self.candidates)
        self.cursor = self._clamp(self.cursor)

    def type_char(self, char: str) -> None:
        self.set_query(self._query + char)

    def type_text(self, text: str) -> None:
        """Append the printable part of pasted text in one recompute."""
        printable = "".join(char for char in text if char.isprintable())
        if printable:
            self.set_query(self._query + printable)

    def erase(self) -> None:
        if self._query:
            self.set_query(self._query[:-1])

    def move(self, delta: int) -> None:
        self.cursor = self._clamp(self.cursor + delta)

    def move_up(self) -> None:
        self.move(-1)

    def move_down(self) -> None:
        self.move(1)

    def toggle(self) -> None:
        if not self.multi_select or not self._matches:
            return
        index = self._matches[self.cursor].index
        if index in self._selected:
            self._selected.remove(index)
        else:
            self._selected.add(index)

    def confirm(self) -> SelectorOutcome:
        if self._selected:
            self.outcome = SelectedSet(self.selected)
        elif self._matches:
            self.outcome = SelectedSet((self.candidates[self._matches[self.cursor].index],))
        else:
            self.outcome = Cancelled("nothing to confirm")
        return self.outcome

    def cancel(self) -> SelectorOutcome:
        self.outcome = Cancelled()
        return self.outcome

    def toggle_layout(self) -> None:
        self.layout = self.layout.flipped()

    def set_layout(self, layout: PreviewLayout) -> None:
        self.layout = layout

    def _clamp(self, value: int) -> int:
        if not self._matches:
            return 0
        return max(0, min(value, len(self._matches) - 1))
