from __future__ import annotations

import shutil

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from pm_ui.tui.system.models import TableModel

MIN_COLUMN_WIDTH = 4
# Columns whose text is free-form and should absorb leftover width.
FLEX_COLUMNS = frozenset({"description"})


def _console_width(console: Console) -> int:
    width = console.size.width
    if width > 0:
        return width
    return shutil.get_terminal_size(fallback=(100, 24)).columns


def _cell_width(value: str) -> int:
    return max((Text.from_markup(line).cell_len for line in str(value).splitlines()), default=0)


def build_rich_table(
    model: TableModel,
    *,
    console: Console,
    show_lines: bool = False,
    border_style: str = "cyan",
    header_style: str = "bold cyan",
    title_style: str = "bold cyan",
    box_style: box.Box = box.ROUNDED,
) -> Table:
    """
    Build a Rich Table from a TableModel that fits the current terminal width.

    Fixed columns (name, version, ...) keep their natural width; a description
    column takes what is left and is truncated with an ellipsis.
    """
    max_table_width = max(60, _console_width(console) - 2)

    rich_table = Table(
        title=model.title,
        show_lines=show_lines,
        expand=False,
        box=box_style,
        border_style=border_style,
        header_style=header_style,
        title_style=title_style,
    )

    natural: list[int] = []
    for idx, column in enumerate(model.columns):
        width = _cell_width(column)
        for row in model.rows:
            if idx < len(row):
                width = max(width, _cell_width(row[idx]))
        natural.append(max(MIN_COLUMN_WIDTH, width))

    overhead = 4 + (len(model.columns) - 1) * 3
    fixed = sum(
        width
        for column, width in zip(model.columns, natural)
        if column.lower() not in FLEX_COLUMNS
    )
    flex_budget = max(MIN_COLUMN_WIDTH * 2, max_table_width - overhead - fixed)

    for column, width in zip(model.columns, natural):
        flexible = column.lower() in FLEX_COLUMNS
        rich_table.add_column(
            column,
            overflow="ellipsis",
            no_wrap=True,
            min_width=MIN_COLUMN_WIDTH,
            max_width=min(width, flex_budget) if flexible else width,
        )
    for row in model.rows:
        rich_table.add_row(*row)
    return rich_table
