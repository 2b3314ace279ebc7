from __future__ import annotations

from typing import Optional

import typer

from pm_ui.cli.commands.common import NOCONFIRM_OPTION_HELP, run_guarded
from pm_ui.flows.operations import list_packages, search_packages
from pm_ui.wiring.dependencies import UIContext


def register_query_commands(app: typer.Typer, ctx: UIContext) -> None:
    """Register search and list (read-only unless a selection is confirmed)."""

    def search(
        query: str = typer.Argument(..., help="Search term (name or description)."),
        interactive: bool = typer.Option(
            False, "--interactive", "-i", help="Pick results in the selector and install them."
        ),
        noconfirm: Optional[bool] = typer.Option(
            None, "--noconfirm/--confirm", help=NOCONFIRM_OPTION_HELP
        ),
    ) -> None:
        """Search the repositories (and the AUR when yay is installed)."""
        run_guarded(
            ctx,
            lambda: search_packages(ctx, query, interactive=interactive, noconfirm=noconfirm),
        )

    def list_installed(
        interactive: bool = typer.Option(
            False, "--interactive", "-i", help="Browse in the selector and show package details."
        ),
    ) -> None:
        """List installed packages."""
        run_guarded(ctx, lambda: list_packages(ctx, interactive=interactive))

    app.command("search")(search)
    app.command("s", hidden=True)(search)
    app.command("list")(list_installed)
    app.command("l", hidden=True)(list_installed)
