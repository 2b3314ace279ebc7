from __future__ import annotations

from typing import List, Optional

import typer

from pm_ui.cli.commands.common import (
    INTERACTIVE_OPTION_HELP,
    NOCONFIRM_OPTION_HELP,
    run_guarded,
)
from pm_ui.flows.operations import install_packages, remove_packages
from pm_ui.wiring.dependencies import UIContext


def register_package_commands(app: typer.Typer, ctx: UIContext) -> None:
    """Register install/remove (and their one-letter aliases) on the given Typer app."""

    def install(
        names: Optional[List[str]] = typer.Argument(
            None, help="Packages to install; omit to pick interactively."
        ),
        interactive: Optional[bool] = typer.Option(
            None, "--interactive/--no-interactive", "-i/-y", help=INTERACTIVE_OPTION_HELP
        ),
        noconfirm: Optional[bool] = typer.Option(
            None, "--noconfirm/--confirm", help=NOCONFIRM_OPTION_HELP
        ),
    ) -> None:
        """Install packages from the official repositories or the AUR."""
        run_guarded(
            ctx,
            lambda: install_packages(
                ctx, names or [], interactive=interactive, noconfirm=noconfirm
            ),
        )

    def remove(
        names: Optional[List[str]] = typer.Argument(
            None, help="Packages to remove; omit to pick interactively."
        ),
        interactive: Optional[bool] = typer.Option(
            None, "--interactive/--no-interactive", "-i/-y", help=INTERACTIVE_OPTION_HELP
        ),
        noconfirm: Optional[bool] = typer.Option(
            None, "--noconfirm/--confirm", help=NOCONFIRM_OPTION_HELP
        ),
    ) -> None:
        """Remove installed packages together with unneeded dependencies."""
        run_guarded(
            ctx,
            lambda: remove_packages(
                ctx, names or [], interactive=interactive, noconfirm=noconfirm
            ),
        )

    app.command("install")(install)
    app.command("i", hidden=True)(install)
    app.command("remove")(remove)
    app.command("r", hidden=True)(remove)
