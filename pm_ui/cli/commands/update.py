from __future__ import annotations

from typing import Optional

import typer

from pm_ui.cli.commands.common import NOCONFIRM_OPTION_HELP, run_guarded
from pm_ui.flows.operations import update_system
from pm_ui.wiring.dependencies import UIContext


def register_update_command(app: typer.Typer, ctx: UIContext) -> None:
    """Register the full system upgrade command."""

    def update(
        aur: bool = typer.Option(False, "--aur", help="Also upgrade AUR packages with yay -Sua."),
        noconfirm: Optional[bool] = typer.Option(
            None, "--noconfirm/--confirm", help=NOCONFIRM_OPTION_HELP
        ),
    ) -> None:
        """Upgrade the whole system (pacman -Syu)."""
        run_guarded(ctx, lambda: update_system(ctx, include_secondary=aur, noconfirm=noconfirm))

    app.command("update")(update)
    app.command("u", hidden=True)(update)
