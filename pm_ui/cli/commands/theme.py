from __future__ import annotations

from typing import Optional

import typer

from pm_common.config.settings import PreviewLayout, ThemeName
from pm_ui.tui.system.models import TableModel
from pm_ui.wiring.dependencies import UIContext


def register_theme_command(app: typer.Typer, ctx: UIContext) -> None:
    """Register the command that shows or persists display settings."""

    @app.command("theme")
    def theme(
        name: Optional[ThemeName] = typer.Argument(None, help="Theme to save as default."),
        layout: Optional[PreviewLayout] = typer.Option(
            None, "--layout", help="Default preview position (vertical = beside, horizontal = below)."
        ),
    ) -> None:
        """Show the selector theme, or save a new one."""
        current = ctx.settings
        if name is None and layout is None:
            rows = [
                [item.value, "●" if item is current.theme else ""]
                for item in ThemeName
            ]
            ctx.ui.tables.show(TableModel(title="Themes", columns=["Theme", "Active"], rows=rows))
            ctx.ui.present.info(f"Preview layout: {current.layout.value}")
            return

        updates: dict[str, object] = {}
        if name is not None:
            updates["theme"] = name
        if layout is not None:
            updates["layout"] = layout
        updated = current.model_copy(update=updates)
        try:
            path = ctx.settings_repo.save(updated)
        except OSError as exc:
            ctx.ui.present.error(f"Could not save settings to {ctx.settings_repo.path}: {exc}")
            raise typer.Exit(1) from exc
        ctx.settings = updated
        ctx.ui.present.success(
            f"Saved theme '{updated.theme.value}' and layout '{updated.layout.value}' to {path}"
        )
