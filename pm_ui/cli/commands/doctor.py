from __future__ import annotations

import typer

from pm_ui.presenters.doctor import render_doctor_report
from pm_ui.wiring.dependencies import UIContext


def register_doctor_command(app: typer.Typer, ctx: UIContext) -> None:
    """Register the doctor command, wired to the given context."""

    @app.command("doctor")
    def doctor() -> None:
        """Check package tools, privilege escalation and terminal support."""
        report = ctx.doctor_service.check_all()
        ok = render_doctor_report(ctx.ui, report)
        if not ok:
            raise typer.Exit(1)
