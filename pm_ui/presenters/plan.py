"""Presenters for dispatch plans and their outcomes."""

from __future__ import annotations

from typing import Sequence

from rich.markup import escape

from pm_common.errors import format_packages
from pm_core.dispatcher import invocation_errors
from pm_core.models import ExitOutcome, Invocation
from pm_ui.tui.system.models import TableModel
from pm_ui.tui.system.protocols import UI


def build_plan_table(plan: Sequence[Invocation]) -> TableModel:
    rows = [
        [
            str(step),
            invocation.backend,
            invocation.action.value,
            escape(format_packages(invocation.packages)) if invocation.packages else "-",
            escape(invocation.describe()),
        ]
        for step, invocation in enumerate(plan, start=1)
    ]
    return TableModel(
        title="Execution plan",
        columns=["#", "Backend", "Action", "Packages", "Command"],
        rows=rows,
    )


def disclose_plan(ui: UI, plan: Sequence[Invocation]) -> None:
    """Show every command before any of them runs."""
    ui.tables.show(build_plan_table(plan))


def announce_invocation(ui: UI, invocation: Invocation) -> None:
    ui.present.rule(f"{invocation.backend} {invocation.action.value}")


def render_outcome(ui: UI, outcome: ExitOutcome) -> bool:
    """
    Report every invocation; failures name the backend and package set.

    Returns True when every invocation succeeded.
    """
    errors = iter(invocation_errors(outcome))
    for result in outcome.results:
        if not result.ok:
            ui.present.error(str(next(errors)))
            continue
        invocation = result.invocation
        subject = format_packages(invocation.packages) if invocation.packages else "system"
        ui.present.success(f"{invocation.backend} {invocation.action.value} finished for {subject}")
    return outcome.ok
