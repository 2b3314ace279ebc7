"""User-facing operations: select, classify, disclose, dispatch, report."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from pm_common.errors import format_packages
from pm_core.models import Action, Invocation, Package
from pm_ui.flows.errors import UIFlowError
from pm_ui.presenters.packages import (
    build_info_table,
    build_installed_table,
    build_search_table,
)
from pm_ui.presenters.plan import announce_invocation, disclose_plan, render_outcome
from pm_ui.tui.system.models import Cancelled, SelectorMode
from pm_ui.tui.system.protocols import UI
from pm_ui.wiring.dependencies import UIContext

logger = logging.getLogger(__name__)


def wants_selector(names: Sequence[str], interactive: Optional[bool]) -> bool:
    """Explicit names bypass the selector unless ``--interactive`` forces it."""
    if interactive is None:
        return not names
    return interactive


def select_names(
    ui: UI, candidates: Sequence[Package], mode: SelectorMode
) -> Optional[tuple[str, ...]]:
    outcome = ui.selector.run(candidates, mode)
    if isinstance(outcome, Cancelled):
        logger.debug("Selection cancelled: %s", outcome.reason)
        return None
    return outcome.names


def dispatch(
    ctx: UIContext,
    action: Action,
    names: Sequence[str],
    *,
    noconfirm: Optional[bool] = None,
    confirm: bool = False,
) -> int:
    """Route ``names`` to their tools and run them; return the worst exit code.

    With ``confirm`` the user approves the disclosed plan first, unless
    no-confirm mode is in effect.
    """
    ctx.require_backend()
    with ctx.ui.progress.status("Resolving package sources..."):
        classification = ctx.router.classify(names)

    if action is Action.INSTALL:
        plan = ctx.dispatcher.plan_install(
            classification.primary, classification.secondary, noconfirm=noconfirm
        )
    else:
        plan = ctx.dispatcher.plan_remove(
            classification.primary, classification.secondary, noconfirm=noconfirm
        )
    ask = confirm and not _effective_noconfirm(ctx, noconfirm)
    return _execute(ctx, plan, confirm_action=action if ask else None)


def _effective_noconfirm(ctx: UIContext, noconfirm: Optional[bool]) -> bool:
    return ctx.settings.noconfirm if noconfirm is None else noconfirm


def _execute(
    ctx: UIContext, plan: list[Invocation], *, confirm_action: Optional[Action] = None
) -> int:
    if not plan:
        ctx.ui.present.info("Nothing to do.")
        return 0
    disclose_plan(ctx.ui, plan)
    if confirm_action is not None:
        packages = [name for invocation in plan for name in invocation.packages]
        verb = confirm_action.value.capitalize()
        prompt = f"{verb} {len(packages)} package(s): {format_packages(packages)}?"
        if not ctx.ui.form.confirm(prompt, default=True):
            ctx.ui.present.info("Aborted.")
            return 0
    outcome = ctx.dispatcher.execute(
        plan, announce=lambda invocation: announce_invocation(ctx.ui, invocation)
    )
    render_outcome(ctx.ui, outcome)
    return outcome.exit_code


def _names_or_selection(
    ctx: UIContext,
    names: Sequence[str],
    *,
    interactive: Optional[bool],
    title: str,
    installed: bool,
) -> Optional[Sequence[str]]:
    if not wants_selector(names, interactive):
        if not names:
            raise UIFlowError("No package names given and the selector is disabled.", exit_code=2)
        return names

    label = "installed" if installed else "available"
    with ctx.ui.progress.status(f"Loading {label} packages..."):
        candidates = ctx.provider.list_installed() if installed else ctx.provider.list_available()
    mode = SelectorMode(title=title, installed=installed, query_hint=" ".join(names))
    chosen = select_names(ctx.ui, candidates, mode)
    if chosen is None:
        ctx.ui.present.info("Nothing selected.")
    return chosen


def install_packages(
    ctx: UIContext,
    names: Sequence[str],
    *,
    interactive: Optional[bool] = None,
    noconfirm: Optional[bool] = None,
) -> int:
    chosen = _names_or_selection(
        ctx, names, interactive=interactive, title="Install packages", installed=False
    )
    if not chosen:
        return 0
    return dispatch(
        ctx, Action.INSTALL, chosen, noconfirm=noconfirm, confirm=wants_selector(names, interactive)
    )


def remove_packages(
    ctx: UIContext,
    names: Sequence[str],
    *,
    interactive: Optional[bool] = None,
    noconfirm: Optional[bool] = None,
) -> int:
    chosen = _names_or_selection(
        ctx, names, interactive=interactive, title="Remove packages", installed=True
    )
    if not chosen:
        return 0
    return dispatch(
        ctx, Action.REMOVE, chosen, noconfirm=noconfirm, confirm=wants_selector(names, interactive)
    )


def search_packages(
    ctx: UIContext,
    query: str,
    *,
    interactive: bool = False,
    noconfirm: Optional[bool] = None,
) -> int:
    with ctx.ui.progress.status(f"Searching for '{query}'..."):
        results = ctx.provider.search(query)

    if not interactive:
        if not results:
            ctx.ui.present.warning(f"No packages match '{query}'.")
            return 0
        ctx.ui.tables.show(build_search_table(query, results))
        return 0

    chosen = select_names(ctx.ui, results, SelectorMode(title=f"Search: {query}"))
    if not chosen:
        ctx.ui.present.info("Nothing selected.")
        return 0
    return dispatch(ctx, Action.INSTALL, chosen, noconfirm=noconfirm, confirm=True)


def list_packages(ctx: UIContext, *, interactive: bool = False) -> int:
    with ctx.ui.progress.status("Loading installed packages..."):
        packages = ctx.provider.list_installed()

    if not interactive:
        ctx.ui.tables.show(build_installed_table(packages))
        return 0

    mode = SelectorMode(title="Installed packages", multi_select=False, installed=True)
    chosen = select_names(ctx.ui, packages, mode)
    if not chosen:
        return 0
    for name in chosen:
        info_text = ctx.provider.get_info(name, installed=True)
        ctx.ui.tables.show(build_info_table(name, info_text))
    return 0


def update_system(
    ctx: UIContext, *, include_secondary: bool = False, noconfirm: Optional[bool] = None
) -> int:
    ctx.require_backend()
    plan = ctx.dispatcher.plan_upgrade(include_secondary=include_secondary, noconfirm=noconfirm)
    return _execute(ctx, plan)
