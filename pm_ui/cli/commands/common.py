from __future__ import annotations

import logging
from typing import Callable

import typer

from pm_common.errors import PMError
from pm_ui.flows.errors import UIFlowError
from pm_ui.wiring.dependencies import UIContext

logger = logging.getLogger(__name__)

INTERACTIVE_OPTION_HELP = "Force (-i) or forbid (-y) the interactive selector."
NOCONFIRM_OPTION_HELP = "Pass --noconfirm to pacman/yay (default from settings)."


def run_guarded(ctx: UIContext, operation: Callable[[], int]) -> None:
    """Run a flow and turn its result or typed failure into the process exit code."""
    try:
        code = operation()
    except PMError as exc:
        logger.debug("%s: %s", exc.error_type, exc.to_dict())
        ctx.ui.present.error(str(exc))
        raise typer.Exit(exc.exit_code) from exc
    except UIFlowError as exc:
        ctx.ui.present.error(str(exc))
        raise typer.Exit(exc.exit_code) from exc
    if code:
        raise typer.Exit(code)
