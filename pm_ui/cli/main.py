"""
Command-line interface for pmgr.

Fuzzy-search, install and remove Arch Linux packages from the official
repositories (pacman) and the AUR (yay).
"""

from __future__ import annotations

import typer

from pm_ui.cli.commands.doctor import register_doctor_command
from pm_ui.cli.commands.packages import register_package_commands
from pm_ui.cli.commands.query import register_query_commands
from pm_ui.cli.commands.theme import register_theme_command
from pm_ui.cli.commands.update import register_update_command
from pm_ui.wiring.dependencies import UIContext, configure_logging

# Initialize global context (lazy)
ctx_store = UIContext()

app = typer.Typer(
    help="Interactive package manager front-end for pacman and yay.",
    no_args_is_help=True,
)


@app.callback(invoke_without_command=True)
def entry(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Verbose logging to stderr."),
    log_json: bool = typer.Option(False, "--log-json", help="Emit logs as JSON lines."),
    headless: bool = typer.Option(
        False,
        "--headless",
        help="Force headless output (useful in CI).",
    ),
) -> None:
    """Global entry point handling logging and interactive vs headless modes."""
    configure_logging(force=True, debug=debug, json=log_json or None)
    ctx_store.headless = headless

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


register_package_commands(app, ctx_store)
register_query_commands(app, ctx_store)
register_update_command(app, ctx_store)
register_theme_command(app, ctx_store)
register_doctor_command(app, ctx_store)


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":
    main()
