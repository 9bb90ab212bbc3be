"""
Enhancer CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import typer
from rich.console import Console

from enhancer import __version__
from enhancer.cli import enhance, inspect_cmd, prompts
from enhancer.cli.errors import ExitCode, setup_logging
from enhancer.core.config.env import load_layered_env

# Help panel names for command grouping
PANEL_KEY = "Key Commands"
PANEL_INSPECT = "Inspect Pipeline Stages"
PANEL_STORE = "Saved Prompts"

app = typer.Typer(
    name="enhancer",
    help="Turn rough task descriptions into structured, validated prompts",
    no_args_is_help=True,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging",
    ),
) -> None:
    """
    Prompt Enhancer.

    Classifies a prompt, resolves agent mentions, gathers project context,
    asks a model for a structured enhancement (falling back to rule-based
    synthesis) and scores the result.

    Quick Start:
        enhancer enhance "the login page is broken"
        enhancer enhance "add CSV export" --format markdown --save
        enhancer list
    """
    # Precedence: OS env > project .env > user .env
    load_layered_env()
    setup_logging(debug)

    ctx.obj = {"debug": debug}


# =============================================================================
# Key Commands
# =============================================================================

app.command(name="enhance", rich_help_panel=PANEL_KEY)(enhance.enhance)


# =============================================================================
# Inspect Pipeline Stages
# =============================================================================

app.command(name="validate", rich_help_panel=PANEL_INSPECT)(inspect_cmd.validate)
app.command(name="agents", rich_help_panel=PANEL_INSPECT)(inspect_cmd.agents)
app.command(name="context", rich_help_panel=PANEL_INSPECT)(inspect_cmd.context)


# =============================================================================
# Saved Prompts
# =============================================================================

app.command(name="show", rich_help_panel=PANEL_STORE)(prompts.show)
app.command(name="list", rich_help_panel=PANEL_STORE)(prompts.list_prompts)
app.command(name="delete", rich_help_panel=PANEL_STORE)(prompts.delete)


@app.command()
def version() -> None:
    """Show enhancer version and exit."""
    console.print(f"enhancer version {__version__}")
    raise typer.Exit(0)


def cli_main() -> None:
    """Main CLI entry point."""
    try:
        app()
    except KeyboardInterrupt:
        raise SystemExit(ExitCode.SIGINT) from None


__all__ = ["app", "cli_main"]
