"""
Error output and exit codes for the enhancer CLI.

Errors go to stderr so that ``enhancer enhance -f json`` can be piped
without diagnostics mixing into the document on stdout.
"""

import logging
import sys
from enum import IntEnum
from typing import NoReturn

import typer
from rich.console import Console
from rich.markup import escape

console = Console(stderr=True)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ExitCode(IntEnum):
    SUCCESS = 0
    GENERAL_ERROR = 1
    SIGINT = 130


def setup_logging(debug: bool = False) -> None:
    """Log to stderr; warnings only unless --debug was given."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a one-line problem, then optional detail and a suggested command.

    Example:
        >>> print_error("Prompt not found: 3f2a", solution="enhancer list")
        Error: Prompt not found: 3f2a
        → Try: enhancer list
    """
    console.print(f"[red]Error:[/red] {escape(problem)}")
    if reason:
        console.print(f"[dim]{escape(reason)}[/dim]")
    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {escape(solution)}")


def fail(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
    code: ExitCode = ExitCode.GENERAL_ERROR,
) -> NoReturn:
    """Print an error and exit the current command."""
    print_error(problem, reason=reason, solution=solution)
    raise typer.Exit(code)
