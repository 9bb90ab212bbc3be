"""
Enhancer CLI - enhance command.

Turn a raw prompt into a structured, validated prompt and print it as a
table, JSON, YAML or Markdown.
"""

import sys
from datetime import datetime
from enum import Enum
from pathlib import Path

import typer
from rich.console import Console

from enhancer.cli.common import open_store, project_config, project_root, render_result
from enhancer.cli.errors import fail
from enhancer.cli.errors import console as err_console
from enhancer.core.enhance import Enhancer
from enhancer.core.errors import EmptyInputError
from enhancer.core.export import export_result
from enhancer.core.generation import get_backend
from enhancer.core.prompts.models import InputMetadata, RawInput, WorkflowCategory
from enhancer.utils.logging import EventLogger

console = Console()


class OutputChoice(str, Enum):
    TABLE = "table"
    JSON = "json"
    YAML = "yaml"
    MARKDOWN = "markdown"


def read_prompt(text: str) -> str:
    """Prompt text from the argument, or from stdin when it is ``-``."""
    if text == "-":
        return sys.stdin.read()
    return text


def enhance(
    text: str = typer.Argument(..., help="Prompt to enhance, or '-' to read stdin"),
    category: WorkflowCategory | None = typer.Option(
        None,
        "--category",
        "-c",
        help="Force the workflow category instead of classifying",
    ),
    output_format: OutputChoice = typer.Option(
        OutputChoice.TABLE,
        "--format",
        "-f",
        help="Output format",
    ),
    save: bool = typer.Option(
        False,
        "--save",
        "-s",
        help="Save the result to the prompt store",
    ),
    offline: bool = typer.Option(
        False,
        "--offline",
        help="Skip the model and use the rule-based fallback",
    ),
    project: Path | None = typer.Option(
        None,
        "--project",
        "-p",
        help="Project directory (default: discovered from cwd)",
        file_okay=False,
    ),
    author: str | None = typer.Option(None, "--author", help="Author recorded in metadata"),
    tags: list[str] | None = typer.Option(
        None,
        "--tag",
        "-t",
        help="Tag recorded in metadata (can be repeated)",
    ),
) -> None:
    """
    Enhance a prompt.

    Examples:
        enhancer enhance "the login page is broken"
        enhancer enhance "add CSV export" --category feature --format json
        cat prompt.txt | enhancer enhance - --save
    """
    root = project_root(project)
    config = project_config(root)
    backend = get_backend("offline") if offline else None

    session_id = datetime.now().strftime("%Y%m%d-%H%M%S")
    events = EventLogger.init(root.name or "default", session_id)
    try:
        enhancer = Enhancer(root, config, backend, events=events)
    except ValueError as e:
        fail(str(e), solution="check generation.backend in .enhancer.json")

    raw = RawInput(
        content=read_prompt(text),
        category=category,
        metadata=InputMetadata(author=author, tags=tags or [], source="cli"),
    )
    try:
        result = enhancer.enhance(raw)
    except EmptyInputError as e:
        fail(str(e), solution='enhancer enhance "describe the task"')

    if output_format == OutputChoice.TABLE:
        render_result(console, result)
    else:
        typer.echo(export_result(result, output_format.value).rstrip("\n"))

    if save:
        try:
            path = open_store(root, config).save(result)
        except OSError as e:
            fail(f"Failed to save prompt: {e}")
        err_console.print(f"[green]Saved[/green] {path}", highlight=False)
