"""
Enhancer CLI - saved prompt commands.

Browse prompts saved with ``enhancer enhance --save``.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from enhancer.cli.common import open_store, project_config, project_root, render_result, score_style
from enhancer.cli.enhance import OutputChoice
from enhancer.cli.errors import fail
from enhancer.core.errors import PromptNotFoundError
from enhancer.core.export import export_result
from enhancer.core.prompts.models import WorkflowCategory
from enhancer.core.storage import PromptSearchQuery

console = Console()

INSTRUCTION_PREVIEW_LENGTH = 60


def show(
    prompt_id: str = typer.Argument(..., help="Prompt id"),
    output_format: OutputChoice = typer.Option(OutputChoice.TABLE, "--format", "-f"),
    project: Path | None = typer.Option(None, "--project", "-p", file_okay=False),
) -> None:
    """Show a saved prompt."""
    root = project_root(project)
    store = open_store(root, project_config(root))
    try:
        result = store.load(prompt_id)
    except PromptNotFoundError as e:
        fail(str(e), solution="enhancer list")

    if output_format == OutputChoice.TABLE:
        render_result(console, result)
    else:
        typer.echo(export_result(result, output_format.value).rstrip("\n"))


def delete(
    prompt_id: str = typer.Argument(..., help="Prompt id"),
    project: Path | None = typer.Option(None, "--project", "-p", file_okay=False),
) -> None:
    """Delete a saved prompt."""
    root = project_root(project)
    store = open_store(root, project_config(root))
    try:
        deleted = store.delete(prompt_id)
    except OSError as e:
        fail(f"Failed to delete prompt {prompt_id}: {e}")
    if not deleted:
        fail(f"Prompt not found: {prompt_id}", solution="enhancer list")
    console.print(f"[green]Deleted[/green] {escape(prompt_id)}")


def list_prompts(
    category: WorkflowCategory | None = typer.Option(None, "--category", "-c"),
    min_score: int | None = typer.Option(None, "--min-score", min=0, max=100),
    tags: list[str] | None = typer.Option(None, "--tag", "-t", help="Match any of these tags"),
    text: str | None = typer.Option(None, "--text", help="Case-insensitive text search"),
    project: Path | None = typer.Option(None, "--project", "-p", file_okay=False),
) -> None:
    """
    List saved prompts, newest first.

    Examples:
        enhancer list
        enhancer list --category bug --min-score 70
        enhancer list --tag auth --text login
    """
    root = project_root(project)
    store = open_store(root, project_config(root))
    query = PromptSearchQuery(category=category, min_score=min_score, tags=tags or [], text=text)
    results = store.search(query)

    if not results:
        console.print(f"[dim]No saved prompts in {store.output_dir}[/dim]")
        return

    table = Table(title=f"Saved Prompts ({len(results)})", show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Created")
    table.add_column("Category")
    table.add_column("Score", justify="right")
    table.add_column("Instruction")
    for result in results:
        instruction = result.instruction
        if len(instruction) > INSTRUCTION_PREVIEW_LENGTH:
            instruction = instruction[: INSTRUCTION_PREVIEW_LENGTH - 3] + "..."
        style = score_style(result.score)
        table.add_row(
            result.id,
            result.metadata.created_at.strftime("%Y-%m-%d %H:%M"),
            result.category.value if result.category else "-",
            f"[{style}]{result.score}[/{style}]",
            escape(instruction),
        )
    console.print(table)
