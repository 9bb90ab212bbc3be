"""
Enhancer CLI - inspection commands.

Look at the individual pipeline stages without running a full enhancement:
validate a saved result, list or resolve agents, and show the project
context gathered for a prompt.
"""

from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from enhancer.cli.common import project_config, project_root, render_validation
from enhancer.cli.enhance import read_prompt
from enhancer.cli.errors import ExitCode, fail
from enhancer.core.agents import AgentMentionResolver, load_agent_catalog
from enhancer.core.context import ContextAnalyzer
from enhancer.core.prompts.models import StructuredResult
from enhancer.core.validate import PromptValidator

console = Console()


def validate(
    file: Path = typer.Argument(
        ...,
        help="Saved result JSON file",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the validation result as JSON"),
) -> None:
    """
    Validate a saved prompt.

    Exits with code 1 when the prompt has validation errors.
    """
    try:
        result = StructuredResult.model_validate_json(file.read_text(encoding="utf-8"))
    except ValidationError as e:
        fail(f"Not a valid prompt file: {file}", reason=str(e))

    validation = PromptValidator().validate(result)
    if as_json:
        typer.echo(validation.model_dump_json(indent=2))
    else:
        render_validation(console, validation)

    if not validation.is_valid:
        raise typer.Exit(ExitCode.GENERAL_ERROR)


def agents(
    resolve: str | None = typer.Option(
        None,
        "--resolve",
        "-r",
        help="Resolve agent mentions in this text",
    ),
    project: Path | None = typer.Option(None, "--project", "-p", file_okay=False),
) -> None:
    """
    List project agents, or show how mentions in a text resolve.

    Examples:
        enhancer agents
        enhancer agents --resolve "use the backend engineer to add an endpoint"
    """
    root = project_root(project)
    config = project_config(root)
    catalog = load_agent_catalog(
        root / config.agents.directory,
        description_max_length=config.agents.description_max_length,
    )

    if resolve is None:
        if not catalog:
            console.print(f"[dim]No agents found in {root / config.agents.directory}[/dim]")
            return
        table = Table(title=f"Agents ({len(catalog)})", show_header=True, header_style="bold")
        table.add_column("Name", style="cyan")
        table.add_column("Description")
        for agent in catalog:
            table.add_row(agent.name, escape(agent.description))
        console.print(table)
        return

    resolution = AgentMentionResolver().resolve(read_prompt(resolve), catalog)
    console.print(f"[bold]Processed:[/bold] {escape(resolution.processed_text)}")
    if resolution.resolved_agents:
        console.print(f"[bold]Resolved:[/bold] {', '.join(resolution.agent_names)}")
    else:
        console.print("[dim]No agent mentions resolved[/dim]")
    for mention, candidates in resolution.ambiguous_mentions.items():
        console.print(
            f"[yellow]Ambiguous:[/yellow] '{escape(mention)}' matches {', '.join(candidates)}"
        )


def context(
    text: str = typer.Argument(..., help="Prompt text, or '-' to read stdin"),
    project: Path | None = typer.Option(None, "--project", "-p", file_okay=False),
) -> None:
    """Show the project context gathered for a prompt."""
    root = project_root(project)
    config = project_config(root)
    bundle = ContextAnalyzer(root, config.context).analyze(read_prompt(text))

    if bundle.files:
        table = Table(title="Relevant Files", show_header=True, header_style="bold")
        table.add_column("Path", style="cyan")
        table.add_column("Score", justify="right")
        for file_context in bundle.files:
            table.add_row(file_context.path, str(file_context.score))
        console.print(table)
    else:
        console.print("[dim]No relevant files found[/dim]")

    if bundle.technical_stack:
        console.print(f"[bold]Stack:[/bold] {', '.join(bundle.technical_stack)}")
    if bundle.dependencies:
        console.print(f"[bold]Dependencies:[/bold] {', '.join(bundle.dependencies)}")
    rules = "found" if bundle.project_rules else "none"
    console.print(f"[bold]Project rules:[/bold] {rules}")
    for note in bundle.degraded:
        console.print(f"[yellow]Degraded:[/yellow] {escape(note)}")
