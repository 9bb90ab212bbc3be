"""
Helpers shared by the enhancer CLI commands: project setup and Rich
rendering of results.
"""

from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from enhancer.cli.errors import fail
from enhancer.core.config import EnhancerConfig, load_config
from enhancer.core.prompts.models import StructuredResult, ValidationResult
from enhancer.core.storage import PromptStore
from enhancer.utils.project import resolve_project_root

SEVERITY_STYLES = {
    "error": "red",
    "warning": "yellow",
    "info": "cyan",
}


def project_root(project: Path | None) -> Path:
    """Explicit ``--project`` directory, else the discovered project root."""
    if project is not None:
        return project.resolve()
    return resolve_project_root(Path.cwd())


def project_config(root: Path) -> EnhancerConfig:
    try:
        return load_config(root, use_cache=False)
    except ValidationError as e:
        fail("Invalid configuration", reason=str(e), solution="check .enhancer.json")


def open_store(root: Path, config: EnhancerConfig) -> PromptStore:
    output_dir = Path(config.storage.output_dir)
    if not output_dir.is_absolute():
        output_dir = root / output_dir
    return PromptStore(output_dir)


def score_style(score: int) -> str:
    if score >= 80:
        return "green"
    if score >= 50:
        return "yellow"
    return "red"


def render_validation(console: Console, validation: ValidationResult) -> None:
    status = "[green]valid[/green]" if validation.is_valid else "[red]invalid[/red]"
    style = score_style(validation.score)
    console.print(f"Quality score: [{style}]{validation.score}/100[/{style}] ({status})")

    if validation.issues:
        table = Table(title="Validation Issues", show_header=True, header_style="bold")
        table.add_column("Severity")
        table.add_column("Field", style="cyan")
        table.add_column("Message")
        table.add_column("Fix", style="dim")
        for issue in validation.issues:
            severity = issue.severity.value
            table.add_row(
                f"[{SEVERITY_STYLES[severity]}]{severity}[/{SEVERITY_STYLES[severity]}]",
                issue.field,
                escape(issue.message),
                issue.fix or "",
            )
        console.print(table)

    for suggestion in validation.suggestions:
        console.print(f"[cyan]→[/cyan] {escape(suggestion)}")


def render_result(console: Console, result: StructuredResult) -> None:
    """Print a StructuredResult as Rich panels and tables."""
    category = result.category.value if result.category else "uncategorized"
    console.print(
        Panel(
            escape(result.instruction),
            title=f"[bold]{category}[/bold] · {result.source.value}",
            subtitle=result.id,
        )
    )

    summary = Table(show_header=False, box=None)
    summary.add_column("Key", style="dim")
    summary.add_column("Value")
    summary.add_row("Complexity", result.estimated_complexity.value)
    summary.add_row("Confidence", str(result.confidence_score))
    if result.context:
        if result.context.technical_stack:
            summary.add_row("Stack", ", ".join(result.context.technical_stack))
        if result.context.relevant_files:
            summary.add_row("Files", "\n".join(result.context.relevant_files))
        if result.context.current_state:
            summary.add_row("Note", f"[yellow]{result.context.current_state}[/yellow]")
    if result.agent_resolution and result.agent_resolution.resolved_agents:
        summary.add_row("Agents", ", ".join(result.agent_resolution.agent_names))
    if result.agent_suggestions:
        summary.add_row("Suggested agents", ", ".join(result.agent_suggestions))
    if result.discovered_references:
        summary.add_row(
            "References", ", ".join(ref.value for ref in result.discovered_references)
        )
    console.print(summary)

    sections = (
        ("Steps", result.order_of_steps),
        ("Success criteria", result.success_criteria),
        ("Constraints", result.constraints),
        ("Clarifying questions", result.clarifying_questions),
    )
    for title, items in sections:
        if not items:
            continue
        console.print(f"\n[bold]{title}[/bold]")
        for item in items:
            console.print(f"  • {escape(item)}")

    if result.validation:
        console.print()
        render_validation(console, result.validation)
