"""
Renderings of a StructuredResult for humans and other tools.

JSON is the canonical form (it round-trips through
``StructuredResult.model_validate_json``); YAML and Markdown are one-way.
"""

from __future__ import annotations

from enum import Enum

import yaml

from enhancer.core.prompts.models import StructuredResult


class ExportFormat(str, Enum):
    JSON = "json"
    YAML = "yaml"
    MARKDOWN = "markdown"


def to_json(result: StructuredResult, indent: int = 2) -> str:
    return result.model_dump_json(indent=indent)


def to_yaml(result: StructuredResult) -> str:
    return yaml.safe_dump(
        result.model_dump(mode="json"),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )


def _bullets(lines: list[str], title: str, items: list[str], numbered: bool = False) -> None:
    if not items:
        return
    lines.append(f"## {title}")
    lines.append("")
    for i, item in enumerate(items, 1):
        lines.append(f"{i}. {item}" if numbered else f"- {item}")
    lines.append("")


def to_markdown(result: StructuredResult) -> str:
    """
    Generate a markdown document for ``result``.

    Empty sections are omitted.

    Returns:
        Formatted markdown string
    """
    lines: list[str] = []

    category = result.category.value if result.category else "uncategorized"
    lines.append(f"# Enhanced Prompt: {category}")
    lines.append("")
    if result.id:
        lines.append(f"**ID:** {result.id}  ")
    lines.append(f"**Source:** {result.source.value}  ")
    lines.append(f"**Complexity:** {result.estimated_complexity.value}  ")
    if result.validation:
        status = "valid" if result.validation.is_valid else "invalid"
        lines.append(f"**Quality:** {result.validation.score}/100 ({status})  ")
    lines.append("")

    lines.append("## Instruction")
    lines.append("")
    lines.append(result.instruction or "_(empty)_")
    lines.append("")

    context = result.context
    if context:
        _bullets(lines, "Technical Stack", context.technical_stack)
        _bullets(lines, "Relevant Files", [f"`{path}`" for path in context.relevant_files])
        _bullets(lines, "Dependencies", context.dependencies)
        if context.current_state:
            lines.append(f"> {context.current_state}")
            lines.append("")

    if result.agent_resolution and result.agent_resolution.resolved_agents:
        _bullets(
            lines,
            "Agents",
            [f"{agent.token}: {agent.description}" for agent in result.agent_resolution.resolved_agents],
        )

    _bullets(lines, "Steps", result.order_of_steps, numbered=True)
    _bullets(lines, "Success Criteria", result.success_criteria)
    _bullets(lines, "Constraints", result.constraints)
    _bullets(lines, "Clarifying Questions", result.clarifying_questions)
    _bullets(lines, "Suggested Agents", result.agent_suggestions)
    _bullets(
        lines,
        "References",
        [f"{ref.value} ({ref.type.value})" for ref in result.discovered_references],
    )

    if result.examples:
        lines.append("## Examples")
        lines.append("")
        for example in result.examples:
            lines.append(f"- **Input:** {example.input}")
            lines.append(f"  **Output:** {example.output}")
            if example.explanation:
                lines.append(f"  _{example.explanation}_")
        lines.append("")

    if result.validation and result.validation.issues:
        _bullets(lines, "Validation Issues", [str(issue) for issue in result.validation.issues])

    return "\n".join(lines).rstrip() + "\n"


_RENDERERS = {
    ExportFormat.JSON: to_json,
    ExportFormat.YAML: to_yaml,
    ExportFormat.MARKDOWN: to_markdown,
}


def export_result(result: StructuredResult, fmt: ExportFormat | str = ExportFormat.JSON) -> str:
    """
    Render ``result`` in ``fmt``.

    Raises:
        ValueError: If ``fmt`` is not a known export format
    """
    return _RENDERERS[ExportFormat(fmt)](result)
