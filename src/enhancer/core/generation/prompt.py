"""
Generation prompt assembly.

Builds the text sent to a generation backend: the task, the gathered
project context and rules, the output schema, and guard rails against
invented file names or APIs.
"""

from __future__ import annotations

import json

from pydantic import BaseModel

from enhancer.core.prompts.models import (
    ContextBundle,
    DiscoveredReference,
    MentionResolution,
    WorkflowCategory,
)

INTRO = (
    "You are an expert software engineering prompt engineer specializing in "
    "creating detailed, actionable prompts for AI coding assistants."
)

GOALS = """Create an enhanced engineering prompt that:
1. Provides crystal-clear, specific technical instructions
2. Identifies files and dependencies that need modification
3. Includes measurable success criteria (tests passing, metrics, etc.)
4. Detects the appropriate workflow type
5. Adds technical constraints and requirements based on project rules
6. Suggests relevant agents if task complexity warrants it
7. Provides a confidence score (0-100) based on prompt clarity
8. Estimates task complexity (simple/moderate/complex)
9. Outlines the logical order of implementation steps"""

GROUNDING_RULES = """Grounding requirements:
- Only include information that can be verified from the original task or the provided context
- Do not invent file names, API endpoints or implementation details that are not mentioned
- When suggesting files or dependencies, use generic patterns unless they appear in the context
- Mark assumptions explicitly ("Assuming standard project structure...")
- Include a verification step for every assumption"""


def describe_context(bundle: ContextBundle) -> str:
    lines: list[str] = []
    if bundle.technical_stack:
        lines.append(f"Technical stack: {', '.join(bundle.technical_stack)}")
    if bundle.dependencies:
        lines.append(f"Dependencies: {', '.join(bundle.dependencies[:30])}")
    if bundle.files:
        lines.append("Relevant files:")
        lines.extend(f"- {f.path}" for f in bundle.files)
    return "\n".join(lines)


def build_generation_prompt(
    text: str,
    schema: type[BaseModel],
    category: WorkflowCategory | None = None,
    bundle: ContextBundle | None = None,
    resolution: MentionResolution | None = None,
    references: list[DiscoveredReference] | None = None,
) -> str:
    """
    Assemble the full prompt for a generation backend.

    Args:
        text: Task text (with agent mentions already canonicalized)
        schema: Model whose JSON schema the answer must follow
        category: Pre-classified category, offered as a hint
        bundle: Project context, if gathered
        resolution: Agent mentions resolved in the task
        references: URLs and libraries mentioned in the task

    Returns:
        Prompt text
    """
    sections = [INTRO, f"Original Engineering Task:\n{text}"]

    if category is not None:
        sections.append(f"Detected workflow type (override if clearly wrong): {category.value}")

    if bundle is not None:
        if context := describe_context(bundle):
            sections.append(f"Project Context:\n{context}")
        if bundle.project_rules:
            sections.append(bundle.project_rules.strip())

    if resolution is not None and resolution.resolved_agents:
        agents = "\n".join(
            f"- {agent.token}: {agent.description}" for agent in resolution.resolved_agents
        )
        sections.append(f"Agents referenced in the task:\n{agents}")

    if references:
        refs = "\n".join(f"- {ref.type.value}: {ref.value}" for ref in references)
        sections.append(f"References mentioned in the task:\n{refs}")

    sections.append(GOALS)
    sections.append(GROUNDING_RULES)
    sections.append(
        "Respond with a single JSON object, and nothing else, matching this JSON schema:\n"
        + json.dumps(schema.model_json_schema(), indent=2)
    )
    return "\n\n".join(sections)
