"""
Project rule discovery.

Collects the documents a project uses to state its conventions so they can
be handed to the generative backend verbatim:

- AGENTS.md, or CLAUDE.md when there is no AGENTS.md
- every ``.ruler/*.md`` and ``.ruler/*.json`` file, in name order
- .ai-dr/rules.md, docs/rules.md, PROJECT_GUIDELINES.md, CONTRIBUTING.md

Absent files are simply skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from enhancer.core.context.outcome import Outcome

logger = logging.getLogger(__name__)

RULES_HEADER = "### PROJECT RULES AND STANDARDS (MUST BE FOLLOWED)"
PRIMARY_RULE_FILES = ("AGENTS.md", "CLAUDE.md")
EXTRA_RULE_FILES = (".ai-dr/rules.md", "docs/rules.md", "PROJECT_GUIDELINES.md", "CONTRIBUTING.md")
RULER_DIR = ".ruler"
RULER_SUFFIXES = (".md", ".json")
MAX_RULE_CHARS = 8000


@dataclass(frozen=True)
class ProjectRule:
    source: str
    content: str


def rule_paths(root: Path) -> list[Path]:
    """Candidate rule files under ``root`` in the order they are reported."""
    paths: list[Path] = []
    for name in PRIMARY_RULE_FILES:
        if (root / name).is_file():
            paths.append(root / name)
            break

    ruler = root / RULER_DIR
    if ruler.is_dir():
        paths.extend(
            sorted(p for p in ruler.iterdir() if p.is_file() and p.suffix in RULER_SUFFIXES)
        )

    paths.extend(root / name for name in EXTRA_RULE_FILES if (root / name).is_file())
    return paths


def format_rules(rules: list[ProjectRule]) -> str:
    if not rules:
        return ""
    sections = [RULES_HEADER, ""]
    for rule in rules:
        sections.extend(["---", f"#### Source: {rule.source}", "---", rule.content, ""])
    return "\n".join(sections).rstrip() + "\n"


def load_project_rules(root: Path, max_chars: int = MAX_RULE_CHARS) -> Outcome[str | None]:
    """
    Read and format the project's rule documents.

    Args:
        root: Project root directory
        max_chars: Each document is truncated to this many characters

    Returns:
        Outcome holding the formatted rules text (None when there are none).
        Unreadable files are skipped and mark the outcome as degraded.
    """
    try:
        paths = rule_paths(root)
    except OSError as e:
        return Outcome.fallback(None, "rules", str(e))

    rules: list[ProjectRule] = []
    failures: list[str] = []
    for path in paths:
        try:
            content = path.read_text().strip()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping unreadable rule file {path}: {e}")
            failures.append(path.name)
            continue
        if not content:
            continue
        if len(content) > max_chars:
            content = content[:max_chars] + "\n[truncated]"
        rules.append(ProjectRule(source=path.relative_to(root).as_posix(), content=content))

    text = format_rules(rules) or None
    if failures:
        return Outcome.fallback(text, "rules", f"unreadable: {', '.join(failures)}")
    return Outcome.ok(text, "rules")
