"""
Dependency manifest scanning.

Reads declared dependency names from package.json, pyproject.toml and
requirements.txt, and derives technology tags from them by fuzzy substring
match.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

try:
    import tomllib  # type: ignore[import-not-found]
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found]

from enhancer.core.context.outcome import Outcome

logger = logging.getLogger(__name__)

# Tag -> substrings looked for in lower-cased dependency names
TECH_TAGS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("Next.js", ("next",)),
    ("React", ("react",)),
    ("Vue", ("vue",)),
    ("Angular", ("@angular",)),
    ("Svelte", ("svelte",)),
    ("Express", ("express",)),
    ("Fastify", ("fastify",)),
    ("Prisma", ("prisma",)),
    ("TypeScript", ("typescript",)),
    ("Tailwind CSS", ("tailwind",)),
    ("FastAPI", ("fastapi",)),
    ("Django", ("django",)),
    ("Flask", ("flask",)),
    ("SQLAlchemy", ("sqlalchemy",)),
    ("Pydantic", ("pydantic",)),
    ("Typer", ("typer",)),
    ("pytest", ("pytest",)),
    ("Jest", ("jest",)),
)

_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9@][A-Za-z0-9._/@-]*)")


def requirement_name(requirement: str) -> str | None:
    """Extract the distribution name from a PEP 508 string ('pydantic>=2' -> 'pydantic')."""
    match = _REQUIREMENT_NAME.match(requirement)
    return match.group(1) if match else None


def _names(specs: object) -> list[str]:
    if not isinstance(specs, list):
        return []
    return [name for item in specs if isinstance(item, str) and (name := requirement_name(item))]


def read_package_json(root: Path) -> Outcome[list[str]] | None:
    """Dependencies and devDependencies from package.json, or None if absent."""
    path = root / "package.json"
    if not path.exists():
        return None
    try:
        data = json.loads(path.read_text())
    except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
        return Outcome.fallback([], "package.json", str(e))
    if not isinstance(data, dict):
        return Outcome.fallback([], "package.json", "top level is not an object")

    names: list[str] = []
    for key in ("dependencies", "devDependencies"):
        section = data.get(key)
        if isinstance(section, dict):
            names.extend(str(name) for name in section)
    return Outcome.ok(names, "package.json")


class _NotATable(Exception):
    pass


def _table(parent: dict, key: str, label: str) -> dict:
    """Sub-table ``key`` of ``parent``; missing is empty, any other shape raises."""
    value = parent.get(key, {})
    if not isinstance(value, dict):
        raise _NotATable(f"{label} is not a table")
    return value


def read_pyproject(root: Path) -> Outcome[list[str]] | None:
    """PEP 621 and Poetry dependencies from pyproject.toml, or None if absent."""
    path = root / "pyproject.toml"
    if not path.exists():
        return None
    try:
        data = tomllib.loads(path.read_text())
    except (tomllib.TOMLDecodeError, OSError, UnicodeDecodeError) as e:
        return Outcome.fallback([], "pyproject.toml", str(e))

    try:
        project = _table(data, "project", "project")
        optional = _table(project, "optional-dependencies", "project.optional-dependencies")
        poetry = _table(_table(data, "tool", "tool"), "poetry", "tool.poetry")
        poetry_groups = _table(poetry, "group", "tool.poetry.group")
    except _NotATable as e:
        return Outcome.fallback([], "pyproject.toml", str(e))

    names = _names(project.get("dependencies"))
    for specs in optional.values():
        names.extend(_names(specs))

    groups = [poetry.get("dependencies"), poetry.get("dev-dependencies")]
    groups.extend(
        group.get("dependencies") for group in poetry_groups.values() if isinstance(group, dict)
    )
    for group in groups:
        if isinstance(group, dict):
            names.extend(name for name in group if name != "python")

    return Outcome.ok(names, "pyproject.toml")


def read_requirements(root: Path) -> Outcome[list[str]] | None:
    """Names from requirements.txt, or None if absent. Options and comments are skipped."""
    path = root / "requirements.txt"
    if not path.exists():
        return None
    try:
        lines = path.read_text().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        return Outcome.fallback([], "requirements.txt", str(e))

    names: list[str] = []
    for line in lines:
        line = line.split("#", 1)[0].strip()
        if not line or line.startswith("-"):
            continue
        if name := requirement_name(line):
            names.append(name)
    return Outcome.ok(names, "requirements.txt")


MANIFEST_READERS = (
    ("Node.js", read_package_json),
    ("Python", read_pyproject),
    ("Python", read_requirements),
)


def detect_technical_stack(dependencies: list[str]) -> list[str]:
    """
    Flag technology tags whose needle appears in any dependency name.

    Example:
        >>> detect_technical_stack(["next", "react-dom", "@prisma/client"])
        ['Next.js', 'React', 'Prisma']
    """
    lowered = [dep.lower() for dep in dependencies]
    return [
        tag
        for tag, needles in TECH_TAGS
        if any(needle in dep for dep in lowered for needle in needles)
    ]


def scan_manifests(root: Path) -> tuple[list[str], list[str], list[Outcome[list[str]]]]:
    """
    Read every manifest present under ``root``.

    Returns:
        (dependency names, technology tags, outcomes of each manifest read)
    """
    dependencies: list[str] = []
    languages: list[str] = []
    outcomes: list[Outcome[list[str]]] = []

    for language, reader in MANIFEST_READERS:
        outcome = reader(root)
        if outcome is None:
            continue
        outcomes.append(outcome)
        if outcome.degraded:
            logger.warning(f"Could not read {outcome.source}: {outcome.reason}")
            continue
        if language not in languages:
            languages.append(language)
        for name in outcome.value:
            if name not in dependencies:
                dependencies.append(name)

    stack = detect_technical_stack(dependencies)
    stack.extend(lang for lang in languages if lang not in stack)
    return dependencies, stack, outcomes
