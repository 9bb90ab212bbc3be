"""
Reference discovery in prompt text.

Finds URLs, project dependencies, scoped packages, well-known library names
and ``@`` references mentioned in a prompt, so they can be passed to the
generation backend and listed in the structured result. Canonical
``@agent-*`` tokens are agent references, not package references, and are
skipped.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from enhancer.core.prompts.models import DiscoveredReference, ReferenceType

URL_PATTERN = re.compile(
    r"https?://(?:www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b[-a-zA-Z0-9()@:%_+.~#?&/=]*"
)
SCOPED_PACKAGE_PATTERN = re.compile(r"(?<![\w.])@[\w-]+/[\w.-]+")
AT_REFERENCE_PATTERN = re.compile(r"(?<![\w.])@[\w-]+(?:/[\w-]+)*(?:\.\w+)?")

LIBRARY_PATTERNS: tuple[re.Pattern[str], ...] = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\b(?:react|vue|angular|svelte|nextjs|next\.js|express|fastify|koa)\b",
        r"\b(?:typescript|javascript|node\.js|bun|deno)\b",
        r"\b(?:prisma|mongoose|sequelize|typeorm|sqlalchemy)\b",
        r"\b(?:tailwind|bootstrap|material-ui|antd|chakra)\b",
        r"\b(?:jest|vitest|mocha|cypress|playwright|pytest)\b",
        r"\b(?:webpack|vite|rollup|parcel|esbuild)\b",
        r"\b(?:django|flask|fastapi|pydantic|typer|pandas|numpy)\b",
    )
)

_TRAILING_PUNCTUATION = ".,;:!?)"


class ReferenceDiscovery:
    """
    Discover references in prompt text.

    Args:
        dependencies: Project dependency names; mentions of these are
            reported as libraries found in the project
    """

    def __init__(self, dependencies: Iterable[str] = ()) -> None:
        self.dependencies = {dep.lower(): dep for dep in dependencies if len(dep) > 2}

    def discover(self, text: str) -> list[DiscoveredReference]:
        found: list[DiscoveredReference] = []
        seen: set[str] = set()

        def add(ref_type: ReferenceType, value: str, context: str) -> None:
            key = value.lower()
            if key in seen:
                return
            seen.add(key)
            found.append(DiscoveredReference(type=ref_type, value=value, context=context))

        for match in URL_PATTERN.finditer(text):
            url = match.group(0).rstrip(_TRAILING_PUNCTUATION)
            add(ReferenceType.URL, url, "Found in prompt text")

        # URLs may contain '@' and library names; search the remaining text only
        remaining = URL_PATTERN.sub(" ", text)

        for word in remaining.split():
            clean = re.sub(r"[^\w@/.-]", "", word).strip(_TRAILING_PUNCTUATION).lower()
            if clean in self.dependencies:
                add(ReferenceType.LIBRARY, self.dependencies[clean], "Found in project dependencies")

        for match in SCOPED_PACKAGE_PATTERN.finditer(remaining):
            add(ReferenceType.LIBRARY, match.group(0), "Scoped package pattern")

        for pattern in LIBRARY_PATTERNS:
            for match in pattern.finditer(remaining):
                add(ReferenceType.LIBRARY, match.group(0).lower(), "Common library pattern")

        for match in AT_REFERENCE_PATTERN.finditer(remaining):
            value = match.group(0)
            if value.lower().startswith("@agent-"):
                continue
            add(ReferenceType.PACKAGE, value, "@-reference in prompt")

        return found


def discover_references(
    text: str, dependencies: Iterable[str] = ()
) -> list[DiscoveredReference]:
    """Discover references in ``text`` given the project's dependency names."""
    return ReferenceDiscovery(dependencies).discover(text)
