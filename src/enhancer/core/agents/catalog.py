"""
Agent catalog loading.

Agents are described by Markdown files with YAML frontmatter, one per agent,
in a directory such as ``.claude/agents``:

    ---
    name: typescript-error-resolver
    description: Resolves TypeScript compiler errors
    ---

Catalog order is the sorted order of agent names. The resolver relies on it
when several agents match a mention equally well.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Sequence
from pathlib import Path

import frontmatter
import yaml

from enhancer.core.cache import LRUCache
from enhancer.core.prompts.models import AgentInfo

logger = logging.getLogger(__name__)

DEFAULT_AGENTS_DIR = Path(".claude") / "agents"
DESCRIPTION_MAX_LENGTH = 200


class AgentCatalog:
    """Immutable, name-ordered collection of AgentInfo entries."""

    def __init__(self, agents: Sequence[AgentInfo] = ()) -> None:
        by_name: dict[str, AgentInfo] = {}
        for agent in agents:
            if agent.name in by_name:
                logger.warning(f"Duplicate agent name '{agent.name}', keeping first definition")
                continue
            by_name[agent.name] = agent
        self._agents = tuple(sorted(by_name.values(), key=lambda a: a.name))

    @property
    def agents(self) -> tuple[AgentInfo, ...]:
        return self._agents

    @property
    def names(self) -> list[str]:
        return [agent.name for agent in self._agents]

    def get(self, name: str) -> AgentInfo | None:
        lowered = name.lower()
        for agent in self._agents:
            if agent.name.lower() == lowered:
                return agent
        return None

    def __iter__(self) -> Iterator[AgentInfo]:
        return iter(self._agents)

    def __len__(self) -> int:
        return len(self._agents)

    def __bool__(self) -> bool:
        return bool(self._agents)


def _clean_description(raw: object, name: str, max_length: int) -> str:
    if not isinstance(raw, str) or not raw.strip():
        return f"Agent: {name}"
    description = re.sub(r"\s+", " ", raw).strip()
    if len(description) > max_length:
        description = description[:max_length] + "..."
    return description


def parse_agent_file(
    path: Path, description_max_length: int = DESCRIPTION_MAX_LENGTH
) -> AgentInfo | None:
    """
    Parse a single agent definition file.

    Args:
        path: Markdown file with frontmatter
        description_max_length: Longer descriptions are truncated with "..."

    Returns:
        AgentInfo, or None if the file has no usable ``name``

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If the frontmatter is not valid YAML
    """
    post = frontmatter.load(path)
    name = post.metadata.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    name = name.strip()
    return AgentInfo(
        name=name,
        description=_clean_description(
            post.metadata.get("description"), name, description_max_length
        ),
        file_path=str(path),
    )


def load_agent_catalog(
    agents_dir: Path,
    cache: LRUCache[str, AgentCatalog] | None = None,
    description_max_length: int = DESCRIPTION_MAX_LENGTH,
) -> AgentCatalog:
    """
    Load every ``*.md`` agent definition under ``agents_dir``.

    A missing directory yields an empty catalog. Files that cannot be read or
    parsed are skipped with a warning.

    Args:
        agents_dir: Directory containing agent definition files
        cache: Optional cache keyed by the resolved directory path
        description_max_length: Maximum description length before truncation

    Returns:
        AgentCatalog (possibly empty)
    """
    key = str(agents_dir.resolve())
    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            return cached

    agents: list[AgentInfo] = []
    if not agents_dir.is_dir():
        logger.debug(f"No agents directory at {agents_dir}")
    else:
        try:
            files = sorted(agents_dir.glob("*.md"))
        except OSError as e:
            logger.warning(f"Cannot list agents directory {agents_dir}: {e}")
            files = []

        for path in files:
            try:
                agent = parse_agent_file(path, description_max_length)
            except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
                logger.warning(f"Skipping unreadable agent file {path}: {e}")
                continue
            if agent is None:
                logger.warning(f"Skipping agent file without a name: {path}")
                continue
            agents.append(agent)

    catalog = AgentCatalog(agents)
    if cache is not None:
        cache.put(key, catalog)
    return catalog
