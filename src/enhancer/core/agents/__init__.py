"""Agent catalog loading and mention resolution."""

from .catalog import AgentCatalog, load_agent_catalog, parse_agent_file
from .resolver import AgentMentionResolver, replace_first_mention, resolve_mentions

__all__ = [
    "AgentCatalog",
    "AgentMentionResolver",
    "load_agent_catalog",
    "parse_agent_file",
    "replace_first_mention",
    "resolve_mentions",
]
