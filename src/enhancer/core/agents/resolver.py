"""
Agent mention resolution.

Finds references to catalog agents in free text and rewrites the first
occurrence of each into the canonical ``@agent-{name}`` token.

Detection runs in two passes:

1. Confirmed mentions: every catalog name, longest first, matched
   case-insensitively as a whole hyphenated token.
2. Loose mentions: ``@name``, ``use/with/using name``, compound names ending
   in a role suffix (``-engineer``, ``-agent``, ...) and role phrases such as
   "backend engineer". Candidates of four characters or fewer, and candidates
   that are strict substrings of a confirmed name, are discarded.

Loose mentions are matched to the catalog in three tiers: exact name, name
containing the mention (mention longer than five characters), then name
starting with ``mention-`` (mention longer than four characters). Within a
tier the first agent in catalog order wins. When a tier holds more than one
agent the mention is reported in ``ambiguous_mentions``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from enhancer.core.agents.catalog import AgentCatalog
from enhancer.core.prompts.models import AgentInfo, MentionResolution

logger = logging.getLogger(__name__)

ROLE_SUFFIXES = (
    "engineer",
    "agent",
    "orchestrator",
    "architect",
    "resolver",
    "reviewer",
    "challenger",
)
ROLE_PREFIXES = ("nextjs", "typescript", "backend", "frontend", "ui", "api", "workflow")

_SUFFIX_ALT = "|".join(ROLE_SUFFIXES)
_PREFIX_ALT = "|".join(ROLE_PREFIXES)

LOOSE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"@(?:agent-)?([a-z0-9][\w-]*[a-z0-9])", re.IGNORECASE),
    re.compile(
        r"\b(?:use|with|using)\s+(?:the\s+)?@?([a-z0-9]+(?:-[a-z0-9]+)+)",
        re.IGNORECASE,
    ),
    re.compile(
        rf"(?<![\w@-])([a-z0-9]+(?:-[a-z0-9]+)*-(?:{_SUFFIX_ALT}))(?![\w-])",
        re.IGNORECASE,
    ),
    re.compile(
        rf"(?<![\w@-])((?:{_PREFIX_ALT})[-\s]+(?:{_SUFFIX_ALT}))(?![\w-])",
        re.IGNORECASE,
    ),
)

CANONICAL_PATTERN = re.compile(r"@agent-([a-z0-9][\w-]*[a-z0-9])(?![\w-])", re.IGNORECASE)

MIN_LOOSE_LENGTH = 5
MIN_SUBSTRING_LENGTH = 6
MIN_PREFIX_LENGTH = 5


@dataclass(frozen=True)
class _Candidate:
    surface: str
    normalized: str


def _name_pattern(name: str) -> re.Pattern[str]:
    return re.compile(rf"(?<![\w-]){re.escape(name)}(?![\w-])", re.IGNORECASE)


def replace_first_mention(text: str, surface: str, token: str) -> str:
    """
    Rewrite the first occurrence of ``surface`` into ``token``.

    Surface forms are tried from most to least specific: ``@surface``, then
    ``use/with/using surface`` (the verb is kept), then the bare word. Only
    the first form that matches is applied, and only once.
    """
    escaped = re.escape(surface)
    forms: tuple[tuple[re.Pattern[str], bool], ...] = (
        (re.compile(rf"@{escaped}(?![\w-])", re.IGNORECASE), False),
        (
            re.compile(
                rf"\b(use|with|using)(\s+(?:the\s+)?){escaped}(?![\w-])", re.IGNORECASE
            ),
            True,
        ),
        (re.compile(rf"(?<![@\w-]){escaped}(?![\w-])", re.IGNORECASE), False),
    )
    for pattern, keeps_verb in forms:
        if not pattern.search(text):
            continue

        def _replace(match: re.Match[str], keeps_verb: bool = keeps_verb) -> str:
            prefix = match.group(1) + match.group(2) if keeps_verb else ""
            return prefix + token

        return pattern.sub(_replace, text, count=1)
    return text


class AgentMentionResolver:
    """
    Resolve agent mentions against an AgentCatalog.

    Example:
        >>> catalog = AgentCatalog([AgentInfo(name="nextjs-ui-api-engineer")])
        >>> result = AgentMentionResolver().resolve(
        ...     "use nextjs-ui-api-engineer to fix this", catalog
        ... )
        >>> result.processed_text
        'use @agent-nextjs-ui-api-engineer to fix this'
    """

    def __init__(self, loose_patterns: Iterable[re.Pattern[str]] = LOOSE_PATTERNS) -> None:
        self.loose_patterns = tuple(loose_patterns)

    def resolve(self, text: str, catalog: AgentCatalog) -> MentionResolution:
        if not catalog or not text:
            return MentionResolution(original_text=text, processed_text=text)

        resolved: dict[str, AgentInfo] = {}
        surfaces: dict[str, str] = {}
        ambiguous: dict[str, list[str]] = {}

        # Already-canonical tokens count as resolved and are left untouched
        for match in CANONICAL_PATTERN.finditer(text):
            agent = catalog.get(match.group(1))
            if agent is not None and agent.name not in resolved:
                resolved[agent.name] = agent

        confirmed = self._confirmed_mentions(text, catalog)
        for agent in confirmed:
            if agent.name not in resolved:
                resolved[agent.name] = agent
                surfaces[agent.name] = agent.name

        confirmed_names = [agent.name.lower() for agent in confirmed]
        for candidate in self._loose_candidates(text, confirmed_names):
            agent, tied = self._match(candidate.normalized, catalog)
            if len(tied) > 1:
                ambiguous.setdefault(candidate.normalized, tied)
                logger.warning(
                    f"Ambiguous agent mention '{candidate.surface}' matches "
                    f"{', '.join(tied)}; using '{tied[0]}'"
                )
            if agent is None or agent.name in resolved:
                continue
            resolved[agent.name] = agent
            surfaces[agent.name] = candidate.surface

        processed = text
        for name, surface in surfaces.items():
            agent = resolved[name]
            if re.search(rf"{re.escape(agent.token)}(?![\w-])", processed, re.IGNORECASE):
                continue
            processed = replace_first_mention(processed, surface, agent.token)

        if resolved:
            logger.debug(f"Resolved agents: {', '.join(resolved)}")

        return MentionResolution(
            original_text=text,
            processed_text=processed,
            resolved_agents=list(resolved.values()),
            ambiguous_mentions=ambiguous,
        )

    def _confirmed_mentions(self, text: str, catalog: AgentCatalog) -> list[AgentInfo]:
        """Catalog names present verbatim, longest first, without overlaps."""
        taken: list[tuple[int, int]] = []
        found: list[AgentInfo] = []
        for agent in sorted(catalog, key=lambda a: (-len(a.name), a.name)):
            for match in _name_pattern(agent.name).finditer(text):
                start, end = match.span()
                if any(start < t_end and t_start < end for t_start, t_end in taken):
                    continue
                taken.append((start, end))
                found.append(agent)
                break
        return found

    def _loose_candidates(self, text: str, confirmed_names: list[str]) -> list[_Candidate]:
        seen: set[str] = set()
        candidates: list[_Candidate] = []
        for pattern in self.loose_patterns:
            for match in pattern.finditer(text):
                surface = match.group(1)
                normalized = re.sub(r"[\s-]+", "-", surface.lower())
                if normalized in seen or len(normalized) < MIN_LOOSE_LENGTH:
                    continue
                if any(normalized in name and normalized != name for name in confirmed_names):
                    continue
                seen.add(normalized)
                candidates.append(_Candidate(surface=surface, normalized=normalized))
        return candidates

    def _match(
        self, mention: str, catalog: AgentCatalog
    ) -> tuple[AgentInfo | None, list[str]]:
        """
        Match a normalized mention against the catalog.

        Returns:
            (winning agent or None, names of every agent in the winning tier)
        """
        tiers = (
            lambda name: name == mention,
            lambda name: len(mention) >= MIN_SUBSTRING_LENGTH and mention in name,
            lambda name: len(mention) >= MIN_PREFIX_LENGTH and name.startswith(mention + "-"),
        )
        for matches_tier in tiers:
            hits = [agent for agent in catalog if matches_tier(agent.name.lower())]
            if hits:
                return hits[0], [agent.name for agent in hits]
        return None, []


_default_resolver = AgentMentionResolver()


def resolve_mentions(text: str, catalog: AgentCatalog) -> MentionResolution:
    """Resolve agent mentions in ``text`` with the default patterns."""
    return _default_resolver.resolve(text, catalog)
