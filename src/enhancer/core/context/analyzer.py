"""
Project context gathering for a prompt.

Ranks project files by lexical overlap with the prompt, reads dependency
manifests and collects project rules. Every sub-analysis reports through an
Outcome; a degraded one contributes an empty value and a note in
``ContextBundle.degraded`` instead of raising.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import string
from pathlib import Path

from enhancer.core.cache import LRUCache
from enhancer.core.config.models import ContextConfig
from enhancer.core.context.manifest import scan_manifests
from enhancer.core.context.outcome import Outcome
from enhancer.core.context.rules import load_project_rules
from enhancer.core.prompts.models import ContextBundle, FileContext

logger = logging.getLogger(__name__)

STOP_WORDS = frozenset(
    {
        "the", "and", "for", "with", "from", "that", "this", "have", "will", "been",
        "into", "when", "what", "where", "which", "there", "their", "them", "then",
        "than", "some", "should", "would", "could", "make", "need", "want", "please",
        "also", "just", "about", "after", "before", "each", "only", "other", "over",
        "such", "they", "very", "your", "does", "while", "these", "those",
    }
)

IGNORED_FILE_PATTERNS = (
    "*.log",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "poetry.lock",
    "uv.lock",
)

MIN_KEYWORD_LENGTH = 4


def extract_keywords(text: str) -> list[str]:
    """
    Lower-cased keywords from ``text``, in first-seen order.

    Tokens are split on whitespace and stripped of surrounding punctuation;
    stop words and tokens shorter than four characters are dropped.

    Example:
        >>> extract_keywords("Fix the login form, the LOGIN button")
        ['login', 'form', 'button']
    """
    keywords: list[str] = []
    for token in text.lower().split():
        word = token.strip(string.punctuation)
        if len(word) < MIN_KEYWORD_LENGTH or word in STOP_WORDS:
            continue
        if word not in keywords:
            keywords.append(word)
    return keywords


class ContextAnalyzer:
    """
    Gather a ContextBundle for prompts against one project root.

    The optional cache is keyed by the root plus the first
    ``settings.cache_key_length`` characters of the prompt.
    """

    def __init__(
        self,
        root: Path,
        settings: ContextConfig | None = None,
        cache: LRUCache[tuple[str, str], ContextBundle] | None = None,
    ) -> None:
        self.root = root
        self.settings = settings or ContextConfig()
        self.cache = cache

    def analyze(self, text: str) -> ContextBundle:
        """
        Build the relevance bundle for ``text``.

        Never raises for filesystem reasons.
        """
        key = (str(self.root), text[: self.settings.cache_key_length])
        if self.cache is not None:
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug(f"Context cache hit for {key[1]!r}")
                return cached

        degraded: list[str] = []

        files = self.find_relevant_files(extract_keywords(text))
        if files.degraded:
            degraded.append(files.note)

        dependencies, stack, manifest_outcomes = scan_manifests(self.root)
        degraded.extend(o.note for o in manifest_outcomes if o.degraded)

        rules = load_project_rules(self.root)
        if rules.degraded:
            logger.warning(f"Project rules partially loaded: {rules.reason}")
            degraded.append(rules.note)

        bundle = ContextBundle(
            files=files.value,
            dependencies=dependencies,
            technical_stack=stack,
            project_rules=rules.value,
            degraded=degraded,
        )
        if self.cache is not None:
            self.cache.put(key, bundle)
        return bundle

    def find_relevant_files(self, keywords: list[str]) -> Outcome[list[FileContext]]:
        """
        Walk the project and rank files whose relative path contains a keyword.

        Collection stops at ``max_files`` matches; the matches are ordered by
        the number of distinct keywords hit (ties by path) and cut to
        ``display_files``.
        """
        if not keywords:
            return Outcome.ok([], "files")
        if not self.root.is_dir():
            reason = f"project root {self.root} is not a directory"
            logger.warning(f"Skipping file relevance scan: {reason}")
            return Outcome.fallback([], "files", reason)

        errors: list[OSError] = []
        matches: list[FileContext] = []
        max_files = self.settings.max_files

        for dirpath, dirnames, filenames in os.walk(self.root, onerror=errors.append):
            dirnames[:] = sorted(d for d in dirnames if not self._is_ignored_dir(d))
            for filename in sorted(filenames):
                if not self._is_source_file(filename):
                    continue
                rel = (Path(dirpath) / filename).relative_to(self.root).as_posix()
                lowered = rel.lower()
                hits = sum(1 for keyword in keywords if keyword in lowered)
                if hits:
                    matches.append(FileContext(path=rel, summary=f"File: {rel}", score=hits))
                if len(matches) >= max_files:
                    break
            if len(matches) >= max_files:
                break

        ranked = sorted(matches, key=lambda f: (-f.score, f.path))[: self.settings.display_files]
        if errors:
            for error in errors:
                logger.warning(f"Skipped unreadable directory during scan: {error}")
            return Outcome.fallback(ranked, "files", f"{len(errors)} unreadable directories")
        return Outcome.ok(ranked, "files")

    def _is_ignored_dir(self, name: str) -> bool:
        return name in self.settings.all_ignored_dirs or name.endswith(".egg-info")

    def _is_source_file(self, filename: str) -> bool:
        if any(fnmatch.fnmatch(filename, pattern) for pattern in IGNORED_FILE_PATTERNS):
            return False
        return any(filename.endswith(ext) for ext in self.settings.source_extensions)
