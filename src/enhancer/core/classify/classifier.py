"""
Workflow classification by keyword scoring.

Scores text against the per-category pattern tables and picks the category
with the strictly highest score. Ties and texts with no cues at all fall
back to ``general``; an explicit category always wins.
"""

import logging
import re

from enhancer.core.classify.patterns import CATEGORY_PATTERNS
from enhancer.core.prompts.models import WorkflowCategory

logger = logging.getLogger(__name__)


class WorkflowClassifier:
    """
    Classify free text into a WorkflowCategory.

    Example:
        >>> WorkflowClassifier().classify("Fix the crash when saving a file")
        <WorkflowCategory.BUG: 'bug'>
        >>> WorkflowClassifier().classify("fix the tests")
        <WorkflowCategory.GENERAL: 'general'>
    """

    def __init__(
        self, patterns: dict[WorkflowCategory, tuple[re.Pattern[str], ...]] | None = None
    ) -> None:
        self.patterns = patterns if patterns is not None else CATEGORY_PATTERNS

    def score(self, text: str) -> dict[WorkflowCategory, int]:
        """Count pattern matches per category in the table."""
        lowered = text.lower()
        scores: dict[WorkflowCategory, int] = {}
        for category, patterns in self.patterns.items():
            scores[category] = sum(len(p.findall(lowered)) for p in patterns)
        return scores

    def classify(
        self,
        text: str,
        explicit_category: WorkflowCategory | str | None = None,
    ) -> WorkflowCategory:
        """
        Pick the category for ``text``.

        Args:
            text: Raw prompt text
            explicit_category: Caller override; returned as-is when valid

        Returns:
            The override if given, else the strictly top-scoring category,
            else WorkflowCategory.GENERAL
        """
        if explicit_category is not None:
            try:
                return WorkflowCategory(explicit_category)
            except ValueError:
                logger.warning(f"Ignoring unknown category override {explicit_category!r}")

        scores = self.score(text)
        best = max(scores.values(), default=0)
        if best == 0:
            return WorkflowCategory.GENERAL

        leaders = [category for category, value in scores.items() if value == best]
        if len(leaders) > 1:
            names = ", ".join(c.value for c in leaders)
            logger.debug(f"Category tie at score {best} between {names}")
            return WorkflowCategory.GENERAL
        return leaders[0]


_default_classifier = WorkflowClassifier()


def classify(
    text: str, explicit_category: WorkflowCategory | str | None = None
) -> WorkflowCategory:
    """Classify ``text`` with the default pattern tables."""
    return _default_classifier.classify(text, explicit_category)


def score_categories(text: str) -> dict[WorkflowCategory, int]:
    """Per-category match counts for ``text`` with the default tables."""
    return _default_classifier.score(text)
